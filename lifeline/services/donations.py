from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from lifeline.core.errors import ValidationError
from lifeline.models import Donation, DonorProfile
from lifeline.schemas import DonationResponse
from lifeline.services.notifications import NotificationService


class DonationService:
    def __init__(self, *, notification_service: NotificationService, session: Session) -> None:
        self.notification_service = notification_service
        self.session = session

    def for_blood_type(self, *, hospital_id: str, blood_type: str) -> list[DonationResponse]:
        stmt = (
            select(Donation, DonorProfile)
            .outerjoin(DonorProfile, DonorProfile.id == Donation.donor_id)
            .where(Donation.hospital_id == hospital_id, Donation.blood_type == blood_type)
            .order_by(Donation.donation_date.desc())
        )
        rows: list[DonationResponse] = []
        for donation, profile in self.session.execute(stmt):
            response = DonationResponse.model_validate(donation)
            response.donor_name = profile.display_name if profile else donation.donor_id
            rows.append(response)
        return rows

    def donor_emails(self, *, hospital_id: str, blood_type: str) -> list[str]:
        stmt = (
            select(DonorProfile.email)
            .join(Donation, Donation.donor_id == DonorProfile.id)
            .where(
                Donation.hospital_id == hospital_id,
                Donation.blood_type == blood_type,
                DonorProfile.email.is_not(None),
            )
            .distinct()
            .order_by(DonorProfile.email)
        )
        return [email for email in self.session.scalars(stmt) if email]

    def request_donations(self, *, hospital_id: str, blood_type: str, subject: str, message: str) -> list[str]:
        """E-mail everyone who has given this blood type at the hospital before."""
        emails = self.donor_emails(hospital_id=hospital_id, blood_type=blood_type)
        if not emails:
            raise ValidationError(f"No donors with an e-mail address have donated {blood_type} here")
        self.notification_service.send(emails=emails, subject=subject, message=message)
        return emails


def get_donation_service(session: Session, notification_service: NotificationService) -> DonationService:
    return DonationService(notification_service=notification_service, session=session)
