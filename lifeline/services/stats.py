from __future__ import annotations

from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from lifeline.core.config import get_settings
from lifeline.models import Donation, DonorProfile
from lifeline.schemas import AdminStatsResponse, DonorStatsResponse
from lifeline.utils.time import as_utc, months_ago, next_eligible_date, start_of_month, utcnow

ACTIVE_DONOR_MONTHS = 6
GOLD_DONATIONS = 10
SILVER_DONATIONS = 5


def donor_badge(total_donations: int) -> str:
    if total_donations >= GOLD_DONATIONS:
        return "Gold Donor"
    if total_donations >= SILVER_DONATIONS:
        return "Silver Donor"
    return "Bronze Donor"


class StatsService:
    def __init__(self, session: Session) -> None:
        self.session = session
        self.settings = get_settings()

    def donor_stats(self, *, donor_id: str, now: datetime | None = None) -> DonorStatsResponse:
        stmt = (
            select(Donation.units, Donation.donation_date)
            .where(Donation.donor_id == donor_id, Donation.status == "completed")
            .order_by(Donation.donation_date.desc())
        )
        rows = self.session.execute(stmt).all()
        total_units = sum(units or 0 for units, _ in rows)

        stats = DonorStatsResponse(
            total_donations=len(rows),
            total_units=total_units,
            total_volume_ml=total_units * self.settings.unit_volume_ml,
            badge=donor_badge(len(rows)),
        )
        if rows:
            last = as_utc(rows[0][1])
            stats.last_donation_date = last
            stats.next_eligible_date = next_eligible_date(last, self.settings.donation_interval_days)
            stats.is_eligible = as_utc(now or utcnow()).date() >= stats.next_eligible_date
        return stats

    def admin_stats(self, *, now: datetime | None = None) -> AdminStatsResponse:
        current = as_utc(now or utcnow())
        total_donors = self.session.scalar(select(func.count()).select_from(DonorProfile)) or 0
        total_donations = self.session.scalar(select(func.count()).select_from(Donation)) or 0
        monthly = self.session.scalar(
            select(func.count()).select_from(Donation).where(Donation.donation_date >= start_of_month(current))
        )
        active = self.session.scalar(
            select(func.count(func.distinct(Donation.donor_id))).where(
                Donation.donation_date >= months_ago(ACTIVE_DONOR_MONTHS, current)
            )
        )
        return AdminStatsResponse(
            total_donors=total_donors,
            active_donors=active or 0,
            total_donations=total_donations,
            monthly_donations=monthly or 0,
        )


def get_stats_service(session: Session) -> StatsService:
    return StatsService(session=session)
