from __future__ import annotations

from datetime import datetime

from loguru import logger
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from lifeline.core.config import get_settings
from lifeline.core.errors import (
    ConflictError,
    DependencyError,
    LifelineError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from lifeline.models import Appointment, AppointmentStatus, Donation, DonorProfile, Hospital
from lifeline.schemas import AgentAppointmentResponse, AppointmentResponse
from lifeline.services.hospitals import HospitalService
from lifeline.services.inventory import InventoryService
from lifeline.utils.time import as_utc, next_window_occurrence, utcnow

DEFAULT_NOTES = "Scheduled via dashboard"
ADMIN_UPCOMING_LIMIT = 10

# Terminal states reachable by a plain status write; "completed" goes through complete_donation
AGENT_STATUS_TRANSITIONS = {AppointmentStatus.CANCELLED, AppointmentStatus.NO_SHOW}


class AppointmentManager:
    def __init__(
        self,
        *,
        hospital_service: HospitalService,
        inventory_service: InventoryService,
        session: Session,
    ) -> None:
        self.hospital_service = hospital_service
        self.inventory_service = inventory_service
        self.session = session
        self.settings = get_settings()

    def get_appointment(self, *, appointment_id: str) -> Appointment:
        appointment = self.session.get(Appointment, appointment_id)
        if appointment is None:
            raise NotFoundError(f"Appointment {appointment_id} not found")
        return appointment

    def active_appointment(self, *, donor_id: str) -> Appointment | None:
        stmt = select(Appointment).where(
            Appointment.donor_id == donor_id,
            Appointment.status == AppointmentStatus.SCHEDULED.value,
        )
        return self.session.scalars(stmt).first()

    def schedule(
        self,
        *,
        donor_id: str,
        hospital_id: str | None,
        time_window_id: str | None,
        notes: str | None = None,
        now: datetime | None = None,
    ) -> Appointment:
        if not hospital_id or not time_window_id:
            raise ValidationError("Select a hospital and a time window")

        window = self.hospital_service.get_time_window(time_window_id=time_window_id)
        if window is None or window.hospital_id != hospital_id or not window.is_active:
            raise NotFoundError(f"Time window {time_window_id} is not available for this hospital")

        hospital = self.hospital_service.get_hospital(hospital_id=hospital_id)
        if not hospital.is_active:
            raise ConflictError(f"{hospital.name} is not accepting donations")

        if self.active_appointment(donor_id=donor_id):
            logger.warning("Donor {donor_id} already has a scheduled appointment", donor_id=donor_id)
            raise ConflictError("You already have an appointment scheduled. You can only have one at a time.")

        profile = self.session.get(DonorProfile, donor_id)
        if profile is None or not profile.blood_type:
            raise ValidationError("Add your blood type to your profile before scheduling")

        appointment = Appointment(
            donor_id=donor_id,
            hospital_id=hospital_id,
            blood_type=profile.blood_type,
            scheduled_at=next_window_occurrence(
                window.day_of_week,
                window.start_time,
                tz=self.settings.timezone,
                now=now,
            ),
            status=AppointmentStatus.SCHEDULED.value,
            notes=notes or DEFAULT_NOTES,
        )
        try:
            with self.session.begin_nested():
                self.session.add(appointment)
                self.session.flush()
        except IntegrityError as exc:
            # Lost the race against another request for the same donor
            raise ConflictError("You already have an appointment scheduled. You can only have one at a time.") from exc
        except SQLAlchemyError as exc:
            logger.exception("Failed to schedule appointment for donor={donor_id}", donor_id=donor_id)
            raise DependencyError("Failed to schedule appointment.") from exc

        logger.info(
            "Scheduled appointment {appointment_id} for donor={donor_id} at {scheduled_at}",
            appointment_id=appointment.id,
            donor_id=donor_id,
            scheduled_at=appointment.scheduled_at.isoformat(),
        )
        return appointment

    def cancel(self, *, appointment_id: str, donor_id: str | None = None) -> Appointment:
        appointment = self.get_appointment(appointment_id=appointment_id)
        if donor_id is not None and appointment.donor_id != donor_id:
            raise PermissionDeniedError("You can only cancel your own appointments")
        self._transition(appointment, AppointmentStatus.CANCELLED)
        logger.info("Cancelled appointment {appointment_id}", appointment_id=appointment_id)
        return appointment

    def set_status(self, *, appointment_id: str, status: str, hospital_id: str | None = None) -> Appointment:
        try:
            target = AppointmentStatus(status)
        except ValueError as exc:
            raise ValidationError(f"Unsupported status: {status}") from exc
        if target is AppointmentStatus.COMPLETED:
            raise ValidationError("Record the donated units to complete an appointment")
        if target not in AGENT_STATUS_TRANSITIONS:
            raise ValidationError(f"Cannot move an appointment to {target.value}")

        appointment = self.get_appointment(appointment_id=appointment_id)
        self._ensure_hospital(appointment, hospital_id)
        self._transition(appointment, target)
        logger.info(
            "Appointment {appointment_id} marked {status}",
            appointment_id=appointment_id,
            status=target.value,
        )
        return appointment

    def complete_donation(self, *, appointment_id: str, units: int, hospital_id: str | None = None) -> Donation:
        """
        Record a donation for a scheduled appointment.

        The donation row, the appointment transition and the inventory increment
        run inside one savepoint: either all three land or none do.
        """
        if isinstance(units, bool) or not isinstance(units, int) or units <= 0:
            raise ValidationError("Please enter a valid number of units.")

        appointment = self.get_appointment(appointment_id=appointment_id)
        self._ensure_hospital(appointment, hospital_id)
        if appointment.status != AppointmentStatus.SCHEDULED.value:
            raise ConflictError(f"Appointment is already {appointment.status}")

        donation = Donation(
            appointment_id=appointment.id,
            donor_id=appointment.donor_id,
            hospital_id=appointment.hospital_id,
            blood_type=appointment.blood_type,
            units=units,
            status="completed",
            donation_date=utcnow(),
        )
        try:
            with self.session.begin_nested():
                self.session.add(donation)
                self.session.flush()
                self._transition(appointment, AppointmentStatus.COMPLETED)
                self.inventory_service.increment(
                    hospital_id=appointment.hospital_id,
                    blood_type=appointment.blood_type,
                    delta=units,
                )
        except LifelineError:
            self.session.expire(appointment)
            raise
        except IntegrityError as exc:
            self.session.expire(appointment)
            raise ConflictError("A donation has already been recorded for this appointment") from exc
        except SQLAlchemyError as exc:
            self.session.expire(appointment)
            logger.exception("Failed to complete appointment {appointment_id}", appointment_id=appointment_id)
            raise DependencyError("Failed to record donation.") from exc

        logger.info(
            "Completed appointment {appointment_id}: {units} unit(s) of {blood_type} at hospital={hospital_id}",
            appointment_id=appointment_id,
            units=units,
            blood_type=appointment.blood_type,
            hospital_id=appointment.hospital_id,
        )
        return donation

    def upcoming_for_donor(self, *, donor_id: str, now: datetime | None = None) -> AppointmentResponse | None:
        stmt = (
            select(Appointment, Hospital.name)
            .join(Hospital, Hospital.id == Appointment.hospital_id)
            .where(
                Appointment.donor_id == donor_id,
                Appointment.status == AppointmentStatus.SCHEDULED.value,
                Appointment.scheduled_at > as_utc(now or utcnow()),
            )
            .order_by(Appointment.scheduled_at)
            .limit(1)
        )
        row = self.session.execute(stmt).first()
        if row is None:
            return None
        return _with_hospital_name(*row)

    def previous_for_donor(self, *, donor_id: str) -> list[AppointmentResponse]:
        stmt = (
            select(Appointment, Hospital.name)
            .join(Hospital, Hospital.id == Appointment.hospital_id)
            .where(
                Appointment.donor_id == donor_id,
                Appointment.status.in_([AppointmentStatus.COMPLETED.value, AppointmentStatus.CANCELLED.value]),
            )
            .order_by(Appointment.scheduled_at.desc())
        )
        return [_with_hospital_name(appointment, name) for appointment, name in self.session.execute(stmt)]

    def for_hospital(self, *, hospital_id: str) -> list[AgentAppointmentResponse]:
        stmt = (
            select(Appointment, Hospital.name, DonorProfile)
            .join(Hospital, Hospital.id == Appointment.hospital_id)
            .outerjoin(DonorProfile, DonorProfile.id == Appointment.donor_id)
            .where(
                Appointment.hospital_id == hospital_id,
                Appointment.status != AppointmentStatus.COMPLETED.value,
            )
            .order_by(Appointment.scheduled_at)
        )
        rows: list[AgentAppointmentResponse] = []
        for appointment, hospital_name, profile in self.session.execute(stmt):
            response = AgentAppointmentResponse.model_validate(appointment)
            response.hospital_name = hospital_name
            if profile is not None:
                response.donor_first_name = profile.first_name or "Unknown"
                response.donor_last_name = profile.last_name or "Donor"
                response.donor_phone = profile.phone
            rows.append(response)
        return rows

    def upcoming_scheduled(
        self, *, limit: int = ADMIN_UPCOMING_LIMIT, now: datetime | None = None
    ) -> list[AppointmentResponse]:
        stmt = (
            select(Appointment, Hospital.name)
            .join(Hospital, Hospital.id == Appointment.hospital_id)
            .where(
                Appointment.status == AppointmentStatus.SCHEDULED.value,
                Appointment.scheduled_at >= as_utc(now or utcnow()),
            )
            .order_by(Appointment.scheduled_at)
            .limit(limit)
        )
        return [_with_hospital_name(appointment, name) for appointment, name in self.session.execute(stmt)]

    def _ensure_hospital(self, appointment: Appointment, hospital_id: str | None) -> None:
        if hospital_id is not None and appointment.hospital_id != hospital_id:
            raise PermissionDeniedError("Appointment belongs to another hospital")

    def _transition(self, appointment: Appointment, target: AppointmentStatus) -> None:
        if appointment.status != AppointmentStatus.SCHEDULED.value:
            raise ConflictError(f"Appointment is already {appointment.status}")

        # Conditional write: a concurrent transition leaves zero matching rows
        stmt = (
            update(Appointment)
            .where(
                Appointment.id == appointment.id,
                Appointment.status == AppointmentStatus.SCHEDULED.value,
            )
            .values(status=target.value, updated_at=utcnow())
        )
        if not self.session.execute(stmt).rowcount:
            self.session.expire(appointment)
            raise ConflictError("Appointment was updated by someone else")


def _with_hospital_name(appointment: Appointment, hospital_name: str | None) -> AppointmentResponse:
    response = AppointmentResponse.model_validate(appointment)
    response.hospital_name = hospital_name or "Unknown Hospital"
    return response


def get_appointment_manager(session: Session) -> AppointmentManager:
    return AppointmentManager(
        hospital_service=HospitalService(session=session),
        inventory_service=InventoryService(session=session),
        session=session,
    )
