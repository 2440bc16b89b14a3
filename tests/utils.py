"""Helpers for building rows directly and for driving concurrent service calls."""

import threading
from datetime import datetime, timedelta
from typing import Any, Callable

from sqlalchemy.orm import Session

from lifeline.models import Appointment, AppointmentStatus, Donation, InventoryCounter
from lifeline.utils.time import utcnow


def make_appointment(
    session: Session,
    *,
    donor_id: str,
    hospital_id: str,
    blood_type: str = "O+",
    status: AppointmentStatus = AppointmentStatus.SCHEDULED,
    scheduled_at: datetime | None = None,
) -> Appointment:
    appointment = Appointment(
        donor_id=donor_id,
        hospital_id=hospital_id,
        blood_type=blood_type,
        scheduled_at=scheduled_at or utcnow() + timedelta(days=3),
        status=status.value,
    )
    session.add(appointment)
    session.flush()
    return appointment


def make_donation(
    session: Session,
    *,
    donor_id: str,
    hospital_id: str,
    units: int = 1,
    blood_type: str = "O+",
    donation_date: datetime | None = None,
) -> Donation:
    appointment = make_appointment(
        session,
        donor_id=donor_id,
        hospital_id=hospital_id,
        blood_type=blood_type,
        status=AppointmentStatus.COMPLETED,
        scheduled_at=donation_date,
    )
    donation = Donation(
        appointment_id=appointment.id,
        donor_id=donor_id,
        hospital_id=hospital_id,
        blood_type=blood_type,
        units=units,
        status="completed",
        donation_date=donation_date or utcnow(),
    )
    session.add(donation)
    session.flush()
    return donation


def make_counter(
    session: Session,
    *,
    hospital_id: str,
    blood_type: str,
    current_units: int = 0,
    capacity: int = 100,
    threshold: int = 10,
) -> InventoryCounter:
    counter = InventoryCounter(
        hospital_id=hospital_id,
        blood_type=blood_type,
        current_units=current_units,
        capacity=capacity,
        threshold=threshold,
    )
    session.add(counter)
    session.flush()
    return counter


def run_concurrently(*calls: Callable[[], Any], timeout: float = 30) -> list[Any]:
    """
    Start every call on its own thread at the same moment.

    Returns one entry per call in order: the call's return value, or the
    exception it raised.
    """
    barrier = threading.Barrier(len(calls))
    outcomes: list[Any] = [None] * len(calls)

    def _run(index: int, call: Callable[[], Any]) -> None:
        barrier.wait(timeout=timeout)
        try:
            outcomes[index] = call()
        except Exception as exc:
            outcomes[index] = exc

    threads = [threading.Thread(target=_run, args=(index, call)) for index, call in enumerate(calls)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=timeout)
    return outcomes
