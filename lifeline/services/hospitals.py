from __future__ import annotations

from loguru import logger
from sqlalchemy import select
from sqlalchemy.orm import Session

from lifeline.core.errors import NotFoundError
from lifeline.models import Hospital, TimeWindow


class HospitalService:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get_hospital(self, *, hospital_id: str) -> Hospital:
        hospital = self.session.get(Hospital, hospital_id)
        if hospital is None:
            raise NotFoundError(f"Hospital {hospital_id} not found")
        return hospital

    def active_hospitals(self) -> list[Hospital]:
        stmt = select(Hospital).where(Hospital.is_active.is_(True)).order_by(Hospital.name)
        return list(self.session.scalars(stmt))

    def time_windows(self, *, hospital_id: str) -> list[TimeWindow]:
        self.get_hospital(hospital_id=hospital_id)
        stmt = (
            select(TimeWindow)
            .where(TimeWindow.hospital_id == hospital_id, TimeWindow.is_active.is_(True))
            .order_by(TimeWindow.day_of_week, TimeWindow.start_time)
        )
        return list(self.session.scalars(stmt))

    def get_time_window(self, *, time_window_id: str) -> TimeWindow | None:
        return self.session.get(TimeWindow, time_window_id)

    def set_active(self, *, hospital_id: str, active: bool) -> Hospital:
        hospital = self.get_hospital(hospital_id=hospital_id)
        hospital.is_active = active
        self.session.flush()
        logger.info(
            "Hospital {hospital_id} is now {state}",
            hospital_id=hospital_id,
            state="accepting donations" if active else "not accepting donations",
        )
        return hospital


def get_hospital_service(session: Session) -> HospitalService:
    return HospitalService(session=session)
