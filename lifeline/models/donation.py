from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from lifeline.utils.time import utcnow

from .base import Base, new_id


class Donation(Base):
    __table_args__ = (CheckConstraint("units > 0", name="ck_donation_units_positive"),)

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    appointment_id: Mapped[str] = mapped_column(ForeignKey("appointment.id"), unique=True, nullable=False)
    donor_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    hospital_id: Mapped[str] = mapped_column(ForeignKey("hospital.id"), nullable=False, index=True)
    blood_type: Mapped[str] = mapped_column(String(3), nullable=False)
    units: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="completed")
    donation_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
