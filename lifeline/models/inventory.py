from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from lifeline.utils.time import utcnow

from .base import Base, new_id


class InventoryCounter(Base):
    __table_args__ = (UniqueConstraint("hospital_id", "blood_type", name="uq_inventory_hospital_blood_type"),)

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    hospital_id: Mapped[str] = mapped_column(ForeignKey("hospital.id"), nullable=False, index=True)
    blood_type: Mapped[str] = mapped_column(String(3), nullable=False)
    current_units: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False, default=100)
    threshold: Mapped[int] = mapped_column(Integer, nullable=False, default=10)
    last_updated: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )
