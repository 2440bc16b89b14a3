from __future__ import annotations

import math

from loguru import logger
from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from lifeline.core.config import get_settings
from lifeline.core.errors import ValidationError
from lifeline.models import InventoryCounter
from lifeline.schemas import BloodTypeSummary, InventoryAlert
from lifeline.utils.time import utcnow

LOW_STOCK_PERCENT = 60
URGENT_STOCK_PERCENT = 30
MAX_ALERTS = 4


class InventoryService:
    def __init__(self, session: Session) -> None:
        self.session = session
        self.settings = get_settings()

    def increment(self, *, hospital_id: str, blood_type: str, delta: int) -> None:
        """
        Add ``delta`` units to the (hospital, blood type) counter.

        The addition is evaluated by the store so concurrent completions cannot
        lose each other's updates. A missing counter is created at zero first.
        """
        if delta <= 0:
            raise ValidationError("Inventory increment must be a positive number of units")

        stmt = (
            update(InventoryCounter)
            .where(InventoryCounter.hospital_id == hospital_id, InventoryCounter.blood_type == blood_type)
            .values(current_units=InventoryCounter.current_units + delta, last_updated=utcnow())
        )
        if self.session.execute(stmt).rowcount:
            return

        try:
            with self.session.begin_nested():
                self.session.add(
                    InventoryCounter(
                        hospital_id=hospital_id,
                        blood_type=blood_type,
                        current_units=0,
                        capacity=self.settings.inventory_default_capacity,
                        threshold=self.settings.inventory_default_threshold,
                    )
                )
        except IntegrityError:
            logger.debug(
                "Counter for {hospital_id}/{blood_type} created concurrently",
                hospital_id=hospital_id,
                blood_type=blood_type,
            )
        self.session.execute(stmt)

    def for_hospital(self, *, hospital_id: str) -> list[InventoryCounter]:
        stmt = (
            select(InventoryCounter)
            .where(InventoryCounter.hospital_id == hospital_id)
            .order_by(InventoryCounter.blood_type)
        )
        return list(self.session.scalars(stmt))

    def by_blood_type(self) -> list[BloodTypeSummary]:
        stmt = (
            select(
                InventoryCounter.blood_type,
                func.sum(InventoryCounter.current_units),
                func.sum(InventoryCounter.capacity),
                func.count(InventoryCounter.id),
            )
            .group_by(InventoryCounter.blood_type)
            .order_by(InventoryCounter.blood_type)
        )
        summaries: list[BloodTypeSummary] = []
        for blood_type, current, needed, hospitals in self.session.execute(stmt):
            current = int(current or 0)
            needed = int(needed or 0)
            summaries.append(
                BloodTypeSummary(
                    blood_type=blood_type,
                    current=current,
                    needed=needed,
                    hospitals=hospitals,
                    percentage=stock_percentage(current, needed),
                )
            )
        return summaries

    def alerts(self, summaries: list[BloodTypeSummary] | None = None) -> list[InventoryAlert]:
        if summaries is None:
            summaries = self.by_blood_type()
        alerts: list[InventoryAlert] = []
        for item in summaries:
            if item.percentage >= LOW_STOCK_PERCENT:
                continue
            urgent = item.percentage < URGENT_STOCK_PERCENT
            level = "critically low" if urgent else "below normal level"
            alerts.append(
                InventoryAlert(
                    type="urgent" if urgent else "low",
                    blood_type=item.blood_type,
                    percentage=item.percentage,
                    message=f"{item.blood_type} blood type {level} ({item.percentage}%)",
                )
            )
        return alerts[:MAX_ALERTS]


def stock_percentage(current: int, needed: int) -> int:
    if needed <= 0:
        return 0
    # half-up, not banker's rounding
    return math.floor(current * 100 / needed + 0.5)


def get_inventory_service(session: Session) -> InventoryService:
    return InventoryService(session=session)
