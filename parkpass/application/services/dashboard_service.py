from collections import defaultdict
from datetime import datetime, timedelta, timezone
from typing import List, Dict
from zoneinfo import ZoneInfo

from parkpass.application.repositories import AbstractLotRepository, AbstractScheduleRepository, AbstractOrderRepository
from parkpass.config.settings_env import settings
from parkpass.domain.common import PaymentStatus
from parkpass.domain.exceptions import NotFoundError


class DashboardService:
    def __init__(
        self,
        lot_repo: AbstractLotRepository,
        schedule_repo: AbstractScheduleRepository,
        order_repo: AbstractOrderRepository,
        lot_timezone: str = settings.LOT_TIMEZONE,
    ):
        self.lot_repo = lot_repo
        self.schedule_repo = schedule_repo
        self.order_repo = order_repo
        self.lot_timezone = ZoneInfo(lot_timezone)

    async def get_overview(self) -> Dict[str, int]:
        return {
            "orders": await self.order_repo.count(),
            "lots": await self.lot_repo.count(),
            "schedules": await self.schedule_repo.count(),
        }

    async def get_lot_accounting(self, lot_id: int) -> Dict:
        if await self.lot_repo.get_by_id(lot_id) is None:
            raise NotFoundError("Lot", lot_id)

        summary = await self.order_repo.get_revenue_summary(lot_id)
        paid = summary.get(PaymentStatus.PAID.value, {"count": 0, "amount": 0.0})
        pending = summary.get(PaymentStatus.PENDING.value, {"count": 0, "amount": 0.0})
        total_bookings = sum(row["count"] for row in summary.values())

        return {
            "lot_id": lot_id,
            "total_revenue": round(paid["amount"], 2),
            "total_bookings": total_bookings,
            "paid_bookings": paid["count"],
            "pending_bookings": pending["count"],
            "average_booking_value": round(paid["amount"] / paid["count"], 2) if paid["count"] else 0.0,
        }

    async def get_revenue_by_day(self, lot_id: int, days: int = 7) -> List[Dict]:
        """Paid revenue per lot-local calendar day over the last ``days`` days."""
        if await self.lot_repo.get_by_id(lot_id) is None:
            raise NotFoundError("Lot", lot_id)
        if days < 1:
            raise ValueError("Days must be at least 1")
        since = datetime.now(timezone.utc) - timedelta(days=days)
        revenue = defaultdict(float)
        for start_time, amount in await self.order_repo.get_paid_amounts_since(lot_id, since):
            revenue[start_time.astimezone(self.lot_timezone).date()] += amount

        return [
            {"date": day.isoformat(), "revenue": round(total, 2)}
            for day, total in sorted(revenue.items())
        ]
