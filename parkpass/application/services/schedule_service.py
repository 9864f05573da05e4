from datetime import datetime, time, timezone
from typing import List, Optional, Dict, Any
from zoneinfo import ZoneInfo
from loguru import logger

from parkpass.application.repositories import AbstractLotRepository, AbstractScheduleRepository, AbstractPriceTierRepository
from parkpass.config.settings_env import settings
from parkpass.domain.entities import Schedule, ParkingLot, PriceTier
from parkpass.domain.exceptions import NotFoundError
from parkpass.shared.custom_types import as_utc

UPDATABLE_SCHEDULE_FIELDS = (
    "name", "description", "is_event", "days", "start_time", "end_time", "event_start", "event_end",
)


def normalize_schedule(schedule: Schedule) -> Schedule:
    """Clear the fields that do not apply to the schedule's kind, then validate it."""
    if schedule.is_event:
        schedule.days = []
        schedule.start_time = None
        schedule.end_time = None
        if schedule.event_start is None or schedule.event_end is None:
            raise ValueError("Event schedules need an event start and end")
        schedule.event_start = as_utc(schedule.event_start)
        schedule.event_end = as_utc(schedule.event_end)
        if schedule.event_start >= schedule.event_end:
            raise ValueError("Event start time must be before event end time")
    else:
        schedule.event_start = None
        schedule.event_end = None
        if not schedule.days:
            raise ValueError("Recurring schedules need at least one day")
        if any(day not in range(1, 8) for day in schedule.days):
            raise ValueError("Days must be ISO weekdays between 1 (Monday) and 7 (Sunday)")
        schedule.days = sorted(set(schedule.days))
        if schedule.start_time and schedule.end_time and schedule.start_time >= schedule.end_time:
            raise ValueError("Start time must be before end time")
    return schedule


class ScheduleRates:
    """A schedule that is bookable right now, with its price tiers."""

    def __init__(self, schedule: Schedule, price_tiers: List[PriceTier]):
        self.schedule = schedule
        self.price_tiers = price_tiers


class ScheduleService:
    def __init__(
        self,
        lot_repo: AbstractLotRepository,
        schedule_repo: AbstractScheduleRepository,
        price_tier_repo: AbstractPriceTierRepository,
        lot_timezone: str = settings.LOT_TIMEZONE,
    ):
        self.lot_repo = lot_repo
        self.schedule_repo = schedule_repo
        self.price_tier_repo = price_tier_repo
        self.lot_timezone = ZoneInfo(lot_timezone)

    async def _get_lot(self, lot_id: int) -> ParkingLot:
        lot = await self.lot_repo.get_by_id(lot_id)
        if lot is None:
            raise NotFoundError("Lot", lot_id)
        return lot

    async def create_schedule(self, lot_id: int, schedule: Schedule) -> Schedule:
        await self._get_lot(lot_id)
        schedule.lot_id = lot_id
        new_schedule = await self.schedule_repo.add(normalize_schedule(schedule))
        logger.info(f"Schedule '{new_schedule.name}' created for lot {lot_id}")
        return new_schedule

    async def get_schedule(self, schedule_id: int) -> Schedule:
        schedule = await self.schedule_repo.get_by_id(schedule_id)
        if schedule is None:
            raise NotFoundError("Schedule", schedule_id)
        return schedule

    async def update_schedule(self, schedule_id: int, changes: Dict[str, Any]) -> Schedule:
        schedule = await self.get_schedule(schedule_id)
        for field, value in changes.items():
            if field not in UPDATABLE_SCHEDULE_FIELDS:
                raise ValueError(f"Unknown schedule field: {field}")
            setattr(schedule, field, value)
        return await self.schedule_repo.update(normalize_schedule(schedule))

    async def delete_schedule(self, schedule_id: int) -> None:
        await self.get_schedule(schedule_id)
        await self.schedule_repo.delete(schedule_id)
        logger.info(f"Schedule {schedule_id} deleted")

    async def get_lot_schedules(self, lot_id: int) -> List[Schedule]:
        await self._get_lot(lot_id)
        return await self.schedule_repo.get_by_lot(lot_id)

    async def get_schedules_at(self, lot_id: int, moment: Optional[datetime] = None) -> List[Schedule]:
        """Schedules of a lot that accept bookings at ``moment`` (default: now).

        Events come first, ordered by start; recurring schedules follow, ordered by
        their daily start time.
        """
        await self._get_lot(lot_id)
        moment = as_utc(moment) if moment is not None else datetime.now(timezone.utc)
        local_moment = moment.astimezone(self.lot_timezone)

        events = await self.schedule_repo.get_events_at(lot_id, moment)
        recurring = [
            schedule for schedule in await self.schedule_repo.get_recurring(lot_id)
            if schedule.matches(local_moment)
        ]
        recurring.sort(key=lambda s: (s.start_time or time.min, s.name))

        logger.debug(f"Lot {lot_id} at {local_moment.isoformat()}: {len(events)} events, {len(recurring)} recurring")
        return events + recurring

    async def get_available_rates(self, slug: str, moment: Optional[datetime] = None) -> List[ScheduleRates]:
        lot = await self.lot_repo.get_by_slug(slug)
        if lot is None:
            raise NotFoundError("Lot", slug)
        if not lot.is_open:
            return []

        rates = []
        for schedule in await self.get_schedules_at(lot.id, moment):
            tiers = await self.price_tier_repo.get_by_schedule(schedule.id)
            rates.append(ScheduleRates(schedule, tiers))
        return rates
