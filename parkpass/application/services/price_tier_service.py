from typing import List, Optional
from loguru import logger

from parkpass.application.repositories import AbstractScheduleRepository, AbstractPriceTierRepository
from parkpass.domain.entities import PriceTier
from parkpass.domain.exceptions import NotFoundError


def _validate(max_hours: int, price: float):
    if max_hours is None or max_hours <= 0:
        raise ValueError("Maximum hours must be a positive number")
    if price is None or price < 0:
        raise ValueError("Price cannot be negative")


class PriceTierService:
    def __init__(self, schedule_repo: AbstractScheduleRepository, price_tier_repo: AbstractPriceTierRepository):
        self.schedule_repo = schedule_repo
        self.price_tier_repo = price_tier_repo

    async def create_price_tier(self, schedule_id: int, max_hours: int, price: float) -> PriceTier:
        if await self.schedule_repo.get_by_id(schedule_id) is None:
            raise NotFoundError("Schedule", schedule_id)
        _validate(max_hours, price)

        tier = await self.price_tier_repo.add(PriceTier(schedule_id=schedule_id, max_hours=max_hours, price=round(price, 2)))
        logger.info(f"Price tier {tier.max_hours}h / ${tier.price} added to schedule {schedule_id}")
        return tier

    async def get_price_tier(self, price_tier_id: int) -> PriceTier:
        tier = await self.price_tier_repo.get_by_id(price_tier_id)
        if tier is None:
            raise NotFoundError("Price tier", price_tier_id)
        return tier

    async def update_price_tier(self, price_tier_id: int, max_hours: Optional[int] = None, price: Optional[float] = None) -> PriceTier:
        tier = await self.get_price_tier(price_tier_id)
        if max_hours is not None:
            tier.max_hours = max_hours
        if price is not None:
            tier.price = round(price, 2)
        _validate(tier.max_hours, tier.price)
        return await self.price_tier_repo.update(tier)

    async def delete_price_tier(self, price_tier_id: int) -> None:
        await self.get_price_tier(price_tier_id)
        await self.price_tier_repo.delete(price_tier_id)

    async def get_price_tiers(self, schedule_id: int) -> List[PriceTier]:
        if await self.schedule_repo.get_by_id(schedule_id) is None:
            raise NotFoundError("Schedule", schedule_id)
        return await self.price_tier_repo.get_by_schedule(schedule_id)
