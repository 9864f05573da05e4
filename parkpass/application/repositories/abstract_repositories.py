from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Tuple

from parkpass.domain.common import StaffRole, UserRole
from parkpass.domain.entities import ParkingLot, Schedule, PriceTier, Order, User, LotStaff


class AbstractLotRepository(ABC):
    @abstractmethod
    async def add(self, lot: ParkingLot) -> ParkingLot:
        pass

    @abstractmethod
    async def update(self, lot: ParkingLot) -> ParkingLot:
        pass

    @abstractmethod
    async def get_by_id(self, lot_id: int) -> Optional[ParkingLot]:
        pass

    @abstractmethod
    async def get_by_slug(self, slug: str) -> Optional[ParkingLot]:
        pass

    @abstractmethod
    async def search(self, query: str, limit: int) -> List[ParkingLot]:
        pass

    @abstractmethod
    async def get_by_supervisor(self, user_id: int) -> List[ParkingLot]:
        pass

    @abstractmethod
    async def count(self) -> int:
        pass


class AbstractScheduleRepository(ABC):
    @abstractmethod
    async def add(self, schedule: Schedule) -> Schedule:
        pass

    @abstractmethod
    async def update(self, schedule: Schedule) -> Schedule:
        pass

    @abstractmethod
    async def delete(self, schedule_id: int) -> None:
        pass

    @abstractmethod
    async def get_by_id(self, schedule_id: int) -> Optional[Schedule]:
        pass

    @abstractmethod
    async def get_by_lot(self, lot_id: int) -> List[Schedule]:
        pass

    @abstractmethod
    async def get_events_at(self, lot_id: int, moment: datetime) -> List[Schedule]:
        pass

    @abstractmethod
    async def get_recurring(self, lot_id: int) -> List[Schedule]:
        pass

    @abstractmethod
    async def count(self) -> int:
        pass


class AbstractPriceTierRepository(ABC):
    @abstractmethod
    async def add(self, price_tier: PriceTier) -> PriceTier:
        pass

    @abstractmethod
    async def update(self, price_tier: PriceTier) -> PriceTier:
        pass

    @abstractmethod
    async def delete(self, price_tier_id: int) -> None:
        pass

    @abstractmethod
    async def get_by_id(self, price_tier_id: int) -> Optional[PriceTier]:
        pass

    @abstractmethod
    async def get_by_schedule(self, schedule_id: int) -> List[PriceTier]:
        pass


class AbstractOrderRepository(ABC):
    @abstractmethod
    async def add(self, order: Order) -> Order:
        pass

    @abstractmethod
    async def update(self, order: Order) -> Order:
        pass

    @abstractmethod
    async def get_by_id(self, order_id: int) -> Optional[Order]:
        pass

    @abstractmethod
    async def get_by_payment_intent_id(self, payment_intent_id: str) -> Optional[Order]:
        pass

    @abstractmethod
    async def get_by_lot(self, lot_id: int, search: Optional[str] = None, offset: int = 0, limit: int = 20) -> List[Order]:
        pass

    @abstractmethod
    async def count(self, lot_id: Optional[int] = None, search: Optional[str] = None) -> int:
        pass

    @abstractmethod
    async def get_revenue_summary(self, lot_id: int) -> dict:
        pass

    @abstractmethod
    async def get_paid_amounts_since(self, lot_id: int, since: datetime) -> List[Tuple[datetime, float]]:
        """(start_time, amount) of PAID orders starting at or after ``since``."""
        pass


class AbstractUserRepository(ABC):
    @abstractmethod
    async def add(self, user: User) -> User:
        pass

    @abstractmethod
    async def get_by_id(self, user_id: int) -> Optional[User]:
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        pass

    @abstractmethod
    async def get_all(self, role: Optional[UserRole] = None) -> List[User]:
        pass


class AbstractLotStaffRepository(ABC):
    @abstractmethod
    async def get(self, lot_id: int, user_id: int) -> Optional[LotStaff]:
        pass

    @abstractmethod
    async def save(self, lot_id: int, user_id: int, role: StaffRole) -> LotStaff:
        pass

    @abstractmethod
    async def delete(self, lot_id: int, user_id: int) -> None:
        pass

    @abstractmethod
    async def get_by_lot(self, lot_id: int) -> List[LotStaff]:
        pass
