from .abstract_repositories import (
    AbstractLotRepository,
    AbstractScheduleRepository,
    AbstractPriceTierRepository,
    AbstractOrderRepository,
    AbstractUserRepository,
    AbstractLotStaffRepository,
)

__all__ = [
    "AbstractLotRepository",
    "AbstractScheduleRepository",
    "AbstractPriceTierRepository",
    "AbstractOrderRepository",
    "AbstractUserRepository",
    "AbstractLotStaffRepository",
]
