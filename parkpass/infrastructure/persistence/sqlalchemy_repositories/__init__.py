from .sqlalchemy_repositories import (
    SQLAlchemyLotRepository,
    SQLAlchemyScheduleRepository,
    SQLAlchemyPriceTierRepository,
    SQLAlchemyOrderRepository,
    SQLAlchemyUserRepository,
    SQLAlchemyLotStaffRepository,
)

__all__ = [
    "SQLAlchemyLotRepository",
    "SQLAlchemyScheduleRepository",
    "SQLAlchemyPriceTierRepository",
    "SQLAlchemyOrderRepository",
    "SQLAlchemyUserRepository",
    "SQLAlchemyLotStaffRepository",
]
