from typing import List, Optional
from loguru import logger

from parkpass.application.repositories import AbstractLotRepository, AbstractUserRepository, AbstractLotStaffRepository
from parkpass.domain.common import UserRole, StaffRole
from parkpass.domain.entities import User, LotStaff
from parkpass.domain.exceptions import NotFoundError


class StaffService:
    def __init__(
        self,
        lot_repo: AbstractLotRepository,
        user_repo: AbstractUserRepository,
        staff_repo: AbstractLotStaffRepository,
    ):
        self.lot_repo = lot_repo
        self.user_repo = user_repo
        self.staff_repo = staff_repo

    async def create_user(self, email: str, role: UserRole = UserRole.CUSTOMER, full_name: Optional[str] = None, phone: Optional[str] = None) -> User:
        email = email.strip().lower()
        if await self.user_repo.get_by_email(email):
            raise ValueError(f"User {email} already exists")
        user = await self.user_repo.add(User(email=email, role=role, full_name=full_name, phone=phone))
        logger.info(f"User {user.email} created with role {user.role.value}")
        return user

    async def get_user(self, user_id: int) -> User:
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    async def list_users(self, role: Optional[UserRole] = None) -> List[User]:
        return await self.user_repo.get_all(role)

    async def _check_lot(self, lot_id: int):
        if await self.lot_repo.get_by_id(lot_id) is None:
            raise NotFoundError("Lot", lot_id)

    async def assign_staff(self, lot_id: int, user_id: int, role: StaffRole = StaffRole.EMPLOYEE) -> LotStaff:
        await self._check_lot(lot_id)
        await self.get_user(user_id)
        assignment = await self.staff_repo.save(lot_id, user_id, role)
        logger.info(f"User {user_id} assigned to lot {lot_id} as {assignment.role.value}")
        return assignment

    async def remove_staff(self, lot_id: int, user_id: int) -> None:
        await self._check_lot(lot_id)
        if await self.staff_repo.get(lot_id, user_id) is None:
            raise NotFoundError("Staff assignment", f"{lot_id}/{user_id}")
        await self.staff_repo.delete(lot_id, user_id)
        logger.info(f"User {user_id} removed from lot {lot_id}")

    async def get_lot_staff(self, lot_id: int) -> List[LotStaff]:
        await self._check_lot(lot_id)
        return await self.staff_repo.get_by_lot(lot_id)
