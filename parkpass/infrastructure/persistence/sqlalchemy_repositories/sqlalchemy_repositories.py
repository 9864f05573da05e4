from typing import List, Optional, Dict, Tuple
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, and_, or_, update, delete
from sqlalchemy.orm import selectinload
from sqlalchemy.exc import IntegrityError

from parkpass.domain.common import LotStatus, PaymentStatus, VehicleType, UserRole, StaffRole
from parkpass.domain.entities import ParkingLot, Schedule, PriceTier, Order, User, LotStaff
from parkpass.domain.exceptions import DuplicateOrderError
from parkpass.infrastructure.persistence.models.models import (
    Lot as ORMLot,
    Schedule as ORMSchedule,
    PriceTier as ORMPriceTier,
    Order as ORMOrder,
    User as ORMUser,
    LotStaff as ORMLotStaff,
)
from parkpass.application.repositories import (
    AbstractLotRepository,
    AbstractScheduleRepository,
    AbstractPriceTierRepository,
    AbstractOrderRepository,
    AbstractUserRepository,
    AbstractLotStaffRepository,
)


def _lot_entity(orm_lot: ORMLot) -> ParkingLot:
    return ParkingLot(
        id=orm_lot.id,
        name=orm_lot.name,
        slug=orm_lot.slug,
        location=orm_lot.location,
        phone=orm_lot.phone,
        space_count=orm_lot.space_count,
        status=LotStatus(orm_lot.status),
        description=orm_lot.description,
        description_tag=orm_lot.description_tag,
        latitude=orm_lot.latitude,
        longitude=orm_lot.longitude,
        open=orm_lot.open,
        close=orm_lot.close,
        is_24_hours=bool(orm_lot.is_24_hours),
        amenities=orm_lot.amenities,
        images=orm_lot.images,
        qr_image=orm_lot.qr_image,
        created_at=orm_lot.created_at,
    )


def _schedule_entity(orm_schedule: ORMSchedule) -> Schedule:
    return Schedule(
        id=orm_schedule.id,
        lot_id=orm_schedule.lot_id,
        name=orm_schedule.name,
        description=orm_schedule.description,
        is_event=bool(orm_schedule.is_event),
        days=orm_schedule.days,
        start_time=orm_schedule.start_time,
        end_time=orm_schedule.end_time,
        event_start=orm_schedule.event_start,
        event_end=orm_schedule.event_end,
        created_at=orm_schedule.created_at,
    )


def _price_tier_entity(orm_tier: ORMPriceTier) -> PriceTier:
    return PriceTier(
        id=orm_tier.id,
        schedule_id=orm_tier.schedule_id,
        max_hours=orm_tier.max_hours,
        price=orm_tier.price,
        created_at=orm_tier.created_at,
    )


def _order_entity(orm_order: ORMOrder) -> Order:
    return Order(
        id=orm_order.id,
        lot_id=orm_order.lot_id,
        schedule_id=orm_order.schedule_id,
        price_tier_id=orm_order.price_tier_id,
        email=orm_order.email,
        phone=orm_order.phone,
        license_plate=orm_order.license_plate,
        license_state=orm_order.license_state,
        vehicle_type=VehicleType(orm_order.vehicle_type),
        start_time=orm_order.start_time,
        total_amount=orm_order.total_amount,
        payment_status=PaymentStatus(orm_order.payment_status),
        stripe_payment_intent_id=orm_order.stripe_payment_intent_id,
        created_at=orm_order.created_at,
    )


def _user_entity(orm_user: ORMUser) -> User:
    return User(
        id=orm_user.id,
        email=orm_user.email,
        full_name=orm_user.full_name,
        phone=orm_user.phone,
        role=UserRole(orm_user.role),
        created_at=orm_user.created_at,
    )


def _staff_entity(orm_staff: ORMLotStaff) -> LotStaff:
    return LotStaff(
        lot_id=orm_staff.lot_id,
        user_id=orm_staff.user_id,
        role=StaffRole(orm_staff.role),
        user=_user_entity(orm_staff.user) if orm_staff.user else None,
        assigned_at=orm_staff.assigned_at,
    )


class SQLAlchemyLotRepository(AbstractLotRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def add(self, lot: ParkingLot) -> ParkingLot:
        orm_lot = ORMLot(
            name=lot.name,
            slug=lot.slug,
            location=lot.location,
            phone=lot.phone,
            space_count=lot.space_count,
            status=LotStatus(lot.status).value,
            description=lot.description,
            description_tag=lot.description_tag,
            latitude=lot.latitude,
            longitude=lot.longitude,
            open=lot.open,
            close=lot.close,
            is_24_hours=lot.is_24_hours,
            amenities=list(lot.amenities),
            images=list(lot.images),
            qr_image=lot.qr_image,
        )
        self.session.add(orm_lot)
        await self.session.flush()
        await self.session.refresh(orm_lot)
        await self.session.commit()
        return _lot_entity(orm_lot)

    async def update(self, lot: ParkingLot) -> ParkingLot:
        orm_lot = await self.session.get(ORMLot, lot.id)
        if orm_lot:
            orm_lot.name = lot.name
            orm_lot.slug = lot.slug
            orm_lot.location = lot.location
            orm_lot.phone = lot.phone
            orm_lot.space_count = lot.space_count
            orm_lot.status = LotStatus(lot.status).value
            orm_lot.description = lot.description
            orm_lot.description_tag = lot.description_tag
            orm_lot.latitude = lot.latitude
            orm_lot.longitude = lot.longitude
            orm_lot.open = lot.open
            orm_lot.close = lot.close
            orm_lot.is_24_hours = lot.is_24_hours
            orm_lot.amenities = list(lot.amenities)
            orm_lot.images = list(lot.images)
            orm_lot.qr_image = lot.qr_image
            await self.session.flush()
            await self.session.refresh(orm_lot)
            await self.session.commit()
            return _lot_entity(orm_lot)
        raise ValueError(f"Lot with ID {lot.id} not found.")

    async def get_by_id(self, lot_id: int) -> Optional[ParkingLot]:
        orm_lot = await self.session.get(ORMLot, lot_id)
        return _lot_entity(orm_lot) if orm_lot else None

    async def get_by_slug(self, slug: str) -> Optional[ParkingLot]:
        result = await self.session.execute(select(ORMLot).where(ORMLot.slug == slug))
        orm_lot = result.scalars().first()
        return _lot_entity(orm_lot) if orm_lot else None

    async def search(self, query: str, limit: int) -> List[ParkingLot]:
        statement = select(ORMLot)
        if query:
            pattern = f"%{query}%"
            statement = statement.where(
                or_(
                    ORMLot.name.ilike(pattern),
                    ORMLot.location.ilike(pattern),
                    ORMLot.description_tag.ilike(pattern),
                )
            )
        result = await self.session.execute(statement.order_by(ORMLot.name).limit(limit))
        return [_lot_entity(lot) for lot in result.scalars().all()]

    async def get_by_supervisor(self, user_id: int) -> List[ParkingLot]:
        result = await self.session.execute(
            select(ORMLot).join(ORMLotStaff).where(
                and_(
                    ORMLotStaff.user_id == user_id,
                    ORMLotStaff.role == StaffRole.SUPERVISOR.value,
                )
            ).order_by(ORMLot.name)
        )
        return [_lot_entity(lot) for lot in result.scalars().all()]

    async def count(self) -> int:
        result = await self.session.execute(select(func.count(ORMLot.id)))
        return result.scalar() or 0


class SQLAlchemyScheduleRepository(AbstractScheduleRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def add(self, schedule: Schedule) -> Schedule:
        orm_schedule = ORMSchedule(
            lot_id=schedule.lot_id,
            name=schedule.name,
            description=schedule.description,
            is_event=schedule.is_event,
            days=list(schedule.days),
            start_time=schedule.start_time,
            end_time=schedule.end_time,
            event_start=schedule.event_start,
            event_end=schedule.event_end,
        )
        self.session.add(orm_schedule)
        await self.session.flush()
        await self.session.refresh(orm_schedule)
        await self.session.commit()
        return _schedule_entity(orm_schedule)

    async def update(self, schedule: Schedule) -> Schedule:
        orm_schedule = await self.session.get(ORMSchedule, schedule.id)
        if orm_schedule:
            orm_schedule.name = schedule.name
            orm_schedule.description = schedule.description
            orm_schedule.is_event = schedule.is_event
            orm_schedule.days = list(schedule.days)
            orm_schedule.start_time = schedule.start_time
            orm_schedule.end_time = schedule.end_time
            orm_schedule.event_start = schedule.event_start
            orm_schedule.event_end = schedule.event_end
            await self.session.flush()
            await self.session.refresh(orm_schedule)
            await self.session.commit()
            return _schedule_entity(orm_schedule)
        raise ValueError(f"Schedule with ID {schedule.id} not found.")

    async def delete(self, schedule_id: int) -> None:
        # Orders outlive the schedule they were booked under
        await self.session.execute(
            update(ORMOrder)
            .where(ORMOrder.schedule_id == schedule_id)
            .values(schedule_id=None, price_tier_id=None)
        )
        await self.session.execute(delete(ORMPriceTier).where(ORMPriceTier.schedule_id == schedule_id))
        await self.session.execute(delete(ORMSchedule).where(ORMSchedule.id == schedule_id))
        await self.session.commit()

    async def get_by_id(self, schedule_id: int) -> Optional[Schedule]:
        orm_schedule = await self.session.get(ORMSchedule, schedule_id)
        return _schedule_entity(orm_schedule) if orm_schedule else None

    async def get_by_lot(self, lot_id: int) -> List[Schedule]:
        result = await self.session.execute(
            select(ORMSchedule).where(ORMSchedule.lot_id == lot_id).order_by(ORMSchedule.id)
        )
        return [_schedule_entity(s) for s in result.scalars().all()]

    async def get_events_at(self, lot_id: int, moment: datetime) -> List[Schedule]:
        result = await self.session.execute(
            select(ORMSchedule).where(
                and_(
                    ORMSchedule.lot_id == lot_id,
                    ORMSchedule.is_event.is_(True),
                    ORMSchedule.event_start <= moment,
                    ORMSchedule.event_end > moment,
                )
            ).order_by(ORMSchedule.event_start)
        )
        return [_schedule_entity(s) for s in result.scalars().all()]

    async def get_recurring(self, lot_id: int) -> List[Schedule]:
        result = await self.session.execute(
            select(ORMSchedule).where(
                and_(
                    ORMSchedule.lot_id == lot_id,
                    ORMSchedule.is_event.is_(False),
                )
            )
        )
        return [_schedule_entity(s) for s in result.scalars().all()]

    async def count(self) -> int:
        result = await self.session.execute(select(func.count(ORMSchedule.id)))
        return result.scalar() or 0


class SQLAlchemyPriceTierRepository(AbstractPriceTierRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def add(self, price_tier: PriceTier) -> PriceTier:
        orm_tier = ORMPriceTier(
            schedule_id=price_tier.schedule_id,
            max_hours=price_tier.max_hours,
            price=price_tier.price,
        )
        self.session.add(orm_tier)
        await self.session.flush()
        await self.session.refresh(orm_tier)
        await self.session.commit()
        return _price_tier_entity(orm_tier)

    async def update(self, price_tier: PriceTier) -> PriceTier:
        orm_tier = await self.session.get(ORMPriceTier, price_tier.id)
        if orm_tier:
            orm_tier.max_hours = price_tier.max_hours
            orm_tier.price = price_tier.price
            await self.session.flush()
            await self.session.refresh(orm_tier)
            await self.session.commit()
            return _price_tier_entity(orm_tier)
        raise ValueError(f"Price tier with ID {price_tier.id} not found.")

    async def delete(self, price_tier_id: int) -> None:
        await self.session.execute(
            update(ORMOrder).where(ORMOrder.price_tier_id == price_tier_id).values(price_tier_id=None)
        )
        await self.session.execute(delete(ORMPriceTier).where(ORMPriceTier.id == price_tier_id))
        await self.session.commit()

    async def get_by_id(self, price_tier_id: int) -> Optional[PriceTier]:
        orm_tier = await self.session.get(ORMPriceTier, price_tier_id)
        return _price_tier_entity(orm_tier) if orm_tier else None

    async def get_by_schedule(self, schedule_id: int) -> List[PriceTier]:
        result = await self.session.execute(
            select(ORMPriceTier)
            .where(ORMPriceTier.schedule_id == schedule_id)
            .order_by(ORMPriceTier.max_hours, ORMPriceTier.price)
        )
        return [_price_tier_entity(t) for t in result.scalars().all()]


class SQLAlchemyOrderRepository(AbstractOrderRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def add(self, order: Order) -> Order:
        orm_order = ORMOrder(
            lot_id=order.lot_id,
            schedule_id=order.schedule_id,
            price_tier_id=order.price_tier_id,
            email=order.email,
            phone=order.phone,
            license_plate=order.license_plate,
            license_state=order.license_state,
            vehicle_type=VehicleType(order.vehicle_type).value,
            start_time=order.start_time,
            total_amount=order.total_amount,
            payment_status=PaymentStatus(order.payment_status).value,
            stripe_payment_intent_id=order.stripe_payment_intent_id,
        )
        self.session.add(orm_order)
        try:
            await self.session.flush()
        except IntegrityError as e:
            await self.session.rollback()
            # Another request stored this payment intent first
            if order.stripe_payment_intent_id and await self.get_by_payment_intent_id(order.stripe_payment_intent_id):
                raise DuplicateOrderError(order.stripe_payment_intent_id) from e
            raise
        await self.session.refresh(orm_order)
        await self.session.commit()
        return _order_entity(orm_order)

    async def update(self, order: Order) -> Order:
        orm_order = await self.session.get(ORMOrder, order.id)
        if orm_order:
            orm_order.payment_status = PaymentStatus(order.payment_status).value
            orm_order.stripe_payment_intent_id = order.stripe_payment_intent_id
            orm_order.total_amount = order.total_amount
            orm_order.start_time = order.start_time
            await self.session.flush()
            await self.session.refresh(orm_order)
            await self.session.commit()
            return _order_entity(orm_order)
        raise ValueError(f"Order with ID {order.id} not found.")

    async def get_by_id(self, order_id: int) -> Optional[Order]:
        orm_order = await self.session.get(ORMOrder, order_id)
        return _order_entity(orm_order) if orm_order else None

    async def get_by_payment_intent_id(self, payment_intent_id: str) -> Optional[Order]:
        result = await self.session.execute(
            select(ORMOrder).where(ORMOrder.stripe_payment_intent_id == payment_intent_id)
        )
        orm_order = result.scalars().first()
        return _order_entity(orm_order) if orm_order else None

    def _lot_filter(self, lot_id: Optional[int], search: Optional[str]):
        conditions = []
        if lot_id is not None:
            conditions.append(ORMOrder.lot_id == lot_id)
        if search:
            pattern = f"%{search}%"
            conditions.append(or_(ORMOrder.license_plate.ilike(pattern), ORMOrder.email.ilike(pattern)))
        return conditions

    async def get_by_lot(self, lot_id: int, search: Optional[str] = None, offset: int = 0, limit: int = 20) -> List[Order]:
        result = await self.session.execute(
            select(ORMOrder)
            .where(and_(*self._lot_filter(lot_id, search)))
            .order_by(ORMOrder.created_at.desc(), ORMOrder.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return [_order_entity(o) for o in result.scalars().all()]

    async def count(self, lot_id: Optional[int] = None, search: Optional[str] = None) -> int:
        query = select(func.count(ORMOrder.id))
        conditions = self._lot_filter(lot_id, search)
        if conditions:
            query = query.where(and_(*conditions))
        result = await self.session.execute(query)
        return result.scalar() or 0

    async def get_revenue_summary(self, lot_id: int) -> Dict[str, Dict]:
        result = await self.session.execute(
            select(
                ORMOrder.payment_status,
                func.count(ORMOrder.id).label("count"),
                func.sum(ORMOrder.total_amount).label("amount"),
            ).where(ORMOrder.lot_id == lot_id).group_by(ORMOrder.payment_status)
        )
        return {
            row.payment_status: {"count": row.count, "amount": float(row.amount or 0.0)}
            for row in result
        }

    async def get_paid_amounts_since(self, lot_id: int, since: datetime) -> List[Tuple[datetime, float]]:
        result = await self.session.execute(
            select(ORMOrder.start_time, ORMOrder.total_amount).where(
                and_(
                    ORMOrder.lot_id == lot_id,
                    ORMOrder.start_time >= since,
                    ORMOrder.payment_status == PaymentStatus.PAID.value,
                )
            ).order_by(ORMOrder.start_time)
        )
        return [(row.start_time, float(row.total_amount or 0.0)) for row in result]


class SQLAlchemyUserRepository(AbstractUserRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def add(self, user: User) -> User:
        orm_user = ORMUser(
            email=user.email,
            full_name=user.full_name,
            phone=user.phone,
            role=UserRole(user.role).value,
        )
        self.session.add(orm_user)
        await self.session.flush()
        await self.session.refresh(orm_user)
        await self.session.commit()
        return _user_entity(orm_user)

    async def get_by_id(self, user_id: int) -> Optional[User]:
        orm_user = await self.session.get(ORMUser, user_id)
        return _user_entity(orm_user) if orm_user else None

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.session.execute(select(ORMUser).where(func.lower(ORMUser.email) == email.lower()))
        orm_user = result.scalars().first()
        return _user_entity(orm_user) if orm_user else None

    async def get_all(self, role: Optional[UserRole] = None) -> List[User]:
        query = select(ORMUser).order_by(ORMUser.id)
        if role is not None:
            query = query.where(ORMUser.role == UserRole(role).value)
        result = await self.session.execute(query)
        return [_user_entity(u) for u in result.scalars().all()]


class SQLAlchemyLotStaffRepository(AbstractLotStaffRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def _get_orm(self, lot_id: int, user_id: int) -> Optional[ORMLotStaff]:
        result = await self.session.execute(
            select(ORMLotStaff)
            .options(selectinload(ORMLotStaff.user))
            .where(and_(ORMLotStaff.lot_id == lot_id, ORMLotStaff.user_id == user_id))
        )
        return result.scalars().first()

    async def get(self, lot_id: int, user_id: int) -> Optional[LotStaff]:
        orm_staff = await self._get_orm(lot_id, user_id)
        return _staff_entity(orm_staff) if orm_staff else None

    async def save(self, lot_id: int, user_id: int, role: StaffRole) -> LotStaff:
        orm_staff = await self._get_orm(lot_id, user_id)
        if orm_staff:
            orm_staff.role = StaffRole(role).value
        else:
            orm_staff = ORMLotStaff(lot_id=lot_id, user_id=user_id, role=StaffRole(role).value)
            self.session.add(orm_staff)
        await self.session.flush()
        await self.session.commit()
        return await self.get(lot_id, user_id)

    async def delete(self, lot_id: int, user_id: int) -> None:
        await self.session.execute(
            delete(ORMLotStaff).where(and_(ORMLotStaff.lot_id == lot_id, ORMLotStaff.user_id == user_id))
        )
        await self.session.commit()

    async def get_by_lot(self, lot_id: int) -> List[LotStaff]:
        result = await self.session.execute(
            select(ORMLotStaff)
            .options(selectinload(ORMLotStaff.user))
            .where(ORMLotStaff.lot_id == lot_id)
            .order_by(ORMLotStaff.role.desc(), ORMLotStaff.id)
        )
        return [_staff_entity(s) for s in result.scalars().all()]
