from datetime import datetime, time, timedelta
from typing import List, Optional

from parkpass.domain.common import LotStatus, PaymentStatus, VehicleType, UserRole, StaffRole


class ParkingLot:
    def __init__(
        self,
        name: str,
        location: str,
        phone: str,
        space_count: int,
        slug: Optional[str] = None,
        status: LotStatus = LotStatus.OPEN,
        description: Optional[str] = None,
        description_tag: Optional[str] = None,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        open: Optional[time] = None,
        close: Optional[time] = None,
        is_24_hours: bool = False,
        amenities: Optional[List[str]] = None,
        images: Optional[List[str]] = None,
        qr_image: Optional[str] = None,
        id: Optional[int] = None,
        created_at: Optional[datetime] = None,
    ):
        self.id = id
        self.name = name
        self.slug = slug
        self.location = location
        self.phone = phone
        self.space_count = space_count
        self.status = status
        self.description = description
        self.description_tag = description_tag
        self.latitude = latitude
        self.longitude = longitude
        self.open = open
        self.close = close
        self.is_24_hours = is_24_hours
        self.amenities = list(amenities or [])
        self.images = list(images or [])
        self.qr_image = qr_image
        self.created_at = created_at

    @property
    def is_open(self) -> bool:
        return self.status == LotStatus.OPEN


class Schedule:
    def __init__(
        self,
        lot_id: int,
        name: str,
        is_event: bool = False,
        days: Optional[List[int]] = None,
        start_time: Optional[time] = None,
        end_time: Optional[time] = None,
        event_start: Optional[datetime] = None,
        event_end: Optional[datetime] = None,
        description: Optional[str] = None,
        id: Optional[int] = None,
        created_at: Optional[datetime] = None,
    ):
        self.id = id
        self.lot_id = lot_id
        self.name = name
        self.description = description
        self.is_event = is_event
        self.days = list(days or [])
        self.start_time = start_time
        self.end_time = end_time
        self.event_start = event_start
        self.event_end = event_end
        self.created_at = created_at

    def matches(self, moment: datetime) -> bool:
        """Whether bookings are accepted at ``moment``.

        Events compare absolute instants. Recurring schedules read the weekday and
        time of day straight off ``moment``, so it must already be in the lot's
        local timezone.
        """
        if self.is_event:
            if self.event_start is None or self.event_end is None:
                return False
            return self.event_start <= moment < self.event_end

        if moment.isoweekday() not in self.days:
            return False
        time_of_day = moment.time().replace(tzinfo=None)
        if self.start_time is not None and time_of_day < self.start_time:
            return False
        if self.end_time is not None and time_of_day >= self.end_time:
            return False
        return True


class PriceTier:
    def __init__(
        self,
        schedule_id: int,
        max_hours: int,
        price: float,
        id: Optional[int] = None,
        created_at: Optional[datetime] = None,
    ):
        self.id = id
        self.schedule_id = schedule_id
        self.max_hours = max_hours
        self.price = price
        self.created_at = created_at

    @property
    def amount_in_cents(self) -> int:
        return int(round(self.price * 100))


class Order:
    def __init__(
        self,
        lot_id: int,
        schedule_id: int,
        email: str,
        phone: str,
        license_plate: str,
        license_state: str,
        start_time: datetime,
        total_amount: float,
        vehicle_type: VehicleType = VehicleType.STANDARD,
        payment_status: PaymentStatus = PaymentStatus.PENDING,
        price_tier_id: Optional[int] = None,
        stripe_payment_intent_id: Optional[str] = None,
        id: Optional[int] = None,
        created_at: Optional[datetime] = None,
    ):
        self.id = id
        self.lot_id = lot_id
        self.schedule_id = schedule_id
        self.price_tier_id = price_tier_id
        self.email = email
        self.phone = phone
        self.license_plate = license_plate
        self.license_state = license_state
        self.vehicle_type = vehicle_type
        self.start_time = start_time
        self.total_amount = total_amount
        self.payment_status = payment_status
        self.stripe_payment_intent_id = stripe_payment_intent_id
        self.created_at = created_at

    def end_time(self, max_hours: int) -> datetime:
        return self.start_time + timedelta(hours=max_hours)


class User:
    def __init__(
        self,
        email: str,
        role: UserRole = UserRole.CUSTOMER,
        full_name: Optional[str] = None,
        phone: Optional[str] = None,
        id: Optional[int] = None,
        created_at: Optional[datetime] = None,
    ):
        self.id = id
        self.email = email
        self.full_name = full_name
        self.phone = phone
        self.role = role
        self.created_at = created_at


class LotStaff:
    def __init__(
        self,
        lot_id: int,
        user_id: int,
        role: StaffRole,
        user: Optional[User] = None,
        assigned_at: Optional[datetime] = None,
    ):
        self.lot_id = lot_id
        self.user_id = user_id
        self.role = role
        self.user = user
        self.assigned_at = assigned_at
