from pydantic import BaseModel, Field, field_validator, model_validator, ConfigDict
from datetime import datetime, time, timezone
from typing import Optional, List

from parkpass.domain.common import LotStatus, PaymentStatus, VehicleType, UserRole, StaffRole

PHONE_PATTERN = r"^\+?[1-9]\d{0,15}$"
EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


def _aware(dt: Optional[datetime]) -> Optional[datetime]:
    if dt is None:
        return dt
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


class LotBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    location: str = Field(..., min_length=1, max_length=200)
    phone: str = Field(..., pattern=PHONE_PATTERN)
    space_count: int = Field(..., gt=0)
    status: LotStatus = LotStatus.OPEN
    description: Optional[str] = None
    description_tag: Optional[str] = None
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    open: Optional[time] = None
    close: Optional[time] = None
    is_24_hours: bool = False
    amenities: List[str] = Field(default_factory=list)
    images: List[str] = Field(default_factory=list)

    @field_validator("amenities")
    @classmethod
    def strip_amenities(cls, v: List[str]) -> List[str]:
        return [a.strip() for a in v if a and a.strip()]


class LotCreate(LotBase):
    slug: Optional[str] = Field(default=None, max_length=100)
    creator_id: Optional[int] = None


class LotUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    slug: Optional[str] = Field(default=None, min_length=1, max_length=100)
    location: Optional[str] = Field(default=None, min_length=1, max_length=200)
    phone: Optional[str] = Field(default=None, pattern=PHONE_PATTERN)
    space_count: Optional[int] = Field(default=None, gt=0)
    status: Optional[LotStatus] = None
    description: Optional[str] = None
    description_tag: Optional[str] = None
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    open: Optional[time] = None
    close: Optional[time] = None
    is_24_hours: Optional[bool] = None
    amenities: Optional[List[str]] = None
    images: Optional[List[str]] = None


class LotStatusUpdate(BaseModel):
    status: LotStatus


class LotResponse(LotBase):
    id: int
    slug: str
    qr_image: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ScheduleBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    is_event: bool = False
    days: List[int] = Field(default_factory=list)
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    event_start: Optional[datetime] = None
    event_end: Optional[datetime] = None

    @field_validator("days")
    @classmethod
    def validate_days(cls, v: List[int]) -> List[int]:
        for day in v:
            if day < 1 or day > 7:
                raise ValueError("Days must be ISO weekdays between 1 (Monday) and 7 (Sunday)")
        return v

    @field_validator("event_start", "event_end")
    @classmethod
    def make_datetime_aware(cls, dt: Optional[datetime]) -> Optional[datetime]:
        return _aware(dt)


class ScheduleCreate(ScheduleBase):
    @model_validator(mode="after")
    def check_window(self):
        if self.event_start and self.event_end and self.event_end <= self.event_start:
            raise ValueError("Event start time must be before event end time")
        if self.start_time and self.end_time and self.start_time >= self.end_time:
            raise ValueError("Start time must be before end time")
        return self


class ScheduleUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = None
    is_event: Optional[bool] = None
    days: Optional[List[int]] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    event_start: Optional[datetime] = None
    event_end: Optional[datetime] = None

    @field_validator("event_start", "event_end")
    @classmethod
    def make_datetime_aware(cls, dt: Optional[datetime]) -> Optional[datetime]:
        return _aware(dt)


class ScheduleResponse(ScheduleBase):
    id: int
    lot_id: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class PriceTierBase(BaseModel):
    max_hours: int = Field(..., gt=0)
    price: float = Field(..., ge=0)


class PriceTierCreate(PriceTierBase):
    pass


class PriceTierUpdate(BaseModel):
    max_hours: Optional[int] = Field(default=None, gt=0)
    price: Optional[float] = Field(default=None, ge=0)


class PriceTierResponse(PriceTierBase):
    id: int
    schedule_id: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ScheduleRatesResponse(BaseModel):
    schedule: ScheduleResponse
    price_tiers: List[PriceTierResponse]

    model_config = ConfigDict(from_attributes=True)


class CustomerInfoSchema(BaseModel):
    email: str = Field(..., pattern=EMAIL_PATTERN, max_length=254)
    phone: str = Field(..., min_length=1, max_length=20)
    license_plate: str = Field(..., min_length=1, max_length=20)
    license_state: str = Field(..., min_length=1, max_length=20)
    vehicle_type: VehicleType = VehicleType.STANDARD

    @field_validator("license_plate", "license_state")
    def validate_license(cls, v):  # pylint: disable=no-self-argument
        return v.upper().strip()


class PaymentIntentRequest(BaseModel):
    lot_id: int
    price_tier_id: int
    customer: CustomerInfoSchema


class PaymentIntentResponse(BaseModel):
    payment_intent_id: str
    client_secret: Optional[str] = None
    amount: int
    currency: str


class CheckoutConfirmRequest(BaseModel):
    payment_intent_id: str = Field(..., min_length=1)
    lot_id: int
    price_tier_id: int
    customer: CustomerInfoSchema


class ReservationRequest(BaseModel):
    lot_id: int
    schedule_id: int
    start_time: datetime
    price_tier_id: Optional[int] = None
    customer: CustomerInfoSchema

    @field_validator("start_time")
    @classmethod
    def make_datetime_aware(cls, dt: datetime) -> datetime:
        return _aware(dt)


class OrderResponse(BaseModel):
    id: int
    lot_id: int
    schedule_id: Optional[int] = None
    price_tier_id: Optional[int] = None
    email: str
    phone: str
    license_plate: str
    license_state: str
    vehicle_type: VehicleType
    start_time: datetime
    total_amount: float
    payment_status: PaymentStatus
    stripe_payment_intent_id: Optional[str] = None
    created_at: Optional[datetime] = None

    @field_validator("start_time", "created_at")
    @classmethod
    def make_datetime_aware(cls, dt: Optional[datetime]) -> Optional[datetime]:
        return _aware(dt)

    model_config = ConfigDict(from_attributes=True)


class OrderPage(BaseModel):
    items: List[OrderResponse]
    total: int
    page: int
    per_page: int
    total_pages: int


class ParkingPassResponse(BaseModel):
    order_id: int
    payment_intent_id: Optional[str] = None
    license_plate: str
    lot_name: str
    location: str
    park_after: datetime
    exit_before: datetime
    amount: float
    payment_status: PaymentStatus
    pass_url: str

    model_config = ConfigDict(from_attributes=True)


class UserCreate(BaseModel):
    email: str = Field(..., pattern=EMAIL_PATTERN, max_length=254)
    full_name: Optional[str] = Field(default=None, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=20)
    role: UserRole = UserRole.CUSTOMER


class UserResponse(BaseModel):
    id: int
    email: str
    full_name: Optional[str] = None
    phone: Optional[str] = None
    role: UserRole
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class StaffAssign(BaseModel):
    user_id: int
    role: StaffRole = StaffRole.EMPLOYEE


class StaffResponse(BaseModel):
    lot_id: int
    user_id: int
    role: StaffRole
    assigned_at: Optional[datetime] = None
    user: Optional[UserResponse] = None

    model_config = ConfigDict(from_attributes=True)


class DashboardOverview(BaseModel):
    orders: int
    lots: int
    schedules: int


class LotAccounting(BaseModel):
    lot_id: int
    total_revenue: float
    total_bookings: int
    paid_bookings: int
    pending_bookings: int
    average_booking_value: float


class DailyRevenue(BaseModel):
    date: str
    revenue: float
