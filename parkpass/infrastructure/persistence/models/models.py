from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, Float, Boolean, ForeignKey, Time, JSON, Text, UniqueConstraint
from sqlalchemy.orm import declarative_base, relationship

from parkpass.shared.custom_types import UTCDateTime

Base = declarative_base()


def _utcnow():
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    full_name = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    role = Column(String, default="CUSTOMER", nullable=False)  # ADMIN, OWNER, CUSTOMER, SUPERVISOR
    created_at = Column(UTCDateTime, default=_utcnow)

    lot_assignments = relationship("LotStaff", back_populates="user", cascade="all, delete-orphan")


class Lot(Base):
    __tablename__ = "lots"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    slug = Column(String, unique=True, index=True, nullable=False)
    location = Column(String, nullable=False)
    phone = Column(String, nullable=False)
    space_count = Column(Integer, nullable=False)
    status = Column(String, default="OPEN", nullable=False)  # OPEN, CLOSED
    description = Column(Text, nullable=True)
    description_tag = Column(String, nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    open = Column(Time, nullable=True)
    close = Column(Time, nullable=True)
    is_24_hours = Column(Boolean, default=False)
    amenities = Column(JSON, default=list)
    images = Column(JSON, default=list)
    qr_image = Column(Text, nullable=True)
    created_at = Column(UTCDateTime, default=_utcnow)

    schedules = relationship("Schedule", back_populates="lot", cascade="all, delete-orphan")
    orders = relationship("Order", back_populates="lot")
    staff = relationship("LotStaff", back_populates="lot", cascade="all, delete-orphan")


class LotStaff(Base):
    __tablename__ = "lot_staff"
    __table_args__ = (UniqueConstraint("lot_id", "user_id", name="uq_lot_staff_lot_user"),)

    id = Column(Integer, primary_key=True, index=True)
    lot_id = Column(Integer, ForeignKey("lots.id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    role = Column(String, default="EMPLOYEE", nullable=False)  # SUPERVISOR, EMPLOYEE
    assigned_at = Column(UTCDateTime, default=_utcnow)

    lot = relationship("Lot", back_populates="staff")
    user = relationship("User", back_populates="lot_assignments")


class Schedule(Base):
    __tablename__ = "schedules"

    id = Column(Integer, primary_key=True, index=True)
    lot_id = Column(Integer, ForeignKey("lots.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    is_event = Column(Boolean, default=False, nullable=False)
    days = Column(JSON, default=list)  # ISO weekdays, 1 = Monday
    start_time = Column(Time, nullable=True)
    end_time = Column(Time, nullable=True)
    event_start = Column(UTCDateTime, nullable=True)
    event_end = Column(UTCDateTime, nullable=True)
    created_at = Column(UTCDateTime, default=_utcnow)

    lot = relationship("Lot", back_populates="schedules")
    price_tiers = relationship("PriceTier", back_populates="schedule", cascade="all, delete-orphan")


class PriceTier(Base):
    __tablename__ = "price_tiers"

    id = Column(Integer, primary_key=True, index=True)
    schedule_id = Column(Integer, ForeignKey("schedules.id"), nullable=False, index=True)
    max_hours = Column(Integer, nullable=False)
    price = Column(Float, nullable=False)
    created_at = Column(UTCDateTime, default=_utcnow)

    schedule = relationship("Schedule", back_populates="price_tiers")


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    lot_id = Column(Integer, ForeignKey("lots.id"), nullable=False, index=True)
    schedule_id = Column(Integer, ForeignKey("schedules.id", ondelete="SET NULL"), nullable=True)
    price_tier_id = Column(Integer, ForeignKey("price_tiers.id", ondelete="SET NULL"), nullable=True)
    email = Column(String, nullable=False)
    phone = Column(String, nullable=False)
    license_plate = Column(String, nullable=False, index=True)
    license_state = Column(String, nullable=False)
    vehicle_type = Column(String, default="STANDARD", nullable=False)  # STANDARD, OVERSIZE
    start_time = Column(UTCDateTime, nullable=False)
    total_amount = Column(Float, nullable=False)
    payment_status = Column(String, default="PENDING", nullable=False)  # PENDING, PAID
    stripe_payment_intent_id = Column(String, unique=True, nullable=True, index=True)
    created_at = Column(UTCDateTime, default=_utcnow)

    lot = relationship("Lot", back_populates="orders")
    price_tier = relationship("PriceTier")
