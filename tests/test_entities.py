from datetime import datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

from parkpass.domain.entities import ParkingLot, Schedule, PriceTier, Order, User, LotStaff
from parkpass.domain.common import LotStatus, PaymentStatus, VehicleType, UserRole, StaffRole

NEW_YORK = ZoneInfo("America/New_York")


def test_parking_lot_creation_defaults():
    """Test ParkingLot creation with default optional arguments."""
    lot = ParkingLot(name="Pier Lot", location="1 Pier Rd", phone="+15555550100", space_count=10)
    assert lot.id is None
    assert lot.slug is None
    assert lot.status == LotStatus.OPEN
    assert lot.amenities == []
    assert lot.images == []
    assert lot.is_24_hours is False
    assert lot.is_open is True


def test_parking_lot_closed():
    lot = ParkingLot(name="Pier Lot", location="1 Pier Rd", phone="+15555550100", space_count=10, status=LotStatus.CLOSED)
    assert lot.is_open is False


def test_parking_lot_copies_lists():
    amenities = ["Covered"]
    lot = ParkingLot(name="Pier Lot", location="1 Pier Rd", phone="+15555550100", space_count=10, amenities=amenities)
    amenities.append("Valet")
    assert lot.amenities == ["Covered"]


class TestRecurringScheduleMatches:
    """Recurring schedules read weekday and time of day in lot time."""

    def _weekday_schedule(self):
        return Schedule(lot_id=1, name="Weekdays", days=[1, 2, 3, 4, 5], start_time=time(6, 0), end_time=time(18, 0))

    def test_matches_inside_window(self):
        # 2025-01-06 is a Monday
        assert self._weekday_schedule().matches(datetime(2025, 1, 6, 9, 30, tzinfo=NEW_YORK))

    def test_start_is_inclusive(self):
        assert self._weekday_schedule().matches(datetime(2025, 1, 6, 6, 0, tzinfo=NEW_YORK))

    def test_end_is_exclusive(self):
        assert not self._weekday_schedule().matches(datetime(2025, 1, 6, 18, 0, tzinfo=NEW_YORK))

    def test_before_start(self):
        assert not self._weekday_schedule().matches(datetime(2025, 1, 6, 5, 59, tzinfo=NEW_YORK))

    def test_wrong_day(self):
        # 2025-01-11 is a Saturday
        assert not self._weekday_schedule().matches(datetime(2025, 1, 11, 9, 30, tzinfo=NEW_YORK))

    def test_sunday_is_day_seven(self):
        schedule = Schedule(lot_id=1, name="Sundays", days=[7], start_time=time(8, 0), end_time=time(12, 0))
        assert schedule.matches(datetime(2025, 1, 12, 10, 0, tzinfo=NEW_YORK))
        assert not schedule.matches(datetime(2025, 1, 13, 10, 0, tzinfo=NEW_YORK))

    def test_open_ended_times_cover_whole_day(self):
        schedule = Schedule(lot_id=1, name="Saturday", days=[6])
        assert schedule.matches(datetime(2025, 1, 11, 0, 0, tzinfo=NEW_YORK))
        assert schedule.matches(datetime(2025, 1, 11, 23, 59, tzinfo=NEW_YORK))


class TestEventScheduleMatches:
    """Event schedules compare absolute instants."""

    def _event(self):
        return Schedule(
            lot_id=1,
            name="Fireworks",
            is_event=True,
            event_start=datetime(2025, 7, 4, 18, 0, tzinfo=timezone.utc),
            event_end=datetime(2025, 7, 4, 23, 0, tzinfo=timezone.utc),
        )

    def test_matches_at_start(self):
        assert self._event().matches(datetime(2025, 7, 4, 18, 0, tzinfo=timezone.utc))

    def test_matches_in_other_timezone(self):
        # 16:00 in New York is 20:00 UTC in July
        assert self._event().matches(datetime(2025, 7, 4, 16, 0, tzinfo=NEW_YORK))

    def test_end_is_exclusive(self):
        assert not self._event().matches(datetime(2025, 7, 4, 23, 0, tzinfo=timezone.utc))

    def test_event_ignores_days(self):
        event = self._event()
        event.days = [1]
        # 2025-07-04 is a Friday
        assert event.matches(datetime(2025, 7, 4, 19, 0, tzinfo=timezone.utc))

    def test_event_without_bounds_never_matches(self):
        event = Schedule(lot_id=1, name="TBD", is_event=True)
        assert not event.matches(datetime(2025, 7, 4, 19, 0, tzinfo=timezone.utc))


def test_price_tier_amount_in_cents():
    assert PriceTier(schedule_id=1, max_hours=2, price=12.5).amount_in_cents == 1250
    assert PriceTier(schedule_id=1, max_hours=2, price=19.99).amount_in_cents == 1999
    assert PriceTier(schedule_id=1, max_hours=2, price=0).amount_in_cents == 0


def test_order_creation_and_end_time():
    """Test that an Order object can be created with correct attributes."""
    start = datetime(2025, 1, 6, 14, 0, tzinfo=timezone.utc)
    order = Order(
        lot_id=1,
        schedule_id=2,
        email="driver@example.com",
        phone="+15555550199",
        license_plate="ABC123",
        license_state="NY",
        start_time=start,
        total_amount=12.5,
    )
    assert order.id is None
    assert order.vehicle_type == VehicleType.STANDARD
    assert order.payment_status == PaymentStatus.PENDING
    assert order.stripe_payment_intent_id is None
    assert order.end_time(3) == start + timedelta(hours=3)


def test_user_and_staff_creation():
    user = User(email="sam@example.com", id=4)
    assert user.role == UserRole.CUSTOMER
    staff = LotStaff(lot_id=1, user_id=4, role=StaffRole.EMPLOYEE, user=user)
    assert staff.user.email == "sam@example.com"
    assert staff.assigned_at is None
