import pytest
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import NullPool
import tempfile
import os
from datetime import time
from unittest.mock import AsyncMock, MagicMock

from parkpass.infrastructure.persistence.models.models import Base
from parkpass.infrastructure.persistence.sqlalchemy_repositories import (
    SQLAlchemyLotRepository,
    SQLAlchemyScheduleRepository,
    SQLAlchemyPriceTierRepository,
    SQLAlchemyOrderRepository,
    SQLAlchemyUserRepository,
    SQLAlchemyLotStaffRepository,
)
from parkpass.application.gateways import AbstractPaymentGateway, AbstractEmailSender, AbstractQrCodeRenderer
from parkpass.application.services.lot_service import LotService
from parkpass.application.services.schedule_service import ScheduleService
from parkpass.application.services.price_tier_service import PriceTierService
from parkpass.application.services.checkout_service import CheckoutService, CustomerInfo
from parkpass.application.services.order_service import OrderService
from parkpass.application.services.staff_service import StaffService
from parkpass.application.services.dashboard_service import DashboardService
from parkpass.domain.common import UserRole
from parkpass.domain.entities import ParkingLot, Schedule

FRONTEND_URL = "https://parkpass.test"
LOT_TIMEZONE = "America/New_York"
FAKE_PNG = b"\x89PNG\r\n\x1a\nfake"


@pytest.fixture(scope="function")
async def test_db():
    """Create a test database for each test function."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as tmp_file:
        test_db_path = tmp_file.name

    # NullPool so every session gets a fresh aiosqlite connection
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{test_db_path}",
        poolclass=NullPool,
        echo=False
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False
    )

    yield async_session_maker

    await engine.dispose()
    os.unlink(test_db_path)


@pytest.fixture
async def db_session(test_db):
    """Create a database session for a test."""
    async with test_db() as session:
        yield session
        await session.rollback()


@pytest.fixture
def lot_repo(db_session):
    return SQLAlchemyLotRepository(db_session)


@pytest.fixture
def schedule_repo(db_session):
    return SQLAlchemyScheduleRepository(db_session)


@pytest.fixture
def price_tier_repo(db_session):
    return SQLAlchemyPriceTierRepository(db_session)


@pytest.fixture
def order_repo(db_session):
    return SQLAlchemyOrderRepository(db_session)


@pytest.fixture
def user_repo(db_session):
    return SQLAlchemyUserRepository(db_session)


@pytest.fixture
def staff_repo(db_session):
    return SQLAlchemyLotStaffRepository(db_session)


@pytest.fixture
def qr_renderer():
    renderer = MagicMock(spec=AbstractQrCodeRenderer)
    renderer.render_png.return_value = FAKE_PNG
    return renderer


@pytest.fixture
def payment_gateway():
    """Payment provider stand-in; tests set return values per call."""
    return AsyncMock(spec=AbstractPaymentGateway)


@pytest.fixture
def email_sender():
    return AsyncMock(spec=AbstractEmailSender)


@pytest.fixture
def lot_service(lot_repo, user_repo, staff_repo, qr_renderer):
    return LotService(
        lot_repo=lot_repo,
        user_repo=user_repo,
        staff_repo=staff_repo,
        qr_renderer=qr_renderer,
        frontend_base_url=FRONTEND_URL,
        search_limit=10,
    )


@pytest.fixture
def schedule_service(lot_repo, schedule_repo, price_tier_repo):
    return ScheduleService(
        lot_repo=lot_repo,
        schedule_repo=schedule_repo,
        price_tier_repo=price_tier_repo,
        lot_timezone=LOT_TIMEZONE,
    )


@pytest.fixture
def price_tier_service(schedule_repo, price_tier_repo):
    return PriceTierService(schedule_repo=schedule_repo, price_tier_repo=price_tier_repo)


@pytest.fixture
def checkout_service(lot_repo, schedule_repo, price_tier_repo, order_repo, payment_gateway, email_sender, qr_renderer):
    return CheckoutService(
        lot_repo=lot_repo,
        schedule_repo=schedule_repo,
        price_tier_repo=price_tier_repo,
        order_repo=order_repo,
        payment_gateway=payment_gateway,
        email_sender=email_sender,
        qr_renderer=qr_renderer,
        currency="usd",
        frontend_base_url=FRONTEND_URL,
        default_pass_hours=1,
        lot_timezone=LOT_TIMEZONE,
    )


@pytest.fixture
def order_service(lot_repo, order_repo):
    return OrderService(lot_repo=lot_repo, order_repo=order_repo, page_size=20)


@pytest.fixture
def staff_service(lot_repo, user_repo, staff_repo):
    return StaffService(lot_repo=lot_repo, user_repo=user_repo, staff_repo=staff_repo)


@pytest.fixture
def dashboard_service(lot_repo, schedule_repo, order_repo):
    return DashboardService(
        lot_repo=lot_repo,
        schedule_repo=schedule_repo,
        order_repo=order_repo,
        lot_timezone=LOT_TIMEZONE,
    )


@pytest.fixture
async def sample_user(staff_service):
    """Create a lot owner."""
    return await staff_service.create_user("owner@example.com", role=UserRole.OWNER, full_name="Olivia Owner")


@pytest.fixture
async def sample_lot(lot_service, sample_user):
    """Create an open lot supervised by ``sample_user``."""
    return await lot_service.create_lot(
        ParkingLot(
            name="Main Street Garage",
            location="123 Main St, Springfield",
            phone="+15555550100",
            space_count=50,
            description_tag="downtown",
            amenities=["EV charging", "Covered"],
        ),
        creator_id=sample_user.id,
    )


@pytest.fixture
async def sample_schedule(schedule_service, sample_lot):
    """Weekday daytime schedule: Monday to Friday, 6:00 AM to 6:00 PM lot time."""
    return await schedule_service.create_schedule(
        sample_lot.id,
        Schedule(
            lot_id=sample_lot.id,
            name="Weekday Daytime",
            days=[1, 2, 3, 4, 5],
            start_time=time(6, 0),
            end_time=time(18, 0),
        ),
    )


@pytest.fixture
async def sample_tier(price_tier_service, sample_schedule):
    """Two hours for $12.50."""
    return await price_tier_service.create_price_tier(sample_schedule.id, max_hours=2, price=12.5)


@pytest.fixture
def customer():
    return CustomerInfo(
        email="driver@example.com",
        phone="+15555550199",
        license_plate=" abc123 ",
        license_state="ny",
    )
