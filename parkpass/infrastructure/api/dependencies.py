from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from parkpass.application.gateways import AbstractPaymentGateway, AbstractEmailSender
from parkpass.application.services.checkout_service import CheckoutService
from parkpass.application.services.dashboard_service import DashboardService
from parkpass.application.services.lot_service import LotService
from parkpass.application.services.order_service import OrderService
from parkpass.application.services.price_tier_service import PriceTierService
from parkpass.application.services.schedule_service import ScheduleService
from parkpass.application.services.staff_service import StaffService
from parkpass.infrastructure.notifications.sendgrid_email import SendGridEmailSender
from parkpass.infrastructure.payments.stripe_gateway import StripePaymentGateway
from parkpass.infrastructure.persistence.database import get_async_db
from parkpass.infrastructure.persistence.sqlalchemy_repositories import (
    SQLAlchemyLotRepository,
    SQLAlchemyScheduleRepository,
    SQLAlchemyPriceTierRepository,
    SQLAlchemyOrderRepository,
    SQLAlchemyUserRepository,
    SQLAlchemyLotStaffRepository,
)
from parkpass.infrastructure.qr.qr_code import QrCodeRenderer


def get_payment_gateway() -> AbstractPaymentGateway:
    return StripePaymentGateway()


def get_email_sender() -> AbstractEmailSender:
    return SendGridEmailSender()


def get_lot_service(db: AsyncSession = Depends(get_async_db)) -> LotService:
    return LotService(
        lot_repo=SQLAlchemyLotRepository(db),
        user_repo=SQLAlchemyUserRepository(db),
        staff_repo=SQLAlchemyLotStaffRepository(db),
        qr_renderer=QrCodeRenderer(),
    )


def get_schedule_service(db: AsyncSession = Depends(get_async_db)) -> ScheduleService:
    return ScheduleService(
        lot_repo=SQLAlchemyLotRepository(db),
        schedule_repo=SQLAlchemyScheduleRepository(db),
        price_tier_repo=SQLAlchemyPriceTierRepository(db),
    )


def get_price_tier_service(db: AsyncSession = Depends(get_async_db)) -> PriceTierService:
    return PriceTierService(
        schedule_repo=SQLAlchemyScheduleRepository(db),
        price_tier_repo=SQLAlchemyPriceTierRepository(db),
    )


def get_checkout_service(
    db: AsyncSession = Depends(get_async_db),
    payment_gateway: AbstractPaymentGateway = Depends(get_payment_gateway),
    email_sender: AbstractEmailSender = Depends(get_email_sender),
) -> CheckoutService:
    return CheckoutService(
        lot_repo=SQLAlchemyLotRepository(db),
        schedule_repo=SQLAlchemyScheduleRepository(db),
        price_tier_repo=SQLAlchemyPriceTierRepository(db),
        order_repo=SQLAlchemyOrderRepository(db),
        payment_gateway=payment_gateway,
        email_sender=email_sender,
        qr_renderer=QrCodeRenderer(),
    )


def get_order_service(db: AsyncSession = Depends(get_async_db)) -> OrderService:
    return OrderService(
        lot_repo=SQLAlchemyLotRepository(db),
        order_repo=SQLAlchemyOrderRepository(db),
    )


def get_staff_service(db: AsyncSession = Depends(get_async_db)) -> StaffService:
    return StaffService(
        lot_repo=SQLAlchemyLotRepository(db),
        user_repo=SQLAlchemyUserRepository(db),
        staff_repo=SQLAlchemyLotStaffRepository(db),
    )


def get_dashboard_service(db: AsyncSession = Depends(get_async_db)) -> DashboardService:
    return DashboardService(
        lot_repo=SQLAlchemyLotRepository(db),
        schedule_repo=SQLAlchemyScheduleRepository(db),
        order_repo=SQLAlchemyOrderRepository(db),
    )
