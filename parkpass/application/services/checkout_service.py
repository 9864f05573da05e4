from datetime import datetime, timezone, timedelta
from typing import Optional, Tuple
from urllib.parse import urlencode
from zoneinfo import ZoneInfo
from loguru import logger

from parkpass.application.gateways import AbstractPaymentGateway, AbstractEmailSender, AbstractQrCodeRenderer, PaymentIntentResult
from parkpass.application.repositories import (
    AbstractLotRepository,
    AbstractScheduleRepository,
    AbstractPriceTierRepository,
    AbstractOrderRepository,
)
from parkpass.config.settings_env import settings
from parkpass.domain.common import PaymentStatus, VehicleType
from parkpass.domain.entities import ParkingLot, Schedule, PriceTier, Order
from parkpass.domain.exceptions import (
    NotFoundError,
    BookingError,
    DuplicateOrderError,
    EmailNotConfiguredError,
    EmailDeliveryError,
)
from parkpass.shared.custom_types import as_utc
from parkpass.shared.email_format import parking_checkout_email, parking_checkout_text


class CustomerInfo:
    def __init__(
        self,
        email: str,
        phone: str,
        license_plate: str,
        license_state: str,
        vehicle_type: VehicleType = VehicleType.STANDARD,
    ):
        self.email = email
        self.phone = phone
        self.license_plate = license_plate.strip().upper()
        self.license_state = license_state.strip().upper()
        self.vehicle_type = vehicle_type


class ParkingPass:
    def __init__(
        self,
        order: Order,
        lot: ParkingLot,
        park_after: datetime,
        exit_before: datetime,
        pass_url: str,
    ):
        self.order_id = order.id
        self.payment_intent_id = order.stripe_payment_intent_id
        self.license_plate = order.license_plate
        self.email = order.email
        self.amount = order.total_amount
        self.payment_status = order.payment_status
        self.lot_name = lot.name
        self.location = lot.location
        self.park_after = park_after
        self.exit_before = exit_before
        self.pass_url = pass_url


class CheckoutService:
    def __init__(
        self,
        lot_repo: AbstractLotRepository,
        schedule_repo: AbstractScheduleRepository,
        price_tier_repo: AbstractPriceTierRepository,
        order_repo: AbstractOrderRepository,
        payment_gateway: AbstractPaymentGateway,
        email_sender: Optional[AbstractEmailSender] = None,
        qr_renderer: Optional[AbstractQrCodeRenderer] = None,
        currency: str = settings.CURRENCY,
        frontend_base_url: str = settings.FRONTEND_BASE_URL,
        default_pass_hours: int = settings.DEFAULT_PASS_HOURS,
        lot_timezone: str = settings.LOT_TIMEZONE,
    ):
        self.lot_repo = lot_repo
        self.schedule_repo = schedule_repo
        self.price_tier_repo = price_tier_repo
        self.order_repo = order_repo
        self.payment_gateway = payment_gateway
        self.email_sender = email_sender
        self.qr_renderer = qr_renderer
        self.currency = currency
        self.frontend_base_url = frontend_base_url.rstrip("/")
        self.default_pass_hours = default_pass_hours
        self.lot_timezone = ZoneInfo(lot_timezone)

    async def _get_lot(self, lot_id: int) -> ParkingLot:
        lot = await self.lot_repo.get_by_id(lot_id)
        if lot is None:
            raise NotFoundError("Lot", lot_id)
        return lot

    async def _get_schedule_for_lot(self, lot: ParkingLot, schedule_id: int) -> Schedule:
        schedule = await self.schedule_repo.get_by_id(schedule_id)
        if schedule is None:
            raise NotFoundError("Schedule", schedule_id)
        if schedule.lot_id != lot.id:
            raise BookingError(f"Schedule {schedule_id} does not belong to lot {lot.id}")
        return schedule

    async def _resolve_price_tier(self, lot: ParkingLot, price_tier_id: int) -> Tuple[Schedule, PriceTier]:
        tier = await self.price_tier_repo.get_by_id(price_tier_id)
        if tier is None:
            raise NotFoundError("Price tier", price_tier_id)
        schedule = await self.schedule_repo.get_by_id(tier.schedule_id)
        if schedule is None or schedule.lot_id != lot.id:
            raise BookingError(f"Price tier {price_tier_id} is not offered at lot {lot.id}")
        return schedule, tier

    def pass_url(self, payment_intent_id: str) -> str:
        return f"{self.frontend_base_url}/checkout/success?{urlencode({'session_id': payment_intent_id})}"

    async def create_payment_intent(self, lot_id: int, price_tier_id: int, customer: CustomerInfo) -> PaymentIntentResult:
        lot = await self._get_lot(lot_id)
        if not lot.is_open:
            raise BookingError(f"Lot {lot.name} is closed")
        schedule, tier = await self._resolve_price_tier(lot, price_tier_id)

        intent = await self.payment_gateway.create_payment_intent(
            amount_cents=tier.amount_in_cents,
            currency=self.currency,
            metadata={
                "email": customer.email,
                "phone": customer.phone,
                "license_plate": customer.license_plate,
                "license_state": customer.license_state,
                "lot_id": str(lot.id),
                "schedule_id": str(schedule.id),
                "price_tier_id": str(tier.id),
            },
        )
        logger.info(f"Payment intent {intent.id} created for lot {lot.id}, tier {tier.id} ({tier.amount_in_cents} cents)")
        return intent

    async def confirm_checkout(self, payment_intent_id: str, lot_id: int, price_tier_id: int, customer: CustomerInfo) -> Order:
        existing = await self.order_repo.get_by_payment_intent_id(payment_intent_id)
        if existing:
            logger.info(f"Payment intent {payment_intent_id} already recorded as order {existing.id}")
            return existing

        lot = await self._get_lot(lot_id)
        schedule, tier = await self._resolve_price_tier(lot, price_tier_id)

        intent = await self.payment_gateway.retrieve_payment_intent(payment_intent_id)
        if not intent.succeeded:
            raise BookingError(f"Payment {payment_intent_id} has not succeeded (status: {intent.status})")
        if intent.amount != tier.amount_in_cents:
            raise BookingError(
                f"Payment {payment_intent_id} amount {intent.amount} does not match price tier amount {tier.amount_in_cents}"
            )
        paid_tier = intent.metadata.get("price_tier_id")
        if paid_tier is not None and paid_tier != str(tier.id):
            raise BookingError(f"Payment {payment_intent_id} was made for price tier {paid_tier}")

        try:
            order = await self.order_repo.add(Order(
                lot_id=lot.id,
                schedule_id=schedule.id,
                price_tier_id=tier.id,
                email=customer.email,
                phone=customer.phone,
                license_plate=customer.license_plate,
                license_state=customer.license_state,
                vehicle_type=customer.vehicle_type,
                start_time=datetime.now(timezone.utc),
                total_amount=tier.price,
                payment_status=PaymentStatus.PAID,
                stripe_payment_intent_id=payment_intent_id,
            ))
        except DuplicateOrderError:
            existing = await self.order_repo.get_by_payment_intent_id(payment_intent_id)
            logger.info(f"Payment intent {payment_intent_id} was recorded concurrently as order {existing.id}")
            return existing
        logger.info(f"Order {order.id} paid via {payment_intent_id} for {order.license_plate} at lot {lot.id}")

        await self._send_confirmation(self._build_pass(order, lot, tier))
        return order

    async def reserve(
        self,
        lot_id: int,
        schedule_id: int,
        customer: CustomerInfo,
        start_time: datetime,
        price_tier_id: Optional[int] = None,
    ) -> Order:
        lot = await self._get_lot(lot_id)
        if not lot.is_open:
            raise BookingError(f"Lot {lot.name} is closed")
        schedule = await self._get_schedule_for_lot(lot, schedule_id)

        total_amount = 0.0
        if price_tier_id is not None:
            tier_schedule, tier = await self._resolve_price_tier(lot, price_tier_id)
            if tier_schedule.id != schedule.id:
                raise BookingError(f"Price tier {price_tier_id} does not belong to schedule {schedule_id}")
            total_amount = tier.price

        order = await self.order_repo.add(Order(
            lot_id=lot.id,
            schedule_id=schedule.id,
            price_tier_id=price_tier_id,
            email=customer.email,
            phone=customer.phone,
            license_plate=customer.license_plate,
            license_state=customer.license_state,
            vehicle_type=customer.vehicle_type,
            start_time=as_utc(start_time),
            total_amount=total_amount,
            payment_status=PaymentStatus.PENDING,
        ))
        logger.info(f"Order {order.id} reserved for {order.license_plate} at lot {lot.id}, payment pending")
        return order

    def _build_pass(self, order: Order, lot: ParkingLot, tier: Optional[PriceTier]) -> ParkingPass:
        max_hours = tier.max_hours if tier else self.default_pass_hours
        return ParkingPass(
            order=order,
            lot=lot,
            park_after=order.start_time,
            exit_before=order.start_time + timedelta(hours=max_hours),
            pass_url=self.pass_url(order.stripe_payment_intent_id),
        )

    async def _send_confirmation(self, parking_pass: ParkingPass) -> None:
        if self.email_sender is None:
            logger.warning(f"No email sender configured, skipping confirmation for order {parking_pass.order_id}")
            return
        try:
            await self.email_sender.send(
                to=parking_pass.email,
                subject="Parking Pass",
                html=parking_checkout_email(parking_pass, self.lot_timezone),
                text=parking_checkout_text(parking_pass, self.lot_timezone),
            )
            logger.info(f"Confirmation email sent for order {parking_pass.order_id}")
        except (EmailNotConfiguredError, EmailDeliveryError) as e:
            logger.error(f"Confirmation email for order {parking_pass.order_id} failed: {e}")

    async def get_parking_pass(self, payment_intent_id: str) -> ParkingPass:
        order = await self.order_repo.get_by_payment_intent_id(payment_intent_id)
        if order is None:
            raise NotFoundError("Parking pass", payment_intent_id)
        lot = await self._get_lot(order.lot_id)
        tier = await self.price_tier_repo.get_by_id(order.price_tier_id) if order.price_tier_id else None
        return self._build_pass(order, lot, tier)

    async def get_pass_qr_code(self, payment_intent_id: str) -> bytes:
        if self.qr_renderer is None:
            raise RuntimeError("No QR code renderer configured")
        parking_pass = await self.get_parking_pass(payment_intent_id)
        return self.qr_renderer.render_png(parking_pass.pass_url)
