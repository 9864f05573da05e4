import pytest
from datetime import datetime, timezone

from parkpass.application.services.checkout_service import CustomerInfo
from parkpass.domain.common import PaymentStatus
from parkpass.domain.entities import Order
from parkpass.domain.exceptions import NotFoundError, DuplicateOrderError

START = datetime(2025, 1, 6, 14, 0, tzinfo=timezone.utc)


def _customer(plate, email="driver@example.com"):
    return CustomerInfo(email=email, phone="+15555550199", license_plate=plate, license_state="NY")


@pytest.fixture
async def reservations(checkout_service, sample_lot, sample_schedule, sample_tier):
    """Three pending reservations, oldest first."""
    orders = []
    for plate, email in (("AAA111", "alice@example.com"), ("BBB222", "bob@example.com"), ("CCC333", "carol@example.com")):
        orders.append(await checkout_service.reserve(
            sample_lot.id, sample_schedule.id, _customer(plate, email), START, price_tier_id=sample_tier.id
        ))
    return orders


class TestLotOrders:
    """Test the paginated, searchable order list of a lot."""

    async def test_newest_first(self, order_service, sample_lot, reservations):
        page = await order_service.get_lot_orders(sample_lot.id)

        assert [o.license_plate for o in page["items"]] == ["CCC333", "BBB222", "AAA111"]
        assert page["total"] == 3
        assert page["page"] == 1
        assert page["per_page"] == 20
        assert page["total_pages"] == 1

    async def test_pagination(self, order_service, sample_lot, reservations):
        first = await order_service.get_lot_orders(sample_lot.id, page=1, per_page=2)
        second = await order_service.get_lot_orders(sample_lot.id, page=2, per_page=2)

        assert [o.license_plate for o in first["items"]] == ["CCC333", "BBB222"]
        assert [o.license_plate for o in second["items"]] == ["AAA111"]
        assert first["total_pages"] == 2
        assert second["total"] == 3

    async def test_search_by_plate_or_email(self, order_service, sample_lot, reservations):
        by_plate = await order_service.get_lot_orders(sample_lot.id, search="bbb")
        by_email = await order_service.get_lot_orders(sample_lot.id, search="carol@")

        assert [o.license_plate for o in by_plate["items"]] == ["BBB222"]
        assert by_plate["total"] == 1
        assert [o.license_plate for o in by_email["items"]] == ["CCC333"]

    async def test_blank_search_lists_everything(self, order_service, sample_lot, reservations):
        page = await order_service.get_lot_orders(sample_lot.id, search="   ")
        assert page["total"] == 3

    async def test_empty_lot(self, order_service, sample_lot):
        page = await order_service.get_lot_orders(sample_lot.id)
        assert page["items"] == []
        assert page["total_pages"] == 0

    async def test_page_must_be_positive(self, order_service, sample_lot):
        with pytest.raises(ValueError, match="Page numbers start at 1"):
            await order_service.get_lot_orders(sample_lot.id, page=0)

    async def test_unknown_lot(self, order_service):
        with pytest.raises(NotFoundError):
            await order_service.get_lot_orders(999)


class TestOrderStatus:
    async def test_get_order(self, order_service, reservations):
        order = await order_service.get_order(reservations[0].id)
        assert order.license_plate == "AAA111"

    async def test_get_missing_order(self, order_service):
        with pytest.raises(NotFoundError, match="Order 999 not found"):
            await order_service.get_order(999)

    async def test_mark_order_paid(self, order_service, reservations):
        order = await order_service.mark_order_paid(reservations[0].id)
        assert order.payment_status == PaymentStatus.PAID

        with pytest.raises(ValueError, match="already paid"):
            await order_service.mark_order_paid(reservations[0].id)

    async def test_count_orders(self, order_service, sample_lot, reservations):
        assert await order_service.count_orders() == 3
        assert await order_service.count_orders(sample_lot.id) == 3
        assert await order_service.count_orders(999) == 0


class TestOrderRepository:
    async def test_duplicate_payment_intent(self, order_repo, sample_lot, sample_schedule):
        def paid_order():
            return Order(
                lot_id=sample_lot.id,
                schedule_id=sample_schedule.id,
                email="driver@example.com",
                phone="+15555550199",
                license_plate="ABC123",
                license_state="NY",
                start_time=START,
                total_amount=12.5,
                payment_status=PaymentStatus.PAID,
                stripe_payment_intent_id="pi_dup",
            )

        first = await order_repo.add(paid_order())
        with pytest.raises(DuplicateOrderError) as exc_info:
            await order_repo.add(paid_order())

        assert exc_info.value.payment_intent_id == "pi_dup"
        assert (await order_repo.get_by_payment_intent_id("pi_dup")).id == first.id
        assert await order_repo.count(sample_lot.id) == 1
