import base64
import pytest

from parkpass.domain.common import LotStatus, StaffRole
from parkpass.domain.entities import ParkingLot
from parkpass.domain.exceptions import NotFoundError

FAKE_PNG = b"\x89PNG\r\n\x1a\nfake"
FRONTEND_URL = "https://parkpass.test"


def _lot(name="Harbor Lot", **kwargs):
    return ParkingLot(name=name, location="9 Harbor Way", phone="+15555550111", space_count=kwargs.pop("space_count", 20), **kwargs)


class TestCreateLot:
    """Test lot creation."""

    async def test_create_lot_generates_slug(self, lot_service):
        lot = await lot_service.create_lot(_lot("Harbor Lot"))
        assert lot.id is not None
        assert lot.slug == "harbor-lot"
        assert lot.status == LotStatus.OPEN
        assert lot.created_at is not None

    async def test_create_lot_keeps_slugs_unique(self, lot_service):
        first = await lot_service.create_lot(_lot("Harbor Lot"))
        second = await lot_service.create_lot(_lot("Harbor Lot"))
        third = await lot_service.create_lot(_lot("Harbor  lot!"))
        assert first.slug == "harbor-lot"
        assert second.slug == "harbor-lot-2"
        assert third.slug == "harbor-lot-3"

    async def test_create_lot_with_explicit_slug(self, lot_service):
        lot = await lot_service.create_lot(_lot("Harbor Lot", slug="The Harbor"))
        assert lot.slug == "the-harbor"

    async def test_creator_becomes_supervisor(self, lot_service, sample_user, staff_repo):
        lot = await lot_service.create_lot(_lot(), creator_id=sample_user.id)
        assignment = await staff_repo.get(lot.id, sample_user.id)
        assert assignment.role == StaffRole.SUPERVISOR

    async def test_unknown_creator(self, lot_service):
        with pytest.raises(NotFoundError, match="User 999 not found"):
            await lot_service.create_lot(_lot(), creator_id=999)

    async def test_space_count_must_be_positive(self, lot_service):
        with pytest.raises(ValueError, match="positive"):
            await lot_service.create_lot(_lot(space_count=0))

    async def test_amenities_round_trip(self, sample_lot, lot_service):
        lot = await lot_service.get_lot(sample_lot.id)
        assert lot.amenities == ["EV charging", "Covered"]


class TestLookupAndUpdate:
    """Test lot lookup, updates and status changes."""

    async def test_get_lot_by_slug(self, lot_service, sample_lot):
        lot = await lot_service.get_lot_by_slug("main-street-garage")
        assert lot.id == sample_lot.id

    async def test_get_missing_lot(self, lot_service):
        with pytest.raises(NotFoundError):
            await lot_service.get_lot(404)
        with pytest.raises(NotFoundError):
            await lot_service.get_lot_by_slug("nowhere")

    async def test_update_lot_fields(self, lot_service, sample_lot):
        updated = await lot_service.update_lot(sample_lot.id, {"space_count": 75, "description": "Now bigger"})
        assert updated.space_count == 75
        assert updated.description == "Now bigger"
        assert updated.slug == sample_lot.slug

    async def test_update_slug_stays_unique(self, lot_service, sample_lot):
        other = await lot_service.create_lot(_lot("Harbor Lot"))
        updated = await lot_service.update_lot(other.id, {"slug": "main-street-garage"})
        assert updated.slug == "main-street-garage-2"

    async def test_update_rejects_unknown_field(self, lot_service, sample_lot):
        with pytest.raises(ValueError, match="Unknown lot field"):
            await lot_service.update_lot(sample_lot.id, {"id": 5})

    async def test_update_rejects_zero_spaces(self, lot_service, sample_lot):
        with pytest.raises(ValueError):
            await lot_service.update_lot(sample_lot.id, {"space_count": 0})

    @pytest.mark.parametrize("field", ["name", "location", "phone", "space_count"])
    async def test_update_rejects_null_required_field(self, lot_service, sample_lot, field):
        with pytest.raises(ValueError, match=f"Lot field {field} cannot be empty"):
            await lot_service.update_lot(sample_lot.id, {field: None})

        lot = await lot_service.get_lot(sample_lot.id)
        assert lot.name == "Main Street Garage"

    async def test_set_status(self, lot_service, sample_lot):
        closed = await lot_service.set_status(sample_lot.id, LotStatus.CLOSED)
        assert closed.status == LotStatus.CLOSED
        assert closed.is_open is False


class TestSearch:
    """Test lot search."""

    async def test_search_by_name_location_and_tag(self, lot_service, sample_lot):
        await lot_service.create_lot(_lot("Harbor Lot", description_tag="waterfront"))

        assert [lot.name for lot in await lot_service.search_lots("main street")] == ["Main Street Garage"]
        assert [lot.name for lot in await lot_service.search_lots("springfield")] == ["Main Street Garage"]
        assert [lot.name for lot in await lot_service.search_lots("WATERFRONT")] == ["Harbor Lot"]

    async def test_empty_search_lists_lots_by_name(self, lot_service, sample_lot):
        await lot_service.create_lot(_lot("Airport Lot"))
        lots = await lot_service.search_lots("  ")
        assert [lot.name for lot in lots] == ["Airport Lot", "Main Street Garage"]

    async def test_search_is_limited(self, lot_service):
        for i in range(12):
            await lot_service.create_lot(_lot(f"Lot {i:02d}"))
        assert len(await lot_service.search_lots()) == 10


class TestSupervisorLots:
    async def test_lots_by_supervisor(self, lot_service, sample_lot, sample_user):
        lots = await lot_service.get_lots_by_supervisor(sample_user.id)
        assert [lot.id for lot in lots] == [sample_lot.id]

    async def test_employee_lots_are_not_listed(self, lot_service, staff_service, sample_lot):
        employee = await staff_service.create_user("emp@example.com")
        await staff_service.assign_staff(sample_lot.id, employee.id, StaffRole.EMPLOYEE)
        assert await lot_service.get_lots_by_supervisor(employee.id) == []

    async def test_unknown_supervisor(self, lot_service):
        with pytest.raises(NotFoundError):
            await lot_service.get_lots_by_supervisor(999)


class TestQrCode:
    async def test_generate_qr_code(self, lot_service, sample_lot, qr_renderer):
        lot = await lot_service.generate_qr_code(sample_lot.id)

        qr_renderer.render_png.assert_called_once_with(f"{FRONTEND_URL}/main-street-garage")
        assert lot.qr_image == "data:image/png;base64," + base64.b64encode(FAKE_PNG).decode("ascii")
        stored = await lot_service.get_lot(sample_lot.id)
        assert stored.qr_image == lot.qr_image
