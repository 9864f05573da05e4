import base64
from typing import List, Optional, Dict, Any
from loguru import logger

from parkpass.application.gateways import AbstractQrCodeRenderer
from parkpass.application.repositories import AbstractLotRepository, AbstractUserRepository, AbstractLotStaffRepository
from parkpass.config.settings_env import settings
from parkpass.domain.common import LotStatus, StaffRole
from parkpass.domain.entities import ParkingLot
from parkpass.domain.exceptions import NotFoundError
from parkpass.shared.utils import slugify

UPDATABLE_LOT_FIELDS = (
    "name", "slug", "location", "phone", "space_count", "status", "description", "description_tag",
    "latitude", "longitude", "open", "close", "is_24_hours", "amenities", "images",
)
REQUIRED_LOT_FIELDS = ("name", "location", "phone", "space_count", "status", "is_24_hours")


class LotService:
    def __init__(
        self,
        lot_repo: AbstractLotRepository,
        user_repo: AbstractUserRepository,
        staff_repo: AbstractLotStaffRepository,
        qr_renderer: Optional[AbstractQrCodeRenderer] = None,
        frontend_base_url: str = settings.FRONTEND_BASE_URL,
        search_limit: int = settings.LOT_SEARCH_LIMIT,
    ):
        self.lot_repo = lot_repo
        self.user_repo = user_repo
        self.staff_repo = staff_repo
        self.qr_renderer = qr_renderer
        self.frontend_base_url = frontend_base_url.rstrip("/")
        self.search_limit = search_limit

    async def _unique_slug(self, base: str, lot_id: Optional[int] = None) -> str:
        base = slugify(base)
        slug = base
        suffix = 2
        while True:
            existing = await self.lot_repo.get_by_slug(slug)
            if existing is None or existing.id == lot_id:
                return slug
            slug = f"{base}-{suffix}"
            suffix += 1

    async def create_lot(self, lot: ParkingLot, creator_id: Optional[int] = None) -> ParkingLot:
        if lot.space_count is None or lot.space_count <= 0:
            raise ValueError("Total spaces must be a positive number")

        if creator_id is not None and await self.user_repo.get_by_id(creator_id) is None:
            raise NotFoundError("User", creator_id)

        lot.slug = await self._unique_slug(lot.slug or lot.name)
        new_lot = await self.lot_repo.add(lot)

        if creator_id is not None:
            await self.staff_repo.save(new_lot.id, creator_id, StaffRole.SUPERVISOR)

        logger.info(f"Lot {new_lot.slug} created (id={new_lot.id})")
        return new_lot

    async def get_lot(self, lot_id: int) -> ParkingLot:
        lot = await self.lot_repo.get_by_id(lot_id)
        if lot is None:
            raise NotFoundError("Lot", lot_id)
        return lot

    async def get_lot_by_slug(self, slug: str) -> ParkingLot:
        lot = await self.lot_repo.get_by_slug(slug)
        if lot is None:
            raise NotFoundError("Lot", slug)
        return lot

    async def update_lot(self, lot_id: int, changes: Dict[str, Any]) -> ParkingLot:
        lot = await self.get_lot(lot_id)

        for field, value in changes.items():
            if field not in UPDATABLE_LOT_FIELDS:
                raise ValueError(f"Unknown lot field: {field}")
            if value is None and field in REQUIRED_LOT_FIELDS:
                raise ValueError(f"Lot field {field} cannot be empty")
            setattr(lot, field, value)

        if lot.space_count is None or lot.space_count <= 0:
            raise ValueError("Total spaces must be a positive number")
        if "slug" in changes:
            lot.slug = await self._unique_slug(lot.slug or lot.name, lot_id=lot.id)

        updated = await self.lot_repo.update(lot)
        logger.info(f"Lot {updated.id} updated: {sorted(changes)}")
        return updated

    async def set_status(self, lot_id: int, status: LotStatus) -> ParkingLot:
        return await self.update_lot(lot_id, {"status": LotStatus(status)})

    async def search_lots(self, query: Optional[str] = None) -> List[ParkingLot]:
        return await self.lot_repo.search((query or "").strip(), self.search_limit)

    async def get_lots_by_supervisor(self, user_id: int) -> List[ParkingLot]:
        if await self.user_repo.get_by_id(user_id) is None:
            raise NotFoundError("User", user_id)
        return await self.lot_repo.get_by_supervisor(user_id)

    def lot_url(self, lot: ParkingLot) -> str:
        return f"{self.frontend_base_url}/{lot.slug}"

    async def generate_qr_code(self, lot_id: int) -> ParkingLot:
        if self.qr_renderer is None:
            raise RuntimeError("No QR code renderer configured")

        lot = await self.get_lot(lot_id)
        png = self.qr_renderer.render_png(self.lot_url(lot))
        lot.qr_image = "data:image/png;base64," + base64.b64encode(png).decode("ascii")

        updated = await self.lot_repo.update(lot)
        logger.info(f"QR code generated for lot {lot.slug}")
        return updated
