import math
from typing import Optional, Dict
from loguru import logger

from parkpass.application.repositories import AbstractLotRepository, AbstractOrderRepository
from parkpass.config.settings_env import settings
from parkpass.domain.common import PaymentStatus
from parkpass.domain.entities import Order
from parkpass.domain.exceptions import NotFoundError


class OrderService:
    def __init__(
        self,
        lot_repo: AbstractLotRepository,
        order_repo: AbstractOrderRepository,
        page_size: int = settings.ORDERS_PAGE_SIZE,
    ):
        self.lot_repo = lot_repo
        self.order_repo = order_repo
        self.page_size = page_size

    async def get_lot_orders(self, lot_id: int, search: Optional[str] = None, page: int = 1, per_page: Optional[int] = None) -> Dict:
        if await self.lot_repo.get_by_id(lot_id) is None:
            raise NotFoundError("Lot", lot_id)
        if page < 1:
            raise ValueError("Page numbers start at 1")

        per_page = per_page or self.page_size
        search = (search or "").strip() or None
        total = await self.order_repo.count(lot_id, search)
        items = await self.order_repo.get_by_lot(lot_id, search, offset=(page - 1) * per_page, limit=per_page)

        return {
            "items": items,
            "total": total,
            "page": page,
            "per_page": per_page,
            "total_pages": math.ceil(total / per_page) if total else 0,
        }

    async def get_order(self, order_id: int) -> Order:
        order = await self.order_repo.get_by_id(order_id)
        if order is None:
            raise NotFoundError("Order", order_id)
        return order

    async def mark_order_paid(self, order_id: int) -> Order:
        order = await self.get_order(order_id)
        if order.payment_status == PaymentStatus.PAID:
            raise ValueError(f"Order {order_id} is already paid")
        order.payment_status = PaymentStatus.PAID
        order = await self.order_repo.update(order)
        logger.info(f"Order {order_id} marked as paid")
        return order

    async def count_orders(self, lot_id: Optional[int] = None) -> int:
        return await self.order_repo.count(lot_id)
