from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Optional

from parkpass.application.services.order_service import OrderService
from parkpass.domain.exceptions import NotFoundError
from parkpass.infrastructure.api.dependencies import get_order_service
from parkpass.infrastructure.api.schemas.booking import OrderPage, OrderResponse

router = APIRouter(prefix="/api", tags=["orders"])


@router.get("/lots/{lot_id}/orders", response_model=OrderPage)
async def get_lot_orders(
    lot_id: int,
    search: Optional[str] = None,
    page: int = Query(default=1, ge=1),
    service: OrderService = Depends(get_order_service)
):
    try:
        return await service.get_lot_orders(lot_id, search=search, page=page)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Internal error: {str(e)}")


@router.get("/orders/{order_id}", response_model=OrderResponse)
async def get_order(order_id: int, service: OrderService = Depends(get_order_service)):
    try:
        return await service.get_order(order_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Internal error: {str(e)}")


@router.post("/orders/{order_id}/paid", response_model=OrderResponse)
async def mark_order_paid(order_id: int, service: OrderService = Depends(get_order_service)):
    try:
        return await service.mark_order_paid(order_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Internal error: {str(e)}")
