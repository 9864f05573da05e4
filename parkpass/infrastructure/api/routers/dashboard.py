from fastapi import APIRouter, Depends, HTTPException, Query
from typing import List

from parkpass.application.services.dashboard_service import DashboardService
from parkpass.domain.exceptions import NotFoundError
from parkpass.infrastructure.api.dependencies import get_dashboard_service
from parkpass.infrastructure.api.schemas.booking import DashboardOverview, LotAccounting, DailyRevenue

router = APIRouter(prefix="/api", tags=["dashboard"])


@router.get("/dashboard/overview", response_model=DashboardOverview)
async def get_overview(service: DashboardService = Depends(get_dashboard_service)):
    try:
        return await service.get_overview()
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Internal error: {str(e)}")


@router.get("/lots/{lot_id}/accounting", response_model=LotAccounting)
async def get_lot_accounting(lot_id: int, service: DashboardService = Depends(get_dashboard_service)):
    try:
        return await service.get_lot_accounting(lot_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Internal error: {str(e)}")


@router.get("/lots/{lot_id}/accounting/revenue", response_model=List[DailyRevenue])
async def get_revenue_by_day(
    lot_id: int,
    days: int = Query(default=7, ge=1, le=366),
    service: DashboardService = Depends(get_dashboard_service)
):
    try:
        return await service.get_revenue_by_day(lot_id, days)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Internal error: {str(e)}")
