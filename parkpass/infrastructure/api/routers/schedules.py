from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException
from typing import List, Optional

from parkpass.application.services.price_tier_service import PriceTierService
from parkpass.application.services.schedule_service import ScheduleService
from parkpass.domain.entities import Schedule
from parkpass.domain.exceptions import NotFoundError
from parkpass.infrastructure.api.dependencies import get_schedule_service, get_price_tier_service
from parkpass.infrastructure.api.schemas.booking import (
    ScheduleCreate, ScheduleUpdate, ScheduleResponse, ScheduleRatesResponse,
    PriceTierCreate, PriceTierUpdate, PriceTierResponse,
)

router = APIRouter(prefix="/api", tags=["schedules"])


@router.get("/lots/{lot_id}/schedules", response_model=List[ScheduleResponse])
async def get_lot_schedules(lot_id: int, service: ScheduleService = Depends(get_schedule_service)):
    try:
        return await service.get_lot_schedules(lot_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Internal error: {str(e)}")


@router.post("/lots/{lot_id}/schedules", response_model=ScheduleResponse, status_code=201)
async def create_schedule(
    lot_id: int,
    schedule_data: ScheduleCreate,
    service: ScheduleService = Depends(get_schedule_service)
):
    try:
        return await service.create_schedule(lot_id, Schedule(lot_id=lot_id, **schedule_data.model_dump()))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Internal error: {str(e)}")


@router.get("/lots/{lot_id}/schedules/active", response_model=List[ScheduleResponse])
async def get_active_schedules(
    lot_id: int,
    at: Optional[datetime] = None,
    service: ScheduleService = Depends(get_schedule_service)
):
    try:
        return await service.get_schedules_at(lot_id, at)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Internal error: {str(e)}")


@router.get("/lots/slug/{slug}/rates", response_model=List[ScheduleRatesResponse])
async def get_available_rates(
    slug: str,
    at: Optional[datetime] = None,
    service: ScheduleService = Depends(get_schedule_service)
):
    try:
        return await service.get_available_rates(slug, at)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Internal error: {str(e)}")


@router.get("/schedules/{schedule_id}", response_model=ScheduleResponse)
async def get_schedule(schedule_id: int, service: ScheduleService = Depends(get_schedule_service)):
    try:
        return await service.get_schedule(schedule_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Internal error: {str(e)}")


@router.patch("/schedules/{schedule_id}", response_model=ScheduleResponse)
async def update_schedule(
    schedule_id: int,
    schedule_data: ScheduleUpdate,
    service: ScheduleService = Depends(get_schedule_service)
):
    try:
        return await service.update_schedule(schedule_id, schedule_data.model_dump(exclude_unset=True))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Internal error: {str(e)}")


@router.delete("/schedules/{schedule_id}", status_code=204)
async def delete_schedule(schedule_id: int, service: ScheduleService = Depends(get_schedule_service)):
    try:
        await service.delete_schedule(schedule_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Internal error: {str(e)}")


@router.get("/schedules/{schedule_id}/price-tiers", response_model=List[PriceTierResponse])
async def get_price_tiers(schedule_id: int, service: PriceTierService = Depends(get_price_tier_service)):
    try:
        return await service.get_price_tiers(schedule_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Internal error: {str(e)}")


@router.post("/schedules/{schedule_id}/price-tiers", response_model=PriceTierResponse, status_code=201)
async def create_price_tier(
    schedule_id: int,
    tier_data: PriceTierCreate,
    service: PriceTierService = Depends(get_price_tier_service)
):
    try:
        return await service.create_price_tier(schedule_id, tier_data.max_hours, tier_data.price)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Internal error: {str(e)}")


@router.get("/price-tiers/{price_tier_id}", response_model=PriceTierResponse)
async def get_price_tier(price_tier_id: int, service: PriceTierService = Depends(get_price_tier_service)):
    try:
        return await service.get_price_tier(price_tier_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Internal error: {str(e)}")


@router.patch("/price-tiers/{price_tier_id}", response_model=PriceTierResponse)
async def update_price_tier(
    price_tier_id: int,
    tier_data: PriceTierUpdate,
    service: PriceTierService = Depends(get_price_tier_service)
):
    try:
        return await service.update_price_tier(price_tier_id, tier_data.max_hours, tier_data.price)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Internal error: {str(e)}")


@router.delete("/price-tiers/{price_tier_id}", status_code=204)
async def delete_price_tier(price_tier_id: int, service: PriceTierService = Depends(get_price_tier_service)):
    try:
        await service.delete_price_tier(price_tier_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Internal error: {str(e)}")
