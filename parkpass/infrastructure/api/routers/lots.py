from fastapi import APIRouter, Depends, HTTPException
from typing import List, Optional

from parkpass.application.services.lot_service import LotService
from parkpass.domain.entities import ParkingLot
from parkpass.domain.exceptions import NotFoundError
from parkpass.infrastructure.api.dependencies import get_lot_service
from parkpass.infrastructure.api.schemas.booking import LotCreate, LotUpdate, LotStatusUpdate, LotResponse

router = APIRouter(prefix="/api/lots", tags=["lots"])


@router.get("", response_model=List[LotResponse])
async def search_lots(q: Optional[str] = None, service: LotService = Depends(get_lot_service)):
    try:
        return await service.search_lots(q)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Internal error: {str(e)}")


@router.post("", response_model=LotResponse, status_code=201)
async def create_lot(lot_data: LotCreate, service: LotService = Depends(get_lot_service)):
    try:
        lot = ParkingLot(**lot_data.model_dump(exclude={"creator_id"}))
        return await service.create_lot(lot, creator_id=lot_data.creator_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Internal error: {str(e)}")


@router.get("/slug/{slug}", response_model=LotResponse)
async def get_lot_by_slug(slug: str, service: LotService = Depends(get_lot_service)):
    try:
        return await service.get_lot_by_slug(slug)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Internal error: {str(e)}")


@router.get("/{lot_id}", response_model=LotResponse)
async def get_lot(lot_id: int, service: LotService = Depends(get_lot_service)):
    try:
        return await service.get_lot(lot_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Internal error: {str(e)}")


@router.patch("/{lot_id}", response_model=LotResponse)
async def update_lot(lot_id: int, lot_data: LotUpdate, service: LotService = Depends(get_lot_service)):
    try:
        return await service.update_lot(lot_id, lot_data.model_dump(exclude_unset=True))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Internal error: {str(e)}")


@router.post("/{lot_id}/status", response_model=LotResponse)
async def set_lot_status(lot_id: int, status_data: LotStatusUpdate, service: LotService = Depends(get_lot_service)):
    try:
        return await service.set_status(lot_id, status_data.status)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Internal error: {str(e)}")


@router.post("/{lot_id}/qr-code", response_model=LotResponse)
async def generate_lot_qr_code(lot_id: int, service: LotService = Depends(get_lot_service)):
    try:
        return await service.generate_qr_code(lot_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Internal error: {str(e)}")
