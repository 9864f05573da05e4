from fastapi import APIRouter, Depends, HTTPException
from typing import List, Optional

from parkpass.application.services.lot_service import LotService
from parkpass.application.services.staff_service import StaffService
from parkpass.domain.common import UserRole
from parkpass.domain.exceptions import NotFoundError
from parkpass.infrastructure.api.dependencies import get_lot_service, get_staff_service
from parkpass.infrastructure.api.schemas.booking import UserCreate, UserResponse, StaffAssign, StaffResponse, LotResponse

router = APIRouter(prefix="/api", tags=["staff"])


@router.post("/users", response_model=UserResponse, status_code=201)
async def create_user(user_data: UserCreate, service: StaffService = Depends(get_staff_service)):
    try:
        return await service.create_user(
            user_data.email, role=user_data.role, full_name=user_data.full_name, phone=user_data.phone
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Internal error: {str(e)}")


@router.get("/users", response_model=List[UserResponse])
async def list_users(role: Optional[UserRole] = None, service: StaffService = Depends(get_staff_service)):
    try:
        return await service.list_users(role)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Internal error: {str(e)}")


@router.get("/users/{user_id}", response_model=UserResponse)
async def get_user(user_id: int, service: StaffService = Depends(get_staff_service)):
    try:
        return await service.get_user(user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Internal error: {str(e)}")


@router.get("/users/{user_id}/lots", response_model=List[LotResponse])
async def get_supervised_lots(user_id: int, service: LotService = Depends(get_lot_service)):
    try:
        return await service.get_lots_by_supervisor(user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Internal error: {str(e)}")


@router.get("/lots/{lot_id}/staff", response_model=List[StaffResponse])
async def get_lot_staff(lot_id: int, service: StaffService = Depends(get_staff_service)):
    try:
        return await service.get_lot_staff(lot_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Internal error: {str(e)}")


@router.post("/lots/{lot_id}/staff", response_model=StaffResponse, status_code=201)
async def assign_staff(lot_id: int, staff_data: StaffAssign, service: StaffService = Depends(get_staff_service)):
    try:
        return await service.assign_staff(lot_id, staff_data.user_id, staff_data.role)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Internal error: {str(e)}")


@router.delete("/lots/{lot_id}/staff/{user_id}", status_code=204)
async def remove_staff(lot_id: int, user_id: int, service: StaffService = Depends(get_staff_service)):
    try:
        await service.remove_staff(lot_id, user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Internal error: {str(e)}")
