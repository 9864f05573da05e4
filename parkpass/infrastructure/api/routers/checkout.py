from fastapi import APIRouter, Depends, HTTPException, Response

from parkpass.application.services.checkout_service import CheckoutService, CustomerInfo
from parkpass.domain.exceptions import NotFoundError, PaymentProviderError
from parkpass.infrastructure.api.dependencies import get_checkout_service
from parkpass.infrastructure.api.schemas.booking import (
    CustomerInfoSchema, PaymentIntentRequest, PaymentIntentResponse, CheckoutConfirmRequest,
    ReservationRequest, OrderResponse, ParkingPassResponse,
)

router = APIRouter(prefix="/api", tags=["checkout"])


def _customer(customer: CustomerInfoSchema) -> CustomerInfo:
    return CustomerInfo(**customer.model_dump())


@router.post("/checkout/payment-intent", response_model=PaymentIntentResponse, status_code=201)
async def create_payment_intent(
    request: PaymentIntentRequest,
    service: CheckoutService = Depends(get_checkout_service)
):
    try:
        intent = await service.create_payment_intent(request.lot_id, request.price_tier_id, _customer(request.customer))
        return PaymentIntentResponse(
            payment_intent_id=intent.id,
            client_secret=intent.client_secret,
            amount=intent.amount,
            currency=intent.currency,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PaymentProviderError as e:
        raise HTTPException(status_code=502, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Internal error: {str(e)}")


@router.post("/checkout/confirm", response_model=OrderResponse)
async def confirm_checkout(
    request: CheckoutConfirmRequest,
    service: CheckoutService = Depends(get_checkout_service)
):
    try:
        return await service.confirm_checkout(
            request.payment_intent_id, request.lot_id, request.price_tier_id, _customer(request.customer)
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PaymentProviderError as e:
        raise HTTPException(status_code=502, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Internal error: {str(e)}")


@router.post("/checkout/reserve", response_model=OrderResponse, status_code=201)
async def reserve(
    request: ReservationRequest,
    service: CheckoutService = Depends(get_checkout_service)
):
    try:
        return await service.reserve(
            request.lot_id,
            request.schedule_id,
            _customer(request.customer),
            request.start_time,
            price_tier_id=request.price_tier_id,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Internal error: {str(e)}")


@router.get("/passes/{payment_intent_id}", response_model=ParkingPassResponse)
async def get_parking_pass(payment_intent_id: str, service: CheckoutService = Depends(get_checkout_service)):
    try:
        return await service.get_parking_pass(payment_intent_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Internal error: {str(e)}")


@router.get("/passes/{payment_intent_id}/qr.png")
async def get_pass_qr_code(payment_intent_id: str, service: CheckoutService = Depends(get_checkout_service)):
    try:
        png = await service.get_pass_qr_code(payment_intent_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Internal error: {str(e)}")
    return Response(content=png, media_type="image/png")
