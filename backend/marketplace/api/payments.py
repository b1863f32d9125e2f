"""
Payments API Endpoints
"""
from fastapi import APIRouter, Depends

from marketplace.core.auth import Principal, get_current_user
from marketplace.domain.payment import PaymentCreate
from marketplace.services.payment_service import PaymentService, get_payment_service

router = APIRouter()


@router.post("/")
async def create_payment(
    payment: PaymentCreate,
    principal: Principal = Depends(get_current_user),
    service: PaymentService = Depends(get_payment_service)
):
    """
    Charge the authenticated buyer

    Creates and confirms a Stripe payment intent in one call. Redirect-based
    payment methods are disabled.
    """
    payment_intent = await service.create_payment(principal, payment)

    return {
        "status": "success",
        "message": "Stripe payment successful",
        "paymentIntent": payment_intent
    }
