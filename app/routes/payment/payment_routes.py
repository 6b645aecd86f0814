"""
Payment Routes
API endpoints for contest entry payments
"""
from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.database import get_database
from app.models.payment.payment import PaymentIntentCreate, PaymentCreate
from app.services.payment.payment_service import PaymentService
from app.services.payment.gateways.base import BasePaymentGateway, PaymentGatewayError
from app.services.payment.gateways.factory import get_payment_gateway
from app.utils.response import success_response, error_response

router = APIRouter(tags=["Payments"])


@router.post("/create-payment-intent")
async def create_payment_intent(
    intent_data: PaymentIntentCreate,
    db: AsyncIOMotorDatabase = Depends(get_database),
    gateway: BasePaymentGateway = Depends(get_payment_gateway)
):
    """
    Create a payment intent for the contest price.
    The client completes the charge with the returned client secret.
    """
    payment_service = PaymentService(db, gateway)

    try:
        intent = await payment_service.create_payment_intent(
            price=intent_data.price,
            contest_id=intent_data.contest_id,
            email=intent_data.email
        )
    except ValueError as e:
        return error_response(message=str(e))
    except PaymentGatewayError as e:
        return error_response(message=f"Payment gateway error: {e}", status_code=502)

    return success_response(
        message="Payment intent created",
        data={"client_secret": intent.client_secret, "intent_id": intent.intent_id}
    )


@router.post("/payments")
async def record_payment(
    payment_data: PaymentCreate,
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    """
    Save a payment reported by the client and count the participant in.
    A transaction id that is already stored is not counted twice.
    """
    payment_service = PaymentService(db)

    try:
        created, payment = await payment_service.record_payment(
            payment_data.model_dump(mode="json", exclude_none=True)
        )
    except ValueError as e:
        return error_response(message=str(e))

    return success_response(
        message="Payment recorded" if created else "Payment already recorded",
        data=payment,
        status_code=201 if created else 200
    )


@router.get("/payments/{email}")
async def get_user_payments(email: str, db: AsyncIOMotorDatabase = Depends(get_database)):
    """A user's payments"""
    payment_service = PaymentService(db)
    payments = await payment_service.get_payments_by_email(email)

    return success_response(message="Payments retrieved successfully", data=payments)
