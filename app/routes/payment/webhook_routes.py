"""
Payment Webhook Routes
Gateway callbacks; the signature is verified before anything is recorded
"""
from fastapi import APIRouter, Depends, Request
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.database import get_database
from app.services.payment.payment_service import PaymentService
from app.services.payment.gateways.base import BasePaymentGateway
from app.services.payment.gateways.factory import get_payment_gateway
from app.utils.response import success_response, error_response

router = APIRouter(prefix="/payments", tags=["Payment Webhooks"])


@router.post("/webhook")
async def handle_payment_webhook(
    request: Request,
    db: AsyncIOMotorDatabase = Depends(get_database),
    gateway: BasePaymentGateway = Depends(get_payment_gateway)
):
    """
    Handle the gateway's payment callback.

    - 400 on a bad signature or payload so the gateway shows the failure
    - payment_intent.succeeded records the payment (idempotent)
    - other events are acknowledged and ignored
    """
    raw_body = await request.body()
    signature = request.headers.get("stripe-signature")

    payment_service = PaymentService(db, gateway)
    accepted, message = await payment_service.process_webhook(raw_body, signature)

    if not accepted:
        print(f"[WARN] Webhook rejected: {message}")
        return error_response(message=message, status_code=400)

    return success_response(message=message, data={"received": True})
