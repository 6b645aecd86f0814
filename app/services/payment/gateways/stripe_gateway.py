"""
Stripe Payment Gateway Implementation
Payment intents for contest entry fees and signed webhook verification
"""
import os
import stripe
from typing import Dict, Any, Optional
from fastapi.concurrency import run_in_threadpool
from dotenv import load_dotenv

from app.services.payment.gateways.base import (
    BasePaymentGateway,
    PaymentGatewayError,
    PaymentIntentResult,
    WebhookVerificationResult
)

load_dotenv()


class StripeGateway(BasePaymentGateway):
    """
    Stripe Payment Gateway Implementation

    The SDK is synchronous, so calls run in the threadpool to keep the
    event loop free.
    """

    DEFAULT_CURRENCY = "usd"

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """Initialize Stripe gateway"""
        env_config = self._load_config_from_env()

        if config is not None:
            env_config.update({k: v for k, v in config.items() if v is not None})

        super().__init__(env_config)

        self.secret_key = self.config.get("secret_key")
        self.webhook_secret = self.config.get("webhook_secret")
        self.currency = self.config.get("currency", self.DEFAULT_CURRENCY)

    def _load_config_from_env(self) -> Dict[str, Any]:
        """Load configuration from environment variables"""
        secret_key = os.getenv("STRIPE_SECRET_KEY") or os.getenv("PAYMENT_SECRET_KEY")
        webhook_secret = os.getenv("STRIPE_WEBHOOK_SECRET")

        if not webhook_secret:
            print("[WARN] STRIPE_WEBHOOK_SECRET not found in environment, webhooks will be rejected")

        return {
            "secret_key": secret_key,
            "webhook_secret": webhook_secret,
            "currency": os.getenv("STRIPE_CURRENCY", self.DEFAULT_CURRENCY),
        }

    def _validate_config(self):
        """Validate required Stripe configuration"""
        if not self.config.get("secret_key"):
            raise ValueError("STRIPE_SECRET_KEY is required")

    async def create_payment_intent(
        self,
        amount: int,
        currency: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None
    ) -> PaymentIntentResult:
        currency = currency or self.currency

        try:
            intent = await run_in_threadpool(
                stripe.PaymentIntent.create,
                amount=amount,
                currency=currency,
                payment_method_types=["card"],
                metadata=metadata or {},
                api_key=self.secret_key
            )
        except stripe.StripeError as e:
            print(f"[ERROR] Stripe payment intent failed: {e}")
            raise PaymentGatewayError(str(e)) from e

        return PaymentIntentResult(
            intent_id=intent["id"],
            client_secret=intent["client_secret"],
            amount=amount,
            currency=currency
        )

    def verify_webhook(self, payload: bytes, signature: Optional[str]) -> WebhookVerificationResult:
        if not self.webhook_secret:
            return WebhookVerificationResult(is_valid=False, error_message="Webhook secret not configured")

        try:
            event = stripe.Webhook.construct_event(payload, signature, self.webhook_secret)
        except stripe.SignatureVerificationError:
            return WebhookVerificationResult(is_valid=False, error_message="Invalid signature")
        except ValueError:
            return WebhookVerificationResult(is_valid=False, error_message="Invalid payload")

        data_object = event["data"]["object"]

        return WebhookVerificationResult(
            is_valid=True,
            event_type=event["type"],
            intent_id=data_object.get("id"),
            amount=data_object.get("amount_received") or data_object.get("amount"),
            metadata=dict(data_object.get("metadata") or {})
        )
