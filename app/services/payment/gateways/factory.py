"""
Payment Gateway Factory
Creates and caches payment gateway instances
"""
import os
from typing import Dict, Type
from fastapi import HTTPException, status

from app.services.payment.gateways.base import BasePaymentGateway
from app.services.payment.gateways.stripe_gateway import StripeGateway


class PaymentGatewayFactory:
    """
    Factory for creating payment gateway instances.
    """

    # Registry of available gateways
    _gateways: Dict[str, Type[BasePaymentGateway]] = {
        "stripe": StripeGateway,
    }

    # Cached gateway instances
    _instances: Dict[str, BasePaymentGateway] = {}

    @classmethod
    def get_gateway(cls, gateway_id: str) -> BasePaymentGateway:
        """
        Get a payment gateway instance.

        Raises:
            ValueError: If gateway is not registered or is misconfigured
        """
        if gateway_id not in cls._gateways:
            raise ValueError(f"Unknown payment gateway: {gateway_id}. Available: {list(cls._gateways.keys())}")

        if gateway_id in cls._instances:
            return cls._instances[gateway_id]

        instance = cls._gateways[gateway_id]()
        cls._instances[gateway_id] = instance
        return instance

    @classmethod
    def clear_cache(cls):
        """Clear all cached gateway instances"""
        cls._instances.clear()


def get_payment_gateway() -> BasePaymentGateway:
    """Dependency returning the configured gateway; 503 while it is not configured"""
    try:
        return PaymentGatewayFactory.get_gateway(os.getenv("PAYMENT_GATEWAY", "stripe"))
    except ValueError as e:
        print(f"[ERROR] Payment gateway unavailable: {e}")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Payment gateway not configured")
