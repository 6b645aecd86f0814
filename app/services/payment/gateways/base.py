"""
Base Payment Gateway
Abstract class defining the interface the payment bridge relies on
"""
from abc import ABC, abstractmethod
from typing import Dict, Any, Optional
from dataclasses import dataclass, field


@dataclass
class PaymentIntentResult:
    """Result of creating a payment intent"""
    intent_id: str
    client_secret: str
    amount: int  # minor units
    currency: str


@dataclass
class WebhookVerificationResult:
    """Result of webhook verification"""
    is_valid: bool
    event_type: Optional[str] = None
    intent_id: Optional[str] = None
    amount: Optional[int] = None  # minor units
    metadata: Dict[str, Any] = field(default_factory=dict)
    error_message: Optional[str] = None


class PaymentGatewayError(Exception):
    """Gateway unreachable or refused the request"""


def to_minor_units(amount: float) -> int:
    """Major currency units to the gateway's integer minor units (cents)"""
    return int(round(amount * 100))


class BasePaymentGateway(ABC):
    """
    Abstract base class for payment gateways.
    """

    def __init__(self, config: Dict[str, Any]):
        """
        Initialize gateway with configuration.

        Args:
            config: Gateway configuration including API keys
        """
        self.config = config
        self._validate_config()

    @abstractmethod
    def _validate_config(self):
        """Validate required configuration parameters"""
        pass

    @abstractmethod
    async def create_payment_intent(
        self,
        amount: int,
        currency: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None
    ) -> PaymentIntentResult:
        """
        Create a pending charge the client confirms on its side.

        Args:
            amount: Amount in minor units
            currency: Currency code, gateway default when omitted
            metadata: Key/value pairs echoed back in webhooks

        Raises:
            PaymentGatewayError: gateway refused or could not be reached
        """
        pass

    @abstractmethod
    def verify_webhook(self, payload: bytes, signature: Optional[str]) -> WebhookVerificationResult:
        """
        Verify a gateway callback and extract the event.

        Args:
            payload: Raw request body
            signature: Signature header sent by the gateway
        """
        pass
