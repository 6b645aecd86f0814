"""
Payment Service
Entry-fee payments: gateway intents, payment records and participation counts
"""
from datetime import datetime
from typing import Optional, Dict, Any, Tuple, List
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from app.services.contest.contest import WINNER_FIELDS
from app.services.payment.gateways.base import BasePaymentGateway, PaymentIntentResult, to_minor_units
from app.utils.object_id import parse_object_id

SOURCE_CLIENT = "client"
SOURCE_WEBHOOK = "webhook"

INTENT_SUCCEEDED = "payment_intent.succeeded"


class PaymentService:
    """
    Service for payment operations.

    Recording is idempotent on transaction_id: the client report and the
    gateway webhook for the same intent produce one payment and one
    participation increment.
    """

    def __init__(self, db: AsyncIOMotorDatabase, gateway: Optional[BasePaymentGateway] = None):
        self.db = db
        self.payments = db.payments
        self.contests = db.contests
        self.gateway = gateway

    async def create_payment_intent(
        self,
        price: float,
        contest_id: Optional[str] = None,
        email: Optional[str] = None
    ) -> PaymentIntentResult:
        """Ask the gateway for an intent of `price` (major units)"""
        if price is None or price <= 0:
            raise ValueError("Price must be greater than zero")

        metadata = {}
        if contest_id:
            metadata["contest_id"] = contest_id
        if email:
            metadata["email"] = email

        return await self.gateway.create_payment_intent(to_minor_units(price), metadata=metadata)

    async def record_payment(self, payment_data: Dict[str, Any], source: str = SOURCE_CLIENT) -> Tuple[bool, Dict]:
        """
        Persist a payment and count the participant in.

        Returns (created, payment). A known transaction_id returns the stored
        payment without touching the counter.
        """
        contest_id = payment_data["contest_id"]
        contest_oid = parse_object_id(contest_id, "contest")

        contest = await self.contests.find_one({"_id": contest_oid})
        if not contest:
            raise ValueError("Contest not found")

        transaction_id = payment_data.get("transaction_id")
        if transaction_id:
            existing = await self.payments.find_one({"transaction_id": transaction_id})
            if existing:
                return False, existing

        payment = {
            **payment_data,
            **{field: contest.get(field) for field in WINNER_FIELDS},
            "source": source,
            "created_at": datetime.utcnow()
        }
        if not transaction_id:
            # Sparse unique index: a stored null would collide with the next one
            payment.pop("transaction_id", None)

        try:
            result = await self.payments.insert_one(payment)
        except DuplicateKeyError:
            # Lost a race with the other reporter of the same transaction
            return False, await self.payments.find_one({"transaction_id": transaction_id})

        await self.contests.update_one({"_id": contest_oid}, {"$inc": {"participation_count": 1}})

        payment["_id"] = result.inserted_id
        return True, payment

    async def get_payments_by_email(self, email: str) -> List[Dict]:
        """A user's payments, newest first"""
        cursor = self.payments.find({"email": email}, sort=[("created_at", -1)])
        return await cursor.to_list(length=None)

    async def process_webhook(self, payload: bytes, signature: Optional[str]) -> Tuple[bool, str]:
        """
        Verify and apply a gateway callback.

        Returns (accepted, message). Only signature/payload problems are
        rejected; events we do not act on are acknowledged.
        """
        verification = self.gateway.verify_webhook(payload, signature)

        if not verification.is_valid:
            return False, verification.error_message or "Invalid webhook"

        if verification.event_type != INTENT_SUCCEEDED:
            return True, f"Ignored event {verification.event_type}"

        contest_id = verification.metadata.get("contest_id")
        email = verification.metadata.get("email")

        if not contest_id or not email:
            print(f"[WARN] Payment intent {verification.intent_id} has no contest metadata, not recorded")
            return True, "Payment intent carries no contest metadata"

        try:
            created, payment = await self.record_payment(
                {
                    "contest_id": contest_id,
                    "email": email,
                    "price": (verification.amount or 0) / 100,
                    "transaction_id": verification.intent_id
                },
                source=SOURCE_WEBHOOK
            )
        except ValueError as e:
            print(f"[WARN] Webhook payment {verification.intent_id} not recorded: {e}")
            return True, str(e)

        if created:
            print(f"[OK] Recorded payment {verification.intent_id} for contest {contest_id} from webhook")
            return True, "Payment recorded"

        return True, "Payment already recorded"
