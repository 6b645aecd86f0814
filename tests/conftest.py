import os
import json

os.environ["ACCESS_TOKEN_SECRET"] = "test-secret"
os.environ["TOKEN_TRANSPORT"] = "both"
os.environ["ENVIRONMENT"] = "development"

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from app.main import app
from app.database import get_database
from app.services.auth.security import SecurityService
from app.services.payment.gateways.base import (
    BasePaymentGateway,
    PaymentIntentResult,
    WebhookVerificationResult
)
from app.services.payment.gateways.factory import get_payment_gateway


class FakeGateway(BasePaymentGateway):
    """In-process gateway: intents are numbered, webhooks are plain JSON signed with 'valid'"""

    def __init__(self):
        super().__init__({})
        self.intents = []

    def _validate_config(self):
        pass

    async def create_payment_intent(self, amount, currency=None, metadata=None):
        intent_id = f"pi_{len(self.intents) + 1}"
        self.intents.append({"id": intent_id, "amount": amount, "metadata": metadata or {}})
        return PaymentIntentResult(
            intent_id=intent_id,
            client_secret=f"{intent_id}_secret",
            amount=amount,
            currency=currency or "usd"
        )

    def verify_webhook(self, payload, signature):
        if signature != "valid":
            return WebhookVerificationResult(is_valid=False, error_message="Invalid signature")

        event = json.loads(payload)
        data_object = event["data"]["object"]
        return WebhookVerificationResult(
            is_valid=True,
            event_type=event["type"],
            intent_id=data_object["id"],
            amount=data_object.get("amount"),
            metadata=data_object.get("metadata", {})
        )


@pytest.fixture
def db():
    return AsyncMongoMockClient()["contest_corner_test"]


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def client(db, gateway):
    async def override_get_database():
        return db

    app.dependency_overrides[get_database] = override_get_database
    app.dependency_overrides[get_payment_gateway] = lambda: gateway

    # Not used as a context manager: the lifespan would dial a real MongoDB
    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    token = SecurityService().create_access_token({"email": "admin@example.com"})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_contest(client):
    """Create a contest through the API and return its id"""

    def _make_contest(title="Logo Design", **fields):
        payload = {
            "title": title,
            "description": "Design a logo",
            "tags": ["Design"],
            "price": 10,
            "creator_email": "creator@example.com",
            "creator_name": "Creator",
            **fields
        }
        response = client.post("/addContest", json=payload)
        assert response.status_code == 201
        return response.json()["data"]["_id"]

    return _make_contest


@pytest.fixture
def submit(client):
    """Submit an entry through the API"""

    def _submit(contest_id, email, name=None):
        response = client.post("/submittedTask", json={
            "contest_id": contest_id,
            "participant_email": email,
            "participant_name": name or email.split("@")[0],
            "task": "https://example.com/my-entry"
        })
        assert response.status_code == 201
        return response.json()["data"]

    return _submit


@pytest.fixture
def declare(client):
    """Declare a winner through the API"""

    def _declare(contest_id, email, name=None):
        response = client.patch("/declareWin", json={
            "contest_id": contest_id,
            "result": "Winner",
            "winner_name": name or email.split("@")[0],
            "winner_email": email,
            "winner_image": "https://example.com/winner.png"
        })
        assert response.status_code == 200
        return response.json()["data"]

    return _declare


@pytest.fixture
def pay(client):
    """Record client-reported payments for a contest; each one counts as a participant"""

    def _pay(contest_id, times=1, email="payer@example.com"):
        for _ in range(times):
            response = client.post("/payments", json={"contest_id": contest_id, "email": email, "price": 10})
            assert response.status_code == 201

    return _pay
