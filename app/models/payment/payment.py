"""
Payment Models
Request schemas for the contest entry payment flow
"""
from pydantic import BaseModel, Field
from typing import Optional

from app.models.email import Email


class PaymentIntentCreate(BaseModel):
    """Schema for asking the gateway for a payment intent"""
    price: float = Field(..., gt=0, description="Price in major currency units")
    contest_id: Optional[str] = None
    email: Optional[Email] = None


class PaymentCreate(BaseModel):
    """Client report of a completed payment"""
    contest_id: str
    email: Email
    name: Optional[str] = None
    price: float = Field(..., ge=0)
    transaction_id: Optional[str] = None

    class Config:
        extra = "allow"
