from pydantic import BaseModel
from typing import Optional

from app.models.email import Email


class TokenRequest(BaseModel):
    """Claims to sign into an access token; extra user fields are signed as given"""
    email: Email
    name: Optional[str] = None

    class Config:
        extra = "allow"


class TokenResponse(BaseModel):
    """Token response schema"""
    access_token: str
    token_type: str = "bearer"
