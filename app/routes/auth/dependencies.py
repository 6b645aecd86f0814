import os
from typing import Optional
from fastapi import Depends, HTTPException, Request, status
from fastapi.security.utils import get_authorization_scheme_param
from jose import JWTError
from dotenv import load_dotenv

from app.services.auth.security import security_service

load_dotenv()

TOKEN_COOKIE_NAME = "token"
TOKEN_TRANSPORT = os.getenv("TOKEN_TRANSPORT", "both").lower()
TOKEN_TRANSPORTS = ("cookie", "bearer", "both")


class CredentialExtractor:
    """
    Pulls the raw token out of a request.

    transport:
        cookie - httpOnly ``token`` cookie only
        bearer - ``Authorization: Bearer <token>`` header only
        both   - header first, then cookie
    """

    def __init__(self, transport: str = TOKEN_TRANSPORT):
        if transport not in TOKEN_TRANSPORTS:
            raise ValueError(f"Unknown token transport: {transport}. Use one of {TOKEN_TRANSPORTS}")
        self.transport = transport

    @property
    def uses_cookie(self) -> bool:
        return self.transport in ("cookie", "both")

    @property
    def uses_bearer(self) -> bool:
        return self.transport in ("bearer", "both")

    async def __call__(self, request: Request) -> Optional[str]:
        if self.uses_bearer:
            scheme, param = get_authorization_scheme_param(request.headers.get("Authorization"))
            if scheme.lower() == "bearer" and param:
                return param

        if self.uses_cookie:
            token = request.cookies.get(TOKEN_COOKIE_NAME)
            if token:
                return token

        return None


extract_credential = CredentialExtractor()


async def get_current_user(token: Optional[str] = Depends(extract_credential)) -> dict:
    """Decoded token claims of the caller; 401 without a token, 403 with a bad one"""
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized access")

    try:
        return security_service.decode_token(token)
    except JWTError:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden access")
