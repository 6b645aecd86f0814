import os
from jose import jwt
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Older deployments named the signing secret SECRET_KEY
SECRET_KEY = os.getenv("ACCESS_TOKEN_SECRET") or os.getenv("SECRET_KEY")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_DAYS = int(os.getenv("ACCESS_TOKEN_EXPIRE_DAYS", "365"))


class SecurityService:
    """Service for signing and verifying the self-contained access token"""

    def __init__(
        self,
        secret_key: Optional[str] = None,
        algorithm: str = ALGORITHM,
        expire_days: int = ACCESS_TOKEN_EXPIRE_DAYS
    ):
        self.secret_key = secret_key or SECRET_KEY
        self.algorithm = algorithm
        self.expire_days = expire_days

    def _require_secret(self) -> str:
        if not self.secret_key:
            raise ValueError("ACCESS_TOKEN_SECRET is not configured")
        return self.secret_key

    def create_access_token(self, data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
        """Sign the given claims with an expiry"""
        to_encode = data.copy()

        if expires_delta is None:
            expires_delta = timedelta(days=self.expire_days)

        to_encode.update({"exp": datetime.now(timezone.utc) + expires_delta})
        return jwt.encode(to_encode, self._require_secret(), algorithm=self.algorithm)

    def decode_token(self, token: str) -> Dict[str, Any]:
        """
        Verify signature and expiry and return the claims.

        Raises jose.JWTError (ExpiredSignatureError included) for anything
        that is not a valid, live token.
        """
        return jwt.decode(token, self._require_secret(), algorithms=[self.algorithm])


security_service = SecurityService()
