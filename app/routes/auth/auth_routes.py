import os
from fastapi import APIRouter
from dotenv import load_dotenv

from app.models.auth.token import TokenRequest, TokenResponse
from app.services.auth.security import security_service
from app.routes.auth.dependencies import TOKEN_COOKIE_NAME, extract_credential
from app.utils.response import success_response, error_response

load_dotenv()

router = APIRouter(tags=["Authentication"])


def cookie_options() -> dict:
    """Cross-site cookies need secure + SameSite=None; local development stays strict"""
    production = os.getenv("ENVIRONMENT", "development").lower() == "production"
    return {
        "secure": production,
        "samesite": "none" if production else "strict",
    }


@router.post("/jwt")
async def issue_token(user: TokenRequest):
    """
    Sign the posted user claims into an access token.

    The token is returned in the body for bearer clients and, when the
    transport policy includes cookies, also set as an httpOnly cookie.
    """
    try:
        access_token = security_service.create_access_token(data=user.model_dump(mode="json", exclude_none=True))
    except ValueError as e:
        print(f"[ERROR] Configuration error: {e}")
        return error_response(message="Server configuration error", status_code=500)

    response = success_response(
        message="Token issued",
        data=TokenResponse(access_token=access_token).model_dump()
    )

    if extract_credential.uses_cookie:
        response.set_cookie(
            TOKEN_COOKIE_NAME,
            access_token,
            httponly=True,
            **cookie_options()
        )

    return response


@router.get("/logout")
async def logout():
    """Clear the auth cookie"""
    response = success_response(message="Logout successful")
    response.delete_cookie(TOKEN_COOKIE_NAME, httponly=True, **cookie_options())
    return response
