"""
VideoAPI - Authentication Router
Login issues a JWT both in the reply and as the session cookie.
"""
import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError

from app.config import get_settings
from app.crud.errors import EmptyBodyError, InvalidJsonError
from app.schemas.user import LoginRequest, LoginResponse
from app.services.auth import (
    COOKIE_NAME,
    COOKIE_PATH,
    AuthService,
    Claims,
    MeResponse,
    get_claims,
)
from app.services.stores import user_store

logger = logging.getLogger(__name__)
router = APIRouter(tags=["authentication"])


def _session_reply(claims: Claims) -> JSONResponse:
    settings = get_settings()
    token = AuthService.create_access_token(claims)
    reply = LoginResponse(id=claims.sub, name=claims.name, role=claims.role, token=token)
    response = JSONResponse(content=reply.model_dump(mode="json"))
    response.set_cookie(
        key=COOKIE_NAME,
        value=token,
        expires=claims.expires,
        path=COOKIE_PATH,
        secure=settings.cookie_secure,
        httponly=True,
        samesite="strict",
    )
    return response


# ============================================================
# Authentication Endpoints
# ============================================================

@router.post("/login", response_model=LoginResponse)
async def login(request: Request):
    """Authenticate with a JSON body {"id": ..., "password": ...}."""
    body = await request.body()
    if not body:
        raise EmptyBodyError()
    try:
        credentials = LoginRequest.model_validate_json(body)
    except ValidationError as e:
        raise InvalidJsonError() from e

    claims = await AuthService.authenticate(user_store, credentials)
    return _session_reply(claims)


@router.get("/login", response_model=LoginResponse)
async def renew(claims: Claims = Depends(get_claims)):
    """Issue a fresh token for a still valid session."""
    return _session_reply(AuthService.renew(claims))


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout():
    """
    Clear the session cookie.

    JWT tokens are stateless: a token copied elsewhere stays valid until it
    expires.
    """
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    response.delete_cookie(COOKIE_NAME, path=COOKIE_PATH, secure=get_settings().cookie_secure, httponly=True)
    return response


@router.get("/me", response_model=MeResponse)
async def me(claims: Claims = Depends(get_claims)):
    """Get current authenticated user information."""
    return MeResponse(id=claims.sub, name=claims.name, role=claims.role, expires=claims.expires)
