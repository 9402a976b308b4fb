"""
VideoAPI - Authentication Service
JWT sessions carried in the Authorization header or the session cookie
"""
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Request
from jose import JWTError, jwt
from pydantic import BaseModel, ValidationError

from app.config import get_settings
from app.crud.errors import (
    InvalidAuthHeaderError,
    InvalidCredentialsError,
    InvalidRoleError,
    InvalidTokenError,
    MissingAuthError,
)
from app.schemas.user import LoginRequest, Role, User
from app.services.passwords import verify_password
from app.store.errors import ResourceNotFoundError
from app.store.sqlresource import Resource

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
ISSUER = "videoapi"
AUDIENCE = "videoapi"
COOKIE_NAME = "VIDEOAPI_SESSION"
COOKIE_PATH = "/api"
SUPER_ADMIN = "superAdmin"
DEFAULT_ADMIN = "admin"


class Claims(BaseModel):
    """JWT payload: registered claims plus the user's name and role."""
    sub: str
    name: str = ""
    role: Role
    iss: str = ISSUER
    aud: str = AUDIENCE
    exp: int
    iat: int
    nbf: int

    @property
    def expires(self) -> datetime:
        return datetime.fromtimestamp(self.exp, tz=timezone.utc)


class MeResponse(BaseModel):
    id: str
    name: str
    role: Role
    expires: datetime


class AuthService:
    """Service for handling authentication operations."""

    @staticmethod
    def new_claims(user_id: str, name: str, role: Role, expires_delta: Optional[timedelta] = None) -> Claims:
        if expires_delta is None:
            expires_delta = timedelta(minutes=get_settings().jwt_expire_minutes)
        now = datetime.now(timezone.utc)
        return Claims(
            sub=user_id,
            name=name,
            role=role,
            exp=int((now + expires_delta).timestamp()),
            iat=int(now.timestamp()),
            # tolerate small clock drift between servers
            nbf=int((now - timedelta(seconds=5)).timestamp()),
        )

    @staticmethod
    def renew(claims: Claims) -> Claims:
        """Same identity, fresh validity window."""
        return AuthService.new_claims(claims.sub, claims.name, claims.role)

    @staticmethod
    def create_access_token(claims: Claims) -> str:
        """Create JWT access token."""
        return jwt.encode(claims.model_dump(mode="json"), get_settings().jwt_secret_key, algorithm=ALGORITHM)

    @staticmethod
    def decode_token(token: str) -> Claims:
        """Decode and validate JWT token."""
        try:
            payload = jwt.decode(
                token,
                get_settings().jwt_secret_key,
                algorithms=[ALGORITHM],
                audience=AUDIENCE,
                issuer=ISSUER,
            )
        except JWTError as e:
            raise InvalidTokenError(f"invalid token: {e}") from e
        try:
            return Claims.model_validate(payload)
        except ValidationError as e:
            raise InvalidRoleError() from e

    @staticmethod
    async def authenticate(store: Resource[User], login: LoginRequest) -> Claims:
        """Check credentials against the user table or the super admin password."""
        super_password = get_settings().super_password
        if (
            super_password
            and login.id == SUPER_ADMIN
            and secrets.compare_digest(login.password.encode(), super_password.encode())
        ):
            logger.info("Super admin authenticated")
            return AuthService.new_claims(SUPER_ADMIN, SUPER_ADMIN, Role.ADMIN)

        try:
            user = await store.get_by_id(login.id)
        except ResourceNotFoundError:
            logger.warning(f"Login attempt for non-existent user: {login.id}")
            raise InvalidCredentialsError() from None

        if not verify_password(login.password, user.password or ""):
            logger.warning(f"Invalid password for user: {login.id}")
            raise InvalidCredentialsError()

        logger.info(f"User authenticated successfully: {login.id}")
        return AuthService.new_claims(user.id, user.name, user.role or Role.READ_ONLY)


def token_from_request(request: Request) -> str:
    """Bearer token from the Authorization header, else the session cookie."""
    header = request.headers.get("Authorization", "")
    if header:
        parts = header.split(" ")
        if len(parts) != 2 or parts[0].lower() != "bearer":
            raise InvalidAuthHeaderError()
        token = parts[1]
    else:
        token = request.cookies.get(COOKIE_NAME, "")
    if not token:
        raise MissingAuthError()
    return token


# Dependency functions for FastAPI
async def get_claims(request: Request) -> Claims:
    """Claims of the authenticated caller, 401 otherwise."""
    return AuthService.decode_token(token_from_request(request))


# Initialize default admin user
async def create_default_admin(store: Resource[User]) -> None:
    """Create default admin user if no users exist."""
    existing = await store.get([], [], True, 0, 1)
    if existing:
        logger.info("Users already exist, skipping default admin creation")
        return

    password = get_settings().default_admin_password
    if not password:
        logger.warning("No users and no default admin password configured")
        return

    await store.post(User(id=DEFAULT_ADMIN, name=DEFAULT_ADMIN, role=Role.ADMIN, password=password))
    logger.info(f"🔐 Created default admin user ({DEFAULT_ADMIN})")
