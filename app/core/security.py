from datetime import datetime, timedelta, timezone
from typing import Any, Optional
from jose import ExpiredSignatureError, JWTError, jwt
from fastapi import HTTPException, Request, status, Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.core.config import Settings
from app.schemas.auth_schemas import AuthenticatedUser
import structlog

logger = structlog.get_logger()

# Missing or non-Bearer credentials are reported as 401 below, not 403
security = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def parse_user_id(value: Any) -> Optional[int]:
    """Return the claim as an int if it is numeric, otherwise None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.isascii() and value.isdigit():
        return int(value)
    return None


def create_access_token(user_id: int, settings: Settings, expires_delta: Optional[timedelta] = None) -> str:
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.jwt_expire_minutes)
    claims = {
        settings.jwt_user_id_claim: user_id,
        "exp": datetime.now(timezone.utc) + expires_delta,
    }
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def verify_token(token: str, settings: Settings) -> AuthenticatedUser:
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            options={"require_exp": True},
        )
    except ExpiredSignatureError:
        logger.warning("Expired token presented")
        raise _unauthorized("Token has expired")
    except JWTError as e:
        logger.warning("JWT validation error", error=str(e))
        raise _unauthorized("Could not validate credentials")

    claim_value = payload.get(settings.jwt_user_id_claim)
    if claim_value is None:
        # Standard tokens carry the user id as a digit-string "sub"
        claim_value = payload.get("sub")
    user_id = parse_user_id(claim_value)
    if user_id is None:
        logger.warning("Token missing numeric user id", claim=settings.jwt_user_id_claim)
        raise _unauthorized(f"Token missing {settings.jwt_user_id_claim}")

    return AuthenticatedUser(user_id=user_id, claims=payload)


async def validate_request(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    settings: Settings = Depends(get_app_settings),
) -> AuthenticatedUser:
    if credentials is None:
        raise _unauthorized("Not authenticated")

    user = verify_token(credentials.credentials, settings)
    request.state.user_id = user.user_id
    structlog.contextvars.bind_contextvars(user_id=user.user_id)
    return user
