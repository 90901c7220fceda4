"""Authentication: password hashing, session tokens and route dependencies."""
import logging
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import ValidationError as PydanticValidationError

from app.config import get_settings
from app.exceptions import Forbidden, InvalidToken, Unauthenticated
from app.policy import Operation, is_permitted
from app.schemas.user import TokenData

logger = logging.getLogger(__name__)

pwd_context = CryptContext(
    schemes=["argon2"],
    deprecated="auto",
    argon2__time_cost=get_settings().PASSWORD_HASH_TIME_COST,
)

# auto_error=False so a missing header can be reported as 401 rather than 403
bearer_scheme = HTTPBearer(auto_error=False)


def get_password_hash(password: str) -> str:
    """Hash a password with a random salt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a password against a stored hash.

    Malformed or unrecognised hashes count as a mismatch.
    """
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        logger.warning("Stored password hash could not be parsed")
        return False


class TokenCodec:
    """Signs and verifies session tokens carrying ``{id, username, role}``."""

    def __init__(self, secret_key: str, algorithm: str, expires_delta: timedelta):
        if not secret_key:
            raise ValueError("A signing key is required")
        self._secret_key = secret_key
        self._algorithm = algorithm
        self.expires_delta = expires_delta

    def issue(self, claims: TokenData, expires_delta: Optional[timedelta] = None) -> str:
        expire = datetime.now(timezone.utc) + (expires_delta or self.expires_delta)
        to_encode = {
            "id": claims.id,
            "username": claims.username,
            "role": claims.role,
            "exp": expire,
        }
        return jwt.encode(to_encode, self._secret_key, algorithm=self._algorithm)

    def verify(self, token: str) -> TokenData:
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
            return TokenData(
                id=payload["id"],
                username=payload["username"],
                role=payload["role"],
            )
        except (JWTError, KeyError, PydanticValidationError):
            raise InvalidToken()


@lru_cache
def get_token_codec() -> TokenCodec:
    """Build the process-wide token codec from settings."""
    settings = get_settings()
    return TokenCodec(
        settings.SECRET_KEY,
        settings.ALGORITHM,
        timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )


def create_access_token(user, codec: Optional[TokenCodec] = None) -> str:
    """Issue a token for a stored user."""
    codec = codec or get_token_codec()
    return codec.issue(TokenData(id=user.id, username=user.username, role=user.role.value))


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    codec: TokenCodec = Depends(get_token_codec),
) -> TokenData:
    """Return the claims of the bearer token on the request."""
    if credentials is None or not credentials.credentials:
        raise Unauthenticated()
    return codec.verify(credentials.credentials)


def require_permission(operation: Operation):
    """Dependency factory: the caller's role must allow ``operation``."""
    async def permission_checker(
        current_user: TokenData = Depends(get_current_user),
    ) -> TokenData:
        if not is_permitted(current_user.role, operation):
            logger.info(
                "Denied %s for user %s with role %r",
                operation.value, current_user.id, current_user.role,
            )
            raise Forbidden()
        return current_user
    return permission_checker


# Convenience dependencies
require_read = require_permission(Operation.READ)
require_create = require_permission(Operation.CREATE)
require_update = require_permission(Operation.UPDATE)
require_toggle = require_permission(Operation.TOGGLE)
require_delete = require_permission(Operation.DELETE)
