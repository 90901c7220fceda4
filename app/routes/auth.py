"""Authentication routes."""
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.auth import TokenCodec, create_access_token, get_current_user, get_token_codec
from app.database import get_db
from app.exceptions import NotFound, Unauthenticated
from app.schemas.user import (
    AuthResponse,
    MeResponse,
    TokenData,
    UserCreate,
    UserLogin,
    UserResponse,
)
from app.services import users as user_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserCreate,
    db: Session = Depends(get_db),
    codec: TokenCodec = Depends(get_token_codec),
):
    """Register a new user and return a session token."""
    user = user_store.create_user(db, user_data)
    return AuthResponse(
        message="User registered successfully",
        token=create_access_token(user, codec),
        user=UserResponse.model_validate(user),
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    credentials: UserLogin,
    db: Session = Depends(get_db),
    codec: TokenCodec = Depends(get_token_codec),
):
    """Exchange email and password for a session token."""
    user = user_store.authenticate_user(db, credentials.email, credentials.password)
    if not user:
        logger.warning("Failed login for %s", credentials.email)
        raise Unauthenticated("Invalid credentials")
    return AuthResponse(
        message="Login successful",
        token=create_access_token(user, codec),
        user=UserResponse.model_validate(user),
    )


@router.get("/me", response_model=MeResponse)
async def read_current_user(
    db: Session = Depends(get_db),
    current_user: TokenData = Depends(get_current_user),
):
    """Get the stored profile of the token holder."""
    user = user_store.get_user_by_id(db, current_user.id)
    if not user:
        raise NotFound("User not found")
    return MeResponse(user=UserResponse.model_validate(user))
