"""Authentication endpoints for user login and registration."""

from typing import Any
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.config import get_settings
from components.core.init_db import get_db
from components.core.schemas import ApiResponse
from components.core.security import create_access_token, verify_password, verify_token
from components.user.models import User
from components.user.repository import UserRepository
from components.user import schemas

router = APIRouter(prefix="/auth", tags=["authentication"])
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{get_settings().API_PREFIX.strip('/')}/auth/login", auto_error=False)


async def get_current_user(
    db: AsyncSession = Depends(get_db),
    token: str = Depends(oauth2_scheme)
) -> User:
    """Get current user from JWT token."""
    payload = verify_token(token) if token else None
    if payload is None or payload.get("sub") is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authorized, token failed",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        user_id = None
    user = await UserRepository(db).get_by_id(user_id) if user_id is not None else None

    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def _with_token(user: User) -> schemas.UserWithToken:
    return schemas.UserWithToken(
        user=schemas.User.model_validate(user),
        token=create_access_token(data={"sub": str(user.id)}),
    )


@router.post("/signup", response_model=ApiResponse[schemas.UserWithToken], status_code=201)
async def signup(
    user_in: schemas.UserCreate,
    db: AsyncSession = Depends(get_db)
) -> Any:
    """Create new user and return JWT token."""
    repo = UserRepository(db)
    if await repo.exists(user_in.email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User already exists with this email",
        )

    user = await repo.create(user_in)
    return ApiResponse(message="User registered successfully", data=_with_token(user))


@router.post("/login", response_model=ApiResponse[schemas.UserWithToken])
async def login(
    credentials: schemas.UserLogin,
    db: AsyncSession = Depends(get_db)
) -> Any:
    """Login user and return JWT token."""
    user = await UserRepository(db).get_by_email(credentials.email)

    if not user or not verify_password(credentials.password, user.password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return ApiResponse(message="Login successful", data=_with_token(user))


@router.get("/profile", response_model=ApiResponse[schemas.UserData])
async def profile(current_user: User = Depends(get_current_user)) -> Any:
    """Get the authenticated user's profile."""
    return ApiResponse(data=schemas.UserData(user=schemas.User.model_validate(current_user)))
