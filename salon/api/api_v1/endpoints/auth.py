from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordRequestForm
from typing import Any, Dict
from datetime import timedelta
import logging

from salon.core.auth import create_access_token, get_current_user, oauth2_scheme
from salon.core.config import settings
from salon.db.mongodb import db
from salon.schemas.token import Token
from salon.schemas.user import UserCreate, UserResponse, UserRole
from salon.services.staff_service import get_staff_by_id
from salon.services.user_service import authenticate_user, create_user, get_user_by_email

router = APIRouter()
logger = logging.getLogger(__name__)

@router.post("/login", response_model=Token)
async def login(form_data: OAuth2PasswordRequestForm = Depends()) -> Any:
    """Exchange email and password for a bearer token"""
    user = await authenticate_user(form_data.username, form_data.password)
    if not user:
        logger.info(f"Failed login for {form_data.username}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token = create_access_token(
        data={"sub": user["id"], "role": user["role"]},
        expires_delta=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    return {"access_token": access_token, "token_type": "bearer"}

@router.get("/me", response_model=UserResponse)
async def read_users_me(current_user: Dict[str, Any] = Depends(get_current_user)):
    """Get current account"""
    return current_user

async def _creator(request: Request) -> Dict[str, Any]:
    """
    Resolve who is creating an account.

    The very first account may be created without a token so that a fresh
    install can bootstrap its admin; after that an admin token is required.
    """
    if await db.db.users.count_documents({}) == 0:
        return {"role": UserRole.ADMIN.value, "bootstrap": True}

    token = await oauth2_scheme(request)
    user = await get_current_user(token)
    if user.get("role") != UserRole.ADMIN.value:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )
    return user

@router.post("/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register_user(user_in: UserCreate, creator: Dict[str, Any] = Depends(_creator)):
    """Create an admin or staff account"""
    if creator.get("bootstrap") and user_in.role != UserRole.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="The first account must be an admin"
        )

    if await get_user_by_email(user_in.email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="An account with this email already exists"
        )

    if user_in.staffId and not await get_staff_by_id(user_in.staffId):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Staff member not found"
        )

    user = await create_user(user_in)
    logger.info(f"Created {user['role']} account {user['id']}")
    return user
