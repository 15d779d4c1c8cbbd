"""User account routes"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
import logging

from api.dependencies import get_db, get_current_user
from api.responses import ERROR_RESPONSES
from domain.models import AppUser
from domain.schemas import UserCreate, UserResponse
from domain.mappers import UserMapper
from services.profile_service import ProfileService

router = APIRouter(prefix="/users", tags=["Users"], responses=ERROR_RESPONSES)
logger = logging.getLogger("nutricoach.api.users")


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(user: UserCreate, db: Session = Depends(get_db)):
    """
    Register the local account for an identity created by the auth service.

    The returned user_id is what the gateway sends as X-User-Id afterwards.
    """
    new_user = ProfileService.register_user(db, user)
    return UserMapper.to_response(new_user)


@router.get("/me", response_model=UserResponse)
def get_me(user: AppUser = Depends(get_current_user)):
    """Return the calling user"""
    return UserMapper.to_response(user)
