"""
API dependencies for dependency injection
"""

from typing import Generator, Optional
from uuid import UUID

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from adapters.llm_adapter import LLMClient, get_llm_client
from adapters.ocr_adapter import OCRReader, get_ocr_reader
from adapters.storage_adapter import StorageClient, get_storage_client
from app.exceptions import ForbiddenError, UnauthorizedError
from domain.enums import UserRole
from domain.models import AppUser, get_db_session
from repositories import UserRepository


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI routes.

    Usage:
        @router.get("/example")
        def example(db: Session = Depends(get_db)):
            # Use db session here
            pass
    """
    yield from get_db_session()


def get_current_user(
    x_user_id: Optional[str] = Header(None, alias="X-User-Id"),
    db: Session = Depends(get_db),
) -> AppUser:
    """
    Resolve the caller from the identity header set by the auth gateway.

    Sign-in itself is handled upstream; here the id is only mapped to a
    stored account.
    """
    if not x_user_id:
        raise UnauthorizedError("Missing X-User-Id header")
    try:
        user_id = UUID(x_user_id.strip())
    except ValueError:
        raise UnauthorizedError("Invalid X-User-Id header")
    user = UserRepository(db).get_by_id(user_id)
    if not user:
        raise UnauthorizedError("Unknown user")
    return user


def require_specialist(user: AppUser = Depends(get_current_user)) -> AppUser:
    if user.role != UserRole.SPECIALIST:
        raise ForbiddenError("Specialist role required")
    return user


def require_client(user: AppUser = Depends(get_current_user)) -> AppUser:
    if user.role != UserRole.CLIENT:
        raise ForbiddenError("Client role required")
    return user


def get_llm() -> LLMClient:
    return get_llm_client()


def get_storage() -> StorageClient:
    return get_storage_client()


def get_ocr() -> OCRReader:
    return get_ocr_reader()
