"""Hosted storage listing route"""

from fastapi import APIRouter, Depends, Query
import logging
from typing import List

from adapters.storage_adapter import StorageClient
from api.dependencies import get_current_user, get_storage
from api.responses import ERROR_RESPONSES
from app.config import settings
from app.exceptions import NotFoundError
from domain.models import AppUser
from domain.schemas import StorageItem

router = APIRouter(prefix="/storage", tags=["Storage"], responses=ERROR_RESPONSES)
logger = logging.getLogger("nutricoach.api.storage")


@router.get("/{bucket}", response_model=List[StorageItem])
def list_bucket(
    bucket: str,
    prefix: str = Query("", max_length=500),
    user: AppUser = Depends(get_current_user),
    storage: StorageClient = Depends(get_storage),
):
    """Files of a storage folder with public URLs and image/pdf flags"""
    if bucket not in settings.storage_buckets:
        raise NotFoundError(f"Bucket {bucket} not found")
    return storage.list_folder(bucket, prefix)
