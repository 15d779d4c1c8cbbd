from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class StorageItem(BaseModel):
    name: str
    path: str
    public_url: str
    is_image: bool
    is_pdf: bool
    size: Optional[int] = None
    mimetype: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SpecialistDocuments(BaseModel):
    avatar_url: Optional[str] = None
    certificates: List[StorageItem] = []
    diplomas: List[StorageItem] = []
    other: List[StorageItem] = []
    portfolio: List[StorageItem] = []
