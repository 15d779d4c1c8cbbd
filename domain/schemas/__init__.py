"""
Domain schemas package - Pydantic models for validation.
"""

from domain.schemas.user_schemas import (
    UserCreate,
    UserResponse,
    SpecialistProfileUpdate,
    SpecialistProfileResponse,
    ClientProfileUpdate,
    ClientProfileResponse,
    LinkResponse,
    ClientSummary,
    ClientDetailResponse,
    SpecialistSummary,
    FoodRulesUpdate,
    FoodRulesResponse,
)
from domain.schemas.dish_schemas import (
    IngredientItem,
    Macros,
    DishCreate,
    DishUpdate,
    DishResponse,
)
from domain.schemas.menu_schemas import (
    MenuDay,
    MenuDayMeals,
    MenuCreate,
    MenuUpdate,
    MenuResponse,
    MenuPreviewDay,
    MenuPreviewResponse,
    AssignmentCreate,
    AssignmentUpdate,
    AssignmentResponse,
    AssignmentCreatedResponse,
)
from domain.schemas.journal_schemas import (
    JournalEntryCreate,
    JournalEntryResponse,
    JournalSummaryResponse,
)
from domain.schemas.chat_schemas import (
    ThreadCreate,
    ThreadResponse,
    MessageCreate,
    MessageResponse,
)
from domain.schemas.storage_schemas import StorageItem, SpecialistDocuments

__all__ = [
    # User / profile schemas
    "UserCreate",
    "UserResponse",
    "SpecialistProfileUpdate",
    "SpecialistProfileResponse",
    "ClientProfileUpdate",
    "ClientProfileResponse",
    "LinkResponse",
    "ClientSummary",
    "ClientDetailResponse",
    "SpecialistSummary",
    "FoodRulesUpdate",
    "FoodRulesResponse",
    # Dish schemas
    "IngredientItem",
    "Macros",
    "DishCreate",
    "DishUpdate",
    "DishResponse",
    # Menu schemas
    "MenuDay",
    "MenuDayMeals",
    "MenuCreate",
    "MenuUpdate",
    "MenuResponse",
    "MenuPreviewDay",
    "MenuPreviewResponse",
    "AssignmentCreate",
    "AssignmentUpdate",
    "AssignmentResponse",
    "AssignmentCreatedResponse",
    # Journal schemas
    "JournalEntryCreate",
    "JournalEntryResponse",
    "JournalSummaryResponse",
    # Chat schemas
    "ThreadCreate",
    "ThreadResponse",
    "MessageCreate",
    "MessageResponse",
    # Storage schemas
    "StorageItem",
    "SpecialistDocuments",
]
