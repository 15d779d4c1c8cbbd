"""
Domain models package - SQLAlchemy ORM models.
"""

from domain.models.database import (
    Base,
    engine,
    SessionLocal,
    init_database,
    get_db_session,
    utcnow,
)
from domain.models.user import (
    AppUser,
    SpecialistProfile,
    ClientProfile,
    ClientSpecialistLink,
    FoodRules,
)
from domain.models.dish import Dish
from domain.models.menu import Menu, MenuAssignment
from domain.models.journal import JournalEntry
from domain.models.chat import ChatThread, ChatMessage

__all__ = [
    # Database
    "Base",
    "engine",
    "SessionLocal",
    "init_database",
    "get_db_session",
    "utcnow",
    # User models
    "AppUser",
    "SpecialistProfile",
    "ClientProfile",
    "ClientSpecialistLink",
    "FoodRules",
    # Dish models
    "Dish",
    # Menu models
    "Menu",
    "MenuAssignment",
    # Journal models
    "JournalEntry",
    # Chat models
    "ChatThread",
    "ChatMessage",
]
