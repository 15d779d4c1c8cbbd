"""
Repositories package - Data access layer.
"""

from repositories.base import BaseRepository
from repositories.user_repository import (
    UserRepository,
    SpecialistProfileRepository,
    ClientProfileRepository,
    LinkRepository,
    FoodRulesRepository,
)
from repositories.dish_repository import DishRepository
from repositories.menu_repository import MenuRepository, AssignmentRepository
from repositories.journal_repository import JournalRepository
from repositories.chat_repository import ChatThreadRepository, ChatMessageRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "SpecialistProfileRepository",
    "ClientProfileRepository",
    "LinkRepository",
    "FoodRulesRepository",
    "DishRepository",
    "MenuRepository",
    "AssignmentRepository",
    "JournalRepository",
    "ChatThreadRepository",
    "ChatMessageRepository",
]
