"""Services package - Business logic layer"""

from services.profile_service import ProfileService
from services.dish_service import DishService
from services.menu_service import MenuService
from services.journal_service import JournalService
from services.chat_service import ChatService
from services.ai_service import AIService

# Note: prompts and llm_normalizer contain plain functions, not classes

__all__ = [
    "ProfileService",
    "DishService",
    "MenuService",
    "JournalService",
    "ChatService",
    "AIService",
]
