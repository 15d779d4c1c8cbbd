"""
Domain mappers package.
Handles transformation between ORM models and DTOs (Data Transfer Objects).
"""

from domain.mappers.user_mapper import UserMapper
from domain.mappers.dish_mapper import DishMapper

__all__ = ["UserMapper", "DishMapper"]
