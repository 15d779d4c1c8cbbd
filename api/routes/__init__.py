"""API routes package"""

from . import (
    health,
    users,
    specialists,
    clients,
    dishes,
    menus,
    assignments,
    journal,
    chat,
    ai,
    storage,
)

__all__ = [
    "health",
    "users",
    "specialists",
    "clients",
    "dishes",
    "menus",
    "assignments",
    "journal",
    "chat",
    "ai",
    "storage",
]
