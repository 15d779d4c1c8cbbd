"""
Menu Repository - Data access for menus and their assignments to clients
"""

from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import Menu, MenuAssignment


class MenuRepository(BaseRepository[Menu]):
    """Repository for menu data access"""

    def __init__(self, db: Session):
        super().__init__(db, Menu)

    def get_by_id(self, menu_id: UUID) -> Optional[Menu]:
        return self.db.query(Menu).filter(Menu.menu_id == menu_id).first()

    def get_owned(self, specialist_id: UUID, menu_id: UUID) -> Optional[Menu]:
        return (
            self.db.query(Menu)
            .filter(Menu.menu_id == menu_id, Menu.specialist_id == specialist_id)
            .first()
        )

    def list_by_specialist(self, specialist_id: UUID) -> List[Menu]:
        return (
            self.db.query(Menu)
            .filter(Menu.specialist_id == specialist_id)
            .order_by(Menu.updated_at.desc())
            .all()
        )


class AssignmentRepository(BaseRepository[MenuAssignment]):
    """Repository for menu assignments"""

    def __init__(self, db: Session):
        super().__init__(db, MenuAssignment)

    def get_by_id(self, assignment_id: UUID) -> Optional[MenuAssignment]:
        return (
            self.db.query(MenuAssignment)
            .filter(MenuAssignment.assignment_id == assignment_id)
            .first()
        )

    def list_for_client(
        self, client_id: UUID, specialist_id: Optional[UUID] = None
    ) -> List[MenuAssignment]:
        """Assignments of a client (optionally only those made by one specialist), newest first"""
        q = self.db.query(MenuAssignment).filter(MenuAssignment.client_id == client_id)
        if specialist_id is not None:
            q = q.filter(MenuAssignment.specialist_id == specialist_id)
        return q.order_by(MenuAssignment.created_at.desc()).all()
