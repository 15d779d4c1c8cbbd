#!/usr/bin/env python3
"""
Standalone database initialization script.
Creates the tables and optionally seeds a linked demo specialist/client pair.

    python scripts/init_db.py [--seed-demo]
"""

import sys
import argparse
import logging
from pathlib import Path

# Add parent directory to path to import app modules
sys.path.insert(0, str(Path(__file__).parent.parent))

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("init_db")

DEMO_SPECIALIST = "specialist@demo.nutricoach"
DEMO_CLIENT = "client@demo.nutricoach"


def init_tables() -> bool:
    from sqlalchemy import inspect
    from sqlalchemy.exc import SQLAlchemyError
    from domain.models.database import engine, init_database

    try:
        init_database()
    except SQLAlchemyError as e:
        logger.error(f"Failed to initialize database: {e}")
        return False
    tables = inspect(engine).get_table_names()
    logger.info(f"Database ready with {len(tables)} tables: {', '.join(sorted(tables))}")
    return True


def seed_demo() -> None:
    from domain.enums import UserRole, DishCategory
    from domain.models import SessionLocal, Dish
    from repositories import UserRepository, LinkRepository

    db = SessionLocal()
    try:
        users = UserRepository(db)
        specialist = users.get_by_email(DEMO_SPECIALIST) or users.create_user(
            DEMO_SPECIALIST, "Demo Specialist", UserRole.SPECIALIST
        )
        client = users.get_by_email(DEMO_CLIENT) or users.create_user(
            DEMO_CLIENT, "Demo Client", UserRole.CLIENT
        )
        LinkRepository(db).ensure_active(client.user_id, specialist.user_id)
        if not db.query(Dish).filter(Dish.specialist_id == specialist.user_id).first():
            db.add(
                Dish(
                    specialist_id=specialist.user_id,
                    title="Oatmeal with berries",
                    category=DishCategory.BREAKFAST,
                    ingredients=[
                        {"id": "oats01", "name": "Oats", "amount": "60 g", "calories": 225},
                        {"id": "berr01", "name": "Blueberries", "amount": "100 g", "calories": 57},
                    ],
                    macros={"calories": 282, "protein": 8.6, "fat": 4.3, "carbs": 54.5, "fiber": 9.0},
                    tags=["vegetarian"],
                )
            )
        db.commit()
        logger.info(f"Demo specialist X-User-Id: {specialist.user_id}")
        logger.info(f"Demo client X-User-Id: {client.user_id}")
    finally:
        db.close()


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Initialize the NutriCoach database")
    parser.add_argument("--seed-demo", action="store_true", help="create demo users and a dish")
    args = parser.parse_args(argv)

    if not init_tables():
        return 1
    if args.seed_demo:
        seed_demo()
    return 0


if __name__ == "__main__":
    sys.exit(main())
