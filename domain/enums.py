"""
Domain enums for NutriCoach application.
Contains all enumeration types used across the domain models.
"""

import enum


class UserRole(str, enum.Enum):
    """Account role"""

    SPECIALIST = "specialist"
    CLIENT = "client"


class LinkStatus(str, enum.Enum):
    """State of a client/specialist relationship or menu assignment"""

    ACTIVE = "active"
    ARCHIVED = "archived"


class DishCategory(str, enum.Enum):
    """Meal category a dish is designed for"""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


class DishTag(str, enum.Enum):
    """Dietary labels a specialist can attach to a dish"""

    VEGAN = "vegan"
    VEGETARIAN = "vegetarian"
    GLUTEN_FREE = "gluten_free"
    LACTOSE_FREE = "lactose_free"
    NO_ADDED_SUGAR = "no_added_sugar"
    HALAL = "halal"
    KOSHER = "kosher"
    DIABETIC_FRIENDLY = "diabetic_friendly"


class Difficulty(str, enum.Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class IngredientBasis(str, enum.Enum):
    """Whether an ingredient amount refers to raw or cooked weight"""

    RAW = "raw"
    COOKED = "cooked"


class MealSlot(str, enum.Enum):
    """Slots of a menu day"""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


class MenuGoal(str, enum.Enum):
    FAT_LOSS = "fat_loss"
    MUSCLE_GAIN = "muscle_gain"
    MAINTENANCE = "maintenance"
    ENERGY = "energy"


class PlanGoal(str, enum.Enum):
    """Goals accepted by the AI plan generator"""

    FAT_LOSS = "fat_loss"
    MUSCLE_GAIN = "muscle_gain"
    MAINTENANCE = "maintenance"


class Language(str, enum.Enum):
    """Languages the model may be asked to answer in"""

    RU = "ru"
    EN = "en"


class LabReportDetail(str, enum.Enum):
    """How long the lab report explanation should be"""

    SHORT = "short"
    DETAILED = "detailed"
