"""Enums for collection fields."""

from enum import Enum


class MuscleGroup(str, Enum):
    """Muscle group an exercise is filed under."""
    CHEST = "chest"
    BACK = "back"
    SHOULDERS = "shoulders"
    BICEPS = "biceps"
    TRICEPS = "triceps"
    LEGS = "legs"
    CORE = "core"
    CARDIO = "cardio"
    OTHER = "other"


class MealType(str, Enum):
    """Meal slot within a day."""
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    SNACK = "snack"
    DINNER = "dinner"


MUSCLE_GROUP_ORDER = [group.value for group in MuscleGroup]
