"""Collection schemas organized by collection type."""

from schemas.enums import MealType, MuscleGroup, MUSCLE_GROUP_ORDER
from schemas.workout import (
    WorkoutSet,
    ExerciseStat,
    Exercise,
    WorkoutSession,
    SetInput,
    CreateExerciseStatsRequest,
    UpdateExerciseStatsRequest,
)
from schemas.user import RegisterRequest, LoginRequest, ChangePasswordRequest, UserPublic
from schemas.meal import MealKey, MealUpdate
from schemas.details import DetailsUpdate

__all__ = [
    "MealType",
    "MuscleGroup",
    "MUSCLE_GROUP_ORDER",
    "WorkoutSet",
    "ExerciseStat",
    "Exercise",
    "WorkoutSession",
    "SetInput",
    "CreateExerciseStatsRequest",
    "UpdateExerciseStatsRequest",
    "RegisterRequest",
    "LoginRequest",
    "ChangePasswordRequest",
    "UserPublic",
    "MealKey",
    "MealUpdate",
    "DetailsUpdate",
]
