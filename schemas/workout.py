"""Workout collection schema.

One session document per user. Exercises are embedded in the session and
each exercise keeps its own per-day stats history.
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field
from schemas.enums import MuscleGroup


class WorkoutSet(BaseModel):
    """A single set inside a stats entry."""
    model_config = ConfigDict(populate_by_name=True)

    set_number: int = Field(..., alias="setNumber", ge=1, description="1-based position, assigned on write")
    reps: int = Field(..., gt=0, description="Repetitions performed")
    weight: float = Field(0, ge=0, description="Load in kg")
    rest: int = Field(60, ge=0, description="Rest after the set in seconds")
    completed: bool = Field(True, description="Whether the set was completed")
    notes: str = Field("", description="Free text notes")


class ExerciseStat(BaseModel):
    """Stats logged for one exercise on one calendar day."""
    date: datetime = Field(..., description="Calendar day key (midnight UTC)")
    sets: List[WorkoutSet] = Field(default_factory=list)
    notes: str = ""
    rating: int = Field(1, ge=1, le=5, description="Perceived quality, 1 to 5")
    duration: int = Field(0, ge=0, description="Duration in seconds")


class Exercise(BaseModel):
    """Exercise embedded in a workout session."""
    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    name: str = Field(..., description="Exercise name")
    muscle_group: MuscleGroup = Field(..., alias="muscleGroup")
    stats: List[ExerciseStat] = Field(default_factory=list)


class WorkoutSession(BaseModel):
    """Workout session document owning a user's exercises."""
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="userId", description="Owner of the session")
    date: datetime = Field(..., description="Date the session was opened")
    exercises: List[Exercise] = Field(default_factory=list)
    notes: str = "Workout Tracker"
    completed: bool = True


class SetInput(BaseModel):
    """Set as submitted by the client. setNumber is never accepted."""
    reps: Optional[int] = None
    weight: Optional[float] = None
    rest: Optional[int] = None
    completed: Optional[bool] = None
    notes: Optional[str] = None


class CreateExerciseStatsRequest(BaseModel):
    """Body of POST /workouts."""
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    muscle_group: Optional[str] = Field(None, alias="muscleGroup")
    sets: Optional[List[SetInput]] = None
    notes: Optional[str] = None
    rating: Optional[int] = None
    duration: Optional[int] = None


class UpdateExerciseStatsRequest(BaseModel):
    """Body of PUT /workouts/{exercise_id}."""
    sets: Optional[List[SetInput]] = None
    notes: Optional[str] = None
    rating: Optional[int] = None
    duration: Optional[int] = None
