"""Meal collection schema."""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field
from schemas.enums import MealType


class MealKey(BaseModel):
    """Identifies a meal: one per user, calendar day and meal type."""
    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    date: datetime = Field(..., description="Day of the meal")
    meal_type: MealType = Field(..., alias="mealType")


class MealUpdate(MealKey):
    """Meal upsert payload."""
    items: List[str] = Field(default_factory=list, description="Foods eaten")
    calories: Optional[float] = Field(None, ge=0)
    protein: Optional[float] = Field(None, ge=0, description="Protein in grams")
    notes: str = ""
