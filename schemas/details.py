"""Body measurement details schema."""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class DetailsUpdate(BaseModel):
    """Body measurements. weight, height and age are required on update."""
    model_config = ConfigDict(populate_by_name=True)

    weight: Optional[float] = Field(None, gt=0, description="Body weight in kg")
    height: Optional[float] = Field(None, gt=0, description="Height in cm")
    age: Optional[int] = Field(None, gt=0)
    bicep: Optional[float] = Field(None, ge=0)
    chest: Optional[float] = Field(None, ge=0)
    thigh: Optional[float] = Field(None, ge=0)
    waist: Optional[float] = Field(None, ge=0)
    belly: Optional[float] = Field(None, ge=0)
    gender: Optional[str] = None
    goal: Optional[str] = None
    activity_level: Optional[str] = Field(None, alias="activityLevel")
