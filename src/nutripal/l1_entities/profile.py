"""User profile and goal models — mirror the backend's JSON shapes."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from nutripal.l1_entities.meal import StoredMeal

GoalDirection = Literal['lose', 'maintain', 'gain']


class UserProfile(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    id: int | str | None = None
    name: str
    email: str = ''
    age: int = Field(ge=0)
    height: float = Field(ge=0)  # cm
    weight: float = Field(ge=0)  # kg
    activity_level: str = Field(default='moderate', alias='activityLevel')
    goal: GoalDirection = 'maintain'

    @property
    def first_name(self) -> str:
        return self.name.split(' ')[0] if self.name else ''


class NutritionGoals(BaseModel):
    """Daily targets."""

    model_config = ConfigDict(extra='ignore')

    calories: float = Field(ge=0)
    protein: float = Field(ge=0)
    carbs: float = Field(ge=0)
    fat: float = Field(ge=0)


class Registration(BaseModel):
    """Sign-up form payload."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    email: str
    password: str
    age: int = Field(ge=0)
    height: float = Field(ge=0)
    weight: float = Field(ge=0)
    activity_level: str = Field(default='moderate', alias='activityLevel')
    goal: GoalDirection = 'maintain'


class AppData(BaseModel):
    """Everything the backend returns for the logged-in user."""

    user: UserProfile
    goals: NutritionGoals
    meals: list[StoredMeal] = Field(default_factory=list)
