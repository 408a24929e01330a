"""Meal Pydantic models — pure data, no I/O."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

MealType = Literal['breakfast', 'lunch', 'dinner', 'snack']

MEAL_TYPES: tuple[MealType, ...] = ('breakfast', 'lunch', 'dinner', 'snack')


class MealDraft(BaseModel):
    """A meal as entered by the user or proposed by the coach, before the backend stores it."""

    name: str
    calories: float = Field(ge=0)
    protein: float = Field(ge=0)
    carbs: float = Field(ge=0)
    fat: float = Field(ge=0)
    type: MealType
    date: str | None = None  # ISO-8601 timestamp; None = let the caller stamp it


class StoredMeal(MealDraft):
    """A meal record returned by the backend."""

    model_config = ConfigDict(extra='ignore')

    id: int | str
    date: str


class MacroTotals(BaseModel):
    calories: float = 0
    protein: float = 0
    carbs: float = 0
    fat: float = 0
