"""Coaching context — per-call snapshot of who the coach is talking to."""

from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, ConfigDict

from nutripal.l1_entities.meal import MacroTotals
from nutripal.l1_entities.profile import GoalDirection, NutritionGoals


class CoachingContext(BaseModel):
    """Read-only snapshot of profile, targets and consumption.

    Rebuilt for every turn; nothing here is persisted.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    age: int
    height: float
    weight: float
    goal: GoalDirection
    targets: NutritionGoals
    consumed: MacroTotals
    active_date: dt.date
