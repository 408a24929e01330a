"""Pure functions behind the dashboard and meal tracker views."""

from __future__ import annotations

import datetime as dt
from collections.abc import Iterable

from nutripal.l1_entities.meal import MEAL_TYPES, MacroTotals, MealType, StoredMeal
from nutripal.l1_entities.profile import NutritionGoals


def meals_on(meals: Iterable[StoredMeal], day: dt.date) -> list[StoredMeal]:
    """Meals whose timestamp falls on *day* (matched on the ISO date prefix)."""
    prefix = day.isoformat()
    return [m for m in meals if m.date.startswith(prefix)]


def sum_macros(meals: Iterable[StoredMeal]) -> MacroTotals:
    totals = MacroTotals()
    for m in meals:
        totals.calories += m.calories
        totals.protein += m.protein
        totals.carbs += m.carbs
        totals.fat += m.fat
    return totals


def totals_for(meals: Iterable[StoredMeal], day: dt.date) -> MacroTotals:
    return sum_macros(meals_on(meals, day))


def meals_by_type(meals: Iterable[StoredMeal], day: dt.date) -> dict[MealType, list[StoredMeal]]:
    """Group one day's meals under breakfast, lunch, dinner, snack (always all four keys)."""
    grouped: dict[MealType, list[StoredMeal]] = {t: [] for t in MEAL_TYPES}
    for m in meals_on(meals, day):
        grouped[m.type].append(m)
    return grouped


def weekly_calories(
    meals: Iterable[StoredMeal],
    end_day: dt.date,
    goal: float,
) -> list[tuple[dt.date, float, float]]:
    """(day, calories eaten, calorie goal) for the 7 days ending on *end_day*, oldest first."""
    meals = list(meals)
    rows = []
    for i in range(6, -1, -1):
        day = end_day - dt.timedelta(days=i)
        rows.append((day, sum_macros(meals_on(meals, day)).calories, goal))
    return rows


def recent_meals(meals: Iterable[StoredMeal], day: dt.date, limit: int = 3) -> list[StoredMeal]:
    """Most recently added meals of *day*, newest first."""
    todays = meals_on(meals, day)
    if all(isinstance(m.id, int) for m in todays):
        todays.sort(key=lambda m: m.id, reverse=True)
    else:
        todays.reverse()
    return todays[:limit]


def calorie_progress(totals: MacroTotals, goals: NutritionGoals) -> float:
    """Percent of the calorie target eaten, capped at 100."""
    if goals.calories <= 0:
        return 100.0 if totals.calories > 0 else 0.0
    return min(totals.calories / goals.calories * 100, 100.0)


def calories_left(totals: MacroTotals, goals: NutritionGoals) -> float:
    return max(0.0, goals.calories - totals.calories)
