"""Plain-text renderings of the dashboard and the meal tracker, shared by the TUI and CLI."""

from __future__ import annotations

import datetime as dt

from nutripal.l1_entities.meal import StoredMeal
from nutripal.l1_entities.profile import NutritionGoals
from nutripal.l2_use_cases.utils.meal_stats import (
    calorie_progress,
    calories_left,
    meals_by_type,
    recent_meals,
    totals_for,
    weekly_calories,
)

_BAR_WIDTH = 20


def progress_bar(value: float, goal: float, width: int = _BAR_WIDTH) -> str:
    ratio = 1.0 if goal <= 0 else min(max(value / goal, 0.0), 1.0)
    filled = round(ratio * width)
    return '█' * filled + '░' * (width - filled)


def render_dashboard(
    meals: list[StoredMeal],
    goals: NutritionGoals,
    day: dt.date,
    today: dt.date | None = None,
) -> str:
    """Progress for *day*. Headed "Today's Progress" unless *today* is given and differs."""
    totals = totals_for(meals, day)
    heading = "Today's Progress" if today is None or day == today else f'Progress on {day.isoformat()}'
    lines = [
        heading,
        f'  {progress_bar(totals.calories, goals.calories)} {calorie_progress(totals, goals):.0f}%',
        f'  {totals.calories:g} / {goals.calories:g} kcal  ({calories_left(totals, goals):g} left)',
        '',
    ]
    for label, value, goal in (
        ('Protein', totals.protein, goals.protein),
        ('Carbs', totals.carbs, goals.carbs),
        ('Fat', totals.fat, goals.fat),
    ):
        lines.append(f'  {label:<8}{progress_bar(value, goal, 12)} {value:g}/{goal:g} g')

    lines.extend(['', 'This Week'])
    for row_day, calories, goal in weekly_calories(meals, day, goals.calories):
        lines.append(f'  {row_day.strftime("%a")} {progress_bar(calories, goal, 12)} {calories:g}')

    lines.extend(['', 'Recent Meals'])
    recent = recent_meals(meals, day)
    if not recent:
        lines.append('  (nothing logged yet)')
    for m in recent:
        lines.append(f'  {m.name} · {m.type} · {m.calories:g} kcal')
    return '\n'.join(lines)


def render_tracker(meals: list[StoredMeal], day: dt.date) -> str:
    """Meals of one day grouped by type, followed by the day's totals."""
    lines = [f'Meals for {day.isoformat()}']
    for meal_type, entries in meals_by_type(meals, day).items():
        lines.append(f'\n{meal_type.capitalize()}')
        if not entries:
            lines.append('  -')
        for m in entries:
            lines.append(f'  [{m.id}] {m.name}: {m.calories:g} kcal  P {m.protein:g}g  C {m.carbs:g}g  F {m.fat:g}g')
    t = totals_for(meals, day)
    lines.append(f'\nTotal: {t.calories:g} kcal  P {t.protein:g}g  C {t.carbs:g}g  F {t.fat:g}g')
    return '\n'.join(lines)
