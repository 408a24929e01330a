"""Dashboard panel — today's progress against the user's daily targets."""

from __future__ import annotations

import datetime as dt

from textual.widgets import Static

from nutripal.l1_entities.meal import StoredMeal
from nutripal.l1_entities.profile import NutritionGoals
from nutripal.l4_frameworks_and_drivers.report import render_dashboard


class DashboardPanel(Static):
    """Plain-text dashboard, re-rendered whenever meals change."""

    DEFAULT_CSS = """
    DashboardPanel {
        width: 48;
        height: 1fr;
        border: solid $secondary;
        padding: 0 1;
    }
    """

    def __init__(self, title: str = 'Dashboard', **kwargs) -> None:
        super().__init__('', markup=False, **kwargs)
        self.border_title = title
        self.rendered_text = ''

    def refresh_from(
        self,
        meals: list[StoredMeal],
        goals: NutritionGoals,
        day: dt.date,
        today: dt.date | None = None,
    ) -> None:
        self.rendered_text = render_dashboard(meals, goals, day, today)
        self.update(self.rendered_text)
