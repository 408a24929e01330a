"""Port: nutrition tracking backend (auth, profile, goals, meals)."""

from __future__ import annotations

from typing import Protocol

from nutripal.l1_entities.meal import MealDraft, StoredMeal
from nutripal.l1_entities.profile import AppData, NutritionGoals, Registration, UserProfile


class NutritionBackend(Protocol):
    """Abstract backend. All failures surface as BackendError."""

    async def login(self, email: str, password: str) -> str:
        """Authenticate and remember the session token. Returns the token."""
        ...

    async def register(self, registration: Registration) -> str:
        """Create an account and log in. Returns the session token."""
        ...

    async def forgot_password(self, email: str) -> str:
        """Request a reset token by mail. Returns the backend's message."""
        ...

    async def reset_password(self, email: str, token: str, new_password: str) -> str:
        ...

    async def load_app_data(self) -> AppData:
        """Fetch profile, goals and meal history for the logged-in user."""
        ...

    async def create_meal(self, meal: MealDraft) -> StoredMeal:
        ...

    async def delete_meal(self, meal_id: int | str) -> None:
        ...

    async def update_profile(self, profile: UserProfile) -> UserProfile:
        ...

    async def update_goals(self, goals: NutritionGoals) -> NutritionGoals:
        ...

    def logout(self) -> None:
        """Forget the session token."""
        ...
