"""Gateway: in-process demo backend — implements NutritionBackend port without a server."""

from __future__ import annotations

import datetime as dt
import itertools
import secrets

from nutripal.l1_entities.errors import BackendError, NotLoggedInError
from nutripal.l1_entities.meal import MealDraft, StoredMeal
from nutripal.l1_entities.profile import AppData, NutritionGoals, Registration, UserProfile

DEMO_EMAIL = 'mock@user.com'


def _now_iso() -> str:
    return dt.datetime.now(dt.timezone.utc).isoformat()


class _Account:
    def __init__(self, password: str, profile: UserProfile, goals: NutritionGoals) -> None:
        self.password = password
        self.profile = profile
        self.goals = goals
        self.meals: list[StoredMeal] = []
        self.reset_token: str | None = None


class InMemoryNutritionBackend:
    """Keeps accounts and meals in a dict. Seeded with the demo user on construction."""

    def __init__(self, *, seed_demo: bool = True) -> None:
        self._accounts: dict[str, _Account] = {}
        self._tokens: dict[str, str] = {}
        self._ids = itertools.count(1)
        self._current: str | None = None
        if seed_demo:
            self._seed_demo()

    def _seed_demo(self) -> None:
        account = _Account(
            password='demo',
            profile=UserProfile(
                id='mock-id',
                name='Mock User',
                email=DEMO_EMAIL,
                age=30,
                height=175,
                weight=70,
                activity_level='moderate',
                goal='maintain',
            ),
            goals=NutritionGoals(calories=2500, protein=150, carbs=300, fat=80),
        )
        now = _now_iso()
        account.meals = [
            StoredMeal(id=next(self._ids), date=now, name='Mock Breakfast', calories=450, protein=30, carbs=50, fat=15, type='breakfast'),  # fmt: skip
            StoredMeal(id=next(self._ids), date=now, name='Mock Lunch', calories=650, protein=40, carbs=70, fat=25, type='lunch'),  # fmt: skip
        ]
        self._accounts[DEMO_EMAIL] = account

    def _issue_token(self, email: str) -> str:
        token = secrets.token_hex(16)
        self._tokens[token] = email
        self._current = token
        return token

    def _account(self) -> _Account:
        if self._current is None:
            raise NotLoggedInError('No logged-in session')
        return self._accounts[self._tokens[self._current]]

    async def login(self, email: str, password: str) -> str:
        account = self._accounts.get(email.lower())
        # Demo account accepts any password.
        if account is None or (email.lower() != DEMO_EMAIL and account.password != password):
            raise BackendError('Invalid email or password', status=401)
        return self._issue_token(email.lower())

    async def register(self, registration: Registration) -> str:
        email = registration.email.lower()
        if email in self._accounts:
            raise BackendError('User already exists', status=400)
        profile = UserProfile(
            id=f'user-{len(self._accounts) + 1}',
            name=registration.name,
            email=email,
            age=registration.age,
            height=registration.height,
            weight=registration.weight,
            activity_level=registration.activity_level,
            goal=registration.goal,
        )
        self._accounts[email] = _Account(
            password=registration.password,
            profile=profile,
            goals=NutritionGoals(calories=2000, protein=150, carbs=200, fat=65),
        )
        return self._issue_token(email)

    async def forgot_password(self, email: str) -> str:
        account = self._accounts.get(email.lower())
        if account is not None:
            account.reset_token = secrets.token_hex(3)
        return 'If that account exists, a reset token has been sent.'

    def pending_reset_token(self, email: str) -> str | None:
        """Demo-only: the token that would have been mailed."""
        account = self._accounts.get(email.lower())
        return account.reset_token if account else None

    async def reset_password(self, email: str, token: str, new_password: str) -> str:
        account = self._accounts.get(email.lower())
        if account is None or account.reset_token is None or account.reset_token != token:
            raise BackendError('Invalid or expired token', status=400)
        account.password = new_password
        account.reset_token = None
        return 'Password has been reset.'

    async def load_app_data(self) -> AppData:
        account = self._account()
        return AppData(user=account.profile, goals=account.goals, meals=list(account.meals))

    async def create_meal(self, meal: MealDraft) -> StoredMeal:
        account = self._account()
        stored = StoredMeal(**{**meal.model_dump(), 'id': next(self._ids), 'date': meal.date or _now_iso()})
        account.meals.append(stored)
        return stored

    async def delete_meal(self, meal_id: int | str) -> None:
        account = self._account()
        remaining = [m for m in account.meals if m.id != meal_id]
        if len(remaining) == len(account.meals):
            raise BackendError('Meal not found', status=404)
        account.meals = remaining

    async def update_profile(self, profile: UserProfile) -> UserProfile:
        account = self._account()
        account.profile = profile.model_copy(update={'id': account.profile.id, 'email': account.profile.email})
        return account.profile

    async def update_goals(self, goals: NutritionGoals) -> NutritionGoals:
        account = self._account()
        account.goals = goals
        return goals

    def logout(self) -> None:
        if self._current is not None:
            self._tokens.pop(self._current, None)
        self._current = None
