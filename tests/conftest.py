"""Shared test fixtures and protocol-conforming fakes."""

from __future__ import annotations

import datetime as dt
import itertools
from pathlib import Path

import pytest

from nutripal.l1_entities.chat_message import ChatMessage
from nutripal.l1_entities.coaching_context import CoachingContext
from nutripal.l1_entities.config import AppConfig
from nutripal.l1_entities.errors import BackendError
from nutripal.l1_entities.meal import MacroTotals, MealDraft, StoredMeal
from nutripal.l1_entities.profile import AppData, NutritionGoals, Registration, UserProfile
from nutripal.l4_frameworks_and_drivers.infra_config import build_app_config

FIXED_NOW = dt.datetime(2026, 3, 14, 9, 30, tzinfo=dt.timezone.utc)

# --- Protocol-conforming Fakes ---


class FakeLLMClient:
    """Fake text-generation client. Plays back a script of texts and/or exceptions, one per call."""

    def __init__(self, *script: str | Exception, default: str = 'Fake coach reply'):
        self._script = list(script)
        self._default = default
        self.calls: list[tuple[str, str, list[ChatMessage]]] = []
        self._connectivity = (True, '')

    async def generate(self, model: str, system_prompt: str, messages: list[ChatMessage]) -> str:
        self.calls.append((model, system_prompt, list(messages)))
        item = self._script.pop(0) if self._script else self._default
        if isinstance(item, Exception):
            raise item
        return item

    def check_connectivity(self, model: str) -> tuple[bool, str]:
        return self._connectivity

    def set_connectivity(self, ok: bool, msg: str = '') -> None:
        self._connectivity = (ok, msg)


class FakeBackend:
    """Fake nutrition backend for L2/L3 tests."""

    def __init__(self, app_data: AppData | None = None):
        self.app_data = app_data or make_app_data()
        self._ids = itertools.count(100)
        self.token: str | None = None
        self.create_calls: list[MealDraft] = []
        self.delete_calls: list[int | str] = []
        self.create_error: Exception | None = None
        self.load_error: Exception | None = None
        self.logout_calls = 0

    async def login(self, email: str, password: str) -> str:
        if password == 'wrong':
            raise BackendError('Invalid email or password', status=401)
        self.token = 'tok'
        return self.token

    async def register(self, registration: Registration) -> str:
        self.app_data = self.app_data.model_copy(
            update={'user': self.app_data.user.model_copy(update={'name': registration.name})}
        )
        self.token = 'tok'
        return self.token

    async def forgot_password(self, email: str) -> str:
        return f'sent to {email}'

    async def reset_password(self, email: str, token: str, new_password: str) -> str:
        return 'reset'

    async def load_app_data(self) -> AppData:
        if self.load_error is not None:
            raise self.load_error
        return self.app_data

    async def create_meal(self, meal: MealDraft) -> StoredMeal:
        self.create_calls.append(meal)
        if self.create_error is not None:
            raise self.create_error
        return StoredMeal(**{**meal.model_dump(), 'id': next(self._ids), 'date': meal.date or FIXED_NOW.isoformat()})

    async def delete_meal(self, meal_id: int | str) -> None:
        self.delete_calls.append(meal_id)

    async def update_profile(self, profile: UserProfile) -> UserProfile:
        return profile

    async def update_goals(self, goals: NutritionGoals) -> NutritionGoals:
        return goals

    def logout(self) -> None:
        self.logout_calls += 1
        self.token = None


class RecordingSleep:
    """Async sleep stand-in that records requested delays instead of waiting."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


# --- Builders ---


def make_meal(
    meal_id: int = 1,
    *,
    name: str = 'Oats',
    calories: float = 300,
    protein: float = 10,
    carbs: float = 50,
    fat: float = 5,
    type: str = 'breakfast',
    date: str = '2026-03-14T08:00:00+00:00',
) -> StoredMeal:
    return StoredMeal(
        id=meal_id, name=name, calories=calories, protein=protein, carbs=carbs, fat=fat, type=type, date=date
    )


def make_app_data() -> AppData:
    return AppData(
        user=UserProfile(name='Ada Lovelace', email='ada@example.com', age=36, height=165, weight=58, goal='lose'),
        goals=NutritionGoals(calories=2000, protein=120, carbs=220, fat=60),
        meals=[
            make_meal(1, name='Oats', calories=300),
            make_meal(2, name='Salad', calories=450, type='lunch', date='2026-03-14T12:30:00+00:00'),
            make_meal(3, name='Pizza', calories=900, type='dinner', date='2026-03-13T19:00:00+00:00'),
        ],
    )


def make_context(active_date: dt.date = FIXED_NOW.date()) -> CoachingContext:
    return CoachingContext(
        name='Ada Lovelace',
        age=36,
        height=165,
        weight=58,
        goal='lose',
        targets=NutritionGoals(calories=2000, protein=120, carbs=220, fat=60),
        consumed=MacroTotals(calories=750, protein=20, carbs=100, fat=10),
        active_date=active_date,
    )


def make_history(n: int) -> list[ChatMessage]:
    """Alternating user/assistant turns ending with a user turn, numbered from 0."""
    roles = ['user', 'assistant']
    start = (n - 1) % 2  # so the last one is 'user'
    return [ChatMessage(role=roles[(start + i) % 2], text=f'msg {i}') for i in range(n)]


# --- Standard Fixtures ---


@pytest.fixture
def default_config() -> AppConfig:
    return build_app_config({})


@pytest.fixture
def fake_llm() -> FakeLLMClient:
    return FakeLLMClient()


@pytest.fixture
def fake_backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def sample_config_yaml(tmp_path: Path) -> Path:
    content = """\
coach:
  model: "gemini-test"
  history_window: 6
  retry:
    max_attempts: 3
    initial_delay: 0.5
logging:
  directory: "./test_logs"
  level: "INFO"
gemini:
  base_url: "https://gemini.example.test"
backend:
  base_url: "http://backend.example.test"
"""
    p = tmp_path / 'config.yaml'
    p.write_text(content, encoding='utf-8')
    return p
