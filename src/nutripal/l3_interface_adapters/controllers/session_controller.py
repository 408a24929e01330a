"""NutritionSessionController — owns the logged-in session and drives the coach."""

from __future__ import annotations

import asyncio
import datetime as dt
import logging
from collections.abc import Callable

from nutripal.l1_entities.bridge_outcome import ActionConfirmed
from nutripal.l1_entities.chat_message import ChatMessage
from nutripal.l1_entities.coaching_context import CoachingContext
from nutripal.l1_entities.config import AppConfig
from nutripal.l1_entities.errors import ActionMutationFailed, BridgeError, ChatBusyError, NotLoggedInError
from nutripal.l1_entities.meal import MacroTotals, MealDraft, StoredMeal
from nutripal.l1_entities.profile import NutritionGoals, Registration, UserProfile
from nutripal.l2_use_cases.converse_use_case import ConverseUseCase, stamp_meal_date
from nutripal.l2_use_cases.ports.llm_client import LLMClient
from nutripal.l2_use_cases.ports.nutrition_backend import NutritionBackend
from nutripal.l2_use_cases.utils.backoff import Sleep
from nutripal.l2_use_cases.utils.meal_stats import totals_for
from nutripal.l2_use_cases.utils.prompt_builder import build_greeting

log = logging.getLogger('nutripal.controller')

CONNECTION_TROUBLE_TEXT = "Sorry, I'm having trouble connecting right now. Please try again later."
MEAL_LOG_FAILED_TEXT = "Sorry, I couldn't log that meal right now. Please try again."

SMART_REPLIES: dict[str, tuple[str, str]] = {
    'status': ("Today's Status", "What's my status for today?"),
    'dinner': ('Dinner Idea', 'What should I have for dinner?'),
}


def fallback_message(error: BridgeError) -> str:
    """The one friendly line shown in the conversation when a turn fails."""
    if isinstance(error, ActionMutationFailed):
        return MEAL_LOG_FAILED_TEXT
    return CONNECTION_TROUBLE_TEXT


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class NutritionSessionController:
    """Central orchestrator between the backend, the coach and the UI.

    Owns user, goals, meals, the chat transcript and the selected tracker date.
    The TUI and CLI delegate every business decision here.
    """

    def __init__(
        self,
        config: AppConfig,
        llm_client: LLMClient,
        backend: NutritionBackend,
        *,
        sleep: Sleep = asyncio.sleep,
        clock: Callable[[], dt.datetime] = _utcnow,
    ) -> None:
        self._config = config
        self._backend = backend
        self._clock = clock
        coach = config.coach
        self._converse_uc = ConverseUseCase(
            llm_client,
            backend.create_meal,
            model=coach.model,
            history_window=coach.history_window,
            max_attempts=coach.retry.max_attempts,
            initial_delay=coach.retry.initial_delay,
            sleep=sleep,
            clock=clock,
        )

        self.user: UserProfile | None = None
        self.goals: NutritionGoals | None = None
        self.meals: list[StoredMeal] = []
        self.messages: list[ChatMessage] = []
        self.selected_date: dt.date = clock().date()
        self._turn_running = False

    # --- Session ---

    @property
    def logged_in(self) -> bool:
        return self.user is not None and self.goals is not None

    @property
    def today(self) -> dt.date:
        return self._clock().date()

    async def login(self, email: str, password: str) -> None:
        await self._backend.login(email, password)
        await self._load()

    async def register(self, registration: Registration) -> None:
        await self._backend.register(registration)
        await self._load()

    async def forgot_password(self, email: str) -> str:
        return await self._backend.forgot_password(email)

    async def reset_password(self, email: str, token: str, new_password: str) -> str:
        return await self._backend.reset_password(email, token, new_password)

    async def _load(self) -> None:
        try:
            data = await self._backend.load_app_data()
        except Exception:
            self._backend.logout()
            raise
        self.user = data.user
        self.goals = data.goals
        self.meals = list(data.meals)
        self.selected_date = self.today
        self.messages = [ChatMessage(role='assistant', text=build_greeting(data.user.name))]
        log.info('Loaded session for %s: %d meals', data.user.email or data.user.name, len(self.meals))

    def logout(self) -> None:
        self._backend.logout()
        self.user = None
        self.goals = None
        self.meals = []
        self.messages = []

    def _require_session(self) -> tuple[UserProfile, NutritionGoals]:
        if self.user is None or self.goals is None:
            raise NotLoggedInError('Log in first')
        return self.user, self.goals

    # --- Tracker ---

    async def add_meal(self, meal: MealDraft) -> StoredMeal:
        """Store a manually entered meal on the selected date."""
        self._require_session()
        stored = await self._backend.create_meal(stamp_meal_date(meal, self.selected_date, self._clock()))
        self.meals.append(stored)
        return stored

    async def delete_meal(self, meal_id: int | str) -> None:
        self._require_session()
        await self._backend.delete_meal(meal_id)
        self.meals = [m for m in self.meals if m.id != meal_id]

    async def update_profile(self, profile: UserProfile) -> UserProfile:
        self._require_session()
        self.user = await self._backend.update_profile(profile)
        return self.user

    async def update_goals(self, goals: NutritionGoals) -> NutritionGoals:
        self._require_session()
        self.goals = await self._backend.update_goals(goals)
        return self.goals

    def select_date(self, day: dt.date) -> dt.date:
        """Change the tracker day. Chat-logged meals and the coaching context follow it."""
        self.selected_date = day
        log.debug('Selected date: %s', day.isoformat())
        return day

    def step_selected_date(self, days: int) -> dt.date:
        return self.select_date(self.selected_date + dt.timedelta(days=days))

    def today_totals(self) -> MacroTotals:
        return totals_for(self.meals, self.today)

    def selected_totals(self) -> MacroTotals:
        return totals_for(self.meals, self.selected_date)

    # --- Coach ---

    def coaching_context(self) -> CoachingContext:
        user, goals = self._require_session()
        return CoachingContext(
            name=user.name,
            age=user.age,
            height=user.height,
            weight=user.weight,
            goal=user.goal,
            targets=goals,
            consumed=self.selected_totals(),
            active_date=self.selected_date,
        )

    @property
    def model_name(self) -> str:
        return self._config.coach.model

    @property
    def turn_running(self) -> bool:
        return self._turn_running

    async def send_message(self, text: str) -> ChatMessage:
        """Run one coach turn. Appends the user turn and exactly one assistant reply."""
        if self._turn_running:
            raise ChatBusyError('A reply is still on its way')
        context = self.coaching_context()
        self._turn_running = True
        self.messages.append(ChatMessage(role='user', text=text))
        window = self.messages[-self._config.coach.history_window :]
        try:
            result = await self._converse_uc.execute(window, context)
        except Exception as e:
            # The transcript must still get its assistant turn.
            log.error('Coach turn crashed: %s', e, exc_info=True)
            result = None
        finally:
            self._turn_running = False

        if result is not None and result.outcome is not None:
            reply_text = result.outcome.text
            if isinstance(result.outcome, ActionConfirmed):
                self.meals.append(result.outcome.created_meal)
        elif result is not None and result.error is not None:
            reply_text = fallback_message(result.error)
        else:
            reply_text = CONNECTION_TROUBLE_TEXT

        reply = ChatMessage(role='assistant', text=reply_text)
        self.messages.append(reply)
        return reply

    async def smart_reply(self, key: str) -> ChatMessage:
        _label, prompt = SMART_REPLIES[key]
        return await self.send_message(prompt)
