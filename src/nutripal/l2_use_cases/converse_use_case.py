"""Use case: one coach turn — call the model, detect a meal-log action, report the outcome."""

from __future__ import annotations

import asyncio
import datetime as dt
import logging
from collections.abc import Awaitable, Callable, Sequence

from nutripal.l1_entities.bridge_outcome import ActionConfirmed, ConverseResult, PlainReply
from nutripal.l1_entities.chat_message import ChatMessage
from nutripal.l1_entities.coaching_context import CoachingContext
from nutripal.l1_entities.errors import ActionMutationFailed, BridgeError, MalformedResponseError
from nutripal.l1_entities.meal import MealDraft, StoredMeal
from nutripal.l2_use_cases.ports.llm_client import LLMClient
from nutripal.l2_use_cases.utils.action_parser import parse_action
from nutripal.l2_use_cases.utils.backoff import Sleep, call_with_backoff
from nutripal.l2_use_cases.utils.prompt_builder import build_confirmation, build_system_prompt

log = logging.getLogger('nutripal.bridge')

HISTORY_WINDOW = 10
NO_RESPONSE_TEXT = "Sorry, I couldn't generate a response."

CreateMeal = Callable[[MealDraft], Awaitable[StoredMeal]]


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


def stamp_meal_date(meal: MealDraft, active_date: dt.date, now: dt.datetime) -> MealDraft:
    """Give a dateless meal a timestamp on *active_date* (current time when that is today)."""
    if meal.date:
        return meal
    if active_date == now.date():
        stamp = now
    else:
        stamp = dt.datetime.combine(active_date, dt.time(12, 0), tzinfo=dt.timezone.utc)
    return meal.model_copy(update={'date': stamp.isoformat()})


class ConverseUseCase:
    """Turns a chat history + coaching context into one assistant outcome.

    The meal-creation mutation is injected; it is the only side effect.
    """

    def __init__(
        self,
        llm_client: LLMClient,
        create_meal: CreateMeal,
        *,
        model: str,
        history_window: int = HISTORY_WINDOW,
        max_attempts: int = 5,
        initial_delay: float = 1.0,
        sleep: Sleep = asyncio.sleep,
        clock: Callable[[], dt.datetime] = _utcnow,
    ) -> None:
        self._llm = llm_client
        self._create_meal = create_meal
        self._model = model
        self._history_window = history_window
        self._max_attempts = max_attempts
        self._initial_delay = initial_delay
        self._sleep = sleep
        self._clock = clock

    async def execute(self, history: Sequence[ChatMessage], context: CoachingContext) -> ConverseResult:
        """Run one turn. Never raises BridgeError; it is returned in the result."""
        window = list(history[-self._history_window :])
        now = self._clock()
        today_label = 'Today' if context.active_date == now.date() else f'On {context.active_date.isoformat()}'
        system_prompt = build_system_prompt(context, today_label=today_label)
        log.info('Coach request: %d/%d messages, model=%s', len(window), len(history), self._model)

        async def _attempt() -> str:
            return await self._llm.generate(model=self._model, system_prompt=system_prompt, messages=window)

        try:
            text = await call_with_backoff(
                _attempt,
                max_attempts=self._max_attempts,
                initial_delay=self._initial_delay,
                sleep=self._sleep,
            )
        except MalformedResponseError as e:
            log.warning('Could not extract text from model response: %s', e)
            return ConverseResult(outcome=PlainReply(NO_RESPONSE_TEXT))
        except BridgeError as e:
            log.error('Coach request failed: %s: %s', type(e).__name__, e)
            return ConverseResult(error=e)

        log.debug('Model text (%d chars): %s', len(text), text[:500])

        action = parse_action(text)
        if action is None:
            return ConverseResult(outcome=PlainReply(text))

        meal = stamp_meal_date(action.meal, context.active_date, now)
        try:
            created = await self._create_meal(meal)
        except Exception as e:
            log.error('Logging meal %r failed: %s', meal.name, e, exc_info=True)
            return ConverseResult(error=ActionMutationFailed(e))

        log.info('Logged meal %r (%g kcal) from chat', created.name, created.calories)
        return ConverseResult(
            outcome=ActionConfirmed(text=build_confirmation(created.name, created.calories), created_meal=created)
        )
