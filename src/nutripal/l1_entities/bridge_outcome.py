"""Outcome types produced by the conversational action bridge."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel

from nutripal.l1_entities.errors import BridgeError
from nutripal.l1_entities.meal import MealDraft, StoredMeal


class ActionPayload(BaseModel):
    """Structured instruction the model emits instead of prose when asked to log a meal."""

    action: Literal['log_meal']
    meal: MealDraft


@dataclass(frozen=True)
class PlainReply:
    text: str


@dataclass(frozen=True)
class ActionConfirmed:
    text: str
    created_meal: StoredMeal


BridgeOutcome = PlainReply | ActionConfirmed


@dataclass(frozen=True)
class ConverseResult:
    """Result of one conversation turn — either an outcome or the error that stopped it."""

    outcome: BridgeOutcome | None = None
    error: BridgeError | None = None

    @property
    def ok(self) -> bool:
        return self.outcome is not None
