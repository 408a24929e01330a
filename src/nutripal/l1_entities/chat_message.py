"""Chat message entity — one turn of the coaching conversation."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel


class ChatMessage(BaseModel):
    """A single message in the coach conversation."""

    role: Literal['user', 'assistant']
    text: str
