"""Textual Message subclasses — contracts between chat workers and the App."""

from __future__ import annotations

from textual.message import Message

from nutripal.l1_entities.chat_message import ChatMessage


class CoachReply(Message):
    """Posted by the chat worker when the coach turn has finished (reply or fallback)."""

    def __init__(self, reply: ChatMessage, meals_changed: bool = False) -> None:
        super().__init__()
        self.reply = reply
        self.meals_changed = meals_changed


class CoachFailed(Message):
    """Posted when a turn could not even be started (e.g. session lost)."""

    def __init__(self, error: str) -> None:
        super().__init__()
        self.error = error
