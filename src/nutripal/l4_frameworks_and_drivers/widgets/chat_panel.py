"""Chat panel — scrolling RichLog of the coach conversation."""

from __future__ import annotations

import pyperclip
from rich.markup import escape
from textual.binding import Binding
from textual.widgets import RichLog

from nutripal.l1_entities.chat_message import ChatMessage

_SPEAKER = {'user': 'You', 'assistant': 'NutriPal'}


class ChatPanel(RichLog):
    """Auto-scrolling conversation display."""

    DEFAULT_CSS = """
    ChatPanel {
        border: solid $primary;
        scrollbar-size: 1 1;
    }
    ChatPanel:focus {
        border: solid $accent;
    }
    """

    BINDINGS = [Binding('c', 'copy_content', 'Copy', show=False)]

    def __init__(self, title: str = 'Coach', **kwargs) -> None:
        super().__init__(highlight=False, markup=True, wrap=True, auto_scroll=True, **kwargs)
        self.border_title = title
        self._all_text: list[str] = []

    def append_message(self, message: ChatMessage) -> None:
        speaker = _SPEAKER[message.role]
        self._all_text.append(f'{speaker}: {message.text}')
        style = 'bold cyan' if message.role == 'user' else 'bold green'
        self.write(f'[{style}]{speaker}:[/{style}] {escape(message.text)}')

    def action_copy_content(self) -> None:
        """Copy the conversation to the system clipboard."""
        if not self._all_text:
            self.app.notify('No conversation to copy', severity='warning', timeout=2)
            return
        pyperclip.copy('\n'.join(self._all_text))
        self.app.notify('Conversation copied', timeout=2)
