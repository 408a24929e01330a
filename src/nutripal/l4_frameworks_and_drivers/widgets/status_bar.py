"""Status bar — bottom bar showing the coach model, activity, and keybinding hints."""

from __future__ import annotations

from rich.cells import cell_len
from textual.reactive import reactive
from textual.widgets import Static


class StatusBar(Static):
    """Bottom status bar with who is logged in, what the coach is doing, and hints."""

    DEFAULT_CSS = """
    StatusBar {
        dock: bottom;
        height: 1;
        background: $surface;
        color: $text;
        padding: 0 1;
    }
    """

    user_label: reactive[str] = reactive('')
    model_label: reactive[str] = reactive('')
    activity: reactive[str] = reactive('')
    keybinding_hints: reactive[str] = reactive('')

    def render(self) -> str:
        left_parts = [p for p in (self.user_label, self.model_label) if p]
        left_parts.append(f'⟳ {self.activity}' if self.activity else '○ Ready')
        left = ' │ '.join(left_parts)

        hints = self.keybinding_hints
        if hints:
            content_width = (self.size.width or 80) - 2
            gap = content_width - cell_len(left) - cell_len(hints.replace(r'\[', '['))
            if gap >= 2:
                left = left + ' ' * gap + hints
        return left
