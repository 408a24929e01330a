"""NutriPalApp — chat with the coach next to a live dashboard."""

from __future__ import annotations

import logging
from pathlib import Path

from textual.app import App as TextualApp
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import Input, Static

from nutripal.l1_entities.chat_message import ChatMessage
from nutripal.l3_interface_adapters.controllers.session_controller import SMART_REPLIES, NutritionSessionController
from nutripal.l4_frameworks_and_drivers.logging_setup import setup_file_logging
from nutripal.l4_frameworks_and_drivers.messages import CoachFailed, CoachReply
from nutripal.l4_frameworks_and_drivers.widgets.chat_panel import ChatPanel
from nutripal.l4_frameworks_and_drivers.widgets.dashboard_panel import DashboardPanel
from nutripal.l4_frameworks_and_drivers.widgets.status_bar import StatusBar

log = logging.getLogger('nutripal.app')


class NutriPalApp(TextualApp):
    """Single-screen TUI: conversation on the left, today's numbers on the right."""

    CSS = """
    #header {
        height: 1;
        background: $primary;
        color: $text;
        text-style: bold;
    }
    #main-panels {
        height: 1fr;
    }
    #chat-col {
        width: 1fr;
    }
    #chat-input {
        dock: bottom;
    }
    """

    BINDINGS = [
        Binding('ctrl+t', "smart_reply('status')", "Today's Status", priority=True),
        Binding('ctrl+d', "smart_reply('dinner')", 'Dinner Idea', priority=True),
        Binding('ctrl+left', 'shift_day(-1)', 'Previous Day', priority=True),
        Binding('ctrl+right', 'shift_day(1)', 'Next Day', priority=True),
        Binding('ctrl+q', 'quit_app', 'Quit', priority=True),
    ]

    def __init__(
        self,
        controller: NutritionSessionController,
        log_dir: Path | None = None,
        log_level: str = 'DEBUG',
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self._controller = controller
        self._turn_pending = False
        if log_dir is not None:
            setup_file_logging(log_dir, log_level)

    def _build_header_text(self) -> str:
        user = self._controller.user
        name = user.name if user is not None else 'not logged in'
        return f'  NutriPal | {name} | {self._controller.selected_date.isoformat()}'

    def compose(self) -> ComposeResult:
        yield Static(self._build_header_text(), id='header')
        with Horizontal(id='main-panels'):
            with Vertical(id='chat-col'):
                yield ChatPanel(id='chat-panel')
                yield Input(placeholder='Ask NutriPal or say "log 2 eggs for breakfast"...', id='chat-input')
            yield DashboardPanel(id='dashboard-panel')
        yield StatusBar(id='status-bar')

    def on_mount(self) -> None:
        panel = self.query_one('#chat-panel', ChatPanel)
        for message in self._controller.messages:
            panel.append_message(message)
        self._refresh_dashboard()

        bar = self.query_one('#status-bar', StatusBar)
        if self._controller.user is not None:
            bar.user_label = self._controller.user.first_name
        bar.model_label = self._controller.model_name
        bar.keybinding_hints = '  '.join(
            [
                rf'\[^t] {SMART_REPLIES["status"][0]}',
                rf'\[^d] {SMART_REPLIES["dinner"][0]}',
                r'\[^←/→] day',
                r'\[^q] quit',
            ]
        )
        self.query_one('#chat-input', Input).focus()

    def _refresh_dashboard(self) -> None:
        goals = self._controller.goals
        if goals is None:
            return
        ctrl = self._controller
        self.query_one('#dashboard-panel', DashboardPanel).refresh_from(
            ctrl.meals, goals, ctrl.selected_date, ctrl.today
        )

    def _set_busy(self, busy: bool) -> None:
        self._turn_pending = busy
        chat_input = self.query_one('#chat-input', Input)
        chat_input.disabled = busy
        self.query_one('#status-bar', StatusBar).activity = 'NutriPal is thinking...' if busy else ''
        if not busy:
            chat_input.focus()

    # --- Message Handlers ---

    def on_input_submitted(self, event: Input.Submitted) -> None:
        text = event.value.strip()
        if not text:
            return
        event.input.value = ''
        self._start_turn(text)

    def on_coach_reply(self, message: CoachReply) -> None:
        self.query_one('#chat-panel', ChatPanel).append_message(message.reply)
        if message.meals_changed:
            self._refresh_dashboard()
            self.notify('Meal added!', timeout=3)
        self._set_busy(False)

    def on_coach_failed(self, message: CoachFailed) -> None:
        self.notify(message.error, severity='error', timeout=8)
        self._set_busy(False)

    # --- Workers ---

    def _start_turn(self, text: str) -> None:
        if self._turn_pending or self._controller.turn_running:
            self.notify('NutriPal is still answering, please wait', severity='warning', timeout=3)
            return
        self.query_one('#chat-panel', ChatPanel).append_message(ChatMessage(role='user', text=text))
        self._set_busy(True)

        async def _turn_task() -> None:
            meals_before = len(self._controller.meals)
            try:
                reply = await self._controller.send_message(text)
            except Exception as e:
                log.error('Chat turn could not start: %s', e, exc_info=True)
                self.post_message(CoachFailed(error=str(e)))
                return
            self.post_message(CoachReply(reply=reply, meals_changed=len(self._controller.meals) != meals_before))

        self.run_worker(_turn_task, exclusive=True, group='coach')

    # --- Actions ---

    def action_smart_reply(self, key: str) -> None:
        self._start_turn(SMART_REPLIES[key][1])

    def action_shift_day(self, days: int) -> None:
        if self._turn_pending:
            self.notify('Wait for the reply before switching days', severity='warning', timeout=3)
            return
        self._controller.step_selected_date(days)
        self.query_one('#header', Static).update(self._build_header_text())
        self._refresh_dashboard()

    def action_quit_app(self) -> None:
        self._controller.logout()
        self.exit()
