"""Tests for the Textual TUI app using headless Pilot."""

from __future__ import annotations

import datetime as dt
from unittest.mock import patch

import pytest
from textual.widgets import Input

from nutripal.l3_interface_adapters.controllers.session_controller import NutritionSessionController
from nutripal.l4_frameworks_and_drivers.app import NutriPalApp
from nutripal.l4_frameworks_and_drivers.infra_config import build_app_config
from nutripal.l4_frameworks_and_drivers.widgets.chat_panel import ChatPanel
from nutripal.l4_frameworks_and_drivers.widgets.dashboard_panel import DashboardPanel
from nutripal.l4_frameworks_and_drivers.widgets.status_bar import StatusBar
from tests.conftest import FIXED_NOW, FakeBackend, FakeLLMClient, RecordingSleep

TWO_EGGS = (
    '{"action":"log_meal","meal":{"name":"2 eggs","calories":150,"protein":12,"carbs":1,"fat":10,"type":"breakfast"}}'
)


async def make_app(llm: FakeLLMClient | None = None) -> tuple[NutriPalApp, NutritionSessionController]:
    controller = NutritionSessionController(
        config=build_app_config({}),
        llm_client=llm or FakeLLMClient(),
        backend=FakeBackend(),
        sleep=RecordingSleep(),
        clock=lambda: FIXED_NOW,
    )
    await controller.login('ada@example.com', 'pw')
    return NutriPalApp(controller=controller), controller


async def submit(app: NutriPalApp, pilot, text: str) -> None:
    app.query_one('#chat-input', Input).value = text
    await pilot.press('enter')
    await app.workers.wait_for_complete()
    await pilot.pause()


class TestAppComposition:
    @pytest.mark.asyncio
    async def test_app_has_required_widgets(self):
        app, _ = await make_app()
        async with app.run_test() as pilot:
            await pilot.pause()
            assert app.query_one('#chat-panel', ChatPanel)
            assert app.query_one('#dashboard-panel', DashboardPanel)
            assert app.query_one('#status-bar', StatusBar)
            assert app.query_one('#chat-input', Input).has_focus

    @pytest.mark.asyncio
    async def test_greeting_and_dashboard_on_mount(self):
        app, _ = await make_app()
        async with app.run_test():
            panel = app.query_one('#chat-panel', ChatPanel)
            assert panel._all_text[0].startswith('NutriPal: Hi Ada Lovelace!')  # noqa: SLF001 -- test
            dashboard = app.query_one('#dashboard-panel', DashboardPanel)
            assert '750 / 2000 kcal' in dashboard.rendered_text

    @pytest.mark.asyncio
    async def test_status_bar_labels(self):
        app, _ = await make_app()
        async with app.run_test():
            bar = app.query_one('#status-bar', StatusBar)
            assert bar.user_label == 'Ada'
            assert bar.model_label == 'gemini-2.5-flash'
            assert '○ Ready' in bar.render()


class TestChatTurns:
    @pytest.mark.asyncio
    async def test_submit_shows_reply(self):
        app, controller = await make_app(FakeLLMClient('Drink some water.'))
        async with app.run_test() as pilot:
            await submit(app, pilot, 'Any tips?')

            panel = app.query_one('#chat-panel', ChatPanel)
            assert panel._all_text[-2:] == ['You: Any tips?', 'NutriPal: Drink some water.']  # noqa: SLF001 -- test
            assert controller.messages[-1].text == 'Drink some water.'
            assert not app.query_one('#chat-input', Input).disabled

    @pytest.mark.asyncio
    async def test_blank_input_ignored(self):
        llm = FakeLLMClient()
        app, _ = await make_app(llm)
        async with app.run_test() as pilot:
            await submit(app, pilot, '   ')
            assert llm.calls == []

    @pytest.mark.asyncio
    async def test_logged_meal_refreshes_dashboard(self):
        app, controller = await make_app(FakeLLMClient(TWO_EGGS))
        async with app.run_test() as pilot:
            await submit(app, pilot, 'Log 2 eggs for breakfast')

            dashboard = app.query_one('#dashboard-panel', DashboardPanel)
            assert '900 / 2000 kcal' in dashboard.rendered_text
            assert '2 eggs' in dashboard.rendered_text
            assert controller.meals[-1].name == '2 eggs'

    @pytest.mark.asyncio
    async def test_smart_reply_binding(self):
        llm = FakeLLMClient()
        app, _ = await make_app(llm)
        async with app.run_test() as pilot:
            await pilot.press('ctrl+t')
            await app.workers.wait_for_complete()
            await pilot.pause()
            assert llm.calls[-1][2][-1].text == "What's my status for today?"


class TestChatPanelCopy:
    @pytest.mark.asyncio
    async def test_copy_conversation(self):
        app, _ = await make_app()
        async with app.run_test():
            panel = app.query_one('#chat-panel', ChatPanel)
            with patch('nutripal.l4_frameworks_and_drivers.widgets.chat_panel.pyperclip.copy') as mock_copy:
                panel.action_copy_content()
            copied = mock_copy.call_args.args[0]
            assert copied.startswith('NutriPal: Hi Ada Lovelace!')


class TestDayNavigation:
    @pytest.mark.asyncio
    async def test_previous_day_updates_dashboard_and_context(self):
        app, controller = await make_app()
        async with app.run_test() as pilot:
            await pilot.press('ctrl+left')
            await pilot.pause()
            assert controller.selected_date == FIXED_NOW.date() - dt.timedelta(days=1)
            assert app._build_header_text().endswith('2026-03-13')  # noqa: SLF001 -- test
            dashboard = app.query_one('#dashboard-panel', DashboardPanel)
            assert dashboard.rendered_text.startswith('Progress on 2026-03-13')
            assert controller.coaching_context().active_date == dt.date(2026, 3, 13)

            await pilot.press('ctrl+right')
            await pilot.pause()
            assert controller.selected_date == FIXED_NOW.date()

    @pytest.mark.asyncio
    async def test_chat_meal_lands_on_viewed_day(self):
        app, controller = await make_app(FakeLLMClient(TWO_EGGS))
        async with app.run_test() as pilot:
            app.action_shift_day(-2)
            await submit(app, pilot, 'Log 2 eggs')
            assert controller.meals[-1].date == '2026-03-12T12:00:00+00:00'


class TestTurnGuard:
    @pytest.mark.asyncio
    async def test_second_turn_rejected_before_worker_starts(self):
        llm = FakeLLMClient()
        app, controller = await make_app(llm)
        async with app.run_test() as pilot:
            app.action_smart_reply('status')
            app.action_smart_reply('dinner')
            await app.workers.wait_for_complete()
            await pilot.pause()
            assert len(llm.calls) == 1
            assert [m.text for m in controller.messages if m.role == 'user'] == ["What's my status for today?"]


class TestQuit:
    @pytest.mark.asyncio
    async def test_quit_logs_out(self):
        app, controller = await make_app()
        async with app.run_test() as pilot:
            await pilot.press('ctrl+q')
        assert not controller.logged_in
