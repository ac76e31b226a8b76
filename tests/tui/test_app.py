"""
Tests for the textual app's message loop, driven without a terminal.
"""

import pytest

from tagging_rugby.tui.app import TaggingRugbyApp
from tagging_rugby.tui.messages import Batch, Key, Tick
from tagging_rugby.tui.state import Focus


@pytest.fixture
def app(model, monkeypatch):
    """App whose spawned commands are collected instead of run."""
    app = TaggingRugbyApp(model)
    app.spawned = []
    monkeypatch.setattr(app, "spawn_command", app.spawned.append)
    return app


class TestDispatch:
    @pytest.mark.asyncio
    async def test_handler_error_becomes_banner(self, app, model, monkeypatch):
        async def broken(msg):
            raise RuntimeError("boom")

        monkeypatch.setattr(model, "update", broken)

        await app.dispatch_msg(Key(name="x"))

        assert model.command.result == "Error: boom"
        assert len(app.spawned) == 1

    @pytest.mark.asyncio
    async def test_failed_tick_keeps_polling(self, app, model, monkeypatch):
        async def broken(msg):
            raise OSError("socket closed")

        monkeypatch.setattr(model, "update", broken)

        await app.dispatch_msg(Tick())

        assert isinstance(app.spawned[0], Batch)

    @pytest.mark.asyncio
    async def test_pause_with_locked_database(self, app, model, player, write_lock):
        model.focus = Focus.VIDEO

        with write_lock:
            await app.dispatch_msg(Key(name="space"))

        assert player.paused
        assert not model.command.is_error


class TestExecute:
    @pytest.mark.asyncio
    async def test_failing_command_is_dropped(self, app):
        dispatched = []

        async def command():
            raise PermissionError(13, "Permission denied")

        app.dispatch_msg = dispatched.append
        await app._execute(command)

        assert dispatched == []

    @pytest.mark.asyncio
    async def test_message_is_fed_back(self, app, model):
        async def command():
            return Key(name="j")

        seen = []

        async def dispatch(msg):
            seen.append(msg)

        app.dispatch_msg = dispatch
        await app._execute(command)

        assert seen == [Key(name="j")]
