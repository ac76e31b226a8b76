"""
Tests for the colon command interpreter.
"""

import pytest

from tagging_rugby.services.export import ExportComplete, ExportFailed
from tagging_rugby.tui.commands import (
    EXPORT_STARTED,
    HELP_TEXT,
    OPEN_NOTE_INPUT,
    OPEN_TACKLE_INPUT,
    CommandInterpreter,
)
from tagging_rugby.tui.state import Mode
from tagging_rugby.utils.exceptions import CommandError, ExportError, NotFoundError, ValidationError


@pytest.fixture
def run(model):
    return model.interpreter.execute


class TestNotes:
    @pytest.mark.asyncio
    async def test_add_list_goto(self, run, model, player):
        player.time_pos = 3725.0
        assert await run("note add Strong carry") == "Note 1 added at 1:02:05"
        assert await run("note list") == "1 note(s) for this video"
        assert len(model.notes.items) == 1

        player.time_pos = 0.0
        assert await run("note goto 1") == "Jumped to note 1 [note]: Strong carry"
        assert player.time_pos == 3725.0

    @pytest.mark.asyncio
    async def test_goto_truncates_text(self, run, player):
        await run("nn " + "x" * 40)
        assert await run("note goto 1") == f"Jumped to note 1 [note]: {'x' * 27}..."

    @pytest.mark.asyncio
    async def test_goto_errors(self, run):
        with pytest.raises(NotFoundError) as exc_info:
            await run("note goto 9")
        assert exc_info.value.message == "note 9 not found"

        with pytest.raises(CommandError) as exc_info:
            await run("note goto nine")
        assert exc_info.value.message == "invalid note id: nine"

    @pytest.mark.asyncio
    async def test_delete(self, run, model, store):
        await run("nn first")
        await run("nn second")

        assert await run("note delete 1") == "Note 1 deleted"
        assert await store.select_note_by_id(1) is None
        assert [item.id for item in model.notes.items] == [2]

    @pytest.mark.asyncio
    async def test_delete_errors(self, run):
        with pytest.raises(NotFoundError) as exc_info:
            await run("note delete 7")
        assert exc_info.value.message == "note 7 not found"

        with pytest.raises(CommandError) as exc_info:
            await run("note delete")
        assert exc_info.value.message == "usage: note delete <id>"

    @pytest.mark.asyncio
    async def test_add_requires_text(self, run):
        with pytest.raises(CommandError):
            await run("note add")

    @pytest.mark.asyncio
    async def test_timestamp_failure(self, run, player):
        player.fail.add("time-pos")
        with pytest.raises(CommandError) as exc_info:
            await run("nn hello")
        assert exc_info.value.message.startswith("failed to get timestamp: ")


class TestTackles:
    @pytest.mark.asyncio
    async def test_add_with_flags(self, run, model):
        result = await run("tackle add -p Smith --team home -a 2 -o MISSED")
        assert result == "Tackle 1 recorded: Smith missed"
        assert await run("tackle list") == "1 tackle(s) for this video"
        assert model.live_stats[0].missed == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "line, message",
        [
            ("tackle add -t home -a 1 -o missed", "tackle add requires --player"),
            ("tackle add -p Smith -a 1 -o missed", "tackle add requires --team"),
            ("tackle add -p Smith -t home -o missed", "tackle add requires --attempt"),
            ("tackle add -p Smith -t home -a 1", "tackle add requires --outcome"),
            ("tackle add -x 1", "unknown flag: -x"),
            ("tackle add -p", "flag -p needs a value"),
        ],
    )
    async def test_add_validation(self, run, line, message):
        with pytest.raises(CommandError) as exc_info:
            await run(line)
        assert exc_info.value.message == message

    @pytest.mark.asyncio
    async def test_bad_outcome(self, run):
        with pytest.raises(ValidationError):
            await run("nt Smith home 1 dropped")

    @pytest.mark.asyncio
    async def test_shorthand_attempt(self, run):
        with pytest.raises(CommandError) as exc_info:
            await run("nt Smith home 0 missed")
        assert "invalid attempt number: 0" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_shorthand_arity(self, run):
        with pytest.raises(CommandError):
            await run("nt Smith home")

    def test_parse_flags(self):
        values = CommandInterpreter.parse_tackle_flags(["--player", "A", "-o", "other"])
        assert values == {"player": "A", "outcome": "other"}


class TestClips:
    @pytest.mark.asyncio
    async def test_end_must_follow_start(self, run, model, player):
        player.time_pos = 20.0
        await run("clip start")
        player.time_pos = 15.0

        with pytest.raises(CommandError) as exc_info:
            await run("clip end")
        assert exc_info.value.message == "clip end must be after start"
        # The mark survives so the clip can be finished later
        assert model.clip_started

    @pytest.mark.asyncio
    async def test_play_and_stop(self, run, player):
        player.time_pos = 10.0
        await run("cs")
        player.time_pos = 14.5
        await run("ce")

        assert await run("clip list") == "1 clip(s) for this video"
        assert await run("clip play 1") == "Playing clip 1 (4.5s loop)"
        assert player.called("set_ab_loop") == [(10.0, 14.5)]
        assert await run("clip stop") == "A-B loop cleared"
        assert player.called("clear_ab_loop") == [()]

    @pytest.mark.asyncio
    async def test_play_missing(self, run):
        with pytest.raises(NotFoundError):
            await run("clip play 4")

    @pytest.mark.asyncio
    async def test_export_starts_pipeline(self, run, model, player):
        player.time_pos = 10.0
        await run("cs")
        player.time_pos = 14.5
        await run("ce kick")

        assert await run("clip export") == EXPORT_STARTED
        assert model.export.running
        assert model.export.total == 1
        assert model.modals.mode == Mode.EXPORT
        while not isinstance(await model.export_queue.get(), (ExportComplete, ExportFailed)):
            pass

    @pytest.mark.asyncio
    async def test_export_errors(self, run, model):
        with pytest.raises(ExportError) as exc_info:
            await run("clip export --all")
        assert exc_info.value.message == "No saved clips found for this video"

        with pytest.raises(NotFoundError) as exc_info:
            await run("clip export 3")
        assert exc_info.value.message == "clip 3 not found"

        with pytest.raises(CommandError):
            await run("clip export 1 2")
        assert not model.export.running


class TestPlayback:
    @pytest.mark.asyncio
    async def test_pause_play_mute(self, run, model, player):
        assert await run("p") == "Paused"
        assert player.paused
        assert await run("play") == "Playing"
        assert await run("mute") == "Muted"
        assert model.playback.muted
        assert await run("m") == "Unmuted"

    @pytest.mark.asyncio
    async def test_speed(self, run, model, player):
        assert await run("speed") == "Speed: 1.0x"
        assert await run("speed 1.5") == "Speed set to 1.5x"
        assert model.playback.speed == 1.5
        with pytest.raises(CommandError):
            await run("speed fast")

    @pytest.mark.asyncio
    async def test_seek_requires_argument(self, run):
        with pytest.raises(CommandError):
            await run("seek")


class TestMisc:
    @pytest.mark.asyncio
    async def test_sentinels(self, run):
        assert await run("nn") == OPEN_NOTE_INPUT
        assert await run("nt") == OPEN_TACKLE_INPUT

    @pytest.mark.asyncio
    async def test_help_and_blank(self, run):
        assert await run("help") == HELP_TEXT
        assert await run("   ") == ""

    @pytest.mark.asyncio
    async def test_quit_sets_flag(self, run, model):
        assert await run("quit") == ""
        assert model.quitting
