"""
Colon command interpreter.

Commands return the text for the result banner. Failures raise
TaggingRugbyError subclasses whose message the loop shows as an error
banner. Sentinel results ask the loop to open a form, or to start reading
events from an export the command launched.
"""

from typing import TYPE_CHECKING

from tagging_rugby.models.note import Category, Outcome
from tagging_rugby.services.notes import (
    clip_children,
    note_children,
    tackle_children,
    video_child,
)
from tagging_rugby.utils.exceptions import (
    CommandError,
    NotFoundError,
    PlayerError,
    StoreError,
    ValidationError,
)
from tagging_rugby.utils.logger import get_logger
from tagging_rugby.utils.timeutil import format_time, parse_time_to_seconds

if TYPE_CHECKING:
    from tagging_rugby.tui.model import Model

logger = get_logger(__name__)

OPEN_NOTE_INPUT = "OPEN_NOTE_INPUT"
OPEN_TACKLE_INPUT = "OPEN_TACKLE_INPUT"
EXPORT_STARTED = "EXPORT_STARTED"

HELP_TEXT = (
    "Commands: note add/list/goto/delete, clip start/end/list/play/stop/export, "
    "tackle add/list, pause, play, mute, seek, speed, quit"
)

TACKLE_FLAGS = {
    "--player": "player",
    "-p": "player",
    "--team": "team",
    "-t": "team",
    "--attempt": "attempt",
    "-a": "attempt",
    "--outcome": "outcome",
    "-o": "outcome",
}


def parse_note_id(value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise CommandError(f"invalid note id: {value}") from None


class CommandInterpreter:
    """Runs colon commands against the model's player and store."""

    def __init__(self, model: "Model"):
        self.model = model

    async def execute(self, line: str) -> str:
        """
        Run one command line.

        Args:
            line: Text typed after the colon

        Returns:
            Banner text, "" for nothing to show, or a sentinel

        Raises:
            TaggingRugbyError: If the command fails
        """
        parts = line.split()
        if not parts:
            return ""
        name, args = parts[0].lower(), parts[1:]
        logger.debug(f"Executing command: {line}")

        if name == "note":
            return await self.note(args)
        if name == "clip":
            return await self.clip(args)
        if name == "tackle":
            return await self.tackle(args)
        if name == "nn":
            if not args:
                return OPEN_NOTE_INPUT
            return await self.add_note(" ".join(args))
        if name == "nt":
            return await self.shorthand_tackle(args)
        if name == "cs":
            return await self.clip_start()
        if name == "ce":
            return await self.clip_end(args)
        if name in ("pause", "p"):
            await self.model.player.pause()
            await self.model.persist_position()
            return "Paused"
        if name == "play":
            await self.model.player.play()
            return "Playing"
        if name in ("mute", "m"):
            muted = not await self.model.player.get_mute()
            await self.model.player.set_mute(muted)
            self.model.playback.muted = muted
            return "Muted" if muted else "Unmuted"
        if name == "seek":
            return await self.seek(args)
        if name == "speed":
            return await self.speed(args)
        if name in ("q", "quit"):
            self.model.quitting = True
            return ""
        if name in ("help", "h"):
            return HELP_TEXT
        raise CommandError(f"unknown command: {name}")

    # ═══════════════════════════════════════════════════════════
    # NOTES
    # ═══════════════════════════════════════════════════════════

    async def note(self, args: list[str]) -> str:
        sub = args[0].lower() if args else ""
        if sub == "add":
            text = " ".join(args[1:])
            if not text:
                raise CommandError("note add requires text")
            return await self.add_note(text)
        if sub == "list":
            count = await self.model.store.count_notes(self.model.video_path)
            await self.model.reload()
            return f"{count} note(s) for this video"
        if sub == "goto":
            if len(args) < 2:
                raise CommandError("usage: note goto <id>")
            return await self.goto_note(parse_note_id(args[1]))
        if sub == "delete":
            if len(args) < 2:
                raise CommandError("usage: note delete <id>")
            return await self.delete_note(parse_note_id(args[1]))
        raise CommandError(
            "usage: note add <text> | note list | note goto <id> | note delete <id>"
        )

    async def current_time(self) -> float:
        try:
            return await self.model.player.get_time_pos()
        except PlayerError as e:
            raise CommandError(f"failed to get timestamp: {e.message}") from e

    async def add_note(self, text: str) -> str:
        timestamp = await self.current_time()
        children = note_children(
            text, timestamp, video_child(self.model.video_path, self.model.playback.duration)
        )
        try:
            note_id = await self.model.store.insert_note_with_children(
                Category.NOTE.value, children
            )
        except StoreError as e:
            raise CommandError(f"failed to insert note: {e.message}") from e
        await self.model.reload()
        return f"Note {note_id} added at {format_time(timestamp)}"

    async def goto_note(self, note_id: int) -> str:
        store = self.model.store
        note = await store.select_note_by_id(note_id)
        if note is None:
            raise NotFoundError(f"note {note_id} not found", {"note_id": note_id})
        timings = await store.select_note_timing_by_note(note_id)
        if not timings:
            raise NotFoundError(f"note {note_id} has no timing data", {"note_id": note_id})

        await self.model.player.seek(timings[0].start)

        details = await store.select_note_details_by_note(note_id)
        text = details[0].body if details else ""
        if len(text) > 30:
            text = text[:27] + "..."
        return f"Jumped to note {note_id} [{note.category}]: {text}"

    async def delete_note(self, note_id: int) -> str:
        """Delete a note of any category; its child rows go with it."""
        await self.model.store.delete_note(note_id)
        await self.model.reload()
        return f"Note {note_id} deleted"

    # ═══════════════════════════════════════════════════════════
    # CLIPS
    # ═══════════════════════════════════════════════════════════

    async def clip(self, args: list[str]) -> str:
        sub = args[0].lower() if args else ""
        if sub == "start":
            return await self.clip_start()
        if sub == "end":
            return await self.clip_end(args[1:])
        if sub == "list":
            count = await self.model.store.count_notes(self.model.video_path, Category.CLIP.value)
            return f"{count} clip(s) for this video"
        if sub == "play":
            if len(args) < 2:
                raise CommandError("usage: clip play <id>")
            return await self.play_clip(parse_note_id(args[1]))
        if sub == "export":
            return await self.export_clips(args[1:])
        if sub == "stop":
            await self.model.player.clear_ab_loop()
            return "A-B loop cleared"
        raise CommandError(
            "usage: clip start | clip end [<desc>] | clip list | clip play <id> | clip stop"
            " | clip export [<id>|--all]"
        )

    async def clip_start(self) -> str:
        timestamp = await self.current_time()
        await self.model.persist_position(timestamp)
        self.model.clip_start_ts = timestamp
        self.model.clip_started = True
        return f"Clip start marked at {format_time(timestamp)}"

    async def clip_end(self, args: list[str]) -> str:
        """
        Save a clip from the marked start to now.

        The start mark is only cleared once the clip is stored, so a failed
        attempt can be retried.
        """
        if not self.model.clip_started:
            raise CommandError("no clip start marked. Use 'clip start' first")
        start = self.model.clip_start_ts
        end = await self.current_time()
        if start >= end:
            raise CommandError("clip end must be after start")

        children = clip_children(
            start,
            end,
            " ".join(args),
            video_child(self.model.video_path, self.model.playback.duration),
        )
        note_id = await self.model.store.insert_note_with_children(Category.CLIP.value, children)
        self.model.clip_started = False
        await self.model.reload()
        return f"Clip {note_id} saved ({end - start:.1f}s)"

    async def play_clip(self, note_id: int) -> str:
        store = self.model.store
        if await store.select_note_by_id(note_id) is None:
            raise NotFoundError(f"note {note_id} not found", {"note_id": note_id})
        timings = await store.select_note_timing_by_note(note_id)
        if not timings:
            raise NotFoundError(f"note {note_id} has no timing data", {"note_id": note_id})

        start, end = timings[0].start, timings[0].end
        await self.model.player.seek(start)
        await self.model.player.set_ab_loop(start, end)
        return f"Playing clip {note_id} ({end - start:.1f}s loop)"

    async def export_clips(self, args: list[str]) -> str:
        """
        Cut saved clips to files through the export pipeline.

        With no argument or --all every saved clip on the video is cut;
        with an id only that clip.
        """
        if len(args) > 1:
            raise CommandError("usage: clip export [<id>|--all]")
        note_id = None
        if args and args[0] != "--all":
            note_id = parse_note_id(args[0])
        if self.model.export.running:
            raise CommandError("export already running")
        await self.model.begin_export(saved_clips=True, note_id=note_id)
        return EXPORT_STARTED

    # ═══════════════════════════════════════════════════════════
    # TACKLES
    # ═══════════════════════════════════════════════════════════

    async def tackle(self, args: list[str]) -> str:
        sub = args[0].lower() if args else ""
        if sub == "add":
            values = self.parse_tackle_flags(args[1:])
            try:
                attempt = int(values.get("attempt", ""))
            except ValueError:
                attempt = 0
            for flag in ("player", "team"):
                if not values.get(flag):
                    raise CommandError(f"tackle add requires --{flag}")
            if attempt == 0:
                raise CommandError("tackle add requires --attempt")
            if not values.get("outcome"):
                raise CommandError("tackle add requires --outcome")
            return await self.add_tackle(values["player"], values["team"], attempt, values["outcome"])
        if sub == "list":
            count = await self.model.store.count_notes(
                self.model.video_path, Category.TACKLE.value
            )
            return f"{count} tackle(s) for this video"
        raise CommandError("usage: tackle add -p <player> -t <team> -a <attempt> -o <outcome> | tackle list")

    @staticmethod
    def parse_tackle_flags(args: list[str]) -> dict[str, str]:
        values: dict[str, str] = {}
        i = 0
        while i < len(args):
            key = TACKLE_FLAGS.get(args[i])
            if key is None:
                raise CommandError(f"unknown flag: {args[i]}")
            if i + 1 >= len(args):
                raise CommandError(f"flag {args[i]} needs a value")
            values[key] = args[i + 1]
            i += 2
        return values

    async def shorthand_tackle(self, args: list[str]) -> str:
        if not args:
            return OPEN_TACKLE_INPUT
        if len(args) != 4:
            raise CommandError("usage: :nt <player> <team> <attempt> <outcome>")
        player, team, attempt_text, outcome = args
        try:
            attempt = int(attempt_text)
        except ValueError:
            attempt = 0
        if attempt < 1:
            raise CommandError(f"invalid attempt number: {attempt_text} (must be a positive integer)")
        return await self.add_tackle(player, team, attempt, outcome)

    async def add_tackle(self, player: str, team: str, attempt: int, outcome: str) -> str:
        outcome = outcome.lower()
        if outcome not in Outcome.values():
            raise ValidationError(
                f"invalid outcome '{outcome}': must be missed, completed, possible, or other",
                {"outcome": outcome},
            )
        timestamp = await self.current_time()
        children = tackle_children(
            player,
            attempt,
            outcome,
            timestamp,
            video_child(self.model.video_path, self.model.playback.duration),
            team=team,
        )
        note_id = await self.model.store.insert_note_with_children(Category.TACKLE.value, children)
        await self.model.reload()
        return f"Tackle {note_id} recorded: {player} {outcome}"

    # ═══════════════════════════════════════════════════════════
    # PLAYBACK
    # ═══════════════════════════════════════════════════════════

    async def seek(self, args: list[str]) -> str:
        if not args:
            raise CommandError(
                "seek requires a time argument (e.g., seek 1:11:22 or seek 1:30 or seek 90)"
            )
        try:
            seconds = parse_time_to_seconds(args[0])
        except ValueError as e:
            raise CommandError(str(e)) from e
        await self.model.player.seek(seconds)
        self.model.playback.time_pos = seconds
        return f"Seeked to {format_time(seconds)}"

    async def speed(self, args: list[str]) -> str:
        if not args:
            return f"Speed: {await self.model.player.get_speed():.1f}x"
        try:
            speed = float(args[0])
        except ValueError:
            raise CommandError(f"invalid speed: {args[0]}") from None
        if speed <= 0:
            raise CommandError(f"invalid speed: {args[0]}")
        await self.model.player.set_speed(speed)
        self.model.playback.speed = speed
        return f"Speed set to {speed:.1f}x"
