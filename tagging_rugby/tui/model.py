"""
Event-loop core of the terminal UI.

Model.update() consumes one message at a time, mutates the model and
returns the next command (or None). Input is routed to the top of the
modal stack; within the main view it goes to the focused panel.
"""

import asyncio
import math

from tagging_rugby.config import Config
from tagging_rugby.core.encoder.base import Encoder
from tagging_rugby.core.encoder.ffmpeg import FFmpegEncoder
from tagging_rugby.core.player.base import Player
from tagging_rugby.core.store.sqlite_store import SQLiteNoteStore
from tagging_rugby.models.note import Category, NoteTiming, Video
from tagging_rugby.models.records import TackleStats
from tagging_rugby.services.export import (
    ExportComplete,
    ExportFailed,
    ExportProgress,
    next_export_event,
    prepare_export,
)
from tagging_rugby.services.notes import (
    note_children,
    tackle_children,
    tackle_details,
    video_child,
)
from tagging_rugby.tui.commands import (
    EXPORT_STARTED,
    OPEN_NOTE_INPUT,
    OPEN_TACKLE_INPUT,
    CommandInterpreter,
)
from tagging_rugby.tui.components.clips_view import clip_lines, visible_height
from tagging_rugby.tui.forms import (
    DiscardResult,
    EditTackleFormResult,
    FormState,
    NoteFormResult,
    TackleFormResult,
    new_confirm_discard_form,
    new_edit_tackle_form,
    new_note_form,
    new_tackle_form,
)
from tagging_rugby.tui.messages import (
    Batch,
    ClearResult,
    Cmd,
    Key,
    Msg,
    Resize,
    Tick,
    batch,
    clear_result_after,
    quit_now,
    tick_after,
)
from tagging_rugby.tui.overlay import OVERLAY_ID, nearby_notes, overlay_text
from tagging_rugby.tui.state import (
    FOCUS_ORDER,
    FORM_MODES,
    ClipsViewState,
    CommandInputState,
    ExportProgressState,
    Focus,
    Modal,
    ModalStack,
    Mode,
    NotesListState,
    PlaybackState,
    SearchState,
    SortColumn,
    StatsViewState,
    decrease_speed,
    decrease_step,
    increase_speed,
    increase_step,
)
from tagging_rugby.utils.exceptions import (
    CommandError,
    NotConnectedError,
    PlayerError,
    StoreError,
    TaggingRugbyError,
)
from tagging_rugby.utils.logger import get_logger
from tagging_rugby.utils.timeutil import format_time, parse_time_to_seconds

logger = get_logger(__name__)


class Model:
    """
    All UI state plus the handlers that change it.

    Attributes:
        player: Player client
        store: Note store
        video_path: Video being annotated
        video: Registry row for the video, when registered
        modals: Modal stack; MAIN at the bottom
        focus: Focused panel of the main view
    """

    def __init__(
        self,
        player: Player,
        store: SQLiteNoteStore,
        video_path: str,
        config: Config | None = None,
        encoder: Encoder | None = None,
        video: Video | None = None,
    ):
        self.config = config or Config()
        self.player = player
        self.store = store
        self.video_path = video_path
        self.video = video
        self.encoder = encoder or FFmpegEncoder(
            binary=self.config.export.binary,
            preset=self.config.export.preset,
            stream_copy=self.config.export.stream_copy,
        )

        self.width = 0
        self.height = 0
        self.focus = Focus.VIDEO
        self.modals = ModalStack()

        self.playback = PlaybackState(step_size=self.config.ui.default_step_size)
        self.search = SearchState()
        self.notes = NotesListState()
        self.command = CommandInputState()
        self.stats_view = StatsViewState()
        self.live_stats: list[TackleStats] = []
        self.live_sort = SortColumn.TOTAL
        self.clips_view = ClipsViewState()
        self.export = ExportProgressState()
        self.export_queue: asyncio.Queue | None = None

        self.number_buffer = ""
        self.last_key_g = False
        self.clip_start_ts = 0.0
        self.clip_started = False
        self.quitting = False

        self.interpreter = CommandInterpreter(self)

    # ═══════════════════════════════════════════════════════════
    # LIFECYCLE
    # ═══════════════════════════════════════════════════════════

    async def init(self) -> Cmd:
        """Load the list, resume at the stored position and start ticking."""
        await self.reload()
        if self.video is not None and self.video.stopped_at > 0 and self.player.is_connected:
            try:
                await self.player.seek(self.video.stopped_at)
                logger.info(f"Resumed {self.video_path} at {format_time(self.video.stopped_at)}")
            except PlayerError as e:
                logger.warning(f"Could not resume playback position: {e}")
        await self.poll_player()
        return tick_after(self.config.ui.tick_interval)

    async def update(self, msg: Msg) -> Cmd | Batch | None:
        """
        Handle one message.

        Returns:
            The next command, a batch of commands, or None
        """
        if isinstance(msg, Resize):
            self.width, self.height = msg.width, msg.height
            return None
        if isinstance(msg, Tick):
            return await self.on_tick()
        if isinstance(msg, ClearResult):
            if msg.generation == self.command.generation:
                self.command.clear_result()
            return None
        if isinstance(msg, (ExportProgress, ExportComplete, ExportFailed)):
            return self.on_export_event(msg)
        if isinstance(msg, Key):
            return await self.on_key(msg.name)
        return None

    def recover(self, msg: Msg, error: Exception) -> Cmd | Batch | None:
        """
        Keep the loop running after a handler raised unexpectedly.

        The failure becomes an error banner. A failed tick is rescheduled so
        polling carries on.
        """
        logger.opt(exception=error).error(f"Handling {type(msg).__name__} failed: {error}")
        message = error.message if isinstance(error, TaggingRugbyError) else str(error)
        banner = self.show_error(message or type(error).__name__)
        if isinstance(msg, Tick):
            return batch(banner, tick_after(self.config.ui.tick_interval))
        return banner

    async def quit(self) -> Cmd:
        self.quitting = True
        await self.persist_position()
        return quit_now()

    async def persist_position(self, position: float | None = None) -> None:
        """Store the resume position for the video."""
        if self.video is None or self.video.id is None:
            return
        if position is None:
            try:
                position = await self.player.get_time_pos()
            except PlayerError:
                position = self.playback.time_pos
        try:
            await self.store.update_video_stopped(self.video.id, position)
        except StoreError as e:
            logger.warning(f"Could not save playback position: {e}")

    async def reload(self) -> None:
        """Re-read the notes list and the live stats for the video."""
        self.notes.set_items(await self.store.select_list_items(self.video_path))
        if self.search.value:
            self.search.update_matches(self.notes.items)
        self.live_stats = await self.store.select_tackle_stats(self.video_path)

    # ═══════════════════════════════════════════════════════════
    # BANNERS
    # ═══════════════════════════════════════════════════════════

    def show_result(self, text: str, is_error: bool = False) -> Cmd:
        generation = self.command.set_result(text, is_error)
        return clear_result_after(self.config.ui.result_display_duration, generation)

    def show_error(self, message: str) -> Cmd:
        return self.show_result(f"Error: {message}", is_error=True)

    # ═══════════════════════════════════════════════════════════
    # TICK
    # ═══════════════════════════════════════════════════════════

    async def on_tick(self) -> Cmd:
        await self.poll_player()
        if self.playback.overlay_enabled:
            await self.update_overlay()
        try:
            self.live_stats = await self.store.select_tackle_stats(self.video_path)
        except StoreError as e:
            logger.warning(f"Could not refresh live stats: {e}")
        return tick_after(self.config.ui.tick_interval)

    async def poll_player(self) -> None:
        """Refresh playback state; a failed read keeps the previous value."""
        self.playback.connected = self.player.is_connected
        if not self.playback.connected:
            return

        readers = (
            ("paused", self.player.get_paused),
            ("muted", self.player.get_mute),
            ("time_pos", self.player.get_time_pos),
            ("duration", self.player.get_duration),
            ("speed", self.player.get_speed),
        )
        for attr, read in readers:
            try:
                setattr(self.playback, attr, await read())
            except PlayerError as e:
                logger.warning(f"Polling {attr} failed: {e}")

    async def update_overlay(self) -> None:
        if not self.player.is_connected:
            return
        notes = nearby_notes(
            self.notes.items, self.playback.time_pos, self.config.ui.overlay_proximity
        )
        try:
            if notes:
                await self.player.show_overlay(OVERLAY_ID, overlay_text(notes))
            else:
                await self.player.hide_overlay(OVERLAY_ID)
        except PlayerError as e:
            logger.debug(f"Overlay update failed: {e}")

    # ═══════════════════════════════════════════════════════════
    # KEY ROUTING
    # ═══════════════════════════════════════════════════════════

    async def on_key(self, key: str) -> Cmd | Batch | None:
        """Route a key to the top of the modal stack, turning errors into banners."""
        if key == "ctrl+c":
            return await self.quit()

        mode = self.modals.mode
        try:
            if mode == Mode.HELP:
                self.modals.pop()
                return None
            if mode == Mode.STATS:
                return await self.on_stats_key(key)
            if mode == Mode.CONFIRM_DISCARD:
                return self.on_confirm_key(key)
            if mode in FORM_MODES:
                return await self.on_form_key(key)
            if mode == Mode.CLIPS:
                return self.on_clips_key(key)
            if mode == Mode.EXPORT:
                return self.on_export_key(key)
            if mode == Mode.COMMAND:
                return await self.on_command_key(key)
            return await self.on_main_key(key)
        except TaggingRugbyError as e:
            logger.debug(f"Key {key!r} failed: {e}")
            return self.show_error(e.message)

    async def on_main_key(self, key: str) -> Cmd | Batch | None:
        if key in ("tab", "shift+tab"):
            forward = key == "tab"
            if self.focus == Focus.SEARCH and self.search.matches:
                self.notes.selected = self.search.cycle(forward)
            else:
                self.cycle_focus(forward)
            return None

        if self.focus != Focus.SEARCH:
            if key == "?":
                self.modals.push(Modal(Mode.HELP))
                return None
            if key in ("s", "S"):
                await self.load_stats()
                self.modals.push(Modal(Mode.STATS))
                return None
            if key in ("n", "N"):
                return await self.open_note_form()
            if key in ("t", "T"):
                return await self.open_tackle_form()

        if self.focus == Focus.SEARCH:
            return self.on_search_key(key)
        if self.focus == Focus.VIDEO:
            return await self.on_video_key(key)
        return await self.on_notes_key(key)

    def cycle_focus(self, forward: bool = True) -> None:
        index = FOCUS_ORDER.index(self.focus)
        step = 1 if forward else -1
        self.focus = FOCUS_ORDER[(index + step) % len(FOCUS_ORDER)]

    def activate_command(self) -> None:
        self.command.activate()
        self.modals.push(Modal(Mode.COMMAND))

    # ═══════════════════════════════════════════════════════════
    # SEARCH
    # ═══════════════════════════════════════════════════════════

    def on_search_key(self, key: str) -> Cmd | None:
        search = self.search
        if key == "esc":
            search.reset()
            self.focus = Focus.NOTES
            return None
        if key == "enter":
            if search.matches:
                self.notes.selected = search.matches[search.current_match]
            self.focus = Focus.NOTES
            return None
        if key == ":" and not search.value:
            self.activate_command()
            return None

        if key == "backspace":
            search.backspace()
        elif key == "delete":
            search.delete()
        elif key == "left":
            search.left()
            return None
        elif key == "right":
            search.right()
            return None
        elif key == "space":
            search.insert(" ")
        elif len(key) == 1 and key.isprintable():
            search.insert(key)
        else:
            return None

        search.update_matches(self.notes.items)
        if search.matches:
            self.notes.selected = search.matches[0]
        return None

    # ═══════════════════════════════════════════════════════════
    # VIDEO
    # ═══════════════════════════════════════════════════════════

    async def on_video_key(self, key: str) -> Cmd | None:
        player = self.player
        playback = self.playback

        if key == "space":
            await player.toggle_pause()
            playback.paused = not playback.paused
            await self.persist_position()
        elif key in ("m", "M"):
            await player.set_mute(not playback.muted)
            playback.muted = not playback.muted
        elif key == "ctrl+h":
            await player.frame_back_step()
        elif key == "ctrl+l":
            await player.frame_step()
        elif key in ("h", "H", "left"):
            await player.seek_relative(-playback.step_size)
        elif key in ("l", "L", "right"):
            await player.seek_relative(playback.step_size)
        elif key in ("<", ","):
            playback.step_size = decrease_step(playback.step_size)
        elif key in (">", "."):
            playback.step_size = increase_step(playback.step_size)
        elif key in ("[", "{"):
            await self.set_speed(decrease_speed(playback.speed))
        elif key in ("]", "}"):
            await self.set_speed(increase_speed(playback.speed))
        elif key == "\\":
            await self.set_speed(1.0)
        elif key in ("o", "O"):
            playback.overlay_enabled = not playback.overlay_enabled
            if playback.overlay_enabled:
                await self.update_overlay()
            else:
                await player.hide_overlay(OVERLAY_ID)
        elif key in ("x", "X"):
            self.live_sort = SortColumn((self.live_sort + 1) % len(SortColumn))
        return None

    async def set_speed(self, speed: float) -> None:
        await self.player.set_speed(speed)
        self.playback.speed = speed

    # ═══════════════════════════════════════════════════════════
    # NOTES LIST
    # ═══════════════════════════════════════════════════════════

    async def on_notes_key(self, key: str) -> Cmd | None:
        notes = self.notes

        if len(key) == 1 and key.isdigit():
            self.last_key_g = False
            if key == "0" and not self.number_buffer:
                notes.jump_to(0)
            else:
                self.number_buffer += key
            return None

        if key == "g":
            if self.last_key_g:
                notes.jump_to(0)
                self.last_key_g = False
                self.number_buffer = ""
            else:
                self.last_key_g = True
            return None

        buffer = self.number_buffer
        self.number_buffer = ""
        self.last_key_g = False

        if key == "G":
            notes.jump_to(int(buffer) - 1 if buffer else len(notes.items) - 1)
        elif key == "$":
            notes.jump_to(len(notes.items) - 1)
        elif key in ("j", "J", "down"):
            notes.move_down()
        elif key in ("k", "K", "up"):
            notes.move_up()
        elif key == "enter":
            return await self.jump_to_selected()
        elif key in ("e", "E"):
            return await self.open_edit_form()
        elif key in ("x", "X"):
            return await self.delete_selected()
        elif key == ":":
            self.activate_command()
        elif key == "ctrl+e":
            return await self.start_export()
        elif key in ("c", "C"):
            await self.open_clips_view()
        return None

    async def jump_to_selected(self) -> Cmd:
        item = self.notes.selected_item()
        if item is None:
            return self.show_result("No item selected", is_error=True)
        if not self.player.is_connected:
            return self.show_result("Not connected to mpv", is_error=True)

        await self.player.seek(item.start)
        self.playback.time_pos = item.start

        info = item.text
        if len(info) > 40:
            info = info[:37] + "..."
        if item.is_tackle and item.player:
            info = f"{item.player}: {info}" if info else item.player
        if not item.is_tackle and item.category:
            info = f"[{item.category}] {info}" if info else f"[{item.category}]"
        star = " ★" if item.starred else ""
        kind = "tackle" if item.is_tackle else "note"
        return self.show_result(f"Jumped to {kind} {item.id}{star}: {info}")

    async def delete_selected(self) -> Cmd:
        item = self.notes.selected_item()
        if item is None:
            return self.show_result("No item selected", is_error=True)
        await self.store.delete_note(item.id)
        await self.reload()
        kind = "tackle" if item.is_tackle else "note"
        return self.show_result(f"Deleted {kind} {item.id}")

    async def open_clips_view(self) -> None:
        self.clips_view.clips = await self.store.select_clips(self.video_path)
        self.clips_view.scroll_offset = 0
        self.modals.push(Modal(Mode.CLIPS))

    def on_clips_key(self, key: str) -> None:
        if key in ("esc", "q", "Q", "backspace"):
            self.modals.pop()
        elif key in ("j", "J", "down"):
            total = len(clip_lines(self.clips_view))
            self.clips_view.scroll_down(visible_height(self.height), total)
        elif key in ("k", "K", "up"):
            self.clips_view.scroll_up()
        return None

    # ═══════════════════════════════════════════════════════════
    # COMMAND LINE
    # ═══════════════════════════════════════════════════════════

    async def on_command_key(self, key: str) -> Cmd | Batch | None:
        command = self.command
        if key == "esc":
            command.deactivate()
            self.modals.pop()
            return None
        if key == "enter":
            line = command.take()
            command.deactivate()
            self.modals.pop()
            return await self.run_command(line)
        if key == "backspace":
            if not command.value:
                command.deactivate()
                self.modals.pop()
            else:
                command.backspace()
        elif key == "delete":
            command.delete()
        elif key == "left":
            command.left()
        elif key == "right":
            command.right()
        elif key == "space":
            command.insert(" ")
        elif len(key) == 1 and key.isprintable():
            command.insert(key)
        return None

    async def run_command(self, line: str) -> Cmd | Batch | None:
        result = await self.interpreter.execute(line)
        if self.quitting:
            return await self.quit()
        if result == OPEN_NOTE_INPUT:
            return await self.open_note_form()
        if result == EXPORT_STARTED:
            return self.wait_for_export()
        if result == OPEN_TACKLE_INPUT:
            return await self.open_tackle_form()
        if not result:
            return None
        return self.show_result(result)

    # ═══════════════════════════════════════════════════════════
    # FORMS
    # ═══════════════════════════════════════════════════════════

    async def capture_timestamp(self) -> float:
        """Current position for a new note, persisted as the resume point."""
        if not self.player.is_connected:
            raise NotConnectedError("Not connected to mpv")
        try:
            timestamp = await self.player.get_time_pos()
        except PlayerError as e:
            raise CommandError(f"Failed to get timestamp: {e.message}") from e
        await self.persist_position(timestamp)
        return timestamp

    async def open_note_form(self) -> Cmd | None:
        try:
            timestamp = await self.capture_timestamp()
        except TaggingRugbyError as e:
            return self.show_result(e.message, is_error=True)
        form = new_note_form(timestamp, NoteFormResult())
        self.modals.push(Modal(Mode.NOTE_FORM, form, timestamp=timestamp))
        return None

    async def open_tackle_form(self) -> Cmd | None:
        try:
            timestamp = await self.capture_timestamp()
        except TaggingRugbyError as e:
            return self.show_result(e.message, is_error=True)
        form = new_tackle_form(timestamp, TackleFormResult())
        self.modals.push(Modal(Mode.TACKLE_FORM, form, timestamp=timestamp))
        return None

    async def open_edit_form(self) -> Cmd | None:
        item = self.notes.selected_item()
        if item is None:
            return self.show_result("No item selected", is_error=True)
        if not item.is_tackle:
            return self.show_result("Only tackles can be edited", is_error=True)

        data = await self.store.load_note_for_edit(item.id)
        result = EditTackleFormResult(
            player=data.player,
            attempt=str(data.attempt) if data.attempt else "",
            outcome=data.outcome,
            followed=data.followed,
            notes=data.notes,
            zone=data.zone,
            star=data.star,
        )
        form = new_edit_tackle_form(data.timestamp, data.end_seconds, result)
        self.modals.push(Modal(Mode.EDIT_FORM, form, timestamp=data.timestamp, note_id=item.id))
        return None

    async def on_form_key(self, key: str) -> Cmd | None:
        modal = self.modals.top
        form = modal.form
        state = form.handle_key(key)

        if state == FormState.ABORTED:
            if form.result.has_data():
                confirm = new_confirm_discard_form(DiscardResult())
                self.modals.push(Modal(Mode.CONFIRM_DISCARD, confirm))
            else:
                self.modals.pop()
            return None

        if state != FormState.COMPLETED:
            return None

        if modal.mode == Mode.NOTE_FORM:
            message = await self.save_note(modal)
        elif modal.mode == Mode.TACKLE_FORM:
            message = await self.save_tackle(modal)
        else:
            message = await self.save_edit(modal)
        self.modals.pop()
        await self.reload()
        return self.show_result(message)

    def on_confirm_key(self, key: str) -> None:
        """
        Handle the discard prompt.

        Declining (or esc) pops back to the form underneath with its step
        and values intact; confirming drops the form as well.
        """
        confirm = self.modals.top.form
        state = confirm.handle_key(key)
        if state == FormState.ABORTED:
            self.modals.pop()
        elif state == FormState.COMPLETED:
            self.modals.pop()
            if confirm.result.discard:
                self.modals.pop()
        return None

    async def save_note(self, modal: Modal) -> str:
        result: NoteFormResult = modal.form.result
        children = note_children(
            result.text.strip(),
            modal.timestamp,
            video_child(self.video_path, self.playback.duration),
            player=result.player.strip(),
            team=result.team.strip(),
        )
        category = result.category.strip() or Category.NOTE.value
        note_id = await self.store.insert_note_with_children(category, children)
        return f"Note {note_id} added at {format_time(modal.timestamp)}"

    async def save_tackle(self, modal: Modal) -> str:
        result: TackleFormResult = modal.form.result
        children = tackle_children(
            result.player.strip(),
            int(result.attempt.strip()),
            result.outcome,
            modal.timestamp,
            video_child(self.video_path, self.playback.duration),
            followed=result.followed.strip(),
            notes=result.notes.strip(),
            zone=result.zone.strip(),
            star=result.star,
        )
        note_id = await self.store.insert_note_with_children(Category.TACKLE.value, children)
        star = " ★" if result.star else ""
        return f"Tackle {note_id} recorded: {result.player.strip()} {result.outcome}{star}"

    async def save_edit(self, modal: Modal) -> str:
        """Rewrite the tackle's editable children and its timing in one transaction."""
        result: EditTackleFormResult = modal.form.result
        try:
            start = parse_time_to_seconds(result.timestamp)
        except ValueError:
            raise CommandError("invalid timestamp") from None
        try:
            length = float(result.end_seconds)
        except ValueError:
            length = 2.0
        if not math.isfinite(length) or length <= 0:
            length = 2.0

        details = await self.store.select_note_details_by_note(modal.note_id)
        team = next((d.body for d in details if d.type == "team"), "")
        children = tackle_details(
            result.player.strip(),
            int(result.attempt.strip()),
            result.outcome,
            followed=result.followed.strip(),
            notes=result.notes.strip(),
            zone=result.zone.strip(),
            star=result.star,
            team=team,
        )
        await self.store.update_note_with_children(
            modal.note_id, children, timing=NoteTiming(start=start, end=start + length)
        )
        return f"Updated tackle {modal.note_id}"

    # ═══════════════════════════════════════════════════════════
    # STATS VIEW
    # ═══════════════════════════════════════════════════════════

    async def load_stats(self) -> None:
        video_path = None if self.stats_view.all_videos else self.video_path
        self.stats_view.set_stats(await self.store.select_tackle_stats(video_path))

    async def on_stats_key(self, key: str) -> None:
        view = self.stats_view
        if view.filter_mode:
            if key == "esc":
                view.filter_mode = False
                view.filter_input = ""
            elif key == "enter":
                if view.filter_input:
                    view.toggle_filter(view.filter_input)
                view.filter_mode = False
                view.filter_input = ""
            elif key == "backspace":
                view.filter_input = view.filter_input[:-1]
            elif key == "space":
                view.filter_input += " "
            elif len(key) == 1 and key.isprintable():
                view.filter_input += key
            return None

        if key == "backspace":
            self.modals.pop()
        elif key == "esc":
            if view.has_filters:
                view.clear_filters()
            else:
                self.modals.pop()
        elif key == "tab":
            view.next_sort_column()
        elif key in ("v", "V"):
            view.all_videos = not view.all_videos
            await self.load_stats()
        elif key in ("j", "J", "down"):
            view.move_down()
        elif key in ("k", "K", "up"):
            view.move_up()
        elif key == "?":
            self.modals.push(Modal(Mode.HELP))
        elif key == "/":
            view.filter_mode = True
            view.filter_input = ""
        return None

    # ═══════════════════════════════════════════════════════════
    # EXPORT
    # ═══════════════════════════════════════════════════════════

    async def start_export(self, saved_clips: bool = False, note_id: int | None = None) -> Cmd | None:
        if self.export.running:
            return self.show_result("Export already running", is_error=True)
        await self.begin_export(saved_clips=saved_clips, note_id=note_id)
        return self.wait_for_export()

    async def begin_export(self, saved_clips: bool = False, note_id: int | None = None) -> None:
        """Validate and launch an export of tackles, or of saved clips with saved_clips."""
        job = await prepare_export(
            self.store,
            self.video_path,
            self.encoder,
            video_duration=self.playback.duration or self.config.export.fallback_duration,
            pre_roll=self.config.export.pre_roll,
            post_roll=self.config.export.post_roll,
            saved_clips=saved_clips,
            note_id=note_id,
        )
        self.export_queue = job.start()
        self.export.start(job.total)
        self.export.output_dir = job.output_dir
        self.modals.push(Modal(Mode.EXPORT))

    def wait_for_export(self) -> Cmd:
        queue = self.export_queue

        async def receive():
            return await next_export_event(queue)

        return receive

    def on_export_event(self, event) -> Cmd | None:
        """Apply one export event; keep reading until the final one."""
        export = self.export
        if isinstance(event, ExportProgress):
            export.completed = event.current - 1
            export.current_file = event.path
            return self.wait_for_export()

        export.running = False
        self.export_queue = None
        if isinstance(event, ExportComplete):
            export.completed = event.count
            export.output_dir = event.output_dir
            logger.info(f"Export finished: {event.count} clip(s)")
            return self.show_result(f"Exported {event.count} clip(s) to {event.output_dir}")

        export.errors += 1
        export.error = event.error
        return self.show_error(event.error)

    def on_export_key(self, key: str) -> None:
        """Any key closes a finished export; esc hides a running one."""
        if self.export.finished or key == "esc":
            self.modals.pop()
            if self.export.finished:
                self.export.active = False
        return None
