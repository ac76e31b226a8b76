"""
Textual driver for the event loop.

The App owns no state of its own: it turns terminal events into messages,
feeds them to Model.update() one at a time, runs the returned commands as
tasks and redraws the frame after every message.
"""

import asyncio
import os

from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Static

from tagging_rugby.config import Config
from tagging_rugby.core.encoder.ffmpeg import FFmpegEncoder
from tagging_rugby.core.player.launcher import connect_with_retry, launch_mpv
from tagging_rugby.core.player.mpv_client import MpvClient
from tagging_rugby.core.store.sqlite_store import SQLiteNoteStore
from tagging_rugby.services.notes import video_child
from tagging_rugby.tui.messages import Batch, Cmd, Key, Msg, Quit, Resize
from tagging_rugby.tui.model import Model
from tagging_rugby.tui.view import render_frame
from tagging_rugby.utils.exceptions import PlayerError
from tagging_rugby.utils.logger import get_logger

logger = get_logger(__name__)

KEY_NAMES = {
    "escape": "esc",
    "space": "space",
}


def key_name(event: events.Key) -> str:
    """
    Name a textual key event the way the model expects.

    Printable characters are passed as themselves ("G", ":", "?"); other
    keys keep textual's name, with escape shortened to "esc".
    """
    if event.key in KEY_NAMES:
        return KEY_NAMES[event.key]
    if event.is_printable and event.character and len(event.character) == 1:
        return event.character
    return event.key


class Frame(Static, can_focus=True):
    """Full-screen widget holding the rendered frame; all keys land here."""

    async def on_key(self, event: events.Key) -> None:
        event.stop()
        event.prevent_default()
        await self.app.dispatch_msg(Key(name=key_name(event)))


class TaggingRugbyApp(App):
    """Terminal UI for annotating a rugby video."""

    TITLE = "tagging-rugby"
    CSS = """
    Screen {
        overflow: hidden;
    }
    #frame {
        width: 100%;
        height: 100%;
    }
    """

    BINDINGS = [
        Binding("ctrl+q", "interrupt", "Quit", show=False, priority=True),
    ]

    def __init__(self, model: Model, **kwargs):
        super().__init__(**kwargs)
        self.model = model
        self._dispatch_lock = asyncio.Lock()
        self._command_tasks: set[asyncio.Task] = set()
        self._frame_widget: Frame | None = None

    def compose(self) -> ComposeResult:
        yield Frame(id="frame", markup=False)

    async def on_mount(self) -> None:
        self._frame_widget = self.query_one("#frame", Frame)
        self._frame_widget.focus()
        self.model.width, self.model.height = self.size.width, self.size.height
        self.spawn_command(await self.model.init())
        self.redraw()

    async def on_resize(self, event: events.Resize) -> None:
        await self.dispatch_msg(Resize(width=event.size.width, height=event.size.height))

    async def action_interrupt(self) -> None:
        await self.dispatch_msg(Key(name="ctrl+c"))

    async def on_unmount(self) -> None:
        for task in list(self._command_tasks):
            task.cancel()

    # ═══════════════════════════════════════════════════════════
    # MESSAGE LOOP
    # ═══════════════════════════════════════════════════════════

    async def dispatch_msg(self, msg: Msg) -> None:
        """Apply one message; messages never interleave inside update()."""
        if isinstance(msg, Quit):
            self.exit()
            return
        async with self._dispatch_lock:
            try:
                command = await self.model.update(msg)
            except Exception as e:
                command = self.model.recover(msg, e)
            self.redraw()
        self.spawn_command(command)

    def spawn_command(self, command: Cmd | Batch | None) -> None:
        if command is None:
            return
        if isinstance(command, Batch):
            for inner in command.commands:
                self.spawn_command(inner)
            return
        task = asyncio.create_task(self._execute(command))
        self._command_tasks.add(task)
        task.add_done_callback(self._command_tasks.discard)

    async def _execute(self, command: Cmd) -> None:
        """Run a command and feed its message back; a failing command is logged."""
        try:
            msg = await command()
        except Exception as e:
            logger.opt(exception=e).error(f"Command failed: {e}")
            return
        if msg is not None:
            await self.dispatch_msg(msg)

    def redraw(self) -> None:
        if self._frame_widget is None:
            return
        self._frame_widget.update(Text("\n").join(render_frame(self.model)))


async def run_tui(video_path: str, config: Config) -> None:
    """
    Open a video for annotation and run the UI until it quits.

    Starts mpv, opens the store, registers the video and tears everything
    down again on exit. A player that never comes up leaves the UI usable
    for browsing and editing; playback keys then report "Not connected".

    Raises:
        DependencyError: If mpv is not installed
    """
    video_path = os.path.abspath(video_path)

    store = SQLiteNoteStore(str(config.store.resolved_path))
    await store.initialize()
    logger.info(f"Store ready at {config.store.resolved_path}")

    try:
        info = video_child(video_path)
        video = await store.ensure_video(video_path, info.duration, info.format, info.size)

        process = await launch_mpv(video_path, config.player.socket_path, config.player.binary)
        client = MpvClient(config.player.socket_path)
        try:
            await connect_with_retry(
                client, config.player.connect_retries, config.player.connect_interval
            )
            logger.info(f"Connected to mpv at {config.player.socket_path}")
        except PlayerError as e:
            logger.warning(f"Could not connect to mpv: {e}")

        encoder = FFmpegEncoder(
            binary=config.export.binary,
            preset=config.export.preset,
            stream_copy=config.export.stream_copy,
        )
        model = Model(client, store, video_path, config=config, encoder=encoder, video=video)

        try:
            await TaggingRugbyApp(model).run_async()
        finally:
            logger.info("Shutting down")
            await client.close()
            await process.terminate()
    finally:
        await store.close()
        logger.info("Cleanup complete")
