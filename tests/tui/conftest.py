"""Fixtures for terminal UI tests.

The model runs against an in-memory player, a real SQLite store under
tmp_path and an encoder that only writes placeholder files.
"""

from collections.abc import AsyncGenerator
from typing import Any

import pytest

from tagging_rugby.config import Config
from tagging_rugby.core.encoder.base import Encoder
from tagging_rugby.core.player.base import Player
from tagging_rugby.core.store.sqlite_store import SQLiteNoteStore
from tagging_rugby.tui.messages import Key, Resize
from tagging_rugby.tui.model import Model
from tagging_rugby.utils.exceptions import NotConnectedError, PlayerCommandError


class FakePlayer(Player):
    """
    In-memory player.

    Attributes:
        calls: (method, args) for every control call, reads excluded
        fail: Property names whose reads raise PlayerCommandError
    """

    def __init__(self):
        self.connected = True
        self.time_pos = 0.0
        self.duration = 600.0
        self.speed = 1.0
        self.paused = False
        self.muted = False
        self.calls: list[tuple[str, tuple]] = []
        self.fail: set[str] = set()

    def _check(self, name: str) -> None:
        if not self.connected:
            raise NotConnectedError()
        if name in self.fail:
            raise PlayerCommandError("property unavailable")

    def called(self, method: str) -> list[tuple]:
        return [args for name, args in self.calls if name == method]

    async def connect(self) -> None:
        self.connected = True

    async def close(self) -> None:
        self.connected = False

    @property
    def is_connected(self) -> bool:
        return self.connected

    async def get_property(self, name: str) -> Any:
        self._check(name)
        return getattr(self, name.replace("-", "_"))

    async def set_property(self, name: str, value: Any) -> None:
        self._check(name)
        self.calls.append(("set_property", (name, value)))

    async def get_time_pos(self) -> float:
        self._check("time-pos")
        return self.time_pos

    async def get_duration(self) -> float:
        self._check("duration")
        return self.duration

    async def get_speed(self) -> float:
        self._check("speed")
        return self.speed

    async def get_paused(self) -> bool:
        self._check("pause")
        return self.paused

    async def get_mute(self) -> bool:
        self._check("mute")
        return self.muted

    async def play(self) -> None:
        self.calls.append(("play", ()))
        self.paused = False

    async def pause(self) -> None:
        self.calls.append(("pause", ()))
        self.paused = True

    async def toggle_pause(self) -> None:
        self.calls.append(("toggle_pause", ()))
        self.paused = not self.paused

    async def seek(self, seconds: float) -> None:
        self._check("time-pos")
        self.calls.append(("seek", (seconds,)))
        self.time_pos = seconds

    async def seek_relative(self, seconds: float) -> None:
        self.calls.append(("seek_relative", (seconds,)))
        self.time_pos = max(0.0, self.time_pos + seconds)

    async def set_speed(self, speed: float) -> None:
        self.calls.append(("set_speed", (speed,)))
        self.speed = speed

    async def frame_step(self) -> None:
        self.calls.append(("frame_step", ()))

    async def frame_back_step(self) -> None:
        self.calls.append(("frame_back_step", ()))

    async def set_mute(self, muted: bool) -> None:
        self.calls.append(("set_mute", (muted,)))
        self.muted = muted

    async def set_ab_loop(self, start: float, end: float) -> None:
        self.calls.append(("set_ab_loop", (start, end)))

    async def clear_ab_loop(self) -> None:
        self.calls.append(("clear_ab_loop", ()))

    async def show_overlay(self, overlay_id: int, text: str) -> None:
        self.calls.append(("show_overlay", (overlay_id, text)))

    async def hide_overlay(self, overlay_id: int) -> None:
        self.calls.append(("hide_overlay", (overlay_id,)))


class PlaceholderEncoder(Encoder):
    """Writes a few bytes instead of running ffmpeg."""

    def __init__(self):
        self.outputs: list[str] = []

    async def extract(self, input_path: str, start: float, end: float, output_path: str) -> None:
        self.outputs.append(output_path)
        with open(output_path, "wb") as f:
            f.write(b"clip")


async def press(model: Model, *keys: str):
    """Send keys one by one; returns the command from the last one."""
    result = None
    for key in keys:
        result = await model.update(Key(name=key))
    return result


async def type_text(model: Model, text: str):
    """Send each character of text as a key, spaces as "space"."""
    return await press(model, *["space" if ch == " " else ch for ch in text])


@pytest.fixture
def player() -> FakePlayer:
    return FakePlayer()


@pytest.fixture
def video_path(tmp_path) -> str:
    path = tmp_path / "match.mp4"
    path.write_bytes(b"")
    return str(path)


@pytest.fixture
async def store(tmp_path) -> AsyncGenerator[SQLiteNoteStore, None]:
    store = SQLiteNoteStore(str(tmp_path / "data.db"))
    await store.initialize()
    yield store
    await store.close()


@pytest.fixture
def encoder() -> PlaceholderEncoder:
    return PlaceholderEncoder()


@pytest.fixture
async def model(player, store, video_path, encoder) -> Model:
    video = await store.ensure_video(video_path, 600.0, "mp4")
    model = Model(player, store, video_path, config=Config(), encoder=encoder, video=video)
    await model.update(Resize(width=160, height=40))
    await model.init()
    return model


@pytest.fixture
def keys():
    """press() and type_text() helpers."""
    return press, type_text
