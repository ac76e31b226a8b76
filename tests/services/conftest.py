"""Fixtures for service tests.

The encoder is replaced by a fake that writes a small file per clip, so
export runs never shell out to ffmpeg.
"""

from collections.abc import AsyncGenerator

import pytest

from tagging_rugby.core.encoder.base import Encoder
from tagging_rugby.core.store.sqlite_store import SQLiteNoteStore
from tagging_rugby.services.notes import clip_children, tackle_children, video_child
from tagging_rugby.utils.exceptions import EncoderMissingError, ExportError


class FakeEncoder(Encoder):
    """
    Records extractions and writes a placeholder file for each.

    Attributes:
        calls: (input, start, end, output) per extraction
        fail_on: 1-based extraction number that raises
        error: Exception raised on that extraction
        missing: Make check_available() fail
    """

    def __init__(
        self,
        fail_on: int | None = None,
        missing: bool = False,
        error: Exception | None = None,
    ):
        self.calls: list[tuple[str, float, float, str]] = []
        self.fail_on = fail_on
        self.error = error or ExportError("ffmpeg error: broken pipe")
        self.missing = missing

    def check_available(self) -> None:
        if self.missing:
            raise EncoderMissingError("ffmpeg not found")

    async def extract(self, input_path: str, start: float, end: float, output_path: str) -> None:
        self.calls.append((input_path, start, end, output_path))
        if self.fail_on is not None and len(self.calls) == self.fail_on:
            raise self.error
        with open(output_path, "wb") as f:
            f.write(b"clip")


@pytest.fixture
def video_path(tmp_path) -> str:
    """An existing (empty) video file."""
    path = tmp_path / "final.mp4"
    path.write_bytes(b"")
    return str(path)


@pytest.fixture
async def store(tmp_path) -> AsyncGenerator[SQLiteNoteStore, None]:
    store = SQLiteNoteStore(str(tmp_path / "data.db"))
    await store.initialize()
    yield store
    await store.close()


@pytest.fixture
def add_tackle(store, video_path):
    """Insert a tackle on the test video and return its id."""

    async def add(player: str, ts: float, outcome: str = "completed") -> int:
        video = video_child(video_path, 600.0)
        children = tackle_children(player, 1, outcome, ts, video)
        return await store.insert_note_with_children("tackle", children)

    return add


@pytest.fixture
def make_encoder():
    """FakeEncoder constructor."""
    return FakeEncoder


@pytest.fixture
def add_clip(store, video_path):
    """Insert a saved clip on the test video and return its id."""

    async def add(start: float, end: float, name: str = "") -> int:
        children = clip_children(start, end, name, video_child(video_path, 600.0))
        return await store.insert_note_with_children("clip", children)

    return add
