"""
Shared fixtures for store tests.

Every test gets a fresh SQLite file under tmp_path with the packaged
migrations applied.
"""

from collections.abc import AsyncGenerator

import pytest

from tagging_rugby.core.store.sqlite_store import SQLiteNoteStore
from tagging_rugby.models.note import NoteVideo
from tagging_rugby.services.notes import clip_children, note_children, tackle_children

VIDEO = "/videos/match.mp4"


class NoteFactory:
    """Shortcuts for writing aggregates into a store."""

    def __init__(self, store: SQLiteNoteStore):
        self.store = store

    @staticmethod
    def video(path: str = VIDEO) -> NoteVideo:
        return NoteVideo(path=path, duration=600.0, format="mp4", size=1024)

    async def note(self, text: str, ts: float, path: str = VIDEO, **kwargs) -> int:
        children = note_children(text, ts, self.video(path), **kwargs)
        return await self.store.insert_note_with_children("note", children)

    async def tackle(self, player: str, outcome: str, ts: float, path: str = VIDEO, **kwargs) -> int:
        children = tackle_children(player, 1, outcome, ts, self.video(path), **kwargs)
        return await self.store.insert_note_with_children("tackle", children)

    async def clip(self, start: float, end: float, name: str, path: str = VIDEO) -> int:
        children = clip_children(start, end, name, self.video(path))
        return await self.store.insert_note_with_children("clip", children)


@pytest.fixture
async def store(tmp_path) -> AsyncGenerator[SQLiteNoteStore, None]:
    store = SQLiteNoteStore(str(tmp_path / "data.db"))
    await store.initialize()
    yield store
    await store.close()


@pytest.fixture
def make(store) -> NoteFactory:
    return NoteFactory(store)
