"""
Read-side records assembled from joined queries.

These are what the views and the export pipeline consume; they are
never written back directly.
"""

from enum import Enum

from pydantic import BaseModel


class ItemKind(str, Enum):
    """List row kind."""

    NOTE = "note"
    TACKLE = "tackle"


class ListItem(BaseModel):
    """One row in the notes list for the current video."""

    id: int
    kind: ItemKind = ItemKind.NOTE
    start: float = 0.0
    text: str = ""
    starred: bool = False
    category: str = ""
    player: str = ""
    team: str = ""

    @property
    def is_tackle(self) -> bool:
        return self.kind == ItemKind.TACKLE


class TackleStats(BaseModel):
    """Per-player tackle aggregate."""

    player: str
    total: int = 0
    completed: int = 0
    missed: int = 0
    possible: int = 0
    other: int = 0
    starred: int = 0

    @property
    def percentage(self) -> float | None:
        """
        Completion rate over decided tackles.

        Returns:
            completed / (completed + missed) * 100, or None when nothing was decided
        """
        decided = self.completed + self.missed
        if decided == 0:
            return None
        return self.completed / decided * 100

    @property
    def percentage_display(self) -> str:
        pct = self.percentage
        return "-" if pct is None else f"{pct:.0f}"


class ExportItem(BaseModel):
    """
    A note to be cut into a clip.

    Tackles carry their player; saved clips carry their name and an
    explicit range.
    """

    note_id: int
    player: str = ""
    timestamp: float
    clip_start: float = 0.0
    clip_end: float = 0.0
    name: str = ""
    saved_clip: bool = False


class EditTackleData(BaseModel):
    """Tackle fields loaded for the edit form."""

    player: str = ""
    attempt: int = 0
    outcome: str = ""
    followed: str = ""
    notes: str = ""
    zone: str = ""
    star: bool = False
    timestamp: float = 0.0
    end_seconds: float = 2.0


class ClipRecord(BaseModel):
    """A saved clip note for the clips view."""

    note_id: int
    name: str = ""
    start: float = 0.0
    end: float = 0.0
    duration: float = 0.0
    status: str = "pending"
    error: str = ""
