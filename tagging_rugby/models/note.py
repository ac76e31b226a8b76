"""
Note aggregate models.

A note is the aggregate root; timing, video, tackle, zone, details,
highlights and clip bookkeeping are child rows keyed by note id.
The category selects the aggregate shape ("note", "tackle", "clip").
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class Category(str, Enum):
    """Categories with a distinguished aggregate shape."""

    NOTE = "note"
    TACKLE = "tackle"
    CLIP = "clip"


class Outcome(str, Enum):
    """Allowed tackle outcomes."""

    COMPLETED = "completed"
    MISSED = "missed"
    POSSIBLE = "possible"
    OTHER = "other"

    @classmethod
    def values(cls) -> list[str]:
        return [o.value for o in cls]


class Video(BaseModel):
    """A media file registered in the store."""

    id: int | None = None
    path: str
    duration: float = 0.0
    format: str = ""
    size: int = 0
    stopped_at: float = Field(default=0.0, description="Last observed playback position")


class Note(BaseModel):
    """Aggregate root."""

    id: int
    category: str
    created_at: datetime | None = None


class NoteTiming(BaseModel):
    """Time range within the video. Point events have start == end."""

    start: float
    end: float


class NoteVideo(BaseModel):
    """Video reference captured with the note."""

    path: str
    duration: float = 0.0
    format: str = ""
    size: int = 0


class NoteTackle(BaseModel):
    """Tackle event data."""

    player: str
    attempt: int = 1
    outcome: str


class NoteZone(BaseModel):
    """Field region."""

    horizontal: str = ""
    vertical: str = ""


class NoteDetail(BaseModel):
    """Keyed free-text annotation (text, followed, notes, player, team)."""

    type: str
    body: str


class NoteHighlight(BaseModel):
    """Highlight tag such as "star"."""

    type: str


class NoteClip(BaseModel):
    """Clip name and export bookkeeping."""

    name: str = ""
    duration: float = 0.0
    started_at: datetime | None = None
    finished_at: datetime | None = None
    error_at: datetime | None = None
    error: str = ""

    @property
    def status(self) -> str:
        """
        Derived export status.

        Returns:
            "completed", "error" or "pending"
        """
        if self.finished_at is not None:
            return "completed"
        if self.error_at is not None:
            return "error"
        return "pending"


class NoteChildren(BaseModel):
    """Child rows to write alongside a note."""

    timings: list[NoteTiming] = Field(default_factory=list)
    videos: list[NoteVideo] = Field(default_factory=list)
    tackles: list[NoteTackle] = Field(default_factory=list)
    zones: list[NoteZone] = Field(default_factory=list)
    details: list[NoteDetail] = Field(default_factory=list)
    highlights: list[NoteHighlight] = Field(default_factory=list)
    clips: list[NoteClip] = Field(default_factory=list)
