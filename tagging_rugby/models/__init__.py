"""
Data models for tagging-rugby.

Aggregate models:
- Note: aggregate root with a category
- NoteTiming, NoteVideo, NoteTackle, NoteZone, NoteDetail, NoteHighlight, NoteClip: children
- NoteChildren: the child rows written with a note
- Video: registered media file
- Category, Outcome: enumerated values

Read-side records:
- ListItem, ItemKind: notes list rows
- TackleStats: per-player aggregates
- ExportItem: tackles queued for export
- EditTackleData: edit form payload
- ClipRecord: saved clips
"""

from tagging_rugby.models.note import (
    Category,
    Note,
    NoteChildren,
    NoteClip,
    NoteDetail,
    NoteHighlight,
    NoteTackle,
    NoteTiming,
    NoteVideo,
    NoteZone,
    Outcome,
    Video,
)
from tagging_rugby.models.records import (
    ClipRecord,
    EditTackleData,
    ExportItem,
    ItemKind,
    ListItem,
    TackleStats,
)

__all__ = [
    # Aggregate models
    "Note",
    "NoteChildren",
    "NoteTiming",
    "NoteVideo",
    "NoteTackle",
    "NoteZone",
    "NoteDetail",
    "NoteHighlight",
    "NoteClip",
    "Video",
    "Category",
    "Outcome",
    # Read-side records
    "ListItem",
    "ItemKind",
    "TackleStats",
    "ExportItem",
    "EditTackleData",
    "ClipRecord",
]
