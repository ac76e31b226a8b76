"""
Services for tagging-rugby: note builders, clip paths and the export pipeline.
"""

from tagging_rugby.services.clips import (
    calculate_clip_bounds,
    clip_path_for,
    get_output_dir,
    get_player_clip_path,
    sanitize_player_name,
    saved_clip_path,
)
from tagging_rugby.services.export import (
    ExportComplete,
    ExportEvent,
    ExportFailed,
    ExportJob,
    ExportProgress,
    next_export_event,
    prepare_export,
)
from tagging_rugby.services.notes import (
    clip_children,
    note_children,
    tackle_children,
    tackle_details,
    video_child,
)

__all__ = [
    "calculate_clip_bounds",
    "clip_path_for",
    "get_output_dir",
    "get_player_clip_path",
    "sanitize_player_name",
    "saved_clip_path",
    "ExportJob",
    "ExportEvent",
    "ExportProgress",
    "ExportComplete",
    "ExportFailed",
    "next_export_event",
    "prepare_export",
    "clip_children",
    "note_children",
    "tackle_children",
    "tackle_details",
    "video_child",
]
