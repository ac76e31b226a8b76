"""
View components.

Every renderer returns a list of rich Text lines; the view assembles them
into columns and overlays.
"""

from tagging_rugby.tui.components.clips_view import render_clips_view
from tagging_rugby.tui.components.controls import (
    CONTROL_GROUPS,
    format_step_size,
    render_controls_column,
    render_status_column,
)
from tagging_rugby.tui.components.export_progress import render_export_box, render_export_progress
from tagging_rugby.tui.components.help import render_help
from tagging_rugby.tui.components.inputs import (
    render_command_input,
    render_mode_indicator,
    render_search_input,
)
from tagging_rugby.tui.components.notes_list import render_notes_list
from tagging_rugby.tui.components.stats_panel import category_counts, render_stats_panel
from tagging_rugby.tui.components.stats_view import render_stats_view
from tagging_rugby.tui.components.timeline import render_timeline

__all__ = [
    "CONTROL_GROUPS",
    "format_step_size",
    "category_counts",
    "render_clips_view",
    "render_command_input",
    "render_controls_column",
    "render_export_box",
    "render_export_progress",
    "render_help",
    "render_mode_indicator",
    "render_notes_list",
    "render_search_input",
    "render_stats_panel",
    "render_stats_view",
    "render_status_column",
    "render_timeline",
]
