"""
Frame composition.

render_frame() turns the model into the full list of screen lines. Modal
views replace the main frame; the main frame is the column strip, the
timeline and the command line.
"""

from typing import TYPE_CHECKING

from rich.text import Text

from tagging_rugby.tui.components import (
    render_clips_view,
    render_command_input,
    render_controls_column,
    render_export_progress,
    render_help,
    render_notes_list,
    render_stats_panel,
    render_stats_view,
    render_status_column,
    render_timeline,
)
from tagging_rugby.tui.layout import (
    center_panel,
    compute_columns,
    join_columns,
    render_container,
)
from tagging_rugby.tui.state import FORM_MODES, Mode

if TYPE_CHECKING:
    from tagging_rugby.tui.model import Model

FORM_WIDTH = 60
# Timeline (two rows) plus the command line
FOOTER_HEIGHT = 3


def render_form(model: "Model", width: int, height: int) -> list[Text]:
    form = model.modals.top.form
    form_width = max(20, min(FORM_WIDTH, width - 8))
    return center_panel(form.render(form_width), width, height)


def render_main(model: "Model", width: int, height: int) -> list[Text]:
    """Column strip above the timeline and the command line."""
    columns = compute_columns(width)
    col_height = max(5, height - FOOTER_HEIGHT)
    mode = model.modals.mode

    rendered: list[list[Text]] = []
    widths: list[int] = []

    rendered.append(
        render_container(
            render_status_column(
                model.playback,
                model.search,
                model.focus,
                mode,
                model.notes.selected_item(),
                columns.col1,
            ),
            columns.col1,
            col_height,
        )
    )
    widths.append(columns.col1)

    if columns.col2:
        notes = render_notes_list(
            model.notes,
            columns.col2,
            col_height,
            model.playback.time_pos,
            matches=model.search.matches,
            current_match=model.search.current_match,
            query=model.search.value,
        )
        rendered.append(render_container(notes, columns.col2, col_height))
        widths.append(columns.col2)

    if columns.col3:
        stats = render_stats_panel(model.live_stats, model.notes.items, columns.col3, model.live_sort)
        rendered.append(render_container(stats, columns.col3, col_height))
        widths.append(columns.col3)

    if columns.col4:
        rendered.append(render_container(render_controls_column(columns.col4), columns.col4, col_height))
        widths.append(columns.col4)

    lines = join_columns(rendered, widths, col_height)
    lines += render_timeline(model.playback.time_pos, model.playback.duration, model.notes.items, width)
    lines.append(render_command_input(model.command, width))
    return lines


def render_frame(model: "Model") -> list[Text]:
    """
    Render the screen for the model's current mode.

    Returns:
        One Text per terminal row
    """
    width, height = model.width, model.height
    if width <= 0 or height <= 0:
        return []

    mode = model.modals.mode
    if mode == Mode.HELP:
        return render_help(width, height)
    if mode == Mode.STATS:
        return render_stats_view(model.stats_view, width, height)
    if mode in FORM_MODES or mode == Mode.CONFIRM_DISCARD:
        return render_form(model, width, height)
    if mode == Mode.CLIPS:
        return render_clips_view(model.clips_view, width, height)
    if mode == Mode.EXPORT:
        return render_export_progress(model.export, width, height)
    return render_main(model, width, height)
