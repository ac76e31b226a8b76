"""Export progress box."""

from rich.text import Text

from tagging_rugby.tui import styles
from tagging_rugby.tui.layout import center_panel, info_box, truncate
from tagging_rugby.tui.state import ExportProgressState

BOX_WIDTH = 50


def render_export_box(state: ExportProgressState, width: int) -> list[Text]:
    """Bar, percentage, clip counter and the current file or final status."""
    if width < 10:
        return []
    inner = max(6, width - 4)
    bar_width = max(4, inner - 6)

    pct = state.completed * 100 // state.total if state.total else 0
    filled = min(bar_width, bar_width * state.completed // state.total) if state.total else 0

    bar = Text(" ")
    bar.append("█" * filled, style=styles.BAR_FILLED)
    bar.append("░" * (bar_width - filled), style=styles.BAR_EMPTY)
    bar.append(f" {pct:3d}%", style=styles.PRIMARY)

    counter = Text(f" {state.completed}/{state.total} clips", style=styles.PRIMARY)
    if state.errors:
        counter.append(f"  {state.errors} errors", style=styles.ERROR)

    lines = [bar, counter]
    if state.error:
        lines.append(Text(" " + truncate(state.error, inner - 2), style=styles.ERROR))
    elif state.total and state.completed == state.total and not state.running:
        lines.append(Text(" Export complete", style=styles.BAR_FILLED))
    elif state.current_file:
        lines.append(Text(" " + truncate(state.current_file, inner - 2), style=styles.PRIMARY))
    if state.finished:
        lines.append(Text(" Press any key to close", style=styles.DIMMED))
    return info_box("Export", lines, width)


def render_export_progress(state: ExportProgressState, width: int, height: int) -> list[Text]:
    return center_panel(render_export_box(state, min(BOX_WIDTH, width - 6)), width, height)
