"""Scrollable list of saved clips for the current video."""

from rich.text import Text

from tagging_rugby.tui import styles
from tagging_rugby.tui.layout import center_panel
from tagging_rugby.tui.state import ClipsViewState
from tagging_rugby.utils.timeutil import format_time

STATUS_MARKS = {
    "completed": ("✓", styles.BAR_FILLED),
    "error": ("✗", styles.ERROR),
    "pending": ("•", styles.SECONDARY),
}


def clip_lines(state: ClipsViewState) -> list[Text]:
    lines = []
    for clip in state.clips:
        mark, style = STATUS_MARKS.get(clip.status, STATUS_MARKS["pending"])
        line = Text("  ")
        line.append(mark, style=style)
        line.append(f" #{clip.note_id} {clip.name or '(unnamed)'}", style=styles.PRIMARY)
        line.append(
            f"  {format_time(clip.start)} ({clip.duration:.1f}s) {clip.status}",
            style=styles.SECONDARY,
        )
        lines.append(line)
        if clip.error:
            lines.append(Text(f"    Error: {clip.error}", style=styles.ERROR))
    return lines


def visible_height(height: int) -> int:
    return max(3, height - 10)


def render_clips_view(state: ClipsViewState, width: int, height: int) -> list[Text]:
    completed = sum(1 for clip in state.clips if clip.status == "completed")
    errors = sum(1 for clip in state.clips if clip.status == "error")
    summary = f"{len(state.clips)} clip(s), {completed} exported"
    if errors:
        summary += f", {errors} errors"

    lines = [
        Text("Saved Clips", style=styles.TITLE),
        Text("J/K to scroll | Backspace/Esc to exit", style=styles.SUBTITLE),
        Text(summary, style=styles.SUBTITLE),
        Text(""),
    ]
    if not state.clips:
        lines.append(Text("No clips yet. Use :cs and :ce to save one.", style=styles.SUBTITLE))
        return center_panel(lines, width, height)

    content = clip_lines(state)
    visible = visible_height(height)
    state.scroll_offset = max(0, min(state.scroll_offset, len(content) - visible))
    lines.extend(content[state.scroll_offset : state.scroll_offset + visible])
    return center_panel(lines, width, height)
