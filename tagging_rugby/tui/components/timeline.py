"""Two-line timeline: progress bar with note markers and a playhead pointer."""

from rich.style import Style
from rich.text import Text

from tagging_rugby.models.records import ListItem
from tagging_rugby.tui import styles
from tagging_rugby.tui.layout import with_background
from tagging_rugby.utils.timeutil import format_time

TIME_STYLE = Style(color=styles.LIGHT_LAVENDER, bold=True)


def render_timeline(time_pos: float, duration: float, items: list[ListItem], width: int) -> list[Text]:
    """
    Render the bar and the pointer line.

    Markers (◆) sit at each item's position; the filled part runs up to the
    playhead (╸) and ▲ on the second line points at it.
    """
    if width < 20:
        return [Text(""), Text("")]

    time_display = f" {format_time(time_pos)} / {format_time(duration)}"
    bar_width = max(10, width - len(time_display) - 2)

    fill = 0
    if duration > 0:
        fill = round(bar_width * time_pos / duration)
    fill = max(0, min(fill, bar_width))

    markers = set()
    if duration > 0:
        for item in items:
            pos = round((bar_width - 1) * item.start / duration)
            if 0 <= pos < bar_width:
                markers.add(pos)

    bar = Text(" ")
    for i in range(bar_width):
        if i in markers:
            bar.append("◆", style=styles.COUNT)
        elif i < fill:
            bar.append("━", style=styles.BAR)
        elif i == fill:
            bar.append("╸", style=styles.PLAYHEAD)
        else:
            bar.append("─", style=styles.BORDER)
    bar.append(" ")
    bar.append(time_display, style=TIME_STYLE)

    pointer = Text(" " + " " * fill)
    if fill < bar_width:
        pointer.append("▲", style=styles.PLAYHEAD)

    return [with_background(bar, width), with_background(pointer, width)]
