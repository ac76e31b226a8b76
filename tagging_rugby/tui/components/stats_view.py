"""Full-screen tackle statistics with sorting and player filters."""

from rich.style import Style
from rich.text import Text

from tagging_rugby.tui import styles
from tagging_rugby.tui.layout import center_panel, truncate
from tagging_rugby.tui.state import SORT_LABELS, SortColumn, StatsViewState

COL_PLAYER = 15
COL_NUM = 6
COL_PCT = 6
COL_TOTAL = COL_PLAYER + COL_NUM * 5 + COL_PCT + 6

HEADERS = ["Player", "Total", "Comp", "Miss", "Poss", "%", "Star"]
SORTED_HEADER = Style(color=styles.CYAN, bold=True, underline=True)
FILTERED_ROW = Style(color=styles.CYAN, bold=True)
UNFILTERED_ROW = Style(color=styles.PURPLE)


def _header(sort_column: SortColumn) -> Text:
    line = Text(" ")
    for i, label in enumerate(HEADERS):
        if i == 0:
            cell = f"{label:<{COL_PLAYER}}"
        elif i == SortColumn.PERCENTAGE:
            cell = f"{label:>{COL_PCT}}"
        else:
            cell = f"{label:>{COL_NUM}}"
        line.append(cell, style=SORTED_HEADER if i == sort_column else styles.HEADER)
        if i < len(HEADERS) - 1:
            line.append(" ")
    return line


def render_stats_view(state: StatsViewState, width: int, height: int) -> list[Text]:
    scope = "All Videos" if state.all_videos else "Current Video"
    lines = [
        Text(f"Tackle Statistics ({scope})", style=styles.TITLE),
        Text(
            f"Sorted by: {SORT_LABELS[state.sort_column]} | Tab to change | "
            "V to toggle videos | / to filter | Backspace to exit",
            style=styles.SUBTITLE,
        ),
    ]
    if state.filter_mode:
        lines.append(Text(f"Filter: {state.filter_input}_", style=styles.TITLE))
    elif state.has_filters:
        lines.append(
            Text(
                f"Filtered: {len(state.filtered)} player(s) | Esc to clear",
                style=Style(color=styles.PINK, italic=True),
            )
        )
    lines.append(Text(""))

    if not state.stats:
        lines.append(Text("No tackle data available", style=styles.SUBTITLE))
        return center_panel(lines, width, height)

    lines.append(_header(state.sort_column))
    lines.append(Text(" " + "-" * COL_TOTAL, style=styles.BORDER))

    visible = max(3, height - len(lines) - 6)
    if state.selected < state.scroll_offset:
        state.scroll_offset = state.selected
    elif state.selected >= state.scroll_offset + visible:
        state.scroll_offset = state.selected - visible + 1

    rows = state.display_stats()
    for i in range(state.scroll_offset, min(len(rows), state.scroll_offset + visible)):
        s = rows[i]
        if i == state.selected:
            style = styles.HIGHLIGHT
        elif state.has_filters and state.is_filtered(s.player):
            style = FILTERED_ROW
        elif state.has_filters:
            style = UNFILTERED_ROW
        else:
            style = styles.PRIMARY
        row = (
            f"{truncate(s.player, COL_PLAYER):<{COL_PLAYER}} {s.total:>{COL_NUM}} "
            f"{s.completed:>{COL_NUM}} {s.missed:>{COL_NUM}} {s.possible:>{COL_NUM}} "
            f"{s.percentage_display:>{COL_PCT}} {s.starred:>{COL_NUM}}"
        )
        line = Text(" ")
        line.append(row, style=style)
        lines.append(line)

    return center_panel(lines, width, height)
