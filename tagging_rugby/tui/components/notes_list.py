"""Notes list table for column 2."""

from rich.style import Style
from rich.text import Text

from tagging_rugby.tui import styles
from tagging_rugby.tui.layout import pad_to_width, truncate
from tagging_rugby.tui.state import NotesListState
from tagging_rugby.utils.timeutil import format_time

ROW_WIDTH = 5
ID_WIDTH = 6
TIME_WIDTH = 9
CATEGORY_WIDTH = 12

HEADER_STYLE = Style(color=styles.LAVENDER, bold=True, underline=True)


def text_width(width: int) -> int:
    return max(10, width - ROW_WIDTH - ID_WIDTH - TIME_WIDTH - CATEGORY_WIDTH - 10)


def render_notes_list(
    state: NotesListState,
    width: int,
    height: int,
    time_pos: float,
    matches: list[int] | None = None,
    current_match: int = 0,
    query: str = "",
) -> list[Text]:
    """
    Render the header and the visible rows.

    Search matches get a tinted row with the query highlighted; the current
    match is highlighted in pink, others in amber.
    """
    visible_rows = height - 1
    if visible_rows <= 0:
        return []

    tw = text_width(width)
    header = (
        f" {'Row':>{ROW_WIDTH}} {'ID':<{ID_WIDTH}} {'Time':<{TIME_WIDTH}} "
        f"{'Category':<{CATEGORY_WIDTH}} {'Text':<{tw}}"
    )
    lines = [Text(header, style=HEADER_STYLE)]

    if not state.items:
        lines.append(Text(" No notes or tackles for this video", style=styles.EMPTY))
        return lines

    state.scroll_into_view(visible_rows, time_pos)

    match_set = set(matches or [])
    current = -1
    if matches and 0 <= current_match < len(matches):
        current = matches[current_match]

    end = min(len(state.items), state.scroll_offset + visible_rows)
    for index in range(state.scroll_offset, end):
        item = state.items[index]
        is_match = index in match_set
        is_current = index == current

        if index == state.selected and not is_match:
            base = styles.HIGHLIGHT
        elif is_match:
            base = styles.MATCH_ROW
        else:
            base = styles.PRIMARY

        item_id = f"★{item.id}" if item.starred else str(item.id)
        category = item.category or ("tackle" if item.is_tackle else "")
        row = Text(
            f" {index + 1:>{ROW_WIDTH}} {truncate(item_id, ID_WIDTH):<{ID_WIDTH}} "
            f"{format_time(item.start):<{TIME_WIDTH}} "
            f"{truncate(category, CATEGORY_WIDTH):<{CATEGORY_WIDTH}} "
            f"{truncate(item.text, tw)}",
            style=base,
        )
        if item.starred:
            star_at = ROW_WIDTH + 2
            row.stylize(styles.STAR, star_at, star_at + 1)
        row = pad_to_width(row, width)
        if query and is_match:
            row.highlight_words(
                [query],
                style=styles.CURRENT_MATCH_TEXT if is_current else styles.MATCH_TEXT,
                case_sensitive=False,
            )
        lines.append(row)

    return lines
