"""
Column layout and fixed-size containers.

Everything here works on rich Text so that widths are measured in
terminal cells: wide characters (emoji, East Asian) count double and
styled spans never count at all.
"""

from pydantic import BaseModel
from rich.text import Text

from tagging_rugby.tui import styles

COL1_WIDTH = 30
COL2_TARGET_WIDTH = 80
COL3_TARGET_WIDTH = 60
COL_MIN_WIDTH = 30
COL4_WIDTH = 30
COL4_SHOW_THRESHOLD = 170

MORE_INDICATOR = "↓ More..."
SEPARATOR = "│"


class ColumnWidths(BaseModel):
    """Widths of the four main columns; 0 means hidden."""

    col1: int = COL1_WIDTH
    col2: int = 0
    col3: int = 0
    col4: int = 0

    @property
    def visible(self) -> list[int]:
        """Widths of the shown columns, left to right."""
        return [w for w in (self.col1, self.col2, self.col3, self.col4) if w > 0]


def compute_columns(term_width: int) -> ColumnWidths:
    """
    Allocate columns for a terminal width.

    Column 1 is always 30 wide. Column 4 (controls) appears at 170 cells
    and up. Columns 2 and 3 split what is left 80:60, each at least 30;
    column 3 goes first when both cannot fit, then column 2. One cell is
    kept between neighbouring columns for the separator.

    Args:
        term_width: Terminal width in cells

    Returns:
        ColumnWidths
    """
    widths = ColumnWidths()
    show_col4 = term_width >= COL4_SHOW_THRESHOLD
    fixed = COL1_WIDTH
    if show_col4:
        widths.col4 = COL4_WIDTH
        fixed += COL4_WIDTH

    borders = 3 if show_col4 else 2
    usable = term_width - fixed - borders
    if usable >= COL_MIN_WIDTH * 2:
        total_target = COL2_TARGET_WIDTH + COL3_TARGET_WIDTH
        col2 = usable * COL2_TARGET_WIDTH // total_target
        col3 = usable - col2
        if col3 < COL_MIN_WIDTH:
            col3 = COL_MIN_WIDTH
            col2 = usable - col3
        if col2 < COL_MIN_WIDTH:
            col2 = COL_MIN_WIDTH
            col3 = usable - col2
        widths.col2, widths.col3 = col2, col3
        return widths

    borders = 2 if show_col4 else 1
    usable = term_width - fixed - borders
    if usable >= COL_MIN_WIDTH:
        widths.col2 = usable
    return widths


def to_text(line: Text | str) -> Text:
    return line.copy() if isinstance(line, Text) else Text(line)


def pad_to_width(line: Text | str, width: int) -> Text:
    """
    Truncate or pad a line to exactly width cells.

    A double-width character that would straddle the edge is dropped and
    the gap padded, so the result is never wider than asked.
    """
    if width <= 0:
        return Text("")
    text = to_text(line)
    text.truncate(width, overflow="crop", pad=True)
    if text.cell_len != width:
        text.set_cell_size(width)
    return text


def render_container(lines: list[Text | str], width: int, height: int) -> list[Text]:
    """
    Fit lines into an exact width x height box.

    When there are more lines than fit, the last visible line becomes a
    "↓ More..." indicator.

    Args:
        lines: Content lines
        width: Box width in cells
        height: Box height in lines

    Returns:
        Exactly height lines, each exactly width cells wide
    """
    if height <= 0:
        return []
    rows = list(lines)
    if len(rows) > height:
        rows = rows[:height]
        rows[height - 1] = Text(MORE_INDICATOR, style=styles.BORDER)
    while len(rows) < height:
        rows.append(Text(""))
    return [pad_to_width(row, width) for row in rows]


def join_columns(columns: list[list[Text]], widths: list[int], height: int) -> list[Text]:
    """Place columns side by side with a purple separator between them."""
    rows = []
    for row in range(height):
        line = Text()
        for i, col in enumerate(columns):
            if i > 0:
                line.append(SEPARATOR, style=styles.BORDER)
            if row < len(col):
                line.append_text(pad_to_width(col[row], widths[i]))
            else:
                line.append_text(pad_to_width("", widths[i]))
        rows.append(line)
    return rows


def info_box(title: str, content: list[Text | str], width: int) -> list[Text]:
    """
    Draw a rounded box with the title set into the top border.

        ╭─ Title ──────╮
        │content       │
        ╰──────────────╯
    """
    if width < 4:
        return []
    inner = width - 2

    top = Text("╭─", style=styles.BORDER)
    label = Text(f" {title} ", style=styles.HEADER)
    top.append_text(label)
    fill = max(0, inner - 1 - label.cell_len)
    top.append("─" * fill + "╮", style=styles.BORDER)
    top = pad_to_width(top, width)

    lines = [top]
    for row in content:
        line = Text("│", style=styles.BORDER)
        line.append_text(pad_to_width(row, inner))
        line.append("│", style=styles.BORDER)
        lines.append(line)
    lines.append(Text("╰" + "─" * inner + "╯", style=styles.BORDER))
    return lines


def truncate(text: str, limit: int) -> str:
    """Shorten text to limit characters, ending in "..." when cut."""
    if limit <= 3:
        return text[:limit]
    if len(text) <= limit:
        return text
    return text[: limit - 3] + "..."


def center_panel(content: list[Text | str], width: int, height: int) -> list[Text]:
    """
    Draw content in a rounded, padded panel centred on a width x height screen.

    Returns:
        Exactly height lines of width cells
    """
    rows = [to_text(line) for line in content]
    content_width = max((row.cell_len for row in rows), default=0)
    inner = min(content_width + 4, max(0, width - 2))

    panel = [Text("╭" + "─" * inner + "╮", style=styles.PANEL_BORDER)]
    body = [Text("")] + rows + [Text("")]
    for row in body:
        line = Text("│", style=styles.PANEL_BORDER)
        padded = Text("  ")
        padded.append_text(row)
        line.append_text(pad_to_width(padded, inner))
        line.append("│", style=styles.PANEL_BORDER)
        panel.append(line)
    panel.append(Text("╰" + "─" * inner + "╯", style=styles.PANEL_BORDER))

    margin_left = max(0, (width - inner - 2) // 2)
    margin_top = max(0, (height - len(panel)) // 2)
    lines: list[Text] = [Text("") for _ in range(margin_top)]
    for row in panel:
        line = Text(" " * margin_left)
        line.append_text(row)
        lines.append(line)
    return render_container(lines, width, height)


def with_background(line: Text | str, width: int, style=styles.INPUT_BAR) -> Text:
    """Pad a line to width and lay a background under all of it."""
    text = pad_to_width(line, width)
    text.stylize_before(style, 0, len(text))
    return text
