"""Command line, search box and mode indicator."""

from rich.style import Style
from rich.text import Text

from tagging_rugby.tui import styles
from tagging_rugby.tui.layout import info_box, pad_to_width, with_background
from tagging_rugby.tui.state import CommandInputState, Focus, Mode, SearchState

PROMPT_STYLE = Style(color=styles.CYAN, bold=True)
CURSOR = "_"


def _with_cursor(value: str, cursor: int) -> str:
    return value[:cursor] + CURSOR + value[cursor:]


def render_command_input(state: CommandInputState, width: int) -> Text:
    """Bottom line: the active prompt, else the result banner, else blank."""
    line = Text()
    if state.active:
        line.append(":", style=PROMPT_STYLE)
        line.append(_with_cursor(state.value, state.cursor), style=styles.PRIMARY)
    elif state.result:
        line.append(" " + state.result, style=styles.WARNING if state.is_error else styles.SUCCESS)
    else:
        line.append(" ")
    return with_background(line, width)


def render_search_input(state: SearchState, focused: bool, width: int) -> list[Text]:
    """Search box with the match counter right-aligned."""
    inner = width - 2
    line = Text(" /", style=PROMPT_STYLE if focused else styles.DIMMED)
    if focused:
        line.append(_with_cursor(state.value, state.cursor), style=styles.PRIMARY)
    else:
        line.append(state.value, style=styles.SECONDARY)

    if state.matches:
        counter = f"[{state.current_match + 1}/{len(state.matches)}]"
        gap = inner - line.cell_len - len(counter) - 1
        if gap > 0:
            line.append(" " * gap)
            line.append(counter, style=styles.SECONDARY)
    return info_box("Search", [pad_to_width(line, inner)], width)


def render_mode_indicator(focus: Focus, mode: Mode, width: int) -> list[Text]:
    inner = width - 2
    lines = []
    for label, value in (("Focus:", focus.value.title()), ("Mode:", mode.value.replace("_", " ").title())):
        line = Text(f" {label}", style=styles.SECONDARY)
        gap = max(1, inner - line.cell_len - len(value) - 1)
        line.append(" " * gap)
        line.append(value, style=styles.SHORTCUT)
        lines.append(line)
    return info_box("Mode", lines, width)
