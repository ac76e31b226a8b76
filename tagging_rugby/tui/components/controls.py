"""Column 1 (playback, search, mode, selected tag) and column 4 (control reference)."""

from rich.text import Text

from tagging_rugby.models.records import ListItem
from tagging_rugby.tui import styles
from tagging_rugby.tui.components.inputs import render_mode_indicator, render_search_input
from tagging_rugby.tui.layout import info_box, pad_to_width, truncate
from tagging_rugby.tui.state import Focus, Mode, PlaybackState, SearchState
from tagging_rugby.utils.timeutil import format_time

# (group name, sub-groups of (action, shortcut))
CONTROL_GROUPS: list[tuple[str, list[list[tuple[str, str]]]]] = [
    (
        "Playback",
        [
            [("Play", "Space"), ("Back", "H / ←"), ("Fwd", "L / →")],
            [("Step -", ", / <"), ("Step +", ". / >")],
            [("Frame -", "Ctrl+h"), ("Frame +", "Ctrl+l")],
            [("Speed -", "[ / {"), ("Speed +", "] / }"), ("Speed 1x", "\\")],
        ],
    ),
    (
        "Navigation",
        [
            [("Down", "J / ↓"), ("Up", "K / ↑"), ("Mute", "M"), ("Overlay", "O")],
        ],
    ),
    (
        "Views",
        [
            [
                ("Stats", "S"),
                ("Sort", "X"),
                ("Clips", "C"),
                ("Export clips", "Ctrl+E"),
                ("Help", "?"),
                ("Quit", "Ctrl+C"),
            ],
        ],
    ),
]


def format_step_size(step: float) -> str:
    return f"{step:.1f}s" if step < 1 else f"{step:.0f}s"


def render_control_box(name: str, sub_groups: list[list[tuple[str, str]]], width: int) -> list[Text]:
    """A tabbed box listing actions and their shortcuts."""
    if width < 6:
        return []
    inner = width - 2
    label = f" {name} "

    lines = [
        Text(" ┌" + "─" * len(label) + "┐", style=styles.BORDER),
        Text("┌┤", style=styles.BORDER)
        .append(label, style=styles.HEADER)
        .append("├┐", style=styles.BORDER),
        Text(
            "│└" + "─" * len(label) + "┘└" + "─" * max(0, inner - len(label) - 3) + "┐",
            style=styles.BORDER,
        ),
    ]

    name_width = max(len(action) for group in sub_groups for action, _ in group)
    for i, group in enumerate(sub_groups):
        for action, shortcut in group:
            content = Text(f" {action:<{name_width}}  ", style=styles.PRIMARY)
            content.append(f"[ {shortcut} ]", style=styles.SHORTCUT)
            row = Text("│", style=styles.BORDER)
            row.append_text(pad_to_width(content, inner))
            row.append("│", style=styles.BORDER)
            lines.append(row)
        if i < len(sub_groups) - 1:
            lines.append(Text("├" + "─" * inner + "┤", style=styles.BORDER))
    lines.append(Text("└" + "─" * inner + "┘", style=styles.BORDER))
    return [pad_to_width(line, width) for line in lines]


def render_controls_column(width: int) -> list[Text]:
    lines: list[Text] = []
    for i, (name, sub_groups) in enumerate(CONTROL_GROUPS):
        if i > 0:
            lines.append(Text(""))
        lines.extend(render_control_box(name, sub_groups, width))
    return lines


def render_playback(playback: PlaybackState, width: int) -> list[Text]:
    icon = "⏸ Paused" if playback.paused else "▶ Playing"
    lines = [
        Text(f" {icon}"),
        Text(f" Time: {format_time(playback.time_pos)} / {format_time(playback.duration)}"),
        Text(f" Step: {format_step_size(playback.step_size)}  Speed: {playback.speed:g}x"),
        Text(f" Overlay: {'on' if playback.overlay_enabled else 'off'}"),
    ]
    if playback.muted:
        lines.append(Text(" MUTED", style=styles.WARNING))
    if not playback.connected:
        lines.append(Text(" ! Not connected", style=styles.ERROR))
    for line in lines:
        line.stylize_before(styles.PRIMARY, 0, len(line))
    return info_box("Playback", lines, width)


def render_selected_item(item: ListItem | None, width: int) -> list[Text]:
    if item is None:
        return []
    kind = "Tackle" if item.is_tackle else "Note"
    star = " ★" if item.starred else ""
    lines = [
        Text(" Selected Tag", style=styles.HEADER),
        Text(f" #{item.id} {kind}{star}", style=styles.PRIMARY),
        Text(f" @ {format_time(item.start)}", style=styles.SECONDARY),
    ]
    if item.category:
        lines.append(Text(f" [{item.category}]", style=styles.SECONDARY))
    if item.player:
        lines.append(Text(f" Player: {item.player}", style=styles.SECONDARY))
    if item.team:
        lines.append(Text(f" Team: {item.team}", style=styles.SECONDARY))
    if item.text:
        lines.append(Text(" " + truncate(item.text, max(10, width - 3)), style=styles.PRIMARY))
    return lines


def render_status_column(
    playback: PlaybackState,
    search: SearchState,
    focus: Focus,
    mode: Mode,
    selected: ListItem | None,
    width: int,
) -> list[Text]:
    return (
        render_playback(playback, width)
        + render_search_input(search, focus == Focus.SEARCH, width)
        + render_mode_indicator(focus, mode, width)
        + [Text("")]
        + render_selected_item(selected, width)
    )
