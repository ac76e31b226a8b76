"""Keybinding help overlay."""

from rich.style import Style
from rich.text import Text

from tagging_rugby.tui import styles
from tagging_rugby.tui.layout import center_panel

KEY_WIDTH = 12
KEY_STYLE = Style(color=styles.LAVENDER, bold=True)

HELP_GROUPS: list[tuple[str, list[tuple[str, str]]]] = [
    (
        "Playback",
        [
            ("Space", "Toggle play/pause"),
            ("M", "Toggle mute"),
            ("H / Left", "Step backward (by step size)"),
            ("L / Right", "Step forward (by step size)"),
            ("Ctrl+H", "Frame step backward"),
            ("Ctrl+L", "Frame step forward"),
            (", / <", "Decrease step size"),
            (". / >", "Increase step size"),
            ("[ / {", "Decrease speed"),
            ("] / }", "Increase speed"),
            ("\\", "Reset speed to 1x"),
            ("X", "Cycle live stats sort"),
        ],
    ),
    (
        "Navigation",
        [
            ("J / Down", "Select next item"),
            ("K / Up", "Select previous item"),
            ("gg / G", "First / last item (nG: row n)"),
            ("Enter", "Jump to selected item"),
            ("E", "Edit selected tackle"),
            ("X", "Delete selected item"),
            ("Ctrl+E", "Export player clips"),
            ("C", "Show saved clips"),
        ],
    ),
    (
        "Views",
        [
            ("?", "Show/hide this help"),
            ("S", "Open stats view"),
            ("O", "Toggle overlay on video"),
            ("N", "Quick add note"),
            ("T", "Quick add tackle"),
            ("Tab", "Cycle focus / next search match"),
            ("Backspace", "Return to main view"),
            ("/ (stats)", "Filter players by name/initials"),
            ("Esc (stats)", "Clear player filters"),
        ],
    ),
    (
        "Commands",
        [
            (":", "Enter command mode"),
            ("Esc", "Cancel command mode"),
            ("Ctrl+C", "Quit application"),
        ],
    ),
    (
        "Shorthand Commands",
        [
            (":nn", "Quick note (or :nn <text>)"),
            (":nt", "Quick tackle (or :nt <p> <t> <a> <o>)"),
            (":cs", "Clip start"),
            (":ce <desc>", "Clip end with description"),
        ],
    ),
]


def render_help(width: int, height: int) -> list[Text]:
    lines = [Text("Keybindings", style=styles.TITLE)]
    for title, bindings in HELP_GROUPS:
        lines.append(Text(""))
        lines.append(Text(title, style=styles.HEADER))
        for key, description in bindings:
            line = Text("  ")
            line.append(f"{key:<{KEY_WIDTH}}", style=KEY_STYLE)
            line.append(description, style=styles.PRIMARY)
            lines.append(line)
    lines.append(Text(""))
    lines.append(Text("Press any key to close", style=styles.SUBTITLE))
    return center_panel(lines, width, height)
