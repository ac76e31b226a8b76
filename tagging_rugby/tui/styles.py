"""
Colour palette and rich styles for the terminal UI.
"""

from rich.style import Style

# ═══════════════════════════════════════════════════════════
# PALETTE
# ═══════════════════════════════════════════════════════════

DEEP_PURPLE = "#1a1a2e"
DARK_PURPLE = "#16213e"
PURPLE = "#4a347d"
BRIGHT_PURPLE = "#7b2cbf"
LAVENDER = "#c77dff"
LIGHT_LAVENDER = "#e0aaff"
PINK = "#ff6b9d"
CYAN = "#64dfdf"
AMBER = "#ffb347"
GREEN = "#57cc99"
RED = "#ef476f"
MATCH_BG = "#3c2a5e"
DIM = "#6c6483"

# ═══════════════════════════════════════════════════════════
# STYLES
# ═══════════════════════════════════════════════════════════

BORDER = Style(color=PURPLE)
HEADER = Style(color=PINK, bold=True)
PRIMARY = Style(color=LIGHT_LAVENDER)
SECONDARY = Style(color=LAVENDER)
DIMMED = Style(color=DIM)
HIGHLIGHT = Style(color=LIGHT_LAVENDER, bgcolor=BRIGHT_PURPLE, bold=True)
MATCH_ROW = Style(color=LIGHT_LAVENDER, bgcolor=MATCH_BG)
MATCH_TEXT = Style(color=DEEP_PURPLE, bgcolor=AMBER, bold=True)
CURRENT_MATCH_TEXT = Style(color=DEEP_PURPLE, bgcolor=PINK, bold=True)
WARNING = Style(color=PINK, bold=True)
SUCCESS = Style(color=CYAN, bold=True)
ERROR = Style(color=RED, bold=True)
SHORTCUT = Style(color=CYAN, bold=True)
STAR = Style(color=AMBER, bold=True)
BAR_FILLED = Style(color=GREEN)
BAR_EMPTY = Style(color=AMBER)
PANEL_BORDER = Style(color=BRIGHT_PURPLE)
TITLE = Style(color=CYAN, bold=True)
SUBTITLE = Style(color=LAVENDER, italic=True)
EMPTY = Style(color=PURPLE, italic=True)
BAR = Style(color=BRIGHT_PURPLE)
COUNT = Style(color=CYAN)
PLAYHEAD = Style(color=PINK, bold=True)
INPUT_BAR = Style(bgcolor=DARK_PURPLE)
