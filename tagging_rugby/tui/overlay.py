"""
On-video overlay of notes near the playhead.

The text is an ASS fragment passed through to mpv's osd-overlay command.
"""

from tagging_rugby.models.records import ListItem

OVERLAY_ID = 1
ASS_STYLE = "{\\an7\\pos(20,20)\\fs24\\1c&HFFFFFF&\\3c&H201a1a&\\bord3\\shad0}"


def nearby_notes(items: list[ListItem], time_pos: float, proximity: float) -> list[ListItem]:
    """Non-tackle rows whose start lies within proximity seconds before time_pos."""
    return [
        item
        for item in items
        if not item.is_tackle and 0 <= time_pos - item.start <= proximity
    ]


def describe(item: ListItem) -> str:
    """[category] - player (team) - text, skipping empty parts."""
    parts = []
    if item.category:
        parts.append(f"[{item.category}]")
    if item.player and item.team:
        parts.append(f"{item.player} ({item.team})")
    elif item.player or item.team:
        parts.append(item.player or item.team)
    if item.text:
        parts.append(item.text)
    return " - ".join(parts) or "(empty note)"


def overlay_text(items: list[ListItem]) -> str:
    return ASS_STYLE + "\\N".join(describe(item) for item in items)
