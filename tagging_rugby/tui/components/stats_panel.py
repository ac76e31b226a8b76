"""Live stats panel for column 3: event distribution and per-player tackles."""

from collections import Counter

from rich.text import Text

from tagging_rugby.models.records import ListItem, TackleStats
from tagging_rugby.tui import styles
from tagging_rugby.tui.layout import info_box, truncate
from tagging_rugby.tui.state import SORT_LABELS, SortColumn, sort_stats

MAX_CATEGORIES = 6
LABEL_WIDTH = 8


def category_counts(items: list[ListItem]) -> list[tuple[str, int]]:
    """
    Count list rows per category.

    Tackles always count as "tackle" and rows without a category as
    "other". Sorted by count descending, then name.
    """
    counts: Counter[str] = Counter()
    for item in items:
        category = "tackle" if item.is_tackle else item.category
        counts[category or "other"] += 1
    return sorted(counts.items(), key=lambda pair: (-pair[1], pair[0]))


def render_event_distribution(items: list[ListItem], width: int) -> list[Text]:
    inner = width - 2
    categories = category_counts(items)[:MAX_CATEGORIES]
    if not categories:
        return info_box("Event Distribution", [Text(" No events yet", style=styles.EMPTY)], width)

    max_count = categories[0][1]
    bar_max = max(5, inner - 16)
    lines = []
    for name, count in categories:
        bar_len = max(1, count * bar_max // max_count)
        line = Text(" ")
        line.append(f"{truncate(name, LABEL_WIDTH):<{LABEL_WIDTH}}", style=styles.SECONDARY)
        line.append(" ")
        line.append("█" * bar_len, style=styles.BAR)
        line.append(" ")
        line.append(str(count), style=styles.COUNT)
        lines.append(line)
    return info_box("Event Distribution", lines, width)


def render_tackle_stats(
    stats: list[TackleStats], width: int, sort_column: SortColumn = SortColumn.TOTAL
) -> list[Text]:
    """Per-player table with a TOTAL row pinned under the header."""
    inner = width - 2
    if not stats:
        return info_box("Tackle Stats", [Text(" No tackle data", style=styles.EMPTY)], width)

    name_width = max(6, inner - 24)
    rows = sort_stats(stats, sort_column)

    lines = [
        Text(
            f" {'Player':<{name_width}} {'Tot':>4} {'Comp':>4} {'Miss':>4} {'%':>4}",
            style=styles.HEADER,
        )
    ]

    total = sum(s.total for s in rows)
    completed = sum(s.completed for s in rows)
    missed = sum(s.missed for s in rows)
    overall = TackleStats(player="TOTAL", total=total, completed=completed, missed=missed)
    lines.append(
        Text(
            f" {'TOTAL':<{name_width}} {total:>4} {completed:>4} {missed:>4} "
            f"{overall.percentage_display:>4}",
            style=styles.COUNT,
        )
    )

    for s in rows:
        line = Text(
            f" {truncate(s.player, name_width):<{name_width}} {s.total:>4} {s.completed:>4} "
            f"{s.missed:>4} ",
            style=styles.PRIMARY,
        )
        line.append(f"{s.percentage_display:>4}", style=styles.SECONDARY)
        lines.append(line)

    lines.append(Text(f" Sorted by: {SORT_LABELS[sort_column]} (x)", style=styles.DIMMED))
    return info_box("Tackle Stats", lines, width)


def render_stats_panel(
    stats: list[TackleStats],
    items: list[ListItem],
    width: int,
    sort_column: SortColumn = SortColumn.TOTAL,
) -> list[Text]:
    if width < 5:
        return []
    return (
        render_event_distribution(items, width)
        + [Text("")]
        + render_tackle_stats(stats, width, sort_column)
    )
