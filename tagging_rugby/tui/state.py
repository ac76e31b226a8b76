"""
View state for the terminal UI.

Plain mutable objects owned by the Model. Nothing here talks to the
player or the store; handlers in the Model do that and then update
these objects.
"""

from enum import Enum, IntEnum

from tagging_rugby.models.records import ClipRecord, ListItem, TackleStats
from tagging_rugby.tui.forms import Form

STEP_SIZES = [0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0]
SPEEDS = [0.5, 0.75, 1.0, 1.25, 1.5, 2.0]


class Focus(str, Enum):
    """Focusable panels of the main view, in Tab order."""

    VIDEO = "video"
    SEARCH = "search"
    NOTES = "notes"


FOCUS_ORDER = [Focus.VIDEO, Focus.SEARCH, Focus.NOTES]


class Mode(str, Enum):
    """Entries of the modal stack."""

    MAIN = "main"
    COMMAND = "command"
    HELP = "help"
    STATS = "stats"
    NOTE_FORM = "note_form"
    TACKLE_FORM = "tackle_form"
    EDIT_FORM = "edit_form"
    CONFIRM_DISCARD = "confirm_discard"
    CLIPS = "clips"
    EXPORT = "export"


FORM_MODES = (Mode.NOTE_FORM, Mode.TACKLE_FORM, Mode.EDIT_FORM)


# ═══════════════════════════════════════════════════════════
# MODAL STACK
# ═══════════════════════════════════════════════════════════


class Modal:
    """One stack entry; form modes carry the form they show."""

    def __init__(self, mode: Mode, form: Form | None = None, timestamp: float = 0.0, note_id: int = 0):
        self.mode = mode
        self.form = form
        self.timestamp = timestamp
        self.note_id = note_id


class ModalStack:
    """
    Active UI modes, bottom to top.

    MAIN is always at the bottom and cannot be popped. Input goes to the
    top entry.
    """

    def __init__(self):
        self._stack: list[Modal] = [Modal(Mode.MAIN)]

    @property
    def top(self) -> Modal:
        return self._stack[-1]

    @property
    def mode(self) -> Mode:
        return self._stack[-1].mode

    def push(self, modal: Modal) -> Modal:
        self._stack.append(modal)
        return modal

    def pop(self) -> Modal | None:
        if len(self._stack) == 1:
            return None
        return self._stack.pop()

    def pop_to_main(self) -> None:
        del self._stack[1:]

    def contains(self, mode: Mode) -> bool:
        return any(entry.mode == mode for entry in self._stack)

    def modes(self) -> list[Mode]:
        return [entry.mode for entry in self._stack]

    def __len__(self) -> int:
        return len(self._stack)


# ═══════════════════════════════════════════════════════════
# TEXT INPUTS
# ═══════════════════════════════════════════════════════════


class TextInput:
    """Single-line text with a cursor."""

    def __init__(self):
        self.value = ""
        self.cursor = 0

    def insert(self, text: str) -> None:
        self.value = self.value[: self.cursor] + text + self.value[self.cursor :]
        self.cursor += len(text)

    def backspace(self) -> None:
        if self.cursor > 0:
            self.value = self.value[: self.cursor - 1] + self.value[self.cursor :]
            self.cursor -= 1

    def delete(self) -> None:
        if self.cursor < len(self.value):
            self.value = self.value[: self.cursor] + self.value[self.cursor + 1 :]

    def left(self) -> None:
        if self.cursor > 0:
            self.cursor -= 1

    def right(self) -> None:
        if self.cursor < len(self.value):
            self.cursor += 1

    def clear(self) -> None:
        self.value = ""
        self.cursor = 0

    def take(self) -> str:
        """Return the value and clear the input."""
        value = self.value
        self.clear()
        return value


class CommandInputState(TextInput):
    """
    The colon command line and the result banner below the columns.

    generation increases with every banner so that a delayed ClearResult
    only removes the banner it was scheduled for.
    """

    def __init__(self):
        super().__init__()
        self.active = False
        self.result = ""
        self.is_error = False
        self.generation = 0

    def activate(self) -> None:
        self.active = True
        self.clear()
        self.clear_result()

    def deactivate(self) -> None:
        self.active = False
        self.clear()

    def set_result(self, result: str, is_error: bool = False) -> int:
        self.result = result
        self.is_error = is_error
        self.generation += 1
        return self.generation

    def clear_result(self) -> None:
        self.result = ""
        self.is_error = False


class SearchState(TextInput):
    """Incremental search over the notes list."""

    def __init__(self):
        super().__init__()
        self.matches: list[int] = []
        self.current_match = 0

    def update_matches(self, items: list[ListItem]) -> None:
        """
        Recompute matching row indices.

        Matching is case-insensitive over text, id, player and category.
        """
        self.current_match = 0
        query = self.value.lower()
        if not query:
            self.matches = []
            return
        self.matches = [
            i
            for i, item in enumerate(items)
            if query in item.text.lower()
            or query in str(item.id)
            or query in item.player.lower()
            or query in item.category.lower()
        ]

    def cycle(self, forward: bool = True) -> int | None:
        """
        Move the match cursor, wrapping.

        Returns:
            Row index of the new current match, or None without matches
        """
        if not self.matches:
            return None
        step = 1 if forward else -1
        self.current_match = (self.current_match + step) % len(self.matches)
        return self.matches[self.current_match]

    def reset(self) -> None:
        self.clear()
        self.matches = []
        self.current_match = 0


# ═══════════════════════════════════════════════════════════
# LISTS
# ═══════════════════════════════════════════════════════════


class NotesListState:
    """Rows of the notes list and the selection."""

    def __init__(self):
        self.items: list[ListItem] = []
        self.selected = 0
        self.scroll_offset = 0

    def move_up(self) -> None:
        if self.selected > 0:
            self.selected -= 1

    def move_down(self) -> None:
        if self.selected < len(self.items) - 1:
            self.selected += 1

    def jump_to(self, row: int) -> None:
        """Select a row, clamped to the list."""
        if not self.items:
            self.selected = 0
            return
        self.selected = max(0, min(row, len(self.items) - 1))

    def selected_item(self) -> ListItem | None:
        if 0 <= self.selected < len(self.items):
            return self.items[self.selected]
        return None

    def set_items(self, items: list[ListItem]) -> None:
        self.items = items
        if self.selected >= len(items):
            self.selected = max(0, len(items) - 1)

    def scroll_into_view(self, visible_rows: int, time_pos: float) -> None:
        """
        Keep the selection visible.

        When the selection is off screen the list is scrolled so that the
        row nearest the playhead sits a third of the way down.
        """
        if not self.items or visible_rows <= 0:
            self.scroll_offset = 0
            return
        max_offset = max(0, len(self.items) - visible_rows)

        if self.selected < self.scroll_offset or self.selected >= self.scroll_offset + visible_rows:
            nearest = len(self.items) - 1
            for i, item in enumerate(self.items):
                if item.start >= time_pos:
                    nearest = i
                    break
            self.scroll_offset = max(0, min(nearest - visible_rows // 3, max_offset))

        if self.selected < self.scroll_offset:
            self.scroll_offset = self.selected
        elif self.selected >= self.scroll_offset + visible_rows:
            self.scroll_offset = self.selected - visible_rows + 1
        self.scroll_offset = max(0, min(self.scroll_offset, max_offset))


class SortColumn(IntEnum):
    """Stats table sort keys, in cycling order."""

    PLAYER = 0
    TOTAL = 1
    COMPLETED = 2
    MISSED = 3
    POSSIBLE = 4
    PERCENTAGE = 5
    STARRED = 6


SORT_LABELS = ["Player", "Total", "Completed", "Missed", "Possible", "%", "Starred"]


def sort_stats(stats: list[TackleStats], column: SortColumn) -> list[TackleStats]:
    """Sort by a column; numbers descend, names ascend, ties go by name."""
    if column == SortColumn.PLAYER:
        return sorted(stats, key=lambda s: s.player)

    def value(s: TackleStats) -> float:
        if column == SortColumn.TOTAL:
            return s.total
        if column == SortColumn.COMPLETED:
            return s.completed
        if column == SortColumn.MISSED:
            return s.missed
        if column == SortColumn.POSSIBLE:
            return s.possible
        if column == SortColumn.PERCENTAGE:
            return s.percentage if s.percentage is not None else -1.0
        return s.starred

    return sorted(stats, key=lambda s: (-value(s), s.player))


def matches_initials(player: str, text: str) -> bool:
    """Whether text equals the lowercased initials of the name's parts."""
    parts = player.split()
    if not parts:
        return False
    return "".join(part[0].lower() for part in parts) == text


class StatsViewState:
    """Full-screen stats table: sort key, selection and player filters."""

    def __init__(self):
        self.stats: list[TackleStats] = []
        self.sort_column = SortColumn.PLAYER
        self.all_videos = False
        self.selected = 0
        self.scroll_offset = 0
        self.filter_mode = False
        self.filter_input = ""
        self.filtered: set[str] = set()

    def set_stats(self, stats: list[TackleStats]) -> None:
        self.stats = sort_stats(stats, self.sort_column)
        self.selected = 0
        self.scroll_offset = 0

    def next_sort_column(self) -> None:
        self.sort_column = SortColumn((self.sort_column + 1) % len(SortColumn))
        self.stats = sort_stats(self.stats, self.sort_column)

    def move_up(self) -> None:
        if self.selected > 0:
            self.selected -= 1

    def move_down(self) -> None:
        if self.selected < len(self.stats) - 1:
            self.selected += 1

    def toggle_filter(self, text: str) -> bool:
        """
        Toggle players matching text by name substring or exact initials.

        A single match toggles that player. Several matches are toggled as
        a group: all are added unless all are already filtered, in which
        case all are removed.

        Returns:
            True when at least one player matched
        """
        text = text.strip().lower()
        if not text:
            return False

        matched = [
            s.player
            for s in self.stats
            if text in s.player.lower() or matches_initials(s.player, text)
        ]
        if not matched:
            return False

        if len(matched) == 1:
            self.filtered ^= {matched[0]}
            return True

        if all(player in self.filtered for player in matched):
            self.filtered.difference_update(matched)
        else:
            self.filtered.update(matched)
        return True

    def clear_filters(self) -> None:
        self.filtered = set()
        self.filter_mode = False
        self.filter_input = ""

    @property
    def has_filters(self) -> bool:
        return bool(self.filtered)

    def is_filtered(self, player: str) -> bool:
        return player in self.filtered

    def display_stats(self) -> list[TackleStats]:
        """Filtered players first, each part keeping the sort order."""
        if not self.filtered:
            return list(self.stats)
        first = [s for s in self.stats if s.player in self.filtered]
        rest = [s for s in self.stats if s.player not in self.filtered]
        return first + rest


class ClipsViewState:
    def __init__(self):
        self.clips: list[ClipRecord] = []
        self.scroll_offset = 0

    def scroll_up(self) -> None:
        if self.scroll_offset > 0:
            self.scroll_offset -= 1

    def scroll_down(self, visible: int, total: int) -> None:
        if self.scroll_offset < total - visible:
            self.scroll_offset += 1


class ExportProgressState:
    """Progress of the running or last export."""

    def __init__(self):
        self.active = False
        self.running = False
        self.total = 0
        self.completed = 0
        self.errors = 0
        self.current_file = ""
        self.output_dir = ""
        self.error = ""

    def start(self, total: int) -> None:
        self.active = True
        self.running = True
        self.total = total
        self.completed = 0
        self.errors = 0
        self.current_file = ""
        self.output_dir = ""
        self.error = ""

    @property
    def finished(self) -> bool:
        return self.active and not self.running


class PlaybackState:
    """Last values polled from the player plus local playback settings."""

    def __init__(self, step_size: float = 1.0):
        self.connected = False
        self.paused = False
        self.muted = False
        self.time_pos = 0.0
        self.duration = 0.0
        self.speed = 1.0
        self.step_size = step_size
        self.overlay_enabled = False


def _next_in(values: list[float], current: float) -> float:
    for value in values:
        if value > current:
            return value
    return values[-1]


def _prev_in(values: list[float], current: float) -> float:
    for value in reversed(values):
        if value < current:
            return value
    return values[0]


def increase_step(current: float) -> float:
    return _next_in(STEP_SIZES, current)


def decrease_step(current: float) -> float:
    return _prev_in(STEP_SIZES, current)


def increase_speed(current: float) -> float:
    return _next_in(SPEEDS, current)


def decrease_speed(current: float) -> float:
    return _prev_in(SPEEDS, current)
