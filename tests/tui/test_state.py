"""
Tests for UI state objects.
"""

from tagging_rugby.models.records import ItemKind, ListItem, TackleStats
from tagging_rugby.tui.state import (
    CommandInputState,
    Modal,
    ModalStack,
    Mode,
    NotesListState,
    SearchState,
    SortColumn,
    StatsViewState,
    decrease_speed,
    decrease_step,
    increase_speed,
    increase_step,
    matches_initials,
    sort_stats,
)


def items(*texts: str) -> list[ListItem]:
    return [ListItem(id=i + 1, start=float(i * 10), text=t) for i, t in enumerate(texts)]


class TestModalStack:
    def test_main_cannot_be_popped(self):
        stack = ModalStack()
        assert stack.pop() is None
        assert stack.modes() == [Mode.MAIN]

    def test_push_pop(self):
        stack = ModalStack()
        stack.push(Modal(Mode.STATS))
        stack.push(Modal(Mode.HELP))
        assert stack.mode == Mode.HELP
        assert stack.contains(Mode.STATS)

        stack.pop()
        assert stack.mode == Mode.STATS

        stack.pop_to_main()
        assert len(stack) == 1


class TestStepAndSpeed:
    def test_step_cycles_and_clamps(self):
        assert increase_step(1.0) == 2.0
        assert increase_step(30.0) == 30.0
        assert decrease_step(1.0) == 0.5
        assert decrease_step(0.1) == 0.1

    def test_step_between_values(self):
        assert increase_step(1.5) == 2.0
        assert decrease_step(1.5) == 1.0

    def test_speed(self):
        assert increase_speed(1.0) == 1.25
        assert increase_speed(2.0) == 2.0
        assert decrease_speed(0.75) == 0.5
        assert decrease_speed(0.5) == 0.5


class TestSearch:
    def test_matches_text_id_player_category(self):
        rows = items("Ruck", "Lineout")
        rows.append(
            ListItem(id=33, kind=ItemKind.TACKLE, text="x", player="Rucker", category="tackle")
        )
        search = SearchState()

        search.insert("ruck")
        search.update_matches(rows)
        assert search.matches == [0, 2]

        search.clear()
        search.insert("33")
        search.update_matches(rows)
        assert search.matches == [2]

    def test_cycle_wraps(self):
        search = SearchState()
        search.insert("a")
        search.update_matches(items("a", "b", "a", "a"))

        assert [search.cycle() for _ in range(3)] == [2, 3, 0]
        assert search.cycle(forward=False) == 3

    def test_cycle_without_matches(self):
        assert SearchState().cycle() is None

    def test_cursor_editing(self):
        search = SearchState()
        search.insert("ac")
        search.left()
        search.insert("b")
        assert search.value == "abc"
        search.delete()
        assert search.value == "ab"
        search.backspace()
        assert search.value == "a"


class TestCommandInput:
    def test_generation_increases(self):
        command = CommandInputState()
        assert command.set_result("one") == 1
        assert command.set_result("two", is_error=True) == 2
        assert command.is_error

    def test_activate_clears_banner(self):
        command = CommandInputState()
        command.set_result("old")
        command.activate()
        assert command.active
        assert command.result == ""


class TestNotesList:
    def test_set_items_clamps_selection(self):
        notes = NotesListState()
        notes.set_items(items("a", "b", "c"))
        notes.jump_to(2)
        notes.set_items(items("a"))
        assert notes.selected == 0

    def test_jump_to_clamps(self):
        notes = NotesListState()
        notes.set_items(items("a", "b"))
        notes.jump_to(10)
        assert notes.selected == 1
        notes.jump_to(-4)
        assert notes.selected == 0

    def test_scroll_keeps_selection_visible(self):
        notes = NotesListState()
        notes.set_items(items(*"abcdefghij"))
        notes.jump_to(9)
        notes.scroll_into_view(4, time_pos=0.0)
        assert notes.scroll_offset <= 9 < notes.scroll_offset + 4

    def test_scroll_empty(self):
        notes = NotesListState()
        notes.scroll_into_view(4, 0.0)
        assert notes.scroll_offset == 0


class TestStatsView:
    STATS = [
        TackleStats(player="John Smith", total=5, completed=4, missed=1),
        TackleStats(player="Jane Smythe", total=2, completed=1, missed=1, starred=1),
        TackleStats(player="Amy Jones", total=3, possible=3),
    ]

    def test_sort(self):
        by_total = sort_stats(self.STATS, SortColumn.TOTAL)
        assert [s.player for s in by_total] == ["John Smith", "Amy Jones", "Jane Smythe"]

        by_pct = sort_stats(self.STATS, SortColumn.PERCENTAGE)
        assert [s.player for s in by_pct] == ["John Smith", "Jane Smythe", "Amy Jones"]

    def test_sort_cycles(self):
        view = StatsViewState()
        view.set_stats(self.STATS)
        for _ in range(len(SortColumn)):
            view.next_sort_column()
        assert view.sort_column == SortColumn.PLAYER

    def test_initials(self):
        assert matches_initials("John Smith", "js")
        assert not matches_initials("John Smith", "j")
        assert not matches_initials("", "")

    def test_single_match_toggles(self):
        view = StatsViewState()
        view.set_stats(self.STATS)

        assert view.toggle_filter("amy")
        assert view.filtered == {"Amy Jones"}
        view.toggle_filter("AJ")
        assert view.filtered == set()

    def test_group_toggle(self):
        view = StatsViewState()
        view.set_stats(self.STATS)

        view.toggle_filter("john smith")
        view.toggle_filter("sm")
        assert view.filtered == {"John Smith", "Jane Smythe"}

        view.toggle_filter("sm")
        assert view.filtered == set()

    def test_no_match(self):
        view = StatsViewState()
        view.set_stats(self.STATS)
        assert not view.toggle_filter("zz")
        assert not view.toggle_filter("  ")

    def test_filtered_first(self):
        view = StatsViewState()
        view.set_stats(self.STATS)
        view.toggle_filter("smythe")

        assert [s.player for s in view.display_stats()] == [
            "Jane Smythe",
            "Amy Jones",
            "John Smith",
        ]
