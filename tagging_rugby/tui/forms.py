"""
Keyboard-driven forms for notes and tackles.

A Form is a sequence of groups (wizard steps) whose fields read and write
attributes of a result model. The result outlives the form, so a form
rebuilt over the same result shows the same values.
"""

import math
from collections.abc import Callable
from enum import Enum

from pydantic import BaseModel
from rich.text import Text

from tagging_rugby.models.note import Outcome
from tagging_rugby.tui import styles
from tagging_rugby.tui.layout import pad_to_width
from tagging_rugby.utils.timeutil import format_time, parse_time_to_seconds

Validator = Callable[[str], str | None]

OUTCOME_OPTIONS = [
    ("Completed", Outcome.COMPLETED.value),
    ("Missed", Outcome.MISSED.value),
    ("Possible", Outcome.POSSIBLE.value),
    ("Other", Outcome.OTHER.value),
]


class FormState(str, Enum):
    """Where a form is in its lifecycle."""

    NORMAL = "normal"
    COMPLETED = "completed"
    ABORTED = "aborted"


# ═══════════════════════════════════════════════════════════
# RESULTS
# ═══════════════════════════════════════════════════════════


class NoteFormResult(BaseModel):
    """Values of the note form."""

    text: str = ""
    category: str = ""
    player: str = ""
    team: str = ""

    def has_data(self) -> bool:
        return bool(self.text or self.category or self.player or self.team)


class TackleFormResult(BaseModel):
    """Values of the tackle wizard."""

    player: str = ""
    attempt: str = ""
    outcome: str = ""
    followed: str = ""
    notes: str = ""
    zone: str = ""
    star: bool = False

    def has_data(self) -> bool:
        """Whether the user typed anything. Outcome and star are ignored; they always hold a value."""
        return bool(self.player or self.attempt or self.followed or self.notes or self.zone)


class EditTackleFormResult(TackleFormResult):
    """Tackle wizard values plus editable timing."""

    timestamp: str = ""
    end_seconds: str = ""


# ═══════════════════════════════════════════════════════════
# VALIDATORS
# ═══════════════════════════════════════════════════════════


def required(label: str) -> Validator:
    def check(value: str) -> str | None:
        return f"{label} is required" if not value.strip() else None

    return check


def validate_attempt(value: str) -> str | None:
    if not value.strip():
        return "attempt is required"
    try:
        int(value.strip())
    except ValueError:
        return "attempt must be a number"
    return None


def validate_timestamp(value: str) -> str | None:
    if not value.strip():
        return "timestamp is required"
    try:
        parse_time_to_seconds(value)
    except ValueError:
        return "invalid time format"
    return None


def validate_end_seconds(value: str) -> str | None:
    if not value.strip():
        return "end seconds is required"
    try:
        seconds = float(value)
    except ValueError:
        return "must be a number"
    if not math.isfinite(seconds):
        return "must be a number"
    if seconds <= 0:
        return "must be a positive number"
    return None


# ═══════════════════════════════════════════════════════════
# FIELDS
# ═══════════════════════════════════════════════════════════


class Field:
    """A form field bound to one attribute of the result."""

    def __init__(self, title: str, attr: str, description: str = ""):
        self.title = title
        self.attr = attr
        self.description = description

    def get(self, result: BaseModel):
        return getattr(result, self.attr)

    def set(self, result: BaseModel, value) -> None:
        setattr(result, self.attr, value)

    def validate(self, result: BaseModel) -> str | None:
        return None

    def handle_key(self, key: str, result: BaseModel) -> bool:
        """Apply a key. Returns False when the key is not for this field."""
        return False

    def render_value(self, result: BaseModel, focused: bool) -> Text:
        raise NotImplementedError


class InputField(Field):
    """Single-line text input."""

    def __init__(
        self,
        title: str,
        attr: str,
        description: str = "",
        validator: Validator | None = None,
    ):
        super().__init__(title, attr, description)
        self.validator = validator

    def validate(self, result: BaseModel) -> str | None:
        return self.validator(self.get(result)) if self.validator else None

    def handle_key(self, key: str, result: BaseModel) -> bool:
        value = self.get(result)
        if key == "backspace":
            self.set(result, value[:-1])
            return True
        if key == "ctrl+u":
            self.set(result, "")
            return True
        if key == "space":
            self.set(result, value + " ")
            return True
        if len(key) == 1 and key.isprintable():
            self.set(result, value + key)
            return True
        return False

    def render_value(self, result: BaseModel, focused: bool) -> Text:
        line = Text("  > ", style=styles.SECONDARY)
        line.append(self.get(result), style=styles.PRIMARY)
        if focused:
            line.append("▌", style=styles.SHORTCUT)
        return line


class SelectField(Field):
    """Choice from a fixed list; the first option is preselected."""

    def __init__(self, title: str, attr: str, options: list[tuple[str, str]], description: str = ""):
        super().__init__(title, attr, description)
        self.options = options

    def ensure_default(self, result: BaseModel) -> None:
        values = [v for _, v in self.options]
        if self.get(result) not in values:
            self.set(result, values[0])

    def _index(self, result: BaseModel) -> int:
        values = [v for _, v in self.options]
        value = self.get(result)
        return values.index(value) if value in values else 0

    def handle_key(self, key: str, result: BaseModel) -> bool:
        index = self._index(result)
        if key in ("down", "j", "right", "l"):
            index = (index + 1) % len(self.options)
        elif key in ("up", "k", "left", "h"):
            index = (index - 1) % len(self.options)
        else:
            return False
        self.set(result, self.options[index][1])
        return True

    def render_value(self, result: BaseModel, focused: bool) -> Text:
        line = Text("  ")
        selected = self._index(result)
        for i, (label, _) in enumerate(self.options):
            if i:
                line.append("  ")
            if i == selected:
                line.append(f"[{label}]", style=styles.HIGHLIGHT if focused else styles.PRIMARY)
            else:
                line.append(f" {label} ", style=styles.DIMMED)
        return line


class ConfirmField(Field):
    """Yes/no toggle."""

    def __init__(
        self,
        title: str,
        attr: str,
        description: str = "",
        affirmative: str = "Yes",
        negative: str = "No",
    ):
        super().__init__(title, attr, description)
        self.affirmative = affirmative
        self.negative = negative

    def handle_key(self, key: str, result: BaseModel) -> bool:
        if key in ("left", "right", "h", "l", "space", "tab"):
            self.set(result, not self.get(result))
        elif key in ("y", "Y"):
            self.set(result, True)
        elif key in ("n", "N"):
            self.set(result, False)
        else:
            return False
        return True

    def render_value(self, result: BaseModel, focused: bool) -> Text:
        on = bool(self.get(result))
        line = Text("  ")
        active = styles.HIGHLIGHT if focused else styles.PRIMARY
        line.append(f" {self.affirmative} ", style=active if on else styles.DIMMED)
        line.append("  ")
        line.append(f" {self.negative} ", style=styles.DIMMED if on else active)
        return line


class Group:
    """One wizard step."""

    def __init__(self, fields: list[Field], description: str = ""):
        self.fields = fields
        self.description = description


# ═══════════════════════════════════════════════════════════
# FORM
# ═══════════════════════════════════════════════════════════


class Form:
    """
    A multi-step form over a result model.

    Keys: enter/tab/down advance (validating the current field),
    shift+tab/up go back, esc aborts. Enter on the last field of the last
    step validates everything and completes the form.
    """

    def __init__(self, title: str, groups: list[Group], result: BaseModel):
        self.title = title
        self.groups = groups
        self.result = result
        self.step = 0
        self.field_index = 0
        self.state = FormState.NORMAL
        self.error = ""

        for group in groups:
            for field in group.fields:
                if isinstance(field, SelectField):
                    field.ensure_default(result)

    @property
    def group(self) -> Group:
        return self.groups[self.step]

    @property
    def field(self) -> Field:
        return self.group.fields[self.field_index]

    def handle_key(self, key: str) -> FormState:
        """
        Apply one key.

        Returns:
            The state after the key. ABORTED is reported once; the form
            can be shown again afterwards without rebuilding it.
        """
        self.state = FormState.NORMAL
        if key == "esc":
            self.state = FormState.ABORTED
            return self.state

        field = self.field
        if key in ("enter", "tab") or (key == "down" and isinstance(field, InputField)):
            if key == "tab" and isinstance(field, ConfirmField):
                field.handle_key(key, self.result)
                return self.state
            return self._advance()
        if key in ("shift+tab",) or (key == "up" and isinstance(field, InputField)):
            self._back()
            return self.state

        if field.handle_key(key, self.result):
            self.error = ""
        return self.state

    def _advance(self) -> FormState:
        error = self.field.validate(self.result)
        if error:
            self.error = error
            return self.state
        self.error = ""

        if self.field_index < len(self.group.fields) - 1:
            self.field_index += 1
            return self.state
        if self.step < len(self.groups) - 1:
            self.step += 1
            self.field_index = 0
            return self.state

        for step, group in enumerate(self.groups):
            for index, field in enumerate(group.fields):
                error = field.validate(self.result)
                if error:
                    self.step, self.field_index, self.error = step, index, error
                    return self.state
        self.state = FormState.COMPLETED
        return self.state

    def _back(self) -> None:
        self.error = ""
        if self.field_index > 0:
            self.field_index -= 1
        elif self.step > 0:
            self.step -= 1
            self.field_index = len(self.group.fields) - 1

    def render(self, width: int) -> list[Text]:
        lines = [Text(f" {self.title}", style=styles.HEADER)]
        if self.group.description:
            lines.append(Text(f" {self.group.description}", style=styles.SECONDARY))
        lines.append(Text(""))

        for index, field in enumerate(self.group.fields):
            focused = index == self.field_index
            title = Text(" ▸ " if focused else "   ")
            title.append(field.title, style=styles.WARNING if focused else styles.PRIMARY)
            if field.description:
                title.append(f"  {field.description}", style=styles.DIMMED)
            lines.append(title)
            lines.append(field.render_value(self.result, focused))

        lines.append(Text(""))
        if self.error:
            lines.append(Text(f" ✗ {self.error}", style=styles.ERROR))
        lines.append(
            Text(" enter next • shift+tab back • esc cancel", style=styles.DIMMED)
        )
        return [pad_to_width(line, width) for line in lines]


# ═══════════════════════════════════════════════════════════
# FORM BUILDERS
# ═══════════════════════════════════════════════════════════


def _optional_step(header_description: str) -> Group:
    return Group(
        description=header_description,
        fields=[
            InputField("Followed", "followed", "Optional - who followed up"),
            InputField("Notes", "notes", "Optional - additional notes"),
            InputField("Zone", "zone", "Optional - field zone"),
            ConfirmField("Star", "star", "Mark as highlighted"),
        ],
    )


def new_note_form(timestamp: float, result: NoteFormResult) -> Form:
    """Note form: required text, optional category, player and team."""
    return Form(
        f"Add Note @ {format_time(timestamp)}",
        [
            Group(
                fields=[
                    InputField("Text", "text", "Required", required("text")),
                    InputField("Category", "category", "Optional"),
                    InputField("Player", "player", "Optional"),
                    InputField("Team", "team", "Optional"),
                ]
            )
        ],
        result,
    )


def new_tackle_form(timestamp: float, result: TackleFormResult) -> Form:
    """Two-step tackle wizard."""
    return Form(
        f"Add Tackle @ {format_time(timestamp)}",
        [
            Group(
                description="Step 1 of 2: Tackle Details",
                fields=[
                    InputField("Player", "player", "Required", required("player")),
                    InputField("Attempt", "attempt", "Required - number only", validate_attempt),
                    SelectField("Outcome", "outcome", OUTCOME_OPTIONS, "Required"),
                ],
            ),
            _optional_step("Step 2 of 2: Optional Details"),
        ],
        result,
    )


def new_edit_tackle_form(
    timestamp: float,
    end_seconds: float,
    result: EditTackleFormResult,
) -> Form:
    """
    Tackle wizard for an existing tackle, with timestamp and end fields.

    The timing fields are filled from the arguments only while empty, so a
    form rebuilt over the same result keeps what the user typed.
    """
    if not result.timestamp:
        result.timestamp = f"{timestamp:g}"
    if not result.end_seconds:
        result.end_seconds = f"{end_seconds:g}"

    return Form(
        f"Edit Tackle @ {format_time(timestamp)}",
        [
            Group(
                description="Step 1 of 2: Tackle Details",
                fields=[
                    InputField(
                        "Timestamp", "timestamp", "H:MM:SS, MM:SS, or seconds", validate_timestamp
                    ),
                    InputField(
                        "End (seconds)",
                        "end_seconds",
                        "Seconds after start for end time",
                        validate_end_seconds,
                    ),
                    InputField("Player", "player", "Required", required("player")),
                    InputField("Attempt", "attempt", "Required - number only", validate_attempt),
                    SelectField("Outcome", "outcome", OUTCOME_OPTIONS, "Required"),
                ],
            ),
            _optional_step("Step 2 of 2: Optional Details"),
        ],
        result,
    )


class DiscardResult(BaseModel):
    discard: bool = False


def new_confirm_discard_form(result: DiscardResult) -> Form:
    """Yes/no prompt shown when a form with data is cancelled."""
    return Form(
        "Discard changes?",
        [
            Group(
                description="You have unsaved data. Are you sure you want to discard?",
                fields=[
                    ConfirmField(
                        "Discard", "discard", affirmative="Yes, discard", negative="No, go back"
                    )
                ],
            )
        ],
        result,
    )
