"""
Messages consumed by the event loop and the commands that produce them.

A command is a zero-argument coroutine function; the driver runs it as a
task and feeds whatever message it returns back into Model.update().
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

from pydantic import BaseModel, Field

from tagging_rugby.services.export import ExportComplete, ExportFailed, ExportProgress

Msg = Any
Cmd = Callable[[], Awaitable[Msg | None]]


class Key(BaseModel):
    """
    One keystroke.

    name is the printable character ("a", "G", ":") or a key name
    ("enter", "esc", "tab", "shift+tab", "ctrl+c", "up", "backspace").
    """

    name: str

    @property
    def is_printable(self) -> bool:
        return len(self.name) == 1 and self.name.isprintable()


class Resize(BaseModel):
    """Terminal size changed."""

    width: int
    height: int


class Tick(BaseModel):
    """Periodic poll of the player."""


class ClearResult(BaseModel):
    """Drop the status banner if it is still the one the timer was set for."""

    generation: int = 0


class Quit(BaseModel):
    """Ask the driver to exit."""


class Batch(BaseModel):
    """Several commands to run concurrently."""

    model_config = {"arbitrary_types_allowed": True}

    commands: list[Any] = Field(default_factory=list)


def batch(*commands: Cmd | Batch | None) -> Batch | Cmd | None:
    """Combine commands, dropping Nones and flattening nested batches."""
    flat: list[Cmd] = []
    for command in commands:
        if command is None:
            continue
        if isinstance(command, Batch):
            flat.extend(command.commands)
        else:
            flat.append(command)
    if not flat:
        return None
    if len(flat) == 1:
        return flat[0]
    return Batch(commands=flat)


def tick_after(interval: float) -> Cmd:
    """Command delivering a Tick after interval seconds."""

    async def wait() -> Tick:
        await asyncio.sleep(interval)
        return Tick()

    return wait


def clear_result_after(delay: float, generation: int) -> Cmd:
    """Command delivering ClearResult after delay seconds."""

    async def wait() -> ClearResult:
        await asyncio.sleep(delay)
        return ClearResult(generation=generation)

    return wait


def quit_now() -> Cmd:
    async def stop() -> Quit:
        return Quit()

    return stop


__all__ = [
    "Msg",
    "Cmd",
    "Key",
    "Resize",
    "Tick",
    "ClearResult",
    "Quit",
    "Batch",
    "batch",
    "tick_after",
    "clear_result_after",
    "quit_now",
    "ExportProgress",
    "ExportComplete",
    "ExportFailed",
]
