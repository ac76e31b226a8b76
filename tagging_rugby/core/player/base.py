"""
Base interface for media player control.

The event loop only talks to the player through this interface so it can
run against a real mpv process or an in-memory fake.
"""

from abc import ABC, abstractmethod
from typing import Any


class Player(ABC):
    """Abstract base class for player clients."""

    @abstractmethod
    async def connect(self) -> None:
        """Open the control channel. Calling it again when connected is a no-op."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close the control channel. Idempotent."""
        pass

    @property
    @abstractmethod
    def is_connected(self) -> bool:
        """True while the control channel is open."""
        pass

    # ═══════════════════════════════════════════════════════════
    # PROPERTIES
    # ═══════════════════════════════════════════════════════════

    @abstractmethod
    async def get_property(self, name: str) -> Any:
        """
        Read a player property.

        Args:
            name: Property name (e.g. "time-pos")

        Returns:
            Decoded property value
        """
        pass

    @abstractmethod
    async def set_property(self, name: str, value: Any) -> None:
        """
        Write a player property.

        Args:
            name: Property name
            value: New value
        """
        pass

    @abstractmethod
    async def get_time_pos(self) -> float:
        """Current playback position in seconds."""
        pass

    @abstractmethod
    async def get_duration(self) -> float:
        """Media duration in seconds."""
        pass

    @abstractmethod
    async def get_speed(self) -> float:
        """Playback speed multiplier."""
        pass

    @abstractmethod
    async def get_paused(self) -> bool:
        """True when playback is paused."""
        pass

    @abstractmethod
    async def get_mute(self) -> bool:
        """True when audio is muted."""
        pass

    # ═══════════════════════════════════════════════════════════
    # PLAYBACK
    # ═══════════════════════════════════════════════════════════

    @abstractmethod
    async def play(self) -> None:
        pass

    @abstractmethod
    async def pause(self) -> None:
        pass

    @abstractmethod
    async def toggle_pause(self) -> None:
        pass

    @abstractmethod
    async def seek(self, seconds: float) -> None:
        """Seek to an absolute position."""
        pass

    @abstractmethod
    async def seek_relative(self, seconds: float) -> None:
        """Seek by an offset from the current position."""
        pass

    @abstractmethod
    async def set_speed(self, speed: float) -> None:
        pass

    @abstractmethod
    async def frame_step(self) -> None:
        pass

    @abstractmethod
    async def frame_back_step(self) -> None:
        pass

    @abstractmethod
    async def set_mute(self, muted: bool) -> None:
        pass

    # ═══════════════════════════════════════════════════════════
    # LOOPS & OVERLAYS
    # ═══════════════════════════════════════════════════════════

    @abstractmethod
    async def set_ab_loop(self, start: float, end: float) -> None:
        """
        Loop playback between two positions.

        Args:
            start: Loop start in seconds
            end: Loop end in seconds
        """
        pass

    @abstractmethod
    async def clear_ab_loop(self) -> None:
        pass

    @abstractmethod
    async def show_overlay(self, overlay_id: int, text: str) -> None:
        """
        Draw styled text over the video.

        Args:
            overlay_id: Overlay slot
            text: Opaque styled-text payload
        """
        pass

    @abstractmethod
    async def hide_overlay(self, overlay_id: int) -> None:
        pass
