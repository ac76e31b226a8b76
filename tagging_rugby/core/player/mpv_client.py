"""
mpv JSON IPC client.

Requests are single JSON lines carrying a command array and a request id.
Responses echo the request id; asynchronous event frames carry none and
are dropped while waiting for a response.
"""

import asyncio
import itertools
import json
from typing import Any

from tagging_rugby.core.player.base import Player
from tagging_rugby.utils.exceptions import (
    NotConnectedError,
    PlayerCommandError,
    ProtocolError,
    SocketNotFoundError,
    TransportError,
)
from tagging_rugby.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_SOCKET_PATH = "/tmp/tagging-rugby-mpv.sock"

# Process-wide request id sequence
_request_ids = itertools.count(1)


def next_request_id() -> int:
    return next(_request_ids)


def to_float(value: Any) -> float:
    """
    Coerce a decoded numeric value to float.

    Raises:
        ProtocolError: If the value is not numeric
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ProtocolError(f"expected number, got {type(value).__name__}", {"value": value})
    return float(value)


def to_bool(value: Any) -> bool:
    """
    Check that a decoded value is a boolean.

    Raises:
        ProtocolError: If the value is not a bool
    """
    if not isinstance(value, bool):
        raise ProtocolError(f"expected bool, got {type(value).__name__}", {"value": value})
    return value


class MpvClient(Player):
    """
    Client for mpv's --input-ipc-server socket.

    One lock covers the whole write+read cycle, so requests on a client
    are strictly serialized and each caller sees only its own response.
    """

    def __init__(self, socket_path: str = DEFAULT_SOCKET_PATH):
        """
        Initialize mpv client.

        Args:
            socket_path: Path of the Unix domain socket mpv listens on
        """
        self.socket_path = socket_path
        self._reader: asyncio.StreamReader | None = None
        self._writer: asyncio.StreamWriter | None = None
        self._lock = asyncio.Lock()

    @property
    def is_connected(self) -> bool:
        return self._writer is not None

    async def connect(self) -> None:
        """Dial the socket. A second call while connected does nothing."""
        if self._writer is not None:
            return
        try:
            self._reader, self._writer = await asyncio.open_unix_connection(self.socket_path)
        except OSError as e:
            raise SocketNotFoundError(context={"socket_path": self.socket_path, "error": str(e)}) from e
        logger.info(f"Connected to mpv at {self.socket_path}")

    async def close(self) -> None:
        """Close the connection. Safe to call repeatedly."""
        writer = self._writer
        self._reader = None
        self._writer = None
        if writer is None:
            return
        writer.close()
        try:
            await writer.wait_closed()
        except OSError:
            # Peer already went away
            pass

    async def send_command(self, *args: Any) -> Any:
        """
        Send a command and wait for its response.

        Args:
            *args: Command verb followed by its arguments

        Returns:
            The response "data" field

        Raises:
            NotConnectedError: If the client is not connected
            TransportError: If the socket write or read fails
            PlayerCommandError: If mpv reports an error
        """
        if self._writer is None or self._reader is None:
            raise NotConnectedError()

        request_id = next_request_id()
        payload = json.dumps({"command": list(args), "request_id": request_id}) + "\n"

        async with self._lock:
            if self._writer is None or self._reader is None:
                raise NotConnectedError()
            try:
                self._writer.write(payload.encode())
                await self._writer.drain()
            except (OSError, ConnectionError) as e:
                await self.close()
                raise TransportError(f"failed to send command: {e}", {"command": args[0]}) from e

            logger.debug(f"mpv request {request_id}: {args[0]}")

            while True:
                try:
                    line = await self._reader.readline()
                except (OSError, ConnectionError, asyncio.LimitOverrunError, ValueError) as e:
                    await self.close()
                    raise TransportError(f"failed to read response: {e}") from e
                if not line:
                    await self.close()
                    raise TransportError("connection closed by mpv")

                try:
                    frame = json.loads(line)
                except json.JSONDecodeError:
                    continue
                if not isinstance(frame, dict) or frame.get("request_id") != request_id:
                    if isinstance(frame, dict) and "event" in frame:
                        logger.debug(f"Dropped mpv event: {frame['event']}")
                    continue
                break

        error = frame.get("error", "")
        if error not in ("", "success"):
            raise PlayerCommandError(error, {"command": args[0]})
        return frame.get("data")

    # ═══════════════════════════════════════════════════════════
    # PROPERTIES
    # ═══════════════════════════════════════════════════════════

    async def get_property(self, name: str) -> Any:
        return await self.send_command("get_property", name)

    async def set_property(self, name: str, value: Any) -> None:
        await self.send_command("set_property", name, value)

    async def get_time_pos(self) -> float:
        return to_float(await self.get_property("time-pos"))

    async def get_duration(self) -> float:
        return to_float(await self.get_property("duration"))

    async def get_speed(self) -> float:
        return to_float(await self.get_property("speed"))

    async def get_paused(self) -> bool:
        return to_bool(await self.get_property("pause"))

    async def get_mute(self) -> bool:
        return to_bool(await self.get_property("mute"))

    # ═══════════════════════════════════════════════════════════
    # PLAYBACK
    # ═══════════════════════════════════════════════════════════

    async def play(self) -> None:
        await self.set_property("pause", False)

    async def pause(self) -> None:
        await self.set_property("pause", True)

    async def toggle_pause(self) -> None:
        await self.send_command("cycle", "pause")

    async def seek(self, seconds: float) -> None:
        await self.send_command("seek", seconds, "absolute")

    async def seek_relative(self, seconds: float) -> None:
        await self.send_command("seek", seconds, "relative")

    async def set_speed(self, speed: float) -> None:
        await self.set_property("speed", speed)

    async def frame_step(self) -> None:
        await self.send_command("frame-step")

    async def frame_back_step(self) -> None:
        await self.send_command("frame-back-step")

    async def set_mute(self, muted: bool) -> None:
        await self.set_property("mute", muted)

    # ═══════════════════════════════════════════════════════════
    # LOOPS & OVERLAYS
    # ═══════════════════════════════════════════════════════════

    async def set_ab_loop(self, start: float, end: float) -> None:
        await self.set_property("ab-loop-a", start)
        await self.set_property("ab-loop-b", end)

    async def clear_ab_loop(self) -> None:
        await self.set_property("ab-loop-a", "no")
        await self.set_property("ab-loop-b", "no")

    async def show_overlay(self, overlay_id: int, text: str) -> None:
        await self.send_command("osd-overlay", overlay_id, "ass-events", text)

    async def hide_overlay(self, overlay_id: int) -> None:
        await self.send_command("osd-overlay", overlay_id, "none", "")
