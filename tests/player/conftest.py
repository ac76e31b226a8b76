"""
Shared fixtures for player tests.

FakeMpvServer listens on a Unix socket and speaks mpv's JSON IPC: one JSON
object per line in each direction, responses echoing the request id.
"""

import asyncio
import json
import os
import tempfile
from collections.abc import AsyncGenerator

import pytest

from tagging_rugby.core.player.mpv_client import MpvClient


class FakeMpvServer:
    """
    In-process stand-in for mpv.

    Attributes:
        properties: Values returned by get_property and updated by set_property
        errors: Property name -> error string to answer with
        commands: Every command array received, in order
        noise: Lines written before each response (events, garbage)
    """

    def __init__(self, socket_path: str):
        self.socket_path = socket_path
        self.properties = {
            "time-pos": 12.5,
            "duration": 600,
            "speed": 1.0,
            "pause": False,
            "mute": False,
        }
        self.errors: dict[str, str] = {}
        self.commands: list[list] = []
        self.noise: list[str] = []
        self.close_on_next = False
        self._server: asyncio.AbstractServer | None = None

    async def start(self) -> None:
        self._server = await asyncio.start_unix_server(self._handle, path=self.socket_path)

    async def stop(self) -> None:
        if self._server is not None:
            self._server.close()
            await self._server.wait_closed()

    async def _handle(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        try:
            while True:
                line = await reader.readline()
                if not line:
                    break
                request = json.loads(line)
                command = request["command"]
                self.commands.append(command)

                if self.close_on_next:
                    break

                for extra in self.noise:
                    writer.write((extra + "\n").encode())
                writer.write((json.dumps(self._respond(command, request["request_id"])) + "\n").encode())
                await writer.drain()
        finally:
            writer.close()

    def _respond(self, command: list, request_id: int) -> dict:
        verb = command[0]
        if verb in ("get_property", "set_property"):
            name = command[1]
            if name in self.errors:
                return {"request_id": request_id, "error": self.errors[name]}
            if verb == "get_property":
                if name not in self.properties:
                    return {"request_id": request_id, "error": "property unavailable"}
                return {"request_id": request_id, "error": "success", "data": self.properties[name]}
            self.properties[name] = command[2]
            return {"request_id": request_id, "error": "success"}
        if verb == "cycle" and command[1] == "pause":
            self.properties["pause"] = not self.properties["pause"]
        elif verb == "seek":
            if command[2] == "absolute":
                self.properties["time-pos"] = float(command[1])
            else:
                self.properties["time-pos"] = float(self.properties["time-pos"]) + float(command[1])
        return {"request_id": request_id, "error": "success", "data": None}


@pytest.fixture
async def mpv_server() -> AsyncGenerator[FakeMpvServer, None]:
    """Fake mpv listening on a short-lived socket."""
    with tempfile.TemporaryDirectory(prefix="mpv") as tmp:
        server = FakeMpvServer(os.path.join(tmp, "mpv.sock"))
        await server.start()
        yield server
        await server.stop()


@pytest.fixture
async def client(mpv_server: FakeMpvServer) -> AsyncGenerator[MpvClient, None]:
    """Client connected to the fake server."""
    client = MpvClient(mpv_server.socket_path)
    await client.connect()
    yield client
    await client.close()
