"""
mpv process launcher.

Starts mpv with an IPC socket and a stripped input configuration so that
keyboard control stays with the terminal UI, then connects a client.
"""

import asyncio
import os
import tempfile
from pathlib import Path

from tagging_rugby.core.player.deps import check_mpv
from tagging_rugby.core.player.mpv_client import DEFAULT_SOCKET_PATH, MpvClient
from tagging_rugby.utils.exceptions import SocketNotFoundError
from tagging_rugby.utils.logger import get_logger

logger = get_logger(__name__)

# Only keys that make sense inside the video window; the TUI owns the rest
INPUT_CONF = """\
SPACE cycle pause
f cycle fullscreen
ESC set fullscreen no
q quit
"""


class MpvProcess:
    """A running mpv process and the files it owns."""

    def __init__(self, process: asyncio.subprocess.Process, input_conf: Path, socket_path: str):
        self.process = process
        self.input_conf = input_conf
        self.socket_path = socket_path

    async def terminate(self) -> None:
        """Stop mpv if still running and remove temporary files."""
        if self.process.returncode is None:
            self.process.terminate()
            try:
                await asyncio.wait_for(self.process.wait(), timeout=2.0)
            except asyncio.TimeoutError:
                self.process.kill()
                await self.process.wait()
        self.input_conf.unlink(missing_ok=True)


async def launch_mpv(
    video_path: str,
    socket_path: str = DEFAULT_SOCKET_PATH,
    binary: str = "mpv",
) -> MpvProcess:
    """
    Start mpv for a video.

    Args:
        video_path: Media file to open
        socket_path: IPC socket path to pass to --input-ipc-server
        binary: mpv executable

    Returns:
        MpvProcess handle

    Raises:
        DependencyError: If mpv is not installed
    """
    executable = check_mpv(binary)

    # A stale socket from a crashed run would make connect succeed too early
    if os.path.exists(socket_path):
        os.unlink(socket_path)

    fd, conf_path = tempfile.mkstemp(prefix="tagging-rugby-input-", suffix=".conf")
    with os.fdopen(fd, "w") as f:
        f.write(INPUT_CONF)

    try:
        process = await asyncio.create_subprocess_exec(
            executable,
            f"--input-ipc-server={socket_path}",
            "--no-input-default-bindings",
            f"--input-conf={conf_path}",
            video_path,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.DEVNULL,
        )
    except OSError:
        Path(conf_path).unlink(missing_ok=True)
        raise

    logger.info(f"Launched mpv (pid {process.pid}) for {video_path}")
    return MpvProcess(process, Path(conf_path), socket_path)


async def connect_with_retry(
    client: MpvClient,
    retries: int = 50,
    interval: float = 0.1,
) -> None:
    """
    Connect a client, waiting for the player to create its socket.

    Args:
        client: Client to connect
        retries: Number of attempts
        interval: Seconds between attempts

    Raises:
        SocketNotFoundError: If every attempt fails
    """
    last_error: SocketNotFoundError | None = None
    for _ in range(max(1, retries)):
        try:
            await client.connect()
            return
        except SocketNotFoundError as e:
            last_error = e
            await asyncio.sleep(interval)
    raise last_error or SocketNotFoundError()
