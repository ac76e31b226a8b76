"""
ffmpeg clip encoder.
"""

import asyncio

from tagging_rugby.core.encoder.base import Encoder
from tagging_rugby.core.player.deps import check_ffmpeg
from tagging_rugby.utils.exceptions import EncoderMissingError, ExportError
from tagging_rugby.utils.logger import get_logger

logger = get_logger(__name__)


class FFmpegEncoder(Encoder):
    """
    Encoder backed by the ffmpeg command line tool.

    Re-encodes to H.264/AAC by default; with stream_copy the streams are
    copied as-is, which is faster but cuts on keyframes.
    """

    def __init__(self, binary: str = "ffmpeg", preset: str = "fast", stream_copy: bool = False):
        """
        Initialize ffmpeg encoder.

        Args:
            binary: ffmpeg executable
            preset: x264 preset used when re-encoding
            stream_copy: Copy streams instead of re-encoding
        """
        self.binary = binary
        self.preset = preset
        self.stream_copy = stream_copy

    def check_available(self) -> None:
        check_ffmpeg(self.binary)

    def build_args(self, input_path: str, start: float, end: float, output_path: str) -> list[str]:
        """Command line arguments for one extraction, binary excluded."""
        args = ["-y", "-ss", f"{start:.3f}", "-i", input_path, "-t", f"{end - start:.3f}"]
        if self.stream_copy:
            args += ["-c", "copy"]
        else:
            args += ["-c:v", "libx264", "-c:a", "aac", "-preset", self.preset]
        args.append(output_path)
        return args

    async def extract(self, input_path: str, start: float, end: float, output_path: str) -> None:
        args = self.build_args(input_path, start, end, output_path)
        logger.debug(f"{self.binary} {' '.join(args)}")

        try:
            process = await asyncio.create_subprocess_exec(
                self.binary,
                *args,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as e:
            raise EncoderMissingError(
                "ffmpeg not found. Install: brew install ffmpeg (macOS) or apt install ffmpeg (Linux)",
                {"binary": self.binary},
            ) from e

        _, stderr = await process.communicate()
        if process.returncode != 0:
            message = stderr.decode(errors="replace").strip()
            raise ExportError(
                f"ffmpeg error: {message}",
                {"output": output_path, "returncode": process.returncode},
            )
