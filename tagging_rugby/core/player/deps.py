"""External binary checks for mpv and ffmpeg."""

import shutil

from pydantic import BaseModel

from tagging_rugby.utils.exceptions import DependencyError, EncoderMissingError

MPV_INSTALL_URL = "https://mpv.io/installation/"
FFMPEG_INSTALL_URL = "https://ffmpeg.org/download.html"

INSTALL_URLS = {
    "mpv": MPV_INSTALL_URL,
    "ffmpeg": FFMPEG_INSTALL_URL,
}


class DependencyStatus(BaseModel):
    """Result of probing one binary."""

    name: str
    path: str | None = None
    install_url: str = ""

    @property
    def found(self) -> bool:
        return self.path is not None


def probe(name: str, binary: str | None = None) -> DependencyStatus:
    """
    Look a binary up on PATH.

    Args:
        name: Logical dependency name ("mpv" or "ffmpeg")
        binary: Executable to look for, defaults to name

    Returns:
        DependencyStatus with the resolved path or None
    """
    return DependencyStatus(
        name=name,
        path=shutil.which(binary or name),
        install_url=INSTALL_URLS.get(name, ""),
    )


def check_mpv(binary: str = "mpv") -> str:
    """
    Ensure mpv is installed.

    Returns:
        Resolved executable path

    Raises:
        DependencyError: If mpv is not on PATH
    """
    status = probe("mpv", binary)
    if not status.found:
        raise DependencyError(
            f"mpv not found. Install from: {MPV_INSTALL_URL}",
            {"binary": binary},
        )
    return status.path


def check_ffmpeg(binary: str = "ffmpeg") -> str:
    """
    Ensure ffmpeg is installed.

    Returns:
        Resolved executable path

    Raises:
        EncoderMissingError: If ffmpeg is not on PATH
    """
    status = probe("ffmpeg", binary)
    if not status.found:
        raise EncoderMissingError(
            "ffmpeg not found. Install: brew install ffmpeg (macOS) or apt install ffmpeg (Linux)",
            {"binary": binary, "install_url": FFMPEG_INSTALL_URL},
        )
    return status.path


def check_all(mpv_binary: str = "mpv", ffmpeg_binary: str = "ffmpeg") -> list[DependencyStatus]:
    """Probe every external dependency."""
    return [probe("mpv", mpv_binary), probe("ffmpeg", ffmpeg_binary)]
