"""
Media player control for tagging-rugby.

Provides the abstract Player interface and the mpv IPC implementation.
"""

from tagging_rugby.core.player.base import Player
from tagging_rugby.core.player.deps import DependencyStatus, check_all, check_ffmpeg, check_mpv
from tagging_rugby.core.player.launcher import MpvProcess, connect_with_retry, launch_mpv
from tagging_rugby.core.player.mpv_client import DEFAULT_SOCKET_PATH, MpvClient

__all__ = [
    "Player",
    "MpvClient",
    "DEFAULT_SOCKET_PATH",
    "MpvProcess",
    "launch_mpv",
    "connect_with_retry",
    "DependencyStatus",
    "check_all",
    "check_mpv",
    "check_ffmpeg",
]
