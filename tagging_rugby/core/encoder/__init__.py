"""
Clip encoding for tagging-rugby.

Provides the abstract Encoder interface and the ffmpeg implementation.
"""

from tagging_rugby.core.encoder.base import Encoder
from tagging_rugby.core.encoder.ffmpeg import FFmpegEncoder

__all__ = ["Encoder", "FFmpegEncoder"]
