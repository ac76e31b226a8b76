"""
Tests for external binary checks.
"""

import pytest

from tagging_rugby.core.player import deps
from tagging_rugby.core.player.deps import check_all, check_ffmpeg, check_mpv, probe
from tagging_rugby.utils.exceptions import DependencyError, EncoderMissingError

MISSING = "definitely-not-a-real-binary-xyz"


class TestProbe:
    def test_missing_binary(self):
        status = probe("mpv", MISSING)
        assert not status.found
        assert status.install_url == "https://mpv.io/installation/"

    def test_found_binary(self, monkeypatch):
        monkeypatch.setattr(deps.shutil, "which", lambda name: f"/usr/bin/{name}")
        status = probe("ffmpeg")
        assert status.found
        assert status.path == "/usr/bin/ffmpeg"


class TestChecks:
    def test_check_mpv_missing(self):
        with pytest.raises(DependencyError) as exc_info:
            check_mpv(MISSING)
        assert "https://mpv.io/installation/" in exc_info.value.message

    def test_check_ffmpeg_missing(self):
        with pytest.raises(EncoderMissingError):
            check_ffmpeg(MISSING)

    def test_check_all_reports_both(self, monkeypatch):
        monkeypatch.setattr(deps.shutil, "which", lambda name: None)
        names = [status.name for status in check_all()]
        assert names == ["mpv", "ffmpeg"]
