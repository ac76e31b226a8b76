"""
Tests for clip bounds and output paths.
"""

import os

from tagging_rugby.services.clips import (
    calculate_clip_bounds,
    clip_path_for,
    get_output_dir,
    get_player_clip_path,
    sanitize_player_name,
    saved_clip_path,
)


class TestClipBounds:
    """Default range, explicit range and clamping."""

    def test_default_range(self):
        assert calculate_clip_bounds(30.0, 0, 0, 600.0) == (26.0, 40.0)

    def test_point_note_uses_default_range(self):
        assert calculate_clip_bounds(30.0, 30.0, 30.0, 600.0) == (26.0, 40.0)

    def test_explicit_range(self):
        assert calculate_clip_bounds(30.0, 25.0, 50.0, 600.0) == (25.0, 50.0)

    def test_clamped_at_start(self):
        assert calculate_clip_bounds(2.0, 0, 0, 600.0) == (0.0, 12.0)

    def test_clamped_at_end(self):
        assert calculate_clip_bounds(595.0, 0, 0, 600.0) == (591.0, 600.0)

    def test_explicit_range_past_duration(self):
        start, end = calculate_clip_bounds(30.0, 590.0, 700.0, 600.0)
        assert (start, end) == (590.0, 600.0)

    def test_start_never_exceeds_end(self):
        start, end = calculate_clip_bounds(30.0, 50.0, 20.0, 600.0)
        assert 0 <= start <= end <= 600.0

    def test_custom_rolls(self):
        assert calculate_clip_bounds(30.0, 0, 0, 600.0, pre_roll=1.0, post_roll=2.0) == (
            29.0,
            32.0,
        )


class TestNames:
    def test_sanitize(self):
        assert sanitize_player_name("John Smith") == "John_Smith"
        assert sanitize_player_name('a/b\\c:d*e?f"g<h>i|j') == "abcdefghij"

    def test_sanitize_empty(self):
        assert sanitize_player_name("") == "Unknown"


class TestPaths:
    def test_output_dir(self):
        assert get_output_dir("/games/final.mp4") == "/games/final-clips"

    def test_player_clip_path(self):
        assert get_player_clip_path("/games/final-clips", "J_Smith", "0-01-05") == os.path.join(
            "/games/final-clips", "J_Smith", "J_Smith_0-01-05_tackle.mp4"
        )

    def test_clip_path_for(self):
        path = clip_path_for("/out", "John Smith", 3725.0)
        assert path == os.path.join("/out", "John_Smith", "John_Smith_1-02-05_tackle.mp4")

    def test_saved_clip_path(self):
        assert saved_clip_path("/out", 7, "Quick break!") == os.path.join(
            "/out", "clips", "clip-7_Quick_break!.mp4"
        )

    def test_saved_clip_path_without_name(self):
        assert saved_clip_path("/out", 7, "  ") == os.path.join("/out", "clips", "clip-7.mp4")
