"""
Tests for the note aggregate builders.
"""

from tagging_rugby.services.notes import (
    clip_children,
    note_children,
    tackle_children,
    tackle_details,
    video_child,
)


class TestVideoChild:
    def test_existing_file(self, tmp_path):
        path = tmp_path / "Match.MKV"
        path.write_bytes(b"12345")

        video = video_child(str(path), 90.0)

        assert video.format == "mkv"
        assert video.size == 5
        assert video.duration == 90.0

    def test_missing_file(self, tmp_path):
        video = video_child(str(tmp_path / "gone.mp4"))
        assert video.size == 0
        assert video.format == "mp4"


class TestBuilders:
    def test_note(self, tmp_path):
        video = video_child(str(tmp_path / "a.mp4"))
        children = note_children("Good ruck", 42.0, video, player="Smith", team="home")

        assert [(t.start, t.end) for t in children.timings] == [(42.0, 42.0)]
        assert [(d.type, d.body) for d in children.details] == [
            ("text", "Good ruck"),
            ("player", "Smith"),
            ("team", "home"),
        ]
        assert children.tackles == []

    def test_tackle_optional_parts(self, tmp_path):
        video = video_child(str(tmp_path / "a.mp4"))
        children = tackle_children(
            "Smith", 2, "missed", 10.0, video, notes="high", zone="left", star=True
        )

        assert children.tackles[0].player == "Smith"
        assert children.tackles[0].attempt == 2
        assert [(d.type, d.body) for d in children.details] == [("notes", "high")]
        assert [z.horizontal for z in children.zones] == ["left"]
        assert [h.type for h in children.highlights] == ["star"]
        assert len(children.videos) == 1

    def test_tackle_details_has_no_timing(self):
        children = tackle_details("Smith", 1, "completed")
        assert children.timings == []
        assert children.videos == []
        assert children.zones == []
        assert children.highlights == []

    def test_clip(self, tmp_path):
        video = video_child(str(tmp_path / "a.mp4"))
        children = clip_children(10.0, 25.0, "Clip", video)

        assert [(t.start, t.end) for t in children.timings] == [(10.0, 25.0)]
        assert children.clips[0].duration == 15.0
        assert children.clips[0].status == "pending"
