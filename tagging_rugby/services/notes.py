"""
Builders for note aggregates.

The forms, the colon commands and the CLI all create notes the same way;
these helpers turn their inputs into NoteChildren for the store.
"""

import os

from tagging_rugby.models.note import (
    NoteChildren,
    NoteClip,
    NoteDetail,
    NoteHighlight,
    NoteTackle,
    NoteTiming,
    NoteVideo,
    NoteZone,
)


def video_child(path: str, duration: float = 0.0) -> NoteVideo:
    """
    Describe the video a note belongs to.

    The format is the file extension; the size comes from the file system
    and is 0 when the file cannot be read.
    """
    ext = os.path.splitext(path)[1].lstrip(".").lower()
    try:
        size = os.path.getsize(path)
    except OSError:
        size = 0
    return NoteVideo(path=path, duration=duration, format=ext, size=size)


def note_children(
    text: str,
    timestamp: float,
    video: NoteVideo,
    player: str = "",
    team: str = "",
) -> NoteChildren:
    """Point-in-time note with its text and optional player and team."""
    details = [NoteDetail(type="text", body=text)]
    if player:
        details.append(NoteDetail(type="player", body=player))
    if team:
        details.append(NoteDetail(type="team", body=team))
    return NoteChildren(
        timings=[NoteTiming(start=timestamp, end=timestamp)],
        videos=[video],
        details=details,
    )


def tackle_details(
    player: str,
    attempt: int,
    outcome: str,
    followed: str = "",
    notes: str = "",
    zone: str = "",
    star: bool = False,
    team: str = "",
) -> NoteChildren:
    """The editable part of a tackle aggregate: tackle row, details, zone and star."""
    details = []
    if followed:
        details.append(NoteDetail(type="followed", body=followed))
    if notes:
        details.append(NoteDetail(type="notes", body=notes))
    if team:
        details.append(NoteDetail(type="team", body=team))
    return NoteChildren(
        tackles=[NoteTackle(player=player, attempt=attempt, outcome=outcome)],
        details=details,
        zones=[NoteZone(horizontal=zone)] if zone else [],
        highlights=[NoteHighlight(type="star")] if star else [],
    )


def tackle_children(
    player: str,
    attempt: int,
    outcome: str,
    timestamp: float,
    video: NoteVideo,
    followed: str = "",
    notes: str = "",
    zone: str = "",
    star: bool = False,
    team: str = "",
) -> NoteChildren:
    """Point-in-time tackle aggregate."""
    children = tackle_details(player, attempt, outcome, followed, notes, zone, star, team)
    children.timings = [NoteTiming(start=timestamp, end=timestamp)]
    children.videos = [video]
    return children


def clip_children(start: float, end: float, name: str, video: NoteVideo) -> NoteChildren:
    """Clip aggregate spanning start..end."""
    return NoteChildren(
        timings=[NoteTiming(start=start, end=end)],
        videos=[video],
        clips=[NoteClip(name=name, duration=end - start)],
    )
