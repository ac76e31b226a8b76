"""
Clip bounds and output paths for exported tackles and saved clips.
"""

import os

from tagging_rugby.utils.timeutil import format_timestamp

DEFAULT_PRE_ROLL = 4.0
DEFAULT_POST_ROLL = 10.0

# Subdirectory of the output directory holding saved clip notes
SAVED_CLIPS_DIR = "clips"

# Characters removed from player names before they become path components
UNSAFE_NAME_CHARS = ("/", "\\", ":", "*", "?", '"', "<", ">", "|")


def calculate_clip_bounds(
    timestamp: float,
    clip_start: float,
    clip_end: float,
    video_duration: float,
    pre_roll: float = DEFAULT_PRE_ROLL,
    post_roll: float = DEFAULT_POST_ROLL,
) -> tuple[float, float]:
    """
    Work out the range to cut for one tackle.

    An explicit range (both ends non-zero and different) is used as given;
    otherwise the clip runs from pre_roll before the timestamp to post_roll
    after it. The result is clamped so that 0 <= start <= end <= video_duration.

    Args:
        timestamp: Tackle time in seconds
        clip_start: Stored range start, 0 when unset
        clip_end: Stored range end, 0 when unset
        video_duration: Length of the video in seconds
        pre_roll: Seconds before the timestamp for the default range
        post_roll: Seconds after the timestamp for the default range

    Returns:
        (start, end) in seconds
    """
    if clip_start != 0 and clip_end != 0 and clip_start != clip_end:
        start, end = clip_start, clip_end
    else:
        start = max(0.0, timestamp - pre_roll)
        end = min(video_duration, timestamp + post_roll)

    start = min(max(0.0, start), video_duration)
    end = min(max(0.0, end), video_duration)
    if start > end:
        start = end
    return start, end


def sanitize_player_name(player: str) -> str:
    """Make a player name safe as a directory and file name."""
    if not player:
        return "Unknown"
    name = player.replace(" ", "_")
    for ch in UNSAFE_NAME_CHARS:
        name = name.replace(ch, "")
    return name


def get_output_dir(video_path: str) -> str:
    """
    Directory receiving a video's clips.

    "/games/final.mp4" -> "/games/final-clips"
    """
    directory, base = os.path.split(video_path)
    stem, _ = os.path.splitext(base)
    return os.path.join(directory, f"{stem}-clips")


def get_player_clip_path(output_dir: str, player: str, timestamp: str) -> str:
    """Path of one tackle clip: <output_dir>/<player>/<player>_<timestamp>_tackle.mp4"""
    return os.path.join(output_dir, player, f"{player}_{timestamp}_tackle.mp4")


def clip_path_for(output_dir: str, player: str, seconds: float) -> str:
    """Sanitize the player and format the timestamp, then build the clip path."""
    safe = sanitize_player_name(player)
    return get_player_clip_path(output_dir, safe, format_timestamp(seconds))


def saved_clip_path(output_dir: str, note_id: int, name: str = "") -> str:
    """
    Path of a saved clip note.

    <output_dir>/clips/clip-<id>.mp4, with the sanitized clip name appended
    when the clip has one: clip-7_quick_break.mp4
    """
    stem = f"clip-{note_id}"
    if name.strip():
        stem += "_" + sanitize_player_name(name.strip())
    return os.path.join(output_dir, SAVED_CLIPS_DIR, f"{stem}.mp4")
