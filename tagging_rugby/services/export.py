"""
Clip export pipeline for tackles and saved clips.

prepare_export() checks prerequisites up front and returns an ExportJob.
The job's producer runs as a background task and reports through a
one-slot queue: one ExportProgress per clip (emitted once its directory
exists, before it is cut), then exactly one ExportComplete or ExportFailed.
"""

import asyncio
import os
from collections.abc import Awaitable, Callable
from datetime import datetime

from pydantic import BaseModel

from tagging_rugby.core.encoder.base import Encoder
from tagging_rugby.core.store.sqlite_store import SQLiteNoteStore
from tagging_rugby.models.records import ExportItem
from tagging_rugby.services.clips import (
    DEFAULT_POST_ROLL,
    DEFAULT_PRE_ROLL,
    calculate_clip_bounds,
    clip_path_for,
    get_output_dir,
    saved_clip_path,
)
from tagging_rugby.utils.exceptions import ExportError, NotFoundError, TaggingRugbyError
from tagging_rugby.utils.logger import get_logger

logger = get_logger(__name__)

# Used when the player has not reported a duration
FALLBACK_DURATION = 86400.0


class ExportProgress(BaseModel):
    """Clip `current` of `total` is about to be cut."""

    current: int
    total: int
    path: str = ""


class ExportComplete(BaseModel):
    """Every clip was written."""

    count: int
    output_dir: str


class ExportFailed(BaseModel):
    """The export stopped at a clip."""

    error: str


ExportEvent = ExportProgress | ExportComplete | ExportFailed


class ExportJob:
    """
    A validated export, ready to run.

    Attributes:
        items: Tackles or saved clips to cut, in export order
        output_dir: Root directory for the clips
        total: Number of clips
    """

    def __init__(
        self,
        video_path: str,
        items: list[ExportItem],
        encoder: Encoder,
        video_duration: float,
        store: SQLiteNoteStore | None = None,
        pre_roll: float = DEFAULT_PRE_ROLL,
        post_roll: float = DEFAULT_POST_ROLL,
    ):
        self.video_path = video_path
        self.items = items
        self.encoder = encoder
        self.video_duration = video_duration if video_duration > 0 else FALLBACK_DURATION
        self.store = store
        self.pre_roll = pre_roll
        self.post_roll = post_roll
        self.output_dir = get_output_dir(video_path)
        self.total = len(items)
        self.task: asyncio.Task | None = None

    def output_path(self, item: ExportItem) -> str:
        """Where one item's clip is written."""
        if item.saved_clip:
            return saved_clip_path(self.output_dir, item.note_id, item.name)
        return clip_path_for(self.output_dir, item.player, item.timestamp)

    def bounds(self, item: ExportItem) -> tuple[float, float]:
        """Range to cut; saved clips keep their stored range even when it starts at 0."""
        if item.saved_clip:
            start = min(max(0.0, item.clip_start), self.video_duration)
            end = min(max(start, item.clip_end), self.video_duration)
            return start, end
        return calculate_clip_bounds(
            item.timestamp,
            item.clip_start,
            item.clip_end,
            self.video_duration,
            self.pre_roll,
            self.post_roll,
        )

    async def run(self, emit: Callable[[ExportEvent], Awaitable[None]]) -> int:
        """
        Cut every clip, reporting through emit.

        Stops at the first failure of any kind after emitting exactly one
        ExportFailed, so a consumer waiting on the queue always gets a
        terminal event.

        Returns:
            Number of clips written
        """
        logger.info(f"Exporting {self.total} clip(s) from {self.video_path} to {self.output_dir}")
        exported = 0

        for i, item in enumerate(self.items):
            output_path = self.output_path(item)
            start, end = self.bounds(item)
            try:
                await self._cut(i, item, output_path, start, end, emit)
            except Exception as e:
                if isinstance(e, TaggingRugbyError):
                    message = e.message
                else:
                    message = str(e) or type(e).__name__
                logger.opt(exception=e).error(f"Export of note {item.note_id} failed: {message}")
                await self._record(item, output_path, end - start, error=message)
                await emit(ExportFailed(error=message))
                return exported
            exported += 1

        logger.info(f"Exported {exported} clip(s) to {self.output_dir}")
        await emit(ExportComplete(count=exported, output_dir=self.output_dir))
        return exported

    async def _cut(
        self,
        index: int,
        item: ExportItem,
        output_path: str,
        start: float,
        end: float,
        emit: Callable[[ExportEvent], Awaitable[None]],
    ) -> None:
        """Create the clip's directory, announce it, then encode it."""
        clip_dir = os.path.dirname(output_path)
        try:
            os.makedirs(clip_dir, exist_ok=True)
        except OSError as e:
            raise ExportError(
                f"Failed to create directory: {clip_dir} - {e}", {"directory": clip_dir}
            ) from e

        await emit(ExportProgress(current=index + 1, total=self.total, path=output_path))

        await self._record(item, output_path, end - start, started=True)
        await self.encoder.extract(self.video_path, start, end, output_path)
        await self._record(item, output_path, end - start, finished=True)

    async def _record(
        self,
        item: ExportItem,
        output_path: str,
        duration: float,
        started: bool = False,
        finished: bool = False,
        error: str = "",
    ) -> None:
        """Track clip status on the note when a store is attached."""
        if self.store is None:
            return
        now = datetime.now()
        # Saved clips keep the name the user gave them
        name = item.name if item.saved_clip else os.path.basename(output_path)
        try:
            if started:
                await self.store.upsert_note_clip(item.note_id, name, duration)
                await self.store.update_clip_status(item.note_id, started_at=now)
            elif finished:
                await self.store.update_clip_status(item.note_id, finished_at=now)
            elif error:
                await self.store.update_clip_status(item.note_id, error_at=now, error=error)
        except TaggingRugbyError as e:
            logger.warning(f"Could not record clip status for note {item.note_id}: {e}")

    def start(self) -> asyncio.Queue:
        """
        Run the producer as a background task.

        Returns:
            Queue holding at most one undelivered event
        """
        queue: asyncio.Queue = asyncio.Queue(maxsize=1)
        self.task = asyncio.create_task(self.run(queue.put))
        return queue


async def next_export_event(queue: asyncio.Queue) -> ExportEvent:
    """Wait for the next event from a running export."""
    return await queue.get()


async def prepare_export(
    store: SQLiteNoteStore,
    video_path: str,
    encoder: Encoder,
    video_duration: float = 0.0,
    record_status: bool = True,
    pre_roll: float = DEFAULT_PRE_ROLL,
    post_roll: float = DEFAULT_POST_ROLL,
    saved_clips: bool = False,
    note_id: int | None = None,
) -> ExportJob:
    """
    Validate an export and gather its tackles or saved clips.

    Args:
        store: Note store
        video_path: Video whose notes are exported
        encoder: Encoder used to cut clips
        video_duration: Known duration, 0 when unknown
        record_status: Track clip status in the store while exporting
        pre_roll: Seconds before each tackle
        post_roll: Seconds after each tackle
        saved_clips: Export saved clip notes instead of tackles
        note_id: With saved_clips, export only this clip

    Returns:
        ExportJob ready to start

    Raises:
        EncoderMissingError: If the encoder is not installed
        NotFoundError: If note_id names no saved clip on this video
        ExportError: If the video is missing or has nothing to export
    """
    encoder.check_available()

    if not os.path.exists(video_path):
        raise ExportError(f"Video file not found: {video_path}", {"video_path": video_path})

    if saved_clips:
        items = await store.select_clips_for_export(video_path, note_id)
        if not items and note_id is not None:
            raise NotFoundError(f"clip {note_id} not found", {"note_id": note_id})
        if not items:
            raise ExportError("No saved clips found for this video", {"video_path": video_path})
    else:
        items = await store.select_tackles_for_export(video_path)
        if not items:
            raise ExportError(
                "No tackles with player data found for this video", {"video_path": video_path}
            )

    return ExportJob(
        video_path,
        items,
        encoder,
        video_duration,
        store=store if record_status else None,
        pre_roll=pre_roll,
        post_roll=post_roll,
    )
