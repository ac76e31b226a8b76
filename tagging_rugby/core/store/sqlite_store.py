"""
SQLite note store.

Notes are written as whole aggregates (root plus child rows) inside one
transaction; reads come back as pydantic models. The connection runs in
autocommit mode and transactions are opened explicitly.
"""

import math
import sqlite3
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path

import aiosqlite

from tagging_rugby.core.store.migrations import run_migrations
from tagging_rugby.models.note import (
    Category,
    Note,
    NoteChildren,
    NoteClip,
    NoteDetail,
    NoteHighlight,
    NoteTackle,
    NoteTiming,
    NoteVideo,
    NoteZone,
    Outcome,
    Video,
)
from tagging_rugby.models.records import (
    ClipRecord,
    EditTackleData,
    ExportItem,
    ItemKind,
    ListItem,
    TackleStats,
)
from tagging_rugby.utils.exceptions import NotFoundError, StoreError, ValidationError
from tagging_rugby.utils.logger import get_logger

logger = get_logger(__name__)

# Child tables rewritten by update_note_with_children
EDITABLE_CHILD_TABLES = ("note_details", "note_zones", "note_highlights", "note_tackles")

# Detail types carried on plain notes that are not display text
NOTE_META_DETAILS = ("player", "team")


def to_db_time(value: datetime | None) -> str | None:
    """Format a timestamp the way CURRENT_TIMESTAMP stores it."""
    return value.isoformat(sep=" ", timespec="seconds") if value is not None else None


def validate_time_range(start: float, end: float) -> None:
    """
    Raises:
        ValidationError: Unless both bounds are finite and 0 <= start <= end
    """
    if not (math.isfinite(start) and math.isfinite(end)) or start < 0 or start > end:
        raise ValidationError(
            f"invalid time range {start:.3f}-{end:.3f}", {"start": start, "end": end}
        )


def validate_tackles(category: str, children: NoteChildren) -> None:
    """
    Raises:
        ValidationError: On an unknown outcome, or a tackle note without
            exactly one tackle row
    """
    for tackle in children.tackles:
        if tackle.outcome not in Outcome.values():
            raise ValidationError(
                f"invalid outcome '{tackle.outcome}': must be missed, completed, possible, or other",
                {"outcome": tackle.outcome},
            )
    if category == Category.TACKLE.value and len(children.tackles) != 1:
        raise ValidationError("a tackle note carries exactly one tackle row")


def validate_children(category: str, children: NoteChildren) -> None:
    """
    Check child rows before they reach the database.

    Raises:
        ValidationError: On an unknown outcome, an invalid time range,
            a missing video reference, or a tackle note without exactly one
            tackle row
    """
    validate_tackles(category, children)
    for timing in children.timings:
        validate_time_range(timing.start, timing.end)
    if len(children.videos) != 1:
        raise ValidationError("a note references exactly one video")
    if len(children.timings) > 1:
        raise ValidationError("a note carries at most one timing row")


class SQLiteNoteStore:
    """
    SQLite-backed repository for the note aggregate and the video registry.
    """

    def __init__(
        self, db_path: str, migrations_dir: Path | None = None, timeout: float = 5.0
    ):
        """
        Initialize SQLite note store.

        Args:
            db_path: Path to SQLite database file, or ":memory:"
            migrations_dir: Override for the migration directory
            timeout: Seconds to wait on a locked database before failing
        """
        self.db_path = db_path
        self.migrations_dir = migrations_dir
        self.timeout = timeout
        self.connection: aiosqlite.Connection | None = None

        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    async def connect(self) -> None:
        """Open the connection if not already open."""
        if self.connection is None:
            self.connection = await aiosqlite.connect(
                self.db_path, timeout=self.timeout, isolation_level=None
            )
            self.connection.row_factory = aiosqlite.Row
            await self.connection.execute("PRAGMA foreign_keys = ON")
            await self.connection.execute("PRAGMA journal_mode = WAL")

    async def initialize(self) -> None:
        """Connect and bring the schema up to date."""
        await self.connect()
        applied = await run_migrations(self.connection, self.migrations_dir)
        if applied:
            logger.info(f"Database {self.db_path} at schema version {applied[-1]}")

    async def close(self) -> None:
        """Close the connection."""
        if self.connection is not None:
            await self.connection.close()
            self.connection = None

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Run a block in one transaction, rolling back on any exception.

        A failed commit rolls back too, so the connection never stays
        inside an open transaction.
        """
        await self.connect()
        await self.connection.execute("BEGIN")
        try:
            yield self.connection
            await self.connection.commit()
        except BaseException:
            await self.connection.rollback()
            raise

    @asynccontextmanager
    async def _errors(self, action: str, context: dict | None = None) -> AsyncIterator[None]:
        """Re-raise driver errors as StoreError; package errors pass through."""
        try:
            yield
        except sqlite3.Error as e:
            logger.error(f"{action} failed: {e}")
            raise StoreError(f"{action}: {e}", context) from e

    async def _fetchall(self, query: str, params: tuple | list = ()) -> list[aiosqlite.Row]:
        async with self._errors("query"):
            await self.connect()
            cursor = await self.connection.execute(query, params)
            return await cursor.fetchall()

    async def _fetchone(self, query: str, params: tuple | list = ()) -> aiosqlite.Row | None:
        async with self._errors("query"):
            await self.connect()
            cursor = await self.connection.execute(query, params)
            return await cursor.fetchone()

    async def _execute(self, action: str, query: str, params: tuple | list, context: dict) -> int:
        """Run one autocommitted write and return the affected row count."""
        async with self._errors(action, context):
            await self.connect()
            cursor = await self.connection.execute(query, params)
            return cursor.rowcount

    # ═══════════════════════════════════════════════════════════
    # VIDEO OPERATIONS
    # ═══════════════════════════════════════════════════════════

    async def ensure_video(
        self,
        path: str,
        duration: float = 0.0,
        format: str = "",
        size: int = 0,
    ) -> Video:
        """
        Return the registered video for a path, inserting it on first sight.

        A known positive duration replaces a stored zero or stale one.

        Raises:
            StoreError: If the registry cannot be written
        """
        async with self._errors("register video", {"path": path}):
            async with self.transaction() as conn:
                video_id = await self._get_or_create_video(conn, path, duration, format, size)
                if duration > 0:
                    await conn.execute(
                        "UPDATE videos SET duration = ? WHERE id = ? AND duration != ?",
                        (duration, video_id, duration),
                    )
        return await self.get_video_by_path(path)

    async def get_video_by_path(self, path: str) -> Video | None:
        row = await self._fetchone(
            "SELECT id, path, duration, format, size, stopped_at FROM videos WHERE path = ?",
            (path,),
        )
        if row is None:
            return None
        return Video(
            id=row["id"],
            path=row["path"],
            duration=row["duration"] or 0.0,
            format=row["format"] or "",
            size=row["size"] or 0,
            stopped_at=row["stopped_at"] or 0.0,
        )

    async def update_video_stopped(self, video_id: int, position: float) -> None:
        """Record the last playback position for a video."""
        await self._execute(
            "save position",
            "UPDATE videos SET stopped_at = ? WHERE id = ?",
            (max(0.0, position), video_id),
            {"video_id": video_id},
        )

    async def _get_or_create_video(
        self,
        conn: aiosqlite.Connection,
        path: str,
        duration: float = 0.0,
        format: str = "",
        size: int = 0,
    ) -> int:
        cursor = await conn.execute("SELECT id FROM videos WHERE path = ?", (path,))
        row = await cursor.fetchone()
        if row is not None:
            return row[0]
        cursor = await conn.execute(
            "INSERT INTO videos (path, duration, format, size) VALUES (?, ?, ?, ?)",
            (path, duration, format, size),
        )
        logger.debug(f"Registered video {path}")
        return cursor.lastrowid

    # ═══════════════════════════════════════════════════════════
    # AGGREGATE WRITES
    # ═══════════════════════════════════════════════════════════

    async def insert_note_with_children(self, category: str, children: NoteChildren) -> int:
        """
        Insert a note and all of its child rows atomically.

        Args:
            category: Note category
            children: Child rows to attach

        Returns:
            The new note id

        Raises:
            ValidationError: If the children fail boundary checks
            StoreError: If the write fails; nothing is persisted
        """
        validate_children(category, children)

        try:
            async with self.transaction() as conn:
                cursor = await conn.execute(
                    "INSERT INTO notes (category) VALUES (?)", (category,)
                )
                note_id = cursor.lastrowid

                for timing in children.timings:
                    await conn.execute(
                        "INSERT INTO note_timing (note_id, start_s, end_s) VALUES (?, ?, ?)",
                        (note_id, timing.start, timing.end),
                    )
                for video in children.videos:
                    await self._get_or_create_video(
                        conn, video.path, video.duration, video.format, video.size
                    )
                    await conn.execute(
                        """
                        INSERT INTO note_videos (note_id, path, duration, format, size)
                        VALUES (?, ?, ?, ?, ?)
                        """,
                        (note_id, video.path, video.duration, video.format, video.size),
                    )
                for clip in children.clips:
                    await conn.execute(
                        """
                        INSERT INTO note_clips
                            (note_id, name, duration, started_at, finished_at, error_at, error)
                        VALUES (?, ?, ?, ?, ?, ?, ?)
                        """,
                        (
                            note_id,
                            clip.name,
                            clip.duration,
                            to_db_time(clip.started_at),
                            to_db_time(clip.finished_at),
                            to_db_time(clip.error_at),
                            clip.error,
                        ),
                    )
                await self._insert_editable_children(conn, note_id, children)
        except sqlite3.Error as e:
            raise StoreError(f"insert note: {e}", {"category": category}) from e

        logger.info(f"Inserted {category} note {note_id}")
        return note_id

    async def update_note_with_children(
        self, note_id: int, children: NoteChildren, timing: NoteTiming | None = None
    ) -> None:
        """
        Replace the editable children of a note.

        Details, zones, highlights and tackles are deleted and re-inserted
        from the given vectors. Video rows are left alone; the timing row
        is only rewritten when a new one is given, in the same transaction.

        Args:
            note_id: Note to rewrite
            children: Replacement rows for the editable child tables
            timing: Optional new time range

        Raises:
            ValidationError: If the children or the timing fail boundary checks
            NotFoundError: If the note (or, with a timing, its timing row) does not exist
            StoreError: If the write fails; the previous rows remain
        """
        # Outcomes first; the tackle count needs the stored category
        validate_tackles("", children)
        if timing is not None:
            validate_time_range(timing.start, timing.end)

        async with self._errors("update note", {"note_id": note_id}):
            async with self.transaction() as conn:
                cursor = await conn.execute("SELECT category FROM notes WHERE id = ?", (note_id,))
                row = await cursor.fetchone()
                if row is None:
                    raise NotFoundError(f"note {note_id} not found", {"note_id": note_id})
                validate_tackles(row["category"], children)

                for table in EDITABLE_CHILD_TABLES:
                    await conn.execute(f"DELETE FROM {table} WHERE note_id = ?", (note_id,))
                await self._insert_editable_children(conn, note_id, children)

                if timing is not None:
                    cursor = await conn.execute(
                        "UPDATE note_timing SET start_s = ?, end_s = ? WHERE note_id = ?",
                        (timing.start, timing.end, note_id),
                    )
                    if cursor.rowcount == 0:
                        raise NotFoundError(
                            f"note {note_id} has no timing data", {"note_id": note_id}
                        )

        logger.info(f"Updated note {note_id}")

    async def _insert_editable_children(
        self, conn: aiosqlite.Connection, note_id: int, children: NoteChildren
    ) -> None:
        for tackle in children.tackles:
            await conn.execute(
                "INSERT INTO note_tackles (note_id, player, attempt, outcome) VALUES (?, ?, ?, ?)",
                (note_id, tackle.player, tackle.attempt, tackle.outcome),
            )
        for zone in children.zones:
            await conn.execute(
                "INSERT INTO note_zones (note_id, horizontal, vertical) VALUES (?, ?, ?)",
                (note_id, zone.horizontal, zone.vertical),
            )
        for detail in children.details:
            await conn.execute(
                "INSERT INTO note_details (note_id, type, body) VALUES (?, ?, ?)",
                (note_id, detail.type, detail.body),
            )
        for highlight in children.highlights:
            await conn.execute(
                "INSERT INTO note_highlights (note_id, type) VALUES (?, ?)",
                (note_id, highlight.type),
            )

    async def update_note_timing(self, note_id: int, start: float, end: float) -> None:
        """
        Set the time range of a note.

        Raises:
            ValidationError: Unless both bounds are finite and 0 <= start <= end
            NotFoundError: If the note has no timing row
            StoreError: If the write fails
        """
        validate_time_range(start, end)
        updated = await self._execute(
            "update timing",
            "UPDATE note_timing SET start_s = ?, end_s = ? WHERE note_id = ?",
            (start, end, note_id),
            {"note_id": note_id},
        )
        if updated == 0:
            raise NotFoundError(f"note {note_id} has no timing data", {"note_id": note_id})

    async def delete_note(self, note_id: int) -> None:
        """
        Delete a note; child rows cascade.

        Raises:
            NotFoundError: If the note does not exist
            StoreError: If the write fails
        """
        deleted = await self._execute(
            "delete note", "DELETE FROM notes WHERE id = ?", (note_id,), {"note_id": note_id}
        )
        if deleted == 0:
            raise NotFoundError(f"note {note_id} not found", {"note_id": note_id})
        logger.info(f"Deleted note {note_id}")

    # ═══════════════════════════════════════════════════════════
    # CLIP BOOKKEEPING
    # ═══════════════════════════════════════════════════════════

    async def upsert_note_clip(self, note_id: int, name: str, duration: float = 0.0) -> None:
        """Create or reset the clip row of a note to pending."""
        await self._execute(
            "save clip",
            """
            INSERT INTO note_clips (note_id, name, duration) VALUES (?, ?, ?)
            ON CONFLICT(note_id) DO UPDATE SET
                name = excluded.name,
                duration = excluded.duration,
                started_at = NULL,
                finished_at = NULL,
                error_at = NULL,
                error = ''
            """,
            (note_id, name, duration),
            {"note_id": note_id},
        )

    async def update_clip_status(
        self,
        note_id: int,
        started_at: datetime | None = None,
        finished_at: datetime | None = None,
        error_at: datetime | None = None,
        error: str = "",
    ) -> None:
        """
        Record export progress for a clip. Only the timestamps given are changed.

        Raises:
            NotFoundError: If the note has no clip row
        """
        sets = []
        params: list = []
        for column, value in (
            ("started_at", started_at),
            ("finished_at", finished_at),
            ("error_at", error_at),
        ):
            if value is not None:
                sets.append(f"{column} = ?")
                params.append(to_db_time(value))
        if error_at is not None:
            sets.append("error = ?")
            params.append(error)
        if not sets:
            return

        params.append(note_id)
        updated = await self._execute(
            "update clip status",
            f"UPDATE note_clips SET {', '.join(sets)} WHERE note_id = ?",
            params,
            {"note_id": note_id},
        )
        if updated == 0:
            raise NotFoundError(f"note {note_id} has no clip", {"note_id": note_id})

    # ═══════════════════════════════════════════════════════════
    # NOTE READS
    # ═══════════════════════════════════════════════════════════

    async def select_note_by_id(self, note_id: int) -> Note | None:
        row = await self._fetchone(
            "SELECT id, category, created_at FROM notes WHERE id = ?", (note_id,)
        )
        if row is None:
            return None
        return Note(id=row["id"], category=row["category"], created_at=row["created_at"])

    async def select_notes(self) -> list[Note]:
        """All notes, newest first."""
        rows = await self._fetchall(
            "SELECT id, category, created_at FROM notes ORDER BY created_at DESC, id DESC"
        )
        return [
            Note(id=row["id"], category=row["category"], created_at=row["created_at"])
            for row in rows
        ]

    async def select_note_timing_by_note(self, note_id: int) -> list[NoteTiming]:
        rows = await self._fetchall(
            "SELECT start_s, end_s FROM note_timing WHERE note_id = ? ORDER BY id", (note_id,)
        )
        return [NoteTiming(start=row["start_s"], end=row["end_s"]) for row in rows]

    async def select_note_videos_by_note(self, note_id: int) -> list[NoteVideo]:
        rows = await self._fetchall(
            "SELECT path, duration, format, size FROM note_videos WHERE note_id = ? ORDER BY id",
            (note_id,),
        )
        return [
            NoteVideo(
                path=row["path"],
                duration=row["duration"] or 0.0,
                format=row["format"] or "",
                size=row["size"] or 0,
            )
            for row in rows
        ]

    async def select_note_tackles_by_note(self, note_id: int) -> list[NoteTackle]:
        rows = await self._fetchall(
            "SELECT player, attempt, outcome FROM note_tackles WHERE note_id = ? ORDER BY id",
            (note_id,),
        )
        return [
            NoteTackle(player=row["player"], attempt=row["attempt"], outcome=row["outcome"])
            for row in rows
        ]

    async def select_note_zones_by_note(self, note_id: int) -> list[NoteZone]:
        rows = await self._fetchall(
            "SELECT horizontal, vertical FROM note_zones WHERE note_id = ? ORDER BY id",
            (note_id,),
        )
        return [
            NoteZone(horizontal=row["horizontal"] or "", vertical=row["vertical"] or "")
            for row in rows
        ]

    async def select_note_details_by_note(self, note_id: int) -> list[NoteDetail]:
        rows = await self._fetchall(
            "SELECT type, body FROM note_details WHERE note_id = ? ORDER BY id", (note_id,)
        )
        return [NoteDetail(type=row["type"], body=row["body"]) for row in rows]

    async def select_note_highlights_by_note(self, note_id: int) -> list[NoteHighlight]:
        rows = await self._fetchall(
            "SELECT type FROM note_highlights WHERE note_id = ? ORDER BY id", (note_id,)
        )
        return [NoteHighlight(type=row["type"]) for row in rows]

    async def select_note_clips_by_note(self, note_id: int) -> list[NoteClip]:
        rows = await self._fetchall(
            """
            SELECT name, duration, started_at, finished_at, error_at, error
            FROM note_clips WHERE note_id = ? ORDER BY id
            """,
            (note_id,),
        )
        return [
            NoteClip(
                name=row["name"] or "",
                duration=row["duration"] or 0.0,
                started_at=row["started_at"],
                finished_at=row["finished_at"],
                error_at=row["error_at"],
                error=row["error"] or "",
            )
            for row in rows
        ]

    async def load_note_for_edit(self, note_id: int) -> EditTackleData:
        """
        Gather the fields of a tackle for the edit form.

        Raises:
            NotFoundError: If the note does not exist
        """
        if await self.select_note_by_id(note_id) is None:
            raise NotFoundError(f"note {note_id} not found", {"note_id": note_id})

        data = EditTackleData()

        tackles = await self.select_note_tackles_by_note(note_id)
        if tackles:
            data.player = tackles[0].player
            data.attempt = tackles[0].attempt
            data.outcome = tackles[0].outcome

        timings = await self.select_note_timing_by_note(note_id)
        if timings:
            data.timestamp = timings[0].start
            length = timings[0].end - timings[0].start
            data.end_seconds = length if length > 0 else 2.0

        for detail in await self.select_note_details_by_note(note_id):
            if detail.type == "followed":
                data.followed = detail.body
            elif detail.type == "notes":
                data.notes = detail.body

        zones = await self.select_note_zones_by_note(note_id)
        if zones:
            data.zone = zones[0].horizontal

        data.star = any(h.type == "star" for h in await self.select_note_highlights_by_note(note_id))
        return data

    # ═══════════════════════════════════════════════════════════
    # VIEW QUERIES
    # ═══════════════════════════════════════════════════════════

    async def select_list_items(self, video_path: str) -> list[ListItem]:
        """
        Rows for the notes list of one video, ordered by start time.

        Tackles read "player - outcome" with the first detail appended after
        a colon; other notes read as their first text detail.
        """
        meta = ", ".join(f"'{t}'" for t in NOTE_META_DETAILS)
        rows = await self._fetchall(
            f"""
            SELECT
                n.id,
                n.category,
                COALESCE(t.start_s, 0) AS start_s,
                (SELECT player FROM note_tackles WHERE note_id = n.id ORDER BY id LIMIT 1) AS player,
                (SELECT outcome FROM note_tackles WHERE note_id = n.id ORDER BY id LIMIT 1) AS outcome,
                (SELECT body FROM note_details
                    WHERE note_id = n.id AND type NOT IN ({meta}) ORDER BY id LIMIT 1) AS detail,
                (SELECT body FROM note_details
                    WHERE note_id = n.id AND type = 'player' ORDER BY id LIMIT 1) AS note_player,
                (SELECT body FROM note_details
                    WHERE note_id = n.id AND type = 'team' ORDER BY id LIMIT 1) AS note_team,
                (SELECT name FROM note_clips WHERE note_id = n.id LIMIT 1) AS clip_name,
                EXISTS (SELECT 1 FROM note_highlights
                    WHERE note_id = n.id AND type = 'star') AS starred
            FROM notes n
            INNER JOIN note_videos nv ON nv.note_id = n.id
            LEFT JOIN note_timing t ON t.note_id = n.id
            WHERE nv.path = ?
            ORDER BY start_s ASC, n.id ASC
            """,
            (video_path,),
        )

        items = []
        for row in rows:
            detail = row["detail"] or ""
            if row["category"] == Category.TACKLE.value:
                player = row["player"] or ""
                text = player
                if row["outcome"]:
                    text += " - " + row["outcome"]
                if detail and text:
                    text += ": " + detail
                elif detail:
                    text = detail
                item = ListItem(
                    id=row["id"],
                    kind=ItemKind.TACKLE,
                    start=row["start_s"],
                    text=text,
                    category=row["category"],
                    player=player,
                    starred=bool(row["starred"]),
                )
            else:
                item = ListItem(
                    id=row["id"],
                    kind=ItemKind.NOTE,
                    start=row["start_s"],
                    text=detail or row["clip_name"] or "",
                    category=row["category"],
                    player=row["note_player"] or "",
                    team=row["note_team"] or "",
                    starred=bool(row["starred"]),
                )
            items.append(item)
        return items

    async def count_notes(self, video_path: str, category: str | None = None) -> int:
        """Count notes attached to a video, optionally of one category."""
        query = """
            SELECT COUNT(*) FROM notes n
            INNER JOIN note_videos nv ON nv.note_id = n.id
            WHERE nv.path = ?
        """
        params: list = [video_path]
        if category:
            query += " AND n.category = ?"
            params.append(category)

        row = await self._fetchone(query, params)
        return row[0] if row else 0

    async def select_tackle_stats(self, video_path: str | None = None) -> list[TackleStats]:
        """
        Per-player tackle counts.

        Args:
            video_path: Restrict to one video, or None for every video

        Returns:
            One TackleStats per player, highest total first
        """
        query = """
            SELECT
                tk.player,
                COUNT(*) AS total,
                SUM(CASE WHEN tk.outcome = 'completed' THEN 1 ELSE 0 END) AS completed,
                SUM(CASE WHEN tk.outcome = 'missed' THEN 1 ELSE 0 END) AS missed,
                SUM(CASE WHEN tk.outcome = 'possible' THEN 1 ELSE 0 END) AS possible,
                SUM(CASE WHEN tk.outcome = 'other' THEN 1 ELSE 0 END) AS other,
                SUM(CASE WHEN EXISTS (
                    SELECT 1 FROM note_highlights h
                    WHERE h.note_id = tk.note_id AND h.type = 'star'
                ) THEN 1 ELSE 0 END) AS starred
            FROM note_tackles tk
        """
        params: list = []
        if video_path is not None:
            query += " INNER JOIN note_videos nv ON nv.note_id = tk.note_id WHERE nv.path = ?"
            params.append(video_path)
        query += " GROUP BY tk.player ORDER BY total DESC, tk.player ASC"

        rows = await self._fetchall(query, params)
        return [
            TackleStats(
                player=row["player"],
                total=row["total"],
                completed=row["completed"],
                missed=row["missed"],
                possible=row["possible"],
                other=row["other"],
                starred=row["starred"],
            )
            for row in rows
        ]

    async def select_tackles_for_export(self, video_path: str) -> list[ExportItem]:
        """Tackles with a named player on a video, by player then time."""
        rows = await self._fetchall(
            """
            SELECT tk.note_id, tk.player, t.start_s, t.end_s
            FROM note_tackles tk
            INNER JOIN note_timing t ON t.note_id = tk.note_id
            INNER JOIN note_videos nv ON nv.note_id = tk.note_id
            WHERE tk.player IS NOT NULL AND tk.player != '' AND nv.path = ?
            ORDER BY tk.player ASC, t.start_s ASC
            """,
            (video_path,),
        )
        return [
            ExportItem(
                note_id=row["note_id"],
                player=row["player"],
                timestamp=row["start_s"],
                clip_start=row["start_s"],
                clip_end=row["end_s"],
            )
            for row in rows
        ]

    async def select_clips_for_export(
        self, video_path: str, note_id: int | None = None
    ) -> list[ExportItem]:
        """
        Saved clip notes with a time range on a video, by start time.

        Args:
            video_path: Video the clips belong to
            note_id: Restrict to one clip note
        """
        query = """
            SELECT n.id, c.name, t.start_s, t.end_s
            FROM notes n
            INNER JOIN note_clips c ON c.note_id = n.id
            INNER JOIN note_timing t ON t.note_id = n.id
            INNER JOIN note_videos nv ON nv.note_id = n.id
            WHERE n.category = ? AND nv.path = ? AND t.end_s > t.start_s
        """
        params: list = [Category.CLIP.value, video_path]
        if note_id is not None:
            query += " AND n.id = ?"
            params.append(note_id)
        query += " ORDER BY t.start_s ASC, n.id ASC"

        rows = await self._fetchall(query, params)
        return [
            ExportItem(
                note_id=row["id"],
                name=row["name"] or "",
                timestamp=row["start_s"],
                clip_start=row["start_s"],
                clip_end=row["end_s"],
                saved_clip=True,
            )
            for row in rows
        ]

    async def select_clips(self, video_path: str) -> list[ClipRecord]:
        """Saved clip notes on a video, by start time."""
        rows = await self._fetchall(
            """
            SELECT n.id, c.name, c.duration, c.started_at, c.finished_at, c.error_at, c.error,
                   COALESCE(t.start_s, 0) AS start_s, COALESCE(t.end_s, 0) AS end_s
            FROM notes n
            INNER JOIN note_clips c ON c.note_id = n.id
            INNER JOIN note_videos nv ON nv.note_id = n.id
            LEFT JOIN note_timing t ON t.note_id = n.id
            WHERE n.category = ? AND nv.path = ?
            ORDER BY start_s ASC, n.id ASC
            """,
            (Category.CLIP.value, video_path),
        )
        records = []
        for row in rows:
            clip = NoteClip(
                started_at=row["started_at"],
                finished_at=row["finished_at"],
                error_at=row["error_at"],
            )
            records.append(
                ClipRecord(
                    note_id=row["id"],
                    name=row["name"] or "",
                    start=row["start_s"],
                    end=row["end_s"],
                    duration=row["duration"] or 0.0,
                    status=clip.status,
                    error=row["error"] or "",
                )
            )
        return records
