"""
Progress persistence - Durable backends, local cache and the layered store.

Stores user progress separately from lesson content:
- SQLiteProgressBackend: learning_progress table in ~/.learningcenter/progress.db
- SupabaseProgressBackend: the same table behind a Supabase (PostgREST) endpoint
- LocalProgressCache: per-user JSON copy used when the backend is unreachable
- ProgressStore: load/save by user with backend-first, cache-fallback reads

Only ProgressStore writes to durable storage; sessions and the scorer never
branch on storage mechanics.
"""

import hashlib
import logging
import sqlite3
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Optional, Protocol

import httpx

from learningcenter.errors import PersistenceUnavailable
from learningcenter.schemas import MAX_STEP, ProgressRecord, ProgressSnapshot


logger = logging.getLogger(__name__)

DEFAULT_PROGRESS_DIR = Path.home() / ".learningcenter"
DEFAULT_PROGRESS_DB = DEFAULT_PROGRESS_DIR / "progress.db"
DEFAULT_CACHE_DIR = DEFAULT_PROGRESS_DIR / "cache"

PROGRESS_TABLE = "learning_progress"


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _record_from_row(row) -> ProgressRecord:
    """
    Normalise one stored row into a record.

    NULLs read as zero, the step is clamped to the valid range, and a completed
    lesson always counts as quiz-completed, so no stored completion is lost.
    """
    completed = bool(row["completed"])
    return ProgressRecord(
        completed=completed,
        current_step=min(max(int(row["current_step"] or 0), 0), MAX_STEP),
        quiz_completed=bool(row["quiz_completed"]) or completed,
        quiz_score=max(int(row["quiz_score"] or 0), 0),
    )


def _records_from_rows(rows) -> dict[str, ProgressRecord]:
    """
    Convert stored rows to records.

    Raises:
        PersistenceUnavailable: If the payload is not a list of progress rows
    """
    if not isinstance(rows, list):
        raise PersistenceUnavailable(f"Expected a list of progress rows, got {type(rows).__name__}")

    records = {}
    for row in rows:
        try:
            records[str(row["lesson_id"])] = _record_from_row(row)
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise PersistenceUnavailable(f"Malformed progress row {row!r}: {e}") from e
    return records


class ProgressBackend(Protocol):
    """Durable store keyed by (user, lesson)."""

    def fetch(self, user_id: str) -> dict[str, ProgressRecord]:
        """Return stored records for a user. Raises PersistenceUnavailable."""
        ...

    def upsert(self, user_id: str, lesson_id: str, record: ProgressRecord) -> None:
        """Insert or overwrite one record. Raises PersistenceUnavailable."""
        ...


# -----------------------------------------------------------------------------
# SQLite backend
# -----------------------------------------------------------------------------

class SQLiteProgressBackend:
    """
    Progress rows in a SQLite database.

    Each method opens its own connection, so one backend can be shared with
    the background save thread.
    """

    def __init__(self, db_path: Optional[Path] = None):
        """
        Initialize SQLite backend.

        Args:
            db_path: Path to progress.db (default: ~/.learningcenter/progress.db)
        """
        self.db_path = Path(db_path) if db_path else DEFAULT_PROGRESS_DB
        self._ensure_database()

    def _ensure_database(self):
        """Create database and tables if they don't exist."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(str(self.db_path))
        try:
            conn.executescript(f"""
                CREATE TABLE IF NOT EXISTS {PROGRESS_TABLE} (
                    user_id TEXT NOT NULL,
                    lesson_id TEXT NOT NULL,
                    completed INTEGER NOT NULL DEFAULT 0,
                    current_step INTEGER NOT NULL DEFAULT 0,
                    quiz_completed INTEGER NOT NULL DEFAULT 0,
                    quiz_score INTEGER NOT NULL DEFAULT 0,
                    updated_at TEXT NOT NULL,
                    PRIMARY KEY (user_id, lesson_id)
                );

                CREATE INDEX IF NOT EXISTS idx_{PROGRESS_TABLE}_user
                ON {PROGRESS_TABLE}(user_id);
            """)
            conn.commit()
        finally:
            conn.close()

    def _get_connection(self) -> sqlite3.Connection:
        """Get a new database connection."""
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        return conn

    def fetch(self, user_id: str) -> dict[str, ProgressRecord]:
        try:
            conn = self._get_connection()
            try:
                cursor = conn.execute(
                    f"""SELECT lesson_id, completed, current_step, quiz_completed, quiz_score
                       FROM {PROGRESS_TABLE}
                       WHERE user_id = ?""",
                    (user_id,)
                )
                return _records_from_rows(cursor.fetchall())
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise PersistenceUnavailable(f"Could not read progress for {user_id}: {e}") from e

    def upsert(self, user_id: str, lesson_id: str, record: ProgressRecord) -> None:
        # updated_at only moves when the stored values change, so saving the
        # same snapshot twice leaves the row untouched
        try:
            conn = self._get_connection()
            try:
                conn.execute(
                    f"""INSERT INTO {PROGRESS_TABLE}
                         (user_id, lesson_id, completed, current_step, quiz_completed, quiz_score, updated_at)
                       VALUES (?, ?, ?, ?, ?, ?, ?)
                       ON CONFLICT(user_id, lesson_id) DO UPDATE SET
                         updated_at = CASE
                           WHEN completed IS NOT excluded.completed
                             OR current_step IS NOT excluded.current_step
                             OR quiz_completed IS NOT excluded.quiz_completed
                             OR quiz_score IS NOT excluded.quiz_score
                           THEN excluded.updated_at
                           ELSE updated_at
                         END,
                         completed = excluded.completed,
                         current_step = excluded.current_step,
                         quiz_completed = excluded.quiz_completed,
                         quiz_score = excluded.quiz_score""",
                    (
                        user_id,
                        lesson_id,
                        int(record.completed),
                        record.current_step,
                        int(record.quiz_completed),
                        record.quiz_score,
                        _utc_now(),
                    )
                )
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise PersistenceUnavailable(
                f"Could not save progress for {user_id}/{lesson_id}: {e}",
                {lesson_id: str(e)},
            ) from e

    def fetch_rows(self, user_id: str) -> list[dict]:
        """Raw stored rows for a user, ordered by lesson id."""
        conn = self._get_connection()
        try:
            cursor = conn.execute(
                f"""SELECT user_id, lesson_id, completed, current_step, quiz_completed,
                          quiz_score, updated_at
                   FROM {PROGRESS_TABLE}
                   WHERE user_id = ?
                   ORDER BY lesson_id""",
                (user_id,)
            )
            return [dict(row) for row in cursor.fetchall()]
        finally:
            conn.close()


# -----------------------------------------------------------------------------
# Supabase backend
# -----------------------------------------------------------------------------

class SupabaseProgressBackend:
    """
    Progress rows in a Supabase project, through its PostgREST API.

    Upserts rely on the (user_id, lesson_id) unique constraint; concurrent
    writers are last-write-wins per lesson.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        access_token: Optional[str] = None,
        client: Optional[httpx.Client] = None,
        timeout: float = 10.0,
    ):
        self.endpoint = f"{base_url.rstrip('/')}/rest/v1/{PROGRESS_TABLE}"
        self.headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {access_token or api_key}",
        }
        self._client = client or httpx.Client(timeout=timeout)

    def fetch(self, user_id: str) -> dict[str, ProgressRecord]:
        try:
            response = self._client.get(
                self.endpoint,
                headers=self.headers,
                params={
                    "select": "lesson_id,completed,current_step,quiz_completed,quiz_score",
                    "user_id": f"eq.{user_id}",
                },
            )
            response.raise_for_status()
            rows = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise PersistenceUnavailable(f"Could not read progress for {user_id}: {e}") from e
        return _records_from_rows(rows)

    def upsert(self, user_id: str, lesson_id: str, record: ProgressRecord) -> None:
        # updated_at is set by the table (default plus an update trigger that
        # only fires when a value changes)
        payload = {
            "user_id": user_id,
            "lesson_id": lesson_id,
            "completed": record.completed,
            "current_step": record.current_step,
            "quiz_completed": record.quiz_completed,
            "quiz_score": record.quiz_score,
        }
        try:
            response = self._client.post(
                self.endpoint,
                headers={**self.headers, "Prefer": "resolution=merge-duplicates,return=minimal"},
                params={"on_conflict": "user_id,lesson_id"},
                json=payload,
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise PersistenceUnavailable(
                f"Could not save progress for {user_id}/{lesson_id}: {e}",
                {lesson_id: str(e)},
            ) from e

    def close(self):
        self._client.close()


# -----------------------------------------------------------------------------
# Local cache
# -----------------------------------------------------------------------------

class LocalProgressCache:
    """Per-user JSON copy of the last known progress."""

    def __init__(self, cache_dir: Optional[Path] = None):
        self.cache_dir = Path(cache_dir) if cache_dir else DEFAULT_CACHE_DIR

    def _path_for(self, user_id: str) -> Path:
        # Hashed so distinct ids never share a file
        digest = hashlib.sha256(user_id.encode("utf-8")).hexdigest()
        return self.cache_dir / f"{digest}.json"

    def read(self, user_id: str) -> dict[str, ProgressRecord]:
        """Cached records for a user; empty when nothing usable is cached."""
        path = self._path_for(user_id)
        if not path.exists():
            return {}
        try:
            snapshot = ProgressSnapshot.model_validate_json(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable progress cache {path}: {e}")
            return {}
        if snapshot.user_id != user_id:
            logger.warning(f"Ignoring progress cache {path}: it belongs to another user")
            return {}
        return dict(snapshot.records)

    def write(self, snapshot: ProgressSnapshot):
        path = self._path_for(snapshot.user_id)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(snapshot.model_dump_json(indent=2), encoding="utf-8")
        except OSError as e:
            logger.warning(f"Could not write progress cache {path}: {e}")

    def clear(self, user_id: str):
        self._path_for(user_id).unlink(missing_ok=True)


# -----------------------------------------------------------------------------
# Layered store
# -----------------------------------------------------------------------------

@dataclass
class LoadResult:
    """Snapshot plus a degradation signal when the backend was unreachable."""
    snapshot: ProgressSnapshot
    degraded: bool = False
    warning: Optional[str] = None


@dataclass
class SaveReport:
    """Per-lesson outcome of a save."""
    user_id: str
    saved: list[str] = field(default_factory=list)
    failures: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failures

    def raise_for_failures(self):
        if self.failures:
            raise PersistenceUnavailable(
                f"Progress not saved for {', '.join(sorted(self.failures))}",
                self.failures,
            )


class ProgressStore:
    """
    Load and save progress snapshots.

    Reads go to the backend first and fall back to the local cache; every
    successful read and every save refreshes the cache.
    """

    def __init__(
        self,
        backend: ProgressBackend,
        cache: Optional[LocalProgressCache] = None,
        lesson_ids: Iterable[str] = (),
        max_workers: int = 1,
    ):
        """
        Initialize progress store.

        Args:
            backend: Durable backend (SQLite or Supabase)
            cache: Local fallback cache (default: ~/.learningcenter/cache)
            lesson_ids: Catalog lesson ids; loaded snapshots hold one entry each
            max_workers: Threads for background saves
        """
        self.backend = backend
        self.cache = cache or LocalProgressCache()
        self.lesson_ids = list(lesson_ids)
        self._executor: Optional[ThreadPoolExecutor] = None
        self._max_workers = max_workers

    def load(self, user_id: str) -> LoadResult:
        try:
            records = self.backend.fetch(user_id)
        except PersistenceUnavailable as e:
            warning = f"Progress store unavailable, using local copy: {e.message}"
            logger.warning(warning)
            snapshot = ProgressSnapshot.for_catalog(user_id, self.lesson_ids, self.cache.read(user_id))
            return LoadResult(snapshot=snapshot, degraded=True, warning=warning)

        snapshot = ProgressSnapshot.for_catalog(user_id, self.lesson_ids, records)
        self.cache.write(snapshot)
        return LoadResult(snapshot=snapshot)

    def save(self, user_id: str, snapshot: ProgressSnapshot) -> SaveReport:
        """
        Upsert every lesson entry of a snapshot.

        Each upsert is attempted independently; failures are collected in the
        returned report rather than raised.
        """
        if snapshot.user_id != user_id:
            raise ValueError(f"Snapshot belongs to {snapshot.user_id}, not {user_id}")

        self.cache.write(snapshot)

        report = SaveReport(user_id=user_id)
        for lesson_id, record in snapshot.records.items():
            try:
                self.backend.upsert(user_id, lesson_id, record)
            except PersistenceUnavailable as e:
                logger.warning(f"Failed to save progress for {user_id}/{lesson_id}: {e.message}")
                report.failures[lesson_id] = e.message
            else:
                report.saved.append(lesson_id)
        return report

    def save_in_background(self, user_id: str, snapshot: ProgressSnapshot) -> "Future[SaveReport]":
        """Run save() on a worker thread and return its future."""
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self._max_workers,
                thread_name_prefix="progress-save",
            )
        return self._executor.submit(self.save, user_id, snapshot)

    def close(self):
        """Wait for pending background saves, then release threads and the backend client."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
        close_backend = getattr(self.backend, "close", None)
        if close_backend is not None:
            close_backend()
