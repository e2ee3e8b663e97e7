"""
Learning Center Classroom - Runtime components for lessons and progress.

This module provides:
- LessonCatalog: Ordered, validated lesson content
- ProgressStore: Progress persistence with local fallback
- LessonSession: Step and quiz state machine for one open lesson
- Scorer: Quiz scoring and progress updates
- Navigator: Lesson availability and result recording
"""

from .catalog import (
    LessonCatalog,
    load_catalog,
)

from .progress import (
    ProgressBackend,
    SQLiteProgressBackend,
    SupabaseProgressBackend,
    LocalProgressCache,
    ProgressStore,
    LoadResult,
    SaveReport,
    DEFAULT_PROGRESS_DIR,
    DEFAULT_PROGRESS_DB,
    DEFAULT_CACHE_DIR,
)

from .unlock import (
    is_unlocked,
    unlocked_lesson_ids,
)

from .scorer import (
    PASSING_RATIO,
    passing_threshold,
    score,
    apply_result,
)

from .session import (
    LessonStep,
    SessionState,
    LessonSession,
)

from .navigator import (
    Navigator,
    LessonAvailability,
    NavigationLesson,
)

__all__ = [
    # Catalog
    "LessonCatalog",
    "load_catalog",
    # Progress
    "ProgressBackend",
    "SQLiteProgressBackend",
    "SupabaseProgressBackend",
    "LocalProgressCache",
    "ProgressStore",
    "LoadResult",
    "SaveReport",
    "DEFAULT_PROGRESS_DIR",
    "DEFAULT_PROGRESS_DB",
    "DEFAULT_CACHE_DIR",
    # Unlock policy
    "is_unlocked",
    "unlocked_lesson_ids",
    # Scoring
    "PASSING_RATIO",
    "passing_threshold",
    "score",
    "apply_result",
    # Session
    "LessonStep",
    "SessionState",
    "LessonSession",
    # Navigator
    "Navigator",
    "LessonAvailability",
    "NavigationLesson",
]
