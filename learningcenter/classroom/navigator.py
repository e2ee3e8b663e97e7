"""
Navigator - Lesson availability, sessions and progress for the signed-in user.

Provides:
- Lesson availability based on progress (linear unlock chain)
- Catalog view with status indicators
- Opening lesson sessions
- Recording passing quiz results and saving them
"""

import logging
from concurrent.futures import Future
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from learningcenter.errors import AuthenticationRequired, InvalidTransition
from learningcenter.identity import IdentityProvider
from learningcenter.schemas import Lesson, ProgressSnapshot, QuizResult

from .catalog import LessonCatalog
from .progress import LoadResult, ProgressStore, SaveReport
from .scorer import apply_result, passing_threshold
from .session import LessonSession
from .unlock import is_unlocked


logger = logging.getLogger(__name__)


class LessonAvailability(str, Enum):
    """Lesson availability status for UI display."""
    LOCKED = "locked"           # Previous lesson not completed
    AVAILABLE = "available"     # Can start
    COMPLETED = "completed"     # Quiz passed


@dataclass
class NavigationLesson:
    """Lesson with navigation metadata."""
    lesson: Lesson
    position: int               # 1-based
    availability: LessonAvailability
    question_count: int
    passing_score: int


class Navigator:
    """
    Navigate the lesson catalog for the current user.

    Combines LessonCatalog (content) with ProgressStore (user state). The
    snapshot is held in memory and replaced whenever a pass is recorded.
    """

    def __init__(self, catalog: LessonCatalog, store: ProgressStore, identity: IdentityProvider):
        """
        Initialize navigator.

        Args:
            catalog: LessonCatalog instance for content access
            store: ProgressStore instance for user progress
            identity: Source of the signed-in user id
        """
        self.catalog = catalog
        self.store = store
        self.identity = identity
        self._snapshot: Optional[ProgressSnapshot] = None
        self.last_load: Optional[LoadResult] = None

    @property
    def user_id(self) -> str:
        user_id = self.identity.current_user_id()
        if not user_id:
            raise AuthenticationRequired("Sign in to use the Learning Center")
        return user_id

    @property
    def snapshot(self) -> ProgressSnapshot:
        if self._snapshot is None or self._snapshot.user_id != self.user_id:
            self.load_progress()
        return self._snapshot

    @property
    def total_lessons(self) -> int:
        return len(self.catalog)

    def load_progress(self) -> LoadResult:
        """(Re)load the current user's progress from the store."""
        result = self.store.load(self.user_id)
        self._snapshot = result.snapshot
        self.last_load = result
        return result

    # -------------------------------------------------------------------------
    # Availability Checking
    # -------------------------------------------------------------------------

    def is_unlocked(self, lesson_id: str) -> bool:
        return is_unlocked(lesson_id, self.snapshot, self.catalog.list_lesson_ids())

    def get_lesson_availability(self, lesson_id: str) -> LessonAvailability:
        if self.snapshot.get(lesson_id).completed:
            return LessonAvailability.COMPLETED
        if self.is_unlocked(lesson_id):
            return LessonAvailability.AVAILABLE
        return LessonAvailability.LOCKED

    def get_navigation_tree(self) -> list[NavigationLesson]:
        """All lessons in order, each annotated with availability."""
        tree = []
        for position, lesson in enumerate(self.catalog.lessons(), start=1):
            count = len(lesson.questions)
            tree.append(NavigationLesson(
                lesson=lesson,
                position=position,
                availability=self.get_lesson_availability(lesson.id),
                question_count=count,
                passing_score=passing_threshold(count),
            ))
        return tree

    def get_status_indicator(self, lesson_id: str) -> str:
        """
        Get status indicator for list display.

        Returns:
            ✓ for completed
            ○ for available
            ◌ for locked
        """
        availability = self.get_lesson_availability(lesson_id)
        if availability == LessonAvailability.COMPLETED:
            return "✓"
        elif availability == LessonAvailability.AVAILABLE:
            return "○"
        else:
            return "◌"

    def get_recommended_lesson_id(self) -> Optional[str]:
        """First available lesson that is not yet completed."""
        for lesson_id in self.catalog.list_lesson_ids():
            if self.get_lesson_availability(lesson_id) == LessonAvailability.AVAILABLE:
                return lesson_id
        return None

    # -------------------------------------------------------------------------
    # Lesson Actions
    # -------------------------------------------------------------------------

    def open_lesson(self, lesson_id: str) -> LessonSession:
        """
        Open a lesson session.

        Raises:
            LessonLocked: If the previous lesson is not completed
        """
        return LessonSession.open(lesson_id, self.catalog, self.snapshot)

    def record_result(
        self,
        session: LessonSession,
        background: bool = False,
    ) -> Union[SaveReport, "Future[SaveReport]", None]:
        """
        Persist a session's quiz result if it passed.

        Args:
            session: Session whose result has been revealed
            background: Save on a worker thread and return the future

        Returns:
            SaveReport (or its Future) for a pass, None for a fail or no result

        Raises:
            InvalidTransition: If the session was opened by a different user
        """
        result: Optional[QuizResult] = session.result
        if result is None or not result.passed:
            return None

        user_id = self.user_id
        if session.user_id is not None and session.user_id != user_id:
            raise InvalidTransition(
                f"Session for {session.lesson_id} belongs to {session.user_id}, not {user_id}"
            )
        self._snapshot = apply_result(self.snapshot, session.lesson_id, result)
        logger.info(
            f"{user_id} passed {session.lesson_id} with {result.score}/{result.total}"
        )
        if background:
            return self.store.save_in_background(user_id, self._snapshot)
        return self.store.save(user_id, self._snapshot)

    def retry_save(self) -> SaveReport:
        """Save the in-memory snapshot again after a failed save."""
        return self.store.save(self.user_id, self.snapshot)

    # -------------------------------------------------------------------------
    # Progress Summary
    # -------------------------------------------------------------------------

    def get_progress_summary(self) -> dict:
        """Get progress summary for display."""
        lesson_ids = self.catalog.list_lesson_ids()
        completed = sum(1 for lesson_id in lesson_ids if self.snapshot.get(lesson_id).completed)
        total = len(lesson_ids)
        return {
            "total_lessons": total,
            "completed": completed,
            "completion_percent": round(completed / total * 100) if total > 0 else 0,
            "recommended_lesson_id": self.get_recommended_lesson_id(),
            "degraded": bool(self.last_load and self.last_load.degraded),
        }
