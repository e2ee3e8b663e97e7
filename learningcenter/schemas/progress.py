"""
Progress tracking schemas for the Learning Center.

Defines Pydantic models for:
- Per-lesson progress records
- Per-user progress snapshots (total lookup with zero-record defaulting)
- Quiz results
"""

from enum import Enum
from typing import Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


MAX_STEP = 4


class LessonStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class ProgressRecord(BaseModel):
    """Progress of one user through one lesson."""
    model_config = ConfigDict(frozen=True)

    completed: bool = False
    current_step: int = Field(0, ge=0, le=MAX_STEP)
    quiz_completed: bool = False
    quiz_score: int = Field(0, ge=0)  # informational, never read by unlock logic

    @model_validator(mode="after")
    def _completed_implies_quiz(self) -> "ProgressRecord":
        if self.completed and not self.quiz_completed:
            raise ValueError("a completed lesson must have its quiz completed")
        return self

    @property
    def status(self) -> LessonStatus:
        if self.completed:
            return LessonStatus.COMPLETED
        if self.current_step > 0 or self.quiz_completed:
            return LessonStatus.IN_PROGRESS
        return LessonStatus.NOT_STARTED


DEFAULT_RECORD = ProgressRecord()


class ProgressSnapshot(BaseModel):
    """Complete progress of one user across all lessons."""
    model_config = ConfigDict(frozen=True)

    user_id: str
    records: dict[str, ProgressRecord] = {}

    @classmethod
    def for_catalog(
        cls,
        user_id: str,
        lesson_ids: Iterable[str],
        records: Optional[dict[str, ProgressRecord]] = None,
    ) -> "ProgressSnapshot":
        """Build a snapshot holding one entry per catalog lesson."""
        stored = records or {}
        full = {lesson_id: stored.get(lesson_id, DEFAULT_RECORD) for lesson_id in lesson_ids}
        # Rows for lessons no longer in the catalog are kept, not dropped
        for lesson_id, record in stored.items():
            full.setdefault(lesson_id, record)
        return cls(user_id=user_id, records=full)

    def get(self, lesson_id: str) -> ProgressRecord:
        """Return the record for a lesson, or the zero record if absent."""
        return self.records.get(lesson_id, DEFAULT_RECORD)

    def with_record(self, lesson_id: str, record: ProgressRecord) -> "ProgressSnapshot":
        records = dict(self.records)
        records[lesson_id] = record
        return ProgressSnapshot(user_id=self.user_id, records=records)

    def completed_lesson_ids(self) -> set[str]:
        return {lesson_id for lesson_id, record in self.records.items() if record.completed}


class QuizResult(BaseModel):
    """Outcome of one scored quiz attempt."""
    model_config = ConfigDict(frozen=True)

    score: int = Field(..., ge=0)
    total: int = Field(..., ge=0)
    threshold: int = Field(..., ge=0)
    passed: bool

    @property
    def percent(self) -> int:
        if self.total == 0:
            return 100
        return round(self.score / self.total * 100)
