"""
LessonCatalog - Read-only access to lesson and quiz content.

Provides:
- Ordered lesson ids (by the ordinal embedded in each id)
- Lesson lookup
- Quiz questions per lesson

Content is validated once at load time; a catalog that loads is safe to use.
"""

import logging
from pathlib import Path
from typing import Iterable, Optional

import yaml
from pydantic import ValidationError

from learningcenter.errors import CatalogError, LessonNotFound
from learningcenter.schemas import Lesson, LessonFile, QuizQuestion
from learningcenter.utils import load_content, resolve_content_path


logger = logging.getLogger(__name__)


class LessonCatalog:
    """
    Immutable, ordered collection of lessons.

    Lesson order is total: by embedded ordinal, ties broken by id.
    """

    def __init__(self, lessons: Iterable[Lesson], allow_empty_quiz: bool = False):
        """
        Initialize catalog from validated lessons.

        Args:
            lessons: Lesson models in any order
            allow_empty_quiz: Accept lessons without questions. Such a lesson
                can never be meaningfully passed, so this is off by default.

        Raises:
            CatalogError: On duplicate ids or lessons without questions
        """
        ordered = sorted(lessons, key=lambda lesson: (lesson.ordinal, lesson.id))
        self._lessons: dict[str, Lesson] = {}
        for lesson in ordered:
            if lesson.id in self._lessons:
                raise CatalogError(f"Duplicate lesson id: {lesson.id}")
            if not lesson.questions and not allow_empty_quiz:
                raise CatalogError(f"Lesson '{lesson.id}' has no quiz questions")
            self._lessons[lesson.id] = lesson
        self._order: tuple[str, ...] = tuple(self._lessons)

    @classmethod
    def from_lessons(cls, lessons: Iterable[Lesson], allow_empty_quiz: bool = False) -> "LessonCatalog":
        return cls(lessons, allow_empty_quiz=allow_empty_quiz)

    @classmethod
    def from_dict(cls, raw: dict, allow_empty_quiz: bool = False) -> "LessonCatalog":
        """Build a catalog from a parsed content mapping."""
        try:
            content = LessonFile.model_validate(raw)
        except ValidationError as e:
            raise CatalogError(f"Invalid lesson content: {e}") from e
        return cls(content.lessons, allow_empty_quiz=allow_empty_quiz)

    def __len__(self) -> int:
        return len(self._order)

    def __contains__(self, lesson_id: object) -> bool:
        return lesson_id in self._lessons

    # -------------------------------------------------------------------------
    # Lessons
    # -------------------------------------------------------------------------

    def list_lesson_ids(self) -> list[str]:
        """Lesson ids in catalog order."""
        return list(self._order)

    def lessons(self) -> list[Lesson]:
        """Lessons in catalog order."""
        return [self._lessons[lesson_id] for lesson_id in self._order]

    def get_lesson(self, lesson_id: str) -> Lesson:
        try:
            return self._lessons[lesson_id]
        except KeyError:
            raise LessonNotFound(lesson_id) from None

    def get_position(self, lesson_id: str) -> int:
        """Zero-based position of a lesson in catalog order."""
        self.get_lesson(lesson_id)
        return self._order.index(lesson_id)

    def get_previous_lesson_id(self, lesson_id: str) -> Optional[str]:
        position = self.get_position(lesson_id)
        return self._order[position - 1] if position > 0 else None

    def get_next_lesson_id(self, lesson_id: str) -> Optional[str]:
        position = self.get_position(lesson_id)
        return self._order[position + 1] if position + 1 < len(self._order) else None

    # -------------------------------------------------------------------------
    # Questions
    # -------------------------------------------------------------------------

    def get_questions(self, lesson_id: str) -> list[QuizQuestion]:
        """Quiz questions for a lesson, in order."""
        return list(self.get_lesson(lesson_id).questions)

    def questions(self, lesson_id: str) -> list[QuizQuestion]:
        return self.get_questions(lesson_id)

    def question_count(self, lesson_id: str) -> int:
        return len(self.get_lesson(lesson_id).questions)


def load_catalog(source: str | Path | None = None, allow_empty_quiz: bool = False) -> LessonCatalog:
    """
    Load and validate a lesson catalog.

    Args:
        source: Content name or path to a YAML file (default: bundled lessons)
        allow_empty_quiz: Accept lessons without quiz questions

    Raises:
        CatalogError: If the file is missing, unparsable or fails validation
    """
    path = resolve_content_path(source)
    try:
        raw = load_content(path)
    except FileNotFoundError as e:
        raise CatalogError(str(e)) from e
    except yaml.YAMLError as e:
        raise CatalogError(f"Could not parse lesson content {path}: {e}") from e

    catalog = LessonCatalog.from_dict(raw, allow_empty_quiz=allow_empty_quiz)
    logger.info(f"Loaded {len(catalog)} lessons from {path}")
    return catalog
