"""
Learning Center Schemas - Pydantic models for lessons and progress.

This module exports all schema classes for:
- Lesson: content sections, quiz questions, lesson content files
- Progress: per-lesson records, per-user snapshots, quiz results
"""

# Lesson schemas
from .lesson import (
    ContentSection,
    QuizQuestion,
    Lesson,
    LessonFile,
    lesson_ordinal,
)

# Progress schemas
from .progress import (
    MAX_STEP,
    LessonStatus,
    ProgressRecord,
    DEFAULT_RECORD,
    ProgressSnapshot,
    QuizResult,
)

__all__ = [
    # Lesson
    'ContentSection',
    'QuizQuestion',
    'Lesson',
    'LessonFile',
    'lesson_ordinal',
    # Progress
    'MAX_STEP',
    'LessonStatus',
    'ProgressRecord',
    'DEFAULT_RECORD',
    'ProgressSnapshot',
    'QuizResult',
]
