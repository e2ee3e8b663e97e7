"""Shared fixtures for Learning Center tests."""

import pytest

from learningcenter.classroom import LessonCatalog, LocalProgressCache, ProgressStore, SQLiteProgressBackend
from learningcenter.errors import PersistenceUnavailable
from learningcenter.schemas import ContentSection, Lesson, QuizQuestion


def _lesson(lesson_id: str, question_count: int = 3) -> Lesson:
    # Option 1 is always the correct answer
    return Lesson(
        id=lesson_id,
        display_name=f"Lesson {lesson_id}",
        short_description="Test lesson",
        intro=ContentSection(title="Intro", body="Intro body"),
        rules=ContentSection(title="Rules", body="Rules body"),
        examples=ContentSection(title="Examples", body="Examples body"),
        questions=[
            QuizQuestion(
                prompt_text=f"Question {i + 1}",
                options=["wrong", "right", "also wrong"],
                correct_option_index=1,
            )
            for i in range(question_count)
        ],
    )


@pytest.fixture
def make_lesson():
    return _lesson


@pytest.fixture
def catalog():
    """Three lessons of three questions each."""
    return LessonCatalog.from_lessons([_lesson("lesson1"), _lesson("lesson2"), _lesson("lesson3")])


@pytest.fixture
def backend(tmp_path):
    return SQLiteProgressBackend(tmp_path / "progress.db")


@pytest.fixture
def cache(tmp_path):
    return LocalProgressCache(tmp_path / "cache")


@pytest.fixture
def store(backend, cache, catalog):
    store = ProgressStore(backend, cache=cache, lesson_ids=catalog.list_lesson_ids())
    yield store
    store.close()


class UnreachableBackend:
    """Backend whose every call fails."""

    def fetch(self, user_id):
        raise PersistenceUnavailable("connection refused")

    def upsert(self, user_id, lesson_id, record):
        raise PersistenceUnavailable("connection refused", {lesson_id: "connection refused"})


@pytest.fixture
def offline_store(cache, catalog):
    store = ProgressStore(UnreachableBackend(), cache=cache, lesson_ids=catalog.list_lesson_ids())
    yield store
    store.close()
