"""
Navigator tests: availability, opening lessons and recording results.
"""

import pytest

from learningcenter.classroom import LessonAvailability, Navigator
from learningcenter.errors import AuthenticationRequired, InvalidTransition, LessonLocked
from learningcenter.identity import StaticIdentityProvider
from learningcenter.schemas import ProgressSnapshot


@pytest.fixture
def identity():
    return StaticIdentityProvider("u1")


@pytest.fixture
def nav(catalog, store, identity):
    return Navigator(catalog, store, identity)


def _pass_lesson(nav, lesson_id, answers=(1, 1, 1), background=False):
    session = nav.open_lesson(lesson_id)
    for _ in range(4):
        session.next()
    for answer in answers:
        session.select_answer(answer)
        session.next_question()
    return session, nav.record_result(session, background=background)


class TestAvailability:
    """Lesson availability for display."""

    def test_fresh_user_only_first_unlocked(self, nav):
        tree = nav.get_navigation_tree()
        assert [n.availability for n in tree] == [
            LessonAvailability.AVAILABLE,
            LessonAvailability.LOCKED,
            LessonAvailability.LOCKED,
        ]
        assert [n.position for n in tree] == [1, 2, 3]
        assert tree[0].question_count == 3
        assert tree[0].passing_score == 3

    def test_status_indicators(self, nav):
        _pass_lesson(nav, "lesson1")
        assert nav.get_status_indicator("lesson1") == "✓"
        assert nav.get_status_indicator("lesson2") == "○"
        assert nav.get_status_indicator("lesson3") == "◌"

    def test_recommended_lesson(self, nav):
        assert nav.get_recommended_lesson_id() == "lesson1"
        _pass_lesson(nav, "lesson1")
        assert nav.get_recommended_lesson_id() == "lesson2"

    def test_no_recommendation_when_all_completed(self, nav):
        for lesson_id in ("lesson1", "lesson2", "lesson3"):
            _pass_lesson(nav, lesson_id)
        assert nav.get_recommended_lesson_id() is None


class TestLessonActions:
    """Opening lessons and recording results."""

    def test_open_locked_lesson(self, nav):
        with pytest.raises(LessonLocked):
            nav.open_lesson("lesson2")

    def test_pass_unlocks_next_and_persists(self, nav, backend):
        session, report = _pass_lesson(nav, "lesson1")
        assert session.result.score == 3
        assert report.ok
        assert nav.is_unlocked("lesson2")
        assert backend.fetch("u1")["lesson1"].completed

    def test_fail_records_nothing(self, nav, backend):
        session, report = _pass_lesson(nav, "lesson1", answers=(1, 0, 0))
        assert report is None
        assert not nav.snapshot.get("lesson1").completed
        assert not nav.is_unlocked("lesson2")
        assert backend.fetch("u1") == {}

    def test_pass_after_retry(self, nav):
        session, _ = _pass_lesson(nav, "lesson1", answers=(0, 0, 0))
        session.retry()
        for _ in range(3):
            session.select_answer(1)
            session.next_question()
        assert nav.record_result(session).ok
        assert nav.is_unlocked("lesson2")

    def test_background_save(self, nav, store):
        _, future = _pass_lesson(nav, "lesson1", background=True)
        assert future.result(timeout=10).ok
        store.close()
        assert store.load("u1").snapshot.get("lesson1").completed

    def test_progress_survives_reload(self, catalog, store, identity):
        _pass_lesson(Navigator(catalog, store, identity), "lesson1")
        fresh = Navigator(catalog, store, identity)
        assert fresh.is_unlocked("lesson2")

    def test_retry_save(self, catalog, offline_store, identity):
        nav = Navigator(catalog, offline_store, identity)
        _, report = _pass_lesson(nav, "lesson1")
        assert not report.ok
        # In-memory progress still advances
        assert nav.is_unlocked("lesson2")
        assert not nav.retry_save().ok


class TestIdentity:
    """Progress is keyed by the signed-in user."""

    def test_no_user(self, catalog, store):
        nav = Navigator(catalog, store, StaticIdentityProvider())
        with pytest.raises(AuthenticationRequired):
            nav.get_navigation_tree()

    def test_admin_flag(self):
        assert not StaticIdentityProvider("u1").is_admin()
        assert StaticIdentityProvider("u1", admin=True).is_admin()

    def test_session_remembers_its_user(self, nav):
        assert nav.open_lesson("lesson1").user_id == "u1"

    def test_result_not_credited_to_user_who_switched_in(self, nav, identity, backend):
        session = nav.open_lesson("lesson1")
        for _ in range(4):
            session.next()
        for _ in range(3):
            session.select_answer(1)
            session.next_question()

        identity.user_id = "u2"
        with pytest.raises(InvalidTransition):
            nav.record_result(session)
        assert not nav.snapshot.get("lesson1").completed
        assert backend.fetch("u2") == {}

    def test_switching_user_reloads(self, nav, identity):
        _pass_lesson(nav, "lesson1")
        identity.user_id = "u2"
        assert nav.snapshot.user_id == "u2"
        assert not nav.is_unlocked("lesson2")


class TestProgressSummary:
    """Summary for the catalog header."""

    def test_summary(self, nav):
        _pass_lesson(nav, "lesson1")
        stats = nav.get_progress_summary()
        assert stats["total_lessons"] == 3
        assert stats["completed"] == 1
        assert stats["completion_percent"] == 33
        assert stats["recommended_lesson_id"] == "lesson2"
        assert stats["degraded"] is False

    def test_summary_degraded(self, catalog, offline_store, identity):
        nav = Navigator(catalog, offline_store, identity)
        load = nav.load_progress()
        assert load.degraded
        assert nav.snapshot == ProgressSnapshot.for_catalog("u1", catalog.list_lesson_ids())
        assert nav.get_progress_summary()["degraded"] is True
