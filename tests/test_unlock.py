"""
Unlock policy tests.
"""

from learningcenter.classroom import is_unlocked, unlocked_lesson_ids
from learningcenter.classroom.unlock import previous_lesson_id
from learningcenter.schemas import ProgressRecord, ProgressSnapshot


ORDER = ["lesson1", "lesson2", "lesson3"]
DONE = ProgressRecord(completed=True, quiz_completed=True, current_step=4, quiz_score=3)


class TestUnlockPolicy:
    """Linear unlock chain."""

    def test_first_lesson_always_unlocked(self):
        snapshot = ProgressSnapshot(user_id="u1")
        assert is_unlocked("lesson1", snapshot, ORDER)

    def test_fresh_user(self):
        snapshot = ProgressSnapshot.for_catalog("u1", ORDER)
        assert unlocked_lesson_ids(snapshot, ORDER) == ["lesson1"]

    def test_completing_unlocks_next_only(self):
        snapshot = ProgressSnapshot.for_catalog("u1", ORDER, {"lesson1": DONE})
        assert is_unlocked("lesson2", snapshot, ORDER)
        assert not is_unlocked("lesson3", snapshot, ORDER)

    def test_quiz_completed_without_completed_does_not_unlock(self):
        attempted = ProgressRecord(quiz_completed=True, current_step=4)
        snapshot = ProgressSnapshot.for_catalog("u1", ORDER, {"lesson1": attempted})
        assert not is_unlocked("lesson2", snapshot, ORDER)

    def test_only_immediate_predecessor_matters(self):
        snapshot = ProgressSnapshot.for_catalog("u1", ORDER, {"lesson2": DONE})
        assert is_unlocked("lesson3", snapshot, ORDER)
        assert not is_unlocked("lesson2", snapshot, ORDER)

    def test_unknown_lesson_locked(self):
        snapshot = ProgressSnapshot.for_catalog("u1", ORDER, {"lesson1": DONE})
        assert not is_unlocked("lesson9", snapshot, ORDER)

    def test_previous_lesson_id(self):
        assert previous_lesson_id("lesson1", ORDER) is None
        assert previous_lesson_id("lesson3", ORDER) == "lesson2"
