"""
LessonSession tests: content steps, quiz navigation, retry and close.
"""

import pytest

from learningcenter.classroom import LessonSession, LessonStep
from learningcenter.errors import (
    AnswerRequired,
    InvalidRetry,
    InvalidTransition,
    LessonLocked,
    LessonNotFound,
)
from learningcenter.schemas import ProgressRecord, ProgressSnapshot


def _to_quiz(session):
    for _ in range(4):
        session.next()
    assert session.step == LessonStep.QUIZ
    return session


def _answer_all(session, answers):
    result = None
    for answer in answers:
        session.select_answer(answer)
        result = session.next_question()
    return result


class TestOpen:
    """Opening lessons against progress."""

    def test_open_first_lesson(self, catalog):
        session = LessonSession.open("lesson1", catalog, ProgressSnapshot(user_id="u1"))
        assert session.step == LessonStep.INTRO
        assert session.state.quiz_index == 0
        assert session.state.answers == []
        assert not session.state.result_revealed

    def test_open_locked_lesson(self, catalog):
        snapshot = ProgressSnapshot.for_catalog("u1", catalog.list_lesson_ids())
        with pytest.raises(LessonLocked) as exc_info:
            LessonSession.open("lesson2", catalog, snapshot)
        assert exc_info.value.prerequisite_id == "lesson1"

    def test_open_after_prerequisite(self, catalog):
        done = ProgressRecord(completed=True, quiz_completed=True, current_step=4)
        snapshot = ProgressSnapshot.for_catalog("u1", catalog.list_lesson_ids(), {"lesson1": done})
        session = LessonSession.open("lesson2", catalog, snapshot)
        assert session.lesson_id == "lesson2"

    def test_open_unknown_lesson(self, catalog):
        with pytest.raises(LessonNotFound):
            LessonSession.open("lesson42", catalog, ProgressSnapshot(user_id="u1"))


class TestContentSteps:
    """INTRO -> RULES -> EXAMPLES -> PRE_QUIZ -> QUIZ."""

    def test_next_walks_steps(self, catalog):
        session = LessonSession(catalog.get_lesson("lesson1"))
        assert session.next() == LessonStep.RULES
        assert session.next() == LessonStep.EXAMPLES
        assert session.next() == LessonStep.PRE_QUIZ
        assert session.next() == LessonStep.QUIZ
        assert session.state.answers == [None, None, None]

    def test_prev_on_intro_is_noop(self, catalog):
        session = LessonSession(catalog.get_lesson("lesson1"))
        assert session.prev() == LessonStep.INTRO

    def test_prev_goes_back(self, catalog):
        session = LessonSession(catalog.get_lesson("lesson1"))
        session.next()
        session.next()
        assert session.prev() == LessonStep.RULES

    def test_prev_from_pre_quiz_rejected(self, catalog):
        session = LessonSession(catalog.get_lesson("lesson1"))
        for _ in range(3):
            session.next()
        with pytest.raises(InvalidTransition):
            session.prev()
        assert session.step == LessonStep.PRE_QUIZ

    def test_next_in_quiz_rejected(self, catalog):
        session = _to_quiz(LessonSession(catalog.get_lesson("lesson1")))
        with pytest.raises(InvalidTransition):
            session.next()


class TestQuiz:
    """Answering, navigating and finishing the quiz."""

    def test_select_before_quiz_rejected(self, catalog):
        session = LessonSession(catalog.get_lesson("lesson1"))
        with pytest.raises(InvalidTransition):
            session.select_answer(0)

    def test_select_out_of_range(self, catalog):
        session = _to_quiz(LessonSession(catalog.get_lesson("lesson1")))
        with pytest.raises(ValueError):
            session.select_answer(3)
        assert session.selected_answer is None

    def test_select_overwrites(self, catalog):
        session = _to_quiz(LessonSession(catalog.get_lesson("lesson1")))
        session.select_answer(0)
        session.select_answer(2)
        assert session.selected_answer == 2

    def test_next_question_without_answer(self, catalog):
        session = _to_quiz(LessonSession(catalog.get_lesson("lesson1")))
        with pytest.raises(AnswerRequired):
            session.next_question()
        assert session.state.quiz_index == 0
        assert session.state.answers == [None, None, None]

    def test_previous_question_keeps_answers(self, catalog):
        session = _to_quiz(LessonSession(catalog.get_lesson("lesson1")))
        session.select_answer(1)
        session.next_question()
        assert session.previous_question() == 0
        assert session.selected_answer == 1
        assert session.previous_question() == 0

    def test_all_correct_passes(self, catalog):
        session = _to_quiz(LessonSession(catalog.get_lesson("lesson1")))
        result = _answer_all(session, [1, 1, 1])
        assert result.score == 3
        assert result.passed
        assert session.state.result_revealed
        assert session.state.last_score == 3
        assert session.current_question is None

    def test_one_correct_fails(self, catalog):
        session = _to_quiz(LessonSession(catalog.get_lesson("lesson1")))
        result = _answer_all(session, [1, 0, 0])
        assert result.score == 1
        assert not result.passed
        assert not session.passed

    def test_answers_locked_after_reveal(self, catalog):
        session = _to_quiz(LessonSession(catalog.get_lesson("lesson1")))
        _answer_all(session, [1, 1, 1])
        with pytest.raises(InvalidTransition):
            session.select_answer(0)
        with pytest.raises(InvalidTransition):
            session.next_question()

    def test_empty_quiz_finishes_immediately(self, make_lesson):
        session = _to_quiz(LessonSession(make_lesson("lesson1", question_count=0)))
        with pytest.raises(InvalidTransition):
            session.select_answer(0)
        result = session.next_question()
        assert result.passed


class TestRetry:
    """Retrying after a failed attempt."""

    def test_retry_after_fail_clears_answers(self, catalog):
        session = _to_quiz(LessonSession(catalog.get_lesson("lesson1")))
        _answer_all(session, [1, 0, 0])
        session.retry()
        assert session.step == LessonStep.QUIZ
        assert session.state.quiz_index == 0
        assert session.state.answers == [None, None, None]
        assert not session.state.result_revealed
        assert session.result is None

    def test_retry_after_pass_rejected(self, catalog):
        session = _to_quiz(LessonSession(catalog.get_lesson("lesson1")))
        _answer_all(session, [1, 1, 1])
        with pytest.raises(InvalidRetry):
            session.retry()

    def test_retry_before_reveal_rejected(self, catalog):
        session = _to_quiz(LessonSession(catalog.get_lesson("lesson1")))
        with pytest.raises(InvalidRetry):
            session.retry()

    def test_second_attempt_can_pass(self, catalog):
        session = _to_quiz(LessonSession(catalog.get_lesson("lesson1")))
        _answer_all(session, [0, 0, 0])
        session.retry()
        assert _answer_all(session, [1, 1, 1]).passed


class TestClose:
    """Closed sessions reject every transition."""

    def test_close(self, catalog):
        session = LessonSession(catalog.get_lesson("lesson1"))
        session.close()
        assert session.closed
        with pytest.raises(InvalidTransition):
            session.next()
        with pytest.raises(InvalidTransition):
            session.prev()
