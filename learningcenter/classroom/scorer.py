"""
Quiz scoring and progress updates.

Scoring is pure: the same answers against the same questions always give the
same result. Persisting a passing result is the caller's job.
"""

import math
from fractions import Fraction
from typing import Optional, Sequence

from learningcenter.schemas import MAX_STEP, ProgressSnapshot, QuizQuestion, QuizResult


PASSING_RATIO = Fraction(7, 10)


def passing_threshold(question_count: int) -> int:
    """
    Number of correct answers needed to pass.

    ceil(question_count * 0.7), computed exactly so that 10 questions need 7
    rather than the 8 a float product would give.
    """
    return math.ceil(PASSING_RATIO * question_count)


def score(answers: Sequence[Optional[int]], questions: Sequence[QuizQuestion]) -> QuizResult:
    """
    Score a quiz attempt.

    Args:
        answers: Selected option index per question position; None (or a
            missing trailing entry) means unanswered. Extra entries are ignored.
        questions: Quiz questions in order

    Returns:
        QuizResult with score, total, threshold and pass flag
    """
    correct = sum(
        1 for position, question in enumerate(questions)
        if position < len(answers) and question.is_correct(answers[position])
    )
    threshold = passing_threshold(len(questions))
    return QuizResult(
        score=correct,
        total=len(questions),
        threshold=threshold,
        passed=correct >= threshold,
    )


def apply_result(snapshot: ProgressSnapshot, lesson_id: str, result: QuizResult) -> ProgressSnapshot:
    """
    Merge a quiz result into a progress snapshot.

    A pass marks the lesson completed; a fail gives no partial credit and
    returns the snapshot unchanged.
    """
    if not result.passed:
        return snapshot

    record = snapshot.get(lesson_id).model_copy(update={
        "completed": True,
        "quiz_completed": True,
        "current_step": MAX_STEP,
        "quiz_score": result.score,
    })
    return snapshot.with_record(lesson_id, record)
