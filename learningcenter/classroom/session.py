"""
LessonSession - In-memory traversal of one open lesson.

A session walks a lesson's content steps, then its quiz:

    INTRO -> RULES -> EXAMPLES -> PRE_QUIZ -> QUIZ

Nothing here touches storage. When the last quiz question is answered the
session scores the attempt and reveals the result; persisting a pass is left
to the Navigator.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Optional

from learningcenter.errors import AnswerRequired, InvalidRetry, InvalidTransition, LessonLocked
from learningcenter.schemas import Lesson, ProgressSnapshot, QuizQuestion, QuizResult

from .catalog import LessonCatalog
from .scorer import score
from .unlock import is_unlocked


class LessonStep(IntEnum):
    INTRO = 0
    RULES = 1
    EXAMPLES = 2
    PRE_QUIZ = 3
    QUIZ = 4


@dataclass
class SessionState:
    """Ephemeral state of one open lesson view."""
    lesson_id: str
    step: LessonStep = LessonStep.INTRO
    quiz_index: int = 0
    answers: list[Optional[int]] = field(default_factory=list)
    result_revealed: bool = False
    last_score: int = 0


class LessonSession:
    """
    Step and quiz navigation for one lesson, for one user, in one sitting.

    Invalid transitions raise and leave the state unchanged.
    """

    def __init__(self, lesson: Lesson, user_id: Optional[str] = None):
        self.lesson = lesson
        self.user_id = user_id  # owner of any result recorded from this session
        self.questions: list[QuizQuestion] = list(lesson.questions)
        self.state = SessionState(lesson_id=lesson.id)
        self.result: Optional[QuizResult] = None
        self.closed = False

    @classmethod
    def open(cls, lesson_id: str, catalog: LessonCatalog, snapshot: ProgressSnapshot) -> "LessonSession":
        """
        Open a lesson if it is unlocked.

        Raises:
            LessonNotFound: If the lesson is not in the catalog
            LessonLocked: If the preceding lesson is not completed
        """
        lesson = catalog.get_lesson(lesson_id)
        order = catalog.list_lesson_ids()
        if not is_unlocked(lesson_id, snapshot, order):
            raise LessonLocked(lesson_id, catalog.get_previous_lesson_id(lesson_id))
        return cls(lesson, user_id=snapshot.user_id)

    # -------------------------------------------------------------------------
    # Read helpers
    # -------------------------------------------------------------------------

    @property
    def lesson_id(self) -> str:
        return self.state.lesson_id

    @property
    def step(self) -> LessonStep:
        return self.state.step

    @property
    def in_quiz(self) -> bool:
        return self.state.step == LessonStep.QUIZ

    @property
    def current_question(self) -> Optional[QuizQuestion]:
        if not self.in_quiz or self.state.result_revealed or not self.questions:
            return None
        return self.questions[self.state.quiz_index]

    @property
    def selected_answer(self) -> Optional[int]:
        answers = self.state.answers
        index = self.state.quiz_index
        return answers[index] if index < len(answers) else None

    @property
    def is_last_question(self) -> bool:
        return self.state.quiz_index >= len(self.questions) - 1

    @property
    def passed(self) -> bool:
        return self.result is not None and self.result.passed

    # -------------------------------------------------------------------------
    # Content steps
    # -------------------------------------------------------------------------

    def _ensure_open(self):
        if self.closed:
            raise InvalidTransition(f"Session for {self.lesson_id} is closed")

    def next(self) -> LessonStep:
        """Advance one content step; from PRE_QUIZ this starts the quiz."""
        self._ensure_open()
        if self.state.step == LessonStep.QUIZ:
            raise InvalidTransition("Already in the quiz; use next_question()")

        if self.state.step == LessonStep.PRE_QUIZ:
            self._start_quiz()
        else:
            self.state.step = LessonStep(self.state.step + 1)
        return self.state.step

    def prev(self) -> LessonStep:
        """Go back one content step. No-op on the intro."""
        self._ensure_open()
        if self.state.step >= LessonStep.PRE_QUIZ:
            raise InvalidTransition(f"No previous step from {self.state.step.name}")
        if self.state.step > LessonStep.INTRO:
            self.state.step = LessonStep(self.state.step - 1)
        return self.state.step

    def _start_quiz(self):
        self.state.step = LessonStep.QUIZ
        self._reset_attempt()

    def _reset_attempt(self):
        self.state.quiz_index = 0
        self.state.answers = [None] * len(self.questions)
        self.state.result_revealed = False
        self.state.last_score = 0
        self.result = None

    # -------------------------------------------------------------------------
    # Quiz
    # -------------------------------------------------------------------------

    def _ensure_answering(self):
        self._ensure_open()
        if not self.in_quiz:
            raise InvalidTransition(f"Quiz not started ({self.state.step.name})")
        if self.state.result_revealed:
            raise InvalidTransition("Quiz result already revealed")

    def select_answer(self, option_index: int):
        """Record (or overwrite) the answer to the current question."""
        self._ensure_answering()
        if not self.questions:
            raise InvalidTransition(f"Lesson {self.lesson_id} has no quiz questions")
        question = self.questions[self.state.quiz_index]
        if not 0 <= option_index < len(question.options):
            raise ValueError(
                f"Option {option_index} out of range for {len(question.options)} options"
            )
        self.state.answers[self.state.quiz_index] = option_index

    def next_question(self) -> Optional[QuizResult]:
        """
        Advance to the next question, or finish the quiz after the last one.

        Returns:
            The QuizResult when this call finished the quiz, else None

        Raises:
            AnswerRequired: If the current question has no answer
        """
        self._ensure_answering()
        if self.questions and self.selected_answer is None:
            raise AnswerRequired(
                f"Question {self.state.quiz_index + 1} of {self.lesson_id} has no answer"
            )

        if not self.is_last_question:
            self.state.quiz_index += 1
            return None
        return self._finish_quiz()

    def previous_question(self) -> int:
        self._ensure_answering()
        if self.state.quiz_index > 0:
            self.state.quiz_index -= 1
        return self.state.quiz_index

    def _finish_quiz(self) -> QuizResult:
        self.result = score(self.state.answers, self.questions)
        self.state.last_score = self.result.score
        self.state.result_revealed = True
        return self.result

    def retry(self):
        """Start the quiz over after a failed attempt."""
        self._ensure_open()
        if not self.state.result_revealed or self.passed:
            raise InvalidRetry(f"Nothing to retry for {self.lesson_id}")
        self._reset_attempt()

    def close(self):
        """Discard the session. Unsaved answers are dropped."""
        self.closed = True
