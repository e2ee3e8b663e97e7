"""
Quiz renderer - Multiple-choice question and result display.

Provides:
- Question rendering with lettered options and the current selection
- Pass/fail result panel
"""

import html
from typing import Optional

from learningcenter.schemas import QuizQuestion, QuizResult

from .lesson import text_direction


def get_quiz_css() -> str:
    """Get CSS styles for quiz display."""
    return """
    <style>
    .quiz-container {
        background: white;
        border: 1px solid #e5e7eb;
        border-radius: 12px;
        padding: 1.5em;
        margin: 1.5em 0;
    }
    .quiz-counter {
        color: #6b7280;
        font-size: 0.9em;
    }
    .quiz-question {
        font-size: 1.1em;
        font-weight: 600;
        color: #1f2937;
        margin: 0.6em 0 1em 0;
    }
    .quiz-option {
        border: 1px solid #e5e7eb;
        border-radius: 8px;
        padding: 0.8em 1em;
        margin: 0.4em 0;
    }
    .quiz-option-selected {
        border-color: #3b82f6;
        background: #eff6ff;
        color: #1e40af;
    }
    .quiz-result {
        border-radius: 12px;
        padding: 2em;
        text-align: center;
    }
    .quiz-result-passed { background: #f0fdf4; color: #166534; }
    .quiz-result-failed { background: #fef2f2; color: #991b1b; }
    .quiz-score-value {
        font-size: 2em;
        font-weight: 700;
    }
    </style>
    """


def option_label(index: int) -> str:
    """A, B, C, ... for option positions."""
    return chr(ord("A") + index)


def render_quiz_question(
    question: QuizQuestion,
    index: int,
    total: int,
    selected: Optional[int] = None,
) -> str:
    """
    Render a single quiz question.

    Args:
        question: QuizQuestion to show
        index: 0-based position in the quiz
        total: Number of questions in the quiz
        selected: Currently selected option, if any

    Returns:
        HTML string for the question
    """
    direction = text_direction(question.prompt_text + "".join(question.options))
    parts = [f'<div class="quiz-container" dir="{direction}">']
    parts.append(f'<div class="quiz-counter">{index + 1} / {total}</div>')
    parts.append(f'<div class="quiz-question">{html.escape(question.prompt_text)}</div>')

    for option_index, option in enumerate(question.options):
        css = "quiz-option quiz-option-selected" if option_index == selected else "quiz-option"
        parts.append(
            f'<div class="{css}"><strong>{option_label(option_index)}.</strong> '
            f'{html.escape(option)}</div>'
        )

    parts.append('</div>')
    return ''.join(parts)


def render_quiz_result(result: QuizResult, rtl: bool = True) -> str:
    """Render the pass/fail panel shown after the last question."""
    if rtl:
        title = "כל הכבוד! עברת את השיעור" if result.passed else "לא עברת הפעם"
        detail = f"ענית נכון על {result.score} מתוך {result.total} שאלות"
    else:
        title = "Congratulations! You passed the lesson" if result.passed else "You didn't pass this time"
        detail = f"You answered {result.score} out of {result.total} questions correctly"

    css = "quiz-result-passed" if result.passed else "quiz-result-failed"
    direction = "rtl" if rtl else "ltr"
    return f"""
    <div class="quiz-result {css}" dir="{direction}">
        <h2>{html.escape(title)}</h2>
        <div class="quiz-score-value">{result.percent}%</div>
        <div class="quiz-score-label">{html.escape(detail)}</div>
    </div>
    """
