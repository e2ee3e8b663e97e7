"""
Learning Center Viewer - Rendering helpers for lesson display.

This module provides:
- Lesson step and catalog rendering
- Quiz question and result display
"""

from .lesson import (
    get_lesson_css,
    text_direction,
    render_section,
    render_content_step,
    render_pre_quiz,
    render_lesson_header,
    render_progress_bar,
)

from .quiz import (
    get_quiz_css,
    option_label,
    render_quiz_question,
    render_quiz_result,
)

__all__ = [
    # Lesson rendering
    "get_lesson_css",
    "text_direction",
    "render_section",
    "render_content_step",
    "render_pre_quiz",
    "render_lesson_header",
    "render_progress_bar",
    # Quiz
    "get_quiz_css",
    "option_label",
    "render_quiz_question",
    "render_quiz_result",
]
