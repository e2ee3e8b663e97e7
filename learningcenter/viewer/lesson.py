"""
Lesson renderer - HTML for lesson steps and the catalog view.

Features:
- Content steps (intro, rules, examples) with per-text direction
- Pre-quiz banner with the pass threshold
- Catalog progress bar
"""

import html
import re

from learningcenter.schemas import ContentSection, Lesson


# Hebrew and Arabic blocks
RTL_PATTERN = re.compile("[\u0590-\u05FF\u0600-\u06FF]")
LATIN_PATTERN = re.compile(r"[A-Za-z]")

STEP_STYLES = {
    0: "step-intro",
    1: "step-rules",
    2: "step-examples",
}


def get_lesson_css() -> str:
    """Get CSS styles for lesson display."""
    return """
    <style>
    .lesson-step {
        padding: 1.5em;
        border-radius: 12px;
        margin: 1em 0;
        line-height: 1.7;
    }
    .lesson-step h2 {
        color: #1e40af;
        font-size: 1.4em;
        margin-bottom: 0.6em;
    }
    .lesson-step-body {
        white-space: pre-line;
        color: #374151;
    }
    .step-intro { background: #eff6ff; }
    .step-rules { background: #f0fdf4; }
    .step-examples { background: #fefce8; }
    .pre-quiz {
        background: #faf5ff;
        text-align: center;
        padding: 2em;
        border-radius: 12px;
    }
    .pre-quiz h2 {
        color: #6b21a8;
    }
    .progress-outer {
        width: 100%;
        background: #e5e7eb;
        border-radius: 9999px;
        height: 1em;
    }
    .progress-inner {
        background: linear-gradient(90deg, #3b82f6, #22c55e);
        height: 1em;
        border-radius: 9999px;
    }
    </style>
    """


def text_direction(text: str) -> str:
    """
    Pick "rtl" or "ltr" for a block of text.

    Majority script wins; text with no letters is treated as ltr.
    """
    rtl = len(RTL_PATTERN.findall(text))
    ltr = len(LATIN_PATTERN.findall(text))
    return "rtl" if rtl > ltr else "ltr"


def render_section(section: ContentSection, css_class: str = "") -> str:
    """Render one content section (title + body)."""
    direction = text_direction(section.title + section.body)
    parts = [f'<div class="lesson-step {css_class}" dir="{direction}">']
    parts.append(f'<h2>{html.escape(section.title)}</h2>')
    parts.append(f'<div class="lesson-step-body">{html.escape(section.body)}</div>')
    parts.append('</div>')
    return ''.join(parts)


def render_content_step(lesson: Lesson, step: int) -> str:
    """
    Render a content step of a lesson.

    Args:
        lesson: Lesson being viewed
        step: 0 (intro), 1 (rules) or 2 (examples)
    """
    if step not in STEP_STYLES:
        raise ValueError(f"Step {step} is not a content step")
    return render_section(lesson.sections[step], STEP_STYLES[step])


def render_pre_quiz(lesson: Lesson, passing_score: int, rtl: bool = True) -> str:
    """Render the "ready for the quiz?" banner."""
    count = len(lesson.questions)
    if rtl:
        title = "מוכנים למבחן?"
        body = f"המבחן כולל {count} שאלות. צריך לענות נכון על לפחות {passing_score} כדי לעבור."
    else:
        title = "Ready for the Quiz?"
        body = (
            f"The quiz contains {count} questions. "
            f"You need to answer at least {passing_score} correctly to pass."
        )
    direction = "rtl" if rtl else "ltr"
    return (
        f'<div class="pre-quiz" dir="{direction}">'
        f'<h2>{html.escape(title)}</h2>'
        f'<p>{html.escape(body)}</p>'
        '</div>'
    )


def render_lesson_header(lesson: Lesson) -> str:
    direction = text_direction(lesson.display_name + lesson.short_description)
    return (
        f'<div class="lesson-header" dir="{direction}">'
        f'<h1>{html.escape(lesson.display_name)}</h1>'
        f'<p>{html.escape(lesson.short_description)}</p>'
        '</div>'
    )


def render_progress_bar(completion_percent: int) -> str:
    percent = max(0, min(100, int(completion_percent)))
    return (
        '<div class="progress-outer">'
        f'<div class="progress-inner" style="width: {percent}%"></div>'
        '</div>'
    )
