"""
Lesson content schemas for the Learning Center.

Defines Pydantic models for catalog content:
- Content sections (intro, rules, examples)
- Multiple-choice quiz questions with an answer key
- Lessons and the content file that holds them
"""

import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


LESSON_ORDINAL_PATTERN = re.compile(r"(\d+)$")


def lesson_ordinal(lesson_id: str) -> Optional[int]:
    """Return the ordinal embedded at the end of a lesson id (``lesson12`` -> 12)."""
    match = LESSON_ORDINAL_PATTERN.search(lesson_id)
    return int(match.group(1)) if match else None


class ContentSection(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    body: str


class QuizQuestion(BaseModel):
    """A multiple-choice question with exactly one correct option."""
    model_config = ConfigDict(frozen=True)

    prompt_text: str
    options: list[str] = Field(..., min_length=1)
    correct_option_index: int = Field(..., ge=0)

    @model_validator(mode="after")
    def _check_answer_key(self) -> "QuizQuestion":
        if self.correct_option_index >= len(self.options):
            raise ValueError(
                f"correct_option_index {self.correct_option_index} out of range "
                f"for {len(self.options)} options"
            )
        return self

    def is_correct(self, option_index: Optional[int]) -> bool:
        return option_index is not None and option_index == self.correct_option_index


class Lesson(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    display_name: str
    short_description: str = ""
    intro: ContentSection
    rules: ContentSection
    examples: ContentSection
    questions: list[QuizQuestion] = []

    @field_validator("id")
    @classmethod
    def _check_ordinal(cls, value: str) -> str:
        if lesson_ordinal(value) is None:
            raise ValueError(f"lesson id '{value}' has no embedded ordinal")
        return value

    @property
    def ordinal(self) -> int:
        return lesson_ordinal(self.id)

    @property
    def sections(self) -> tuple[ContentSection, ContentSection, ContentSection]:
        """Content sections in the order they are taught."""
        return (self.intro, self.rules, self.examples)


class LessonFile(BaseModel):
    """Top-level shape of a lesson content file."""
    version: int = 1
    lessons: list[Lesson]
