"""
Error types for the Learning Center.

Every error carries a short, stable ``code`` so the front end can pick the
right affordance (access denied, disabled button, "progress may not be saved")
without matching on message text.
"""

from typing import Optional


class LearningCenterError(Exception):
    """Base class for all Learning Center errors."""

    code = "LC_000"

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(f"[{self.code}] {message}")


# -----------------------------------------------------------------------------
# Content
# -----------------------------------------------------------------------------

class LessonNotFound(LearningCenterError, KeyError):
    """Lesson id is not part of the catalog."""

    code = "LC_101"

    def __init__(self, lesson_id: str):
        self.lesson_id = lesson_id
        super().__init__(f"Lesson not found: {lesson_id}", {"lesson_id": lesson_id})

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return Exception.__str__(self)


class CatalogError(LearningCenterError, ValueError):
    """Lesson content failed validation."""

    code = "LC_102"


# -----------------------------------------------------------------------------
# Session
# -----------------------------------------------------------------------------

class LessonLocked(LearningCenterError):
    """Attempted to open a lesson whose prerequisite is incomplete."""

    code = "LC_201"

    def __init__(self, lesson_id: str, prerequisite_id: Optional[str] = None):
        self.lesson_id = lesson_id
        self.prerequisite_id = prerequisite_id
        message = f"Lesson {lesson_id} is locked"
        if prerequisite_id:
            message += f" until {prerequisite_id} is completed"
        super().__init__(message, {"lesson_id": lesson_id, "prerequisite_id": prerequisite_id})


class AnswerRequired(LearningCenterError):
    """Attempted to advance a quiz question with no selection."""

    code = "LC_202"


class InvalidRetry(LearningCenterError):
    """Retry requested outside of a failed, revealed attempt."""

    code = "LC_203"


class InvalidTransition(LearningCenterError):
    """Transition not defined for the current session step."""

    code = "LC_204"


# -----------------------------------------------------------------------------
# Persistence and identity
# -----------------------------------------------------------------------------

class PersistenceUnavailable(LearningCenterError):
    """Progress store read or write failed."""

    code = "LC_301"

    def __init__(self, message: str, failures: Optional[dict[str, str]] = None):
        self.failures = dict(failures or {})
        super().__init__(message, {"failures": self.failures})


class AuthenticationRequired(LearningCenterError):
    """No signed-in user to key progress records."""

    code = "LC_401"
