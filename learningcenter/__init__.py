"""
Learning Center - Lesson progression engine for the community site.

Sequential lessons unlocked by passing quizzes, with progress persisted per
user. See learningcenter.classroom for the runtime components.
"""

__version__ = "0.1.0"
