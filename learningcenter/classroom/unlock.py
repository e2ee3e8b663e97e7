"""
Lesson unlock policy.

Lessons form a strict linear chain: the first lesson is always open, every
other lesson opens once the one before it is completed. Unlock state is
derived from `completed` on every call and never stored.
"""

from typing import Optional, Sequence

from learningcenter.schemas import ProgressSnapshot


def previous_lesson_id(lesson_id: str, catalog_order: Sequence[str]) -> Optional[str]:
    """The lesson that must be completed first, or None for the first lesson."""
    position = list(catalog_order).index(lesson_id)
    return catalog_order[position - 1] if position > 0 else None


def is_unlocked(lesson_id: str, snapshot: ProgressSnapshot, catalog_order: Sequence[str]) -> bool:
    """Whether a lesson may be entered given the user's progress."""
    if lesson_id not in catalog_order:
        return False
    prerequisite = previous_lesson_id(lesson_id, catalog_order)
    if prerequisite is None:
        return True
    return snapshot.get(prerequisite).completed


def unlocked_lesson_ids(snapshot: ProgressSnapshot, catalog_order: Sequence[str]) -> list[str]:
    return [lesson_id for lesson_id in catalog_order if is_unlocked(lesson_id, snapshot, catalog_order)]
