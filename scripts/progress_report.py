#!/usr/bin/env python3
"""
progress_report.py - Print a user's Learning Center progress.

Reads from the configured progress store (.env / environment), falling back
to the local cache if the store is unreachable.

Usage:
  python scripts/progress_report.py --user 7f3c...
"""

import argparse
import sys
from pathlib import Path

# Project root for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from learningcenter.classroom import Navigator, load_catalog
from learningcenter.config import build_progress_store, configure_logging, load_settings
from learningcenter.identity import StaticIdentityProvider


def main():
    parser = argparse.ArgumentParser(
        description="Print a user's lesson progress.",
    )
    parser.add_argument("--user", required=True, help="User id")
    args = parser.parse_args()

    settings = load_settings()
    configure_logging(settings.log_level)

    catalog = load_catalog(settings.content)
    store = build_progress_store(settings, catalog)
    nav = Navigator(catalog, store, StaticIdentityProvider(args.user))

    load = nav.load_progress()
    if load.degraded:
        print(f"WARNING: {load.warning}")

    for nav_lesson in nav.get_navigation_tree():
        record = nav.snapshot.get(nav_lesson.lesson.id)
        print(
            f"{nav.get_status_indicator(nav_lesson.lesson.id)} "
            f"{nav_lesson.position}. {nav_lesson.lesson.id:<12} "
            f"{nav_lesson.availability.value:<10} "
            f"{record.status.value:<12} "
            f"quiz {record.quiz_score}/{nav_lesson.question_count}"
        )

    stats = nav.get_progress_summary()
    print(f"Completed {stats['completed']} of {stats['total_lessons']} lessons ({stats['completion_percent']}%)")


if __name__ == "__main__":
    main()
