#!/usr/bin/env python3
"""
check_catalog.py - Validate a lesson content file.

Loads the content through the same validation the app uses and prints a
per-lesson summary: question count and the score needed to pass.

Usage:
  python scripts/check_catalog.py
  python scripts/check_catalog.py --content path/to/lessons.yaml
"""

import argparse
import logging
import sys
from pathlib import Path

# Project root for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from learningcenter.classroom import load_catalog, passing_threshold
from learningcenter.errors import CatalogError

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(
        description="Validate lesson content and print a summary.",
    )
    parser.add_argument(
        "--content",
        type=str,
        default=None,
        help="Content name or YAML path (default: bundled lessons)",
    )
    parser.add_argument(
        "--allow-empty-quiz",
        action="store_true",
        help="Accept lessons without quiz questions",
    )
    args = parser.parse_args()

    try:
        catalog = load_catalog(args.content, allow_empty_quiz=args.allow_empty_quiz)
    except CatalogError as e:
        logger.error(f"Invalid lesson content: {e.message}")
        sys.exit(1)

    for position, lesson in enumerate(catalog.lessons(), start=1):
        count = len(lesson.questions)
        print(f"{position:>3}. {lesson.id:<12} {count} questions, pass at {passing_threshold(count)}")
        if count == 0:
            logger.warning(f"  {lesson.id} has no quiz and can be completed without answering anything")

    print(f"{len(catalog)} lessons OK")


if __name__ == "__main__":
    main()
