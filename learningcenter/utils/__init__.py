"""Learning Center utilities."""

from .content_loader import (
    CONTENT_DIR,
    load_content,
    resolve_content_path,
    get_available_content,
)

__all__ = [
    "CONTENT_DIR",
    "load_content",
    "resolve_content_path",
    "get_available_content",
]
