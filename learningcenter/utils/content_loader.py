"""
Content loader utility for the Learning Center.

Loads YAML lesson content files from the bundled data/ directory.
"""

from pathlib import Path
from typing import Any
import yaml


# Default content directory (inside the package)
CONTENT_DIR = Path(__file__).parent.parent / "data"
DEFAULT_CONTENT_NAME = "lessons"


def resolve_content_path(source: str | Path | None = None, content_dir: Path | None = None) -> Path:
    """
    Resolve a content file from a name or a path.

    Args:
        source: Content name without .yaml extension (e.g., "lessons"),
            or a path to a YAML file. Defaults to the bundled lessons.
        content_dir: Optional custom content directory for names

    Returns:
        Path to the YAML file (not checked for existence)
    """
    if source is None:
        source = DEFAULT_CONTENT_NAME
    path = Path(source)
    if path.suffix in (".yaml", ".yml"):
        return path
    return (content_dir or CONTENT_DIR) / f"{source}.yaml"


def load_content(source: str | Path | None = None, content_dir: Path | None = None) -> dict[str, Any]:
    """
    Load a lesson content file.

    Returns:
        Dict containing the parsed YAML with keys:
        - version: content format version
        - lessons: list of lesson mappings

    Raises:
        FileNotFoundError: If the content file doesn't exist
        yaml.YAMLError: If YAML parsing fails
    """
    file_path = resolve_content_path(source, content_dir)

    if not file_path.exists():
        raise FileNotFoundError(f"Lesson content not found: {file_path}")

    with open(file_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def get_available_content(content_dir: Path | None = None) -> list[str]:
    """List bundled content files (names without .yaml extension)."""
    dir_path = content_dir or CONTENT_DIR
    if not dir_path.exists():
        return []
    return sorted(p.stem for p in dir_path.glob("*.yaml"))
