"""
Configuration for the Learning Center.

Settings come from environment variables, after loading a .env file from the
project root (python-dotenv). Variables already set in the environment win.

    LEARNING_CENTER_DB           SQLite progress database
    LEARNING_CENTER_CACHE_DIR    Local progress cache directory
    LEARNING_CENTER_CONTENT      Lesson content name or YAML path
    LEARNING_CENTER_LOG_LEVEL    Logging level (default INFO)
    LEARNING_CENTER_ADMINS       Comma-separated user ids with admin access
    SUPABASE_URL                 Supabase project URL (enables the Supabase backend)
    SUPABASE_ANON_KEY            Supabase anon key
"""

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, field_validator

from learningcenter.classroom.catalog import LessonCatalog
from learningcenter.classroom.progress import (
    DEFAULT_CACHE_DIR,
    DEFAULT_PROGRESS_DB,
    LocalProgressCache,
    ProgressBackend,
    ProgressStore,
    SQLiteProgressBackend,
    SupabaseProgressBackend,
)


PROJECT_ROOT = Path(__file__).parent.parent
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


class Settings(BaseModel):
    db_path: Path = DEFAULT_PROGRESS_DB
    cache_dir: Path = DEFAULT_CACHE_DIR
    content: Optional[str] = None
    log_level: str = "INFO"
    supabase_url: Optional[str] = None
    supabase_anon_key: Optional[str] = None
    admin_user_ids: list[str] = []

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {value}")
        return level

    @field_validator("admin_user_ids", mode="before")
    @classmethod
    def _split_admin_ids(cls, value):
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return value

    @property
    def uses_supabase(self) -> bool:
        return bool(self.supabase_url and self.supabase_anon_key)


ENV_FIELDS = {
    "LEARNING_CENTER_DB": "db_path",
    "LEARNING_CENTER_CACHE_DIR": "cache_dir",
    "LEARNING_CENTER_CONTENT": "content",
    "LEARNING_CENTER_LOG_LEVEL": "log_level",
    "LEARNING_CENTER_ADMINS": "admin_user_ids",
    "SUPABASE_URL": "supabase_url",
    "SUPABASE_ANON_KEY": "supabase_anon_key",
}


def load_settings(env_file: Optional[Path] = None, environ: Optional[dict] = None) -> Settings:
    """
    Build settings from the environment.

    Args:
        env_file: .env file to load first (default: PROJECT_ROOT/.env)
        environ: Mapping to read instead of os.environ (no .env loading)
    """
    if environ is None:
        load_dotenv(env_file or PROJECT_ROOT / ".env")
        environ = os.environ

    values = {
        field: environ[name]
        for name, field in ENV_FIELDS.items()
        if environ.get(name)
    }
    return Settings(**values)


def configure_logging(level: str = "INFO"):
    logging.basicConfig(level=level, format=LOG_FORMAT)


def build_backend(settings: Settings) -> ProgressBackend:
    if settings.uses_supabase:
        return SupabaseProgressBackend(settings.supabase_url, settings.supabase_anon_key)
    return SQLiteProgressBackend(settings.db_path.expanduser())


def build_progress_store(settings: Settings, catalog: LessonCatalog) -> ProgressStore:
    """Wire the configured backend and local cache for a catalog."""
    return ProgressStore(
        backend=build_backend(settings),
        cache=LocalProgressCache(settings.cache_dir.expanduser()),
        lesson_ids=catalog.list_lesson_ids(),
    )
