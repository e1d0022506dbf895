"""Centralized configuration loaded from environment variables."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from core.logger import get_logger

logger = get_logger("config")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Invalid integer in environment, using default", var=name, value=raw, default=default)
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Invalid number in environment, using default", var=name, value=raw, default=default)
        return default


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = os.getenv(name)
    if not raw:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass
class StudyBuddyConfig:
    """Runtime settings for the API server and its services.

    Attributes:
        data_dir: Root directory for the JSON data files
        openai_api_key: Key for the remote AI generators (None disables them)
        openai_model: Chat model used for stories and quizzes
        openai_base_url: Base URL of the OpenAI-compatible API
        ai_timeout_seconds: Timeout for a single AI request
        min_content_length: Minimum characters of study text
        max_content_length: Maximum characters of study text
        max_file_size: Maximum upload size in bytes
        story_ttl_days: Days before a stored story expires
        cleanup_interval_hours: Interval of the expired-story sweep (0 = off)
        allowed_origins: CORS origins
        timezone: IANA zone used for streak days (None = server local time)
        environment: development, production or test
        log_level: Root log level
        port: Port used when running ``server.py`` directly
    """

    data_dir: Path = field(default_factory=lambda: Path.cwd() / "data")
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-3.5-turbo"
    openai_base_url: str = "https://api.openai.com/v1"
    ai_timeout_seconds: float = 30.0
    min_content_length: int = 10
    max_content_length: int = 10000
    max_file_size: int = 10 * 1024 * 1024
    story_ttl_days: int = 30
    cleanup_interval_hours: float = 6.0
    allowed_origins: list[str] = field(default_factory=lambda: ["http://localhost:3000"])
    timezone: Optional[str] = None
    environment: str = "development"
    log_level: str = "INFO"
    port: int = 3001

    @property
    def ai_enabled(self) -> bool:
        """Whether the remote generators should be used."""
        return bool(self.openai_api_key)

    @classmethod
    def from_env(cls) -> "StudyBuddyConfig":
        """Build config from environment variables, falling back to defaults."""
        defaults = cls()
        data_dir = os.getenv("DATA_DIR")
        return cls(
            data_dir=Path(data_dir) if data_dir else defaults.data_dir,
            openai_api_key=os.getenv("OPENAI_API_KEY") or None,
            openai_model=os.getenv("OPENAI_MODEL", defaults.openai_model),
            openai_base_url=os.getenv("OPENAI_BASE_URL", defaults.openai_base_url).rstrip("/"),
            ai_timeout_seconds=_env_float("AI_TIMEOUT_SECONDS", defaults.ai_timeout_seconds),
            min_content_length=_env_int("MIN_CONTENT_LENGTH", defaults.min_content_length),
            max_content_length=_env_int("MAX_CONTENT_LENGTH", defaults.max_content_length),
            max_file_size=_env_int("MAX_FILE_SIZE", defaults.max_file_size),
            story_ttl_days=_env_int("STORY_TTL_DAYS", defaults.story_ttl_days),
            cleanup_interval_hours=_env_float("CLEANUP_INTERVAL_HOURS", defaults.cleanup_interval_hours),
            allowed_origins=_env_list("ALLOWED_ORIGINS", defaults.allowed_origins),
            timezone=os.getenv("TIMEZONE") or None,
            environment=os.getenv("ENVIRONMENT", defaults.environment),
            log_level=os.getenv("LOG_LEVEL", defaults.log_level).upper(),
            port=_env_int("PORT", defaults.port),
        )
