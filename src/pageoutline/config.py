"""Application configuration.

Configuration is loaded from environment variables. For local development, you can provide a
`.env` file and set `PAGEOUTLINE_ENV_FILE` to point to it.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from pageoutline.models.outline import OutlineOptions


class Settings(BaseSettings):
    """pageoutline settings.

    All fields are environment-configurable. Prefix is `PAGEOUTLINE_`.
    """

    model_config = SettingsConfigDict(
        env_prefix="PAGEOUTLINE_",
        env_file=None,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Core
    log_level: str = Field(default="INFO")

    # Rendering
    max_lines: int = Field(default=100, ge=1, le=100_000)
    min_group_size: int = Field(default=3, ge=3, le=100)
    text_limit: int = Field(default=50, ge=1, le=1000)
    fold_ref_limit: int = Field(default=5, ge=1, le=100)
    sample_children: int = Field(default=3, ge=0, le=3)
    priority_boost: int = Field(default=9, ge=0, le=11)
    boost_lines: int = Field(default=5, ge=0, le=100)

    # Similarity
    similarity_threshold: int = Field(default=3, ge=0, le=32)
    fingerprint_cache_size: int = Field(default=50_000, ge=1)

    # Output
    max_tokens: int = Field(default=20_000, ge=100)

    # Batch
    max_concurrent: int = Field(default=4, ge=1, le=64)

    def outline_options(self, **overrides: int | None) -> OutlineOptions:
        """Build per-call outline options from settings.

        Args:
            **overrides: Option values that win over the configured ones. ``None`` values
                are ignored.
        """

        values = {
            "max_lines": self.max_lines,
            "min_group_size": self.min_group_size,
            "text_limit": self.text_limit,
            "fold_ref_limit": self.fold_ref_limit,
            "sample_children": self.sample_children,
            "similarity_threshold": self.similarity_threshold,
            "priority_boost": self.priority_boost,
            "boost_lines": self.boost_lines,
            "fingerprint_cache_size": self.fingerprint_cache_size,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return OutlineOptions(**values)


def load_settings() -> Settings:
    """Load settings from env.

    Returns:
        Settings: Parsed settings.
    """

    env_file_override = os.getenv("PAGEOUTLINE_ENV_FILE")
    if env_file_override:
        env_path = Path(env_file_override)
        return Settings(_env_file=env_path)

    default_env = Path.cwd() / ".env"
    if default_env.exists():
        return Settings(_env_file=default_env)

    return Settings()
