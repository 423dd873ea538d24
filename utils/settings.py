"""Process-level defaults read from the environment (CLI only)."""

import logging
import os
from dataclasses import dataclass

from models.search_policy import SearchPolicy


@dataclass(frozen=True)
class Settings:
    """Defaults the CLI applies when flags are not given."""
    
    codec: str = 'opencv'
    min_dimension: int = 64
    quality_step: int = 15
    log_level: str = 'WARNING'
    
    def search_policy(self) -> SearchPolicy:
        return SearchPolicy(quality_step=self.quality_step, min_dimension=self.min_dimension)


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _level_env(name: str, default: str) -> str:
    level = (os.getenv(name) or '').strip().upper() or default
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"{name} must be a logging level name, got {level!r}")
    return level


def load_settings() -> Settings:
    """Build Settings from IMGBUDGET_* environment variables."""
    return Settings(
        codec=os.getenv('IMGBUDGET_CODEC', 'opencv'),
        min_dimension=_int_env('IMGBUDGET_MIN_DIMENSION', 64),
        quality_step=_int_env('IMGBUDGET_QUALITY_STEP', 15),
        log_level=_level_env('IMGBUDGET_LOG_LEVEL', 'WARNING'),
    )
