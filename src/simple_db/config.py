"""Settings for simple_db storage and console tools."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping, Optional

ENV_PATH = "SIMPLE_DB_PATH"
ENV_FSYNC = "SIMPLE_DB_FSYNC"
ENV_LOG_LEVEL = "SIMPLE_DB_LOG_LEVEL"

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")


@dataclass(frozen=True)
class Settings:
    """Runtime settings.

    default_path: database file used by console tools when none is given.
    fsync: fsync the temporary file before renaming it over the target.
    log_level: level name passed to logging.basicConfig by console tools.
    """

    default_path: Optional[Path] = None
    fsync: bool = True
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        level = self.log_level.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Invalid log level: {self.log_level}")
        object.__setattr__(self, "log_level", level)
        if self.default_path is not None and not isinstance(self.default_path, Path):
            object.__setattr__(self, "default_path", Path(self.default_path))

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from environment variables."""
        env = os.environ if environ is None else environ
        settings = cls()

        path = env.get(ENV_PATH)
        if path:
            settings = replace(settings, default_path=Path(path))

        fsync = env.get(ENV_FSYNC)
        if fsync is not None:
            settings = replace(settings, fsync=_parse_bool(ENV_FSYNC, fsync))

        level = env.get(ENV_LOG_LEVEL)
        if level:
            settings = replace(settings, log_level=level)

        return settings


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"Invalid boolean for {name}: {raw!r}")
