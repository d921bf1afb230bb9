from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


class TournamentConfigError(ValueError):
    pass


def _bool_env(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() == "true"


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise TournamentConfigError(f"{name} must be a number, got {raw!r}") from exc


def _log_level_env(name: str, default: str = "INFO") -> str:
    level = os.getenv(name, default).strip().upper() or default
    # getLevelName maps known names to their int value and anything else to "Level <x>".
    if not isinstance(logging.getLevelName(level), int):
        raise TournamentConfigError(f"{name} is not a logging level: {level!r}")
    return level


def _path_env(name: str) -> Optional[Path]:
    value = os.getenv(name)
    if not value:
        return None
    return Path(value)


@dataclass(frozen=True)
class Settings:
    data_url: str
    data_dir: Optional[Path]
    request_timeout: float
    output_dir: Optional[Path]
    debug_mode: bool
    log_level: str

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            data_url=os.getenv("TOURNAMENT_DATA_URL", "http://localhost:8000/data"),
            data_dir=_path_env("TOURNAMENT_DATA_DIR"),
            request_timeout=_float_env("TOURNAMENT_REQUEST_TIMEOUT", 30.0),
            output_dir=_path_env("TOURNAMENT_OUTPUT_DIR"),
            debug_mode=_bool_env("DEBUG_MODE"),
            log_level=_log_level_env("LOG_LEVEL"),
        )
