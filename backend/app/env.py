from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv


def env_candidates() -> List[Path]:
    """``backend/.env`` first, then the repository root."""
    here = Path(__file__).resolve()
    return [here.parents[1] / ".env", here.parents[2] / ".env"]


def load_env(override: bool = False) -> Optional[Path]:
    """Load the first ``.env`` found; returns its path, or None if none existed.

    Values already present in the process environment win unless ``override``.
    """
    for path in env_candidates():
        if path.is_file():
            load_dotenv(path, override=override)
            break
    else:
        load_dotenv(override=override)
        path = None

    os.environ.setdefault("LOG_LEVEL", "INFO")
    return path
