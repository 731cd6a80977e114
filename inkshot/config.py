from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

BACKEND_ENV_VAR = "INKSHOT_DITHER_BACKEND"
MAGICK_PATH_ENV_VAR = "INKSHOT_MAGICK_PATH"
LOG_LEVEL_ENV_VAR = "INKSHOT_LOG_LEVEL"

DEFAULT_BACKEND = "pillow"
DEFAULT_LOG_LEVEL = "WARNING"


@dataclass(frozen=True)
class Settings:
    backend: str = DEFAULT_BACKEND
    magick_path: Optional[str] = None
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        return cls(
            backend=(env.get(BACKEND_ENV_VAR) or DEFAULT_BACKEND).strip().lower(),
            magick_path=env.get(MAGICK_PATH_ENV_VAR) or None,
            log_level=(env.get(LOG_LEVEL_ENV_VAR) or DEFAULT_LOG_LEVEL).strip().upper(),
        )
