"""Application configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


@dataclass(frozen=True)
class Settings:
    # --- Word comparison ---
    name_similarity_threshold: float = float(
        os.getenv("REHEARSAL_NAME_SIMILARITY", "0.80")
    )

    # --- Alignment ---
    lookahead_window: int = 3  # batch / diff look-ahead
    freeze_locked_on_error: bool = _env_flag("REHEARSAL_FREEZE_ON_ERROR", "true")

    # --- Verdict ---
    default_strict_mode: bool = _env_flag("REHEARSAL_STRICT_MODE", "false")

    # --- Build mode ---
    segment_chunk_size: int = 4

    # --- Logging ---
    log_level: str = os.getenv("REHEARSAL_LOG_LEVEL", "INFO").upper()


settings = Settings()
