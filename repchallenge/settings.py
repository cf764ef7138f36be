from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

DEFAULT_API_URL = "http://localhost:5000"
DEFAULT_TIMEOUT_SEC = 5.0

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class Settings:
    """Environment-level settings (task tracker, storage, logging)."""
    api_url: str = DEFAULT_API_URL
    api_token: Optional[str] = None
    request_timeout: float = DEFAULT_TIMEOUT_SEC
    high_score_file: Optional[Path] = None
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    @property
    def log_level_value(self) -> int:
        return getattr(logging, self.log_level)

    @classmethod
    def from_env(
        cls,
        env: Optional[Mapping[str, str]] = None,
        dotenv_path: Optional[str] = None,
        overrides: Optional[Mapping[str, str]] = None,
    ) -> "Settings":
        """
        Reads REP_* variables. When no mapping is given, a .env file is loaded
        first (existing process variables win over the file). Overrides (from
        the command line) win over both and are applied before validation.
        """
        if env is None:
            load_dotenv(dotenv_path)
            env = os.environ
        if overrides:
            env = {**env, **overrides}

        level = (env.get("REP_LOG_LEVEL") or "INFO").strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {level!r}")

        raw_timeout = env.get("REP_REQUEST_TIMEOUT", "")
        try:
            timeout = float(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT_SEC
        except ValueError:
            raise ValueError(f"REP_REQUEST_TIMEOUT must be a number, got {raw_timeout!r}")
        if timeout <= 0:
            raise ValueError("REP_REQUEST_TIMEOUT must be positive")

        high_score_file = env.get("REP_HIGH_SCORE_FILE") or None
        log_file = env.get("REP_LOG_FILE") or None

        return cls(
            api_url=(env.get("REP_API_URL") or DEFAULT_API_URL).rstrip("/"),
            api_token=env.get("REP_API_TOKEN") or None,
            request_timeout=timeout,
            high_score_file=Path(high_score_file) if high_score_file else None,
            log_level=level,
            log_file=Path(log_file) if log_file else None,
        )
