"""Runtime settings for the dictionary app.

All settings can be overridden via environment variables or by passing
values directly to ``load_config``.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields
from typing import Optional

DEFAULT_SHEET_URL = (
    "https://docs.google.com/spreadsheets/d/1cFYXLvqtv8bMo31u2etTbJq-PDqjGYqeGvFcfQ1V2Bg/export?format=csv"
)
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass
class AppConfig:
    sheet_url: Optional[str] = DEFAULT_SHEET_URL
    state_path: str = ".dictionary_state.json"
    fetch_timeout: float = 15.0
    log_level: str = "INFO"


def load_config(**overrides) -> AppConfig:
    """Build an AppConfig with env-var and keyword overrides.

    Resolution order (later wins):
      1. Dataclass defaults
      2. Environment variables
      3. Explicit keyword arguments

    Supported env vars:
      - DICTIONARY_SHEET_URL  (empty string disables fetching)
      - DICTIONARY_STATE_PATH
      - DICTIONARY_FETCH_TIMEOUT  (seconds)
      - DICTIONARY_LOG_LEVEL
    """
    cfg = AppConfig()

    sheet_url = os.getenv("DICTIONARY_SHEET_URL")
    if sheet_url is not None:
        cfg.sheet_url = sheet_url.strip() or None

    state_path = os.getenv("DICTIONARY_STATE_PATH")
    if state_path:
        cfg.state_path = state_path

    timeout = os.getenv("DICTIONARY_FETCH_TIMEOUT")
    if timeout:
        cfg.fetch_timeout = float(timeout)

    log_level = os.getenv("DICTIONARY_LOG_LEVEL")
    if log_level:
        cfg.log_level = log_level.strip().upper()

    known = {f.name for f in fields(AppConfig)}
    for key, value in overrides.items():
        if key not in known:
            raise TypeError(f"Unknown config key: {key}")
        setattr(cfg, key, value)
    return cfg


def configure_logging(level: str = "INFO") -> None:
    """Install a root handler once; later calls only adjust the level."""
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format=LOG_FORMAT)
    root.setLevel(level.upper())
