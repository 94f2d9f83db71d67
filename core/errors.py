from __future__ import annotations

from typing import Optional


class DictionaryError(Exception):
    """Base error for the dictionary core."""


class ConfigError(DictionaryError):
    """No usable data source URL."""


class TransportError(DictionaryError):
    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
