# src/catls/errors.py
import threading
from typing import Optional


class CatlsError(Exception):
    """Base class for errors that abort a catls run."""


class ConfigError(CatlsError):
    """Raised for an invalid configuration, before any output is written."""


class PipelineCancelled(CatlsError):
    def __init__(self, message: str = "operation cancelled"):
        super().__init__(message)


class OutputError(CatlsError):
    """Raised when the output stream cannot be written."""


def check_cancelled(cancel: Optional[threading.Event]) -> None:
    if cancel is not None and cancel.is_set():
        raise PipelineCancelled()
