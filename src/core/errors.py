# core/errors.py
from __future__ import annotations

from typing import Optional


class CoreError(Exception):
    """Base class for every error raised by the scanner and the server supervisor."""


# ---- scanner ----

class InvalidDirectory(CoreError, ValueError):
    def __init__(self, path: str):
        super().__init__(f"Invalid directory path: {path}")
        self.path = path


class TraversalIOError(CoreError, OSError):
    def __init__(self, path: str, cause: OSError):
        super().__init__(f"Failed to read directory {path}: {cause}")
        self.path = path
        self.cause = cause


class ScanCancelled(CoreError):
    def __init__(self, path: str):
        super().__init__(f"Scan of {path} was cancelled")
        self.path = path


# ---- supervisor ----

class LockError(CoreError, RuntimeError):
    """The supervisor lock was poisoned by an unexpected failure; the instance is unusable."""


class _CausedError(CoreError):
    def __init__(self, message: str, cause: Optional[BaseException] = None):
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
        self.cause = cause


class DirectoryResolutionError(_CausedError):
    pass


class SpawnError(_CausedError):
    pass


class TerminationError(_CausedError):
    pass
