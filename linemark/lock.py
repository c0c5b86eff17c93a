"""Fail-fast advisory locking for commands that change the project."""

from __future__ import annotations

from pathlib import Path
from types import TracebackType
from typing import Protocol

import filelock

DEFAULT_PATH = ".linemark/lock"


class Flocker(Protocol):
    """The minimal interface of a non-blocking file lock."""

    def try_lock(self) -> bool:
        """Attempt to take the lock; return False if it is held elsewhere."""

    def unlock(self) -> None:
        """Release the lock."""


class LockError(Exception):
    """Raised when the lock cannot be acquired or released."""


class AlreadyLockedError(LockError):
    """Raised when another process holds the lock."""

    def __init__(self, message: str = "another lmk command is already running") -> None:
        super().__init__(message)


class AdvisoryLock:
    """Wraps a Flocker; usable as a context manager around a mutation."""

    def __init__(self, flocker: Flocker) -> None:
        self._flocker = flocker

    def try_lock(self) -> None:
        """Take the lock without waiting, or raise AlreadyLockedError."""
        try:
            acquired = self._flocker.try_lock()
        except OSError as exc:
            raise LockError(f"acquiring lock: {exc}") from exc
        if not acquired:
            raise AlreadyLockedError()

    def unlock(self) -> None:
        """Release the lock."""
        try:
            self._flocker.unlock()
        except OSError as exc:
            raise LockError(f"releasing lock: {exc}") from exc

    def __enter__(self) -> AdvisoryLock:
        self.try_lock()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.unlock()


class _FileLockFlocker:
    def __init__(self, path: str | Path) -> None:
        self._lock = filelock.FileLock(str(path))

    def try_lock(self) -> bool:
        try:
            self._lock.acquire(timeout=0)
        except filelock.Timeout:
            return False
        return True

    def unlock(self) -> None:
        self._lock.release()


def lock_at(path: str | Path) -> AdvisoryLock:
    """An advisory lock backed by the file at ``path``."""
    return AdvisoryLock(_FileLockFlocker(path))