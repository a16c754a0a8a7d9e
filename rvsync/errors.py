"""Errors raised while syncing a project library."""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum

from .link import LinkError


class SyncErrorKind(Enum):
    IO = "io"
    LINK = "link"
    INSTALL = "install"
    HTTP = "http"
    SYNC_FAILED = "sync_failed"


class SyncError(Exception):
    """A sync step failed; the underlying error is kept as ``cause``."""

    def __init__(self, cause: BaseException, kind: SyncErrorKind | None = None) -> None:
        if kind is None:
            if isinstance(cause, LinkError):
                kind = SyncErrorKind.LINK
            elif isinstance(cause, OSError):
                kind = SyncErrorKind.IO
            else:
                raise TypeError(f"Cannot infer the kind of sync error for {cause!r}")
        self.kind = kind
        self.cause = cause
        super().__init__(self._message())
        self.__cause__ = cause

    def _message(self) -> str:
        if self.kind is SyncErrorKind.LINK:
            return f"Failed to link files from cache: {self.cause!r})"
        if self.kind is SyncErrorKind.INSTALL:
            return f"Failed to install R package: {self.cause})"
        if self.kind is SyncErrorKind.HTTP:
            return f"Failed to download package: {self.cause!r})"
        return str(self.cause)


class SyncFailedError(SyncError):
    """Some packages could not be installed."""

    def __init__(self, errors: Iterable[tuple[str, SyncError]]) -> None:
        self.errors = list(errors)
        self.kind = SyncErrorKind.SYNC_FAILED
        self.cause = None
        Exception.__init__(self, self._message())

    def _message(self) -> str:
        lines = ["Failed to install dependencies."]
        for dep, error in self.errors:
            lines.append(f"\n    Failed to install {dep}:\n        {error}")
        return "".join(lines)