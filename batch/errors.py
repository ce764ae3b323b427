"""Error types raised by the batch runner."""

from __future__ import annotations

from pathlib import Path


class ConfigurationError(ValueError):
    """A required batch setting (such as the output directory) is missing."""


class ImageReadError(OSError):
    """An input image could not be decoded."""

    def __init__(self, path: Path | str):
        self.path = Path(path)
        super().__init__(f"Failed to read image: {self.path}")


class ImageWriteError(OSError):
    """An output image could not be encoded or written."""

    def __init__(self, path: Path | str, reason: str | None = None):
        self.path = Path(path)
        self.reason = reason
        message = f"Failed to write image: {self.path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
