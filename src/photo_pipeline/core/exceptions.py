"""Custom exceptions for the photo pipeline."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator


class PhotoPipelineError(Exception):
    """Base exception for all photo pipeline errors."""


class DecodeError(PhotoPipelineError):
    """Error raised when a source file cannot be parsed as an image."""


class RenderError(PhotoPipelineError):
    """Error raised when resizing or encoding a single variant fails."""


class StorageError(PhotoPipelineError):
    """Error raised for directory create, copy, move or remove failures."""


class ConfigurationError(PhotoPipelineError):
    """Error raised for invalid configuration options."""


@contextmanager
def storage_operation(description: str) -> Iterator[Any]:
    """Turn filesystem ``OSError`` into ``StorageError``."""
    try:
        yield
    except PhotoPipelineError:
        raise
    except OSError as exc:
        raise StorageError(f"{description} failed: {exc}") from exc
