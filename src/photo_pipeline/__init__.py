"""Photo ingestion and image-variant storage pipeline."""

from .core import (
    DEFAULT_SIZE_SPECS,
    DecodeError,
    OrientedDimensions,
    PhotoPipelineError,
    PhotoStorage,
    RenderError,
    SizeSpec,
    StorageConfig,
    StorageError,
)
from .core.factories import PhotoStorageFactory

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_SIZE_SPECS",
    "DecodeError",
    "OrientedDimensions",
    "PhotoPipelineError",
    "PhotoStorage",
    "PhotoStorageFactory",
    "RenderError",
    "SizeSpec",
    "StorageConfig",
    "StorageError",
]
