"""Core utilities and shared components for the photo pipeline."""

from .image_utils import (
    calculate_target_size,
    is_rotated_orientation,
    probe_image,
    read_oriented_dimensions,
    render_variant,
)
from .logging_config import ItemLogger, get_logger, setup_logger
from .exceptions import (
    PhotoPipelineError,
    DecodeError,
    RenderError,
    StorageError,
    ConfigurationError,
    storage_operation,
)
from .models import DEFAULT_SIZE_SPECS, OrientedDimensions, SizeSpec, StorageConfig
from .paths import UNCATEGORIZED, media_type_for, resolve_item_dir
from .services import OrientationReader, PhotoStorage, VariantRenderer

__all__ = [
    "SizeSpec",
    "OrientedDimensions",
    "StorageConfig",
    "DEFAULT_SIZE_SPECS",
    "UNCATEGORIZED",
    "resolve_item_dir",
    "media_type_for",
    "calculate_target_size",
    "is_rotated_orientation",
    "probe_image",
    "read_oriented_dimensions",
    "render_variant",
    "OrientationReader",
    "VariantRenderer",
    "PhotoStorage",
    "setup_logger",
    "get_logger",
    "ItemLogger",
    "PhotoPipelineError",
    "DecodeError",
    "RenderError",
    "StorageError",
    "ConfigurationError",
    "storage_operation",
]
