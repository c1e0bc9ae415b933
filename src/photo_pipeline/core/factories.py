"""Factory classes for creating configured service instances."""

from pathlib import Path
from typing import Any, Dict, Optional

from .logging_config import get_logger
from .models import StorageConfig
from .protocols import LoggerProtocol
from .services import OrientationReader, PhotoStorage, VariantRenderer


class PhotoStorageFactory:
    """Factory for creating the storage pipeline."""

    @staticmethod
    def create_storage(
        config: Optional[StorageConfig] = None,
        logger: Optional[LoggerProtocol] = None,
        config_overrides: Optional[Dict[str, Any]] = None,
        base_dir: Optional[Path] = None,
    ) -> PhotoStorage:
        """
        Create a fully configured storage pipeline.

        Without an explicit config the environment is read (see
        ``StorageConfig.from_env``). Nothing touches the filesystem until the
        caller invokes ``initialize()``.
        """
        if config is None:
            config = StorageConfig.from_env(base_dir)
        if config_overrides:
            config = StorageConfig(**{**config.model_dump(), **config_overrides})

        if logger is None:
            logger = get_logger()

        return PhotoStorage(
            config,
            renderer=VariantRenderer(config.variant_format),
            reader=OrientationReader(),
            logger=logger,
        )
