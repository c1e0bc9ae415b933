# src/photo_pipeline/core/error_handling.py

import functools
import logging
from typing import Any, Dict, List, Optional

from PIL import Image, UnidentifiedImageError

from .exceptions import DecodeError, PhotoPipelineError
from .protocols import LoggerProtocol

DECODE_ERRORS = (UnidentifiedImageError, Image.DecompressionBombError, SyntaxError)


def with_error_handling(func):
    """
    A decorator to wrap functions with standardized error handling.

    Pipeline errors pass through untouched, Pillow's "not an image" errors
    become ``DecodeError``, everything else is logged and re-raised.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger = logging.getLogger(func.__module__ + '.' + func.__name__)
        try:
            return func(*args, **kwargs)
        except PhotoPipelineError:
            raise
        except DECODE_ERRORS as e:
            logger.error(f"Error in '{func.__name__}': {e}", exc_info=True)
            raise DecodeError(f"Failed to decode image in {func.__name__}: {e}") from e
        except Exception as e:
            logger.error(f"Error in '{func.__name__}': {e}", exc_info=True)
            raise
    return wrapper


class VariantBatchContext:
    """
    Context manager for one item's variant renders to collect and summarize errors.

    Failures are reported with ``add_error`` and never abort the batch; any
    exception that escapes the ``with`` block is logged and propagated.
    """
    def __init__(self, item_id: str, logger: Optional[LoggerProtocol] = None):
        self.item_id = item_id
        self.errors: List[Dict[str, str]] = []
        self.succeeded: List[str] = []
        self.logger = logger or logging.getLogger(
            self.__class__.__module__ + '.' + self.__class__.__name__
        )

    def __enter__(self) -> "VariantBatchContext":
        self.logger.debug(f"[{self.item_id}] Rendering variants")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_type:
            self.logger.error(
                f"[{self.item_id}] Variant rendering aborted by unhandled exception: {exc_val}"
            )
        elif self.errors:
            self.logger.warning(
                f"[{self.item_id}] {len(self.succeeded)} variant(s) written, "
                f"{len(self.errors)} failed"
            )
            for i, detail in enumerate(self.errors):
                self.logger.error(
                    f"  [{self.item_id}] Variant {i + 1}/{len(self.errors)} "
                    f"'{detail['size']}': {detail['error']}"
                )
        else:
            self.logger.debug(
                f"[{self.item_id}] All {len(self.succeeded)} variant(s) written"
            )
        return False

    def add_success(self, size_name: str) -> None:
        self.succeeded.append(size_name)

    def add_error(self, size_name: str, error: Any) -> None:
        """Record a failed variant; the batch keeps going."""
        self.errors.append({"size": size_name, "error": str(error)})

    @property
    def failed(self) -> List[str]:
        return [detail["size"] for detail in self.errors]
