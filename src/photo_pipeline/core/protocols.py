"""Protocol definitions for dependency injection and testability."""

from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

from .models import OrientedDimensions, SizeSpec

if TYPE_CHECKING:
    from .image_utils import ImageProbe


class LoggerProtocol(Protocol):
    """Protocol for logging operations."""

    def debug(self, message: str, *args: Any, **kwargs: Any) -> None:
        """Log debug message."""
        ...

    def info(self, message: str, *args: Any, **kwargs: Any) -> None:
        """Log info message."""
        ...

    def warning(self, message: str, *args: Any, **kwargs: Any) -> None:
        """Log warning message."""
        ...

    def error(self, message: str, *args: Any, **kwargs: Any) -> None:
        """Log error message."""
        ...


class VariantRendererProtocol(Protocol):
    """Protocol for producing one resized variant file."""

    async def render(self, source: Path, spec: SizeSpec, dest: Path) -> None:
        """Write ``dest`` from ``source`` according to ``spec``."""
        ...


class OrientationReaderProtocol(Protocol):
    """Protocol for reading orientation-corrected dimensions."""

    async def probe(self, path: Path) -> "ImageProbe":
        """Return format, raw size and orientation tag of an image file."""
        ...

    async def read(self, path: Path) -> OrientedDimensions:
        """Return width/height as a viewer would display them."""
        ...
