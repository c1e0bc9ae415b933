"""Fake implementations for testing purposes."""

import io
import time
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from PIL import Image

from ..core.exceptions import RenderError
from ..core.image_utils import ORIENTATION_TAG, ImageProbe, oriented_dimensions
from ..core.models import OrientedDimensions, SizeSpec
from ..core.services import VariantRenderer


class FakeLogger:
    """Fake logger for testing that keeps every record in memory."""

    def __init__(self, name: str = "test_logger"):
        self.name = name
        self.logs: List[Dict[str, Any]] = []

    def _log(self, level: str, message: str, *args: Any, **kwargs: Any) -> None:
        if args:
            message = message % args
        self.logs.append(
            {"level": level, "message": message, "timestamp": time.time(), **kwargs}
        )

    def debug(self, message: str, *args: Any, **kwargs: Any) -> None:
        """Log debug message."""
        self._log("DEBUG", message, *args, **kwargs)

    def info(self, message: str, *args: Any, **kwargs: Any) -> None:
        """Log info message."""
        self._log("INFO", message, *args, **kwargs)

    def warning(self, message: str, *args: Any, **kwargs: Any) -> None:
        """Log warning message."""
        self._log("WARNING", message, *args, **kwargs)

    def error(self, message: str, *args: Any, **kwargs: Any) -> None:
        """Log error message."""
        self._log("ERROR", message, *args, **kwargs)

    def get_logs(self, level: Optional[str] = None) -> List[Dict[str, Any]]:
        """Get logged messages, optionally filtered by level."""
        if level:
            return [log for log in self.logs if log["level"] == level]
        return self.logs.copy()

    def clear_logs(self) -> None:
        self.logs.clear()


class RecordingRenderer:
    """Renderer that records calls and delegates to the real renderer."""

    def __init__(self, delegate: Optional[VariantRenderer] = None):
        self.calls: List[Tuple[Path, str, Path]] = []
        self._delegate = delegate or VariantRenderer()

    async def render(self, source: Path, spec: SizeSpec, dest: Path) -> None:
        self.calls.append((Path(source), spec.name, Path(dest)))
        await self._delegate.render(source, spec, dest)


class FailingRenderer(RecordingRenderer):
    """Renderer that raises ``RenderError`` for selected size names."""

    def __init__(self, failing: Iterable[str], delegate: Optional[VariantRenderer] = None):
        super().__init__(delegate)
        self.failing = set(failing)

    async def render(self, source: Path, spec: SizeSpec, dest: Path) -> None:
        if spec.name in self.failing:
            self.calls.append((Path(source), spec.name, Path(dest)))
            raise RenderError(f"Simulated render failure for '{spec.name}'")
        await super().render(source, spec, dest)


class StubOrientationReader:
    """Reader that returns a fixed probe and records every path it was asked about."""

    def __init__(self, probe: ImageProbe):
        self.result = probe
        self.calls: List[Path] = []

    async def probe(self, path: Path) -> ImageProbe:
        self.calls.append(Path(path))
        return self.result

    async def read(self, path: Path) -> OrientedDimensions:
        return oriented_dimensions(await self.probe(path))


def create_test_image(
    width: int = 100,
    height: int = 100,
    orientation: Optional[int] = None,
    format: str = "JPEG",
    mode: str = "RGB",
) -> bytes:
    """
    Create a test image in memory.

    The left half is red and the right half blue so rotations are visible.
    ``orientation`` writes an EXIF Orientation tag with the raw grid untouched.
    """
    color = (255, 0, 0) if mode == "RGB" else 0
    image = Image.new(mode, (width, height), color=color)
    if mode == "RGB" and width > 1:
        image.paste((0, 0, 255), (width // 2, 0, width, height))

    save_kwargs: Dict[str, Any] = {}
    if format == "JPEG":
        save_kwargs["quality"] = 90
    if orientation is not None:
        exif = Image.Exif()
        exif[ORIENTATION_TAG] = orientation
        save_kwargs["exif"] = exif

    img_bytes = io.BytesIO()
    image.save(img_bytes, format=format, **save_kwargs)
    return img_bytes.getvalue()


def write_test_image(path: Path, width: int = 100, height: int = 100, **kwargs: Any) -> Path:
    """Write ``create_test_image`` output to ``path`` and return it."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(create_test_image(width, height, **kwargs))
    return path
