"""Image inspection and variant rendering utilities for the photo pipeline."""

from pathlib import Path
from typing import NamedTuple, Tuple

from PIL import Image, ImageOps

from .error_handling import DECODE_ERRORS, with_error_handling
from .exceptions import DecodeError, RenderError
from .models import OrientedDimensions, SizeSpec

ORIENTATION_TAG = 274  # EXIF Orientation
DEFAULT_ORIENTATION = 1
# Orientations 5-8 transpose the grid (rotate 90 degrees, optionally mirrored)
ROTATED_ORIENTATIONS = frozenset({5, 6, 7, 8})

ACCEPTED_INPUT_FORMATS = frozenset({"JPEG", "PNG", "WEBP"})


class ImageProbe(NamedTuple):
    """Header-level facts about an image file."""

    format: str
    width: int
    height: int
    orientation: int


def is_rotated_orientation(orientation: int) -> bool:
    """Return True when the orientation swaps width and height for display."""
    return orientation in ROTATED_ORIENTATIONS


@with_error_handling
def probe_image(path: Path) -> ImageProbe:
    """
    Read format, raw pixel size and EXIF orientation without decoding pixels.

    Args:
        path: Image file on disk

    Returns:
        ImageProbe for the file; orientation defaults to 1 when absent

    Raises:
        DecodeError: If the file cannot be opened as an image
    """
    try:
        with Image.open(path) as img:
            orientation = img.getexif().get(ORIENTATION_TAG, DEFAULT_ORIENTATION)
            if not isinstance(orientation, int):
                orientation = DEFAULT_ORIENTATION
            return ImageProbe(
                format=img.format or "unknown",
                width=img.width,
                height=img.height,
                orientation=orientation,
            )
    except OSError as exc:
        raise DecodeError(f"Cannot read image {path}: {exc}") from exc


def oriented_dimensions(probe: ImageProbe) -> OrientedDimensions:
    if is_rotated_orientation(probe.orientation):
        return OrientedDimensions(width=probe.height, height=probe.width)
    return OrientedDimensions(width=probe.width, height=probe.height)


def read_oriented_dimensions(path: Path) -> OrientedDimensions:
    """Return the width/height a viewer shows after applying EXIF orientation."""
    return oriented_dimensions(probe_image(path))


def calculate_target_size(width: int, height: int, spec: SizeSpec) -> Tuple[int, int]:
    """
    Compute output dimensions for a size spec, preserving aspect ratio.

    ``target_height`` wins over ``target_width`` which wins over
    ``target_long_edge``. A long-edge target constrains the width of
    landscape (and square) images and the height of portrait ones. The
    result is never larger than the input.

    Args:
        width: Oriented source width
        height: Oriented source height
        spec: Size rule to apply

    Returns:
        (width, height) of the variant
    """
    if spec.target_height is not None:
        axis, target = "height", spec.target_height
    elif spec.target_width is not None:
        axis, target = "width", spec.target_width
    elif width >= height:
        axis, target = "width", spec.target_long_edge
    else:
        axis, target = "height", spec.target_long_edge

    if axis == "height":
        if target >= height:
            return width, height
        return max(1, round(width * target / height)), target

    if target >= width:
        return width, height
    return target, max(1, round(height * target / width))


def _encodable(img: Image.Image) -> Image.Image:
    if img.mode in ("RGB", "RGBA"):
        return img
    if "A" in img.mode or (img.mode == "P" and "transparency" in img.info):
        return img.convert("RGBA")
    return img.convert("RGB")


def render_variant(
    source: Path, spec: SizeSpec, dest: Path, output_format: str = "WEBP"
) -> Tuple[int, int]:
    """
    Auto-rotate, resize and re-encode ``source`` into ``dest``.

    Returns:
        (width, height) of the written file

    Raises:
        RenderError: On decode, encode or write failure; no partial file is left
    """
    try:
        with Image.open(source) as img:
            oriented = ImageOps.exif_transpose(img)
            size = calculate_target_size(oriented.width, oriented.height, spec)
            if size != oriented.size:
                oriented = oriented.resize(size, Image.LANCZOS)
            output = _encodable(oriented)
    except (OSError, ValueError) + DECODE_ERRORS as exc:
        raise RenderError(f"Cannot decode {source} for '{spec.name}': {exc}") from exc

    try:
        output.save(dest, format=output_format, quality=spec.quality)
    except (OSError, ValueError, KeyError) as exc:
        dest.unlink(missing_ok=True)
        raise RenderError(f"Cannot write '{spec.name}' variant to {dest}: {exc}") from exc

    return output.size
