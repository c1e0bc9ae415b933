"""Pure path helpers for the on-disk item layout.

Layout::

    <collections_root>/<group id | _uncategorized>/<item id>/
        original.jpg
        <size name>.<variant extension>

Group and item ids are trusted as opaque, filesystem-safe tokens (UUIDs in
practice); nothing here validates them against path traversal.
"""

from pathlib import Path
from typing import Optional

from .models import StorageConfig

UNCATEGORIZED = "_uncategorized"


def group_segment(group_id: Optional[str], fallback: str = UNCATEGORIZED) -> str:
    """Directory name for a group; ``None`` and ``""`` map to the fallback."""
    return group_id or fallback


def resolve_item_dir(
    config: StorageConfig, group_id: Optional[str], item_id: str
) -> Path:
    """Return the directory holding one item's original and variants."""
    segment = group_segment(group_id, config.uncategorized_segment)
    return config.collections_root / segment / item_id


def original_path(config: StorageConfig, item_dir: Path) -> Path:
    return item_dir / config.original_filename


def variant_path(config: StorageConfig, item_dir: Path, size_name: str) -> Path:
    return item_dir / f"{size_name}.{config.variant_extension}"


def media_type_for(path: Path) -> str:
    """Content type a file is served with."""
    if path.suffix.lower() == ".webp":
        return "image/webp"
    return "image/jpeg"
