"""Shared data models for the photo pipeline."""

import json
import os
from pathlib import Path
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from .exceptions import ConfigurationError


class SizeSpec(BaseModel):
    """A named resize rule for one variant."""

    name: str = Field(min_length=1)
    target_height: Optional[int] = Field(default=None, gt=0)
    target_width: Optional[int] = Field(default=None, gt=0)
    target_long_edge: Optional[int] = Field(default=None, gt=0)
    quality: int = Field(default=85, ge=0, le=100)

    @model_validator(mode="after")
    def _require_constraint(self) -> "SizeSpec":
        if (
            self.target_height is None
            and self.target_width is None
            and self.target_long_edge is None
        ):
            raise ValueError(
                f"size spec '{self.name}' needs target_height, target_width "
                "or target_long_edge"
            )
        return self


class OrientedDimensions(BaseModel):
    """Pixel dimensions after applying the embedded orientation."""

    width: int
    height: int

    def as_tuple(self) -> Tuple[int, int]:
        return self.width, self.height


DEFAULT_SIZE_SPECS: Tuple[SizeSpec, ...] = (
    SizeSpec(name="thumb", target_height=300, quality=80),
    SizeSpec(name="featured", target_height=600, quality=85),
    SizeSpec(name="display", target_long_edge=1600, quality=85),
)

ORIGINAL_SIZE_NAME = "original"


class StorageConfig(BaseModel):
    """Process-wide configuration for the storage tree."""

    collections_root: Path
    temp_dir: Path
    size_specs: List[SizeSpec] = Field(
        default_factory=lambda: [spec.model_copy() for spec in DEFAULT_SIZE_SPECS]
    )
    original_filename: str = "original.jpg"
    variant_extension: str = "webp"
    variant_format: str = "WEBP"
    uncategorized_segment: str = "_uncategorized"

    @field_validator("size_specs")
    @classmethod
    def _unique_names(cls, specs: List[SizeSpec]) -> List[SizeSpec]:
        seen = set()
        for spec in specs:
            if spec.name == ORIGINAL_SIZE_NAME:
                raise ValueError(f"'{ORIGINAL_SIZE_NAME}' is reserved")
            if spec.name in seen:
                raise ValueError(f"duplicate size name '{spec.name}'")
            seen.add(spec.name)
        return specs

    def size_names(self) -> List[str]:
        return [spec.name for spec in self.size_specs]

    def is_known_size(self, name: str) -> bool:
        return name == ORIGINAL_SIZE_NAME or name in self.size_names()

    @classmethod
    def from_env(cls, base_dir: Optional[Path] = None) -> "StorageConfig":
        """
        Build a configuration from environment variables.

        Environment Variables:
            PHOTO_COLLECTIONS_ROOT: root of the item tree (default <base>/collections)
            PHOTO_TEMP_DIR: upload temp area (default <base>/uploads/temp)
            PHOTO_SIZE_SPECS: JSON list of size spec objects
        """
        base = Path(base_dir) if base_dir is not None else Path.cwd()
        collections_root = Path(
            os.getenv("PHOTO_COLLECTIONS_ROOT", str(base / "collections"))
        )
        temp_dir = Path(os.getenv("PHOTO_TEMP_DIR", str(base / "uploads" / "temp")))

        values = {"collections_root": collections_root, "temp_dir": temp_dir}
        raw_specs = os.getenv("PHOTO_SIZE_SPECS")
        if raw_specs:
            try:
                values["size_specs"] = json.loads(raw_specs)
            except json.JSONDecodeError as exc:
                raise ConfigurationError(f"PHOTO_SIZE_SPECS is not valid JSON: {exc}") from exc

        try:
            return cls(**values)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid storage configuration: {exc}") from exc
