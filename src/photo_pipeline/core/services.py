"""Async storage services for the photo ingestion and variant pipeline."""

import asyncio
import contextlib
import os
import shutil
import time
import uuid
from pathlib import Path
from typing import Optional, Union

from .error_handling import VariantBatchContext
from .exceptions import DecodeError, RenderError, StorageError, storage_operation
from .image_utils import (
    ACCEPTED_INPUT_FORMATS,
    ImageProbe,
    oriented_dimensions,
    probe_image,
    render_variant,
)
from .logging_config import ItemLogger, get_logger
from .models import ORIGINAL_SIZE_NAME, OrientedDimensions, SizeSpec, StorageConfig
from .paths import original_path, resolve_item_dir, variant_path
from .protocols import (
    LoggerProtocol,
    OrientationReaderProtocol,
    VariantRendererProtocol,
)

PathLike = Union[str, os.PathLike]


class OrientationReader:
    """Reads image headers and orientation-corrected dimensions off the event loop."""

    async def probe(self, path: Path) -> ImageProbe:
        return await asyncio.to_thread(probe_image, Path(path))

    async def read(self, path: Path) -> OrientedDimensions:
        return oriented_dimensions(await self.probe(path))


class VariantRenderer:
    """Renders one variant in a worker thread; never retries."""

    def __init__(self, output_format: str = "WEBP"):
        self._output_format = output_format

    async def render(self, source: Path, spec: SizeSpec, dest: Path) -> None:
        await asyncio.to_thread(
            render_variant, Path(source), spec, Path(dest), self._output_format
        )


class PhotoStorage:
    """
    Owns the ``<root>/<group>/<item>/`` tree.

    The storage tree is the only shared state. Operations on different item
    ids are independent; callers serialize operations on the same item id.
    """

    def __init__(
        self,
        config: StorageConfig,
        renderer: Optional[VariantRendererProtocol] = None,
        reader: Optional[OrientationReaderProtocol] = None,
        logger: Optional[LoggerProtocol] = None,
    ):
        self._config = config
        self._renderer = renderer or VariantRenderer(config.variant_format)
        self._reader = reader or OrientationReader()
        self._logger = logger or get_logger("photo-pipeline")

    @property
    def config(self) -> StorageConfig:
        return self._config

    @property
    def temp_dir(self) -> Path:
        return self._config.temp_dir

    def initialize(self) -> None:
        """Create the collections root and temp area. Call once at startup."""
        with storage_operation("Creating storage roots"):
            self._config.collections_root.mkdir(parents=True, exist_ok=True)
            self._config.temp_dir.mkdir(parents=True, exist_ok=True)
        self._logger.info(
            f"Storage initialized at {self._config.collections_root} "
            f"(temp: {self._config.temp_dir})"
        )

    def new_temp_path(self, suffix: str = "") -> Path:
        """Fresh upload path inside the temp area; the file is not created."""
        return self._config.temp_dir / f"{uuid.uuid4()}{suffix}"

    def item_dir(self, group_id: Optional[str], item_id: str) -> Path:
        return resolve_item_dir(self._config, group_id, item_id)

    async def read_oriented_dimensions(self, path: PathLike) -> OrientedDimensions:
        return await self._reader.read(Path(path))

    async def ingest(
        self, temp_path: PathLike, group_id: Optional[str], item_id: str
    ) -> OrientedDimensions:
        """
        Move an uploaded temp file into place and render all variants.

        Steps run strictly in order: directory, copy-then-delete, dimensions,
        variants. Failures before variants raise; a failed variant is logged
        and the remaining ones are still attempted.

        Args:
            temp_path: Uploaded file; removed once copied
            group_id: Collection the item belongs to, or None
            item_id: Fresh identifier for the item

        Returns:
            Orientation-corrected dimensions of the original

        Raises:
            StorageError: Directory creation, copy or temp removal failed
            DecodeError: The placed original is not a supported image
        """
        start_time = time.time()
        log = ItemLogger(self._logger, item_id)
        source = Path(temp_path)
        item_dir = self.item_dir(group_id, item_id)
        original = original_path(self._config, item_dir)

        with storage_operation(f"Creating {item_dir}"):
            await asyncio.to_thread(item_dir.mkdir, parents=True, exist_ok=True)
        log.debug(f"Directory ready: {item_dir}")

        # copy + delete instead of rename: temp area may be another volume
        try:
            with storage_operation(f"Copying {source} to {original}"):
                await asyncio.to_thread(shutil.copyfile, source, original)
        except StorageError:
            # no original, no item directory
            with contextlib.suppress(OSError):
                await asyncio.to_thread(original.unlink, missing_ok=True)
                await asyncio.to_thread(item_dir.rmdir)
            raise
        with storage_operation(f"Removing temp file {source}"):
            await asyncio.to_thread(os.remove, source)
        log.debug(f"Original placed at {original}")

        probe = await self._reader.probe(original)
        if probe.format not in ACCEPTED_INPUT_FORMATS:
            raise DecodeError(
                f"unsupported image format {probe.format} for item {item_id}"
            )
        dimensions = oriented_dimensions(probe)

        with VariantBatchContext(item_id, self._logger) as batch:
            for spec in self._config.size_specs:
                dest = variant_path(self._config, item_dir, spec.name)
                try:
                    await self._renderer.render(original, spec, dest)
                except RenderError as exc:
                    batch.add_error(spec.name, exc)
                    continue
                batch.add_success(spec.name)
                log.debug(f"Wrote {dest.name}")

        log.info(
            f"Ingested {dimensions.width}x{dimensions.height} "
            f"({len(batch.succeeded)} variant(s) written, {len(batch.errors)} failed) "
            f"in {time.time() - start_time:.2f}s"
        )
        return dimensions

    def ingest_in_background(
        self, temp_path: PathLike, group_id: Optional[str], item_id: str
    ) -> "asyncio.Task[OrientedDimensions]":
        """
        Schedule ``ingest`` on the running loop and return its task.

        Failures are logged when the task finishes; the exception stays on
        the task for callers that await it.
        """
        log = ItemLogger(self._logger, item_id)
        task = asyncio.get_running_loop().create_task(
            self.ingest(temp_path, group_id, item_id),
            name=f"ingest-{item_id}",
        )

        def _report(done: "asyncio.Task[OrientedDimensions]") -> None:
            if done.cancelled():
                log.warning("Background ingestion cancelled")
                return
            exc = done.exception()
            if exc is not None:
                log.error(f"Background ingestion failed: {exc}")

        task.add_done_callback(_report)
        return task

    async def discard_temp(self, temp_path: PathLike) -> None:
        """Remove a leftover upload temp file; missing files are ignored."""
        path = Path(temp_path)
        with storage_operation(f"Removing temp file {path}"):
            await asyncio.to_thread(path.unlink, missing_ok=True)

    async def relocate(
        self, old_group_id: Optional[str], new_group_id: Optional[str], item_id: str
    ) -> None:
        """Move an item's whole directory to another group."""
        log = ItemLogger(self._logger, item_id)
        old_dir = self.item_dir(old_group_id, item_id)
        new_dir = self.item_dir(new_group_id, item_id)
        if old_dir == new_dir:
            return

        if not await asyncio.to_thread(old_dir.is_dir):
            log.debug(f"Nothing to relocate at {old_dir}")
            return

        with storage_operation(f"Moving {old_dir} to {new_dir}"):
            await asyncio.to_thread(new_dir.parent.mkdir, parents=True, exist_ok=True)
            await asyncio.to_thread(os.rename, old_dir, new_dir)
        log.info(f"Relocated {old_dir} -> {new_dir}")

    async def delete_all(self, group_id: Optional[str], item_id: str) -> None:
        """Remove an item's directory and everything in it. Idempotent."""
        log = ItemLogger(self._logger, item_id)
        item_dir = self.item_dir(group_id, item_id)
        if not await asyncio.to_thread(item_dir.exists):
            return

        with storage_operation(f"Removing {item_dir}"):
            try:
                await asyncio.to_thread(shutil.rmtree, item_dir)
            except FileNotFoundError:
                return
        log.info(f"Deleted {item_dir}")

    async def resolve_path(
        self, group_id: Optional[str], item_id: str, size_name: str
    ) -> Optional[Path]:
        """
        Best file to serve for a size, or None.

        A missing variant falls back to the original so a photo whose
        variants are pending or failed still displays.
        """
        item_dir = self.item_dir(group_id, item_id)
        original = original_path(self._config, item_dir)

        if size_name != ORIGINAL_SIZE_NAME:
            candidate = variant_path(self._config, item_dir, size_name)
            if await asyncio.to_thread(candidate.is_file):
                return candidate

        if await asyncio.to_thread(original.is_file):
            return original
        return None
