"""Main module for the photo pipeline CLI."""

import sys
import json
import shutil
import asyncio
import argparse
import uuid
from pathlib import Path
from typing import Optional

from . import __version__
from .core import PhotoPipelineError, PhotoStorage, StorageConfig, setup_logger
from .core.exceptions import storage_operation
from .core.factories import PhotoStorageFactory
from .core.protocols import LoggerProtocol


def build_parser() -> argparse.ArgumentParser:
    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="photo-pipeline",
        description="Photo Pipeline - store originals and render resized variants",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Create the storage roots
  photo-pipeline --root ./collections init

  # Ingest a photo into a collection
  photo-pipeline --root ./collections ingest IMG_0001.jpg --group travel

  # Find the file to serve for a size
  photo-pipeline --root ./collections resolve 3f2c... --group travel --size thumb
        """,
    )
    parser.add_argument("--root", type=Path, default=None, help="Collections root directory")
    parser.add_argument("--temp-dir", type=Path, default=None, help="Upload temp directory")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    subparsers: argparse._SubParsersAction = parser.add_subparsers(
        dest="command", help="Available commands"
    )

    subparsers.add_parser("init", help="Create the storage directories")

    ingest_parser = subparsers.add_parser("ingest", help="Store a photo and render its variants")
    ingest_parser.add_argument("file", type=Path, help="Image file (JPEG, PNG or WebP)")
    ingest_parser.add_argument("--group", default=None, help="Collection id (default: uncategorized)")
    ingest_parser.add_argument("--item", default=None, help="Item id (default: new UUID)")
    ingest_parser.add_argument(
        "--move", action="store_true", help="Consume the file instead of copying it first"
    )

    dims_parser = subparsers.add_parser("dimensions", help="Print orientation-corrected dimensions")
    dims_parser.add_argument("file", type=Path, help="Image file")

    resolve_parser = subparsers.add_parser("resolve", help="Print the file to serve for a size")
    resolve_parser.add_argument("item", help="Item id")
    resolve_parser.add_argument("--group", default=None, help="Collection id")
    resolve_parser.add_argument("--size", default="original", help="Size name (default: original)")

    relocate_parser = subparsers.add_parser("relocate", help="Move an item to another collection")
    relocate_parser.add_argument("item", help="Item id")
    relocate_parser.add_argument("--from", dest="old_group", default=None, help="Current collection id")
    relocate_parser.add_argument("--to", dest="new_group", default=None, help="New collection id")

    delete_parser = subparsers.add_parser("delete", help="Remove an item and all its files")
    delete_parser.add_argument("item", help="Item id")
    delete_parser.add_argument("--group", default=None, help="Collection id")

    subparsers.add_parser("version", help="Show version information")

    return parser


def create_storage(
    args: argparse.Namespace, logger: Optional[LoggerProtocol] = None
) -> PhotoStorage:
    config = StorageConfig.from_env()
    overrides = {}
    if args.root is not None:
        overrides["collections_root"] = args.root
    if args.temp_dir is not None:
        overrides["temp_dir"] = args.temp_dir
    return PhotoStorageFactory.create_storage(
        config=config, logger=logger, config_overrides=overrides or None
    )


async def run_ingest(storage: PhotoStorage, args: argparse.Namespace) -> dict:
    item_id = args.item or str(uuid.uuid4())
    if args.move:
        temp_path = args.file
    else:
        temp_path = storage.new_temp_path(args.file.suffix.lower())
        with storage_operation(f"Copying {args.file} to {temp_path}"):
            await asyncio.to_thread(shutil.copyfile, args.file, temp_path)

    try:
        dimensions = await storage.ingest(temp_path, args.group, item_id)
    except PhotoPipelineError:
        if not args.move:
            await storage.discard_temp(temp_path)
        raise
    return {"item": item_id, "width": dimensions.width, "height": dimensions.height}


def run_command(storage: PhotoStorage, args: argparse.Namespace) -> int:
    """Execute one subcommand and return the process exit code."""
    if args.command == "init":
        storage.initialize()
        return 0

    if args.command == "ingest":
        storage.initialize()
        print(json.dumps(asyncio.run(run_ingest(storage, args))))
        return 0

    if args.command == "dimensions":
        dimensions = asyncio.run(storage.read_oriented_dimensions(args.file))
        print(json.dumps(dimensions.model_dump()))
        return 0

    if args.command == "resolve":
        path: Optional[Path] = asyncio.run(
            storage.resolve_path(args.group, args.item, args.size)
        )
        if path is None:
            return 1
        print(path)
        return 0

    if args.command == "relocate":
        asyncio.run(storage.relocate(args.old_group, args.new_group, args.item))
        return 0

    if args.command == "delete":
        asyncio.run(storage.delete_all(args.group, args.item))
        return 0

    raise ValueError(f"Unknown command: {args.command}")


def main() -> None:
    """
    Entry point for the ``photo-pipeline`` command-line interface.

    Pipeline errors are logged and turned into exit code 1.
    """
    parser = build_parser()
    args: argparse.Namespace = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    if args.command == "version":
        print("Photo Pipeline CLI")
        print(f"Version {__version__}")
        sys.exit(0)

    logger = setup_logger("photo-pipeline", level="DEBUG" if args.debug else None)
    try:
        storage = create_storage(args, logger)
        if args.command == "resolve" and not storage.config.is_known_size(args.size):
            # usage error, exit code 2
            parser.error(
                f"unknown size '{args.size}' "
                f"(choose from: original, {', '.join(storage.config.size_names())})"
            )
        exit_code = run_command(storage, args)
    except KeyboardInterrupt:
        logger.warning("Interrupted by user.")
        sys.exit(130)
    except PhotoPipelineError as e:
        logger.error(f"{args.command} failed: {e}")
        sys.exit(1)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
