"""Main module for the image upload CLI."""

import sys
import json
import logging
import argparse
from pathlib import Path
from typing import Any, List, Optional

from pydantic import ValidationError

from . import __version__
from .core import CompressSpec, StorageConfig, configure_logging, get_logger
from .core.exceptions import (
    ConfigurationError,
    DecodeError,
    ImageNotFoundError,
    ImageUploadError,
)
from .core.factories import UploadPipelineFactory
from .core.protocols import ArtifactStoreProtocol


SUPPORTED_EXTENSIONS = (".jpg", ".jpeg", ".png")

EXIT_OK = 0
EXIT_SERVER_ERROR = 1
EXIT_CLIENT_ERROR = 2


def parse_size(value: str) -> CompressSpec:
    """Parse a ``WIDTHxHEIGHT`` argument into a CompressSpec."""
    try:
        width, height = value.lower().split("x")
        return CompressSpec(width=int(width), height=int(height))
    except (ValueError, ValidationError):
        raise argparse.ArgumentTypeError(
            f"invalid size '{value}': expected WIDTHxHEIGHT with positive integers"
        )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the ``image-upload`` command."""
    parser = argparse.ArgumentParser(
        prog="image-upload",
        description="Image Upload - store an image and resized variants in S3",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Upload a photo with two resized variants
  image-upload --bucket my-images upload photo.jpg --size 800x600 --size 400x300

  # Describe a stored artifact
  image-upload --bucket my-images get photo_800x600_1700000000000000000.jpg

  # List everything in the bucket (against a local MinIO)
  image-upload --bucket my-images --endpoint http://localhost:9000 list
        """,
    )
    parser.add_argument("--bucket", default=None, help="S3 bucket (env: S3_BUCKET_NAME)")
    parser.add_argument("--region", default=None, help="S3 region (env: AWS_REGION)")
    parser.add_argument(
        "--endpoint", default=None, help="Custom S3 endpoint URL (env: S3_ENDPOINT)"
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    upload_parser = subparsers.add_parser(
        "upload", help="Upload an image and its resized variants"
    )
    upload_parser.add_argument("path", help="JPEG or PNG file to upload")
    upload_parser.add_argument(
        "--size",
        type=parse_size,
        action="append",
        default=None,
        help="Variant size as WIDTHxHEIGHT; repeat for several variants",
    )

    get_parser = subparsers.add_parser("get", help="Describe a stored image by key")
    get_parser.add_argument("key", help="Storage key of the image")

    subparsers.add_parser("list", help="List every key in the bucket")
    subparsers.add_parser("version", help="Show version information")

    return parser


def _create_store(args: argparse.Namespace) -> ArtifactStoreProtocol:
    config = StorageConfig.from_env(
        bucket_name=args.bucket, region=args.region, endpoint=args.endpoint
    )
    return UploadPipelineFactory.create_store(config)


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, indent=2))


def run_upload(args: argparse.Namespace, store: ArtifactStoreProtocol) -> int:
    """Upload ``args.path``; returns the process exit code."""
    logger = get_logger("image-upload.cli")
    path = Path(args.path)

    if path.suffix.lower() not in SUPPORTED_EXTENSIONS:
        logger.error("Unsupported file type. Only JPG and PNG are supported")
        return EXIT_CLIENT_ERROR

    try:
        file_bytes = path.read_bytes()
    except OSError as e:
        logger.error(f"Failed to read file: {e}")
        return EXIT_CLIENT_ERROR

    specs: List[CompressSpec] = args.size or []
    service = UploadPipelineFactory.create_upload_service(store)

    try:
        result = service.process(file_bytes, path.name, specs)
    except DecodeError as e:
        logger.error(f"Invalid image: {e}")
        return EXIT_CLIENT_ERROR
    except ImageUploadError as e:
        logger.error(f"Upload failed: {e}")
        return EXIT_SERVER_ERROR

    _print_json(result.model_dump(by_alias=True))
    return EXIT_OK


def run_get(args: argparse.Namespace, store: ArtifactStoreProtocol) -> int:
    """Describe ``args.key``; an unknown key is a client error."""
    logger = get_logger("image-upload.cli")
    service = UploadPipelineFactory.create_lookup_service(store)

    try:
        image = service.get_image_info(args.key)
    except ImageNotFoundError:
        logger.error("Image not found")
        return EXIT_CLIENT_ERROR

    _print_json(image.model_dump())
    return EXIT_OK


def run_list(args: argparse.Namespace, store: ArtifactStoreProtocol) -> int:
    """List every key in the store; returns the process exit code."""
    logger = get_logger("image-upload.cli")
    service = UploadPipelineFactory.create_lookup_service(store)

    try:
        keys = service.list_images()
    except ImageUploadError as e:
        logger.error(f"Failed to list images: {e}")
        return EXIT_SERVER_ERROR

    _print_json(keys)
    return EXIT_OK


COMMANDS = {
    "upload": run_upload,
    "get": run_get,
    "list": run_list,
}


def dispatch(args: argparse.Namespace) -> int:
    """Configure logging, build the store and run ``args.command``."""
    configure_logging(logging.DEBUG if args.debug else None)

    try:
        store = _create_store(args)
    except ConfigurationError as e:
        get_logger("image-upload.cli").error(f"Configuration error: {e}")
        return EXIT_SERVER_ERROR

    return COMMANDS[args.command](args, store)


def main(argv: Optional[List[str]] = None) -> None:
    """
    Entry point for the ``image-upload`` command-line interface.

    Exit codes: 0 on success, 2 for bad input (unsupported file, undecodable
    image, unknown key), 1 for storage or configuration failures.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "version":
        print("Image Upload CLI")
        print(f"Version {__version__}")
        print("Stores images and resized variants in S3")
        sys.exit(EXIT_OK)
    elif args.command in COMMANDS:
        sys.exit(dispatch(args))
    else:
        parser.print_help()
        sys.exit(EXIT_SERVER_ERROR)


if __name__ == "__main__":
    main()
