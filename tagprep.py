#!/usr/bin/env python3
"""
Command line entry point for tag image preprocessing.

Usage:
    tagprep -o OUT_DIR images.txt                  # add a border to every image
    tagprep -o OUT_DIR --use-hist-eq images.txt    # border + tiled CLAHE
    tagprep -o OUT_DIR --binary-image images.txt   # border + binary threshold mask

images.txt lists one input image path per line. Processed images are
written to OUT_DIR as <stem>_wb<ext> and their paths are collected in
OUT_DIR/images.txt (or --output-pathfile).
"""

import argparse
import logging
import sys
from pathlib import Path

import config
from batch import (
    BatchOptions,
    ConfigurationError,
    ImageDescriptor,
    TqdmProgress,
    log_progress,
    run_batch,
)
from logging_utils import configure_logging, add_logging_args
from preprocessing import PipelineConfig

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tagprep",
        description="Pad, contrast-normalize and threshold images before tagging",
    )
    parser.add_argument(
        "pathfile",
        nargs="?",
        help="File with one input image path per line",
    )
    parser.add_argument(
        "-o", "--output-dir",
        help="Write processed images to this directory",
    )
    parser.add_argument(
        "--output-pathfile",
        help=f"Write the list of output paths here (default: <output-dir>/{config.MANIFEST_FILENAME})",
    )
    parser.add_argument(
        "--border",
        action=argparse.BooleanOptionalAction,
        default=config.APPLY_BORDER,
        help="Add a border of half a tag around each image",
    )
    parser.add_argument(
        "--use-hist-eq",
        action=argparse.BooleanOptionalAction,
        default=config.APPLY_CONTRAST_NORM,
        help="Apply local histogram equalization (CLAHE) per tag-sized tile",
    )
    parser.add_argument(
        "--use-threshold",
        action=argparse.BooleanOptionalAction,
        default=config.APPLY_THRESHOLD,
        help="Blend an adaptive threshold mask into each image",
    )
    parser.add_argument(
        "--binary-image",
        action=argparse.BooleanOptionalAction,
        default=config.BINARY_OUTPUT,
        help="Save the binary threshold mask instead (implies --use-threshold)",
    )
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Log progress lines instead of drawing a progress bar",
    )
    add_logging_args(parser)
    return parser


def options_from_args(args: argparse.Namespace) -> BatchOptions:
    """Translate parsed arguments into batch options.

    Raises:
        ConfigurationError: If the pathfile or output directory is missing.
    """
    if not args.pathfile:
        raise ConfigurationError("No pathfile given")
    if not args.output_dir:
        raise ConfigurationError("No output directory given")

    pipeline = PipelineConfig.from_flags(
        border=args.border,
        contrast_norm=args.use_hist_eq,
        threshold=args.use_threshold,
        binary_output=args.binary_image,
    )
    return BatchOptions(
        output_dir=Path(args.output_dir),
        manifest_path=Path(args.output_pathfile) if args.output_pathfile else None,
        pipeline=pipeline,
    )


def cmd_run(args: argparse.Namespace, parser: argparse.ArgumentParser) -> int:
    try:
        options = options_from_args(args)
    except ConfigurationError as exc:
        logger.error("%s", exc)
        parser.print_usage(sys.stderr)
        return EXIT_USAGE

    try:
        descriptors = ImageDescriptor.from_pathfile(args.pathfile)
    except OSError as exc:
        logger.error("Cannot read pathfile %s: %s", args.pathfile, exc)
        return EXIT_FAILURE

    try:
        if args.no_progress:
            result = run_batch(descriptors, options, progress=log_progress)
        else:
            with TqdmProgress() as progress:
                result = run_batch(descriptors, options, progress=progress)
    except ValueError as exc:
        logger.error("%s", exc)
        return EXIT_USAGE

    if not result.ok:
        logger.error("Batch aborted: %s", result.error)
        return EXIT_FAILURE

    logger.info("%s", "=" * 50)
    logger.info("Preprocessing Complete!")
    logger.info("%s", "=" * 50)
    logger.info("Images processed: %s", result.context.completed)
    logger.info("Stages:           %s", ", ".join(result.stages) or "none")
    logger.info("Output directory: %s", options.output_dir)
    logger.info("Output pathfile:  %s", result.manifest_path)
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level, args.verbose, args.quiet)
    return cmd_run(args, parser)


if __name__ == "__main__":
    sys.exit(main())
