"""
Command-line entry point: resize one PNG/SVG into resized_NxN.png files.

    icon-resize logo.svg -o icons/ -s 64,32,16
"""

import argparse
import logging
import sys
from typing import List, Optional

import config
from models.errors import UnsupportedFormatError, DecodeError, EncodeError
from pipeline.icon_resizer import IconResizer, FailurePolicy, normalize_sizes
from services.image_service import ImageService

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_UNSUPPORTED = 2
EXIT_DECODE = 3
EXIT_ENCODE = 4


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="icon-resize",
        description="Resize a PNG or SVG into transparent square icons.",
    )
    ap.add_argument("source", help="PNG or SVG file to resize")
    ap.add_argument("-o", "--output-dir", default=config.OUTPUT_DIR,
                    help=f"directory for resized_NxN.png files (default: {config.OUTPUT_DIR})")
    ap.add_argument("-s", "--sizes", default=",".join(str(s) for s in config.TARGET_SIZES),
                    help="comma separated square sizes, in output order (default: %(default)s)")
    ap.add_argument("--isolate-failures", action="store_true",
                    help="keep going when one size fails instead of aborting the run "
                         "(default comes from FAILURE_POLICY)")
    ap.add_argument("--preview", action="store_true",
                    help="also write the decoded source as original.png")
    ap.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    # --- Centralized Logging Configuration ---
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.LOG_LEVEL,
        format=config.LOG_FORMAT,
        datefmt=config.LOG_DATEFMT,
    )

    try:
        sizes = normalize_sizes(config.parse_sizes(args.sizes), max_size=config.MAX_TARGET_SIZE)
    except ValueError as e:
        print(f"Invalid --sizes: {e}", file=sys.stderr)
        return EXIT_UNSUPPORTED

    try:
        policy = FailurePolicy.from_name(config.FAILURE_POLICY)
    except ValueError as e:
        print(f"Invalid FAILURE_POLICY: {e}", file=sys.stderr)
        return EXIT_UNSUPPORTED
    if args.isolate_failures:
        policy = FailurePolicy.ISOLATE

    image_service = ImageService()

    try:
        source = image_service.load_source(args.source)
        result = IconResizer(sizes, failure_policy=policy).run(source)
    except FileNotFoundError as e:
        print(str(e), file=sys.stderr)
        return EXIT_DECODE
    except UnsupportedFormatError as e:
        print(f"{e}. Please provide a PNG or SVG file.", file=sys.stderr)
        return EXIT_UNSUPPORTED
    except DecodeError as e:
        print(f"Could not read {args.source}: {e}", file=sys.stderr)
        return EXIT_DECODE
    except EncodeError as e:
        target = f"{e.size}x{e.size} icon" if e.size else "preview"
        print(f"Could not write {target}: {e}", file=sys.stderr)
        return EXIT_ENCODE

    saved = image_service.save_result(result, args.output_dir, include_preview=args.preview)
    for path in saved:
        print(path)
    logger.info(f"Wrote {len(saved)} file(s) to {args.output_dir}")

    for size, err in result.failures.items():
        print(f"{size}x{size} failed: {err}", file=sys.stderr)

    return EXIT_OK if result.ok else EXIT_ENCODE


if __name__ == "__main__":
    sys.exit(main())
