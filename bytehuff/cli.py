from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from bytehuff.codec import compress, decompress
from bytehuff.errors import HuffmanError

logger = logging.getLogger(__name__)

COMPRESSED_SUFFIX = ".cmp"


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def compressed_path(path: Path) -> Path:
    return path.with_name(path.name + COMPRESSED_SUFFIX)


def decompressed_path(path: Path) -> Path:
    # strip ".cmp" when present, otherwise do not overwrite the input
    if path.suffix == COMPRESSED_SUFFIX:
        return path.with_suffix("")
    return path.with_name(path.name + ".out")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="bytehuff", description="Static Huffman file compressor")
    action = ap.add_mutually_exclusive_group(required=True)
    action.add_argument("-c", "--compress", metavar="FILE", help=f"Compress FILE into FILE{COMPRESSED_SUFFIX}")
    action.add_argument("-d", "--decompress", metavar="FILE", help=f"Decompress FILE{COMPRESSED_SUFFIX} into FILE")
    ap.add_argument("-o", "--output", metavar="PATH", help="Write to PATH instead of the default name")
    ap.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    filename = args.compress if args.compress is not None else args.decompress
    if not filename:
        print("Error: empty file name", file=sys.stderr)
        return 1

    if args.compress is not None:
        src = Path(args.compress)
        dst = Path(args.output) if args.output else compressed_path(src)
        transform = compress
    else:
        src = Path(args.decompress)
        dst = Path(args.output) if args.output else decompressed_path(src)
        transform = decompress

    try:
        data = src.read_bytes()
        result = transform(data)
        dst.write_bytes(result)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except HuffmanError as e:
        print(f"Error: {src}: {e}", file=sys.stderr)
        return 1

    logger.info("%s: %d bytes -> %s: %d bytes", src, len(data), dst, len(result))
    print(f"Wrote {dst}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
