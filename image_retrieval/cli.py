#!/usr/bin/env python3
"""CLI interface for image-retrieval."""

import argparse
import logging
import sys
from pathlib import Path

import cv2

from .config import RetrievalConfig
from .descriptors import Descriptor
from .engine import SearchEngine, DEFAULT_TOP_N
from .errors import RetrievalError
from .index_builder import build_index
from .ranking import exclude_self


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Content-based image retrieval: extract features and rank matches",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    methods = [d.value for d in Descriptor]

    extract_parser = subparsers.add_parser(
        "extract", help="Write a feature file for a directory of images",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    extract_parser.add_argument("method", choices=methods, help="Descriptor tag")
    extract_parser.add_argument("images", type=str, help="Directory of images")
    extract_parser.add_argument("output", type=str, help="Feature CSV to write")

    match_parser = subparsers.add_parser(
        "match", help="Rank a feature file against a target",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    match_parser.add_argument("method", choices=methods, help="Descriptor tag")
    match_parser.add_argument("features", type=str, help="Feature CSV to search")
    target = match_parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--image", type=str, help="Target image path")
    target.add_argument("--id", type=str, help="Identifier of a stored vector")
    match_parser.add_argument("--top-n", type=int, default=DEFAULT_TOP_N,
                              help="Number of matches besides the target itself")
    match_parser.add_argument("--keep-self", action="store_true",
                              help="Keep the first (self) match in the output")
    return parser


def _run_extract(args, config: RetrievalConfig) -> int:
    if not Path(args.images).is_dir():
        print(f"Error: Image folder not found: {args.images}")
        return 1
    summary = build_index(args.images, args.output, args.method, config)
    if not summary["success"]:
        print(f"Error: {summary['error']}")
        return 1
    print(f"Feature extraction is written to {summary['output_path']} "
          f"({summary['processed']} images, {summary['dimensions']}d)")
    return 0


def _run_match(args, config: RetrievalConfig) -> int:
    engine = SearchEngine(args.features, args.method, config)

    if args.image:
        image = cv2.imread(args.image, cv2.IMREAD_COLOR)
        if image is None:
            print(f"Error: cannot read image {args.image}")
            return 1
        results = engine.search(image, args.top_n)
    else:
        try:
            results = engine.search_by_id(args.id, args.top_n)
        except KeyError:
            print(f"Error: {args.id} not found in {args.features}")
            return 1

    if not args.keep_self:
        results = exclude_self(results)

    for i, match in enumerate(results, start=1):
        print(f"{i}: {match.identifier} ({engine.metric.name}: {match.score:.6g})")
    return 0


def main(argv=None) -> int:
    """CLI entry point for image-retrieval."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S"
    )

    try:
        config = RetrievalConfig.from_env()
        if args.command == "extract":
            return _run_extract(args, config)
        return _run_match(args, config)
    except RetrievalError as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
