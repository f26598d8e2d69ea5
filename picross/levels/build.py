#!/usr/bin/env python3
"""
Level build script for Picross.

Prepares the level data shipped with the game.

Usage:
    picross-levels concat [DIR]
    picross-levels insert-uuid [ROOT]
    picross-levels convert SRC... [--output DIR] [--start N]
    picross-levels build [DIR] [--legacy SRC] [--config FILE]

Commands:
    concat       Merge DIR/*.json into DIR/levels.json
    insert-uuid  Add a "uuid" key to every level file under ROOT
    convert      Convert legacy .non files to level JSON
    build        convert (optional) + insert-uuid + concat
"""
import argparse
import sys
from pathlib import Path
from typing import List, Optional

from picross.errors import PicrossError
from picross.levels.bundle import write_bundle
from picross.levels.legacy import LegacyConverter, find_legacy_files
from picross.levels.models import BundlerConfig
from picross.levels.uuid_tags import TagResult, tag_tree
from picross.logging import configure_logging, get_logger

log = get_logger('build')


def cmd_concat(args: argparse.Namespace, config: BundlerConfig) -> None:
    directory = args.directory if args.directory is not None else config.levels_dir
    write_bundle(directory, config.bundle_name, config.indent)


def cmd_insert_uuid(args: argparse.Namespace, config: BundlerConfig) -> None:
    root = args.root if args.root is not None else config.levels_dir
    results = tag_tree(root, bundle_name=config.bundle_name)
    tagged = sum(1 for r in results.values() if r is TagResult.TAGGED)
    print(f"Tagged {tagged} of {len(results)} level files")


def cmd_convert(args: argparse.Namespace, config: BundlerConfig) -> None:
    output = args.output if args.output is not None else config.converted_dir
    start = args.start if args.start is not None else config.first_legacy_id
    converter = LegacyConverter(output, start, config.indent)
    written = converter.convert_all(find_legacy_files(args.sources))
    print(f"Converted {len(written)} legacy levels into {output}")


def cmd_build(args: argparse.Namespace, config: BundlerConfig) -> None:
    """
    Full pipeline: convert, tag, bundle.

    Legacy sources land in the levels directory. Levels converted by an earlier
    build are kept with their uuid; a clashing authored level stops the build.
    """
    directory = args.directory if args.directory is not None else config.levels_dir

    if args.legacy:
        converter = LegacyConverter(directory, config.first_legacy_id, config.indent, overwrite=False)
        written = converter.convert_all(find_legacy_files(args.legacy))
        print(f"  Converted: {len(written)} legacy levels")

    results = tag_tree(directory, bundle_name=config.bundle_name)
    tagged = sum(1 for r in results.values() if r is TagResult.TAGGED)
    print(f"  Tagged: {tagged} level files")

    bundle = write_bundle(directory, config.bundle_name, config.indent)
    print(f"\nBuild complete!")
    print(f"Output: {bundle}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="picross-levels",
        description="Build Picross level data",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML or JSON configuration file",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    concat = sub.add_parser("concat", help="Merge level files into levels.json")
    concat.add_argument("directory", type=Path, nargs="?", default=None)
    concat.set_defaults(func=cmd_concat)

    insert = sub.add_parser("insert-uuid", help="Add uuid keys to level files")
    insert.add_argument("root", type=Path, nargs="?", default=None)
    insert.set_defaults(func=cmd_insert_uuid)

    convert = sub.add_parser("convert", help="Convert legacy .non files")
    convert.add_argument("sources", type=Path, nargs="+")
    convert.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Output directory (default: converted)",
    )
    convert.add_argument(
        "--start",
        type=int,
        default=None,
        help="First numeric level name (default: 5)",
    )
    convert.set_defaults(func=cmd_convert)

    build = sub.add_parser("build", help="Convert, tag and bundle in one go")
    build.add_argument("directory", type=Path, nargs="?", default=None)
    build.add_argument(
        "--legacy",
        type=Path,
        action="append",
        default=[],
        help="Legacy .non file or directory to convert first (repeatable)",
    )
    build.set_defaults(func=cmd_build)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging("DEBUG" if args.verbose else None)

    try:
        config = BundlerConfig.load(args.config) if args.config else BundlerConfig()
        args.func(args, config)
    except (PicrossError, OSError, ValueError) as e:
        log.error("%s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
