"""
Level bundle aggregation.

Collects the individual level files of a directory into the single
levels.json array the game loads at runtime.
"""
import json
from pathlib import Path
from typing import Any, List, Union

from picross.errors import BundleError, LevelFormatError
from picross.levels.models import Level
from picross.logging import get_logger
from picross.yaml import dump

log = get_logger('bundle')

BUNDLE_NAME = "levels.json"


def find_level_files(directory: Union[str, Path], bundle_name: str = BUNDLE_NAME) -> List[Path]:
    """
    List level files in a directory (non-recursive).

    Every *.json file except the bundle itself is a level file. The result
    is sorted by file name.

    Raises:
        BundleError: If the directory can't be read
    """
    directory = Path(directory)
    bundle_stem = Path(bundle_name).stem
    try:
        entries = list(directory.iterdir())
    except OSError as e:
        raise BundleError(f"Cannot read level directory {directory}: {e}") from e

    return sorted(
        (p for p in entries
         if p.suffix == '.json' and p.stem != bundle_stem and p.is_file()),
        key=lambda p: p.name,
    )


def collect_levels(directory: Union[str, Path], bundle_name: str = BUNDLE_NAME) -> List[Any]:
    """
    Read and validate every level file of a directory.

    The parsed records are returned untouched so the bundle mirrors the
    source files. Any unreadable or invalid file aborts the whole run.

    Raises:
        BundleError: On the first file that fails to read, parse or validate
    """
    levels = []
    for path in find_level_files(directory, bundle_name):
        try:
            record = json.loads(path.read_text(encoding='utf-8'))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise BundleError(f"Cannot parse level file {path}: {e}") from e
        try:
            Level.from_record(record, path)
        except LevelFormatError as e:
            raise BundleError(str(e)) from e
        log.debug("Collected %s", path.name)
        levels.append(record)
    return levels


def write_bundle(
    directory: Union[str, Path] = ".",
    bundle_name: str = BUNDLE_NAME,
    indent: int = 2,
) -> Path:
    """
    Build the level bundle for a directory.

    Args:
        directory: Directory holding the level files
        bundle_name: File name of the bundle, written into the same directory
        indent: JSON indentation

    Returns:
        Path of the written bundle

    Raises:
        BundleError: If any level file is unreadable; nothing is written then
    """
    directory = Path(directory)
    levels = collect_levels(directory, bundle_name)
    bundle_path = directory / bundle_name
    dump(levels, bundle_path, format='json', indent=indent)
    log.info("Wrote %d levels to %s", len(levels), bundle_path)
    return bundle_path
