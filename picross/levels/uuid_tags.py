"""
UUID injection for level files.

Gives every level file a stable "uuid" key right after its "name" key.
The edit is textual so the rest of the file keeps its authored layout.
Files that already carry a uuid are left alone, which makes the tool safe to
re-run.
"""
import os
import re
import uuid
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Optional, Union

from picross.levels.bundle import BUNDLE_NAME
from picross.logging import get_logger

log = get_logger('uuid_tags')

UUID_LINE = re.compile(r'\s*"uuid":')
NAME_LINE = re.compile(r'(\s*)"name":')

# ignore(path, is_dir) -> True to skip the entry
IgnoreFunc = Callable[[Path, bool], bool]


class TagResult(str, Enum):
    """Outcome of tagging a single file."""
    TAGGED = "tagged"
    ALREADY_TAGGED = "already_tagged"
    NO_NAME = "no_name"


def default_ignore(path: Path, is_dir: bool, bundle_name: str = BUNDLE_NAME) -> bool:
    """Skip everything except level files. Directories are always searched."""
    if is_dir:
        return False
    return path.suffix != '.json' or path.name == bundle_name


def iter_level_files(
    root: Union[str, Path],
    ignore: Optional[IgnoreFunc] = None,
    bundle_name: str = BUNDLE_NAME,
) -> Iterator[Path]:
    """
    Walk a tree and yield the level files to tag, in sorted order.

    Args:
        root: Directory to search recursively
        ignore: Extra predicate; entries it accepts are skipped (directories
            are pruned)
        bundle_name: Aggregate file name to leave alone
    """
    for dirpath, dirnames, filenames in os.walk(root):
        base = Path(dirpath)
        dirnames[:] = sorted(
            d for d in dirnames
            if not (ignore and ignore(base / d, True))
        )
        for filename in sorted(filenames):
            path = base / filename
            if default_ignore(path, False, bundle_name):
                continue
            if ignore and ignore(path, False):
                continue
            yield path


def has_uuid(lines: List[str]) -> bool:
    return any(UUID_LINE.search(line) for line in lines)


def insert_uuid_line(lines: List[str], new_uuid: Optional[str] = None) -> bool:
    """
    Insert a uuid line after the first "name" line, matching its indentation.

    Returns:
        False if there is no "name" line (lines are unchanged)
    """
    for index, line in enumerate(lines):
        match = NAME_LINE.search(line)
        if match:
            value = new_uuid or str(uuid.uuid4())
            lines.insert(index + 1, f'{match.group(1)}"uuid": "{value}",')
            return True
    return False


def insert_uuid(path: Union[str, Path]) -> TagResult:
    """
    Tag one level file with a fresh UUID v4.

    Line endings are preserved: the file is split on '\\n' and joined back the
    same way.
    """
    path = Path(path)
    with open(path, 'r', encoding='utf-8', newline='') as f:
        lines = f.read().split('\n')

    if has_uuid(lines):
        log.warning("Found an existing uuid field in %s, skipping", path)
        return TagResult.ALREADY_TAGGED

    if not insert_uuid_line(lines):
        return TagResult.NO_NAME

    with open(path, 'w', encoding='utf-8', newline='') as f:
        f.write('\n'.join(lines))
    log.info("Tagged %s", path)
    return TagResult.TAGGED


def tag_tree(
    root: Union[str, Path] = ".",
    ignore: Optional[IgnoreFunc] = None,
    bundle_name: str = BUNDLE_NAME,
) -> Dict[Path, TagResult]:
    """
    Tag every level file under root, one file at a time.

    Returns:
        Mapping of file path to its tagging outcome
    """
    results: Dict[Path, TagResult] = {}
    for path in iter_level_files(root, ignore, bundle_name):
        results[path] = insert_uuid(path)
    return results
