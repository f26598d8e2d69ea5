"""Unified YAML/JSON loader for picross.

Level files and tool configuration can be written in either format; the
format is picked from the file extension.

Usage:
    from picross.yaml import load, loads, dump, dumps

    # Load from file (auto-detects format from extension)
    data = load(Path('picross.yaml'))
    data = load(Path('1.json'))

    # Load from string (specify format)
    data = loads(content, format='json')

    # Dump to file or string
    dump(levels, Path('levels.json'))
    text = dumps(level, format='json')

Environment variables:
    PICROSS_FORCE_JSON: If set, files without a known extension are read as JSON
"""

from pathlib import Path
from typing import Any, IO, Optional, Union
import json
import os

import yaml as _yaml

FORCE_JSON = bool(os.environ.get('PICROSS_FORCE_JSON'))


def _detect_format(path: Union[str, Path]) -> str:
    """Detect file format from extension."""
    suffix = Path(path).suffix.lower()
    if suffix in ('.yaml', '.yml'):
        return 'yaml'
    elif suffix == '.json':
        return 'json'
    else:
        return 'json' if FORCE_JSON else 'yaml'


def load(
    source: Union[str, Path, IO[str]],
    format: Optional[str] = None,
) -> Any:
    """Load data from a file path or file-like object.

    Args:
        source: File path (str or Path) or file-like object
        format: 'yaml', 'json', or None to auto-detect from extension

    Returns:
        Parsed data (usually dict or list)

    Raises:
        FileNotFoundError: If file doesn't exist
        json.JSONDecodeError: If JSON parsing fails
        yaml.YAMLError: If YAML parsing fails
    """
    if isinstance(source, (str, Path)):
        path = Path(source)
        if format is None:
            format = _detect_format(path)

        with open(path, 'r', encoding='utf-8') as f:
            return _load_from_file(f, format)

    if format is None:
        name = getattr(source, 'name', None)
        format = _detect_format(name) if name else 'json'

    return _load_from_file(source, format)


def _load_from_file(f: IO[str], format: str) -> Any:
    if format == 'yaml':
        return _yaml.safe_load(f)
    return json.load(f)


def loads(content: str, format: str = 'json') -> Any:
    """Load data from a string ('yaml' or 'json')."""
    if format == 'yaml':
        return _yaml.safe_load(content)
    return json.loads(content)


def dump(
    data: Any,
    dest: Union[str, Path, IO[str]],
    format: Optional[str] = None,
    **kwargs: Any,
) -> None:
    """Dump data to a file path or file-like object.

    Args:
        data: Data to serialize
        dest: File path (str or Path) or file-like object
        format: 'yaml', 'json', or None to auto-detect from extension
        **kwargs: Additional arguments passed to yaml.dump or json.dump
    """
    if isinstance(dest, (str, Path)):
        path = Path(dest)
        if format is None:
            format = _detect_format(path)

        with open(path, 'w', encoding='utf-8') as f:
            f.write(dumps(data, format=format, **kwargs))
        return

    if format is None:
        name = getattr(dest, 'name', None)
        format = _detect_format(name) if name else 'json'

    dest.write(dumps(data, format=format, **kwargs))


def dumps(data: Any, format: str = 'json', **kwargs: Any) -> str:
    """Dump data to a string.

    JSON output defaults to two-space indentation, which is the layout the
    level files are authored in.
    """
    if format == 'yaml':
        kwargs.setdefault('default_flow_style', False)
        kwargs.setdefault('allow_unicode', True)
        return _yaml.dump(data, **kwargs)
    else:
        kwargs.setdefault('indent', 2)
        kwargs.setdefault('ensure_ascii', False)
        return json.dumps(data, **kwargs)
