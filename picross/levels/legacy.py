"""
Legacy .non level conversion.

The old level format is line-oriented text:

    title Smiley
    width 3
    height 2
    goal [101010]

'goal' is the solution grid flattened row by row. Converted levels get
sequential numeric names.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from picross.errors import LegacyFormatError
from picross.levels.models import Level
from picross.logging import get_logger
from picross.yaml import dump

log = get_logger('legacy')

LEGACY_KEYS = ('height', 'width', 'goal', 'title')
REQUIRED_KEYS = ('width', 'height', 'goal')
CONVERTED_DIR = Path("converted")
FIRST_ID = 5


@dataclass
class SequentialIds:
    """Hands out consecutive level names for one conversion run."""
    start: int = FIRST_ID
    _next: int = field(init=False)

    def __post_init__(self):
        self._next = self.start

    def __iter__(self):
        return self

    def __next__(self) -> int:
        value = self._next
        self._next += 1
        return value

    @property
    def peek(self) -> int:
        return self._next


def parse_tokens(text: str) -> Dict[str, str]:
    """
    Collect 'key value' lines for the recognized keys.

    Unknown lines are ignored; a repeated key keeps its last value.
    """
    tokens: Dict[str, str] = {}
    for line in text.split('\n'):
        line = line.rstrip('\r')
        for key in LEGACY_KEYS:
            if line.startswith(key + ' '):
                tokens[key] = line[len(key) + 1:]
                break
    return tokens


def _positive_int(tokens: Dict[str, str], key: str, source: str) -> int:
    try:
        value = int(tokens[key].strip(), 10)
    except ValueError:
        raise LegacyFormatError(f"{source}: {key} must be an integer, got {tokens[key]!r}") from None
    if value <= 0:
        raise LegacyFormatError(f"{source}: {key} must be positive, got {value}")
    return value


def goal_to_grid(goal: str, width: int, height: int, source: str = "goal") -> List[List[int]]:
    """
    Turn a bracketed goal string into a grid of rows.

    Raises:
        LegacyFormatError: If the digits don't fill exactly width x height cells
    """
    digits = goal.strip()[1:-1]
    if len(digits) != width * height:
        raise LegacyFormatError(
            f"{source}: goal has {len(digits)} cells, expected {width}x{height}={width * height}"
        )
    if not digits.isdigit():
        raise LegacyFormatError(f"{source}: goal must contain only digits, got {digits!r}")
    return [
        [int(ch) for ch in digits[row * width:(row + 1) * width]]
        for row in range(height)
    ]


def convert_text(text: str, ids: SequentialIds, source: str = "<legacy>") -> Level:
    """
    Convert one legacy record to a Level.

    Raises:
        LegacyFormatError: If width, height or goal is missing or malformed
    """
    tokens = parse_tokens(text)
    missing = [key for key in REQUIRED_KEYS if key not in tokens]
    if missing:
        raise LegacyFormatError(f"{source}: missing {', '.join(missing)}")

    width = _positive_int(tokens, 'width', source)
    height = _positive_int(tokens, 'height', source)
    content = goal_to_grid(tokens['goal'], width, height, source)

    level = Level.from_record({
        "name": str(ids.peek),
        "description": tokens.get("title", ""),
        "content": content,
    }, Path(source))
    next(ids)
    return level


class LegacyConverter:
    """
    Converts .non files into level JSON files.

    One converter is one run: it owns the sequential name counter and the
    output directory.
    """

    def __init__(
        self,
        output_dir: Union[str, Path] = CONVERTED_DIR,
        start: int = FIRST_ID,
        indent: int = 2,
        overwrite: bool = True,
    ):
        """
        Args:
            output_dir: Directory that receives <name>.json files
            start: First numeric level name
            indent: JSON indentation
            overwrite: Replace existing <name>.json files. When False an
                existing file holding the same level is kept (uuid included)
                and one holding a different level stops the run
        """
        self.output_dir = Path(output_dir)
        self.ids = SequentialIds(start)
        self.indent = indent
        self.overwrite = overwrite

    def convert_file(self, source: Union[str, Path]) -> Path:
        """Convert a single .non file and return the written JSON path."""
        source = Path(source)
        level = convert_text(source.read_text(encoding='utf-8'), self.ids, source.name)

        self.output_dir.mkdir(parents=True, exist_ok=True)
        out_path = self.output_dir / f"{level.name}.json"
        if out_path.exists() and not self.overwrite:
            existing = Level.load(out_path)
            if (existing.content, existing.description) != (level.content, level.description):
                raise LegacyFormatError(
                    f"{source.name}: {out_path} already exists and holds a different level"
                )
            log.info("Keeping %s, already converted from %s", out_path, source.name)
            return out_path

        dump(level.to_record(), out_path, format='json', indent=self.indent)
        log.info("Converted %s -> %s", source.name, out_path)
        return out_path

    def convert_all(self, sources: Iterable[Union[str, Path]]) -> List[Path]:
        """Convert files in order. The first bad file stops the run."""
        return [self.convert_file(source) for source in sources]


def find_legacy_files(paths: Iterable[Union[str, Path]]) -> List[Path]:
    """Expand directories to their sorted *.non files; files pass through."""
    found: List[Path] = []
    for path in map(Path, paths):
        if path.is_dir():
            found.extend(sorted(path.glob('*.non')))
        else:
            found.append(path)
    return found


def convert_legacy(
    sources: Iterable[Union[str, Path]],
    output_dir: Union[str, Path] = CONVERTED_DIR,
    start: Optional[int] = None,
) -> List[Path]:
    """Convenience wrapper: convert .non files or directories in one run."""
    converter = LegacyConverter(output_dir, FIRST_ID if start is None else start)
    return converter.convert_all(find_legacy_files(sources))
