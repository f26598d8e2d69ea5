"""
Level data models for the Picross level tools.

A level is a named grid of 0/1 cells. These models validate level records
before they go into the bundle; the bundle itself keeps the raw records so
that every entry is written back exactly as it was authored.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from picross.errors import LevelFormatError
from picross.yaml import load as load_data


class Level(BaseModel):
    """
    One puzzle definition.

    Extra keys are kept so tools that rewrite levels never drop authored
    metadata they don't know about.
    """
    model_config = ConfigDict(extra='allow')

    name: Union[str, int]
    description: str = ""
    content: List[List[int]] = Field(..., min_length=1)
    uuid: Optional[str] = None

    @field_validator('content')
    @classmethod
    def validate_cells(cls, v):
        for r, row in enumerate(v):
            for c, cell in enumerate(row):
                if cell not in (0, 1):
                    raise ValueError(f"cell ({r}, {c}) must be 0 or 1, got {cell!r}")
        return v

    @field_validator('uuid')
    @classmethod
    def validate_uuid(cls, v):
        if v is not None:
            UUID(v)
        return v

    @model_validator(mode='after')
    def validate_shape(self):
        width = len(self.content[0])
        if width == 0:
            raise ValueError("content rows must not be empty")
        for r, row in enumerate(self.content):
            if len(row) != width:
                raise ValueError(f"row {r} has {len(row)} cells, expected {width}")
        return self

    @property
    def height(self) -> int:
        return len(self.content)

    @property
    def width(self) -> int:
        return len(self.content[0])

    def to_record(self) -> Dict[str, Any]:
        """Serialize for a level file. 'uuid' is only written once assigned."""
        return self.model_dump(exclude_none=True)

    @classmethod
    def from_record(cls, data: Any, source: Optional[Path] = None) -> 'Level':
        """
        Validate a parsed level record.

        Raises:
            LevelFormatError: If the record doesn't match the level schema
        """
        where = source.name if source else "level"
        if not isinstance(data, dict):
            raise LevelFormatError(f"{where}: expected a JSON object, got {type(data).__name__}")
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise LevelFormatError(f"{where}: {e.errors()[0]['msg']}") from e

    @classmethod
    def load(cls, filepath: Union[str, Path]) -> 'Level':
        """Load and validate a level file (JSON or YAML)."""
        path = Path(filepath)
        return cls.from_record(load_data(path), path)


class BundlerConfig(BaseModel):
    """Configuration for the level build pipeline."""
    levels_dir: Path = Path(".")
    bundle_name: str = "levels.json"
    converted_dir: Path = Path("converted")
    first_legacy_id: int = Field(default=5, ge=0)
    indent: int = Field(default=2, ge=0)

    @property
    def bundle_stem(self) -> str:
        return Path(self.bundle_name).stem

    @classmethod
    def load(cls, filepath: Union[str, Path]) -> 'BundlerConfig':
        """Load configuration from a YAML or JSON file."""
        data = load_data(Path(filepath)) or {}
        return cls.model_validate(data)
