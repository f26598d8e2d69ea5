"""
Input bridge configuration.

Dataclass-based like the geometry primitives so it loads under pygbag.
"""
from dataclasses import dataclass, fields
from typing import Any, Dict

TRANSFORM_MODES = ("matrix", "rect-offset")


@dataclass
class BridgeConfig:
    """Runtime options for the input bridge."""

    # DOM id of the board element
    board_id: str = "board"

    # Strategy for request-transform-mouse-pos
    transform_mode: str = "matrix"

    # Strategy for request-board-mouse-pos
    board_pos_mode: str = "rect-offset"

    # localStorage key for saved progress
    storage_key: str = "picross-elm"

    def __post_init__(self):
        for name in ("transform_mode", "board_pos_mode"):
            mode = getattr(self, name)
            if mode not in TRANSFORM_MODES:
                raise ValueError(f"{name} must be one of {TRANSFORM_MODES}, got {mode!r}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BridgeConfig':
        """Build from a mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})
