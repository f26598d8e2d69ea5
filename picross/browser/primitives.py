"""
Geometry primitives for the input bridge.

Plain frozen dataclasses: these modules also run under pygbag, where
pydantic's compiled core is not available.
"""
from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class Point2D:
    """Immutable 2D point."""
    x: float
    y: float

    def to_payload(self) -> List[float]:
        return [self.x, self.y]

    def __str__(self) -> str:
        return f"Point2D(x={self.x:.2f}, y={self.y:.2f})"


@dataclass(frozen=True)
class Rectangle:
    """Rectangle defined by position and dimensions."""
    x: float
    y: float
    width: float
    height: float

    @property
    def left(self) -> float:
        return self.x

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def top(self) -> float:
        return self.y

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def contains_point(self, point: Point2D) -> bool:
        return (self.left <= point.x < self.right and
                self.top <= point.y < self.bottom)

    def __str__(self) -> str:
        return f"Rectangle(x={self.x:.2f}, y={self.y:.2f}, w={self.width:.2f}, h={self.height:.2f})"


@dataclass(frozen=True)
class BoardGeometry:
    """
    Board size as reported to the game layer.

    Origin comes from the content bounding box; each dimension is the larger
    of the bounding box and the client rect, since the two disagree while
    the board is not fully rendered.
    """
    x: float
    y: float
    width: float
    height: float

    @classmethod
    def measure(cls, bbox: Rectangle, client_rect: Rectangle) -> 'BoardGeometry':
        return cls(
            x=bbox.x,
            y=bbox.y,
            width=max(bbox.width, client_rect.width),
            height=max(bbox.height, client_rect.height),
        )

    def to_payload(self) -> List[float]:
        return [self.x, self.y, self.width, self.height]
