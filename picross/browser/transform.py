"""
Screen-to-board coordinate transforms.

The board reports its current transformation matrix (CTM) as the six SVG
matrix components; the bridge inverts it to map device coordinates back into
board space.
"""
from typing import Sequence

import numpy as np

from picross.errors import BridgeError
from .primitives import Point2D, Rectangle


class ScreenTransform:
    """
    3x3 affine matrix mapping board-local coordinates to screen coordinates.

    Components follow the SVG convention:

        | a  c  e |
        | b  d  f |
        | 0  0  1 |
    """

    def __init__(self, matrix: np.ndarray):
        if matrix.shape != (3, 3):
            raise ValueError(f"Expected 3x3 array, got {matrix.shape}")
        self.matrix = matrix

    @classmethod
    def from_components(cls, a: float, b: float, c: float, d: float, e: float, f: float) -> 'ScreenTransform':
        return cls(np.array([
            [a, c, e],
            [b, d, f],
            [0.0, 0.0, 1.0],
        ], dtype=np.float64))

    @classmethod
    def identity(cls) -> 'ScreenTransform':
        return cls(np.eye(3, dtype=np.float64))

    def inverse(self) -> 'ScreenTransform':
        """
        Raises:
            BridgeError: If the matrix is singular (e.g. a zero-size board)
        """
        try:
            return ScreenTransform(np.linalg.inv(self.matrix))
        except np.linalg.LinAlgError as e:
            raise BridgeError(f"Board transform is not invertible: {e}") from e

    def apply(self, point: Point2D) -> Point2D:
        x, y, w = self.matrix @ np.array([point.x, point.y, 1.0])
        return Point2D(x=float(x / w), y=float(y / w))

    def components(self) -> Sequence[float]:
        m = self.matrix
        return (m[0, 0], m[1, 0], m[0, 1], m[1, 1], m[0, 2], m[1, 2])


def screen_to_board_matrix(ctm: ScreenTransform, point: Point2D) -> Point2D:
    """Map a device point into board space with the inverse CTM."""
    return ctm.inverse().apply(point)


def screen_to_board_offset(client_rect: Rectangle, point: Point2D) -> Point2D:
    """Map a device point relative to the board's client rect origin."""
    return Point2D(x=point.x - client_rect.left, y=point.y - client_rect.top)
