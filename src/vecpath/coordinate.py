"""Mutable 2D coordinates used as points and vectors on paths."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence, Tuple, Union

import numpy as np

from vecpath.geom import GeomMath


def format_number(value: float) -> str:
    """Format a number compactly (up to 14 significant digits, no trailing '.0')."""
    return f"{float(value) + 0.0:.14g}"


###############################################################################
# Coordinate
###############################################################################
@dataclass(eq=False)
class Coordinate:
    """
    A point or a vector in the plane.

    Coordinates are mutable: the in-place operations (add, subtract, scale,
    normalize, apply, move_towards) change the coordinate and return it so
    that calls can be chained. The operators +, - and * return new objects.

    Attributes:
        x (float): The x-coordinate.
        y (float): The y-coordinate.
    """

    x: float
    y: float

    def __init__(self, x: float = 0.0, y: float = 0.0):
        self.x = float(x)
        self.y = float(y)

    def clone(self) -> Coordinate:
        """Return an independent copy of this coordinate."""
        return Coordinate(self.x, self.y)

    def add(self, other: Coordinate) -> Coordinate:
        """Add another coordinate in place."""
        self.x += other.x
        self.y += other.y
        return self

    def subtract(self, other: Coordinate) -> Coordinate:
        """Subtract another coordinate in place."""
        self.x -= other.x
        self.y -= other.y
        return self

    def scale(self, factor: float) -> Coordinate:
        """Scale this coordinate in place."""
        self.x *= factor
        self.y *= factor
        return self

    def norm(self) -> float:
        """Euclidean length of the vector."""
        return math.hypot(self.x, self.y)

    def normalize(self) -> Coordinate:
        """Scale this vector to unit length. The zero vector is left unchanged."""
        length = self.norm()
        if length > 0.0:
            self.x /= length
            self.y /= length
        return self

    def apply(self, trafo) -> Coordinate:
        """
        Apply an affine transformation in place.

        Args:
            trafo: A Transform or an affine_trafo sequence [a00, a01, a10, a11, b0, b1]

        Returns:
            Coordinate: self
        """
        affine_trafo = getattr(trafo, "affine_trafo", trafo)
        self.x, self.y = GeomMath.transform_point(affine_trafo, (self.x, self.y))
        return self

    def move_towards(self, target: Coordinate, time: float) -> Coordinate:
        """
        Move this coordinate in place along the line towards target.

        The new position is self + time * (target - self). The time is not
        clamped, so values outside [0, 1] extrapolate along the line.
        """
        self.x += time * (target.x - self.x)
        self.y += time * (target.y - self.y)
        return self

    def approx_equal(self, other: Coordinate, tol: float = 1e-9) -> bool:
        """Return True if both components differ by at most tol."""
        return abs(self.x - other.x) <= tol and abs(self.y - other.y) <= tol

    def as_tuple(self) -> Tuple[float, float]:
        """The coordinate as tuple (x, y)."""
        return (self.x, self.y)

    @staticmethod
    def bounding_box(
        cloud: Sequence[Coordinate],
    ) -> Tuple[float, float, float, float, float, float]:
        """
        Compute the bounding box of a cloud of coordinates.

        Returns:
            Tuple: (min_x, min_y, max_x, max_y, center_x, center_y),
                all zeros if the cloud is empty.
        """
        if len(cloud) == 0:
            return (0.0, 0.0, 0.0, 0.0, 0.0, 0.0)
        pts = np.array([(c.x, c.y) for c in cloud], dtype=np.float64)
        min_x, min_y = pts.min(axis=0)
        max_x, max_y = pts.max(axis=0)
        return (
            float(min_x),
            float(min_y),
            float(max_x),
            float(max_y),
            float((min_x + max_x) / 2),
            float((min_y + max_y) / 2),
        )

    def __add__(self, other: Coordinate) -> Coordinate:
        return Coordinate(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Coordinate) -> Coordinate:
        return Coordinate(self.x - other.x, self.y - other.y)

    def __mul__(self, factor: Union[int, float]) -> Coordinate:
        return Coordinate(self.x * factor, self.y * factor)

    __rmul__ = __mul__

    def __neg__(self) -> Coordinate:
        return Coordinate(-self.x, -self.y)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Coordinate):
            return NotImplemented
        return self.x == other.x and self.y == other.y

    __hash__ = None  # mutable

    def __str__(self) -> str:
        return f"({format_number(self.x)}pt,{format_number(self.y)}pt)"

    def __repr__(self) -> str:
        return f"Coordinate({self.x!r}, {self.y!r})"
