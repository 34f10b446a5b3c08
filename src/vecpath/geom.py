"""Handling geometries"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray


###############################################################################
# GeomMath
###############################################################################
class GeomMath:
    """Class to provide various static methods related to geometry handling."""

    @staticmethod
    def transform_point(
        affine_trafo: Sequence[Union[int, float]], point: Sequence[Union[int, float]]
    ) -> Tuple[float, float]:
        """
        Perform an affine transformation on the given 2D point.

        The given _affine_trafo_ is a list of 6 floats, performing an affine transformation.
        The transformation is defined as:
            | x' | = | a00 a01 b0 |   | x |
            | y' | = | a10 a11 b1 | * | y |
            | 1  | = |  0   0  1  |   | 1 |
        with
            affine_trafo = [a00, a01, a10, a11, b0, b1]

        Args:
            affine_trafo (Tuple/List[float]): Affine transformation - [a00, a01, a10, a11, b0, b1]
            point (Tuple/List[float]): 2D point - (x, y)

        Returns:
            Tuple[float, float]: the transformed point
        """
        x_new = float(affine_trafo[0] * point[0] + affine_trafo[1] * point[1] + affine_trafo[4])
        y_new = float(affine_trafo[2] * point[0] + affine_trafo[3] * point[1] + affine_trafo[5])
        return (x_new, y_new)

    @staticmethod
    def line_parameters(
        # pylint: disable=too-many-arguments,too-many-positional-arguments
        ax: float,
        ay: float,
        bx: float,
        by: float,
        cx: float,
        cy: float,
        dx: float,
        dy: float,
        min_det: float = 0.0,
    ) -> Optional[Tuple[float, float]]:
        """
        Solve a + t*(b-a) = c + s*(d-c) for (t, s) using Cramer's rule.

        Args:
            ax, ay, bx, by: Start and end of the first line
            cx, cy, dx, dy: Start and end of the second line
            min_det: Determinants with magnitude not larger than this value
                count as parallel

        Returns:
            Optional[Tuple[float, float]]: (t, s) or None for (nearly) parallel lines
        """
        a = dx - cx
        b = ax - bx
        c = cx - ax
        d = dy - cy
        e = ay - by
        f = cy - ay

        det = a * e - b * d
        if abs(det) <= min_det:
            return None
        return (c * d - a * f) / det, (b * f - e * c) / det


###############################################################################
# BoundingBox
###############################################################################
@dataclass
class BoundingBox:
    """Axis-aligned box used to reject segment pairs that cannot meet.

    Corners given in the wrong order are swapped, so xmin <= xmax and
    ymin <= ymax hold for every box.
    """

    xmin: float
    ymin: float
    xmax: float
    ymax: float

    def __post_init__(self):
        if self.xmin > self.xmax:
            self.xmin, self.xmax = self.xmax, self.xmin
        if self.ymin > self.ymax:
            self.ymin, self.ymax = self.ymax, self.ymin

    @classmethod
    def from_points(cls, points: Union[Sequence[Tuple[float, float]], NDArray[np.float64]]) -> BoundingBox:
        """Tightest box around (x, y) points; an empty set gives a box at the origin."""
        pts = np.asarray(points, dtype=np.float64)
        if pts.size == 0:
            return cls(0.0, 0.0, 0.0, 0.0)
        mins = pts[:, :2].min(axis=0)
        maxs = pts[:, :2].max(axis=0)
        return cls(float(mins[0]), float(mins[1]), float(maxs[0]), float(maxs[1]))

    def union(self, other: BoundingBox) -> BoundingBox:
        """Smallest box enclosing both boxes."""
        return BoundingBox(
            min(self.xmin, other.xmin),
            min(self.ymin, other.ymin),
            max(self.xmax, other.xmax),
            max(self.ymax, other.ymax),
        )

    def overlaps(self, other: BoundingBox, tolerance: float = 0.0) -> bool:
        """
        Check whether two boxes share at least one point.

        Args:
            other: Box to compare with
            tolerance: Gap between the boxes that still counts as overlap

        Returns:
            bool: True if the boxes, grown by tolerance, touch or intersect
        """
        return (
            self.xmax >= other.xmin - tolerance
            and self.xmin <= other.xmax + tolerance
            and self.ymax >= other.ymin - tolerance
            and self.ymin <= other.ymax + tolerance
        )
