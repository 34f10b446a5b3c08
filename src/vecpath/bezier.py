"""Cubic Bezier curve evaluation, subdivision and refitting."""

from __future__ import annotations

from typing import NamedTuple, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from vecpath.common import SINGULAR_DETERMINANT_EPS, GeometryError
from vecpath.coordinate import Coordinate

CubicPoints = Tuple[Tuple[float, float], Tuple[float, float], Tuple[float, float], Tuple[float, float]]


class BezierPointAtTime(NamedTuple):
    """Result of evaluating a cubic Bezier curve with de Casteljau's algorithm.

    Attributes:
        point: The point on the curve.
        e: First level point between p0 and p1.
        h: Second support of the left sub-curve (tangent handle before point).
        i: First support of the right sub-curve (tangent handle after point).
        g: First level point between p2 and p3.
    """

    point: Coordinate
    e: Coordinate
    h: Coordinate
    i: Coordinate
    g: Coordinate


class BezierCurve:
    """Class to handle cubic Bezier curve operations.

    Control points are either given as Coordinates (at_time,
    supports_for_points_at_time) or as arrays of shape (4, 2)
    (evaluate, split_at) or as tuples of (x, y) pairs (subdivide).
    """

    @classmethod
    def at_time(
        # pylint: disable=too-many-arguments,too-many-positional-arguments
        cls,
        p0: Coordinate,
        p1: Coordinate,
        p2: Coordinate,
        p3: Coordinate,
        t: float,
    ) -> BezierPointAtTime:
        """
        Evaluate the curve at time t.

        Besides the point itself, the intermediate points of de Casteljau's
        algorithm are returned, which describe the two sub-curves and the
        local tangent at the point.

        Args:
            p0: Start point
            p1: First support point
            p2: Second support point
            p3: End point
            t: Time along the curve

        Returns:
            BezierPointAtTime: The point and its helper points.
        """
        s = 1.0 - t
        ex, ey = p0.x * s + p1.x * t, p0.y * s + p1.y * t
        fx, fy = p1.x * s + p2.x * t, p1.y * s + p2.y * t
        gx, gy = p2.x * s + p3.x * t, p2.y * s + p3.y * t
        hx, hy = ex * s + fx * t, ey * s + fy * t
        ix, iy = fx * s + gx * t, fy * s + gy * t
        x, y = hx * s + ix * t, hy * s + iy * t
        return BezierPointAtTime(
            Coordinate(x, y),
            Coordinate(ex, ey),
            Coordinate(hx, hy),
            Coordinate(ix, iy),
            Coordinate(gx, gy),
        )

    @classmethod
    def evaluate(
        cls,
        points: Union[Sequence[Tuple[float, float]], NDArray[np.float64]],
        t: Union[float, Sequence[float], NDArray[np.float64]],
    ) -> NDArray[np.float64]:
        """
        Evaluate the curve at one or several times using vectorized operations.

        Args:
            points: Control points, must contain exactly 4 points: start, control1, control2, end
            t: A time or an array of times

        Returns:
            NDArray[np.float64] of shape (n, 2) with the points on the curve
        """
        points_array = np.asarray(points, dtype=np.float64)
        t_array = np.atleast_1d(np.asarray(t, dtype=np.float64))

        # Cubic Bezier basis functions
        omt = 1 - t_array
        omt2 = omt**2
        omt3 = omt2 * omt
        t2 = t_array**2
        t3 = t2 * t_array

        x = (
            omt3 * points_array[0, 0]
            + 3 * omt2 * t_array * points_array[1, 0]
            + 3 * omt * t2 * points_array[2, 0]
            + t3 * points_array[3, 0]
        )
        y = (
            omt3 * points_array[0, 1]
            + 3 * omt2 * t_array * points_array[1, 1]
            + 3 * omt * t2 * points_array[2, 1]
            + t3 * points_array[3, 1]
        )
        return np.column_stack([x, y])

    @classmethod
    def split_at(
        cls, points: Union[Sequence[Tuple[float, float]], NDArray[np.float64]], t: float
    ) -> Tuple[NDArray[np.float64], NDArray[np.float64]]:
        """
        Split the curve at time t with de Casteljau's algorithm.

        Returns:
            Tuple of two arrays of shape (4, 2): the sub-curves for [0, t] and [t, 1]
        """
        p = np.asarray(points, dtype=np.float64)
        e = p[0] + t * (p[1] - p[0])
        f = p[1] + t * (p[2] - p[1])
        g = p[2] + t * (p[3] - p[2])
        h = e + t * (f - e)
        i = f + t * (g - f)
        j = h + t * (i - h)
        return np.array([p[0], e, h, j]), np.array([j, i, g, p[3]])

    @classmethod
    def subdivide(cls, points: Sequence[Tuple[float, float]]) -> Tuple[CubicPoints, CubicPoints]:
        """
        Split the curve into its two halves using pure Python.

        Used in tight recursions where the NumPy overhead of split_at dominates.

        Returns:
            Tuple of the control points of the halves for [0, 0.5] and [0.5, 1]
        """
        (ax, ay), (bx, by), (cx, cy), (dx, dy) = points

        ex, ey = (ax + bx) / 2, (ay + by) / 2
        fx, fy = (bx + cx) / 2, (by + cy) / 2
        gx, gy = (cx + dx) / 2, (cy + dy) / 2

        hx, hy = (ex + fx) / 2, (ey + fy) / 2
        ix, iy = (fx + gx) / 2, (fy + gy) / 2

        jx, jy = (hx + ix) / 2, (hy + iy) / 2

        return (
            ((ax, ay), (ex, ey), (hx, hy), (jx, jy)),
            ((jx, jy), (ix, iy), (gx, gy), (dx, dy)),
        )

    @classmethod
    def supports_for_points_at_time(
        # pylint: disable=too-many-arguments,too-many-positional-arguments
        cls,
        start: Coordinate,
        p1: Coordinate,
        t1: float,
        p2: Coordinate,
        t2: float,
        end: Coordinate,
    ) -> Tuple[Coordinate, Coordinate]:
        """
        Compute the support points of a curve from start to end that passes
        through p1 at time t1 and through p2 at time t2.

        Args:
            start: Start point of the curve
            p1: Point the curve passes at time t1
            t1: First time
            p2: Point the curve passes at time t2
            t2: Second time
            end: End point of the curve

        Returns:
            Tuple[Coordinate, Coordinate]: The two support points.

        Raises:
            GeometryError: If the two times do not determine the supports
                (e.g. t1 == t2 or a time of 0 or 1).
        """
        s1 = 1.0 - t1
        s2 = 1.0 - t2
        system = np.array(
            [
                [3.0 * s1 * s1 * t1, 3.0 * s1 * t1 * t1],
                [3.0 * s2 * s2 * t2, 3.0 * s2 * t2 * t2],
            ],
            dtype=np.float64,
        )
        det = float(np.linalg.det(system))
        if abs(det) < SINGULAR_DETERMINANT_EPS:
            raise GeometryError(f"Times {t1} and {t2} do not determine the support points")

        rhs = np.array(
            [
                [
                    p1.x - s1**3 * start.x - t1**3 * end.x,
                    p1.y - s1**3 * start.y - t1**3 * end.y,
                ],
                [
                    p2.x - s2**3 * start.x - t2**3 * end.x,
                    p2.y - s2**3 * start.y - t2**3 * end.y,
                ],
            ],
            dtype=np.float64,
        )
        supports = np.linalg.solve(system, rhs)
        return (
            Coordinate(float(supports[0, 0]), float(supports[0, 1])),
            Coordinate(float(supports[1, 0]), float(supports[1, 1])),
        )
