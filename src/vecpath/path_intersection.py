"""Intersection search between two paths.

Both paths are turned into flat segment lists. Bounding boxes over
contiguous index ranges are memoized, which yields an implicit balanced
bounding-volume hierarchy: a range box is the union of the boxes of its two
half ranges. The search descends both hierarchies simultaneously and only
looks at segment pairs whose boxes overlap. Pairs involving a curve are
solved by recursive subdivision of both curves.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from vecpath.bezier import BezierCurve, CubicPoints
from vecpath.common import COINCIDENT_MIN_CHORD, EPSILON
from vecpath.coordinate import Coordinate
from vecpath.geom import BoundingBox, GeomMath
from vecpath.path_support import PathElement, Segment, segmentize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Intersection:
    """A point where a path crosses another path.

    Attributes:
        index: Position of the element of the receiving path containing the point
        time: Fraction along that segment (0 at its start, 1 at its end)
        point: The intersection point
    """

    index: int
    time: float
    point: Coordinate


###############################################################################
# RangeBoxMemo
###############################################################################


class RangeBoxMemo:
    """Memoized bounding boxes over inclusive index ranges of a segment list."""

    def __init__(self, segments: Sequence[Segment]):
        self._boxes: Dict[Tuple[int, int], BoundingBox] = {(i, i): seg.box for i, seg in enumerate(segments)}

    def box(self, i: int, j: int) -> BoundingBox:
        """Bounding box of the segments i..j (inclusive)."""
        b = self._boxes.get((i, j))
        if b is None:
            assert i < j, "memoization table filled incorrectly"
            mid = (i + j) // 2
            b = self.box(i, mid).union(self.box(mid + 1, j))
            self._boxes[(i, j)] = b
        return b

    def __len__(self) -> int:
        return len(self._boxes)


###############################################################################
# Curve intersection
###############################################################################


def _control_box(c: CubicPoints) -> Tuple[float, float, float, float]:
    xs = (c[0][0], c[1][0], c[2][0], c[3][0])
    ys = (c[0][1], c[1][1], c[2][1], c[3][1])
    return min(xs), min(ys), max(xs), max(ys)


def _on_chord_line(c: CubicPoints, points: CubicPoints) -> bool:
    """True if all points lie within EPSILON of the line through c's end points."""
    (ax, ay), _, _, (dx, dy) = c
    ux, uy = dx - ax, dy - ay
    length = math.hypot(ux, uy)
    if length < COINCIDENT_MIN_CHORD:
        return False
    return all(abs((px - ax) * uy - (py - ay) * ux) <= EPSILON * length for px, py in points)


def _coincident(c1: CubicPoints, c2: CubicPoints) -> bool:
    """True if both curve pieces run along the same straight line."""
    return _on_chord_line(c1, c2) and _on_chord_line(c2, c1)


def _subdivision_depth(c1: CubicPoints, c2: CubicPoints) -> int:
    """Number of halvings after which a control box is smaller than EPSILON."""
    size = EPSILON
    for c in (c1, c2):
        min_x, min_y, max_x, max_y = _control_box(c)
        size = max(size, max_x - min_x, max_y - min_y)
    return max(1, math.ceil(math.log2(size / EPSILON)) + 2)


def _chord_crossing(
    t0: float, t1: float, c1: CubicPoints, c2: CubicPoints, found: List[Tuple[float, Coordinate]]
) -> None:
    (ax, ay), _, _, (dx, dy) = c1
    params = GeomMath.line_parameters(ax, ay, dx, dy, c2[0][0], c2[0][1], c2[3][0], c2[3][1])
    if params is None:
        return
    t = min(max(params[0], 0.0), 1.0)
    found.append((t0 + t * (t1 - t0), Coordinate(ax + t * (dx - ax), ay + t * (dy - ay))))


def intersect_curves(
    # pylint: disable=too-many-arguments,too-many-positional-arguments
    t0: float,
    t1: float,
    c1: CubicPoints,
    c2: CubicPoints,
    found: List[Tuple[float, Coordinate]],
    depth: int = 0,
    max_depth: Optional[int] = None,
) -> None:
    """
    Intersect two cubic curves by recursive subdivision.

    Both curves are halved until the control box of c1 is smaller than
    EPSILON in both directions, or until max_depth halvings were done. Then
    the chords of the two curves are intersected. Times refer to c1 and are
    mapped into [t0, t1].

    Pieces that run along each other (overlapping or identical curves) do
    not cross and are not subdivided further.

    Args:
        t0: Time of c1's start on the original curve
        t1: Time of c1's end on the original curve
        c1: Control points of the first curve
        c2: Control points of the second curve
        found: Receives (time, point) pairs
        depth: Number of halvings done so far
        max_depth: Limit for depth, derived from the curve sizes if None
    """
    c1_min_x, c1_min_y, c1_max_x, c1_max_y = _control_box(c1)
    c2_min_x, c2_min_y, c2_max_x, c2_max_y = _control_box(c2)

    if not (c1_max_x >= c2_min_x and c1_min_x <= c2_max_x and c1_max_y >= c2_min_y and c1_min_y <= c2_max_y):
        return

    if max_depth is None:
        max_depth = _subdivision_depth(c1, c2)

    if _coincident(c1, c2):
        return

    if (c1_max_x - c1_min_x < EPSILON and c1_max_y - c1_min_y < EPSILON) or depth >= max_depth:
        _chord_crossing(t0, t1, c1, c2, found)
        return

    c1_left, c1_right = BezierCurve.subdivide(c1)
    c2_left, c2_right = BezierCurve.subdivide(c2)
    t_mid = (t0 + t1) / 2
    depth += 1

    intersect_curves(t0, t_mid, c1_left, c2_left, found, depth, max_depth)
    intersect_curves(t0, t_mid, c1_left, c2_right, found, depth, max_depth)
    intersect_curves(t_mid, t1, c1_right, c2_left, found, depth, max_depth)
    intersect_curves(t_mid, t1, c1_right, c2_right, found, depth, max_depth)


def intersect_segments(s1: Segment, s2: Segment) -> List[Tuple[float, Coordinate]]:
    """Return (time on s1, point) for all crossings of two segments."""
    if s1.action == "lineto" and s2.action == "lineto":
        params = GeomMath.line_parameters(
            s1.start.x,
            s1.start.y,
            s1.end.x,
            s1.end.y,
            s2.start.x,
            s2.start.y,
            s2.end.x,
            s2.end.y,
            min_det=EPSILON * EPSILON,
        )
        if params is not None:
            t, s = params
            if 0.0 <= t <= 1.0 and 0.0 <= s <= 1.0:
                return [(t, s1.start.clone().move_towards(s1.end, t))]
        return []

    found: List[Tuple[float, Coordinate]] = []
    intersect_curves(0.0, 1.0, s1.control_points(), s2.control_points(), found)
    return found


###############################################################################
# Path intersection
###############################################################################


def find_intersections(elements1: Sequence[PathElement], elements2: Sequence[PathElement]) -> List[Intersection]:
    """
    Compute all points where the first path crosses the second one.

    Returns:
        List[Intersection]: Sorted by element position, then time, with points
            closer than EPSILON (Manhattan distance) to their predecessor removed.
    """
    p1 = segmentize(elements1)
    p2 = segmentize(elements2)
    if not p1 or not p2:
        return []

    memo1 = RangeBoxMemo(p1)
    memo2 = RangeBoxMemo(p2)
    tolerance = EPSILON * EPSILON
    intersections: List[Intersection] = []

    def intersect(i1: int, j1: int, i2: int, j2: int) -> None:
        if not memo1.box(i1, j1).overlaps(memo2.box(i2, j2), tolerance):
            return

        if i1 == j1 and i2 == j2:
            for time, point in intersect_segments(p1[i1], p2[i2]):
                intersections.append(Intersection(p1[i1].index, time, point))
        elif i1 == j1:
            m2 = (i2 + j2) // 2
            intersect(i1, j1, i2, m2)
            intersect(i1, j1, m2 + 1, j2)
        elif i2 == j2:
            m1 = (i1 + j1) // 2
            intersect(i1, m1, i2, j2)
            intersect(m1 + 1, j1, i2, j2)
        else:
            m1 = (i1 + j1) // 2
            m2 = (i2 + j2) // 2
            intersect(i1, m1, i2, m2)
            intersect(m1 + 1, j1, i2, m2)
            intersect(i1, m1, m2 + 1, j2)
            intersect(m1 + 1, j1, m2 + 1, j2)

    intersect(0, len(p1) - 1, 0, len(p2) - 1)

    intersections.sort(key=lambda x: (x.index, x.time))

    remains: List[Intersection] = []
    for candidate in intersections:
        if remains:
            prev = remains[-1].point
            if abs(candidate.point.x - prev.x) + abs(candidate.point.y - prev.y) <= EPSILON:
                continue
        remains.append(candidate)

    logger.debug(
        "Intersected %d with %d segments: %d candidates, %d kept",
        len(p1),
        len(p2),
        len(intersections),
        len(remains),
    )
    return remains
