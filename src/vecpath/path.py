"""Paths built from straight and cubic Bezier segments and the geometric operations on them."""

from __future__ import annotations

import logging
import math
import numbers
from typing import Any, Iterator, List, NamedTuple, Optional, Sequence, Tuple, Union

from vecpath.bezier import BezierCurve
from vecpath.common import (
    ARC_CENTER_REL_TOL,
    ARC_RADIUS_SLACK,
    PAD_CLOSE_TOLERANCE,
    PAD_PARALLEL_DET_EPS,
    GeometryError,
    MalformedPathError,
)
from vecpath.coordinate import Coordinate
from vecpath.path_intersection import Intersection, find_intersections
from vecpath.path_support import (
    ClosePath,
    CurveTo,
    LineTo,
    MoveTo,
    PathElement,
    PointLike,
    clone_point,
    iter_with_current_point,
    parse_elements,
    resolve_point,
    split_into_subpaths,
    to_operand,
)
from vecpath.transform import Transform

logger = logging.getLogger(__name__)


class PathBounds(NamedTuple):
    """Bounding box of a path together with its center."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float
    center_x: float
    center_y: float


###############################################################################
# Arc helpers
###############################################################################


def _sin_quarter(angle: float) -> float:
    """Exact sine for multiples of 90 degrees."""
    angle = angle % 360
    if angle == 0:
        return 0.0
    if angle == 90:
        return 1.0
    if angle == 180:
        return 0.0
    return -1.0


def _cos_quarter(angle: float) -> float:
    """Exact cosine for multiples of 90 degrees."""
    angle = angle % 360
    if angle == 0:
        return 1.0
    if angle == 90:
        return 0.0
    if angle == 180:
        return -1.0
    return 0.0


def _sin_cos_degrees(angle: float) -> Tuple[float, float]:
    if angle % 90 == 0:
        return _sin_quarter(angle), _cos_quarter(angle)
    rad = math.radians(angle)
    return math.sin(rad), math.cos(rad)


def _atan2_degrees(y: float, x: float) -> float:
    """Like atan2, but in degrees and exactly a multiple of 90 if x or y is zero."""
    if x == 0:
        return -90.0 if y < 0 else 90.0
    if y == 0:
        return 180.0 if x < 0 else 0.0
    return math.degrees(math.atan2(y, x))


###############################################################################
# Path
###############################################################################


class Path:
    """A path in the plane.

    Following the PostScript/PDF/SVG convention, a path consists of a series
    of subpaths, each of which can be closed or not. Each subpath consists of
    a series of cubic Bezier curves and straight line segments.

    The path is stored as a list of elements (MoveTo, LineTo, CurveTo,
    ClosePath). Instead of a Coordinate, an operand may be a DeferredPoint:
    a provider that yields the coordinate once it is called. This allows
    algorithms to add points to a path whose position is not fixed yet.
    """

    # Largest sweep (degrees) of a single Bezier piece of an arc
    ARC_QUARTER: float = 90.0

    # Remaining sweeps above this value are split into two halves
    ARC_SPLIT_LIMIT: float = 179.0

    def __init__(self, elements: Optional[Sequence[PathElement]] = None):
        """
        Initialize a Path from already built elements.

        Args:
            elements: Path elements; the path takes ownership of them.

        Raises:
            MalformedPathError: If an entry is not a PathElement.
        """
        elements_list = [] if elements is None else list(elements)
        for i, element in enumerate(elements_list):
            if not isinstance(element, PathElement):
                raise MalformedPathError(f"Entry {i} is not a path element: {element!r}")
        self._elements: List[PathElement] = elements_list

    @classmethod
    def from_elements(cls, initial: Sequence[Any]) -> Path:
        """
        Create a path from a sequence of command strings and operands.

        Example:
            Path.from_elements(["moveto", 0, 0, "lineto", 10, 0, 10, 10, "closepath"])

        Numbers are paired into Coordinates, an operand without a pending
        command continues the subpath with a lineto.

        Raises:
            MalformedPathError: If the sequence is not a valid path.
        """
        return cls(parse_elements(initial))

    @property
    def elements(self) -> Tuple[PathElement, ...]:
        """The elements of this path (read-only view)."""
        return tuple(self._elements)

    @property
    def is_empty(self) -> bool:
        """True if the path has no elements."""
        return not self._elements

    def __len__(self) -> int:
        return len(self._elements)

    def __iter__(self) -> Iterator[PathElement]:
        return iter(tuple(self._elements))

    ###########################################################################
    # Building
    ###########################################################################

    @staticmethod
    def _operand(x: Any, y: Optional[float] = None) -> PointLike:
        if y is not None:
            return Coordinate(x, y)
        return to_operand(x)

    def append_element(self, element: PathElement) -> None:
        """Append an element to the path."""
        if not isinstance(element, PathElement):
            raise MalformedPathError(f"Not a path element: {element!r}")
        self._elements.append(element)

    def append_moveto(self, x: Any, y: Optional[float] = None) -> None:
        """Append a moveto to a point, or to (x, y) if y is given."""
        self._elements.append(MoveTo(self._operand(x, y)))

    def append_lineto(self, x: Any, y: Optional[float] = None) -> None:
        """Append a lineto to a point, or to (x, y) if y is given."""
        self._elements.append(LineTo(self._operand(x, y)))

    def append_curveto(
        # pylint: disable=too-many-arguments,too-many-positional-arguments
        self,
        a: Any,
        b: Any,
        c: Any,
        d: Optional[float] = None,
        e: Optional[float] = None,
        f: Optional[float] = None,
    ) -> None:
        """
        Append a curveto.

        Either three operands (two supports and the target) or six numbers,
        where two consecutive numbers form a Coordinate.
        """
        if f is not None:
            self._elements.append(CurveTo(Coordinate(a, b), Coordinate(c, d), Coordinate(e, f)))
        elif d is not None or e is not None:
            raise MalformedPathError("curveto needs three points or six numbers")
        else:
            self._elements.append(CurveTo(self._operand(a), self._operand(b), self._operand(c)))

    def append_closepath(self) -> None:
        """Append a closepath."""
        self._elements.append(ClosePath())

    def clear(self) -> None:
        """Make the path empty."""
        self._elements = []

    ###########################################################################
    # Copies and resolution
    ###########################################################################

    def clone(self) -> Path:
        """
        Return a copy of the path.

        Concrete coordinates are copied, deferred points are shared.
        """
        return Path([element.clone() for element in self._elements])

    def make_rigid(self) -> None:
        """Replace all deferred points by the coordinates they yield."""
        for element in self._elements:
            element.make_rigid()

    def coordinates(self) -> List[Coordinate]:
        """All operands of the path in order, deferred points evaluated."""
        cloud: List[Coordinate] = []
        for element in self._elements:
            cloud.extend(element.resolved_operands())
        return cloud

    def current_point(self) -> Optional[Coordinate]:
        """The last operand of the path, or None if the path does not end in a point."""
        if not self._elements:
            return None
        end = self._elements[-1].end_point
        return None if end is None else resolve_point(end)

    def approx_equal(self, other: Path, tol: float = 1e-9) -> bool:
        """Return True if other has the same elements with operands within tol."""
        if len(self._elements) != len(other._elements):
            return False
        return all(a.approx_equal(b, tol) for a, b in zip(self._elements, other._elements))

    ###########################################################################
    # Reversal
    ###########################################################################

    def reversed(self) -> Path:
        """
        Return the path traversed in reverse order.

        Each subpath keeps its open or closed state and the shape of its
        curves (the supports of each curve are swapped). For a closed subpath
        the closepath takes over the line that led away from the start.
        """
        new = Path()

        for subpath in split_into_subpaths(self._elements):
            segments = subpath.segments
            if not segments:
                new.append_moveto(clone_point(subpath.start))
                continue

            new.append_moveto(clone_point(segments[-1].end))

            for k in range(len(segments) - 1, -1, -1):
                seg = segments[k]
                if subpath.closed and seg.closing and resolve_point(seg.start) == resolve_point(seg.end):
                    continue
                if subpath.closed and k == 0 and seg.action == "lineto":
                    # drawn by the closepath
                    continue
                if seg.action == "curveto":
                    new.append_curveto(clone_point(seg.support_2), clone_point(seg.support_1), clone_point(seg.start))
                else:
                    new.append_lineto(clone_point(seg.start))

            if subpath.closed:
                new.append_closepath()

        return new

    ###########################################################################
    # Transformations and bounds
    ###########################################################################

    def _concrete_points(self) -> Iterator[Coordinate]:
        for element in self._elements:
            for op in element.operands():
                if isinstance(op, Coordinate):
                    yield op

    def transform(self, trafo: Transform) -> None:
        """Apply trafo to all concrete coordinates; deferred points are untouched."""
        for point in self._concrete_points():
            point.apply(trafo)

    def shift(self, x: float, y: float) -> None:
        """Shift all concrete coordinates by (x, y)."""
        for point in self._concrete_points():
            point.x += x
            point.y += y

    def shift_by_coordinate(self, offset: Coordinate) -> None:
        """Shift all concrete coordinates by offset."""
        self.shift(offset.x, offset.y)

    def bounding_box(self) -> PathBounds:
        """
        Return the bounding box of the path.

        For curves the supports are used rather than the curve itself, so the
        box is not necessarily minimal. Deferred points are evaluated for the
        computation only.

        Returns:
            PathBounds: (min_x, min_y, max_x, max_y, center_x, center_y),
                all zeros if the path has no coordinates.
        """
        return PathBounds(*Coordinate.bounding_box(self.coordinates()))

    ###########################################################################
    # Intersections
    ###########################################################################

    def intersections_with(self, other: Path) -> List[Intersection]:
        """
        Compute all points where this path crosses other.

        Returns:
            List[Intersection]: Ordered along this path; index is the position
                of the element in self.elements, time the fraction along it.
        """
        return find_intersections(self._elements, other._elements)

    ###########################################################################
    # Cutting
    ###########################################################################

    def _cut_source(self, index: int) -> Tuple[Coordinate, PathElement]:
        if not 0 <= index < len(self._elements):
            raise GeometryError(f"Segment index {index} out of range")
        element = self._elements[index]
        if isinstance(element, MoveTo):
            raise GeometryError(f"Element {index} is a moveto, not a segment")
        previous = self._elements[index - 1].end_point if index > 0 else None
        if previous is None:
            raise GeometryError("segment before intersection does not end with a coordinate")
        return resolve_point(previous).clone(), element

    def _subpath_start_before(self, index: int) -> Coordinate:
        for i in range(index, -1, -1):
            element = self._elements[i]
            if isinstance(element, MoveTo):
                return resolve_point(element.point).clone()
        raise GeometryError("no moveto found in path")

    def cut_at_beginning(self, index: int, time: float) -> None:
        """
        Shorten the path at the beginning.

        Everything before the element at index, and the part of that segment
        before time, is removed. The path then starts with a moveto to the
        point at time.

        Args:
            index: The position of a lineto, curveto or closepath element.
            time: A time along the segment in [0, 1].

        Raises:
            GeometryError: If the element before index does not end in a point
                or a closepath has no enclosing moveto.
        """
        start, element = self._cut_source(index)
        rest = self._elements[index + 1 :]

        if isinstance(element, LineTo):
            start.move_towards(resolve_point(element.point), time)
            cut_path: List[PathElement] = [MoveTo(start), element] + rest
        elif isinstance(element, CurveTo):
            s1 = resolve_point(element.support_1).clone()
            s2 = resolve_point(element.support_2).clone()
            to = resolve_point(element.to)

            start.move_towards(s1, time)
            s1.move_towards(s2, time)
            s2.move_towards(to, time)

            start.move_towards(s1, time)
            s1.move_towards(s2, time)

            start.move_towards(s1, time)

            cut_path = [MoveTo(start), CurveTo(s1, s2, to)] + rest
        else:
            to = self._subpath_start_before(index)
            start.move_towards(to, time)
            cut_path = [MoveTo(start), LineTo(to)] + rest

        logger.debug("Cut %s at beginning of element %d, time %g", type(element).__name__, index, time)
        self._elements = cut_path

    def cut_at_end(self, index: int, time: float) -> None:
        """
        Shorten the path at the end.

        Works like cut_at_beginning, only everything after the point at time
        is removed.
        """
        start, element = self._cut_source(index)
        head = self._elements[:index]
        rest = 1.0 - time

        if isinstance(element, LineTo):
            to = resolve_point(element.point).clone()
            to.move_towards(start, rest)
            cut_path: List[PathElement] = head + [LineTo(to)]
        elif isinstance(element, CurveTo):
            s1 = resolve_point(element.support_1).clone()
            s2 = resolve_point(element.support_2).clone()
            to = resolve_point(element.to).clone()

            to.move_towards(s2, rest)
            s2.move_towards(s1, rest)
            s1.move_towards(start, rest)

            to.move_towards(s2, rest)
            s2.move_towards(s1, rest)

            to.move_towards(s2, rest)

            cut_path = head + [CurveTo(s1, s2, to)]
        else:
            to = self._subpath_start_before(index)
            to.move_towards(start, rest)
            cut_path = head + [LineTo(to)]

        logger.debug("Cut %s at end of element %d, time %g", type(element).__name__, index, time)
        self._elements = cut_path

    ###########################################################################
    # Padding
    ###########################################################################

    @staticmethod
    def _winding_count(vertices: Sequence[Coordinate], closed: bool) -> int:
        """
        Count how often the direction of consecutive edges wraps around.

        The count is negative for counter-clockwise subpaths.
        """
        n = len(vertices)
        edges = [vertices[k + 1] - vertices[k] for k in range(n - 1)]
        if closed:
            edges.append(vertices[0] - vertices[-1])
            edges.append(edges[0])

        count = 0
        for d2, d1 in zip(edges, edges[1:]):
            diff = math.atan2(d2.y, d2.x) - math.atan2(d1.y, d1.x)
            if diff < -math.pi:
                count += 1
            elif diff > math.pi:
                count -= 1
        return count

    @staticmethod
    def _offset_vertex(
        p: Coordinate, d1: Optional[Coordinate], d2: Optional[Coordinate], padding: float, flip: bool
    ) -> Coordinate:
        """
        New position of vertex p whose incoming edge is d1 and outgoing edge is d2.

        The new vertex lies on both edges moved by padding along their normals.
        """
        normals = []
        for d in (d1, d2):
            if d is not None:
                orth = Coordinate(-d.y, d.x).normalize()
                if flip:
                    orth.scale(-1)
                normals.append(orth)

        if len(normals) == 1:
            return p + normals[0] * padding

        orth1, orth2 = normals
        det = orth1.x * orth2.y - orth1.y * orth2.x
        if abs(det) < PAD_PARALLEL_DET_EPS:
            logger.debug("Nearly parallel edges at %s, averaging normals", p)
            c = (orth1 + orth2).scale(padding / 2)
        else:
            c = Coordinate(padding * (orth2.y - orth1.y) / det, padding * (orth1.x - orth2.x) / det)
        return p + c

    def pad(self, padding: float) -> Path:
        """
        Pad the path.

        Suppose the path is stroked with a pen whose width is twice padding.
        The outer edge of this stroke is a path by itself; this method
        computes an approximation of it. The result is correct for polylines
        only; curves are approximated and sharp angles may lead to cusps.

        Args:
            padding: A padding distance.

        Returns:
            Path: The padded path (rigid, the receiver is not changed).
        """
        padded = Path(
            [type(element)(*(op.clone() for op in element.resolved_operands())) for element in self._elements]
        )

        if padding == 0:
            return padded

        padded_elements = padded.elements
        # geometry before padding, the refit samples the curves from here
        unpadded = [element.clone() for element in padded_elements]

        for subpath in split_into_subpaths(padded_elements):
            indices = subpath.element_indices
            vertices: List[Coordinate] = []
            for i in indices:
                vertices.extend(padded_elements[i].operands())
            if len(vertices) < 2:
                continue

            closed = subpath.closed
            skipped: Optional[Coordinate] = None
            if (vertices[-1] - vertices[0]).norm() < PAD_CLOSE_TOLERANCE and len(vertices) > 2:
                skipped = vertices[0]
                vertices = vertices[1:]
                closed = True

            count = self._winding_count(vertices, closed)
            flip = count < 0

            n = len(vertices)
            new_positions = []
            for k, p in enumerate(vertices):
                if closed:
                    d1: Optional[Coordinate] = p - vertices[k - 1]
                    d2: Optional[Coordinate] = vertices[(k + 1) % n] - p
                else:
                    d1 = p - vertices[k - 1] if k > 0 else None
                    d2 = vertices[k + 1] - p if k < n - 1 else None
                new_positions.append(self._offset_vertex(p, d1, d2, padding, flip))

            for p, new_p in zip(vertices, new_positions):
                p.x, p.y = new_p.x, new_p.y
            if skipped is not None:
                skipped.x, skipped.y = vertices[-1].x, vertices[-1].y

            # Refit the supports of the curves
            for i, element, start, _ in iter_with_current_point(unpadded):
                if i not in indices or not isinstance(element, CurveTo) or start is None:
                    continue
                s1, s2, to = element.operands()

                at_1 = BezierCurve.at_time(start, s1, s2, to, 1 / 3)
                at_2 = BezierCurve.at_time(start, s1, s2, to, 2 / 3)

                orth1 = Coordinate(at_1.point.y - at_1.h.y, -(at_1.point.x - at_1.h.x))
                orth1.normalize().scale(-padding)
                orth2 = Coordinate(at_2.point.y - at_2.i.y, -(at_2.point.x - at_2.i.x))
                orth2.normalize().scale(padding)
                if flip:
                    orth1.scale(-1)
                    orth2.scale(-1)

                padded_curve = padded_elements[i]
                padded_start = self._padded_start(padded_elements, i)
                new_s1, new_s2 = BezierCurve.supports_for_points_at_time(
                    padded_start,
                    at_1.point + orth1,
                    1 / 3,
                    at_2.point + orth2,
                    2 / 3,
                    padded_curve.to,
                )
                padded_curve.support_1 = new_s1
                padded_curve.support_2 = new_s2

        return padded

    @staticmethod
    def _padded_start(elements: Sequence[PathElement], index: int) -> Coordinate:
        for i, _, current, _ in iter_with_current_point(elements):
            if i == index:
                return resolve_point(current)
        raise GeometryError(f"Element {index} has no start point")

    ###########################################################################
    # Arcs
    ###########################################################################

    def _append_subarc(
        # pylint: disable=too-many-arguments,too-many-positional-arguments
        self,
        start: Tuple[float, float],
        start_angle: float,
        delta: float,
        radius: float,
        trafo: Optional[Transform],
        center: Tuple[float, float],
    ) -> Tuple[Tuple[float, float], float]:
        end_angle = start_angle + delta
        factor = math.tan(math.radians(delta) / 4) * 4 / 3 * radius

        s190, c190 = _sin_cos_degrees(start_angle + 90)
        s2, c2 = _sin_cos_degrees(end_angle)
        s290, c290 = _sin_cos_degrees(end_angle - 90)

        last_x, last_y = center[0] + c2 * radius, center[1] + s2 * radius

        support_1 = Coordinate(start[0] + c190 * factor, start[1] + s190 * factor)
        support_2 = Coordinate(last_x + c290 * factor, last_y + s290 * factor)
        target = Coordinate(last_x, last_y)
        if trafo is not None:
            support_1.apply(trafo)
            support_2.apply(trafo)
            target.apply(trafo)
        self._elements.append(CurveTo(support_1, support_2, target))

        return (last_x, last_y), end_angle

    def _append_arc_pieces(
        # pylint: disable=too-many-arguments,too-many-positional-arguments
        self,
        start: Coordinate,
        start_angle: float,
        end_angle: float,
        radius: float,
        trafo: Optional[Transform],
        center: Optional[Tuple[float, float]] = None,
    ) -> int:
        """Append the Bezier pieces of an arc; returns the number of pieces."""
        point = (start.x, start.y)
        if center is None:
            center = (
                start.x - math.cos(math.radians(start_angle)) * radius,
                start.y - math.sin(math.radians(start_angle)) * radius,
            )

        pieces = 0
        if start_angle < end_angle:
            start_angle = start_angle % 360
            end_angle = end_angle % 360
            if end_angle <= start_angle:
                end_angle += 360

            while start_angle < end_angle:
                pieces += 1
                if start_angle + self.ARC_SPLIT_LIMIT < end_angle:
                    point, start_angle = self._append_subarc(
                        point, start_angle, self.ARC_QUARTER, radius, trafo, center
                    )
                elif start_angle + self.ARC_QUARTER < end_angle:
                    # two halves instead of a tiny last piece
                    point, start_angle = self._append_subarc(
                        point, start_angle, (end_angle - start_angle) / 2, radius, trafo, center
                    )
                else:
                    self._append_subarc(point, start_angle, end_angle - start_angle, radius, trafo, center)
                    break

        elif start_angle > end_angle:
            start_angle = start_angle % 360
            end_angle = end_angle % 360
            if end_angle >= start_angle:
                end_angle -= 360

            while start_angle > end_angle:
                pieces += 1
                if start_angle - self.ARC_SPLIT_LIMIT > end_angle:
                    point, start_angle = self._append_subarc(
                        point, start_angle, -self.ARC_QUARTER, radius, trafo, center
                    )
                elif start_angle - self.ARC_QUARTER > end_angle:
                    point, start_angle = self._append_subarc(
                        point, start_angle, (end_angle - start_angle) / 2, radius, trafo, center
                    )
                else:
                    self._append_subarc(point, start_angle, end_angle - start_angle, radius, trafo, center)
                    break

        return pieces

    def _arc_start(self) -> Coordinate:
        start = self.current_point()
        if start is None:
            raise GeometryError("trying to append an arc to a path that does not end with a coordinate")
        return start

    def append_arc(
        self, start_angle: float, end_angle: float, radius: float, trafo: Optional[Transform] = None
    ) -> None:
        """
        Append an arc (a part of the circumference of a circle) to the path.

        The arc starts at the current point. If a transformation is given,
        the start point is first mapped by its inverse, the arc is computed
        as if there were no transformation, and all computed points are then
        mapped by the transformation.

        Args:
            start_angle: Start angle in degrees
            end_angle: End angle in degrees
            radius: Radius of the circle the arc lies on
            trafo: Optional transformation applied to the arc
        """
        start = self._arc_start()
        if trafo is not None:
            start = start.clone().apply(trafo.invert())
        self._append_arc_pieces(start, start_angle, end_angle, radius, trafo)

    def append_arc_to(
        self,
        target: Union[Coordinate, Tuple[float, float]],
        radius_or_center: Union[float, Coordinate, Tuple[float, float]],
        clockwise: bool = False,
        trafo: Optional[Transform] = None,
    ) -> None:
        """
        Append an arc from the current point to target.

        Args:
            target: The point where the arc ends.
            radius_or_center: If a number, the radius of the circle (the center
                is then computed); otherwise the center of the circle (the
                radius is then computed).
            clockwise: If True, the arc runs clockwise, otherwise
                counter-clockwise.
            trafo: Optional transformation. Start, target and center are
                mapped by its inverse, the arc is computed and then mapped back.

        Raises:
            GeometryError: If the radius is too small for the distance between
                start and target, or start and target do not lie on a circle
                around the given center.
        """
        start = self._arc_start()
        target = resolve_point(to_operand(target))

        radius: Optional[float] = None
        center: Optional[Coordinate] = None
        if isinstance(radius_or_center, numbers.Real) and not isinstance(radius_or_center, bool):
            radius = float(radius_or_center)
        else:
            center = resolve_point(to_operand(radius_or_center)).clone()

        trans_target = target
        if trafo is not None:
            itrafo = trafo.invert()
            start = start.clone().apply(itrafo)
            trans_target = target.clone().apply(itrafo)
            if center is not None:
                center.apply(itrafo)

        if center is None:
            center = self._arc_center(start, trans_target, radius)

        start_dx, start_dy = start.x - center.x, start.y - center.y
        target_dx, target_dy = trans_target.x - center.x, trans_target.y - center.y

        if radius is None:
            radius_sq = start_dx**2 + start_dy**2
            if radius_sq == 0.0:
                raise GeometryError("attempting to add an arc with zero radius")
            if abs(target_dx**2 + target_dy**2 - radius_sq) / radius_sq >= ARC_CENTER_REL_TOL:
                raise GeometryError("attempting to add an arc with incorrect center")
            radius = math.sqrt(radius_sq)

        start_angle = _atan2_degrees(start_dy, start_dx)
        end_angle = _atan2_degrees(target_dy, target_dx)

        if clockwise:
            if end_angle > start_angle:
                end_angle -= 360
        elif end_angle < start_angle:
            end_angle += 360

        pieces = self._append_arc_pieces(start, start_angle, end_angle, radius, trafo, (center.x, center.y))

        if pieces:
            # snap to the target to avoid rounding problems
            self._elements[-1].to = target.clone()

    @staticmethod
    def _arc_center(start: Coordinate, target: Coordinate, radius: float) -> Coordinate:
        """Center of a circle with the given radius through start and target (left of the chord)."""
        dx, dy = target.x - start.x, target.y - start.y

        if abs(dx) == abs(dy) and abs(dx) == radius:
            if (dx < 0 and dy < 0) or (dx > 0 and dy > 0):
                center = Coordinate(start.x, target.y)
            else:
                center = Coordinate(target.x, start.y)
        else:
            l_sq = dx * dx + dy * dy
            if l_sq >= radius * radius * 4 * ARC_RADIUS_SLACK:
                if l_sq > radius * radius * 4 / ARC_RADIUS_SLACK:
                    raise GeometryError("radius too small for arc")
                center = Coordinate((start.x + target.x) / 2, (start.y + target.y) / 2)
            else:
                length = math.sqrt(l_sq)
                nx, ny = dx / length, dy / length
                e = math.sqrt(radius * radius - 0.25 * l_sq)
                center = Coordinate(start.x + 0.5 * dx - ny * e, start.y + 0.5 * dy + nx * e)

        logger.debug("Arc from %s to %s with radius %g has center %s", start, target, radius, center)
        return center

    ###########################################################################
    # Rendering
    ###########################################################################

    def to_display_string(self) -> str:
        """
        Render the path in the line-drawing mini-language.

        moveto gives " p", lineto " -- p", curveto " .. controls c1 and c2 .. p"
        and closepath " -- cycle". Deferred points are evaluated for display.
        """
        parts = []
        for element in self._elements:
            ops = element.resolved_operands()
            if isinstance(element, MoveTo):
                parts.append(f" {ops[0]}")
            elif isinstance(element, LineTo):
                parts.append(f" -- {ops[0]}")
            elif isinstance(element, CurveTo):
                parts.append(f" .. controls {ops[0]} and {ops[1]} .. {ops[2]}")
            else:
                parts.append(" -- cycle")
        return "".join(parts)

    def __str__(self) -> str:
        return self.to_display_string()

    def __repr__(self) -> str:
        return f"Path({self.to_display_string()!r})"
