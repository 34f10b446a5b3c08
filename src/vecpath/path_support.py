"""Supporting types and utilities for Path.

This module contains the path element types, deferred points, command
metadata, parsing of initializer sequences and the decomposition of element
sequences into subpaths and segments that the path algorithms work on.
"""

from __future__ import annotations

import numbers
from dataclasses import dataclass, field
from typing import Any, Callable, ClassVar, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, Type, Union

from vecpath.common import PathCmds, MalformedPathError
from vecpath.coordinate import Coordinate
from vecpath.geom import BoundingBox

###############################################################################
# DeferredPoint
###############################################################################


class DeferredPoint:
    """A point whose position is only known once its provider is called.

    Deferred points let algorithms place geometry on a path before its final
    position is fixed. Each call of resolve() invokes the provider again.
    """

    __slots__ = ("_provider",)

    def __init__(self, provider: Callable[[], Coordinate]):
        if not callable(provider):
            raise MalformedPathError(f"Deferred point provider must be callable, got {type(provider).__name__}")
        self._provider = provider

    @property
    def provider(self) -> Callable[[], Coordinate]:
        """The zero-argument callable yielding the coordinate."""
        return self._provider

    def resolve(self) -> Coordinate:
        """Invoke the provider and return the coordinate it yields."""
        result = self._provider()
        if not isinstance(result, Coordinate):
            raise MalformedPathError(f"Deferred point provider returned {type(result).__name__}, not a Coordinate")
        return result

    def __repr__(self) -> str:
        return f"DeferredPoint({self._provider!r})"


PointLike = Union[Coordinate, DeferredPoint]


def resolve_point(point: PointLike) -> Coordinate:
    """Return the concrete coordinate of point, evaluating deferred points."""
    if isinstance(point, DeferredPoint):
        return point.resolve()
    return point


def clone_point(point: PointLike) -> PointLike:
    """Copy concrete coordinates, share deferred points."""
    if isinstance(point, Coordinate):
        return point.clone()
    return point


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def to_operand(value: Any) -> PointLike:
    """
    Convert value into a path operand.

    Accepted are Coordinates, DeferredPoints, zero-argument callables
    (wrapped into a DeferredPoint) and (x, y) pairs of numbers.

    Raises:
        MalformedPathError: If value cannot be used as an operand.
    """
    if isinstance(value, (Coordinate, DeferredPoint)):
        return value
    if isinstance(value, tuple) and len(value) == 2 and all(_is_number(v) for v in value):
        return Coordinate(value[0], value[1])
    if callable(value):
        return DeferredPoint(value)
    raise MalformedPathError(f"Invalid object on path: {value!r}")


###############################################################################
# Path elements
###############################################################################


@dataclass(eq=False)
class PathElement:
    """Base class of the path elements; each element carries its operands."""

    command: ClassVar[PathCmds]
    operand_names: ClassVar[Tuple[str, ...]] = ()

    def operands(self) -> Tuple[PointLike, ...]:
        """The operands of this element in path order."""
        return tuple(getattr(self, name) for name in self.operand_names)

    def resolved_operands(self) -> Tuple[Coordinate, ...]:
        """The operands with deferred points evaluated (the element is not changed)."""
        return tuple(resolve_point(op) for op in self.operands())

    @property
    def end_point(self) -> Optional[PointLike]:
        """The last operand, or None if the element has none."""
        if not self.operand_names:
            return None
        return getattr(self, self.operand_names[-1])

    def make_rigid(self) -> None:
        """Replace all deferred operands by the coordinates they yield."""
        for name in self.operand_names:
            value = getattr(self, name)
            if isinstance(value, DeferredPoint):
                setattr(self, name, value.resolve())

    def clone(self) -> PathElement:
        """Copy the element, cloning concrete coordinates and sharing deferred points."""
        return type(self)(*(clone_point(op) for op in self.operands()))

    def approx_equal(self, other: PathElement, tol: float = 1e-9) -> bool:
        """Return True if other is of the same kind and all operands are within tol."""
        if type(self) is not type(other):
            return False
        return all(a.approx_equal(b, tol) for a, b in zip(self.resolved_operands(), other.resolved_operands()))

    def __repr__(self) -> str:
        args = ", ".join(repr(op) for op in self.operands())
        return f"{type(self).__name__}({args})"


@dataclass(eq=False, repr=False)
class MoveTo(PathElement):
    """Start a new subpath at point."""

    point: PointLike
    command: ClassVar[PathCmds] = "moveto"
    operand_names: ClassVar[Tuple[str, ...]] = ("point",)


@dataclass(eq=False, repr=False)
class LineTo(PathElement):
    """Straight line from the current point to point."""

    point: PointLike
    command: ClassVar[PathCmds] = "lineto"
    operand_names: ClassVar[Tuple[str, ...]] = ("point",)


@dataclass(eq=False, repr=False)
class CurveTo(PathElement):
    """Cubic Bezier curve from the current point via two supports to a target."""

    support_1: PointLike
    support_2: PointLike
    to: PointLike
    command: ClassVar[PathCmds] = "curveto"
    operand_names: ClassVar[Tuple[str, ...]] = ("support_1", "support_2", "to")


@dataclass(eq=False, repr=False)
class ClosePath(PathElement):
    """Straight line back to the start of the current subpath, closing it."""

    command: ClassVar[PathCmds] = "closepath"


ELEMENT_TYPES: Dict[PathCmds, Type[PathElement]] = {
    "moveto": MoveTo,
    "lineto": LineTo,
    "curveto": CurveTo,
    "closepath": ClosePath,
}


def operand_count(cmd: str) -> int:
    """Return number of operands consumed by command."""
    return len(ELEMENT_TYPES[cmd].operand_names)


###############################################################################
# Parsing
###############################################################################


def parse_elements(initial: Sequence[Any]) -> List[PathElement]:
    """
    Turn an initializer sequence into path elements.

    The sequence contains command strings ("moveto", "lineto", "curveto",
    "closepath") and operands. Consecutive numbers are paired into
    Coordinates. An operand appearing while no operands are expected is
    preceded by an implicit "lineto".

    Args:
        initial: Commands and operands, e.g. ["moveto", 0, 0, "lineto", 10, 0]

    Returns:
        List[PathElement]: The validated elements.

    Raises:
        MalformedPathError: On unknown commands, wrong operand counts, an odd
            trailing number or objects that are neither commands nor operands.
    """
    elements: List[PathElement] = []
    pending_cmd: Optional[str] = None
    pending_ops: List[PointLike] = []
    expected = 0

    items = list(initial)
    i = 0
    while i < len(items):
        item = items[i]
        if isinstance(item, str):
            if expected != 0:
                raise MalformedPathError(
                    f"Command '{item}' at position {i} while '{pending_cmd}' still expects {expected} operand(s)"
                )
            if item not in ELEMENT_TYPES:
                raise MalformedPathError(f"Unknown path command '{item}' at position {i}")
            if item == "closepath":
                elements.append(ClosePath())
            else:
                pending_cmd = item
                expected = operand_count(item)
            i += 1
            continue

        if _is_number(item):
            if i + 1 >= len(items) or not _is_number(items[i + 1]):
                raise MalformedPathError(f"Number at position {i} is not followed by a second coordinate")
            operand: PointLike = Coordinate(item, items[i + 1])
            i += 2
        else:
            operand = to_operand(item)
            i += 1

        if expected == 0:
            pending_cmd = "lineto"
            expected = 1
        pending_ops.append(operand)
        expected -= 1
        if expected == 0:
            elements.append(ELEMENT_TYPES[pending_cmd](*pending_ops))
            pending_cmd = None
            pending_ops = []

    if expected != 0:
        raise MalformedPathError(f"Path ends while '{pending_cmd}' still expects {expected} operand(s)")
    return elements


###############################################################################
# Traversal
###############################################################################


def iter_with_current_point(
    elements: Sequence[PathElement],
) -> Iterator[Tuple[int, PathElement, Optional[PointLike], Optional[PointLike]]]:
    """
    Iterate over elements together with the current point and subpath start.

    Yields:
        (index, element, current, start): current is the point the element
        starts from (None if there is none yet), start is the first point of
        the current subpath. A drawing element without current point starts
        its subpath at its own end point.
    """
    current: Optional[PointLike] = None
    start: Optional[PointLike] = None
    for index, element in enumerate(elements):
        yield index, element, current, start
        if isinstance(element, MoveTo):
            current = start = element.point
        elif isinstance(element, ClosePath):
            current = start
        else:
            if current is None:
                start = element.end_point
            current = element.end_point


@dataclass
class SubpathSegment:
    """A drawing segment of a subpath with explicit start point.

    Attributes:
        action: "lineto" or "curveto"; a closepath is stored as "lineto"
        start: The point the segment starts from
        end: The point the segment ends in
        index: Position of the originating element in the path
        support_1: First support point (curveto only)
        support_2: Second support point (curveto only)
        closing: True if the segment stems from a closepath
    """

    action: PathCmds
    start: PointLike
    end: PointLike
    index: int
    support_1: Optional[PointLike] = None
    support_2: Optional[PointLike] = None
    closing: bool = False


@dataclass
class Subpath:
    """A subpath given by its start point and its segments."""

    start: PointLike
    segments: List[SubpathSegment] = field(default_factory=list)
    closed: bool = False
    element_indices: List[int] = field(default_factory=list)


def split_into_subpaths(elements: Sequence[PathElement]) -> List[Subpath]:
    """
    Split the elements into subpaths.

    A subpath begins at a moveto (or, after a closepath or at the beginning of
    the path, at the first drawing element) and ends before the next moveto,
    after a closepath or at the end of the path. Operands are not resolved.
    """
    subpaths: List[Subpath] = []
    subpath: Optional[Subpath] = None

    for index, element, current, start in iter_with_current_point(elements):
        if isinstance(element, MoveTo):
            subpath = Subpath(element.point, element_indices=[index])
            subpaths.append(subpath)
            continue

        if subpath is None or subpath.closed:
            if current is None:
                # Drawing element without current point only fixes the start
                subpath = Subpath(element.end_point, element_indices=[index])
                subpaths.append(subpath)
                continue
            subpath = Subpath(start)
            subpaths.append(subpath)

        subpath.element_indices.append(index)
        if isinstance(element, ClosePath):
            subpath.segments.append(SubpathSegment("lineto", current, subpath.start, index, closing=True))
            subpath.closed = True
        elif isinstance(element, CurveTo):
            subpath.segments.append(
                SubpathSegment("curveto", current, element.to, index, element.support_1, element.support_2)
            )
        else:
            subpath.segments.append(SubpathSegment("lineto", current, element.point, index))

    return subpaths


###############################################################################
# Segments for position-dependent computations
###############################################################################


@dataclass
class Segment:
    """A drawing segment with concrete points and its bounding box.

    Attributes:
        action: "lineto" or "curveto"
        start: Start point
        end: End point
        index: Position of the originating element in the path
        box: Bounding box of all points of the segment (including supports)
        support_1: First support point (curveto only)
        support_2: Second support point (curveto only)
    """

    action: PathCmds
    start: Coordinate
    end: Coordinate
    index: int
    box: BoundingBox
    support_1: Optional[Coordinate] = None
    support_2: Optional[Coordinate] = None

    def control_points(self) -> Tuple[Tuple[float, float], ...]:
        """The segment as cubic curve; lines get evenly spaced supports."""
        a, b = self.start, self.end
        if self.action == "curveto":
            return (
                a.as_tuple(),
                self.support_1.as_tuple(),
                self.support_2.as_tuple(),
                b.as_tuple(),
            )
        return (
            (a.x, a.y),
            (a.x * 2 / 3 + b.x / 3, a.y * 2 / 3 + b.y / 3),
            (a.x / 3 + b.x * 2 / 3, a.y / 3 + b.y * 2 / 3),
            (b.x, b.y),
        )


def segmentize(elements: Iterable[PathElement]) -> List[Segment]:
    """
    Turn elements into a flat list of segments with concrete points.

    A closepath becomes a line back to the subpath start. Each deferred point
    is evaluated exactly once and its value is reused as the start of the
    following segment; the elements themselves are not changed.
    """
    segments: List[Segment] = []
    current: Optional[Coordinate] = None
    start: Optional[Coordinate] = None

    for index, element in enumerate(elements):
        if isinstance(element, ClosePath):
            if current is not None:
                segments.append(_line_segment(current, start, index))
            current = start
            continue

        operands = element.resolved_operands()
        end = operands[-1]
        if isinstance(element, MoveTo) or current is None:
            # moveto, or drawing element without current point: only fixes the start
            start = end
        elif isinstance(element, CurveTo):
            s1, s2 = operands[0], operands[1]
            box = BoundingBox.from_points([current.as_tuple(), s1.as_tuple(), s2.as_tuple(), end.as_tuple()])
            segments.append(Segment("curveto", current, end, index, box, s1, s2))
        else:
            segments.append(_line_segment(current, end, index))
        current = end

    return segments


def _line_segment(start: Coordinate, end: Coordinate, index: int) -> Segment:
    box = BoundingBox(
        min(start.x, end.x),
        min(start.y, end.y),
        max(start.x, end.x),
        max(start.y, end.y),
    )
    return Segment("lineto", start, end, index, box)
