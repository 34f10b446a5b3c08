"""Test module for vecpath.path_support

The tests are run using pytest.
These tests cover the path element types, deferred points, the parsing of
initializer sequences and the decomposition into subpaths and segments.
"""

from typing import get_args

import pytest

from vecpath.common import MalformedPathError, PathCmds
from vecpath.coordinate import Coordinate
from vecpath.geom import BoundingBox
from vecpath.path_support import (
    ELEMENT_TYPES,
    ClosePath,
    CurveTo,
    DeferredPoint,
    LineTo,
    MoveTo,
    iter_with_current_point,
    operand_count,
    parse_elements,
    segmentize,
    split_into_subpaths,
    to_operand,
)

###############################################################################
# Elements and deferred points
###############################################################################


class TestPathElements:
    """Test class for the element types."""

    def test_operand_counts(self):
        """Each command has a fixed number of operands."""
        assert operand_count("moveto") == 1
        assert operand_count("lineto") == 1
        assert operand_count("curveto") == 3
        assert operand_count("closepath") == 0

    def test_element_types_cover_commands(self):
        """Every command literal has an element type carrying that command."""
        assert set(ELEMENT_TYPES) == set(get_args(PathCmds))
        for command, element_type in ELEMENT_TYPES.items():
            assert element_type.command == command

    def test_end_point(self):
        """The end point is the last operand."""
        curve = CurveTo(Coordinate(1, 1), Coordinate(2, 2), Coordinate(3, 0))
        assert curve.end_point is curve.to
        assert ClosePath().end_point is None

    def test_clone_copies_coordinates_and_shares_deferred(self):
        """Cloning copies concrete operands and shares deferred ones."""
        deferred = DeferredPoint(lambda: Coordinate(5, 5))
        curve = CurveTo(Coordinate(1, 1), deferred, Coordinate(3, 0))

        copy = curve.clone()

        assert copy.support_1 is not curve.support_1
        assert copy.support_1 == curve.support_1
        assert copy.support_2 is deferred

    def test_make_rigid(self):
        """make_rigid replaces deferred operands by their value."""
        line = LineTo(DeferredPoint(lambda: Coordinate(7, 8)))
        line.make_rigid()
        assert line.point == Coordinate(7, 8)

    def test_repr(self):
        """repr names the element and its operands."""
        assert repr(MoveTo(Coordinate(1, 2))) == "MoveTo(Coordinate(1.0, 2.0))"
        assert repr(ClosePath()) == "ClosePath()"


class TestDeferredPoint:
    """Test class for DeferredPoint."""

    def test_resolve_calls_provider_each_time(self):
        """Each resolution invokes the provider again."""
        calls = []

        def provider():
            calls.append(1)
            return Coordinate(len(calls), 0)

        point = DeferredPoint(provider)

        assert point.resolve() == Coordinate(1, 0)
        assert point.resolve() == Coordinate(2, 0)

    def test_provider_must_be_callable(self):
        """A non-callable provider is rejected."""
        with pytest.raises(MalformedPathError):
            DeferredPoint(42)

    def test_provider_must_yield_coordinate(self):
        """A provider yielding something else fails on resolution."""
        with pytest.raises(MalformedPathError):
            DeferredPoint(lambda: (1, 2)).resolve()

    def test_to_operand(self):
        """Tuples, coordinates and callables are accepted as operands."""
        assert to_operand((1, 2)) == Coordinate(1, 2)
        c = Coordinate(3, 4)
        assert to_operand(c) is c
        assert isinstance(to_operand(lambda: c), DeferredPoint)

        with pytest.raises(MalformedPathError):
            to_operand("lineto")
        with pytest.raises(MalformedPathError):
            to_operand((1, 2, 3))


###############################################################################
# Parsing
###############################################################################


class TestParseElements:
    """Test class for parse_elements."""

    def test_square(self):
        """Numbers are paired and consecutive operands continue with lineto."""
        elements = parse_elements(["moveto", 0, 0, "lineto", 10, 0, 10, 10, 0, 10, "closepath"])

        assert [e.command for e in elements] == ["moveto", "lineto", "lineto", "lineto", "closepath"]
        assert elements[0].point == Coordinate(0, 0)
        assert elements[3].point == Coordinate(0, 10)

    def test_curveto_operands(self):
        """curveto collects three operands of any kind."""
        deferred = DeferredPoint(lambda: Coordinate(2, 2))
        elements = parse_elements(["moveto", (0, 0), "curveto", 1, 1, deferred, Coordinate(3, 0)])

        curve = elements[1]
        assert isinstance(curve, CurveTo)
        assert curve.support_1 == Coordinate(1, 1)
        assert curve.support_2 is deferred
        assert curve.to == Coordinate(3, 0)

    def test_implicit_lineto_at_start(self):
        """An operand without command starts with an implicit lineto."""
        elements = parse_elements([1, 2, 3, 4])
        assert [e.command for e in elements] == ["lineto", "lineto"]

    def test_empty(self):
        """An empty initializer gives no elements."""
        assert not parse_elements([])

    @pytest.mark.parametrize(
        "initial",
        [
            ["moveto", 0, 0, "arcto", 1, 1],
            ["moveto", "lineto", 1, 1],
            ["moveto", 0, 0, "curveto", 1, 1, 2, 2],
            ["moveto", 0, 0, 1],
            ["moveto", 0, "lineto"],
            ["moveto", 0, 0, object()],
            ["moveto", 0, 0, "curveto", 1, 1, "closepath"],
        ],
    )
    def test_malformed(self, initial):
        """Invalid sequences raise MalformedPathError."""
        with pytest.raises(MalformedPathError):
            parse_elements(initial)

    def test_malformed_is_value_error(self):
        """MalformedPathError can be caught as ValueError."""
        with pytest.raises(ValueError):
            parse_elements(["bogus"])


###############################################################################
# Subpaths and segments
###############################################################################


class TestSubpaths:
    """Test class for iter_with_current_point and split_into_subpaths."""

    def test_current_point_after_closepath(self):
        """After a closepath the current point is the subpath start."""
        elements = parse_elements(["moveto", 0, 0, "lineto", 10, 0, "closepath", "lineto", 5, 5])
        states = list(iter_with_current_point(elements))

        index, element, current, start = states[-1]
        assert index == 3
        assert isinstance(element, LineTo)
        assert current == Coordinate(0, 0)
        assert start == Coordinate(0, 0)

    def test_split_into_subpaths(self):
        """moveto and closepath delimit subpaths."""
        elements = parse_elements(
            ["moveto", 0, 0, "lineto", 10, 0, "closepath", "moveto", 20, 20, "lineto", 30, 30, "moveto", 50, 50]
        )
        subpaths = split_into_subpaths(elements)

        assert len(subpaths) == 3
        assert subpaths[0].closed
        assert [s.action for s in subpaths[0].segments] == ["lineto", "lineto"]
        assert subpaths[0].segments[1].closing
        assert subpaths[0].element_indices == [0, 1, 2]
        assert not subpaths[1].closed
        assert subpaths[1].element_indices == [3, 4]
        assert not subpaths[2].segments

    def test_leading_lineto_starts_subpath(self):
        """A drawing element without current point only fixes the start."""
        subpaths = split_into_subpaths(parse_elements(["lineto", 1, 1, 2, 2]))

        assert len(subpaths) == 1
        assert subpaths[0].start == Coordinate(1, 1)
        assert len(subpaths[0].segments) == 1


class TestSegmentize:
    """Test class for segmentize."""

    def test_closepath_becomes_line(self):
        """A closepath is a line back to the subpath start."""
        segments = segmentize(parse_elements(["moveto", 0, 0, "lineto", 10, 0, 10, 10, "closepath"]))

        assert len(segments) == 3
        last = segments[-1]
        assert last.action == "lineto"
        assert last.index == 3
        assert last.start == Coordinate(10, 10)
        assert last.end == Coordinate(0, 0)
        assert last.box == BoundingBox(0.0, 0.0, 10.0, 10.0)

    def test_curve_box_contains_supports(self):
        """The box of a curve includes its supports."""
        segments = segmentize(parse_elements(["moveto", 0, 0, "curveto", 0, 10, 10, 10, 10, 0]))

        assert segments[0].box == BoundingBox(0.0, 0.0, 10.0, 10.0)
        assert segments[0].control_points() == ((0.0, 0.0), (0.0, 10.0), (10.0, 10.0), (10.0, 0.0))

    def test_line_control_points(self):
        """Lines are promoted to cubics with evenly spaced supports."""
        segments = segmentize(parse_elements(["moveto", 0, 0, "lineto", 3, 6]))
        control = segments[0].control_points()

        assert control[1] == pytest.approx((1.0, 2.0))
        assert control[2] == pytest.approx((2.0, 4.0))

    def test_deferred_points_are_resolved(self):
        """Segments hold concrete coordinates; the elements keep the provider."""
        deferred = DeferredPoint(lambda: Coordinate(4, 0))
        elements = parse_elements(["moveto", 0, 0, "lineto", deferred])

        segments = segmentize(elements)

        assert segments[0].end == Coordinate(4, 0)
        assert elements[1].point is deferred

    def test_deferred_point_evaluated_once(self):
        """A deferred point shared by two segments is evaluated a single time."""
        calls = []

        def provider():
            calls.append(None)
            return Coordinate(10 * len(calls), 0)

        segments = segmentize(parse_elements(["moveto", 0, 0, "lineto", provider, "lineto", 10, 10]))

        assert len(calls) == 1
        assert segments[0].end == Coordinate(10, 0)
        assert segments[1].start == Coordinate(10, 0)
        assert segments[1].start is segments[0].end
