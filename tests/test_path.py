"""Test module for vecpath.path

The tests are run using pytest.
These tests cover construction, copying, reversal, transformation and bounding
boxes of Path.
"""

import pytest

from vecpath.common import MalformedPathError
from vecpath.coordinate import Coordinate
from vecpath.path import Path, PathBounds
from vecpath.path_support import ClosePath, CurveTo, DeferredPoint, LineTo, MoveTo
from vecpath.transform import Transform


def _square() -> Path:
    return Path.from_elements(["moveto", 0, 0, "lineto", 10, 0, 10, 10, 0, 10, "closepath"])


###############################################################################
# Construction
###############################################################################


class TestPathConstruction:
    """Test class for creating and building paths."""

    def test_empty(self):
        """A new path is empty."""
        path = Path()
        assert path.is_empty
        assert len(path) == 0
        assert path.current_point() is None
        assert str(path) == ""

    def test_from_elements(self):
        """from_elements parses an initializer sequence."""
        path = _square()
        assert len(path) == 5
        assert [e.command for e in path] == ["moveto", "lineto", "lineto", "lineto", "closepath"]

    def test_from_elements_malformed(self):
        """Invalid initializers are rejected."""
        with pytest.raises(MalformedPathError):
            Path.from_elements(["moveto", 0, 0, "curveto", 1, 1])

    def test_init_rejects_non_elements(self):
        """Only path elements can be stored."""
        with pytest.raises(MalformedPathError):
            Path([MoveTo(Coordinate()), "lineto"])

    def test_builder(self):
        """The append methods produce the same path as an initializer."""
        path = Path()
        path.append_moveto(0, 0)
        path.append_lineto(Coordinate(10, 0))
        path.append_curveto(10, 5, 5, 10, 0, 10)
        path.append_curveto((0, 8), Coordinate(0, 2), (0, 0))
        path.append_closepath()

        expected = Path.from_elements(
            ["moveto", 0, 0, "lineto", 10, 0, "curveto", 10, 5, 5, 10, 0, 10, "curveto", 0, 8, 0, 2, 0, 0, "closepath"]
        )
        assert path.approx_equal(expected)
        assert path.current_point() is None

    def test_builder_rejects_partial_curveto(self):
        """curveto needs three points or six numbers."""
        with pytest.raises(MalformedPathError):
            Path().append_curveto(1, 2, 3, 4)

    def test_append_element(self):
        """append_element only accepts path elements."""
        path = Path()
        path.append_element(MoveTo(Coordinate(1, 1)))
        assert path.current_point() == Coordinate(1, 1)

        with pytest.raises(MalformedPathError):
            path.append_element((2, 2))

    def test_elements_view_is_read_only(self):
        """Changing the returned tuple is impossible; the path is unaffected by it."""
        path = _square()
        elements = path.elements

        assert isinstance(elements, tuple)
        with pytest.raises(TypeError):
            elements[0] = LineTo(Coordinate())  # type: ignore[index]
        assert isinstance(path.elements[0], MoveTo)

    def test_clear(self):
        """clear empties the path."""
        path = _square()
        path.clear()
        assert path.is_empty


###############################################################################
# Clone and rigid
###############################################################################


class TestPathCloneAndRigid:
    """Test class for clone, make_rigid and coordinates."""

    def test_clone_is_deep_for_coordinates(self):
        """Changing the clone leaves the original untouched."""
        path = _square()
        copy = path.clone()
        copy.shift(5, 5)

        assert path.elements[1].point == Coordinate(10, 0)
        assert copy.elements[1].point == Coordinate(15, 5)

    def test_clone_shares_deferred_points(self):
        """Deferred points are shared between original and clone."""
        deferred = DeferredPoint(lambda: Coordinate(3, 3))
        path = Path.from_elements(["moveto", 0, 0, "lineto", deferred])

        assert path.clone().elements[1].point is deferred

    def test_make_rigid(self):
        """make_rigid freezes the current value of deferred points."""
        target = Coordinate(3, 3)
        path = Path.from_elements(["moveto", 0, 0, "lineto", lambda: target.clone()])

        path.make_rigid()
        target.x = 100

        assert path.elements[1].point == Coordinate(3, 3)
        path.make_rigid()
        assert path.elements[1].point == Coordinate(3, 3)

    def test_coordinates_evaluates_deferred(self):
        """coordinates lists all operands with deferred points evaluated."""
        path = Path.from_elements(["moveto", 0, 0, "curveto", 1, 1, lambda: Coordinate(2, 2), 3, 0, "closepath"])
        assert path.coordinates() == [Coordinate(0, 0), Coordinate(1, 1), Coordinate(2, 2), Coordinate(3, 0)]


###############################################################################
# Transform, shift, bounding box
###############################################################################


class TestPathTransform:
    """Test class for transform, shift and bounding_box."""

    def test_bounding_box_of_square(self):
        """The square spans (0, 0) to (10, 10) with center (5, 5)."""
        assert _square().bounding_box() == PathBounds(0, 0, 10, 10, 5, 5)

    def test_bounding_box_includes_supports(self):
        """Curve supports are part of the box."""
        path = Path.from_elements(["moveto", 0, 0, "curveto", 0, 20, 10, 20, 10, 0])
        bounds = path.bounding_box()

        assert bounds.max_y == 20
        assert bounds.center_y == 10

    def test_bounding_box_of_empty_path(self):
        """A path without coordinates has an all-zero box."""
        assert Path().bounding_box() == PathBounds(0, 0, 0, 0, 0, 0)
        assert Path.from_elements(["closepath"]).bounding_box() == PathBounds(0, 0, 0, 0, 0, 0)

    def test_shift(self):
        """shift and shift_by_coordinate move all coordinates."""
        path = _square()
        path.shift(1, 2)
        path.shift_by_coordinate(Coordinate(1, 1))

        assert path.bounding_box() == PathBounds(2, 3, 12, 13, 7, 8)

    def test_transform(self):
        """transform maps every concrete coordinate."""
        path = _square()
        path.transform(Transform.scaling(2, 3))

        assert path.bounding_box() == PathBounds(0, 0, 20, 30, 10, 15)

    def test_transform_leaves_deferred_points(self):
        """Deferred points are not transformed."""
        path = Path.from_elements(["moveto", 1, 1, "lineto", lambda: Coordinate(5, 5)])
        path.transform(Transform.shift(10, 10))

        assert path.coordinates() == [Coordinate(11, 11), Coordinate(5, 5)]


###############################################################################
# Reversal
###############################################################################


class TestPathReversed:
    """Test class for Path.reversed."""

    def test_open_polyline(self):
        """An open polyline is traversed backwards."""
        path = Path.from_elements(["moveto", 0, 0, "lineto", 10, 0, 10, 10])
        expected = Path.from_elements(["moveto", 10, 10, "lineto", 10, 0, 0, 0])

        assert path.reversed().approx_equal(expected)

    def test_curve_supports_are_swapped(self):
        """Reversing a curve swaps its supports."""
        path = Path.from_elements(["moveto", 0, 0, "curveto", 1, 2, 3, 4, 5, 0])
        expected = Path.from_elements(["moveto", 5, 0, "curveto", 3, 4, 1, 2, 0, 0])

        assert path.reversed().approx_equal(expected)

    def test_closed_square(self):
        """A closed subpath stays closed and keeps its start."""
        reversed_path = _square().reversed()
        expected = Path.from_elements(["moveto", 0, 0, "lineto", 0, 10, 10, 10, 10, 0, "closepath"])

        assert reversed_path.approx_equal(expected)
        assert isinstance(reversed_path.elements[-1], ClosePath)

    @pytest.mark.parametrize(
        "initial",
        [
            ["moveto", 0, 0, "lineto", 10, 0, 10, 10, 0, 10, "closepath"],
            ["moveto", 0, 0, "curveto", 3, -2, 7, -2, 10, 0, "lineto", 10, 10, "closepath"],
            ["moveto", 0, 0, "lineto", 5, 5, "moveto", 20, 0, "curveto", 21, 1, 22, 1, 23, 0, "lineto", 30, 5],
            ["moveto", 1, 1, "lineto", 4, 1, 4, 4, "closepath", "moveto", 9, 9, "lineto", 12, 9],
        ],
    )
    def test_reverse_twice(self, initial):
        """Reversing twice gives back the original path."""
        path = Path.from_elements(initial)
        assert path.reversed().reversed().approx_equal(path)

    def test_reverse_twice_drops_explicit_closing_line(self):
        """A line back to the start before closepath is absorbed by the closepath."""
        path = Path.from_elements(["moveto", 0, 0, "lineto", 10, 0, 10, 10, 0, 0, "closepath"])

        twice = path.reversed().reversed()

        expected = Path.from_elements(["moveto", 0, 0, "lineto", 10, 0, 10, 10, "closepath"])
        assert twice.approx_equal(expected)
        assert path.reversed().approx_equal(Path.from_elements(["moveto", 0, 0, "lineto", 10, 10, 10, 0, "closepath"]))

    def test_lone_moveto(self):
        """A subpath that is only a moveto survives reversal."""
        path = Path.from_elements(["moveto", 3, 3, "moveto", 0, 0, "lineto", 1, 0])
        reversed_path = path.reversed()

        assert [e.command for e in reversed_path] == ["moveto", "moveto", "lineto"]
        assert reversed_path.elements[0].point == Coordinate(3, 3)

    def test_result_is_independent(self):
        """The reversed path does not share coordinates with the original."""
        path = Path.from_elements(["moveto", 0, 0, "lineto", 10, 0])
        reversed_path = path.reversed()
        reversed_path.shift(1, 1)

        assert path.elements[1].point == Coordinate(10, 0)

    def test_receiver_unchanged(self):
        """reversed does not change the receiver."""
        path = Path.from_elements(["moveto", 0, 0, "curveto", 1, 2, 3, 4, 5, 0])
        before = path.clone()
        path.reversed()
        assert path.approx_equal(before)
        assert isinstance(path.elements[1], CurveTo)
