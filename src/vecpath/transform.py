"""Affine transformations of the plane."""

from __future__ import annotations

import math
from typing import Optional, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from vecpath.common import SINGULAR_DETERMINANT_EPS, GeometryError
from vecpath.coordinate import Coordinate
from vecpath.geom import GeomMath


###############################################################################
# Transform
###############################################################################
class Transform:
    """
    Affine map p' = M * p + t.

    The transformation is stored in the affine_trafo convention
    [a00, a01, a10, a11, b0, b1] with
        x' = a00 * x + a01 * y + b0
        y' = a10 * x + a11 * y + b1
    """

    __slots__ = ("_matrix", "_translation")

    def __init__(self, affine_trafo: Optional[Sequence[Union[int, float]]] = None):
        """
        Initialize a Transform.

        Args:
            affine_trafo: [a00, a01, a10, a11, b0, b1]; identity if omitted.
        """
        if affine_trafo is None:
            affine_trafo = (1.0, 0.0, 0.0, 1.0, 0.0, 0.0)
        if len(affine_trafo) != 6:
            raise ValueError(f"affine_trafo must have 6 entries, got {len(affine_trafo)}")
        a00, a01, a10, a11, b0, b1 = (float(v) for v in affine_trafo)
        self._matrix: NDArray[np.float64] = np.array([[a00, a01], [a10, a11]], dtype=np.float64)
        self._translation: NDArray[np.float64] = np.array([b0, b1], dtype=np.float64)

    @classmethod
    def from_matrix(
        cls, matrix: Union[Sequence[Sequence[float]], NDArray[np.float64]], translation: Sequence[float] = (0.0, 0.0)
    ) -> Transform:
        """Create a Transform from a 2x2 matrix and a translation vector."""
        m = np.asarray(matrix, dtype=np.float64)
        if m.shape != (2, 2):
            raise ValueError(f"matrix must have shape (2, 2), got {m.shape}")
        return cls((m[0, 0], m[0, 1], m[1, 0], m[1, 1], translation[0], translation[1]))

    @classmethod
    def identity(cls) -> Transform:
        """The identity transformation."""
        return cls()

    @classmethod
    def shift(cls, dx: float, dy: float) -> Transform:
        """A pure translation."""
        return cls((1.0, 0.0, 0.0, 1.0, dx, dy))

    @classmethod
    def rotation(cls, angle: float) -> Transform:
        """A rotation around the origin, angle given in degrees (counter-clockwise)."""
        rad = math.radians(angle)
        c, s = math.cos(rad), math.sin(rad)
        return cls((c, -s, s, c, 0.0, 0.0))

    @classmethod
    def scaling(cls, sx: float, sy: Optional[float] = None) -> Transform:
        """A scaling around the origin; uniform if sy is omitted."""
        return cls((sx, 0.0, 0.0, sx if sy is None else sy, 0.0, 0.0))

    @property
    def matrix(self) -> NDArray[np.float64]:
        """The linear part as read-only 2x2 array."""
        view = self._matrix.view()
        view.flags.writeable = False
        return view

    @property
    def translation(self) -> Tuple[float, float]:
        """The translation part (b0, b1)."""
        return float(self._translation[0]), float(self._translation[1])

    @property
    def affine_trafo(self) -> Tuple[float, float, float, float, float, float]:
        """The transformation as [a00, a01, a10, a11, b0, b1]."""
        m, t = self._matrix, self._translation
        return (
            float(m[0, 0]),
            float(m[0, 1]),
            float(m[1, 0]),
            float(m[1, 1]),
            float(t[0]),
            float(t[1]),
        )

    @property
    def determinant(self) -> float:
        """Determinant of the linear part."""
        m = self._matrix
        return float(m[0, 0] * m[1, 1] - m[0, 1] * m[1, 0])

    def apply(self, point: Coordinate) -> Coordinate:
        """Return the image of point as a new Coordinate."""
        x, y = GeomMath.transform_point(self.affine_trafo, (point.x, point.y))
        return Coordinate(x, y)

    def apply_in_place(self, point: Coordinate) -> Coordinate:
        """Map point in place and return it."""
        return point.apply(self)

    def invert(self) -> Transform:
        """
        Return the inverse transformation.

        Raises:
            GeometryError: If the linear part is not invertible.
        """
        det = self.determinant
        if abs(det) < SINGULAR_DETERMINANT_EPS:
            raise GeometryError(f"Transformation is not invertible (determinant {det})")
        a00, a01, a10, a11, b0, b1 = self.affine_trafo
        idet = 1.0 / det
        return Transform(
            (
                a11 * idet,
                -a01 * idet,
                -a10 * idet,
                a00 * idet,
                (-a11 * b0 + a01 * b1) * idet,
                (a10 * b0 - a00 * b1) * idet,
            )
        )

    def concat(self, other: Transform) -> Transform:
        """Return the transformation that first applies other, then self."""
        matrix = self._matrix @ other._matrix
        translation = self._matrix @ other._translation + self._translation
        return Transform.from_matrix(matrix, (float(translation[0]), float(translation[1])))

    def is_identity(self, tol: float = 0.0) -> bool:
        """Return True if this is the identity (within tol)."""
        return bool(np.allclose(self.affine_trafo, (1.0, 0.0, 0.0, 1.0, 0.0, 0.0), rtol=0.0, atol=tol))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Transform):
            return NotImplemented
        return self.affine_trafo == other.affine_trafo

    def __hash__(self) -> int:
        return hash(self.affine_trafo)

    def __repr__(self) -> str:
        return f"Transform({list(self.affine_trafo)})"
