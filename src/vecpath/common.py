"""Central module containing command definitions, tolerances and errors for path processing."""

from __future__ import annotations

from typing import Literal

###############################################################################
# Types
###############################################################################


PathCmds = Literal[  # Type-Definition for the commands of a Path
    # moveto (1 operand) - start a new subpath at the given point
    "moveto",
    # lineto (1 operand) - draw a straight line from the current point
    "lineto",
    # curveto (3 operands) - cubic Bezier with two support points and an end point
    "curveto",
    # closepath (0 operands) - draw a line back to the start of the subpath
    "closepath",
]


###############################################################################
# Tolerances
###############################################################################

# General geometric tolerance used by intersection search and comparisons
EPSILON: float = 1.0e-4

# Minimum chord of two curve pieces before they may count as running along each other
COINCIDENT_MIN_CHORD: float = 100 * EPSILON

# Determinant below which the two offset normals at a vertex count as parallel
PAD_PARALLEL_DET_EPS: float = 0.1

# Distance below which the last vertex of a subpath is treated as its first one
PAD_CLOSE_TOLERANCE: float = 0.01

# Determinant below which a linear map is considered not invertible
SINGULAR_DETERMINANT_EPS: float = 1.0e-12

# Slack when comparing a chord against the diameter of an arc
ARC_RADIUS_SLACK: float = 0.999999

# Relative error allowed between start and target distance to a given arc center
ARC_CENTER_REL_TOL: float = 1.0e-5


###############################################################################
# Errors
###############################################################################


class PathError(Exception):
    """Base exception for path-related errors."""


class MalformedPathError(PathError, ValueError):
    """Raised when a path is built from an unknown command or with a wrong number of operands."""


class GeometryError(PathError, ArithmeticError):
    """Raised when a geometric construction cannot be carried out."""
