# primitives.py
"""
Reference transforms from the unit shapes of local space to the quad
entity's native display rectangle.

The display entity draws a fixed-size background rectangle; UNIT_SQUARE
centres and stretches it so that it covers local [0, 1] x [0, 1]. The
entity cannot draw triangles, so UNIT_TRIANGLE is three half-size quads,
two of them sheared, whose union is the right triangle with legs along
local x and y.
"""
from typing import Tuple

from numpy import ndarray

from shapeframe.linalg import scale_matrix, shear_matrix, translation_matrix


def _frozen(matrix: ndarray) -> ndarray:
    matrix.flags.writeable = False
    return matrix


UNIT_SQUARE: ndarray = _frozen(
    translation_matrix([0.4, 0.0, 0.0]) @ scale_matrix(8.0, 4.0, 1.0)
)

_HALF = scale_matrix(0.5, 0.5, 0.5)

UNIT_TRIANGLE: Tuple[ndarray, ndarray, ndarray] = (
    # corner quad at the right angle
    _frozen(_HALF @ UNIT_SQUARE),
    # quad along the x leg, top edge slanted back onto the hypotenuse
    _frozen(_HALF @ translation_matrix([1.0, 0.0, 0.0]) @ shear_matrix(-1.0, 0.0) @ UNIT_SQUARE),
    # quad along the y leg, right edge slanted down onto the hypotenuse
    _frozen(_HALF @ translation_matrix([0.0, 1.0, 0.0]) @ shear_matrix(0.0, -1.0) @ UNIT_SQUARE),
)


def unit_square() -> ndarray:
    """Read-only transform of the entity rectangle onto the local unit square."""
    return UNIT_SQUARE


def unit_triangle() -> Tuple[ndarray, ndarray, ndarray]:
    """Read-only transforms of the three quads that tile the local unit triangle."""
    return UNIT_TRIANGLE
