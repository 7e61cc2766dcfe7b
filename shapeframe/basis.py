"""
Local frames for flat primitives.

A primitive is drawn by mapping the unit square (or the unit triangle)
of a quad's local xy plane onto world space. This module finds, for a
point triple or a line segment, the orthonormal frame of that plane and
the width, height and shear that carry the unit shape onto the target
points.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np
from numpy import float64 as np_float64
from numpy import ndarray

from shapeframe.config import DEFAULT_TOLERANCES, Tolerances
from shapeframe.geometry import look_along_rotation, rotation_to_quaternion, rotation_x
from shapeframe.linalg import (
    NORM_EPSILON,
    as_vector,
    norm,
    normalize,
    perpendicular,
    rotation_matrix,
    scale_matrix,
    shear_matrix,
    translation_matrix,
)

logger = logging.getLogger(__name__)

_X = np.array([1.0, 0.0, 0.0], dtype=np_float64)
_Y = np.array([0.0, 1.0, 0.0], dtype=np_float64)


@dataclass(frozen=True, slots=True)
class Basis:
    """
    Orthonormal frame of a flat primitive plus the extent of the primitive
    within it.

    Attributes:
        origin: world position of the local origin (the first point).
        x_axis, y_axis, z_axis: world directions of the local axes.
        rotation: 3x3 local-to-world rotation, columns are the three axes.
        width: extent along x_axis.
        height: extent along y_axis.
        shear: x offset of the top edge per unit of width (x += shear * y).
    """

    origin: ndarray
    x_axis: ndarray
    y_axis: ndarray
    z_axis: ndarray
    rotation: ndarray
    width: float
    height: float
    shear: float

    @property
    def quaternion(self) -> ndarray:
        """Local-to-world rotation as an [x, y, z, w] quaternion."""
        return rotation_to_quaternion(self.rotation)

    def placement(self) -> ndarray:
        """
        World transform of the local unit square:

            Translate(origin) · Rotate(rotation) · Scale(width, height, 1) · Shear(shear, 0)

        Local (0, 0), (1, 0) and (0, 1) land on the first, second and third
        point of the primitive.
        """
        m = translation_matrix(self.origin) @ rotation_matrix(self.rotation)
        m = m @ scale_matrix(self.width, self.height, 1.0)
        return m @ shear_matrix(self.shear, 0.0)


def _local_to_world(y_axis: ndarray, z_axis: ndarray) -> ndarray:
    # look along -z with y up, then conjugate to get local -> world
    return np.ascontiguousarray(look_along_rotation(-z_axis, y_axis).T)


def triangle_basis(p1, p2, p3, tolerances: Tolerances = DEFAULT_TOLERANCES) -> Basis:
    """
    Frame of the plane through three points.

    The x axis runs from p1 towards p2 and the z axis is the surface normal
    of the winding p1 -> p2 -> p3. Swapping p2 and p3 flips the normal,
    which is how back faces are produced.

    Collinear (or coincident) points do not raise: the second edge is
    nudged by `tolerances.collinear_offset` so that a normal exists, and
    any direction that is still undefined falls back to a fixed axis.

    Args:
        p1: corner at the local origin.
        p2: end of the first edge (local x).
        p3: end of the second edge.
        tolerances: thresholds for the degenerate branches.

    Returns:
        Basis with width = |p2 - p1|, height = distance of p3 from the
        first edge and shear = (p3 - p1)·x / width.
    """
    origin = as_vector(p1, "p1")
    e1 = as_vector(p2, "p2") - origin
    e2 = as_vector(p3, "p3") - origin

    normal = np.cross(e1, e2)
    if np.dot(normal, normal) < tolerances.collinear_epsilon:
        logger.debug("Collinear points %s, %s, %s; perturbing second edge", p1, p2, p3)
        e2 = e2 + tolerances.collinear_offset
        normal = np.cross(e1, e2)

    x_axis = normalize(e1, _X)
    if norm(normal) < NORM_EPSILON:
        logger.debug("No surface normal for %s, %s, %s; using a fallback frame", p1, p2, p3)
    z_axis = normalize(normal, perpendicular(x_axis))
    y_axis = normalize(np.cross(z_axis, x_axis), perpendicular(z_axis))

    width = norm(e1)
    height = float(np.dot(e2, y_axis))
    shear = float(np.dot(e2, x_axis)) / width if width > tolerances.min_width else 0.0

    rotation = _local_to_world(y_axis, z_axis)
    return Basis(
        origin=origin,
        x_axis=rotation[:, 0].copy(),
        y_axis=rotation[:, 1].copy(),
        z_axis=rotation[:, 2].copy(),
        rotation=rotation,
        width=width,
        height=height,
        shear=shear,
    )


def line_basis(
    p1,
    p2,
    thickness: float = 1.0,
    roll: float = 0.0,
    tolerances: Tolerances = DEFAULT_TOLERANCES,
) -> Optional[Basis]:
    """
    Frame of a thin strip running from p1 to p2.

    The x axis follows the segment. The strip's face is chosen with world +y
    as the up hint, or world +x for near-vertical segments, and is then
    rotated by `roll` radians about the segment.

    Args:
        p1: start of the segment.
        p2: end of the segment.
        thickness: strip width, stored as the basis height. A negative
            value mirrors the strip across the segment.
        roll: rotation of the face about the segment, in radians.
        tolerances: thresholds for the degenerate branches.

    Returns:
        The Basis, or None when the segment is shorter than
        `tolerances.min_length` and there is nothing to draw.
    """
    origin = as_vector(p1, "p1")
    direction = as_vector(p2, "p2") - origin
    length = norm(direction)

    if length < tolerances.min_length:
        logger.debug("Degenerate line %s -> %s (length %g)", p1, p2, length)
        return None

    up = _Y
    if abs(np.dot(direction, up) / length) > tolerances.vertical_threshold:
        logger.debug("Near-vertical line %s -> %s; using +x as up hint", p1, p2)
        up = _X

    z_axis = normalize(np.cross(direction, up), perpendicular(direction))
    x_axis = direction / length
    y_axis = normalize(np.cross(z_axis, x_axis), perpendicular(x_axis))

    rotation = np.ascontiguousarray(_local_to_world(y_axis, z_axis) @ rotation_x(float(roll)))
    return Basis(
        origin=origin,
        x_axis=rotation[:, 0].copy(),
        y_axis=rotation[:, 1].copy(),
        z_axis=rotation[:, 2].copy(),
        rotation=rotation,
        width=length,
        height=float(thickness),
        shear=0.0,
    )
