"""
World-space transforms for triangles, lines, polylines and parallelograms.

Each function returns 4x4 affine matrices mapping the display entity's
native rectangle onto (part of) the requested shape in world space. The
matrices may contain shear; see shapeframe.decomposition for turning one
into the translation / rotation / scale / rotation fields the entity
accepts.
"""

from __future__ import annotations

import logging
import math
from typing import List, Sequence, Tuple

import numpy as np
from numpy import float64 as np_float64
from numpy import ndarray

from shapeframe.basis import line_basis, triangle_basis
from shapeframe.config import DEFAULT_TOLERANCES, Tolerances
from shapeframe.linalg import as_matrix4, as_vector, translation_matrix
from shapeframe.primitives import UNIT_SQUARE, UNIT_TRIANGLE

logger = logging.getLogger(__name__)

# centres the unit square across its height so a line runs down the middle
_CENTER_ACROSS = translation_matrix([0.0, -0.5, 0.0])


def triangle_transforms(
    p1,
    p2,
    p3,
    double_sided: bool = False,
    tolerances: Tolerances = DEFAULT_TOLERANCES,
) -> List[ndarray]:
    """
    Three quad transforms whose union is the triangle p1, p2, p3.

    Args:
        p1, p2, p3: triangle corners; the visible face is the one whose
            normal is (p2 - p1) x (p3 - p1).
        double_sided: also return the three back-face transforms (p2 and
            p3 swapped) after the front ones.
        tolerances: thresholds for the degenerate branches.

    Returns:
        list of 3 (or 6) world-space 4x4 matrices.
    """
    placement = triangle_basis(p1, p2, p3, tolerances).placement()
    transforms = [placement @ piece for piece in UNIT_TRIANGLE]
    if double_sided:
        back = triangle_basis(p1, p3, p2, tolerances).placement()
        transforms.extend(back @ piece for piece in UNIT_TRIANGLE)
    return transforms


def line_transform(
    p1,
    p2,
    thickness: float,
    roll: float = 0.0,
    degrees: bool = False,
    tolerances: Tolerances = DEFAULT_TOLERANCES,
) -> ndarray:
    """
    Transform of a strip `thickness` wide running from p1 to p2, centred on
    the segment.

    Args:
        p1, p2: segment end points.
        thickness: width of the strip; negative mirrors it across the segment.
        roll: rotation of the strip's face about the segment.
        degrees: if True, `roll` is in degrees, else radians.
        tolerances: thresholds for the degenerate branches.

    Returns:
        4x4 world-space matrix; the identity when the segment is shorter
        than `tolerances.min_length` (the caller may skip drawing it).
    """
    if degrees:
        roll = math.radians(roll)
    basis = line_basis(p1, p2, thickness, roll, tolerances)
    if basis is None:
        return np.eye(4, dtype=np_float64)
    return basis.placement() @ _CENTER_ACROSS @ UNIT_SQUARE


def line_transforms(
    p1,
    p2,
    thickness: float,
    roll: float = 0.0,
    double_sided: bool = False,
    degrees: bool = False,
    tolerances: Tolerances = DEFAULT_TOLERANCES,
) -> List[ndarray]:
    """Front face of a line, followed by its back face when `double_sided`."""
    if degrees:
        roll = math.radians(roll)
    transforms = [line_transform(p1, p2, thickness, roll, tolerances=tolerances)]
    if double_sided:
        # reversed direction flips the face, the half turn keeps it on the same side
        transforms.append(line_transform(p2, p1, thickness, roll + math.pi, tolerances=tolerances))
    return transforms


def parallelogram_transform(
    p1,
    p2,
    p3,
    tolerances: Tolerances = DEFAULT_TOLERANCES,
) -> ndarray:
    """
    Single quad transform covering the parallelogram with corners p1, p2,
    p3 and p1 + (p2 - p1) + (p3 - p1).

    Args:
        p1: corner shared by both edges.
        p2: end of the first (width) edge.
        p3: end of the second (height) edge.
        tolerances: thresholds for the degenerate branches.

    Returns:
        4x4 world-space matrix.
    """
    return triangle_basis(p1, p2, p3, tolerances).placement() @ UNIT_SQUARE


def parallelogram_transforms(
    p1,
    p2,
    p3,
    double_sided: bool = False,
    tolerances: Tolerances = DEFAULT_TOLERANCES,
) -> List[ndarray]:
    """Front face of a parallelogram, followed by its back face when `double_sided`."""
    transforms = [parallelogram_transform(p1, p2, p3, tolerances)]
    if double_sided:
        transforms.append(parallelogram_transform(p1, p3, p2, tolerances))
    return transforms


def polyline_segments(points: Sequence, closed: bool = False) -> List[Tuple[ndarray, ndarray]]:
    """
    Consecutive point pairs of a polyline.

    A closed polyline with more than two points gets one more segment from
    the last point back to the first. Fewer than two points give no
    segments.
    """
    pts = [as_vector(p, "point") for p in points]
    if len(pts) < 2:
        return []
    segments = list(zip(pts[:-1], pts[1:]))
    if closed and len(pts) > 2:
        segments.append((pts[-1], pts[0]))
    return segments


def polyline_segment_count(n_points: int, closed: bool = False) -> int:
    """Number of segments a polyline of `n_points` points is drawn with."""
    if n_points < 2:
        return 0
    if closed and n_points > 2:
        return n_points
    return n_points - 1


def polyline_transforms(
    points: Sequence,
    thickness: float,
    roll: float = 0.0,
    closed: bool = False,
    double_sided: bool = False,
    degrees: bool = False,
    tolerances: Tolerances = DEFAULT_TOLERANCES,
) -> List[ndarray]:
    """
    Line transforms for every segment of a polyline, in order.

    Each segment contributes its front face, followed by its back face when
    `double_sided`. Zero-length segments contribute identity matrices, as
    `line_transform` does.
    """
    segments = polyline_segments(points, closed)
    if not segments:
        logger.debug("Polyline with %d point(s) has no segments", len(points))
        return []
    if degrees:
        roll = math.radians(roll)

    transforms: List[ndarray] = []
    for start, end in segments:
        transforms.extend(
            line_transforms(start, end, thickness, roll, double_sided, tolerances=tolerances)
        )
    return transforms


def to_local(transform, origin) -> ndarray:
    """
    Re-express a world-space transform relative to an entity spawned at
    `origin`: Translate(-origin) @ transform.
    """
    return translation_matrix(-as_vector(origin, "origin")) @ as_matrix4(transform, "transform")
