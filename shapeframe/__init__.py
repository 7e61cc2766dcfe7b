"""
shapeframe: flat triangles, lines, polylines and parallelograms drawn with
billboard quads whose placement is limited to translation, rotation, scale
and rotation.

The package builds the (possibly sheared) affine transform of each quad
and decomposes any affine matrix into the placement fields the quad
entity accepts.
"""

__version__ = version = "0.1.0"

# exposing the public API of the package
from shapeframe.config import DEFAULT_TOLERANCES, Tolerances
from shapeframe.basis import Basis, line_basis, triangle_basis
from shapeframe.primitives import UNIT_SQUARE, UNIT_TRIANGLE, unit_square, unit_triangle
from shapeframe.shapes import (
    line_transform,
    line_transforms,
    parallelogram_transform,
    parallelogram_transforms,
    polyline_segment_count,
    polyline_segments,
    polyline_transforms,
    to_local,
    triangle_transforms,
)
from shapeframe.decomposition import TRSDecomposition, compose, decompose

__all__ = [
    "Basis",
    "DEFAULT_TOLERANCES",
    "TRSDecomposition",
    "Tolerances",
    "UNIT_SQUARE",
    "UNIT_TRIANGLE",
    "compose",
    "decompose",
    "line_basis",
    "line_transform",
    "line_transforms",
    "parallelogram_transform",
    "parallelogram_transforms",
    "polyline_segment_count",
    "polyline_segments",
    "polyline_transforms",
    "to_local",
    "triangle_basis",
    "triangle_transforms",
    "unit_square",
    "unit_triangle",
]
