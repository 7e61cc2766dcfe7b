"""Numerical tolerances and iteration budgets.

Every degenerate-geometry branch and every bounded solver loop in
shapeframe reads its threshold from a :class:`Tolerances` instance. The
defaults reproduce the display host's own arithmetic; callers that need
more precision can raise the iteration budgets, the early exits still
bound the runtime.

Example:
    >>> from shapeframe import triangle_transforms
    >>> from shapeframe.config import DEFAULT_TOLERANCES
    >>> precise = DEFAULT_TOLERANCES.replace(polar_iterations=20)
    >>> mats = triangle_transforms((0, 0, 0), (1, 0, 0), (0, 1, 0), tolerances=precise)
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace


@dataclass(frozen=True, slots=True)
class Tolerances:
    """Thresholds used by the basis builder and the matrix decomposer.

    Attributes:
        collinear_epsilon: squared cross-product length below which three
            points are treated as collinear.
        collinear_offset: amount added to each component of the second edge
            of a collinear triangle or parallelogram. A heuristic, not a
            geometric correction.
        min_width: first-edge length below which no shear is applied.
        min_length: line length below which a line is degenerate.
        vertical_threshold: |cos| between a line and world +y above which
            world +x is used as the up hint instead.
        polar_iterations: Newton iterations for the polar decomposition.
        jacobi_sweeps: maximum Jacobi rotations when diagonalizing.
        jacobi_tolerance: largest off-diagonal magnitude accepted as diagonal.
    """

    collinear_epsilon: float = 1e-4
    collinear_offset: float = 1e-4
    min_width: float = 1e-3
    min_length: float = 1e-3
    vertical_threshold: float = 0.99
    polar_iterations: int = 10
    jacobi_sweeps: int = 20
    jacobi_tolerance: float = 1e-6

    def __post_init__(self):
        for name in ("collinear_epsilon", "min_width", "min_length", "jacobi_tolerance"):
            if getattr(self, name) <= 0.0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")
        if self.collinear_offset < 0.0:
            raise ValueError(f"collinear_offset must be non-negative, got {self.collinear_offset}")
        if not 0.0 < self.vertical_threshold < 1.0:
            raise ValueError(
                f"vertical_threshold must be in (0, 1), got {self.vertical_threshold}"
            )
        for name in ("polar_iterations", "jacobi_sweeps"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")

    def replace(self, **changes) -> Tolerances:
        """Return a copy with the given fields changed (validated again)."""
        unknown = set(changes) - {f.name for f in fields(self)}
        if unknown:
            raise ValueError(f"Unknown tolerance fields: {sorted(unknown)}")
        return replace(self, **changes)


DEFAULT_TOLERANCES = Tolerances()
