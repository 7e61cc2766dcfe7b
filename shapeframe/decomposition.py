"""
Decomposition of affine matrices into the placement the quad entity
accepts.

The entity's transform is

    Translate(translation) · Rotate(left_rotation) · Scale(scale) · Rotate(right_rotation)

which cannot hold shear directly. Any linear part A can still be written
this way: with the polar decomposition A = Q·S and the eigendecomposition
S = V·D·Vᵀ,

    A = (Q·V) · D · Vᵀ

so left_rotation = Q·V, scale = D and right_rotation = Vᵀ.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np
from numba import njit
from numpy import float64 as np_float64
from numpy import ndarray

from shapeframe.config import DEFAULT_TOLERANCES, Tolerances
from shapeframe.geometry import quaternion_to_rotation, rotation_to_quaternion
from shapeframe.linalg import all_finite3, as_matrix4, as_vector, det3, inv3, matmul3, transpose3

logger = logging.getLogger(__name__)


@njit(cache=True)
def polar_decomposition(A, iterations=10):
    """
    Polar decomposition A = Q · S by Newton iteration.

    Starting from Q = A, repeats Q <- (Q + Q^-T) / 2 for a fixed number of
    iterations. If Q turns singular along the way the iteration stops and
    the last Q is kept as is.

    Parameters
    ----------
    A : (3, 3) float64 array
    iterations : int
        Newton iteration budget.

    Returns
    -------
    Q : (3, 3) float64 array
        Orthogonal factor (proper rotation when det(A) > 0).
    S : (3, 3) float64 array
        Symmetric stretch, Qᵀ · A.
    converged : bool
        False if the iteration stopped on a singular Q.
    """
    Q = A.copy()
    converged = True
    for _ in range(iterations):
        d = det3(Q)
        if d == 0.0 or not math.isfinite(d):
            converged = False
            break
        Qinv = inv3(Q)
        if not all_finite3(Qinv):
            converged = False
            break
        nxt = np.empty((3, 3), dtype=np_float64)
        for i in range(3):
            for j in range(3):
                nxt[i, j] = 0.5 * (Q[i, j] + Qinv[j, i])
        Q = nxt
    S = matmul3(transpose3(Q), A)
    return Q, S, converged


@njit(cache=True)
def jacobi_eigen_symmetric(S, max_sweeps=20, tolerance=1e-6):
    """
    Eigen decomposition of a symmetric 3 x 3 by Jacobi rotations.

    Each step zeroes the largest off-diagonal entry (p, q) with the plane
    rotation J(p, q, phi), phi = atan2(2 A[p,q], A[q,q] - A[p,p]) / 2, and
    updates A <- Jᵀ A J, V <- V J. Stops after `max_sweeps` rotations or when
    no off-diagonal magnitude reaches `tolerance`.

    Returns
    -------
    D : (3,) float64 array
        Eigenvalues (diagonal of the rotated matrix).
    V : (3, 3) float64 array
        Eigenvectors as columns, S ≈ V · diag(D) · Vᵀ.
    """
    A = S.copy()
    V = np.eye(3, dtype=np_float64)
    for _ in range(max_sweeps):
        # pivot on the largest off-diagonal element
        largest = 0.0
        p = 0
        q = 1
        for i in range(3):
            for j in range(i + 1, 3):
                value = abs(A[i, j])
                if value > largest:
                    largest = value
                    p = i
                    q = j

        if largest < tolerance:
            break

        phi = 0.5 * math.atan2(2.0 * A[p, q], A[q, q] - A[p, p])
        c = math.cos(phi)
        s = math.sin(phi)

        J = np.eye(3, dtype=np_float64)
        J[p, p] = c
        J[q, q] = c
        J[p, q] = s
        J[q, p] = -s

        A = matmul3(matmul3(transpose3(J), A), J)
        V = matmul3(V, J)

    D = np.empty(3, dtype=np_float64)
    for i in range(3):
        D[i] = A[i, i]
    return D, V


@njit(cache=True)
def _decompose(matrix, polar_iterations, jacobi_sweeps, jacobi_tolerance):
    translation = matrix[:3, 3].copy()
    A = np.ascontiguousarray(matrix[:3, :3])

    Q, S, converged = polar_decomposition(A, polar_iterations)
    D, V = jacobi_eigen_symmetric(S, jacobi_sweeps, jacobi_tolerance)

    # keep V·D·Vᵀ while forcing non-negative scale
    flipped = 0
    for i in range(3):
        if D[i] < 0.0:
            D[i] = -D[i]
            V[0, i] = -V[0, i]
            V[1, i] = -V[1, i]
            V[2, i] = -V[2, i]
            flipped += 1

    left = rotation_to_quaternion(matmul3(Q, V))
    right = rotation_to_quaternion(transpose3(V))
    return translation, left, D, right, converged, flipped


@dataclass(frozen=True, slots=True)
class TRSDecomposition:
    """
    Placement fields of a quad entity.

    Attributes:
        translation: (3,) translation.
        left_rotation: (4,) unit quaternion [x, y, z, w] applied after scaling.
        scale: (3,) per-axis scale, every component >= 0.
        right_rotation: (4,) unit quaternion [x, y, z, w] applied before scaling.
    """

    translation: ndarray
    left_rotation: ndarray
    scale: ndarray
    right_rotation: ndarray

    def to_matrix(self) -> ndarray:
        """Recompose Translate · LeftRotation · Scale · RightRotation as a 4x4."""
        return compose(self.translation, self.left_rotation, self.scale, self.right_rotation)

    def as_tuple(self) -> Tuple[ndarray, ndarray, ndarray, ndarray]:
        return self.translation, self.left_rotation, self.scale, self.right_rotation


def compose(translation, left_rotation, scale, right_rotation) -> ndarray:
    """
    Build Translate(translation) · Rotate(left_rotation) · Scale(scale) ·
    Rotate(right_rotation). Quaternions are [x, y, z, w].
    """
    left = quaternion_to_rotation(np.asarray(left_rotation, dtype=np_float64))
    right = quaternion_to_rotation(np.asarray(right_rotation, dtype=np_float64))
    m = np.eye(4, dtype=np_float64)
    m[:3, :3] = (left * as_vector(scale, "scale")) @ right
    m[:3, 3] = as_vector(translation, "translation")
    return m


def decompose(transform, tolerances: Tolerances = DEFAULT_TOLERANCES) -> TRSDecomposition:
    """
    Split an affine 4x4 (shear and reflection allowed) into translation,
    left rotation, non-negative scale and right rotation.

    Singular or degenerate input does not raise; the result is a best
    effort whose recomposition may differ from the input.

    Args:
        transform: 4x4 affine matrix, bottom row [0, 0, 0, 1].
        tolerances: iteration budgets and convergence threshold.

    Returns:
        TRSDecomposition
    """
    matrix = as_matrix4(transform, "transform")
    translation, left, scale, right, converged, flipped = _decompose(
        matrix,
        tolerances.polar_iterations,
        tolerances.jacobi_sweeps,
        tolerances.jacobi_tolerance,
    )
    if logger.isEnabledFor(logging.DEBUG):
        if not converged:
            logger.debug("Polar iteration stopped on a singular matrix:\n%s", matrix)
        if flipped:
            logger.debug("Flipped %d negative eigenvalue(s) into the rotations", flipped)
    return TRSDecomposition(
        translation=translation,
        left_rotation=left,
        scale=scale,
        right_rotation=right,
    )
