# linalg.py
import math
import numpy as np
from numpy import float64 as np_float64
from numpy import ndarray
from numba import njit
from numba.core.errors import NumbaPerformanceWarning
import warnings
warnings.filterwarnings("ignore", category=NumbaPerformanceWarning)

# below this length a vector has no usable direction
NORM_EPSILON = 1e-12

_EYE4 = np.eye(4, dtype=np_float64)


@njit(inline='always', cache=True)
def det3(M):
    """Determinant of a 3 x 3 (faster than np.linalg.det for tiny mats)."""
    return (
        M[0, 0] * (M[1, 1] * M[2, 2] - M[1, 2] * M[2, 1])
        - M[0, 1] * (M[1, 0] * M[2, 2] - M[1, 2] * M[2, 0])
        + M[0, 2] * (M[1, 0] * M[2, 1] - M[1, 1] * M[2, 0])
    )


@njit(cache=True)
def inv3(M):
    """
    Analytic inverse of a 3 x 3.

    The caller is responsible for rejecting singular input; a zero
    determinant raises ZeroDivisionError inside compiled code.
    """
    d = det3(M)
    invd = 1.0 / d
    out = np.empty((3, 3), dtype=np_float64)
    out[0, 0] = (M[1, 1] * M[2, 2] - M[1, 2] * M[2, 1]) * invd
    out[0, 1] = -(M[0, 1] * M[2, 2] - M[0, 2] * M[2, 1]) * invd
    out[0, 2] = (M[0, 1] * M[1, 2] - M[0, 2] * M[1, 1]) * invd
    out[1, 0] = -(M[1, 0] * M[2, 2] - M[1, 2] * M[2, 0]) * invd
    out[1, 1] = (M[0, 0] * M[2, 2] - M[0, 2] * M[2, 0]) * invd
    out[1, 2] = -(M[0, 0] * M[1, 2] - M[0, 2] * M[1, 0]) * invd
    out[2, 0] = (M[1, 0] * M[2, 1] - M[1, 1] * M[2, 0]) * invd
    out[2, 1] = -(M[0, 0] * M[2, 1] - M[0, 1] * M[2, 0]) * invd
    out[2, 2] = (M[0, 0] * M[1, 1] - M[0, 1] * M[1, 0]) * invd
    return out


@njit(cache=True)
def transpose3(M):
    """Contiguous transpose of a 3 x 3."""
    out = np.empty((3, 3), dtype=np_float64)
    for i in range(3):
        for j in range(3):
            out[i, j] = M[j, i]
    return out


@njit(cache=True)
def matmul3(A, B):
    """Product of two 3 x 3 matrices without going through BLAS."""
    out = np.empty((3, 3), dtype=np_float64)
    for i in range(3):
        for j in range(3):
            out[i, j] = A[i, 0] * B[0, j] + A[i, 1] * B[1, j] + A[i, 2] * B[2, j]
    return out


@njit(cache=True)
def all_finite3(M) -> bool:
    for i in range(3):
        for j in range(3):
            if not math.isfinite(M[i, j]):
                return False
    return True


def as_vector(value, name: str = "vector") -> ndarray:
    """
    Coerce a 3-sequence (list, tuple, ndarray) into a float64 vector.

    Raises:
        ValueError: if the input does not hold exactly three components.
    """
    vec = np.asarray(value, dtype=np_float64)
    if vec.shape != (3,):
        raise ValueError(f"Invalid {name} shape: {vec.shape}")
    return vec


def as_matrix4(value, name: str = "matrix") -> ndarray:
    """Coerce a 4x4 array-like into a contiguous float64 matrix."""
    mat = np.ascontiguousarray(value, dtype=np_float64)
    if mat.shape != (4, 4):
        raise ValueError(f"Invalid {name} shape: {mat.shape}")
    return mat


def norm(vector: ndarray) -> float:
    return math.sqrt(float(np.dot(vector, vector)))


def normalize(vector: ndarray, fallback: ndarray) -> ndarray:
    """
    Return `vector` scaled to unit length, or a copy of `fallback` when
    the vector is too short to carry a direction.
    """
    length = norm(vector)
    if length < NORM_EPSILON:
        return np.array(fallback, dtype=np_float64)
    return vector / length


def perpendicular(vector: ndarray) -> ndarray:
    """
    A unit vector perpendicular to `vector`, built by crossing it with the
    world axis it is least aligned with.
    """
    axis = np.zeros(3, dtype=np_float64)
    axis[int(np.argmin(np.abs(vector)))] = 1.0
    return normalize(np.cross(vector, axis), np.array([0.0, 0.0, 1.0]))


###########
# 4x4 builders. All use the column-vector convention p' = M @ p.
#

def translation_matrix(translation) -> ndarray:
    m = _EYE4.copy()
    m[:3, 3] = translation
    return m


def rotation_matrix(rotation: ndarray) -> ndarray:
    """Embed a 3x3 rotation into a 4x4 transform."""
    m = _EYE4.copy()
    m[:3, :3] = rotation
    return m


def scale_matrix(x: float, y: float, z: float) -> ndarray:
    m = _EYE4.copy()
    m[0, 0] = x
    m[1, 1] = y
    m[2, 2] = z
    return m


def shear_matrix(yx: float, xy: float) -> ndarray:
    """
    Planar shear in the local xy plane.

    Args:
        yx: amount of y added to x (x' = x + yx * y).
        xy: amount of x added to y (y' = y + xy * x).
    """
    m = _EYE4.copy()
    m[0, 1] = yx
    m[1, 0] = xy
    return m
