# geometry.py
import math
from numpy import float64 as np_float64
from numpy import ndarray
import numpy as np
from numba import njit

from numba.core.errors import NumbaPerformanceWarning
import warnings
warnings.filterwarnings("ignore", category=NumbaPerformanceWarning)


@njit(cache=True)
def quaternion_to_rotation(quaternion: ndarray, w_last: bool = True) -> ndarray:
    """
    Convert a quaternion to a 3x3 rotation matrix.

    The quaternion can be provided in two formats:
    - If w_last is True (default), the quaternion is expected to be in the form [x, y, z, w].
    - If w_last is False, the quaternion should be in the form [w, x, y, z].

    The quaternion is normalized first, so slightly drifted input still
    yields an orthonormal matrix.

    Parameters:
        quaternion (ndarray): A 4-element array representing the quaternion.
        w_last (bool, optional): Determines the order of the quaternion components.

    Returns:
        ndarray: A 3x3 rotation matrix corresponding to the input quaternion.
    """
    if w_last:
        x, y, z, w = quaternion[0], quaternion[1], quaternion[2], quaternion[3]
    else:
        w, x, y, z = quaternion[0], quaternion[1], quaternion[2], quaternion[3]

    n = math.sqrt(x*x + y*y + z*z + w*w)
    if n > 0.0:
        x /= n
        y /= n
        z /= n
        w /= n

    # precompute products
    xx = x*x
    yy = y*y
    zz = z*z
    xy = x*y
    xz = x*z
    yz = y*z
    wx = w*x
    wy = w*y
    wz = w*z

    R = np.empty((3, 3), dtype=np_float64)
    R[0, 0] = 1 - 2*(yy + zz)
    R[0, 1] = 2*(xy - wz)
    R[0, 2] = 2*(xz + wy)

    R[1, 0] = 2*(xy + wz)
    R[1, 1] = 1 - 2*(xx + zz)
    R[1, 2] = 2*(yz - wx)

    R[2, 0] = 2*(xz - wy)
    R[2, 1] = 2*(yz + wx)
    R[2, 2] = 1 - 2*(xx + yy)
    return R


@njit(cache=True)
def rotation_to_quaternion(rotation, w_last=True):
    """
    Converts a 3x3 rotation matrix to a normalized quaternion.

    Depending on the value of the trace of the rotation matrix, the algorithm selects an appropriate
    computation method to extract the quaternion components, ensuring numerical stability by normalizing
    the result.

    Parameters:
        rotation (array_like): A 3x3 rotation matrix.
        w_last (bool, optional): If True, the quaternion is returned as [x, y, z, w];
                                 otherwise as [w, x, y, z]. Default is True.

    Returns:
        numpy.ndarray: A 1D numpy array of 4 floats representing the normalized quaternion.

    Notes:
        - The input is treated as already orthonormal; matrices that are only
          approximately orthonormal (an unconverged polar factor, for
          instance) still produce a unit quaternion, just not an exact one.

    Example:
        >>> import numpy as np
        >>> R = np.eye(3)
        >>> q = rotation_to_quaternion(R)
        >>> print(q)  # For w_last=True, output will be [0.0, 0.0, 0.0, 1.0]
    """
    # unpack to locals (avoids repeated indexing)
    a00, a01, a02 = rotation[0, 0], rotation[0, 1], rotation[0, 2]
    a10, a11, a12 = rotation[1, 0], rotation[1, 1], rotation[1, 2]
    a20, a21, a22 = rotation[2, 0], rotation[2, 1], rotation[2, 2]

    tr = a00 + a11 + a22

    if tr > 0.0:
        S = math.sqrt(tr + 1.0) * 2.0
        qw = 0.25 * S
        qx = (a21 - a12) / S
        qy = (a02 - a20) / S
        qz = (a10 - a01) / S
    else:
        # pick largest diagonal element
        if a00 > a11 and a00 > a22:
            S = math.sqrt(1.0 + a00 - a11 - a22) * 2.0
            qw = (a21 - a12) / S
            qx = 0.25 * S
            qy = (a01 + a10) / S
            qz = (a02 + a20) / S
        elif a11 > a22:
            S = math.sqrt(1.0 + a11 - a00 - a22) * 2.0
            qw = (a02 - a20) / S
            qx = (a01 + a10) / S
            qy = 0.25 * S
            qz = (a12 + a21) / S
        else:
            S = math.sqrt(1.0 + a22 - a00 - a11) * 2.0
            qw = (a10 - a01) / S
            qx = (a02 + a20) / S
            qy = (a12 + a21) / S
            qz = 0.25 * S

    # normalize (guards against numerical drift)
    norm = math.sqrt(qx*qx + qy*qy + qz*qz + qw*qw)
    qx /= norm
    qy /= norm
    qz /= norm
    qw /= norm

    out = np.empty(4, dtype=np_float64)
    if w_last:
        out[0], out[1], out[2], out[3] = qx, qy, qz, qw
    else:
        out[0], out[1], out[2], out[3] = qw, qx, qy, qz

    return out


@njit(cache=True)
def rotation_x(angle: float, degrees: bool = False) -> ndarray:
    """
    Right-handed rotation about the x axis.

    Parameters:
        angle (float): Rotation angle.
        degrees (bool, optional): If True, `angle` is in degrees. Defaults to False.

    Returns:
        ndarray: 3x3 rotation matrix.
    """
    if degrees:
        angle *= np.pi/180.0
    c = math.cos(angle)
    s = math.sin(angle)
    R = np.zeros((3, 3), dtype=np_float64)
    R[0, 0] = 1.0
    R[1, 1] = c
    R[1, 2] = -s
    R[2, 1] = s
    R[2, 2] = c
    return R


@njit(cache=True)
def look_along_rotation(direction: ndarray, up: ndarray) -> ndarray:
    """
    World-to-view rotation of an observer looking along `direction`.

    The view's -z axis points along `direction` and its +y axis is `up`
    projected onto the plane perpendicular to it. The returned matrix has
    the view axes as rows (left, up, back); its transpose maps the view
    axes back onto world space.

    Parameters:
        direction (ndarray): Viewing direction, any non-zero length.
        up (ndarray): Up hint, need not be perpendicular to `direction`.

    Returns:
        ndarray: 3x3 rotation matrix (world -> view).

    Notes:
        - A zero `direction` looks along world -z.
        - If `up` is parallel to `direction` an arbitrary perpendicular up
          is chosen, crossing with world-X, or world-Y if that is parallel too.
    """
    # 1) back axis = -direction, normalized
    bx, by, bz = -direction[0], -direction[1], -direction[2]
    d2 = bx*bx + by*by + bz*bz
    if d2 < 1e-24:
        bx, by, bz = 0.0, 0.0, 1.0
    else:
        d = math.sqrt(d2)
        bx, by, bz = bx/d, by/d, bz/d

    # 2) left = up × back
    ux, uy, uz = up[0], up[1], up[2]
    lx = uy*bz - uz*by
    ly = uz*bx - ux*bz
    lz = ux*by - uy*bx
    l2 = lx*lx + ly*ly + lz*lz
    if l2 < 1e-24:
        # up is unusable: cross world-X with back, then world-Y
        lx, ly, lz = 0.0, -bz, by
        l2 = ly*ly + lz*lz
        if l2 < 1e-12:
            lx, ly, lz = bz, 0.0, -bx
            l2 = lx*lx + lz*lz
    ln = math.sqrt(l2)
    lx, ly, lz = lx/ln, ly/ln, lz/ln

    # 3) orthogonal up = back × left
    vx = by*lz - bz*ly
    vy = bz*lx - bx*lz
    vz = bx*ly - by*lx

    R = np.empty((3, 3), dtype=np_float64)
    R[0, 0], R[0, 1], R[0, 2] = lx, ly, lz
    R[1, 0], R[1, 1], R[1, 2] = vx, vy, vz
    R[2, 0], R[2, 1], R[2, 2] = bx, by, bz
    return R
