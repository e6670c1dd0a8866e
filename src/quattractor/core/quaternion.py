"""
Quaternion and 3D vector primitives.

Quaternions are float32 arrays ordered (w, x, y, z); vectors are float32
arrays ordered (x, y, z). Every function is pure and returns a new array.
Arithmetic stays in float32 so stored values round identically everywhere.
"""

from typing import Sequence, Union

import numpy as np

ArrayLike = Union[np.ndarray, Sequence[float]]

# Distance from the pole below which projection returns its limit value
POLE_EPSILON: float = 1e-10

IDENTITY: np.ndarray = np.array([1.0, 0.0, 0.0, 0.0], dtype=np.float32)
IDENTITY.flags.writeable = False


def quaternion(w: float, x: float, y: float, z: float) -> np.ndarray:
    """Build a float32 quaternion (w, x, y, z)."""
    return np.array([w, x, y, z], dtype=np.float32)


def vector3(x: float, y: float, z: float) -> np.ndarray:
    """Build a float32 3-vector."""
    return np.array([x, y, z], dtype=np.float32)


def _as_f32(a: ArrayLike, size: int) -> np.ndarray:
    arr = np.asarray(a, dtype=np.float32)
    if arr.shape != (size,):
        raise ValueError(f"expected {size} components, got shape {arr.shape}")
    return arr


def sum_of_squares(a: np.ndarray) -> np.float32:
    """Left-to-right float32 sum of squared components."""
    total = np.float32(0.0)
    for c in a:
        total = total + c * c
    return np.float32(total)


def normalize(q: ArrayLike) -> np.ndarray:
    """
    Scale a quaternion to unit length.

    The zero quaternion has no direction; it maps to the identity (1, 0, 0, 0).
    """
    q = _as_f32(q, 4)
    length = np.sqrt(sum_of_squares(q))
    if length == 0.0:
        return IDENTITY.copy()
    return (q / length).astype(np.float32)


def multiply(q1: ArrayLike, q2: ArrayLike) -> np.ndarray:
    """Hamilton product q1 * q2 (non-commutative)."""
    w1, x1, y1, z1 = _as_f32(q1, 4)
    w2, x2, y2, z2 = _as_f32(q2, 4)
    return np.array(
        [
            w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2,
            w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2,
            w1 * y2 - x1 * z2 + y1 * w2 + z1 * x2,
            w1 * z2 + x1 * y2 - y1 * x2 + z1 * w2,
        ],
        dtype=np.float32,
    )


def conjugate(q: ArrayLike) -> np.ndarray:
    """Return (w, -x, -y, -z)."""
    w, x, y, z = _as_f32(q, 4)
    return np.array([w, -x, -y, -z], dtype=np.float32)


def stereographic_projection(q: ArrayLike) -> np.ndarray:
    """
    Project a point of S³ to ℝ³ from the north pole (1, 0, 0, 0).

    At the pole itself the map is undefined; the origin is returned instead.
    """
    q = _as_f32(q, 4)
    w = q[0]
    if abs(1.0 - float(w)) < POLE_EPSILON:
        return np.zeros(3, dtype=np.float32)
    scale = np.float32(1.0) / (np.float32(1.0) - w)
    return (q[1:] * scale).astype(np.float32)


def inverse_stereographic_projection(p: ArrayLike) -> np.ndarray:
    """
    Lift a point of ℝ³ back onto S³.

    Points within sqrt(1e-10) of the origin map to the north pole (1, 0, 0, 0).
    """
    p = _as_f32(p, 3)
    r2 = sum_of_squares(p)
    if r2 < POLE_EPSILON:
        return IDENTITY.copy()
    denom = r2 + np.float32(1.0)
    w = (r2 - np.float32(1.0)) / denom
    scale = np.float32(2.0) / denom
    out = np.empty(4, dtype=np.float32)
    out[0] = w
    out[1:] = p * scale
    return out


def rotate_vector(v: ArrayLike, q: ArrayLike) -> np.ndarray:
    """
    Rotate ``v`` by the unit quaternion ``q`` (q · v · q*).

    ``q`` must already be normalized; the conjugate stands in for the inverse.
    """
    v = _as_f32(v, 3)
    q = _as_f32(q, 4)
    pure = np.array([0.0, v[0], v[1], v[2]], dtype=np.float32)
    rotated = multiply(multiply(q, pure), conjugate(q))
    return rotated[1:].copy()


def rotation_matrix(q: ArrayLike) -> np.ndarray:
    """3×3 matrix with the same action as ``rotate_vector(·, normalize(q))``."""
    w, x, y, z = normalize(q)
    return np.array(
        [
            [1 - 2 * (y * y + z * z), 2 * (x * y - w * z), 2 * (x * z + w * y)],
            [2 * (x * y + w * z), 1 - 2 * (x * x + z * z), 2 * (y * z - w * x)],
            [2 * (x * z - w * y), 2 * (y * z + w * x), 1 - 2 * (x * x + y * y)],
        ],
        dtype=np.float32,
    )


def magnitude(v: ArrayLike) -> np.float32:
    """Euclidean length of a 3-vector."""
    v = _as_f32(v, 3)
    return np.sqrt(sum_of_squares(v))


def distance(p1: ArrayLike, p2: ArrayLike) -> np.float32:
    """Euclidean distance between two 3D points."""
    return magnitude(_as_f32(p1, 3) - _as_f32(p2, 3))


def is_identity(q: ArrayLike) -> bool:
    """Exact component-wise comparison against (1, 0, 0, 0)."""
    return bool(np.array_equal(_as_f32(q, 4), IDENTITY))
