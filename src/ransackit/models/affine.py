# Andy Zhao
"""
Affine map model for 2D point correspondences.

Each data point is one correspondence (x, y, x', y'). We estimate an affine
map such that:

    [x', y', 1]^T  ≈  T @ [x, y, 1]^T

where:

    T = [[a, b, tx],
         [c, d, ty],
         [0, 0,  1]]

The model vector is theta = [a, b, tx, c, d, ty] (6 parameters).
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from ..ransac.types import Dataset, DataPoint, FloatArray, Model


# ---------- Homogeneous helpers ----------
def as_homogeneous(pts: FloatArray) -> FloatArray:
    """
    Convert (N,2) points -> (N,3) homogeneous points: [x, y, 1].
    """
    # Validate shape
    if pts.ndim != 2 or pts.shape[1] != 2:
        raise ValueError(f"Expected points shape (N, 2) but got {pts.shape}")

    # Create a column filled with 1 for the homogeneous coordinate.
    ones = np.ones((pts.shape[0], 1), dtype=np.float64)
    return np.hstack([pts.astype(np.float64), ones])


def theta_to_mat3x3(theta: Model) -> FloatArray:
    """
    Convert parameter vector theta = [a, b, tx, c, d, ty] into a 3x3 affine matrix.
    """
    a, b, tx, c, d, ty = map(float, theta.tolist())
    T = np.array(
        [
            [a, b, tx],
            [c, d, ty],
            [0.0, 0.0, 1.0],
        ],
        dtype=np.float64,
    )
    return T


# ---------- Affine Fitting ----------
def affine_map_from_three_pairs(sample: Dataset) -> Model:
    """
    Fit an affine map from exactly 3 correspondences (sample shape (3,4)).

    Always returns a model. For a degenerate sample (collinear points) the
    6x6 system is singular and we fall back to the minimum-norm least-squares
    solution; such models are meant to be filtered by `affine_map_is_reasonable`.
    """
    if sample.shape != (3, 4):
        raise ValueError(f"affine_map_from_three_pairs expects a (3,4) sample, got {sample.shape}")

    # For each correspondence (x, y) -> (x', y'):
    #   x' = a*x + b*y + tx
    #   y' = c*x + d*y + ty
    #
    # Each point gives 2 equations, so 3 points give 6 equations for 6 unknowns.
    A = np.zeros((6, 6), dtype=np.float64)
    b_vec = np.zeros((6,), dtype=np.float64)

    for i in range(3):
        x, y, x_prime, y_prime = map(float, sample[i])

        A[2 * i + 0, :] = [x, y, 1.0, 0.0, 0.0, 0.0]
        b_vec[2 * i + 0] = x_prime

        A[2 * i + 1, :] = [0.0, 0.0, 0.0, x, y, 1.0]
        b_vec[2 * i + 1] = y_prime

    try:
        theta = np.linalg.solve(A, b_vec)
    except np.linalg.LinAlgError:
        theta, _, _, _ = np.linalg.lstsq(A, b_vec, rcond=None)
    return theta.astype(np.float64)


# ---------- Apply map + errors ----------
def apply_affine(theta: Model, pts: FloatArray) -> FloatArray:
    """
    Apply the affine map to (N,2) points, returning (N,2) points.
    """
    ph = as_homogeneous(pts)

    # Each point is a row, so multiply by T^T
    ph_t = ph @ theta_to_mat3x3(theta).T
    return ph_t[:, :2]


def affine_match_error(theta: Model, point: DataPoint) -> float:
    """
    Euclidean distance between the mapped source point and the target point.
    """
    a, b, tx, c, d, ty = theta
    x, y, x_prime, y_prime = point
    return float(np.hypot(a * x + b * y + tx - x_prime, c * x + d * y + ty - y_prime))


def residuals_affine(theta: Model, data: Dataset) -> FloatArray:
    """
    affine_match_error for every row of `data` (N,4). Shape (N,).
    """
    predicted = apply_affine(theta, data[:, 0:2])
    return np.linalg.norm(predicted - data[:, 2:4], axis=1)


# ---------- Reasonableness ----------
@dataclass(frozen=True)
class AffineBounds:
    """
    Limits on the linear part [[a, b], [c, d]] of a reasonable affine map.

    det_min, det_max:
      - orientation-preserving, no extreme area change
    norm2_min, norm2_max:
      - squared Frobenius norm a^2 + b^2 + c^2 + d^2, rejects huge or
        vanishing scale/shear
    """
    det_min: float = 0.01
    det_max: float = 100.0
    norm2_min: float = 0.1
    norm2_max: float = 10.0


def affine_map_is_reasonable(theta: Model, bounds: AffineBounds = AffineBounds()) -> bool:
    """
    Reject flips, severe shears and wild scale changes.
    """
    a, b, c, d = float(theta[0]), float(theta[1]), float(theta[3]), float(theta[4])
    if not np.isfinite(theta).all():
        return False

    det = a * d - b * c
    if det < 0:
        return False
    if abs(det) > bounds.det_max or abs(det) < bounds.det_min:
        return False

    norm2 = a * a + b * b + c * c + d * d
    if norm2 > bounds.norm2_max or norm2 < bounds.norm2_min:
        return False
    return True
