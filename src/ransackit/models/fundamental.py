# Andy Zhao
"""
Fundamental matrix model for 2D point correspondences.

Each data point is one correspondence (x, y, x', y') between two views.
A fundamental matrix F (3x3, rank 2) satisfies the epipolar constraint:

    [x', y', 1] @ F @ [x, y, 1]^T = 0

The model vector is F flattened row-major (9 parameters), scaled to unit
Frobenius norm so that errors are comparable between hypotheses.

Minimal solver: the seven-point algorithm (OpenCV FM_7POINT). Seven
correspondences give up to 3 real solutions; we keep the first one.
"""

from __future__ import annotations

import cv2
import numpy as np

from ..ransac.types import Dataset, DataPoint, FloatArray, Model

_NAN_MODEL = np.full((9,), np.nan, dtype=np.float64)


def seven_point_algorithm(sample: Dataset) -> Model:
    """
    Fundamental matrix from exactly 7 correspondences (sample shape (7,4)).

    Returns a non-finite model when OpenCV finds no solution
    (rejected by `fundamental_matrix_is_finite`).
    """
    if sample.shape != (7, 4):
        raise ValueError(f"seven_point_algorithm expects a (7,4) sample, got {sample.shape}")

    pts0 = np.ascontiguousarray(sample[:, 0:2], dtype=np.float64)
    pts1 = np.ascontiguousarray(sample[:, 2:4], dtype=np.float64)

    try:
        F, _ = cv2.findFundamentalMat(pts0, pts1, method=cv2.FM_7POINT)
    except cv2.error:
        return _NAN_MODEL.copy()

    # Up to 3 solutions stacked vertically: shape (3k, 3)
    if F is None or F.shape[0] < 3:
        return _NAN_MODEL.copy()

    F = np.asarray(F[0:3, :], dtype=np.float64)
    norm = float(np.linalg.norm(F))
    if norm == 0.0 or not np.isfinite(norm):
        return _NAN_MODEL.copy()
    return (F / norm).reshape(-1)


def epipolar_algebraic_error(model: Model, point: DataPoint) -> float:
    """
    |[x', y', 1] F [x, y, 1]^T|
    """
    F = model.reshape(3, 3)
    p = np.array([point[0], point[1], 1.0], dtype=np.float64)
    q = np.array([point[2], point[3], 1.0], dtype=np.float64)
    return float(abs(q @ F @ p))


def residuals_epipolar(model: Model, data: Dataset) -> FloatArray:
    """
    epipolar_algebraic_error for every row of `data` (N,4). Shape (N,).
    """
    F = model.reshape(3, 3)
    ones = np.ones((data.shape[0], 1), dtype=np.float64)
    p = np.hstack([data[:, 0:2], ones])
    q = np.hstack([data[:, 2:4], ones])

    # Row-wise q_i^T F p_i
    return np.abs(np.einsum("ij,jk,ik->i", q, F, p))


def fundamental_matrix_is_finite(model: Model) -> bool:
    return bool(np.isfinite(model).all()) and bool(np.any(model != 0.0))
