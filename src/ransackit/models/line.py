# Andy Zhao
"""
Straight line model for 2D points.

A line is stored as 3 parameters (a, b, c):

    a*x + b*y + c = 0,    with a^2 + b^2 = 1

Because (a, b) is a unit normal, the error of a point is simply its
Euclidean distance to the line:

    e = |a*x + b*y + c|

The normalization leaves a sign ambiguity: (a, b, c) and (-a, -b, -c) are the same line.
"""

from __future__ import annotations

import numpy as np

from ..ransac.types import Dataset, DataPoint, FloatArray, Model


def straight_line_through_two_points(sample: Dataset) -> Model:
    """
    Line through the two rows of `sample` (shape (2,2)).

    Normal n = (y1 - y0, x0 - x1), i.e. the direction rotated by 90 degrees.
    Two coincident points give a non-finite line (rejected by `line_is_finite`).
    """
    if sample.shape != (2, 2):
        raise ValueError(f"Expected (2,2) sample, got {sample.shape}")

    p, q = sample[0], sample[1]
    nx = float(q[1] - p[1])
    ny = float(p[0] - q[0])
    norm = float(np.hypot(nx, ny))

    with np.errstate(divide="ignore", invalid="ignore"):
        a = np.float64(nx) / norm
        b = np.float64(ny) / norm
    c = -(a * p[0] + b * p[1])
    return np.array([a, b, c], dtype=np.float64)


def distance_of_point_to_straight_line(line: Model, point: DataPoint) -> float:
    return float(abs(line[0] * point[0] + line[1] * point[1] + line[2]))


def residuals_line(line: Model, data: Dataset) -> FloatArray:
    """
    Distance of every row of `data` (N,2) to the line. Shape (N,).
    """
    return np.abs(data[:, 0] * line[0] + data[:, 1] * line[1] + line[2])


def line_is_finite(line: Model) -> bool:
    return bool(np.isfinite(line).all())
