# Andy Zhao
"""
Adapter: makes the line functions conform to the ModelPlugin Protocol.

This keeps ransac/core.py generic and reusable.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..ransac.types import Dataset, DataPoint, FloatArray, Model
from .line import (
    straight_line_through_two_points, distance_of_point_to_straight_line,
    residuals_line, line_is_finite,
)


@dataclass(frozen=True)
class LinePlugin:
    datadim = 2
    modeldim = 3
    nfit = 2

    def generate(self, sample: Dataset) -> Model:
        return straight_line_through_two_points(sample)

    def evaluate(self, model: Model, point: DataPoint) -> float:
        return distance_of_point_to_straight_line(model, point)

    def residuals(self, model: Model, data: Dataset) -> FloatArray:
        return residuals_line(model, data)

    def accept(self, model: Model) -> bool:
        # Only rejects samples with two coincident points
        return line_is_finite(model)
