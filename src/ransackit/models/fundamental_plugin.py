# Andy Zhao
"""
Adapter: makes the fundamental matrix functions conform to the ModelPlugin Protocol.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..ransac.types import Dataset, DataPoint, FloatArray, Model
from .fundamental import (
    seven_point_algorithm, epipolar_algebraic_error,
    residuals_epipolar, fundamental_matrix_is_finite,
)


@dataclass(frozen=True)
class FundamentalPlugin:
    datadim = 4
    modeldim = 9
    nfit = 7

    def generate(self, sample: Dataset) -> Model:
        return seven_point_algorithm(sample)

    def evaluate(self, model: Model, point: DataPoint) -> float:
        return epipolar_algebraic_error(model, point)

    def residuals(self, model: Model, data: Dataset) -> FloatArray:
        return residuals_epipolar(model, data)

    def accept(self, model: Model) -> bool:
        # Seven-point solver found no real solution
        return fundamental_matrix_is_finite(model)
