# Andy Zhao
"""
Adapter: makes the affine functions conform to the ModelPlugin Protocol.

- AffinePlugin ("aff"): every generated map is accepted
- ReasonableAffinePlugin ("affn"): flips, severe shears and wild scalings are
  rejected before evaluation
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..ransac.types import Dataset, DataPoint, FloatArray, Model
from .affine import (
    AffineBounds, affine_map_from_three_pairs, affine_match_error,
    residuals_affine, affine_map_is_reasonable,
)


@dataclass(frozen=True)
class AffinePlugin:
    datadim = 4
    modeldim = 6
    nfit = 3

    def generate(self, sample: Dataset) -> Model:
        return affine_map_from_three_pairs(sample)

    def evaluate(self, model: Model, point: DataPoint) -> float:
        return affine_match_error(model, point)

    def residuals(self, model: Model, data: Dataset) -> FloatArray:
        return residuals_affine(model, data)


@dataclass(frozen=True)
class ReasonableAffinePlugin(AffinePlugin):
    bounds: AffineBounds = field(default_factory=AffineBounds)

    def accept(self, model: Model) -> bool:
        return affine_map_is_reasonable(model, self.bounds)
