# Andy Zhao

"""
Shared typed primitives for the RANSAC engine.

Defines:
- Typed NumPy aliases
    - A dataset is an (N, datadim) float array, one data point per row
    - A model is a flat (modeldim,) float vector
- Model plugin protocol for RANSAC
- Run configuration (immutable, validated on construction)
- Structured RANSAC outcomes: success (model + inliers + stats) or failure
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Protocol, TypeAlias, Union

import numpy as np
import numpy.typing as npt

from .errors import InvalidConfigError

# ---------- Numpy typing aliases ----------
# standardize numeric dtypes so bugs are easier to spot and code is consistent.
# - float64 for data and model parameters
# - bool_ for masks

FloatArray: TypeAlias = npt.NDArray[np.float64]
BoolArray: TypeAlias = npt.NDArray[np.bool_]
IndexArray: TypeAlias = npt.NDArray[np.intp]

# One data point: (datadim,). Meaning (coordinates, correspondences...) is up to the plugin.
DataPoint: TypeAlias = FloatArray

# Whole dataset, one data point per row.
Dataset: TypeAlias = FloatArray       # shape: (N, datadim)

# Model parameters, e.g. (a, b, c) for a line.
Model: TypeAlias = FloatArray         # shape: (modeldim,)

# Boolean inlier mask: True as inlier, False as outlier
InlierMask: TypeAlias = BoolArray     # shape: (N,)

GenerateFn: TypeAlias = Callable[[Dataset], Model]
EvaluateFn: TypeAlias = Callable[[Model, DataPoint], float]
AcceptFn: TypeAlias = Callable[[Model], bool]


class ModelPlugin(Protocol):
    """
    Interface that a model family must implement to be usable by the generic RANSAC engine.

    RANSAC steps:
    1) Generate a candidate model from a minimal sample of `nfit` points
    2) (optional) Reject obviously bad models with `accept`
    3) Score every data point with a non-negative error

    Optional capabilities, looked up with getattr by the engine:
    - accept(model) -> bool
        Fast sanity filter. When missing, every generated model is accepted.
    - residuals(model, data) -> (N,) array
        Vectorized `evaluate` over the whole dataset. Same contract per element.
    """

    datadim: int
    modeldim: int
    nfit: int

    def generate(self, sample: Dataset) -> Model:
        """
        Build one hypothesis from exactly `nfit` rows.
        Must always return a model, even for a degenerate sample.
        """
        ...

    def evaluate(self, model: Model, point: DataPoint) -> float:
        """
        Return the error of one data point under `model`.
        Non-negative, larger = worse, no hidden state.
        """
        ...


@dataclass(frozen=True)
class CallbackPlugin:
    """
    Bundle plain functions into a ModelPlugin.

    accept=None means "accept everything".
    """
    datadim: int
    modeldim: int
    nfit: int
    generate: GenerateFn
    evaluate: EvaluateFn
    accept: Optional[AcceptFn] = None


# ---------- Run configuration ----------
@dataclass(frozen=True)
class RunConfig:
    """
    Parameters of one RANSAC run.

    ntrials:
      - Number of models to try. All of them are tried, there is no early exit.

    max_error:
      - Inlier threshold. A point is an inlier iff error < max_error.

    min_inliers:
      - Acceptance floor for the best model.

    nfit:
      - Minimal sample size needed to generate one model.
    """
    ntrials: int
    max_error: float
    min_inliers: int
    nfit: int

    def __post_init__(self) -> None:
        if self.ntrials < 1:
            raise InvalidConfigError("RunConfig.ntrials must be >= 1")
        if not (self.max_error >= 0.0):
            raise InvalidConfigError("RunConfig.max_error must be >= 0")
        if self.min_inliers < 0:
            raise InvalidConfigError("RunConfig.min_inliers must be >= 0")
        if self.nfit < 1:
            raise InvalidConfigError("RunConfig.nfit must be >= 1")


# ---------- RANSAC output containers ----------
# frozen=True means "immutable" after construction
@dataclass(frozen=True)
class RansacResult:
    model: Model                # best model found
    inliers: InlierMask         # boolean mask of inliers under the best model
    num_inliers: int            # count of True values in inliers
    trials: int                 # how many trials were run (always ntrials)
    accepted_trials: int        # how many generated models passed `accept`
    threshold: float            # the inlier threshold max_error used

    @property
    def success(self) -> bool:
        return True


@dataclass(frozen=True)
class RansacFailure:
    """No model reached min_inliers within the trial budget."""
    best_num_inliers: int
    min_inliers: int
    trials: int
    accepted_trials: int

    @property
    def success(self) -> bool:
        return False


RunResult: TypeAlias = Union[RansacResult, RansacFailure]


# ---------- Helper Function ----------
def as_dataset(data: npt.ArrayLike, datadim: int) -> Dataset:
    """
    Convert input rows to a contiguous (N, datadim) float64 array.
    """
    arr = np.ascontiguousarray(data, dtype=np.float64)
    if arr.ndim != 2 or arr.shape[1] != datadim:
        raise InvalidConfigError(f"Expected dataset shape (N, {datadim}) but got {arr.shape}")
    return arr
