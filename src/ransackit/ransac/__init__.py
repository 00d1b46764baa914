# Andy Zhao
"""
RANSAC package

This module provides:
- A reusable generic RANSAC implementation
- Typed array aliases
- Model plugin interface definitions
- Run configuration and result containers
"""

from .types import (
    FloatArray, BoolArray, IndexArray, DataPoint, Dataset, Model, InlierMask,
    ModelPlugin, CallbackPlugin, RunConfig, RansacResult, RansacFailure, RunResult,
    as_dataset,
)

from .errors import (
    RansacError, DegenerateSamplingError, PluginContractError, InvalidConfigError,
)

from .sampler import MAX_SAMPLING_ATTEMPTS, make_rng, sample_indices

from .trial import ransac_trial, residual_trial, plugin_trial

from .core import ransac, run, required_trials

__all__ = [
    "FloatArray", "BoolArray", "IndexArray", "DataPoint", "Dataset", "Model", "InlierMask",
    "ModelPlugin", "CallbackPlugin", "RunConfig", "RansacResult", "RansacFailure", "RunResult",
    "as_dataset",
    "RansacError", "DegenerateSamplingError", "PluginContractError", "InvalidConfigError",
    "MAX_SAMPLING_ATTEMPTS", "make_rng", "sample_indices",
    "ransac_trial", "residual_trial", "plugin_trial",
    "ransac", "run", "required_trials",
]
