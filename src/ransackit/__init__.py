"""
ransackit: generic RANSAC robust estimation with pluggable model families.
"""
from .ransac import (
    ransac, run, required_trials, RunConfig, RansacResult, RansacFailure,
    ModelPlugin, CallbackPlugin,
    RansacError, DegenerateSamplingError, PluginContractError, InvalidConfigError,
)

__version__ = "0.1.0"

__all__ = [
    "ransac", "run", "required_trials", "RunConfig", "RansacResult", "RansacFailure",
    "ModelPlugin", "CallbackPlugin",
    "RansacError", "DegenerateSamplingError", "PluginContractError", "InvalidConfigError",
]
