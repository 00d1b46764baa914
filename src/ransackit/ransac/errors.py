# Andy Zhao
"""
Exceptions raised by the RANSAC engine.

A run that simply finds no good model is NOT an error: it returns RansacFailure.
These exceptions mean the run could not be carried out at all.
"""


class RansacError(RuntimeError):
    """Base class for fatal RANSAC errors."""


class DegenerateSamplingError(RansacError):
    """Could not draw `nfit` distinct indices within the retry budget."""


class PluginContractError(RansacError):
    """The model plugin broke its contract (e.g. returned a negative error)."""


class InvalidConfigError(RansacError, ValueError):
    """Malformed run configuration or dataset."""
