# Andy Zhao
"""
Evaluate one candidate model over the whole dataset.

For each point:
    e_i = evaluate(model, data[i])      must be >= 0
    mask[i] = e_i < max_error

Returns the number of inliers. The mask buffer belongs to the caller so it
can be reused from trial to trial.
"""
from __future__ import annotations

import numpy as np

from .errors import PluginContractError
from .types import Dataset, EvaluateFn, FloatArray, InlierMask, Model, ModelPlugin


def ransac_trial(
        out_mask: InlierMask,
        data: Dataset,
        model: Model,
        max_error: float,
        evaluate: EvaluateFn,
) -> int:
    """
    Point-by-point evaluation. Fills out_mask and returns the inlier count.
    """
    count = 0
    for i in range(data.shape[0]):
        e = evaluate(model, data[i])
        # NaN fails this test too
        if not e >= 0:
            raise PluginContractError(f"evaluate returned a negative error ({e}) for point {i}")
        inlier = e < max_error
        out_mask[i] = inlier
        if inlier:
            count += 1
    return count


def residual_trial(
        out_mask: InlierMask,
        residuals: FloatArray,
        max_error: float,
) -> int:
    """
    Same as ransac_trial, but from precomputed per-point errors.
    """
    residuals = np.asarray(residuals, dtype=np.float64)
    if residuals.shape != out_mask.shape:
        raise PluginContractError(
            f"residuals must have shape {out_mask.shape}, got {residuals.shape}"
        )
    # Negative and NaN both fail `>= 0`
    bad = ~(residuals >= 0)
    if bad.any():
        i = int(np.flatnonzero(bad)[0])
        raise PluginContractError(
            f"residuals returned a negative error ({residuals[i]}) for point {i}"
        )
    np.less(residuals, max_error, out=out_mask)
    return int(np.count_nonzero(out_mask))


def plugin_trial(
        out_mask: InlierMask,
        plugin: ModelPlugin,
        data: Dataset,
        model: Model,
        max_error: float,
) -> int:
    """
    Use the plugin's vectorized `residuals` when it has one,
    fall back to per-point `evaluate` otherwise.
    """
    residuals = getattr(plugin, "residuals", None)
    if residuals is not None:
        return residual_trial(out_mask, residuals(model, data), max_error)
    return ransac_trial(out_mask, data, model, max_error, plugin.evaluate)
