# Andy Zhao
"""
Generic RANSAC loop (model-agnostic).

RANSAC overview:
- Randomly sample a *minimal* subset of `nfit` data points
- Generate a candidate model from that subset
- (optional) Reject the candidate early with the plugin's `accept`
- Score all data points by computing their errors
- Mark inliers where error < max_error
- Keep the model with the most inliers

Every run tries exactly `ntrials` models: there is no adaptive stopping,
so the cost of a run is fixed and a seeded run is reproducible.

Tie-break: a candidate replaces the best model only if it has strictly
more inliers, so among equally good models the one found first wins.

Uses the ModelPlugin Protocol from types.py:
    RANSAC works with lines, affine maps, fundamental matrices...
"""
from __future__ import annotations

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

import numpy as np
import numpy.typing as npt

from ..config import RANSAC_DEBUG
from .errors import InvalidConfigError, PluginContractError
from .sampler import RngLike, make_rng, sample_indices
from .trial import plugin_trial
from .types import (
    AcceptFn, CallbackPlugin, Dataset, EvaluateFn, GenerateFn, InlierMask, Model,
    ModelPlugin, RansacFailure, RansacResult, RunConfig, RunResult, as_dataset,
)

logger = logging.getLogger(__name__)


def required_trials(
        *,
        p_all_inliers: float,
        inlier_ratio: float,
        sample_size: int,
) -> int:
    """
    Smallest k such that k minimal samples of size s contain at least one
    all-inlier sample with probability >= p, for an inlier ratio w:

       1 - (1 - w^s)^k >= p    =>    k = ceil(log(1 - p) / log(1 - w^s))

    Used to pick `ntrials` before a run; the engine itself never stops early.
    """
    if sample_size < 1:
        raise ValueError("sample_size must be >= 1")
    if not (0.0 < p_all_inliers < 1.0):
        raise ValueError("p_all_inliers must be in (0, 1)")
    if not (0.0 < inlier_ratio <= 1.0):
        raise ValueError("inlier_ratio must be in (0, 1]")

    w_to_s = inlier_ratio ** sample_size
    if w_to_s >= 1.0:
        return 1
    if w_to_s == 0.0:
        raise ValueError("inlier_ratio ** sample_size underflows to 0")
    return max(1, math.ceil(math.log(1.0 - p_all_inliers) / math.log1p(-w_to_s)))


def _generate(plugin: ModelPlugin, sample: Dataset) -> Model:
    """
    Call plugin.generate and check the model has `modeldim` parameters.
    """
    model = np.asarray(plugin.generate(sample), dtype=np.float64).reshape(-1)
    if model.shape[0] != plugin.modeldim:
        raise PluginContractError(
            f"generate returned {model.shape[0]} parameters, expected modeldim={plugin.modeldim}"
        )
    return model


def _check_inputs(plugin: ModelPlugin, data: npt.ArrayLike, config: RunConfig) -> Dataset:
    if plugin.nfit != config.nfit:
        raise InvalidConfigError(
            f"RunConfig.nfit={config.nfit} does not match plugin nfit={plugin.nfit}"
        )
    if plugin.datadim < 1 or plugin.modeldim < 1:
        raise InvalidConfigError("datadim and modeldim must be >= 1")
    return as_dataset(data, plugin.datadim)


def ransac(
        plugin: ModelPlugin,
        data: npt.ArrayLike,
        config: RunConfig,
        *,
        rng: RngLike = None,
        workers: int = 1,
) -> RunResult:
    """
    Run RANSAC to fit a model to `data`.

    Inputs:
    - plugin: provides generate, evaluate and optionally accept / residuals
    - data: (N, datadim) data points
    - config: ntrials, max_error, min_inliers, nfit
    - rng: seed or numpy Generator for reproducible sampling
    - workers: number of threads evaluating trials (1 = run in this thread)

    Returns:
    - RansacResult with best model + inlier mask, or RansacFailure if the best
      model has fewer than min_inliers inliers.

    Raises:
    - DegenerateSamplingError if a minimal sample cannot be drawn
    - PluginContractError if the plugin returns a negative error
    """
    # ---------- Input validation ----------
    dataset = _check_inputs(plugin, data, config)
    if workers < 1:
        raise InvalidConfigError("workers must be >= 1")

    gen = make_rng(rng)
    n = dataset.shape[0]

    logger.debug(
        "RANSAC start: n=%d nfit=%d ntrials=%d max_error=%g min_inliers=%d workers=%d",
        n, config.nfit, config.ntrials, config.max_error, config.min_inliers, workers,
    )

    if workers == 1:
        best_model, best_mask, best_num_inliers, accepted = _run_sequential(plugin, dataset, config, gen)
    else:
        best_model, best_mask, best_num_inliers, accepted = _run_parallel(
            plugin, dataset, config, gen, workers
        )

    # ---------- Final acceptance threshold ----------
    # Every model rejected by `accept` is a failure even with min_inliers=0
    if best_model is None or best_num_inliers < config.min_inliers:
        logger.debug(
            "RANSAC found no model: best=%d < min_inliers=%d (accepted %d/%d trials)",
            best_num_inliers, config.min_inliers, accepted, config.ntrials,
        )
        return RansacFailure(
            best_num_inliers=best_num_inliers,
            min_inliers=config.min_inliers,
            trials=config.ntrials,
            accepted_trials=accepted,
        )

    logger.debug("RANSAC done: %d/%d inliers", best_num_inliers, n)
    return RansacResult(
        model=best_model,
        inliers=best_mask,
        num_inliers=best_num_inliers,
        trials=config.ntrials,
        accepted_trials=accepted,
        threshold=float(config.max_error),
    )


def _run_sequential(
        plugin: ModelPlugin,
        dataset: Dataset,
        config: RunConfig,
        gen: np.random.Generator,
) -> tuple[Optional[Model], InlierMask, int, int]:
    n = dataset.shape[0]
    accept: Optional[AcceptFn] = getattr(plugin, "accept", None)

    # Track the best hypothesis
    best_model: Optional[Model] = None
    best_num_inliers = 0

    # Buffers are allocated once; the two masks are swapped instead of copied
    best_mask: InlierMask = np.zeros((n,), dtype=bool)
    tmp_mask: InlierMask = np.zeros((n,), dtype=bool)
    idx = np.empty((config.nfit,), dtype=np.intp)
    accepted = 0

    # ---------- Main RANSAC Loop ----------
    for i in range(config.ntrials):
        sample_indices(n, config.nfit, gen, out=idx)

        model = _generate(plugin, dataset[idx])
        if accept is not None and not accept(model):
            continue
        accepted += 1

        num_inliers = plugin_trial(tmp_mask, plugin, dataset, model, config.max_error)

        # Strictly more inliers: earlier trial wins ties.
        # The first accepted model is kept even with zero inliers (min_inliers=0)
        if best_model is None or num_inliers > best_num_inliers:
            best_model = model.copy()
            best_num_inliers = num_inliers
            best_mask, tmp_mask = tmp_mask, best_mask
            if RANSAC_DEBUG:
                logger.debug("better model at trial %d: inliers=%d/%d", i, num_inliers, n)

    return best_model, best_mask, best_num_inliers, accepted


def _run_parallel(
        plugin: ModelPlugin,
        dataset: Dataset,
        config: RunConfig,
        gen: np.random.Generator,
        workers: int,
) -> tuple[Optional[Model], InlierMask, int, int]:
    """
    Same result as _run_sequential, trials spread over a thread pool.

    All minimal samples are drawn up front, in trial order, from the single
    generator, then outcomes are reduced in trial order. The winner therefore
    does not depend on scheduling.
    """
    n = dataset.shape[0]
    accept: Optional[AcceptFn] = getattr(plugin, "accept", None)

    samples = np.empty((config.ntrials, config.nfit), dtype=np.intp)
    for i in range(config.ntrials):
        sample_indices(n, config.nfit, gen, out=samples[i])

    def _one_trial(i: int) -> Optional[tuple[Model, int]]:
        model = _generate(plugin, dataset[samples[i]])
        if accept is not None and not accept(model):
            return None
        mask = np.empty((n,), dtype=bool)
        return model, plugin_trial(mask, plugin, dataset, model, config.max_error)

    best_model: Optional[Model] = None
    best_num_inliers = 0
    accepted = 0

    with ThreadPoolExecutor(max_workers=workers) as pool:
        # map() yields in submission order
        for i, outcome in enumerate(pool.map(_one_trial, range(config.ntrials))):
            if outcome is None:
                continue
            accepted += 1
            model, num_inliers = outcome
            if best_model is None or num_inliers > best_num_inliers:
                best_model = model.copy()
                best_num_inliers = num_inliers
                if RANSAC_DEBUG:
                    logger.debug("better model at trial %d: inliers=%d/%d", i, num_inliers, n)

    # Only the winner's mask is kept; evaluate is pure so recomputing it is exact
    best_mask: InlierMask = np.zeros((n,), dtype=bool)
    if best_model is not None:
        plugin_trial(best_mask, plugin, dataset, best_model, config.max_error)

    return best_model, best_mask, best_num_inliers, accepted


def run(
        dataset: npt.ArrayLike,
        datadim: int,
        modeldim: int,
        nfit: int,
        generate: GenerateFn,
        evaluate: EvaluateFn,
        accept: Optional[AcceptFn],
        ntrials: int,
        min_inliers: int,
        max_error: float,
        *,
        rng: RngLike = None,
        workers: int = 1,
) -> RunResult:
    """
    Function-style entry point: plain callables instead of a plugin object.
    """
    plugin = CallbackPlugin(
        datadim=datadim,
        modeldim=modeldim,
        nfit=nfit,
        generate=generate,
        evaluate=evaluate,
        accept=accept,
    )
    config = RunConfig(
        ntrials=ntrials,
        max_error=max_error,
        min_inliers=min_inliers,
        nfit=nfit,
    )
    return ransac(plugin, dataset, config, rng=rng, workers=workers)
