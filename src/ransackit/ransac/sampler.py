# Andy Zhao
"""
Minimal-sample drawing for RANSAC.

Draw `nfit` indices independently and uniformly in [0, n), then check
that they are pairwise distinct (sort, then compare neighbours).
If not, draw again. After MAX_SAMPLING_ATTEMPTS failed draws we give up:
the dataset is too small to provide a minimal sample.
"""
from __future__ import annotations

from typing import Optional, Union

import numpy as np

from .errors import DegenerateSamplingError
from .types import IndexArray

MAX_SAMPLING_ATTEMPTS = 10

RngLike = Union[None, int, np.random.Generator]


def make_rng(rng: RngLike = None) -> np.random.Generator:
    """
    Turn a seed (or an existing Generator) into a Generator.
    None means seed 0, so that runs are reproducible by default.
    """
    if isinstance(rng, np.random.Generator):
        return rng
    return np.random.default_rng(0 if rng is None else int(rng))


def _are_different(idx: IndexArray) -> bool:
    """
    Sort idx in place and check that no two neighbours are equal.
    """
    idx.sort()
    return not bool(np.any(idx[1:] == idx[:-1]))


def sample_indices(
        n: int,
        nfit: int,
        rng: np.random.Generator,
        *,
        out: Optional[IndexArray] = None,
) -> IndexArray:
    """
    Return `nfit` distinct indices in [0, n), sorted ascending.

    out:
      - optional (nfit,) buffer reused across trials.

    Raises DegenerateSamplingError when the retry budget is exhausted
    (this always happens when nfit > n).
    """
    if nfit < 1:
        raise ValueError("nfit must be >= 1")
    if n < 1:
        raise DegenerateSamplingError("could not generate any model: empty dataset")

    idx = np.empty((nfit,), dtype=np.intp) if out is None else out

    for _ in range(MAX_SAMPLING_ATTEMPTS):
        idx[:] = rng.integers(0, n, size=nfit)
        if _are_different(idx):
            return idx

    raise DegenerateSamplingError(
        f"could not generate any model: no {nfit} distinct indices out of {n} "
        f"after {MAX_SAMPLING_ATTEMPTS} attempts"
    )
