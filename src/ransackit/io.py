# Andy Zhao
"""
Plain-text dataset I/O for the command-line front end.

Input is any whitespace-separated list of floats; line breaks carry no
meaning. The flat list is cut into rows of `datadim` numbers.
"""
from __future__ import annotations

from typing import TextIO

import numpy as np

from .ransac.types import Dataset, FloatArray, InlierMask


def read_ascii_floats(stream: TextIO) -> FloatArray:
    """
    Read every whitespace-separated number from `stream` into a flat float64 array.
    Raises ValueError on a token that is not a number.
    """
    tokens = stream.read().split()
    try:
        return np.array([float(t) for t in tokens], dtype=np.float64)
    except ValueError as e:
        raise ValueError(f"could not parse input as numbers: {e}") from None


def reshape_rows(flat: FloatArray, datadim: int) -> Dataset:
    """
    Reshape a flat array into (N, datadim). Trailing numbers that do not
    fill a whole row are dropped.
    """
    if datadim < 1:
        raise ValueError("datadim must be >= 1")
    n = flat.shape[0] // datadim
    return flat[: n * datadim].reshape(n, datadim)


def write_inliers(stream: TextIO, data: Dataset, mask: InlierMask) -> int:
    """
    Write the rows selected by `mask`, one per line, %g-formatted.
    Returns the number of rows written.
    """
    rows = data[mask]
    for row in rows:
        stream.write(" ".join(f"{v:g}" for v in row) + "\n")
    return int(rows.shape[0])
