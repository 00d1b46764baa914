# Andy Zhao
"""
Model families selectable by name, as used by the command-line front end.

    line   2D points (x, y)           -> line (a, b, c)
    aff    correspondences (x,y,x',y') -> affine map [a, b, tx, c, d, ty]
    affn   same as aff, unreasonable maps rejected
    fm     correspondences (x,y,x',y') -> fundamental matrix (9 entries)
"""
from __future__ import annotations

from typing import Callable, Dict

from ..ransac.types import ModelPlugin
from .affine_plugin import AffinePlugin, ReasonableAffinePlugin
from .fundamental_plugin import FundamentalPlugin
from .line_plugin import LinePlugin

MODEL_CASES: Dict[str, Callable[[], ModelPlugin]] = {
    "line": LinePlugin,
    "aff": AffinePlugin,
    "affn": ReasonableAffinePlugin,
    "fm": FundamentalPlugin,
}


def get_model_case(name: str) -> ModelPlugin:
    """
    Build the plugin registered under `name`.
    """
    try:
        factory = MODEL_CASES[name]
    except KeyError:
        raise ValueError(f"unrecognized model \"{name}\"") from None
    return factory()
