"""
Model families package
"""
from .line import (
    straight_line_through_two_points, distance_of_point_to_straight_line,
    residuals_line, line_is_finite,
)
from .affine import (
    AffineBounds, affine_map_from_three_pairs, affine_match_error, residuals_affine,
    affine_map_is_reasonable, apply_affine,
)
from .fundamental import (
    seven_point_algorithm, epipolar_algebraic_error, residuals_epipolar,
    fundamental_matrix_is_finite,
)
from .line_plugin import LinePlugin
from .affine_plugin import AffinePlugin, ReasonableAffinePlugin
from .fundamental_plugin import FundamentalPlugin
from .cases import MODEL_CASES, get_model_case

__all__ = [
    "straight_line_through_two_points", "distance_of_point_to_straight_line",
    "residuals_line", "line_is_finite",
    "AffineBounds", "affine_map_from_three_pairs", "affine_match_error", "residuals_affine",
    "affine_map_is_reasonable", "apply_affine",
    "seven_point_algorithm", "epipolar_algebraic_error", "residuals_epipolar",
    "fundamental_matrix_is_finite",
    "LinePlugin", "AffinePlugin", "ReasonableAffinePlugin", "FundamentalPlugin",
    "MODEL_CASES", "get_model_case",
]
