"""Tests for the RANSAC controller."""

import numpy as np
import pytest

from ransackit.models.line import (
    distance_of_point_to_straight_line, straight_line_through_two_points,
)
from ransackit.models.line_plugin import LinePlugin
from ransackit.ransac import (
    CallbackPlugin, DegenerateSamplingError, InvalidConfigError, PluginContractError,
    RansacFailure, RansacResult, RunConfig, ransac, required_trials, run,
)

FOUR_POINTS = np.array([[0.0, 0.0], [1.0, 1.0], [2.0, 2.0], [0.0, 5.0]])


def _line_config(**kwargs):
    params = dict(ntrials=50, max_error=0.5, min_inliers=3, nfit=2)
    params.update(kwargs)
    return RunConfig(**params)


def _synthetic_line(seed=42, n=200, inlier_ratio=0.6, noise=0.01):
    """Points on y = 2x + 1 (bounded noise) mixed with uniform outliers."""
    rng = np.random.default_rng(seed)
    n_in = int(n * inlier_ratio)
    x = rng.uniform(-10, 10, n_in)
    inliers = np.column_stack([x, 2 * x + 1 + rng.uniform(-noise, noise, n_in)])
    outliers = np.column_stack([
        rng.uniform(-10, 10, n - n_in),
        rng.uniform(-25, 25, n - n_in),
    ])
    data = np.vstack([inliers, outliers])
    return data, n_in


class TestLineScenario:
    """Test the four-point line example end to end."""

    def test_finds_diagonal(self):
        """Test that y = x is found with the three collinear points as inliers."""
        result = ransac(LinePlugin(), FOUR_POINTS, _line_config(), rng=0)

        assert isinstance(result, RansacResult)
        assert result.success
        assert result.num_inliers == 3
        assert result.inliers.tolist() == [True, True, True, False]

        a, b, c = result.model
        assert abs(abs(a) - np.sqrt(0.5)) < 1e-9
        assert abs(a + b) < 1e-9
        assert abs(c) < 1e-9

    def test_function_entry_point(self):
        """Test the callable-based run() signature."""
        result = run(
            FOUR_POINTS, 2, 3, 2,
            straight_line_through_two_points, distance_of_point_to_straight_line, None,
            ntrials=50, min_inliers=3, max_error=0.5, rng=0,
        )
        assert result.success
        assert result.inliers.tolist() == [True, True, True, False]
        assert result.trials == 50
        assert result.accepted_trials == 50
        assert result.threshold == 0.5

    def test_floor_too_high_fails(self):
        """Test that a floor above the best count gives a failure value."""
        result = ransac(LinePlugin(), FOUR_POINTS, _line_config(min_inliers=4), rng=0)
        assert isinstance(result, RansacFailure)
        assert not result.success
        assert result.best_num_inliers == 3
        assert result.min_inliers == 4


class TestSyntheticRecovery:
    """Test recovery of a planted line among outliers."""

    def test_recovers_ground_truth(self):
        """Test slope, intercept and inlier count against the planted model."""
        data, n_in = _synthetic_line()
        ntrials = 10 * required_trials(p_all_inliers=0.999, inlier_ratio=0.6, sample_size=2)
        config = RunConfig(ntrials=ntrials, max_error=0.1, min_inliers=100, nfit=2)

        result = ransac(LinePlugin(), data, config, rng=1)

        assert result.success
        a, b, c = result.model
        slope, intercept = -a / b, -c / b
        assert abs(slope - 2.0) < 0.05
        assert abs(intercept - 1.0) < 0.1
        assert n_in - 2 <= result.num_inliers <= n_in + 10
        # The planted inliers are the first n_in rows
        assert result.inliers[:n_in].sum() >= n_in - 2

    def test_parallel_matches_sequential(self):
        """Test that a thread pool gives exactly the sequential result."""
        data, _ = _synthetic_line(seed=3)
        config = RunConfig(ntrials=120, max_error=0.1, min_inliers=10, nfit=2)

        seq = ransac(LinePlugin(), data, config, rng=9)
        par = ransac(LinePlugin(), data, config, rng=9, workers=4)

        assert np.array_equal(seq.model, par.model)
        assert np.array_equal(seq.inliers, par.inliers)
        assert seq.num_inliers == par.num_inliers
        assert seq.accepted_trials == par.accepted_trials

    def test_seed_reproducible(self):
        """Test that the same seed gives the same model."""
        data, _ = _synthetic_line(seed=5)
        config = RunConfig(ntrials=40, max_error=0.1, min_inliers=1, nfit=2)
        r1 = ransac(LinePlugin(), data, config, rng=123)
        r2 = ransac(LinePlugin(), data, config, rng=123)
        assert np.array_equal(r1.model, r2.model)


class TestTieBreak:
    """Test that the earliest of equally good models wins."""

    def test_trial_zero_beats_trial_five(self):
        """Test a tie between trial 0 and trial 5."""
        data = np.arange(10, dtype=np.float64).reshape(-1, 1)
        inlier_sets = {0: set(range(0, 6)), 5: set(range(4, 10))}
        calls = {"n": 0}

        def generate(sample):
            model = np.array([float(calls["n"])])
            calls["n"] += 1
            return model

        def evaluate(model, point):
            members = inlier_sets.get(int(model[0]), {int(model[0])})
            return 0.0 if int(point[0]) in members else 1.0

        plugin = CallbackPlugin(datadim=1, modeldim=1, nfit=1, generate=generate, evaluate=evaluate)
        config = RunConfig(ntrials=8, max_error=0.5, min_inliers=1, nfit=1)
        result = ransac(plugin, data, config, rng=0)

        assert calls["n"] == 8
        assert result.num_inliers == 6
        assert result.model.tolist() == [0.0]
        assert result.inliers.tolist() == [True] * 6 + [False] * 4


class TestAcceptAndFloor:
    """Test the accept predicate and the min_inliers floor."""

    def test_always_reject_fails(self):
        """Test that rejecting every model fails regardless of budget."""
        for ntrials in (1, 10, 200):
            result = run(
                FOUR_POINTS, 2, 3, 2,
                straight_line_through_two_points, distance_of_point_to_straight_line,
                lambda model: False,
                ntrials=ntrials, min_inliers=1, max_error=10.0,
            )
            assert isinstance(result, RansacFailure)
            assert result.best_num_inliers == 0
            assert result.accepted_trials == 0

    def test_rejected_models_are_not_evaluated(self):
        """Test that evaluate is never called for a rejected model."""
        def evaluate(model, point):
            raise AssertionError("evaluate called on a rejected model")

        plugin = CallbackPlugin(
            datadim=2, modeldim=3, nfit=2,
            generate=straight_line_through_two_points, evaluate=evaluate,
            accept=lambda model: False,
        )
        result = ransac(plugin, FOUR_POINTS, _line_config(), rng=0)
        assert not result.success

    def test_zero_floor_always_succeeds(self):
        """Test that min_inliers=0 never fails."""
        rng = np.random.default_rng(0)
        for seed in range(5):
            data = rng.uniform(-1, 1, size=(20, 2))
            config = RunConfig(ntrials=5, max_error=1e-9, min_inliers=0, nfit=2)
            result = ransac(LinePlugin(), data, config, rng=seed)
            assert result.success

    def test_zero_floor_keeps_zero_inlier_model(self):
        """Test that an accepted model with no inliers is returned at min_inliers=0."""
        plugin = CallbackPlugin(
            datadim=2, modeldim=1, nfit=2,
            generate=lambda s: np.array([7.0]), evaluate=lambda m, p: 1.0,
        )
        config = RunConfig(ntrials=3, max_error=0.5, min_inliers=0, nfit=2)
        result = ransac(plugin, FOUR_POINTS, config, rng=0)
        assert result.success
        assert result.model.tolist() == [7.0]
        assert result.num_inliers == 0

    def test_zero_floor_all_rejected(self):
        """Test min_inliers=0 with every model rejected: failure, not an empty success."""
        for workers in (1, 2):
            result = run(
                FOUR_POINTS, 2, 3, 2,
                straight_line_through_two_points, distance_of_point_to_straight_line,
                lambda model: False,
                ntrials=10, min_inliers=0, max_error=0.5, workers=workers,
            )
            assert isinstance(result, RansacFailure)
            assert not result.success
            assert result.best_num_inliers == 0
            assert result.accepted_trials == 0


class TestFatalErrors:
    """Test conditions that abort the run."""

    def test_too_few_points(self):
        """Test that n < nfit raises DegenerateSamplingError."""
        data = np.array([[0.0, 0.0, 1.0, 1.0], [2.0, 2.0, 3.0, 3.0]])
        plugin = CallbackPlugin(
            datadim=4, modeldim=1, nfit=3,
            generate=lambda s: np.zeros(1), evaluate=lambda m, p: 0.0,
        )
        with pytest.raises(DegenerateSamplingError):
            ransac(plugin, data, RunConfig(ntrials=5, max_error=1.0, min_inliers=0, nfit=3))

    def test_too_few_points_parallel(self):
        """Test that the thread pool path raises the same error."""
        plugin = LinePlugin()
        with pytest.raises(DegenerateSamplingError):
            ransac(plugin, FOUR_POINTS[:1], _line_config(), workers=2)

    def test_negative_error(self):
        """Test that a negative error aborts the run."""
        with pytest.raises(PluginContractError):
            run(
                FOUR_POINTS, 2, 3, 2,
                straight_line_through_two_points, lambda m, p: -1.0, None,
                ntrials=5, min_inliers=0, max_error=0.5,
            )

    def test_wrong_model_size(self):
        """Test that generate must return modeldim parameters."""
        with pytest.raises(PluginContractError):
            run(
                FOUR_POINTS, 2, 4, 2,
                straight_line_through_two_points, distance_of_point_to_straight_line, None,
                ntrials=5, min_inliers=0, max_error=0.5,
            )


class TestConfigValidation:
    """Test RunConfig and input checks."""

    @pytest.mark.parametrize("kwargs", [
        dict(ntrials=0),
        dict(ntrials=-3),
        dict(max_error=-0.1),
        dict(max_error=float("nan")),
        dict(min_inliers=-1),
        dict(nfit=0),
    ])
    def test_invalid_config(self, kwargs):
        """Test that malformed parameters are rejected at construction."""
        with pytest.raises(InvalidConfigError):
            _line_config(**kwargs)

    def test_config_error_is_value_error(self):
        """Test that config errors can be caught as ValueError."""
        with pytest.raises(ValueError):
            _line_config(ntrials=0)

    def test_config_is_frozen(self):
        """Test that RunConfig is immutable."""
        config = _line_config()
        with pytest.raises(Exception):
            config.ntrials = 3

    def test_nfit_mismatch(self):
        """Test that config.nfit must match the plugin."""
        with pytest.raises(InvalidConfigError):
            ransac(LinePlugin(), FOUR_POINTS, _line_config(nfit=3))

    def test_wrong_data_shape(self):
        """Test that rows must have datadim entries."""
        with pytest.raises(InvalidConfigError):
            ransac(LinePlugin(), np.zeros((5, 3)), _line_config())

    def test_invalid_workers(self):
        """Test that workers must be positive."""
        with pytest.raises(InvalidConfigError):
            ransac(LinePlugin(), FOUR_POINTS, _line_config(), workers=0)


class TestRequiredTrials:
    """Test the trial budget helper."""

    def test_known_value(self):
        """Test log(1-p)/log(1-w^s) rounded up."""
        k = required_trials(p_all_inliers=0.99, inlier_ratio=0.5, sample_size=2)
        assert k == int(np.ceil(np.log(0.01) / np.log(0.75)))

    def test_all_inliers(self):
        """Test that w=1 needs a single trial."""
        assert required_trials(p_all_inliers=0.999, inlier_ratio=1.0, sample_size=7) == 1

    def test_no_inliers(self):
        """Test that w=0 is rejected: no budget can reach the confidence."""
        with pytest.raises(ValueError):
            required_trials(p_all_inliers=0.99, inlier_ratio=0.0, sample_size=2)

    @pytest.mark.parametrize("p", [0.0, 1.0, 1.5])
    def test_invalid_confidence(self, p):
        """Test that the confidence must lie strictly between 0 and 1."""
        with pytest.raises(ValueError):
            required_trials(p_all_inliers=p, inlier_ratio=0.5, sample_size=2)

    def test_invalid_sample_size(self):
        """Test that sample_size must be positive."""
        with pytest.raises(ValueError):
            required_trials(p_all_inliers=0.99, inlier_ratio=0.5, sample_size=0)
