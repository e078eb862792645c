"""
Tests for the full distance and feature transform.

Results are checked against the brute-force search in py_edt.core.reference
and against scipy.ndimage.distance_transform_edt.
"""

import numpy as np
import pytest
from scipy import ndimage

from py_edt import (
    DistanceMode, EmptyGridError, FeatureTransform, InvalidGridError,
    brute_force_transform, edt, feature_indices, settings, transform,
)
from py_edt.core.metrics import encode, squared_distance


def random_grid(rng, shape, density):
    """Random boolean grid with at least one foreground voxel."""
    grid = rng.random(shape) < density
    grid[tuple(rng.integers(0, s) for s in shape)] = True
    return grid


def assert_consistent(grid, result):
    """Every stored feature is foreground and sits at the stored distance."""
    features, distances = result
    assert np.all(grid.reshape(-1)[features.reshape(-1) - 1])
    for position in np.ndindex(*grid.shape):
        x = encode(position, grid.shape)
        assert squared_distance(x, int(features[position]), grid.shape) == distances[position]


class TestScenarios:
    """Small hand-checked inputs."""

    def test_one_dimensional(self):
        grid = np.array([False, False, True, False, False])
        features, distances = transform(grid)

        np.testing.assert_array_equal(distances, [4, 1, 0, 1, 4])
        np.testing.assert_array_equal(features, [3, 3, 3, 3, 3])

    def test_single_corner_feature(self):
        grid = np.zeros((3, 3), dtype=bool)
        grid[0, 0] = True
        features, distances = transform(grid)

        i, j = np.indices((3, 3))
        np.testing.assert_array_equal(distances, i ** 2 + j ** 2)
        assert np.all(features == 1)

    def test_single_centre_feature_3d(self):
        grid = np.zeros((5, 5, 5), dtype=bool)
        grid[2, 2, 2] = True
        features, distances = transform(grid)

        i, j, k = np.indices(grid.shape)
        np.testing.assert_array_equal(distances, (i - 2) ** 2 + (j - 2) ** 2 + (k - 2) ** 2)
        assert np.all(features == encode((2, 2, 2), grid.shape))

    def test_all_foreground(self):
        grid = np.ones((3, 4), dtype=bool)
        features, distances = transform(grid)

        assert np.all(distances == 0)
        np.testing.assert_array_equal(features.reshape(-1), np.arange(1, 13))

    def test_two_features_on_a_line(self):
        grid = np.zeros(7, dtype=bool)
        grid[[1, 5]] = True
        features, distances = transform(grid)

        np.testing.assert_array_equal(distances, [1, 0, 1, 4, 1, 0, 1])
        np.testing.assert_array_equal(features, [2, 2, 2, 2, 6, 6, 6])

    def test_singleton_axes(self):
        grid = np.zeros((1, 6, 1), dtype=bool)
        grid[0, 4, 0] = True
        _, distances = transform(grid)

        np.testing.assert_array_equal(distances.reshape(-1), [16, 9, 4, 1, 0, 1])


class TestResultShape:
    """Test the structure of the result."""

    @pytest.mark.parametrize("shape", [(4,), (3, 5), (2, 3, 4), (2, 2, 3, 2)])
    def test_shapes_match_input(self, shape):
        rng = np.random.default_rng(sum(shape))
        grid = random_grid(rng, shape, 0.2)
        result = transform(grid)

        assert isinstance(result, FeatureTransform)
        assert result.features.shape == shape
        assert result.distances.shape == shape
        assert result.features.dtype == np.int64
        assert result.distances.dtype == np.int64

    def test_foreground_is_its_own_feature(self):
        rng = np.random.default_rng(7)
        grid = random_grid(rng, (6, 5, 4), 0.25)
        features, distances = transform(grid)

        for position in zip(*np.nonzero(grid)):
            position = tuple(int(p) for p in position)
            assert features[position] == encode(position, grid.shape)
            assert distances[position] == 0

    def test_accepts_nested_lists(self):
        _, distances = transform([[False, True], [False, False]])

        np.testing.assert_array_equal(distances, [[1, 0], [2, 1]])


class TestAgainstBruteForce:
    """Compare with exhaustive nearest-feature search."""

    @pytest.mark.parametrize("ndim", [1, 2, 3, 4])
    @pytest.mark.parametrize("seed", range(5))
    def test_random_grids(self, ndim, seed):
        rng = np.random.default_rng(1000 * ndim + seed)
        shape = tuple(int(s) for s in rng.integers(1, 7 if ndim < 4 else 5, size=ndim))
        grid = random_grid(rng, shape, rng.uniform(0.02, 0.4))

        result = transform(grid)
        expected = brute_force_transform(grid)

        np.testing.assert_array_equal(result.distances, expected.distances)
        assert_consistent(grid, result)

    @pytest.mark.parametrize("seed", range(50))
    def test_euclidean_distance_up_to_20_cubed(self, seed):
        rng = np.random.default_rng(seed)
        shape = tuple(int(s) for s in rng.integers(2, 21, size=3))
        grid = random_grid(rng, shape, rng.uniform(0.001, 0.05))

        _, distances = transform(grid)
        expected = brute_force_transform(grid, DistanceMode.EUCLIDEAN).distances

        np.testing.assert_allclose(np.sqrt(distances), expected)

    def test_sparse_features_far_apart(self):
        """Features separated by long gaps in every axis."""
        grid = np.zeros((12, 9, 10), dtype=bool)
        grid[0, 8, 0] = True
        grid[11, 0, 9] = True
        grid[6, 4, 2] = True

        result = transform(grid)

        np.testing.assert_array_equal(result.distances, brute_force_transform(grid).distances)
        assert_consistent(grid, result)


class TestAgainstScipy:
    """Compare with scipy's independent implementation."""

    @pytest.mark.parametrize("shape", [(30,), (17, 23), (9, 11, 8)])
    def test_distances_match(self, shape):
        rng = np.random.default_rng(len(shape))
        grid = random_grid(rng, shape, 0.05)

        distances = edt(grid)
        expected = ndimage.distance_transform_edt(~grid)

        np.testing.assert_allclose(distances, expected)

    def test_feature_indices_point_at_nearest(self):
        rng = np.random.default_rng(11)
        grid = random_grid(rng, (10, 12), 0.1)
        features, distances = transform(grid)

        indices = feature_indices(features)
        _, expected = ndimage.distance_transform_edt(~grid, return_indices=True)

        # Ties may pick different features, the distances must agree
        positions = np.indices(grid.shape)
        ours = np.sum((positions - indices) ** 2, axis=0)
        theirs = np.sum((positions - expected) ** 2, axis=0)
        np.testing.assert_array_equal(ours, theirs)
        np.testing.assert_array_equal(ours, distances)


class TestDistanceModes:
    """Test squared and true distance output."""

    def test_default_is_squared(self):
        grid = np.array([True, False, False, False])
        _, distances = transform(grid)

        assert settings.distance_mode == "squared"
        np.testing.assert_array_equal(distances, [0, 1, 4, 9])

    def test_euclidean_mode(self):
        grid = np.array([True, False, False, False])
        _, distances = transform(grid, distance_mode="euclidean")

        assert distances.dtype == np.float64
        np.testing.assert_allclose(distances, [0.0, 1.0, 2.0, 3.0])

    def test_edt_returns_true_distance(self):
        grid = np.zeros((4, 5), dtype=bool)
        grid[0, 0] = True

        np.testing.assert_allclose(edt(grid)[3, 4], 5.0)

    def test_mode_from_settings(self, monkeypatch):
        monkeypatch.setattr(settings, "distance_mode", "euclidean")
        _, distances = transform(np.array([False, True]))

        assert distances.dtype == np.float64

    def test_unknown_mode(self):
        with pytest.raises(ValueError):
            transform(np.array([True, False]), distance_mode="manhattan")


class TestErrors:
    """Test input validation."""

    def test_empty_grid(self):
        with pytest.raises(EmptyGridError):
            transform(np.zeros((4, 4), dtype=bool))

    def test_zero_size_grid(self):
        with pytest.raises(EmptyGridError):
            transform(np.zeros((0, 3), dtype=bool))

    def test_non_boolean_grid(self):
        with pytest.raises(InvalidGridError):
            transform(np.array([[0, 1], [1, 0]]))

    def test_zero_dimensional_grid(self):
        with pytest.raises(InvalidGridError):
            transform(np.array(True))

    def test_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            transform(np.zeros(3, dtype=bool))

    def test_max_voxels(self, monkeypatch):
        monkeypatch.setattr(settings, "max_voxels", 10)

        with pytest.raises(InvalidGridError):
            transform(np.ones((4, 4), dtype=bool))

        _, distances = transform(np.array([True, False, False]))
        np.testing.assert_array_equal(distances, [0, 1, 4])

    def test_feature_indices_rejects_sentinels(self):
        with pytest.raises(ValueError):
            feature_indices(np.array([0, 1, 1]))
