import numpy as np
import pytest
from puzzlerank.utils.math_utils import points


@pytest.mark.parametrize('max_score', [6, 7])
def test_points_zero_sum(max_score):
    for a in range(1, max_score + 1):
        for b in range(1, max_score + 1):
            assert points(a, b, max_score) + points(b, a, max_score) == pytest.approx(1.0)
        assert points(a, a, max_score) == 0.5


def test_points_extremes():
    assert points(1, 6, 6) == 1.0
    assert points(6, 1, 6) == 0.0
    assert points(1, 7, 7) == 1.0
    assert points(7, 1, 7) == 0.0
    assert points(3, 5, 6) == pytest.approx(0.7)


def test_points_monotonic_in_difference():
    outcomes = [points(4, b, 6) for b in range(1, 7)]
    assert outcomes == sorted(outcomes)
    assert len(set(outcomes)) == 6


def test_points_broadcasts():
    scores = np.array([2, 4, 6])
    grid = points(scores[:, None], scores[None, :], 6)
    assert grid.shape == (3, 3)
    np.testing.assert_allclose(grid + grid.T, 1.0)
    np.testing.assert_allclose(np.diag(grid), 0.5)
