"""
Unit tests for benchmark functions and OptimisationProblem
"""

import numpy as np
import pytest

from niche_swarm.entity import FitnessMax, FitnessMin, Particle
from niche_swarm.functions import FUNCTIONS, hef9_g, himmelblau, rastrigin, sphere
from niche_swarm.problem import OptimisationProblem


class TestFunctions:
    """基準函數"""

    def test_sphere(self):
        assert sphere([1.0, 2.0]) == pytest.approx(5.0)

    def test_rastrigin_minimum(self):
        assert rastrigin(np.zeros(5)) == pytest.approx(0.0)

    @pytest.mark.parametrize("minimum", [
        (3.0, 2.0),
        (-2.805118, 3.131312),
        (-3.779310, -3.283186),
        (3.584428, -1.848126),
    ])
    def test_himmelblau_minima(self, minimum):
        """測試 Himmelblau 的四個全域最小值"""
        assert himmelblau(minimum) == pytest.approx(0.0, abs=1e-6)

    def test_himmelblau_rejects_other_dimensions(self):
        with pytest.raises(ValueError):
            himmelblau([0.0, 0.0, 0.0])

    def test_hef9_g(self):
        assert hef9_g(np.zeros(4)) == pytest.approx(3.0)
        assert hef9_g([0.5]) == pytest.approx(1.75)

    def test_registry(self):
        for name, meta in FUNCTIONS.items():
            lower, upper = meta['bounds']
            assert lower < upper, name
            assert callable(meta['f'])


class TestOptimisationProblem:
    """最佳化問題"""

    def test_bounds_broadcast_and_read_only(self):
        problem = OptimisationProblem(sphere, 3, -1.0, 1.0)
        assert problem.lower.shape == (3,)
        with pytest.raises(ValueError):
            problem.lower[0] = 5.0

    def test_invalid_bounds(self):
        with pytest.raises(ValueError):
            OptimisationProblem(sphere, 2, 1.0, -1.0)
        with pytest.raises(ValueError):
            OptimisationProblem(sphere, 0, -1.0, 1.0)

    def test_fitness_class(self):
        assert OptimisationProblem(sphere, 1, -1, 1).fitness_class is FitnessMin
        assert OptimisationProblem(sphere, 1, -1, 1, minimise=False).fitness_class is FitnessMax

    def test_distance_accepts_entities_and_positions(self):
        problem = OptimisationProblem(sphere, 2, -5, 5)
        a = Particle([0.0, 0.0])
        b = Particle([3.0, 4.0])
        assert problem.distance(a, b) == pytest.approx(5.0)
        assert problem.distance([0.0, 0.0], b) == pytest.approx(5.0)

    def test_clamp_and_contains(self):
        problem = OptimisationProblem(sphere, 2, -1, 1)
        assert not problem.contains([2.0, 0.0])
        assert np.array_equal(problem.clamp(np.array([2.0, -3.0])), [1.0, -1.0])

    def test_random_position_within_bounds(self):
        problem = OptimisationProblem(sphere, 2, [-1, 0], [1, 10])
        rng = np.random.default_rng(0)
        for _ in range(20):
            assert problem.contains(problem.random_position(rng))
