"""
Unit tests for stopping conditions
"""

import pytest
import sys
from pathlib import Path
from unittest.mock import MagicMock

# Add project root to path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from niche_swarm.algorithm.stopping import MaximumIterations, StagnationStoppingCondition
from niche_swarm.entity import Entity, FitnessMax


class TestMaximumIterations:
    """Test cases for MaximumIterations"""

    def test_invalid_maximum(self):
        """測試無效的 maximum"""
        with pytest.raises(ValueError, match="maximum must be >= 1"):
            MaximumIterations(0)

    def test_finished_at_maximum(self):
        """測試達到迭代上限時停止"""
        condition = MaximumIterations(3)
        algorithm = MagicMock(iterations=2)
        assert not condition.is_finished(algorithm)

        algorithm.iterations = 3
        assert condition.is_finished(algorithm)

    def test_percentage_complete(self):
        """測試完成比例，並且不超過 1"""
        condition = MaximumIterations(4)
        assert condition.percentage_complete(MagicMock(iterations=1)) == pytest.approx(0.25)
        assert condition.percentage_complete(MagicMock(iterations=10)) == 1.0

    def test_clone_is_independent(self):
        condition = MaximumIterations(10)
        cloned = condition.clone()
        cloned.maximum = 20
        assert condition.maximum == 10


class TestStagnationStoppingCondition:
    """Test cases for StagnationStoppingCondition"""

    def test_initialization(self):
        """測試初始化"""
        sc = StagnationStoppingCondition(patience=5, min_delta=0.01)

        assert sc.patience == 5
        assert sc.min_delta == 0.01
        assert sc.counter == 0
        assert sc.best_fitness is None
        assert sc.should_stop is False

    def test_invalid_patience(self):
        """測試無效的 patience"""
        with pytest.raises(ValueError, match="patience must be >= 1"):
            StagnationStoppingCondition(patience=0)

    def test_invalid_min_delta(self):
        """測試無效的 min_delta"""
        with pytest.raises(ValueError, match="min_delta must be >= 0"):
            StagnationStoppingCondition(min_delta=-1.0)

    def test_basic_stagnation(self):
        """測試基本停滯判斷"""
        sc = StagnationStoppingCondition(patience=3, min_delta=0.0)

        # 前 3 次有進步
        assert not sc.step(1.0)
        assert not sc.step(1.5)
        assert not sc.step(2.0)
        assert sc.counter == 0
        assert sc.best_fitness == 2.0

        # 後 3 次無進步
        assert not sc.step(2.0)
        assert sc.counter == 1
        assert not sc.step(2.0)
        assert sc.counter == 2
        assert sc.step(2.0)
        assert sc.should_stop is True

    def test_stagnation_with_min_delta(self):
        """測試帶閾值的停滯判斷"""
        sc = StagnationStoppingCondition(patience=2, min_delta=0.1)

        assert not sc.step(1.0)
        # 改進 0.05 < 0.1，計數 +1
        assert not sc.step(1.05)
        assert sc.best_fitness == 1.0
        # 改進 0.03 < 0.1，觸發停止
        assert sc.step(1.08)

    def test_reset_on_improvement(self):
        """測試有進步時重置計數器"""
        sc = StagnationStoppingCondition(patience=3)

        sc.step(1.0)
        sc.step(1.0)
        sc.step(1.0)
        assert sc.counter == 2

        sc.step(1.5)
        assert sc.counter == 0
        assert sc.best_fitness == 1.5

    def test_invalid_fitness_is_ignored(self):
        """測試沒有有效 fitness 時不改變狀態"""
        sc = StagnationStoppingCondition(patience=1)
        assert not sc.step(None)
        assert sc.best_fitness is None

    def test_is_finished_uses_weighted_fitness(self):
        """測試 is_finished 以 deap 加權值比較（最大化問題越大越好）"""
        entity = Entity([0.0], FitnessMax)
        entity.fitness.values = (1.0,)
        algorithm = MagicMock()
        algorithm.best_solution.return_value = entity
        sc = StagnationStoppingCondition(patience=2)

        assert not sc.is_finished(algorithm)
        entity.fitness.values = (0.5,)
        assert not sc.is_finished(algorithm)
        assert sc.is_finished(algorithm)

    def test_minimisation_improvement(self):
        """測試最小化問題：fitness 變小視為進步"""
        entity = Entity([0.0])
        entity.fitness.values = (10.0,)
        algorithm = MagicMock()
        algorithm.best_solution.return_value = entity
        sc = StagnationStoppingCondition(patience=1)

        assert not sc.is_finished(algorithm)
        entity.fitness.values = (5.0,)
        assert not sc.is_finished(algorithm)
        assert sc.counter == 0

    def test_reset(self):
        """測試重置"""
        sc = StagnationStoppingCondition(patience=2)
        sc.step(1.0)
        sc.step(1.0)
        sc.step(1.0)
        assert sc.should_stop

        sc.reset()
        status = sc.get_status()
        assert status['counter'] == 0
        assert status['best_fitness'] is None
        assert status['should_stop'] is False

    def test_percentage_complete(self):
        sc = StagnationStoppingCondition(patience=4)
        sc.step(1.0)
        sc.step(1.0)
        assert sc.percentage_complete(None) == pytest.approx(0.25)


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
