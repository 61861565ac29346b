"""
停止條件

由外層迴圈在迭代之間查詢，永遠不在迭代中途查詢。
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
import copy


class StoppingCondition(ABC):
    """停止條件基類"""

    @abstractmethod
    def is_finished(self, algorithm) -> bool:
        pass

    def percentage_complete(self, algorithm) -> float:
        """完成比例 [0, 1]，無法估計時回傳 0"""
        return 0.0

    def clone(self) -> 'StoppingCondition':
        return copy.deepcopy(self)

    def reset(self):
        pass


class MaximumIterations(StoppingCondition):
    """達到最大迭代次數時停止"""

    def __init__(self, maximum: int = 500):
        if maximum < 1:
            raise ValueError(f"maximum must be >= 1, got {maximum}")
        self.maximum = maximum

    def is_finished(self, algorithm) -> bool:
        return algorithm.iterations >= self.maximum

    def percentage_complete(self, algorithm) -> float:
        return min(1.0, algorithm.iterations / self.maximum)

    def __repr__(self) -> str:
        return f"MaximumIterations({self.maximum})"


class StagnationStoppingCondition(StoppingCondition):
    """
    停滯停止條件

    當連續 patience 次查詢的最佳 fitness 沒有顯著改進時停止。
    每次呼叫 is_finished 視為一個 step。

    Example:
        >>> condition = StagnationStoppingCondition(patience=10, min_delta=1e-6)
        >>> while not condition.is_finished(algorithm):
        ...     algorithm.perform_iteration()
    """

    def __init__(self, patience: int = 10, min_delta: float = 0.0):
        """
        Args:
            patience: 連續無進步的次數。達到此數量時停止。
            min_delta: 最小改進閾值。只有當改進大於此值時才被視為有進步。

        Raises:
            ValueError: 如果 patience < 1 或 min_delta < 0
        """
        if patience < 1:
            raise ValueError(f"patience must be >= 1, got {patience}")
        if min_delta < 0:
            raise ValueError(f"min_delta must be >= 0, got {min_delta}")

        self.patience = patience
        self.min_delta = min_delta

        # 內部狀態
        self.counter = 0
        self.best_fitness = None  # 歷史最佳 deap Fitness 的加權值
        self.should_stop = False

    def step(self, weighted_fitness: Optional[float]) -> bool:
        """
        以加權後的 fitness（越大越好）更新狀態

        Returns:
            bool: True 表示應該停止
        """
        if weighted_fitness is None:
            return self.should_stop

        if self.best_fitness is None:
            self.best_fitness = weighted_fitness
            return False

        improvement = weighted_fitness - self.best_fitness
        if improvement > self.min_delta:
            self.best_fitness = weighted_fitness
            self.counter = 0
        else:
            self.counter += 1

        if self.counter >= self.patience:
            self.should_stop = True
        return self.should_stop

    def is_finished(self, algorithm) -> bool:
        best = algorithm.best_solution()
        if best is None or not best.social_fitness.valid:
            return self.step(None)
        return self.step(best.social_fitness.wvalues[0])

    def percentage_complete(self, algorithm) -> float:
        return min(1.0, self.counter / self.patience)

    def get_status(self) -> Dict[str, Any]:
        return {
            'counter': self.counter,
            'best_fitness': self.best_fitness,
            'should_stop': self.should_stop,
            'patience': self.patience,
            'min_delta': self.min_delta,
        }

    def reset(self):
        """重置停滯狀態"""
        self.counter = 0
        self.best_fitness = None
        self.should_stop = False

    def __repr__(self) -> str:
        return (f"StagnationStoppingCondition(patience={self.patience}, "
                f"min_delta={self.min_delta}, counter={self.counter})")
