"""
迭代策略

每種族群類型都有一個迭代策略，負責把族群推進恰好一代。
所有迭代策略都帶有一個邊界約束（預設不約束）與一條有序的運算子管線（預設為空）。
"""

from abc import ABC, abstractmethod
from typing import List, Optional
import copy
import logging

import numpy as np

from .boundary import BoundaryConstraint, UnconstrainedBoundary
from .operators import Operator

logger = logging.getLogger(__name__)


class IterationStrategy(ABC):
    """
    迭代策略基類

    子類實作 _iterate(algorithm)；perform_iteration 會在前後檢查
    拓撲的成員數量與身分沒有被改變。成員變動只屬於 niche 建立/合併層。
    """

    def __init__(self,
                 boundary_constraint: Optional[BoundaryConstraint] = None,
                 operator_pipeline: Optional[List[Operator]] = None):
        self.name = "base_iteration"
        self.boundary_constraint: BoundaryConstraint = boundary_constraint or UnconstrainedBoundary()
        self.operator_pipeline: List[Operator] = list(operator_pipeline or [])

    def set_boundary_constraint(self, boundary_constraint: BoundaryConstraint):
        if not isinstance(boundary_constraint, BoundaryConstraint):
            raise TypeError(f"邊界約束必須繼承自 BoundaryConstraint: {type(boundary_constraint)}")
        self.boundary_constraint = boundary_constraint

    def set_operator_pipeline(self, operator_pipeline: List[Operator]):
        for operator in operator_pipeline:
            if not isinstance(operator, Operator):
                raise TypeError(f"運算子必須繼承自 Operator: {type(operator)}")
        self.operator_pipeline = list(operator_pipeline)

    def apply_operator_pipeline(self, algorithm):
        """依序套用運算子管線"""
        for operator in self.operator_pipeline:
            operator.apply(algorithm)

    def perform_iteration(self, algorithm):
        """
        執行一次迭代

        Args:
            algorithm: 要推進的族群 (SinglePopulationBasedAlgorithm)

        Raises:
            AssertionError: 迭代改變了拓撲的成員
        """
        before = [entity.id for entity in algorithm.topology]
        self._iterate(algorithm)
        after = [entity.id for entity in algorithm.topology]
        if before != after:
            raise AssertionError(
                f"{self.__class__.__name__} 改變了拓撲成員: "
                f"{len(before)} → {len(after)} 個 entity"
            )

    @abstractmethod
    def _iterate(self, algorithm):
        """子類實作的單代更新規則"""
        pass

    def seed_operator_pipeline(self, seed: int):
        """每個運算子拿到由 seed 衍生的獨立子隨機流"""
        children = np.random.SeedSequence(seed).spawn(len(self.operator_pipeline))
        for operator, child in zip(self.operator_pipeline, children):
            operator.reseed(child)

    def clone(self) -> 'IterationStrategy':
        cloned = copy.deepcopy(self)
        cloned.operator_pipeline = [operator.clone() for operator in self.operator_pipeline]
        return cloned


class OperatorIterationStrategy(IterationStrategy):
    """
    運算子迭代策略

    用於非 PSO 族群：套用運算子管線、邊界約束，然後評估所有 entity。
    """

    def __init__(self,
                 boundary_constraint: Optional[BoundaryConstraint] = None,
                 operator_pipeline: Optional[List[Operator]] = None):
        super().__init__(boundary_constraint, operator_pipeline)
        self.name = "operator_iteration"

    def _iterate(self, algorithm):
        problem = algorithm.problem
        self.apply_operator_pipeline(algorithm)
        for entity in algorithm.topology:
            self.boundary_constraint.enforce(entity, problem)
        for entity in algorithm.topology:
            entity.calculate_fitness(problem)
        logger.debug(f"   運算子迭代完成: {len(algorithm.topology)} 個 entity")
