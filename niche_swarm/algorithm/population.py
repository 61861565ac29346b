"""
單一族群演算法

一個族群擁有一個拓撲、一個迭代策略、共享的最佳化問題引用以及一組停止條件。
每次迭代由迭代策略就地修改族群。
"""

from typing import Iterable, List, Optional, Union
import logging
import uuid

import numpy as np

from ..entity import Entity, Topology
from .iteration import IterationStrategy, OperatorIterationStrategy
from .operators import GaussianMutationOperator
from .stopping import StoppingCondition

logger = logging.getLogger(__name__)


class SinglePopulationBasedAlgorithm:
    """
    單一族群演算法基類

    Attributes:
        iteration_strategy: 迭代策略
        problem: 最佳化問題（唯讀共享）
        topology: 族群拓撲
        stopping_conditions: 停止條件列表
        iterations: 已完成的迭代次數
    """

    def __init__(self,
                 iteration_strategy: IterationStrategy,
                 problem=None,
                 topology: Optional[Union[Topology, Iterable[Entity]]] = None,
                 stopping_conditions: Optional[List[StoppingCondition]] = None):
        if not isinstance(iteration_strategy, IterationStrategy):
            raise TypeError(f"迭代策略必須繼承自 IterationStrategy: {type(iteration_strategy)}")

        self.algorithm_id = str(uuid.uuid4())[:8]
        self.iteration_strategy = iteration_strategy
        self.problem = problem
        self._topology = Topology()
        if topology is not None:
            self.topology = topology
        self.stopping_conditions: List[StoppingCondition] = []
        for condition in stopping_conditions or []:
            self.add_stopping_condition(condition)
        self.iterations = 0

    @property
    def topology(self) -> Topology:
        return self._topology

    @topology.setter
    def topology(self, value: Union[Topology, Iterable[Entity]]):
        if isinstance(value, Topology):
            self._topology = value
        else:
            self._topology = self._topology.with_entities(value)

    def set_problem(self, problem):
        self.problem = problem

    def add_stopping_condition(self, condition: StoppingCondition):
        if not isinstance(condition, StoppingCondition):
            raise TypeError(f"停止條件必須繼承自 StoppingCondition: {type(condition)}")
        self.stopping_conditions.append(condition)

    def _create_entity(self, rng: np.random.Generator) -> Entity:
        return Entity(self.problem.random_position(rng), self.problem.fitness_class)

    def initialise(self, size: int, seed: Optional[int] = None):
        """
        建立並評估 size 個隨機 entity

        Args:
            size: 族群大小
            seed: 隨機種子
        """
        if self.problem is None:
            raise ValueError("初始化前必須先設置 problem")
        if size < 1:
            raise ValueError(f"size 必須 >= 1，得到: {size}")

        rng = np.random.default_rng(seed)
        if seed is not None:
            self.iteration_strategy.seed_operator_pipeline(seed)
        entities = [self._create_entity(rng) for _ in range(size)]
        for entity in entities:
            entity.calculate_fitness(self.problem)
        self.topology = entities
        self._after_initialise()
        logger.debug(f"族群 {self.algorithm_id} 初始化完成: {size} 個 entity")

    def _after_initialise(self):
        pass

    def perform_iteration(self):
        """執行一次迭代"""
        if self.problem is None:
            raise ValueError(f"族群 {self.algorithm_id} 尚未設置 problem")
        self.iteration_strategy.perform_iteration(self)
        self.iterations += 1

    def is_finished(self) -> bool:
        return any(condition.is_finished(self) for condition in self.stopping_conditions)

    def percentage_complete(self) -> float:
        if not self.stopping_conditions:
            return 0.0
        return max(condition.percentage_complete(self) for condition in self.stopping_conditions)

    def run(self):
        """獨立執行直到任一停止條件成立"""
        if not self.stopping_conditions:
            raise ValueError("獨立執行需要至少一個停止條件")
        while not self.is_finished():
            self.perform_iteration()
        return self.best_solution()

    def best_solution(self) -> Optional[Entity]:
        return self._topology.best_entity()

    def clone(self) -> 'SinglePopulationBasedAlgorithm':
        """
        結構性複製

        迭代策略與停止條件會被深拷貝，problem 共享，
        拓撲為相同鄰域設定的空拓撲，迭代次數保留。
        """
        cloned = self.__class__.__new__(self.__class__)
        cloned.__dict__.update(self.__dict__)
        cloned.algorithm_id = str(uuid.uuid4())[:8]
        cloned.iteration_strategy = self.iteration_strategy.clone()
        cloned.stopping_conditions = [condition.clone() for condition in self.stopping_conditions]
        cloned._topology = self._topology.with_entities(())
        return cloned

    def __len__(self) -> int:
        return len(self._topology)

    def __repr__(self) -> str:
        return (f"{self.__class__.__name__}(id={self.algorithm_id}, "
                f"size={len(self._topology)}, iterations={self.iterations})")


class EC(SinglePopulationBasedAlgorithm):
    """
    演化計算族群

    使用 OperatorIterationStrategy，預設運算子管線為一個高斯變異。
    """

    def __init__(self,
                 iteration_strategy: Optional[IterationStrategy] = None,
                 problem=None,
                 topology=None,
                 stopping_conditions: Optional[List[StoppingCondition]] = None):
        if iteration_strategy is None:
            iteration_strategy = OperatorIterationStrategy(
                operator_pipeline=[GaussianMutationOperator()]
            )
        super().__init__(iteration_strategy, problem, topology, stopping_conditions)
