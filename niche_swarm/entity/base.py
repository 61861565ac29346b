"""
Entity 基類

實現帶 ID 的個體類，適應度使用 DEAP 的 Fitness 系統。
Entity 的身分由唯一 ID 決定，而不是由數值相等決定。
"""

import copy
import uuid
from typing import Any, Dict, Optional

import numpy as np
from deap import base


class FitnessMin(base.Fitness):
    """最小化適應度"""
    weights = (-1.0,)


class FitnessMax(base.Fitness):
    """最大化適應度"""
    weights = (1.0,)


class Entity:
    """
    演化實體

    Attributes:
        id: 唯一識別碼（uuid4 字串），clone 時會重新產生
        position: 候選解（numpy array）
        fitness: DEAP Fitness
        metadata: 額外元數據
    """

    def __init__(self, position, fitness_class=FitnessMin):
        # 個體唯一標識
        self.id: str = str(uuid.uuid4())
        self.position: np.ndarray = np.array(position, dtype=float)
        self.fitness: base.Fitness = fitness_class()

        # 統計信息
        self.evaluation_count: int = 0
        self.metadata: Dict[str, Any] = {}

    @property
    def dimension(self) -> int:
        return self.position.size

    @property
    def fitness_value(self) -> Optional[float]:
        """獲取適應度值（便利屬性）"""
        if self.fitness.valid:
            return self.fitness.values[0]
        return None

    @property
    def social_fitness(self) -> base.Fitness:
        """與鄰居比較時使用的適應度"""
        return self.fitness

    @property
    def best_position(self) -> np.ndarray:
        return self.position

    def calculate_fitness(self, problem):
        """使用問題的目標函數評估目前位置"""
        self.fitness.values = (problem.evaluate(self.position),)
        self.evaluation_count += 1

    def is_better_than(self, other: 'Entity') -> bool:
        """比較社會適應度，無效的適應度永遠較差"""
        return self.social_fitness > other.social_fitness

    def clone(self) -> 'Entity':
        """創建實體的深拷貝，並分配新的 ID"""
        cloned = copy.copy(self)
        cloned.id = str(uuid.uuid4())
        cloned.position = self.position.copy()
        cloned.fitness = copy.deepcopy(self.fitness)
        cloned.evaluation_count = 0
        cloned.metadata = self.metadata.copy()
        return cloned

    def __eq__(self, other) -> bool:
        if not isinstance(other, Entity):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        fitness_str = f"{self.fitness_value:.4f}" if self.fitness_value is not None else "N/A"
        return f"{self.__class__.__name__}({self.id[:8]}..., fitness={fitness_str})"
