"""
運算子模組

運算子在每次迭代中依序套用到族群上（operator pipeline），
只能就地修改 entity 的狀態，不能改變族群成員。

deap 的運算子使用 random 模組；每個運算子擁有自己的 numpy Generator，
每次套用前以它產生的種子重設 random，使相同種子的執行可以重現。
"""

from abc import ABC, abstractmethod
from typing import Optional
import copy
import logging
import random

import numpy as np
from deap import tools

logger = logging.getLogger(__name__)


class Operator(ABC):
    """運算子基類"""

    def __init__(self, seed: Optional[int] = None):
        self.name = "base_operator"
        self.rng = np.random.default_rng(seed)

    def reseed(self, seed):
        """重設隨機流（seed 可以是整數或 np.random.SeedSequence）"""
        self.rng = np.random.default_rng(seed)

    def _seed_deap(self):
        random.seed(int(self.rng.integers(2 ** 32)))

    @abstractmethod
    def apply(self, algorithm):
        """
        對族群套用運算子

        Args:
            algorithm: SinglePopulationBasedAlgorithm
        """
        pass

    def clone(self) -> 'Operator':
        """深拷貝，複本使用衍生的子隨機流"""
        cloned = copy.deepcopy(self)
        cloned.rng = self.rng.spawn(1)[0]
        return cloned


class GaussianMutationOperator(Operator):
    """
    高斯變異運算子

    使用 deap.tools.mutGaussian 就地擾動每個 entity 的位置。
    """

    def __init__(self, mu: float = 0.0, sigma: float = 0.1, indpb: float = 0.1,
                 seed: Optional[int] = None):
        super().__init__(seed)
        if sigma < 0:
            raise ValueError(f"sigma 必須 >= 0，得到: {sigma}")
        if not 0 <= indpb <= 1:
            raise ValueError(f"indpb 必須在 [0, 1] 範圍內，得到: {indpb}")
        self.name = "gaussian_mutation"
        self.mu = mu
        self.sigma = sigma
        self.indpb = indpb

    def apply(self, algorithm):
        self._seed_deap()
        for entity in algorithm.topology:
            tools.mutGaussian(entity.position, self.mu, self.sigma, self.indpb)
        logger.debug(f"   高斯變異: {len(algorithm.topology)} 個 entity")


class BlendCrossoverOperator(Operator):
    """
    混合交配運算子

    依拓撲順序兩兩配對，使用 deap.tools.cxBlend 就地混合位置。
    奇數個 entity 時最後一個不參與。
    """

    def __init__(self, alpha: float = 0.5, seed: Optional[int] = None):
        super().__init__(seed)
        self.name = "blend_crossover"
        self.alpha = alpha

    def apply(self, algorithm):
        self._seed_deap()
        entities = list(algorithm.topology)
        pairs = 0
        for first, second in zip(entities[::2], entities[1::2]):
            tools.cxBlend(first.position, second.position, self.alpha)
            pairs += 1
        logger.debug(f"   混合交配: {pairs} 對")
