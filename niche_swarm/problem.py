"""
最佳化問題

封裝目標函數與搜尋域。問題物件在所有（子）族群之間共享且唯讀。
"""

from typing import Callable, Sequence, Union
import logging

import numpy as np

from .entity.base import FitnessMin, FitnessMax

logger = logging.getLogger(__name__)

Bounds = Union[float, Sequence[float], np.ndarray]


class OptimisationProblem:
    """
    連續最佳化問題

    Attributes:
        function: 目標函數 f(x) -> float
        dimension: 維度
        lower / upper: 每一維的下界與上界 (numpy array)
        minimise: True 為最小化問題
    """

    def __init__(self,
                 function: Callable[[np.ndarray], float],
                 dimension: int,
                 lower: Bounds,
                 upper: Bounds,
                 minimise: bool = True,
                 name: str = None):
        if dimension < 1:
            raise ValueError(f"dimension 必須 >= 1，得到: {dimension}")

        lower_v = np.broadcast_to(np.asarray(lower, dtype=float), (dimension,)).copy()
        upper_v = np.broadcast_to(np.asarray(upper, dtype=float), (dimension,)).copy()
        if np.any(lower_v > upper_v):
            raise ValueError(f"下界大於上界: lower={lower_v}, upper={upper_v}")
        lower_v.setflags(write=False)
        upper_v.setflags(write=False)

        self._function = function
        self._dimension = int(dimension)
        self._lower = lower_v
        self._upper = upper_v
        self._minimise = bool(minimise)
        self.name = name or getattr(function, '__name__', 'problem')

    @property
    def function(self) -> Callable[[np.ndarray], float]:
        return self._function

    @property
    def dimension(self) -> int:
        return self._dimension

    @property
    def lower(self) -> np.ndarray:
        return self._lower

    @property
    def upper(self) -> np.ndarray:
        return self._upper

    @property
    def minimise(self) -> bool:
        return self._minimise

    @property
    def fitness_class(self):
        """對應的 deap Fitness 類別"""
        return FitnessMin if self._minimise else FitnessMax

    def evaluate(self, position: np.ndarray) -> float:
        """評估一個位置的目標值"""
        return float(self._function(np.asarray(position, dtype=float)))

    def distance(self, a, b) -> float:
        """兩個 entity（或位置）之間的歐氏距離"""
        pa = getattr(a, 'position', a)
        pb = getattr(b, 'position', b)
        return float(np.linalg.norm(np.asarray(pa, dtype=float) - np.asarray(pb, dtype=float)))

    def contains(self, position: np.ndarray) -> bool:
        position = np.asarray(position, dtype=float)
        return bool(np.all(position >= self._lower) and np.all(position <= self._upper))

    def clamp(self, position: np.ndarray) -> np.ndarray:
        """將位置截斷到搜尋域邊界"""
        return np.clip(position, self._lower, self._upper)

    def random_position(self, rng: np.random.Generator) -> np.ndarray:
        return rng.uniform(self._lower, self._upper)

    def __repr__(self) -> str:
        kind = 'min' if self._minimise else 'max'
        return f"OptimisationProblem({self.name}, dim={self._dimension}, {kind})"
