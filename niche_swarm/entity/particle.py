"""
粒子類

在 Entity 之上加入速度、個體最佳 (personal best)、鄰域最佳 (neighbourhood best)
以及行為 (ParticleBehavior)。
"""

import copy
from typing import Optional

import numpy as np
from deap import base

from .base import Entity, FitnessMin


class Particle(Entity):
    """
    PSO 粒子

    Attributes:
        velocity: 速度向量
        best_position: 個體最佳位置
        best_fitness: 個體最佳適應度
        neighbourhood_best: 鄰域最佳粒子的引用（可以是自己）
        behavior: 速度與位置更新策略 (ParticleBehavior)
    """

    def __init__(self, position, velocity=None, fitness_class=FitnessMin, behavior=None):
        super().__init__(position, fitness_class)
        if velocity is None:
            velocity = np.zeros_like(self.position)
        self.velocity: np.ndarray = np.array(velocity, dtype=float)
        if self.velocity.shape != self.position.shape:
            raise ValueError(
                f"velocity 和 position 維度不一致: {self.velocity.shape} vs {self.position.shape}"
            )
        self._best_position: np.ndarray = self.position.copy()
        self.best_fitness: base.Fitness = fitness_class()
        self.neighbourhood_best: Optional['Particle'] = None
        self.behavior = behavior

    @property
    def best_position(self) -> np.ndarray:
        return self._best_position

    @best_position.setter
    def best_position(self, value):
        self._best_position = np.array(value, dtype=float)

    @property
    def social_fitness(self) -> base.Fitness:
        return self.best_fitness

    def calculate_fitness(self, problem):
        super().calculate_fitness(problem)
        # 第一次評估時個體最佳即為目前位置
        if not self.best_fitness.valid:
            self.update_personal_best()

    def update_personal_best(self) -> bool:
        """目前適應度較佳時更新個體最佳，回傳是否有更新"""
        if self.fitness.valid and self.fitness > self.best_fitness:
            self._best_position = self.position.copy()
            self.best_fitness = copy.deepcopy(self.fitness)
            return True
        return False

    def update_velocity(self, algorithm=None):
        self._require_behavior()
        self.velocity = np.asarray(
            self.behavior.velocity_provider.get(self, algorithm), dtype=float
        )

    def update_position(self, algorithm=None):
        self._require_behavior()
        self.position = np.asarray(
            self.behavior.position_provider.get(self, algorithm), dtype=float
        )

    def update_control_parameters(self, algorithm=None):
        self._require_behavior()
        self.behavior.velocity_provider.update_control_parameters(self, algorithm)

    def _require_behavior(self):
        if self.behavior is None:
            raise ValueError(f"粒子 {self.id[:8]} 尚未設置 behavior")

    def clone(self) -> 'Particle':
        """
        深拷貝粒子

        狀態與行為都會被複製並分配新 ID；鄰域最佳保留原本的引用，
        若原本指向自己則複本也指向自己。
        """
        cloned = super().clone()
        cloned.velocity = self.velocity.copy()
        cloned._best_position = self._best_position.copy()
        cloned.best_fitness = copy.deepcopy(self.best_fitness)
        cloned.behavior = self.behavior.clone() if self.behavior is not None else None
        if self.neighbourhood_best is self:
            cloned.neighbourhood_best = cloned
        return cloned
