"""
PSO 族群
"""

from typing import List, Optional
import logging

import numpy as np

from ..algorithm.iteration import IterationStrategy
from ..algorithm.population import SinglePopulationBasedAlgorithm
from ..algorithm.stopping import StoppingCondition
from ..entity import Particle
from .behavior import ParticleBehavior
from .iteration import SynchronousIterationStrategy

logger = logging.getLogger(__name__)


class PSO(SinglePopulationBasedAlgorithm):
    """
    粒子群族群

    預設使用 SynchronousIterationStrategy；initialise 建立的粒子
    會各自拿到 behavior 的一份複本。

    Args:
        behavior: 指派給新粒子的行為範本
        initial_velocity_fraction: 初始速度範圍佔搜尋域寬度的比例（0 表示靜止）
    """

    def __init__(self,
                 iteration_strategy: Optional[IterationStrategy] = None,
                 problem=None,
                 topology=None,
                 stopping_conditions: Optional[List[StoppingCondition]] = None,
                 behavior: Optional[ParticleBehavior] = None,
                 initial_velocity_fraction: float = 0.0):
        super().__init__(iteration_strategy or SynchronousIterationStrategy(),
                         problem, topology, stopping_conditions)
        self.behavior = behavior or ParticleBehavior()
        self.initial_velocity_fraction = initial_velocity_fraction

    def _create_entity(self, rng: np.random.Generator) -> Particle:
        problem = self.problem
        position = problem.random_position(rng)
        span = problem.upper - problem.lower
        bound = self.initial_velocity_fraction * span
        velocity = rng.uniform(-bound, bound) if self.initial_velocity_fraction > 0 else None
        return Particle(position, velocity, problem.fitness_class, self.behavior.clone())

    def _after_initialise(self):
        topology = self.topology
        for particle in topology:
            particle.neighbourhood_best = particle
        for particle in topology:
            for other in topology.neighbourhood(particle):
                if particle.is_better_than(other.neighbourhood_best):
                    other.neighbourhood_best = particle

    def clone(self) -> 'PSO':
        cloned = super().clone()
        cloned.behavior = self.behavior.clone()
        return cloned
