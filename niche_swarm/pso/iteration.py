"""
同步 PSO 迭代策略
"""

from typing import List, Optional
import logging

from ..algorithm.boundary import BoundaryConstraint
from ..algorithm.iteration import IterationStrategy
from ..algorithm.operators import Operator

logger = logging.getLogger(__name__)


class SynchronousIterationStrategy(IterationStrategy):
    """
    同步迭代策略

    一次迭代的步驟：
    1. 每個粒子更新速度、更新位置，並套用邊界約束
    2. 評估所有粒子的適應度
    3. 調整速度提供者的控制參數，更新個體最佳
    4. 依拓撲鄰域更新每個粒子的鄰域最佳
    5. 套用運算子管線
    """

    def __init__(self,
                 boundary_constraint: Optional[BoundaryConstraint] = None,
                 operator_pipeline: Optional[List[Operator]] = None):
        super().__init__(boundary_constraint, operator_pipeline)
        self.name = "synchronous"

    def _iterate(self, algorithm):
        topology = algorithm.topology
        problem = algorithm.problem

        for particle in topology:
            particle.update_velocity(algorithm)
            particle.update_position(algorithm)
            self.boundary_constraint.enforce(particle, problem)

        for particle in topology:
            particle.calculate_fitness(problem)

        improved = 0
        for particle in topology:
            particle.update_control_parameters(algorithm)
            if particle.update_personal_best():
                improved += 1

        # 已移出拓撲的鄰域最佳不再參與比較
        for particle in topology:
            if particle.neighbourhood_best is not None and particle.neighbourhood_best not in topology:
                particle.neighbourhood_best = particle

        for particle in topology:
            for other in topology.neighbourhood(particle):
                if other.neighbourhood_best is None or particle.is_better_than(other.neighbourhood_best):
                    other.neighbourhood_best = particle

        self.apply_operator_pipeline(algorithm)
        logger.debug(f"   同步迭代完成: {len(topology)} 個粒子, {improved} 個改進個體最佳")
