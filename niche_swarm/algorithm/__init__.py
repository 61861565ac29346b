"""
族群演算法模組

包含：
- 迭代策略 (IterationStrategy) 與運算子管線
- 邊界約束
- 停止條件
- 單一族群演算法
"""

from .boundary import BoundaryConstraint, UnconstrainedBoundary, ClampingBoundaryConstraint
from .operators import Operator, GaussianMutationOperator, BlendCrossoverOperator
from .iteration import IterationStrategy, OperatorIterationStrategy
from .stopping import StoppingCondition, MaximumIterations, StagnationStoppingCondition
from .population import SinglePopulationBasedAlgorithm, EC

__all__ = [
    'BoundaryConstraint', 'UnconstrainedBoundary', 'ClampingBoundaryConstraint',
    'Operator', 'GaussianMutationOperator', 'BlendCrossoverOperator',
    'IterationStrategy', 'OperatorIterationStrategy',
    'StoppingCondition', 'MaximumIterations', 'StagnationStoppingCondition',
    'SinglePopulationBasedAlgorithm', 'EC',
]
