"""
Niching 模組

將一個族群動態分解為多個獨立演化的子族群 (niche)，
追蹤多峰或動態目標函數的不同最佳解。

Components:
- NichingSwarms: 主族群與子族群的不可變快照
- ClosestNeighbourNicheCreationStrategy: 最近鄰 niche 建立
- FitnessDeviationNicheDetection: 適應度標準差偵測
- RadiusOverlapMergeStrategy / AbsorptionMergeStrategy: 合併與吸收
- NichingAlgorithm: 外層迴圈

Usage:
    from niche_swarm.niching import NichingAlgorithm

    algorithm = NichingAlgorithm(main_swarm, stopping_conditions=[MaximumIterations(200)])
    result = algorithm.run()
    for solution in result.solutions:
        print(solution.best_position, solution.best_fitness.values)
"""

from .swarms import NichingSwarms, NichingInvariantError
from .creation import (
    NicheCreationStrategy,
    ClosestNeighbourNicheCreationStrategy,
    default_niche_behavior,
    default_niche_swarm_type,
)
from .detection import NicheDetection, FitnessDeviationNicheDetection
from .merging import (
    NicheMergeStrategy,
    RadiusOverlapMergeStrategy,
    AbsorptionMergeStrategy,
    swarm_radius,
)
from .result import NichingResult
from .engine import NichingAlgorithm

__all__ = [
    'NichingSwarms', 'NichingInvariantError',
    'NicheCreationStrategy', 'ClosestNeighbourNicheCreationStrategy',
    'default_niche_behavior', 'default_niche_swarm_type',
    'NicheDetection', 'FitnessDeviationNicheDetection',
    'NicheMergeStrategy', 'RadiusOverlapMergeStrategy', 'AbsorptionMergeStrategy', 'swarm_radius',
    'NichingResult', 'NichingAlgorithm',
]
