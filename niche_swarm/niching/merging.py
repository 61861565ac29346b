"""
Niche 合併與吸收

兩種策略都接收一個 NichingSwarms 快照並回傳新的快照：
- RadiusOverlapMergeStrategy: 重疊的子族群合併為一個
- AbsorptionMergeStrategy: 落在子族群半徑內的主族群粒子被吸收
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence
import logging

from ..algorithm.population import SinglePopulationBasedAlgorithm
from ..pso import ParticleBehavior
from .swarms import NichingSwarms

logger = logging.getLogger(__name__)


def swarm_radius(swarm: SinglePopulationBasedAlgorithm) -> float:
    """子族群半徑：成員位置到領導者最佳位置的最大距離"""
    leader = swarm.best_solution()
    if leader is None:
        return 0.0
    distance = swarm.problem.distance
    return max(distance(leader.best_position, entity.position) for entity in swarm.topology)


def _rewire(entities: Sequence, leader):
    for entity in entities:
        entity.neighbourhood_best = leader


class NicheMergeStrategy(ABC):
    """合併策略基類"""

    def __init__(self):
        self.name = "base_merge"

    @abstractmethod
    def merge(self, swarms: NichingSwarms) -> NichingSwarms:
        pass

    def __call__(self, swarms: NichingSwarms) -> NichingSwarms:
        return self.merge(swarms)


class RadiusOverlapMergeStrategy(NicheMergeStrategy):
    """
    半徑重疊合併

    兩個子族群的領導者距離小於半徑和，或小於 threshold 時合併。
    合併後的子族群保留第一個子族群的設定與位置，成員的鄰域最佳
    全部指向新的領導者。重複合併直到沒有重疊為止。
    """

    def __init__(self, threshold: float = 1e-3):
        super().__init__()
        if threshold < 0:
            raise ValueError(f"threshold 必須 >= 0，得到: {threshold}")
        self.name = "radius_overlap"
        self.threshold = threshold

    def overlapping(self, first: SinglePopulationBasedAlgorithm,
                    second: SinglePopulationBasedAlgorithm) -> bool:
        leader_a = first.best_solution()
        leader_b = second.best_solution()
        if leader_a is None or leader_b is None:
            return False
        d = first.problem.distance(leader_a.best_position, leader_b.best_position)
        return d < swarm_radius(first) + swarm_radius(second) or d < self.threshold

    def merge(self, swarms: NichingSwarms) -> NichingSwarms:
        sub_swarms: List[SinglePopulationBasedAlgorithm] = list(swarms.sub_swarms)
        merged_any = False

        while True:
            pair = self._find_overlap(sub_swarms)
            if pair is None:
                break
            i, j = pair
            first, second = sub_swarms[i], sub_swarms[j]

            merged = first.clone()
            merged.topology = list(first.topology) + list(second.topology)
            leader = merged.best_solution()
            _rewire(merged.topology, leader)

            logger.info(f"🔗 合併 niche #{i + 1} 與 #{j + 1} → {len(merged.topology)} 個粒子")
            sub_swarms[i] = merged
            del sub_swarms[j]
            merged_any = True

        if not merged_any:
            return swarms
        result = swarms.with_sub_swarms(sub_swarms)
        result.validate()
        return result

    def _find_overlap(self, sub_swarms):
        for i in range(len(sub_swarms)):
            for j in range(i + 1, len(sub_swarms)):
                if self.overlapping(sub_swarms[i], sub_swarms[j]):
                    return i, j
        return None


class AbsorptionMergeStrategy(NicheMergeStrategy):
    """
    吸收策略

    主族群中落在某個子族群半徑內的粒子會被移到該子族群（第一個符合者），
    鄰域最佳指向該子族群的領導者，並換上 niche 行為的複本。
    """

    def __init__(self, behavior: Optional[ParticleBehavior] = None):
        super().__init__()
        self.name = "absorption"
        self.behavior = behavior

    def merge(self, swarms: NichingSwarms) -> NichingSwarms:
        if not swarms.sub_swarms or len(swarms.main_swarm.topology) == 0:
            return swarms

        radii = [swarm_radius(s) for s in swarms.sub_swarms]
        leaders = [s.best_solution() for s in swarms.sub_swarms]
        absorbed = [[] for _ in swarms.sub_swarms]
        remaining = []
        distance = swarms.main_swarm.problem.distance

        for entity in swarms.main_swarm.topology:
            for index, (leader, radius) in enumerate(zip(leaders, radii)):
                if leader is not None and distance(entity.position, leader.best_position) <= radius:
                    absorbed[index].append(entity)
                    break
            else:
                remaining.append(entity)

        if not any(absorbed):
            return swarms

        sub_swarms = []
        for sub_swarm, leader, entities in zip(swarms.sub_swarms, leaders, absorbed):
            if not entities:
                sub_swarms.append(sub_swarm)
                continue
            for entity in entities:
                entity.neighbourhood_best = leader
                if self.behavior is not None:
                    entity.behavior = self.behavior.clone()
            grown = sub_swarm.clone()
            grown.topology = list(sub_swarm.topology) + entities
            sub_swarms.append(grown)
            logger.info(f"🧲 niche 吸收 {len(entities)} 個主族群粒子")

        new_main_swarm = swarms.main_swarm.clone()
        new_main_swarm.topology = remaining
        result = NichingSwarms(new_main_swarm, tuple(sub_swarms))
        result.validate()
        return result
