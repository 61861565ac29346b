"""
NichingSwarms 快照

不可變的值：一個主族群 (main swarm) 與一組有序的子族群 (niche)。
每次 niche 建立或合併都產生新的快照，舊的快照直接丟棄，不被修改。
"""

from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Tuple

from ..algorithm.population import SinglePopulationBasedAlgorithm
from ..entity import Entity


class NichingInvariantError(AssertionError):
    """族群狀態損壞：entity 重複出現在多個族群，或粒子缺少鄰域最佳"""


@dataclass(frozen=True)
class NichingSwarms:
    """
    主族群與子族群的快照

    Attributes:
        main_swarm: 主族群
        sub_swarms: 子族群（有序 tuple）
    """

    main_swarm: SinglePopulationBasedAlgorithm
    sub_swarms: Tuple[SinglePopulationBasedAlgorithm, ...] = field(default_factory=tuple)

    def __post_init__(self):
        # 確保子族群容器不與呼叫端共享
        object.__setattr__(self, 'sub_swarms', tuple(self.sub_swarms))

    @classmethod
    def of(cls,
           main_swarm: SinglePopulationBasedAlgorithm,
           sub_swarms: Iterable[SinglePopulationBasedAlgorithm] = ()) -> 'NichingSwarms':
        return cls(main_swarm, tuple(sub_swarms))

    def with_main_swarm(self, main_swarm: SinglePopulationBasedAlgorithm) -> 'NichingSwarms':
        return NichingSwarms(main_swarm, self.sub_swarms)

    def with_sub_swarms(self, sub_swarms: Iterable[SinglePopulationBasedAlgorithm]) -> 'NichingSwarms':
        return NichingSwarms(self.main_swarm, tuple(sub_swarms))

    def append_sub_swarm(self, sub_swarm: SinglePopulationBasedAlgorithm) -> 'NichingSwarms':
        return NichingSwarms(self.main_swarm, self.sub_swarms + (sub_swarm,))

    def populations(self) -> List[SinglePopulationBasedAlgorithm]:
        """主族群在前，接著依序為所有子族群"""
        return [self.main_swarm, *self.sub_swarms]

    def entities(self) -> Iterator[Entity]:
        for population in self.populations():
            yield from population.topology

    def entity_ids(self) -> List[str]:
        return [entity.id for entity in self.entities()]

    def size(self) -> int:
        return sum(len(population.topology) for population in self.populations())

    def shape(self) -> str:
        """簡短描述，用於日誌與錯誤訊息"""
        sub_sizes = [len(s.topology) for s in self.sub_swarms]
        return f"main={len(self.main_swarm.topology)}, subs={sub_sizes}"

    def validate(self):
        """
        檢查快照不變量

        Raises:
            NichingInvariantError: entity 重複出現，或 niche 中的粒子沒有鄰域最佳
        """
        seen = {}
        for index, population in enumerate(self.populations()):
            for entity in population.topology:
                if entity.id in seen:
                    raise NichingInvariantError(
                        f"entity {entity.id} 同時出現在族群 #{seen[entity.id]} 與 #{index} "
                        f"({self.shape()})"
                    )
                seen[entity.id] = index

        for index, sub_swarm in enumerate(self.sub_swarms, start=1):
            for entity in sub_swarm.topology:
                if hasattr(entity, 'neighbourhood_best') and entity.neighbourhood_best is None:
                    raise NichingInvariantError(
                        f"子族群 #{index} 中的粒子 {entity.id} 沒有鄰域最佳 ({self.shape()})"
                    )

    def __repr__(self) -> str:
        return f"NichingSwarms({self.shape()})"
