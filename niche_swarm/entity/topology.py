"""
拓撲結構

Topology 是不可變的有序 entity 序列，不允許重複 ID。
順序對 ring (lbest) 鄰域有意義，對 gbest 則無關。
"""

from typing import Callable, Iterable, Iterator, List, Optional

from .base import Entity


class Topology:
    """
    族群拓撲

    Args:
        entities: 有序的 entity 序列
        neighbourhood: 'gbest'（全連接）或 'lbest'（環狀）
        ring_k: lbest 的鄰域大小（偶數，左右各 k/2 個）
    """

    def __init__(self,
                 entities: Iterable[Entity] = (),
                 neighbourhood: str = 'gbest',
                 ring_k: int = 2):
        entities = tuple(entities)
        ids = [entity.id for entity in entities]
        if len(ids) != len(set(ids)):
            duplicated = sorted({i for i in ids if ids.count(i) > 1})
            raise ValueError(f"拓撲中有重複的 entity: {[d[:8] for d in duplicated]}")

        neighbourhood = neighbourhood.lower()
        if neighbourhood not in ('gbest', 'lbest'):
            raise ValueError(f"未知的鄰域類型: {neighbourhood}")
        if neighbourhood == 'lbest':
            if ring_k % 2 != 0:
                raise ValueError("ring_k 必須是偶數（左右各 k/2 個鄰居）")
            if ring_k < 2:
                raise ValueError("ring_k 必須 >= 2")

        self._entities = entities
        self._ids = frozenset(ids)
        self.neighbourhood_type = neighbourhood
        self.ring_k = ring_k

    def with_entities(self, entities: Iterable[Entity]) -> 'Topology':
        """以相同鄰域設定建立新的拓撲"""
        return Topology(entities, self.neighbourhood_type, self.ring_k)

    def filter(self, predicate: Callable[[Entity], bool]) -> 'Topology':
        return self.with_entities(e for e in self._entities if predicate(e))

    def ids(self) -> frozenset:
        return self._ids

    def index(self, entity: Entity) -> int:
        for i, e in enumerate(self._entities):
            if e.id == entity.id:
                return i
        raise ValueError(f"entity {entity.id[:8]} 不在拓撲中")

    def neighbourhood(self, entity: Entity) -> List[Entity]:
        """
        取得 entity 的鄰域

        gbest 回傳整個拓撲；lbest 回傳以 entity 為中心、
        左右各 ring_k/2 個的環狀鄰域（含自己，會環繞）。
        """
        if self.neighbourhood_type == 'gbest':
            return list(self._entities)

        n = len(self._entities)
        i = self.index(entity)
        half = self.ring_k // 2
        if 2 * half + 1 >= n:
            return list(self._entities)
        indices = [(i + d) % n for d in range(-half, half + 1)]
        return [self._entities[j] for j in indices]

    def best_entity(self) -> Optional[Entity]:
        """社會適應度最佳的 entity（同分時取第一個）"""
        best = None
        for entity in self._entities:
            if best is None or entity.is_better_than(best):
                best = entity
        return best

    def closest_entity(self, target: Entity, distance: Callable) -> Optional[Entity]:
        """
        距離 target 最近的其他 entity

        Args:
            target: 目標 entity（本身會被排除）
            distance: 距離函數 distance(a, b) -> float

        Returns:
            最近的 entity，同距離時取拓撲中第一個出現的；沒有其他 entity 時回傳 None
        """
        closest = None
        closest_distance = float('inf')
        for entity in self._entities:
            if entity.id == target.id:
                continue
            d = distance(target, entity)
            if closest is None or d < closest_distance:
                closest = entity
                closest_distance = d
        return closest

    def __contains__(self, entity) -> bool:
        return getattr(entity, 'id', None) in self._ids

    def __iter__(self) -> Iterator[Entity]:
        return iter(self._entities)

    def __len__(self) -> int:
        return len(self._entities)

    def __getitem__(self, index):
        return self._entities[index]

    def __eq__(self, other) -> bool:
        if not isinstance(other, Topology):
            return NotImplemented
        return ([e.id for e in self._entities] == [e.id for e in other._entities]
                and self.neighbourhood_type == other.neighbourhood_type
                and self.ring_k == other.ring_k)

    def __hash__(self):
        return hash(tuple(e.id for e in self._entities))

    def __repr__(self) -> str:
        return f"Topology({len(self._entities)} entities, {self.neighbourhood_type})"
