"""
Niche 偵測

在主族群每次迭代後找出 niching 候選。
"""

from abc import ABC, abstractmethod
from collections import deque
from typing import Deque, Dict, List
import logging

import numpy as np

from ..entity import Entity

logger = logging.getLogger(__name__)


class NicheDetection(ABC):
    """Niche 偵測基類"""

    @abstractmethod
    def detect(self, main_swarm) -> List[Entity]:
        """
        回傳目前位於主族群拓撲中的候選 entity

        Args:
            main_swarm: 主族群
        """
        pass

    def __call__(self, main_swarm) -> List[Entity]:
        return self.detect(main_swarm)


class FitnessDeviationNicheDetection(NicheDetection):
    """
    適應度標準差偵測

    每個 entity 保留最近 window 次的適應度；當這些值的標準差小於
    threshold 時，該 entity 被視為已收斂到某個 niche 的候選。
    歷史以 entity ID 為鍵存放在偵測器中，離開主族群的 entity 會被清除。
    """

    def __init__(self, threshold: float = 1e-4, window: int = 3):
        if threshold < 0:
            raise ValueError(f"threshold 必須 >= 0，得到: {threshold}")
        if window < 2:
            raise ValueError(f"window 必須 >= 2，得到: {window}")
        self.threshold = threshold
        self.window = window
        self.histories: Dict[str, Deque[float]] = {}

    def detect(self, main_swarm) -> List[Entity]:
        topology = main_swarm.topology
        current_ids = topology.ids()
        for stale_id in [i for i in self.histories if i not in current_ids]:
            del self.histories[stale_id]

        candidates = []
        for entity in topology:
            if not entity.fitness.valid:
                continue
            history = self.histories.setdefault(entity.id, deque(maxlen=self.window))
            history.append(entity.fitness.values[0])
            if len(history) == self.window and float(np.std(history)) < self.threshold:
                candidates.append(entity)

        if candidates:
            logger.debug(f"   偵測到 {len(candidates)} 個 niching 候選")
        return candidates

    def reset(self):
        self.histories.clear()
