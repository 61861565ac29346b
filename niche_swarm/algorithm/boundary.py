"""
邊界約束

位置更新之後、適應度評估之前，修正離開可行域的 entity。
"""

from abc import ABC, abstractmethod
import copy
import logging

import numpy as np

logger = logging.getLogger(__name__)


class BoundaryConstraint(ABC):
    """邊界約束基類"""

    @abstractmethod
    def enforce(self, entity, problem):
        """
        修正 entity 的位置（與速度）

        Args:
            entity: 要修正的 entity
            problem: 提供 lower / upper 的最佳化問題
        """
        pass

    def clone(self) -> 'BoundaryConstraint':
        return copy.deepcopy(self)


class UnconstrainedBoundary(BoundaryConstraint):
    """不做任何修正"""

    def enforce(self, entity, problem):
        return None


class ClampingBoundaryConstraint(BoundaryConstraint):
    """
    截斷邊界約束

    超出範圍的座標被拉回到最近的邊界上，速度不變。
    """

    def enforce(self, entity, problem):
        position = entity.position
        clamped = np.clip(position, problem.lower, problem.upper)
        if not np.array_equal(clamped, position):
            logger.debug(f"Entity {entity.id[:8]} 超出邊界，已截斷")
            entity.position = clamped
