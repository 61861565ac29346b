r"""
速度更新策略

速度提供者 (VelocityProvider) 可以互相包裝：外層提供者擁有一個內層 delegate，
並以自己的參數修正 delegate 的結果。所有權是樹狀且互斥的，clone 時整條鏈會被遞迴深拷貝。

標準速度更新：

.. math::

   v_{ij}(t + 1) = w v_{ij}(t) + c_{1} r_{1j}(t)[y_{ij}(t) - x_{ij}(t)]
                   + c_{2} r_{2j}(t)[\hat{y}_{ij}(t) - x_{ij}(t)]

Guaranteed convergence (GC) 對全域最佳粒子使用：

.. math::

   v_{\tau j}(t + 1) = -x_{\tau j}(t) + \hat{y}_{j}(t) + w v_{\tau j}(t)
                       + \rho(t)(1 - 2 r_{j}(t))
"""

from abc import ABC, abstractmethod
from typing import Optional
import copy
import logging

import numpy as np

from ..controlparameter import (
    ControlParameter,
    as_control_parameter,
)

logger = logging.getLogger(__name__)


class VelocityProvider(ABC):
    """速度提供者基類"""

    def __init__(self, delegate: Optional['VelocityProvider'] = None):
        self.delegate = delegate

    @abstractmethod
    def get(self, particle, algorithm=None) -> np.ndarray:
        """計算粒子的下一個速度"""
        pass

    def update_control_parameters(self, particle, algorithm=None):
        """在適應度評估後調整參數，預設轉交給 delegate"""
        if self.delegate is not None:
            self.delegate.update_control_parameters(particle, algorithm)

    def set_delegate(self, delegate: 'VelocityProvider'):
        if not isinstance(delegate, VelocityProvider):
            raise TypeError(f"delegate 必須是 VelocityProvider: {type(delegate)}")
        self.delegate = delegate

    def clone(self) -> 'VelocityProvider':
        """
        深拷貝整條鏈

        每個擁有 rng 的節點在複本中換成由原本 rng 衍生的子隨機流，
        複本之間的隨機數互不相同，但相同種子下仍可重現。
        """
        cloned = copy.deepcopy(self)
        original, node = self, cloned
        while original is not None:
            if getattr(original, 'rng', None) is not None:
                node.rng = original.rng.spawn(1)[0]
            original, node = original.delegate, node.delegate
        return cloned


class StandardVelocityProvider(VelocityProvider):
    """
    標準（慣性權重）速度更新

    Args:
        inertia: 慣性權重 w
        social: 社會加速係數 c2（朝向鄰域最佳）
        cognitive: 認知加速係數 c1（朝向個體最佳）
        seed: 隨機數種子
    """

    def __init__(self,
                 inertia=0.729844,
                 social=1.496180,
                 cognitive=1.496180,
                 seed: Optional[int] = None):
        super().__init__()
        self.inertia: ControlParameter = as_control_parameter(inertia)
        self.social: ControlParameter = as_control_parameter(social)
        self.cognitive: ControlParameter = as_control_parameter(cognitive)
        self.rng = np.random.default_rng(seed)

    def get(self, particle, algorithm=None) -> np.ndarray:
        position = particle.position
        velocity = particle.velocity
        personal_best = particle.best_position
        neighbourhood = particle.neighbourhood_best or particle
        neighbourhood_best = neighbourhood.best_position

        w = self.inertia.get_parameter(algorithm)
        c1 = self.cognitive.get_parameter(algorithm)
        c2 = self.social.get_parameter(algorithm)
        r1 = self.rng.random(position.shape)
        r2 = self.rng.random(position.shape)

        return (w * velocity
                + c1 * r1 * (personal_best - position)
                + c2 * r2 * (neighbourhood_best - position))


class ClampingVelocityProvider(VelocityProvider):
    """
    速度截斷

    將 delegate 的結果每一維截斷到 [-vmax, vmax]。
    """

    def __init__(self, vmax=1.0, delegate: Optional[VelocityProvider] = None):
        super().__init__(delegate or StandardVelocityProvider())
        self.vmax: ControlParameter = as_control_parameter(vmax)

    def get(self, particle, algorithm=None) -> np.ndarray:
        vmax = self.vmax.get_parameter(algorithm)
        if vmax < 0:
            raise ValueError(f"vmax 必須 >= 0，得到: {vmax}")
        return np.clip(self.delegate.get(particle, algorithm), -vmax, vmax)


class GCVelocityProvider(VelocityProvider):
    """
    Guaranteed Convergence 速度更新

    當粒子是族群的全域最佳時，以 rho 控制在目前最佳附近的隨機搜尋半徑，
    避免領導者停滯；其他粒子使用 delegate 的速度。

    rho 依全域最佳粒子的連續成功/失敗次數調整：
    連續成功超過 success_threshold 次時乘上 expansion，
    連續失敗超過 failure_threshold 次時乘上 contraction。
    """

    def __init__(self,
                 delegate: Optional[VelocityProvider] = None,
                 rho=1.0,
                 inertia=0.729844,
                 success_threshold: int = 15,
                 failure_threshold: int = 5,
                 expansion: float = 2.0,
                 contraction: float = 0.5,
                 seed: Optional[int] = None):
        super().__init__(delegate or StandardVelocityProvider())
        self.rho: ControlParameter = as_control_parameter(rho)
        self.inertia: ControlParameter = as_control_parameter(inertia)
        self.success_threshold = success_threshold
        self.failure_threshold = failure_threshold
        self.expansion = expansion
        self.contraction = contraction
        self.rng = np.random.default_rng(seed)

        # rho 的調整倍率與成功/失敗計數
        self.rho_scale = 1.0
        self.success_count = 0
        self.failure_count = 0

    def set_rho(self, rho):
        self.rho = as_control_parameter(rho)

    def current_rho(self, algorithm=None) -> float:
        return self.rho.get_parameter(algorithm) * self.rho_scale

    @staticmethod
    def _is_global_best(particle, algorithm) -> bool:
        if algorithm is None:
            return particle.neighbourhood_best is particle
        best = algorithm.best_solution()
        return best is not None and best.id == particle.id

    def get(self, particle, algorithm=None) -> np.ndarray:
        if not self._is_global_best(particle, algorithm):
            return self.delegate.get(particle, algorithm)

        position = particle.position
        neighbourhood = particle.neighbourhood_best or particle
        w = self.inertia.get_parameter(algorithm)
        r = self.rng.random(position.shape)
        return (-position + neighbourhood.best_position
                + w * particle.velocity
                + self.current_rho(algorithm) * (1.0 - 2.0 * r))

    def update_control_parameters(self, particle, algorithm=None):
        super().update_control_parameters(particle, algorithm)
        if not self._is_global_best(particle, algorithm):
            return

        # 目前位置比個體最佳更好即視為成功
        if particle.fitness.valid and particle.fitness > particle.best_fitness:
            self.success_count += 1
            self.failure_count = 0
        else:
            self.failure_count += 1
            self.success_count = 0

        if self.success_count > self.success_threshold:
            self.rho_scale *= self.expansion
            self.success_count = 0
            logger.debug(f"GC rho 擴張: {self.current_rho(algorithm):.6f}")
        elif self.failure_count > self.failure_threshold:
            self.rho_scale *= self.contraction
            self.failure_count = 0
            logger.debug(f"GC rho 收縮: {self.current_rho(algorithm):.6f}")
