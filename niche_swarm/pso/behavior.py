"""
粒子行為

將速度提供者與位置提供者綁在一起，clone 後指派給粒子。
"""

from abc import ABC, abstractmethod
from typing import Optional
import copy

import numpy as np

from .velocity import VelocityProvider, StandardVelocityProvider


class PositionProvider(ABC):
    """位置提供者基類"""

    @abstractmethod
    def get(self, particle, algorithm=None) -> np.ndarray:
        pass

    def clone(self) -> 'PositionProvider':
        return copy.deepcopy(self)


class StandardPositionProvider(PositionProvider):
    """x(t+1) = x(t) + v(t+1)"""

    def get(self, particle, algorithm=None) -> np.ndarray:
        return particle.position + particle.velocity


class ParticleBehavior:
    """粒子行為：速度與位置更新策略的組合"""

    def __init__(self,
                 velocity_provider: Optional[VelocityProvider] = None,
                 position_provider: Optional[PositionProvider] = None):
        self.velocity_provider = velocity_provider or StandardVelocityProvider()
        self.position_provider = position_provider or StandardPositionProvider()

    def set_velocity_provider(self, velocity_provider: VelocityProvider):
        if not isinstance(velocity_provider, VelocityProvider):
            raise TypeError(f"速度提供者必須繼承自 VelocityProvider: {type(velocity_provider)}")
        self.velocity_provider = velocity_provider

    def clone(self) -> 'ParticleBehavior':
        """深拷貝整條速度提供者鏈與位置提供者"""
        return ParticleBehavior(self.velocity_provider.clone(), self.position_provider.clone())

    def __repr__(self) -> str:
        return f"ParticleBehavior({self.velocity_provider.__class__.__name__})"
