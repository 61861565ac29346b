"""
PSO 模組

包含速度提供者鏈、粒子行為、同步迭代策略與 PSO 族群。
"""

from .velocity import (
    VelocityProvider,
    StandardVelocityProvider,
    ClampingVelocityProvider,
    GCVelocityProvider,
)
from .behavior import ParticleBehavior, PositionProvider, StandardPositionProvider
from .iteration import SynchronousIterationStrategy
from .pso import PSO

__all__ = [
    'VelocityProvider', 'StandardVelocityProvider', 'ClampingVelocityProvider', 'GCVelocityProvider',
    'ParticleBehavior', 'PositionProvider', 'StandardPositionProvider',
    'SynchronousIterationStrategy', 'PSO',
]
