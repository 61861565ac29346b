"""
Entity 模組

包含：
- Entity: 帶唯一 ID 的候選解
- Particle: PSO 粒子
- Topology: 有序、不重複的族群成員與鄰域結構
"""

from .base import Entity, FitnessMin, FitnessMax
from .particle import Particle
from .topology import Topology

__all__ = ['Entity', 'FitnessMin', 'FitnessMax', 'Particle', 'Topology']
