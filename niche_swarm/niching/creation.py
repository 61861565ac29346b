"""
Niche 建立策略

給定一個 NichingSwarms 快照與偵測到的 niching entity，
從主族群中分離出新的子族群，回傳新的快照。

Closest-neighbour 策略：
    niching 粒子與它在主族群中最近的粒子組成一個新的子族群。
    粒子是社會性的個體，子族群至少要有兩個粒子，速度更新方程式才能運作。

參考文獻：
    Brits, R., Engelbrecht, A. P., & van den Bergh, F. (2002).
    A niching particle swarm optimizer.
"""

from abc import ABC, abstractmethod
from typing import Optional
import logging

from ..algorithm.boundary import ClampingBoundaryConstraint
from ..algorithm.population import SinglePopulationBasedAlgorithm
from ..algorithm.stopping import MaximumIterations
from ..controlparameter import (
    ConstantControlParameter,
    LinearlyVaryingControlParameter,
    UpdateOnIterationControlParameter,
)
from ..entity import Entity
from ..pso import (
    PSO,
    ClampingVelocityProvider,
    GCVelocityProvider,
    ParticleBehavior,
    StandardVelocityProvider,
    SynchronousIterationStrategy,
)
from .swarms import NichingInvariantError, NichingSwarms

logger = logging.getLogger(__name__)


class NicheCreationStrategy(ABC):
    """
    Niche 建立策略基類

    Attributes:
        swarm_type: 子族群範本，每個新 niche 都是它的 clone
        swarm_behavior: 指派給 niche 成員的粒子行為範本
    """

    def __init__(self,
                 swarm_type: Optional[SinglePopulationBasedAlgorithm] = None,
                 swarm_behavior: Optional[ParticleBehavior] = None):
        self.name = "base_creation"
        self.swarm_type = swarm_type
        self.swarm_behavior = swarm_behavior

    def set_swarm_type(self, swarm_type: SinglePopulationBasedAlgorithm):
        if not isinstance(swarm_type, SinglePopulationBasedAlgorithm):
            raise TypeError(f"子族群範本必須繼承自 SinglePopulationBasedAlgorithm: {type(swarm_type)}")
        self.swarm_type = swarm_type

    def set_swarm_behavior(self, swarm_behavior: ParticleBehavior):
        if not isinstance(swarm_behavior, ParticleBehavior):
            raise TypeError(f"粒子行為必須是 ParticleBehavior: {type(swarm_behavior)}")
        self.swarm_behavior = swarm_behavior

    @abstractmethod
    def create(self, swarms: NichingSwarms, niching_entity: Entity) -> NichingSwarms:
        """
        建立一個新的 niche

        Args:
            swarms: 目前的快照（不會被修改）
            niching_entity: 偵測到的 niching 候選

        Returns:
            新的快照；前置條件不成立時回傳原本的快照
        """
        pass

    def __call__(self, swarms: NichingSwarms, niching_entity: Entity) -> NichingSwarms:
        return self.create(swarms, niching_entity)


def default_niche_behavior(inertia_start: float = 0.7,
                           inertia_end: float = 0.2,
                           social: float = 1.2,
                           cognitive: float = 1.2,
                           vmax: float = 1.0,
                           rho: float = 0.01,
                           seed: Optional[int] = None) -> ParticleBehavior:
    """
    Niche 粒子的預設行為：三層速度提供者鏈

    1. 內層：標準速度更新，慣性權重每次迭代從 inertia_start 線性降到 inertia_end
    2. 中層：將內層結果截斷到 vmax
    3. 外層：GC 速度更新，rho 為收縮係數
    """
    standard = StandardVelocityProvider(
        UpdateOnIterationControlParameter(LinearlyVaryingControlParameter(inertia_start, inertia_end)),
        ConstantControlParameter.of(social),
        ConstantControlParameter.of(cognitive),
        seed=seed,
    )
    delegate = ClampingVelocityProvider(ConstantControlParameter.of(vmax), standard)

    gc_velocity_provider = GCVelocityProvider(seed=None if seed is None else seed + 1)
    gc_velocity_provider.set_delegate(delegate)
    gc_velocity_provider.set_rho(ConstantControlParameter.of(rho))

    behavior = ParticleBehavior()
    behavior.set_velocity_provider(gc_velocity_provider)
    return behavior


def default_niche_swarm_type(max_iterations: int = 500) -> PSO:
    """子族群範本：截斷邊界的同步 PSO，獨立執行時 max_iterations 次後停止"""
    iteration_strategy = SynchronousIterationStrategy()
    iteration_strategy.set_boundary_constraint(ClampingBoundaryConstraint())
    return PSO(iteration_strategy, stopping_conditions=[MaximumIterations(max_iterations)])


class ClosestNeighbourNicheCreationStrategy(NicheCreationStrategy):
    """
    最近鄰 Niche 建立策略

    niching entity 被 clone 後成為新 niche 的領導者（自己的鄰域最佳），
    它在主族群中最近的鄰居則被直接搬移到 niche 中。
    原本的 niching entity 從兩邊都被移除。
    """

    def __init__(self,
                 swarm_type: Optional[SinglePopulationBasedAlgorithm] = None,
                 swarm_behavior: Optional[ParticleBehavior] = None):
        super().__init__(swarm_type or default_niche_swarm_type(),
                         swarm_behavior or default_niche_behavior())
        self.name = "closest_neighbour"

    def create(self, swarms: NichingSwarms, niching_entity: Entity) -> NichingSwarms:
        """
        建立最近鄰 niche

        輸入快照的容器不會被修改，但被搬移的最近鄰居是同一個物件，
        它的 neighbourhood_best 與 behavior 會被就地改寫；
        而輸入快照的主族群拓撲仍引用它。因此成功建立後呼叫端必須
        丟棄輸入快照，只使用回傳的快照。

        Returns:
            新的快照；主族群不足兩個粒子或候選不在主族群中時回傳原快照
        """
        topology = swarms.main_swarm.topology

        # 至少需要兩個粒子，且候選必須仍在主族群中
        if len(topology) <= 1 or niching_entity not in topology:
            logger.debug(
                f"忽略 niching 候選 {getattr(niching_entity, 'id', '?')[:8]} "
                f"(主族群大小 {len(topology)})"
            )
            return swarms

        problem = swarms.main_swarm.problem
        closest = topology.closest_entity(niching_entity, problem.distance)

        # niching entity 被 clone，最近鄰居直接搬移
        niche_main = niching_entity.clone()
        niche_main.neighbourhood_best = niche_main
        closest.neighbourhood_best = niche_main

        niche_main.behavior = self.swarm_behavior.clone()
        closest.behavior = self.swarm_behavior.clone()

        new_sub_swarm = self.swarm_type.clone()
        new_sub_swarm.set_problem(problem)
        new_sub_swarm.topology = [niche_main, closest]

        new_main_swarm = swarms.main_swarm.clone()
        new_main_swarm.topology = topology.filter(
            lambda e: e.id != niching_entity.id and e.id != closest.id
        )

        result = NichingSwarms(new_main_swarm, swarms.sub_swarms + (new_sub_swarm,))
        try:
            result.validate()
        except NichingInvariantError as e:
            raise NichingInvariantError(
                f"建立 niche 後狀態損壞 (候選 {niching_entity.id}, 輸入 {swarms.shape()}): {e}"
            ) from e

        logger.info(
            f"🌱 新 niche #{len(result.sub_swarms)}: 領導者 {niche_main.id[:8]}, "
            f"鄰居 {closest.id[:8]}, 主族群剩 {len(new_main_swarm.topology)}"
        )
        return result
