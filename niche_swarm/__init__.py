"""
Niching 粒子群最佳化框架

將一個族群動態分解為多個獨立演化的子族群，追蹤多峰目標函數的不同最佳解。
所有組件（迭代策略、速度提供者、niche 建立/偵測/合併）都是可插拔的，
可以直接組裝，也可以透過 create_niching_algorithm 從配置字典建立。
"""

from typing import Any, Dict, Optional
import logging

from .config import DEFAULT_CONFIG, deep_merge, load_config
from .controlparameter import (
    ConstantControlParameter,
    LinearlyVaryingControlParameter,
    UpdateOnIterationControlParameter,
)
from .functions import FUNCTIONS
from .problem import OptimisationProblem
from .entity import Entity, Particle, Topology
from .algorithm import (
    ClampingBoundaryConstraint,
    MaximumIterations,
    StagnationStoppingCondition,
    UnconstrainedBoundary,
)
from .pso import (
    PSO,
    ClampingVelocityProvider,
    ParticleBehavior,
    StandardVelocityProvider,
    SynchronousIterationStrategy,
)
from .niching import (
    NichingAlgorithm,
    NichingSwarms,
    default_niche_behavior,
    default_niche_swarm_type,
)
from .handlers import LoggingHandler

logger = logging.getLogger(__name__)

__version__ = '0.1.0'


def _create_component(component_type: str, component_name: str, parameters: Dict[str, Any]):
    """
    根據配置動態創建組件

    Args:
        component_type: 組件類型 ('creation', 'detection', 'merge', 'boundary')
        component_name: 組件名稱 (如 'closest_neighbour', 'fitness_deviation')
        parameters: 傳給建構子的參數

    Returns:
        創建的組件實例

    Raises:
        ValueError: 如果組件不存在或參數錯誤
    """
    component_mappings = {
        'creation': {
            'closest_neighbour': ('niching.creation', 'ClosestNeighbourNicheCreationStrategy'),
        },
        'detection': {
            'fitness_deviation': ('niching.detection', 'FitnessDeviationNicheDetection'),
        },
        'merge': {
            'radius_overlap': ('niching.merging', 'RadiusOverlapMergeStrategy'),
            'absorption': ('niching.merging', 'AbsorptionMergeStrategy'),
        },
        'boundary': {
            'clamping': ('algorithm.boundary', 'ClampingBoundaryConstraint'),
            'unconstrained': ('algorithm.boundary', 'UnconstrainedBoundary'),
        },
    }

    if component_type not in component_mappings:
        raise ValueError(f"不支持的組件類型: {component_type}")

    if component_name not in component_mappings[component_type]:
        available = list(component_mappings[component_type].keys())
        raise ValueError(f"不支持的{component_type}組件: {component_name}。可用組件: {available}")

    module_name, class_name = component_mappings[component_type][component_name]

    import importlib
    module = importlib.import_module(f"{__name__}.{module_name}")
    component_class = getattr(module, class_name)

    try:
        return component_class(**parameters)
    except TypeError as e:
        raise ValueError(f"創建組件 {component_type}.{component_name} 失敗: {e}. 參數: {parameters}") from e


def create_problem(config: Dict[str, Any]) -> OptimisationProblem:
    """
    根據配置的 problem 部分建立最佳化問題

    Raises:
        ValueError: 未知的函數名稱
    """
    problem_config = config['problem']
    name = problem_config['function']
    if name not in FUNCTIONS:
        raise ValueError(f"未知的目標函數: {name}。可用函數: {list(FUNCTIONS.keys())}")

    meta = FUNCTIONS[name]
    dimension = meta.get('dimension', problem_config.get('dimension', 2))
    lower, upper = problem_config.get('bounds') or meta['bounds']
    return OptimisationProblem(meta['f'], dimension, lower, upper,
                               minimise=problem_config.get('minimise', True), name=name)


def create_main_swarm(config: Dict[str, Any], problem: OptimisationProblem) -> PSO:
    """建立並初始化主族群"""
    swarm_config = config['main_swarm']
    velocity = swarm_config['velocity']
    seed = config['experiment'].get('seed')

    standard = StandardVelocityProvider(
        UpdateOnIterationControlParameter(
            LinearlyVaryingControlParameter(velocity['inertia_start'], velocity['inertia_end'])
        ),
        ConstantControlParameter.of(velocity['social']),
        ConstantControlParameter.of(velocity['cognitive']),
        seed=seed,
    )
    behavior = ParticleBehavior(ClampingVelocityProvider(velocity['vmax'], standard))

    iteration_strategy = SynchronousIterationStrategy()
    iteration_strategy.set_boundary_constraint(
        _create_component('boundary', swarm_config.get('boundary', 'clamping'), {})
    )

    main_swarm = PSO(
        iteration_strategy,
        problem,
        topology=Topology(neighbourhood=swarm_config.get('neighbourhood', 'gbest'),
                          ring_k=swarm_config.get('ring_k', 2)),
        stopping_conditions=[MaximumIterations(config['termination']['max_iterations'])],
        behavior=behavior,
        initial_velocity_fraction=swarm_config.get('initial_velocity_fraction', 0.0),
    )
    main_swarm.initialise(swarm_config['size'], seed=seed)
    return main_swarm


def create_niching_algorithm(config: Optional[Dict[str, Any]] = None,
                             problem: Optional[OptimisationProblem] = None) -> NichingAlgorithm:
    """
    工廠函數：根據配置創建 niching 演算法

    Args:
        config: 配置字典（會與 DEFAULT_CONFIG 合併）
        problem: 最佳化問題；None 時依配置建立

    Returns:
        配置好的 NichingAlgorithm
    """
    config = deep_merge(DEFAULT_CONFIG, config or {})
    problem = problem or create_problem(config)
    seed = config['experiment'].get('seed')

    main_swarm = create_main_swarm(config, problem)

    niche_config = config['niche']
    niche_parameters = dict(niche_config.get('parameters', {}))
    max_iterations = niche_parameters.pop('max_iterations', 500)
    behavior = default_niche_behavior(seed=None if seed is None else seed + 100, **niche_parameters)
    creation = _create_component('creation', niche_config['strategy'], {
        'swarm_type': default_niche_swarm_type(max_iterations),
        'swarm_behavior': behavior,
    })

    detection_config = config['detection']
    detection = _create_component('detection', detection_config['method'],
                                  detection_config.get('parameters', {}))

    merge_strategies = []
    merge_config = config['merge']
    if merge_config.get('enabled', True):
        merge_strategies.append(
            _create_component('merge', merge_config['method'], merge_config.get('parameters', {}))
        )
    if config['absorption'].get('enabled', True):
        merge_strategies.append(_create_component('merge', 'absorption', {'behavior': behavior}))

    termination = config['termination']
    stopping_conditions = [MaximumIterations(termination['max_iterations'])]
    if termination.get('stagnation_patience'):
        stopping_conditions.append(StagnationStoppingCondition(
            termination['stagnation_patience'], termination.get('stagnation_min_delta', 0.0)
        ))

    algorithm = NichingAlgorithm(main_swarm, creation, detection, merge_strategies,
                                 stopping_conditions, config=config)

    if config['logging'].get('enabled', True):
        algorithm.add_handler(LoggingHandler(config['logging'].get('log_interval', 10)))

    logger.info(
        f"Niching 演算法創建完成: {problem!r}, 主族群 {len(main_swarm.topology)}, "
        f"合併策略 {[s.name for s in merge_strategies]}"
    )
    return algorithm


__all__ = [
    'DEFAULT_CONFIG', 'load_config', 'deep_merge',
    'OptimisationProblem', 'FUNCTIONS',
    'Entity', 'Particle', 'Topology',
    'PSO', 'ParticleBehavior', 'SynchronousIterationStrategy',
    'ClampingBoundaryConstraint', 'UnconstrainedBoundary',
    'MaximumIterations', 'StagnationStoppingCondition',
    'NichingAlgorithm', 'NichingSwarms',
    'create_problem', 'create_main_swarm', 'create_niching_algorithm',
]
