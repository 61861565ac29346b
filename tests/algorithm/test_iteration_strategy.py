"""
Unit tests for iteration strategies, boundary constraints and operator pipelines
"""

import numpy as np
import pytest

from niche_swarm.algorithm import (
    EC,
    BlendCrossoverOperator,
    ClampingBoundaryConstraint,
    GaussianMutationOperator,
    IterationStrategy,
    MaximumIterations,
    Operator,
    OperatorIterationStrategy,
    UnconstrainedBoundary,
)
from niche_swarm.entity import Entity
from niche_swarm.functions import sphere
from niche_swarm.pso import (
    PSO,
    ParticleBehavior,
    StandardVelocityProvider,
    SynchronousIterationStrategy,
    VelocityProvider,
)
from niche_swarm.problem import OptimisationProblem


class RecordingOperator(Operator):
    """記錄呼叫順序的運算子"""

    def __init__(self, name, calls):
        super().__init__()
        self.name = name
        self.calls = calls

    def apply(self, algorithm):
        self.calls.append(self.name)


class DroppingIterationStrategy(IterationStrategy):
    """違規的迭代策略：每次迭代丟掉最後一個 entity"""

    def _iterate(self, algorithm):
        algorithm.topology = list(algorithm.topology)[:-1]


class EscapingVelocityProvider(VelocityProvider):
    """把粒子推到搜尋域外很遠的地方"""

    def get(self, particle, algorithm=None):
        return np.full_like(particle.position, 1000.0)


def make_recording_problem(evaluated):
    def recorded_sphere(x):
        evaluated.append(np.array(x, copy=True))
        return sphere(x)
    return OptimisationProblem(recorded_sphere, 2, -5.0, 5.0)


def make_pso(size=10, seed=0, **kwargs):
    problem = OptimisationProblem(sphere, 2, -5.0, 5.0)
    swarm = PSO(problem=problem, **kwargs)
    swarm.initialise(size, seed=seed)
    return swarm


class TestIterationStrategyDefaults:
    """迭代策略的預設值與設定"""

    def test_defaults(self):
        """測試預設為不約束邊界、空的運算子管線"""
        strategy = SynchronousIterationStrategy()
        assert isinstance(strategy.boundary_constraint, UnconstrainedBoundary)
        assert strategy.operator_pipeline == []

    def test_set_boundary_constraint_type_checked(self):
        strategy = SynchronousIterationStrategy()
        with pytest.raises(TypeError):
            strategy.set_boundary_constraint("clamping")

    def test_set_operator_pipeline_type_checked(self):
        strategy = OperatorIterationStrategy()
        with pytest.raises(TypeError):
            strategy.set_operator_pipeline([GaussianMutationOperator(), object()])

    def test_clone_copies_pipeline(self):
        """測試 clone 深拷貝邊界約束與運算子管線"""
        strategy = OperatorIterationStrategy(ClampingBoundaryConstraint(),
                                             [GaussianMutationOperator(sigma=0.5)])
        cloned = strategy.clone()

        assert cloned.boundary_constraint is not strategy.boundary_constraint
        assert cloned.operator_pipeline[0] is not strategy.operator_pipeline[0]
        cloned.operator_pipeline[0].sigma = 2.0
        assert strategy.operator_pipeline[0].sigma == 0.5


class TestSynchronousIteration:
    """同步 PSO 迭代"""

    def test_identity_and_cardinality_preserved(self):
        """測試多次迭代後成員與順序不變"""
        swarm = make_pso(size=10)
        ids = [p.id for p in swarm.topology]

        for _ in range(5):
            swarm.perform_iteration()

        assert [p.id for p in swarm.topology] == ids
        assert swarm.iterations == 5

    def test_membership_change_is_rejected(self):
        """測試改變成員的迭代策略會觸發斷言"""
        problem = OptimisationProblem(sphere, 2, -5.0, 5.0)
        swarm = PSO(DroppingIterationStrategy(), problem)
        swarm.initialise(4, seed=1)

        with pytest.raises(AssertionError):
            swarm.perform_iteration()

    def test_boundary_applied_before_evaluation(self):
        """測試邊界約束在適應度評估之前套用"""
        evaluated = []
        problem = make_recording_problem(evaluated)
        strategy = SynchronousIterationStrategy(ClampingBoundaryConstraint())
        swarm = PSO(strategy, problem, behavior=ParticleBehavior(EscapingVelocityProvider()))
        swarm.initialise(5, seed=3)
        evaluated.clear()

        swarm.perform_iteration()

        assert len(evaluated) == 5
        for position in evaluated:
            assert problem.contains(position)
            assert np.allclose(position, 5.0)

    def test_unconstrained_lets_particles_leave(self):
        evaluated = []
        problem = make_recording_problem(evaluated)
        swarm = PSO(problem=problem, behavior=ParticleBehavior(EscapingVelocityProvider()))
        swarm.initialise(3, seed=3)
        evaluated.clear()

        swarm.perform_iteration()

        assert all(not problem.contains(p) for p in evaluated)

    def test_operator_pipeline_order(self):
        """測試運算子管線每次迭代依序套用一次"""
        calls = []
        strategy = SynchronousIterationStrategy(operator_pipeline=[
            RecordingOperator('first', calls),
            RecordingOperator('second', calls),
        ])
        swarm = make_pso(size=4, iteration_strategy=strategy)

        swarm.perform_iteration()
        swarm.perform_iteration()

        assert calls == ['first', 'second', 'first', 'second']

    def test_neighbourhood_best_updated(self):
        """測試 gbest 拓撲中所有粒子的鄰域最佳都是族群最佳"""
        swarm = make_pso(size=8)
        swarm.perform_iteration()

        best = swarm.best_solution()
        assert all(p.neighbourhood_best is best for p in swarm.topology)

    def test_personal_best_never_worsens(self):
        swarm = make_pso(size=6)
        before = {p.id: p.best_fitness.values[0] for p in swarm.topology}

        for _ in range(3):
            swarm.perform_iteration()

        for p in swarm.topology:
            assert p.best_fitness.values[0] <= before[p.id]

    def test_same_seed_same_trajectory(self):
        """測試相同種子得到相同的軌跡"""
        def build():
            behavior = ParticleBehavior(StandardVelocityProvider(seed=3))
            swarm = make_pso(size=5, seed=11, behavior=behavior)
            for _ in range(4):
                swarm.perform_iteration()
            return np.array([p.position for p in swarm.topology])

        assert np.array_equal(build(), build())

    def test_perform_iteration_requires_problem(self):
        swarm = PSO()
        with pytest.raises(ValueError):
            swarm.perform_iteration()


class TestOperatorIteration:
    """運算子迭代策略 (EC)"""

    def test_ec_default_pipeline(self):
        ec = EC()
        assert isinstance(ec.iteration_strategy, OperatorIterationStrategy)
        assert isinstance(ec.iteration_strategy.operator_pipeline[0], GaussianMutationOperator)

    def test_ec_iteration_respects_boundary(self):
        """測試變異後超出邊界的位置被截斷，且全部重新評估"""
        problem = OptimisationProblem(sphere, 3, -1.0, 1.0)
        strategy = OperatorIterationStrategy(
            ClampingBoundaryConstraint(),
            [GaussianMutationOperator(sigma=10.0, indpb=1.0)],
        )
        ec = EC(strategy, problem, stopping_conditions=[MaximumIterations(3)])
        ec.initialise(6, seed=5)

        ec.run()

        assert ec.iterations == 3
        for entity in ec.topology:
            assert problem.contains(entity.position)
            assert entity.fitness.valid
            assert entity.fitness.values[0] == pytest.approx(sphere(entity.position))

    def test_blend_crossover_pairs(self):
        """測試混合交配只修改成對的 entity"""
        problem = OptimisationProblem(sphere, 2, -5.0, 5.0)
        ec = EC(OperatorIterationStrategy(operator_pipeline=[BlendCrossoverOperator(alpha=0.0)]),
                problem)
        ec.initialise(3, seed=2)
        last = ec.topology[2].position.copy()

        ec.perform_iteration()

        assert np.array_equal(ec.topology[2].position, last)

    def test_same_seed_same_trajectory(self):
        """測試相同種子的 EC 在變異與交配後得到相同位置"""
        def build():
            problem = OptimisationProblem(sphere, 3, -5.0, 5.0)
            strategy = OperatorIterationStrategy(operator_pipeline=[
                BlendCrossoverOperator(),
                GaussianMutationOperator(sigma=0.5, indpb=0.5),
            ])
            ec = EC(strategy, problem)
            ec.initialise(4, seed=7)
            for _ in range(3):
                ec.perform_iteration()
            return np.array([e.position for e in ec.topology])

        assert np.array_equal(build(), build())

    def test_default_ec_reproducible(self):
        def build():
            ec = EC(problem=OptimisationProblem(sphere, 2, -5.0, 5.0))
            ec.initialise(4, seed=7)
            ec.perform_iteration()
            return np.array([e.position for e in ec.topology])

        assert np.array_equal(build(), build())

    def test_operator_seed(self):
        """測試運算子自己的種子決定變異結果"""
        problem = OptimisationProblem(sphere, 2, -5.0, 5.0)
        results = []
        for _ in range(2):
            ec = EC(OperatorIterationStrategy(
                operator_pipeline=[GaussianMutationOperator(sigma=1.0, indpb=1.0, seed=11)]
            ), problem)
            ec.topology = [Entity([0.0, 0.0]), Entity([1.0, 1.0])]
            ec.perform_iteration()
            results.append([e.position.tolist() for e in ec.topology])

        assert results[0] == results[1]
        assert results[0][0] != [0.0, 0.0]

    def test_cloned_operators_use_new_streams(self):
        operator = GaussianMutationOperator(seed=3)
        first, second = operator.clone(), operator.clone()
        assert first.rng.random() != second.rng.random()

        strategy = OperatorIterationStrategy(operator_pipeline=[operator])
        assert strategy.clone().operator_pipeline[0].rng.random() != \
            strategy.clone().operator_pipeline[0].rng.random()

    def test_run_requires_stopping_condition(self):
        problem = OptimisationProblem(sphere, 2, -5.0, 5.0)
        ec = EC(problem=problem)
        ec.initialise(2, seed=0)
        with pytest.raises(ValueError):
            ec.run()
