"""
Unit tests for the NichingSwarms snapshot
"""

from dataclasses import FrozenInstanceError

import pytest

from niche_swarm.entity import Particle
from niche_swarm.functions import sphere
from niche_swarm.niching import NichingInvariantError, NichingSwarms
from niche_swarm.problem import OptimisationProblem
from niche_swarm.pso import PSO


PROBLEM = OptimisationProblem(sphere, 2, -5.0, 5.0)


def make_particle(position):
    particle = Particle(position, fitness_class=PROBLEM.fitness_class)
    particle.calculate_fitness(PROBLEM)
    particle.neighbourhood_best = particle
    return particle


class TestNichingSwarms:
    """快照結構與不變量"""

    def test_of_converts_to_tuple(self):
        main = PSO(problem=PROBLEM)
        sub = PSO(problem=PROBLEM)
        subs = [sub]

        swarms = NichingSwarms.of(main, subs)
        subs.append(PSO(problem=PROBLEM))

        assert swarms.sub_swarms == (sub,)

    def test_frozen(self):
        swarms = NichingSwarms(PSO(problem=PROBLEM))
        with pytest.raises(FrozenInstanceError):
            swarms.main_swarm = PSO(problem=PROBLEM)

    def test_populations_order(self):
        main = PSO(problem=PROBLEM)
        first, second = PSO(problem=PROBLEM), PSO(problem=PROBLEM)
        swarms = NichingSwarms.of(main).append_sub_swarm(first).append_sub_swarm(second)

        assert swarms.populations() == [main, first, second]

    def test_with_methods_return_new_snapshots(self):
        main, other = PSO(problem=PROBLEM), PSO(problem=PROBLEM)
        sub = PSO(problem=PROBLEM)
        swarms = NichingSwarms.of(main, [sub])

        replaced = swarms.with_main_swarm(other)
        emptied = swarms.with_sub_swarms([])

        assert replaced.main_swarm is other and replaced.sub_swarms == (sub,)
        assert emptied.sub_swarms == () and emptied.main_swarm is main
        assert swarms.main_swarm is main and swarms.sub_swarms == (sub,)

    def test_size_and_ids(self):
        a, b, c = make_particle([0, 0]), make_particle([1, 1]), make_particle([2, 2])
        swarms = NichingSwarms.of(PSO(problem=PROBLEM, topology=[a]),
                                  [PSO(problem=PROBLEM, topology=[b, c])])

        assert swarms.size() == 3
        assert swarms.entity_ids() == [a.id, b.id, c.id]
        assert swarms.shape() == "main=1, subs=[2]"

    def test_validate_passes(self):
        a, b, c = make_particle([0, 0]), make_particle([1, 1]), make_particle([2, 2])
        NichingSwarms.of(PSO(problem=PROBLEM, topology=[a]),
                         [PSO(problem=PROBLEM, topology=[b, c])]).validate()

    def test_validate_rejects_shared_entity(self):
        """測試同一個 entity 出現在兩個族群時驗證失敗"""
        a, b = make_particle([0, 0]), make_particle([1, 1])
        swarms = NichingSwarms.of(PSO(problem=PROBLEM, topology=[a, b]),
                                  [PSO(problem=PROBLEM, topology=[b])])

        with pytest.raises(NichingInvariantError):
            swarms.validate()

    def test_validate_rejects_missing_neighbourhood_best(self):
        """測試子族群中的粒子沒有鄰域最佳時驗證失敗"""
        a, b = make_particle([0, 0]), make_particle([1, 1])
        b.neighbourhood_best = None
        swarms = NichingSwarms.of(PSO(problem=PROBLEM), [PSO(problem=PROBLEM, topology=[a, b])])

        with pytest.raises(NichingInvariantError):
            swarms.validate()

    def test_invariant_error_is_assertion(self):
        assert issubclass(NichingInvariantError, AssertionError)
