import pytest

from config import GENERATIONAL
from creature.creature import Creature
from evolution.selection import next_generation, rank_by_fitness, select_top, tournament_select


@pytest.fixture
def gen_config():
    return GENERATIONAL.replace(width=600, height=600, population_size=10, elitism=2)


@pytest.fixture
def spawn(gen_config, rng):
    def _spawn(genome, brain):
        return Creature(300, 300, genome, gen_config, rng, brain=brain)

    return _spawn


@pytest.fixture
def scored(make_creature, gen_config):
    pop = []
    for i in range(10):
        c = make_creature(100 + 30 * i, 100, cfg=gen_config, body_size=8.0 + i)
        c.food_eaten = i
        c.die()
        pop.append(c)
    return pop


def test_rank_and_select_top(scored):
    ranked = rank_by_fitness(scored)
    assert [c.food_eaten for c in ranked] == list(range(9, -1, -1))
    assert [c.food_eaten for c in select_top(scored, 3)] == [9, 8, 7]


def test_tournament_select(scored, rng):
    assert tournament_select([], rng) is None
    assert tournament_select(scored, rng, size=1) in scored
    # with many draws the fittest is all but certain to be sampled
    assert tournament_select(scored, rng, size=100) is rank_by_fitness(scored)[0]


def test_elites_survive_bit_identical(scored, gen_config, rng, spawn):
    ranked = rank_by_fitness(scored)
    new_pop = next_generation(scored, 10, gen_config, rng, spawn)

    assert len(new_pop) == 10
    parent_weights = [c.brain.get_weights() for c in scored]
    identical = [c for c in new_pop if c.brain.get_weights() in parent_weights]
    assert len(identical) == 2

    for elite, child in zip(ranked[:2], new_pop[:2]):
        assert child.brain is not elite.brain
        assert child.brain.get_weights() == elite.brain.get_weights()
        assert child.genome.body_size == elite.genome.body_size
        assert child.genome.brain_weights == tuple(elite.brain.get_weights())
        assert child.alive
        assert child.age == 0
        assert child.food_eaten == 0


def test_single_survivor_fills_population(scored, gen_config, rng, spawn):
    lone = scored[4]
    new_pop = next_generation([lone], 6, gen_config, rng, spawn)
    assert len(new_pop) == 6
    assert new_pop[0].brain.get_weights() == lone.brain.get_weights()
    for c in new_pop[1:]:
        assert c.brain.shape == lone.brain.shape
        assert c.brain.get_weights() != lone.brain.get_weights()


def test_empty_pool_falls_back_to_random(gen_config, rng, spawn):
    new_pop = next_generation([], 5, gen_config, rng, spawn)
    assert len(new_pop) == 5
    assert len({id(c.brain) for c in new_pop}) == 5
    assert all(c.alive for c in new_pop)


def test_zero_elitism(scored, gen_config, rng, spawn):
    cfg = gen_config.replace(elitism=0)
    new_pop = next_generation(scored, 10, cfg, rng, spawn)
    parent_weights = [c.brain.get_weights() for c in scored]
    assert len(new_pop) == 10
    assert not any(c.brain.get_weights() in parent_weights for c in new_pop)
