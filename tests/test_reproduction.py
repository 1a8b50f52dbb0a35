import pytest

from config import GENERATIONAL, SimConfig
from evolution.reproduction import (
    AsexualReproduction,
    SexualReproduction,
    build_reproduction_policy,
    spawn_child,
)
from neural.brain import Brain
from conftest import make_genome


def ready(c):
    c.energy = c.max_energy
    return c


def test_each_creature_mates_at_most_once_per_tick(make_creature, config, rng):
    a = ready(make_creature(100, 100))
    b = ready(make_creature(110, 100))
    c = ready(make_creature(105, 108))

    newborns = SexualReproduction().reproduce([a, b, c], config, rng)
    assert len(newborns) == 1
    # first match in iteration order
    assert a.offspring == b.offspring == 1
    assert c.offspring == 0


def test_four_in_contact_make_two_pairs(make_creature, config, rng):
    group = [ready(make_creature(100 + 5 * i, 100)) for i in range(4)]
    newborns = SexualReproduction().reproduce(group, config, rng)
    assert len(newborns) == 2
    assert all(c.offspring == 1 for c in group)


def test_mating_charges_parents_and_places_child(make_creature, config, rng):
    a = ready(make_creature(100, 100))
    b = ready(make_creature(110, 100))

    (child,) = SexualReproduction().reproduce([a, b], config, rng)

    for parent in (a, b):
        assert parent.energy == pytest.approx(parent.max_energy - config.mating_cost)
        assert parent.mating_cooldown == config.mating_cooldown
        assert not parent.can_mate()
    assert child.energy == config.child_energy
    assert child.age == 0
    assert child.alive
    assert abs(child.pos.x - 105) <= config.child_jitter
    assert abs(child.pos.y - 100) <= config.child_jitter
    assert child.brain is not a.brain and child.brain is not b.brain
    assert child.genome.brain_weights == tuple(child.brain.get_weights())


def test_no_mating_out_of_contact(make_creature, config, rng):
    # contact distance is 10 + 10 + margin 10
    a = ready(make_creature(100, 100))
    b = ready(make_creature(131, 100))
    assert SexualReproduction().reproduce([a, b], config, rng) == []


def test_size_mismatch_blocks_mating_under_predation(make_creature, config, rng):
    a = ready(make_creature(100, 100, body_size=10.0))
    b = ready(make_creature(120, 100, body_size=25.0))
    assert SexualReproduction().reproduce([a, b], config, rng) == []

    calm = config.replace(predation=False)
    a2 = ready(make_creature(100, 100, cfg=calm, body_size=10.0))
    b2 = ready(make_creature(120, 100, cfg=calm, body_size=25.0))
    assert len(SexualReproduction().reproduce([a2, b2], calm, rng)) == 1


def test_mate_intent_gate(make_creature, config, rng):
    cfg = config.replace(require_mate_intent=True)
    a = ready(make_creature(100, 100, cfg=cfg))
    b = ready(make_creature(110, 100, cfg=cfg))
    assert SexualReproduction().reproduce([a, b], cfg, rng) == []

    a.seeking_mate = b.seeking_mate = True
    assert len(SexualReproduction().reproduce([a, b], cfg, rng)) == 1


def test_ineligible_creatures_do_not_mate(make_creature, config, rng):
    a = ready(make_creature(100, 100))
    b = make_creature(110, 100)  # start energy is below the mating threshold
    assert SexualReproduction().reproduce([a, b], config, rng) == []

    b.energy = b.max_energy
    b.mating_cooldown = 5
    assert SexualReproduction().reproduce([a, b], config, rng) == []


def test_population_cap_stops_births(make_creature, config, rng):
    cfg = config.replace(max_population=2)
    a = ready(make_creature(100, 100, cfg=cfg))
    b = ready(make_creature(110, 100, cfg=cfg))
    assert SexualReproduction().reproduce([a, b], cfg, rng) == []


def test_asexual_budding(make_creature, config, rng):
    cfg = config.replace(reproduction="asexual")
    parent = ready(make_creature(300, 300, cfg=cfg))
    idle = make_creature(100, 100, cfg=cfg)

    (child,) = AsexualReproduction().reproduce([parent, idle], cfg, rng)
    assert parent.energy == pytest.approx(parent.max_energy - cfg.asexual_cost)
    assert parent.mating_cooldown == cfg.asexual_cooldown
    assert parent.offspring == 1
    assert idle.offspring == 0
    assert child.energy == cfg.child_energy
    assert child.brain is not parent.brain
    assert abs(child.pos.x - 300) <= cfg.child_jitter


def test_asexual_soft_cap(make_creature, config, rng):
    cfg = config.replace(reproduction="asexual", max_population=4)
    parents = [ready(make_creature(100 + 50 * i, 100, cfg=cfg)) for i in range(3)]
    assert len(AsexualReproduction().reproduce(parents, cfg, rng)) == 1


def test_spawn_child_clamps_into_arena(config, rng):
    brain = Brain(config.brain_input_size, config.hidden_size, config.output_size, rng=rng)
    child = spawn_child(0.0, config.height, make_genome(), brain, config, rng, jitter=20.0)
    assert 0.0 <= child.pos.x <= config.width
    assert 0.0 <= child.pos.y <= config.height
    assert child.brain is brain


def test_build_reproduction_policy():
    assert isinstance(build_reproduction_policy(SimConfig()), SexualReproduction)
    assert isinstance(build_reproduction_policy(SimConfig(reproduction="asexual")), AsexualReproduction)
    assert isinstance(build_reproduction_policy(GENERATIONAL), AsexualReproduction)
