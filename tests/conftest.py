import os
import random

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pytest

from config import SimConfig
from creature.creature import Creature
from creature.genome import Genome
from world.snapshot import CreatureSnapshot


def make_genome(body_size=10.0, appendages=2, burstiness=0.0, mutation_rate=0.15, **kw):
    fields = dict(
        body_size=body_size,
        appendage_count=appendages,
        appendage_length=0.8,
        body_shape=0.5,
        burstiness=burstiness,
        hue=180.0,
        pattern_type=0,
        mutation_rate=mutation_rate,
    )
    fields.update(kw)
    return Genome(**fields)


def snap(uid, x, y, radius=10.0, can_mate=False, alive=True):
    return CreatureSnapshot(
        uid=uid,
        x=x,
        y=y,
        heading=0.0,
        radius=radius,
        energy=50.0,
        max_energy=100.0,
        alive=alive,
        can_mate=can_mate,
        seeking_mate=False,
        bursting=False,
        hue=0.0,
        pattern_type=0,
        body_shape=0.0,
        appendage_count=0,
        appendage_length=0.5,
        age=0,
        fitness=0.0,
    )


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def config():
    return SimConfig(width=600, height=600)


@pytest.fixture
def make_creature(config, rng):
    counter = iter(range(1000, 100000))

    def _make(x=100.0, y=100.0, cfg=None, genome=None, heading=0.0, velocity=(0.0, 0.0), **genome_kw):
        c = Creature(x, y, genome or make_genome(**genome_kw), cfg or config, rng)
        c.uid = next(counter)
        c.heading = heading
        c.vel.update(*velocity)
        return c

    return _make
