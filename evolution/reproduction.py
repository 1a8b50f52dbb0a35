"""
creature_sim module: evolution/reproduction.py

Live reproduction policies. A policy inspects the population, charges the
parents and returns newborns; it never edits the population collection, the
simulation appends the newborns after the pass.

- AsexualReproduction: an energy-rich creature buds a mutated clone
- SexualReproduction: two eligible creatures in contact mate; each creature
  mates at most once per tick
"""

from __future__ import annotations
import logging
import random
from typing import List, Optional, Sequence, Set, TYPE_CHECKING

from creature.creature import Creature
from creature.genome import Genome
from evolution.mutate import blend_genomes, child_brain, mutate_genome
from neural.brain import Brain

if TYPE_CHECKING:
    from config import SimConfig

logger = logging.getLogger(__name__)


def spawn_child(
    x: float,
    y: float,
    genome: Genome,
    brain: Brain,
    config: "SimConfig",
    rng: random.Random,
    jitter: float,
) -> Creature:
    cx = min(max(x + rng.uniform(-jitter, jitter), 0.0), config.width)
    cy = min(max(y + rng.uniform(-jitter, jitter), 0.0), config.height)
    child = Creature(cx, cy, genome.with_brain_weights(brain.get_weights()), config, rng, brain=brain)
    child.energy = min(config.child_energy, child.max_energy)
    return child


class ReproductionPolicy:
    def reproduce(self, creatures: Sequence[Creature], config: "SimConfig", rng: random.Random) -> List[Creature]:
        raise NotImplementedError


class AsexualReproduction(ReproductionPolicy):
    def reproduce(self, creatures: Sequence[Creature], config: "SimConfig", rng: random.Random) -> List[Creature]:
        newborns: List[Creature] = []
        population = sum(1 for c in creatures if c.alive)

        for parent in creatures:
            if population + len(newborns) >= config.max_population:
                break
            if not parent.can_reproduce():
                continue

            parent.spend_energy(config.asexual_cost)
            parent.mating_cooldown = config.asexual_cooldown
            parent.offspring += 1

            genome = mutate_genome(parent.genome, rng)
            brain = child_brain(parent.brain, None, rng)
            newborns.append(
                spawn_child(parent.pos.x, parent.pos.y, genome, brain, config, rng, config.child_jitter)
            )
        return newborns


class SexualReproduction(ReproductionPolicy):
    def find_partner(self, creature: Creature, creatures: Sequence[Creature], mated: Set[Creature], config: "SimConfig") -> Optional[Creature]:
        """First eligible creature in iteration order that is in contact."""
        for other in creatures:
            if other is creature or other in mated or not other.wants_to_mate():
                continue
            if not creature.is_size_compatible(other):
                continue
            d = creature.pos.distance_to(other.pos)
            if d < creature.radius + other.radius + config.contact_margin:
                return other
        return None

    def mate(self, a: Creature, b: Creature, config: "SimConfig", rng: random.Random) -> Creature:
        for parent in (a, b):
            parent.spend_energy(config.mating_cost)
            parent.mating_cooldown = config.mating_cooldown
            parent.offspring += 1

        genome = mutate_genome(blend_genomes(a.genome, b.genome, rng), rng)
        brain = child_brain(a.brain, b.brain, rng, config.crossover)
        mid = (a.pos + b.pos) / 2
        logger.debug("mating %d x %d at (%.1f, %.1f)", a.uid, b.uid, mid.x, mid.y)
        return spawn_child(mid.x, mid.y, genome, brain, config, rng, config.child_jitter)

    def reproduce(self, creatures: Sequence[Creature], config: "SimConfig", rng: random.Random) -> List[Creature]:
        newborns: List[Creature] = []
        mated: Set[Creature] = set()
        population = sum(1 for c in creatures if c.alive)

        for c in creatures:
            if population + len(newborns) >= config.max_population:
                break
            if c in mated or not c.wants_to_mate():
                continue
            partner = self.find_partner(c, creatures, mated, config)
            if partner is None:
                continue
            mated.add(c)
            mated.add(partner)
            newborns.append(self.mate(c, partner, config, rng))
        return newborns


def build_reproduction_policy(config: "SimConfig") -> ReproductionPolicy:
    if config.reproduction == "asexual" or config.mode == "generational":
        return AsexualReproduction()
    return SexualReproduction()
