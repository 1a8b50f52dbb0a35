"""
creature_sim module: evolution/selection.py

Selection helpers for generational mode: fitness ranking, tournament
selection and the end-of-generation rebuild (elitism + offspring).
"""

from __future__ import annotations
import random
from typing import Callable, List, Optional, Sequence, TYPE_CHECKING

from creature.creature import Creature
from creature.genome import Genome
from evolution.mutate import blend_genomes, child_brain, mutate_genome
from neural.brain import Brain

if TYPE_CHECKING:
    from config import SimConfig

# (genome, brain or None) -> creature at a fresh random position
Spawn = Callable[[Genome, Optional[Brain]], Creature]


def rank_by_fitness(pop: Sequence[Creature]) -> List[Creature]:
    return sorted(pop, key=lambda c: c.fitness, reverse=True)


def select_top(pop: Sequence[Creature], k: int) -> List[Creature]:
    return rank_by_fitness(pop)[:k]


def tournament_select(pool: Sequence[Creature], rng: random.Random, size: int = 3) -> Optional[Creature]:
    """Sample ``size`` candidates uniformly (with replacement) and keep the fittest."""
    if not pool:
        return None
    best = None
    for _ in range(size):
        candidate = pool[rng.randrange(len(pool))]
        if best is None or candidate.fitness > best.fitness:
            best = candidate
    return best


def next_generation(
    scored: Sequence[Creature],
    pop_size: int,
    config: "SimConfig",
    rng: random.Random,
    spawn: Spawn,
) -> List[Creature]:
    """
    Build the next cohort of exactly ``pop_size`` creatures.

    - The top ``config.elitism`` keep their genome and an unmutated copy of
      their brain.
    - Every other slot gets two tournament winners crossed over and mutated.
      A pool of one falls back to a mutated clone, an empty pool to a fresh
      random creature.
    """
    ranked = rank_by_fitness(scored)
    new_pop: List[Creature] = []

    for elite in ranked[: min(config.elitism, pop_size)]:
        new_pop.append(spawn(elite.genome.with_brain_weights(elite.brain.get_weights()), elite.brain.clone()))

    while len(new_pop) < pop_size:
        a = tournament_select(ranked, rng, config.tournament_size)
        if a is None:
            new_pop.append(spawn(Genome.random(rng, config.mutation_rate), None))
            continue

        b = tournament_select(ranked, rng, config.tournament_size) if len(ranked) > 1 else None
        if b is None:
            genome = mutate_genome(a.genome, rng)
            brain = child_brain(a.brain, None, rng)
        else:
            genome = mutate_genome(blend_genomes(a.genome, b.genome, rng), rng)
            brain = child_brain(a.brain, b.brain, rng, config.crossover)
        new_pop.append(spawn(genome.with_brain_weights(brain.get_weights()), brain))

    return new_pop
