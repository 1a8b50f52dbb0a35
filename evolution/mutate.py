"""
creature_sim module: evolution/mutate.py

Variation operators for genomes (morphology) and brains (weights + biases).
Genomes are immutable, so every operator here returns a new one.
"""

from __future__ import annotations
import random
from typing import Optional

from creature.genome import (
    APPENDAGE_RANGE,
    APPENDAGE_LENGTH_RANGE,
    BODY_SIZE_RANGE,
    MUTATION_RATE_RANGE,
    PATTERNS,
    Genome,
)
from neural.brain import Brain


def _clamp(v: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, v))


def _jitter(rng: random.Random, p: float, v: float, lo: float, hi: float, strength: float) -> float:
    if rng.random() < p:
        return _clamp(v + rng.gauss(0.0, 1.0) * (hi - lo) * strength, lo, hi)
    return v


def mutate_genome(genome: Genome, rng: random.Random) -> Genome:
    """
    Return a mutated copy of ``genome``.

    - Continuous traits jitter with probability ``genome.mutation_rate``,
      scaled by the trait's range.
    - Appendages step by one with half that probability.
    - Hue always drifts a little; pattern is occasionally re-rolled.
    - The carried brain is dropped: the caller attaches the child's.
    """
    p = genome.mutation_rate

    appendages = genome.appendage_count
    if rng.random() < p * 0.5:
        appendages = int(_clamp(appendages + rng.choice((-1, 1)), *APPENDAGE_RANGE))

    pattern = genome.pattern_type
    if rng.random() < p * 0.3:
        pattern = rng.choice(PATTERNS)

    return Genome(
        body_size=_jitter(rng, p, genome.body_size, *BODY_SIZE_RANGE, strength=0.15),
        appendage_count=appendages,
        appendage_length=_jitter(rng, p, genome.appendage_length, *APPENDAGE_LENGTH_RANGE, strength=0.1),
        body_shape=_jitter(rng, p, genome.body_shape, 0.0, 1.0, strength=0.1),
        burstiness=_jitter(rng, p, genome.burstiness, 0.0, 1.0, strength=0.1),
        hue=(genome.hue + rng.gauss(0.0, 15.0)) % 360.0,
        pattern_type=pattern,
        mutation_rate=_jitter(rng, p, genome.mutation_rate, *MUTATION_RATE_RANGE, strength=0.05),
        brain_weights=None,
    )


def blend_genomes(a: Genome, b: Genome, rng: random.Random) -> Genome:
    """Numeric traits lerp by an independent U(0, 1); discrete traits pick a parent."""

    def lerp(x: float, y: float) -> float:
        return x + (y - x) * rng.random()

    def pick(x, y):
        return x if rng.random() < 0.5 else y

    return Genome(
        body_size=lerp(a.body_size, b.body_size),
        appendage_count=pick(a.appendage_count, b.appendage_count),
        appendage_length=lerp(a.appendage_length, b.appendage_length),
        body_shape=lerp(a.body_shape, b.body_shape),
        burstiness=lerp(a.burstiness, b.burstiness),
        hue=lerp(a.hue, b.hue) % 360.0,
        pattern_type=pick(a.pattern_type, b.pattern_type),
        mutation_rate=lerp(a.mutation_rate, b.mutation_rate),
        brain_weights=None,
    )


def mutate_brain(brain: Brain, rng: random.Random) -> Brain:
    """Mutate in-place using the brain's own adaptive rate/magnitude; returns it for chaining."""
    brain.mutate(rng)
    return brain


def cross_brains(a: Brain, b: Brain, rng: random.Random, strategy: str = "blend") -> Brain:
    if strategy == "uniform":
        return a.uniform_crossover(b, rng)
    return a.crossover(b, rng)


def child_brain(a: Brain, b: Optional[Brain], rng: random.Random, strategy: str = "blend") -> Brain:
    """Crossover (or clone, for a single parent) followed by mutation."""
    brain = a.clone() if b is None else cross_brains(a, b, rng, strategy)
    return mutate_brain(brain, rng)
