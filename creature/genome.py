"""
creature_sim module: creature/genome.py

Heritable, non-neural traits of a creature.

Design goals:
- Small, immutable value type (new genomes come only from blend or mutate)
- Morphology drives physics: size sets radius, speed, energy store and drain
- Optionally carries a flattened brain so a genome can rebuild its creature
"""

from __future__ import annotations
import dataclasses
import random
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

BODY_SIZE_RANGE = (5.0, 45.0)
APPENDAGE_RANGE = (0, 6)
APPENDAGE_LENGTH_RANGE = (0.2, 1.5)
MUTATION_RATE_RANGE = (0.05, 0.3)
PATTERNS = (0, 1, 2)  # solid, stripes, spots


def _lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


@dataclass(frozen=True)
class Genome:
    body_size: float
    appendage_count: int
    appendage_length: float
    body_shape: float  # 0 = round, 1 = pointed
    burstiness: float  # 0 = cruise, 1 = burst movement
    hue: float
    pattern_type: int
    mutation_rate: float = 0.15
    brain_weights: Optional[Tuple[float, ...]] = None

    @staticmethod
    def random(rng: random.Random, mutation_rate: float = 0.15) -> "Genome":
        return Genome(
            body_size=rng.uniform(8.0, 30.0),
            appendage_count=rng.randrange(0, 7),
            appendage_length=rng.uniform(0.3, 1.2),
            body_shape=rng.random(),
            burstiness=rng.random(),
            hue=rng.uniform(0.0, 360.0) % 360.0,
            pattern_type=rng.choice(PATTERNS),
            mutation_rate=min(max(mutation_rate, MUTATION_RATE_RANGE[0]), MUTATION_RATE_RANGE[1]),
        )

    def with_brain_weights(self, weights: Optional[Sequence[float]]) -> "Genome":
        return dataclasses.replace(self, brain_weights=None if weights is None else tuple(weights))

    # ---- derived traits ----

    @property
    def radius(self) -> float:
        return self.body_size

    @property
    def max_speed(self) -> float:
        # smaller = faster, appendages boost speed
        base = _lerp(5.0, 1.5, (self.body_size - 5.0) / 35.0)
        return max(0.1, base * (1.0 + self.appendage_count * 0.15))

    @property
    def max_energy(self) -> float:
        return 80.0 + self.body_size * 2.0

    @property
    def start_energy(self) -> float:
        return min(self.max_energy, 50.0 + self.body_size)

    @property
    def base_drain(self) -> float:
        return 0.03 + self.body_size / 500.0 + self.appendage_count * 0.015
