"""
creature_sim module: world/snapshot.py

Read-only views of the simulation. Sensors read a ``WorldView`` taken at the
start of a tick's decision phase; the renderer reads a ``FrameSnapshot``.
Everything here is frozen and holds plain values, never live objects.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class CreatureSnapshot:
    uid: int
    x: float
    y: float
    heading: float
    radius: float
    energy: float
    max_energy: float
    alive: bool
    can_mate: bool
    seeking_mate: bool
    bursting: bool
    hue: float
    pattern_type: int
    body_shape: float
    appendage_count: int
    appendage_length: float
    age: int
    fitness: float

    @property
    def energy_ratio(self) -> float:
        return self.energy / self.max_energy if self.max_energy > 0 else 0.0


@dataclass(frozen=True)
class FoodSnapshot:
    uid: int
    x: float
    y: float
    radius: float


@dataclass(frozen=True)
class WorldView:
    width: float
    height: float
    creatures: Tuple[CreatureSnapshot, ...]
    food: Tuple[FoodSnapshot, ...]


@dataclass(frozen=True)
class SimStats:
    tick: int
    generation: int
    population: int
    food: int
    births: int
    deaths: int
    predations: int
    average_fitness: float
    best_fitness: float


@dataclass(frozen=True)
class FrameSnapshot:
    creatures: Tuple[CreatureSnapshot, ...]
    food: Tuple[FoodSnapshot, ...]
    stats: SimStats
