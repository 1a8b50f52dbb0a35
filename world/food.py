"""
creature_sim module: world/food.py

Food system:
- Food items are immutable points with a radius
- A spawner drips single items in at a configurable rate up to a cap
- Items leave the world only by being eaten
"""

from __future__ import annotations
from dataclasses import dataclass
import random
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from config import SimConfig
    from world.world import Arena


@dataclass(frozen=True)
class Food:
    x: float
    y: float
    radius: float = 5.0


class FoodSpawner:
    def __init__(self, config: "SimConfig"):
        self.w = config.width
        self.h = config.height
        self.margin = config.food_margin
        self.radius = config.food_radius
        self.initial = config.initial_food
        self.interval = config.food_spawn_interval
        self.cap = config.max_food

    def _make(self, rng: random.Random) -> Food:
        margin = min(self.margin, self.w / 2.0, self.h / 2.0)
        return Food(
            x=rng.uniform(margin, self.w - margin),
            y=rng.uniform(margin, self.h - margin),
            radius=self.radius,
        )

    def seed(self, food: "Arena[Food]", rng: random.Random) -> None:
        for _ in range(self.initial):
            food.spawn(self._make(rng))
        food.commit()

    def update(self, food: "Arena[Food]", tick: int, rng: random.Random) -> bool:
        """
        Queue at most one new item on ticks that land on the spawn interval.
        Returns True if an item was queued.
        """
        if tick % self.interval != 0:
            return False
        if food.size_after_commit() >= self.cap:
            return False
        food.spawn(self._make(rng))
        return True
