"""
creature_sim module: world/simulation.py

One tick is a strict sequence of whole-population passes:

    decide -> move -> feed -> predate -> reproduce -> cull -> replenish -> food

Sensors read a WorldView captured before the decide pass. Arena edits
(eaten food, newborns, the dead) are queued and committed between passes.

Continuous mode runs forever with running totals. Generational mode ends a
generation on extinction or after ``generation_ticks`` and rebuilds the
population by elitism + tournament selection.
"""

from __future__ import annotations
from dataclasses import dataclass
import logging
import random
from typing import List, Optional

from config import SimConfig
from creature.creature import Creature
from creature.genome import Genome
from creature.sensors import build_sensor_model
from evolution.reproduction import build_reproduction_policy
from evolution.selection import next_generation
from neural.brain import Brain
from world.food import FoodSpawner
from world.snapshot import FrameSnapshot, SimStats
from world.world import World

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationRecord:
    generation: int
    ticks: int
    population: int
    best_fitness: float
    average_fitness: float


class Simulation:
    def __init__(self, config: Optional[SimConfig] = None, seed: Optional[int] = None):
        self.config = (config or SimConfig()).validate()
        self.seed = seed
        self.rng = random.Random(seed)

        self.sensors = build_sensor_model(self.config)
        self.policy = build_reproduction_policy(self.config)
        self.spawner = FoodSpawner(self.config)
        self.world = World(self.config.width, self.config.height)

        self.tick = 0
        self.generation = 0
        self.generation_tick = 0
        self.births = 0
        self.deaths = 0
        self.predations = 0
        self.graveyard: List[Creature] = []
        self.history: List[GenerationRecord] = []

        self.reset()

    @property
    def generational(self) -> bool:
        return self.config.mode == "generational"

    @property
    def creatures(self) -> List[Creature]:
        return self.world.creatures.values()

    # ---- population ----

    def random_creature(self, genome: Optional[Genome] = None, brain: Optional[Brain] = None) -> Creature:
        cfg = self.config
        mx = min(cfg.spawn_margin, cfg.width / 2.0)
        my = min(cfg.spawn_margin, cfg.height / 2.0)
        if genome is None:
            genome = Genome.random(self.rng, cfg.mutation_rate)
        return Creature(
            self.rng.uniform(mx, cfg.width - mx),
            self.rng.uniform(my, cfg.height - my),
            genome,
            cfg,
            self.rng,
            brain=brain,
        )

    def reset(self) -> None:
        self.world = World(self.config.width, self.config.height)
        for _ in range(self.config.population_size):
            self.world.add_creature(self.random_creature())
        self.spawner.seed(self.world.food, self.rng)
        self.world.commit()

        self.tick = 0
        self.generation = 0
        self.generation_tick = 0
        self.births = 0
        self.deaths = 0
        self.predations = 0
        self.graveyard = []
        self.history = []

    # ---- tick ----

    def advance(self, ticks: int = 1, paused: bool = False) -> int:
        """Host pacing signal: run ``ticks`` steps unless paused. Returns steps run."""
        if paused:
            return 0
        n = max(0, ticks)
        for _ in range(n):
            self.step()
        return n

    def step(self) -> None:
        cfg = self.config
        world = self.world
        creatures = world.creatures.values()

        view = world.view()
        for c in creatures:
            c.think(view, self.sensors, self.rng)

        for c in creatures:
            c.update(cfg.width, cfg.height)

        for c in creatures:
            c.eat(world.food)
        world.food.commit()

        if cfg.predation:
            for c in creatures:
                if c.try_eat_creature(creatures) is not None:
                    self.predations += 1

        newborns = self.policy.reproduce(creatures, cfg, self.rng)
        for child in newborns:
            world.add_creature(child)
        self.births += len(newborns)

        for c in creatures:
            if not c.alive:
                world.creatures.remove(c.uid)
                self.deaths += 1
                if self.generational:
                    self.graveyard.append(c)
        world.creatures.commit()

        if not self.generational:
            self._replenish()

        self.tick += 1
        self.spawner.update(world.food, self.tick, self.rng)
        world.food.commit()

        if self.generational:
            self.generation_tick += 1
            if len(world.creatures) == 0 or self.generation_tick >= cfg.generation_ticks:
                self.end_generation()

    def _replenish(self) -> None:
        cfg = self.config
        if len(self.world.creatures) >= cfg.population_floor:
            return
        logger.info(
            "population %d below floor %d at tick %d, adding %d",
            len(self.world.creatures), cfg.population_floor, self.tick, cfg.replenish_count,
        )
        for _ in range(cfg.replenish_count):
            self.world.add_creature(self.random_creature())
        self.world.creatures.commit()

    # ---- generations ----

    def end_generation(self) -> List[Creature]:
        scored = self.graveyard + self.creatures
        fits = [c.fitness for c in scored]
        record = GenerationRecord(
            generation=self.generation,
            ticks=self.generation_tick,
            population=len(scored),
            best_fitness=max(fits, default=0.0),
            average_fitness=sum(fits) / len(fits) if fits else 0.0,
        )
        self.history.append(record)
        logger.info(
            "generation %d ended after %d ticks: %d scored, best %.1f, avg %.1f",
            record.generation, record.ticks, record.population, record.best_fitness, record.average_fitness,
        )

        new_pop = next_generation(
            scored,
            self.config.population_size,
            self.config,
            self.rng,
            lambda genome, brain: self.random_creature(genome, brain),
        )

        world = self.world
        world.creatures.clear()
        world.food.clear()
        world.commit()
        for c in new_pop:
            world.add_creature(c)
        self.spawner.seed(world.food, self.rng)
        world.commit()

        self.graveyard = []
        self.generation += 1
        self.generation_tick = 0
        return new_pop

    # ---- views ----

    def stats(self) -> SimStats:
        pool = self.creatures
        if self.generational:
            pool = self.graveyard + pool
        fits = [c.fitness for c in pool]
        return SimStats(
            tick=self.tick,
            generation=self.generation,
            population=len(self.world.creatures),
            food=len(self.world.food),
            births=self.births,
            deaths=self.deaths,
            predations=self.predations,
            average_fitness=sum(fits) / len(fits) if fits else 0.0,
            best_fitness=max(fits, default=0.0),
        )

    def snapshot(self) -> FrameSnapshot:
        return FrameSnapshot(
            creatures=tuple(c.snapshot() for c in self.creatures),
            food=self.world.food_snapshots(),
            stats=self.stats(),
        )
