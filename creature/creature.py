"""
creature_sim module: creature/creature.py

A creature couples a Brain with a Genome and a physical state. The
simulation drives it through whole-population passes each tick:

    think -> update (move, bounce, metabolize) -> eat -> predation -> mating

Death is terminal. Fitness is derived from lifetime counters on demand and
frozen at the moment of death.
"""

from __future__ import annotations
import math
import random
from typing import Iterable, Optional, Sequence, TYPE_CHECKING

from pygame.math import Vector2

from config import ConfigError
from creature.genome import Genome
from neural.brain import Brain
from world.physics import bounce, normalize_heading
from world.snapshot import CreatureSnapshot, WorldView

if TYPE_CHECKING:
    from config import SimConfig
    from creature.sensors import SensorModel
    from world.food import Food
    from world.world import Arena


def fitness_score(food_eaten: int, offspring: int, age: int, formula: str = "linear") -> float:
    if formula == "quadratic":
        # super-linear in food eaten
        return food_eaten * food_eaten * 50.0 + offspring * 200.0 + age * 0.05
    return food_eaten * 100.0 + age * 0.1


class Creature:
    def __init__(
        self,
        x: float,
        y: float,
        genome: Genome,
        config: "SimConfig",
        rng: random.Random,
        brain: Optional[Brain] = None,
    ):
        self.uid = -1
        self.config = config
        self.genome = genome

        expected = (config.brain_input_size, config.hidden_size, config.output_size)
        if brain is None:
            brain = Brain(*expected, rng=rng, mutation_rate=config.mutation_rate)
            if genome.brain_weights is not None:
                brain.set_weights(genome.brain_weights)
        if brain.shape != expected:
            raise ConfigError(f"brain shape {brain.shape} does not match sensors/actions {expected}")
        self.brain = brain

        self.pos = Vector2(x, y)
        self.vel = Vector2(rng.uniform(-1.0, 1.0), rng.uniform(-1.0, 1.0))
        self.heading = rng.uniform(0.0, 2.0 * math.pi)
        self.turn_rate = 0.0

        self.radius = genome.radius
        self.max_speed = genome.max_speed
        self.max_energy = genome.max_energy
        self.energy = genome.start_energy
        self.base_drain = genome.base_drain

        self.age = 0
        self.alive = True
        self.mating_cooldown = 0
        self.burst_cooldown = 0
        self.bursting = False
        self.seeking_mate = False

        self.food_eaten = 0
        self.offspring = 0
        self.creatures_eaten = 0
        self._final_fitness: Optional[float] = None

    def __repr__(self) -> str:
        state = "alive" if self.alive else "dead"
        return f"Creature(uid={self.uid}, pos=({self.pos.x:.1f}, {self.pos.y:.1f}), energy={self.energy:.1f}, {state})"

    # ---- vitals ----

    @property
    def fitness(self) -> float:
        if self._final_fitness is not None:
            return self._final_fitness
        return fitness_score(self.food_eaten, self.offspring, self.age, self.config.fitness)

    def die(self) -> None:
        if not self.alive:
            return
        self.alive = False
        self.energy = max(0.0, self.energy)
        self.bursting = False
        self.seeking_mate = False
        self._final_fitness = fitness_score(self.food_eaten, self.offspring, self.age, self.config.fitness)

    def gain_energy(self, amount: float) -> None:
        self.energy = min(self.energy + amount, self.max_energy)

    def spend_energy(self, amount: float) -> None:
        self.energy = max(0.0, self.energy - amount)
        if self.energy <= 0.0:
            self.die()

    # ---- decide ----

    def think(self, view: WorldView, sensors: "SensorModel", rng: random.Random) -> None:
        if not self.alive:
            return
        self.decide(self.brain.forward(sensors.sense(self, view)), rng)

    def decide(self, outputs: Sequence[float], rng: random.Random) -> None:
        cfg = self.config

        self.turn_rate = (outputs[0] - 0.5) * cfg.turn_scale
        self.heading = normalize_heading(self.heading + self.turn_rate)

        target_speed = outputs[1] * self.max_speed
        gate = outputs[2] > 0.5
        self.seeking_mate = gate and self.can_mate()

        if (
            cfg.bursts
            and self.genome.burstiness > 0.5
            and outputs[2] > cfg.burst_trigger
            and self.burst_cooldown == 0
        ):
            self.bursting = True
            self.burst_cooldown = cfg.burst_cooldown
            target_speed *= cfg.burst_multiplier

        if cfg.passive_drifters and self.genome.appendage_count == 0:
            # no appendages: cannot steer, slow random drift
            a = rng.uniform(0.0, 2.0 * math.pi)
            self.vel = self.vel * 0.98 + Vector2(math.cos(a), math.sin(a)) * 0.1
            return

        target = Vector2(math.cos(self.heading), math.sin(self.heading)) * target_speed
        if cfg.steering == "lerp":
            self.vel = self.vel.lerp(target, cfg.steer_lerp)
        else:
            self.vel = target

    # ---- move + metabolize ----

    def update(self, w: float, h: float) -> None:
        if not self.alive:
            return
        cfg = self.config

        self.pos += self.vel
        self.heading = bounce(self.pos, self.vel, self.heading, self.radius, w, h, cfg.bounce_damping)

        drain = self.base_drain
        drain *= 1.0 + self.vel.length() / self.max_speed
        drain *= 1.0 + abs(self.turn_rate) * cfg.turn_cost
        if self.bursting:
            drain *= cfg.burst_drain
        self.energy = max(0.0, self.energy - drain)

        if self.burst_cooldown > 0:
            self.burst_cooldown -= 1
        if self.burst_cooldown == 0:
            self.bursting = False
        if self.mating_cooldown > 0:
            self.mating_cooldown -= 1

        self.age += 1

        if self.energy <= 0.0:
            self.die()

    # ---- feeding + predation ----

    def eat(self, food: "Arena[Food]") -> bool:
        """Consume the nearest overlapping food item. Removal is queued on the arena."""
        if not self.alive:
            return False

        best_uid = None
        best_d = math.inf
        for uid, f in food.items():
            d = math.hypot(f.x - self.pos.x, f.y - self.pos.y)
            if d < self.radius + f.radius and d < best_d:
                best_uid = uid
                best_d = d

        if best_uid is None:
            return False
        food.remove(best_uid)
        self.gain_energy(self.config.food_energy)
        self.food_eaten += 1
        return True

    def can_eat(self, other: "Creature") -> bool:
        return self.radius >= other.radius * self.config.predation_ratio

    def try_eat_creature(self, creatures: Iterable["Creature"]) -> Optional["Creature"]:
        if not self.alive:
            return None

        for other in creatures:
            if other is self or not other.alive or not self.can_eat(other):
                continue
            d = self.pos.distance_to(other.pos)
            if d < self.radius + other.radius * 0.5:
                self.gain_energy(other.energy * self.config.predation_energy_share + other.radius)
                self.creatures_eaten += 1
                other.die()
                return other
        return None

    # ---- reproduction eligibility ----

    def can_mate(self) -> bool:
        return (
            self.alive
            and self.energy >= self.max_energy * self.config.mate_threshold
            and self.mating_cooldown == 0
        )

    def wants_to_mate(self) -> bool:
        if not self.can_mate():
            return False
        return self.seeking_mate or not self.config.require_mate_intent

    def can_reproduce(self) -> bool:
        return (
            self.alive
            and self.energy >= self.max_energy * self.config.asexual_threshold
            and self.mating_cooldown == 0
        )

    def is_size_compatible(self, other: "Creature") -> bool:
        if not self.config.predation:
            return True
        return abs(self.radius - other.radius) <= self.config.mate_size_tolerance

    # ---- views ----

    def snapshot(self) -> CreatureSnapshot:
        g = self.genome
        return CreatureSnapshot(
            uid=self.uid,
            x=self.pos.x,
            y=self.pos.y,
            heading=self.heading,
            radius=self.radius,
            energy=self.energy,
            max_energy=self.max_energy,
            alive=self.alive,
            can_mate=self.can_mate(),
            seeking_mate=self.seeking_mate,
            bursting=self.bursting,
            hue=g.hue,
            pattern_type=g.pattern_type,
            body_shape=g.body_shape,
            appendage_count=g.appendage_count,
            appendage_length=g.appendage_length,
            age=self.age,
            fitness=self.fitness,
        )
