"""
Simulation tuning knobs.

Module constants are the defaults; ``SimConfig`` bundles them into an explicit,
immutable configuration that the simulation reads but never mutates. The host
loop owns the live copy and derives tuned ones with ``SimConfig.replace``.
"""

from __future__ import annotations
import dataclasses
import functools
import math
from dataclasses import dataclass
from typing import Optional

# Population controls
START_POP = 25
MAX_POP = 200
POPULATION_FLOOR = 8
REPLENISH_COUNT = 5

# Environment
SCREEN_W, SCREEN_H = 980, 720
SPAWN_MARGIN = 100.0

# Runtime pacing
SIM_SPEED = 1  # simulation ticks per rendered frame
SPEED_OPTIONS = (1, 2, 5, 10)

# Food
INITIAL_FOOD = 50
FOOD_SPAWN_RATE = 1
FOOD_RADIUS = 5.0
FOOD_ENERGY = 25.0
FOOD_MARGIN = 40.0

# Brain shape
HIDDEN_SIZE = 10
OUTPUT_SIZE = 3  # turn, speed, mate/burst gate

# Movement
TURN_SCALE = 0.2
TURN_COST = 5.0
STEER_LERP = 0.1
BOUNCE_DAMPING = 0.5
BURST_MULTIPLIER = 2.5
BURST_DRAIN = 3.0
BURST_COOLDOWN = 60
BURST_TRIGGER = 0.7

# Predation
PREDATION_RATIO = 1.4
PREDATION_ENERGY_SHARE = 0.5

# Mating (sexual, real-time)
MATE_THRESHOLD = 0.7  # fraction of max energy
MATING_COST = 30.0
MATING_COOLDOWN = 200
CONTACT_MARGIN = 10.0
MATE_SIZE_TOLERANCE = 10.0
CHILD_ENERGY = 60.0
CHILD_SPAWN_JITTER = 20.0

# Asexual reproduction
ASEXUAL_THRESHOLD = 0.8  # fraction of max energy
ASEXUAL_COST = 35.0
ASEXUAL_COOLDOWN = 120

# Sensors
SENSE_RADIUS = 200.0
RAY_COUNT = 8
RAY_LENGTH = 200.0

# Generational mode
GENERATION_TICKS = 1500
ELITISM = 2
TOURNAMENT_SIZE = 3
MUTATION_RATE = 0.15

MODES = ("continuous", "generational")
REPRODUCTION_MODES = ("sexual", "asexual")
SENSOR_MODELS = ("nearest", "raycast")
CROSSOVER_MODES = ("blend", "uniform")
FITNESS_FORMULAS = ("linear", "quadratic")
STEERING_MODES = ("direct", "lerp")


class ConfigError(ValueError):
    """Raised when a configuration cannot drive a simulation."""


@dataclass(frozen=True)
class SimConfig:
    # population + arena
    population_size: int = START_POP
    max_population: int = MAX_POP
    population_floor: int = POPULATION_FLOOR
    replenish_count: int = REPLENISH_COUNT
    width: float = SCREEN_W
    height: float = SCREEN_H
    spawn_margin: float = SPAWN_MARGIN

    # food
    initial_food: int = INITIAL_FOOD
    food_spawn_rate: int = FOOD_SPAWN_RATE
    food_cap: Optional[int] = None  # None -> 50 + 25 * rate
    food_radius: float = FOOD_RADIUS
    food_energy: float = FOOD_ENERGY
    food_margin: float = FOOD_MARGIN

    # strategy selection
    mode: str = "continuous"
    reproduction: str = "sexual"
    sensors: str = "nearest"
    crossover: str = "blend"
    fitness: str = "linear"
    steering: str = "lerp"
    predation: bool = True
    bursts: bool = True
    passive_drifters: bool = True
    require_mate_intent: bool = False

    # brain
    input_size: Optional[int] = None  # None -> whatever the sensor model emits
    hidden_size: int = HIDDEN_SIZE
    output_size: int = OUTPUT_SIZE

    # movement + metabolism
    turn_scale: float = TURN_SCALE
    turn_cost: float = TURN_COST
    steer_lerp: float = STEER_LERP
    bounce_damping: float = BOUNCE_DAMPING
    burst_multiplier: float = BURST_MULTIPLIER
    burst_drain: float = BURST_DRAIN
    burst_cooldown: int = BURST_COOLDOWN
    burst_trigger: float = BURST_TRIGGER

    # predation
    predation_ratio: float = PREDATION_RATIO
    predation_energy_share: float = PREDATION_ENERGY_SHARE

    # reproduction
    mate_threshold: float = MATE_THRESHOLD
    mating_cost: float = MATING_COST
    mating_cooldown: int = MATING_COOLDOWN
    contact_margin: float = CONTACT_MARGIN
    mate_size_tolerance: float = MATE_SIZE_TOLERANCE
    child_energy: float = CHILD_ENERGY
    child_jitter: float = CHILD_SPAWN_JITTER
    asexual_threshold: float = ASEXUAL_THRESHOLD
    asexual_cost: float = ASEXUAL_COST
    asexual_cooldown: int = ASEXUAL_COOLDOWN

    # sensors
    sense_radius: float = SENSE_RADIUS
    ray_count: int = RAY_COUNT
    ray_length: float = RAY_LENGTH
    ray_fov: float = 2 * math.pi

    # generational
    generation_ticks: int = GENERATION_TICKS
    elitism: int = ELITISM
    tournament_size: int = TOURNAMENT_SIZE
    mutation_rate: float = MUTATION_RATE

    def replace(self, **changes) -> "SimConfig":
        return dataclasses.replace(self, **changes)

    @property
    def max_food(self) -> int:
        if self.food_cap is not None:
            return self.food_cap
        return 50 + self.food_spawn_rate * 25

    @property
    def food_spawn_interval(self) -> int:
        return max(1, 12 // max(1, self.food_spawn_rate))

    def validate(self) -> "SimConfig":
        """
        Reject configurations the core cannot run. Sensor/action sizes are
        checked here too, so a bad brain shape fails before the first tick.
        """
        for name, value, allowed in (
            ("mode", self.mode, MODES),
            ("reproduction", self.reproduction, REPRODUCTION_MODES),
            ("sensors", self.sensors, SENSOR_MODELS),
            ("crossover", self.crossover, CROSSOVER_MODES),
            ("fitness", self.fitness, FITNESS_FORMULAS),
            ("steering", self.steering, STEERING_MODES),
        ):
            if value not in allowed:
                raise ConfigError(f"{name} must be one of {allowed}, got {value!r}")

        if self.population_size < 1:
            raise ConfigError("population_size must be positive")
        if self.width <= 0 or self.height <= 0:
            raise ConfigError("arena width and height must be positive")
        if self.hidden_size < 1:
            raise ConfigError("hidden_size must be positive")
        if self.sensors == "raycast" and self.ray_count < 1:
            raise ConfigError("ray_count must be positive")
        if self.mode == "generational":
            if not 0 <= self.elitism <= self.population_size:
                raise ConfigError("elitism must lie in [0, population_size]")
            if self.generation_ticks < 1:
                raise ConfigError("generation_ticks must be positive")
            if self.tournament_size < 1:
                raise ConfigError("tournament_size must be positive")
            if not 0.0 <= self.mutation_rate <= 1.0:
                raise ConfigError("mutation_rate must lie in [0, 1]")

        if self.output_size != OUTPUT_SIZE:
            raise ConfigError(
                f"action mapping reads {OUTPUT_SIZE} brain outputs, output_size is {self.output_size}"
            )

        expected = self.brain_input_size
        if self.input_size is not None and self.input_size != expected:
            raise ConfigError(
                f"{self.sensors} sensors emit {expected} inputs, input_size is {self.input_size}"
            )
        return self

    @functools.cached_property
    def brain_input_size(self) -> int:
        """Input width of the configured sensor model, computed once per config."""
        # local import: sensors import config for the defaults
        from creature.sensors import build_sensor_model

        return build_sensor_model(self).input_size


# Profiles. Each pins one crossover strategy and one fitness formula.
MORPHOLOGY = SimConfig()

SWARM = SimConfig(
    sensors="raycast",
    fitness="quadratic",
    predation=False,
    bursts=False,
    passive_drifters=False,
    steering="direct",
    require_mate_intent=True,
)

GENERATIONAL = SimConfig(
    mode="generational",
    reproduction="asexual",
    sensors="raycast",
    crossover="uniform",
    fitness="quadratic",
    predation=False,
    bursts=False,
    passive_drifters=False,
    steering="direct",
    population_size=30,
    population_floor=0,
)

PROFILES = {
    "morphology": MORPHOLOGY,
    "swarm": SWARM,
    "generational": GENERATIONAL,
}
