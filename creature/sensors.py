"""
creature_sim module: creature/sensors.py

Sensor models turn a ``WorldView`` into a brain's input vector. Two
interchangeable strategies exist:

- ``NearestEntitySensors``: proximity + bearing of the closest food, mate,
  prey and threat within a sense radius, plus four wall distances
- ``RaycastSensors``: N rays around the heading; per ray the activation of
  the closest food, mate and wall hit

Both end with the creature's energy ratio and speed ratio. ``input_size`` is
the contract with the owning Brain.
"""

from __future__ import annotations
import math
from typing import List, Optional, Tuple, TYPE_CHECKING

from world.physics import bearing, ray_box, ray_circle
from world.snapshot import CreatureSnapshot, WorldView

if TYPE_CHECKING:
    from config import SimConfig
    from creature.creature import Creature


def _vitals(creature: "Creature") -> List[float]:
    return [
        creature.energy / creature.max_energy,
        creature.vel.length() / creature.max_speed,
    ]


def is_mate_candidate(creature: "Creature", other: CreatureSnapshot, size_tolerance: Optional[float]) -> bool:
    if other.uid == creature.uid or not other.alive or not other.can_mate:
        return False
    if size_tolerance is not None and abs(creature.radius - other.radius) > size_tolerance:
        return False
    return True


class SensorModel:
    input_size: int = 0

    def sense(self, creature: "Creature", view: WorldView) -> List[float]:
        raise NotImplementedError


class NearestEntitySensors(SensorModel):
    def __init__(
        self,
        sense_radius: float = 200.0,
        mates: bool = True,
        predation: bool = False,
        predation_ratio: float = 1.4,
        mate_size_tolerance: Optional[float] = None,
    ):
        self.sense_radius = sense_radius
        self.mates = mates
        self.predation = predation
        self.predation_ratio = predation_ratio
        self.mate_size_tolerance = mate_size_tolerance

        self.input_size = 2 + 4 + 2
        if mates:
            self.input_size += 2
        if predation:
            self.input_size += 4

    def _signal(self, d: float, angle: float) -> Tuple[float, float]:
        # beyond the radius -> max distance, no bearing
        if d >= self.sense_radius:
            return 0.0, 0.0
        return 1.0 - d / self.sense_radius, angle / math.pi

    def sense(self, creature: "Creature", view: WorldView) -> List[float]:
        pos = creature.pos
        heading = creature.heading

        food_d, food_a = self.sense_radius, 0.0
        for f in view.food:
            d = math.hypot(f.x - pos.x, f.y - pos.y)
            if d < food_d:
                food_d = d
                food_a = bearing(pos, heading, f.x, f.y)

        mate_d, mate_a = self.sense_radius, 0.0
        prey_d, prey_a = self.sense_radius, 0.0
        threat_d, threat_a = self.sense_radius, 0.0
        for other in view.creatures:
            if other.uid == creature.uid or not other.alive:
                continue
            d = math.hypot(other.x - pos.x, other.y - pos.y)
            if self.mates and d < mate_d and is_mate_candidate(creature, other, self.mate_size_tolerance):
                mate_d = d
                mate_a = bearing(pos, heading, other.x, other.y)
            if self.predation:
                if creature.radius >= other.radius * self.predation_ratio and d < prey_d:
                    prey_d = d
                    prey_a = bearing(pos, heading, other.x, other.y)
                if other.radius >= creature.radius * self.predation_ratio and d < threat_d:
                    threat_d = d
                    threat_a = bearing(pos, heading, other.x, other.y)

        inputs = list(self._signal(food_d, food_a))
        inputs += [
            pos.y / view.height,
            (view.height - pos.y) / view.height,
            pos.x / view.width,
            (view.width - pos.x) / view.width,
        ]
        if self.mates:
            inputs += self._signal(mate_d, mate_a)
        if self.predation:
            inputs += self._signal(prey_d, prey_a)
            inputs += self._signal(threat_d, threat_a)
        return inputs + _vitals(creature)


class RaycastSensors(SensorModel):
    CHANNELS = 3  # food, mate, wall

    def __init__(
        self,
        ray_count: int = 8,
        ray_length: float = 200.0,
        fov: float = 2 * math.pi,
        mate_size_tolerance: Optional[float] = None,
    ):
        self.ray_count = ray_count
        self.ray_length = ray_length
        self.fov = min(fov, 2 * math.pi)
        self.mate_size_tolerance = mate_size_tolerance
        self.input_size = ray_count * self.CHANNELS + 2

    def ray_offsets(self) -> List[float]:
        """Heading-relative ray angles, evenly spaced and centred on the heading."""
        step = self.fov / self.ray_count
        if self.fov >= 2 * math.pi:
            return [i * step for i in range(self.ray_count)]
        return [-self.fov / 2.0 + step * (i + 0.5) for i in range(self.ray_count)]

    def _activation(self, t: Optional[float]) -> float:
        if t is None:
            return 0.0
        return 1.0 - t / self.ray_length

    def sense(self, creature: "Creature", view: WorldView) -> List[float]:
        ox, oy = creature.pos.x, creature.pos.y
        mates = [
            c for c in view.creatures if is_mate_candidate(creature, c, self.mate_size_tolerance)
        ]

        inputs: List[float] = []
        for offset in self.ray_offsets():
            angle = creature.heading + offset
            dx, dy = math.cos(angle), math.sin(angle)

            food_t: Optional[float] = None
            for f in view.food:
                t = ray_circle(ox, oy, dx, dy, f.x, f.y, f.radius, self.ray_length)
                if t is not None and (food_t is None or t < food_t):
                    food_t = t

            mate_t: Optional[float] = None
            for m in mates:
                t = ray_circle(ox, oy, dx, dy, m.x, m.y, m.radius, self.ray_length)
                if t is not None and (mate_t is None or t < mate_t):
                    mate_t = t

            wall_t = ray_box(ox, oy, dx, dy, view.width, view.height, self.ray_length)
            inputs += [self._activation(food_t), self._activation(mate_t), self._activation(wall_t)]

        return inputs + _vitals(creature)


def build_sensor_model(config: "SimConfig") -> SensorModel:
    tolerance = config.mate_size_tolerance if config.predation else None
    if config.sensors == "raycast":
        return RaycastSensors(
            ray_count=config.ray_count,
            ray_length=config.ray_length,
            fov=config.ray_fov,
            mate_size_tolerance=tolerance,
        )
    return NearestEntitySensors(
        sense_radius=config.sense_radius,
        mates=config.reproduction == "sexual",
        predation=config.predation,
        predation_ratio=config.predation_ratio,
        mate_size_tolerance=tolerance,
    )
