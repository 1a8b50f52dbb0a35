"""
creature_sim module: world/world.py

World state container: arena bounds plus creature and food arenas.

An ``Arena`` keys entities by stable integer ids. Additions and removals
requested during a phase are queued and applied together by ``commit()``,
so no pass ever scans a collection that is changing underneath it.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Generic, Iterator, List, Set, Tuple, TypeVar, TYPE_CHECKING

from world.food import Food
from world.snapshot import FoodSnapshot, WorldView

if TYPE_CHECKING:
    from creature.creature import Creature

T = TypeVar("T")


class Arena(Generic[T]):
    def __init__(self) -> None:
        self._items: Dict[int, T] = {}
        self._next_id = 0
        self._pending_add: List[Tuple[int, T]] = []
        self._pending_remove: Set[int] = set()

    def spawn(self, item: T) -> int:
        uid = self._next_id
        self._next_id += 1
        self._pending_add.append((uid, item))
        return uid

    def remove(self, uid: int) -> None:
        if uid in self._items:
            self._pending_remove.add(uid)

    def is_removed(self, uid: int) -> bool:
        return uid in self._pending_remove

    def commit(self) -> Tuple[int, int]:
        """Apply queued removals, then additions. Returns (removed, added)."""
        removed = 0
        for uid in self._pending_remove:
            if self._items.pop(uid, None) is not None:
                removed += 1
        added = len(self._pending_add)
        for uid, item in self._pending_add:
            self._items[uid] = item
        self._pending_remove.clear()
        self._pending_add.clear()
        return removed, added

    def clear(self) -> None:
        for uid in self._items:
            self._pending_remove.add(uid)
        self._pending_add.clear()

    def items(self) -> List[Tuple[int, T]]:
        """Committed entries not queued for removal, in insertion order (a copy)."""
        return [(uid, item) for uid, item in self._items.items() if uid not in self._pending_remove]

    def values(self) -> List[T]:
        return [item for _, item in self.items()]

    def get(self, uid: int) -> T | None:
        return self._items.get(uid)

    def size_after_commit(self) -> int:
        return len(self._items) - len(self._pending_remove) + len(self._pending_add)

    def __contains__(self, uid: object) -> bool:
        return uid in self._items and uid not in self._pending_remove

    def __iter__(self) -> Iterator[T]:
        return iter(self.values())

    def __len__(self) -> int:
        # same view as iteration: queued removals gone, queued additions not yet in
        return len(self._items) - len(self._pending_remove)


@dataclass
class World:
    w: float
    h: float
    creatures: Arena["Creature"] = field(default_factory=Arena)
    food: Arena[Food] = field(default_factory=Arena)

    def add_creature(self, creature: "Creature") -> int:
        creature.uid = self.creatures.spawn(creature)
        return creature.uid

    def commit(self) -> None:
        self.creatures.commit()
        self.food.commit()

    def food_snapshots(self) -> Tuple[FoodSnapshot, ...]:
        return tuple(FoodSnapshot(uid=uid, x=f.x, y=f.y, radius=f.radius) for uid, f in self.food.items())

    def view(self) -> WorldView:
        return WorldView(
            width=self.w,
            height=self.h,
            creatures=tuple(c.snapshot() for c in self.creatures),
            food=self.food_snapshots(),
        )
