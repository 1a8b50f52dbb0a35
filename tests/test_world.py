import pytest

from config import SimConfig
from world.food import Food, FoodSpawner
from world.world import Arena, World


def test_arena_defers_additions():
    arena = Arena()
    uid = arena.spawn("a")
    assert len(arena) == 0
    assert uid not in arena
    assert arena.size_after_commit() == 1

    assert arena.commit() == (0, 1)
    assert uid in arena
    assert arena.get(uid) == "a"
    assert arena.values() == ["a"]


def test_arena_defers_removals():
    arena = Arena()
    a = arena.spawn("a")
    b = arena.spawn("b")
    arena.commit()

    arena.remove(a)
    assert arena.is_removed(a)
    assert a not in arena
    assert len(arena) == len(list(arena)) == 1
    assert arena.items() == [(b, "b")]
    assert arena.size_after_commit() == 1

    assert arena.commit() == (1, 0)
    assert len(arena) == 1
    assert arena.get(a) is None


def test_arena_ignores_removal_of_uncommitted_ids():
    arena = Arena()
    uid = arena.spawn("x")
    arena.remove(uid)
    arena.commit()
    assert uid in arena


def test_arena_ids_are_never_reused():
    arena = Arena()
    first = arena.spawn("a")
    arena.commit()
    arena.remove(first)
    arena.commit()
    assert arena.spawn("b") != first


def test_arena_clear():
    arena = Arena()
    arena.spawn(1)
    arena.spawn(2)
    arena.commit()
    arena.spawn(3)
    arena.clear()
    assert arena.commit() == (2, 0)
    assert len(arena) == 0


def test_arena_items_is_a_copy():
    arena = Arena()
    for i in range(3):
        arena.spawn(i)
    arena.commit()
    for uid, _ in arena.items():
        arena.remove(uid)
    arena.commit()
    assert len(arena) == 0


def test_world_assigns_uids_and_builds_views(make_creature):
    world = World(600, 600)
    c = make_creature(50, 60)
    uid = world.add_creature(c)
    world.food.spawn(Food(10, 20))
    world.commit()

    assert c.uid == uid
    view = world.view()
    assert view.width == 600
    assert [s.uid for s in view.creatures] == [uid]
    assert (view.creatures[0].x, view.creatures[0].y) == (50, 60)
    assert [(f.x, f.y) for f in view.food] == [(10, 20)]


def test_food_spawner_seed(rng):
    cfg = SimConfig(width=600, height=600, initial_food=30)
    spawner = FoodSpawner(cfg)
    food = Arena()
    spawner.seed(food, rng)
    assert len(food) == 30
    for f in food:
        assert cfg.food_margin <= f.x <= 600 - cfg.food_margin
        assert cfg.food_margin <= f.y <= 600 - cfg.food_margin
        assert f.radius == cfg.food_radius


def test_food_spawner_interval_and_cap(rng):
    cfg = SimConfig(width=600, height=600, initial_food=10, food_cap=11)
    spawner = FoodSpawner(cfg)
    food = Arena()
    spawner.seed(food, rng)

    assert not spawner.update(food, 5, rng)
    assert spawner.update(food, 12, rng)
    # the queued item already counts against the cap
    assert not spawner.update(food, 24, rng)
    food.commit()
    assert len(food) == 11


@pytest.mark.parametrize("rate, interval, cap", [(1, 12, 75), (2, 6, 100), (5, 2, 175), (20, 1, 550)])
def test_food_rate_derivations(rate, interval, cap):
    cfg = SimConfig(food_spawn_rate=rate)
    assert cfg.food_spawn_interval == interval
    assert cfg.max_food == cap


def test_arena_length_matches_iteration_before_commit():
    arena = Arena()
    ids = [arena.spawn(i) for i in range(4)]
    arena.commit()

    arena.remove(ids[0])
    arena.spawn(99)
    assert len(arena) == len(list(arena)) == len(arena.items()) == 3

    arena.clear()
    assert len(arena) == len(list(arena)) == 0
