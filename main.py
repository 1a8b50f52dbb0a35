"""
Live neuroevolution sandbox: creatures sense, eat, hunt, mate and evolve.

Keys: SPACE pause, S cycle speed, R reset, ESC quit.
"""

from __future__ import annotations
import argparse
import logging

import pygame

import config
from render import colors
from render.renderer import draw_creatures, draw_food, draw_hud
from world.simulation import Simulation

logger = logging.getLogger("creature_sim")


def build_config(args: argparse.Namespace) -> config.SimConfig:
    cfg = config.PROFILES[args.profile]
    changes = {}
    if args.population is not None:
        changes["population_size"] = args.population
    if args.width is not None:
        changes["width"] = args.width
    if args.height is not None:
        changes["height"] = args.height
    if args.food_rate is not None:
        changes["food_spawn_rate"] = args.food_rate
    return cfg.replace(**changes) if changes else cfg


def run_headless(sim: Simulation, ticks: int) -> None:
    report_every = max(1, ticks // 10)
    for done in range(1, ticks + 1):
        sim.step()
        if done % report_every == 0:
            s = sim.stats()
            logger.info(
                "tick %d gen %d pop %d births %d deaths %d predations %d best %.1f avg %.1f",
                s.tick, s.generation, s.population, s.births, s.deaths, s.predations,
                s.best_fitness, s.average_fitness,
            )


def run_window(sim: Simulation, speed: int) -> None:
    pygame.init()
    screen = pygame.display.set_mode((int(sim.config.width), int(sim.config.height)))
    pygame.display.set_caption("creature_sim (Live Evolution)")
    clock = pygame.time.Clock()

    speed_idx = config.SPEED_OPTIONS.index(speed) if speed in config.SPEED_OPTIONS else 0
    speed = config.SPEED_OPTIONS[speed_idx]
    paused = False
    frame = 0
    running = True

    while running:
        clock.tick(60)

        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                running = False
            elif e.type == pygame.KEYDOWN:
                if e.key == pygame.K_ESCAPE:
                    running = False
                elif e.key == pygame.K_SPACE:
                    paused = not paused
                elif e.key == pygame.K_s:
                    speed_idx = (speed_idx + 1) % len(config.SPEED_OPTIONS)
                    speed = config.SPEED_OPTIONS[speed_idx]
                elif e.key == pygame.K_r:
                    sim.reset()

        sim.advance(speed, paused=paused)
        frame += 1

        snap = sim.snapshot()
        screen.fill(colors.BG)
        draw_food(screen, snap.food)
        draw_creatures(screen, snap.creatures, frame)
        draw_hud(screen, snap.stats, speed, paused)

        pygame.display.flip()

    pygame.quit()


def main():
    parser = argparse.ArgumentParser(description="Run the creature neuroevolution sandbox.")
    parser.add_argument("--profile", choices=sorted(config.PROFILES), default="morphology")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--population", type=int, default=None)
    parser.add_argument("--width", type=float, default=None)
    parser.add_argument("--height", type=float, default=None)
    parser.add_argument("--food-rate", type=int, default=None)
    parser.add_argument("--speed", type=int, default=config.SIM_SPEED)
    parser.add_argument("--headless", type=int, metavar="TICKS", default=None)
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        cfg = build_config(args)
        sim = Simulation(cfg, seed=args.seed)
    except config.ConfigError as exc:
        parser.error(str(exc))

    if args.headless is not None:
        run_headless(sim, args.headless)
    else:
        run_window(sim, args.speed)


if __name__ == "__main__":
    main()
