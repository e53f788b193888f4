"""Ants foraging: ants leave the nest, find food by pheromone trails and carry it home."""

from __future__ import annotations

import argparse
import itertools
import math
import random
from dataclasses import dataclass, field
from enum import Enum

from .engine import Int2D, Schedule, State, simulate
from .grids import PheromoneGrid, SparseGrid2D

WIDTH = 200
HEIGHT = 200
NUM_AGENT = 100
EVAPORATION = 0.999
STEP = 1000
HOME_XMIN = 175
HOME_XMAX = 175
HOME_YMIN = 175
HOME_YMAX = 175
FOOD_XMIN = 25
FOOD_XMAX = 25
FOOD_YMIN = 25
FOOD_YMAX = 25
HOME_LOW_PHEROMONE = 0.00000000000001
FOOD_LOW_PHEROMONE = 0.00000000000001
REWARD = 1.0
MOMENTUM_PROBABILITY = 0.8
RANDOM_ACTION_PROBABILITY = 0.1
UPDATE_CUTDOWN = 0.9

FOOD_ID = 888888888
HOME_ID = 99999999

_NEIGHBOURHOOD = tuple(itertools.product((-1, 0, 1), repeat=2))


class ItemType(Enum):
    """What occupies a cell of the obstacles grid."""

    FOOD = "Food"
    HOME = "Home"
    OBSTACLE = "Obstacle"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Item:
    """A fixed object on the field; equal by id."""

    id: int
    value: ItemType = field(compare=False)

    def __str__(self) -> str:
        return f"{self.id} value {self.value}"


def _diagonal_cutdown() -> float:
    return UPDATE_CUTDOWN ** math.sqrt(2.0)


def _ellipse(x: float, y: float, horizontal: float, vertical: float, size: float) -> bool:
    u = (x - horizontal) * size
    v = (y - vertical) * size
    return (u + v) * (u + v) / 36.0 + (u - v) * (u - v) / 1024.0 <= 1.0


def _pick(rng: random.Random, low: int, high: int) -> int:
    return low if low == high else rng.randrange(low, high)


@dataclass(eq=False)
class Ant:
    """An ant that either searches for food or carries food back to the nest."""

    id: int
    loc: Int2D
    has_food: bool = False
    reward: float = 0.0
    last: Int2D | None = None

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Ant) and self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __str__(self) -> str:
        return f"{self.id} loc {self.loc}"

    def deposit_pheromone(self, state: AntsState) -> None:
        """Lay the pheromone of the current task, based on the strongest one nearby."""
        grid = state.to_food_grid if self.has_food else state.to_home_grid
        best = grid.get_value(self.loc) or 0.0
        for dx, dy in _NEIGHBOURHOOD:
            x, y = self.loc.x + dx, self.loc.y + dy
            if not (0 <= x < state.width and 0 <= y < state.height):
                continue
            pheromone = grid.get_value(Int2D(x, y)) or 0.0
            cutdown = _diagonal_cutdown() if dx * dy != 0 else UPDATE_CUTDOWN
            best = max(best, pheromone * cutdown + self.reward)
        grid.set_value_location(best, self.loc)
        self.reward = 0.0

    def _free(self, state: AntsState, x: int, y: int) -> bool:
        return (
            0 <= x < state.width
            and 0 <= y < state.height
            and state.get_obstacle(Int2D(x, y)) is None
        )

    def act(self, state: AntsState) -> None:
        """Step towards the strongest useful pheromone, else by momentum or at random."""
        rng = state.rng
        grid = state.to_home_grid if self.has_food else state.to_food_grid
        x, y = self.loc.x, self.loc.y
        best = -1.0
        max_x, max_y = x, y
        count = 2

        for dx, dy in _NEIGHBOURHOOD:
            new_x, new_y = x + dx, y + dy
            if (dx == 0 and dy == 0) or not self._free(state, new_x, new_y):
                continue
            m = grid.get_value(Int2D(new_x, new_y)) or 0.0
            if m > best:
                count = 2
            if m > best or (m == best and rng.random() < 1.0 / count):
                best = m
                max_x, max_y = new_x, new_y
            count += 1

        if best == 0.0 and self.last is not None:
            if rng.random() < MOMENTUM_PROBABILITY:
                xm = x + (x - self.last.x)
                ym = y + (y - self.last.y)
                if self._free(state, xm, ym):
                    max_x, max_y = xm, ym
        elif rng.random() < RANDOM_ACTION_PROBABILITY:
            xd = rng.randint(-1, 1)
            yd = rng.randint(-1, 1)
            xm, ym = x + xd, y + yd
            if not (xd == 0 and yd == 0) and self._free(state, xm, ym):
                max_x, max_y = xm, ym

        self.loc = Int2D(max_x, max_y)
        state.ants_grid.set_object_location(self, self.loc)
        self.last = Int2D(x, y)

        items = state.obstacles_grid.get_objects(self.loc)
        if not items:
            return
        kind = items[0].value
        if kind is ItemType.HOME and self.has_food:
            state.food_returned_home = True
            self.reward = REWARD
            self.has_food = False
        elif kind is ItemType.FOOD and not self.has_food:
            state.food_source_found = True
            self.reward = REWARD
            self.has_food = True

    def step(self, state: AntsState) -> None:
        """Deposit a pheromone where the ant stands, then move."""
        self.deposit_pheromone(state)
        self.act(state)


class AntsState(State):
    """The foraging field: ants, fixed items and the two pheromone grids."""

    def __init__(
        self,
        width: int = WIDTH,
        height: int = HEIGHT,
        num_agents: int = NUM_AGENT,
        rng: random.Random | None = None,
    ) -> None:
        self.width = width
        self.height = height
        self.num_agents = num_agents
        self.rng = rng if rng is not None else random.Random()
        self.reset()

    def reset(self) -> None:
        self.step = 0
        self.ants_grid: SparseGrid2D[Ant] = SparseGrid2D(self.width, self.height)
        self.obstacles_grid: SparseGrid2D[Item] = SparseGrid2D(self.width, self.height)
        self.to_food_grid = PheromoneGrid(self.width, self.height, EVAPORATION, FOOD_LOW_PHEROMONE)
        self.to_home_grid = PheromoneGrid(self.width, self.height, EVAPORATION, HOME_LOW_PHEROMONE)
        self.food_source_found = False
        self.food_returned_home = False

    def init(self, schedule: Schedule) -> None:
        self.reset()
        rng = self.rng

        food = Int2D(_pick(rng, FOOD_XMIN, FOOD_XMAX), _pick(rng, FOOD_YMIN, FOOD_YMAX))
        self.obstacles_grid.set_object_location(Item(FOOD_ID, ItemType.FOOD), food)

        nest = Int2D(_pick(rng, HOME_XMIN, HOME_XMAX), _pick(rng, HOME_YMIN, HOME_YMAX))
        self.obstacles_grid.set_object_location(Item(HOME_ID, ItemType.HOME), nest)

        cells = itertools.product(range(self.width), range(self.height))
        for obstacle_id, (i, j) in enumerate(cells):
            if _ellipse(i, j, 100.0, 145.0, 0.407) or _ellipse(i, j, 90.0, 55.0, 0.407):
                self.obstacles_grid.set_object_location(
                    Item(obstacle_id, ItemType.OBSTACLE), Int2D(i, j)
                )

        spawn = Int2D((HOME_XMAX + HOME_XMIN) // 2, (HOME_YMAX + HOME_YMIN) // 2)
        for ant_id in range(self.num_agents):
            ant = Ant(ant_id, spawn, has_food=False, reward=1.0)
            self.ants_grid.set_object_location(ant, spawn)
            schedule.schedule_repeating(ant, 0.0, 0)

        self.obstacles_grid.update()

    def update(self, step: int) -> None:
        self.ants_grid.lazy_update()
        self.to_food_grid.update()
        self.to_home_grid.update()
        self.step = step

    def get_obstacle(self, loc: Int2D) -> list[Item] | None:
        """The items at ``loc`` if the cell holds an obstacle, else None."""
        items = self.obstacles_grid.get_objects(loc)
        if items and items[0].value is ItemType.OBSTACLE:
            return items
        return None


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Run the ants foraging model.")
    parser.add_argument("--steps", type=int, default=STEP)
    parser.add_argument("--reps", type=int, default=10)
    parser.add_argument("--seed", type=int, default=None)
    args = parser.parse_args(argv)

    state = AntsState(rng=random.Random(args.seed))
    for rep, (elapsed, rate) in enumerate(simulate(state, args.steps, args.reps), start=1):
        print(f"run {rep}: {elapsed:.3f} s, {rate:.1f} steps/s")
    return 0