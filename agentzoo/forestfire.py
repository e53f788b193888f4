"""Forest fire: fire spreads from the burning left edge through a randomly planted forest."""

from __future__ import annotations

import argparse
import itertools
import random
from dataclasses import dataclass, field, replace
from enum import Enum

from .engine import Int2D, Schedule, State, simulate
from .grids import DenseGrid2D

STEP = 100
DIM = (200, 200)
DENSITY = 0.7

_NEIGHBOURHOOD = tuple(
    (dx, dy) for dx, dy in itertools.product((-1, 0, 1), repeat=2) if (dx, dy) != (0, 0)
)


class Status(Enum):
    """The condition of a tree."""

    GREEN = "Green"
    BURNING = "Burning"
    BURNED = "Burned"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Tree:
    """A tree on the grid; equal by id."""

    id: int
    status: Status = field(compare=False)

    def __str__(self) -> str:
        return f"{self.id} status {self.status}"


@dataclass(frozen=True)
class Spread:
    """The single scheduled agent that advances the fire by one step."""

    id: int = 0

    def __str__(self) -> str:
        return str(self.id)

    def step(self, state: Forest) -> None:
        """Ignite green trees next to burning ones and burn out burning trees.

        Only trees in columns up to ``state.step + 1`` are considered.
        """
        grid = state.field
        width, height = state.dim
        updates: list[tuple[Tree, Int2D]] = []

        for loc, tree in grid.iter_objects():
            if loc.x <= state.step + 1:
                if tree.status is Status.GREEN:
                    for dx, dy in _NEIGHBOURHOOD:
                        nx, ny = loc.x + dx, loc.y + dy
                        if nx < 0 or ny < 0 or nx >= width or ny >= height:
                            continue
                        neighbours = grid.get_objects(Int2D(nx, ny))
                        if neighbours and neighbours[0].status is Status.BURNING:
                            tree = replace(tree, status=Status.BURNING)
                            break
                elif tree.status is Status.BURNING:
                    tree = replace(tree, status=Status.BURNED)
            updates.append((tree, loc))

        for tree, loc in updates:
            grid.set_object_location(tree, loc)


class Forest(State):
    """A grid of trees whose left edge starts on fire."""

    def __init__(
        self,
        dim: tuple[int, int] = DIM,
        density: float = DENSITY,
        rng: random.Random | None = None,
    ) -> None:
        self.dim = dim
        self.density = density
        self.rng = rng if rng is not None else random.Random()
        self.step = 0
        self.field: DenseGrid2D[Tree] = DenseGrid2D(dim[0], dim[1])
        self.before_burned = 0
        self.before_burning = 0
        self.before_green = 0
        self.burned = 0
        self.burning = 0
        self.green = 0

    def reset(self) -> None:
        self.step = 0
        self.field = DenseGrid2D(self.dim[0], self.dim[1])

    def init(self, schedule: Schedule) -> None:
        """Plant a tree in each cell with probability ``density`` and schedule the fire."""
        if not 0.0 <= self.density <= 1.0:
            raise ValueError(f"density must be between 0 and 1, got {self.density}")
        self.step = 0
        ids = itertools.count()
        for i, j in itertools.product(range(self.dim[0]), range(self.dim[1])):
            if self.rng.random() < self.density:
                status = Status.BURNING if i == 0 else Status.GREEN
                self.field.set_object_location(Tree(next(ids), status), Int2D(i, j))
        schedule.schedule_repeating(Spread(0), 0.0, 0)

    def update(self, step: int) -> None:
        self.field.lazy_update()

    def after_step(self, schedule: Schedule) -> None:
        self.step += 1

    def end_condition(self, schedule: Schedule) -> bool:
        return False


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Run the forest fire model.")
    parser.add_argument("--steps", type=int, default=STEP)
    parser.add_argument("--reps", type=int, default=10)
    parser.add_argument("--width", type=int, default=DIM[0])
    parser.add_argument("--height", type=int, default=DIM[1])
    parser.add_argument("--density", type=float, default=DENSITY)
    parser.add_argument("--seed", type=int, default=None)
    args = parser.parse_args(argv)

    forest = Forest((args.width, args.height), args.density, rng=random.Random(args.seed))
    for rep, (elapsed, rate) in enumerate(simulate(forest, args.steps, args.reps), start=1):
        print(f"run {rep}: {elapsed:.3f} s, {rate:.1f} steps/s")
    return 0