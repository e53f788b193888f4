"""Schelling segregation: agents move away when too few neighbours share their colour."""

from __future__ import annotations

import argparse
import itertools
import math
import random
from dataclasses import dataclass, field
from enum import Enum

from .engine import Int2D, Schedule, State, simulate
from .grids import SparseGrid2D

PERC = 0.5
SIMILAR_WANTED = 3

STEP = 10
DIM = (20, 20)
NUM_AGENTS = 320

_NEIGHBOURHOOD = tuple(
    (dx, dy) for dy, dx in itertools.product((-1, 0, 1), repeat=2) if (dx, dy) != (0, 0)
)


class Color(Enum):
    """The group an agent belongs to."""

    RED = "Red"
    BLUE = "Blue"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Patch:
    """An agent on the grid; equal by id."""

    id: int
    value: Color = field(compare=False)

    def __str__(self) -> str:
        return f"{self.id} value {self.value}"


@dataclass(frozen=True)
class Updater:
    """The single scheduled agent that relocates every unhappy patch."""

    id: int = 0

    def __str__(self) -> str:
        return str(self.id)

    def step(self, state: World) -> None:
        """Move every patch with fewer than SIMILAR_WANTED like neighbours to an empty cell."""
        grid = state.field
        side = state.dim[0]
        updates: list[tuple[Patch, Int2D]] = []

        for loc, patch in grid.iter_objects():
            similar = 0
            for dx, dy in _NEIGHBOURHOOD:
                nx, ny = loc.x + dx, loc.y + dy
                # Both coordinates are bounded by the first dimension.
                if nx < 0 or ny < 0 or nx >= side or ny >= side:
                    continue
                neighbours = grid.get_objects(Int2D(nx, ny))
                if neighbours and neighbours[0].value is patch.value:
                    similar += 1

            target = loc
            if similar < SIMILAR_WANTED:
                empty = grid.get_random_empty_bag(state.rng)
                if empty is not None:
                    target = empty
            updates.append((patch, target))

        for patch, target in updates:
            grid.set_object_location(patch, target)


class World(State):
    """A grid of red and blue patches."""

    def __init__(
        self,
        dim: tuple[int, int] = DIM,
        num_agents: int = NUM_AGENTS,
        rng: random.Random | None = None,
    ) -> None:
        self.dim = dim
        self.num_agents = num_agents
        self.rng = rng if rng is not None else random.Random()
        self.step = 0
        self.field: SparseGrid2D[Patch] = SparseGrid2D(dim[0], dim[1])

    def reset(self) -> None:
        self.step = 0
        self.field = SparseGrid2D(self.dim[0], self.dim[1])

    def init(self, schedule: Schedule) -> None:
        self.step = 0
        reds = math.ceil(self.num_agents * PERC)
        for i in range(self.num_agents):
            loc = Int2D(self.rng.randrange(self.dim[0]), self.rng.randrange(self.dim[1]))
            color = Color.RED if i < reds else Color.BLUE
            self.field.set_object_location(Patch(i, color), loc)
        schedule.schedule_repeating(Updater(0), 0.0, 0)

    def update(self, step: int) -> None:
        self.field.lazy_update()

    def after_step(self, schedule: Schedule) -> None:
        self.step += 1

    def end_condition(self, schedule: Schedule) -> bool:
        """The model itself never ends a run; only an explicit halt request does."""
        return super().end_condition(schedule)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Run the Schelling segregation model.")
    parser.add_argument("--steps", type=int, default=STEP)
    parser.add_argument("--reps", type=int, default=10)
    parser.add_argument("--agents", type=int, default=NUM_AGENTS)
    parser.add_argument("--seed", type=int, default=None)
    args = parser.parse_args(argv)

    world = World(DIM, args.agents, rng=random.Random(args.seed))
    for rep, (elapsed, rate) in enumerate(simulate(world, args.steps, args.reps), start=1):
        print(f"run {rep}: {elapsed:.3f} s, {rate:.1f} steps/s")
    return 0