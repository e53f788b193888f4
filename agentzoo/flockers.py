"""Flockers: birds steer by cohesion, avoidance, consistency, momentum and noise."""

from __future__ import annotations

import argparse
import math
import random
from dataclasses import dataclass, replace

from .engine import Real2D, Schedule, State, simulate
from .grids import Field2D, toroidal_distance, toroidal_transform

COHESION = 0.8
AVOIDANCE = 1.0
RANDOMNESS = 1.1
CONSISTENCY = 0.7
MOMENTUM = 1.0
JUMP = 0.7
DISCRETIZATION = 10.0 / 1.5
TOROIDAL = True

NEIGHBOUR_DISTANCE = 10.0
STEP = 500
DIM = (200.0, 200.0)
NUM_AGENTS = 100


@dataclass(eq=False)
class Bird:
    """A bird with a position and the displacement of its last move; equal by id."""

    id: int
    loc: Real2D
    last_d: Real2D

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Bird) and self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __str__(self) -> str:
        return f"{self.id} loc {self.loc}"

    def step(self, state: Flocker) -> None:
        """Compute the flocking forces from nearby birds and move one jump."""
        neighbours = state.field1.get_neighbors_within_distance(self.loc, NEIGHBOUR_DISTANCE)
        width, height = state.dim

        avoidance = cohesion = randomness = consistency = Real2D(0.0, 0.0)

        if neighbours:
            x_avoid = y_avoid = x_cohe = y_cohe = x_cons = y_cons = 0.0
            count = 0
            for other in neighbours:
                if other.id == self.id:
                    continue
                dx = toroidal_distance(self.loc.x, other.loc.x, width)
                dy = toroidal_distance(self.loc.y, other.loc.y, height)
                count += 1
                square = dx * dx + dy * dy
                x_avoid += dx / (square * square + 1.0)
                y_avoid += dy / (square * square + 1.0)
                x_cohe += dx
                y_cohe += dy
                x_cons += other.last_d.x
                y_cons += other.last_d.y

            if count > 0:
                x_avoid /= count
                y_avoid /= count
                x_cohe /= count
                y_cohe /= count
                x_cons /= count
                y_cons /= count
                consistency = Real2D(x_cons / count, y_cons / count)
            else:
                consistency = Real2D(x_cons, y_cons)

            avoidance = Real2D(400.0 * x_avoid, 400.0 * y_avoid)
            cohesion = Real2D(-x_cohe / 10.0, -y_cohe / 10.0)

            x_rand = state.rng.random() * 2.0 - 1.0
            y_rand = state.rng.random() * 2.0 - 1.0
            norm = math.hypot(x_rand, y_rand)
            if norm > 0.0:
                randomness = Real2D(0.05 * x_rand / norm, 0.05 * y_rand / norm)

        mom = self.last_d
        dx = (
            COHESION * cohesion.x
            + AVOIDANCE * avoidance.x
            + CONSISTENCY * consistency.x
            + RANDOMNESS * randomness.x
            + MOMENTUM * mom.x
        )
        dy = (
            COHESION * cohesion.y
            + AVOIDANCE * avoidance.y
            + CONSISTENCY * consistency.y
            + RANDOMNESS * randomness.y
            + MOMENTUM * mom.y
        )

        dis = math.hypot(dx, dy)
        if dis > 0.0:
            dx = dx / dis * JUMP
            dy = dy / dis * JUMP

        self.last_d = Real2D(dx, dy)
        self.loc = Real2D(
            toroidal_transform(self.loc.x + dx, width),
            toroidal_transform(self.loc.y + dy, height),
        )
        # The field keeps a snapshot so other birds read this step's values next step.
        state.field1.set_object_location(replace(self), self.loc)


class Flocker(State):
    """A toroidal field of birds."""

    def __init__(
        self,
        dim: tuple[float, float] = DIM,
        initial_flockers: int = NUM_AGENTS,
        rng: random.Random | None = None,
    ) -> None:
        self.dim = dim
        self.initial_flockers = initial_flockers
        self.rng = rng if rng is not None else random.Random()
        self.step = 0
        self.field1: Field2D[Bird] = self._new_field()

    def _new_field(self) -> Field2D[Bird]:
        return Field2D(self.dim[0], self.dim[1], DISCRETIZATION, TOROIDAL)

    def reset(self) -> None:
        self.step = 0
        self.field1 = self._new_field()

    def init(self, schedule: Schedule) -> None:
        for bird_id in range(self.initial_flockers):
            r1 = self.rng.random()
            r2 = self.rng.random()
            loc = Real2D(self.dim[0] * r1, self.dim[1] * r2)
            bird = Bird(bird_id, loc, Real2D(0.0, 0.0))
            self.field1.set_object_location(replace(bird), loc)
            schedule.schedule_repeating(bird, 0.0, 0)

    def update(self, step: int) -> None:
        self.field1.lazy_update()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Run the flockers model.")
    parser.add_argument("--steps", type=int, default=STEP)
    parser.add_argument("--reps", type=int, default=10)
    parser.add_argument("--agents", type=int, default=NUM_AGENTS)
    parser.add_argument("--seed", type=int, default=None)
    args = parser.parse_args(argv)

    state = Flocker(DIM, args.agents, rng=random.Random(args.seed))
    for rep, (elapsed, rate) in enumerate(simulate(state, args.steps, args.reps), start=1):
        print(f"run {rep}: {elapsed:.3f} s, {rate:.1f} steps/s")
    return 0