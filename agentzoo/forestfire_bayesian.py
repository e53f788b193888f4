"""Forest fire with a stopping rule, and a search over forest density."""

from __future__ import annotations

import argparse
import math
import random
from collections import Counter

from .engine import Schedule
from .forestfire import Forest, Status

ITERATIONS = 10
INIT_ELEMENTS = 4
BATCH_SIZE = 200

N_STEP = 500
REPS = 3
DIM = (200, 200)

_RNG = random.Random(10)


class BayesianForest(Forest):
    """A forest whose run ends once the tree counts stop changing."""

    def end_condition(self, schedule: Schedule) -> bool:
        """True when the green, burning and burned counts equal those of the last check."""
        first: dict = {}
        for loc, tree in self.field.iter_objects():
            first.setdefault(loc, tree)
        counts = Counter(tree.status for tree in first.values())
        self.burned += counts[Status.BURNED]
        self.green += counts[Status.GREEN]
        self.burning += counts[Status.BURNING]

        if (
            self.before_burned == self.burned
            and self.before_burning == self.burning
            and self.before_green == self.green
        ):
            return True

        self.before_burned = self.burned
        self.before_green = self.green
        self.before_burning = self.burning
        self.burned = 0
        self.green = 0
        self.burning = 0
        return False


def _format(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else repr(value)


def init_population(rng: random.Random | None = None) -> list[list[float]]:
    """The starting densities to evaluate."""
    rng = rng if rng is not None else _RNG
    return [[rng.uniform(0.01, 1.0)] for _ in range(INIT_ELEMENTS)]


def get_points(x: list[list[float]], rng: random.Random | None = None) -> list[list[float]]:
    """A batch of candidate densities."""
    rng = rng if rng is not None else _RNG
    return [[rng.uniform(0.1, 1.0)] for _ in range(BATCH_SIZE)]


def _evaluate(
    x: list[float],
    dim: tuple[int, int],
    n_step: int,
    reps: int,
    rng: random.Random | None = None,
) -> float:
    forest = BayesianForest(dim, x[0], rng=rng)
    steps_tot = 0
    for _ in range(reps):
        schedule = Schedule()
        forest.init(schedule)
        for _ in range(n_step):
            schedule.step(forest)
            if forest.end_condition(schedule):
                break
        steps_tot += forest.step
    average = steps_tot / reps
    print(f"AVG steps {_format(average)}")
    return average


def objective(x: list[float]) -> float:
    """Average number of steps a fire lasts in a forest of density ``x[0]``."""
    return _evaluate(x, DIM, N_STEP, REPS)


def _spread_from(candidate: list[float], evaluated: list[list[float]]) -> float:
    return min(math.dist(candidate, point) for point in evaluated)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Search for the forest density whose fire lasts the fewest steps."
    )
    parser.add_argument("--iterations", type=int, default=ITERATIONS)
    parser.add_argument("--width", type=int, default=DIM[0])
    parser.add_argument("--height", type=int, default=DIM[1])
    parser.add_argument("--steps", type=int, default=N_STEP)
    parser.add_argument("--reps", type=int, default=REPS)
    parser.add_argument("--seed", type=int, default=10)
    args = parser.parse_args(argv)

    rng = random.Random(args.seed)
    dim = (args.width, args.height)

    def run(point: list[float]) -> float:
        return _evaluate(point, dim, args.steps, args.reps)

    evaluated = [(point, run(point)) for point in init_population(rng)]
    for _ in range(args.iterations):
        known = [point for point, _ in evaluated]
        candidates = get_points(known, rng)
        chosen = max(candidates, key=lambda c: _spread_from(c, known))
        evaluated.append((chosen, run(chosen)))

    best_x, best_y = min(evaluated, key=lambda pair: pair[1])
    print(f"---\nFinal res: Point {best_x}, val {_format(best_y)}")
    return 0