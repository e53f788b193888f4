"""Grids and fields that hold objects and numbers, with read and write buffers.

Writes made during a step go to a write buffer; reads see the read buffer,
which is refreshed by ``lazy_update`` or ``update`` between steps.
"""

from __future__ import annotations

import itertools
import math
import random
from collections.abc import Callable, Hashable, Iterator
from typing import Generic, TypeVar

from .engine import Int2D, Real2D

T = TypeVar("T", bound=Hashable)

DEFAULT_EVAPORATION = 0.999
DEFAULT_LOW_PHEROMONE = 0.00000000000001

_RANDOM_TRIES = 8


def toroidal_transform(value: float, dim: float) -> float:
    """Wrap ``value`` into the range [0, dim)."""
    if 0.0 <= value < dim:
        return value
    wrapped = math.fmod(value, dim)
    if wrapped < 0.0:
        wrapped += dim
    return wrapped


def toroidal_distance(a: float, b: float, dim: float) -> float:
    """Signed shortest difference ``a - b`` on a ring of length ``dim``."""
    if abs(a - b) <= dim / 2.0:
        return a - b
    d = toroidal_transform(a, dim) - toroidal_transform(b, dim)
    if d * 2.0 > dim:
        return d - dim
    if d * 2.0 < -dim:
        return d + dim
    return d


class _Bounded:
    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"grid dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height

    def _check(self, loc: Int2D) -> None:
        if not (0 <= loc.x < self.width and 0 <= loc.y < self.height):
            raise ValueError(f"location {loc} outside a {self.width}x{self.height} grid")


class SparseGrid2D(_Bounded, Generic[T]):
    """A grid of bags of objects, storing only occupied cells."""

    def __init__(self, width: int, height: int) -> None:
        super().__init__(width, height)
        self._read_objs: dict[T, tuple[T, Int2D]] = {}
        self._read_bags: dict[Int2D, list[T]] = {}
        self._write_objs: dict[T, tuple[T, Int2D]] = {}
        self._write_bags: dict[Int2D, list[T]] = {}

    def set_object_location(self, obj: T, loc: Int2D) -> None:
        """Place ``obj`` at ``loc``, moving it if it was already placed this step."""
        self._check(loc)
        previous = self._write_objs.pop(obj, None)
        if previous is not None:
            old_loc = previous[1]
            bag = self._write_bags[old_loc]
            bag.remove(obj)
            if not bag:
                del self._write_bags[old_loc]
        self._write_objs[obj] = (obj, loc)
        self._write_bags.setdefault(loc, []).append(obj)

    def get_objects(self, loc: Int2D) -> list[T]:
        """Objects at ``loc``; empty if there are none."""
        return list(self._read_bags.get(loc, ()))

    def get_location(self, obj: T) -> Int2D | None:
        entry = self._read_objs.get(obj)
        return entry[1] if entry else None

    def get(self, obj: T) -> T | None:
        """The stored object equal to ``obj``."""
        entry = self._read_objs.get(obj)
        return entry[0] if entry else None

    def iter_objects(self) -> Iterator[tuple[Int2D, T]]:
        for loc, bag in list(self._read_bags.items()):
            for obj in list(bag):
                yield loc, obj

    def get_random_empty_bag(self, rng: random.Random | None = None) -> Int2D | None:
        """A random cell with no objects, or None if every cell is occupied."""
        rng = rng or random.Random()
        if len(self._read_bags) >= self.width * self.height:
            return None
        for _ in range(_RANDOM_TRIES):
            loc = Int2D(rng.randrange(self.width), rng.randrange(self.height))
            if loc not in self._read_bags:
                return loc
        empty = [
            Int2D(x, y)
            for x, y in itertools.product(range(self.width), range(self.height))
            if Int2D(x, y) not in self._read_bags
        ]
        return rng.choice(empty) if empty else None

    def lazy_update(self) -> None:
        """Make this step's writes readable and start an empty write buffer."""
        self._read_objs, self._read_bags = self._write_objs, self._write_bags
        self._write_objs, self._write_bags = {}, {}

    def update(self) -> None:
        """Make this step's writes readable, keeping them in the write buffer."""
        self._read_objs = dict(self._write_objs)
        self._read_bags = {loc: list(bag) for loc, bag in self._write_bags.items()}


class DenseGrid2D(_Bounded, Generic[T]):
    """A grid with a bag of objects for every cell."""

    def __init__(self, width: int, height: int) -> None:
        super().__init__(width, height)
        self._read: list[list[T]] = self._empty()
        self._write: list[list[T]] = self._empty()

    def _empty(self) -> list[list[T]]:
        return [[] for _ in range(self.width * self.height)]

    def _index(self, loc: Int2D) -> int:
        self._check(loc)
        return loc.x * self.height + loc.y

    def set_object_location(self, obj: T, loc: Int2D) -> None:
        """Place ``obj`` at ``loc``, replacing an equal object already in that cell."""
        bag = self._write[self._index(loc)]
        try:
            bag[bag.index(obj)] = obj
        except ValueError:
            bag.append(obj)

    def get_objects(self, loc: Int2D) -> list[T]:
        return list(self._read[self._index(loc)])

    def get_location(self, obj: T) -> Int2D | None:
        return next((loc for loc, stored in self.iter_objects() if stored == obj), None)

    def get(self, obj: T) -> T | None:
        return next((stored for _, stored in self.iter_objects() if stored == obj), None)

    def iter_objects(self) -> Iterator[tuple[Int2D, T]]:
        """Objects with their cells, column by column."""
        for index, bag in enumerate(self._read):
            if bag:
                loc = Int2D(*divmod(index, self.height))
                for obj in list(bag):
                    yield loc, obj

    def lazy_update(self) -> None:
        self._read = self._write
        self._write = self._empty()

    def update(self) -> None:
        self._read = [list(bag) for bag in self._write]


class NumberGrid2D(_Bounded):
    """A sparse grid of numbers."""

    def __init__(self, width: int, height: int) -> None:
        super().__init__(width, height)
        self._read: dict[Int2D, float] = {}
        self._write: dict[Int2D, float] = {}

    def get_value(self, loc: Int2D) -> float | None:
        return self._read.get(loc)

    def set_value_location(self, value: float, loc: Int2D) -> None:
        self._check(loc)
        self._write[loc] = value

    def apply_to_all_values(self, func: Callable[[float], float]) -> None:
        """Replace every readable value with ``func(value)``."""
        self._read = {loc: func(value) for loc, value in self._read.items()}

    def update(self) -> None:
        """Merge this step's writes into the readable values."""
        self._read.update(self._write)
        self._write = {}


class PheromoneGrid(NumberGrid2D):
    """Pheromone levels that evaporate on every update."""

    def __init__(
        self,
        width: int,
        height: int,
        evaporation: float = DEFAULT_EVAPORATION,
        low: float = DEFAULT_LOW_PHEROMONE,
    ) -> None:
        super().__init__(width, height)
        self.evaporation = evaporation
        self.low = low

    def _evaporate(self, value: float) -> float:
        new_value = value * self.evaporation
        return 0.0 if new_value < self.low else new_value

    def update(self) -> None:
        super().update()
        self.apply_to_all_values(self._evaporate)


class Field2D(Generic[T]):
    """A continuous field, bucketed into square cells for neighbour queries."""

    def __init__(self, width: float, height: float, discretization: float, toroidal: bool) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("field dimensions must be positive")
        if discretization <= 0:
            raise ValueError("discretization must be positive")
        self.width = width
        self.height = height
        self.discretization = discretization
        self.toroidal = toroidal
        self._cells_x = max(1, math.ceil(width / discretization))
        self._cells_y = max(1, math.ceil(height / discretization))
        self._read_objs: dict[T, tuple[T, Real2D]] = {}
        self._read_cells: dict[tuple[int, int], dict[T, tuple[T, Real2D]]] = {}
        self._write_objs: dict[T, tuple[T, Real2D]] = {}
        self._write_cells: dict[tuple[int, int], dict[T, tuple[T, Real2D]]] = {}

    def _cell(self, loc: Real2D) -> tuple[int, int]:
        cx = math.floor(loc.x / self.discretization)
        cy = math.floor(loc.y / self.discretization)
        if self.toroidal:
            return cx % self._cells_x, cy % self._cells_y
        return min(max(cx, 0), self._cells_x - 1), min(max(cy, 0), self._cells_y - 1)

    def _distance(self, a: Real2D, b: Real2D) -> float:
        if self.toroidal:
            dx = toroidal_distance(a.x, b.x, self.width)
            dy = toroidal_distance(a.y, b.y, self.height)
        else:
            dx, dy = a.x - b.x, a.y - b.y
        return math.hypot(dx, dy)

    def set_object_location(self, obj: T, loc: Real2D) -> None:
        previous = self._write_objs.pop(obj, None)
        if previous is not None:
            old_cell = self._cell(previous[1])
            bag = self._write_cells[old_cell]
            del bag[obj]
            if not bag:
                del self._write_cells[old_cell]
        self._write_objs[obj] = (obj, loc)
        self._write_cells.setdefault(self._cell(loc), {})[obj] = (obj, loc)

    def get_neighbors_within_distance(self, loc: Real2D, distance: float) -> list[T]:
        """Objects no farther than ``distance`` from ``loc``, including any at ``loc``."""
        if distance < 0:
            raise ValueError("distance must not be negative")
        span = math.ceil(distance / self.discretization)
        cx, cy = self._cell(loc)
        cells: set[tuple[int, int]] = set()
        for i, j in itertools.product(range(cx - span, cx + span + 1), range(cy - span, cy + span + 1)):
            if self.toroidal:
                cells.add((i % self._cells_x, j % self._cells_y))
            elif 0 <= i < self._cells_x and 0 <= j < self._cells_y:
                cells.add((i, j))
        return [
            obj
            for cell in sorted(cells)
            for obj, position in self._read_cells.get(cell, {}).values()
            if self._distance(loc, position) <= distance
        ]

    def get_location(self, obj: T) -> Real2D | None:
        entry = self._read_objs.get(obj)
        return entry[1] if entry else None

    def get(self, obj: T) -> T | None:
        entry = self._read_objs.get(obj)
        return entry[0] if entry else None

    def lazy_update(self) -> None:
        self._read_objs, self._read_cells = self._write_objs, self._write_cells
        self._write_objs, self._write_cells = {}, {}