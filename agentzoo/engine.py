"""Core simulation engine: locations, model state, the agent schedule and the run loop."""

from __future__ import annotations

import heapq
import itertools
import math
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True, slots=True)
class Int2D:
    """A cell of a discrete grid."""

    x: int
    y: int

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"


@dataclass(frozen=True, slots=True)
class Real2D:
    """A point of a continuous field."""

    x: float
    y: float

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"


class _Agent(Protocol):
    def step(self, state: "State") -> None: ...


class State(ABC):
    """The global state of a model, driven by a :class:`Schedule`."""

    halted: bool = False

    @abstractmethod
    def init(self, schedule: "Schedule") -> None:
        """Populate the model and schedule its agents."""

    @abstractmethod
    def reset(self) -> None:
        """Bring the model back to its empty starting state."""

    def halt(self) -> None:
        """Ask the current run to stop once the step in progress is over."""
        self.halted = True

    def update(self, step: int) -> None:
        """Called after every schedule step, and once before the first one."""

    def before_step(self, schedule: "Schedule") -> None:
        """Called before the agents of a step run; clears any earlier stop request."""
        self.halted = False

    def after_step(self, schedule: "Schedule") -> None:
        """Called after the agents of a step have run."""

    def end_condition(self, schedule: "Schedule") -> bool:
        """Return True to stop the current run early; True once :meth:`halt` was called."""
        return self.halted


class Schedule:
    """A time-ordered queue of repeating agents.

    Agents due at the same time run ordered by ``ordering`` (lowest first),
    then in the order they were queued.
    """

    def __init__(self) -> None:
        self.current_step = 0
        self.time = 0.0
        self._events: list[tuple[float, int, int, _Agent]] = []
        self._counter = itertools.count()

    def __len__(self) -> int:
        return len(self._events)

    def _push(self, agent: _Agent, when: float, ordering: int) -> None:
        heapq.heappush(self._events, (when, ordering, next(self._counter), agent))

    def schedule_repeating(self, agent: _Agent, time: float, ordering: int) -> None:
        """Queue ``agent`` to run at ``time`` and at every unit of time after."""
        self._push(agent, float(time), ordering)

    def step(self, state: State) -> None:
        """Run every agent due at the earliest queued time."""
        if self.current_step == 0:
            state.update(0)
        state.before_step(self)

        if self._events:
            self.time = self._events[0][0]
            due = []
            while self._events and self._events[0][0] <= self.time:
                due.append(heapq.heappop(self._events))
            for when, ordering, _, agent in due:
                agent.step(state)
                self._push(agent, when + 1.0, ordering)

        state.after_step(self)
        self.current_step += 1
        state.update(self.current_step)


def simulate(state: State, steps: int, reps: int) -> list[tuple[float, float]]:
    """Run ``reps`` independent runs of at most ``steps`` steps each.

    Returns one ``(elapsed_seconds, steps_per_second)`` pair per run.
    """
    results: list[tuple[float, float]] = []
    for _ in range(reps):
        schedule = Schedule()
        state.init(schedule)
        done = 0
        start = time.perf_counter()
        for _ in range(steps):
            schedule.step(state)
            done += 1
            if state.end_condition(schedule):
                break
        elapsed = time.perf_counter() - start
        rate = done / elapsed if elapsed > 0 else math.inf
        results.append((elapsed, rate))
        state.reset()
    return results