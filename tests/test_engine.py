import dataclasses

import pytest

from agentzoo.engine import Int2D, Real2D, Schedule, State, simulate


class Ticker:
    def __init__(self, name, log):
        self.name = name
        self.log = log

    def step(self, state):
        self.log.append(self.name)


class Counter:
    def step(self, state):
        state.ticks += 1


class Recorder(State):
    def __init__(self, stop_after=None):
        self.events = []
        self.stop_after = stop_after
        self.ticks = 0
        self.inits = 0
        self.resets = 0

    def init(self, schedule):
        self.inits += 1
        self.ticks = 0
        schedule.schedule_repeating(Counter(), 0.0, 0)

    def reset(self):
        self.resets += 1

    def update(self, step):
        self.events.append(("update", step))

    def before_step(self, schedule):
        self.events.append(("before", schedule.current_step))

    def after_step(self, schedule):
        self.events.append(("after", schedule.current_step))

    def end_condition(self, schedule):
        return self.stop_after is not None and self.ticks >= self.stop_after


def test_int2d_equality_hash_and_str():
    assert Int2D(3, 4) == Int2D(3, 4)
    assert len({Int2D(3, 4), Int2D(3, 4), Int2D(4, 3)}) == 2
    assert str(Int2D(3, 4)) == "(3, 4)"


def test_real2d_is_immutable():
    point = Real2D(1.5, 2.5)
    with pytest.raises(dataclasses.FrozenInstanceError):
        point.x = 3.0
    assert point.x == 1.5
    assert point == Real2D(1.5, 2.5)


def test_state_is_abstract():
    with pytest.raises(TypeError):
        State()


def test_first_step_hook_order():
    state = Recorder()
    schedule = Schedule()
    schedule.step(state)
    assert state.events == [("update", 0), ("before", 0), ("after", 0), ("update", 1)]
    assert schedule.current_step == 1


def test_later_steps_do_not_repeat_initial_update():
    state = Recorder()
    schedule = Schedule()
    schedule.step(state)
    schedule.step(state)
    assert [e for e in state.events if e[0] == "update"] == [("update", 0), ("update", 1), ("update", 2)]


def test_agents_run_when_due():
    log = []
    schedule = Schedule()
    schedule.schedule_repeating(Ticker("a", log), 0.0, 0)
    schedule.schedule_repeating(Ticker("b", log), 1.0, 0)
    state = Recorder()
    schedule.step(state)
    assert log == ["a"]
    schedule.step(state)
    assert sorted(log[1:]) == ["a", "b"]
    assert schedule.time == 1.0


def test_ordering_breaks_ties():
    log = []
    schedule = Schedule()
    schedule.schedule_repeating(Ticker("second", log), 0.0, 1)
    schedule.schedule_repeating(Ticker("first", log), 0.0, 0)
    schedule.step(Recorder())
    assert log == ["first", "second"]


def test_agents_repeat_every_step():
    log = []
    schedule = Schedule()
    schedule.schedule_repeating(Ticker("a", log), 0.0, 0)
    state = Recorder()
    for _ in range(5):
        schedule.step(state)
    assert log == ["a"] * 5
    assert len(schedule) == 1


def test_empty_schedule_still_advances():
    schedule = Schedule()
    state = Recorder()
    schedule.step(state)
    assert schedule.current_step == 1
    assert ("after", 0) in state.events


def test_simulate_runs_every_rep():
    state = Recorder()
    results = simulate(state, 4, 3)
    assert len(results) == 3
    assert state.inits == 3
    assert state.resets == 3
    assert state.ticks == 4
    assert all(elapsed >= 0 and rate > 0 for elapsed, rate in results)


def test_simulate_stops_on_end_condition():
    state = Recorder(stop_after=2)
    simulate(state, 10, 1)
    assert state.ticks == 2