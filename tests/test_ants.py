import pytest

from agentzoo.ants import (
    EVAPORATION,
    FOOD_ID,
    HOME_ID,
    NUM_AGENT,
    Ant,
    AntsState,
    Item,
    ItemType,
    main,
)
from agentzoo.engine import Int2D, Schedule


class _FixedRng:
    """Deterministic stand-in: random() returns a fixed value."""

    def __init__(self, value):
        self.value = value

    def random(self):
        return self.value

    def randint(self, a, b):
        return b

    def randrange(self, a, b=None):
        return a if b is None else a


def _ready_state(rng_value=0.99, num_agents=0):
    state = AntsState(num_agents=num_agents, rng=_FixedRng(rng_value))
    schedule = Schedule()
    state.init(schedule)
    return state, schedule


def _set_pheromone(grid, loc, value):
    grid.set_value_location(value, loc)
    grid._read.update(grid._write)
    grid._write = {}


def test_item_type_and_item_display():
    assert str(ItemType.OBSTACLE) == "Obstacle"
    assert str(Item(3, ItemType.FOOD)) == "3 value Food"


def test_item_equality_by_id():
    assert Item(1, ItemType.FOOD) == Item(1, ItemType.HOME)
    assert len({Item(1, ItemType.FOOD), Item(1, ItemType.OBSTACLE)}) == 1


def test_ant_equality_and_display():
    a = Ant(4, Int2D(1, 2))
    b = Ant(4, Int2D(9, 9), has_food=True)
    assert a == b
    assert hash(a) == hash(b)
    assert str(a) == "4 loc (1, 2)"


def test_init_places_food_home_obstacles_and_ants():
    state = AntsState(num_agents=7)
    schedule = Schedule()
    state.init(schedule)
    assert len(schedule) == 7
    food = state.obstacles_grid.get_objects(Int2D(25, 25))
    home = state.obstacles_grid.get_objects(Int2D(175, 175))
    assert food[0].id == FOOD_ID and food[0].value is ItemType.FOOD
    assert home[0].id == HOME_ID and home[0].value is ItemType.HOME
    assert state.get_obstacle(Int2D(175, 175)) is None
    assert state.get_obstacle(Int2D(100, 145))[0].value is ItemType.OBSTACLE
    assert state.get_obstacle(Int2D(90, 55))[0].value is ItemType.OBSTACLE
    assert state.get_obstacle(Int2D(0, 0)) is None


def test_default_agent_count():
    state = AntsState()
    schedule = Schedule()
    state.init(schedule)
    assert len(schedule) == NUM_AGENT


def test_deposit_home_pheromone_then_evaporate():
    state, _ = _ready_state()
    ant = Ant(0, Int2D(175, 175), has_food=False, reward=1.0)
    ant.deposit_pheromone(state)
    assert ant.reward == 0.0
    assert state.to_home_grid.get_value(Int2D(175, 175)) is None
    state.update(1)
    assert state.to_home_grid.get_value(Int2D(175, 175)) == pytest.approx(EVAPORATION)
    assert state.to_food_grid.get_value(Int2D(175, 175)) is None


def test_deposit_food_pheromone_when_carrying():
    state, _ = _ready_state()
    ant = Ant(0, Int2D(30, 30), has_food=True, reward=1.0)
    ant.deposit_pheromone(state)
    state.update(1)
    assert state.to_food_grid.get_value(Int2D(30, 30)) == pytest.approx(EVAPORATION)
    assert state.to_home_grid.get_value(Int2D(30, 30)) is None


def test_act_follows_food_pheromone():
    state, _ = _ready_state()
    _set_pheromone(state.to_food_grid, Int2D(51, 50), 0.5)
    ant = Ant(0, Int2D(50, 50))
    ant.act(state)
    assert ant.loc == Int2D(51, 50)
    assert ant.last == Int2D(50, 50)
    assert ant.has_food is False


def test_act_reaching_food_picks_it_up():
    state, _ = _ready_state()
    _set_pheromone(state.to_food_grid, Int2D(25, 25), 0.5)
    ant = Ant(0, Int2D(26, 26))
    ant.act(state)
    assert ant.loc == Int2D(25, 25)
    assert ant.has_food is True
    assert ant.reward == 1.0
    assert state.food_source_found is True
    assert state.food_returned_home is False


def test_act_reaching_home_drops_food():
    state, _ = _ready_state()
    _set_pheromone(state.to_home_grid, Int2D(175, 175), 0.5)
    ant = Ant(0, Int2D(174, 174), has_food=True)
    ant.act(state)
    assert ant.loc == Int2D(175, 175)
    assert ant.has_food is False
    assert ant.reward == 1.0
    assert state.food_returned_home is True


def test_act_uses_momentum_without_pheromones():
    state, _ = _ready_state(rng_value=0.0)
    ant = Ant(0, Int2D(50, 50), last=Int2D(49, 49))
    ant.act(state)
    assert ant.loc == Int2D(51, 51)
    assert ant.last == Int2D(50, 50)


def test_run_keeps_ants_in_bounds_and_off_obstacles():
    state = AntsState(num_agents=10)
    schedule = Schedule()
    state.init(schedule)
    for _ in range(5):
        schedule.step(state)
    placed = list(state.ants_grid.iter_objects())
    assert len(placed) == 10
    for loc, ant in placed:
        assert 0 <= loc.x < state.width and 0 <= loc.y < state.height
        assert state.get_obstacle(loc) is None
        assert ant.loc == loc
    assert state.step == 5


def test_reset_clears_flags_and_grids():
    state, _ = _ready_state()
    state.food_source_found = True
    state.step = 12
    state.reset()
    assert state.food_source_found is False
    assert state.step == 0
    assert state.obstacles_grid.get_objects(Int2D(25, 25)) == []


def test_main_runs(capsys):
    assert main(["--steps", "1", "--reps", "1", "--seed", "3"]) == 0
    lines = capsys.readouterr().out.strip().splitlines()
    assert len(lines) == 1
    assert lines[0].startswith("run 1:")