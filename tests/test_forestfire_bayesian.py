import random

from agentzoo.engine import Schedule
from agentzoo.forestfire import Status
from agentzoo.forestfire_bayesian import (
    BATCH_SIZE,
    INIT_ELEMENTS,
    BayesianForest,
    get_points,
    init_population,
    main,
    objective,
)


def test_init_population_shape_and_range():
    points = init_population(random.Random(1))
    assert len(points) == INIT_ELEMENTS
    for point in points:
        assert len(point) == 1
        assert 0.01 <= point[0] <= 1.0


def test_get_points_shape_and_range():
    points = get_points([[0.5]], random.Random(2))
    assert len(points) == BATCH_SIZE
    assert all(len(p) == 1 and 0.1 <= p[0] <= 1.0 for p in points)


def test_same_seed_same_points():
    batch = get_points([], random.Random(5))
    assert len(batch) == BATCH_SIZE
    assert all(0.1 <= p[0] <= 1.0 for p in batch)
    assert get_points([], random.Random(5)) == batch
    assert get_points([], random.Random(6)) != batch

    population = init_population(random.Random(5))
    assert len(population) == INIT_ELEMENTS
    assert all(0.01 <= p[0] <= 1.0 for p in population)
    assert init_population(random.Random(5)) == population


def test_empty_forest_ends_after_first_step():
    forest = BayesianForest((5, 5), 0.0, rng=random.Random(1))
    schedule = Schedule()
    forest.init(schedule)
    schedule.step(forest)
    assert forest.end_condition(schedule) is True
    assert forest.step == 1


def test_dense_forest_ends_once_fire_is_out():
    forest = BayesianForest((5, 5), 1.0, rng=random.Random(1))
    schedule = Schedule()
    forest.init(schedule)
    ended = False
    for _ in range(50):
        schedule.step(forest)
        if forest.end_condition(schedule):
            ended = True
            break
    assert ended
    assert forest.step < 50
    statuses = {tree.status for _, tree in forest.field.iter_objects()}
    assert statuses == {Status.BURNED}
    assert forest.burned == 25


def test_end_condition_false_while_burning():
    forest = BayesianForest((6, 6), 1.0, rng=random.Random(1))
    schedule = Schedule()
    forest.init(schedule)
    schedule.step(forest)
    assert forest.end_condition(schedule) is False
    assert forest.before_green + forest.before_burning + forest.before_burned == 36


def test_objective_on_empty_forest(capsys):
    result = objective([0.0])
    assert result == 1.0
    assert "AVG steps 1" in capsys.readouterr().out


def test_main_reports_result(capsys):
    code = main(
        ["--iterations", "1", "--width", "4", "--height", "4", "--steps", "20", "--reps", "1"]
    )
    out = capsys.readouterr().out
    assert code == 0
    assert "Final res: Point [" in out
    assert out.count("AVG steps") == INIT_ELEMENTS + 1