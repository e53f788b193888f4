# agentzoo

A small agent-based modelling engine with no dependencies beyond the
standard library, and five models built on it:

- **Ant foraging** (`agentzoo.ants`): ants start at a nest, search for food
  around two elliptical obstacles and lay "to home" and "to food" pheromones
  that evaporate on every step.
- **Flockers** (`agentzoo.flockers`): birds in a toroidal continuous space
  steer by cohesion, avoidance, consistency, momentum and some randomness.
- **Schelling segregation** (`agentzoo.schelling`): red and blue patches with
  fewer than three like neighbours move to a random empty cell.
- **Forest fire** (`agentzoo.forestfire`): trees along the left edge start
  burning; the fire spreads to neighbouring green trees, and burning trees
  burn out.
- **Forest fire with density search** (`agentzoo.forestfire_bayesian`):
  `BayesianForest` ends a run once the counts of green, burning and burned
  trees stop changing, and a command searches over tree density.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Commands

Every command runs its model without any display. The first four run
`simulate` and print the elapsed time and steps per second of each run.

| Command | Options (defaults) |
| --- | --- |
| `agentzoo-ants` | `--steps` (1000), `--reps` (10), `--seed` |
| `agentzoo-flockers` | `--steps` (500), `--reps` (10), `--agents` (100), `--seed` |
| `agentzoo-schelling` | `--steps` (10), `--reps` (10), `--agents` (320), `--seed` |
| `agentzoo-forestfire` | `--steps` (100), `--reps` (10), `--width` (200), `--height` (200), `--density` (0.7), `--seed` |
| `agentzoo-forestfire-bayesian` | `--iterations` (10), `--width` (200), `--height` (200), `--steps` (500), `--reps` (3), `--seed` (10) |

`agentzoo-forestfire-bayesian` evaluates four random starting densities,
then on each iteration draws a batch of 200 candidate densities, evaluates
the one farthest from every density tried so far, and prints the average
number of steps of each evaluation. At the end it prints the density whose
fire lasted the fewest steps, as `Final res: Point [...], val ...`.

## The engine

`agentzoo.engine`:

- `Int2D` and `Real2D`: frozen grid and continuous locations.
- `State`: the base class of a model. Subclasses implement `init(schedule)`
  and `reset()`, and may override `update(step)`, `before_step(schedule)`,
  `after_step(schedule)` and `end_condition(schedule)`. `halt()` makes the
  default `end_condition` return True.
- `Schedule`: `schedule_repeating(agent, time, ordering)` queues an agent
  (any object with a `step(state)` method) to run at `time` and every unit of
  time after; `step(state)` runs every agent due at the earliest time, lowest
  `ordering` first, then calls `after_step` and `update`.
- `simulate(state, steps, reps)`: runs `reps` runs of at most `steps` steps,
  stopping a run early when `end_condition` is true and calling `reset`
  after each run. It returns one `(elapsed_seconds, steps_per_second)` pair
  per run.

`agentzoo.grids`:

- `SparseGrid2D` and `DenseGrid2D` hold objects on integer cells, with
  `set_object_location`, `get_objects`, `get_location`, `get`,
  `iter_objects`, `lazy_update` and `update`. `SparseGrid2D` also has
  `get_random_empty_bag(rng)`.
- `NumberGrid2D` holds a number per cell (`get_value`,
  `set_value_location`, `apply_to_all_values`, `update`); `PheromoneGrid`
  multiplies every value by its evaporation rate on `update` and drops values
  below its low threshold to zero.
- `Field2D` holds objects in continuous space, optionally toroidal, and
  answers `get_neighbors_within_distance(loc, distance)`.
- `toroidal_distance(a, b, dim)` and `toroidal_transform(value, dim)` handle
  wrap-around.

Writes to every grid and field are buffered: they become readable only after
`update` or `lazy_update`, so all agents in a step read the same picture of
the world. Locations outside a grid raise `ValueError`.

## Example

```python
import random

from agentzoo.engine import simulate
from agentzoo.forestfire import Forest

forest = Forest((200, 200), 0.7, rng=random.Random(1))
for elapsed, rate in simulate(forest, 100, 1):
    print(elapsed, rate)
```

The other models are used the same way: `AntsState` in `agentzoo.ants`,
`Flocker` in `agentzoo.flockers`, `World` in `agentzoo.schelling` and
`BayesianForest` in `agentzoo.forestfire_bayesian`. Each takes an optional
`random.Random` as `rng` for repeatable runs.

## What the package does not do

There is no graphical view of the models: no window, sprites or pheromone
maps. Runs are headless, and the commands report only timings (or, for the
density search, average step counts). The density search is a plain
space-filling random search, not a surrogate-model optimiser.