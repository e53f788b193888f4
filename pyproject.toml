[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "agentzoo"
version = "0.1.0"
description = "A small engine for grid and continuous-space agent-based models, with ant foraging, flocking, forest fire and Schelling segregation models"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "agent-based modelling",
    "simulation",
    "ants",
    "pheromones",
    "flocking",
    "boids",
    "forest fire",
    "schelling",
    "segregation",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Education",
    "Environment :: Console",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Artificial Life",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
agentzoo-ants = "agentzoo.ants:main"
agentzoo-flockers = "agentzoo.flockers:main"
agentzoo-schelling = "agentzoo.schelling:main"
agentzoo-forestfire = "agentzoo.forestfire:main"
agentzoo-forestfire-bayesian = "agentzoo.forestfire_bayesian:main"

[tool.hatch.build.targets.wheel]
packages = ["agentzoo"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
