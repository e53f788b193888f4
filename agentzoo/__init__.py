"""Agent-based modelling engine with ant foraging, flocking, forest fire and Schelling models."""

__version__ = "0.1.0"
__all__ = ["__version__"]