"""Aspects, the stores behind them, and the registry tying them together."""

from repodrift.aspects.aspect import Aspect
from repodrift.aspects.ideals import IdealStore, InMemoryIdealStore, MissingIdealError
from repodrift.aspects.problems import InMemoryProblemStore, ProblemStore, UndesirableUsageChecker
from repodrift.aspects.registry import AspectRegistry

__all__ = [
    "Aspect",
    "AspectRegistry",
    "IdealStore",
    "InMemoryIdealStore",
    "InMemoryProblemStore",
    "MissingIdealError",
    "ProblemStore",
    "UndesirableUsageChecker",
]
