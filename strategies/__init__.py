"""Computer strategies for Sevens."""

from strategies.base import Strategy
from strategies.heuristic import HeuristicStrategy

__all__ = [
    "Strategy",
    "HeuristicStrategy",
]
