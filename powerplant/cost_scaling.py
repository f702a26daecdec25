from __future__ import annotations

import math
from typing import Callable


class CostScaling:
    """Determines the next purchase cost from the current one."""

    def __init__(self, fn: Callable[[float], float]) -> None:
        self._fn = fn

    def next_cost(self, cost: float) -> float:
        return self._fn(cost)

    def ladder(self, base_cost: float, steps: int) -> list[float]:
        """Costs of the first *steps* purchases, starting at *base_cost*.

        Each rung is derived from the previous (already rounded) rung, so
        rounding error accumulates exactly as it does during play.
        """
        costs: list[float] = []
        cost = base_cost
        for _ in range(steps):
            costs.append(cost)
            cost = self._fn(cost)
        return costs

    @classmethod
    def truncated(cls, growth_rate: float = 1.15) -> CostScaling:
        """Cost = floor(previous_cost * growth_rate)."""
        gr = growth_rate  # capture

        def _compute(cost: float) -> float:
            return math.floor(cost * gr)

        return cls(_compute)
