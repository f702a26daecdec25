from __future__ import annotations

import threading
from typing import TYPE_CHECKING

from powerplant.generator import GeneratorHolding

if TYPE_CHECKING:
    from powerplant.catalog import GeneratorCatalog
    from powerplant.config import EconomyConfig


class EconomyState:
    """Mutable runtime container holding all economy state.

    ``generation``, ``income``, ``demand`` and ``prestige_multiplier`` are
    derived; they are only current after ``SimulationEngine.recompute_aggregates``.
    Mutations and snapshot reads happen under ``lock``.
    """

    def __init__(
        self,
        catalog: GeneratorCatalog,
        config: EconomyConfig,
    ) -> None:
        self.lock = threading.RLock()
        self.currency: float = config.restart_currency
        self.lifetime_earned: float = 0.0
        self.generation: float = 0.0
        self.demand: float = float(config.demand_base)
        self.income: float = 0.0
        self.prestige_level: int = 0
        self.prestige_multiplier: float = 1.0
        self.holdings: dict[str, GeneratorHolding] = {}

        for kind in catalog:
            self.holdings[kind.id] = GeneratorHolding(count=0, cost=kind.base_cost)

    def count(self, kind: str) -> int:
        h = self.holdings.get(kind)
        return h.count if h else 0

    def cost(self, kind: str) -> float | None:
        h = self.holdings.get(kind)
        return h.cost if h else None

    def can_afford(self, kind: str) -> bool:
        h = self.holdings.get(kind)
        return h is not None and self.currency >= h.cost

    def __repr__(self) -> str:
        counts = ", ".join(f"{k}={h.count}" for k, h in self.holdings.items())
        return (
            f"EconomyState(currency={self.currency:.2f}, "
            f"lifetime_earned={self.lifetime_earned:.2f}, "
            f"prestige_level={self.prestige_level}, {counts})"
        )
