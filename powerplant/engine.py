from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Callable

from powerplant.catalog import GeneratorCatalog, default_catalog
from powerplant.config import EconomyConfig
from powerplant.cost_scaling import CostScaling
from powerplant.errors import StorageError
from powerplant.generator import GeneratorStatus

if TYPE_CHECKING:
    from powerplant.persistence import PersistenceAdapter
    from powerplant.state import EconomyState

logger = logging.getLogger(__name__)

Listener = Callable[["EconomyState"], None]


def recompute_aggregates(
    state: EconomyState, catalog: GeneratorCatalog, config: EconomyConfig
) -> None:
    """Rebuild multiplier, generation, income and demand from holdings."""
    with state.lock:
        mult = 1.0 + config.prestige_step * state.prestige_level
        generation = 0.0
        income = 0.0
        for kind in catalog:
            h = state.holdings.get(kind.id)
            if h is None or h.count <= 0:
                continue
            generation += h.count * kind.power * mult
            income += h.count * kind.income * mult

        state.prestige_multiplier = mult
        state.generation = generation
        state.income = income
        state.demand = config.demand_base + math.floor(config.demand_factor * generation)


class SimulationEngine:
    """Authoritative economy logic. State is always passed in explicitly."""

    def __init__(
        self,
        catalog: GeneratorCatalog | None = None,
        config: EconomyConfig | None = None,
        persistence: PersistenceAdapter | None = None,
    ) -> None:
        self.catalog = catalog if catalog is not None else default_catalog()
        self.config = config if config is not None else EconomyConfig()

        errors = self.config.validate() + self.catalog.validate()
        if errors:
            raise ValueError(
                "Invalid economy setup:\n" + "\n".join(f"  - {e}" for e in errors)
            )

        self.persistence = persistence
        self.cost_scaling = CostScaling.truncated(self.config.cost_growth)
        self._listeners: list[Listener] = []

    # ── Core loop ────────────────────────────────────────────────────

    def recompute_aggregates(self, state: EconomyState) -> None:
        recompute_aggregates(state, self.catalog, self.config)

    def tick(self, state: EconomyState, elapsed_millis: float) -> float:
        """Advance the economy by *elapsed_millis* of wall-clock time.

        Returns the amount earned. Negative, non-finite or implausibly large
        deltas (clock changes) earn nothing.
        """
        # Splitting a span into ticks is additive only while every piece and
        # the whole stay within max_tick_millis; a span above the cap earns 0
        # even when its halves would each earn.
        if (
            not math.isfinite(elapsed_millis)
            or elapsed_millis < 0
            or elapsed_millis > self.config.max_tick_millis
        ):
            if elapsed_millis != 0:
                logger.debug("Ignoring tick delta of %r ms", elapsed_millis)
            return 0.0

        with state.lock:
            earned = state.income * (elapsed_millis / 1000.0)
            state.currency += earned
            state.lifetime_earned += earned
        return earned

    # ── Player actions ───────────────────────────────────────────────

    def buy(self, state: EconomyState, kind: str) -> bool:
        """Attempt to buy one generator of *kind*. Returns True on success."""
        with state.lock:
            h = state.holdings.get(kind)
            if h is None or kind not in self.catalog:
                return False
            if state.currency < h.cost:
                return False

            state.currency -= h.cost
            h.count += 1
            h.cost = self.cost_scaling.next_cost(h.cost)
            logger.debug("Bought %s (now %d, next cost %s)", kind, h.count, h.cost)
            self.commit(state)
        return True

    def commit(self, state: EconomyState) -> None:
        """Recompute aggregates, persist, then notify listeners."""
        with state.lock:
            self.recompute_aggregates(state)
            if self.persistence is not None:
                try:
                    self.persistence.save(state)
                except StorageError as e:
                    logger.warning("Save after state change failed: %s", e)
            for listener in list(self._listeners):
                listener(state)

    # ── Queries ──────────────────────────────────────────────────────

    def statuses(self, state: EconomyState) -> list[GeneratorStatus]:
        """Per-kind count, cost and affordability in catalog order."""
        with state.lock:
            result: list[GeneratorStatus] = []
            for kind in self.catalog:
                h = state.holdings[kind.id]
                result.append(
                    GeneratorStatus(
                        id=kind.id,
                        display_name=kind.display_name,
                        count=h.count,
                        cost=h.cost,
                        affordable=state.currency >= h.cost,
                    )
                )
            return result

    def time_to_afford(self, state: EconomyState, kind: str) -> float | None:
        """Seconds until *kind* is affordable at current income. None if never."""
        cost = state.cost(kind)
        if cost is None:
            return None
        if state.currency >= cost:
            return 0.0
        if state.income <= 0:
            return None
        return (cost - state.currency) / state.income

    # ── Extension points ─────────────────────────────────────────────

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener* for committed mutations. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe
