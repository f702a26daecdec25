from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from powerplant.catalog import GeneratorCatalog
from powerplant.config import EconomyConfig
from powerplant.engine import Listener, SimulationEngine
from powerplant.errors import StorageError
from powerplant.generator import GeneratorStatus
from powerplant.persistence import PersistenceAdapter
from powerplant.prestige import PrestigeController, PrestigePreview, PrestigeResult
from powerplant.state import EconomyState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EconomySnapshot:
    """Read-only view of the economy for the presentation layer."""

    currency: float
    lifetime_earned: float
    generation: float
    demand: float
    income: float
    prestige_level: int
    prestige_multiplier: float
    generators: tuple[GeneratorStatus, ...]
    can_prestige: bool
    prestige_pending: bool


class GameSession:
    """One running game: owns the state and turns user intents into engine calls."""

    def __init__(
        self,
        state: EconomyState,
        engine: SimulationEngine,
        persistence: PersistenceAdapter | None = None,
    ) -> None:
        self.state = state
        self.engine = engine
        self.persistence = persistence
        self.prestige = PrestigeController(engine)
        self.prestige_pending = False
        self._closed = False

    @classmethod
    def hydrate(
        cls,
        persistence: PersistenceAdapter,
        catalog: GeneratorCatalog | None = None,
        config: EconomyConfig | None = None,
    ) -> GameSession:
        """Load the saved game (or defaults) and wire the engine to the save slot."""
        catalog = catalog if catalog is not None else persistence.catalog
        config = config if config is not None else persistence.config
        engine = SimulationEngine(catalog, config, persistence=persistence)
        state = persistence.load()
        engine.recompute_aggregates(state)
        return cls(state, engine, persistence)

    def teardown(self) -> None:
        """Final save. The session must not be used afterwards."""
        if self._closed:
            return
        self.autosave()
        self._closed = True

    # ── Scheduler hooks ──────────────────────────────────────────────

    def frame(self, elapsed_millis: float) -> float:
        return self.engine.tick(self.state, elapsed_millis)

    def autosave(self) -> bool:
        """Persist the state. Returns False (and logs) on storage failure."""
        if self.persistence is None:
            return False
        try:
            self.persistence.save(self.state)
        except StorageError as e:
            logger.warning("Autosave failed, continuing unsaved: %s", e)
            return False
        return True

    # ── Intents ──────────────────────────────────────────────────────

    def buy_generator(self, kind: str) -> bool:
        return self.engine.buy(self.state, kind)

    def request_prestige(self) -> PrestigePreview | None:
        """Open the prestige confirmation if eligible. Returns what it would grant."""
        if not self.prestige.can_prestige(self.state):
            return None
        self.prestige_pending = True
        return self.prestige.preview(self.state)

    def confirm_prestige(self) -> PrestigeResult:
        if not self.prestige_pending:
            return PrestigeResult(
                success=False,
                new_level=self.state.prestige_level,
                reason="No prestige requested",
            )
        self.prestige_pending = False
        return self.prestige.do_prestige(self.state)

    def cancel_prestige(self) -> None:
        self.prestige_pending = False

    # ── Queries ──────────────────────────────────────────────────────

    def snapshot(self) -> EconomySnapshot:
        state = self.state
        with state.lock:
            return EconomySnapshot(
                currency=state.currency,
                lifetime_earned=state.lifetime_earned,
                generation=state.generation,
                demand=state.demand,
                income=state.income,
                prestige_level=state.prestige_level,
                prestige_multiplier=state.prestige_multiplier,
                generators=tuple(self.engine.statuses(state)),
                can_prestige=self.prestige.can_prestige(state),
                prestige_pending=self.prestige_pending,
            )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        return self.engine.subscribe(listener)
