from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from powerplant.engine import SimulationEngine
    from powerplant.state import EconomyState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PrestigePreview:
    """What a prestige would grant right now."""

    eligible: bool
    reward: int
    new_level: int
    new_multiplier: float


@dataclass(frozen=True)
class PrestigeResult:
    """Outcome of a prestige attempt."""

    success: bool
    reward: int = 0
    new_level: int = 0
    reason: str = ""


class PrestigeController:
    """Eligibility, reward and the reset transaction for prestige."""

    def __init__(self, engine: SimulationEngine) -> None:
        self.engine = engine

    @property
    def threshold(self) -> float:
        return self.engine.config.prestige_threshold

    def can_prestige(self, state: EconomyState) -> bool:
        return state.lifetime_earned >= self.threshold

    def prestige_reward(self, state: EconomyState) -> int:
        """floor(sqrt(lifetime / threshold)), or 0 when not eligible."""
        if not self.can_prestige(state):
            return 0
        return math.floor(math.sqrt(state.lifetime_earned / self.threshold))

    def preview(self, state: EconomyState) -> PrestigePreview:
        with state.lock:
            reward = self.prestige_reward(state)
            new_level = state.prestige_level + reward
            return PrestigePreview(
                eligible=self.can_prestige(state),
                reward=reward,
                new_level=new_level,
                new_multiplier=1.0 + self.engine.config.prestige_step * new_level,
            )

    def do_prestige(self, state: EconomyState) -> PrestigeResult:
        """Reset the run in exchange for prestige levels.

        The whole reset happens under the state lock; no reader observes a
        partially reset state.
        """
        config = self.engine.config
        catalog = self.engine.catalog

        with state.lock:
            if not self.can_prestige(state):
                return PrestigeResult(
                    success=False,
                    new_level=state.prestige_level,
                    reason=(
                        f"Lifetime earnings {state.lifetime_earned:.0f} "
                        f"below {self.threshold:.0f}"
                    ),
                )

            reward = self.prestige_reward(state)
            state.prestige_level += reward

            state.currency = config.restart_currency
            state.lifetime_earned = 0.0
            for kind in catalog:
                h = state.holdings[kind.id]
                h.count = 0
                h.cost = catalog.base_cost(kind.id)

            self.engine.commit(state)
            logger.info(
                "Prestiged for %d level(s); now level %d (x%.2f)",
                reward,
                state.prestige_level,
                state.prestige_multiplier,
            )
            return PrestigeResult(
                success=True, reward=reward, new_level=state.prestige_level
            )
