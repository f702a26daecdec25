from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from powerplant.generator import GeneratorStatus

if TYPE_CHECKING:
    from powerplant.session import GameSession
    from powerplant.state import EconomyState


class Strategy(ABC):
    """Base class for headless autoplay strategies."""

    @abstractmethod
    def decide_purchases(
        self, state: EconomyState, affordable: list[GeneratorStatus]
    ) -> list[str]:
        """Return ordered list of generator IDs to buy."""
        ...

    def should_prestige(self, state: EconomyState) -> bool:
        return False

    @abstractmethod
    def describe(self) -> str: ...


class Idle(Strategy):
    """Never buys anything."""

    def decide_purchases(
        self, state: EconomyState, affordable: list[GeneratorStatus]
    ) -> list[str]:
        return []

    def describe(self) -> str:
        return "Idle"


class GreedyCheapest(Strategy):
    """Buy the cheapest affordable generator first."""

    def __init__(self, prestige_mode: str = "never") -> None:
        self.prestige_mode = prestige_mode  # "never" or "first_opportunity"

    def decide_purchases(
        self, state: EconomyState, affordable: list[GeneratorStatus]
    ) -> list[str]:
        return [g.id for g in sorted(affordable, key=lambda g: g.cost)]

    def should_prestige(self, state: EconomyState) -> bool:
        return self.prestige_mode == "first_opportunity"

    def describe(self) -> str:
        if self.prestige_mode == "first_opportunity":
            return "GreedyCheapest (prestige asap)"
        return "GreedyCheapest"


@dataclass
class AutoplayReport:
    """Summary of an autoplay run."""

    strategy_description: str = ""
    total_time: float = 0.0
    purchases: dict[str, int] = field(default_factory=dict)
    prestiges: int = 0
    prestige_eligible_at: float | None = None
    final_currency: float = 0.0
    final_income: float = 0.0

    @property
    def purchase_count(self) -> int:
        return sum(self.purchases.values())


def autoplay(
    session: GameSession,
    strategy: Strategy,
    seconds: float,
    step: float = 1.0,
) -> AutoplayReport:
    """Advance *session* by *seconds* of simulated time in *step*-second ticks."""
    report = AutoplayReport(strategy_description=strategy.describe())
    state = session.state
    elapsed = 0.0

    while elapsed < seconds:
        dt = min(step, seconds - elapsed)
        session.frame(dt * 1000.0)
        elapsed += dt

        if report.prestige_eligible_at is None and session.prestige.can_prestige(state):
            report.prestige_eligible_at = elapsed

        if session.prestige.can_prestige(state) and strategy.should_prestige(state):
            if session.request_prestige() is not None:
                if session.confirm_prestige().success:
                    report.prestiges += 1

        # Keep buying until the strategy runs out of affordable picks
        while True:
            affordable = [g for g in session.engine.statuses(state) if g.affordable]
            bought = False
            for kind in strategy.decide_purchases(state, affordable):
                if session.buy_generator(kind):
                    report.purchases[kind] = report.purchases.get(kind, 0) + 1
                    bought = True
                    break
            if not bought:
                break

    report.total_time = elapsed
    report.final_currency = state.currency
    report.final_income = state.income
    return report
