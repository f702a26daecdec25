from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class GeneratorKind:
    """Static economics of one generator kind."""

    id: str
    display_name: str = ""
    base_cost: float = 0.0
    power: float = 0.0
    income: float = 0.0

    def __post_init__(self) -> None:
        if not self.display_name:
            object.__setattr__(self, "display_name", self.id.capitalize())


@dataclass
class GeneratorHolding:
    """Mutable ownership record for one generator kind."""

    count: int = 0
    cost: float = 0.0


@dataclass(frozen=True)
class GeneratorStatus:
    """Read-only snapshot of a holding for display."""

    id: str
    display_name: str
    count: int
    cost: float
    affordable: bool
