from __future__ import annotations

import math
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from powerplant.session import EconomySnapshot

_SUFFIXES = (
    (1_000_000_000, "B"),
    (1_000_000, "M"),
    (1_000, "K"),
)


def format_number(value: float) -> str:
    """Compact display: one decimal with K/M/B suffix, floored integer below 1000."""
    for threshold, suffix in _SUFFIXES:
        if value >= threshold:
            return f"{value / threshold:.1f}{suffix}"
    return str(math.floor(value))


def format_multiplier(multiplier: float) -> str:
    return f"{multiplier:.1f}"


def format_status(snapshot: EconomySnapshot) -> str:
    """Format an economy snapshot for console output."""
    lines: list[str] = []

    lines.append("=" * 20 + " Power Plant " + "=" * 20)
    lines.append(f"Money:      {format_number(snapshot.currency)}")
    lines.append(f"Income:     +{format_number(snapshot.income)}/s")
    lines.append(f"Generation: {format_number(snapshot.generation)}")
    lines.append(f"Demand:     {format_number(snapshot.demand)}")
    lines.append(
        f"Prestige:   {snapshot.prestige_level} "
        f"(x{format_multiplier(snapshot.prestige_multiplier)})"
    )
    lines.append("")

    lines.append("GENERATORS:")
    for g in snapshot.generators:
        marker = "  *" if g.affordable else "   "
        lines.append(
            f"{marker} {g.display_name:.<24s} {g.count:>5d}   cost {format_number(g.cost)}"
        )
    lines.append("")

    if snapshot.can_prestige:
        lines.append("Prestige available.")

    return "\n".join(lines)
