"""MCP server wrapping a GameSession for interactive AI playtesting."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from mcp.server.fastmcp import FastMCP

from powerplant.errors import StorageError
from powerplant.persistence import PersistenceAdapter
from powerplant.session import GameSession

# Maximum seconds per wait() call (24 hours)
_MAX_WAIT = 86400


@dataclass
class _GameHolder:
    """Holds the persistence adapter and the active session."""

    persistence: PersistenceAdapter
    session: GameSession


# ── Tool logic functions (testable without MCP protocol) ────────────


def _tool_get_catalog(holder: _GameHolder) -> dict[str, Any]:
    catalog = holder.session.engine.catalog
    return {
        "generators": [
            {
                "id": k.id,
                "display_name": k.display_name,
                "base_cost": k.base_cost,
                "power": k.power,
                "income": k.income,
            }
            for k in catalog
        ],
    }


def _tool_get_state(holder: _GameHolder) -> dict[str, Any]:
    snap = holder.session.snapshot()
    return {
        "currency": round(snap.currency, 2),
        "lifetime_earned": round(snap.lifetime_earned, 2),
        "income": round(snap.income, 4),
        "generation": round(snap.generation, 2),
        "demand": snap.demand,
        "prestige_level": snap.prestige_level,
        "prestige_multiplier": snap.prestige_multiplier,
        "can_prestige": snap.can_prestige,
        "generators": {
            g.id: {
                "count": g.count,
                "cost": g.cost,
                "affordable": g.affordable,
                "time_to_afford": _round_optional(
                    holder.session.engine.time_to_afford(holder.session.state, g.id)
                ),
            }
            for g in snap.generators
        },
    }


def _round_optional(value: float | None) -> float | None:
    return round(value, 2) if value is not None else None


def _tool_buy(holder: _GameHolder, kind: str, count: int = 1) -> dict[str, Any]:
    session = holder.session
    if kind not in session.engine.catalog:
        return {"error": f"Unknown generator: {kind!r}"}
    if count < 1:
        return {"error": "Count must be at least 1"}

    bought = 0
    for _ in range(count):
        if not session.buy_generator(kind):
            break
        bought += 1

    result: dict[str, Any] = {
        "success": bought > 0,
        "bought": bought,
        "new_count": session.state.count(kind),
        "next_cost": session.state.cost(kind),
        "currency": round(session.state.currency, 2),
    }
    if bought < count:
        result["reason"] = "Cannot afford"
    return result


def _tool_prestige_preview(holder: _GameHolder) -> dict[str, Any]:
    preview = holder.session.prestige.preview(holder.session.state)
    return {
        "eligible": preview.eligible,
        "reward": preview.reward,
        "new_level": preview.new_level,
        "new_multiplier": preview.new_multiplier,
    }


def _tool_prestige(holder: _GameHolder) -> dict[str, Any]:
    session = holder.session
    if session.request_prestige() is None:
        return {
            "success": False,
            "reason": "Lifetime earnings below prestige threshold",
        }
    result = session.confirm_prestige()
    if result.success:
        return {
            "success": True,
            "reward": result.reward,
            "new_level": result.new_level,
            "prestige_multiplier": session.state.prestige_multiplier,
        }
    return {"success": False, "reason": result.reason}


def _tool_wait(holder: _GameHolder, seconds: float) -> dict[str, Any]:
    if seconds <= 0:
        return {"error": "Seconds must be positive"}
    if seconds > _MAX_WAIT:
        return {"error": f"Cannot wait more than {_MAX_WAIT} seconds (24h) per call"}

    # Subdivide into 1-second ticks
    earned = 0.0
    remaining = seconds
    while remaining > 0:
        dt = min(1.0, remaining)
        earned += holder.session.frame(dt * 1000.0)
        remaining -= dt

    state = holder.session.state
    return {
        "waited": seconds,
        "earned": round(earned, 2),
        "currency": round(state.currency, 2),
        "lifetime_earned": round(state.lifetime_earned, 2),
        "can_prestige": holder.session.prestige.can_prestige(state),
    }


def _tool_save(holder: _GameHolder) -> dict[str, Any]:
    try:
        holder.persistence.save(holder.session.state)
    except StorageError as e:
        return {"success": False, "reason": str(e)}
    return {"success": True}


def _tool_new_game(holder: _GameHolder) -> dict[str, Any]:
    try:
        holder.persistence.clear()
    except StorageError as e:
        return {"success": False, "reason": str(e)}
    holder.session = GameSession.hydrate(holder.persistence)
    return {"success": True, "message": "Game reset to initial state"}


# ── Server factory ──────────────────────────────────────────────────


def create_server(persistence: PersistenceAdapter) -> FastMCP:
    """Create an MCP server playing the game stored behind *persistence*."""
    holder = _GameHolder(
        persistence=persistence,
        session=GameSession.hydrate(persistence),
    )

    mcp = FastMCP(name="Power Plant")

    @mcp.tool()
    def get_catalog() -> dict[str, Any]:
        """Get the generator catalog: base cost, power and income per unit."""
        return _tool_get_catalog(holder)

    @mcp.tool()
    def get_state() -> dict[str, Any]:
        """Get current economy snapshot: currency, income, prestige, per-generator counts and costs."""
        return _tool_get_state(holder)

    @mcp.tool()
    def buy(kind: str, count: int = 1) -> dict[str, Any]:
        """Buy up to `count` generators of a kind. Stops at the first unaffordable one."""
        return _tool_buy(holder, kind, count)

    @mcp.tool()
    def prestige_preview() -> dict[str, Any]:
        """Show what a prestige reset would grant right now."""
        return _tool_prestige_preview(holder)

    @mcp.tool()
    def prestige() -> dict[str, Any]:
        """Reset the run for prestige levels (requires 100K lifetime earnings)."""
        return _tool_prestige(holder)

    @mcp.tool()
    def wait(seconds: float) -> dict[str, Any]:
        """Advance game time by the given seconds (max 86400). Time is subdivided into 1s ticks."""
        return _tool_wait(holder, seconds)

    @mcp.tool()
    def save() -> dict[str, Any]:
        """Write the current state to the save slot."""
        return _tool_save(holder)

    @mcp.tool()
    def new_game() -> dict[str, Any]:
        """Delete the save slot and start over."""
        return _tool_new_game(holder)

    return mcp
