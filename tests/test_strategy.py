"""Tests for strategy module."""
import pytest

from powerplant.engine import SimulationEngine
from powerplant.session import GameSession
from powerplant.state import EconomyState
from powerplant.strategy import GreedyCheapest, Idle, autoplay


def _make_session() -> GameSession:
    engine = SimulationEngine()
    state = EconomyState(engine.catalog, engine.config)
    engine.recompute_aggregates(state)
    return GameSession(state, engine)


def test_idle_buys_nothing():
    session = _make_session()
    report = autoplay(session, Idle(), 120)
    assert report.purchase_count == 0
    assert report.final_currency == 10
    assert report.total_time == pytest.approx(120)


def test_greedy_cheapest_first_purchase():
    session = _make_session()
    report = autoplay(session, GreedyCheapest(), 1)
    assert report.purchases == {"solar": 1}


def test_greedy_cheapest_progresses():
    session = _make_session()
    report = autoplay(session, GreedyCheapest(), 600)
    assert report.purchase_count > 10
    assert report.purchases.get("wind", 0) > 0
    assert report.final_income > 0
    assert session.state.lifetime_earned > 0


def test_decide_purchases_orders_by_cost():
    session = _make_session()
    session.state.currency = 1_000
    affordable = [g for g in session.engine.statuses(session.state) if g.affordable]
    order = GreedyCheapest().decide_purchases(session.state, affordable)
    assert order == ["solar", "wind", "coal"]


def test_prestige_at_first_opportunity():
    session = _make_session()
    session.state.lifetime_earned = 150_000
    report = autoplay(session, GreedyCheapest(prestige_mode="first_opportunity"), 1)
    assert report.prestiges == 1
    assert report.prestige_eligible_at == pytest.approx(1)
    assert session.state.prestige_level == 1


def test_never_prestige():
    session = _make_session()
    session.state.lifetime_earned = 150_000
    report = autoplay(session, GreedyCheapest(), 1)
    assert report.prestiges == 0
    assert session.state.prestige_level == 0


def test_describe():
    assert Idle().describe() == "Idle"
    assert GreedyCheapest().describe() == "GreedyCheapest"
    assert "prestige" in GreedyCheapest("first_opportunity").describe()
