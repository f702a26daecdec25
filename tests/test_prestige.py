"""Tests for prestige module."""
import pytest

from powerplant.catalog import default_catalog
from powerplant.config import EconomyConfig
from powerplant.engine import SimulationEngine
from powerplant.persistence import MemoryBlobStore, PersistenceAdapter
from powerplant.prestige import PrestigeController
from powerplant.state import EconomyState


def _make_controller(persistence=None) -> PrestigeController:
    engine = SimulationEngine(default_catalog(), EconomyConfig(), persistence=persistence)
    return PrestigeController(engine)


def _make_state(controller: PrestigeController) -> EconomyState:
    state = EconomyState(controller.engine.catalog, controller.engine.config)
    controller.engine.recompute_aggregates(state)
    return state


def _make_rich_state(controller: PrestigeController) -> EconomyState:
    """A mid-run state with drifted costs and 400K lifetime earnings."""
    state = _make_state(controller)
    state.currency = 5_000.0
    state.lifetime_earned = 400_000.0
    state.prestige_level = 1
    state.holdings["solar"].count = 12
    state.holdings["solar"].cost = 53
    state.holdings["nuclear"].count = 2
    state.holdings["nuclear"].cost = 3967
    controller.engine.recompute_aggregates(state)
    return state


def test_can_prestige_threshold():
    controller = _make_controller()
    state = _make_state(controller)
    state.lifetime_earned = 99_999.99
    assert not controller.can_prestige(state)
    state.lifetime_earned = 100_000
    assert controller.can_prestige(state)


def test_can_prestige_ignores_current_currency():
    controller = _make_controller()
    state = _make_state(controller)
    state.currency = 1e9
    assert not controller.can_prestige(state)


@pytest.mark.parametrize(
    "lifetime,reward",
    [
        (0, 0),
        (99_999, 0),
        (100_000, 1),
        (399_999, 1),
        (400_000, 2),
        (900_000, 3),
        (10_000_000, 10),
    ],
)
def test_prestige_reward(lifetime, reward):
    controller = _make_controller()
    state = _make_state(controller)
    state.lifetime_earned = lifetime
    assert controller.prestige_reward(state) == reward


def test_prestige_reward_is_non_decreasing():
    controller = _make_controller()
    state = _make_state(controller)
    last = 0
    for lifetime in range(0, 5_000_000, 25_000):
        state.lifetime_earned = lifetime
        reward = controller.prestige_reward(state)
        assert reward >= last
        last = reward


def test_do_prestige_when_ineligible_is_noop():
    controller = _make_controller()
    state = _make_state(controller)
    state.currency = 5_000
    state.lifetime_earned = 50_000
    state.holdings["wind"].count = 4
    state.holdings["wind"].cost = 174
    result = controller.do_prestige(state)
    assert not result.success
    assert result.reason
    assert state.currency == 5_000
    assert state.lifetime_earned == 50_000
    assert state.holdings["wind"].count == 4
    assert state.holdings["wind"].cost == 174
    assert state.prestige_level == 0


def test_do_prestige_resets_run():
    controller = _make_controller()
    state = _make_rich_state(controller)
    result = controller.do_prestige(state)

    assert result.success
    assert result.reward == 2
    assert result.new_level == 3
    assert state.prestige_level == 3
    assert state.prestige_multiplier == pytest.approx(1.75)
    assert state.currency == 10
    assert state.lifetime_earned == 0
    for kind in default_catalog():
        assert state.holdings[kind.id].count == 0
        assert state.holdings[kind.id].cost == kind.base_cost
    assert state.income == 0
    assert state.generation == 0
    assert state.demand == 50


def test_do_prestige_returns_to_ineligible():
    controller = _make_controller()
    state = _make_rich_state(controller)
    controller.do_prestige(state)
    assert not controller.can_prestige(state)
    assert not controller.do_prestige(state).success
    assert state.prestige_level == 3


def test_multiplier_applies_after_prestige():
    controller = _make_controller()
    state = _make_rich_state(controller)
    controller.do_prestige(state)
    assert controller.engine.buy(state, "solar")
    assert state.income == pytest.approx(2 * 1.75)


def test_preview():
    controller = _make_controller()
    state = _make_rich_state(controller)
    preview = controller.preview(state)
    assert preview.eligible
    assert preview.reward == 2
    assert preview.new_level == 3
    assert preview.new_multiplier == pytest.approx(1.75)
    # Previewing does not change anything
    assert state.prestige_level == 1


def test_preview_ineligible():
    controller = _make_controller()
    state = _make_state(controller)
    preview = controller.preview(state)
    assert not preview.eligible
    assert preview.reward == 0
    assert preview.new_multiplier == pytest.approx(1.0)


def test_do_prestige_persists():
    store = MemoryBlobStore()
    controller = _make_controller(PersistenceAdapter(store))
    state = _make_rich_state(controller)
    controller.do_prestige(state)
    assert '"prestigeLevel": 3' in store.blobs["powerPlantSavePC"]


def test_listeners_see_complete_reset():
    controller = _make_controller()
    state = _make_rich_state(controller)
    seen = []

    def _listener(s):
        seen.append(
            (
                s.currency,
                s.lifetime_earned,
                s.prestige_level,
                s.prestige_multiplier,
                [(h.count, h.cost) for h in s.holdings.values()],
            )
        )

    controller.engine.subscribe(_listener)
    controller.do_prestige(state)
    assert seen == [
        (10, 0.0, 3, 1.75, [(0, k.base_cost) for k in default_catalog()])
    ]
