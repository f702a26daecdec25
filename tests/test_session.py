"""Tests for session module."""
import json

import pytest

from powerplant.errors import StorageError
from powerplant.persistence import BlobStore, MemoryBlobStore, PersistenceAdapter
from powerplant.session import GameSession

KEY = "powerPlantSavePC"


class _FlakyStore(MemoryBlobStore):
    """Reads fine, fails writes while ``broken`` is set."""

    def __init__(self) -> None:
        super().__init__()
        self.broken = False

    def set(self, key, blob):
        if self.broken:
            raise StorageError("write refused")
        super().set(key, blob)


def _make_session(store: BlobStore | None = None) -> GameSession:
    store = store if store is not None else MemoryBlobStore()
    return GameSession.hydrate(PersistenceAdapter(store, clock=lambda: 0.0))


def test_hydrate_fresh():
    session = _make_session()
    snap = session.snapshot()
    assert snap.currency == 10
    assert snap.income == 0
    assert snap.demand == 50
    assert snap.prestige_multiplier == 1.0
    assert not snap.can_prestige
    assert not snap.prestige_pending
    assert [g.id for g in snap.generators] == ["solar", "wind", "coal", "nuclear", "fusion"]


def test_hydrate_from_save():
    store = MemoryBlobStore(
        {KEY: json.dumps({"money": 250, "generators": {"wind": {"count": 2, "cost": 131}}})}
    )
    session = _make_session(store)
    assert session.state.currency == 250
    assert session.state.income == pytest.approx(16.0)


def test_buy_generator_persists():
    store = MemoryBlobStore()
    session = _make_session(store)
    assert session.buy_generator("solar")
    data = json.loads(store.blobs[KEY])
    assert data["generators"]["solar"]["count"] == 1
    assert data["money"] == 0


def test_snapshot_affordability():
    session = _make_session()
    snap = session.snapshot()
    by_id = {g.id: g for g in snap.generators}
    assert by_id["solar"].affordable
    assert not by_id["wind"].affordable


def test_snapshot_is_frozen():
    snap = _make_session().snapshot()
    with pytest.raises(Exception):
        snap.currency = 1e9


def test_frame_ticks():
    session = _make_session()
    session.buy_generator("solar")
    assert session.frame(500) == pytest.approx(1.0)
    assert session.state.currency == pytest.approx(1.0)


def test_request_prestige_when_ineligible():
    session = _make_session()
    assert session.request_prestige() is None
    assert not session.prestige_pending
    result = session.confirm_prestige()
    assert not result.success


def test_prestige_confirm_flow():
    session = _make_session()
    session.state.lifetime_earned = 250_000
    preview = session.request_prestige()
    assert preview is not None
    assert preview.reward == 1
    assert session.snapshot().prestige_pending

    result = session.confirm_prestige()
    assert result.success
    assert session.state.prestige_level == 1
    assert not session.prestige_pending


def test_prestige_cancel_flow():
    session = _make_session()
    session.state.lifetime_earned = 250_000
    session.request_prestige()
    session.cancel_prestige()
    result = session.confirm_prestige()
    assert not result.success
    assert session.state.prestige_level == 0
    assert session.state.lifetime_earned == 250_000


def test_autosave():
    store = _FlakyStore()
    session = _make_session(store)
    assert session.autosave()
    assert KEY in store.blobs


def test_autosave_failure_keeps_running():
    store = _FlakyStore()
    session = _make_session(store)
    store.broken = True
    assert not session.autosave()
    assert session.buy_generator("solar")  # save inside buy fails quietly too
    store.broken = False
    assert session.autosave()
    assert json.loads(store.blobs[KEY])["generators"]["solar"]["count"] == 1


def test_teardown_saves_once():
    store = MemoryBlobStore()
    session = _make_session(store)
    session.teardown()
    assert KEY in store.blobs
    del store.blobs[KEY]
    session.teardown()
    assert KEY not in store.blobs


def test_subscribe():
    session = _make_session()
    seen = []
    session.subscribe(lambda s: seen.append(s.currency))
    session.buy_generator("solar")
    assert seen == [0]
