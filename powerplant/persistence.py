"""Save-slot persistence and offline catch-up."""

from __future__ import annotations

import json
import logging
import math
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable

from powerplant.catalog import GeneratorCatalog, default_catalog
from powerplant.config import EconomyConfig
from powerplant.engine import recompute_aggregates
from powerplant.errors import StorageError
from powerplant.state import EconomyState

logger = logging.getLogger(__name__)

__all__ = [
    "BlobStore",
    "MemoryBlobStore",
    "FileBlobStore",
    "StorageError",
    "PersistenceAdapter",
]


def _epoch_millis() -> float:
    return time.time() * 1000.0


# ── Blob stores ─────────────────────────────────────────────────────


class BlobStore(ABC):
    """Opaque key-value text store. Failures raise StorageError."""

    @abstractmethod
    def get(self, key: str) -> str | None: ...

    @abstractmethod
    def set(self, key: str, blob: str) -> None: ...

    def delete(self, key: str) -> None:
        raise StorageError(f"{type(self).__name__} does not support delete")


class MemoryBlobStore(BlobStore):
    """In-process store, mainly for tests and throwaway sessions."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.blobs: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.blobs.get(key)

    def set(self, key: str, blob: str) -> None:
        self.blobs[key] = blob

    def delete(self, key: str) -> None:
        self.blobs.pop(key, None)


class FileBlobStore(BlobStore):
    """One ``<key>.json`` file per key inside *directory*."""

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Cannot read {path}: {e}") from e

    def set(self, key: str, blob: str) -> None:
        path = self._path(key)
        tmp_path = path.with_suffix(".tmp")
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(blob, encoding="utf-8")
            tmp_path.replace(path)
        except OSError as e:
            raise StorageError(f"Cannot write {path}: {e}") from e

    def delete(self, key: str) -> None:
        try:
            self._path(key).unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot delete {self._path(key)}: {e}") from e


# ── Field coercion ──────────────────────────────────────────────────


# Largest count whose aggregates stay exact and within float range
_MAX_COUNT = 2.0 ** 53


def _as_number(value: Any, minimum: float = 0.0) -> float | None:
    """Return *value* as a finite float >= *minimum*, or None."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        value = float(value)
    except OverflowError:
        return None
    if not math.isfinite(value) or value < minimum:
        return None
    return value


def _as_count(value: Any) -> int | None:
    number = _as_number(value)
    if number is None or not number.is_integer() or number > _MAX_COUNT:
        return None
    return int(number)


# ── Adapter ─────────────────────────────────────────────────────────


class PersistenceAdapter:
    """Serializes EconomyState into a blob store and restores it.

    The blob is JSON with the field names ``money``, ``prestigeLevel``,
    ``totalMoneyEarned``, ``generators`` (``{kind: {count, cost}}``) and
    ``lastSave`` (epoch milliseconds). Loading never raises: every missing
    or invalid field falls back to its default on its own.
    """

    def __init__(
        self,
        store: BlobStore,
        catalog: GeneratorCatalog | None = None,
        config: EconomyConfig | None = None,
        clock: Callable[[], float] = _epoch_millis,
    ) -> None:
        self.store = store
        self.catalog = catalog if catalog is not None else default_catalog()
        self.config = config if config is not None else EconomyConfig()
        self.clock = clock
        self.last_offline_earnings: float = 0.0
        self.last_offline_seconds: float = 0.0

    @property
    def key(self) -> str:
        return self.config.save_key

    def to_record(self, state: EconomyState) -> dict[str, Any]:
        """Consistent snapshot of the persisted fields."""
        with state.lock:
            return {
                "money": state.currency,
                "prestigeLevel": state.prestige_level,
                "totalMoneyEarned": state.lifetime_earned,
                "generators": {
                    kind_id: {"count": h.count, "cost": h.cost}
                    for kind_id, h in state.holdings.items()
                },
                "lastSave": self.clock(),
            }

    def save(self, state: EconomyState) -> None:
        """Overwrite the save slot. Raises StorageError on store failure."""
        blob = json.dumps(self.to_record(state))
        self.store.set(self.key, blob)

    def clear(self) -> None:
        self.store.delete(self.key)

    def load(self) -> EconomyState:
        """Hydrate a state from the save slot, crediting offline earnings."""
        self.last_offline_earnings = 0.0
        self.last_offline_seconds = 0.0
        state = EconomyState(self.catalog, self.config)

        try:
            blob = self.store.get(self.key)
        except StorageError as e:
            logger.warning("Could not read save slot %r, starting fresh: %s", self.key, e)
            blob = None

        if blob is None:
            recompute_aggregates(state, self.catalog, self.config)
            return state

        try:
            data = json.loads(blob)
        except (json.JSONDecodeError, TypeError, ValueError, RecursionError) as e:
            logger.warning("Save slot %r is not valid JSON, using defaults: %s", self.key, e)
            data = {}
        if not isinstance(data, dict):
            logger.warning("Save slot %r holds %s, not an object", self.key, type(data).__name__)
            data = {}

        self._restore(state, data)
        recompute_aggregates(state, self.catalog, self.config)

        last_save = _as_number(data.get("lastSave"))
        if last_save is not None:
            self._credit_offline(state, last_save)

        return state

    def _restore(self, state: EconomyState, data: dict[str, Any]) -> None:
        defaulted: list[str] = []

        def pick(name: str, value: Any, default: Any, convert: Callable[[Any], Any]) -> Any:
            result = convert(value)
            if result is None:
                if value is not None:
                    defaulted.append(name)
                return default
            return result

        state.currency = pick(
            "money", data.get("money"), self.config.restart_currency, _as_number
        )
        state.prestige_level = pick("prestigeLevel", data.get("prestigeLevel"), 0, _as_count)
        state.lifetime_earned = pick(
            "totalMoneyEarned", data.get("totalMoneyEarned"), 0.0, _as_number
        )

        generators = data.get("generators")
        if not isinstance(generators, dict):
            if generators is not None:
                defaulted.append("generators")
            generators = {}

        for kind in self.catalog:
            entry = generators.get(kind.id)
            if not isinstance(entry, dict):
                if entry is not None:
                    defaulted.append(f"generators.{kind.id}")
                entry = {}
            h = state.holdings[kind.id]
            h.count = pick(f"generators.{kind.id}.count", entry.get("count"), 0, _as_count)
            h.cost = pick(
                f"generators.{kind.id}.cost",
                entry.get("cost"),
                kind.base_cost,
                lambda v, base=kind.base_cost: _as_number(v, minimum=base),
            )

        if defaulted:
            logger.warning("Recovered invalid save fields with defaults: %s", ", ".join(defaulted))

    def _credit_offline(self, state: EconomyState, last_save: float) -> None:
        # Offline earnings go to currency only, not lifetime earnings.
        offline_seconds = max(0.0, self.clock() - last_save) / 1000.0
        credited_seconds = min(offline_seconds, self.config.offline_cap_seconds)
        earnings = state.income * credited_seconds
        state.currency += earnings

        self.last_offline_seconds = offline_seconds
        self.last_offline_earnings = earnings
        if earnings > 0:
            logger.info(
                "Credited %.2f for %.0fs offline (capped at %.0fs)",
                earnings,
                offline_seconds,
                self.config.offline_cap_seconds,
            )
