# powerplant — Idle Power Plant Economy Engine

from powerplant.config import EconomyConfig
from powerplant.cost_scaling import CostScaling
from powerplant.generator import GeneratorKind, GeneratorHolding, GeneratorStatus
from powerplant.catalog import GeneratorCatalog, default_catalog
from powerplant.state import EconomyState
from powerplant.errors import StorageError
from powerplant.engine import SimulationEngine, recompute_aggregates
from powerplant.prestige import PrestigeController, PrestigePreview, PrestigeResult
from powerplant.persistence import (
    BlobStore,
    MemoryBlobStore,
    FileBlobStore,
    PersistenceAdapter,
)
from powerplant.session import GameSession, EconomySnapshot
from powerplant.scheduler import Scheduler
from powerplant.strategy import (
    Strategy,
    Idle,
    GreedyCheapest,
    AutoplayReport,
    autoplay,
)
from powerplant.formatting import format_number, format_multiplier, format_status

__all__ = [
    # Config
    "EconomyConfig",
    # Cost
    "CostScaling",
    # Data model
    "GeneratorKind",
    "GeneratorHolding",
    "GeneratorStatus",
    "GeneratorCatalog",
    "default_catalog",
    "EconomyState",
    # Engine
    "SimulationEngine",
    "recompute_aggregates",
    # Prestige
    "PrestigeController",
    "PrestigePreview",
    "PrestigeResult",
    # Persistence
    "StorageError",
    "BlobStore",
    "MemoryBlobStore",
    "FileBlobStore",
    "PersistenceAdapter",
    # Session
    "GameSession",
    "EconomySnapshot",
    "Scheduler",
    # Autoplay
    "Strategy",
    "Idle",
    "GreedyCheapest",
    "AutoplayReport",
    "autoplay",
    # Formatting
    "format_number",
    "format_multiplier",
    "format_status",
]
