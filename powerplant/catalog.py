from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

from powerplant.generator import GeneratorKind


@dataclass
class GeneratorCatalog:
    """Ordered, immutable-by-convention set of generator kinds."""

    kinds: list[GeneratorKind] = field(default_factory=list)

    _kinds_by_id: dict[str, GeneratorKind] = field(
        default_factory=dict, init=False, repr=False
    )

    def __post_init__(self) -> None:
        self._kinds_by_id = {k.id: k for k in self.kinds}

    def __iter__(self) -> Iterator[GeneratorKind]:
        return iter(self.kinds)

    def __len__(self) -> int:
        return len(self.kinds)

    def __contains__(self, id: object) -> bool:
        return id in self._kinds_by_id

    def get(self, id: str) -> GeneratorKind | None:
        return self._kinds_by_id.get(id)

    def base_cost(self, id: str) -> float:
        return self._kinds_by_id[id].base_cost

    def ids(self) -> list[str]:
        return [k.id for k in self.kinds]

    def validate(self) -> list[str]:
        """Check the catalog forms a valid progression. Returns list of error messages."""
        errors: list[str] = []

        seen: set[str] = set()
        for k in self.kinds:
            if k.id in seen:
                errors.append(f"Duplicate generator ID: {k.id!r}")
            seen.add(k.id)
            if k.base_cost <= 0:
                errors.append(f"Generator {k.id!r} must have a positive base_cost")
            if k.power < 0 or k.income < 0:
                errors.append(f"Generator {k.id!r} has negative power or income")

        for prev, cur in zip(self.kinds, self.kinds[1:]):
            for attr in ("base_cost", "power", "income"):
                if getattr(cur, attr) <= getattr(prev, attr):
                    errors.append(
                        f"Generator {cur.id!r} {attr} must exceed {prev.id!r} "
                        f"({getattr(cur, attr)} <= {getattr(prev, attr)})"
                    )

        return errors


def default_catalog() -> GeneratorCatalog:
    """The five stock generators, cheapest first."""
    return GeneratorCatalog(
        kinds=[
            GeneratorKind("solar", "Solar Panel", base_cost=10, power=5, income=2),
            GeneratorKind("wind", "Wind Turbine", base_cost=100, power=15, income=8),
            GeneratorKind("coal", "Coal Plant", base_cost=500, power=50, income=30),
            GeneratorKind(
                "nuclear", "Nuclear Reactor", base_cost=3000, power=200, income=150
            ),
            GeneratorKind(
                "fusion", "Fusion Reactor", base_cost=20000, power=1000, income=800
            ),
        ]
    )
