from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class EconomyConfig:
    """Tunable constants of the power plant economy."""

    restart_currency: float = 10.0
    cost_growth: float = 1.15
    prestige_threshold: float = 100_000.0
    prestige_step: float = 0.25
    demand_base: int = 50
    demand_factor: float = 0.8
    offline_cap_seconds: float = 3600.0
    # Larger frame deltas come from clock jumps, not real elapsed play
    max_tick_millis: float = 86_400_000.0
    autosave_interval: float = 5.0
    save_key: str = "powerPlantSavePC"

    def validate(self) -> list[str]:
        """Check for nonsensical values. Returns list of error messages."""
        errors: list[str] = []
        if self.restart_currency < 0:
            errors.append(f"restart_currency must be >= 0, got {self.restart_currency}")
        if self.cost_growth < 1.0:
            errors.append(f"cost_growth must be >= 1, got {self.cost_growth}")
        if self.prestige_threshold <= 0:
            errors.append(
                f"prestige_threshold must be positive, got {self.prestige_threshold}"
            )
        if self.prestige_step < 0:
            errors.append(f"prestige_step must be >= 0, got {self.prestige_step}")
        if self.demand_base < 0 or self.demand_factor < 0:
            errors.append("demand_base and demand_factor must be >= 0")
        if self.offline_cap_seconds < 0:
            errors.append(
                f"offline_cap_seconds must be >= 0, got {self.offline_cap_seconds}"
            )
        if self.max_tick_millis <= 0:
            errors.append(f"max_tick_millis must be positive, got {self.max_tick_millis}")
        if self.autosave_interval <= 0:
            errors.append(
                f"autosave_interval must be positive, got {self.autosave_interval}"
            )
        if not self.save_key:
            errors.append("save_key must not be empty")
        return errors
