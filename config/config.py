"""
Configuration classes for the perishable goods network.
Defines the settlement and penalty parameters in a type-safe, extensible way.
"""

import os
from dataclasses import dataclass, field

from utils.env import load_project_dotenv


@dataclass
class PenaltyConfig:
    # Deviation (degrees C) at which the penalty factor reaches max_penalty_factor
    saturation_deviation: float = 10.0

    def __post_init__(self):
        if self.saturation_deviation < 1.0:
            raise ValueError("saturation_deviation must be at least one degree.")


@dataclass
class SettlementConfig:
    shipper_share: float = 0.0  # Fraction of the payout routed to the shipper
    late_arrival_forfeits: bool = False  # Late arrival pays nothing

    def __post_init__(self):
        if not (0.0 <= self.shipper_share <= 1.0):
            raise ValueError("shipper_share must be between 0 and 1.")


@dataclass
class NetworkConfig:
    penalty: PenaltyConfig = field(default_factory=PenaltyConfig)
    settlement: SettlementConfig = field(default_factory=SettlementConfig)

    @classmethod
    def from_env(cls) -> "NetworkConfig":
        """
        Build a config from environment variables, loading the project `.env` first.
        Unset variables keep their defaults.
        """
        load_project_dotenv()
        penalty_kwargs = {}
        settlement_kwargs = {}
        if (value := os.getenv("PERISHABLE_SATURATION_DEVIATION")) is not None:
            penalty_kwargs["saturation_deviation"] = float(value)
        if (value := os.getenv("PERISHABLE_SHIPPER_SHARE")) is not None:
            settlement_kwargs["shipper_share"] = float(value)
        if (value := os.getenv("PERISHABLE_LATE_ARRIVAL_FORFEITS")) is not None:
            settlement_kwargs["late_arrival_forfeits"] = _parse_bool(value)
        return cls(
            penalty=PenaltyConfig(**penalty_kwargs),
            settlement=SettlementConfig(**settlement_kwargs),
        )


def _parse_bool(value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    raise ValueError(f"Cannot interpret {value!r} as a boolean.")


# Example usage:
# config = NetworkConfig.from_env()
# engine = LifecycleEngine(config)
