"""
Temperature-penalty pricing and settlement for delivered shipments.

The payout is the contract unit price times the shipped unit count, reduced by
a penalty factor that grows with the worst temperature excursion seen in the
shipment's reading log.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timezone

import numpy as np

from config.config import PenaltyConfig, SettlementConfig
from models.assets import Contract, Shipment

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settlement:
    """Outcome of settling a delivered shipment."""

    shipment_id: str
    deviation: float
    penalty_factor: float
    unit_price: float
    effective_unit_price: float
    unit_count: int
    total: float
    supplier_amount: float
    shipper_amount: float
    late: bool = False


def worst_deviation(readings: Iterable[float], min_temperature: float, max_temperature: float) -> float:
    """
    Largest distance, in degrees, by which any reading left the agreed band.
    An empty log has no deviation. Non-finite samples are not temperatures and
    are skipped.
    """
    values = np.asarray(list(readings), dtype=float)
    values = values[np.isfinite(values)]
    if values.size == 0:
        return 0.0
    below = min_temperature - values.min()
    above = values.max() - max_temperature
    return float(max(0.0, below, above))


def penalty_factor(
    deviation: float,
    min_penalty_factor: float,
    max_penalty_factor: float,
    config: PenaltyConfig | None = None,
) -> float:
    """
    Linear penalty: `min_penalty_factor` at one degree of deviation rising to
    `max_penalty_factor` at `config.saturation_deviation`, clamped at both ends.
    """
    if deviation <= 0:
        return 0.0
    config = config or PenaltyConfig()
    return float(
        np.interp(
            deviation,
            [1.0, config.saturation_deviation],
            [min_penalty_factor, max_penalty_factor],
        )
    )


def _as_utc(value: datetime) -> datetime:
    # Naive datetimes are taken to be UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def effective_unit_price(unit_price: float, factor: float) -> float:
    if factor <= 0:
        return unit_price
    return unit_price * max(0.0, 1.0 - factor)


def compute_settlement(
    contract: Contract,
    shipment: Shipment,
    penalty_config: PenaltyConfig | None = None,
    settlement_config: SettlementConfig | None = None,
) -> Settlement:
    """Compute what the retailer owes for a shipment and how it is split."""
    settlement_config = settlement_config or SettlementConfig()
    deviation = worst_deviation(shipment.centigrade_values, contract.min_temperature, contract.max_temperature)
    factor = penalty_factor(deviation, contract.min_penalty_factor, contract.max_penalty_factor, penalty_config)
    price = effective_unit_price(contract.unit_price, factor)

    late = shipment.arrival is not None and _as_utc(shipment.arrival) > _as_utc(contract.arrival_date_time)
    if late and settlement_config.late_arrival_forfeits:
        logger.info(f"Shipment {shipment.shipment_id} arrived late; payout forfeited.")
        total = 0.0
    else:
        total = price * shipment.unit_count

    shipper_amount = total * settlement_config.shipper_share
    return Settlement(
        shipment_id=shipment.shipment_id,
        deviation=deviation,
        penalty_factor=factor,
        unit_price=contract.unit_price,
        effective_unit_price=price,
        unit_count=shipment.unit_count,
        total=total,
        supplier_amount=total - shipper_amount,
        shipper_amount=shipper_amount,
        late=late,
    )
