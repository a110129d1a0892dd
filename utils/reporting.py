"""
Tabular views of a shipment's temperature log for monitoring and demos.
"""

from typing import Any

import pandas as pd

from engine.pricing import worst_deviation
from models.assets import Contract, Shipment

READING_COLUMNS = ["timestamp", "centigrade"]


def temperature_log_frame(shipment: Shipment) -> pd.DataFrame:
    """Return the reading log as a DataFrame ordered as recorded."""
    if not shipment.temperature_readings:
        return pd.DataFrame(columns=READING_COLUMNS)
    return pd.DataFrame(
        [{"timestamp": r.timestamp, "centigrade": r.centigrade} for r in shipment.temperature_readings],
        columns=READING_COLUMNS,
    )


def temperature_summary(shipment: Shipment, contract: Contract) -> dict[str, Any]:
    """
    Summarize the log against the contract's agreed band.
    Excursions count readings outside [min_temperature, max_temperature].
    """
    frame = temperature_log_frame(shipment)
    if frame.empty:
        return {
            "shipment_id": shipment.shipment_id,
            "readings": 0,
            "min": None,
            "max": None,
            "mean": None,
            "excursions": 0,
            "worst_deviation": 0.0,
        }
    centigrade = frame["centigrade"]
    outside = (centigrade < contract.min_temperature) | (centigrade > contract.max_temperature)
    return {
        "shipment_id": shipment.shipment_id,
        "readings": int(len(frame)),
        "min": float(centigrade.min()),
        "max": float(centigrade.max()),
        "mean": round(float(centigrade.mean()), 2),
        "excursions": int(outside.sum()),
        "worst_deviation": worst_deviation(centigrade.tolist(), contract.min_temperature, contract.max_temperature),
    }
