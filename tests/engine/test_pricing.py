from datetime import timedelta, timezone

import pytest

from config.config import PenaltyConfig, SettlementConfig
from engine.pricing import (
    compute_settlement,
    effective_unit_price,
    penalty_factor,
    worst_deviation,
)
from models.assets import Shipment, TemperatureReading
from models.enums import ShipmentStatus
from tests.mocks import ARRIVAL_DUE


def make_shipment(readings: list[float], unit_count: int = 100, arrival=ARRIVAL_DUE) -> Shipment:
    return Shipment(
        shipment_id="SHIP-1",
        product="PROD-1",
        contract="CON-1",
        unit_count=unit_count,
        status=ShipmentStatus.ARRIVED,
        temperature_readings=[TemperatureReading(shipment="SHIP-1", centigrade=c) for c in readings],
        arrival=arrival,
    )


# --- worst_deviation --- #


@pytest.mark.parametrize(
    "readings, expected",
    [
        ([], 0.0),
        ([2.0, 5.0, 10.0], 0.0),  # Bounds are inclusive
        ([1.0, 5.0], 1.0),
        ([5.0, 13.5], 3.5),
        ([-1.0, 11.0], 3.0),  # Worst side wins
        ([25.0, float("nan")], 15.0),  # Non-finite samples are skipped
        ([float("nan")], 0.0),
    ],
)
def test_worst_deviation(readings, expected):
    assert worst_deviation(readings, 2.0, 10.0) == pytest.approx(expected)


# --- penalty_factor --- #


def test_penalty_factor_zero_without_deviation():
    assert penalty_factor(0.0, 0.1, 0.5) == 0.0


def test_penalty_factor_linear_between_bounds():
    config = PenaltyConfig(saturation_deviation=5.0)
    assert penalty_factor(1.0, 0.1, 0.5, config) == pytest.approx(0.1)
    assert penalty_factor(3.0, 0.1, 0.5, config) == pytest.approx(0.3)
    assert penalty_factor(5.0, 0.1, 0.5, config) == pytest.approx(0.5)


def test_penalty_factor_clamped():
    config = PenaltyConfig(saturation_deviation=5.0)
    # Under one degree still costs the minimum factor
    assert penalty_factor(0.2, 0.1, 0.5, config) == pytest.approx(0.1)
    assert penalty_factor(40.0, 0.1, 0.5, config) == pytest.approx(0.5)


def test_effective_unit_price_never_negative():
    assert effective_unit_price(35.0, 0.0) == 35.0
    assert effective_unit_price(35.0, 0.2) == pytest.approx(28.0)
    assert effective_unit_price(35.0, 1.7) == 0.0


# --- compute_settlement --- #


def test_settlement_within_band_pays_full_price(awarded_contract):
    settlement = compute_settlement(awarded_contract, make_shipment([3.0, 6.0, 9.5]))
    assert settlement.deviation == 0.0
    assert settlement.penalty_factor == 0.0
    assert settlement.effective_unit_price == awarded_contract.unit_price
    assert settlement.total == awarded_contract.unit_price * 100
    assert settlement.supplier_amount == settlement.total
    assert settlement.shipper_amount == 0.0


def test_settlement_applies_penalty(awarded_contract):
    # 13 C against a 10 C ceiling: 3 degrees, factor 0.1 + 2/9 * 0.4
    settlement = compute_settlement(awarded_contract, make_shipment([4.0, 13.0]))
    expected_factor = 0.1 + (2.0 / 9.0) * 0.4
    assert settlement.deviation == pytest.approx(3.0)
    assert settlement.penalty_factor == pytest.approx(expected_factor)
    assert settlement.total == pytest.approx(35.0 * (1 - expected_factor) * 100)


def test_settlement_split_with_shipper(awarded_contract):
    settlement = compute_settlement(
        awarded_contract,
        make_shipment([5.0]),
        settlement_config=SettlementConfig(shipper_share=0.25),
    )
    assert settlement.shipper_amount == pytest.approx(875.0)
    assert settlement.supplier_amount == pytest.approx(2625.0)
    assert settlement.supplier_amount + settlement.shipper_amount == pytest.approx(settlement.total)


def test_late_arrival_forfeits_only_when_enabled(awarded_contract):
    late = make_shipment([5.0], arrival=ARRIVAL_DUE + timedelta(hours=1))

    lenient = compute_settlement(awarded_contract, late)
    assert lenient.late is True
    assert lenient.total == pytest.approx(3500.0)

    strict = compute_settlement(awarded_contract, late, settlement_config=SettlementConfig(late_arrival_forfeits=True))
    assert strict.total == 0.0
    assert strict.supplier_amount == 0.0


def test_late_flag_with_timezone_aware_arrival(awarded_contract):
    # Contract due date is naive and read as UTC
    on_time = make_shipment([5.0], arrival=ARRIVAL_DUE.replace(month=2, tzinfo=timezone.utc))
    assert compute_settlement(awarded_contract, on_time).late is False

    overdue = make_shipment([5.0], arrival=(ARRIVAL_DUE + timedelta(minutes=1)).replace(tzinfo=timezone.utc))
    assert compute_settlement(awarded_contract, overdue).late is True

    # 12:30 in UTC+1 is 11:30 UTC, before the 12:00 deadline
    ahead = timezone(timedelta(hours=1))
    early = make_shipment([5.0], arrival=ARRIVAL_DUE.replace(minute=30, tzinfo=ahead))
    assert compute_settlement(awarded_contract, early).late is False


def test_settlement_uses_shipment_unit_count(awarded_contract):
    settlement = compute_settlement(awarded_contract, make_shipment([], unit_count=40))
    assert settlement.unit_count == 40
    assert settlement.total == pytest.approx(35.0 * 40)
