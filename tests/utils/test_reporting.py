from models.assets import Shipment, TemperatureReading
from utils.reporting import READING_COLUMNS, temperature_log_frame, temperature_summary


def shipment_with(readings: list[float]) -> Shipment:
    return Shipment(
        shipment_id="SHIP-1",
        product="PROD-1",
        contract="CON-1",
        unit_count=100,
        temperature_readings=[TemperatureReading(shipment="SHIP-1", centigrade=c) for c in readings],
    )


def test_log_frame_preserves_order():
    frame = temperature_log_frame(shipment_with([4.0, 12.0, 1.0]))
    assert list(frame.columns) == READING_COLUMNS
    assert frame["centigrade"].tolist() == [4.0, 12.0, 1.0]


def test_empty_log_frame():
    frame = temperature_log_frame(shipment_with([]))
    assert frame.empty
    assert list(frame.columns) == READING_COLUMNS


def test_summary_counts_excursions(contract):
    summary = temperature_summary(shipment_with([4.0, 12.0, 1.0, 8.0]), contract)
    assert summary["readings"] == 4
    assert summary["min"] == 1.0
    assert summary["max"] == 12.0
    assert summary["mean"] == 6.25
    assert summary["excursions"] == 2
    assert summary["worst_deviation"] == 2.0


def test_summary_of_empty_log(contract):
    summary = temperature_summary(shipment_with([]), contract)
    assert summary["readings"] == 0
    assert summary["excursions"] == 0
    assert summary["worst_deviation"] == 0.0
