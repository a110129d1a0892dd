"""
Demonstrates a full perishable goods run: auction, shipping inquiry,
tracked transit with a temperature excursion, and penalty-adjusted settlement.
"""

import asyncio
from datetime import datetime, timedelta

import pandas as pd

from config.config import NetworkConfig
from connectors.ledger_store import InMemoryLedger
from engine.errors import NetworkError
from engine.lifecycle import LifecycleEngine
from engine.processor import TransactionProcessor
from models.assets import Product
from models.enums import ParticipantRole, ProductType
from models.events import NetworkEvent
from models.participants import make_participant
from models.transactions import (
    Arrive,
    CloseBidding,
    CloseInquiry,
    CreateContract,
    CreateShipment,
    Dock,
    ListForSale,
    PickUp,
    RecordTemperature,
    ShipmentReceived,
    SubmitBid,
    SubmitOffer,
)
from utils.event_bus import ALL_EVENTS, EventBus
from utils.logger import get_logger
from utils.reporting import temperature_log_frame, temperature_summary

logger = get_logger("demos.perishable_network")


def build_ledger() -> InMemoryLedger:
    ledger = InMemoryLedger()
    ledger.add_participant(make_participant(ParticipantRole.SUPPLIER, "grower@farm.example", "Ecuador", balance=0.0))
    ledger.add_participant(make_participant(ParticipantRole.SHIPPER, "ops@reefer.example", "Panama", balance=0.0))
    ledger.add_participant(make_participant(ParticipantRole.SHIPPER, "bids@coldchain.example", "Panama", balance=0.0))
    ledger.add_participant(make_participant(ParticipantRole.RETAILER, "buyer@grocer.example", "UK", balance=50000.0))
    ledger.add_participant(make_participant(ParticipantRole.RETAILER, "fresh@market.example", "UK", balance=50000.0))
    ledger.add_product(
        Product(
            product_id="PROD-BAN-001",
            product_type=ProductType.BANANAS,
            unit_count=5000,
            reserve_price=0.40,
            owner="grower@farm.example",
        )
    )
    return ledger


async def demo_perishable_network():
    """Runs the end-to-end network demonstration."""
    ledger = build_ledger()
    bus = EventBus()
    event_log: list[dict] = []

    async def record_event(event: NetworkEvent) -> None:
        event_log.append({"event": event.event_type, "outcome": event.payload.get("outcome")})

    bus.subscribe(ALL_EVENTS, record_event)
    processor = TransactionProcessor(ledger, LifecycleEngine(NetworkConfig.from_env()), bus)

    await processor.submit(ListForSale(listing="PROD-BAN-001"))
    await processor.submit(SubmitOffer(listing="PROD-BAN-001", retailer="fresh@market.example", bid_price=0.38))
    await processor.submit(SubmitOffer(listing="PROD-BAN-001", retailer="buyer@grocer.example", bid_price=0.52))
    await processor.submit(CloseBidding(listing="PROD-BAN-001"))

    await processor.submit(
        CreateContract(
            product="PROD-BAN-001",
            contract_id="CON-001",
            max_price=0.50,
            min_temperature=2.0,
            max_temperature=10.0,
            min_penalty_factor=0.1,
            max_penalty_factor=0.5,
            arrival_date_time=datetime.now() + timedelta(days=14),
        )
    )
    await processor.submit(SubmitBid(contract="CON-001", shipper="ops@reefer.example", bid_price=0.45))
    await processor.submit(SubmitBid(contract="CON-001", shipper="bids@coldchain.example", bid_price=0.41))
    await processor.submit(CloseInquiry(contract="CON-001"))

    await processor.submit(CreateShipment(contract="CON-001", shipment_id="SHIP-001"))
    await processor.submit(Dock(shipment="SHIP-001"))
    await processor.submit(PickUp(shipment="SHIP-001"))
    for centigrade in (4.0, 5.5, 7.0, 12.5, 8.0):
        await processor.submit(RecordTemperature(shipment="SHIP-001", centigrade=centigrade))

    # Docking again is rejected and leaves the shipment untouched
    try:
        await processor.submit(Dock(shipment="SHIP-001"))
    except NetworkError as e:
        logger.info(f"Expected rejection: {e.to_dict()}")

    await processor.submit(Arrive(shipment="SHIP-001"))
    receipt = await processor.submit(ShipmentReceived(shipment="SHIP-001"))

    shipment = await ledger.get_shipment("SHIP-001")
    contract = await ledger.get_contract("CON-001")
    print("\n--- Temperature Log ---")
    print(temperature_log_frame(shipment).to_string(index=False))
    print(f"\nSummary: {temperature_summary(shipment, contract)}")
    print(f"Settlement: {receipt.settlement}")

    balances = pd.DataFrame(
        [{"email": email, "balance": (await ledger.get_participant(email)).balance} for email in (
            "grower@farm.example",
            "bids@coldchain.example",
            "buyer@grocer.example",
        )]
    )
    print("\n--- Balances ---")
    print(balances.to_string(index=False))
    print("\n--- Event Log ---")
    print(pd.DataFrame(event_log).to_string())
    logger.info("Perishable network demo completed.")


if __name__ == "__main__":
    asyncio.run(demo_perishable_network())
