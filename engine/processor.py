"""
Transaction submission boundary.

Resolves the entities a payload references, runs the matching lifecycle
operation on working copies, and commits every touched entity together. A
rejected transaction commits nothing and its typed error reaches the caller.
"""

import asyncio
import logging
from dataclasses import asdict
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from connectors.ledger_store import InMemoryLedger
from engine.errors import InvalidState, NetworkError
from engine.lifecycle import LifecycleEngine
from engine.pricing import Settlement
from models.events import EVENT_TYPES, NetworkEvent
from models.participants import Retailer, Shipper, Supplier
from models.transactions import (
    Arrive,
    CloseBidding,
    CloseInquiry,
    CreateContract,
    CreateShipment,
    Dock,
    HandOff,
    ListForSale,
    PickUp,
    RecordTemperature,
    ShipmentReceived,
    SubmitBid,
    SubmitOffer,
    Transaction,
    parse_transaction,
)
from utils.event_bus import EventBus

logger = logging.getLogger(__name__)


class TransactionReceipt(BaseModel):
    """What a committed transaction changed."""

    transaction_id: str
    transaction_type: str
    entities: list[str] = Field(default_factory=list)
    outcome: str | None = None
    settlement: dict[str, Any] | None = None
    committed_at: datetime = Field(default_factory=datetime.now)


class TransactionProcessor:
    """
    Serializes submissions and applies them through a LifecycleEngine.
    """

    def __init__(
        self,
        ledger: InMemoryLedger,
        engine: LifecycleEngine | None = None,
        event_bus: EventBus | None = None,
    ):
        self.ledger = ledger
        self.engine = engine or LifecycleEngine()
        self.event_bus = event_bus
        self.history: list[TransactionReceipt] = []
        self._lock = asyncio.Lock()
        self._handlers = {
            ListForSale: self._list_for_sale,
            SubmitOffer: self._submit_offer,
            CloseBidding: self._close_bidding,
            CreateContract: self._create_contract,
            SubmitBid: self._submit_bid,
            CloseInquiry: self._close_inquiry,
            CreateShipment: self._create_shipment,
            RecordTemperature: self._record_temperature,
            Dock: self._dock,
            PickUp: self._pick_up,
            HandOff: self._hand_off,
            Arrive: self._arrive,
            ShipmentReceived: self._shipment_received,
        }

    async def submit(self, transaction: Transaction | dict[str, Any] | str) -> TransactionReceipt:
        """Apply one transaction and return its receipt, or raise its NetworkError."""
        if not isinstance(transaction, Transaction):
            transaction = parse_transaction(transaction)
        handler = self._handlers.get(type(transaction))
        if handler is None:
            raise TypeError(f"Unsupported transaction {type(transaction).__name__}.")

        async with self._lock:
            try:
                touched, outcome, settlement = await handler(transaction)
            except NetworkError as e:
                logger.warning(f"{transaction.transaction_type} {transaction.transaction_id} rejected: {e}")
                raise
            entities = await self.ledger.commit(*touched)
            receipt = TransactionReceipt(
                transaction_id=transaction.transaction_id,
                transaction_type=transaction.transaction_type,
                entities=entities,
                outcome=outcome,
                settlement=asdict(settlement) if settlement is not None else None,
            )
            self.history.append(receipt)

        if self.event_bus is not None:
            await self.event_bus.publish(
                NetworkEvent(
                    event_type=EVENT_TYPES[transaction.transaction_type],
                    transaction_id=transaction.transaction_id,
                    payload=receipt.model_dump(mode="json", exclude={"committed_at"}),
                )
            )
        return receipt

    # --- Handlers: each returns (entities to commit, outcome, settlement) --- #

    async def _list_for_sale(self, tx: ListForSale):
        listing = await self.ledger.get_product(tx.listing)
        self.engine.list_for_sale(listing)
        return [listing], listing.state.value, None

    async def _submit_offer(self, tx: SubmitOffer):
        listing = await self.ledger.get_product(tx.listing)
        retailer = await self._participant(tx.retailer, Retailer)
        offer = self.engine.submit_offer(listing, retailer, tx.bid_price)
        return [listing], offer.offer_id, None

    async def _close_bidding(self, tx: CloseBidding):
        listing = await self.ledger.get_product(tx.listing)
        result = self.engine.close_bidding(listing)
        return [listing], result.outcome.value, None

    async def _create_contract(self, tx: CreateContract):
        product = await self.ledger.get_product(tx.product)
        if tx.contract_id is not None and tx.contract_id in {c.contract_id for c in self.ledger.list_contracts()}:
            raise InvalidState(f"Contract {tx.contract_id} already exists.", entity_id=tx.contract_id)
        contract = self.engine.create_contract(
            product,
            max_price=tx.max_price,
            min_temperature=tx.min_temperature,
            max_temperature=tx.max_temperature,
            min_penalty_factor=tx.min_penalty_factor,
            max_penalty_factor=tx.max_penalty_factor,
            arrival_date_time=tx.arrival_date_time,
            unit_count=tx.unit_count,
            contract_id=tx.contract_id,
        )
        return [contract], contract.state.value, None

    async def _submit_bid(self, tx: SubmitBid):
        contract = await self.ledger.get_contract(tx.contract)
        shipper = await self._participant(tx.shipper, Shipper)
        bid = self.engine.submit_bid(contract, shipper, tx.bid_price)
        return [contract], bid.bid_id, None

    async def _close_inquiry(self, tx: CloseInquiry):
        contract = await self.ledger.get_contract(tx.contract)
        result = self.engine.close_inquiry(contract)
        return [contract], result.outcome.value, None

    async def _create_shipment(self, tx: CreateShipment):
        contract = await self.ledger.get_contract(tx.contract)
        if tx.shipment_id is not None and tx.shipment_id in {s.shipment_id for s in self.ledger.list_shipments()}:
            raise InvalidState(f"Shipment {tx.shipment_id} already exists.", entity_id=tx.shipment_id)
        shipment = self.engine.create_shipment(contract, unit_count=tx.unit_count, shipment_id=tx.shipment_id)
        return [shipment], shipment.status.value, None

    async def _record_temperature(self, tx: RecordTemperature):
        shipment = await self.ledger.get_shipment(tx.shipment)
        self.engine.record_temperature(shipment, tx.centigrade, timestamp=tx.timestamp)
        return [shipment], shipment.status.value, None

    async def _dock(self, tx: Dock):
        shipment = await self.ledger.get_shipment(tx.shipment)
        self.engine.dock(shipment)
        return [shipment], shipment.status.value, None

    async def _pick_up(self, tx: PickUp):
        shipment, product, contract = await self._shipment_context(tx.shipment)
        self.engine.pick_up(shipment, product, contract)
        return [shipment, product], shipment.status.value, None

    async def _hand_off(self, tx: HandOff):
        shipment, product, contract = await self._shipment_context(tx.shipment)
        recipient = None
        if tx.recipient is not None:
            recipient = await self.ledger.get_participant(tx.recipient)
        self.engine.hand_off(shipment, product, contract, recipient)
        return [shipment, product], shipment.status.value, None

    async def _arrive(self, tx: Arrive):
        shipment = await self.ledger.get_shipment(tx.shipment)
        self.engine.arrive(shipment, tx.arrival_date_time)
        return [shipment], shipment.status.value, None

    async def _shipment_received(self, tx: ShipmentReceived):
        shipment, product, contract = await self._shipment_context(tx.shipment)
        retailer = await self._participant(contract.retailer, Retailer)
        supplier = await self._participant(contract.supplier, Supplier)
        shipper = await self._participant(contract.shipper, Shipper)
        settlement: Settlement = self.engine.shipment_received(shipment, product, contract, retailer, supplier, shipper)
        touched = [shipment, product, retailer, supplier, shipper]
        return touched, shipment.status.value, settlement

    # --- Lookups --- #

    async def _shipment_context(self, shipment_id: str):
        shipment = await self.ledger.get_shipment(shipment_id)
        product = await self.ledger.get_product(shipment.product)
        contract = await self.ledger.get_contract(shipment.contract)
        return shipment, product, contract

    async def _participant(self, email: str, expected: type):
        participant = await self.ledger.get_participant(email)
        if not isinstance(participant, expected):
            raise InvalidState(
                f"{email} is a {participant.role.value}, expected {expected.__name__.upper()}.",
                entity_id=email,
                state=participant.role,
            )
        return participant
