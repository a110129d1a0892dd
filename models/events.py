"""
Data models for events emitted by the network after a transaction commits.
"""

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class NetworkEvent(BaseModel):
    """Notification that a transaction has been applied to the ledger."""

    event_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    event_type: str  # e.g. "ShipmentDocked", "BiddingClosed"
    transaction_id: str
    payload: dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=datetime.now)


# Event type emitted for each transaction type
EVENT_TYPES: dict[str, str] = {
    "ListForSale": "ProductListed",
    "SubmitOffer": "OfferSubmitted",
    "CloseBidding": "BiddingClosed",
    "CreateContract": "ContractCreated",
    "SubmitBid": "BidSubmitted",
    "CloseInquiry": "InquiryClosed",
    "CreateShipment": "ShipmentCreated",
    "TemperatureReading": "TemperatureRecorded",
    "Dock": "ShipmentDocked",
    "PickUp": "ShipmentPickedUp",
    "HandOff": "ShipmentHandedOff",
    "Arrive": "ShipmentArrived",
    "ShipmentReceived": "ShipmentReceived",
}
