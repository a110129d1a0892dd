"""
Transaction payloads accepted by the network.

Each payload names the entities it touches by identifier. The literal
`transaction_type` field lets raw dict/JSON payloads be parsed into the
right model through a single discriminated union.
"""

import uuid
from datetime import datetime
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class Transaction(BaseModel):
    """Base payload for every submitted transaction"""

    model_config = ConfigDict(allow_inf_nan=False)

    transaction_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: datetime = Field(default_factory=datetime.now)


# Auction side


class ListForSale(Transaction):
    transaction_type: Literal["ListForSale"] = "ListForSale"
    listing: str


class SubmitOffer(Transaction):
    transaction_type: Literal["SubmitOffer"] = "SubmitOffer"
    listing: str
    retailer: str
    bid_price: float


class CloseBidding(Transaction):
    transaction_type: Literal["CloseBidding"] = "CloseBidding"
    listing: str


# Contract inquiry


class CreateContract(Transaction):
    """Open a shipping inquiry for a sold product"""

    transaction_type: Literal["CreateContract"] = "CreateContract"
    product: str
    contract_id: str | None = None
    unit_count: int | None = None  # Falls back to the product's unit count
    max_price: float
    min_temperature: float
    max_temperature: float
    min_penalty_factor: float
    max_penalty_factor: float
    arrival_date_time: datetime


class SubmitBid(Transaction):
    transaction_type: Literal["SubmitBid"] = "SubmitBid"
    contract: str
    shipper: str
    bid_price: float


class CloseInquiry(Transaction):
    transaction_type: Literal["CloseInquiry"] = "CloseInquiry"
    contract: str


# Shipment tracking


class CreateShipment(Transaction):
    transaction_type: Literal["CreateShipment"] = "CreateShipment"
    contract: str
    shipment_id: str | None = None
    unit_count: int | None = None


class RecordTemperature(Transaction):
    """A sensor sample pushed by the container while the goods are tracked"""

    transaction_type: Literal["TemperatureReading"] = "TemperatureReading"
    shipment: str
    centigrade: float


class Dock(Transaction):
    transaction_type: Literal["Dock"] = "Dock"
    shipment: str


class PickUp(Transaction):
    transaction_type: Literal["PickUp"] = "PickUp"
    shipment: str


class HandOff(Transaction):
    transaction_type: Literal["HandOff"] = "HandOff"
    shipment: str
    recipient: str | None = None  # Defaults to the contract's retailer


class Arrive(Transaction):
    transaction_type: Literal["Arrive"] = "Arrive"
    shipment: str
    arrival_date_time: datetime = Field(default_factory=datetime.now)


class ShipmentReceived(Transaction):
    transaction_type: Literal["ShipmentReceived"] = "ShipmentReceived"
    shipment: str


AnyTransaction = Annotated[
    Union[
        ListForSale,
        SubmitOffer,
        CloseBidding,
        CreateContract,
        SubmitBid,
        CloseInquiry,
        CreateShipment,
        RecordTemperature,
        Dock,
        PickUp,
        HandOff,
        Arrive,
        ShipmentReceived,
    ],
    Field(discriminator="transaction_type"),
]

_transaction_adapter: TypeAdapter = TypeAdapter(AnyTransaction)


def parse_transaction(data: dict[str, Any] | str | bytes) -> Transaction:
    """Parse a raw payload (dict or JSON) into its transaction model."""
    if isinstance(data, (str, bytes)):
        return _transaction_adapter.validate_json(data)
    return _transaction_adapter.validate_python(data)
