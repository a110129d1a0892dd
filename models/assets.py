"""
Asset models tracked on the ledger: product listings, shipping contracts and shipments.
References to other entities are always identifiers, never embedded copies.
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .enums import ContractState, ListingState, ProductType, ShipmentStatus


class Offer(BaseModel):
    """A retailer's bid on a product listing"""

    offer_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    listing: str  # product_id
    retailer: str  # retailer email
    bid_price: float
    timestamp: datetime = Field(default_factory=datetime.now)


class Product(BaseModel):
    """A perishable good listed for sale by its supplier"""

    product_id: str
    product_type: ProductType
    unit_count: int = Field(gt=0)
    reserve_price: float = Field(ge=0, allow_inf_nan=False)
    owner: str  # supplier email
    possessor: str | None = None  # business currently holding the goods
    buyer: str | None = None  # winning retailer, set when SOLD
    state: ListingState = ListingState.CREATED
    offers: list[Offer] = Field(default_factory=list)

    @model_validator(mode="after")
    def _default_possessor(self):
        if self.possessor is None:
            self.possessor = self.owner
        return self


class Bid(BaseModel):
    """A shipper's price offer on a contract inquiry"""

    bid_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    contract: str  # contract_id
    shipper: str  # shipper email
    bid_price: float
    timestamp: datetime = Field(default_factory=datetime.now)


class Contract(BaseModel):
    """
    Shipping agreement between a supplier, a shipper and a retailer.
    `unit_price` starts at `max_price` and becomes the winning shipper bid.
    """

    contract_id: str = Field(default_factory=lambda: f"CON-{uuid.uuid4().hex[:8].upper()}")
    supplier: str
    retailer: str
    product: str
    shipper: str | None = None
    unit_count: int
    unit_price: float
    max_price: float
    min_temperature: float
    max_temperature: float
    min_penalty_factor: float
    max_penalty_factor: float
    arrival_date_time: datetime
    state: ContractState = ContractState.INQUIRY
    bids: list[Bid] = Field(default_factory=list)

    @model_validator(mode="after")
    def _shipper_only_unset_during_inquiry(self):
        if self.shipper is None and self.state == ContractState.READY_FOR_PICKUP:
            raise ValueError(f"Contract {self.contract_id} is {self.state.value} but has no shipper.")
        return self


class TemperatureReading(BaseModel):
    """A single sensor sample. Readings are immutable once logged."""

    model_config = ConfigDict(frozen=True)

    shipment: str  # shipment_id
    centigrade: float
    timestamp: datetime = Field(default_factory=datetime.now)


class Shipment(BaseModel):
    """A tracked shipping instance bound to exactly one contract and one product"""

    shipment_id: str = Field(default_factory=lambda: f"SHIP-{uuid.uuid4().hex[:8].upper()}")
    product: str
    contract: str
    unit_count: int
    status: ShipmentStatus = ShipmentStatus.CREATED
    temperature_readings: list[TemperatureReading] = Field(default_factory=list)
    arrival: datetime | None = None

    @property
    def centigrade_values(self) -> list[float]:
        return [reading.centigrade for reading in self.temperature_readings]


def entity_id(entity: BaseModel) -> str:
    """Return the ledger key for any asset or participant."""
    for key in ("product_id", "contract_id", "shipment_id", "email"):
        value = getattr(entity, key, None)
        if value is not None:
            return value
    raise TypeError(f"{type(entity).__name__} has no ledger identifier.")
