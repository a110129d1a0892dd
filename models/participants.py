"""
Data models for the businesses taking part in the network.
"""

from typing import Literal

from pydantic import BaseModel

from .enums import ParticipantRole


class Address(BaseModel):
    """Postal address of a business"""

    country: str
    city: str | None = None
    street: str | None = None
    zip: str | None = None


class Business(BaseModel):
    """
    Common shape shared by every participant.
    The email is the participant's identity on the ledger.
    """

    email: str
    address: Address
    balance: float = 0.0
    role: ParticipantRole

    @property
    def participant_id(self) -> str:
        return self.email


class Supplier(Business):
    """Grows or produces the goods and owns them until delivery"""

    role: Literal[ParticipantRole.SUPPLIER] = ParticipantRole.SUPPLIER


class Shipper(Business):
    """Carries goods between supplier and retailer"""

    role: Literal[ParticipantRole.SHIPPER] = ParticipantRole.SHIPPER


class Retailer(Business):
    """Buys goods at auction and receives the shipment"""

    role: Literal[ParticipantRole.RETAILER] = ParticipantRole.RETAILER


Participant = Supplier | Shipper | Retailer

PARTICIPANT_TYPES: dict[ParticipantRole, type[Business]] = {
    ParticipantRole.SUPPLIER: Supplier,
    ParticipantRole.SHIPPER: Shipper,
    ParticipantRole.RETAILER: Retailer,
}


def make_participant(role: ParticipantRole, email: str, country: str, balance: float = 0.0, **address_fields) -> Business:
    """Build a participant of the given role with a minimal address."""
    participant_cls = PARTICIPANT_TYPES[ParticipantRole(role)]
    return participant_cls(
        email=email,
        address=Address(country=country, **address_fields),
        balance=balance,
    )


__all__ = [
    "Address",
    "Business",
    "Supplier",
    "Shipper",
    "Retailer",
    "Participant",
    "PARTICIPANT_TYPES",
    "make_participant",
]
