"""
Centralized Enum definitions for the perishable goods network.
"""

from enum import Enum


class ProductType(str, Enum):
    """Perishable goods traded on the network"""

    BANANAS = "BANANAS"
    APPLES = "APPLES"
    PEARS = "PEARS"
    PEACHES = "PEACHES"
    COFFEE = "COFFEE"


class ParticipantRole(str, Enum):
    """Roles a business can play in the network"""

    SUPPLIER = "SUPPLIER"
    SHIPPER = "SHIPPER"
    RETAILER = "RETAILER"


class ListingState(str, Enum):
    """Sale state of a product listing"""

    CREATED = "CREATED"
    FOR_SALE = "FOR_SALE"
    RESERVE_NOT_MET = "RESERVE_NOT_MET"  # Bidding closed below the reserve price
    SOLD = "SOLD"


class ContractState(str, Enum):
    """State of a shipping contract"""

    INQUIRY = "INQUIRY"  # Shippers may still bid
    RESERVE_NOT_MET = "RESERVE_NOT_MET"  # No acceptable shipper bid
    READY_FOR_PICKUP = "READY_FOR_PICKUP"


class ShipmentStatus(str, Enum):
    """Status of a tracked shipment"""

    CREATED = "CREATED"
    DOCKED = "DOCKED"
    IN_TRANSIT = "IN_TRANSIT"
    ARRIVED = "ARRIVED"
    DELIVERED = "DELIVERED"


class BiddingOutcome(str, Enum):
    """Result of closing bidding on a listing"""

    SOLD = "SOLD"
    NO_SALE = "NO_SALE"


class InquiryOutcome(str, Enum):
    """Result of closing a shipping inquiry"""

    AWARDED = "AWARDED"
    RESERVE_NOT_MET = "RESERVE_NOT_MET"


# Legal successor states per lifecycle. Anything not listed is a backward or
# skipping move. Keyed by enum class since str enums of different classes
# compare equal when their values match (e.g. "CREATED").
ALLOWED_TRANSITIONS: dict[type[Enum], dict[Enum, frozenset[Enum]]] = {
    ListingState: {
        ListingState.CREATED: frozenset({ListingState.FOR_SALE}),
        ListingState.FOR_SALE: frozenset({ListingState.RESERVE_NOT_MET, ListingState.SOLD}),
        ListingState.RESERVE_NOT_MET: frozenset(),
        ListingState.SOLD: frozenset(),
    },
    ContractState: {
        ContractState.INQUIRY: frozenset({ContractState.RESERVE_NOT_MET, ContractState.READY_FOR_PICKUP}),
        ContractState.RESERVE_NOT_MET: frozenset(),
        ContractState.READY_FOR_PICKUP: frozenset(),
    },
    ShipmentStatus: {
        ShipmentStatus.CREATED: frozenset({ShipmentStatus.DOCKED}),
        ShipmentStatus.DOCKED: frozenset({ShipmentStatus.IN_TRANSIT}),
        ShipmentStatus.IN_TRANSIT: frozenset({ShipmentStatus.ARRIVED}),
        ShipmentStatus.ARRIVED: frozenset({ShipmentStatus.DELIVERED}),
        ShipmentStatus.DELIVERED: frozenset(),
    },
}


def can_transition(current: Enum, target: Enum) -> bool:
    """Return True if moving from `current` to `target` is a legal forward step."""
    if type(current) is not type(target):
        return False
    return target in ALLOWED_TRANSITIONS.get(type(current), {}).get(current, frozenset())
