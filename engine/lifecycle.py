"""
Lifecycle state machine for product listings, shipping contracts and shipments.

Each operation validates every precondition before touching any entity, so a
rejected transaction leaves its inputs exactly as they were.
"""

import logging
import math
from dataclasses import dataclass
from datetime import datetime

from config.config import NetworkConfig
from engine.errors import InvalidBid, InvalidRange, InvalidState, ProductNotSold
from engine.pricing import Settlement, compute_settlement
from models.assets import Bid, Contract, Offer, Product, Shipment, TemperatureReading
from models.enums import (
    BiddingOutcome,
    ContractState,
    InquiryOutcome,
    ListingState,
    ShipmentStatus,
    can_transition,
)
from models.participants import Business, Retailer, Shipper, Supplier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BiddingResult:
    outcome: BiddingOutcome
    winning_offer: Offer | None = None


@dataclass(frozen=True)
class InquiryResult:
    outcome: InquiryOutcome
    winning_bid: Bid | None = None


class LifecycleEngine:
    """
    Applies network transactions to Product, Contract and Shipment entities.
    Entities are passed in already resolved; persistence is the caller's job.
    """

    def __init__(self, config: NetworkConfig | None = None):
        self.config = config or NetworkConfig()

    # --- Product listing --- #

    def list_for_sale(self, listing: Product) -> Product:
        self._require_listing_state(listing, ListingState.CREATED)
        self._advance(listing, "state", ListingState.FOR_SALE, listing.product_id)
        logger.info(f"Product {listing.product_id} listed for sale (reserve ${listing.reserve_price:.2f}).")
        return listing

    def submit_offer(self, listing: Product, retailer: Retailer | str, bid_price: float) -> Offer:
        self._require_listing_state(listing, ListingState.FOR_SALE)
        if not math.isfinite(bid_price) or bid_price <= 0:
            raise InvalidBid(
                f"Offer price must be a positive number, got {bid_price}.",
                entity_id=listing.product_id,
                state=listing.state,
            )
        offer = Offer(listing=listing.product_id, retailer=_email(retailer), bid_price=bid_price)
        listing.offers.append(offer)
        logger.info(f"Offer ${bid_price:.2f} from {offer.retailer} on {listing.product_id}.")
        return offer

    def close_bidding(self, listing: Product) -> BiddingResult:
        """
        Close the auction on a listing. The highest offer wins, the earliest
        one on a tie, provided it meets the reserve price.
        """
        self._require_listing_state(listing, ListingState.FOR_SALE)

        winning_offer: Offer | None = None
        for offer in listing.offers:
            # Strict comparison keeps the earliest of equal offers
            if winning_offer is None or offer.bid_price > winning_offer.bid_price:
                winning_offer = offer

        if winning_offer is None or winning_offer.bid_price < listing.reserve_price:
            self._advance(listing, "state", ListingState.RESERVE_NOT_MET, listing.product_id)
            logger.info(f"Bidding closed on {listing.product_id}: reserve ${listing.reserve_price:.2f} not met.")
            return BiddingResult(outcome=BiddingOutcome.NO_SALE)

        self._advance(listing, "state", ListingState.SOLD, listing.product_id)
        listing.buyer = winning_offer.retailer
        listing.offers = []
        logger.info(f"Bidding closed on {listing.product_id}: sold to {listing.buyer} for ${winning_offer.bid_price:.2f}.")
        return BiddingResult(outcome=BiddingOutcome.SOLD, winning_offer=winning_offer)

    # --- Contract inquiry --- #

    def create_contract(
        self,
        product: Product,
        max_price: float,
        min_temperature: float,
        max_temperature: float,
        min_penalty_factor: float,
        max_penalty_factor: float,
        arrival_date_time: datetime,
        unit_count: int | None = None,
        contract_id: str | None = None,
    ) -> Contract:
        if product.state != ListingState.SOLD:
            raise ProductNotSold(
                f"Product {product.product_id} is {product.state.value}; only sold products can be shipped.",
                entity_id=product.product_id,
                state=product.state,
            )
        unit_count = product.unit_count if unit_count is None else unit_count
        bounds = {
            "max_price": max_price,
            "min_temperature": min_temperature,
            "max_temperature": max_temperature,
            "min_penalty_factor": min_penalty_factor,
            "max_penalty_factor": max_penalty_factor,
        }
        for name, value in bounds.items():
            if not math.isfinite(value):
                raise InvalidRange(f"{name} must be a finite number, got {value}.", entity_id=product.product_id)
        if min_temperature > max_temperature:
            raise InvalidRange(
                f"min_temperature {min_temperature} exceeds max_temperature {max_temperature}.",
                entity_id=product.product_id,
            )
        if min_penalty_factor > max_penalty_factor:
            raise InvalidRange(
                f"min_penalty_factor {min_penalty_factor} exceeds max_penalty_factor {max_penalty_factor}.",
                entity_id=product.product_id,
            )
        if min_penalty_factor < 0:
            raise InvalidRange("Penalty factors cannot be negative.", entity_id=product.product_id)
        if unit_count <= 0:
            raise InvalidRange(f"unit_count must be positive, got {unit_count}.", entity_id=product.product_id)
        if max_price <= 0:
            raise InvalidRange(f"max_price must be positive, got {max_price}.", entity_id=product.product_id)

        fields = dict(
            supplier=product.owner,
            retailer=product.buyer,
            product=product.product_id,
            unit_count=unit_count,
            unit_price=max_price,
            max_price=max_price,
            min_temperature=min_temperature,
            max_temperature=max_temperature,
            min_penalty_factor=min_penalty_factor,
            max_penalty_factor=max_penalty_factor,
            arrival_date_time=arrival_date_time,
        )
        if contract_id is not None:
            fields["contract_id"] = contract_id
        contract = Contract(**fields)
        logger.info(
            f"Contract {contract.contract_id} opened for {product.product_id}: {unit_count} units, "
            f"max ${max_price:.2f}/unit, {min_temperature}..{max_temperature} C."
        )
        return contract

    def submit_bid(self, contract: Contract, shipper: Shipper | str, bid_price: float) -> Bid:
        self._require_contract_state(contract, ContractState.INQUIRY)
        if not math.isfinite(bid_price) or bid_price <= 0 or bid_price > contract.max_price:
            raise InvalidBid(
                f"Bid ${bid_price} outside (0, {contract.max_price}] for contract {contract.contract_id}.",
                entity_id=contract.contract_id,
                state=contract.state,
            )
        bid = Bid(contract=contract.contract_id, shipper=_email(shipper), bid_price=bid_price)
        contract.bids.append(bid)
        logger.info(f"Shipper {bid.shipper} bid ${bid_price:.2f} on {contract.contract_id}.")
        return bid

    def close_inquiry(self, contract: Contract) -> InquiryResult:
        """Award the contract to the cheapest shipper, the earliest one on a tie."""
        self._require_contract_state(contract, ContractState.INQUIRY)

        winning_bid: Bid | None = None
        for bid in contract.bids:
            if bid.bid_price > contract.max_price:
                continue
            if winning_bid is None or bid.bid_price < winning_bid.bid_price:
                winning_bid = bid

        if winning_bid is None:
            self._advance(contract, "state", ContractState.RESERVE_NOT_MET, contract.contract_id)
            logger.info(f"Inquiry on {contract.contract_id} closed without an acceptable bid.")
            return InquiryResult(outcome=InquiryOutcome.RESERVE_NOT_MET)

        contract.shipper = winning_bid.shipper
        contract.unit_price = winning_bid.bid_price
        self._advance(contract, "state", ContractState.READY_FOR_PICKUP, contract.contract_id)
        contract.bids = []
        logger.info(f"Contract {contract.contract_id} awarded to {contract.shipper} at ${contract.unit_price:.2f}/unit.")
        return InquiryResult(outcome=InquiryOutcome.AWARDED, winning_bid=winning_bid)

    # --- Shipment tracking --- #

    def create_shipment(self, contract: Contract, unit_count: int | None = None, shipment_id: str | None = None) -> Shipment:
        self._require_contract_state(contract, ContractState.READY_FOR_PICKUP)
        if unit_count is not None and unit_count <= 0:
            raise InvalidRange(f"unit_count must be positive, got {unit_count}.", entity_id=contract.contract_id)
        fields = dict(
            product=contract.product,
            contract=contract.contract_id,
            unit_count=contract.unit_count if unit_count is None else unit_count,
        )
        if shipment_id is not None:
            fields["shipment_id"] = shipment_id
        shipment = Shipment(**fields)
        logger.info(f"Shipment {shipment.shipment_id} created under {contract.contract_id} ({shipment.unit_count} units).")
        return shipment

    def record_temperature(self, shipment: Shipment, centigrade: float, timestamp: datetime | None = None) -> TemperatureReading:
        if shipment.status == ShipmentStatus.DELIVERED:
            raise InvalidState(
                f"Shipment {shipment.shipment_id} is already delivered; readings are closed.",
                entity_id=shipment.shipment_id,
                state=shipment.status,
            )
        if not math.isfinite(centigrade):
            raise InvalidRange(
                f"Reading {centigrade} for shipment {shipment.shipment_id} is not a temperature.",
                entity_id=shipment.shipment_id,
                state=shipment.status,
            )
        reading = TemperatureReading(
            shipment=shipment.shipment_id,
            centigrade=centigrade,
            **({"timestamp": timestamp} if timestamp is not None else {}),
        )
        shipment.temperature_readings.append(reading)
        logger.debug(f"Shipment {shipment.shipment_id} reading {centigrade} C.")
        return reading

    def dock(self, shipment: Shipment) -> Shipment:
        self._require_shipment_status(shipment, ShipmentStatus.CREATED)
        self._advance(shipment, "status", ShipmentStatus.DOCKED, shipment.shipment_id)
        logger.info(f"Shipment {shipment.shipment_id} docked.")
        return shipment

    def pick_up(self, shipment: Shipment, product: Product, contract: Contract) -> Shipment:
        self._require_shipment_status(shipment, ShipmentStatus.DOCKED)
        self._require_binding(shipment, product, contract)
        self._advance(shipment, "status", ShipmentStatus.IN_TRANSIT, shipment.shipment_id)
        product.possessor = contract.shipper
        logger.info(f"Shipment {shipment.shipment_id} picked up by {contract.shipper}.")
        return shipment

    def hand_off(self, shipment: Shipment, product: Product, contract: Contract, recipient: Business | str | None = None) -> Shipment:
        """Transfer physical possession while in transit. The status does not change."""
        self._require_shipment_status(shipment, ShipmentStatus.IN_TRANSIT)
        self._require_binding(shipment, product, contract)
        previous = product.possessor
        product.possessor = contract.retailer if recipient is None else _email(recipient)
        logger.info(f"Shipment {shipment.shipment_id} handed off from {previous} to {product.possessor}.")
        return shipment

    def arrive(self, shipment: Shipment, arrival_date_time: datetime) -> Shipment:
        self._require_shipment_status(shipment, ShipmentStatus.IN_TRANSIT)
        self._advance(shipment, "status", ShipmentStatus.ARRIVED, shipment.shipment_id)
        shipment.arrival = arrival_date_time
        logger.info(f"Shipment {shipment.shipment_id} arrived at {arrival_date_time.isoformat()}.")
        return shipment

    def shipment_received(
        self,
        shipment: Shipment,
        product: Product,
        contract: Contract,
        retailer: Retailer,
        supplier: Supplier,
        shipper: Shipper,
    ) -> Settlement:
        """
        Accept delivery: ownership and possession pass to the retailer and the
        penalty-adjusted payout moves from the retailer to supplier and shipper.
        """
        self._require_shipment_status(shipment, ShipmentStatus.ARRIVED)
        self._require_binding(shipment, product, contract)
        settlement = compute_settlement(contract, shipment, self.config.penalty, self.config.settlement)

        self._advance(shipment, "status", ShipmentStatus.DELIVERED, shipment.shipment_id)
        product.possessor = retailer.email
        product.owner = retailer.email
        retailer.balance -= settlement.total
        supplier.balance += settlement.supplier_amount
        shipper.balance += settlement.shipper_amount
        logger.info(
            f"Shipment {shipment.shipment_id} delivered to {retailer.email}: "
            f"deviation {settlement.deviation:.1f} C, penalty {settlement.penalty_factor:.2%}, "
            f"payout ${settlement.total:.2f}."
        )
        return settlement

    # --- Guards --- #

    @staticmethod
    def _advance(entity, attr: str, target, entity_id: str) -> None:
        current = getattr(entity, attr)
        if not can_transition(current, target):
            raise InvalidState(
                f"{entity_id} cannot move from {current.value} to {target.value}.",
                entity_id=entity_id,
                state=current,
            )
        setattr(entity, attr, target)

    @staticmethod
    def _require_listing_state(listing: Product, required: ListingState) -> None:
        if listing.state != required:
            raise InvalidState(
                f"Product {listing.product_id} is {listing.state.value}, expected {required.value}.",
                entity_id=listing.product_id,
                state=listing.state,
            )

    @staticmethod
    def _require_contract_state(contract: Contract, required: ContractState) -> None:
        if contract.state != required:
            raise InvalidState(
                f"Contract {contract.contract_id} is {contract.state.value}, expected {required.value}.",
                entity_id=contract.contract_id,
                state=contract.state,
            )

    @staticmethod
    def _require_shipment_status(shipment: Shipment, required: ShipmentStatus) -> None:
        if shipment.status != required:
            raise InvalidState(
                f"Shipment {shipment.shipment_id} is {shipment.status.value}, expected {required.value}.",
                entity_id=shipment.shipment_id,
                state=shipment.status,
            )

    @staticmethod
    def _require_binding(shipment: Shipment, product: Product, contract: Contract) -> None:
        if shipment.product != product.product_id or shipment.contract != contract.contract_id:
            raise InvalidState(
                f"Shipment {shipment.shipment_id} is bound to {shipment.product}/{shipment.contract}, "
                f"not {product.product_id}/{contract.contract_id}.",
                entity_id=shipment.shipment_id,
                state=shipment.status,
            )


def _email(participant: Business | str) -> str:
    return participant if isinstance(participant, str) else participant.email
