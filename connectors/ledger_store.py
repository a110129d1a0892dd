"""
Module: connectors.ledger_store

Provides an in-memory ledger store for participants and assets, standing in
for the external world state the network runs against.
"""

import asyncio
import logging
from typing import TypeVar

from pydantic import BaseModel

from engine.errors import NotFound
from models.assets import Contract, Product, Shipment, entity_id
from models.participants import Business

logger = logging.getLogger(__name__)

EntityT = TypeVar("EntityT", bound=BaseModel)


class InMemoryLedger:
    """
    In-memory ledger keyed by identifier.
    Reads hand out deep copies so nothing outside `commit` can change stored state.
    """

    def __init__(self):
        self._participants: dict[str, Business] = {}
        self._products: dict[str, Product] = {}
        self._contracts: dict[str, Contract] = {}
        self._shipments: dict[str, Shipment] = {}
        self._commit_lock = asyncio.Lock()

    # --- Onboarding --- #

    def add_participant(self, participant: Business) -> None:
        if participant.email in self._participants:
            logger.warning(f"Re-registering participant {participant.email}")
        self._participants[participant.email] = participant.model_copy(deep=True)
        logger.info(f"Participant {participant.email} ({participant.role.value}) registered.")

    def add_product(self, product: Product) -> None:
        if product.owner not in self._participants:
            raise NotFound(f"Owner {product.owner} is not a registered participant.", entity_id=product.owner)
        self._products[product.product_id] = product.model_copy(deep=True)
        logger.info(f"Product {product.product_id} ({product.product_type.value}) added for {product.owner}.")

    # --- Lookups --- #

    async def get_participant(self, email: str) -> Business:
        return self._lookup(self._participants, email, "Participant")

    async def get_product(self, product_id: str) -> Product:
        return self._lookup(self._products, product_id, "Product")

    async def get_contract(self, contract_id: str) -> Contract:
        return self._lookup(self._contracts, contract_id, "Contract")

    async def get_shipment(self, shipment_id: str) -> Shipment:
        return self._lookup(self._shipments, shipment_id, "Shipment")

    def list_products(self) -> list[Product]:
        return [p.model_copy(deep=True) for p in self._products.values()]

    def list_contracts(self) -> list[Contract]:
        return [c.model_copy(deep=True) for c in self._contracts.values()]

    def list_shipments(self) -> list[Shipment]:
        return [s.model_copy(deep=True) for s in self._shipments.values()]

    # --- Writes --- #

    async def commit(self, *entities: BaseModel) -> list[str]:
        """
        Store every entity together. Unsupported entity types are rejected
        before anything is written.
        """
        targets = [(self._table_for(entity), entity) for entity in entities]
        async with self._commit_lock:
            for table, entity in targets:
                table[entity_id(entity)] = entity.model_copy(deep=True)
        committed = [entity_id(entity) for entity in entities]
        logger.debug(f"Committed {committed}")
        return committed

    def _table_for(self, entity: BaseModel) -> dict:
        if isinstance(entity, Business):
            return self._participants
        if isinstance(entity, Product):
            return self._products
        if isinstance(entity, Contract):
            return self._contracts
        if isinstance(entity, Shipment):
            return self._shipments
        raise TypeError(f"Ledger cannot store {type(entity).__name__}.")

    @staticmethod
    def _lookup(table: dict[str, EntityT], key: str, kind: str) -> EntityT:
        try:
            return table[key].model_copy(deep=True)
        except KeyError:
            raise NotFound(f"{kind} {key} not found.", entity_id=key) from None
