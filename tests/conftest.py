import sys
from pathlib import Path

import pytest

# Ensure project root is on sys.path to allow `import engine`, `import models`, etc.
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from connectors.ledger_store import InMemoryLedger  # noqa: E402
from engine.lifecycle import LifecycleEngine  # noqa: E402
from models.assets import Contract, Product  # noqa: E402
from models.enums import ContractState, ListingState, ParticipantRole, ProductType  # noqa: E402
from models.participants import make_participant  # noqa: E402
from tests.mocks import (  # noqa: E402
    ARRIVAL_DUE,
    CHEAP_SHIPPER,
    OTHER_RETAILER,
    RETAILER,
    SHIPPER,
    SUPPLIER,
)


@pytest.fixture
def engine() -> LifecycleEngine:
    return LifecycleEngine()


@pytest.fixture
def product() -> Product:
    """A freshly created, unlisted product."""
    return Product(
        product_id="PROD-1",
        product_type=ProductType.BANANAS,
        unit_count=100,
        reserve_price=60.0,
        owner=SUPPLIER,
    )


@pytest.fixture
def listing(product) -> Product:
    product.state = ListingState.FOR_SALE
    return product


@pytest.fixture
def sold_product(product) -> Product:
    product.state = ListingState.SOLD
    product.buyer = RETAILER
    return product


@pytest.fixture
def contract() -> Contract:
    """A contract in INQUIRY with a 2..10 C band."""
    return Contract(
        contract_id="CON-1",
        supplier=SUPPLIER,
        retailer=RETAILER,
        product="PROD-1",
        unit_count=100,
        unit_price=45.0,
        max_price=45.0,
        min_temperature=2.0,
        max_temperature=10.0,
        min_penalty_factor=0.1,
        max_penalty_factor=0.5,
        arrival_date_time=ARRIVAL_DUE,
    )


@pytest.fixture
def awarded_contract(contract) -> Contract:
    contract.state = ContractState.READY_FOR_PICKUP
    contract.shipper = SHIPPER
    contract.unit_price = 35.0
    return contract


@pytest.fixture
def ledger() -> InMemoryLedger:
    """A ledger with one participant per role, a second retailer and an unlisted product."""
    ledger = InMemoryLedger()
    ledger.add_participant(make_participant(ParticipantRole.SUPPLIER, SUPPLIER, "Ecuador"))
    ledger.add_participant(make_participant(ParticipantRole.SHIPPER, SHIPPER, "Panama"))
    ledger.add_participant(make_participant(ParticipantRole.SHIPPER, CHEAP_SHIPPER, "Panama"))
    ledger.add_participant(make_participant(ParticipantRole.RETAILER, RETAILER, "UK", balance=10000.0))
    ledger.add_participant(make_participant(ParticipantRole.RETAILER, OTHER_RETAILER, "UK", balance=10000.0))
    ledger.add_product(
        Product(
            product_id="PROD-1",
            product_type=ProductType.BANANAS,
            unit_count=100,
            reserve_price=60.0,
            owner=SUPPLIER,
        )
    )
    return ledger
