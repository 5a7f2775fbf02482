import pytest
from ordering.cart.service import CartService
from ordering.catalogue import reset_catalogue, set_catalogue
from ordering.catalogue.fake_adapter import InMemoryCatalogue
from ordering.compliance import reset_compliance, set_compliance
from ordering.compliance.fake_adapter import InMemoryCompliance
from ordering.order.order import Order
from ordering.order.queries import OrderQueryService
from ordering.order.service import OrderService
from protean import current_domain
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def ordering_bed():
    from ordering.domain import ordering

    bed = DomainFixture(ordering)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(ordering_bed):
    with ordering_bed.domain_context():
        yield

        for _, provider in current_domain.providers.items():
            provider._data_reset()


# ---------------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------------
@pytest.fixture()
def catalogue():
    catalogue = InMemoryCatalogue()
    catalogue.add_product("prod-001", "Paracetamol 500mg", "25.00")
    catalogue.add_product("prod-002", "Vitamin D3 1000IU", "12.50")
    catalogue.add_product("rx-001", "Amoxicillin 250mg", "40.00", requires_prescription=True)
    catalogue.add_product("old-001", "Discontinued Syrup", "9.99", is_active=False)
    set_catalogue(catalogue)
    yield catalogue
    reset_catalogue()


@pytest.fixture()
def compliance():
    compliance = InMemoryCompliance()
    set_compliance(compliance)
    yield compliance
    reset_compliance()


# ---------------------------------------------------------------------------
# Services
# ---------------------------------------------------------------------------
@pytest.fixture()
def repository():
    return current_domain.repository_for(Order)


@pytest.fixture()
def carts(repository, catalogue):
    return CartService(repository=repository, catalogue=catalogue)


@pytest.fixture()
def orders(repository):
    return OrderService(repository=repository)


@pytest.fixture()
def queries(repository, compliance):
    return OrderQueryService(repository=repository, compliance=compliance)
