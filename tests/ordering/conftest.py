import pytest
from protean.integrations.pytest import DomainFixture

from ordering.channel import reset_catalog, set_catalog
from ordering.channel.fake_adapter import InMemoryChannelCatalog
from ordering.fee_rules import reset_fee_rules, set_fee_rules
from ordering.fee_rules.fake_adapter import StaticFeeRuleSource


@pytest.fixture(scope="session")
def ordering_bed():
    from ordering.domain import ordering
    from ordering.utils.db import drop_db, setup_db

    bed = DomainFixture(ordering)
    bed.setup()
    setup_db(ordering)
    yield bed
    drop_db(ordering)
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(ordering_bed):
    with ordering_bed.domain_context():
        yield

        from protean import current_domain

        # Clear all databases
        for _, provider in current_domain.providers.items():
            provider._data_reset()

        # Drain event stores
        current_domain.event_store.store._data_reset()

    reset_catalog()
    reset_fee_rules()


@pytest.fixture()
def catalog():
    """An in-memory channel catalogue installed as the active one."""
    catalog = InMemoryChannelCatalog()
    set_catalog(catalog)
    return catalog


@pytest.fixture()
def fee_rules():
    """A static fee rule source installed as the active one."""
    fee_rules = StaticFeeRuleSource()
    set_fee_rules(fee_rules)
    return fee_rules
