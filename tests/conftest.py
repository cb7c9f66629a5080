"""
Pytest fixtures for the Safe transaction SDK tests.
"""
import logging

import pytest
from eth_account import Account

from safetx_sdk.config import NetworkConfig
from safetx_sdk.proposer import SafeProposer
from safetx_sdk.signer import LocalSigner
from safetx_sdk.store import ProposalStore
from tests.test_helpers import FakeSafeAccount, TEST_MULTISEND, TEST_PRIV_KEY


@pytest.fixture(autouse=True)
def _reset_network_cache():
    """Make sure no test leaks a patched network registry"""
    yield
    NetworkConfig._networks_cache = None


@pytest.fixture
def local_signer():
    """Deterministic owner signer"""
    return LocalSigner(TEST_PRIV_KEY)


@pytest.fixture
def owner_account():
    """Plain eth_account LocalAccount, which also satisfies the Signer protocol"""
    return Account.from_key(TEST_PRIV_KEY)


@pytest.fixture
def safe_account():
    return FakeSafeAccount()


@pytest.fixture
def store(tmp_path):
    """Store in a not yet existing directory"""
    return ProposalStore(tmp_path / "cli_cache")


@pytest.fixture
def proposer(safe_account, store):
    return SafeProposer(
        safe_account,
        store=store,
        multi_send_address=TEST_MULTISEND,
        logger=logging.getLogger("safetx_sdk.tests"),
    )
