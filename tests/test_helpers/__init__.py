from .fake_account import FakeSafeAccount, TamperedSafeAccount
from .constants import TEST_CHAIN_ID, TEST_MULTISEND, TEST_PRIV_KEY, TEST_SAFE, TEST_TARGET, TEST_TOKEN

__all__ = [
    "FakeSafeAccount",
    "TamperedSafeAccount",
    "TEST_CHAIN_ID",
    "TEST_MULTISEND",
    "TEST_PRIV_KEY",
    "TEST_SAFE",
    "TEST_TARGET",
    "TEST_TOKEN",
]
