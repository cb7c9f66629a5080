"""
Constants shared by the test suite.
"""
TEST_PRIV_KEY = "0x0123456789abcdef0123456789abcdef0123456789abcdef0123456789abcdef"
TEST_SAFE = "0x1234567890123456789012345678901234567890"
TEST_TARGET = "0x2345678901234567890123456789012345678901"
TEST_TOKEN = "0x3456789012345678901234567890123456789012"
TEST_MULTISEND = "0xA238CBeb142c10Ef7Ad8442C6D1f9E89e07e7761"
TEST_CHAIN_ID = 11155111  # Sepolia
