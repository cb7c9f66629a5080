"""
Exceptions for the Safe transaction SDK.
"""
from typing import Optional


class SafeTxError(Exception):
    """Base exception for all SDK errors."""
    pass


class InvalidAddress(SafeTxError):
    """Raised when a target or signer is not a valid 20-byte address."""
    pass


class InvalidAmount(SafeTxError):
    """Raised when a value cannot be parsed as a non-negative ether amount."""
    pass


class InvalidPayloadEncoding(SafeTxError):
    """Raised when call data is not valid hex or cannot be ABI-encoded."""
    pass


class EmptyBatch(SafeTxError):
    """Raised when a batch is requested for zero transactions."""
    pass


class NoTransactionsProvided(SafeTxError):
    """Raised when a transaction file contains no entries."""
    pass


class HashMismatch(SafeTxError):
    """
    Raised when the hash returned by the Safe contract differs from the
    locally computed EIP-712 hash.
    """

    def __init__(self, on_chain_hash: bytes, off_chain_hash: bytes, message: Optional[str] = None):
        self.on_chain_hash = on_chain_hash
        self.off_chain_hash = off_chain_hash
        if message is None:
            message = (
                f"Unexpected hash! on-chain 0x{on_chain_hash.hex()} != "
                f"off-chain 0x{off_chain_hash.hex()} "
                "(for pre-1.3.0 Safes use the on-chain hash only)"
            )
        super().__init__(message)


class StoreError(SafeTxError):
    """Base exception for proposal store errors."""
    pass


class StoreNotFound(StoreError):
    """Raised when a key is not present in the proposal store."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"No entry stored under key: {key}")
