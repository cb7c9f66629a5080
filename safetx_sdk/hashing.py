"""
Safe transaction hashing.

The Safe contract computes the hash that owners sign. That hash is never
taken on trust: it is recomputed locally as an EIP-712 structured-data hash
over the same fields and the two must match exactly. Only Safes older than
1.3.0, whose domain layout differs, may skip the local check.
"""
import logging
from typing import Any, Dict

from eth_account.messages import encode_typed_data
from eth_utils import keccak

from .account import SafeAccount
from .exceptions import HashMismatch
from .models import SafeTransaction
from .utils import to_checksum_address, to_hex

logger = logging.getLogger(__name__)

EIP712_DOMAIN_TYPE = [
    {"name": "chainId", "type": "uint256"},
    {"name": "verifyingContract", "type": "address"},
]

# SafeTx(address to,uint256 value,bytes data,uint8 operation,uint256 safeTxGas,uint256 baseGas,uint256 gasPrice,address gasToken,address refundReceiver,uint256 nonce)
SAFE_TX_TYPE = [
    {"name": "to", "type": "address"},
    {"name": "value", "type": "uint256"},
    {"name": "data", "type": "bytes"},
    {"name": "operation", "type": "uint8"},
    {"name": "safeTxGas", "type": "uint256"},
    {"name": "baseGas", "type": "uint256"},
    {"name": "gasPrice", "type": "uint256"},
    {"name": "gasToken", "type": "address"},
    {"name": "refundReceiver", "type": "address"},
    {"name": "nonce", "type": "uint256"},
]

SAFE_TX_TYPES = {
    "EIP712Domain": EIP712_DOMAIN_TYPE,
    "SafeTx": SAFE_TX_TYPE,
}


def safe_tx_typed_data(safe_address: str, tx: SafeTransaction, chain_id: int) -> Dict[str, Any]:
    """Build the full EIP-712 typed data document for a Safe transaction"""
    return {
        "types": SAFE_TX_TYPES,
        "primaryType": "SafeTx",
        "domain": {
            "chainId": chain_id,
            "verifyingContract": to_checksum_address(safe_address),
        },
        "message": {
            "to": tx.to,
            "value": tx.value,
            "data": tx.data,
            "operation": int(tx.operation),
            "safeTxGas": tx.safe_tx_gas,
            "baseGas": tx.base_gas,
            "gasPrice": tx.gas_price,
            "gasToken": tx.gas_token,
            "refundReceiver": tx.refund_receiver,
            "nonce": tx.nonce,
        },
    }


def calculate_safe_tx_hash(safe_address: str, tx: SafeTransaction, chain_id: int) -> bytes:
    """
    Compute the EIP-712 hash of a Safe transaction locally.

    Args:
        safe_address: The Safe, used as verifying contract
        tx: Transaction to hash
        chain_id: Chain the Safe lives on

    Returns:
        32-byte digest
    """
    signable = encode_typed_data(full_message=safe_tx_typed_data(safe_address, tx, chain_id))
    return keccak(b"\x19" + signable.version + signable.header + signable.body)


def compute_safe_tx_hash(
    account: SafeAccount,
    tx: SafeTransaction,
    chain_id: int,
    on_chain_only: bool = False,
) -> bytes:
    """
    Reconcile the Safe's own hash with the locally computed one.

    Args:
        account: Capability to query the Safe contract
        tx: Transaction to hash
        chain_id: Chain id used in the EIP-712 domain
        on_chain_only: Return the contract's hash without a local check
            (only for pre-1.3.0 Safes)

    Returns:
        32-byte digest agreed by both sources

    Raises:
        HashMismatch: If the two digests differ
    """
    on_chain_hash = bytes(account.get_transaction_hash(tx))
    if on_chain_only:
        logger.warning(f"Using on-chain hash {to_hex(on_chain_hash)} without local verification")
        return on_chain_hash

    off_chain_hash = calculate_safe_tx_hash(account.address, tx, chain_id)
    if on_chain_hash != off_chain_hash:
        logger.error(
            f"Hash mismatch for Safe {account.address}: "
            f"on-chain {to_hex(on_chain_hash)} != off-chain {to_hex(off_chain_hash)}"
        )
        raise HashMismatch(on_chain_hash, off_chain_hash)

    logger.debug(f"On-chain and off-chain hashes match: {to_hex(off_chain_hash)}")
    return off_chain_hash
