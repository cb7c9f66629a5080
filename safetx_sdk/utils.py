"""
Utility functions for the Safe transaction SDK.
"""
import re
from decimal import Decimal, InvalidOperation, localcontext
from typing import Any, Union

from web3 import Web3

from .exceptions import InvalidAddress, InvalidAmount, InvalidPayloadEncoding

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
MAX_UINT256 = 2**256 - 1
ETHER_DECIMALS = 18

_HEX_RE = re.compile(r"^0x([0-9a-fA-F]{2})*$")


def is_hex_string(value: Any) -> bool:
    """
    Check whether value is a 0x-prefixed, even-length hex string.

    "0x" on its own is valid and denotes empty bytes.
    """
    return isinstance(value, str) and bool(_HEX_RE.match(value))


def hex_to_bytes(value: Union[str, bytes]) -> bytes:
    """
    Convert a 0x-prefixed hex string to bytes. Bytes pass through.

    Raises:
        InvalidPayloadEncoding: If the string is not valid hex
    """
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if not is_hex_string(value):
        raise InvalidPayloadEncoding(f"Invalid hex string provided for data: {value!r}")
    return bytes.fromhex(value[2:])


def to_hex(value: bytes) -> str:
    """Return 0x-prefixed lowercase hex for bytes"""
    return "0x" + bytes(value).hex()


def to_checksum_address(address: Any) -> str:
    """
    Validate and checksum an address.

    Args:
        address: Address string (any case, checksum must be correct if mixed)

    Returns:
        EIP-55 checksummed address

    Raises:
        InvalidAddress: If address is not a valid 20-byte address
    """
    if not isinstance(address, str) or not Web3.is_address(address):
        raise InvalidAddress(f"Invalid address: {address!r}")
    hex_part = address[2:] if address[:2] in ("0x", "0X") else address
    if hex_part != hex_part.lower() and hex_part != hex_part.upper() and not Web3.is_checksum_address(address):
        raise InvalidAddress(f"Bad address checksum: {address!r}")
    return Web3.to_checksum_address(address)


def parse_ether(value: Union[str, int, Decimal]) -> int:
    """
    Parse an ether denominated amount into wei.

    Args:
        value: Decimal amount, e.g. "1.5"

    Returns:
        Amount in wei

    Raises:
        InvalidAmount: If value is not a finite, non-negative amount with at
            most 18 decimals that fits in a uint256
    """
    if isinstance(value, bool) or not isinstance(value, (str, int, Decimal)):
        raise InvalidAmount(f"Invalid amount: {value!r}")
    text = str(value).strip()
    with localcontext() as ctx:
        ctx.prec = 100
        try:
            amount = Decimal(text)
        except InvalidOperation:
            raise InvalidAmount(f"Invalid amount: {value!r}")
        if not amount.is_finite() or amount < 0:
            raise InvalidAmount(f"Amount must be a non-negative number: {value!r}")
        wei = amount.scaleb(ETHER_DECIMALS)
        if wei != wei.to_integral_value():
            raise InvalidAmount(f"Amount has more than {ETHER_DECIMALS} decimals: {value!r}")
        wei_int = int(wei)
    if wei_int > MAX_UINT256:
        raise InvalidAmount(f"Amount does not fit in uint256: {value!r}")
    return wei_int


def hash_to_bytes(safe_tx_hash: Union[str, bytes]) -> bytes:
    """
    Normalize a 32-byte hash given as hex or bytes.

    Raises:
        ValueError: If the hash is not exactly 32 bytes
    """
    if isinstance(safe_tx_hash, str):
        if not is_hex_string(safe_tx_hash):
            raise ValueError(f"Invalid hash: {safe_tx_hash!r}")
        raw = bytes.fromhex(safe_tx_hash[2:])
    else:
        raw = bytes(safe_tx_hash)
    if len(raw) != 32:
        raise ValueError(f"Expected a 32 byte hash, got {len(raw)} bytes")
    return raw
