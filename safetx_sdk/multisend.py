"""
MultiSend batch encoding.

Each entry is packed as uint8 operation, address to, uint256 value,
uint256 data length and the raw data bytes, with no padding between
entries. The MultiSend contract replays them in order.
"""
import logging
from typing import List, Sequence

from eth_abi.packed import encode_packed

from .builder import encode_function_call
from .exceptions import EmptyBatch, InvalidPayloadEncoding
from .models import MetaTransaction, Operation
from .utils import to_checksum_address, to_hex

logger = logging.getLogger(__name__)

MULTI_SEND_SIGNATURE = "multiSend(bytes)"

# operation (1) + to (20) + value (32) + data length (32)
ENTRY_HEADER_SIZE = 1 + 20 + 32 + 32


def encode_meta_transaction(tx: MetaTransaction) -> bytes:
    """Pack a single MetaTransaction as one MultiSend entry"""
    return encode_packed(
        ["uint8", "address", "uint256", "uint256", "bytes"],
        [int(tx.operation), tx.to, tx.value, len(tx.data), tx.data],
    )


def encode_batch(transactions: Sequence[MetaTransaction]) -> bytes:
    """
    Concatenate the packed encoding of each transaction in order.

    Raises:
        EmptyBatch: If no transactions are given
    """
    if not transactions:
        raise EmptyBatch("Cannot encode an empty batch")
    return b"".join(encode_meta_transaction(tx) for tx in transactions)


def decode_batch(blob: bytes) -> List[MetaTransaction]:
    """
    Parse packed MultiSend entries back into MetaTransactions.

    Raises:
        InvalidPayloadEncoding: If an entry is truncated or has an unknown
            operation
    """
    txs = []
    offset = 0
    while offset < len(blob):
        if offset + ENTRY_HEADER_SIZE > len(blob):
            raise InvalidPayloadEncoding(f"Truncated batch entry header at offset {offset}")
        op = blob[offset]
        to = to_checksum_address(to_hex(blob[offset + 1:offset + 21]))
        value = int.from_bytes(blob[offset + 21:offset + 53], "big")
        length = int.from_bytes(blob[offset + 53:offset + 85], "big")
        start = offset + ENTRY_HEADER_SIZE
        if start + length > len(blob):
            raise InvalidPayloadEncoding(f"Truncated batch entry data at offset {offset}")
        try:
            operation = Operation(op)
        except ValueError:
            raise InvalidPayloadEncoding(f"Unknown operation {op} at offset {offset}")
        txs.append(MetaTransaction(to=to, value=value, data=blob[start:start + length], operation=operation))
        offset = start + length
    return txs


def build_multi_send_meta_tx(multi_send_address: str, transactions: Sequence[MetaTransaction]) -> MetaTransaction:
    """
    Wrap transactions into a single delegatecall to the MultiSend contract.

    Args:
        multi_send_address: Address of the MultiSend deployment
        transactions: Ordered transactions to batch

    Returns:
        MetaTransaction calling multiSend(bytes) with the packed batch

    Raises:
        EmptyBatch: If no transactions are given
    """
    batch = encode_batch(transactions)
    logger.debug(f"Encoded {len(transactions)} transactions into {len(batch)} batch bytes")
    return MetaTransaction(
        to=to_checksum_address(multi_send_address),
        value=0,
        data=encode_function_call(MULTI_SEND_SIGNATURE, [batch]),
        operation=Operation.DELEGATE_CALL,
    )
