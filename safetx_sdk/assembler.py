"""
Assemble Safe transactions from MetaTransactions.
"""
from typing import Optional, Sequence

from .exceptions import EmptyBatch
from .models import MetaTransaction, SafeTransaction
from .multisend import build_multi_send_meta_tx
from .utils import ZERO_ADDRESS


def assemble(
    meta_tx: MetaTransaction,
    nonce: int,
    safe_tx_gas: int = 0,
    base_gas: int = 0,
    gas_price: int = 0,
    gas_token: str = ZERO_ADDRESS,
    refund_receiver: str = ZERO_ADDRESS,
) -> SafeTransaction:
    """
    Merge a MetaTransaction with a nonce and gas settings.

    The nonce must come from the caller, either the Safe's current nonce or
    an explicitly pinned one.
    """
    return SafeTransaction(
        to=meta_tx.to,
        value=meta_tx.value,
        data=meta_tx.data,
        operation=meta_tx.operation,
        safe_tx_gas=safe_tx_gas,
        base_gas=base_gas,
        gas_price=gas_price,
        gas_token=gas_token,
        refund_receiver=refund_receiver,
        nonce=nonce,
    )


def build_safe_transaction(
    transactions: Sequence[MetaTransaction],
    nonce: int,
    multi_send_address: Optional[str] = None,
) -> SafeTransaction:
    """
    Build a Safe transaction for one or more MetaTransactions.

    A single transaction is assembled directly, several are batched through
    the MultiSend contract.

    Raises:
        EmptyBatch: If no transactions are given
        ValueError: If several transactions are given without a MultiSend address
    """
    if not transactions:
        raise EmptyBatch("No transactions to build a Safe transaction from")
    if len(transactions) == 1:
        return assemble(transactions[0], nonce)
    if not multi_send_address:
        raise ValueError("A MultiSend address is required to batch multiple transactions")
    return assemble(build_multi_send_meta_tx(multi_send_address, transactions), nonce)
