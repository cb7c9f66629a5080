"""
Export transactions in the Safe transaction builder JSON format.
"""
import json
import time
import logging
from pathlib import Path
from typing import Optional, Sequence, Union

from .models import MetaTransaction, TxBuilderExport, TxBuilderMeta

logger = logging.getLogger(__name__)

TX_BUILDER_VERSION = "1.0"
DEFAULT_EXPORT_NAME = "Custom Transactions"


def build_tx_builder_export(
    chain_id: Union[int, str],
    transactions: Sequence[MetaTransaction],
    name: Optional[str] = None,
    description: Optional[str] = None,
    created_at: Optional[int] = None,
) -> TxBuilderExport:
    """
    Create a transaction builder document.

    Args:
        chain_id: Chain the transactions are meant for
        transactions: Ordered transactions
        name: Batch name shown in the transaction builder
        description: Optional description
        created_at: Creation time in epoch milliseconds, defaults to now
    """
    return TxBuilderExport(
        version=TX_BUILDER_VERSION,
        chain_id=str(chain_id),
        created_at=created_at if created_at is not None else int(time.time() * 1000),
        meta=TxBuilderMeta(name=name or DEFAULT_EXPORT_NAME, description=description),
        transactions=list(transactions),
    )


def write_tx_builder_json(
    path: Union[str, Path],
    chain_id: Union[int, str],
    transactions: Sequence[MetaTransaction],
    name: Optional[str] = None,
    description: Optional[str] = None,
) -> TxBuilderExport:
    """Write a transaction builder document to path and return it"""
    document = build_tx_builder_export(chain_id, transactions, name=name, description=description)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(document.model_dump(mode="json", by_alias=True), f, indent=2)
    logger.info(f"Exported {len(document.transactions)} transactions to {path}")
    return document
