"""
Safe transaction SDK - build, verify and sign Safe transaction proposals.
"""
from .account import SafeAccount, Web3SafeAccount
from .assembler import assemble, build_safe_transaction
from .builder import (
    MethodCall,
    PlainTransfer,
    RawPayload,
    build_meta_transaction,
    build_meta_transactions,
    encode_function_call,
    load_meta_transactions,
    read_csv,
    resolve_payload,
)
from .config import NetworkConfig
from .exceptions import (
    EmptyBatch,
    HashMismatch,
    InvalidAddress,
    InvalidAmount,
    InvalidPayloadEncoding,
    NoTransactionsProvided,
    SafeTxError,
    StoreError,
    StoreNotFound,
)
from .export import build_tx_builder_export, write_tx_builder_json
from .hashing import SAFE_TX_TYPES, calculate_safe_tx_hash, compute_safe_tx_hash
from .models import (
    MetaTransaction,
    Operation,
    SafeSignature,
    SafeTransaction,
    SafeTxProposal,
    SignatureParts,
    TxBuilderExport,
    TxDescription,
)
from .multisend import build_multi_send_meta_tx, decode_batch, encode_batch
from .proposer import SafeProposer
from .signatures import adjust_v, recover_signer, sign_hash, split_signature
from .signer import LocalSigner, Signer
from .store import ProposalStore, proposal_key, signatures_key
from .version import __version__

__all__ = [
    "SafeProposer",
    "SafeAccount",
    "Web3SafeAccount",
    "ProposalStore",
    "NetworkConfig",
    "LocalSigner",
    "Signer",
    "MetaTransaction",
    "Operation",
    "SafeTransaction",
    "SafeTxProposal",
    "SafeSignature",
    "SignatureParts",
    "TxBuilderExport",
    "TxDescription",
    "RawPayload",
    "MethodCall",
    "PlainTransfer",
    "build_meta_transaction",
    "build_meta_transactions",
    "encode_function_call",
    "load_meta_transactions",
    "read_csv",
    "resolve_payload",
    "encode_batch",
    "decode_batch",
    "build_multi_send_meta_tx",
    "assemble",
    "build_safe_transaction",
    "SAFE_TX_TYPES",
    "calculate_safe_tx_hash",
    "compute_safe_tx_hash",
    "adjust_v",
    "sign_hash",
    "split_signature",
    "recover_signer",
    "build_tx_builder_export",
    "write_tx_builder_json",
    "proposal_key",
    "signatures_key",
    "SafeTxError",
    "InvalidAddress",
    "InvalidAmount",
    "InvalidPayloadEncoding",
    "EmptyBatch",
    "NoTransactionsProvided",
    "HashMismatch",
    "StoreError",
    "StoreNotFound",
    "__version__",
]
