"""
Property-based tests for the Safe transaction SDK.

These tests verify that properties hold true across many random inputs.
"""
from hypothesis import given, settings, strategies as st

from safetx_sdk.assembler import assemble
from safetx_sdk.builder import build_meta_transaction
from safetx_sdk.exceptions import HashMismatch
from safetx_sdk.hashing import calculate_safe_tx_hash, compute_safe_tx_hash
from safetx_sdk.models import MetaTransaction, Operation
from safetx_sdk.multisend import ENTRY_HEADER_SIZE, decode_batch, encode_batch
from safetx_sdk.signatures import adjust_v
from safetx_sdk.utils import MAX_UINT256, to_checksum_address, to_hex
from tests.test_helpers import FakeSafeAccount, TamperedSafeAccount

address_strategy = st.binary(min_size=20, max_size=20).map(lambda b: to_checksum_address(to_hex(b)))
payload_strategy = st.binary(max_size=300)
operation_strategy = st.sampled_from([Operation.CALL, Operation.DELEGATE_CALL])
meta_tx_strategy = st.builds(
    MetaTransaction,
    to=address_strategy,
    value=st.integers(min_value=0, max_value=MAX_UINT256),
    data=payload_strategy,
    operation=operation_strategy,
)


@settings(max_examples=50)
@given(to=address_strategy, data=payload_strategy, operation=operation_strategy)
def test_hex_payload_preserved(to, data, operation):
    """Hex call data comes out of the builder byte for byte"""
    tx = build_meta_transaction({"to": to.lower(), "value": "0", "data": to_hex(data), "operation": int(operation)})
    assert tx.data == data
    assert tx.to == to
    assert tx.operation == operation


@settings(max_examples=50)
@given(txs=st.lists(meta_tx_strategy, min_size=1, max_size=8))
def test_batch_round_trip(txs):
    """Encoding then parsing a batch yields the original sequence in order"""
    blob = encode_batch(txs)
    assert len(blob) == len(txs) * ENTRY_HEADER_SIZE + sum(len(tx.data) for tx in txs)
    assert decode_batch(blob) == txs


@settings(max_examples=25, deadline=None)
@given(
    tx=meta_tx_strategy,
    nonce=st.integers(min_value=0, max_value=2**64),
    chain_id=st.integers(min_value=1, max_value=2**32),
    safe=address_strategy,
)
def test_hash_reconciliation(tx, nonce, chain_id, safe):
    """Matching sources return the shared hash, diverging sources fail"""
    safe_tx = assemble(tx, nonce)
    expected = calculate_safe_tx_hash(safe, safe_tx, chain_id)

    assert compute_safe_tx_hash(FakeSafeAccount(safe, chain_id=chain_id), safe_tx, chain_id) == expected

    tampered = bytes([expected[0] ^ 0xFF]) + expected[1:]
    try:
        compute_safe_tx_hash(TamperedSafeAccount(safe, chain_id=chain_id, returned_hash=tampered), safe_tx, chain_id)
    except HashMismatch as e:
        assert e.off_chain_hash == expected
    else:
        raise AssertionError("HashMismatch not raised")


@given(body=st.binary(min_size=64, max_size=64), v=st.integers(min_value=0, max_value=255))
def test_adjust_v_only_touches_27_28(body, v):
    adjusted = adjust_v(body + bytes([v]))
    assert adjusted[:64] == body
    if v in (27, 28):
        assert adjusted[-1] == v + 4
    else:
        assert adjusted[-1] == v
