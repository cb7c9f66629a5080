"""
Tests for owner signatures.
"""
from unittest.mock import MagicMock

import pytest
from eth_account import Account
from eth_account.messages import encode_defunct

from safetx_sdk.models import SafeSignature
from safetx_sdk.signatures import adjust_v, recover_signer, sign_hash, split_signature
from safetx_sdk.utils import hex_to_bytes
from tests.test_helpers import TEST_TARGET

SAFE_TX_HASH = "0x" + "ab" * 32


def _fake_signer(trailing_byte):
    signer = MagicMock()
    signer.address = TEST_TARGET
    signer.sign_message.return_value = MagicMock(signature=b"\x01" * 64 + bytes([trailing_byte]))
    return signer


@pytest.mark.parametrize("raw_v, expected_v", [
    (0x1b, 0x1f),
    (0x1c, 0x20),
    (0x00, 0x00),
    (0x01, 0x01),
    (0x1f, 0x1f),
    (0x20, 0x20),
    (0x1d, 0x1d),
])
def test_adjust_v(raw_v, expected_v):
    raw = b"\x11" * 64 + bytes([raw_v])
    adjusted = adjust_v(raw)
    assert adjusted[:64] == raw[:64]
    assert adjusted[-1] == expected_v


def test_adjust_v_empty():
    assert adjust_v(b"") == b""


def test_sign_hash_with_local_signer(local_signer):
    signature = sign_hash(local_signer, SAFE_TX_HASH)
    raw = hex_to_bytes(signature.data)

    assert signature.signer == local_signer.address
    assert len(raw) == 65
    assert raw[-1] in (0x1f, 0x20)


def test_sign_hash_is_personal_message(owner_account):
    """The hash is signed as message content, not as a raw digest"""
    signature = sign_hash(owner_account, SAFE_TX_HASH)
    raw = hex_to_bytes(signature.data)
    unadjusted = raw[:-1] + bytes([raw[-1] - 4])

    message = encode_defunct(primitive=hex_to_bytes(SAFE_TX_HASH))
    assert Account.recover_message(message, signature=unadjusted) == owner_account.address


def test_sign_hash_deterministic(local_signer):
    assert sign_hash(local_signer, SAFE_TX_HASH) == sign_hash(local_signer, SAFE_TX_HASH)


@pytest.mark.parametrize("raw_v, expected_v", [(27, 31), (28, 32), (0, 0), (1, 1)])
def test_sign_hash_v_mapping(raw_v, expected_v):
    signature = sign_hash(_fake_signer(raw_v), SAFE_TX_HASH)
    assert hex_to_bytes(signature.data)[-1] == expected_v


def test_sign_hash_passes_hash_as_message():
    signer = _fake_signer(27)
    sign_hash(signer, bytes.fromhex(SAFE_TX_HASH[2:]))
    (message,), _ = signer.sign_message.call_args
    assert message == encode_defunct(primitive=bytes.fromhex(SAFE_TX_HASH[2:]))


def test_split_signature():
    data = "0x" + "11" * 32 + "22" * 32 + "1f"
    parts = split_signature(SafeSignature(signer=TEST_TARGET, data=data))

    assert parts.r == "11" * 32
    assert parts.s == "22" * 32
    assert parts.v == 31
    assert parts.signature.data == data


def test_split_signature_wrong_length():
    with pytest.raises(ValueError):
        split_signature(SafeSignature(signer=TEST_TARGET, data="0x" + "11" * 64))


def test_recover_signer(local_signer):
    signature = sign_hash(local_signer, SAFE_TX_HASH)
    assert recover_signer(SAFE_TX_HASH, signature.data) == local_signer.address
