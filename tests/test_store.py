"""
Tests for the file backed proposal store.
"""
import json

import pytest

from safetx_sdk.assembler import assemble
from safetx_sdk.exceptions import StoreNotFound
from safetx_sdk.models import MetaTransaction, SafeSignature, SafeTxProposal
from safetx_sdk.store import CACHE_DIR_ENV_VAR, DEFAULT_CACHE_DIR, ProposalStore, proposal_key, signatures_key
from tests.test_helpers import TEST_CHAIN_ID, TEST_SAFE, TEST_TARGET, TEST_TOKEN

SAFE_TX_HASH = "0x" + "cd" * 32


@pytest.fixture
def proposal():
    tx = assemble(MetaTransaction(to=TEST_TARGET, value=1, data=b"\x01\x02"), 4)
    return SafeTxProposal(safe=TEST_SAFE, chain_id=TEST_CHAIN_ID, safe_tx_hash=SAFE_TX_HASH, tx=tx)


def test_keys():
    assert proposal_key(SAFE_TX_HASH) == f"{SAFE_TX_HASH}.proposal.json"
    assert signatures_key(SAFE_TX_HASH) == f"{SAFE_TX_HASH}.signatures.json"
    # bytes and upper case hex map to the same key
    assert proposal_key(bytes.fromhex("cd" * 32)) == proposal_key(SAFE_TX_HASH.upper().replace("0X", "0x"))


def test_directory_created_lazily(store):
    assert not store.directory.exists()
    with pytest.raises(StoreNotFound):
        store.get("missing.json")
    assert not store.directory.exists()

    store.put("value.json", {"a": 1})

    assert store.directory.is_dir()
    assert store.get("value.json") == {"a": 1}
    assert store.exists("value.json")


def test_put_overwrites(store):
    store.put("value.json", {"a": 1})
    store.put("value.json", {"a": 2})
    assert store.get("value.json") == {"a": 2}


def test_file_is_pretty_json(store):
    store.put("value.json", {"a": [1, 2]})
    text = (store.directory / "value.json").read_text()
    assert text == json.dumps({"a": [1, 2]}, indent=2)


@pytest.mark.parametrize("key", ["", "../escape.json", "a/b.json", ".."])
def test_invalid_keys(store, key):
    with pytest.raises(ValueError):
        store.put(key, {})


def test_default_directory(monkeypatch, tmp_path):
    monkeypatch.delenv(CACHE_DIR_ENV_VAR, raising=False)
    monkeypatch.chdir(tmp_path)
    assert ProposalStore().directory == tmp_path / DEFAULT_CACHE_DIR


def test_directory_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv(CACHE_DIR_ENV_VAR, str(tmp_path / "custom"))
    assert ProposalStore().directory == tmp_path / "custom"


def test_save_and_load_proposal(store, proposal):
    key = store.save_proposal(proposal)

    assert key == proposal_key(SAFE_TX_HASH)
    stored = store.get(key)
    assert stored["safe"] == TEST_SAFE
    assert stored["chainId"] == TEST_CHAIN_ID
    assert stored["safeTxHash"] == SAFE_TX_HASH
    assert stored["tx"]["data"] == "0x0102"
    assert stored["tx"]["value"] == "1"
    assert store.load_proposal(SAFE_TX_HASH) == proposal


def test_load_missing_proposal(store):
    with pytest.raises(StoreNotFound) as exc_info:
        store.load_proposal(SAFE_TX_HASH)
    assert exc_info.value.key == proposal_key(SAFE_TX_HASH)


def test_load_signatures_missing_is_empty(store):
    assert store.load_signatures(SAFE_TX_HASH) == {}


def test_add_signatures(store):
    first = SafeSignature(signer=TEST_TARGET, data="0x" + "11" * 65)
    second = SafeSignature(signer=TEST_TOKEN, data="0x" + "22" * 65)

    store.add_signature(SAFE_TX_HASH, first)
    result = store.add_signature(SAFE_TX_HASH, second)

    assert result == {TEST_TARGET: first.data, TEST_TOKEN: second.data}
    assert store.load_signatures(SAFE_TX_HASH) == result
    assert list(result) == [TEST_TARGET, TEST_TOKEN]


def test_add_signature_same_signer_replaces(store, caplog):
    store.add_signature(SAFE_TX_HASH, SafeSignature(signer=TEST_TARGET, data="0x" + "11" * 65))
    store.add_signature(SAFE_TX_HASH, SafeSignature(signer=TEST_TARGET, data="0x" + "33" * 65))

    assert store.load_signatures(SAFE_TX_HASH) == {TEST_TARGET: "0x" + "33" * 65}
    assert "Replacing existing signature" in caplog.text
