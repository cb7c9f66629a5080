"""
File backed store for Safe transaction proposals and signatures.

Entries are JSON files in a cache directory, addressed by a key derived from
the Safe transaction hash. The directory is created on first write.
"""
import os
import json
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, Optional, Union

import portalocker

from .exceptions import StoreNotFound
from .models import SafeSignature, SafeTxProposal
from .utils import hash_to_bytes, to_checksum_address, to_hex

logger = logging.getLogger(__name__)

CACHE_DIR_ENV_VAR = "SAFETX_CACHE_DIR"
DEFAULT_CACHE_DIR = "cli_cache"
LOCK_TIMEOUT = 10


def _hash_hex(safe_tx_hash: Union[str, bytes]) -> str:
    return to_hex(hash_to_bytes(safe_tx_hash))


def proposal_key(safe_tx_hash: Union[str, bytes]) -> str:
    return f"{_hash_hex(safe_tx_hash)}.proposal.json"


def signatures_key(safe_tx_hash: Union[str, bytes]) -> str:
    return f"{_hash_hex(safe_tx_hash)}.signatures.json"


class ProposalStore:
    """Process-safe JSON key-value store on the local filesystem"""

    def __init__(self, directory: Optional[Union[str, Path]] = None):
        """
        Initialize the store.

        Args:
            directory: Cache directory. Defaults to SAFETX_CACHE_DIR or
                ./cli_cache
        """
        if directory is None:
            directory = os.environ.get(CACHE_DIR_ENV_VAR) or Path.cwd() / DEFAULT_CACHE_DIR
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key in (".", ".."):
            raise ValueError(f"Invalid store key: {key!r}")
        return self.directory / key

    def _ensure_dir(self) -> None:
        if not self.directory.exists():
            logger.debug(f"Creating store directory {self.directory}")
            self.directory.mkdir(parents=True, exist_ok=True)

    @contextmanager
    def _locked(self, key: str) -> Iterator[Path]:
        path = self._path(key)
        with portalocker.Lock(str(path) + ".lock", timeout=LOCK_TIMEOUT):
            yield path

    @staticmethod
    def _read(path: Path, key: str) -> Any:
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except FileNotFoundError:
            raise StoreNotFound(key)

    @staticmethod
    def _write(path: Path, value: Any) -> None:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(value, f, indent=2)

    def exists(self, key: str) -> bool:
        return self._path(key).exists()

    def put(self, key: str, value: Any) -> None:
        """Write a JSON serializable value under key, replacing any previous value"""
        self._ensure_dir()
        with self._locked(key) as path:
            self._write(path, value)
        logger.debug(f"Stored {key} in {self.directory}")

    def get(self, key: str) -> Any:
        """
        Read the value stored under key.

        Raises:
            StoreNotFound: If nothing is stored under key
        """
        if not self._path(key).exists():
            raise StoreNotFound(key)
        with self._locked(key) as path:
            return self._read(path, key)

    def update(self, key: str, fn: Callable[[Any], Any], default: Any = None) -> Any:
        """
        Read, transform and write a value while holding the key's lock.

        Args:
            key: Store key
            fn: Function mapping the current value to the new one
            default: Current value to use when the key is missing

        Returns:
            The new value
        """
        self._ensure_dir()
        with self._locked(key) as path:
            try:
                current = self._read(path, key)
            except StoreNotFound:
                current = default
            new_value = fn(current)
            self._write(path, new_value)
        return new_value

    def save_proposal(self, proposal: SafeTxProposal) -> str:
        """Store a proposal under its hash and return the key"""
        key = proposal_key(proposal.safe_tx_hash)
        self.put(key, proposal.to_json_dict())
        logger.info(f"Saved proposal {proposal.safe_tx_hash}")
        return key

    def load_proposal(self, safe_tx_hash: Union[str, bytes]) -> SafeTxProposal:
        """
        Raises:
            StoreNotFound: If no proposal is stored for the hash
        """
        return SafeTxProposal.model_validate(self.get(proposal_key(safe_tx_hash)))

    def load_signatures(self, safe_tx_hash: Union[str, bytes]) -> Dict[str, str]:
        """Signatures collected for a hash as signer -> data, empty if none"""
        try:
            return self.get(signatures_key(safe_tx_hash))
        except StoreNotFound:
            return {}

    def add_signature(self, safe_tx_hash: Union[str, bytes], signature: SafeSignature) -> Dict[str, str]:
        """
        Record a signature for a hash.

        Signatures are keyed by signer address; a new signature from the same
        signer replaces the previous one.

        Returns:
            The updated signature collection
        """
        signer = to_checksum_address(signature.signer)

        def _add(signatures: Dict[str, str]) -> Dict[str, str]:
            signatures = dict(signatures)
            if signer in signatures and signatures[signer] != signature.data:
                logger.warning(f"Replacing existing signature of {signer}")
            signatures[signer] = signature.data
            return signatures

        result = self.update(signatures_key(safe_tx_hash), _add, default={})
        logger.info(f"Stored signature of {signer} for {_hash_hex(safe_tx_hash)}")
        return result
