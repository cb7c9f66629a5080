"""
Local private key signer.
"""
from typing import Any

from eth_account import Account
from eth_account.messages import SignableMessage
from eth_account.signers.local import LocalAccount


class LocalSigner:
    """Signer backed by a private key held in memory"""

    def __init__(self, private_key: str):
        """
        Initialize the signer

        Args:
            private_key: Hex encoded secp256k1 private key
        """
        self._account: LocalAccount = Account.from_key(private_key)
        self.address = self._account.address

    def sign_message(self, signable_message: SignableMessage) -> Any:
        return self._account.sign_message(signable_message)

    def __repr__(self) -> str:
        return f"LocalSigner(address={self.address})"
