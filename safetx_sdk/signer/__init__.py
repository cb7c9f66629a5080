"""
Signer interfaces for the Safe transaction SDK.
"""
from typing import Any, Protocol

from eth_account.messages import SignableMessage


class Signer(Protocol):
    """
    Protocol for signers able to produce personal-message signatures.

    eth_account's LocalAccount satisfies this protocol directly.
    """
    address: str

    def sign_message(self, signable_message: SignableMessage) -> Any:
        """Sign an EIP-191 message and return an object with a `signature` attribute"""
        ...


from .local import LocalSigner  # noqa: E402

__all__ = ["Signer", "LocalSigner"]
