"""
Owner signatures over Safe transaction hashes.

Owners sign the Safe transaction hash as a personal message (eth_sign).
The Safe tells this apart from a plain ECDSA signature over the hash by a
v value raised by 4, so 27/28 become 31/32.
"""
import logging
from typing import Union

from eth_account import Account
from eth_account.messages import encode_defunct

from .models import SafeSignature, SignatureParts
from .signer import Signer
from .utils import hash_to_bytes, hex_to_bytes, to_checksum_address, to_hex

logger = logging.getLogger(__name__)

ETH_SIGN_V_OFFSET = 4
SIGNATURE_LENGTH = 65


def adjust_v(signature: bytes) -> bytes:
    """Map a trailing v of 27/28 to 31/32, leave any other value unchanged"""
    signature = bytes(signature)
    if not signature:
        return signature
    v = signature[-1]
    if v in (27, 28):
        return signature[:-1] + bytes([v + ETH_SIGN_V_OFFSET])
    return signature


def sign_hash(signer: Signer, safe_tx_hash: Union[str, bytes]) -> SafeSignature:
    """
    Sign a Safe transaction hash as a personal message.

    Args:
        signer: Signer with an address and sign_message
        safe_tx_hash: 32-byte hash, hex or bytes

    Returns:
        Signature with v adjusted for eth_sign verification
    """
    message = encode_defunct(primitive=hash_to_bytes(safe_tx_hash))
    signed = signer.sign_message(message)
    data = adjust_v(bytes(signed.signature))
    logger.debug(f"Signed {to_hex(hash_to_bytes(safe_tx_hash))} with {signer.address}")
    return SafeSignature(signer=to_checksum_address(signer.address), data=to_hex(data))


def split_signature(signature: SafeSignature) -> SignatureParts:
    """Split a signature into r, s (hex, no prefix) and v"""
    raw = hex_to_bytes(signature.data)
    if len(raw) != SIGNATURE_LENGTH:
        raise ValueError(f"Expected a {SIGNATURE_LENGTH} byte signature, got {len(raw)} bytes")
    return SignatureParts(signature=signature, r=raw[:32].hex(), s=raw[32:64].hex(), v=raw[64])


def recover_signer(safe_tx_hash: Union[str, bytes], signature: Union[str, bytes]) -> str:
    """
    Recover the owner address from an adjusted eth_sign signature.

    Returns:
        Checksummed address of the signer
    """
    raw = hex_to_bytes(signature)
    if len(raw) != SIGNATURE_LENGTH:
        raise ValueError(f"Expected a {SIGNATURE_LENGTH} byte signature, got {len(raw)} bytes")
    v = raw[-1]
    if v in (27 + ETH_SIGN_V_OFFSET, 28 + ETH_SIGN_V_OFFSET):
        raw = raw[:-1] + bytes([v - ETH_SIGN_V_OFFSET])
    message = encode_defunct(primitive=hash_to_bytes(safe_tx_hash))
    return Account.recover_message(message, signature=raw)
