"""Crypto bridge: HD key derivation and recoverable secp256k1 signing.

Bridge boundary
---------------
Key material comes from two libraries:

1. **eth-account** (``eth_account.hdaccount``): BIP-39 mnemonic to 512-bit
   seed, and BIP-32 derivation of a child private key along a path such
   as ``m/44'/5757'/0'/0/0``.

2. **eth-keys** (``eth_keys.keys``): secp256k1 public key computation,
   deterministic low-s recoverable signatures, and public key recovery.

Nothing here falls back to a default or placeholder key: malformed input
raises ``InvalidMnemonicError`` or ``InvalidDerivationPathError``.
"""

from __future__ import annotations

import logging

from eth_account.hdaccount import key_from_seed, seed_from_mnemonic
from eth_keys import keys
from eth_keys.exceptions import BadSignature, ValidationError as KeyValidationError
from eth_utils import ValidationError
from pydantic import BaseModel, ConfigDict, Field

from stacksmith.errors import CryptoError, InvalidDerivationPathError, InvalidMnemonicError

logger = logging.getLogger(__name__)

PRIVATE_KEY_LENGTH = 32
COMPRESSED_PUBLIC_KEY_LENGTH = 33


class SigningKeyPair(BaseModel):
    """A derived secp256k1 keypair.

    ``public_key`` is the 33-byte compressed SEC1 encoding.
    """

    model_config = ConfigDict(frozen=True)

    private_key: bytes = Field(
        repr=False, min_length=PRIVATE_KEY_LENGTH, max_length=PRIVATE_KEY_LENGTH
    )
    public_key: bytes = Field(
        min_length=COMPRESSED_PUBLIC_KEY_LENGTH,
        max_length=COMPRESSED_PUBLIC_KEY_LENGTH,
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def derive_keypair(mnemonic: str, derivation_path: str) -> SigningKeyPair:
    """Derive a signing keypair from *mnemonic* along *derivation_path*.

    The seed uses an empty BIP-39 passphrase.  Identical inputs always
    yield identical keys.

    Raises
    ------
    InvalidMnemonicError
        If the phrase has unknown words or a bad checksum.
    InvalidDerivationPathError
        If the path is not a BIP-32 path rooted at ``m``.
    """
    words = " ".join(mnemonic.split())
    if not words:
        raise InvalidMnemonicError("Mnemonic is empty")
    try:
        seed = seed_from_mnemonic(words, "")
    except (ValidationError, ValueError, KeyError) as exc:
        raise InvalidMnemonicError(f"Invalid mnemonic: {exc}") from exc

    if not derivation_path.startswith("m"):
        raise InvalidDerivationPathError(
            f"Derivation path {derivation_path!r} must start with 'm'"
        )
    try:
        secret = key_from_seed(seed, derivation_path)
    except (ValidationError, ValueError, IndexError) as exc:
        raise InvalidDerivationPathError(
            f"Invalid derivation path {derivation_path!r}: {exc}"
        ) from exc

    try:
        private = keys.PrivateKey(secret)
    except KeyValidationError as exc:
        raise CryptoError(f"Derived key is not a valid secp256k1 scalar: {exc}") from exc

    logger.debug("Derived keypair along %s", derivation_path)
    return SigningKeyPair(
        private_key=secret,
        public_key=private.public_key.to_compressed_bytes(),
    )


def sign_recoverable(message_hash: bytes, private_key: bytes) -> bytes:
    """Sign a 32-byte hash and return the 65-byte ``v | r | s`` signature.

    ``v`` is the recovery id (0 or 1); ``s`` is normalized to the low half
    of the curve order.
    """
    if len(message_hash) != 32:
        raise CryptoError(f"Expected a 32-byte hash, got {len(message_hash)} bytes")
    signature = keys.PrivateKey(private_key).sign_msg_hash(message_hash)
    return (
        bytes([signature.v])
        + signature.r.to_bytes(32, "big")
        + signature.s.to_bytes(32, "big")
    )


def recover_public_key(message_hash: bytes, signature: bytes) -> bytes:
    """Recover the compressed public key from a ``v | r | s`` signature."""
    if len(signature) != 65:
        raise CryptoError(f"Expected a 65-byte signature, got {len(signature)} bytes")
    vrs = (
        signature[0],
        int.from_bytes(signature[1:33], "big"),
        int.from_bytes(signature[33:], "big"),
    )
    try:
        public = keys.Signature(vrs=vrs).recover_public_key_from_msg_hash(message_hash)
    except (BadSignature, KeyValidationError) as exc:
        raise CryptoError(f"Unrecoverable signature: {exc}") from exc
    return public.to_compressed_bytes()
