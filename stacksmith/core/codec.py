"""Canonical transaction encoding and the hashes built on it.

Serialization is the node's consensus byte layout for a single-signature
smart-contract deployment: fixed-width big-endian integers, a one-byte
length prefix for the contract name and a four-byte prefix for the body.
The same bytes feed the signature hash and the transaction id, so the
encoding must be deterministic.
"""

from __future__ import annotations

import hashlib
import struct

from Crypto.Hash import RIPEMD160, SHA512

from stacksmith.errors import PayloadEncodingError
from stacksmith.models.artifacts import is_valid_contract_name
from stacksmith.models.transactions import (
    DeploymentTransaction,
    PayloadType,
    SmartContractPayload,
    SpendingCondition,
)


def sha512_256(data: bytes) -> bytes:
    """SHA-512/256 digest, the chain's transaction and sighash hash."""
    return SHA512.new(data, truncate="256").digest()


def hash160(data: bytes) -> bytes:
    """RIPEMD-160(SHA-256(data)); identifies a public key in a spending condition."""
    return RIPEMD160.new(hashlib.sha256(data).digest()).digest()


def txid(raw: bytes) -> str:
    """Hex transaction id of serialized transaction bytes."""
    return sha512_256(raw).hex()


# ---------------------------------------------------------------------------
# Field encoders
# ---------------------------------------------------------------------------


_CLARITY_WHITESPACE = frozenset(" \t\n\r\x0c")


def _is_clarity_string(text: str) -> bool:
    # printable ASCII (0x20-0x7e) plus the whitespace the chain accepts
    return all(" " <= ch <= "~" or ch in _CLARITY_WHITESPACE for ch in text)


def encode_contract_name(name: str) -> bytes:
    if not is_valid_contract_name(name):
        raise PayloadEncodingError(f"Invalid contract name {name!r}")
    raw = name.encode("ascii")
    return struct.pack(">B", len(raw)) + raw


def encode_code_body(code: str) -> bytes:
    if not _is_clarity_string(code):
        raise PayloadEncodingError(
            "Contract body must contain only printable ASCII or whitespace"
        )
    raw = code.encode("ascii")
    return struct.pack(">I", len(raw)) + raw


def encode_spending_condition(condition: SpendingCondition) -> bytes:
    return b"".join([
        struct.pack(">B", condition.hash_mode),
        condition.signer,
        struct.pack(">QQ", condition.nonce, condition.fee),
        struct.pack(">B", condition.key_encoding),
        condition.signature,
    ])


def encode_payload(payload: SmartContractPayload) -> bytes:
    return (
        struct.pack(">B", PayloadType.SMART_CONTRACT)
        + encode_contract_name(payload.name)
        + encode_code_body(payload.code_body)
    )


def serialize_transaction(tx: DeploymentTransaction) -> bytes:
    """Serialize *tx* to its canonical byte form."""
    parts = [
        struct.pack(">BI", tx.version, tx.chain_id),
        struct.pack(">B", tx.auth_type),
        encode_spending_condition(tx.spending_condition),
        struct.pack(">BB", tx.anchor_mode, tx.post_condition_mode),
        struct.pack(">I", len(tx.post_conditions)),
        *tx.post_conditions,
        encode_payload(tx.payload),
    ]
    return b"".join(parts)
