"""Builds and signs one smart-contract deployment transaction per artifact.

Signing follows the chain's single-signature origin scheme:

1. Serialize the transaction with its spending condition cleared
   (nonce 0, fee 0, empty signature) and hash it: the initial sighash.
2. Hash ``sighash | auth type | fee | nonce`` into the pre-sign hash.
3. Sign the pre-sign hash with a recoverable secp256k1 signature.
4. Put the signature into the spending condition and re-serialize.

The builder keeps no state between calls.
"""

from __future__ import annotations

import logging
import struct

from stacksmith.bridge.crypto_bridge import SigningKeyPair, sign_recoverable
from stacksmith.core.codec import hash160, serialize_transaction, sha512_256, txid
from stacksmith.models.artifacts import ArtifactDefinition
from stacksmith.models.network import NetworkTarget
from stacksmith.models.transactions import (
    AnchorMode,
    DeploymentTransaction,
    PostConditionMode,
    SignedTransaction,
    SmartContractPayload,
    SpendingCondition,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_FEE = 200


class TransactionBuilder:
    """Assembles, serializes and signs deployment transactions for a network.

    Parameters
    ----------
    network:
        Supplies the version byte and chain id.
    base_fee:
        Flat fee component; one more unit is added per byte of source.
    """

    def __init__(self, network: NetworkTarget, *, base_fee: int = DEFAULT_BASE_FEE) -> None:
        self.network = network
        self.base_fee = base_fee

    def compute_fee(self, source: str) -> int:
        return self.base_fee + len(source.encode("utf-8"))

    def build_unsigned(
        self, artifact: ArtifactDefinition, public_key: bytes, nonce: int
    ) -> DeploymentTransaction:
        """Return the unsigned transaction deploying *artifact*."""
        condition = SpendingCondition(
            signer=hash160(public_key),
            nonce=nonce,
            fee=self.compute_fee(artifact.source),
        )
        return DeploymentTransaction(
            version=self.network.transaction_version,
            chain_id=self.network.chain_id,
            spending_condition=condition,
            anchor_mode=AnchorMode.ANY,
            post_condition_mode=PostConditionMode.DENY,
            post_conditions=(),
            payload=SmartContractPayload(name=artifact.name, code_body=artifact.source),
        )

    def presign_hash(self, unsigned: DeploymentTransaction) -> bytes:
        """Return the hash the origin signature is computed over."""
        condition = unsigned.spending_condition
        cleared = unsigned.with_spending_condition(condition.cleared())
        sighash = sha512_256(serialize_transaction(cleared))
        return sha512_256(
            sighash
            + struct.pack(">B", unsigned.auth_type)
            + struct.pack(">QQ", condition.fee, condition.nonce)
        )

    def sign(self, unsigned: DeploymentTransaction, private_key: bytes) -> SignedTransaction:
        """Sign *unsigned* and return its final bytes and txid."""
        signature = sign_recoverable(self.presign_hash(unsigned), private_key)
        signed = unsigned.with_spending_condition(
            unsigned.spending_condition.model_copy(update={"signature": signature})
        )
        raw = serialize_transaction(signed)
        return SignedTransaction(transaction=signed, raw=raw, txid=txid(raw))

    def build_and_sign(
        self, artifact: ArtifactDefinition, keypair: SigningKeyPair, nonce: int
    ) -> SignedTransaction:
        unsigned = self.build_unsigned(artifact, keypair.public_key, nonce)
        signed = self.sign(unsigned, keypair.private_key)
        logger.debug(
            "Signed %s: nonce=%d fee=%d size=%d txid=%s",
            artifact.name,
            nonce,
            signed.fee,
            len(signed.raw),
            signed.txid,
        )
        return signed
