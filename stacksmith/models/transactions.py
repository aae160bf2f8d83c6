"""Smart-contract deployment transaction models (Pydantic v2, frozen).

A transaction is built unsigned, serialized, signed, and then replaced by
a copy carrying the signature.  Nothing is mutated in place.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from stacksmith.models.network import TransactionVersion

RECOVERABLE_SIGNATURE_LENGTH = 65
EMPTY_SIGNATURE = bytes(RECOVERABLE_SIGNATURE_LENGTH)


class AuthType(int, Enum):
    STANDARD = 0x04
    SPONSORED = 0x05


class HashMode(int, Enum):
    P2PKH = 0x00


class PublicKeyEncoding(int, Enum):
    COMPRESSED = 0x00
    UNCOMPRESSED = 0x01


class AnchorMode(int, Enum):
    ON_CHAIN_ONLY = 0x01
    OFF_CHAIN_ONLY = 0x02
    ANY = 0x03


class PostConditionMode(int, Enum):
    ALLOW = 0x01
    DENY = 0x02


class PayloadType(int, Enum):
    TOKEN_TRANSFER = 0x00
    SMART_CONTRACT = 0x01
    CONTRACT_CALL = 0x02


class SpendingCondition(BaseModel):
    """Single-signature authorization: who pays, at which nonce, for how much."""

    model_config = ConfigDict(frozen=True)

    hash_mode: HashMode = HashMode.P2PKH
    signer: bytes = Field(min_length=20, max_length=20)  # hash160 of the public key
    nonce: int = Field(ge=0)
    fee: int = Field(ge=0)
    key_encoding: PublicKeyEncoding = PublicKeyEncoding.COMPRESSED
    signature: bytes = Field(
        default=EMPTY_SIGNATURE,
        min_length=RECOVERABLE_SIGNATURE_LENGTH,
        max_length=RECOVERABLE_SIGNATURE_LENGTH,
    )

    def cleared(self) -> SpendingCondition:
        """Return the sighash form: nonce, fee and signature zeroed."""
        return self.model_copy(
            update={"nonce": 0, "fee": 0, "signature": EMPTY_SIGNATURE}
        )


class SmartContractPayload(BaseModel):
    """Deploy-code payload: contract name and full source text."""

    model_config = ConfigDict(frozen=True)

    name: str
    code_body: str


class DeploymentTransaction(BaseModel):
    """An unsigned or signed smart-contract deployment."""

    model_config = ConfigDict(frozen=True)

    version: TransactionVersion
    chain_id: int
    auth_type: AuthType = AuthType.STANDARD
    spending_condition: SpendingCondition
    anchor_mode: AnchorMode = AnchorMode.ANY
    post_condition_mode: PostConditionMode = PostConditionMode.DENY
    post_conditions: tuple[bytes, ...] = ()
    payload: SmartContractPayload

    @property
    def is_signed(self) -> bool:
        return self.spending_condition.signature != EMPTY_SIGNATURE

    def with_spending_condition(
        self, condition: SpendingCondition
    ) -> DeploymentTransaction:
        return self.model_copy(update={"spending_condition": condition})


class SignedTransaction(BaseModel):
    """A signed transaction ready for broadcast."""

    model_config = ConfigDict(frozen=True)

    transaction: DeploymentTransaction
    raw: bytes
    txid: str  # hex SHA-512/256 of ``raw``

    @property
    def fee(self) -> int:
        return self.transaction.spending_condition.fee
