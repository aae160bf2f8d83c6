"""Chain account models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_DERIVATION_PATH = "m/44'/5757'/0'/0/0"


class Account(BaseModel):
    """An account from the chain settings file.

    The mnemonic and derivation path produce the signing key; the address
    is what the node is queried with for the account's current nonce.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    address: str
    mnemonic: str = Field(repr=False)
    derivation_path: str = Field(
        default=DEFAULT_DERIVATION_PATH, alias="derivation"
    )
    starting_balance: int = Field(default=0, ge=0, alias="balance")
