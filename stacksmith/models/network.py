"""Target network models: environment name to version byte and chain id."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class TransactionVersion(int, Enum):
    """First byte of every serialized transaction."""

    MAINNET = 0x00
    TESTNET = 0x80


CHAIN_ID_MAINNET = 0x00000001
CHAIN_ID_TESTNET = 0x80000000


class NetworkTarget(BaseModel):
    """A named deployment environment and its wire-level identifiers."""

    model_config = ConfigDict(frozen=True)

    name: str
    transaction_version: TransactionVersion
    chain_id: int

    @classmethod
    def for_environment(cls, environment: str) -> NetworkTarget:
        """Map an environment name (mocknet, testnet, mainnet, ...) to a target.

        Only ``mainnet`` uses mainnet identifiers; every local or test
        environment signs with the testnet version and chain id.
        """
        name = environment.lower()
        if name == "mainnet":
            return cls(
                name=name,
                transaction_version=TransactionVersion.MAINNET,
                chain_id=CHAIN_ID_MAINNET,
            )
        return cls(
            name=name,
            transaction_version=TransactionVersion.TESTNET,
            chain_id=CHAIN_ID_TESTNET,
        )
