"""Shared test fixtures for Stacksmith."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
import requests
from eth_keys import keys

from stacksmith.bridge.crypto_bridge import SigningKeyPair
from stacksmith.errors import RejectedTransactionError
from stacksmith.models.accounts import Account
from stacksmith.models.artifacts import ArtifactDefinition
from stacksmith.models.network import NetworkTarget

# BIP-39 reference vectors (valid checksums).
DEPLOYER_MNEMONIC = (
    "abandon abandon abandon abandon abandon abandon "
    "abandon abandon abandon abandon abandon about"
)
WALLET_MNEMONIC = (
    "legal winner thank year wave sausage worth useful "
    "legal winner thank yellow"
)
DERIVATION_PATH = "m/44'/5757'/0'/0/0"


@pytest.fixture
def deployer_mnemonic() -> str:
    return DEPLOYER_MNEMONIC


@pytest.fixture
def wallet_mnemonic() -> str:
    return WALLET_MNEMONIC


@pytest.fixture
def derivation_path() -> str:
    return DERIVATION_PATH


# ---------------------------------------------------------------------------
# Accounts and keys
# ---------------------------------------------------------------------------


@pytest.fixture
def deployer_account() -> Account:
    return Account(
        name="deployer",
        address="ST1DEPLOYER000000000000000000000000000000",
        mnemonic=DEPLOYER_MNEMONIC,
        derivation_path=DERIVATION_PATH,
        starting_balance=100_000_000,
    )


@pytest.fixture
def wallet_account() -> Account:
    return Account(
        name="wallet_1",
        address="ST1WALLET0000000000000000000000000000000",
        mnemonic=WALLET_MNEMONIC,
        derivation_path=DERIVATION_PATH,
        starting_balance=100_000_000,
    )


@pytest.fixture
def accounts(deployer_account: Account, wallet_account: Account) -> dict[str, Account]:
    return {"deployer": deployer_account, "wallet_1": wallet_account}


@pytest.fixture
def static_keypair() -> SigningKeyPair:
    """A fixed, valid secp256k1 keypair (private key 0x0101...01)."""
    secret = b"\x01" * 32
    return SigningKeyPair(
        private_key=secret,
        public_key=keys.PrivateKey(secret).public_key.to_compressed_bytes(),
    )


@pytest.fixture
def static_key_deriver(static_keypair: SigningKeyPair) -> Callable[[str, str], SigningKeyPair]:
    """Key deriver that skips PBKDF2 and always returns ``static_keypair``."""
    calls: list[tuple[str, str]] = []

    def _derive(mnemonic: str, path: str) -> SigningKeyPair:
        calls.append((mnemonic, path))
        return static_keypair

    _derive.calls = calls  # type: ignore[attr-defined]
    return _derive


@pytest.fixture
def testnet() -> NetworkTarget:
    return NetworkTarget.for_environment("testnet")


# ---------------------------------------------------------------------------
# Artifacts
# ---------------------------------------------------------------------------


@pytest.fixture
def make_artifact() -> Callable[..., ArtifactDefinition]:
    """Factory fixture: build an ArtifactDefinition with sensible defaults."""

    def _factory(name: str, *depends_on: str, **overrides: Any) -> ArtifactDefinition:
        defaults: dict[str, Any] = {
            "name": name,
            "source": f"(define-read-only (name) \"{name}\")\n",
            "depends_on": tuple(depends_on),
        }
        defaults.update(overrides)
        return ArtifactDefinition(**defaults)

    return _factory


# ---------------------------------------------------------------------------
# Network fakes
# ---------------------------------------------------------------------------


class FakeNodeClient:
    """In-memory stand-in for ``NodeClient``.

    ``nonces`` maps address -> nonce reported by the node.  ``reject_on``
    holds 1-based broadcast call numbers that answer HTTP 400.
    """

    base_url = "http://fake-node:20443"

    def __init__(
        self,
        nonces: dict[str, int] | None = None,
        *,
        reject_on: set[int] | None = None,
    ) -> None:
        self.nonces = nonces or {}
        self.reject_on = reject_on or set()
        self.nonce_queries: list[str] = []
        self.broadcasts: list[bytes] = []

    def get_account_nonce(self, address: str) -> int:
        self.nonce_queries.append(address)
        return self.nonces.get(address, 0)

    def broadcast_transaction(self, raw: bytes) -> str:
        self.broadcasts.append(raw)
        if len(self.broadcasts) in self.reject_on:
            raise RejectedTransactionError(400, '{"error":"transaction rejected"}')
        return f"0x{len(self.broadcasts):064x}"


@pytest.fixture
def fake_client_factory() -> Callable[..., FakeNodeClient]:
    return FakeNodeClient


def make_response(status_code: int, body: Any) -> requests.Response:
    """Build a real ``requests.Response`` with a JSON (or raw text) body."""
    response = requests.Response()
    response.status_code = status_code
    text = body if isinstance(body, str) else json.dumps(body)
    response._content = text.encode("utf-8")
    response.encoding = "utf-8"
    return response


class FakeSession:
    """Records requests and answers from a queue of responses or exceptions."""

    def __init__(self, *replies: requests.Response | Exception) -> None:
        self.replies = list(replies)
        self.requests: list[dict[str, Any]] = []

    def request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        self.requests.append({"method": method, "url": url, **kwargs})
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def response_factory() -> Callable[[int, Any], requests.Response]:
    return make_response


@pytest.fixture
def session_factory() -> Callable[..., FakeSession]:
    return FakeSession


# ---------------------------------------------------------------------------
# Project directories
# ---------------------------------------------------------------------------


@pytest.fixture
def write_project(tmp_path: Path) -> Callable[..., Path]:
    """Factory fixture: lay out Clarinet.toml, contracts and a settings file."""

    def _factory(
        contracts: dict[str, list[str]],
        *,
        environment: str = "mocknet",
        extra_manifest: str = "",
        extra_settings: str = "",
    ) -> Path:
        (tmp_path / "contracts").mkdir(exist_ok=True)
        (tmp_path / "settings").mkdir(exist_ok=True)

        lines = ['[project]', 'name = "demo"', ""]
        for name, deps in contracts.items():
            (tmp_path / "contracts" / f"{name}.clar").write_text(
                f"(define-data-var owner principal tx-sender) ;; {name}\n"
            )
            dep_list = ", ".join(f'"{d}"' for d in deps)
            lines += [
                f"[contracts.{name}]",
                f'path = "contracts/{name}.clar"',
                f"depends_on = [{dep_list}]",
                "",
            ]
        (tmp_path / "Clarinet.toml").write_text("\n".join(lines) + extra_manifest)

        settings = "\n".join([
            "[accounts.deployer]",
            f'mnemonic = "{DEPLOYER_MNEMONIC}"',
            'address = "ST1DEPLOYER000000000000000000000000000000"',
            f'derivation = "{DERIVATION_PATH}"',
            "balance = 100000000",
            "",
            "[accounts.wallet_1]",
            f'mnemonic = "{WALLET_MNEMONIC}"',
            'address = "ST1WALLET0000000000000000000000000000000"',
            f'derivation = "{DERIVATION_PATH}"',
            "balance = 100000000",
            "",
        ])
        settings_file = tmp_path / "settings" / f"{environment.capitalize()}.toml"
        settings_file.write_text(settings + extra_settings)
        return tmp_path

    return _factory
