"""Tests for the frozen Pydantic models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from stacksmith.models import (
    Account,
    ArtifactDefinition,
    DeploymentFailure,
    DeploymentReport,
    DeploymentResult,
    SpendingCondition,
    is_valid_contract_name,
)
from stacksmith.models.transactions import EMPTY_SIGNATURE


class TestContractNames:
    @pytest.mark.parametrize("name", ["a", "token", "sip-010-trait", "my_contract", "A1"])
    def test_valid(self, name):
        assert is_valid_contract_name(name)

    @pytest.mark.parametrize("name", ["", "1token", "-dash", "has space", "dot.name", "x" * 41])
    def test_invalid(self, name):
        assert not is_valid_contract_name(name)

    def test_artifact_rejects_invalid_name(self):
        with pytest.raises(ValidationError):
            ArtifactDefinition(name="1token", source="(ok u1)")


class TestArtifactDefinition:
    def test_frozen(self, make_artifact):
        artifact = make_artifact("a")
        with pytest.raises(ValidationError):
            artifact.name = "b"

    def test_dependency_order_kept(self, make_artifact):
        assert make_artifact("x", "c", "a", "c", "b").depends_on == ("c", "a", "b")


class TestAccount:
    def test_settings_aliases(self):
        account = Account(
            name="deployer", address="ST0", mnemonic="x", derivation="m/0", balance=5
        )
        assert account.derivation_path == "m/0"
        assert account.starting_balance == 5

    def test_mnemonic_hidden_from_repr(self, deployer_account, deployer_mnemonic):
        assert deployer_mnemonic not in repr(deployer_account)


class TestSpendingCondition:
    def test_cleared(self):
        condition = SpendingCondition(
            signer=bytes(20), nonce=4, fee=300, signature=b"\x01" * 65
        )
        cleared = condition.cleared()
        assert (cleared.nonce, cleared.fee, cleared.signature) == (0, 0, EMPTY_SIGNATURE)
        assert cleared.signer == condition.signer
        assert condition.nonce == 4

    def test_signer_length_enforced(self):
        with pytest.raises(ValidationError):
            SpendingCondition(signer=bytes(19), nonce=0, fee=0)


class TestDeploymentReport:
    def test_succeeded(self):
        result = DeploymentResult(
            name="a", transaction_id="0x1", sequence_used=0, deployer="deployer", fee=200
        )
        report = DeploymentReport(network="testnet", results=[result])
        assert report.succeeded
        assert report.deployed_names == ["a"]

    def test_failed(self):
        report = DeploymentReport(
            network="testnet",
            failure=DeploymentFailure(name="a", error_type="NetworkError", message="down"),
        )
        assert not report.succeeded
        assert report.deployed_names == []
