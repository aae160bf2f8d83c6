"""End-to-end integration tests: project on disk through to broadcast bytes.

These tests exercise the project loader, DependencyGraph, real key
derivation, TransactionBuilder, NodeClient and Orchestrator working
together.  Only the HTTP session is faked; every broadcast body is parsed
back and its signature checked against the deployer's derived key.
"""

from __future__ import annotations

import struct

import pytest

from stacksmith.bridge.crypto_bridge import derive_keypair, recover_public_key
from stacksmith.bridge.node_client import NodeClient
from stacksmith.core.codec import hash160, sha512_256
from stacksmith.core.dependency_graph import resolve_deployment_order
from stacksmith.core.orchestrator import Orchestrator
from stacksmith.core.project_loader import load_project
from stacksmith.models.network import NetworkTarget

DEPLOYER_ADDRESS = "ST1DEPLOYER000000000000000000000000000000"


def _parse(raw: bytes) -> dict:
    """Pull the fields these tests care about out of a serialized deployment."""
    name_len = raw[116]
    name = raw[117:117 + name_len].decode("ascii")
    body_start = 117 + name_len + 4
    (body_len,) = struct.unpack(">I", raw[117 + name_len:body_start])
    return {
        "version": raw[0],
        "signer": raw[7:27],
        "nonce": struct.unpack(">Q", raw[27:35])[0],
        "fee": struct.unpack(">Q", raw[35:43])[0],
        "signature": raw[44:109],
        "name": name,
        "body": raw[body_start:body_start + body_len].decode("ascii"),
    }


def _presign_hash(raw: bytes) -> bytes:
    """Recompute the pre-sign hash from signed bytes alone."""
    cleared = raw[:27] + bytes(16) + raw[43:44] + bytes(65) + raw[109:]
    return sha512_256(
        sha512_256(cleared) + raw[5:6] + raw[35:43] + raw[27:35]
    )


class TestFullDeployment:
    """Load → resolve → deploy against a node that accepts everything."""

    @pytest.fixture
    def project(self, write_project):
        root = write_project({
            "traits": [],
            "token": ["traits"],
            "market": ["token", "traits"],
            "dao": ["market"],
        })
        return load_project(root, "mocknet")

    @pytest.fixture
    def session(self, session_factory, response_factory):
        replies = [response_factory(200, {"nonce": 12, "balance": "0x0"})]
        replies += [response_factory(200, f'"0x{i:064x}"') for i in range(1, 5)]
        return session_factory(*replies)

    def test_deploys_everything_in_dependency_order(self, project, session):
        network = NetworkTarget.for_environment(project.environment)
        order = resolve_deployment_order(project.artifacts)
        client = NodeClient("http://devnet:20443", session=session)

        report = Orchestrator(project.accounts, client, network).run(order)

        assert report.succeeded
        assert report.deployed_names == ["traits", "token", "market", "dao"]
        assert [r.sequence_used for r in report.results] == [12, 13, 14, 15]
        assert [r.transaction_id for r in report.results] == [
            f"0x{i:064x}" for i in range(1, 5)
        ]

        methods = [r["method"] for r in session.requests]
        assert methods == ["GET", "POST", "POST", "POST", "POST"]
        assert session.requests[0]["url"].endswith(f"/v2/accounts/{DEPLOYER_ADDRESS}")

    def test_broadcast_bodies_are_signed_by_deployer(
        self, project, session, deployer_mnemonic, derivation_path
    ):
        network = NetworkTarget.for_environment(project.environment)
        order = resolve_deployment_order(project.artifacts)
        client = NodeClient("http://devnet:20443", session=session)
        Orchestrator(project.accounts, client, network).run(order)

        keypair = derive_keypair(deployer_mnemonic, derivation_path)
        by_name = {a.name: a for a in project.artifacts}
        bodies = [r["data"] for r in session.requests if r["method"] == "POST"]

        for expected_nonce, raw in enumerate(bodies, start=12):
            fields = _parse(raw)
            artifact = by_name[fields["name"]]
            assert fields["version"] == 0x80
            assert fields["nonce"] == expected_nonce
            assert fields["body"] == artifact.source
            assert fields["fee"] == 200 + len(artifact.source)
            assert fields["signer"] == hash160(keypair.public_key)
            recovered = recover_public_key(_presign_hash(raw), fields["signature"])
            assert recovered == keypair.public_key


class TestHaltedDeployment:
    def test_rejection_leaves_tail_unattempted(
        self, write_project, session_factory, response_factory
    ):
        root = write_project({"a": [], "b": ["a"], "c": ["b"]})
        project = load_project(root, "mocknet")
        session = session_factory(
            response_factory(200, {"nonce": 0}),
            response_factory(200, '"0xaa"'),
            response_factory(400, '{"error":"transaction rejected","reason":"FeeTooLow"}'),
        )
        client = NodeClient("http://devnet:20443", session=session)
        report = Orchestrator(
            project.accounts, client, NetworkTarget.for_environment("mocknet")
        ).run(resolve_deployment_order(project.artifacts))

        assert report.deployed_names == ["a"]
        assert report.failure.name == "b"
        assert "FeeTooLow" in report.failure.message
        # one nonce lookup, two broadcasts, nothing for c
        assert len(session.requests) == 3
