"""Deployment orchestrator: the sequential driver for a deployment run.

The Orchestrator takes contracts already in dependency order and, for each
one in turn: resolves its signer, resolves the signer's nonce, derives the
signing key, builds and signs the transaction, and broadcasts it.

The run stops at the first error.  Contracts later in the order may rely
on the failed one existing on-chain, so nothing is skipped or retried, and
contracts deployed before the failure stay deployed.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping, Sequence

from stacksmith.bridge.crypto_bridge import SigningKeyPair, derive_keypair
from stacksmith.bridge.node_client import NodeClient
from stacksmith.core.nonce_tracker import NonceTracker
from stacksmith.core.transaction_builder import TransactionBuilder
from stacksmith.errors import DeploymentError, MissingDeployerError
from stacksmith.models.accounts import Account
from stacksmith.models.artifacts import ArtifactDefinition
from stacksmith.models.deployment import (
    DeploymentFailure,
    DeploymentReport,
    DeploymentResult,
)
from stacksmith.models.network import NetworkTarget

logger = logging.getLogger(__name__)

DEFAULT_DEPLOYER = "deployer"

KeyDeriver = Callable[[str, str], SigningKeyPair]


class Orchestrator:
    """Sequential deployment pipeline.

    Parameters
    ----------
    accounts:
        Account roster keyed by account name.
    client:
        Node client used for nonce lookups and broadcasts.
    network:
        Target network; determines version byte and chain id.
    builder:
        Transaction builder.  One is created for *network* if not provided.
    deployer_account:
        Account that signs contracts without an explicit ``deployer``.
    key_deriver:
        ``(mnemonic, derivation_path) -> SigningKeyPair``.
    """

    def __init__(
        self,
        accounts: Mapping[str, Account],
        client: NodeClient,
        network: NetworkTarget,
        *,
        builder: TransactionBuilder | None = None,
        deployer_account: str = DEFAULT_DEPLOYER,
        key_deriver: KeyDeriver = derive_keypair,
    ) -> None:
        self.accounts = dict(accounts)
        self.client = client
        self.network = network
        self.builder = builder or TransactionBuilder(network)
        self.deployer_account = deployer_account
        self._derive = key_deriver

    # ------------------------------------------------------------------
    # Per-artifact steps
    # ------------------------------------------------------------------

    def resolve_signer(self, artifact: ArtifactDefinition) -> Account:
        """Return the explicit deployer for *artifact*, else the default one."""
        name = artifact.deployer or self.deployer_account
        account = self.accounts.get(name)
        if account is None:
            raise MissingDeployerError(artifact.name, name)
        return account

    def deploy_artifact(
        self, artifact: ArtifactDefinition, nonces: NonceTracker
    ) -> DeploymentResult:
        """Deploy a single artifact, advancing *nonces* only on success."""
        signer = self.resolve_signer(artifact)
        nonce = nonces.resolve(signer, self.client.get_account_nonce)
        keypair = self._derive(signer.mnemonic, signer.derivation_path)
        signed = self.builder.build_and_sign(artifact, keypair, nonce)

        transaction_id = self.client.broadcast_transaction(signed.raw)
        nonces.advance(signer.name)

        logger.info(
            "Deployed %s (txid: %s, nonce: %d, deployer: %s)",
            artifact.name,
            transaction_id,
            nonce,
            signer.name,
        )
        return DeploymentResult(
            name=artifact.name,
            transaction_id=transaction_id,
            sequence_used=nonce,
            deployer=signer.name,
            fee=signed.fee,
        )

    # ------------------------------------------------------------------
    # Run lifecycle
    # ------------------------------------------------------------------

    def deploy(self, order: Sequence[ArtifactDefinition]) -> Iterator[DeploymentResult]:
        """Deploy *order* one artifact at a time, yielding each result.

        Each call starts from a fresh ``NonceTracker``.  The first error
        propagates out of the generator and no further artifact is tried.
        """
        nonces = NonceTracker()
        logger.info(
            "Deploying %d contracts to %s via %s",
            len(order),
            self.network.name,
            self.client.base_url,
        )
        for artifact in order:
            yield self.deploy_artifact(artifact, nonces)

    def run(
        self,
        order: Sequence[ArtifactDefinition],
        on_result: Callable[[DeploymentResult], None] | None = None,
    ) -> DeploymentReport:
        """Consume :meth:`deploy` and collect the outcome into a report.

        *on_result* is called with each result as soon as it is broadcast.

        The first ``DeploymentError`` ends the run and is recorded as the
        report's ``failure``; results before it are kept.
        """
        results: list[DeploymentResult] = []
        failure: DeploymentFailure | None = None

        try:
            for result in self.deploy(order):
                results.append(result)
                if on_result is not None:
                    on_result(result)
        except DeploymentError as exc:
            # deploy() stops at the first error, so it belongs to the next artifact
            failed = order[len(results)]
            logger.error("Deployment of %s failed, halting run: %s", failed.name, exc)
            failure = DeploymentFailure(
                name=failed.name,
                error_type=type(exc).__name__,
                message=str(exc),
            )

        return DeploymentReport(network=self.network.name, results=results, failure=failure)
