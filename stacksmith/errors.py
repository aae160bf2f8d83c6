"""Error taxonomy for project loading, ordering, signing and broadcasting.

Every error raised by Stacksmith derives from ``DeploymentError``.  The
orchestrator treats any of them as fatal for the remainder of a run, and
the CLI maps them to a non-zero exit.

Pre-flight errors (``ConfigError``, ``CycleError``) are raised before any
network request is made.
"""

from __future__ import annotations


class DeploymentError(Exception):
    """Base class for all Stacksmith errors."""


# ---------------------------------------------------------------------------
# Pre-flight
# ---------------------------------------------------------------------------


class ConfigError(DeploymentError, ValueError):
    """Raised when the artifact or account roster is malformed."""


class UnknownDependencyError(ConfigError):
    """Raised when an artifact depends on a name absent from the roster."""

    def __init__(self, dependent: str, missing: str) -> None:
        self.dependent = dependent
        self.missing = missing
        super().__init__(
            f"Contract {dependent!r} depends on unknown contract {missing!r}"
        )


class CycleError(DeploymentError, ValueError):
    """Raised when the dependency graph contains a cycle.

    ``names`` lists the contracts involved in, or downstream of, the
    cycle, sorted for reproducible diagnostics.
    """

    def __init__(self, names: list[str]) -> None:
        self.names = sorted(names)
        super().__init__(f"Cycling dependencies: {', '.join(self.names)}")


# ---------------------------------------------------------------------------
# Signing
# ---------------------------------------------------------------------------


class CryptoError(DeploymentError):
    """Raised when a signing key cannot be derived or used."""


class InvalidMnemonicError(CryptoError):
    """Raised for a mnemonic that is not a valid BIP-39 phrase."""


class InvalidDerivationPathError(CryptoError):
    """Raised for a malformed BIP-32 derivation path."""


class PayloadEncodingError(DeploymentError, ValueError):
    """Raised when a contract name or body cannot be encoded on-chain."""


class MissingDeployerError(DeploymentError):
    """Raised when no signer account can be resolved for a contract."""

    def __init__(self, contract: str, account: str) -> None:
        self.contract = contract
        self.account = account
        super().__init__(
            f"No account {account!r} available to deploy contract {contract!r}"
        )


# ---------------------------------------------------------------------------
# Network
# ---------------------------------------------------------------------------


class NetworkError(DeploymentError):
    """Raised on transport-level failures (connection refused, timeout)."""


class ProtocolError(DeploymentError):
    """Raised when the node answers with an error or an unparseable body."""


class RejectedTransactionError(ProtocolError):
    """Raised when the node refuses a broadcast transaction.

    The full response body is kept for diagnostics.
    """

    def __init__(self, status_code: int, body: str) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"Transaction rejected (HTTP {status_code}): {body}")
