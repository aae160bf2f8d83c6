"""Stacksmith data models: all Pydantic v2, all frozen (immutable)."""

from stacksmith.models.accounts import DEFAULT_DERIVATION_PATH, Account
from stacksmith.models.artifacts import ArtifactDefinition, is_valid_contract_name
from stacksmith.models.deployment import (
    DeploymentFailure,
    DeploymentProject,
    DeploymentReport,
    DeploymentResult,
)
from stacksmith.models.network import NetworkTarget, TransactionVersion
from stacksmith.models.transactions import (
    AnchorMode,
    DeploymentTransaction,
    PostConditionMode,
    SignedTransaction,
    SmartContractPayload,
    SpendingCondition,
)

__all__ = [
    # accounts
    "Account",
    "DEFAULT_DERIVATION_PATH",
    # artifacts
    "ArtifactDefinition",
    "is_valid_contract_name",
    # network
    "NetworkTarget",
    "TransactionVersion",
    # transactions
    "AnchorMode",
    "PostConditionMode",
    "SpendingCondition",
    "SmartContractPayload",
    "DeploymentTransaction",
    "SignedTransaction",
    # deployment
    "DeploymentResult",
    "DeploymentFailure",
    "DeploymentReport",
    "DeploymentProject",
]
