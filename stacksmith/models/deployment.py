"""Per-run deployment outcome models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from stacksmith.models.accounts import Account
from stacksmith.models.artifacts import ArtifactDefinition


class DeploymentResult(BaseModel):
    """One successfully broadcast contract."""

    model_config = ConfigDict(frozen=True)

    name: str
    transaction_id: str
    sequence_used: int  # the nonce the transaction was signed with
    deployer: str
    fee: int


class DeploymentFailure(BaseModel):
    """The error that halted a run, and the contract it halted on."""

    model_config = ConfigDict(frozen=True)

    name: str
    error_type: str
    message: str


class DeploymentReport(BaseModel):
    """Ordered results of a run, plus the terminal failure if any."""

    model_config = ConfigDict(frozen=True)

    network: str
    results: list[DeploymentResult] = Field(default_factory=list)
    failure: DeploymentFailure | None = None

    @property
    def succeeded(self) -> bool:
        return self.failure is None

    @property
    def deployed_names(self) -> list[str]:
        return [r.name for r in self.results]


class DeploymentProject(BaseModel):
    """Everything loaded from a project directory for one environment."""

    model_config = ConfigDict(frozen=True)

    name: str
    environment: str
    artifacts: list[ArtifactDefinition]
    accounts: dict[str, Account]
    node_url: str | None = None  # from the settings file, if declared
