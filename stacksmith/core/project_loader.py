"""Loads a contract project and its chain settings from disk.

Layout::

    <project_root>/
        Clarinet.toml             # [project] name, [contracts.<name>] path/depends_on
        contracts/*.clar          # contract sources, paths relative to the root
        settings/Mocknet.toml     # [accounts.<name>] mnemonic/address/derivation/balance
        settings/Testnet.toml
        settings/Mainnet.toml
        settings/Development.toml

Contracts are returned ordered by name; the dependency graph assigns its
node ids in that order.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import toml
from pydantic import ValidationError

from stacksmith.errors import ConfigError
from stacksmith.models.accounts import Account
from stacksmith.models.artifacts import ArtifactDefinition
from stacksmith.models.deployment import DeploymentProject

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "Clarinet.toml"
SETTINGS_DIRNAME = "settings"


def settings_path(project_root: Path, environment: str) -> Path:
    """Return ``settings/<Environment>.toml`` for *environment*."""
    return project_root / SETTINGS_DIRNAME / f"{environment.capitalize()}.toml"


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        return toml.load(str(path))
    except FileNotFoundError as exc:
        raise ConfigError(f"Missing configuration file: {path}") from exc
    except toml.TomlDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc


def _table(value: Any, where: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"{where} must be a table")
    return value


# ---------------------------------------------------------------------------
# Manifest
# ---------------------------------------------------------------------------


def load_manifest(project_root: Path) -> tuple[str, list[ArtifactDefinition]]:
    """Read ``Clarinet.toml`` and every contract source it references.

    Returns ``(project_name, artifacts)`` with artifacts ordered by name.

    Raises
    ------
    ConfigError
        On a missing or malformed manifest, a contract without ``path``,
        an unreadable source file, or an invalid contract entry.
    """
    manifest_path = project_root / MANIFEST_FILENAME
    data = _read_toml(manifest_path)

    project = _table(data.get("project"), "[project]")
    project_name = project.get("name")
    if not isinstance(project_name, str) or not project_name:
        raise ConfigError(f"{manifest_path}: [project] name is required")

    contracts = _table(data.get("contracts"), "[contracts]")
    artifacts: list[ArtifactDefinition] = []
    for name in sorted(contracts):
        settings = _table(contracts[name], f"[contracts.{name}]")
        artifacts.append(_load_contract(project_root, name, settings))

    logger.info("Loaded %d contracts from %s", len(artifacts), manifest_path)
    return project_name, artifacts


def _load_contract(
    project_root: Path, name: str, settings: dict[str, Any]
) -> ArtifactDefinition:
    rel_path = settings.get("path")
    if not isinstance(rel_path, str) or not rel_path:
        raise ConfigError(f"[contracts.{name}] path is required")

    depends_on = settings.get("depends_on", [])
    if not isinstance(depends_on, list) or not all(isinstance(d, str) for d in depends_on):
        raise ConfigError(f"[contracts.{name}] depends_on must be a list of names")

    source_path = project_root / rel_path
    try:
        source = source_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Unable to read {source_path}: {exc}") from exc

    try:
        return ArtifactDefinition(
            name=name,
            source=source,
            depends_on=tuple(depends_on),
            deployer=settings.get("deployer"),
            path=source_path,
        )
    except ValidationError as exc:
        raise ConfigError(f"[contracts.{name}] is invalid: {exc}") from exc


# ---------------------------------------------------------------------------
# Chain settings
# ---------------------------------------------------------------------------


def load_accounts(
    project_root: Path, environment: str
) -> tuple[dict[str, Account], str | None]:
    """Read the accounts (and optional node address) for *environment*.

    Returns ``(accounts_by_name, node_rpc_address_or_None)``.
    """
    path = settings_path(project_root, environment)
    data = _read_toml(path)

    accounts: dict[str, Account] = {}
    for name, settings in _table(data.get("accounts"), "[accounts]").items():
        entry = _table(settings, f"[accounts.{name}]")
        try:
            accounts[name] = Account(name=name, **entry)
        except (ValidationError, TypeError) as exc:
            raise ConfigError(f"{path}: [accounts.{name}] is invalid: {exc}") from exc

    network = _table(data.get("network"), "[network]")
    node_url = network.get("node_rpc_address")
    if node_url is not None and not isinstance(node_url, str):
        raise ConfigError(f"{path}: [network] node_rpc_address must be a string")

    logger.info("Loaded %d accounts from %s", len(accounts), path)
    return accounts, node_url


def load_project(project_root: Path, environment: str) -> DeploymentProject:
    """Load the manifest and the *environment* settings into one project."""
    name, artifacts = load_manifest(project_root)
    accounts, node_url = load_accounts(project_root, environment)
    return DeploymentProject(
        name=name,
        environment=environment,
        artifacts=artifacts,
        accounts=accounts,
        node_url=node_url,
    )
