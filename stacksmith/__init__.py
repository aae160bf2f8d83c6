"""Stacksmith: dependency-ordered Clarity contract deployment.

Resolves the contracts declared in a project manifest into a deployment
order, then deploys them one at a time to a Stacks node:
  - Post-order dependency sort with cycle detection before any network call
  - BIP-39/BIP-32 key derivation and recoverable secp256k1 signing
  - Per-account nonce tracking seeded from the node, one run at a time
  - Halt on the first failure; nothing retried, nothing rolled back
"""

__version__ = "0.1.0"
__description__ = "Dependency-ordered Clarity contract deployment for Stacks nodes"

from stacksmith.core.dependency_graph import resolve_deployment_order
from stacksmith.core.orchestrator import Orchestrator
from stacksmith.cli.app import app as cli

__all__ = ["Orchestrator", "resolve_deployment_order", "cli", "__version__"]
