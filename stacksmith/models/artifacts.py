"""Deployable contract definitions (immutable once loaded)."""

from __future__ import annotations

import re
from pathlib import Path

from pydantic import BaseModel, ConfigDict, field_validator

CONTRACT_NAME_MAX_LENGTH = 40
_CONTRACT_NAME_RE = re.compile(r"^[a-zA-Z]([a-zA-Z0-9]|[-_])*$")


def is_valid_contract_name(name: str) -> bool:
    """Return ``True`` if *name* is acceptable as a Clarity contract name."""
    return (
        0 < len(name) <= CONTRACT_NAME_MAX_LENGTH
        and _CONTRACT_NAME_RE.match(name) is not None
    )


class ArtifactDefinition(BaseModel):
    """A named contract with its source text and declared dependencies.

    ``depends_on`` holds contract names from the same roster that must be
    deployed first.  ``deployer`` optionally names the account that signs
    this contract; when unset the roster's ``deployer`` account is used.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    source: str
    depends_on: tuple[str, ...] = ()
    deployer: str | None = None
    path: Path | None = None  # where the source was read from

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        if not is_valid_contract_name(value):
            raise ValueError(
                f"invalid contract name {value!r}: must start with a letter, "
                f"contain only letters, digits, '-' or '_', and be at most "
                f"{CONTRACT_NAME_MAX_LENGTH} characters"
            )
        return value

    @field_validator("depends_on")
    @classmethod
    def _dedupe(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(dict.fromkeys(value))
