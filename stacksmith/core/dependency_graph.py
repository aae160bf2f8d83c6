"""Contract dependency graph, post-order deployment sort, and cycle detection.

The graph enforces:
- Every dependency reference resolves to a contract in the same roster.
- Dependencies are always deployed before their dependents.
- A cyclic roster never yields a usable order.

Node ids are assigned in roster iteration order and are internal to the
graph; callers deal in contract names.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from stacksmith.errors import ConfigError, CycleError, UnknownDependencyError
from stacksmith.models.artifacts import ArtifactDefinition

logger = logging.getLogger(__name__)


class DependencyGraph:
    """Directed graph of contract dependencies.

    An edge ``u -> v`` means *u* depends on *v*, so *v* deploys first.
    Built with :meth:`build`; immutable afterwards.
    """

    def __init__(
        self,
        artifacts: Sequence[ArtifactDefinition],
        edges: Sequence[tuple[int, ...]],
    ) -> None:
        self._artifacts: tuple[ArtifactDefinition, ...] = tuple(artifacts)
        self._edges: tuple[tuple[int, ...], ...] = tuple(edges)
        self._ids: dict[str, int] = {a.name: i for i, a in enumerate(self._artifacts)}

    @classmethod
    def build(cls, roster: Iterable[ArtifactDefinition]) -> DependencyGraph:
        """Build a graph from a roster, validating every dependency reference.

        Raises
        ------
        ConfigError
            If two artifacts share a name.
        UnknownDependencyError
            If an artifact depends on a name absent from the roster.
        """
        artifacts = list(roster)
        ids: dict[str, int] = {}
        for index, artifact in enumerate(artifacts):
            if artifact.name in ids:
                raise ConfigError(f"Duplicate contract name {artifact.name!r}")
            ids[artifact.name] = index

        edges: list[tuple[int, ...]] = []
        for artifact in artifacts:
            targets = []
            for dep in artifact.depends_on:
                if dep not in ids:
                    raise UnknownDependencyError(artifact.name, dep)
                targets.append(ids[dep])
            edges.append(tuple(targets))

        return cls(artifacts, edges)

    # ------------------------------------------------------------------
    # Query methods
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._artifacts)

    @property
    def node_ids(self) -> range:
        return range(len(self._artifacts))

    def node_id(self, name: str) -> int:
        """Return the id assigned to contract *name*."""
        return self._ids[name]

    def name_of(self, node_id: int) -> str:
        return self._artifacts[node_id].name

    def artifact(self, node_id: int) -> ArtifactDefinition:
        return self._artifacts[node_id]

    def dependencies(self, node_id: int) -> tuple[int, ...]:
        """Return the ids *node_id* depends on, in declared order."""
        return self._edges[node_id]

    def is_leaf(self, node_id: int) -> bool:
        return not self._edges[node_id]

    def names(self, node_ids: Iterable[int]) -> list[str]:
        return [self.name_of(i) for i in node_ids]


# ----------------------------------------------------------------------
# Sorting
# ----------------------------------------------------------------------


def sorted_order(graph: DependencyGraph) -> list[int]:
    """Depth-first post-order over all nodes, ids ascending.

    Each unvisited node has its dependencies visited first, in declared
    order, and is emitted afterwards.  A single visited set spans the
    whole pass, so every node is emitted exactly once in O(V + E).

    Cycles are not reported here: the visited set only stops the walk
    from looping.  Use :func:`detect_cycles` on the result.
    """
    visited: set[int] = set()
    order: list[int] = []

    for root in graph.node_ids:
        if root in visited:
            continue
        visited.add(root)
        # explicit stack of (node, index of next dependency to visit)
        stack: list[tuple[int, int]] = [(root, 0)]
        while stack:
            node, cursor = stack[-1]
            deps = graph.dependencies(node)
            if cursor < len(deps):
                stack[-1] = (node, cursor + 1)
                dep = deps[cursor]
                if dep not in visited:
                    visited.add(dep)
                    stack.append((dep, 0))
            else:
                stack.pop()
                order.append(node)

    return order


def detect_cycles(
    graph: DependencyGraph, order: Sequence[int]
) -> frozenset[int] | None:
    """Return the ids involved in or downstream of a cycle, or ``None``.

    Fixed-point taint propagation: a node becomes tainted once every one
    of its dependencies is a leaf or already tainted.  Passes repeat over
    *order* until nothing changes.  Nodes that never become tainted either
    sit on a cycle or (transitively) depend on one.
    """
    tainted: set[int] = set()
    changed = True
    while changed:
        changed = False
        for node in order:
            if node in tainted:
                continue
            if all(graph.is_leaf(dep) or dep in tainted for dep in graph.dependencies(node)):
                tainted.add(node)
                changed = True

    if len(tainted) == len(order):
        return None
    return frozenset(order) - tainted


def resolve_deployment_order(
    roster: Iterable[ArtifactDefinition],
) -> list[ArtifactDefinition]:
    """Build, sort and cycle-check *roster* in one step.

    Returns the artifacts in deployment order.

    Raises
    ------
    UnknownDependencyError
        If a dependency reference does not resolve.
    CycleError
        If the graph is cyclic; carries the implicated names, sorted.
    """
    graph = DependencyGraph.build(roster)
    order = sorted_order(graph)

    cyclic = detect_cycles(graph, order)
    if cyclic is not None:
        names = sorted(graph.names(cyclic))
        logger.error("Dependency cycle detected: %s", ", ".join(names))
        raise CycleError(names)

    logger.info(
        "Resolved deployment order for %d contracts: %s",
        len(order),
        ", ".join(graph.names(order)),
    )
    return [graph.artifact(i) for i in order]
