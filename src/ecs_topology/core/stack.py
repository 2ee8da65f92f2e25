"""In-progress topology owned by a single synthesis run."""

import logging
from collections.abc import Iterable
from typing import Any

from ecs_topology.core.errors import TopologyConstructionError
from ecs_topology.core.models import (
    Backend,
    ListenerMode,
    OutputValue,
    ResourceNode,
    ResourceType,
    Topology,
    iter_refs,
)
from ecs_topology.core.tagging import TaggingPolicy

logger = logging.getLogger(__name__)


class Stack:
    """Collects resource nodes in declaration order.

    A node may only reference nodes declared before it, so the graph stays
    acyclic while it is being built.
    """

    def __init__(self, tagging: TaggingPolicy) -> None:
        self.tagging = tagging
        self._nodes: list[ResourceNode] = []
        self._ids: set[str] = set()
        self._outputs: dict[str, OutputValue] = {}
        self._finalized = False

    @property
    def nodes(self) -> tuple[ResourceNode, ...]:
        """Return the declared nodes in declaration order."""
        return tuple(self._nodes)

    def add(
        self,
        resource_type: ResourceType,
        logical_id: str,
        attributes: dict[str, Any],
        *,
        name: str | None = None,
        depends_on: Iterable[ResourceNode] = (),
    ) -> ResourceNode:
        """Declare a resource node.

        Taggable types receive the common tags, plus `Name` when given.

        Args:
            resource_type: Resource type of the node.
            logical_id: Stable id, unique within the stack.
            attributes: Attribute map. `Ref` values become dependency edges.
            name: Value of the `Name` tag.
            depends_on: Nodes this node must wait for beyond its references.

        Returns:
            The declared node.

        Raises:
            TopologyConstructionError: On a duplicate id, a reference to an
                undeclared node, or a `Name` on a non-taggable type.
        """
        self._check_open()
        if logical_id in self._ids:
            raise TopologyConstructionError(f"Duplicate logical id: {logical_id}")

        tags = None
        if resource_type.taggable:
            tags = self.tagging.named(name) if name else self.tagging.common_tags()
        elif name:
            raise TopologyConstructionError(
                f"{logical_id}: {resource_type.value} cannot carry a Name tag"
            )

        node = ResourceNode(
            type=resource_type,
            logical_id=logical_id,
            attributes=attributes,
            tags=tags,
            depends_on=tuple(dep.logical_id for dep in depends_on),
        )
        self._check_declared(logical_id, node.dependencies)

        self._nodes.append(node)
        self._ids.add(logical_id)
        logger.debug(f"Declared {resource_type.value} {logical_id}")
        return node

    def output(self, name: str, value: OutputValue) -> None:
        """Register a named output."""
        self._check_open()
        if name in self._outputs:
            raise TopologyConstructionError(f"Duplicate output: {name}")
        self._check_declared(f"output {name}", [ref.node_id for ref in iter_refs(value)])
        self._outputs[name] = value

    def finalize(self, listener_mode: ListenerMode, backend: Backend) -> Topology:
        """Freeze the stack into a Topology after checking the graph is acyclic."""
        self._check_open()
        topology = Topology(
            region=backend.region,
            backend=backend,
            listener_mode=listener_mode,
            nodes=tuple(self._nodes),
            outputs=dict(self._outputs),
        )
        topology.topological_order()
        self._finalized = True
        logger.debug(f"Finalized topology with {len(self._nodes)} nodes")
        return topology

    def _check_declared(self, owner: str, node_ids: Iterable[str]) -> None:
        unknown = sorted({node_id for node_id in node_ids if node_id not in self._ids})
        if unknown:
            raise TopologyConstructionError(
                f"{owner} references undeclared nodes: {', '.join(unknown)}"
            )

    def _check_open(self) -> None:
        if self._finalized:
            raise TopologyConstructionError("Topology is already finalized")
