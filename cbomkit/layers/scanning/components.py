"""Conversion of detector finding nodes into CycloneDX components."""

import uuid
from collections.abc import Sequence
from dataclasses import dataclass, field

from cbomkit.models.cyclonedx import (
    Component,
    CryptoProperties,
    Dependency,
    Evidence,
    Occurrence,
)
from cbomkit.models.finding import CryptoFindingNode


@dataclass
class ComponentBatch:
    """Components and dependency edges derived from one batch of nodes."""

    components: list[Component] = field(default_factory=list)
    dependencies: list[Dependency] = field(default_factory=list)


class ComponentFactory:
    """Builds components from finding nodes.

    Every node becomes one component with a fresh ``bom-ref``. A node with
    children also yields a dependency edge from its component to the
    components of its children.
    """

    def create(self, nodes: Sequence[CryptoFindingNode]) -> ComponentBatch:
        """Convert a batch of nodes.

        Args:
            nodes: Nodes emitted by a detector.

        Returns:
            Components in depth-first node order and their dependency edges.
        """
        batch = ComponentBatch()
        for node in nodes:
            self._add_node(node, batch)
        return batch

    def _add_node(self, node: CryptoFindingNode, batch: ComponentBatch) -> str:
        component = self.create_component(node)
        batch.components.append(component)

        child_refs = [self._add_node(child, batch) for child in node.children]
        if child_refs:
            batch.dependencies.append(Dependency(ref=component.bom_ref, depends_on=child_refs))
        return component.bom_ref

    @staticmethod
    def create_component(node: CryptoFindingNode) -> Component:
        """Build the component for a single node, ignoring its children."""
        properties = {
            k: v for k, v in node.properties.items() if k not in ("assetType", "asset_type")
        }
        properties["assetType"] = node.asset_kind.value
        crypto_properties = CryptoProperties.model_validate(properties)
        occurrences = [
            Occurrence(location=loc.location, line=loc.line, offset=loc.offset)
            for loc in node.occurrences
        ]
        return Component(
            name=node.asset_name,
            bom_ref=str(uuid.uuid4()),
            crypto_properties=crypto_properties,
            evidence=Evidence(occurrences=occurrences),
        )
