"""Accumulation of detector findings into a single CBOM."""

import os
import threading
from collections.abc import Sequence
from pathlib import Path

from cbomkit.core.logger.logger import get_logger
from cbomkit.layers.scanning.cbom import CBOMDocument
from cbomkit.layers.scanning.components import ComponentFactory
from cbomkit.layers.scanning.detector import EngineState, NoOpEngineState
from cbomkit.models.cyclonedx import Component
from cbomkit.models.finding import CryptoFindingNode
from cbomkit.models.progress import ProgressDispatcher, ProgressMessage, ProgressMessageType

logger = get_logger(__name__)

FindingKey = tuple[str, str, int | None, int | None]


def sanitize_occurrences(base_directory: Path, component: Component) -> None:
    """Rewrite a component's occurrence locations relative to a directory.

    Locations outside the directory are left untouched.

    Args:
        base_directory: Scan root.
        component: Component whose occurrences are rewritten in place.
    """
    occurrences = component.occurrences
    if not occurrences:
        return

    prefix = os.path.realpath(base_directory) + os.sep
    for occurrence in occurrences:
        if occurrence.location.startswith(prefix):
            occurrence.location = occurrence.location[len(prefix):]


class FindingAggregator:
    """Merges finding batches from detector runs into one document.

    Every batch is stored as received, duplicates included, so the final
    document keeps what each module scan saw. When a progress sink is
    attached, each batch is also reported live, but an occurrence is only
    reported the first time this aggregator sees its finding key.

    ``accept`` and ``finalize`` share one lock and are safe to call from
    several threads.
    """

    def __init__(
        self,
        project_directory: Path,
        progress_dispatcher: ProgressDispatcher | None = None,
        engine: EngineState | None = None,
        component_factory: ComponentFactory | None = None,
    ) -> None:
        """Initialize the aggregator.

        Args:
            project_directory: Scan root; stored locations become relative to it.
            progress_dispatcher: Optional sink for live detection events.
            engine: Detection engine state reset on finalize.
            component_factory: Converter from nodes to components.
        """
        self.project_directory = Path(project_directory)
        self.progress_dispatcher = progress_dispatcher
        self.engine: EngineState = engine or NoOpEngineState()
        self.component_factory = component_factory or ComponentFactory()
        self._document = CBOMDocument()
        self._seen: set[FindingKey] = set()
        self._lock = threading.RLock()

    def accept(self, nodes: Sequence[CryptoFindingNode]) -> None:
        """Store a batch of nodes and report its new findings live.

        Args:
            nodes: Nodes emitted by one detector invocation.

        Raises:
            ClientDisconnectedError: If the progress sink disconnects.
        """
        with self._lock:
            batch = self.component_factory.create(nodes)
            live_components = [c.model_copy(deep=True) for c in batch.components]

            self._document.bom.components.extend(batch.components)
            self._document.bom.dependencies.extend(batch.dependencies)

            if self.progress_dispatcher is None:
                return

            for component in live_components:
                deduplicated = self.deduplicate_findings(component)
                if deduplicated is None:
                    continue
                sanitize_occurrences(self.project_directory, deduplicated)
                self.progress_dispatcher.send(
                    ProgressMessage(
                        type=ProgressMessageType.DETECTION,
                        message=deduplicated.model_dump_json(by_alias=True, exclude_none=True),
                    )
                )

    def deduplicate_findings(self, component: Component) -> Component | None:
        """Drop occurrences already seen by this aggregator.

        The component's evidence is replaced by the unseen occurrences and
        their keys are recorded.

        Args:
            component: Component to filter in place.

        Returns:
            The component, or None if none of its occurrences is new.
        """
        if component.evidence is None:
            return None

        with self._lock:
            unseen = []
            for occurrence in component.evidence.occurrences:
                key = (component.name, occurrence.location, occurrence.line, occurrence.offset)
                if key not in self._seen:
                    self._seen.add(key)
                    unseen.append(occurrence)

        if not unseen:
            return None
        component.evidence.occurrences = unseen
        return component

    def finalize(self) -> CBOMDocument:
        """Sanitize stored locations, reset the engine and return the document."""
        with self._lock:
            for component in self._document.bom.components:
                sanitize_occurrences(self.project_directory, component)
            self.engine.reset()

            logger.debug(
                f"Finalized CBOM with {len(self._document.bom.components)} components, "
                f"{self._document.finding_count()} findings"
            )
            return self._document

    @property
    def seen_findings(self) -> int:
        """Number of distinct finding keys reported live so far."""
        with self._lock:
            return len(self._seen)
