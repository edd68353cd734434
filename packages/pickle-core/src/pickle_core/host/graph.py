"""Build graph node descriptors and adapters.

The Variant Binder does not mutate a live host graph. It returns GraphNode
descriptors (inputs, outputs, dependencies, generated source directory) and
a BuildGraph adapter translates them into the host's scheduling API.

LocalBuildGraph is the in-process adapter: it registers generated source
directories on variants that accept them and runs nodes in dependency
order, keeping failures scoped to the node that produced them.

Node lifecycle:

    REGISTERED -> ELIGIBLE -> EXECUTING -> DONE | FAILED
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from graphlib import TopologicalSorter
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog

from pickle_core.errors import GraphConfigurationError, GraphStateError, PickleError
from pickle_core.generator.models import GenerationUnit

if TYPE_CHECKING:
    from pickle_core.host.binder import BindingResult

logger = structlog.get_logger(__name__)


class NodeState(str, Enum):
    """Lifecycle state of a graph node."""

    REGISTERED = "registered"
    ELIGIBLE = "eligible"
    EXECUTING = "executing"
    DONE = "done"
    FAILED = "failed"


@dataclass(eq=False)
class GraphNode:
    """Source-generating graph node for one variant.

    Attributes:
        name: Node name, unique within a graph.
        unit: Work executed by the node.
        variant: Host variant the node belongs to.
        generated_source_dir: Directory registered as generated sources
            for the variant's compilation.
        depends_on: Host handles (or other nodes) that must complete first.
        state: Current lifecycle state.
    """

    name: str
    unit: GenerationUnit
    variant: Any
    generated_source_dir: Path
    depends_on: tuple[Any, ...] = ()
    state: NodeState = NodeState.REGISTERED

    @property
    def inputs(self) -> tuple[Path, ...]:
        """Tracked inputs: the features directory."""
        return (self.unit.features_dir,)

    @property
    def outputs(self) -> tuple[Path, ...]:
        """Tracked outputs: the generated source file."""
        return (self.unit.output_file,)

    def mark_eligible(self) -> None:
        """Mark the node ready to run once the host considers its inputs stable.

        Raises:
            GraphStateError: If the node is currently executing.
        """
        if self.state is NodeState.EXECUTING:
            raise GraphStateError(f"Node '{self.name}' is executing")
        self.state = NodeState.ELIGIBLE

    def execute(self) -> Path:
        """Run the generation unit.

        Nodes that already finished may be executed again; the host decides
        when to re-run.

        Returns:
            Path of the generated file.

        Raises:
            GraphStateError: If the node was never marked eligible or is
                already executing.
            PickleError: Any generation failure; the node ends FAILED.
        """
        if self.state in (NodeState.REGISTERED, NodeState.EXECUTING):
            raise GraphStateError(f"Node '{self.name}' cannot execute while {self.state.value}")

        log = logger.bind(node=self.name)
        self.state = NodeState.EXECUTING
        log.info("node_started", features_dir=str(self.unit.features_dir))

        try:
            output = self.unit.run()
        except Exception as e:
            self.state = NodeState.FAILED
            log.error("node_failed", error=str(e), error_type=type(e).__name__)
            raise

        self.state = NodeState.DONE
        log.info("node_completed", output_file=str(output))
        return output


@dataclass
class GraphRunReport:
    """Outcome of running a LocalBuildGraph.

    Attributes:
        done: Names of nodes that completed.
        failed: Node name to the error that failed it.
        skipped: Names of nodes not run because a dependency failed.
    """

    done: list[str] = field(default_factory=list)
    failed: dict[str, PickleError] = field(default_factory=dict)
    skipped: list[str] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        """True if every node completed."""
        return not self.failed and not self.skipped


class BuildGraph(ABC):
    """Adapter translating GraphNode descriptors into a host graph."""

    @abstractmethod
    def register(self, node: GraphNode) -> None:
        """Register one node with the host."""

    def register_all(self, result: BindingResult) -> None:
        """Register every node produced by a binding pass."""
        for node in result.nodes:
            self.register(node)


class LocalBuildGraph(BuildGraph):
    """In-process build graph that schedules and runs generation nodes.

    Example:
        >>> graph = LocalBuildGraph()
        >>> graph.register_all(binder.bind(test_variants, unit_test_variants))
        >>> report = graph.run()
        >>> report.succeeded
        True
    """

    def __init__(self) -> None:
        self.nodes: dict[str, GraphNode] = {}
        self._log = logger.bind(component="local_build_graph")

    def register(self, node: GraphNode) -> None:
        """Register a node and its generated source directory.

        Raises:
            GraphConfigurationError: If a node with the same name exists.
        """
        if node.name in self.nodes:
            raise GraphConfigurationError(
                f"Task '{node.name}' is already registered",
                field_path=getattr(node.variant, "name", None),
            )

        self.nodes[node.name] = node

        register_generated = getattr(node.variant, "register_java_generating_task", None)
        if callable(register_generated):
            register_generated(node, node.generated_source_dir)

        self._log.debug(
            "node_registered",
            node=node.name,
            inputs=[str(p) for p in node.inputs],
            outputs=[str(p) for p in node.outputs],
        )

    def _node_dependencies(self, node: GraphNode) -> list[str]:
        """Names of nodes in this graph that node depends on.

        Handles that are not nodes of this graph belong to the host and
        are treated as already satisfied.
        """
        names = []
        for dep in node.depends_on:
            if isinstance(dep, GraphNode) and dep.name in self.nodes:
                names.append(dep.name)
            elif isinstance(dep, str) and dep in self.nodes:
                names.append(dep)
        return names

    def run(self) -> GraphRunReport:
        """Run all registered nodes in dependency order.

        A failing node does not stop independent nodes; nodes depending on
        it are skipped.

        Returns:
            GraphRunReport with per-node outcomes.
        """
        report = GraphRunReport()
        sorter = TopologicalSorter({name: self._node_dependencies(n) for name, n in self.nodes.items()})

        for name in sorter.static_order():
            node = self.nodes[name]
            blocked = [dep for dep in self._node_dependencies(node) if dep not in report.done]
            if blocked:
                self._log.warning("node_skipped", node=name, blocked_by=blocked)
                report.skipped.append(name)
                continue

            node.mark_eligible()
            try:
                node.execute()
            except PickleError as e:
                report.failed[name] = e
                continue
            report.done.append(name)

        self._log.info(
            "graph_completed",
            done=len(report.done),
            failed=len(report.failed),
            skipped=len(report.skipped),
        )
        return report
