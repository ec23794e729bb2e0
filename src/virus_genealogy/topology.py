"""
Structural diagnostics for genealogies.

A genealogy is meant to be a DAG in which every virus descends from the stem,
but connect() does not enforce it. The helpers here inspect a networkx view of
a genealogy and report where that shape does not hold. They never modify the
genealogy.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Hashable

import networkx as nx

if TYPE_CHECKING:
    from .genealogy import VirusGenealogy


class LineageShape(str, Enum):
    """Overall shape of a genealogy."""

    SINGLE_NODE = "single_node"
    CHAIN = "chain"
    TREE = "tree"
    DAG = "dag"
    CYCLIC = "cyclic"


@dataclass(frozen=True)
class StructureReport:
    """Result of checking a genealogy against its intended shape."""

    acyclic: bool
    unreachable: list[Hashable] = field(default_factory=list)
    cycle: list[tuple[Hashable, Hashable]] = field(default_factory=list)

    @property
    def healthy(self) -> bool:
        return self.acyclic and not self.unreachable


def to_digraph(genealogy: "VirusGenealogy") -> nx.DiGraph:
    """
    Build a parent -> child DiGraph of a genealogy.

    Only identifiers are copied; no payload is materialized.

    Args:
        genealogy: Genealogy to convert

    Returns:
        New NetworkX DiGraph, independent of the genealogy
    """
    graph = nx.DiGraph()
    for virus_id in genealogy.ids():
        graph.add_node(virus_id)
        for child_id in genealogy.get_children(virus_id):
            graph.add_edge(virus_id, child_id)
    return graph


def has_cycles(graph: nx.DiGraph) -> bool:
    """Check if a directed graph has cycles."""
    return not nx.is_directed_acyclic_graph(graph)


def find_cycle(graph: nx.DiGraph) -> list[tuple[Any, Any]]:
    """
    Find one cycle in a graph.

    Returns:
        List of (parent, child) edges forming a cycle, empty if acyclic
    """
    try:
        return [(u, v) for u, v, *_ in nx.find_cycle(graph)]
    except nx.NetworkXNoCycle:
        return []


def unreachable_from(graph: nx.DiGraph, root: Hashable) -> list[Hashable]:
    """
    Get nodes that cannot be reached from root by following edges.

    Args:
        graph: NetworkX DiGraph to analyze
        root: Node to start from (normally the stem)

    Returns:
        Sorted list of unreachable node identifiers
    """
    reachable = nx.descendants(graph, root) | {root}
    return sorted(node for node in graph.nodes() if node not in reachable)


def get_leaf_nodes(graph: nx.DiGraph) -> list:
    """Get all nodes without children, sorted."""
    return sorted(node for node in graph.nodes() if graph.out_degree(node) == 0)


def detect_shape(graph: nx.DiGraph) -> LineageShape:
    """
    Classify a non-empty genealogy graph.

    Checks from most specific to least specific: chain, tree, dag.
    """
    if graph.number_of_nodes() == 1 and graph.number_of_edges() == 0:
        return LineageShape.SINGLE_NODE

    if has_cycles(graph):
        return LineageShape.CYCLIC

    # An acyclic graph with one root and at most one parent per node is a tree.
    in_degrees = [degree for _, degree in graph.in_degree()]
    if any(degree > 1 for degree in in_degrees) or in_degrees.count(0) != 1:
        return LineageShape.DAG

    if all(degree <= 1 for _, degree in graph.out_degree()):
        return LineageShape.CHAIN
    return LineageShape.TREE


def check_structure(graph: nx.DiGraph, root: Hashable) -> StructureReport:
    """
    Check that a graph is acyclic and fully reachable from root.

    Args:
        graph: NetworkX DiGraph to check
        root: Node every other node should descend from

    Returns:
        StructureReport describing any violation
    """
    cycle = find_cycle(graph)
    return StructureReport(
        acyclic=not cycle,
        unreachable=unreachable_from(graph, root),
        cycle=cycle,
    )
