import time

from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional, Set, Tuple

import networkx as nx

from ocdg.objects.oc_dependency_graph import OCDG, DependencyEdge, RelationKinds
from ocdg.util import RunContext

EdgeKey = Tuple[str, str, RelationKinds]


class GraphDecomposition:
    """
    Utility class for reducing OCDGs to a smaller graph with the same reachability per relation kind.

    Provides:
    - Detection of edges witnessed by a two-hop path of the same kind.
    - Removal of these edges, merging their weight and evidence into the remaining path.

    Symmetric relation kinds are never reduced.
    """

    @staticmethod
    def apply(graph: OCDG, context: Optional[RunContext] = None) -> OCDG:
        """
        Decomposes a graph, each directed relation kind on its own.

        Args:
            graph: The OCDG to decompose, it is not modified
            context: Settings of the run, a default RunContext if omitted

        Returns:
            A new OCDG with the same nodes and the reduced edges
        """
        context = context if context is not None else RunContext()
        type_to_edges = GraphDecomposition._group_edges_by_kind(graph)
        directed = [kind for kind in RelationKinds if kind in type_to_edges and kind.is_directed]

        reduced: Dict[RelationKinds, Dict[EdgeKey, DependencyEdge]] = {}
        if directed:
            with ThreadPoolExecutor(max_workers=context.max_workers) as executor:
                futures = {kind: executor.submit(GraphDecomposition._reduce_kind, type_to_edges[kind])
                           for kind in directed}
                reduced = {kind: future.result() for kind, future in futures.items()}

        for kind in directed:
            context.debug_log("Decomposed %s: %d of %d edges remain.", kind.value, len(reduced[kind]),
                              len(type_to_edges[kind]))

        return GraphDecomposition._rebuild(graph, reduced)

    @staticmethod
    def _group_edges_by_kind(graph: OCDG) -> Dict[RelationKinds, List[DependencyEdge]]:
        """
        Groups the edges of a graph by their relation kind, keeping their order.

        Returns:
            Dictionary mapping relation kinds to lists of edges
        """
        type_to_edges = defaultdict(list)
        for edge in graph.edges():
            type_to_edges[edge.kind].append(edge)
        return type_to_edges

    @staticmethod
    def _find_redundant_edges(edges: List[DependencyEdge]) -> Set[EdgeKey]:
        """
        Finds every edge A -> B for which some C with A -> C and C -> B exists.

        All edges are judged against the same input, so the result does not depend on which witness is seen first.

        Args:
            edges: Edges of a single relation kind

        Returns:
            The keys of the redundant edges
        """
        successors = defaultdict(set)
        for edge in edges:
            successors[edge.source].add(edge.target)

        # graphs hold no self-loops, so a witness is never the source or target itself
        return {edge.key for edge in edges
                if any(edge.target in successors[hop] for hop in successors[edge.source])}

    @staticmethod
    def _reduce_kind(edges: List[DependencyEdge]) -> Dict[EdgeKey, DependencyEdge]:
        """
        Repeats the two-hop reduction on the edges of one relation kind until a pass removes no edge.

        On cyclic input, edges kept by one pass may be removed by a later one.

        Args:
            edges: Edges of a single relation kind

        Returns:
            The remaining edges, keyed by (source, target, kind)
        """
        remaining = {edge.key: edge for edge in edges}
        while True:
            reduced = GraphDecomposition._reduce_once(list(remaining.values()))
            if len(reduced) == len(remaining):
                return reduced
            remaining = reduced

    @staticmethod
    def _reduce_once(edges: List[DependencyEdge]) -> Dict[EdgeKey, DependencyEdge]:
        """
        Performs one pass of the two-hop reduction on the edges of one relation kind.

        A redundant edge is removed if its target stays reachable from its source over the remaining edges. Its
        weight and evidence are then added to every edge of the shortest remaining path. Redundant edges without
        such a path, which only happens on cyclic input, are kept as they are.

        Args:
            edges: Edges of a single relation kind

        Returns:
            The remaining edges, keyed by (source, target, kind)
        """
        redundant = GraphDecomposition._find_redundant_edges(edges)
        if not redundant:
            return {edge.key: edge for edge in edges}

        remaining = {edge.key: edge for edge in edges if edge.key not in redundant}

        G = nx.DiGraph()
        G.add_edges_from(sorted((source, target) for source, target, _ in remaining))

        for edge in sorted((edge for edge in edges if edge.key in redundant), key=lambda e: (e.source, e.target)):
            try:
                path = nx.shortest_path(G, edge.source, edge.target)
            except (nx.NetworkXNoPath, nx.NodeNotFound):
                remaining[edge.key] = edge
                continue

            for source, target in zip(path, path[1:]):
                key = (source, target, edge.kind)
                remaining[key] = remaining[key].merged(edge.weight, edge.evidence)

        return remaining

    @staticmethod
    def _rebuild(graph: OCDG, reduced: Dict[RelationKinds, Dict[EdgeKey, DependencyEdge]]) -> OCDG:
        """
        Creates the resulting graph: all nodes, the edges of untouched kinds and the reduced edges, in the edge
        order of the input graph.
        """
        result = OCDG()
        for node in graph.nodes.values():
            result.add_node(node.id, node.type, node.attributes)

        for edge in graph.edges():
            if edge.kind in reduced:
                edge = reduced[edge.kind].get(edge.key)
                if edge is None:
                    continue
            result.add_edge(edge.source, edge.target, edge.kind, edge.weight, edge.evidence)
        return result


def decompose(graph: OCDG, context: Optional[RunContext] = None) -> OCDG:
    """
    Decomposes an OCDG and logs the duration of the run.
    """
    context = context if context is not None else RunContext()
    step_start = time.time()
    context.logger.info(f"Starting decomposition of {graph.edge_count} edges on {graph.node_count} nodes.")
    result = GraphDecomposition.apply(graph, context)
    context.logger.info(f"Decomposition removed {graph.edge_count - result.edge_count} edges in "
                        f"{time.time() - step_start:.2f} seconds.")
    return result
