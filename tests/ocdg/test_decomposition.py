import unittest
from unittest.mock import patch

import networkx as nx

from test_setup import SetUpOCDGTest, build_log

from ocdg.algo.decomposition.oc_dependency import apply as decompose_apply
from ocdg.algo.decomposition.oc_dependency.util import GraphDecomposition
from ocdg.algo.discovery.oc_dependency import apply as generate_apply
from ocdg.objects.oc_dependency_graph import OCDG, DependencyEdge, RelationKinds
from ocdg.util import RunContext


def descendant_graph(edges):
    graph = OCDG()
    for source, target in edges:
        graph.add_node(source, "Item")
        graph.add_node(target, "Item")
        graph.add_edge(source, target, RelationKinds.DESCENDANT, evidence={f"{source}{target}"})
    return graph


class TestGraphDecomposition(SetUpOCDGTest):

    def setUp(self):
        super().setUp()
        self.edge_ab = DependencyEdge("A", "B", RelationKinds.DESCENDANT)
        self.edge_bc = DependencyEdge("B", "C", RelationKinds.DESCENDANT)
        self.edge_ac = DependencyEdge("A", "C", RelationKinds.DESCENDANT)
        self.edge_de = DependencyEdge("D", "E", RelationKinds.TYPE_INHERITANCE)

    def test_group_edges_by_kind(self):
        graph = descendant_graph([("A", "B"), ("B", "C"), ("A", "C")])
        graph.add_node("D", "Item")
        graph.add_node("E", "Item")
        graph.add_edge("D", "E", RelationKinds.TYPE_INHERITANCE)

        result = GraphDecomposition._group_edges_by_kind(graph)

        self.assertEqual(len(result[RelationKinds.DESCENDANT]), 3)
        self.assertEqual(len(result[RelationKinds.TYPE_INHERITANCE]), 1)
        self.assertNotIn(RelationKinds.CO_OCCURRENCE, result)

    def test_find_redundant_edges(self):
        result = GraphDecomposition._find_redundant_edges([self.edge_ab, self.edge_bc, self.edge_ac])
        self.assertEqual(result, {self.edge_ac.key})

    def test_find_redundant_edges_no_reduction(self):
        result = GraphDecomposition._find_redundant_edges([self.edge_ab, self.edge_bc])
        self.assertEqual(result, set())

    def test_every_witnessed_edge_is_redundant(self):
        # A -> D is witnessed by B and by C, all other edges have no witness
        edges = [DependencyEdge(s, t, RelationKinds.DESCENDANT)
                 for s, t in [("A", "B"), ("A", "C"), ("B", "D"), ("C", "D"), ("A", "D")]]
        result = GraphDecomposition._find_redundant_edges(edges)
        self.assertEqual(result, {("A", "D", RelationKinds.DESCENDANT)})

    def test_reduce_kind_merges_into_path(self):
        result = GraphDecomposition._reduce_kind([self.edge_ab, self.edge_bc, self.edge_ac])

        self.assertEqual(set(result), {self.edge_ab.key, self.edge_bc.key})
        self.assertEqual(result[self.edge_ab.key].weight, 2)
        self.assertEqual(result[self.edge_bc.key].weight, 2)

    def test_reduce_kind_keeps_edge_without_remaining_path(self):
        # every edge of the cycle has a witness, none can be removed without losing reachability
        cycle = [DependencyEdge(s, t, RelationKinds.DESCENDANT)
                 for s, t in [("A", "B"), ("B", "A"), ("A", "C"), ("C", "A"), ("B", "C"), ("C", "B")]]
        result = GraphDecomposition._reduce_kind(cycle)
        self.assertEqual(set(result), {edge.key for edge in cycle})

    def test_reduce_kind_uses_networkx_paths(self):
        with patch('networkx.shortest_path', side_effect=nx.NetworkXNoPath) as mock_path:
            result = GraphDecomposition._reduce_kind([self.edge_ab, self.edge_bc, self.edge_ac])
        mock_path.assert_called_once()
        # without a path the redundant edge stays
        self.assertIn(self.edge_ac.key, result)


class TestDecompose(SetUpOCDGTest):

    def test_chain_scenario(self):
        graph = generate_apply(self.chain_log, [RelationKinds.DESCENDANT])
        result = decompose_apply(graph)

        self.assertEqual({(e.source, e.target) for e in result.edges()}, {("A", "B"), ("B", "C")})
        removed_evidence = graph.get_edge("A", "C", RelationKinds.DESCENDANT).evidence
        for source, target in [("A", "B"), ("B", "C")]:
            edge = result.get_edge(source, target, RelationKinds.DESCENDANT)
            self.assertTrue(removed_evidence <= edge.evidence)
            self.assertEqual(edge.weight, 2)
            self.assertEqual(edge.evidence, {"E1", "E2", "E3"})

    def test_triangle_scenario_is_left_intact(self):
        graph = generate_apply(self.triangle_log, [RelationKinds.CO_OCCURRENCE])
        result = decompose_apply(graph)
        self.assertEqual(result, graph)

    def test_node_set_is_preserved(self):
        graph = generate_apply(self.ocel)
        result = decompose_apply(graph)
        self.assertEqual(result.nodes, graph.nodes)

    def test_isolated_nodes_are_kept(self):
        graph = descendant_graph([("A", "B"), ("B", "C"), ("A", "C")])
        graph.add_node("Z", "Order")
        result = decompose_apply(graph)
        self.assertTrue(result.has_node("Z"))
        self.assertEqual(result.node_count, 4)

    def test_idempotent(self):
        for graph in [generate_apply(self.ocel), generate_apply(self.chain_log),
                      descendant_graph([("A", "B"), ("B", "C"), ("C", "D"), ("A", "C"), ("A", "D"), ("B", "D")])]:
            once = decompose_apply(graph)
            self.assertEqual(decompose_apply(once), once)

    def test_input_graph_is_not_modified(self):
        graph = generate_apply(self.chain_log, [RelationKinds.DESCENDANT])
        before = graph.copy()
        decompose_apply(graph)
        self.assertEqual(graph, before)

    def test_empty_graph(self):
        self.assertEqual(decompose_apply(OCDG()), OCDG())

    def test_graph_without_edges(self):
        graph = generate_apply(self.ocel, [])
        self.assertEqual(decompose_apply(graph), graph)

    def test_symmetric_kinds_are_untouched(self):
        graph = generate_apply(self.ocel, [RelationKinds.CO_OCCURRENCE, RelationKinds.CO_BIRTH, RelationKinds.CO_DEATH])
        self.assertEqual(decompose_apply(graph), graph)

    def test_sample_log(self):
        graph = generate_apply(self.ocel)
        result = decompose_apply(graph)

        descendant = {(e.source, e.target) for e in result.edges(RelationKinds.DESCENDANT)}
        # o1, i1 and i2 reach s1 through o2
        for source in ["o1", "i1", "i2"]:
            self.assertNotIn((source, "s1"), descendant)
        self.assertIn(("o2", "s1"), descendant)
        self.assertIn(("i3", "s1"), descendant)
        self.assertEqual(len(descendant), 8)

        # provenance of removed edges is kept on the remaining ones
        remaining_evidence = set().union(*(e.evidence for e in result.edges(RelationKinds.DESCENDANT)))
        for edge in graph.edges(RelationKinds.DESCENDANT):
            self.assertTrue(edge.evidence <= remaining_evidence)
        self.assertEqual(sum(e.weight for e in result.edges(RelationKinds.DESCENDANT)),
                         sum(e.weight for e in graph.edges(RelationKinds.DESCENDANT)) + 1 + 2 + 1)

        self.assertEqual(list(result.edges(RelationKinds.TYPE_INHERITANCE)),
                         list(graph.edges(RelationKinds.TYPE_INHERITANCE)))

    def test_reachability_is_preserved(self):
        graph = descendant_graph([("A", "B"), ("B", "C"), ("C", "D"), ("A", "C"), ("A", "D"), ("B", "D")])
        result = decompose_apply(graph, RunContext(max_workers=1))

        original = graph.to_networkx(RelationKinds.DESCENDANT)
        reduced = result.to_networkx(RelationKinds.DESCENDANT)
        self.assertEqual(set(nx.transitive_closure(original).edges()), set(nx.transitive_closure(reduced).edges()))
        self.assertEqual({(e.source, e.target) for e in result.edges()}, {("A", "B"), ("B", "C"), ("C", "D")})

    def test_idempotent_on_cyclic_graph(self):
        graph = descendant_graph([("A", "B"), ("B", "A"), ("B", "C"), ("C", "A"), ("D", "A"), ("D", "B")])
        once = decompose_apply(graph)

        self.assertEqual(decompose_apply(once), once)
        self.assertEqual({(e.source, e.target): e.weight for e in once.edges()},
                         {("A", "B"): 2, ("B", "C"): 2, ("C", "A"): 2, ("D", "A"): 2})
        self.assertEqual(once.get_edge("A", "B", RelationKinds.DESCENDANT).evidence, {"AB", "DB"})

    def test_reduce_kind_repeats_until_stable(self):
        edges = [DependencyEdge(s, t, RelationKinds.DESCENDANT)
                 for s, t in [("A", "B"), ("B", "A"), ("B", "C"), ("C", "A"), ("D", "A"), ("D", "B")]]
        result = GraphDecomposition._reduce_kind(edges)
        self.assertEqual(GraphDecomposition._reduce_kind(list(result.values())), result)
        self.assertNotIn(("D", "B", RelationKinds.DESCENDANT), result)

    def test_self_reference_log(self):
        log = build_log([("E1", ["A", "A"]), ("E2", ["B"]), ("E3", ["C", "A"])])
        result = decompose_apply(generate_apply(log))
        self.assertFalse(any(edge.source == edge.target for edge in result.edges()))


if __name__ == '__main__':
    unittest.main()
