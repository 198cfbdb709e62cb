from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, Mapping, Optional, Set, Tuple

import networkx as nx

from ocdg.util.errors import DanglingReference
from .node import ObjectNode
from .relations import DependencyEdge, RelationKinds

EdgeKey = Tuple[str, str, RelationKinds]

class OCDG:
	"""
	Represents an Object-Centric Dependency Graph (OCDG).

	An OCDG consists of:
	- Nodes: one per object, keyed by the object identifier
	- Edges: directed, weighted relations between two objects, tagged with their relation kind

	Between the same pair of objects there is at most one edge per relation kind. Adding an edge that
	already exists merges the two: the weights add up and the evidence sets are united.
	Edges are plain value records that refer to nodes by identifier.
	"""

	def __init__(self):
		self.__nodes: Dict[str, ObjectNode] = dict()
		self.__edges: Dict[EdgeKey, DependencyEdge] = dict()

	@property
	def nodes(self) -> Mapping[str, ObjectNode]:
		return MappingProxyType(self.__nodes)

	@property
	def node_count(self) -> int:
		return len(self.__nodes)

	@property
	def edge_count(self) -> int:
		return len(self.__edges)

	def add_node(self, object_id: str, object_type: str, attributes: Optional[Dict[str, Any]] = None) -> ObjectNode:
		"""
		Add an object to the graph. Adding an identifier that already exists returns the existing node.

		Args:
			object_id: The object identifier
			object_type: The object type
			attributes: Optional attributes of the object

		Returns:
			The node stored under the identifier
		"""
		node = self.__nodes.get(object_id)
		if node is None:
			node = ObjectNode(object_id, object_type, dict(attributes or {}))
			self.__nodes[object_id] = node
		return node

	def get_node(self, object_id: str) -> Optional[ObjectNode]:
		return self.__nodes.get(object_id)

	def has_node(self, object_id: str) -> bool:
		return object_id in self.__nodes

	def add_edge(self, source: str, target: str, kind: RelationKinds | str, weight: int = 1,
				 evidence: Iterable[str] = ()) -> DependencyEdge:
		"""
		Add an edge between two nodes, merging it into an existing edge of the same kind.

		Args:
			source: Identifier of the source object
			target: Identifier of the target object
			kind: The relation kind, as member or symbolic name
			weight: Weight of the observation (Default: 1)
			evidence: Event identifiers supporting the observation

		Returns:
			The stored edge after the merge

		Raises:
			DanglingReference: If source or target is not a node of the graph
			UnknownRelationKind: If the kind is not part of the catalog
			ValueError: If the edge is a self-loop or the weight is not positive
		"""
		kind = RelationKinds.parse(kind)
		for object_id in (source, target):
			if object_id not in self.__nodes:
				raise DanglingReference(object_id)
		if source == target:
			raise ValueError(f"Self-loop on '{source}' is not allowed")
		if weight < 1:
			raise ValueError("Edge weight must be positive")

		key = (source, target, kind)
		edge = self.__edges.get(key)
		if edge is None:
			edge = DependencyEdge(source, target, kind, weight, frozenset(evidence))
		else:
			edge = edge.merged(weight, evidence)
		self.__edges[key] = edge
		return edge

	def get_edge(self, source: str, target: str, kind: RelationKinds | str) -> Optional[DependencyEdge]:
		return self.__edges.get((source, target, RelationKinds.parse(kind)))

	def has_edge(self, source: str, target: str, kind: RelationKinds | str) -> bool:
		return self.get_edge(source, target, kind) is not None

	def remove_edge(self, source: str, target: str, kind: RelationKinds | str) -> bool:
		"""
		Remove an edge from the graph. Nodes stay untouched.

		Returns:
			bool: True if the edge was found and removed, False otherwise
		"""
		return self.__edges.pop((source, target, RelationKinds.parse(kind)), None) is not None

	def edges(self, kind: RelationKinds | str | None = None) -> Iterator[DependencyEdge]:
		"""Iterate over the edges in insertion order, optionally only those of one kind."""
		if kind is None:
			return iter(list(self.__edges.values()))
		kind = RelationKinds.parse(kind)
		return iter([edge for edge in self.__edges.values() if edge.kind == kind])

	def relation_kinds(self) -> Set[RelationKinds]:
		"""Get the relation kinds that have at least one edge in the graph."""
		return {edge.kind for edge in self.__edges.values()}

	def merge(self, other: 'OCDG') -> 'OCDG':
		"""
		Merge the nodes and edges of another graph into this one.

		Nodes already present are kept, edges are merged like in add_edge.

		Returns:
			This graph
		"""
		for node in other.nodes.values():
			self.add_node(node.id, node.type, node.attributes)
		for edge in other.edges():
			self.add_edge(edge.source, edge.target, edge.kind, edge.weight, edge.evidence)
		return self

	def copy(self) -> 'OCDG':
		graph = OCDG()
		# nodes and edges are immutable records, sharing them is safe
		graph.__nodes = dict(self.__nodes)
		graph.__edges = dict(self.__edges)
		return graph

	def to_networkx(self, kind: RelationKinds | str | None = None) -> nx.DiGraph | nx.MultiDiGraph:
		"""
		Convert the graph into a networkx graph.

		Args:
			kind: If given, only the edges of this kind are converted into a DiGraph. Otherwise all edges are
				converted into a MultiDiGraph keyed by the symbolic name of the relation kind.

		Returns:
			The networkx graph holding every node with its type and attributes
		"""
		G = nx.DiGraph() if kind is not None else nx.MultiDiGraph()
		for node in self.__nodes.values():
			G.add_node(node.id, type=node.type, attributes=dict(node.attributes))
		for edge in self.edges(kind):
			if kind is None:
				G.add_edge(edge.source, edge.target, key=edge.kind.value, weight=edge.weight,
						   evidence=sorted(edge.evidence))
			else:
				G.add_edge(edge.source, edge.target, weight=edge.weight, evidence=sorted(edge.evidence))
		return G

	def export_as_gexf(self, output_file_name: str) -> None:
		"""Exports the graph to a gexf file."""
		from ocdg.objects.oc_dependency_graph.exporter import export_ocdg
		export_ocdg(self, output_file_name)

	def __eq__(self, other) -> bool:
		if not isinstance(other, OCDG):
			return NotImplemented
		return self.__nodes == other.__nodes and self.__edges == other.__edges

	def __str__(self) -> str:
		"""Return a string representation of the graph."""
		from ocdg.util.ocdg.converter import OCDGConverter
		return str(OCDGConverter.to_string_representation(self))
