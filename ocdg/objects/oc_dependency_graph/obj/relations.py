from enum import Enum
from typing import FrozenSet, Iterable
from dataclasses import dataclass, field, replace

from ocdg.util.errors import UnknownRelationKind

class RelationKinds(Enum):
	"""
	Closed catalog of the relations an OCDG can hold between two objects.

	Attributes:
		CO_OCCURRENCE: both objects are referenced by the same event (symmetric)
		DESCENDANT: source is referenced before the first event of target
		TYPE_INHERITANCE: objects of the same type that share an event, earlier referenced to later referenced
		CO_BIRTH: both objects are first referenced by the same event (symmetric)
		CO_DEATH: both objects are last referenced by the same event (symmetric)
	"""
	CO_OCCURRENCE = 'coOccurrence'
	DESCENDANT = 'descendant'
	TYPE_INHERITANCE = 'typeInheritance'
	CO_BIRTH = 'coBirth'
	CO_DEATH = 'coDeath'

	@property
	def is_directed(self) -> bool:
		return self not in _SYMMETRIC

	@classmethod
	def parse(cls, kind: 'RelationKinds | str') -> 'RelationKinds':
		"""
		Resolves a kind given as member, symbolic name (value) or member name.

		Raises:
			UnknownRelationKind: If the kind is not part of the catalog
		"""
		if isinstance(kind, cls):
			return kind
		for member in cls:
			if kind == member.value or kind == member.name:
				return member
		raise UnknownRelationKind(kind)

	@classmethod
	def select(cls, kinds: Iterable['RelationKinds | str'] | None) -> list['RelationKinds']:
		"""Resolves a selection of kinds, ignoring duplicates. None selects the whole catalog."""
		if kinds is None:
			return list(cls)
		selected = {cls.parse(kind) for kind in kinds}
		return [member for member in cls if member in selected]

_SYMMETRIC = {RelationKinds.CO_OCCURRENCE, RelationKinds.CO_BIRTH, RelationKinds.CO_DEATH}

@dataclass(frozen=True)
class DependencyEdge:
	"""
	A directed, attributed edge between two objects of an OCDG.

	Attributes:
		source: Identifier of the source object
		target: Identifier of the target object
		kind: The relation kind of the edge
		weight: How often the relation was observed
		evidence: Identifiers of the events justifying the edge
	"""
	source: str
	target: str
	kind: RelationKinds
	weight: int = 1
	evidence: FrozenSet[str] = field(default_factory=frozenset)

	@property
	def key(self):
		return self.source, self.target, self.kind

	def merged(self, weight: int = 1, evidence: Iterable[str] = ()) -> 'DependencyEdge':
		"""Returns a copy with the weight increased and the evidence extended."""
		return replace(self, weight=self.weight + weight, evidence=self.evidence.union(evidence))
