from types import MappingProxyType
from typing import Any, Mapping
from dataclasses import dataclass, field

@dataclass(frozen=True)
class ObjectNode:
	"""
	Node of an OCDG, one per object of the log.

	Attributes:
		id: The object identifier
		type: The object type
		attributes: The object attributes
	"""
	id: str
	type: str
	attributes: Mapping[str, Any] = field(default_factory=dict, hash=False)

	def __post_init__(self):
		# read-only view on a private copy
		object.__setattr__(self, "attributes", MappingProxyType(dict(self.attributes)))
