from types import MappingProxyType
from typing import Any, Mapping
from dataclasses import dataclass, field

@dataclass(frozen=True)
class Object:
	"""
	Represents an object of an object-centric event log.

	Attributes:
		id: The identifier of the object, unique within the log
		type: The object type
		attributes: Attribute name to value, in the order given by the log
	"""
	id: str
	type: str
	attributes: Mapping[str, Any] = field(default_factory=dict, hash=False)

	def __post_init__(self):
		# read-only view on a private copy
		object.__setattr__(self, "attributes", MappingProxyType(dict(self.attributes)))
