from datetime import datetime
from types import MappingProxyType
from typing import Any, Mapping, Tuple
from dataclasses import dataclass, field

@dataclass(frozen=True)
class Event:
	"""
	Represents an event of an object-centric event log.

	Attributes:
		id: The identifier of the event, unique within the log
		timestamp: The time the event happened at (naive, UTC)
		activity: The activity label of the event
		omap: Identifiers of the objects the event references, in log order
		vmap: The attribute map of the event
	"""
	id: str
	timestamp: datetime
	activity: str
	omap: Tuple[str, ...] = ()
	vmap: Mapping[str, Any] = field(default_factory=dict, hash=False)

	def __post_init__(self):
		object.__setattr__(self, "vmap", MappingProxyType(dict(self.vmap)))

	@property
	def sort_key(self) -> Tuple[datetime, str]:
		# ties on the timestamp are broken by the event id
		return self.timestamp, self.id

	def referenced_objects(self) -> Tuple[str, ...]:
		"""Returns the omap without repeated identifiers, keeping the first occurrence."""
		return tuple(dict.fromkeys(self.omap))
