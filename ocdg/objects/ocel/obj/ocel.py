from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Set

import polars as pl

from .event import Event
from .ocel_object import Object

TRACE_COLUMNS = ["case:concept:name", "ocel:type", "concept:name", "time:timestamp", "ocel:eid", "position"]

class OCEL:
	"""
	In-memory object-centric event log.

	Holds the events and objects of one log. Both are immutable once the log is created. The log
	does not check that the objects referenced by its events exist, this is done by the validator
	upstream and by the relation computation which fails with DanglingReference.
	"""

	def __init__(self, events: Iterable[Event] = (), objects: Iterable[Object] = ()):
		"""
		Args:
			events: The events of the log, in any order
			objects: The objects of the log

		Raises:
			ValueError: If an event or object identifier appears twice
		"""
		self.__events: Dict[str, Event] = dict()
		self.__objects: Dict[str, Object] = dict()

		for event in events:
			if event.id in self.__events:
				raise ValueError(f"Event '{event.id}' appears more than once")
			self.__events[event.id] = event

		for obj in objects:
			if obj.id in self.__objects:
				raise ValueError(f"Object '{obj.id}' appears more than once")
			self.__objects[obj.id] = obj

		self.__sorted_events: Optional[List[Event]] = None

	@property
	def events(self) -> Mapping[str, Event]:
		return MappingProxyType(self.__events)

	@property
	def objects(self) -> Mapping[str, Object]:
		return MappingProxyType(self.__objects)

	@property
	def object_types(self) -> List[str]:
		return sorted({obj.type for obj in self.__objects.values()})

	@property
	def activities(self) -> Set[str]:
		return {event.activity for event in self.__events.values()}

	def get_object(self, object_id: str) -> Optional[Object]:
		return self.__objects.get(object_id)

	def get_event(self, event_id: str) -> Optional[Event]:
		return self.__events.get(event_id)

	def is_empty(self) -> bool:
		return not self.__events

	def sorted_events(self) -> List[Event]:
		"""Returns the events in their total order: by timestamp, ties broken by event id."""
		if self.__sorted_events is None:
			self.__sorted_events = sorted(self.__events.values(), key=lambda e: e.sort_key)
		return list(self.__sorted_events)

	def referenced_object_ids(self) -> List[str]:
		"""
		Identifiers of all objects referenced by at least one event.

		Returns:
			The identifiers ordered by their first reference (event order, then position in the omap)
		"""
		seen = dict()
		for event in self.sorted_events():
			for object_id in event.omap:
				seen.setdefault(object_id, None)
		return list(seen)

	def object_traces(self) -> pl.DataFrame:
		"""
		Flattens the log into one row per (event, referenced object) participation.

		The object identifier is used as the case identifier. The position column holds the index of the
		event in the total order of the log, so rows of the same object can be compared across cases.

		:return: A polars DataFrame sorted by position and object identifier.
		"""
		data = {column: [] for column in TRACE_COLUMNS}
		for position, event in enumerate(self.sorted_events()):
			for object_id in event.referenced_objects():
				obj = self.__objects.get(object_id)
				data["case:concept:name"].append(object_id)
				data["ocel:type"].append(obj.type if obj is not None else None)
				data["concept:name"].append(event.activity)
				data["time:timestamp"].append(event.timestamp)
				data["ocel:eid"].append(event.id)
				data["position"].append(position)

		if not data["position"]:
			return pl.DataFrame({column: [] for column in TRACE_COLUMNS})

		return pl.DataFrame(data).sort(["position", "case:concept:name"])

	def __len__(self) -> int:
		return len(self.__events)

	def __repr__(self) -> str:
		return f"OCEL(events={len(self.__events)}, objects={len(self.__objects)})"
