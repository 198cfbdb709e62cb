from typing import Optional


class OCDGError(Exception):
    """Base class of the errors raised while generating or decomposing an OCDG."""


class DanglingReference(OCDGError, KeyError):
    """
    An edge or an event names an object that does not exist in the graph or the log.

    Attributes:
        object_id: The identifier that could not be resolved
        event_id: The event holding the reference, None if the reference comes from an edge
    """

    def __init__(self, object_id: str, event_id: Optional[str] = None, message: Optional[str] = None):
        self.object_id = object_id
        self.event_id = event_id
        if message is None:
            if event_id is not None:
                message = f"Event '{event_id}' references object '{object_id}' which is not part of the log"
            else:
                message = f"Object '{object_id}' is not a node of the graph"
        self.message = message
        super().__init__(message)

    # KeyError quotes its argument, keep the message readable
    def __str__(self) -> str:
        return self.message


class UnknownRelationKind(OCDGError, ValueError):
    """A requested relation kind is not part of the relation catalog."""

    def __init__(self, name):
        self.name = name
        super().__init__(f"'{name}' is no known relation kind")
