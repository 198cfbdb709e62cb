from .event import Event
from .ocel_object import Object
from .ocel import OCEL
