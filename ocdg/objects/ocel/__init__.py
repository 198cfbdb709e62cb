from .obj import OCEL, Event, Object
from .importer import import_ocel
from .validator import validate_ocel, validate_ocel_verbose
