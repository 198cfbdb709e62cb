from .obj import OCDG, ObjectNode, DependencyEdge, RelationKinds
from .exporter import export_ocdg
from .importer import import_ocdg
