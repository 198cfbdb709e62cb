from .relations import RelationKinds, DependencyEdge
from .node import ObjectNode
from .ocdg import OCDG
