from typing import Iterable, Optional

from ocdg.objects.ocel import OCEL
from ocdg.objects.oc_dependency_graph import OCDG, RelationKinds
from ocdg.util import RunContext
from .util import OCDGGeneration


def apply(ocel: OCEL, relations: Optional[Iterable[RelationKinds | str]] = None,
          context: Optional[RunContext] = None) -> OCDG:
    """
    Generates the object-centric dependency graph of an object-centric event log.

    The nodes are the objects referenced by at least one event, independent of the selected relations. For every
    selected relation kind, its rule derives weighted edges between the objects; the edges of all kinds are
    united in the returned graph.

    Args:
        ocel (OCEL): The input Object-Centric Event Log.
        relations (Iterable[RelationKinds | str], optional): The relation kinds to compute, as members or symbolic
            names. Order and duplicates do not matter. None computes the whole catalog.
        context (RunContext, optional): Settings of the run such as debug output and worker count.

    Returns:
        OCDG: The generated graph.

    Raises:
        UnknownRelationKind: If a selected relation is not part of the catalog.
        DanglingReference: If an event references an object missing from the log.
    """
    generation = OCDGGeneration(ocel=ocel, relations=relations, context=context)
    return generation.apply()
