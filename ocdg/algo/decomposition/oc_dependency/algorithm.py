from typing import Optional

from ocdg.objects.oc_dependency_graph import OCDG
from ocdg.util import RunContext
from .util import decompose


def apply(graph: OCDG, context: Optional[RunContext] = None) -> OCDG:
    """
    Decomposes an object-centric dependency graph into a smaller graph.

    For every directed relation kind, an edge A -> B is removed if a same-kind path A -> C -> B exists. The removed
    edge's weight and evidence are merged into the path that remains, so no provenance is lost. The node set never
    changes and the input graph is left untouched. This is a local reduction on two-hop witnesses, not a minimum
    transitive reduction.

    Args:
        graph (OCDG): The graph to decompose, generated or imported from a gexf file.
        context (RunContext, optional): Settings of the run such as debug output and worker count.

    Returns:
        OCDG: The decomposed graph.
    """
    return decompose(graph, context)
