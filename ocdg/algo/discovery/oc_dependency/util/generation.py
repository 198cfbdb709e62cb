import time

from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Iterable, List, Optional

from ocdg.objects.ocel import OCEL
from ocdg.objects.oc_dependency_graph import OCDG, RelationKinds
from ocdg.util import DanglingReference, RunContext

from .relation_rules import RelationRules


class OCDGGeneration:
    """
    Orchestrator for generating an OCDG from an object-centric event log.

    Entry point for:
    - Resolving the selected relation kinds against the catalog.
    - Creating one node per referenced object, failing on references to unknown objects.
    - Computing the edges of every selected kind concurrently and joining them into one graph.
    """

    def __init__(self, ocel: OCEL, relations: Optional[Iterable[RelationKinds | str]] = None,
                 context: Optional[RunContext] = None):
        """
        :param ocel: The object-centric event log.
        :param relations: The relation kinds to compute, as members or symbolic names. None selects the whole catalog,
        an empty selection creates a graph without edges.
        :param context: Settings of the run, a default RunContext if omitted.
        """
        self.__ocel = ocel
        self.__relations = RelationKinds.select(relations)
        self.__context = context if context is not None else RunContext()

    @property
    def ocel(self) -> OCEL:
        return self.__ocel

    @property
    def relations(self) -> List[RelationKinds]:
        return list(self.__relations)

    @property
    def context(self) -> RunContext:
        return self.__context

    def create_nodes(self) -> OCDG:
        """
        Creates the node set: every object referenced by at least one event, in order of first reference.

        :return: An OCDG without edges.
        :raises DanglingReference: If an event references an object that is not part of the log.
        """
        graph = OCDG()
        for event in self.ocel.sorted_events():
            for object_id in event.referenced_objects():
                obj = self.ocel.get_object(object_id)
                if obj is None:
                    raise DanglingReference(object_id, event_id=event.id)
                graph.add_node(obj.id, obj.type, obj.attributes)
        return graph

    def compute_relation(self, kind: RelationKinds, nodes: OCDG) -> OCDG:
        """
        Computes the edges of one relation kind on a private copy of the node set.

        :param kind: The relation kind to compute.
        :param nodes: The graph holding the node set, left untouched.
        :return: A graph holding the node set and the edges of the kind.
        """
        step_start = time.time()
        partial = RelationRules.apply(kind, self.ocel, nodes.copy())
        self.context.debug_log("Computed %d %s edges in %.2f seconds.", partial.edge_count, kind.value,
                               time.time() - step_start)
        return partial

    def apply(self) -> OCDG:
        """
        Generates the OCDG in two steps:

        Step 1: Create the nodes from the objects referenced by the log.
        Step 2: Compute every selected relation kind in its own worker and merge the partial graphs, in catalog
        order, once all of them are done.

        :return: The generated OCDG.
        """
        logger = self.context.logger

        start_time = time.time()
        logger.info("Starting OCDG generation on relations: %s", [kind.value for kind in self.relations])

        step_start = time.time()
        graph = self.create_nodes()
        logger.info(f"Step 1: Created {graph.node_count} nodes in {time.time() - step_start:.2f} seconds.")

        if self.relations and graph.node_count:
            step_start = time.time()
            with ThreadPoolExecutor(max_workers=self.context.max_workers) as executor:
                futures = {kind: executor.submit(self.compute_relation, kind, graph) for kind in self.relations}
                partials: Dict[RelationKinds, OCDG] = {kind: future.result() for kind, future in futures.items()}

            for kind in self.relations:
                graph.merge(partials[kind])
            logger.info(f"Step 2: Computed {graph.edge_count} edges in {time.time() - step_start:.2f} seconds.")

        logger.info(f"OCDG generation completed in {time.time() - start_time:.2f} seconds.")
        return graph
