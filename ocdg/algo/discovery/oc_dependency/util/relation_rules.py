from collections import defaultdict
from itertools import combinations
from typing import Callable, Dict, Iterable, List

import polars as pl

from ocdg.objects.ocel import OCEL
from ocdg.objects.oc_dependency_graph import OCDG, RelationKinds


class RelationRules:
    """
    The computation rule of every relation kind of the catalog.

    Each rule scans the events of the log in their total order and writes the edges of its kind into the given
    graph, which must already hold a node for every referenced object. Identifiers repeated within an event are
    counted once, so no rule creates self-loops.
    """

    @staticmethod
    def apply(kind: RelationKinds, ocel: OCEL, graph: OCDG) -> OCDG:
        """
        Computes the edges of one relation kind.

        Args:
            kind: The relation kind to compute
            ocel: The log to scan
            graph: The graph to add the edges to

        Returns:
            The given graph
        """
        RULES[kind](ocel, graph)
        return graph

    @staticmethod
    def _add_symmetric(graph: OCDG, obj_1: str, obj_2: str, kind: RelationKinds, evidence: Iterable[str]) -> None:
        graph.add_edge(obj_1, obj_2, kind, evidence=evidence)
        graph.add_edge(obj_2, obj_1, kind, evidence=evidence)

    @staticmethod
    def co_occurrence(ocel: OCEL, graph: OCDG) -> None:
        """
        Links every two objects referenced by the same event in both directions.
        The weight counts the shared events, the evidence holds them.
        """
        for event in ocel.sorted_events():
            for obj_1, obj_2 in combinations(event.referenced_objects(), 2):
                RelationRules._add_symmetric(graph, obj_1, obj_2, RelationKinds.CO_OCCURRENCE, {event.id})

    @staticmethod
    def descendant(ocel: OCEL, graph: OCDG) -> None:
        """
        Adds A -> B for every object A referenced strictly before the first event of B.

        The weight is the number of events referencing A before the first event of B, the evidence is the
        earliest of these events together with the first event of B.
        """
        occurrences: Dict[str, int] = dict()  # object : events referencing it so far
        earliest: Dict[str, str] = dict()  # object : first event referencing it

        for event in ocel.sorted_events():
            objects = event.referenced_objects()
            born = [object_id for object_id in objects if object_id not in occurrences]

            for target in born:
                for source, count in occurrences.items():
                    graph.add_edge(source, target, RelationKinds.DESCENDANT, weight=count,
                                   evidence={earliest[source], event.id})

            # only visible to events strictly later than this one
            for object_id in objects:
                occurrences[object_id] = occurrences.get(object_id, 0) + 1
                earliest.setdefault(object_id, event.id)

    @staticmethod
    def type_inheritance(ocel: OCEL, graph: OCDG) -> None:
        """
        Links objects of the same type that share an event, from the earlier to the later referenced object.

        Objects are ranked by their first reference (event order, then position in the omap). Every pair is
        linked once, with weight 1 and their first shared event as evidence.
        """
        rank: Dict[str, int] = dict()
        linked = set()

        for event in ocel.sorted_events():
            objects = event.referenced_objects()
            for object_id in objects:
                rank.setdefault(object_id, len(rank))

            for obj_1, obj_2 in combinations(objects, 2):
                if graph.get_node(obj_1).type != graph.get_node(obj_2).type:
                    continue
                pair = frozenset((obj_1, obj_2))
                if pair in linked:
                    continue
                linked.add(pair)
                source, target = sorted((obj_1, obj_2), key=rank.get)
                graph.add_edge(source, target, RelationKinds.TYPE_INHERITANCE, evidence={event.id})

    @staticmethod
    def _lifecycle_groups(ocel: OCEL, bound: str) -> Dict[int, List[str]]:
        """
        Groups the referenced objects by the position of their first ('first') or last ('last') event.

        :return: position in the total event order : objects sorted by identifier
        """
        traces = ocel.object_traces()
        groups = defaultdict(list)
        if traces.height == 0:
            return groups

        lifecycle = traces.group_by("case:concept:name").agg(
            pl.col("position").min().alias("first"),
            pl.col("position").max().alias("last"),
        ).sort("case:concept:name")

        for row in lifecycle.iter_rows(named=True):
            groups[row[bound]].append(row["case:concept:name"])
        return groups

    @staticmethod
    def _link_lifecycle(ocel: OCEL, graph: OCDG, bound: str, kind: RelationKinds) -> None:
        events = ocel.sorted_events()
        groups = RelationRules._lifecycle_groups(ocel, bound)
        for position in sorted(groups):
            for obj_1, obj_2 in combinations(groups[position], 2):
                RelationRules._add_symmetric(graph, obj_1, obj_2, kind, {events[position].id})

    @staticmethod
    def co_birth(ocel: OCEL, graph: OCDG) -> None:
        """Links objects first referenced by the same event in both directions."""
        RelationRules._link_lifecycle(ocel, graph, "first", RelationKinds.CO_BIRTH)

    @staticmethod
    def co_death(ocel: OCEL, graph: OCDG) -> None:
        """Links objects last referenced by the same event in both directions."""
        RelationRules._link_lifecycle(ocel, graph, "last", RelationKinds.CO_DEATH)


RULES: Dict[RelationKinds, Callable[[OCEL, OCDG], None]] = {
    RelationKinds.CO_OCCURRENCE: RelationRules.co_occurrence,
    RelationKinds.DESCENDANT: RelationRules.descendant,
    RelationKinds.TYPE_INHERITANCE: RelationRules.type_inheritance,
    RelationKinds.CO_BIRTH: RelationRules.co_birth,
    RelationKinds.CO_DEATH: RelationRules.co_death,
}
