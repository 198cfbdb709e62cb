from copy import deepcopy

import ocdg.objects.oc_dependency_graph as og

# Template representing the structure of an OCDG as dict.
# {'edges': {'descendant': {('o1', 'o2'): (weight, {'e1', 'e2'})}}} means that o1 -descendant-> o2 is observed
# weight times, justified by the events e1 and e2.
ocdg_template = {
    'nodes': {},                                        ## {'o1': ('Order', {'price': 4})}
    'edges': {}                                         ## {kind value: {(source, target): (weight, evidence)}}
}


class OCDGConverter:
    """
    A utility class to handle conversion between OCDG objects and their dictionary-based template representations.
    """

    @staticmethod
    def to_string_representation(graph: og.OCDG):
        """
        Converts an OCDG object into a template dictionary.
        """
        template = deepcopy(ocdg_template)

        for node in graph.nodes.values():
            template['nodes'][node.id] = (node.type, dict(node.attributes))

        for edge in graph.edges():
            template['edges'].setdefault(edge.kind.value, {})[(edge.source, edge.target)] = (
                edge.weight, set(edge.evidence))

        return template

    @staticmethod
    def graph_from_template(graph: og.OCDG, template) -> None:
        """
        Fills a graph from its template dictionary. Nodes are added before edges.
        """
        for object_id, (object_type, attributes) in template.get('nodes', {}).items():
            graph.add_node(object_id, object_type, attributes)

        for kind, edges in template.get('edges', {}).items():
            for (source, target), (weight, evidence) in edges.items():
                graph.add_edge(source, target, kind, weight, evidence)

    @staticmethod
    def import_graph(template) -> og.OCDG:
        """
        Constructs an OCDG object from its dictionary template representation.
        """
        graph = og.OCDG()
        OCDGConverter.graph_from_template(graph, template)
        return graph
