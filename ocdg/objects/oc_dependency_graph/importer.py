import ast
import logging

from typing import Any, Dict

from lxml import etree

from ocdg.objects.oc_dependency_graph.obj import OCDG, RelationKinds
from ocdg.objects.oc_dependency_graph.exporter import (TYPE_ATTRIBUTE, ATTRIBUTE_PREFIX, RELATION_ATTRIBUTE,
                                                       EVIDENCE_ATTRIBUTE)

"""
    Imports GEXF files written by the exporter back into an OCDG.
    Elements are matched regardless of the GEXF namespace version, so files re-saved by other tools are accepted
    as long as every edge names its relation kind.
"""

logger = logging.getLogger(__name__)


SPECIAL_FLOATS = {"nan", "inf"}


class _SpecialFloats(ast.NodeTransformer):
    """Replaces the names repr gives to non finite floats by float constants."""

    def visit_Name(self, node):
        if node.id in SPECIAL_FLOATS:
            return ast.copy_location(ast.Constant(float(node.id)), node)
        return node


def _eval(value: str, context: str) -> Any:
    try:
        return ast.literal_eval(_SpecialFloats().visit(ast.parse(value.strip(), mode="eval")))
    except (ValueError, SyntaxError):
        raise ValueError(f"Invalid value '{value}' for {context}")


def _attribute_titles(graph_element) -> Dict[str, Dict[str, str]]:
    titles = {"node": {}, "edge": {}}
    for declaration in graph_element.iterfind("{*}attributes"):
        titles.setdefault(declaration.get("class"), {}).update(
            {attribute.get("id"): attribute.get("title", attribute.get("id"))
             for attribute in declaration.iterfind("{*}attribute")})
    return titles


def _attvalues(element) -> Dict[str, str]:
    return {attvalue.get("for"): attvalue.get("value") for attvalue in element.iterfind("{*}attvalues/{*}attvalue")}


def import_ocdg(filepath: str) -> OCDG:
    """
    Reads an OCDG from a GEXF file.

    Args:
        filepath: Path to the .gexf file

    Returns:
        OCDG: The graph with its node attributes, relation kinds, weights and evidence

    Raises:
        OSError: If the file cannot be read
        ValueError: If the file is no GEXF graph or holds invalid values
        UnknownRelationKind: If an edge names a relation kind outside the catalog
        DanglingReference: If an edge connects an object that is not a node
    """
    try:
        tree = etree.parse(filepath)
    except etree.XMLSyntaxError as e:
        raise ValueError(f"'{filepath}' is no valid XML: {e}")

    graph_element = tree.getroot().find("{*}graph")
    if graph_element is None:
        raise ValueError(f"'{filepath}' contains no GEXF graph")

    titles = _attribute_titles(graph_element)
    graph = OCDG()

    for xml_node in graph_element.iterfind("{*}nodes/{*}node"):
        values = _attvalues(xml_node)
        object_id = xml_node.get("id")
        object_type = values.pop(TYPE_ATTRIBUTE, "")

        attributes = dict()
        for attribute_id, value in values.items():
            if attribute_id.startswith(ATTRIBUTE_PREFIX):
                name = titles["node"].get(attribute_id, attribute_id[len(ATTRIBUTE_PREFIX):])
                attributes[name] = _eval(value, f"attribute '{name}' of node '{object_id}'")
            else:
                # attributes added by other tools are kept as plain strings
                attributes[titles["node"].get(attribute_id, attribute_id)] = value
        graph.add_node(object_id, object_type, attributes)

    for xml_edge in graph_element.iterfind("{*}edges/{*}edge"):
        values = _attvalues(xml_edge)
        relation = values.get(RELATION_ATTRIBUTE, xml_edge.get("label"))
        if relation is None:
            raise ValueError(f"Edge '{xml_edge.get('id')}' has no relation kind")

        evidence = []
        if EVIDENCE_ATTRIBUTE in values:
            evidence = _eval(values[EVIDENCE_ATTRIBUTE], f"evidence of edge '{xml_edge.get('id')}'")
            if not isinstance(evidence, (list, tuple, set)):
                raise ValueError(f"Evidence of edge '{xml_edge.get('id')}' is no list of event identifiers")

        graph.add_edge(xml_edge.get("source"), xml_edge.get("target"), RelationKinds.parse(relation),
                       weight=int(float(xml_edge.get("weight", "1"))), evidence=[str(e) for e in evidence])

    logger.debug(f"Imported {graph.node_count} nodes and {graph.edge_count} edges from {filepath}.")
    return graph
