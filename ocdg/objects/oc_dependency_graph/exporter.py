'''
    Exports object-centric dependency graphs to GEXF 1.2 (https://gexf.net), so they can be opened in Gephi
    and read back by ocdg.objects.oc_dependency_graph.importer.

    Object types are stored as plain strings, object attributes and edge evidence as Python literals, which
    keeps attribute values and event identifiers intact through a round trip.
'''
from datetime import date
from typing import Dict, List

from lxml import etree

from ocdg import __version__
from ocdg.objects.oc_dependency_graph.obj import OCDG

GEXF_NS = "http://www.gexf.net/1.2draft"
GEXF_VERSION = "1.2"

TYPE_ATTRIBUTE = "type"
ATTRIBUTE_PREFIX = "attr:"
RELATION_ATTRIBUTE = "relation"
EVIDENCE_ATTRIBUTE = "evidence"


def _tag(name: str) -> str:
    return f"{{{GEXF_NS}}}{name}"


def _declare_attributes(graph_element, attribute_class: str, attributes: Dict[str, str]) -> None:
    declaration = etree.SubElement(graph_element, _tag("attributes"))
    declaration.set("class", attribute_class)
    for attribute_id, title in attributes.items():
        xml_attribute = etree.SubElement(declaration, _tag("attribute"))
        xml_attribute.set("id", attribute_id)
        xml_attribute.set("title", title)
        xml_attribute.set("type", "string")


def _add_attvalues(element, values: Dict[str, str]) -> None:
    attvalues = etree.SubElement(element, _tag("attvalues"))
    for attribute_id, value in values.items():
        attvalue = etree.SubElement(attvalues, _tag("attvalue"))
        attvalue.set("for", attribute_id)
        attvalue.set("value", value)


def _node_attribute_names(graph: OCDG) -> List[str]:
    names = dict()
    for node in graph.nodes.values():
        for name in node.attributes:
            names.setdefault(name, None)
    return list(names)


def export_ocdg(graph: OCDG, output_file_name: str, description: str = 'OCDG generated by ocdg') -> None:
    """
        Exports an OCDG to a GEXF file.

        Parameters:
            graph (OCDG): The object-centric dependency graph to export
            output_file_name (str): Path to the GEXF file to be written
            description (str, optional): Description stored in the meta data of the file
    """
    root = etree.Element(_tag("gexf"), nsmap={None: GEXF_NS})
    root.set("version", GEXF_VERSION)

    meta = etree.SubElement(root, _tag("meta"))
    meta.set("lastmodifieddate", date.today().isoformat())
    etree.SubElement(meta, _tag("creator")).text = f"ocdg {__version__}"
    etree.SubElement(meta, _tag("description")).text = description

    graph_element = etree.SubElement(root, _tag("graph"))
    graph_element.set("defaultedgetype", "directed")
    graph_element.set("mode", "static")

    attribute_names = _node_attribute_names(graph)
    node_attributes = {TYPE_ATTRIBUTE: TYPE_ATTRIBUTE}
    node_attributes.update({ATTRIBUTE_PREFIX + name: name for name in attribute_names})
    _declare_attributes(graph_element, "node", node_attributes)
    _declare_attributes(graph_element, "edge", {RELATION_ATTRIBUTE: RELATION_ATTRIBUTE,
                                                EVIDENCE_ATTRIBUTE: EVIDENCE_ATTRIBUTE})

    nodes = etree.SubElement(graph_element, _tag("nodes"))
    for node in graph.nodes.values():
        xml_node = etree.SubElement(nodes, _tag("node"))
        xml_node.set("id", node.id)
        xml_node.set("label", node.id)

        values = {TYPE_ATTRIBUTE: node.type}
        values.update({ATTRIBUTE_PREFIX + name: repr(value) for name, value in node.attributes.items()})
        _add_attvalues(xml_node, values)

    edges = etree.SubElement(graph_element, _tag("edges"))
    for idx, edge in enumerate(graph.edges()):
        xml_edge = etree.SubElement(edges, _tag("edge"))
        xml_edge.set("id", str(idx))
        xml_edge.set("source", edge.source)
        xml_edge.set("target", edge.target)
        xml_edge.set("label", edge.kind.value)
        xml_edge.set("weight", str(edge.weight))

        _add_attvalues(xml_edge, {RELATION_ATTRIBUTE: edge.kind.value,
                                  EVIDENCE_ATTRIBUTE: repr(sorted(edge.evidence))})

    tree = etree.ElementTree(root)
    tree.write(output_file_name, pretty_print=True, xml_declaration=True, encoding="UTF-8")
