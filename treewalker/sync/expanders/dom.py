"""XML DOM expansion function.

Walks ``xml.dom.minidom`` trees node by node, in document order.
"""

from typing import Any, List


def dom_children(node: Any) -> List[Any]:
    """Return the child nodes of a DOM node.

    Text, comment and processing-instruction nodes are children like
    elements are. Values without ``childNodes`` have no children.

    Example:
        >>> doc = xml.dom.minidom.parseString("<a><b/></a>")
        >>> [n.nodeName for n in walk(doc, dom_children)]
        ['#document', 'a', 'b']
    """
    child_nodes = getattr(node, "childNodes", None)
    if not child_nodes:
        return []
    return list(child_nodes)
