"""XML document factory and DOM helpers."""

from __future__ import annotations

from typing import Any
from xml.dom import DOMException, Node
from xml.dom.minidom import Document, Element, getDOMImplementation

from xmlmarshal.errors import DocumentError

TEXT_NODES = (Node.TEXT_NODE, Node.CDATA_SECTION_NODE)


def new_document() -> Document:
    """Return an empty, mutable DOM document (no document element)."""
    try:
        return getDOMImplementation().createDocument(None, None, None)
    except DOMException as exc:
        raise DocumentError(f"cannot create an empty document: {exc}") from exc


def append_tree(document: Document, parent: Element, tree: dict[str, Any]) -> None:
    """Append an element tree (see :mod:`xmlmarshal.mapping`) under ``parent``."""
    for name, value in tree.items():
        for item in value if isinstance(value, list) else [value]:
            child = parent.appendChild(document.createElement(name))
            if isinstance(item, dict):
                append_tree(document, child, item)
            elif item:
                child.appendChild(document.createTextNode(item))


def element_tree(element: Element) -> Any:
    """Read an element's content into an element tree, keyed by local name.

    Mirrors ``xmltodict.parse`` with attributes off and whitespace kept: a
    leaf yields its text (``None`` when empty), repeated children collapse
    into a list, and text between child elements is dropped.
    """
    children = [node for node in element.childNodes if node.nodeType == Node.ELEMENT_NODE]
    if not children:
        text = "".join(node.data for node in element.childNodes if node.nodeType in TEXT_NODES)
        return text or None
    tree: dict[str, Any] = {}
    for child in children:
        key = child.localName or child.tagName
        value = element_tree(child)
        if key not in tree:
            tree[key] = value
        elif isinstance(tree[key], list):
            tree[key].append(value)
        else:
            tree[key] = [tree[key], value]
    return tree
