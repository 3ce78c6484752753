"""Default binding provider: reflection over dataclasses, XML via xmltodict.

Text is rendered with :func:`xmltodict.unparse` and parsed with
:func:`xmltodict.parse`; DOM documents are built and read with
:mod:`xml.dom.minidom`. Both sides share the element tree shape defined in
:mod:`xmlmarshal.mapping`.
"""

from __future__ import annotations

import threading
from typing import IO, Any, TypeVar
from xml.dom import XMLNS_NAMESPACE, DOMException, Node
from xml.dom.minidom import Document
from xml.parsers.expat import ExpatError

import structlog
import xmltodict

from xmlmarshal.binding import NamedElement, QName
from xmlmarshal.config import MarshalSettings
from xmlmarshal.dom import append_tree, element_tree
from xmlmarshal.errors import MissingRootError, XmlParseError, XmlWriteError
from xmlmarshal.mapping import NAMESPACE_SEPARATOR, Schema, is_valid_name

T = TypeVar("T")

logger = structlog.get_logger(__name__)


def split_qname(key: str) -> QName:
    namespace, _, local = key.rpartition(NAMESPACE_SEPARATOR)
    return QName(namespace, local)


class DataclassXmlWriter:
    """Writes bound dataclass instances, bare or wrapped in a NamedElement."""

    def __init__(self, schema: Schema, settings: MarshalSettings) -> None:
        self._schema = schema
        self._settings = settings
        self.formatted = False
        self.encoding = "UTF-8"

    def _resolve(self, value: Any) -> tuple[QName, type, Any]:
        if isinstance(value, NamedElement):
            name, cls, obj = value.name, value.declared_type, value.value
        else:
            cls, obj = type(value), value
            name = self._schema.mapping(cls).root
            if name is None:
                raise MissingRootError(
                    f"{cls.__qualname__} declares no root element; "
                    "pass a root element name or decorate it with @xml_root",
                    type=cls.__qualname__,
                )
        if not is_valid_name(name.local):
            raise XmlWriteError(f"invalid root element name {str(name)!r}", root=str(name))
        return name, cls, obj

    def _dump(self, obj: Any, cls: type) -> dict[str, Any]:
        try:
            return self._schema.dump(obj, cls)
        except RecursionError as exc:
            raise XmlWriteError(
                f"{cls.__qualname__} is nested too deeply to write", type=cls.__qualname__
            ) from exc

    def _root_tag(self, name: QName) -> str:
        if name.namespace:
            return f"{self._settings.namespace_prefix}:{name.local}"
        return name.local

    def write(self, value: Any, out: IO[str]) -> None:
        name, cls, obj = self._resolve(value)
        body = self._dump(obj, cls)
        if name.namespace:
            body = {f"@xmlns:{self._settings.namespace_prefix}": name.namespace, **body}
        try:
            xmltodict.unparse(
                {self._root_tag(name): body},
                output=out,
                encoding=self.encoding,
                pretty=self.formatted,
                indent=self._settings.indent,
                newl=self._settings.newline,
                short_empty_elements=self._settings.short_empty_elements,
            )
        except (ValueError, TypeError, OSError, RecursionError) as exc:
            raise XmlWriteError(
                f"cannot write {cls.__qualname__}: {exc}", type=cls.__qualname__
            ) from exc

    def write_document(self, value: Any, document: Document) -> None:
        name, cls, obj = self._resolve(value)
        body = self._dump(obj, cls)
        try:
            if name.namespace:
                root = document.createElementNS(name.namespace, self._root_tag(name))
                root.setAttributeNS(
                    XMLNS_NAMESPACE, f"xmlns:{self._settings.namespace_prefix}", name.namespace
                )
            else:
                root = document.createElement(name.local)
            document.appendChild(root)
            append_tree(document, root, body)
        except (DOMException, RecursionError) as exc:
            raise XmlWriteError(
                f"cannot write {cls.__qualname__}: {exc}", type=cls.__qualname__
            ) from exc


class DataclassXmlReader:
    """Reads XML text or DOM nodes into bound dataclass instances."""

    def __init__(self, schema: Schema) -> None:
        self._schema = schema

    def read(self, source: str | bytes) -> Any:
        cls = self._schema.cls
        try:
            tree = xmltodict.parse(
                source,
                process_namespaces=True,
                namespace_separator=NAMESPACE_SEPARATOR,
                xml_attribs=False,
                strip_whitespace=False,
                disable_entities=True,
            )
        except (ExpatError, ValueError, TypeError) as exc:
            raise XmlParseError(f"malformed XML: {exc}", type=cls.__qualname__) from exc

        if not tree:
            raise XmlParseError("document has no root element", type=cls.__qualname__)
        (key, body), = tree.items()
        found = split_qname(key)
        expected = self._schema.mapping(cls).root
        if expected is None:
            raise MissingRootError(
                f"{cls.__qualname__} declares no root element; "
                "read it from a DOM node with an explicit type instead",
                type=cls.__qualname__,
            )
        if found != expected:
            raise XmlParseError(
                f"unexpected element {str(found)!r}, expected {str(expected)!r}",
                type=cls.__qualname__,
                element=str(found),
            )
        try:
            return self._schema.load(cls, body)
        except RecursionError as exc:
            raise XmlParseError(
                "document is nested too deeply to read", type=cls.__qualname__
            ) from exc

    def read_node(self, node: Node, declared_type: type[T]) -> NamedElement[T]:
        if node is not None and node.nodeType == Node.DOCUMENT_NODE:
            node = node.documentElement
        if node is None or node.nodeType != Node.ELEMENT_NODE:
            raise XmlParseError(
                "expected a document or an element node", type=declared_type.__qualname__
            )
        name = QName(node.namespaceURI or "", node.localName or node.tagName)
        try:
            value = self._schema.load(declared_type, element_tree(node))
        except RecursionError as exc:
            raise XmlParseError(
                "document is nested too deeply to read", type=declared_type.__qualname__
            ) from exc
        return NamedElement(name, declared_type, value)


class DataclassBindingContext:
    """Binding of one dataclass (and every dataclass it reaches)."""

    def __init__(self, cls: type, settings: MarshalSettings) -> None:
        self.schema = Schema(cls)
        self.settings = settings

    def create_writer(self) -> DataclassXmlWriter:
        return DataclassXmlWriter(self.schema, self.settings)

    def create_reader(self) -> DataclassXmlReader:
        return DataclassXmlReader(self.schema)


class DataclassBindingProvider:
    """Builds a :class:`DataclassBindingContext` per type.

    Contexts are built fresh on every call unless ``cache`` is on (it
    defaults to ``settings.cache_contexts``), in which case they are
    memoized per type. Only successfully built contexts are cached.
    """

    def __init__(
        self, settings: MarshalSettings | None = None, *, cache: bool | None = None
    ) -> None:
        self.settings = settings or MarshalSettings()
        self.cache = self.settings.cache_contexts if cache is None else cache
        self._contexts: dict[type, DataclassBindingContext] = {}
        self._lock = threading.Lock()

    def new_context(self, cls: type) -> DataclassBindingContext:
        if not self.cache:
            return self._build(cls)
        with self._lock:
            context = self._contexts.get(cls)
        if context is None:
            context = self._build(cls)
            with self._lock:
                context = self._contexts.setdefault(cls, context)
        return context

    def _build(self, cls: type) -> DataclassBindingContext:
        context = DataclassBindingContext(cls, self.settings)
        logger.debug("binding_context_built", type=cls.__qualname__, cached=self.cache)
        return context
