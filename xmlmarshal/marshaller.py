"""Generic object-to-XML marshaller."""

from __future__ import annotations

import io
from typing import Any, Generic, TypeVar, overload
from xml.dom.minidom import Document

import structlog

from xmlmarshal.binding import BindingProvider, NamedElement, QName, XmlWriter
from xmlmarshal.config import MarshalSettings
from xmlmarshal.dom import new_document
from xmlmarshal.errors import XmlBindingError
from xmlmarshal.provider import DataclassBindingProvider
from xmlmarshal.result import BindingResult

T = TypeVar("T")

logger = structlog.get_logger(__name__)


def _root_override(op: str, names: tuple[str, ...], *, required: bool) -> tuple[str, str]:
    """Map the positional name arguments to ``(namespace_uri, root_element_name)``."""
    if not names and not required:
        return "", ""
    if len(names) == 1:
        return "", names[0]
    if len(names) == 2:
        return names[0], names[1]
    expected = "1 or 2" if required else "0 to 2"
    raise TypeError(f"{op}() takes {expected} name arguments ({len(names)} given)")


class Marshaller(Generic[T]):
    """Converts objects of type ``T`` to XML text or DOM documents.

    Failures never raise: the string methods return ``""`` and the document
    method returns ``None``, and the cause is logged. Use the ``try_*``
    variants to get a :class:`~xmlmarshal.result.BindingResult` that tells
    a failure apart from a legitimately empty result.

    Examples:
        >>> Marshaller().marshal_to_string(Point(1, 2))
        '<?xml version="1.0" encoding="UTF-8"?>\\n<point>\\n    <x>1</x>\\n    <y>2</y>\\n</point>'

        >>> doc = Marshaller().marshal_to_document(Pair("a", "b"), "urn:test", "pair")
        >>> doc.documentElement.toxml()
        '<ns0:pair xmlns:ns0="urn:test"><first>a</first><second>b</second></ns0:pair>'
    """

    def __init__(
        self,
        provider: BindingProvider | None = None,
        settings: MarshalSettings | None = None,
    ) -> None:
        self.settings = settings or MarshalSettings()
        self.provider = provider or DataclassBindingProvider(self.settings)

    @overload
    def marshal_to_string(self, obj: T, /) -> str: ...

    @overload
    def marshal_to_string(self, obj: T, root_element_name: str, /) -> str: ...

    @overload
    def marshal_to_string(self, obj: T, namespace_uri: str, root_element_name: str, /) -> str: ...

    def marshal_to_string(self, obj: T, /, *names: str) -> str:
        """Marshal ``obj`` to indented UTF-8 XML text.

        Without names the type's own ``@xml_root`` element is used; with
        ``root_element_name`` (and optionally ``namespace_uri`` before it)
        ``obj`` is written under that element instead.

        Returns:
            The XML document, or ``""`` if ``obj`` could not be marshalled.
        """
        namespace_uri, root_element_name = _root_override(
            "marshal_to_string", names, required=False
        )
        return self.try_marshal_to_string(obj, namespace_uri, root_element_name).unwrap_or("")

    @overload
    def marshal_to_document(self, obj: T, root_element_name: str, /) -> Document | None: ...

    @overload
    def marshal_to_document(
        self, obj: T, namespace_uri: str, root_element_name: str, /
    ) -> Document | None: ...

    def marshal_to_document(self, obj: T, /, *names: str) -> Document | None:
        """Marshal ``obj`` into a new DOM document under the given root element.

        Returns:
            The document, or ``None`` if ``obj`` could not be marshalled.
        """
        namespace_uri, root_element_name = _root_override(
            "marshal_to_document", names, required=True
        )
        return self.try_marshal_to_document(obj, namespace_uri, root_element_name).unwrap_or(None)

    def try_marshal_to_string(
        self, obj: T, namespace_uri: str = "", root_element_name: str = ""
    ) -> BindingResult[str]:
        op = "marshal_to_string"
        buffer = io.StringIO()
        try:
            writer = self._writer_for(obj)
            writer.formatted = self.settings.formatted_output
            writer.encoding = self.settings.encoding
            writer.write(self._payload(obj, namespace_uri, root_element_name), buffer)
        except XmlBindingError as exc:
            return self._failed(op, obj, exc)
        return BindingResult.success(op, buffer.getvalue())

    def try_marshal_to_document(
        self, obj: T, namespace_uri: str = "", root_element_name: str = ""
    ) -> BindingResult[Document]:
        op = "marshal_to_document"
        try:
            document = new_document()
            writer = self._writer_for(obj)
            writer.write_document(self._payload(obj, namespace_uri, root_element_name), document)
        except XmlBindingError as exc:
            return self._failed(op, obj, exc)
        return BindingResult.success(op, document)

    def _writer_for(self, obj: T) -> XmlWriter:
        return self.provider.new_context(type(obj)).create_writer()

    @staticmethod
    def _payload(obj: T, namespace_uri: str, root_element_name: str) -> Any:
        if not namespace_uri and not root_element_name:
            return obj
        return NamedElement(QName(namespace_uri, root_element_name), type(obj), obj)

    @staticmethod
    def _failed(op: str, obj: Any, exc: XmlBindingError) -> BindingResult[Any]:
        logger.error(
            "marshal_failed",
            op=op,
            type=type(obj).__qualname__,
            code=exc.code,
            error=exc.message,
        )
        return BindingResult.failure(op, exc)
