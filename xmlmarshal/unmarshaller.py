"""Generic XML-to-object unmarshaller."""

from __future__ import annotations

from typing import Any, Generic, TypeVar
from xml.dom.minidom import Node

import structlog

from xmlmarshal.binding import BindingProvider, XmlReader
from xmlmarshal.errors import XmlBindingError
from xmlmarshal.provider import DataclassBindingProvider
from xmlmarshal.result import BindingResult

T = TypeVar("T")

logger = structlog.get_logger(__name__)


class Unmarshaller(Generic[T]):
    """Converts XML text or DOM nodes to objects of type ``T``.

    Failures never raise: both methods return ``None`` and log the cause.
    The ``try_*`` variants return a :class:`~xmlmarshal.result.BindingResult`
    instead.
    """

    def __init__(self, provider: BindingProvider | None = None) -> None:
        self.provider = provider or DataclassBindingProvider()

    def unmarshal(self, xml: str | bytes, target_type: type[T]) -> T | None:
        """Parse ``xml`` into a ``target_type`` instance.

        The document's root element must be the one ``target_type``
        declares with ``@xml_root``.
        """
        return self.try_unmarshal(xml, target_type).unwrap_or(None)

    def unmarshal_from_document(self, node: Node, target_type: type[T]) -> T | None:
        """Bind an already parsed DOM node to ``target_type``.

        ``node`` may be a whole document or an element taken out of a
        larger one; its element name is not checked, so this also reads
        types without an ``@xml_root``.
        """
        return self.try_unmarshal_from_document(node, target_type).unwrap_or(None)

    def try_unmarshal(self, xml: str | bytes, target_type: type[T]) -> BindingResult[T]:
        op = "unmarshal"
        try:
            value = self._reader_for(target_type).read(xml)
        except XmlBindingError as exc:
            return self._failed(op, target_type, exc)
        return BindingResult.success(op, value)

    def try_unmarshal_from_document(self, node: Node, target_type: type[T]) -> BindingResult[T]:
        op = "unmarshal_from_document"
        try:
            value = self._reader_for(target_type).read_node(node, target_type).value
        except XmlBindingError as exc:
            return self._failed(op, target_type, exc)
        return BindingResult.success(op, value)

    def _reader_for(self, target_type: type[T]) -> XmlReader:
        return self.provider.new_context(target_type).create_reader()

    @staticmethod
    def _failed(op: str, target_type: Any, exc: XmlBindingError) -> BindingResult[Any]:
        logger.error(
            "unmarshal_failed",
            op=op,
            type=getattr(target_type, "__qualname__", repr(target_type)),
            code=exc.code,
            error=exc.message,
        )
        return BindingResult.failure(op, exc)
