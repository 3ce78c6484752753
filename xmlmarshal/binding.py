"""Binding abstractions shared by the marshaller and the unmarshaller.

A :class:`BindingProvider` turns a runtime type into a
:class:`BindingContext`; the context hands out an :class:`XmlWriter` and an
:class:`XmlReader` for that type. The marshaller and unmarshaller only ever
talk to these protocols, so a provider backed by code generation or by
hand-registered schemas can replace the default reflective one.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import IO, Any, Callable, Generic, NamedTuple, Protocol, TypeVar, overload
from xml.dom.minidom import Document, Node

T = TypeVar("T")
C = TypeVar("C", bound=type)

ROOT_ATTRIBUTE = "__xml_root__"


class QName(NamedTuple):
    """Qualified XML name. An empty ``namespace`` means no namespace."""

    namespace: str
    local: str

    def __str__(self) -> str:
        if self.namespace:
            return f"{{{self.namespace}}}{self.local}"
        return self.local


@dataclass(frozen=True)
class NamedElement(Generic[T]):
    """A value paired with an explicit element name for one call.

    Lets a type without an intrinsic root mapping be written or read as a
    standalone document, without touching the type's own mapping.
    """

    name: QName
    declared_type: type[T]
    value: T


def _decapitalize(name: str) -> str:
    if len(name) > 1 and name[0].isupper() and name[1].isupper():
        return name
    return name[:1].lower() + name[1:]


@overload
def xml_root(cls: C, /) -> C: ...


@overload
def xml_root(*, name: str = "", namespace: str = "") -> Callable[[C], C]: ...


def xml_root(cls: Any = None, /, *, name: str = "", namespace: str = "") -> Any:
    """Declare the intrinsic root element of a dataclass.

    Usable bare or with arguments. Without ``name`` the element is named
    after the class with its first letter lowered (``Point`` -> ``point``,
    ``URLInfo`` stays ``URLInfo``). The mapping is not inherited by
    subclasses.

        >>> @xml_root
        ... @dataclass
        ... class Point:
        ...     x: int
        ...     y: int
        >>> root_of(Point)
        QName(namespace='', local='point')
    """

    def wrap(target: C) -> C:
        setattr(target, ROOT_ATTRIBUTE, QName(namespace, name or _decapitalize(target.__name__)))
        return target

    if cls is None:
        return wrap
    return wrap(cls)


def root_of(cls: type) -> QName | None:
    """Return the root element declared on ``cls`` itself, if any."""
    return cls.__dict__.get(ROOT_ATTRIBUTE)


class XmlWriter(Protocol):
    formatted: bool
    encoding: str

    def write(self, value: Any, out: IO[str]) -> None:
        """Write a bare object or a :class:`NamedElement` as XML text."""
        ...

    def write_document(self, value: Any, document: Document) -> None:
        """Append a bare object or a :class:`NamedElement` to an empty document."""
        ...


class XmlReader(Protocol):
    def read(self, source: str | bytes) -> Any:
        """Parse XML text whose root matches the bound type's intrinsic root."""
        ...

    def read_node(self, node: Node, declared_type: type[T]) -> NamedElement[T]:
        """Bind a DOM node to ``declared_type`` whatever the node's own name."""
        ...


class BindingContext(Protocol):
    def create_writer(self) -> XmlWriter: ...

    def create_reader(self) -> XmlReader: ...


class BindingProvider(Protocol):
    def new_context(self, cls: type) -> BindingContext:
        """Build a context for ``cls``; raise ``UnsupportedTypeError`` if it cannot be bound."""
        ...
