"""Reflective mapping between dataclasses and element trees.

The element tree has the shape :mod:`xmltodict` produces and consumes: a
compound element is a ``dict`` keyed by child element name, a leaf is its
text (``None`` when empty), and a repeated child is a ``list``. Keys
starting with ``@`` or ``#`` (attributes, mixed text) are ignored on read.

Every ``init`` field of a dataclass maps to one unqualified child element,
in declaration order. ``field(metadata={"name": ...})`` renames the
element.
"""

from __future__ import annotations

import dataclasses
import datetime
import enum
import re
import types
import typing
from collections import deque
from decimal import Decimal, InvalidOperation
from typing import Any, Union

from xmlmarshal.binding import QName, root_of
from xmlmarshal.errors import UnsupportedTypeError, XmlParseError, XmlWriteError

SCALAR_TYPES = (str, int, float, bool, Decimal, datetime.date, datetime.datetime)
TRUE_VALUES = frozenset({"true", "1"})
FALSE_VALUES = frozenset({"false", "0"})

# Space never occurs in a namespace URI or an element name.
NAMESPACE_SEPARATOR = " "

_NAME_RE = re.compile(r"[^\W\d][\w.\-]*")


def is_valid_name(name: str) -> bool:
    """True for an unprefixed XML element name."""
    return bool(_NAME_RE.fullmatch(name))


def local_name(key: str, separator: str = NAMESPACE_SEPARATOR) -> str:
    return key.rpartition(separator)[2]


@dataclasses.dataclass(frozen=True)
class FieldMapping:
    attr: str
    element: str
    kind: type
    many: bool = False
    optional: bool = False
    has_default: bool = False

    @property
    def compound(self) -> bool:
        return dataclasses.is_dataclass(self.kind)


@dataclasses.dataclass(frozen=True)
class TypeMapping:
    cls: type
    root: QName | None
    fields: tuple[FieldMapping, ...]


def _unwrap(hint: Any, owner: type, attr: str) -> tuple[type, bool, bool]:
    """Reduce a field annotation to ``(kind, many, optional)``."""
    optional = many = False
    if typing.get_origin(hint) in (Union, types.UnionType):
        args = [arg for arg in typing.get_args(hint) if arg is not type(None)]
        if len(args) != 1:
            raise UnsupportedTypeError(
                f"{owner.__qualname__}.{attr}: unions of several types are not supported",
                type=owner.__qualname__,
                field=attr,
            )
        hint, optional = args[0], True
    if typing.get_origin(hint) is list:
        args = typing.get_args(hint)
        if len(args) != 1:
            raise UnsupportedTypeError(
                f"{owner.__qualname__}.{attr}: list fields need an item type",
                type=owner.__qualname__,
                field=attr,
            )
        hint, many = args[0], True
    # list[int] passes isinstance(..., type) on 3.10
    supported = (
        isinstance(hint, type)
        and typing.get_origin(hint) is None
        and (
            hint in SCALAR_TYPES
            or issubclass(hint, enum.Enum)
            or dataclasses.is_dataclass(hint)
        )
    )
    if not supported:
        raise UnsupportedTypeError(
            f"{owner.__qualname__}.{attr}: type {hint!r} has no XML mapping",
            type=owner.__qualname__,
            field=attr,
        )
    return hint, many, optional


def build_type_mapping(cls: type) -> TypeMapping:
    if not (isinstance(cls, type) and dataclasses.is_dataclass(cls)):
        raise UnsupportedTypeError(
            f"{getattr(cls, '__qualname__', cls)!r} is not a dataclass", type=repr(cls)
        )
    try:
        hints = typing.get_type_hints(cls)
    except (NameError, TypeError) as exc:
        raise UnsupportedTypeError(
            f"cannot resolve annotations of {cls.__qualname__}: {exc}", type=cls.__qualname__
        ) from exc

    fields = []
    seen: set[str] = set()
    for field in dataclasses.fields(cls):
        if not field.init:
            continue
        element = field.metadata.get("name", field.name)
        if not is_valid_name(element) or element in seen:
            raise UnsupportedTypeError(
                f"{cls.__qualname__}.{field.name}: invalid or duplicate element name {element!r}",
                type=cls.__qualname__,
                field=field.name,
            )
        seen.add(element)
        kind, many, optional = _unwrap(hints[field.name], cls, field.name)
        has_default = (
            field.default is not dataclasses.MISSING
            or field.default_factory is not dataclasses.MISSING
        )
        fields.append(FieldMapping(field.name, element, kind, many, optional, has_default))

    if not fields:
        raise UnsupportedTypeError(
            f"{cls.__qualname__} has no fields to map", type=cls.__qualname__
        )
    return TypeMapping(cls, root_of(cls), tuple(fields))


def _dump_scalar(value: Any, kind: type) -> str:
    if kind is bool:
        return "true" if value else "false"
    if isinstance(value, enum.Enum):
        return str(value.value)
    if isinstance(value, datetime.date):
        return value.isoformat()
    return str(value)


def _load_scalar(text: str, kind: type, path: str) -> Any:
    try:
        if kind is str:
            return text
        if kind is bool:
            token = text.strip().lower()
            if token in TRUE_VALUES:
                return True
            if token in FALSE_VALUES:
                return False
            raise ValueError(f"invalid boolean {text!r}")
        if issubclass(kind, enum.Enum):
            for member in kind:
                if str(member.value) == text:
                    return member
            raise ValueError(f"{text!r} is not a valid {kind.__name__}")
        if kind is datetime.datetime:
            return datetime.datetime.fromisoformat(text.strip())
        if kind is datetime.date:
            return datetime.date.fromisoformat(text.strip())
        return kind(text.strip())
    except (ValueError, InvalidOperation) as exc:
        raise XmlParseError(f"{path}: {exc}", path=path) from exc


class Schema:
    """All type mappings reachable from one bound type.

    The whole graph is built and validated up front, so an unsupported
    nested type fails when the context is created rather than halfway
    through a write.
    """

    def __init__(self, cls: type) -> None:
        self.cls = cls
        self.mappings: dict[type, TypeMapping] = {}
        pending = deque([cls])
        while pending:
            current = pending.popleft()
            if current in self.mappings:
                continue
            mapping = build_type_mapping(current)
            self.mappings[current] = mapping
            pending.extend(f.kind for f in mapping.fields if f.compound)

    def mapping(self, cls: type) -> TypeMapping:
        try:
            return self.mappings[cls]
        except KeyError:
            raise UnsupportedTypeError(
                f"{cls.__qualname__} is not known to the context for {self.cls.__qualname__}",
                type=cls.__qualname__,
            ) from None

    def dump(self, obj: Any, cls: type, _active: frozenset[int] = frozenset()) -> dict[str, Any]:
        """Convert ``obj`` into the children of its element.

        ``_active`` holds the ids of the objects being dumped above this one;
        meeting one of them again means the object graph has a cycle.
        """
        if not isinstance(obj, cls):
            raise XmlWriteError(
                f"expected {cls.__qualname__}, got {type(obj).__qualname__}",
                type=cls.__qualname__,
            )
        if id(obj) in _active:
            raise XmlWriteError(
                f"cycle detected in the object graph at {cls.__qualname__}",
                type=cls.__qualname__,
            )
        active = _active | {id(obj)}
        tree: dict[str, Any] = {}
        for field in self.mapping(cls).fields:
            value = getattr(obj, field.attr)
            if value is None:
                continue
            if field.many:
                if not isinstance(value, (list, tuple)):
                    raise XmlWriteError(
                        f"{cls.__qualname__}.{field.attr} must be a list",
                        type=cls.__qualname__,
                        field=field.attr,
                    )
                items = [
                    self._dump_value(item, field, active) for item in value if item is not None
                ]
                if items:
                    tree[field.element] = items
            else:
                tree[field.element] = self._dump_value(value, field, active)
        return tree

    def _dump_value(self, value: Any, field: FieldMapping, active: frozenset[int]) -> Any:
        if field.compound:
            return self.dump(value, field.kind, active)
        return _dump_scalar(value, field.kind)

    def load(self, cls: type, body: Any, path: str = "") -> Any:
        """Build a ``cls`` instance from the children of its element."""
        path = path or cls.__qualname__
        if body is None or (isinstance(body, str) and not body.strip()):
            body = {}
        if not isinstance(body, dict):
            raise XmlParseError(f"{path}: expected child elements, got text", path=path)
        children = {
            local_name(key): value for key, value in body.items() if not key.startswith(("@", "#"))
        }

        kwargs: dict[str, Any] = {}
        for field in self.mapping(cls).fields:
            field_path = f"{path}/{field.element}"
            if field.element not in children:
                if field.has_default:
                    continue
                if field.many:
                    kwargs[field.attr] = []
                elif field.optional:
                    kwargs[field.attr] = None
                else:
                    raise XmlParseError(
                        f"{field_path}: missing required element", path=field_path
                    )
                continue
            raw = children[field.element]
            if field.many:
                items = raw if isinstance(raw, list) else [raw]
                kwargs[field.attr] = [self._load_value(item, field, field_path) for item in items]
            elif isinstance(raw, list):
                raise XmlParseError(f"{field_path}: element repeated", path=field_path)
            else:
                kwargs[field.attr] = self._load_value(raw, field, field_path)

        try:
            return cls(**kwargs)
        except (TypeError, ValueError) as exc:
            raise XmlParseError(f"{path}: {exc}", path=path) from exc

    def _load_value(self, raw: Any, field: FieldMapping, path: str) -> Any:
        if field.compound:
            return self.load(field.kind, raw, path)
        if isinstance(raw, dict):
            raise XmlParseError(f"{path}: unexpected child elements", path=path)
        if raw is None:
            if field.kind is str:
                return ""
            if field.optional and not field.many:
                return None
            raise XmlParseError(f"{path}: empty element", path=path)
        return _load_scalar(raw, field.kind, path)
