"""Exception hierarchy for binding, parsing and writing failures.

Every error carries a stable ``code`` that ends up in
:class:`xmlmarshal.result.BindingFailure`. None of these cross the public
:class:`~xmlmarshal.Marshaller` / :class:`~xmlmarshal.Unmarshaller` API;
they are caught, logged and collapsed there.
"""

from __future__ import annotations

from typing import Any


class XmlBindingError(Exception):
    """Base class for all binding failures."""

    code = "binding"

    def __init__(self, message: str, **detail: Any) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail


class UnsupportedTypeError(XmlBindingError):
    """A type cannot be analyzed into an XML mapping."""

    code = "unsupported_type"


class MissingRootError(XmlBindingError):
    """A bare write or read was attempted on a type without ``@xml_root``."""

    code = "missing_root"


class XmlParseError(XmlBindingError):
    """Input is not well-formed or does not match the expected mapping."""

    code = "parse"


class XmlWriteError(XmlBindingError):
    code = "write"


class DocumentError(XmlBindingError):
    """An empty DOM document could not be allocated."""

    code = "document"
