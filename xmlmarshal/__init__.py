"""xmlmarshal - generic conversion between dataclasses and XML text or DOM documents.

This module provides Marshaller and Unmarshaller, type-parameterized
components that bind a dataclass to an XML mapping derived from its fields,
optionally under a root element name and namespace the type does not
declare itself. configure_logging routes their structlog events through
the stdlib "xmlmarshal" logger for applications that want them.
"""

from xmlmarshal.binding import NamedElement, QName, root_of, xml_root
from xmlmarshal.config import MarshalSettings
from xmlmarshal.errors import (
    DocumentError,
    MissingRootError,
    UnsupportedTypeError,
    XmlBindingError,
    XmlParseError,
    XmlWriteError,
)
from xmlmarshal.logging import configure_logging
from xmlmarshal.marshaller import Marshaller
from xmlmarshal.provider import DataclassBindingProvider
from xmlmarshal.result import BindingFailure, BindingResult
from xmlmarshal.unmarshaller import Unmarshaller

__all__ = [
    "BindingFailure",
    "BindingResult",
    "DataclassBindingProvider",
    "DocumentError",
    "MarshalSettings",
    "Marshaller",
    "MissingRootError",
    "NamedElement",
    "QName",
    "Unmarshaller",
    "UnsupportedTypeError",
    "XmlBindingError",
    "XmlParseError",
    "XmlWriteError",
    "configure_logging",
    "root_of",
    "xml_root",
]
