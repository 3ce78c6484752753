from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum, IntEnum
from typing import Callable, Optional, Union

from xmlmarshal import xml_root


@xml_root
@dataclass
class Point:
    x: int
    y: int


@dataclass
class Pair:
    first: str
    second: str


class Color(Enum):
    RED = "red"
    GREEN = "green"


class Priority(IntEnum):
    LOW = 1
    HIGH = 2


@dataclass
class Address:
    street: str
    city: str
    zip_code: Optional[str] = field(default=None, metadata={"name": "zip"})


@xml_root(name="person", namespace="urn:people")
@dataclass
class Person:
    name: str
    age: int
    email: str | None = None
    addresses: list[Address] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    favorite: Color = Color.RED


@xml_root
@dataclass
class Measurement:
    label: str
    value: float
    exact: Decimal
    valid: bool
    taken_on: date
    recorded_at: datetime
    priority: Priority
    note: Optional[int] = None


@xml_root(name="node")
@dataclass
class TreeNode:
    name: str
    children: list["TreeNode"] = field(default_factory=list)


@xml_root
@dataclass
class Link:
    name: str
    next: Optional["Link"] = None


@xml_root
@dataclass
class URLInfo:
    href: str


@dataclass
class PointSubclass(Point):
    pass


@xml_root
@dataclass
class Empty:
    pass


@xml_root
@dataclass
class WithCallback:
    callback: Callable[[], None]


@xml_root
@dataclass
class WithUnion:
    value: Union[int, str]


@xml_root
@dataclass
class WithMapping:
    values: dict[str, int]


@xml_root
@dataclass
class WithBareList:
    values: list


@xml_root
@dataclass
class DuplicateNames:
    first: str
    second: str = field(default="", metadata={"name": "first"})


@xml_root
@dataclass
class BadName:
    value: str = field(default="", metadata={"name": "not a name"})


@dataclass
class Broken:
    callback: Callable[[], None]


@xml_root
@dataclass
class Outer:
    label: str
    inner: Broken


@xml_root
class NotADataclass:
    def __init__(self, x: int) -> None:
        self.x = x
