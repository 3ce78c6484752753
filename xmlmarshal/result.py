"""BindingResult and BindingFailure: the parallel, non-ambiguous result API.

The sentinel methods (``marshal_to_string`` and friends) collapse every
failure to ``""`` or ``None``. The ``try_*`` methods return these models
instead, so callers can tell a failure from a legitimately empty value and
one failure kind from another.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

from xmlmarshal.errors import XmlBindingError

T = TypeVar("T")


class BindingFailure(BaseModel):
    """Structured error payload within a BindingResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_exception(cls, exc: XmlBindingError) -> BindingFailure:
        return cls(code=exc.code, message=exc.message, detail=dict(exc.detail))


class BindingResult(BaseModel, Generic[T]):
    """Outcome of one marshal or unmarshal call.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"marshal_to_string"``).
        value: The produced XML text, document or object on success.
        error: Structured error if ``ok`` is False.
    """

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    ok: bool
    op: str
    value: T | None = None
    error: BindingFailure | None = None

    @classmethod
    def success(cls, op: str, value: Any) -> BindingResult[Any]:
        return cls(ok=True, op=op, value=value)

    @classmethod
    def failure(cls, op: str, exc: XmlBindingError) -> BindingResult[Any]:
        return cls(ok=False, op=op, error=BindingFailure.from_exception(exc))

    def unwrap_or(self, default: Any) -> Any:
        """Return the value on success, ``default`` otherwise."""
        return self.value if self.ok else default
