"""Shared result and capability types."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable


@dataclass(frozen=True)
class ParseResult:
    """Parsed meta map and rendered HTML content."""

    meta: dict[str, Any] = field(default_factory=dict)
    content: str = ""


@runtime_checkable
class Parser(Protocol):
    """Anything that turns page source into a ``ParseResult``."""

    def parse(self, source: bytes | str) -> ParseResult: ...


@runtime_checkable
class StringArrayer(Protocol):
    """Custom meta values that know how to list themselves as strings."""

    def string_array(self) -> list[str]: ...
