"""Exception types raised by pagekit."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pagekit.types import ParseResult


class PageError(Exception):
    """Base class for recoverable page and pageset errors."""


class MetaError(PageError, ValueError):
    """The meta block could not be decoded.

    When raised from a Markdown parse, ``result`` holds the rendered
    content with an empty meta map, so callers may keep the page body.
    """

    def __init__(self, message: str, result: ParseResult | None = None) -> None:
        super().__init__(message)
        self.result = result


class PageNotFoundError(PageError, FileNotFoundError):
    """No source file exists for the requested page."""


class DuplicatePathError(PageError, ValueError):
    """Two pages map to the same extension-stripped path key."""


class PagesetIntegrityError(RuntimeError):
    """A pageset holds pages that should never have been indexed together.

    Only reachable through programmer error: pages are unique by key when
    added through the normal methods, so a subset can only collide if a
    page's path was changed after it was indexed.
    """
