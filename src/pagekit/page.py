"""A single page of a site: source, rendered content and meta.

Pages are usually built with one of the loaders::

    from pagekit.page import load_page, load_virtual_page

    page = load_page("content/about.md")
    note = load_virtual_page("virtual/note.md", "# Hello\\n\\nWorld.")

A page on disk can be refreshed in place; the reload is all-or-nothing,
so a broken edit never clobbers a page that is already being served.
"""

from __future__ import annotations

import logging
import math
import os
import threading
from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

from pagekit.exceptions import PageNotFoundError
from pagekit.parsers import ParserRegistry, default_registry
from pagekit.timeutil import ZERO_TIME, parse_time
from pagekit.types import StringArrayer

logger = logging.getLogger(__name__)

NOT_FOUND_ERRORS = (FileNotFoundError, NotADirectoryError)


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return _format_float(value)
    return str(value)


def _format_float(value: float) -> str:
    # Shortest round-trip digits, never in exponent form.
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _stat_mod_time(path: str) -> datetime:
    return datetime.fromtimestamp(os.stat(path).st_mtime, tz=UTC)


@dataclass(eq=False)
class Page:
    """One content unit, backed by a file or held only in memory.

    ``meta`` and ``content`` are set by ``parse``; a failed parse leaves
    every field as it was.

    Args:
        path: Source path as loaded; for virtual pages any unique path.
            Must have a file extension, which selects the parser.
        virtual: True if the page does not exist on disk.
        unlisted: True if the page should be left out of listings.
        registry: Parsers by extension. Defaults to the standard set.
    """

    path: str
    virtual: bool = False
    unlisted: bool = False
    mod_time: datetime = ZERO_TIME
    source: bytes = b""
    content: str = ""
    meta: dict[str, Any] = field(default_factory=dict)
    registry: ParserRegistry = field(default_factory=default_registry, repr=False)
    is_index: bool = field(init=False, default=False)
    _lock: threading.Lock = field(init=False, repr=False, default_factory=threading.Lock)

    def __post_init__(self) -> None:
        if not self.path:
            raise ValueError("Page requires a source path")
        self.path = os.fspath(self.path)
        stem, ext = os.path.splitext(os.path.basename(self.path))
        if not ext:
            raise ValueError(f"No file extension in source path: {self.path}")
        self.is_index = stem.lower() == "index"

    def __str__(self) -> str:
        times = []
        if (created := self.created) is not None:
            times.append(f"Created: {created}")
        if (updated := self.updated) is not None:
            times.append(f"Updated: {updated}")
        times.append(f"ModTime: {self.mod_time}")
        return f"{self.path}: {self.title} ({'; '.join(times)})"

    def load(self) -> None:
        """Read source and mod time from disk without parsing.

        Raises:
            OSError: If the file cannot be stat'ed or read.
        """
        mod_time = _stat_mod_time(self.path)
        with open(self.path, "rb") as fh:
            source = fh.read()
        self.source = source
        self.mod_time = mod_time

    def parse(self) -> None:
        """Parse ``source`` into ``meta`` and ``content``.

        The parser is chosen by extension, case-insensitively; unknown
        extensions get the registry's default (verbatim) parser. A true
        boolean ``Unlisted`` in the meta marks the page unlisted.

        Raises:
            MetaError: If the parser rejects the meta block.
        """
        parser = self.registry.parser_for(self.path)
        result = parser.parse(self.source)
        self.meta = result.meta
        self.content = result.content
        if self.meta_bool("Unlisted"):
            self.unlisted = True

    def refresh(self) -> bool:
        """Reload from disk if the file's mod time has changed.

        Returns True if the page was reloaded, False if nothing was done
        (virtual page, or unchanged file). The reload happens on a scratch
        copy and is only swapped in once it has fully succeeded.

        Raises:
            OSError: If the file cannot be stat'ed or read, including
                ``FileNotFoundError`` if it is gone.
            MetaError: If the new source has a bad meta block.
        """
        if self.virtual:
            return False

        with self._lock:
            if _stat_mod_time(self.path) == self.mod_time:
                return False

            fresh = load_page(self.path, self.registry)
            self.source = fresh.source
            self.mod_time = fresh.mod_time
            self.meta = fresh.meta
            self.content = fresh.content
            self.unlisted = fresh.unlisted

        logger.debug("Refreshed page %s", self.path)
        return True

    # Meta access. Keys are tried exactly, then lowercased, then uppercased.

    def meta_value(self, key: str) -> Any:
        """Return the raw meta value for *key*, or ``None``."""
        for k in (key, key.lower(), key.upper()):
            value = self.meta.get(k)
            if value is not None:
                return value
        return None

    def meta_string(self, key: str) -> str:
        """Return the meta value for *key* as a string; ``""`` if absent."""
        value = self.meta_value(key)
        if value is None:
            return ""
        return _stringify(value)

    def meta_bool(self, key: str) -> bool:
        """Return the meta value for *key* if it is a real bool, else False."""
        value = self.meta_value(key)
        return value if isinstance(value, bool) else False

    def meta_time(self, key: str) -> datetime | None:
        """Return the meta value for *key* as a UTC datetime, if it is one."""
        value = self.meta_value(key)
        if value is None:
            return None
        parsed = parse_time(value)
        if parsed is None and not isinstance(value, str):
            parsed = parse_time(_stringify(value))
        return parsed

    def meta_string_array(self, key: str) -> list[str]:
        """Return the meta value for *key* as a list of strings.

        Lists are stringified elementwise, strings are split on commas
        and trimmed, and ``StringArrayer`` values list themselves. Any
        other value gives an empty list.
        """
        value = self.meta_value(key)
        if value is None:
            return []
        if isinstance(value, str):
            return [s.strip() for s in value.split(",")]
        if isinstance(value, (list, tuple)):
            return [_stringify(v) for v in value]
        if isinstance(value, StringArrayer):
            return list(value.string_array())
        return []

    @property
    def title(self) -> str:
        """Meta Title, or the file name without extension."""
        title = self.meta_string("Title")
        if not title:
            stem, _ = os.path.splitext(os.path.basename(self.path))
            title = stem
        return title

    @property
    def author(self) -> str:
        return self.meta_string("Author")

    @property
    def description(self) -> str:
        return self.meta_string("Description")

    @property
    def summary(self) -> str:
        return self.meta_string("Summary")

    @property
    def keywords(self) -> str:
        """Keywords as a single string, as used in HTML meta elements."""
        return self.meta_string("Keywords")

    @property
    def tags(self) -> list[str]:
        return self.meta_string_array("Tags")

    @property
    def created(self) -> datetime | None:
        return self.meta_time("Created")

    @property
    def updated(self) -> datetime | None:
        return self.meta_time("Updated")

    @property
    def time(self) -> datetime:
        """The newer of Created and Updated, falling back to ``mod_time``."""
        created = self.created
        updated = self.updated
        if created is None:
            return updated if updated is not None else self.mod_time
        if updated is not None and updated > created:
            return updated
        return created


def load_page(path: str, registry: ParserRegistry | None = None) -> Page:
    """Load and parse the page at *path*.

    Raises:
        ValueError: If *path* is empty or has no extension.
        OSError: If the file cannot be read.
        MetaError: If the meta block cannot be decoded.
    """
    page = Page(path, registry=registry if registry is not None else default_registry())
    page.load()
    page.parse()
    logger.debug("Loaded page %s", page.path)
    return page


def load_any_page(stem: str, registry: ParserRegistry | None = None) -> Page:
    """Load the first page found at *stem* plus a registered extension.

    Extensions are tried in registry order and matched exactly, so the
    registry needs an entry per extension case that should be found.

    Raises:
        ValueError: If *stem* is empty.
        PageNotFoundError: If no file exists for any extension.
        OSError: For filesystem errors other than not-found.
        MetaError: If the first file found has a bad meta block.
    """
    if not stem:
        raise ValueError("load_any_page requires a source path")
    registry = registry if registry is not None else default_registry()
    for ext in registry.extensions():
        try:
            return load_page(stem + ext, registry)
        except NOT_FOUND_ERRORS:
            continue
    raise PageNotFoundError(f"No page found for {stem}")


def load_virtual_page(
    path: str,
    source: bytes | str,
    registry: ParserRegistry | None = None,
) -> Page:
    """Build and parse a page that exists only in memory.

    *path* should still carry an extension to select the parser, e.g.
    ``"virtual/document.md"`` for Markdown.

    Raises:
        ValueError: If *path* is empty or has no extension.
        MetaError: If the meta block cannot be decoded.
    """
    if isinstance(source, str):
        source = source.encode("utf-8")
    page = Page(
        path,
        virtual=True,
        source=source,
        mod_time=datetime.now(UTC),
        registry=registry if registry is not None else default_registry(),
    )
    page.parse()
    return page
