"""Parser registry mapping file extensions to page parsers."""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from pagekit.frostedmd import FrostedMarkdown
from pagekit.types import ParseResult, Parser

STANDARD_EXTENSIONS = (".md", ".MD", ".markdown", ".MARKDOWN", ".txt", ".TXT")


class VerbatimParser:
    """Returns its input unchanged as content, with an empty meta map."""

    def parse(self, source: bytes | str) -> ParseResult:
        if isinstance(source, bytes):
            source = source.decode("utf-8", errors="replace")
        return ParseResult(meta={}, content=source)


@dataclass(frozen=True)
class ExtParser:
    """An extension paired with the parser that handles it."""

    ext: str
    parser: Parser


class ParserRegistry:
    """Ordered mapping of file extensions to parsers.

    Lookup by path is case-insensitive and falls back to ``default``.
    Order matters for ``load_any_page``, which tries extensions in
    registration order and matches them exactly.
    """

    def __init__(
        self,
        entries: Iterable[ExtParser] = (),
        default: Parser | None = None,
    ) -> None:
        self._entries: list[ExtParser] = list(entries)
        self.default: Parser = default if default is not None else VerbatimParser()

    def register(self, ext: str, parser: Parser) -> None:
        """Register *parser* for *ext*, replacing any exact-match entry."""
        if not ext.startswith("."):
            raise ValueError(f"Extension must start with '.': {ext!r}")
        self._entries = [e for e in self._entries if e.ext != ext]
        self._entries.append(ExtParser(ext, parser))

    def get(self, ext: str) -> Parser | None:
        """Return the first parser for *ext* (case-insensitive), or ``None``."""
        wanted = ext.lower()
        for entry in self._entries:
            if entry.ext.lower() == wanted:
                return entry.parser
        return None

    def parser_for(self, path: str) -> Parser:
        """Return the parser for *path*'s extension, or the default parser."""
        parser = self.get(os.path.splitext(path)[1])
        return parser if parser is not None else self.default

    def extensions(self) -> list[str]:
        """Return the registered extensions in order."""
        return [e.ext for e in self._entries]

    def limit(self, extensions: Iterable[str]) -> ParserRegistry:
        """Return a new registry holding only *extensions*, in that order.

        Extensions are matched exactly; unknown ones are skipped.
        """
        have = {e.ext: e for e in self._entries}
        keep = [have[ext] for ext in extensions if ext in have]
        return ParserRegistry(keep, default=self.default)

    def __contains__(self, ext: str) -> bool:
        return self.get(ext) is not None

    def __iter__(self) -> Iterator[ExtParser]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)


def default_registry() -> ParserRegistry:
    """Build the standard registry: Markdown for .md, .markdown and .txt."""
    markdown = FrostedMarkdown()
    return ParserRegistry(
        (ExtParser(ext, markdown) for ext in STANDARD_EXTENSIONS),
        default=VerbatimParser(),
    )
