"""Meta-block interception between markdown-it and its HTML renderer.

markdown-it produces a flat token stream. ``iter_blocks`` groups it into
top-level blocks, each tagged with a ``BlockKind``, and ``MetaInterceptor``
walks those blocks, handing each one to the real renderer unless it is
the meta block (or a heading it wants to capture as the title).

Meta at start (the default): the meta block is the first code block, as
long as nothing but a single heading precedes it. Meta at end: the meta
block is the last block of the document, and only if it is a code block.
"""

from __future__ import annotations

from collections.abc import Iterator, MutableMapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from markdown_it.renderer import RendererHTML
from markdown_it.token import Token
from markdown_it.utils import OptionsDict

_CODE_TOKENS = frozenset({"fence", "code_block"})


class BlockKind(Enum):
    HEADING = "heading"
    CODE = "code"
    OTHER = "other"


@dataclass(frozen=True)
class BlockEvent:
    """One top-level block: its kind and the tokens that make it up."""

    kind: BlockKind
    tokens: Sequence[Token]

    @property
    def code(self) -> str:
        """Raw text of a code block, exactly as written."""
        return self.tokens[0].content

    @property
    def lang(self) -> str:
        """Declared language of a fenced block; empty for indented code."""
        token = self.tokens[0]
        if token.type != "fence" or not token.info:
            return ""
        parts = token.info.split()
        return parts[0] if parts else ""

    @property
    def inline(self) -> Sequence[Token]:
        """Inline child tokens of a heading."""
        for token in self.tokens:
            if token.type == "inline":
                return token.children or []
        return []


def _classify(tokens: Sequence[Token]) -> BlockEvent:
    first = tokens[0]
    if first.type in _CODE_TOKENS:
        return BlockEvent(BlockKind.CODE, tokens)
    if first.type == "heading_open":
        return BlockEvent(BlockKind.HEADING, tokens)
    return BlockEvent(BlockKind.OTHER, tokens)


def iter_blocks(tokens: Sequence[Token]) -> Iterator[BlockEvent]:
    """Split a block token stream into top-level ``BlockEvent`` groups."""
    start = 0
    depth = 0
    for i, token in enumerate(tokens):
        depth += token.nesting
        if depth == 0:
            yield _classify(tokens[start : i + 1])
            start = i + 1


class MetaInterceptor:
    """Passes blocks through to *delegate*, holding back the meta block.

    One interceptor serves one document. After ``render`` returns, the
    candidate meta block is in ``meta_text``/``meta_lang`` (empty if none
    was found) and the captured title, if any, in ``header_title``.
    """

    def __init__(
        self,
        delegate: RendererHTML,
        options: OptionsDict,
        env: MutableMapping[str, Any],
        *,
        meta_at_end: bool = False,
    ) -> None:
        self.delegate = delegate
        self.options = options
        self.env = env
        self.meta_at_end = meta_at_end

        self.blocks = 0
        self.have_meta = False
        self.meta_text = ""
        self.meta_lang = ""
        self.header_title = ""

        self._pending = ""
        self._out: list[str] = []

    def render(self, tokens: Sequence[Token]) -> str:
        """Render a full token stream, returning the visible HTML."""
        for event in iter_blocks(tokens):
            self.dispatch(event)
        return "".join(self._out)

    def dispatch(self, event: BlockEvent) -> None:
        if event.kind is BlockKind.HEADING:
            self.heading(event)
        elif event.kind is BlockKind.CODE:
            self.code_block(event)
        else:
            self.block(event)

    def heading(self, event: BlockEvent) -> None:
        if self.blocks == 0 and not self.header_title:
            self.header_title = self.delegate.renderInline(
                event.inline, self.options, self.env
            )
        self.block(event)

    def code_block(self, event: BlockEvent) -> None:
        if self.meta_at_end:
            # A later code block proves the pending one was not last.
            if self.have_meta:
                self._flush()
            self._capture(event)
            self._pending = self._render(event)
            return

        eligible = self.blocks == 0 or (self.blocks == 1 and self.header_title != "")
        if eligible and not self.have_meta:
            self._capture(event)
            return
        self.block(event)

    def block(self, event: BlockEvent) -> None:
        self._commit()
        self._write(self._render(event))

    def _commit(self) -> None:
        self.blocks += 1
        if self.meta_at_end and self.have_meta:
            self._flush()

    def _capture(self, event: BlockEvent) -> None:
        self.have_meta = True
        self.meta_text = event.code
        self.meta_lang = event.lang

    def _flush(self) -> None:
        self._write(self._pending)
        self.have_meta = False
        self.meta_text = ""
        self.meta_lang = ""
        self._pending = ""

    def _render(self, event: BlockEvent) -> str:
        return self.delegate.render(event.tokens, self.options, self.env)

    def _write(self, html: str) -> None:
        if self._out:
            self._out.append("\n")
        self._out.append(html)
