"""Frosted Markdown: Markdown to HTML plus an embedded meta block.

Usage::

    from pagekit.frostedmd import FrostedMarkdown

    result = FrostedMarkdown().parse(source)
    result.meta     # {"Title": "...", ...}
    result.content  # rendered HTML, meta block excluded

The meta block is a JSON or YAML code block. By default it is the first
code block, preceded at most by a single heading; with ``meta_at_end``
it must be the last block of the document. If the meta declares no
``Title`` (nor ``TITLE`` nor ``title``), a leading heading supplies it.
"""

from __future__ import annotations

import logging
from typing import Any, Literal

from markdown_it import MarkdownIt
from pydantic import BaseModel, ConfigDict, PrivateAttr

from pagekit.exceptions import MetaError
from pagekit.meta import decode_meta
from pagekit.renderer import MetaInterceptor
from pagekit.types import ParseResult

logger = logging.getLogger(__name__)

TITLE_KEYS = ("Title", "TITLE", "title")


def _build_markdown(preset: str) -> MarkdownIt:
    if preset == "basic":
        return MarkdownIt("commonmark")
    # Smart quotes and dashes, raw HTML, XHTML void tags, tables and
    # strikethrough: the "common" flavor.
    return MarkdownIt(
        "default",
        {"html": True, "xhtmlOut": True, "typographer": True},
    )


class FrostedMarkdown(BaseModel):
    """Frosted Markdown parser; implements the page ``Parser`` protocol.

    Args:
        meta_at_end: Look for the meta block at the end of the document
            instead of the start.
        preset: ``"common"`` for the typographic, HTML-friendly flavor or
            ``"basic"`` for plain CommonMark.
    """

    model_config = ConfigDict(extra="forbid")

    meta_at_end: bool = False
    preset: Literal["common", "basic"] = "common"

    _md: MarkdownIt = PrivateAttr()

    def model_post_init(self, __context: Any) -> None:
        self._md = _build_markdown(self.preset)

    def parse(self, source: bytes | str) -> ParseResult:
        """Convert *source* into a meta map and an HTML fragment.

        Raises:
            MetaError: If the meta block cannot be decoded. The rendered
                content is still available on the error's ``result``.
        """
        if isinstance(source, bytes):
            source = source.decode("utf-8", errors="replace")

        env: dict[str, Any] = {}
        tokens = self._md.parse(source, env)
        interceptor = MetaInterceptor(
            self._md.renderer,
            self._md.options,
            env,
            meta_at_end=self.meta_at_end,
        )
        content = interceptor.render(tokens)

        try:
            meta = decode_meta(interceptor.meta_text, interceptor.meta_lang)
        except MetaError as exc:
            logger.debug("Meta block rejected: %s", exc)
            exc.result = ParseResult(meta={}, content=content)
            raise

        if interceptor.header_title and all(meta.get(k) is None for k in TITLE_KEYS):
            meta["Title"] = interceptor.header_title

        return ParseResult(meta=meta, content=content)


def markdown_common(source: bytes | str) -> ParseResult:
    """Shorthand for ``FrostedMarkdown().parse(source)``."""
    return FrostedMarkdown().parse(source)


def markdown_basic(source: bytes | str) -> ParseResult:
    """Shorthand for ``FrostedMarkdown(preset="basic").parse(source)``."""
    return FrostedMarkdown(preset="basic").parse(source)
