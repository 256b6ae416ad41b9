"""File-backed content engine for small websites.

Markdown pages carry one embedded JSON or YAML meta block, which is
extracted instead of rendered::

    from pagekit import FrostedMarkdown

    result = FrostedMarkdown().parse(b"# Hello\\n\\n    Tags: news\\n\\nWorld.")
    result.meta     # {"Tags": "news", "Title": "Hello"}
    result.content  # "<h1>Hello</h1>\\n\\n<p>World.</p>\\n"

Pages wrap parsed sources and refresh themselves from disk; a Pageset
indexes many pages for listings and feeds::

    from pagekit import Pageset, load_page

    ps = Pageset([load_page("site/index.md"), load_page("site/news.md")])
    latest = ps.by_time()
"""

from pagekit.exceptions import (
    DuplicatePathError,
    MetaError,
    PageError,
    PageNotFoundError,
    PagesetIntegrityError,
)
from pagekit.frostedmd import FrostedMarkdown, markdown_basic, markdown_common
from pagekit.page import Page, load_any_page, load_page, load_virtual_page
from pagekit.pageset import Pageset, page_slice, reverse
from pagekit.parsers import ParserRegistry, VerbatimParser, default_registry
from pagekit.types import ParseResult

__all__ = [
    "DuplicatePathError",
    "FrostedMarkdown",
    "MetaError",
    "Page",
    "PageError",
    "PageNotFoundError",
    "ParseResult",
    "ParserRegistry",
    "Pageset",
    "PagesetIntegrityError",
    "VerbatimParser",
    "default_registry",
    "load_any_page",
    "load_page",
    "load_virtual_page",
    "markdown_basic",
    "markdown_common",
    "page_slice",
    "reverse",
]
