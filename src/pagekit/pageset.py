"""Pagesets: keyed, cached collections of pages.

Usage::

    from pagekit.page import load_page
    from pagekit.pageset import Pageset

    ps = Pageset([load_page("site/index.md"), load_page("site/about.md")])
    ps.by_time()           # newest first, unlisted pages excluded
    ps.tag_subset("news")  # a new Pageset sharing the same Page objects

Pages are keyed by path with the extension stripped, so a set cannot
hold both ``foo/bar.md`` and ``foo/bar.txt``. Sorted views and subsets
are computed lazily and cached until the next mutation.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime

from pagekit.exceptions import DuplicatePathError, PagesetIntegrityError
from pagekit.page import NOT_FOUND_ERRORS, Page, load_any_page
from pagekit.parsers import ParserRegistry, default_registry

logger = logging.getLogger(__name__)


def page_key(path: str) -> str:
    """Return the pageset key for *path*: the path without its extension."""
    return os.path.splitext(path)[0]


def _path_sort_key(page: Page) -> tuple[int, bool, str]:
    # Shallower first, then index pages, then plain string order.
    return (page.path.count("/"), not page.is_index, page.path)


def _sorted_newest_first(
    pages: Iterable[Page], time_of: Callable[[Page], datetime]
) -> tuple[Page, ...]:
    # Stable sorts: ties on time keep their path order.
    by_path = sorted(pages, key=_path_sort_key)
    return tuple(sorted(by_path, key=time_of, reverse=True))


@dataclass
class _Cache:
    listed: list[Page] | None = None
    by_path: tuple[Page, ...] | None = None
    by_created: tuple[Page, ...] | None = None
    by_mod_time: tuple[Page, ...] | None = None
    by_time: tuple[Page, ...] | None = None
    listed_subset: Pageset | None = None
    path_subsets: dict[tuple[str, str], Pageset] = field(default_factory=dict)
    tag_subsets: dict[str, Pageset] = field(default_factory=dict)
    tags: list[str] | None = None


class Pageset:
    """A set of pages that may be sorted, filtered and updated.

    Sorted views (``by_path``, ``by_created``, ``by_mod_time``,
    ``by_time``) exclude unlisted pages and are cached until the next
    ``add_page``, ``remove_page`` or effective ``refresh_page``.

    Subsets share Page objects with their parent, but adding or removing
    pages on a subset never affects the parent; mutate the master set.

    A Pageset does no locking of its own. Callers must serialize
    mutations against concurrent readers. Individual pages do guard
    their own refreshes.

    Args:
        pages: Pages to index. Keys (extension-stripped paths) must be
            unique.
        registry: Parsers used when ``refresh_page`` loads a page that is
            not yet in the set. Defaults to the standard set.

    Raises:
        DuplicatePathError: If two pages share a key.
    """

    def __init__(
        self,
        pages: Iterable[Page] = (),
        *,
        registry: ParserRegistry | None = None,
    ) -> None:
        self.registry = registry if registry is not None else default_registry()
        self._pages: dict[str, Page] = {}
        for page in pages:
            key = page_key(page.path)
            if key in self._pages:
                raise DuplicatePathError(
                    f"Duplicate path for {key}: {self._pages[key].path} and {page.path}"
                )
            self._pages[key] = page
        self._cache = _Cache()

    def __len__(self) -> int:
        """Number of pages, unlisted ones included."""
        return len(self._pages)

    def __contains__(self, key: str) -> bool:
        return key in self._pages

    def __repr__(self) -> str:
        return f"Pageset({len(self._pages)} pages)"

    def page(self, key: str) -> Page | None:
        """Return the page at *key*, or ``None``."""
        return self._pages.get(key)

    def keys(self) -> list[str]:
        return list(self._pages)

    def add_page(self, page: Page) -> None:
        """Add *page*, replacing any page with the same key."""
        self._pages[page_key(page.path)] = page
        self._clear_cache()

    def remove_page(self, key: str) -> None:
        """Remove the page at *key*, if any."""
        self._pages.pop(key, None)
        self._clear_cache()

    def refresh_page(self, key: str) -> Page:
        """Bring the page at *key* up to date with the disk.

        An existing page is refreshed in place. If its file is gone, the
        page is dropped and any other registered extension is tried for
        the same key, so ``foo.md`` may be replaced by ``foo.txt``. A key
        not yet in the set is loaded the same way.

        Raises:
            PageNotFoundError: If no file exists for *key*.
            MetaError: If the file has a bad meta block. An existing page
                is kept unchanged.
            OSError: For other filesystem errors.
        """
        page = self._pages.get(key)
        if page is not None:
            old_mod_time = page.mod_time
            try:
                page.refresh()
            except NOT_FOUND_ERRORS:
                logger.info("Page source gone, removing %s", page.path)
                self.remove_page(key)
            else:
                if page.mod_time != old_mod_time:
                    self._clear_cache()
                return page

        page = load_any_page(key, self.registry)
        logger.info("Loaded page %s", page.path)
        self.add_page(page)
        return page

    def _clear_cache(self) -> None:
        self._cache = _Cache()

    def _listed_pages(self) -> list[Page]:
        if self._cache.listed is None:
            self._cache.listed = [p for p in self._pages.values() if not p.unlisted]
        return self._cache.listed

    def _subset(self, pages: Iterable[Page], label: str) -> Pageset:
        try:
            return Pageset(pages, registry=self.registry)
        except DuplicatePathError as exc:
            raise PagesetIntegrityError(f"{label} failed for Pageset: {exc}") from exc

    def tags(self) -> list[str]:
        """Unique lowercase tags of all listed pages, alpha-sorted."""
        if self._cache.tags is None:
            tags = {t.lower() for p in self._listed_pages() for t in p.tags}
            self._cache.tags = sorted(tags)
        return self._cache.tags

    def listed_subset(self) -> Pageset:
        """A new Pageset holding only the pages not marked unlisted."""
        if self._cache.listed_subset is None:
            self._cache.listed_subset = self._subset(self._listed_pages(), "ListedSubset")
        return self._cache.listed_subset

    def tag_subset(self, tag: str) -> Pageset:
        """A new Pageset of the pages carrying *tag*, case-insensitively."""
        tag = tag.lower()
        subset = self._cache.tag_subsets.get(tag)
        if subset is None:
            pages = [
                p for p in self._pages.values() if any(t.lower() == tag for t in p.tags)
            ]
            subset = self._subset(pages, "TagSubset")
            self._cache.tag_subsets[tag] = subset
        return subset

    def path_subset(self, prefix: str, trim: str = "") -> Pageset:
        """A new Pageset of the pages whose path starts with *prefix*.

        If *trim* is given it is removed from the start of each path
        before comparing.
        """
        cache_key = (trim, prefix)
        subset = self._cache.path_subsets.get(cache_key)
        if subset is None:
            pages = [
                p for p in self._pages.values() if p.path.removeprefix(trim).startswith(prefix)
            ]
            subset = self._subset(pages, "PathSubset")
            self._cache.path_subsets[cache_key] = subset
        return subset

    def by_path(self) -> tuple[Page, ...]:
        """Listed pages by path depth, then index pages first, then path."""
        if self._cache.by_path is None:
            logger.debug("Sorting %d pages by path", len(self._listed_pages()))
            self._cache.by_path = tuple(sorted(self._listed_pages(), key=_path_sort_key))
        return self._cache.by_path

    def by_created(self) -> tuple[Page, ...]:
        """Listed pages by Created time, newest first.

        Pages without a Created time use their mod time. Ties are broken
        by the path order of ``by_path``.
        """
        if self._cache.by_created is None:
            self._cache.by_created = _sorted_newest_first(
                self._listed_pages(),
                lambda p: p.created or p.mod_time,
            )
        return self._cache.by_created

    def by_mod_time(self) -> tuple[Page, ...]:
        """Listed pages by mod time, newest first, ties by path order."""
        if self._cache.by_mod_time is None:
            self._cache.by_mod_time = _sorted_newest_first(
                self._listed_pages(),
                lambda p: p.mod_time,
            )
        return self._cache.by_mod_time

    def by_time(self) -> tuple[Page, ...]:
        """Listed pages by ``Page.time``, newest first, ties by path order."""
        if self._cache.by_time is None:
            self._cache.by_time = _sorted_newest_first(
                self._listed_pages(),
                lambda p: p.time,
            )
        return self._cache.by_time


def page_slice(pages: Sequence[Page], start: int, end: int = -1) -> list[Page]:
    """Return ``pages[start:end]`` with forgiving bounds, for templates.

    A start past the end gives an empty list. A negative or too-large
    end means "to the end".

    Raises:
        ValueError: If *start* is negative, or greater than a positive *end*.
    """
    if start < 0:
        raise ValueError("start may not be negative")
    if end > 0 and start > end:
        raise ValueError("start may not be greater than end")
    if start > len(pages):
        return []
    if end < 0 or end > len(pages):
        return list(pages[start:])
    return list(pages[start:end])


def reverse(pages: Sequence[Page]) -> list[Page]:
    """Return a new list of *pages* in reverse order."""
    return list(reversed(pages))
