"""Tests for block grouping and the meta interceptor."""

from markdown_it import MarkdownIt

from pagekit.renderer import BlockKind, MetaInterceptor, iter_blocks


def _md() -> MarkdownIt:
    return MarkdownIt("commonmark")


def _intercept(source: str, meta_at_end: bool = False) -> tuple[MetaInterceptor, str]:
    md = _md()
    env: dict = {}
    tokens = md.parse(source, env)
    interceptor = MetaInterceptor(md.renderer, md.options, env, meta_at_end=meta_at_end)
    html = interceptor.render(tokens)
    return interceptor, html


class TestIterBlocks:
    def test_classifies_top_level_blocks(self):
        tokens = _md().parse("# Title\n\n    code\n\nPara.\n\n- a\n- b\n\n```yaml\nx: 1\n```\n")

        kinds = [event.kind for event in iter_blocks(tokens)]

        assert kinds == [
            BlockKind.HEADING,
            BlockKind.CODE,
            BlockKind.OTHER,
            BlockKind.OTHER,
            BlockKind.CODE,
        ]

    def test_nested_code_is_part_of_its_container(self):
        tokens = _md().parse("> ```yaml\n> a: 1\n> ```\n")

        events = list(iter_blocks(tokens))

        assert len(events) == 1
        assert events[0].kind is BlockKind.OTHER

    def test_fence_language_is_first_word_of_info(self):
        tokens = _md().parse("```yaml title=meta\na: 1\n```\n")

        (event,) = iter_blocks(tokens)

        assert event.lang == "yaml"
        assert event.code == "a: 1\n"

    def test_indented_code_has_no_language(self):
        tokens = _md().parse("    a: 1\n")

        (event,) = iter_blocks(tokens)

        assert event.lang == ""
        assert event.code == "a: 1\n"

    def test_empty_document_has_no_blocks(self):
        assert list(iter_blocks(_md().parse(""))) == []


class TestMetaInterceptor:
    def test_captures_leading_code_block(self):
        interceptor, html = _intercept("```json\n{}\n```\n\nText.\n")

        assert interceptor.meta_text == "{}\n"
        assert interceptor.meta_lang == "json"
        assert html == "<p>Text.</p>\n"

    def test_captures_code_after_heading(self):
        interceptor, html = _intercept("# Head *One*\n\n    a: 1\n\nText.\n")

        assert interceptor.header_title == "Head <em>One</em>"
        assert interceptor.meta_text == "a: 1\n"
        assert html == "<h1>Head <em>One</em></h1>\n\n<p>Text.</p>\n"

    def test_code_after_paragraph_is_rendered(self):
        interceptor, html = _intercept("Text.\n\n    a: 1\n")

        assert interceptor.meta_text == ""
        assert html == "<p>Text.</p>\n\n<pre><code>a: 1\n</code></pre>\n"

    def test_only_first_code_block_is_captured(self):
        interceptor, html = _intercept("    a: 1\n\nText.\n\n    b: 2\n")

        assert interceptor.meta_text == "a: 1\n"
        assert html == "<p>Text.</p>\n\n<pre><code>b: 2\n</code></pre>\n"

    def test_later_heading_is_not_a_title(self):
        interceptor, _ = _intercept("Text.\n\n# Later\n")

        assert interceptor.header_title == ""

    def test_counts_visible_blocks(self):
        interceptor, _ = _intercept("# One\n\n    meta: x\n\nTwo.\n\nThree.\n")

        assert interceptor.blocks == 3

    def test_meta_at_end_takes_last_code_block(self):
        interceptor, html = _intercept("    a: 1\n\nText.\n\n    b: 2\n", meta_at_end=True)

        assert interceptor.meta_text == "b: 2\n"
        assert html == "<pre><code>a: 1\n</code></pre>\n\n<p>Text.</p>\n"

    def test_meta_at_end_flushes_consecutive_candidates(self):
        interceptor, html = _intercept("```\na: 1\n```\n\n```\nb: 2\n```\n", meta_at_end=True)

        assert interceptor.meta_text == "b: 2\n"
        assert html == "<pre><code>a: 1\n</code></pre>\n"

    def test_meta_at_end_requires_code_to_be_last(self):
        interceptor, html = _intercept("    a: 1\n\nText.\n", meta_at_end=True)

        assert interceptor.meta_text == ""
        assert html == "<pre><code>a: 1\n</code></pre>\n\n<p>Text.</p>\n"
