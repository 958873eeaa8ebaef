"""Unit and property-based tests for the rendering pipeline."""
import re

from hypothesis import given, settings
from hypothesis import strategies as st

from niveshpath.render import HookAction, MessageRenderer, render_message

ID_RE = re.compile(r"\b(table|code)-[0-9a-f]{8}\b")


def _without_ids(html: str) -> str:
    return ID_RE.sub(r"\1-ID", html)


_renderer = MessageRenderer()


class TestMessageRenderer:
    """Tests for MessageRenderer."""

    def test_inline_paragraph(self, renderer):
        """Test bold and italic in a plain reply."""
        html = renderer.render("**Bold** and *italic*").html

        assert html == (
            '<div class="assistant-message"><p class="message-paragraph">'
            "<strong>Bold</strong> and <em>italic</em></p></div>"
        )

    def test_paragraph_lines_keep_breaks(self, renderer):
        """Test line breaks inside one paragraph."""
        html = renderer.render("First line\nSecond line").html
        assert "First line<br>Second line" in html

    def test_investment_table(self, renderer, investment_reply):
        """An investment table is flagged and shows risk chips."""
        rendered = renderer.render(investment_reply)

        table = next(block for block in rendered.blocks if block.kind == "table")
        assert table.is_domain_special
        assert "risk-chip risk-high" in rendered.html
        assert "Data as of March 2024" in rendered.html
        assert 'data-table-id="table-00000001"' in rendered.html
        assert rendered.find_hook("table-00000001", HookAction.DOWNLOAD_CSV) is not None

    def test_ids_are_shared_across_tables_and_code(self, renderer):
        """One minter serves every block of a reply."""
        rendered = renderer.render(
            "Compare these two options:\n\n| A | B |\n| - | - |\n| 1 | 2 |\n\n```python\nprint('hi')\n```"
        )

        targets = {hook.target_id for hook in rendered.hooks}
        assert targets == {"table-00000001", "code-00000002"}

    def test_code_block(self, renderer):
        """Code is escaped, labelled and copyable."""
        rendered = renderer.render("Here is the formula:\n```python\nif a < b:\n    pass\n```")

        assert 'class="code-language">PYTHON</span>' in rendered.html
        assert "if a &lt; b:" in rendered.html
        assert 'data-action="copy"' in rendered.html
        hook = rendered.find_hook("code-00000001", HookAction.COPY)
        assert hook is not None
        assert hook.payload == "if a < b:\n    pass"

    def test_code_block_without_language(self, renderer):
        """Test the fallback label."""
        html = renderer.render("Run this command now:\n```\nls\n```").html
        assert ">CODE</span>" in html

    def test_short_reply_has_no_copy_button(self, renderer):
        """Very short replies get no code copy affordance."""
        rendered = renderer.render("```\nhi\n```")

        assert "code-block" in rendered.html
        assert 'data-action="copy"' not in rendered.html
        assert rendered.hooks == []

    def test_block_markup(self, renderer):
        """Test headings, quotes, rules and callouts."""
        html = renderer.render(
            "## Goals\n> Start early\n---\n[!WARNING] Returns are not guaranteed"
        ).html

        assert '<h2 class="message-heading heading-2">Goals</h2>' in html
        assert '<blockquote class="message-quote">Start early</blockquote>' in html
        assert '<hr class="message-rule">' in html
        assert '<div class="callout callout-warning">' in html
        assert ">Warning</span>" in html

    def test_many_adjacent_callouts(self, renderer):
        """A long run of warning lines renders one callout each."""
        text = "\n".join(f"[!WARNING] risk {i}" for i in range(400))
        html = renderer.render(text).html

        assert html.count('<div class="callout callout-warning">') == 400

    def test_list_indent_survives_sanitizer(self, renderer):
        """Test that the nesting margin is kept."""
        html = renderer.render("- Item one\n  - Sub item").html

        assert "list-depth-1" in html
        assert "margin-left: 1.5rem" in html

    def test_table_counts(self, renderer):
        """Test header and row counts after padding and truncation."""
        html = renderer.render("| A | B | C |\n|---|---|---|\n| 1 |\n| 1 | 2 | 3 | 4 |").html

        assert len(re.findall(r"<th[\s>]", html)) == 3
        assert len(re.findall(r'<tr class="row-', html)) == 2

    def test_empty_reply(self, renderer):
        """Test that an empty reply renders an empty wrapper."""
        rendered = renderer.render("")

        assert rendered.html == '<div class="assistant-message"></div>'
        assert rendered.blocks == []

    def test_render_message(self):
        """Test the shared default renderer."""
        assert "<strong>x</strong>" in render_message("**x**").html

    def test_rendering_twice_differs_only_in_ids(self, investment_reply):
        """Two renders of one reply are equal once ids are masked."""
        text = investment_reply + "\n```sql\nSELECT 1;\n```"
        first = _renderer.render(text)
        second = _renderer.render(text)

        assert first.html != second.html
        assert _without_ids(first.html) == _without_ids(second.html)

    @settings(max_examples=50, deadline=None)
    @given(st.text())
    def test_idempotent_modulo_ids(self, text: str):
        """Property test: rendering is deterministic apart from ids."""
        first = _renderer.render(text)
        second = _renderer.render(text)

        assert _without_ids(first.html) == _without_ids(second.html)
        assert first.blocks == second.blocks

    @settings(max_examples=50, deadline=None)
    @given(
        st.integers(min_value=1, max_value=5),
        st.lists(st.integers(min_value=1, max_value=8), max_size=6),
    )
    def test_round_trip_counts(self, columns: int, row_widths: list[int]):
        """Property test: N header cells and M rows always render as N and M."""
        header = "| " + " | ".join(f"H{i}" for i in range(columns)) + " |"
        alignment = "|" + "---|" * columns
        rows = ["| " + " | ".join(str(j) for j in range(width)) + " |" for width in row_widths]
        html = _renderer.render("\n".join([header, alignment, *rows])).html

        assert len(re.findall(r"<th[\s>]", html)) == columns
        assert len(re.findall(r'<tr class="row-', html)) == len(row_widths)
