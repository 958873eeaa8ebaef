"""Unit and property-based tests for block classification."""
from hypothesis import given
from hypothesis import strategies as st

from niveshpath.render import (
    BlockClassifier,
    Blockquote,
    Callout,
    CalloutKind,
    CodeBlock,
    Heading,
    ListRun,
    Paragraph,
    Rule,
    Table,
)

BLOCK_KINDS = {"code", "table", "heading", "list", "blockquote", "rule", "callout", "paragraph"}
NEAR_MISS_LINES = [
    "| a | b |", "| - | - |", "| x", "- item", "```", "# h", "[!NOTE]", "[!WARNING] x", "text", "",
]


def _classify(text: str):
    return BlockClassifier().classify(text)


class TestBlockClassifier:
    """Tests for BlockClassifier."""

    def test_empty_text(self):
        """Test that empty or blank text has no blocks."""
        assert _classify("") == []
        assert _classify("\n  \n\t\n") == []

    def test_fence_beats_table(self):
        """Pipe rows inside a code fence stay code."""
        blocks = _classify("```markdown\n| a | b |\n| - | - |\n| 1 | 2 |\n```")

        assert len(blocks) == 1
        assert isinstance(blocks[0], CodeBlock)
        assert blocks[0].language == "markdown"
        assert blocks[0].content == "| a | b |\n| - | - |\n| 1 | 2 |"

    def test_malformed_row_ends_table(self):
        """A row without a trailing pipe is paragraph text."""
        blocks = _classify("| A | B |\n| - | - |\n| only one cell")

        assert [block.kind for block in blocks] == ["table", "paragraph"]
        assert blocks[0].rows == []
        assert blocks[1].content == "| only one cell"

    def test_lone_malformed_row_is_paragraph(self):
        """Test a row missing its trailing pipe on its own."""
        blocks = _classify("| only one cell")
        assert blocks == [Paragraph(content="| only one cell")]

    def test_empty_header_falls_back_to_paragraph(self):
        """A table with a blank header degrades to paragraph text."""
        blocks = _classify("| |\n| - |\n| x |")

        assert len(blocks) == 1
        assert isinstance(blocks[0], Paragraph)
        assert blocks[0].content == "| |\n| - |\n| x |"

    def test_unterminated_fence_is_paragraph(self):
        """Test a code fence that never closes."""
        blocks = _classify("```python\nprint(1)")
        assert blocks == [Paragraph(content="```python\nprint(1)")]

    def test_headings(self):
        """Test heading levels one to six."""
        blocks = _classify("# One\n### Three\n###### Six")
        assert [(b.level, b.content) for b in blocks] == [(1, "One"), (3, "Three"), (6, "Six")]

    def test_not_headings(self):
        """Test lines that only look like headings."""
        blocks = _classify("####### seven\n\n#hashtag")
        assert all(isinstance(block, Paragraph) for block in blocks)

    def test_rule_and_blockquote(self):
        """Test horizontal rules and quotes."""
        blocks = _classify("> Invest early\n---\n> Stay diversified")

        assert blocks == [
            Blockquote(content="Invest early"),
            Rule(),
            Blockquote(content="Stay diversified"),
        ]

    def test_callouts(self):
        """A callout takes its marker line and the lines after it."""
        blocks = _classify("[!NOTE] Check KYC\nbefore investing\n\n[!WARNING]\nMarkets are volatile")

        assert blocks == [
            Callout(callout_kind=CalloutKind.NOTE, content="Check KYC\nbefore investing"),
            Callout(callout_kind=CalloutKind.WARNING, content="Markets are volatile"),
        ]

    def test_empty_callout_is_paragraph(self):
        """Test a callout marker with nothing after it."""
        blocks = _classify("[!WARNING]\n\nText")
        assert blocks == [Paragraph(content="[!WARNING]"), Paragraph(content="Text")]

    def test_consecutive_callouts(self):
        """Each marker line starts its own callout."""
        blocks = _classify("[!NOTE] First\n[!WARNING] Second\ncontinued")

        assert blocks == [
            Callout(callout_kind=CalloutKind.NOTE, content="First"),
            Callout(callout_kind=CalloutKind.WARNING, content="Second\ncontinued"),
        ]

    def test_long_run_of_callouts(self):
        """Hundreds of adjacent markers classify one callout per line."""
        text = "\n".join(f"[!NOTE] item {i}" for i in range(600))
        blocks = _classify(text)

        assert len(blocks) == 600
        assert all(isinstance(block, Callout) for block in blocks)
        assert blocks[-1].content == "item 599"

    def test_empty_marker_before_callout(self):
        """Test a bare marker directly followed by another marker."""
        blocks = _classify("[!NOTE]\n[!WARNING] Careful")
        assert blocks == [
            Paragraph(content="[!NOTE]"),
            Callout(callout_kind=CalloutKind.WARNING, content="Careful"),
        ]

    def test_paragraph_lines_accumulate(self):
        """Consecutive lines form one paragraph until a blank line."""
        blocks = _classify("Line one\nLine two\n\nLine three")
        assert blocks == [Paragraph(content="Line one\nLine two"), Paragraph(content="Line three")]

    def test_paragraph_stops_at_block_start(self):
        """Test a list directly after paragraph text."""
        blocks = _classify("Options:\n- PPF\n- ELSS")

        assert isinstance(blocks[0], Paragraph)
        assert isinstance(blocks[1], ListRun)
        assert len(blocks[1].items) == 2

    def test_crlf_is_normalized(self):
        """Test Windows line endings."""
        blocks = _classify("# Title\r\nBody\r\n")
        assert blocks == [Heading(level=1, content="Title"), Paragraph(content="Body")]

    def test_document_order(self, investment_reply):
        """Blocks come out in the order they appear."""
        blocks = _classify("# Plan\n" + investment_reply + "\n1. Start SIP\n2. Review yearly")

        assert [block.kind for block in blocks] == ["heading", "paragraph", "table", "blockquote", "list"]
        assert isinstance(blocks[2], Table)
        assert blocks[2].is_domain_special

    def test_bullet_then_numbered(self):
        """A marker change starts a second list."""
        blocks = _classify("- a\n- b\n1. c")
        assert [(b.kind, b.list_kind.value) for b in blocks] == [("list", "bullet"), ("list", "numbered")]

    def test_starts_block(self):
        """Test the block-start check used for paragraph ends."""
        classifier = BlockClassifier()
        lines = ["text", "# heading", "| a |", "```"]

        assert not classifier.starts_block(lines, 0)
        assert classifier.starts_block(lines, 1)
        assert not classifier.starts_block(lines, 2)
        assert not classifier.starts_block(lines, 3)

    @given(st.text())
    def test_never_raises(self, text: str):
        """Property test: any text classifies without error."""
        blocks = _classify(text)
        assert all(block.kind in BLOCK_KINDS for block in blocks)

    @given(st.lists(st.sampled_from(NEAR_MISS_LINES)))
    def test_never_raises_on_near_miss_lines(self, lines: list[str]):
        """Property test: mixes of block-start fragments classify cleanly."""
        blocks = _classify("\n".join(lines))
        assert all(block.kind in BLOCK_KINDS for block in blocks)
