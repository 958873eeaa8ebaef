"""Block classification of assistant replies.

Hidden design decisions:
- Replies are scanned line by line, top to bottom
- Block-start rules are tried in a fixed precedence; the first match
  consumes its whole span and scanning resumes after it
- A rule that matches but finds a malformed body degrades that span
  to paragraph text instead of raising
- Paragraph lines accumulate until a blank line or a line where any
  rule would start a block
- Callout text ends at a blank line, a block start or the next marker
  line, even a marker with nothing after it
"""

import logging
import re
from collections.abc import Callable

from ..config import RenderSettings
from ..errors import MalformedBlockError
from .lists import parse_list_run
from .models import (
    Block,
    Blockquote,
    Callout,
    CalloutKind,
    CodeBlock,
    Heading,
    ListKind,
    Paragraph,
    Rule,
)
from .tables import is_table_row, match_aligned_table, match_plain_table

logger = logging.getLogger(__name__)

FENCE_OPEN_RE = re.compile(r"^\s*```\s*([\w+#.-]*)\s*$")
FENCE_CLOSE_RE = re.compile(r"^\s*```\s*$")
HEADING_RE = re.compile(r"^(#{1,6})[ \t]+(\S.*)$")
BLOCKQUOTE_RE = re.compile(r"^\s*>[ \t]+(\S.*)$")
RULE_RE = re.compile(r"^\s*-{3,}\s*$")
CALLOUT_RE = re.compile(r"^\s*\[!(NOTE|WARNING)\][ \t]*(.*)$")

# A rule returns (block, index after the block) or None.
RuleResult = tuple[Block, int] | None


def normalize_text(text: str) -> str:
    """Normalize line endings and drop NUL characters."""
    return text.replace("\r\n", "\n").replace("\r", "\n").replace("\x00", "")


class BlockClassifier:
    """Splits a reply into an ordered sequence of blocks."""

    def __init__(self, settings: RenderSettings | None = None) -> None:
        self._settings = settings or RenderSettings()
        self._rules: list[tuple[str, Callable[[list[str], int], RuleResult]]] = [
            ("code", self._fence),
            ("table", self._aligned_table),
            ("table", self._plain_table),
            ("heading", self._heading),
            ("list", self._bullet_run),
            ("list", self._numbered_run),
            ("blockquote", self._blockquote),
            ("rule", self._rule),
            ("callout", self._callout),
        ]

    def classify(self, text: str) -> list[Block]:
        """Classify a reply.

        Args:
            text: The assistant's full reply

        Returns:
            Blocks in document order
        """
        lines = normalize_text(text).split("\n")
        blocks: list[Block] = []
        index = 0

        while index < len(lines):
            if not lines[index].strip():
                index += 1
                continue

            try:
                matched = self._match(lines, index)
            except MalformedBlockError as exc:
                end = self._malformed_span_end(lines, index)
                logger.debug("%s; lines %d-%d fall back to paragraph", exc, index, end - 1)
                block, index = self._paragraph(lines, index, end)
                blocks.append(block)
                continue

            if matched is None:
                block, index = self._paragraph(lines, index, index + 1)
            else:
                block, index = matched
            blocks.append(block)

        return blocks

    def _match(self, lines: list[str], index: int) -> RuleResult:
        for _name, rule in self._rules:
            result = rule(lines, index)
            if result is not None:
                return result
        return None

    def starts_block(self, lines: list[str], index: int) -> bool:
        """Check whether any block rule matches at a line."""
        if CALLOUT_RE.match(lines[index]):
            return self._callout_has_content(lines, index)
        return self._starts_non_callout(lines, index)

    def _starts_non_callout(self, lines: list[str], index: int) -> bool:
        try:
            return any(
                rule(lines, index) is not None
                for name, rule in self._rules
                if name != "callout"
            )
        except MalformedBlockError:
            return False

    def _continues_callout(self, lines: list[str], index: int) -> bool:
        return (
            index < len(lines)
            and bool(lines[index].strip())
            and CALLOUT_RE.match(lines[index]) is None
            and not self._starts_non_callout(lines, index)
        )

    def _callout_has_content(self, lines: list[str], index: int) -> bool:
        match = CALLOUT_RE.match(lines[index])
        return bool(match.group(2).strip()) or self._continues_callout(lines, index + 1)

    def _malformed_span_end(self, lines: list[str], index: int) -> int:
        end = index + 1
        if is_table_row(lines[index]):
            while end < len(lines) and is_table_row(lines[end]):
                end += 1
        return end

    def _paragraph(self, lines: list[str], start: int, end: int) -> tuple[Paragraph, int]:
        while end < len(lines) and lines[end].strip() and not self.starts_block(lines, end):
            end += 1
        content = "\n".join(line.strip() for line in lines[start:end])
        return Paragraph(content=content), end

    def _fence(self, lines: list[str], start: int) -> RuleResult:
        opening = FENCE_OPEN_RE.match(lines[start])
        if opening is None:
            return None

        for end in range(start + 1, len(lines)):
            if FENCE_CLOSE_RE.match(lines[end]):
                content = "\n".join(lines[start + 1:end])
                return CodeBlock(language=opening.group(1), content=content), end + 1

        raise MalformedBlockError("code fence is never closed", kind="code")

    def _aligned_table(self, lines: list[str], start: int) -> RuleResult:
        return match_aligned_table(lines, start, self._settings.domain_keywords)

    def _plain_table(self, lines: list[str], start: int) -> RuleResult:
        return match_plain_table(lines, start, self._settings.domain_keywords)

    def _heading(self, lines: list[str], start: int) -> RuleResult:
        match = HEADING_RE.match(lines[start])
        if match is None:
            return None
        return Heading(level=len(match.group(1)), content=match.group(2).rstrip()), start + 1

    def _list_run(self, lines: list[str], start: int, kind: ListKind) -> RuleResult:
        result = parse_list_run(lines, start)
        if result is None or result[0].list_kind != kind:
            return None
        return result

    def _bullet_run(self, lines: list[str], start: int) -> RuleResult:
        return self._list_run(lines, start, ListKind.BULLET)

    def _numbered_run(self, lines: list[str], start: int) -> RuleResult:
        return self._list_run(lines, start, ListKind.NUMBERED)

    def _blockquote(self, lines: list[str], start: int) -> RuleResult:
        match = BLOCKQUOTE_RE.match(lines[start])
        if match is None:
            return None
        return Blockquote(content=match.group(1).rstrip()), start + 1

    def _rule(self, lines: list[str], start: int) -> RuleResult:
        if RULE_RE.match(lines[start]) is None:
            return None
        return Rule(), start + 1

    def _callout(self, lines: list[str], start: int) -> RuleResult:
        match = CALLOUT_RE.match(lines[start])
        if match is None:
            return None

        content_lines = [match.group(2).strip()] if match.group(2).strip() else []
        end = start + 1
        while self._continues_callout(lines, end):
            content_lines.append(lines[end].strip())
            end += 1

        if not content_lines:
            raise MalformedBlockError("callout marker without content", kind="callout")

        kind = CalloutKind(match.group(1).lower())
        return Callout(callout_kind=kind, content="\n".join(content_lines)), end
