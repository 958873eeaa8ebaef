"""Inline formatting of text inside a block.

Hidden design decisions:
- Text is HTML-escaped before any marker is recognised
- Code spans are swapped for placeholders so nothing inside them is formatted
- Substitution order is fixed: code, bold, italic, strikethrough, links, restore
- Link validation and normalization are delegated to markdown-it-py
- Unmatched markers stay literal; formatting never raises
"""

import html
import re

from markdown_it import MarkdownIt
from markdown_it.common.utils import escapeHtml

_PLACEHOLDER = "\x00{}\x00"
_PLACEHOLDER_RE = re.compile(r"\x00(\d+)\x00")

_TRIPLE_CODE_RE = re.compile(r"```(.+?)```")
_CODE_RE = re.compile(r"`([^`\n]+)`")
_BOLD_RE = re.compile(r"\*\*(?=\S)(.+?)(?<=\S)\*\*")
_ITALIC_RE = re.compile(r"(?<![*\w])\*(?=[^\s*])([^*\n]+?)(?<=\S)\*(?![*\w])")
_STRIKE_RE = re.compile(r"~~(?=\S)(.+?)(?<=\S)~~")
_LINK_RE = re.compile(r"\[([^\]\n]+)\]\(([^)\s]+)\)")
_BREAK_RE = re.compile(r"<br\s*/?>", re.IGNORECASE)


class InlineFormatter:
    """Turns emphasis, code, strikethrough and link markers into markup."""

    def __init__(self) -> None:
        self._md = MarkdownIt()

    def format(self, text: str) -> str:
        """Format one run of text.

        Args:
            text: Raw text; may contain newlines, which are kept as-is

        Returns:
            Escaped text with inline markup spans
        """
        protected: list[str] = []

        def _protect(match: re.Match) -> str:
            protected.append(f'<code class="inline-code">{match.group(1)}</code>')
            return _PLACEHOLDER.format(len(protected) - 1)

        formatted = escapeHtml(text.replace("\x00", ""))
        formatted = _TRIPLE_CODE_RE.sub(_protect, formatted)
        formatted = _CODE_RE.sub(_protect, formatted)
        formatted = _BOLD_RE.sub(r"<strong>\1</strong>", formatted)
        formatted = _ITALIC_RE.sub(r"<em>\1</em>", formatted)
        formatted = _STRIKE_RE.sub(r"<del>\1</del>", formatted)
        formatted = _LINK_RE.sub(self._link, formatted)
        return _PLACEHOLDER_RE.sub(lambda m: protected[int(m.group(1))], formatted)

    def _link(self, match: re.Match) -> str:
        label, escaped_url = match.group(1), match.group(2)
        url = html.unescape(escaped_url)
        if not self._md.validateLink(url):
            return label
        href = escapeHtml(self._md.normalizeLink(url))
        return (
            f'<a href="{href}" target="_blank" rel="noopener noreferrer" '
            f'class="message-link">{label}</a>'
        )


_default_formatter = InlineFormatter()


def format_inline(text: str) -> str:
    """Format text with the shared formatter."""
    return _default_formatter.format(text)


def plain_text(text: str) -> str:
    """Strip inline markers, leaving the text a reader would see.

    Used for clipboard, share and CSV payloads.
    """
    stripped = _BREAK_RE.sub(" ", text)
    stripped = _TRIPLE_CODE_RE.sub(r"\1", stripped)
    stripped = _CODE_RE.sub(r"\1", stripped)
    stripped = _BOLD_RE.sub(r"\1", stripped)
    stripped = _ITALIC_RE.sub(r"\1", stripped)
    stripped = _STRIKE_RE.sub(r"\1", stripped)
    stripped = _LINK_RE.sub(r"\1", stripped)
    return stripped.strip()
