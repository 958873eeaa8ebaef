"""List run parsing and rendering.

Hidden design decisions:
- A run is a flat sequence of depth-tagged items, not a nested tree
- Depth comes from an indentation stack anchored at column zero
- Tabs count as four columns
- Numbered items keep their literal ordinal
- A change of marker family ends the run
"""

import re

from .inline import InlineFormatter
from .models import ListItem, ListKind, ListRun

BULLET_RE = re.compile(r"^([ \t]*)[-*][ \t]+(\S.*)$")
NUMBERED_RE = re.compile(r"^([ \t]*)(\d+)\.[ \t]+(\S.*)$")

TAB_WIDTH = 4


def _indent_width(indent: str) -> int:
    return len(indent.expandtabs(TAB_WIDTH))


def match_list_line(line: str) -> ListItem | None:
    """Recognise one list line.

    Args:
        line: A single line of text

    Returns:
        A ListItem with depth 0, or None if the line is not a list item
    """
    bullet = BULLET_RE.match(line)
    if bullet:
        return ListItem(
            kind=ListKind.BULLET,
            indent=_indent_width(bullet.group(1)),
            content=bullet.group(2).rstrip(),
        )

    numbered = NUMBERED_RE.match(line)
    if numbered:
        return ListItem(
            kind=ListKind.NUMBERED,
            indent=_indent_width(numbered.group(1)),
            ordinal=numbered.group(2),
            content=numbered.group(3).rstrip(),
        )

    return None


def parse_list_run(lines: list[str], start: int) -> tuple[ListRun, int] | None:
    """Consume consecutive list lines of the same marker family.

    Args:
        lines: All lines of the reply
        start: Index of the first candidate line

    Returns:
        (run, index after the run), or None if lines[start] is not a list item
    """
    first = match_list_line(lines[start])
    if first is None:
        return None

    items: list[ListItem] = []
    indent_stack = [0]
    index = start

    while index < len(lines):
        item = match_list_line(lines[index])
        if item is None or item.kind != first.kind:
            break

        while len(indent_stack) > 1 and item.indent < indent_stack[-1]:
            indent_stack.pop()
        if item.indent > indent_stack[-1]:
            indent_stack.append(item.indent)

        items.append(item.model_copy(update={"depth": len(indent_stack) - 1}))
        index += 1

    return ListRun(list_kind=first.kind, items=items), index


class ListRenderer:
    """Renders a list run as indentation-styled blocks."""

    def __init__(self, inline: InlineFormatter, indent_rem: float = 1.5) -> None:
        self._inline = inline
        self._indent_rem = indent_rem

    def render(self, run: ListRun) -> str:
        """Render a list run.

        Args:
            run: Parsed list run

        Returns:
            Markup with one block per item, nesting shown by margin
        """
        family = run.list_kind.value
        parts = [f'<div class="message-list {family}-list">']
        for item in run.items:
            parts.append(self._render_item(item))
        parts.append("</div>")
        return "".join(parts)

    def _render_item(self, item: ListItem) -> str:
        family = item.kind.value
        style = ""
        if item.depth:
            style = f' style="margin-left: {item.depth * self._indent_rem:g}rem"'

        if item.kind is ListKind.NUMBERED:
            marker = f'<span class="list-marker number-marker">{item.ordinal}.</span>'
        else:
            marker = '<span class="list-marker bullet-marker"></span>'

        return (
            f'<div class="list-item {family}-item list-depth-{item.depth}"{style}>'
            f"{marker}"
            f'<span class="list-content">{self._inline.format(item.content)}</span>'
            "</div>"
        )
