"""Pipe table parsing and rendering.

Hidden design decisions:
- A row is well-formed only with both a leading and a trailing pipe
- Rows are padded or truncated to the header width at parse time
- The investment heuristic only looks at header cells and only changes
  presentation (badge, footer, risk chips), never parsing
- Risk chips need a whole-word high/medium/low, so "Highly volatile"
  or "Below average" get no chip
- Cells are split on <br> and literal "\\n" and re-processed for bullets
- Toolbar buttons carry data-action/data-target; behaviour is bound by
  the display layer from the returned hooks
"""

import csv
import io
import re
from collections.abc import Callable
from datetime import date

from ..config import RenderSettings
from ..errors import MalformedBlockError
from .ids import IdMinter
from .inline import InlineFormatter, plain_text
from .models import Alignment, HookAction, InteractionHook, Table

ROW_RE = re.compile(r"^\s*\|(.+)\|\s*$")
ALIGNMENT_RE = re.compile(r"^\s*\|(?:\s*:?-+:?\s*\|)+\s*$")
_CELL_SPLIT_RE = re.compile(r"(?<!\\)\|")
_CELL_BREAK_RE = re.compile(r"<br\s*/?>|\\n", re.IGNORECASE)
_CELL_BULLET_RE = re.compile(r"^(\s*)[-*]\s+(.+)$")
_INLINE_SUB_BULLET_RE = re.compile(r"\s{2,}[-*]\s+")
_RISK_RE = {
    level: re.compile(rf"\b{level}\b", re.IGNORECASE)
    for level in ("high", "medium", "low")
}


def is_table_row(line: str) -> bool:
    """Check for a well-formed pipe row (leading and trailing pipe)."""
    return ROW_RE.match(line) is not None


def is_alignment_row(line: str) -> bool:
    """Check for an alignment row such as | :--- | :-: | --: |."""
    return ALIGNMENT_RE.match(line) is not None


def split_cells(line: str) -> list[str]:
    """Split a well-formed row into trimmed cell texts.

    Escaped pipes (\\|) stay inside their cell.
    """
    match = ROW_RE.match(line)
    if match is None:
        raise MalformedBlockError(f"not a table row: {line!r}", kind="table")
    return [cell.strip().replace("\\|", "|") for cell in _CELL_SPLIT_RE.split(match.group(1))]


def parse_alignment(token: str) -> Alignment:
    """Map one alignment-row token to an alignment."""
    token = token.strip()
    if token.startswith(":") and token.endswith(":") and len(token) > 1:
        return Alignment.CENTER
    if token.endswith(":"):
        return Alignment.RIGHT
    return Alignment.LEFT


def is_domain_table(header_cells: list[str], keywords: tuple[str, ...]) -> bool:
    """Check whether any header cell mentions an investment keyword."""
    lowered = [cell.lower() for cell in header_cells]
    return any(keyword in cell for keyword in keywords for cell in lowered)


def _fit(cells: list[str], width: int, fill):
    return (cells + [fill] * width)[:width]


def build_table(
    header_cells: list[str],
    data_rows: list[list[str]],
    alignments: list[Alignment] | None,
    keywords: tuple[str, ...],
) -> Table:
    """Build a normalized Table from split cells.

    Args:
        header_cells: Header cell texts
        data_rows: Data rows of any width
        alignments: Parsed alignment row, or None when the source had none
        keywords: Investment keywords for the domain heuristic

    Returns:
        Table whose rows and alignments match the header width

    Raises:
        MalformedBlockError: If the header has no non-empty cell
    """
    if not any(cell for cell in header_cells):
        raise MalformedBlockError("header row has no cells", kind="table")

    width = len(header_cells)
    return Table(
        header_cells=header_cells,
        alignments=_fit(list(alignments or []), width, Alignment.LEFT),
        rows=[_fit(row, width, "") for row in data_rows],
        is_domain_special=is_domain_table(header_cells, keywords),
        has_alignment_row=alignments is not None,
    )


def _collect_rows(lines: list[str], start: int) -> tuple[list[list[str]], int]:
    rows = []
    index = start
    while index < len(lines) and is_table_row(lines[index]):
        rows.append(split_cells(lines[index]))
        index += 1
    return rows, index


def match_aligned_table(
    lines: list[str], start: int, keywords: tuple[str, ...]
) -> tuple[Table, int] | None:
    """Match a header row followed by an alignment row and data rows.

    Returns:
        (table, index after the table), or None if the pattern does not start here

    Raises:
        MalformedBlockError: If the pattern starts here but the header is empty
    """
    if start + 1 >= len(lines):
        return None
    if not (is_table_row(lines[start]) and is_alignment_row(lines[start + 1])):
        return None

    header = split_cells(lines[start])
    alignments = [parse_alignment(token) for token in split_cells(lines[start + 1])]
    rows, end = _collect_rows(lines, start + 2)
    return build_table(header, rows, alignments, keywords), end


def match_plain_table(
    lines: list[str], start: int, keywords: tuple[str, ...]
) -> tuple[Table, int] | None:
    """Match two or more well-formed rows with no alignment row.

    The first row serves as the header.
    """
    rows, end = _collect_rows(lines, start)
    if len(rows) < 2:
        return None
    return build_table(rows[0], rows[1:], None, keywords), end


def table_to_tsv(table: Table) -> str:
    """Tab-separated text of the header and every row, one line each."""
    lines = [table.header_cells, *table.rows]
    return "".join("\t".join(plain_text(cell) for cell in row) + "\n" for row in lines)


def table_to_csv(table: Table) -> str:
    """CSV export of the header and every row."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow([plain_text(cell) for cell in table.header_cells])
    for row in table.rows:
        writer.writerow([plain_text(cell) for cell in row])
    return buffer.getvalue()


class TableRenderer:
    """Renders a Table into an interactive fragment plus its hooks."""

    def __init__(
        self,
        inline: InlineFormatter,
        minter: IdMinter,
        settings: RenderSettings | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._inline = inline
        self._minter = minter
        self._settings = settings or RenderSettings()
        self._today = today

    def render(self, table: Table) -> tuple[str, list[InteractionHook]]:
        """Render a table.

        Args:
            table: Normalized table block

        Returns:
            (markup, hooks) where hooks reference the freshly minted TableId
        """
        table_id = self._minter.table_id()
        domain = table.is_domain_special

        parts = [
            f'<div class="message-table{" domain-table" if domain else ""}" '
            f'data-table-id="{table_id}">',
            self._toolbar(table, table_id),
            '<div class="table-scroll">',
            f'<table id="{table_id}" class="message-table-grid">',
            self._header(table),
            self._body(table),
            "</table></div>",
        ]
        if domain:
            parts.append(self._footer(table_id))
        parts.append("</div>")

        hooks = [
            InteractionHook(action=HookAction.TOGGLE_COMPACT, target_id=table_id),
            InteractionHook(action=HookAction.COPY, target_id=table_id, payload=table_to_tsv(table)),
        ]
        if domain:
            hooks.append(
                InteractionHook(
                    action=HookAction.DOWNLOAD_CSV, target_id=table_id, payload=table_to_csv(table)
                )
            )
            hooks.append(
                InteractionHook(action=HookAction.SHARE, target_id=table_id, payload=table_to_tsv(table))
            )
        return "".join(parts), hooks

    def _button(self, table_id: str, action: HookAction, title: str, label: str) -> str:
        return (
            f'<button type="button" class="table-action" title="{title}" '
            f'data-action="{action.value}" data-target="{table_id}">{label}</button>'
        )

    def _toolbar(self, table: Table, table_id: str) -> str:
        if table.is_domain_special:
            badge = '<span class="table-badge investment-badge">Investment Options</span>'
        else:
            badge = '<span class="table-badge">Table</span>'
        return (
            '<div class="table-toolbar">'
            f'<div class="table-toolbar-info">{badge}'
            f'<span class="table-columns">{table.column_count} columns</span></div>'
            '<div class="table-toolbar-actions">'
            + self._button(table_id, HookAction.TOGGLE_COMPACT, "Toggle compact view", "Compact")
            + self._button(table_id, HookAction.COPY, "Copy table data", "Copy")
            + "</div></div>"
        )

    def _header(self, table: Table) -> str:
        cells = "".join(
            f'<th class="align-{alignment.value}">{self._inline.format(cell)}</th>'
            for cell, alignment in zip(table.header_cells, table.alignments, strict=True)
        )
        return f"<thead><tr>{cells}</tr></thead>"

    def _body(self, table: Table) -> str:
        rows = []
        for index, row in enumerate(table.rows):
            parity = "row-even" if index % 2 == 0 else "row-odd"
            cells = "".join(
                f'<td class="align-{alignment.value}">'
                f'<div class="table-cell">{self._cell(cell, table.is_domain_special)}</div></td>'
                for cell, alignment in zip(row, table.alignments, strict=True)
            )
            rows.append(f'<tr class="{parity}">{cells}</tr>')
        return f'<tbody>{"".join(rows)}</tbody>'

    def _footer(self, table_id: str) -> str:
        as_of = self._today().strftime(self._settings.date_format)
        return (
            '<div class="table-footer">'
            f'<span class="table-date">Data as of {as_of}</span>'
            '<div class="table-footer-actions">'
            + self._button(table_id, HookAction.DOWNLOAD_CSV, "Download CSV", "Download CSV")
            + self._button(table_id, HookAction.SHARE, "Share table", "Share")
            + "</div></div>"
        )

    def _cell(self, cell: str, domain: bool) -> str:
        lines = [line for line in _CELL_BREAK_RE.split(cell) if line.strip()]
        if len(lines) > 1:
            if any(_CELL_BULLET_RE.match(line) for line in lines):
                return self._cell_list(lines)
            paragraphs = "".join(
                f'<p class="cell-paragraph">{self._inline.format(line.strip())}</p>'
                for line in lines
            )
            return f'<div class="cell-paragraphs">{paragraphs}</div>'

        text = lines[0].strip() if lines else ""
        return self._cell_text(text, domain)

    def _cell_text(self, text: str, domain: bool) -> str:
        classes = ["cell-text"]
        chip = ""
        if domain:
            for level, pattern in _RISK_RE.items():
                if pattern.search(text):
                    chip = f'<span class="risk-chip risk-{level}"></span>'
                    classes.append("cell-risk")
                    break
            if "%" in text:
                classes.append("cell-percent")
            if "₹" in text:
                classes.append("cell-currency")
        return f'<span class="{" ".join(classes)}">{chip}{self._inline.format(text)}</span>'

    def _cell_list(self, lines: list[str]) -> str:
        # entries: (content, sub-bullets, is_bullet)
        entries: list[tuple[str, list[str], bool]] = []
        for line in lines:
            match = _CELL_BULLET_RE.match(line)
            if match is None:
                entries.append((line.strip(), [], False))
                continue

            indent, content = match.group(1), match.group(2)
            if len(indent) >= 2 and entries and entries[-1][2]:
                entries[-1][1].append(content.strip())
                continue

            main, *subs = _INLINE_SUB_BULLET_RE.split(content)
            entries.append((main.strip(), [sub.strip() for sub in subs if sub.strip()], True))

        items = []
        for content, subs, is_bullet in entries:
            body = self._inline.format(content)
            if subs:
                sub_items = "".join(f"<li>{self._inline.format(sub)}</li>" for sub in subs)
                body += f'<ul class="cell-sublist">{sub_items}</ul>'
            css = "cell-list-item" if is_bullet else "cell-list-text"
            items.append(f'<li class="{css}">{body}</li>')
        return f'<ul class="cell-list">{"".join(items)}</ul>'
