"""Data models for classified assistant replies.

These models describe what the classifier found, independent of the
markup the renderers produce from them.

Hidden design decisions:
- Block is a closed union discriminated by ``kind``
- List items are flat and depth-tagged, never a tree
- Table rows are normalized to the header width when parsed
"""

from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, Field


class Alignment(str, Enum):
    """Column alignment taken from a table's alignment row."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class ListKind(str, Enum):
    """Marker family of a list item."""

    BULLET = "bullet"
    NUMBERED = "numbered"


class CalloutKind(str, Enum):
    """Callout flavour, from the [!NOTE] / [!WARNING] markers."""

    NOTE = "note"
    WARNING = "warning"


class CodeBlock(BaseModel):
    """A fenced code block."""

    kind: Literal["code"] = "code"
    language: str = Field(default="", description="Language word after the opening fence")
    content: str = Field(description="Literal code, without fences")


class Table(BaseModel):
    """A pipe table."""

    kind: Literal["table"] = "table"
    header_cells: list[str] = Field(description="Header cell texts; defines column count")
    alignments: list[Alignment] = Field(description="One alignment per column")
    rows: list[list[str]] = Field(
        default_factory=list,
        description="Data rows, each exactly as wide as the header"
    )
    is_domain_special: bool = Field(
        default=False,
        description="Header suggests investment-comparison content"
    )
    has_alignment_row: bool = Field(default=True, description="Source had an alignment row")

    @property
    def column_count(self) -> int:
        return len(self.header_cells)


class Heading(BaseModel):
    """An ATX heading."""

    kind: Literal["heading"] = "heading"
    level: int = Field(ge=1, le=6, description="Number of leading #")
    content: str


class ListItem(BaseModel):
    """One line of a list run."""

    kind: ListKind
    depth: int = Field(default=0, ge=0, description="Nesting depth used for margin only")
    indent: int = Field(default=0, ge=0, description="Leading whitespace width in columns")
    ordinal: str | None = Field(default=None, description="Literal number of a numbered item")
    content: str


class ListRun(BaseModel):
    """Consecutive list items sharing one marker family."""

    kind: Literal["list"] = "list"
    list_kind: ListKind
    items: list[ListItem] = Field(min_length=1)


class Blockquote(BaseModel):
    """A single '> ' line."""

    kind: Literal["blockquote"] = "blockquote"
    content: str


class Rule(BaseModel):
    """A horizontal rule."""

    kind: Literal["rule"] = "rule"


class Callout(BaseModel):
    """A note or warning callout."""

    kind: Literal["callout"] = "callout"
    callout_kind: CalloutKind
    content: str


class Paragraph(BaseModel):
    """Lines of text with no block structure."""

    kind: Literal["paragraph"] = "paragraph"
    content: str


Block = Annotated[
    CodeBlock | Table | Heading | ListRun | Blockquote | Rule | Callout | Paragraph,
    Field(discriminator="kind"),
]


class HookAction(str, Enum):
    """Interaction the display layer binds to a rendered fragment."""

    COPY = "copy"
    SHARE = "share"
    TOGGLE_COMPACT = "toggle_compact"
    DOWNLOAD_CSV = "download_csv"


class InteractionHook(BaseModel):
    """An event binding keyed by a table or code id."""

    action: HookAction
    target_id: str = Field(description="TableId or CodeId the hook belongs to")
    payload: str | None = Field(
        default=None,
        description="Text to copy, share or download, if the action needs one"
    )


class RenderedMessage(BaseModel):
    """Result of rendering one assistant reply."""

    html: str = Field(description="Sanitized markup fragment")
    blocks: list[Block] = Field(default_factory=list)
    hooks: list[InteractionHook] = Field(default_factory=list)

    def hooks_for(self, target_id: str) -> list[InteractionHook]:
        """Get the hooks bound to one table or code block."""
        return [hook for hook in self.hooks if hook.target_id == target_id]

    def find_hook(self, target_id: str, action: HookAction) -> InteractionHook | None:
        """Get a single hook by target and action."""
        for hook in self.hooks:
            if hook.target_id == target_id and hook.action == action:
                return hook
        return None
