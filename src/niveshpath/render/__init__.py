"""Rendering of assistant replies into sanitized, interactive markup.

Module structure (each module hides a design decision):
- models.py: Block union, hooks and the rendered result
- classifier.py: Block-start rules and their precedence
- inline.py: Emphasis, code span, strikethrough and link substitution
- lists.py: Flat, depth-tagged list runs
- tables.py: Pipe tables, the investment heuristic and cell re-processing
- code.py: Fenced code blocks
- ids.py: TableId / CodeId minting
- sanitizer.py: The allow-list trust boundary
- pipeline.py: Orchestration from raw text to RenderedMessage
"""

from .classifier import BlockClassifier
from .ids import IdMinter, SequentialIdMinter
from .inline import InlineFormatter, format_inline, plain_text
from .models import (
    Alignment,
    Block,
    Blockquote,
    Callout,
    CalloutKind,
    CodeBlock,
    Heading,
    HookAction,
    InteractionHook,
    ListItem,
    ListKind,
    ListRun,
    Paragraph,
    RenderedMessage,
    Rule,
    Table,
)
from .pipeline import MessageRenderer, render_message
from .sanitizer import MarkupSanitizer

__all__ = [
    # Models
    "Alignment",
    "Block",
    "Blockquote",
    "Callout",
    "CalloutKind",
    "CodeBlock",
    "Heading",
    "HookAction",
    "InteractionHook",
    "ListItem",
    "ListKind",
    "ListRun",
    "Paragraph",
    "RenderedMessage",
    "Rule",
    "Table",
    # Components
    "BlockClassifier",
    "IdMinter",
    "InlineFormatter",
    "MarkupSanitizer",
    "MessageRenderer",
    "SequentialIdMinter",
    # Functions
    "format_inline",
    "plain_text",
    "render_message",
]
