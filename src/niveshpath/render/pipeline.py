"""Rendering pipeline for assistant replies.

raw text -> classifier -> block renderers -> assembled markup -> sanitizer

Hidden design decisions:
- Block dispatch is an exhaustive match over the closed Block union
- Ids are minted per render, so two renders differ only in ids
- Sanitization happens exactly once, on the assembled fragment
"""

import logging
from collections.abc import Callable
from datetime import date
from typing import assert_never

from ..config import RenderSettings
from .classifier import BlockClassifier, normalize_text
from .code import CodeRenderer
from .ids import IdMinter
from .inline import InlineFormatter
from .lists import ListRenderer
from .models import (
    Block,
    Blockquote,
    Callout,
    CodeBlock,
    Heading,
    InteractionHook,
    ListRun,
    Paragraph,
    RenderedMessage,
    Rule,
    Table,
)
from .sanitizer import MarkupSanitizer
from .tables import TableRenderer

logger = logging.getLogger(__name__)


class MessageRenderer:
    """Turns one assistant reply into sanitized markup and interaction hooks.

    Example:
        renderer = MessageRenderer()
        rendered = renderer.render("**Bold** and *italic*")
        rendered.html  # '<div class="assistant-message"><p ...><strong>Bold</strong> ...'
    """

    def __init__(
        self,
        settings: RenderSettings | None = None,
        minter_factory: Callable[[], IdMinter] = IdMinter,
        sanitizer: MarkupSanitizer | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        """Initialize the renderer.

        Args:
            settings: Render settings (default: RenderSettings())
            minter_factory: Creates the id minter used for one render
            sanitizer: Sanitization boundary (default: MarkupSanitizer())
            today: Clock for the "Data as of" footer of investment tables
        """
        self._settings = settings or RenderSettings()
        self._minter_factory = minter_factory
        self._sanitizer = sanitizer or MarkupSanitizer()
        self._today = today
        self._classifier = BlockClassifier(self._settings)
        self._inline = InlineFormatter()
        self._lists = ListRenderer(self._inline, self._settings.list_indent_rem)

    @property
    def classifier(self) -> BlockClassifier:
        return self._classifier

    def render(self, text: str) -> RenderedMessage:
        """Render a reply.

        Args:
            text: The assistant's full reply

        Returns:
            RenderedMessage with sanitized html, the blocks and the hooks
        """
        text = normalize_text(text or "")
        blocks = self._classifier.classify(text)

        minter = self._minter_factory()
        tables = TableRenderer(self._inline, minter, self._settings, self._today)
        code = CodeRenderer(minter, self._settings.copy_min_message_length)

        parts: list[str] = []
        hooks: list[InteractionHook] = []
        for block in blocks:
            markup, block_hooks = self._render_block(block, tables, code, len(text))
            parts.append(markup)
            hooks.extend(block_hooks)

        assembled = f'<div class="assistant-message">{"".join(parts)}</div>'
        html = self._sanitizer.sanitize(assembled)
        logger.debug("Rendered %d blocks, %d hooks", len(blocks), len(hooks))
        return RenderedMessage(html=html, blocks=blocks, hooks=hooks)

    def _render_block(
        self,
        block: Block,
        tables: TableRenderer,
        code: CodeRenderer,
        message_length: int,
    ) -> tuple[str, list[InteractionHook]]:
        match block:
            case CodeBlock():
                return code.render(block, message_length)
            case Table():
                return tables.render(block)
            case Heading():
                content = self._inline.format(block.content)
                return (
                    f'<h{block.level} class="message-heading heading-{block.level}">'
                    f"{content}</h{block.level}>",
                    [],
                )
            case ListRun():
                return self._lists.render(block), []
            case Blockquote():
                return f'<blockquote class="message-quote">{self._inline.format(block.content)}</blockquote>', []
            case Rule():
                return '<hr class="message-rule">', []
            case Callout():
                kind = block.callout_kind.value
                return (
                    f'<div class="callout callout-{kind}">'
                    f'<span class="callout-title">{kind.capitalize()}</span>'
                    f"<p>{self._multiline(block.content)}</p></div>",
                    [],
                )
            case Paragraph():
                return f'<p class="message-paragraph">{self._multiline(block.content)}</p>', []
            case _:
                assert_never(block)

    def _multiline(self, content: str) -> str:
        return "<br>".join(self._inline.format(line) for line in content.split("\n"))


_default_renderer: MessageRenderer | None = None


def render_message(text: str) -> RenderedMessage:
    """Render a reply with a shared default renderer."""
    global _default_renderer
    if _default_renderer is None:
        _default_renderer = MessageRenderer()
    return _default_renderer.render(text)
