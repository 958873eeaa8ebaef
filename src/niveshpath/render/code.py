"""Fenced code block rendering."""

from markdown_it.common.utils import escapeHtml

from .ids import IdMinter
from .models import CodeBlock, HookAction, InteractionHook


class CodeRenderer:
    """Renders a code block with a language label and a copy affordance.

    The copy button is left out for very short replies (greetings),
    matching the chat screen's behaviour.
    """

    def __init__(self, minter: IdMinter, copy_min_message_length: int = 20) -> None:
        self._minter = minter
        self._copy_min_message_length = copy_min_message_length

    def render(self, block: CodeBlock, message_length: int) -> tuple[str, list[InteractionHook]]:
        """Render a code block.

        Args:
            block: The code block
            message_length: Length of the whole reply, for the greeting check

        Returns:
            (markup, hooks) keyed by a freshly minted CodeId
        """
        code_id = self._minter.code_id()
        language = block.language.strip()
        label = language.upper() if language else "CODE"
        lang_class = f" language-{escapeHtml(language)}" if language else ""

        with_copy = message_length >= self._copy_min_message_length
        button = ""
        if with_copy:
            button = (
                '<button type="button" class="code-action" title="Copy code" '
                f'data-action="{HookAction.COPY.value}" data-target="{code_id}">Copy</button>'
            )

        markup = (
            f'<div class="code-block" data-code-id="{code_id}">'
            f'<div class="code-header"><span class="code-language">{escapeHtml(label)}</span>{button}</div>'
            f'<pre class="code-pre{lang_class}">'
            f'<code id="{code_id}" class="code-content{lang_class}">{escapeHtml(block.content)}</code>'
            "</pre></div>"
        )

        hooks = []
        if with_copy:
            hooks.append(InteractionHook(action=HookAction.COPY, target_id=code_id, payload=block.content))
        return markup, hooks
