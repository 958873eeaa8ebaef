"""The single trust boundary between generated markup and the display layer.

Hidden design decisions:
- Filtering library (bleach, html5lib-based) and its allow-lists
- Disallowed tags are stripped, not escaped; nothing is reported
- style attributes are limited to layout properties through
  bleach's CSS sanitizer
- Executable-content elements and event-handler attributes can never
  be allow-listed, whatever the configuration
"""

import bleach
from bleach.css_sanitizer import CSSSanitizer

from ..errors import SanitizerConfigError

EXECUTABLE_TAGS = frozenset({
    "applet",
    "base",
    "embed",
    "form",
    "frame",
    "frameset",
    "iframe",
    "input",
    "link",
    "math",
    "meta",
    "noscript",
    "object",
    "script",
    "select",
    "style",
    "svg",
    "template",
    "textarea",
})

FORBIDDEN_ATTRIBUTES = frozenset({"formaction", "srcdoc", "src"})

ALLOWED_TAGS = frozenset({
    "a",
    "blockquote",
    "br",
    "button",
    "code",
    "del",
    "div",
    "em",
    "h1",
    "h2",
    "h3",
    "h4",
    "h5",
    "h6",
    "hr",
    "li",
    "p",
    "pre",
    "span",
    "strong",
    "table",
    "tbody",
    "td",
    "th",
    "thead",
    "tr",
    "ul",
})

ALLOWED_ATTRIBUTES = {
    "*": ["class"],
    "a": ["href", "title", "target", "rel"],
    "button": ["type", "title", "data-action", "data-target"],
    "code": ["id"],
    "div": ["style", "data-table-id", "data-code-id"],
    "span": ["style"],
    "table": ["id"],
}

ALLOWED_PROTOCOLS = frozenset({"http", "https", "mailto"})

ALLOWED_CSS_PROPERTIES = frozenset({"margin-left", "padding-left", "text-align"})


class MarkupSanitizer:
    """Allow-list filter applied to every rendered reply.

    Example:
        sanitizer = MarkupSanitizer()
        safe = sanitizer.sanitize('<p onclick="x()">hi<script>x()</script></p>')
        # '<p>hix()</p>' - handler and script element removed
    """

    def __init__(
        self,
        tags: frozenset[str] = ALLOWED_TAGS,
        attributes: dict[str, list[str]] | None = None,
        protocols: frozenset[str] = ALLOWED_PROTOCOLS,
        css_properties: frozenset[str] = ALLOWED_CSS_PROPERTIES,
    ) -> None:
        attributes = attributes if attributes is not None else ALLOWED_ATTRIBUTES
        self._check_allow_list(tags, attributes)

        self._cleaner = bleach.sanitizer.Cleaner(
            tags=set(tags),
            attributes=attributes,
            protocols=set(protocols),
            strip=True,
            strip_comments=True,
            css_sanitizer=CSSSanitizer(allowed_css_properties=set(css_properties)),
        )

    @staticmethod
    def _check_allow_list(tags: frozenset[str], attributes: dict[str, list[str]]) -> None:
        executable = sorted(tag for tag in tags if tag.lower() in EXECUTABLE_TAGS)
        if executable:
            raise SanitizerConfigError(f"executable elements cannot be allowed: {executable}")

        for tag, names in attributes.items():
            for name in names:
                lowered = name.lower()
                if lowered.startswith("on") or lowered in FORBIDDEN_ATTRIBUTES:
                    raise SanitizerConfigError(f"attribute {name!r} cannot be allowed on {tag!r}")

    def sanitize(self, markup: str) -> str:
        """Filter markup against the allow-list.

        Args:
            markup: Untrusted markup

        Returns:
            Markup containing only allowed tags, attributes and protocols
        """
        return self._cleaner.clean(markup)
