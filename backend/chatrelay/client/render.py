"""Markdown → HTML rendering for assistant entries.

Fenced code blocks with a language Pygments knows are highlighted;
anything else is escaped. Output is wrapped in `<pre class="hljs">` so
the same stylesheet works for both cases.
"""

from __future__ import annotations

from markdown_it import MarkdownIt
from markdown_it.common.utils import escapeHtml
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

_formatter = HtmlFormatter(nowrap=True)


def highlight_code(code: str, lang: str, attrs: str) -> str:
    if lang:
        try:
            lexer = get_lexer_by_name(lang)
        except ClassNotFound:
            lexer = None
        if lexer is not None:
            return (
                '<pre class="hljs"><code>'
                + highlight(code, lexer, _formatter)
                + "</code></pre>"
            )
    return '<pre class="hljs"><code>' + escapeHtml(code) + "</code></pre>"


markdown = MarkdownIt(
    "js-default",
    {
        "html": True,
        "linkify": True,
        "typographer": True,
        "breaks": True,
        "xhtmlOut": True,
        "langPrefix": "language-",
        "highlight": highlight_code,
    },
)


def render_markdown(text: str) -> str:
    return markdown.render(text)
