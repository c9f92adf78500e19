'''
Assembles a complete preview page from LaTeX source.

The order of operations is fixed by the sanitizer boundary: convert (math hidden behind
placeholders), sanitize, and only then restore the math. A sanitizer would otherwise be free to
mangle the backslashes, braces and angle brackets that math depends on.
'''

from __future__ import annotations
from . import converter, math_render, styles
from .progress import Message, Progress

from lxml.html import defs
import lxml.html
from lxml_html_clean import Cleaner

import html
import re
from typing import Callable, Iterable, Optional

NAME = 'preview'  # For progress/error messages

Sanitizer = Callable[[str], str]

MATHJAX_URL = 'https://cdn.jsdelivr.net/npm/mathjax@3/es5/tex-svg.js'

MATHJAX_CONFIG = '''
    <script>
        window.MathJax = {
            tex: {
                inlineMath: [['$', '$'], ['\\\\(', '\\\\)']],
                displayMath: [['$$', '$$'], ['\\\\[', '\\\\]']],
                processEnvironments: true
            }
        };
    </script>
'''

PAGE_STYLE = '''
    body {
        max-width: 48rem;
        margin: 2rem auto;
        padding: 0 1rem;
        font-family: system-ui, sans-serif;
        background: #ffffff;
    }
    .texpv-status {
        font-size: 0.75rem;
        color: var(--p-muted);
        margin-bottom: 1rem;
    }
'''


def make_sanitizer() -> Sanitizer:
    '''
    An lxml Cleaner that strips scripts, event handlers, forms and embedded objects, but keeps
    the inline styles the converter relies on.
    '''
    cleaner = Cleaner(
        scripts = True,
        javascript = True,
        comments = True,
        style = False,
        inline_style = False,
        forms = True,
        embedded = True,
        frames = True,
        safe_attrs_only = True,
        safe_attrs = defs.safe_attrs | {'style'},
    )

    def sanitize(html_text: str) -> str:
        if not html_text.strip():
            return html_text
        return cleaner.clean_html(html_text)

    return sanitize


def render_fragment(latex: str,
                    sanitize: Optional[Sanitizer] = None,
                    math_mode: str = math_render.MATH_MATHJAX,
                    progress: Optional[Progress] = None) -> str:
    result = converter.convert(latex)
    html_text = result.html
    if sanitize is not None:
        html_text = sanitize(html_text)
    return math_render.restore(html_text, result.math_map, math_mode, progress)


def find_title(fragment: str) -> Optional[str]:
    '''The text of the first <h1> (the document title, if the source has one).'''
    if not fragment.strip():
        return None
    root = lxml.html.fragment_fromstring(fragment, create_parent = 'div')
    headings = root.xpath('.//h1')
    if headings:
        return headings[0].text_content().strip() or None
    return None


def build_page(fragment: str,
               *,
               title: Optional[str] = None,
               math_mode: str = math_render.MATH_MATHJAX,
               word_count: Optional[int] = None,
               messages: Iterable[Message] = ()) -> str:

    title_html = html.escape(title or find_title(fragment) or 'Preview')

    css_vars = ':root {\n' + '\n'.join(
        f'{name}: {value};' for name, value in sorted(styles.PAGE_VARS.items())
    ) + '\n}'

    scripts = (f'{MATHJAX_CONFIG.strip()}\n<script async src="{MATHJAX_URL}"></script>'
               if math_mode == math_render.MATH_MATHJAX else '')

    status = (f'<div class="texpv-status">{word_count} words</div>'
              if word_count is not None else '')

    full_html_template = '''
        <!DOCTYPE html>
        <html lang="en">
        <head>
        <meta charset="utf-8" />
        <title>{title_html:s}</title>
        <style>
        {css_vars:s}
        {page_style:s}
        </style>
        {scripts:s}
        </head>
        <body>{messages:s}
        {status:s}
        {content_html:s}
        </body>
        </html>
    '''
    return re.sub(r'\n\s*', '\n', full_html_template.strip()).format(
        title_html = title_html,
        css_vars = css_vars,
        page_style = PAGE_STYLE.strip(),
        scripts = scripts,
        messages = ''.join('\n' + msg.as_html_str() for msg in messages),
        status = status,
        content_html = fragment,
    )
