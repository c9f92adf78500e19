'''
Restores math placeholders once the HTML has been sanitized.

There are three ways to put the math back:

* 'mathjax' (the default): the math source is restored, HTML-escaped, for MathJax to typeset in
  the browser.
* 'mathml': each math span is converted to a <math> element with latex2mathml, so the page needs
  no script to display it.
* 'raw': the math source is restored as text, HTML-escaped as for 'mathjax', but with no script
  to typeset it.
'''

from __future__ import annotations
from .converter import restore_math
from .progress import Progress

import latex2mathml.converter

import html
import re
from typing import Dict, Optional

NAME = 'math'  # For warnings

MATH_MATHJAX = 'mathjax'
MATH_MATHML  = 'mathml'
MATH_RAW     = 'raw'

MATH_MODES = (MATH_MATHJAX, MATH_MATHML, MATH_RAW)

DELIMITED_RE = re.compile(
    r'''
    \A \s* (
        \$\$ (?P<dollars> .*? ) \$\$
        | \\\[ (?P<brackets> .*? ) \\\]
        | \\\( (?P<parens> .*? ) \\\)
        | \$ (?P<dollar> .*? ) \$
        | \\begin\{ (?P<env> [a-z]+ ) \*? \} (?P<env_body> .*? ) \\end\{ (?P=env) \*? \}
    ) \s* \Z
    ''',
    re.VERBOSE | re.DOTALL)

ALIGNED_ENVS = {'align', 'gather', 'multline'}


def split_delimiters(source: str) -> tuple[str, bool]:
    '''
    Returns the math content without its delimiters, and whether it is display math.
    Unrecognised input is returned unchanged, as inline math.
    '''
    match = DELIMITED_RE.match(source)
    if not match:
        return source, False

    if match['env']:
        body = match['env_body']
        if match['env'] in ALIGNED_ENVS:
            body = rf'\begin{{aligned}}{body}\end{{aligned}}'
        return body, True

    for group, display in (('dollars', True), ('brackets', True),
                           ('parens', False), ('dollar', False)):
        if match[group] is not None:
            return match[group], display

    return source, False


def to_mathml(source: str, progress: Optional[Progress] = None) -> str:
    body, display = split_delimiters(source)
    try:
        return latex2mathml.converter.convert(body.strip(),
                                              display = 'block' if display else 'inline')
    except Exception as e:
        # latex2mathml has no common base class for its errors.
        if progress is not None:
            progress.warning(NAME, msg = f'Cannot convert to MathML ({e.__class__.__name__}); '
                                         'showing the source instead',
                             code = source)
        return f'<code>{html.escape(source)}</code>'


def restore(html_text: str,
            math_map: Dict[str, str],
            mode: str = MATH_MATHJAX,
            progress: Optional[Progress] = None) -> str:

    if mode == MATH_MATHML:
        replacements = {token: to_mathml(source, progress) for token, source in math_map.items()}

    elif mode in (MATH_MATHJAX, MATH_RAW):
        replacements = {token: html.escape(source, quote = False)
                        for token, source in math_map.items()}

    else:
        raise ValueError(f'Unknown math mode "{mode}"; expected one of {", ".join(MATH_MODES)}')

    return restore_math(html_text, replacements)
