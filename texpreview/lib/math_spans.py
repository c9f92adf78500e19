'''
Recognition of math-mode spans.

The same delimiters matter to both the validator (which strips or blanks math so that it can
reason about the text around it) and the converter (which lifts math out of the text before any
other rewriting, so that nothing else can corrupt it).

Ordering matters throughout: '$$...$$' must be consumed before '$...$', or a display span would be
mis-read as two adjacent inline spans.
'''

import re
from typing import List


# Named math environments. Each may also appear in starred form.
DISPLAY_MATH_ENVS = ('align', 'equation', 'gather', 'multline')
PROSE_MATH_ENVS = ('equation', 'align', 'gather', 'math', 'displaymath', 'multline')


def math_env_regex(names) -> re.Pattern:
    '''
    Matches \\begin{name}...\\end{name} for any of the given names (starred or not), with the
    closing tag required to repeat exactly the name that opened it.
    '''
    alternatives = '|'.join(re.escape(n) for n in names)
    return re.compile(
        rf'''
        \\begin\{{ (?P<env> (?:{alternatives}) \*? ) \}}
        (?P<body> .*? )
        \\end\{{ (?P=env) \}}
        ''',
        re.VERBOSE | re.DOTALL)


DISPLAY_DOLLAR_RE  = re.compile(r'\$\$(?P<body>.*?)\$\$', re.DOTALL)
BRACKET_DISPLAY_RE = re.compile(r'\\\[(?P<body>.*?)\\\]', re.DOTALL)
DISPLAY_ENV_RE     = math_env_regex(DISPLAY_MATH_ENVS)
PAREN_INLINE_RE    = re.compile(r'\\\((?P<body>.*?)\\\)', re.DOTALL)
DOLLAR_INLINE_RE   = re.compile(r'(?<!\\)\$(?P<body>[^$\n]+?)(?<!\\)\$')

# Validator-side patterns.
PAIRED_DELIMITERS_RE = re.compile(r'\$\$.*?\$\$|\\\[.*?\\\]|\\\(.*?\\\)', re.DOTALL)
SINGLE_DOLLAR_RE     = re.compile(r'(?<![\\$])\$(?!\$)')
PROSE_ENV_RE         = math_env_regex(PROSE_MATH_ENVS)
PROSE_DOLLAR_RE      = re.compile(r'(?<!\\)\$[^$]+?(?<!\\)\$')


MATH_COMMANDS = (
    'frac', 'sqrt', 'sum', 'int', 'prod', 'lim',
    'alpha', 'beta', 'gamma', 'delta', 'epsilon', 'theta', 'lambda', 'mu', 'pi', 'sigma',
    'phi', 'omega',
    'infty', 'partial', 'nabla',
    'rightarrow', 'leftarrow', 'Rightarrow', 'Leftrightarrow',
    'leq', 'geq', 'neq', 'approx',
    'times', 'div', 'pm', 'cdot',
)

# A command name must not run straight on into more letters, so '\pi' is not found inside '\pitch'.
MATH_COMMAND_RE = re.compile(
    r'\\(?P<cmd>' + '|'.join(MATH_COMMANDS) + r')(?![a-zA-Z])')


def strip_paired_math(text: str) -> str:
    '''Removes '$$...$$', '\\[...\\]' and '\\(...\\)' spans entirely.'''
    return PAIRED_DELIMITERS_RE.sub('', text)


def count_single_dollars(text: str) -> int:
    '''
    Counts unescaped '$' characters that are not part of a '$$' pair, after the paired delimiter
    spans have been stripped.
    '''
    return len(SINGLE_DOLLAR_RE.findall(strip_paired_math(text)))


def blank_math(text: str) -> str:
    '''
    Returns the "prose-only" text, with every math span replaced by a single space.
    '''
    for regex in (DISPLAY_DOLLAR_RE,
                  PROSE_ENV_RE,
                  BRACKET_DISPLAY_RE,
                  PAREN_INLINE_RE,
                  PROSE_DOLLAR_RE):
        text = regex.sub(' ', text)
    return text


def find_math_commands(text: str) -> List[str]:
    '''Lists the distinct math command names found in the text, in order of first appearance.'''
    found = []
    for match in MATH_COMMAND_RE.finditer(text):
        cmd = match.group('cmd')
        if cmd not in found:
            found.append(cmd)
    return found
