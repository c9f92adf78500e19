'''
Structural validation of LaTeX source.

validate() runs a fixed sequence of checks and reports what it finds as a list of
ValidationIssue objects, in check order and, within a check, in scan order. It never raises for
string input; the worst a pathological document can do is produce more issues.

Issues come in two severities: 'error' means the document will almost certainly fail to compile;
'warning' flags something that is likely (but not certainly) wrong. Callers use the presence of
any error to decide whether to attempt a compilation.
'''

from __future__ import annotations
from . import braces, environments, math_spans

from dataclasses import dataclass
import re
from typing import List


ERROR = 'error'
WARNING = 'warning'

REQUIRED_DECLARATIONS = (
    ('\\documentclass',   'Missing \\documentclass declaration.'),
    ('\\begin{document}', 'Missing \\begin{document}.'),
    ('\\end{document}',   'Missing \\end{document}.'),
)

INCLUDEGRAPHICS_RE = re.compile(r'\\includegraphics', re.IGNORECASE)

MAX_LISTED_COMMANDS = 5


@dataclass(frozen = True)
class ValidationIssue:
    kind: str
    message: str

    @property
    def is_error(self) -> bool:
        return self.kind == ERROR


def has_errors(issues) -> bool:
    return any(issue.is_error for issue in issues)


def _check_declarations(latex: str) -> List[ValidationIssue]:
    return [ValidationIssue(ERROR, message)
            for literal, message in REQUIRED_DECLARATIONS
            if literal not in latex]


def _check_braces(latex: str) -> List[ValidationIssue]:
    scan = braces.scan_braces(latex)
    if scan.unmatched_close is not None:
        return [ValidationIssue(
            ERROR, 'Found closing brace "}" without matching opening brace.')]

    if scan.unclosed > 0:
        return [ValidationIssue(ERROR, f'Found {scan.unclosed} unclosed brace(s) "{{".')]

    return []


def _check_environments(latex: str) -> List[ValidationIssue]:
    issues = []
    for problem in environments.match_environments(latex):
        if problem.kind == environments.EXTRA_END:
            message = f'Extra \\end{{{problem.name}}} found.'

        elif problem.kind == environments.MISMATCH:
            message = (f'Environment mismatch: Expected \\end{{{problem.expected}}} but found '
                       f'\\end{{{problem.name}}}.')

        else:
            message = f'Unclosed environment: \\begin{{{problem.name}}}.'

        issues.append(ValidationIssue(ERROR, message))
    return issues


def _check_forbidden(latex: str) -> List[ValidationIssue]:
    if INCLUDEGRAPHICS_RE.search(latex):
        return [ValidationIssue(
            ERROR,
            '\\includegraphics is not supported: image files are not available to the compiler. '
            'Remove the command or describe the figure in text.')]
    return []


def _check_inline_math(latex: str) -> List[ValidationIssue]:
    if math_spans.count_single_dollars(latex) % 2 == 1:
        return [ValidationIssue(
            WARNING, 'Unclosed inline math: found an odd number of "$" delimiters.')]
    return []


def _check_display_delimiters(latex: str) -> List[ValidationIssue]:
    issues = []
    for opener, closer in (('\\[', '\\]'), ('\\(', '\\)')):
        n_open = latex.count(opener)
        n_close = latex.count(closer)
        if n_open != n_close:
            issues.append(ValidationIssue(
                WARNING,
                f'Unbalanced math delimiters: {n_open} "{opener}" but {n_close} "{closer}".'))
    return issues


def _check_math_outside_math_mode(latex: str) -> List[ValidationIssue]:
    commands = math_spans.find_math_commands(math_spans.blank_math(latex))
    if not commands:
        return []

    listed = ', '.join(f'\\{cmd}' for cmd in commands[:MAX_LISTED_COMMANDS])
    if len(commands) > MAX_LISTED_COMMANDS:
        listed += ', ...'

    return [ValidationIssue(
        WARNING,
        f'Math command(s) used outside math mode: {listed}. '
        'Wrap them in $...$ or \\(...\\).')]


CHECKS = (
    _check_declarations,
    _check_braces,
    _check_environments,
    _check_forbidden,
    _check_inline_math,
    _check_display_delimiters,
    _check_math_outside_math_mode,
)


def validate(latex: str | None) -> List[ValidationIssue]:
    if not latex:
        return []

    issues = []
    for check in CHECKS:
        issues.extend(check(latex))
    return issues
