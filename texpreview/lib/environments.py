'''
Pairs \\begin{name} and \\end{name} tokens using a stack.

Tokens are discovered in a single left-to-right pass. A mismatched \\end does not pop the open
environment, since the environment it should have closed is presumably still open; this keeps one
mistake from cascading into errors for every later \\end.
'''

from dataclasses import dataclass
import re
from typing import List, Optional


ENV_TOKEN_RE = re.compile(r'\\(?P<kind>begin|end)\s*\{(?P<name>[^}]+)\}')

EXTRA_END = 'extra-end'
MISMATCH  = 'mismatch'
UNCLOSED  = 'unclosed'


@dataclass(frozen = True)
class EnvironmentFrame:
    name: str
    position: int


@dataclass(frozen = True)
class EnvironmentProblem:
    kind: str
    name: str
    position: int
    expected: Optional[str] = None


def match_environments(text: str) -> List[EnvironmentProblem]:
    '''
    Returns the problems found, in the order they should be reported: extra and mismatched \\end
    tokens in source order, followed by every environment left open (outermost first).
    '''
    problems = []
    stack: List[EnvironmentFrame] = []

    for match in ENV_TOKEN_RE.finditer(text):
        name = match.group('name')
        position = match.start()

        if match.group('kind') == 'begin':
            stack.append(EnvironmentFrame(name, position))

        elif not stack:
            problems.append(EnvironmentProblem(EXTRA_END, name, position))

        elif stack[-1].name != name:
            problems.append(EnvironmentProblem(MISMATCH, name, position,
                                               expected = stack[-1].name))

        else:
            stack.pop()

    problems.extend(EnvironmentProblem(UNCLOSED, frame.name, frame.position)
                    for frame in stack)
    return problems
