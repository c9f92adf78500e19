'''
Character-level brace scanning.

A brace counts as structural unless it is escaped. "Escaped" is decided by looking at most two
characters back: the brace is escaped if the previous character is a backslash and the one before
that is not. So '\\{' is literal, '\\\\{' is structural (a line break followed by a group), and
longer backslash runs are not examined further.
'''

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen = True)
class BraceScan:
    depth: int
    '''Depth at the end of the scan, or -1 if the scan stopped on an unmatched '}'.'''

    unmatched_close: Optional[int] = None
    '''Index of the first '}' that had no matching '{', if any.'''

    @property
    def unclosed(self) -> int:
        return max(self.depth, 0)


def is_escaped(text: str, index: int) -> bool:
    return (index > 0
            and text[index - 1] == '\\'
            and (index == 1 or text[index - 2] != '\\'))


def scan_braces(text: str) -> BraceScan:
    depth = 0
    for index, ch in enumerate(text):
        if ch not in '{}' or is_escaped(text, index):
            continue

        if ch == '{':
            depth += 1
        else:
            depth -= 1
            if depth < 0:
                # Counting stops here; anything after is not reliable.
                return BraceScan(depth = depth, unmatched_close = index)

    return BraceScan(depth = depth)
