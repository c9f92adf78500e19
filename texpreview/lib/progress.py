'''
Logging/error handling infrastructure.

Messages are printed to the console as they arrive. Warnings and errors can also render
themselves as HTML panels, so that the preview page can show what went wrong alongside the
document.
'''

from dataclasses import dataclass, field
import html
import io
import shutil
import traceback
from typing import List, Optional, Set


RESET = '\033[0m'

LINE_NUMBER_COLOUR = '\033[30;1m'
LINE_NUMBER_WIDTH = 4

HIGHLIGHT_COLOUR = '\033[43;30m'


def wrap(text, width):
    '''
    Splits text into (line_number, start_of_line, segment) tuples, breaking lines longer than
    'width'. Line numbers refer to the original (unwrapped) lines.
    '''
    line_number = 1
    start_of_line = True

    if text == '':
        yield (1, True, '')
    while text:
        newline_index = text.find('\n')
        if newline_index != -1 and newline_index <= width:
            yield (line_number, start_of_line, text[:newline_index])
            text = text[newline_index + 1:]
            start_of_line = True
            line_number += 1
        else:
            yield (line_number, start_of_line, text[:width])
            text = text[width:]
            start_of_line = False


@dataclass
class Details:
    title: str
    content: str
    show_line_numbers: bool = False
    context_lines: Optional[int] = None
    highlight_lines: Set[int] = field(default_factory = set)

    def is_shown(self, line_number: int) -> bool:
        return (self.context_lines is None
                or not self.highlight_lines
                or any(abs(line_number - hl) <= self.context_lines
                       for hl in self.highlight_lines))


class Message:
    LOCATION_COLOUR = ''
    MSG_COLOUR = ''
    TAG = ''

    PANEL_STYLE = ''
    MSG_STYLE = 'font-weight: bold;'
    LOCATION_STYLE = ''

    LISTING_STYLE = r'''
        background: rgba(255, 255, 255, 0.7);
        color: black;
        padding: 0.5em;
        overflow: auto;
        font-family: monospace;
        margin: 0.5em 0 0 0;
    '''

    def __init__(self, location: str, msg: str, details_list: Optional[List[Details]] = None):
        self._location = location
        self._msg = msg
        self._details_list = details_list or []

    @property
    def location(self) -> str:
        return self._location

    @property
    def msg(self) -> str:
        return self._msg

    @property
    def details_list(self) -> List[Details]:
        return list(self._details_list)


    def print(self):
        print(f'{self.LOCATION_COLOUR}{self.TAG}{self._location}:{RESET} {self.MSG_COLOUR}{self._msg}{RESET}')

        terminal_width = shutil.get_terminal_size(fallback = (80, 40)).columns
        inner_width = terminal_width - 6

        first = True
        for details in self._details_list:
            if first:
                print(f'  ┌─{"─" * inner_width}─┐')
                first = False
            else:
                print(f'  ├─{"─" * inner_width}─┤')

            if details.show_line_numbers:
                text_width = inner_width - LINE_NUMBER_WIDTH - 1

                for line_number, start_of_line, line in wrap(details.content.rstrip(), text_width):
                    if not details.is_shown(line_number):
                        continue

                    n_str = str(line_number).rjust(LINE_NUMBER_WIDTH) if start_of_line else (' ' * LINE_NUMBER_WIDTH)
                    hl_str = HIGHLIGHT_COLOUR if line_number in details.highlight_lines else ""
                    print(f'  │{LINE_NUMBER_COLOUR}{n_str}{RESET}  {hl_str}{line}{" " * (text_width - len(line))}{RESET} │')

            else:
                for _, _, line in wrap(details.content.rstrip(), inner_width):
                    print(f'  │ {line}{" " * (inner_width - len(line))} │')

        if not first:
            print(f'  └─{"─" * inner_width}─┘')


    def as_html_str(self) -> str:
        buf = io.StringIO()
        buf.write(
            f'<details style="{self.PANEL_STYLE}">'
            f'<summary style="{self.MSG_STYLE}">'
            f'<span style="{self.LOCATION_STYLE}">{html.escape(self.TAG)}{html.escape(self._location)}:</span> '
            f'{html.escape(self._msg)}</summary>')

        for details in self._details_list:
            if details.show_line_numbers:
                lines = (
                    f'{line_number:>{LINE_NUMBER_WIDTH}}  {line}'
                    for line_number, line in enumerate(details.content.rstrip().splitlines(),
                                                       start = 1)
                    if details.is_shown(line_number)
                )
                content = '\n'.join(lines)
            else:
                content = details.content
            buf.write(f'<pre style="{self.LISTING_STYLE}">{html.escape(content)}</pre>')

        buf.write('</details>')
        return buf.getvalue()


class ProgressMsg(Message):
    LOCATION_COLOUR = '\033[32m'
    MSG_COLOUR = ''
    TAG = ''

class WarningMsg(Message):
    LOCATION_COLOUR = '\033[33;1m'
    MSG_COLOUR = '\033[37;1m'
    TAG = '[!] '

    PANEL_STYLE = r'''
        background: #fff4d6;
        border-left: 4px solid #e0a800;
        padding: 0.5em;
        margin: 0.25em 0;
        border-radius: 2mm;
    '''

    LOCATION_STYLE = 'color: #8a6100;'

class ErrorMsg(Message):
    LOCATION_COLOUR = '\033[31;1m'
    MSG_COLOUR = '\033[37;1m'
    TAG = '[!!] '

    PANEL_STYLE = r'''
        background: repeating-linear-gradient(-45deg,#c44,#c44 25px,#b33 25px,#b33 50px);
        padding: 0.5em;
        margin: 0.25em 0;
        border-radius: 2mm;
    '''

    MSG_STYLE = r'''
        font-weight: bold;
        color: white;
        text-shadow: 1px 1px 2px black;
    '''

    LOCATION_STYLE = 'color: yellow;'



class Progress:
    def __init__(self, show_cache_hits = False):
        self._errors = []
        self._show_cache_hits = show_cache_hits


    def show(self, msg: Message):
        msg.print()
        if isinstance(msg, ErrorMsg):
            self._errors.append(msg)
        return msg


    def progress(self, location, *, msg, advice = None):
        details_list = []
        if advice:
            details_list.append(Details('Advice', advice))
        return self.show(ProgressMsg(location, msg, details_list))


    def cache_hit(self, location: str, *, resource: Optional[str] = None):
        obj = ProgressMsg(location,
                          'Using cached value' + (f' for {resource}' if resource else ''))
        return self.show(obj) if self._show_cache_hits else obj


    def warning(self, location, *, msg, code = None, highlight_lines = None):
        details_list = []
        if code:
            details_list.append(Details('Code',
                                        code,
                                        show_line_numbers = True,
                                        highlight_lines = highlight_lines or set(),
                                        context_lines = 2))
        return self.show(WarningMsg(location, msg, details_list))


    def error(self, location, *, msg = None, exception = None, show_traceback = True,
              output = None, code = None, highlight_lines = None, context_lines = 6):
        details_list = []
        if exception:
            msg = f'{msg}: {str(exception)} ({exception.__class__.__name__})' if msg else str(exception)
            if show_traceback:
                details_list.append(Details('Traceback', ''.join(traceback.format_exc())))

        elif not msg:
            msg = 'error'

        if output:
            details_list.append(Details('Output', output))

        if code:
            details_list.append(Details('Code',
                                        code,
                                        show_line_numbers = True,
                                        highlight_lines = highlight_lines or set(),
                                        context_lines = context_lines))

        return self.show(ErrorMsg(location, msg, details_list))


    def get_errors(self):
        return list(self._errors)


    def clear_errors(self):
        self._errors.clear()
