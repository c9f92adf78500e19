from texpreview.lib import progress as prog

import unittest
from unittest.mock import patch
from hamcrest import (assert_that, contains_exactly, contains_string, empty, has_length,
                      has_properties, instance_of, is_, is_not)

import io


@patch('sys.stdout', new_callable = io.StringIO)
class ProgressTestCase(unittest.TestCase):

    def test_wrap(self, mock_stdout):
        assert_that(list(prog.wrap('', 10)), contains_exactly((1, True, '')))
        assert_that(list(prog.wrap('abcdefgh\nxy', 5)), contains_exactly(
            (1, True, 'abcde'),
            (1, False, 'fgh'),
            (2, True, 'xy'),
        ))


    def test_progress_and_warning(self, mock_stdout):
        progress = prog.Progress()
        msg = progress.progress('validation', msg = 'no issues found', advice = 'carry on')
        assert_that(msg, instance_of(prog.ProgressMsg))
        assert_that(msg.details_list, contains_exactly(has_properties(title = 'Advice')))

        warning = progress.warning('math', msg = 'odd', code = '$x')
        assert_that(warning, instance_of(prog.WarningMsg))
        assert_that(warning.details_list, contains_exactly(
            has_properties(title = 'Code', show_line_numbers = True)))

        assert_that(progress.get_errors(), empty())
        assert_that(mock_stdout.getvalue(), contains_string('no issues found'))
        assert_that(mock_stdout.getvalue(), contains_string('[!] math'))


    def test_errors(self, mock_stdout):
        progress = prog.Progress()
        progress.error('building', msg = 'cannot write')
        try:
            raise OSError('disk full')
        except OSError as e:
            error = progress.error('building', msg = 'cannot write', exception = e,
                                   output = 'the log')

        assert_that(error.msg, is_('cannot write: disk full (OSError)'))
        assert_that([d.title for d in error.details_list], contains_exactly('Traceback', 'Output'))
        assert_that(progress.get_errors(), has_length(2))

        progress.clear_errors()
        assert_that(progress.get_errors(), empty())


    def test_cache_hits_hidden_by_default(self, mock_stdout):
        prog.Progress().cache_hit('compile', resource = 'compiled PDF')
        assert_that(mock_stdout.getvalue(), is_(''))

        prog.Progress(show_cache_hits = True).cache_hit('compile', resource = 'compiled PDF')
        assert_that(mock_stdout.getvalue(), contains_string('Using cached value for compiled PDF'))


    def test_as_html_str(self, mock_stdout):
        progress = prog.Progress()
        html = progress.error('validation', msg = 'Missing \\end{<doc>}.',
                              code = 'a\nb\nc', highlight_lines = {2}).as_html_str()

        assert_that(html, contains_string('<details'))
        assert_that(html, contains_string('Missing \\end{&lt;doc&gt;}.'))
        assert_that(html, is_not(contains_string('<doc>')))
        assert_that(html, contains_string('   2  b'))


    def test_context_lines(self, mock_stdout):
        details = prog.Details('Code', '\n'.join(str(n) for n in range(1, 21)),
                               show_line_numbers = True, context_lines = 2,
                               highlight_lines = {10})
        assert_that([n for n in range(1, 21) if details.is_shown(n)],
                    contains_exactly(8, 9, 10, 11, 12))
