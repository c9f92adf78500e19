from texpreview.lib import environments
from texpreview.lib.environments import EXTRA_END, MISMATCH, UNCLOSED

import unittest
from hamcrest import assert_that, contains_exactly, empty, has_properties


class EnvironmentsTestCase(unittest.TestCase):

    def test_well_nested(self):
        text = r'''
            \begin{document}
            \begin{itemize}\item a\end{itemize}
            \begin{table}\begin{tabular}{cc}a&b\end{tabular}\end{table}
            \end{document}
        '''
        assert_that(environments.match_environments(text), empty())


    def test_extra_end(self):
        assert_that(
            environments.match_environments(r'text \end{itemize}'),
            contains_exactly(has_properties(kind = EXTRA_END, name = 'itemize', position = 5)))


    def test_mismatch_keeps_frame_open(self):
        # The mismatched \end{B} must not pop A, so the later \end{A} closes it cleanly.
        problems = environments.match_environments(r'\begin{A}x\end{B}y\end{A}')
        assert_that(problems, contains_exactly(
            has_properties(kind = MISMATCH, name = 'B', expected = 'A')))


    def test_unclosed_outermost_first(self):
        problems = environments.match_environments(r'\begin{A}\begin{B}\begin{C}\end{C}')
        assert_that(problems, contains_exactly(
            has_properties(kind = UNCLOSED, name = 'A', position = 0),
            has_properties(kind = UNCLOSED, name = 'B', position = 9),
        ))


    def test_report_order(self):
        problems = environments.match_environments(r'\end{X}\begin{A}\end{B}')
        assert_that(problems, contains_exactly(
            has_properties(kind = EXTRA_END, name = 'X'),
            has_properties(kind = MISMATCH, name = 'B', expected = 'A'),
            has_properties(kind = UNCLOSED, name = 'A'),
        ))


    def test_whitespace_and_starred_names(self):
        assert_that(environments.match_environments(r'\begin {align*} x \end{align*}'), empty())
