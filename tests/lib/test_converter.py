from texpreview.lib import converter
from texpreview.lib.converter import ConversionResult
import texpreview

import unittest
from hamcrest import (assert_that, contains_exactly, contains_string, empty, has_entries,
                      has_length, is_, is_not, matches_regexp, same_instance, starts_with)

import lxml.html

import re
from textwrap import dedent


def parse(html):
    return lxml.html.fragment_fromstring(html, create_parent = 'div')


def texts(root, selector):
    return [element.text_content().strip() for element in root.cssselect(selector)]


class ConverterTestCase(unittest.TestCase):

    def test_empty(self):
        result = converter.convert('')
        assert_that(result, is_(ConversionResult(html = '', math_map = {})))
        assert_that(converter.convert(None).html, is_(''))


    def test_inline_math_placeholder(self):
        result = converter.convert('Hello $x+1$ world')
        assert_that(result.math_map, is_({'__MTH_0__': '$x+1$'}))

        root = parse(result.html)
        assert_that(texts(root, 'p'), contains_exactly('Hello __MTH_0__ world'))


    def test_itemize(self):
        result = converter.convert(r'\begin{itemize}\item A\item B\end{itemize}')
        root = parse(result.html)
        assert_that(root.cssselect('ul'), has_length(1))
        assert_that(texts(root, 'ul > li'), contains_exactly('A', 'B'))
        assert_that(root.cssselect('p'), empty())


    def test_enumerate_and_description(self):
        result = converter.convert(dedent(r'''
            \begin{enumerate}
                \item First
                \item Second
            \end{enumerate}

            \begin{description}
                \item[Term] The description.
                \item[Other] Another one.
            \end{description}
        '''))
        root = parse(result.html)
        assert_that(texts(root, 'ol > li'), contains_exactly('First', 'Second'))
        assert_that(texts(root, 'dl > dt'), contains_exactly('Term', 'Other'))
        assert_that(texts(root, 'dl > dd'), contains_exactly('The description.', 'Another one.'))


    def test_nested_lists(self):
        result = converter.convert(
            r'\begin{itemize}\item a \begin{enumerate}\item x\end{enumerate}\item b\end{itemize}')
        root = parse(result.html)
        assert_that(root.cssselect('ul > li'), has_length(2))
        assert_that(texts(root, 'ul > li > ol > li'), contains_exactly('x'))
        assert_that(result.html, is_not(contains_string('__BLK_')))


    def test_text_before_first_item_kept(self):
        for latex in [r'\begin{itemize} $a$ \item B\end{itemize}',
                      r'\begin{description} $a$ \item[T] B\end{description}']:
            result = converter.convert(latex)
            assert_that(result.math_map, is_({'__MTH_0__': '$a$'}))
            assert_that(result.html.count('__MTH_0__'), is_(1))

            root = parse(result.html)
            assert_that(texts(root, 'p'), contains_exactly('__MTH_0__'))


    def test_table_extra_text_kept(self):
        result = converter.convert(
            r'\begin{table}Note $x$ \begin{tabular}{c} a \end{tabular}\end{table}')
        assert_that(result.math_map, is_({'__MTH_0__': '$x$'}))
        assert_that(result.html.count('__MTH_0__'), is_(1))

        root = parse(result.html)
        assert_that(texts(root, 'th'), contains_exactly('a'))
        assert_that(texts(root, 'p'), contains_exactly('Note __MTH_0__'))


    def test_preamble_stripped(self):
        result = converter.convert(dedent(r'''
            \documentclass[12pt]{article}
            \usepackage{amsmath}
            \usepackage[margin=1in]{geometry}
            \newcommand{\R}{\mathbb{R}}
            \begin{document}
            \noindent Hi there.\label{sec:x}
            \end{document}
        '''))
        root = parse(result.html)
        assert_that(texts(root, 'p'), contains_exactly('Hi there.'))


    def test_header(self):
        result = converter.convert(r'\title{The Title}\author{Someone}\date{Today}\maketitle Body')
        root = parse(result.html)
        assert_that(texts(root, 'div > h1'), contains_exactly('The Title'))
        assert_that(texts(root, 'p'), contains_exactly('Someone', 'Today', 'Body'))
        assert_that(result.html, is_not(contains_string('maketitle')))


    def test_no_header(self):
        assert_that(converter.convert('Just text').html, starts_with('<p'))


    def test_inline_formatting(self):
        result = converter.convert(
            r'\textbf{b} \textit{i} \emph{e} \texttt{t} \underline{u} '
            r'\href{https://example.org}{link} \url{https://example.com}')
        root = parse(result.html)
        assert_that(texts(root, 'strong'), contains_exactly('b'))
        assert_that(texts(root, 'em'), contains_exactly('i', 'e'))
        assert_that(texts(root, 'code'), contains_exactly('t'))
        assert_that(texts(root, 'u'), contains_exactly('u'))
        assert_that([a.get('href') for a in root.cssselect('a')],
                    contains_exactly('https://example.org', 'https://example.com'))
        assert_that(texts(root, 'a'), contains_exactly('link', 'https://example.com'))


    def test_nested_arguments(self):
        root = parse(converter.convert(r'\textbf{a \emph{b} c}').html)
        assert_that(texts(root, 'strong'), contains_exactly('a b c'))
        assert_that(texts(root, 'strong > em'), contains_exactly('b'))


    def test_footnotes(self):
        root = parse(converter.convert(r'One\footnote{first} two\footnote{second}').html)
        notes = root.cssselect('sup')
        assert_that([n.text_content() for n in notes], contains_exactly('[1]', '[2]'))
        assert_that([n.get('title') for n in notes], contains_exactly('first', 'second'))


    def test_sections(self):
        result = converter.convert(
            r'\section{One}\subsection*{Two}\subsubsection{Three} text')
        root = parse(result.html)
        assert_that(texts(root, 'h2'), contains_exactly('One'))
        assert_that(texts(root, 'h3'), contains_exactly('Two'))
        assert_that(texts(root, 'h4'), contains_exactly('Three'))
        assert_that(texts(root, 'p'), contains_exactly('text'))


    def test_duplicate_sections(self):
        root = parse(converter.convert(r'\section{Intro}\section{Intro}').html)
        assert_that(texts(root, 'h2'), contains_exactly('Intro', 'Intro'))


    def test_verbatim(self):
        result = converter.convert(
            '\\begin{verbatim}\nif a < b and c > d:\n    pass\n\\end{verbatim}')
        assert_that(result.html, contains_string('if a &lt; b and c &gt; d:'))

        root = parse(result.html)
        assert_that(root.cssselect('pre > code'), has_length(1))
        assert_that(root.cssselect('p'), empty())


    def test_lstlisting(self):
        root = parse(converter.convert(
            '\\begin{lstlisting}[language=Python]\nx = 1\n\\end{lstlisting}').html)
        assert_that(texts(root, 'pre > code'), contains_exactly('x = 1'))


    def test_quote(self):
        root = parse(converter.convert(
            r'\begin{quote}  Quoted.  \end{quote}\begin{quotation}Also.\end{quotation}').html)
        assert_that(texts(root, 'blockquote'), contains_exactly('Quoted.', 'Also.'))


    def test_table(self):
        result = converter.convert(dedent(r'''
            \begin{table}[h]
            \centering
            \caption{Results}
            \begin{tabular}{|l|c|}
            \hline
            Name & Score \\
            \hline
            A & 1 \\
            B \& C & 2 \\
            \hline
            \end{tabular}
            \end{table}
        '''))
        root = parse(result.html)
        assert_that(texts(root, 'table caption'), contains_exactly('Results'))
        assert_that(texts(root, 'tr > th'), contains_exactly('Name', 'Score'))
        assert_that(texts(root, 'tr > td'), contains_exactly('A', '1', r'B \& C', '2'))
        assert_that(root.cssselect('p'), empty())


    def test_bare_tabular(self):
        root = parse(converter.convert(r'\begin{tabular}{cc} a & b \\ c & d \end{tabular}').html)
        assert_that(root.cssselect('caption'), empty())
        assert_that(texts(root, 'th'), contains_exactly('a', 'b'))
        assert_that(texts(root, 'td'), contains_exactly('c', 'd'))


    def test_paragraphs(self):
        result = converter.convert('First para\nstill first.\n\nSecond\\\\line.\\newline Third.')
        root = parse(result.html)
        assert_that(root.cssselect('p'), has_length(2))
        assert_that(root.cssselect('p')[1].cssselect('br'), has_length(2))


    def test_display_math_is_block(self):
        result = converter.convert('Before\n$$E = mc^2$$\nafter')
        assert_that(result.math_map, is_({'__MTH_0__': '$$E = mc^2$$'}))

        root = parse(result.html)
        assert_that(texts(root, 'p'), contains_exactly('Before', 'after'))
        assert_that(result.html, contains_string('</p>__MTH_0__<p'))


    def test_math_round_trip(self):
        sources = [r'$a_{1} \{x\} < b$', r'\(\frac{1}{2}\)', r'\[ y \]',
                   '\\begin{align*}\na &= b \\\\\nc &= d\n\\end{align*}']
        latex = f'Inline {sources[0]} and {sources[1]}.\n\n{sources[2]}\n\n{sources[3]}\n'
        result = converter.convert(latex)

        assert_that(sorted(result.math_map.values()), is_(sorted(sources)))
        for token in result.math_map:
            assert_that(result.html.count(token), is_(1))

        restored = converter.restore_math(result.html, result.math_map)
        for source in sources:
            assert_that(restored, contains_string(source))
        assert_that(restored, is_not(matches_regexp('__MTH_[0-9]+__')))


    def test_math_protected_from_formatting(self):
        result = converter.convert(r'$\textbf{x}$ and \section{s}')
        assert_that(result.math_map, is_({'__MTH_0__': r'$\textbf{x}$'}))


    def test_restore_math_unknown_tokens(self):
        assert_that(converter.restore_math('a __MTH_0__ b __MTH_5__', {'__MTH_0__': '$x$'}),
                    is_('a $x$ b __MTH_5__'))


    def test_malformed_left_as_text(self):
        root = parse(converter.convert(r'\unknown{thing} and \begin{itemize} no end').html)
        assert_that(texts(root, 'p'), contains_exactly(r'\unknown{thing} and \begin{itemize} no end'))


    def test_no_block_placeholders_left(self):
        result = converter.convert(dedent(r'''
            \section{S}
            \begin{itemize}\item \textbf{x} \end{itemize}
            \begin{quote}\begin{enumerate}\item y\end{enumerate}\end{quote}
            $$z$$
        '''))
        assert_that(result.html, is_not(contains_string('__BLK_')))
        assert_that(re.findall('__MTH_[0-9]+__', result.html), contains_exactly('__MTH_0__'))


    def test_count_words(self):
        assert_that(converter.count_words(''), is_(0))
        assert_that(converter.count_words(None), is_(0))
        assert_that(converter.count_words(r'\begin{document} Hello \textbf{big} world \end{document}'),
                    is_(3))
        assert_that(converter.count_words(r'\section{Intro} One two. \newpage $x$'), is_(4))


    def test_public_api(self):
        assert_that(texpreview.convert, same_instance(converter.convert))
        assert_that(texpreview.restore_math, same_instance(converter.restore_math))
        assert_that(texpreview.count_words, same_instance(converter.count_words))
        assert_that(texpreview.ConversionResult, same_instance(ConversionResult))
