'''
LaTeX to HTML conversion, for in-browser preview.

The converter is a sequence of stages, each rewriting the whole text, held in a Python-Markdown
Registry so that they run in priority order (highest first):

    preamble  100   Strip declarations that have no HTML form.
    math       90   Lift math out into placeholders, before anything else can touch it.
    header     80   Title/author/date become a header block.
    inline     70   Bold, italics, code, links, footnotes, etc.
    sections   60   Headings.
    verbatim   50   Code listings.
    quotes     40   Block quotes.
    tables     30   Tables.
    lists      20   Itemize/enumerate/description.
    paragraphs 10   Wrap the remaining prose in <p> elements.
    blocks      0   Substitute block placeholders with their HTML.

Block-level HTML (headings, lists, tables, display math, ...) is stored in the 'BLK' placeholder
table and stands alone between blank lines, so paragraph assembly can pass it through unwrapped.

Math is stored in the 'MTH' table and is *not* restored here. The HTML is expected to go through a
sanitizer first; the caller then calls restore_math() to put the math source back, ready for a
math typesetter. Display math gets both: a block placeholder whose HTML is a math placeholder.

Nothing here is a real parser. Malformed input is converted on a best-effort basis; anything not
recognised is left in the output as literal text.
'''

from __future__ import annotations
from . import math_spans, styles
from .placeholders import PlaceholderTable

from markdown.util import Registry

from dataclasses import dataclass, field
import re
from typing import Dict


BLOCK_NAMESPACE = 'BLK'
MATH_NAMESPACE = 'MTH'

MATH_TOKEN_RE = re.compile(rf'__{MATH_NAMESPACE}_[0-9]+__')


def arg(name: str, multiline: bool = False) -> str:
    '''
    Regex for a braced command argument, captured as 'name'. One level of nested braces is
    permitted inside (e.g., '{a \\emph{b} c}').
    '''
    chars = r'[^{}]' if multiline else r'[^{}\n]'
    return rf'\{{(?P<{name}>(?:{chars}|\{{{chars}*\}})*)\}}'


COLUMN_SPEC = r'\{(?:[^{}]|\{[^{}]*\})*\}'


@dataclass
class ConversionResult:
    html: str
    math_map: Dict[str, str] = field(default_factory = dict)


def paragraph_block(converter: LatexConverter, text: str) -> str:
    '''A block holding the given text as a paragraph, or nothing if the text is blank.'''
    text = text.strip()
    if not text:
        return ''
    return converter.add_block(f'<p style="{styles.PARAGRAPH}">{text}</p>')


class Stage:
    '''
    One rewriting pass over the text. Stages share state (the placeholder tables, the header)
    through the converter that owns them.
    '''
    def __init__(self, converter: LatexConverter):
        self.converter = converter

    def run(self, tex: str) -> str:
        raise NotImplementedError


class PreambleStripper(Stage):
    PATTERNS = [
        (re.compile(r'\\documentclass(?:\[.*?\])?\{.*?\}'), 0),
        (re.compile(r'\\usepackage(?:\[.*?\])?\{.*?\}'), 0),
        (re.compile(r'\\begin\{document\}'), 1),
        (re.compile(r'\\end\{document\}'), 1),
        (re.compile(r'\\definecolor\{.*?\}\{.*?\}\{.*?\}'), 0),
        (re.compile(r'\\color\{.*?\}'), 0),
        (re.compile(r'\\setlength\{.*?\}\{.*?\}'), 0),
        (re.compile(r'\\(?:this)?pagestyle\{.*?\}'), 0),
        (re.compile(r'\\geometry\{.*?\}'), 0),
        (re.compile(r'\\[vh]space\*?\{.*?\}'), 0),
        (re.compile(r'\\(?:re)?newcommand\*?\{.*?\}(?:\[\d+\])?' + arg('body', multiline = True)), 0),
        (re.compile(r'\\label\{.*?\}'), 0),
        (re.compile(r'\\(?:centering|noindent|newpage|clearpage)(?![a-zA-Z])'), 0),
    ]

    def run(self, tex):
        for regex, count in self.PATTERNS:
            tex = regex.sub('', tex, count = count)
        return tex.strip()


class MathProtector(Stage):
    def run(self, tex):
        c = self.converter

        def block_math(match):
            return c.add_block(c.store_math(match.group(0)))

        def inline_math(match):
            return c.store_math(match.group(0))

        # Outer/longer constructs first.
        tex = math_spans.DISPLAY_DOLLAR_RE.sub(block_math, tex)
        tex = math_spans.BRACKET_DISPLAY_RE.sub(block_math, tex)
        tex = math_spans.DISPLAY_ENV_RE.sub(block_math, tex)
        tex = math_spans.PAREN_INLINE_RE.sub(inline_math, tex)
        tex = math_spans.DOLLAR_INLINE_RE.sub(inline_math, tex)
        return tex


class HeaderExtractor(Stage):
    FIELDS = [
        (re.compile(r'\\title' + arg('text', multiline = True)),  'h1', styles.TITLE),
        (re.compile(r'\\author' + arg('text', multiline = True)), 'p',  styles.AUTHOR),
        (re.compile(r'\\date' + arg('text', multiline = True)),   'p',  styles.DATE),
    ]
    MAKETITLE_RE = re.compile(r'\\maketitle(?![a-zA-Z])')

    def run(self, tex):
        parts = []
        for regex, tag, style in self.FIELDS:
            match = regex.search(tex)
            if match:
                parts.append(f'<{tag} style="{style}">{match.group("text").strip()}</{tag}>')
                tex = tex[:match.start()] + tex[match.end():]

        tex = self.MAKETITLE_RE.sub('', tex, count = 1)

        if parts:
            self.converter.header = f'<div style="{styles.HEADER}">{"".join(parts)}</div>'
        return tex


class InlineFormatter(Stage):
    def __init__(self, converter):
        super().__init__(converter)
        self._footnotes = 0

        self.rules = [
            (re.compile(r'\\textbf' + arg('text')),
             lambda m: f'<strong style="{styles.BOLD}">{m["text"]}</strong>'),
            (re.compile(r'\\textit' + arg('text')),
             lambda m: f'<em style="{styles.ITALIC}">{m["text"]}</em>'),
            (re.compile(r'\\emph' + arg('text')),
             lambda m: f'<em style="{styles.ITALIC}">{m["text"]}</em>'),
            (re.compile(r'\\texttt' + arg('text')),
             lambda m: f'<code style="{styles.CODE}">{m["text"]}</code>'),
            (re.compile(r'\\underline' + arg('text')),
             lambda m: f'<u style="{styles.UNDERLINE}">{m["text"]}</u>'),
            (re.compile(r'\\href' + arg('url') + arg('text')),
             lambda m: (f'<a href="{m["url"]}" target="_blank" rel="noopener" '
                        f'style="{styles.LINK}">{m["text"]}</a>')),
            (re.compile(r'\\url' + arg('url')),
             lambda m: (f'<a href="{m["url"]}" target="_blank" rel="noopener" '
                        f'style="{styles.URL}">{m["url"]}</a>')),
            (re.compile(r'\\footnote' + arg('text')),
             self._footnote),
        ]

    def _footnote(self, match):
        self._footnotes += 1
        title = match['text'].replace('"', '&quot;')
        return f'<sup style="{styles.FOOTNOTE}" title="{title}">[{self._footnotes}]</sup>'

    def run(self, tex):
        for regex, replacement in self.rules:
            tex = regex.sub(replacement, tex)
        return tex


class SectionProcessor(Stage):
    SECTION_RE = re.compile(
        r'\\(?P<level>subsubsection|subsection|section)\*?' + arg('text'))

    def run(self, tex):
        def heading(match):
            tag, style = styles.HEADINGS[match['level']]
            return self.converter.add_block(f'<{tag} style="{style}">{match["text"]}</{tag}>')

        return self.SECTION_RE.sub(heading, tex)


class VerbatimProcessor(Stage):
    VERBATIM_RE = re.compile(r'\\begin\{verbatim\}(?P<body>.*?)\\end\{verbatim\}', re.DOTALL)
    LISTING_RE = re.compile(
        r'\\begin\{lstlisting\}(?:\[.*?\])?(?P<body>.*?)\\end\{lstlisting\}', re.DOTALL)

    def _code_block(self, match):
        code = match['body'].replace('<', '&lt;').replace('>', '&gt;')
        return self.converter.add_block(
            f'<pre style="{styles.PRE}"><code style="{styles.PRE_CODE}">{code}</code></pre>')

    def run(self, tex):
        tex = self.VERBATIM_RE.sub(self._code_block, tex)
        return self.LISTING_RE.sub(self._code_block, tex)


class QuoteProcessor(Stage):
    QUOTE_RE = re.compile(
        r'\\begin\{(?P<env>quote|quotation)\}(?P<body>.*?)\\end\{(?P=env)\}', re.DOTALL)

    def run(self, tex):
        return self.QUOTE_RE.sub(
            lambda m: self.converter.add_block(
                f'<blockquote style="{styles.BLOCKQUOTE}">{m["body"].strip()}</blockquote>'),
            tex)


class TableProcessor(Stage):
    TABLE_RE = re.compile(
        r'\\begin\{table\}(?:\[[^\]]*\])?(?P<body>.*?)\\end\{table\}', re.DOTALL)
    TABULAR_RE = re.compile(
        r'\\begin\{tabular\}' + COLUMN_SPEC + r'(?P<body>.*?)\\end\{tabular\}', re.DOTALL)
    CAPTION_RE = re.compile(r'\\caption' + arg('text'))

    RULE_RE = re.compile(r'\\hline|\\cline\{.*?\}|\\toprule|\\midrule|\\bottomrule')
    ROW_SPACING_RE = re.compile(r'^\[[^\]]*\]')
    CELL_SEP_RE = re.compile(r'(?<!\\)&')


    def tabular_html(self, content: str, caption_html: str) -> str:
        rows = []
        for row in self.RULE_RE.sub('', content).split('\\\\'):
            # '\\[1ex]' leaves its spacing argument at the start of the next row.
            row = self.ROW_SPACING_RE.sub('', row.strip()).strip()
            if row:
                rows.append(row)

        row_html = []
        for i, row in enumerate(rows):
            tag, style = ('th', styles.TABLE_HEAD_CELL) if i == 0 else ('td', styles.TABLE_CELL)
            cells = ''.join(f'<{tag} style="{style}">{cell.strip()}</{tag}>'
                            for cell in self.CELL_SEP_RE.split(row))
            row_html.append(f'<tr>{cells}</tr>')

        return (f'<div style="{styles.TABLE_WRAPPER}"><table style="{styles.TABLE}">'
                f'{caption_html}<tbody>{"".join(row_html)}</tbody></table></div>')


    def _table(self, match):
        content = match['body']
        caption = self.CAPTION_RE.search(content)
        caption_html = (f'<caption style="{styles.CAPTION}">{caption["text"]}</caption>'
                        if caption else '')

        tabular = self.TABULAR_RE.search(content)
        if not tabular:
            return self.converter.add_block(f'<div style="{styles.TABLE_FALLBACK}">{content}</div>')

        # Anything else inside the table (notes, math) follows it as a paragraph.
        rest = self.CAPTION_RE.sub('', self.TABULAR_RE.sub('', content, count = 1), count = 1)
        return (self.converter.add_block(self.tabular_html(tabular['body'], caption_html))
                + paragraph_block(self.converter, rest))


    def run(self, tex):
        tex = self.TABLE_RE.sub(self._table, tex)
        return self.TABULAR_RE.sub(
            lambda m: self.converter.add_block(self.tabular_html(m['body'], '')),
            tex)


class ListProcessor(Stage):
    LIST_ENVS = '(?:itemize|enumerate|description)'

    # Innermost lists first: the body may not open another list. Once converted, a nested list
    # is just a placeholder, and the enclosing list matches on the next pass.
    LIST_RE = re.compile(
        rf'''
        \\begin\{{(?P<env>itemize|enumerate|description)\}}
        (?P<body> (?: (?!\\begin\{{{LIST_ENVS}\}}) . )*? )
        \\end\{{(?P=env)\}}
        ''',
        re.VERBOSE | re.DOTALL)

    ITEM_RE = re.compile(r'\\item(?![a-zA-Z])')
    DESCRIPTION_ITEM_RE = re.compile(r'\\item\[')

    def _items(self, body):
        lead, *items = self.ITEM_RE.split(body.strip())
        return lead, [item.strip() for item in items]

    def _descriptions(self, body):
        lead, *segments = self.DESCRIPTION_ITEM_RE.split(body.strip())
        entries = []
        for segment in segments:
            term, sep, desc = segment.partition(']')
            if not sep:
                term, desc = '', segment
            entries.append(f'<dt style="{styles.DEFINITION_TERM}">{term}</dt>'
                           f'<dd style="{styles.DEFINITION_DESC}">{desc.strip()}</dd>')
        return lead, ''.join(entries)

    def _list(self, match):
        env = match['env']
        body = match['body']

        if env == 'description':
            lead, entries = self._descriptions(body)
            html = f'<dl style="{styles.DEFINITION_LIST}">{entries}</dl>'

        else:
            tag, style = (('ul', styles.UNORDERED_LIST) if env == 'itemize'
                          else ('ol', styles.ORDERED_LIST))
            lead, items = self._items(body)
            items = ''.join(f'<li style="{styles.LIST_ITEM}">{item}</li>' for item in items)
            html = f'<{tag} style="{style}">{items}</{tag}>'

        # Text before the first \item is kept, ahead of the list.
        return paragraph_block(self.converter, lead) + self.converter.add_block(html)

    def run(self, tex):
        while True:
            new_tex = self.LIST_RE.sub(self._list, tex)
            if new_tex == tex:
                return tex
            tex = new_tex


class ParagraphAssembler(Stage):
    LINE_BREAK_RE = re.compile(r'\\newline(?![a-zA-Z])|\\\\')

    def run(self, tex):
        blocks = self.converter.blocks
        split_re = re.compile(rf'({blocks.token_re.pattern}|\n\s*\n)')

        output = []
        for part in split_re.split(tex):
            part = part.strip()
            if not part:
                continue
            if blocks.is_token(part):
                output.append(part)
            else:
                text = self.LINE_BREAK_RE.sub('<br/>', part)
                output.append(f'<p style="{styles.PARAGRAPH}">{text}</p>')
        return ''.join(output)


class BlockResolver(Stage):
    def run(self, tex):
        return self.converter.blocks.resolve(tex)



class LatexConverter:
    '''
    Holds the stage registry and the per-conversion state. An instance converts one document;
    convert() creates a fresh one for every call.
    '''

    def __init__(self):
        self.blocks = PlaceholderTable(BLOCK_NAMESPACE)
        self.math = PlaceholderTable(MATH_NAMESPACE)
        self.header = ''

        self.stages = Registry()
        self.stages.register(PreambleStripper(self),   'preamble',   100)
        self.stages.register(MathProtector(self),      'math',        90)
        self.stages.register(HeaderExtractor(self),    'header',      80)
        self.stages.register(InlineFormatter(self),    'inline',      70)
        self.stages.register(SectionProcessor(self),   'sections',    60)
        self.stages.register(VerbatimProcessor(self),  'verbatim',    50)
        self.stages.register(QuoteProcessor(self),     'quotes',      40)
        self.stages.register(TableProcessor(self),     'tables',      30)
        self.stages.register(ListProcessor(self),      'lists',       20)
        self.stages.register(ParagraphAssembler(self), 'paragraphs',  10)
        self.stages.register(BlockResolver(self),      'blocks',       0)


    def add_block(self, html: str) -> str:
        return f'\n\n{self.blocks.store(html)}\n\n'


    def store_math(self, source: str) -> str:
        return self.math.store(source)


    def convert(self, latex: str) -> ConversionResult:
        tex = latex
        for stage in self.stages:
            tex = stage.run(tex)

        html = self.header + tex
        missing = [token for token in self.math.as_dict() if token not in html]
        if missing:
            html += f'<p style="{styles.PARAGRAPH}">{" ".join(missing)}</p>'
        return ConversionResult(html = html, math_map = self.math.as_dict())



def convert(latex: str | None) -> ConversionResult:
    if not latex:
        return ConversionResult(html = '', math_map = {})
    return LatexConverter().convert(latex)


def restore_math(html: str, math_map: Dict[str, str]) -> str:
    '''Puts math source back in place of its placeholders. Unknown placeholders are left as-is.'''
    return MATH_TOKEN_RE.sub(lambda m: math_map.get(m.group(0), m.group(0)), html)


_ENV_TAG_RE = re.compile(r'\\begin\{.*?\}|\\end\{.*?\}')
_CMD_WITH_ARGS_RE = re.compile(r'\\[a-zA-Z]+\*?(\{[^}]*\})+')
_BARE_CMD_RE = re.compile(r'\\[a-zA-Z]+')
_SPECIAL_CHARS_RE = re.compile(r'[\\{}$%&_^~#\[\]]')
_WHITESPACE_RE = re.compile(r'\s+')


def count_words(latex: str | None) -> int:
    '''
    Approximate word count for display. Environment markers go first, then commands with
    arguments (keeping the text of the last argument), then bare commands, then special
    characters.
    '''
    if not latex:
        return 0

    text = _ENV_TAG_RE.sub('', latex)
    text = _CMD_WITH_ARGS_RE.sub(lambda m: m.group(1).replace('{', '').replace('}', ''), text)
    text = _BARE_CMD_RE.sub('', text)
    text = _SPECIAL_CHARS_RE.sub('', text)
    text = _WHITESPACE_RE.sub(' ', text).strip()
    return len(text.split(' ')) if text else 0
