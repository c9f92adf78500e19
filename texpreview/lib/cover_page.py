'''
Cover page injection.

Inserts an assignment cover page (institution heading, a table of submission details and one row
per question) immediately after '\\begin{document}'. The tables need the 'array' and 'geometry'
packages, which are added to the preamble if they're not already there.
'''

from __future__ import annotations

from dataclasses import dataclass, field
import json
import re
from typing import List


REQUIRED_PACKAGES = ('array', 'geometry')

BEGIN_DOCUMENT_RE = re.compile(r'\\begin\{document\}')

LATEX_ESCAPES = [
    ('\\', r'\textbackslash{}'),
    ('&', r'\&'),
    ('%', r'\%'),
    ('$', r'\$'),
    ('#', r'\#'),
    ('_', r'\_'),
    ('{', r'\{'),
    ('}', r'\}'),
    ('~', r'\textasciitilde{}'),
    ('^', r'\textasciicircum{}'),
]


@dataclass
class CoverPageConfig:
    enabled: bool = True
    student_name: str = ''
    roll_no: str = ''
    year_section: str = ''
    subject: str = ''
    subject_code: str = ''
    subject_name: str = ''
    assignment_no: str = ''
    questions: List[str] = field(default_factory = list)
    institution: List[str] = field(default_factory = list)
    department: str = ''
    heading: str = 'Assignment Submission Details'
    academic_year: str = ''

    @staticmethod
    def from_json(text: str) -> CoverPageConfig:
        '''
        Reads a JSON object whose keys are the field names. Unknown keys are an error (most likely
        a typo).
        '''
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError('cover page configuration must be a JSON object')
        return CoverPageConfig(**data)


def escape_latex(text: str) -> str:
    # Single pass, so that replacements are not themselves re-escaped.
    table = dict(LATEX_ESCAPES)
    return ''.join(table.get(ch, ch) for ch in text)


def _heading_lines(config: CoverPageConfig) -> str:
    lines = []
    for i, line in enumerate(config.institution):
        text = escape_latex(line)
        lines.append(rf'\textbf{{\Large {text}}}\\' if i == 0 else rf'{text}\\')

    if config.department:
        lines.append(rf'\textbf{{\large {escape_latex(config.department)}}}\\[0.5cm]')

    lines.append(rf'\textbf{{\Large {escape_latex(config.heading)}}}\\')
    if config.academic_year:
        lines.append(escape_latex(config.academic_year))
    return '\n'.join(lines)


def build_cover_page_body(config: CoverPageConfig) -> str:
    details = [
        ('Subject',                         config.subject),
        ('Subject Code',                    config.subject_code),
        ('Subject Name',                    config.subject_name),
        ('Name of the Student',             config.student_name),
        ('Roll No.',                        config.roll_no),
        ('Year / Section',                  config.year_section),
        ('Assignment No.',                  config.assignment_no),
        ('Marks (Max 3)',                   ''),
        ('Assignment Moodle Uploaded Date', ''),
        ('Faculty Sign with Name \\& Date', ''),
    ]
    detail_rows = '\n'.join(rf'\textbf{{{label}}} & {escape_latex(value)} \\ \hline'
                            for label, value in details)

    question_rows = '\n'.join(rf'\textbf{{Q{i}:}} {escape_latex(q)} \\[1.5cm] \hline'
                              for i, q in enumerate(config.questions, start = 1))

    return '\n'.join([
        '',
        r'\begin{center}',
        _heading_lines(config),
        r'\end{center}',
        '',
        r'\vspace{0.8cm}',
        '',
        r'\renewcommand{\arraystretch}{1.5}',
        '',
        r'\begin{center}',
        r'\begin{tabular}{|p{6cm}|p{8cm}|}',
        r'\hline',
        detail_rows,
        r'\end{tabular}',
        r'\end{center}',
        '',
        r'\vspace{1cm}',
        '',
        r'\renewcommand{\arraystretch}{2}',
        '',
        r'\begin{center}',
        r'\begin{tabular}{|p{14cm}|}',
        r'\hline',
        question_rows,
        r'\end{tabular}',
        r'\end{center}',
        '',
        r'\newpage',
        '',
    ])


def ensure_preamble_packages(latex: str) -> str:
    for package in REQUIRED_PACKAGES:
        # Also accepts options, and lists such as '\usepackage{amsmath,geometry}'.
        package_re = re.compile(
            rf'\\usepackage(\[[^\]]*\])?\{{[^}}]*\b{package}\b[^}}]*\}}', re.IGNORECASE)
        if not package_re.search(latex):
            latex = BEGIN_DOCUMENT_RE.sub(
                lambda m: f'\\usepackage{{{package}}}\n{m.group(0)}', latex, count = 1)
    return latex


def inject_cover_page(latex: str, config: CoverPageConfig) -> str:
    if not config.enabled:
        return latex

    body = build_cover_page_body(config)
    latex = ensure_preamble_packages(latex)
    return BEGIN_DOCUMENT_RE.sub(lambda m: f'{m.group(0)}\n{body}', latex, count = 1)
