'''
Performs one complete build:

* Read the .tex file (and inject a cover page, if configured);
* Validate it, reporting each issue;
* Convert it to a preview page, and write that out;
* Optionally, send it for remote compilation and write out the PDF. Compilation is skipped if
  validation found errors, unless forced.
'''

from __future__ import annotations
from .build_params import PreviewParams
from .converter import count_words
from .cover_page import inject_cover_page
from .remote_compiler import CompileFailure, CompileResult, compile_to_pdf
from .validator import ValidationIssue, has_errors, validate
from . import preview

from dataclasses import dataclass, field
import os
from typing import List, Optional

NAME = 'building'  # For progress/error messages
VALIDATION_NAME = 'validation'


@dataclass
class BuildResult:
    issues: List[ValidationIssue] = field(default_factory = list)
    html_written: bool = False
    compile_result: Optional[CompileResult] = None


def read_source(params: PreviewParams) -> Optional[str]:
    try:
        with open(params.src_file, encoding = 'utf-8') as reader:
            return reader.read()
    except OSError as e:
        params.progress.error(NAME, msg = f'cannot read "{params.src_file}"', exception = e,
                              show_traceback = False)
        return None


def write_output(path: str, content, params: PreviewParams) -> bool:
    mode = 'wb' if isinstance(content, bytes) else 'w'
    encoding = None if isinstance(content, bytes) else 'utf-8'
    try:
        with open(path, mode, encoding = encoding) as writer:
            writer.write(content)
    except OSError as e:
        params.progress.error(NAME, exception = e, show_traceback = False)
        return False

    params.progress.progress(NAME, msg = f'{os.path.basename(path)} written')
    return True


def report_issues(issues: List[ValidationIssue], params: PreviewParams) -> list:
    messages = []
    for issue in issues:
        if issue.is_error:
            messages.append(params.progress.error(VALIDATION_NAME, msg = issue.message))
        else:
            messages.append(params.progress.warning(VALIDATION_NAME, msg = issue.message))

    if not issues:
        params.progress.progress(VALIDATION_NAME, msg = 'no issues found')
    return messages


def compile_pdf(latex: str, issues: List[ValidationIssue], params: PreviewParams) -> Optional[CompileResult]:
    if has_errors(issues) and not params.force_compile:
        params.progress.warning(
            NAME, msg = 'not compiling, because validation found errors (use --force to compile anyway)')
        return None

    result = compile_to_pdf(latex,
                            endpoint = params.endpoint,
                            command = params.tex_command,
                            timeout = params.timeout,
                            cache = params.cache,
                            cache_expiry = params.cache_expiry,
                            progress = params.progress)

    if isinstance(result, CompileFailure):
        params.progress.error(NAME,
                              msg = f'compilation failed ({result.kind.value})',
                              output = result.log)
    else:
        write_output(params.output_pdf, result.pdf, params)

    return result


def build(params: PreviewParams) -> BuildResult:
    progress = params.progress
    progress.progress(NAME, msg = f'reading {os.path.basename(params.src_file)}')

    result = BuildResult()
    latex = read_source(params)
    if latex is None:
        return result

    if params.cover_page is not None:
        latex = inject_cover_page(latex, params.cover_page)

    result.issues = validate(latex)
    messages = report_issues(result.issues, params)

    fragment = preview.render_fragment(
        latex,
        sanitize = preview.make_sanitizer() if params.sanitize else None,
        math_mode = params.math_mode,
        progress = progress)

    page = preview.build_page(
        fragment,
        math_mode = params.math_mode,
        word_count = count_words(latex),
        messages = messages)

    result.html_written = write_output(params.target_file, page, params)

    if params.compile:
        result.compile_result = compile_pdf(latex, result.issues, params)

    return result
