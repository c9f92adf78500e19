'''
Compiles LaTeX to PDF using a remote compilation service (latexonline.cc by default).

The service takes a form-encoded POST ('text', 'command', 'force') and answers with either a PDF
or a plain-text compiler log. compile_to_pdf() never raises for service or network failures;
it returns a CompileSuccess or a CompileFailure saying what kind of failure it was.

Successful results are cached (in any dict-like object with diskcache's get()/set(expire=...)
interface), keyed on a hash of the exact source sent.
'''

from __future__ import annotations
from .progress import Progress

import diskcache  # type: ignore

from dataclasses import dataclass
import enum
import hashlib
import re
from typing import Optional, Union
import urllib.error
import urllib.parse
import urllib.request

NAME = 'compile'  # For progress/error messages

DEFAULT_ENDPOINT = 'https://latexonline.cc/compile'
DEFAULT_COMMAND = 'pdflatex'
DEFAULT_TIMEOUT = 60            # seconds
DEFAULT_CACHE_EXPIRY = 30 * 60  # seconds

CACHE_PREFIX = 'texpreview.pdf'

DOCUMENT_CLASS_RE = re.compile(r'\\documentclass', re.IGNORECASE)

DOCUMENT_WRAPPER = (
    '\\documentclass{article}',
    '\\usepackage{amsmath,amssymb,graphicx,geometry}',
    '\\geometry{a4paper,margin=1in}',
    '\\begin{document}',
    '{code}',
    '\\end{document}',
)


class CompileErrorKind(enum.Enum):
    COMPILATION = 'compilation'
    '''The service ran the compiler, and it failed. The log says why.'''

    UNEXPECTED_CONTENT = 'unexpected-content'
    '''The service reported success, but did not send a PDF.'''

    NETWORK = 'network'
    '''The service could not be reached, or did not answer in time.'''


@dataclass(frozen = True)
class CompileSuccess:
    pdf: bytes
    log: str = 'Compilation successful.'
    cached: bool = False


@dataclass(frozen = True)
class CompileFailure:
    kind: CompileErrorKind
    log: str


CompileResult = Union[CompileSuccess, CompileFailure]


def ensure_document_wrapper(code: str) -> str:
    '''Wraps a bare snippet in a minimal article document; complete documents pass through.'''
    if DOCUMENT_CLASS_RE.search(code):
        return code
    return '\n'.join(code if line == '{code}' else line for line in DOCUMENT_WRAPPER)


def cache_key(source: str, command: str) -> tuple:
    hasher = hashlib.sha1()
    hasher.update(source.encode('utf-8'))
    return (CACHE_PREFIX, command, hasher.hexdigest())


def compile_to_pdf(latex: str,
                   *,
                   endpoint: str = DEFAULT_ENDPOINT,
                   command: str = DEFAULT_COMMAND,
                   timeout: float = DEFAULT_TIMEOUT,
                   cache: Optional[diskcache.Cache] = None,
                   cache_expiry: int = DEFAULT_CACHE_EXPIRY,
                   progress: Optional[Progress] = None) -> CompileResult:

    source = ensure_document_wrapper(latex)
    key = cache_key(source, command)

    if cache is not None:
        cached_pdf = cache.get(key)
        if cached_pdf is not None:
            if progress is not None:
                progress.cache_hit(NAME, resource = 'compiled PDF')
            return CompileSuccess(pdf = cached_pdf, cached = True)

    body = urllib.parse.urlencode({
        'text': source,
        'command': command,
        'force': 'true',
    }).encode('utf-8')

    request = urllib.request.Request(
        endpoint,
        data = body,
        method = 'POST',
        headers = {
            'Content-Type': 'application/x-www-form-urlencoded',
            'Accept': 'application/pdf',
        })

    if progress is not None:
        progress.progress(NAME, msg = f'Sending document to {endpoint}...')

    try:
        with urllib.request.urlopen(request, timeout = timeout) as conn:
            content = conn.read()
            content_type = conn.headers.get('content-type') or ''

    except urllib.error.HTTPError as e:
        # 4xx/5xx: the body is the compiler's log.
        log = e.read().decode('utf-8', errors = 'replace')
        return CompileFailure(CompileErrorKind.COMPILATION,
                              log or f'Compilation failed (HTTP {e.code}).')

    except OSError as e:
        # Includes timeouts, and URLError for unreachable hosts.
        reason = e.reason if isinstance(e, urllib.error.URLError) else e
        return CompileFailure(CompileErrorKind.NETWORK,
                              f'Could not reach compilation server: {reason}')

    if 'application/pdf' not in content_type:
        return CompileFailure(CompileErrorKind.UNEXPECTED_CONTENT,
                              content.decode('utf-8', errors = 'replace')
                              or 'Server returned unexpected content type.')

    if cache is not None:
        cache.set(key, content, expire = cache_expiry)

    return CompileSuccess(pdf = content)
