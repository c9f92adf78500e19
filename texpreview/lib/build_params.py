'''
The 'build parameters' are all the information (apart from the source .tex file itself) needed to
produce a preview, and optionally a compiled PDF.
'''

from __future__ import annotations
from .cover_page import CoverPageConfig
from .math_render import MATH_MATHJAX
from .progress import Progress
from . import remote_compiler

import diskcache  # type: ignore

from dataclasses import dataclass
from typing import Optional


DEFAULT_DEBOUNCE = 0.3  # seconds


@dataclass
class PreviewParams:
    # These fields are not intended to be modified once set:
    src_file: str
    target_file: str
    cache: diskcache.Cache
    progress: Progress

    # Build options:
    math_mode:     str                         = MATH_MATHJAX
    sanitize:      bool                        = True
    compile:       bool                        = False
    force_compile: bool                        = False
    pdf_file:      Optional[str]               = None
    endpoint:      str                         = remote_compiler.DEFAULT_ENDPOINT
    tex_command:   str                         = remote_compiler.DEFAULT_COMMAND
    timeout:       float                       = remote_compiler.DEFAULT_TIMEOUT
    cache_expiry:  int                         = remote_compiler.DEFAULT_CACHE_EXPIRY
    debounce:      float                       = DEFAULT_DEBOUNCE
    cover_page:    Optional[CoverPageConfig]   = None

    @property
    def target_base(self):
        return self.target_file.rsplit('.', 1)[0]

    @property
    def output_pdf(self):
        return self.pdf_file or (self.target_base + '.pdf')
