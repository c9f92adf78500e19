'''
# API entry point

The core operations: structural validation of LaTeX source, and conversion of it to an HTML
fragment (with math held back behind placeholders until after sanitization).
'''

from .lib.validator import ValidationIssue, validate
from .lib.converter import ConversionResult, convert, count_words, restore_math

__all__ = ['ValidationIssue', 'validate', 'ConversionResult', 'convert', 'count_words',
           'restore_math']
