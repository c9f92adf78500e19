'''
Inline CSS for converted HTML.

Colours are given as CSS variables ('--p-head', '--p-text', etc.), so the page hosting the preview
decides the palette. PAGE_VARS gives a light-theme default for standalone preview pages.
'''

HEADING_FONT = "font-family:'Space Grotesk',sans-serif"
MONO_FONT = "font-family:'JetBrains Mono',monospace"

HEADER = ('margin-bottom:2.5rem;text-align:center;padding-bottom:1.5rem;'
          'border-bottom:1px solid var(--p-border)')
TITLE = ('font-size:1.875rem;font-weight:600;color:var(--p-head);margin-bottom:0.75rem;'
         f'letter-spacing:-0.025em;{HEADING_FONT}')
AUTHOR = 'font-size:0.875rem;color:var(--p-accent)'
DATE = 'font-size:0.75rem;color:var(--p-muted);margin-top:0.375rem'

BOLD = 'font-weight:600;color:var(--p-text)'
ITALIC = 'color:var(--p-sec)'
CODE = (f'{MONO_FONT};font-size:0.85em;padding:0.15em 0.3em;background:var(--p-code);'
        'border-radius:4px;color:var(--p-accent)')
UNDERLINE = 'text-decoration-color:var(--p-muted)'
LINK = 'color:var(--p-accent);text-decoration:underline;text-underline-offset:2px'
URL = f'color:var(--p-accent);{MONO_FONT};font-size:0.85em'
FOOTNOTE = 'color:var(--p-accent);cursor:help;font-size:0.75em'

HEADINGS = {
    'section': ('h2', 'font-size:1.25rem;font-weight:600;margin-top:2.5rem;margin-bottom:1.25rem;'
                      'color:var(--p-head);border-bottom:1px solid var(--p-border);'
                      f'padding-bottom:0.5rem;{HEADING_FONT}'),
    'subsection': ('h3', 'font-size:1.125rem;font-weight:600;margin-top:1.75rem;'
                         f'margin-bottom:0.75rem;color:var(--p-text);{HEADING_FONT}'),
    'subsubsection': ('h4', 'font-size:1rem;font-weight:600;margin-top:1.5rem;'
                            f'margin-bottom:0.5rem;color:var(--p-text);{HEADING_FONT}'),
}

PRE = ('background:var(--p-code);border:1px solid var(--p-border);border-radius:8px;'
       'padding:1rem;overflow-x:auto;margin:1.25rem 0')
PRE_CODE = f'{MONO_FONT};font-size:0.8rem;color:var(--p-text);line-height:1.6'

BLOCKQUOTE = ('border-left:3px solid var(--p-accent);margin:1.25rem 0;padding:0.75rem 1.25rem;'
              'color:var(--p-sec);font-style:italic;background:var(--p-code);'
              'border-radius:0 8px 8px 0')

TABLE_WRAPPER = 'overflow-x:auto;margin:1.25rem 0'
TABLE = ('width:100%;border-collapse:collapse;border:1px solid var(--p-border);'
         'border-radius:8px;overflow:hidden')
TABLE_HEAD_CELL = ('padding:0.5rem 0.75rem;font-weight:600;color:var(--p-head);'
                   'border-bottom:2px solid var(--p-border);text-align:left;font-size:0.8rem')
TABLE_CELL = ('padding:0.5rem 0.75rem;color:var(--p-sec);border-bottom:1px solid var(--p-border);'
              'font-size:0.8rem')
CAPTION = ('caption-side:bottom;padding:0.5rem;font-size:0.75rem;color:var(--p-muted);'
           'font-style:italic')
TABLE_FALLBACK = 'margin:1.25rem 0'

UNORDERED_LIST = 'margin:1.25rem 0 1.25rem 1.25rem;list-style:disc;font-size:0.875rem'
ORDERED_LIST = 'margin:1.25rem 0 1.25rem 1.25rem;list-style:decimal;font-size:0.875rem'
LIST_ITEM = 'padding-left:0.375rem;margin-bottom:0.375rem;color:var(--p-sec)'
DEFINITION_LIST = 'margin:1.25rem 0;font-size:0.875rem'
DEFINITION_TERM = 'font-weight:600;color:var(--p-text)'
DEFINITION_DESC = 'margin-left:1.25rem;margin-bottom:0.5rem;color:var(--p-sec)'

PARAGRAPH = ('margin-bottom:1.25rem;line-height:1.75;color:var(--p-sec);text-align:justify;'
             'font-size:0.875rem')

PAGE_VARS = {
    '--p-head':   '#111827',
    '--p-text':   '#1f2937',
    '--p-sec':    '#374151',
    '--p-muted':  '#6b7280',
    '--p-accent': '#2563eb',
    '--p-border': '#e5e7eb',
    '--p-code':   '#f3f4f6',
}
