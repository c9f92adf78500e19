from . import build_params, previewer, live, progress as prog
from .cover_page import CoverPageConfig
from .math_render import MATH_MODES, MATH_MATHJAX
from . import remote_compiler

import diskcache  # type: ignore
import platformdirs

import argparse
import os
import os.path


VERSION = '0.1.0'

NAME = 'texpv'  # For errors/warnings


def positive_float_type(s: str) -> float:
    try:
        value = float(s)
    except ValueError:
        raise argparse.ArgumentTypeError('Must be a number of seconds (e.g., 60 or 0.5)')

    if value <= 0:
        raise argparse.ArgumentTypeError('Must be greater than zero')
    return value


def get_cache_dir() -> str:
    return platformdirs.user_cache_dir(appname = 'texpreview', version = VERSION)


def read_cover_page(path: str, progress: prog.Progress):
    try:
        with open(path, encoding = 'utf-8') as reader:
            return CoverPageConfig.from_json(reader.read())

    except OSError as e:
        progress.error(NAME, msg = f'cannot read cover page configuration "{path}"',
                       exception = e, show_traceback = False)
    except (ValueError, TypeError) as e:
        # json.JSONDecodeError is a ValueError; unknown keys give a TypeError.
        progress.error(NAME, msg = f'invalid cover page configuration "{path}"',
                       exception = e, show_traceback = False)
    return None


def main():
    cache_dir = get_cache_dir()

    parser = argparse.ArgumentParser(
        prog        = 'texpv',
        description = ('Check a LaTeX (.tex) document for structural problems, and produce an '
                       'HTML preview of it. Optionally, compile it to PDF using a remote service. '
                       'See README.md for key details.'),
        formatter_class = argparse.RawDescriptionHelpFormatter)

    parser.add_argument(
        '-v', '--version', action = 'version',
        version = f'TeXpreview {VERSION}\n(compile cache: {cache_dir})')

    parser.add_argument(
        'input', metavar = 'INPUT.tex', type = str,
        help = 'Input LaTeX (.tex) file')

    parser.add_argument(
        '-o', '--output', metavar = 'OUTPUT.html', type = str,
        help = 'Output HTML file. (By default, this is based on the input filename.)')

    parser.add_argument(
        '--pdf', metavar = 'OUTPUT.pdf', type = str,
        help = ('Output PDF file, when compiling with -c/--compile. (By default, this is based on '
                'the output HTML filename.)'))

    parser.add_argument(
        '-c', '--compile', action = 'store_true',
        help = 'Also compile the document to PDF, using a remote compilation service.')

    parser.add_argument(
        '-f', '--force', action = 'store_true',
        help = ('With -c/--compile, compile even if validation finds errors. (Warnings never '
                'prevent compilation.)'))

    parser.add_argument(
        '--math', choices = MATH_MODES, default = MATH_MATHJAX,
        help = ('How to show math in the preview: "mathjax" (typeset in the browser), "mathml" '
                '(converted ahead of time), or "raw" (the LaTeX source, unchanged). The default is '
                f'"{MATH_MATHJAX}".'))

    parser.add_argument(
        '--no-sanitize', action = 'store_true',
        help = 'Do not sanitize the generated HTML. Only use this for documents you trust.')

    parser.add_argument(
        '--cover', metavar = 'COVER.json', type = str,
        help = ('Insert an assignment cover page, with details taken from the given JSON file, '
                'after "\\begin{document}".'))

    parser.add_argument(
        '--endpoint', metavar = 'URL', type = str, default = remote_compiler.DEFAULT_ENDPOINT,
        help = f'The compilation service to use. By default, this is {remote_compiler.DEFAULT_ENDPOINT}.')

    parser.add_argument(
        '--timeout', metavar = 'SECONDS', type = positive_float_type,
        default = remote_compiler.DEFAULT_TIMEOUT,
        help = ('How long to wait for the compilation service. By default, this is '
                f'{remote_compiler.DEFAULT_TIMEOUT} seconds.'))

    parser.add_argument(
        '--clean', action = 'store_true',
        help = 'Clear the compile cache before building the document.')

    parser.add_argument(
        '-l', '--live', action = 'store_true',
        help = 'Keep running, and rebuild automatically whenever the source file changes.')


    args = parser.parse_args()

    src_file = os.path.abspath(args.input)
    base_name = src_file.rsplit('.', 1)[0]

    progress = prog.Progress()
    if args.output:
        out = os.path.abspath(args.output)
        if os.path.isdir(out):
            target_file = os.path.join(out, os.path.basename(base_name)) + '.html'
        else:
            target_file = out
    else:
        target_file = base_name + '.html'

    go = True

    in_files = [args.input] + ([args.cover] if args.cover else [])
    for in_file in in_files:
        if not os.path.exists(in_file):
            go = False
            progress.error(NAME, msg = f'"{in_file}" not found')

        elif not os.path.isfile(in_file):
            go = False
            progress.error(NAME, msg = f'"{in_file}" is not a file')

        elif not os.access(in_file, os.R_OK):
            go = False
            progress.error(NAME, msg = f'"{in_file}" is not readable')

    out_files = [target_file] + ([os.path.abspath(args.pdf)] if args.pdf else [])
    for out_file in out_files:
        if os.path.exists(out_file):
            if not os.access(out_file, os.W_OK):
                go = False
                progress.error(NAME, msg = f'cannot write output: "{out_file}" is not writable')
        else:
            directory = os.path.dirname(os.path.abspath(out_file))
            if not os.access(directory, os.W_OK):
                go = False
                progress.error(NAME, msg = f'cannot write output: "{directory}" is not writable')

    cache = None
    try:
        cache = diskcache.Cache(cache_dir)
    except Exception as e:
        go = False
        progress.error(NAME, msg = 'cannot create/open compile cache: ' + str(e))

    cover_page = None
    if go and args.cover:
        cover_page = read_cover_page(args.cover, progress)
        go = cover_page is not None

    if go:
        params = build_params.PreviewParams(
            src_file      = src_file,
            target_file   = target_file,
            cache         = cache,
            progress      = progress,
            math_mode     = args.math,
            sanitize      = args.no_sanitize is not True,
            compile       = args.compile is True,
            force_compile = args.force is True,
            pdf_file      = os.path.abspath(args.pdf) if args.pdf else None,
            endpoint      = args.endpoint,
            timeout       = args.timeout,
            cover_page    = cover_page,
        )

        if args.clean:
            params.cache.clear()

        previewer.build(params)

        if args.live:
            live.LiveUpdater(params).run()


if __name__ == "__main__":
    main()
