"""
Command-line tool for comparing two files with the markup_diff package.

See the `scripts/` directory for the associated executable. The logic is
implemented here to make it easier to test.
"""

from docopt import docopt
import json
import logging
import sys
from markup_diff import __version__
from markup_diff.differs import diff
from markup_diff.html_diff_render import preview_stylesheet, render_preview


logger = logging.getLogger(__name__)


def _read_content(path):
    "Read a file's content as text. A path of `-` reads standard input."
    if path == '-':
        return sys.stdin.read()
    with open(path, encoding='utf-8') as file:
        return file.read()


def diff_files(old_path, new_path, flat=False, align=False):
    "Diff two files and return the result as a JSON string."
    result = diff(_read_content(old_path), _read_content(new_path),
                  align_children=align)
    return json.dumps(result.to_dict(flat=flat), indent=2)


def preview_files(old_path, new_path, markers=False, style=False):
    "Render an HTML preview of the changes between two files."
    preview = render_preview(_read_content(old_path),
                             _read_content(new_path),
                             markers=markers)
    if style:
        preview = f'<style>{preview_stylesheet()}</style>\n{preview}'
    return preview


def main(argv=None):
    doc = """Compare two versions of a text or HTML document

Usage:
  markup-diff diff <old> <new> [--flat] [--align]
  markup-diff preview <old> <new> [--markers] [--style]
  markup-diff -h | --help
  markup-diff --version

Arguments:
  <old>        Path to the old version of the content. Use `-` for stdin.
  <new>        Path to the new version of the content. Use `-` for stdin.

Options:
  -h --help    Show this screen.
  --version    Show version.
  --flat       Split differences into `structural_differences` and
               `text_differences` lists.
  --align      Align sibling elements before comparing them instead of
               comparing them strictly by position.
  --markers    Show structural changes (tags and attributes) in the preview.
  --style      Include a <style> element for highlighting changes.
"""
    arguments = docopt(doc, argv=argv, version=__version__)
    old_path = arguments['<old>']
    new_path = arguments['<new>']
    if old_path == '-' and new_path == '-':
        print('Only one of <old> and <new> can be read from stdin',
              file=sys.stderr)
        return 1

    try:
        if arguments['diff']:
            output = diff_files(old_path, new_path,
                                flat=arguments['--flat'],
                                align=arguments['--align'])
        else:
            output = preview_files(old_path, new_path,
                                   markers=arguments['--markers'],
                                   style=arguments['--style'])
    except (OSError, UnicodeDecodeError) as error:
        logger.debug('Could not read input', exc_info=True)
        print(f'Could not read input: {error}', file=sys.stderr)
        return 1

    print(output)
    return 0


if __name__ == '__main__':
    sys.exit(main())
