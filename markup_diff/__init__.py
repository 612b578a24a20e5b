import logging
import os

__version__ = '0.1.0'

if os.environ.get('LOG_LEVEL'):
    logging.basicConfig(level=os.environ['LOG_LEVEL'].upper())

from .differs import compare_html, compare_text, diff  # noqa: E402
from .html_diff_render import render_preview  # noqa: E402
from .nodes import parse_html  # noqa: E402
from .tree_diff import compare_trees, Difference, DiffResult  # noqa: E402
