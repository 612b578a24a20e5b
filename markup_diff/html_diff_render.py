"""
Render a preview of the changes between two documents as HTML.

The preview is the *new* document, serialized back to markup, with the text
that changed annotated in place:

    <span class="diff-unchanged">ello W</span>
    <span class="diff-deleted">ORLD</span>
    <span class="diff-inserted">orld</span>

The whole thing is wrapped in `<div class="diff-preview">`. Structural changes
(tags and attributes) don't change the shape of the output, but they can
optionally be shown as small inline markers (see `render_preview`).
"""

from collections import defaultdict
from html import escape as html_escape
import logging
from .content_type import normalize_html
from .differs import decode_content, diff
from .nodes import DOCUMENT, TEXT, child_path, parse_html
from .tree_diff import ATTRIBUTE_TYPES
from .utils import get_color_palette

logger = logging.getLogger(__name__)

PREVIEW_TEMPLATE = '<div class="diff-preview">{}</div>'

# "void" in the HTML sense -- these tags do not having a closing tag
void_tags = (
    'area',
    'base',
    'basefont',
    'br',
    'col',
    'embed',
    'img',
    'input',
    'link',
    'meta',
    'param',
    'source',
    'track',
    'wbr'
)

# Text inside these elements is not HTML and must not be escaped.
raw_text_tags = ('script', 'style')

# Structural differences that can be shown as markers on a rendered element.
MARKED_TYPES = ('changed', 'added', *ATTRIBUTE_TYPES)


def render_preview(a_text, b_text, markers=False):
    """
    Render an HTML preview of the changes between two documents.

    Parameters
    ----------
    a_text : string
        Source of the old document
    b_text : string
        Source of the new document
    markers : boolean, optional
        If true, describe structural changes (changed tags, added elements, and
        attribute changes) in `<span class="diff-structural">` elements at the
        start of each affected element.

    Returns
    -------
    render : string

    Example
    -------
    >>> render_preview('<p>Hi</p>', '<p>Hi</p>')
    '<div class="diff-preview"><p>Hi</p></div>'
    """
    result = diff(a_text, b_text)
    if not result.changed:
        return PREVIEW_TEMPLATE.format(decode_content(a_text))

    # Plain text has a single difference with no path.
    if result.differences[0].path is None:
        return PREVIEW_TEMPLATE.format(
            render_segments(result.differences[0].changes))

    document = parse_html(normalize_html(decode_content(b_text)))
    return PREVIEW_TEMPLATE.format(
        render_tree(document, result.differences, markers=markers))


def render_tree(root, differences, markers=False):
    """
    Serialize a document tree to HTML, annotating text that has a text
    difference at the same path. `differences` must have been computed with the
    tree as the *new* document.
    """
    text_lookup = {}
    structural_lookup = defaultdict(list)
    for difference in differences:
        if difference.type == 'text':
            text_lookup[difference.path] = difference
        elif difference.type in MARKED_TYPES:
            structural_lookup[difference.path].append(difference)

    logger.debug(f'Rendering preview with {len(text_lookup)} text changes')
    return ''.join(_render_node(root, '', text_lookup,
                                markers and structural_lookup or {}))


def _render_node(node, path, text_lookup, structural_lookup, raw=False):
    if node.kind == TEXT:
        if raw:
            yield node.value
        else:
            yield _render_text(node, path, text_lookup, structural_lookup)
        return

    if node.kind == DOCUMENT:
        for index, child in enumerate(node.children):
            yield from _render_node(child, child_path(path, index),
                                    text_lookup, structural_lookup)
        return

    yield f'<{node.tag}{_render_attributes(node.attributes)}>'
    if node.tag in void_tags:
        return

    raw = node.tag in raw_text_tags
    if not raw:
        for difference in structural_lookup.get(path, ()):
            description = html_escape(format_structural_diff(difference))
            yield (f'<span class="diff-structural diff-{difference.type}">'
                   f'[{description}]</span>')

    for index, child in enumerate(node.children):
        yield from _render_node(child, child_path(path, index),
                                text_lookup, structural_lookup, raw)
    yield f'</{node.tag}>'


def _render_text(node, path, text_lookup, structural_lookup):
    difference = text_lookup.get(path)
    if difference:
        # Text is compared without surrounding whitespace, so put it back.
        value = node.value
        stripped = value.strip()
        start = value.find(stripped) if stripped else len(value)
        leading = value[:start]
        trailing = value[start + len(stripped):]
        return (html_escape(leading)
                + render_segments(difference.changes)
                + html_escape(trailing))

    if any(item.type == 'added' for item in structural_lookup.get(path, ())):
        return f'<span class="diff-inserted">{html_escape(node.value)}</span>'

    return html_escape(node.value)


def _render_attributes(attributes):
    return ''.join(f' {name}="{html_escape(value)}"'
                   for name, value in attributes)


def render_segments(segments):
    "Render the segments of a text difference as a series of `<span>`s."
    return ''.join(f'<span class="diff-{segment.kind}">'
                   f'{html_escape(segment.text)}</span>'
                   for segment in segments)


def format_structural_diff(difference):
    "Describe a structural difference in a short, human-readable sentence."
    if difference.type == 'attributeChanged':
        return (f'Attribute "{difference.name}" changed from '
                f'"{difference.old_value}" to "{difference.new_value}"')
    elif difference.type == 'attributeAdded':
        return (f'Attribute "{difference.name}" added with value '
                f'"{difference.value}"')
    elif difference.type == 'attributeRemoved':
        return (f'Attribute "{difference.name}" removed '
                f'(was "{difference.old_value}")')
    elif difference.type == 'changed':
        return (f'Element changed from "{difference.old_tag}" to '
                f'"{difference.new_tag}"')
    elif difference.type == 'added':
        return f'Element "{difference.node.identity}" added'
    else:
        return f'{difference.type} at {difference.path}'


def preview_stylesheet():
    """
    CSS for highlighting the annotations in a preview. Colors come from the
    `DIFFER_COLOR_INSERTION` and `DIFFER_COLOR_DELETION` env variables.
    """
    palette = get_color_palette()
    return """
.diff-preview .diff-inserted {text-decoration: none; background-color: %s;}
.diff-preview .diff-deleted {text-decoration: line-through; background-color: %s;}
.diff-preview .diff-structural {color: #666; font-size: smaller;}
""" % (palette['differ_insertion'], palette['differ_deletion'])
