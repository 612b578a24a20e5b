from collections import namedtuple
from diff_match_patch import diff_match_patch
import logging
from .content_type import is_html_pair, normalize_html
from .diff_errors import UndecodableContentError, UndiffableContentError
from .nodes import parse_html
from .tree_diff import DiffResult, Difference, compare_trees
from .utils import get_text_timelimit

logger = logging.getLogger(__name__)

# Dictionary mapping which maps from diff-match-patch operations to the codes
# we use
diff_codes = {diff_match_patch.DIFF_EQUAL: 0,
              diff_match_patch.DIFF_DELETE: -1,
              diff_match_patch.DIFF_INSERT: 1}

# Names for each code in a text segment
SEGMENT_KINDS = {0: 'unchanged', -1: 'deleted', 1: 'inserted'}

Segment = namedtuple('Segment', ('kind', 'text'))


def compute_dmp_diff(a_text, b_text, timelimit=None, cleanup_semantic=False):
    """
    Compute a character-by-character diff of two strings (or two bytestrings)
    with diff-match-patch.

    Parameters
    ----------
    a_text : string or bytes
    b_text : string or bytes
    timelimit : float, optional
        Maximum number of seconds to spend on the diff. `0` means no limit.
        Defaults to the `DIFFER_TEXT_TIMELIMIT` environment variable.
    cleanup_semantic : boolean, optional
        Merge small, coincidental equalities into the surrounding changes so
        the result is easier for people to read. This means the result is no
        longer a minimal diff.

    Returns
    -------
    changes : list of (int, string) tuples
        Each tuple is a code (`-1` for deleted, `0` for unchanged and `1` for
        inserted) and the text it applies to.

    Example
    -------
    >>> compute_dmp_diff('Deleted', 'Added')
    [(-1, 'Delet'), (1, 'Add'), (0, 'ed')]
    """
    if isinstance(a_text, bytes) and isinstance(b_text, bytes):
        # diff-match-patch only works on text; latin-1 maps each byte to
        # exactly one character so the diff can be mapped back to bytes.
        changes = compute_dmp_diff(a_text.decode('latin-1'),
                                   b_text.decode('latin-1'),
                                   timelimit=timelimit,
                                   cleanup_semantic=cleanup_semantic)
        return [(code, text.encode('latin-1')) for code, text in changes]
    elif not (isinstance(a_text, str) and isinstance(b_text, str)):
        raise TypeError("Both the texts should be either of type 'str' or 'bytes'.")

    if timelimit is None:
        timelimit = get_text_timelimit()

    dmp = diff_match_patch()
    dmp.Diff_Timeout = timelimit
    changes = dmp.diff_main(a_text, b_text, checklines=False)
    if cleanup_semantic:
        dmp.diff_cleanupSemantic(changes)

    return [(diff_codes[operation], text) for operation, text in changes]


def text_segments(a_text, b_text):
    """
    Diff two strings and return a list of `Segment` named tuples, each with a
    `kind` (`unchanged`, `deleted` or `inserted`) and a `text`.
    """
    return [Segment(SEGMENT_KINDS[code], text)
            for code, text in compute_dmp_diff(a_text, b_text)]


def compare_text(a_text, b_text):
    """
    Diff two strings of plain text.

    If anything changed, the result has a single text difference (with no
    path) holding the character-by-character changes.

    Example
    -------
    >>> compare_text('hello', 'hello').changed
    False
    """
    if a_text == b_text:
        return DiffResult.unchanged()

    segments = text_segments(a_text, b_text)
    changed = any(segment.kind != 'unchanged' for segment in segments)
    return DiffResult(changed, [Difference('text', None, changes=segments)])


def compare_html(a_text, b_text, align_children=False):
    """
    Diff the structure and text of two HTML documents.

    Whitespace between tags is ignored. See `markup_diff.tree_diff` for a
    description of how the trees are compared.

    Parameters
    ----------
    a_text : string
        Source HTML of the old document
    b_text : string
        Source HTML of the new document
    align_children : boolean, optional
        Align lists of sibling nodes before comparing them, rather than
        comparing siblings strictly by position.

    Returns
    -------
    result : DiffResult
    """
    a_text = normalize_html(a_text)
    b_text = normalize_html(b_text)

    # If they're exactly the same after normalization, skip the parsing.
    if a_text == b_text:
        logger.debug('HTML is identical after normalizing whitespace')
        return DiffResult.unchanged()

    differences = compare_trees(parse_html(a_text), parse_html(b_text),
                                align_children=align_children)
    return DiffResult.from_differences(differences)


def diff(a_text, b_text, align_children=False):
    """
    Compare two versions of some content. If either looks like HTML, they are
    compared as HTML trees (see `compare_html`). Otherwise they are compared as
    plain text (see `compare_text`).

    Parameters
    ----------
    a_text : string, bytes or None
        The old content. Bytes must be UTF-8. `None` is the same as empty.
    b_text : string, bytes or None
        The new content.
    align_children : boolean, optional
        Passed on to `compare_html`.

    Returns
    -------
    result : DiffResult

    Example
    -------
    >>> result = diff('<p class="a">Hi</p>', '<p class="b">Hi</p>')
    >>> [difference.type for difference in result.differences]
    ['attributeChanged']
    """
    a_text = decode_content(a_text)
    b_text = decode_content(b_text)

    if is_html_pair(a_text, b_text):
        return compare_html(a_text, b_text, align_children=align_children)
    else:
        return compare_text(a_text, b_text)


def decode_content(content):
    "Turn any acceptable input to a differ into a string."
    if content is None:
        return ''
    elif isinstance(content, str):
        return content
    elif isinstance(content, bytes):
        try:
            return content.decode('utf-8')
        except UnicodeDecodeError as error:
            raise UndecodableContentError(
                f'Content could not be decoded as UTF-8: {error}') from error
    raise UndiffableContentError(
        f'Cannot diff content of type `{type(content).__name__}`')
