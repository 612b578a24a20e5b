import logging
import os

logger = logging.getLogger(__name__)

# Seconds diff-match-patch may spend on a single text diff. When time runs out
# it returns a valid, but possibly non-minimal, diff.
DEFAULT_TEXT_TIMELIMIT = 2


def get_color_palette():
    """
    Read and return the CSS color env variables that indicate the colors used
    to highlight insertions and deletions in rendered previews.

    Returns
    ------
    palette: Dictionary
        A dictionary containing the differ_insertion and differ_deletion css
        color codes
    """
    differ_insertion = os.environ.get('DIFFER_COLOR_INSERTION', '#a1d76a')
    differ_deletion = os.environ.get('DIFFER_COLOR_DELETION', '#e8a4c8')
    return {'differ_insertion': differ_insertion,
            'differ_deletion': differ_deletion}


def get_text_timelimit():
    """
    Read the `DIFFER_TEXT_TIMELIMIT` env variable, which sets how many seconds
    a text diff may take. `0` means there is no limit.
    """
    value = os.environ.get('DIFFER_TEXT_TIMELIMIT', '').strip()
    if not value:
        return DEFAULT_TEXT_TIMELIMIT

    try:
        timelimit = float(value)
    except ValueError:
        logger.warning(f'Ignoring invalid DIFFER_TEXT_TIMELIMIT: "{value}"')
        return DEFAULT_TEXT_TIMELIMIT

    return max(timelimit, 0)
