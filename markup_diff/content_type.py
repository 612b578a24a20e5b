# Tools for checking the type of content and deciding which diff algorithm
# should be applied to it

import logging
import re

logger = logging.getLogger(__name__)

# Matches content that is probably HTML: a `<` immediately followed by a
# letter (the start of a tag name) and a `>` somewhere after it. This is a
# lenient check; plain text that happens to contain something tag-like will be
# treated as HTML.
HTML_PATTERN = re.compile(r'<[a-z][\s\S]*>', re.IGNORECASE)

# Whitespace between the end of one tag and the start of the next.
INTER_TAG_WHITESPACE = re.compile(r'>\s+<')


def looks_like_html(text):
    """
    Determine whether a string looks like HTML markup.

    Parameters
    ----------
    text : string
        Potential HTML content string

    Returns
    -------
    is_html : boolean
    """
    return bool(text) and HTML_PATTERN.search(text) is not None


def is_html_pair(a_text, b_text):
    """
    Determine whether two strings should be compared as HTML trees. If either
    side looks like markup, both are treated as markup.
    """
    result = looks_like_html(a_text) or looks_like_html(b_text)
    logger.debug(f'Routing content to {"HTML" if result else "text"} diff')
    return result


def normalize_html(text):
    "Collapse whitespace between tags and trim the ends of an HTML string."
    return INTER_TAG_WHITESPACE.sub('><', text or '').strip()
