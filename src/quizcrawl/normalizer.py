"""Answer clean-up: enumerator stripping, punctuation, capitalization and labels.

All rules look at the *text* of a sanitized fragment. Leading inline tags are
skipped to find the first text character, and the closing period is appended
after any trailing tags, so ``<b>a. four</b>`` becomes ``<b>Four</b>.``.
"""

import html
import re
import string

# Inline tags (and whitespace) in front of the first text character
_LEADING_MARKUP = re.compile(r'(?:\s*<[^>]*>)*\s*')

_ENUMERATOR = re.compile(
    r'(?:'
    r'[A-D](?:\s+[A-D])+(?=\s|$)'  # "A B C"
    r'|[A-Da-d][.)](?![\w.])'  # "A." / "b)"
    r'|[A-D](?=\s)'  # "A "
    r'|\d+(?:[.)](?![\w.])|(?=\s))'  # "1." / "2)" / "3 "
    r')\s*(?=\S)'  # only when something follows the enumerator
)

_TAG = re.compile(r'<[^>]*>')


def text_content(markup: str) -> str:
    """Return the visible text of a markup fragment, trimmed."""
    return html.unescape(_TAG.sub('', markup)).strip()


def strip_enumerator(markup: str) -> str:
    """Remove one leading answer enumerator such as ``A.``, ``b)`` or ``3.``."""
    start = _LEADING_MARKUP.match(markup).end()
    match = _ENUMERATOR.match(markup, start)
    if not match:
        return markup
    return markup[:start] + markup[match.end() :]


def capitalize_first(markup: str) -> str:
    """Upper-case the first text character, skipping leading inline tags."""
    start = _LEADING_MARKUP.match(markup).end()
    if start >= len(markup):
        return markup
    return markup[:start] + markup[start].upper() + markup[start + 1 :]


def normalize_answer(fragment: str | None) -> str:
    """Normalize one sanitized answer fragment.

    Args:
        fragment: Sanitized answer markup, e.g. ``'A. answer text'``

    Returns:
        The cleaned answer (``'Answer text.'``), or an empty string when
        nothing is left, in which case the answer must be dropped.

    """
    if not fragment:
        return ''

    markup = strip_enumerator(fragment.strip())
    if not text_content(markup):
        return ''

    if not text_content(markup).endswith('.'):
        markup = markup.rstrip() + '.'

    return capitalize_first(markup)


def answer_label(index: int) -> str:
    """Return the letter label for a 0-based answer position (A..Z, AA, AB, ...)."""
    if index < 0:
        raise ValueError(f'Answer index must be non-negative, got {index}')

    label = ''
    index += 1
    while index:
        index, remainder = divmod(index - 1, 26)
        label = string.ascii_uppercase[remainder] + label
    return label
