"""Reduces HTML fragments to a small allow-list of inline formatting tags."""

from bs4 import BeautifulSoup
from bs4.element import PreformattedString

# Inline formatting kept in question and answer markup.
ALLOWED_TAGS = frozenset(
    {
        'br',
        'i',
        'b',
        'u',
        'em',
        'strong',
        'sup',
        'sub',
        'mark',
        'small',
        'del',
        's',
        'strike',
        'ins',
        'code',
    }
)

# Removed together with their content instead of being unwrapped.
DROPPED_TAGS = ['script', 'style', 'noscript', 'template', 'iframe']


def sanitize(markup: str | None) -> str:
    """Strip every tag outside ALLOWED_TAGS while keeping its text.

    Disallowed elements are unwrapped (their children take their place),
    allowed elements are kept without attributes. Scripts, styles and
    comments disappear entirely. Malformed markup is parsed permissively by
    ``html.parser`` and never raises.

    Args:
        markup: HTML fragment to clean

    Returns:
        Cleaned markup with surrounding whitespace trimmed. Running the
        result through ``sanitize`` again returns it unchanged.

    """
    if not markup:
        return ''

    soup = BeautifulSoup(markup, 'html.parser')

    # Comments, doctypes, CDATA and processing instructions
    for node in soup.find_all(string=lambda text: isinstance(text, PreformattedString)):
        node.extract()

    for tag in soup.find_all(DROPPED_TAGS):
        if not tag.decomposed:
            tag.decompose()

    # Collect first, then rewrite deepest-first so unwrapping never disturbs
    # nodes that still have to be visited.
    tags = soup.find_all(True)
    for tag in reversed(tags):
        if tag.name in ALLOWED_TAGS:
            tag.attrs = {}
        else:
            tag.unwrap()

    return soup.decode().strip()
