"""Thin helpers over BeautifulSoup for parsing and scoped selector lookups."""

import soupsieve
from bs4 import BeautifulSoup, Tag
from soupsieve import SelectorSyntaxError

from quizcrawl.exceptions import DocumentParseError, InvalidSelectorError


def parse_document(document: str | bytes | Tag) -> Tag:
    """Turn raw HTML into a document tree.

    Args:
        document: HTML text, raw bytes, or an already parsed tree

    Returns:
        The parsed tree (an existing Tag is returned unchanged).

    Raises:
        DocumentParseError: If the input is not HTML text or a tree

    """
    if isinstance(document, Tag):
        return document
    if not isinstance(document, (str, bytes)):
        raise DocumentParseError(f'Expected HTML text or a parsed tree, got {type(document).__name__}')

    try:
        return BeautifulSoup(document, 'lxml')
    except Exception as e:
        raise DocumentParseError(f'Could not parse document: {e}') from e


def check_selector(selector: str, field_name: str) -> str:
    """Compile ``selector`` once so syntax errors surface before matching.

    Returns:
        The selector unchanged.

    Raises:
        InvalidSelectorError: If the selector does not compile

    """
    try:
        soupsieve.compile(selector)
    except SelectorSyntaxError as e:
        raise InvalidSelectorError(field_name, selector, str(e)) from e
    return selector


def select_all(node: Tag, selector: str, field_name: str) -> list[Tag]:
    """Return every descendant of ``node`` matching ``selector``, in document order.

    Raises:
        InvalidSelectorError: If the selector does not compile

    """
    try:
        return node.select(selector)
    except SelectorSyntaxError as e:
        raise InvalidSelectorError(field_name, selector, str(e)) from e


def select_first(node: Tag, selector: str, field_name: str) -> Tag | None:
    """Return the first descendant of ``node`` matching ``selector``, or None.

    Raises:
        InvalidSelectorError: If the selector does not compile

    """
    try:
        return node.select_one(selector)
    except SelectorSyntaxError as e:
        raise InvalidSelectorError(field_name, selector, str(e)) from e


def inner_html(node: Tag) -> str:
    """Return the markup between a node's opening and closing tags, trimmed."""
    return node.decode_contents().strip()
