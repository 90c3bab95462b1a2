"""Parsers for HTML pages served by the Sunvoy challenge site."""

import logging
from re import search

from bs4 import BeautifulSoup

from .errors import NonceNotFoundError

logger = logging.getLogger(__name__)

NONCE_PATTERN = r'name="nonce" value="([^"]+)"'


def extract_nonce(html: str) -> str:
    """Extract the one-time login nonce from the login page.

    The login form carries the token as ``name="nonce" value="..."``. The
    first match in the document wins.

    Args:
        html: Login page HTML

    Returns:
        The nonce token

    Raises:
        NonceNotFoundError: If the page contains no nonce attribute
    """
    m = search(NONCE_PATTERN, html)
    if not m:
        raise NonceNotFoundError("Nonce token not found in login page")
    return m.group(1)


def extract_hidden_inputs(html: str) -> dict[str, str]:
    """Extract hidden input fields from an HTML document, keyed by element ID.

    Inputs without an ``id`` or with an empty ``value`` are skipped. The
    parser tolerates malformed markup, so a document without any
    qualifying input yields an empty dict.

    Args:
        html: HTML document text

    Returns:
        Mapping of input ID to input value
    """
    soup = BeautifulSoup(html, "html.parser")
    fields = {}
    for element in soup.find_all("input"):
        if element.get("type", "").lower() != "hidden":
            continue
        field_id = element.get("id")
        value = element.get("value")
        if field_id and value:
            fields[field_id] = value
    logger.debug(f"Found {len(fields)} hidden input fields")
    return fields
