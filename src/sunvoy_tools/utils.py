"""Utility functions for Sunvoy tools."""

import http.cookiejar as cookiejar
import logging

from requests import Response

logger = logging.getLogger(__name__)


def load_cookies(cookie_file: str) -> cookiejar.MozillaCookieJar:
    """Load cookies from file, creating empty jar if file doesn't exist."""
    cookie_jar = cookiejar.MozillaCookieJar(cookie_file)
    try:  # If file exists, load existing cookies
        cookie_jar.load(ignore_discard=True, ignore_expires=True)
        logger.debug(f"Loaded existing cookies from {cookie_file}")
    except FileNotFoundError:
        logger.debug(f"Cookie file {cookie_file} not found, starting with empty jar")
    return cookie_jar


def log_response(response: Response) -> None:
    """Log response status and headers at debug level."""
    logger.debug(f"Response URL: {response.url}")
    logger.debug(f"Status: {response.status_code} {response.reason}")
    for k, v in response.headers.items():
        logger.debug(f"  {k}: {v}")


def is_success(response: Response) -> bool:
    """Return True for 2xx responses.

    ``Response.ok`` also accepts redirects, which a resource call must not.
    """
    return 200 <= response.status_code < 300