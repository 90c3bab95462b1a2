"""Authenticated resource requests against the Sunvoy site and API."""

import logging

from requests import JSONDecodeError, Response

from .errors import FetchFailedError, ResponseFormatError
from .parser import extract_hidden_inputs
from .session import API_URL, BASE_URL, TOKENS_URL, SunvoySession
from .signing import sign
from .utils import is_success

logger = logging.getLogger(__name__)

USERS_URL = f"{BASE_URL}/api/users"
SETTINGS_API_URL = f"{API_URL}/api/settings"


def fetch_users(session: SunvoySession) -> list:
    """Fetch the list of users from the internal users API.

    Raises:
        FetchFailedError: If the request returns a non-2xx status
        ResponseFormatError: If the body is not a JSON array
    """
    logger.debug("Fetching user list")
    response = session.post(
        USERS_URL,
        headers={
            "Accept": "*/*",
            "Origin": BASE_URL,
            "Referer": f"{BASE_URL}/list",
        },
    )
    users = _json_body(response)
    if not isinstance(users, list):
        raise ResponseFormatError(
            f"Expected a JSON array from {USERS_URL}, got {type(users).__name__}"
        )
    logger.info(f"Fetched {len(users)} users")
    return users


def fetch_tokens_page(session: SunvoySession) -> str:
    """Fetch the HTML of the tokens settings page."""
    logger.debug("Fetching tokens page")
    response = session.get(
        TOKENS_URL,
        headers={"Accept": "text/html", "Referer": BASE_URL},
        allow_redirects=False,
    )
    _check_status(response)
    return response.text


def fetch_current_user(session: SunvoySession, signed_payload: str) -> dict:
    """Fetch the authenticated user's settings from the API host.

    Args:
        session: Authenticated session
        signed_payload: Full signed body, including the checkcode

    Raises:
        FetchFailedError: If the request returns a non-2xx status
        ResponseFormatError: If the body is not a JSON object
    """
    response = session.post(
        SETTINGS_API_URL,
        data=signed_payload,
        headers={
            "Accept": "*/*",
            "Origin": BASE_URL,
            "Referer": TOKENS_URL,
            "Content-Type": "application/x-www-form-urlencoded",
        },
    )
    user = _json_body(response)
    if not isinstance(user, dict):
        raise ResponseFormatError(
            f"Expected a JSON object from {SETTINGS_API_URL}, "
            f"got {type(user).__name__}"
        )
    return user


def fetch_signed_current_user(session: SunvoySession, now: int | None = None) -> dict:
    """Sign the tokens page's hidden fields and fetch the current user."""
    hidden_inputs = extract_hidden_inputs(fetch_tokens_page(session))
    signed = sign(hidden_inputs, now=now)
    logger.debug(f"Signed {len(hidden_inputs)} fields at {signed.timestamp}")
    return fetch_current_user(session, signed.full_payload)


def _check_status(response: Response) -> None:
    if not is_success(response):
        raise FetchFailedError(response.status_code, response.text, response.url)


def _json_body(response: Response):
    _check_status(response)
    try:
        return response.json()
    except JSONDecodeError as e:
        raise ResponseFormatError(
            f"Response from {response.url} is not valid JSON: {e}"
        ) from e
