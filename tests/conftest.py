"""Global test fixtures for Sunvoy tools."""

import json
from http import HTTPStatus
from pathlib import Path
from unittest.mock import patch

import pytest
from pytest import fixture
from requests import Response, Session
from requests.structures import CaseInsensitiveDict

from sunvoy_tools.fetch import SETTINGS_API_URL, USERS_URL
from sunvoy_tools.session import BASE_URL, LOGIN_URL, TOKENS_URL


def pytest_addoption(parser):
    """Add custom pytest command line options."""
    parser.addoption(
        "--e2e",
        action="store_true",
        default=False,
        help="run end-to-end tests",
    )


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "e2e: mark test as end-to-end test")


def pytest_collection_modifyitems(config, items):
    """Skip end-to-end tests unless --e2e option is used."""
    if config.getoption("--e2e"):
        # When --e2e is used, run all tests including end-to-end tests
        return

    skip_e2e = pytest.mark.skip(reason="need --e2e option to run")
    for item in items:
        if "e2e" in item.keywords:
            item.add_marker(skip_e2e)


def build_response(
    status_code: int = 200,
    text: str = "",
    headers: dict | None = None,
    url: str = BASE_URL,
) -> Response:
    """Create a real requests Response with the given status and body."""
    response = Response()
    response.status_code = status_code
    response.reason = HTTPStatus(status_code).phrase
    response._content = text.encode("utf-8")
    response.encoding = "utf-8"
    response.headers = CaseInsensitiveDict(headers or {})
    response.url = url
    return response


class FakeSunvoySite:
    """In-process stand-in for the Sunvoy site and API host.

    Routes ``Session.request`` calls by method and URL. The tokens page
    redirects to the login page until a login POST has succeeded.
    """

    def __init__(self, login_html: str, tokens_html: str, users, current_user):
        self.login_html = login_html
        self.tokens_html = tokens_html
        self.users = users
        self.current_user = current_user
        self.logged_in = False
        self.login_status = 302
        self.users_status = 200
        self.calls = []

    def __call__(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))

        if (method, url) == ("GET", TOKENS_URL):
            if not self.logged_in:
                return build_response(302, headers={"Location": "/login"}, url=url)
            return build_response(200, self.tokens_html, url=url)

        if (method, url) == ("GET", LOGIN_URL):
            return build_response(200, self.login_html, url=url)

        if (method, url) == ("POST", LOGIN_URL):
            if self.login_status == 302:
                self.logged_in = True
                return build_response(302, headers={"Location": "/list"}, url=url)
            return build_response(self.login_status, "Invalid credentials", url=url)

        if (method, url) == ("POST", USERS_URL):
            if self.users_status != 200:
                return build_response(self.users_status, "Server error", url=url)
            return build_response(200, json.dumps(self.users), url=url)

        if (method, url) == ("POST", SETTINGS_API_URL):
            return build_response(200, json.dumps(self.current_user), url=url)

        return build_response(404, "Not Found", url=url)

    def requested(self, method: str, url: str) -> list:
        """Return keyword arguments of every call to ``method url``."""
        return [kw for m, u, kw in self.calls if (m, u) == (method, url)]


@fixture(scope="session")
def fixtures_dir() -> Path:
    """Return path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@fixture(scope="session")
def login_page_html(fixtures_dir) -> str:
    """Login page HTML containing the nonce ``abc123``."""
    return (fixtures_dir / "login_page.html").read_text()


@fixture(scope="session")
def tokens_page_html(fixtures_dir) -> str:
    """Tokens settings page HTML with hidden inputs."""
    return (fixtures_dir / "tokens_page.html").read_text()


@fixture
def fake_site(login_page_html, tokens_page_html):
    """Patch the HTTP transport of every session with a fake Sunvoy site."""
    site = FakeSunvoySite(
        login_page_html,
        tokens_page_html,
        users=[
            {
                "id": 1,
                "firstName": "A",
                "lastName": "B",
                "email": "a@b.com",
                "role": "admin",
            }
        ],
        current_user={
            "id": 2,
            "firstName": "C",
            "lastName": "D",
            "email": "c@d.com",
            "phone": "555-0100",
        },
    )
    with patch.object(Session, "request", side_effect=site):
        yield site
