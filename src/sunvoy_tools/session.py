"""SunvoySession class for handling Sunvoy authentication and requests."""

import http.cookiejar as cookiejar
import logging
from dataclasses import dataclass

from requests import Response, Session

from .errors import LoginFailedError
from .parser import extract_nonce
from .utils import load_cookies, log_response

logger = logging.getLogger(__name__)

BASE_URL = "https://challenge.sunvoy.com"
API_URL = "https://api.challenge.sunvoy.com"
LOGIN_URL = f"{BASE_URL}/login"
TOKENS_URL = f"{BASE_URL}/settings/tokens"

REQUEST_TIMEOUT = 30


@dataclass(frozen=True)
class Credential:
    """Username and password used for the login form."""

    username: str
    password: str


DEFAULT_CREDENTIAL = Credential(username="demo@example.org", password="test")


class SunvoySession(Session):
    """Session class for interacting with the Sunvoy challenge site.

    Cookies set by any response are kept in the session jar for the life of
    the session. When ``cookie_file`` is given the jar is loaded from that
    Mozilla-format file and saved back after a login, so a later run can
    reuse a session the server still accepts.
    """

    def __init__(self, cookie_file: str | None = None):
        super().__init__()
        self.cookie_file = cookie_file
        if cookie_file:
            self.cookies: cookiejar.CookieJar = load_cookies(cookie_file)

    def request(self, method, url, **kwargs) -> Response:
        """Send a request with the default timeout and log the response."""
        kwargs.setdefault("timeout", REQUEST_TIMEOUT)
        response = super().request(method, url, **kwargs)
        log_response(response)
        return response

    def authenticate(self, credential: Credential = DEFAULT_CREDENTIAL) -> bool:
        """Log in unless the current session is still valid.

        Returns:
            True if a new login was performed, False if the existing session
            was reused

        Raises:
            NonceNotFoundError: If the login page lacks a nonce
            LoginFailedError: If the login form is rejected
        """
        if self.check_session():
            logger.info("Existing session is still valid")
            return False
        nonce = self.fetch_nonce()
        self.login(nonce, credential)
        self.save_cookies()
        logger.info(f"Logged in as {credential.username}")
        return True

    def check_session(self) -> bool:
        """Check if the session is already authenticated.

        Probes a page that requires a login without following redirects. An
        unauthenticated session is redirected to the login page.
        """
        response = self.get(
            TOKENS_URL,
            headers={"Accept": "text/html", "Referer": BASE_URL},
            allow_redirects=False,
        )
        location = response.headers.get("Location") or ""
        return response.status_code == 200 and "/login" not in location

    def fetch_nonce(self) -> str:
        """Fetch the login page and return its nonce token."""
        response = self.get(LOGIN_URL, headers={"Accept": "text/html"})
        return extract_nonce(response.text)

    def login(self, nonce: str, credential: Credential) -> None:
        """Submit the login form.

        The site answers a successful login with a 302 redirect; any other
        status means the credentials or nonce were rejected.

        Raises:
            LoginFailedError: If the response status is not 302
        """
        form_data = {
            "nonce": nonce,
            "username": credential.username,
            "password": credential.password,
        }
        response = self.post(
            LOGIN_URL,
            data=form_data,
            headers={
                "Content-Type": "application/x-www-form-urlencoded",
                "Origin": BASE_URL,
                "Referer": LOGIN_URL,
            },
            allow_redirects=False,
        )
        if response.status_code != 302:
            raise LoginFailedError(response.status_code)

    def save_cookies(self) -> None:
        """Save cookies to the cookie file, if the session has one."""
        if not self.cookie_file:
            return
        self.cookies.save(ignore_discard=True, ignore_expires=True)
        logger.debug(f"Saved cookies to {self.cookie_file}")

    def print_cookies(self) -> None:
        """Print all cookies in the session."""
        if self.cookies:
            print("Cookies received:")
            for cookie in self.cookies:
                print(f"  {cookie.name}: {cookie.value}")
        else:
            print("No cookies received")
