"""Exceptions raised while talking to the Sunvoy challenge site."""


class SunvoyError(Exception):
    """Base class for all Sunvoy tools errors."""


class NonceNotFoundError(SunvoyError):
    """Raised when the login page does not contain a nonce token."""


class LoginFailedError(SunvoyError):
    """Raised when the login form submission is not answered with a redirect."""

    def __init__(self, status_code: int):
        super().__init__(f"Login failed with status {status_code}")
        self.status_code = status_code


class FetchFailedError(SunvoyError):
    """Raised when a resource request returns a non-2xx status."""

    def __init__(self, status_code: int, body: str, url: str | None = None):
        target = f" {url}" if url else ""
        super().__init__(f"Failed to fetch{target}: {status_code} - {body}")
        self.status_code = status_code
        self.body = body
        self.url = url


class ResponseFormatError(SunvoyError):
    """Raised when a response body does not have the expected JSON shape."""
