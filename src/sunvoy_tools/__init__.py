"""Sunvoy tools package for exporting users from the Sunvoy challenge site."""

from importlib.metadata import PackageNotFoundError, version

from .errors import (
    FetchFailedError,
    LoginFailedError,
    NonceNotFoundError,
    ResponseFormatError,
    SunvoyError,
)
from .export import ExportResult, UserRecord, export_users, run_export, write_users
from .fetch import fetch_current_user, fetch_signed_current_user, fetch_users
from .parser import extract_hidden_inputs, extract_nonce
from .session import DEFAULT_CREDENTIAL, Credential, SunvoySession
from .signing import SHARED_SECRET, SignedPayload, sign

try:
    __version__ = version("sunvoy-tools")
except PackageNotFoundError:
    # Package is not installed, use fallback version
    __version__ = "UNKNOWN"

__all__ = [
    "Credential",
    "DEFAULT_CREDENTIAL",
    "ExportResult",
    "FetchFailedError",
    "LoginFailedError",
    "NonceNotFoundError",
    "ResponseFormatError",
    "SHARED_SECRET",
    "SignedPayload",
    "SunvoyError",
    "SunvoySession",
    "UserRecord",
    "export_users",
    "extract_hidden_inputs",
    "extract_nonce",
    "fetch_current_user",
    "fetch_signed_current_user",
    "fetch_users",
    "run_export",
    "sign",
    "write_users",
]
