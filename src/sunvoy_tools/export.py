"""Export of Sunvoy users to a JSON file."""

import json
import logging
import os
import stat
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from requests import RequestException

from .errors import ResponseFormatError, SunvoyError
from .fetch import fetch_signed_current_user, fetch_users
from .session import DEFAULT_CREDENTIAL, Credential, SunvoySession

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_FILE = "users.json"

# API field name -> UserRecord attribute, in output order
USER_FIELDS = {
    "id": "id",
    "firstName": "first_name",
    "lastName": "last_name",
    "email": "email",
}


@dataclass(frozen=True)
class UserRecord:
    """The exported subset of a user as returned by the API."""

    id: Any
    first_name: Any
    last_name: Any
    email: Any

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "UserRecord":
        """Project a user object from the API onto a record.

        Raises:
            ResponseFormatError: If ``data`` is not an object or lacks a field
        """
        if not isinstance(data, Mapping):
            raise ResponseFormatError(
                f"Expected a user object, got {type(data).__name__}"
            )
        missing = [name for name in USER_FIELDS if name not in data]
        if missing:
            raise ResponseFormatError(
                f"User {data.get('id', '<no id>')} is missing "
                f"field(s): {', '.join(missing)}"
            )
        return cls(**{attr: data[name] for name, attr in USER_FIELDS.items()})

    def to_json(self) -> dict[str, Any]:
        """Return the record with API field names in output order."""
        return {name: getattr(self, attr) for name, attr in USER_FIELDS.items()}


@dataclass
class ExportResult:
    """Outcome of an export run."""

    output_path: Path
    records: list[UserRecord] = field(default_factory=list)
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def assemble_records(
    users: list[Mapping[str, Any]], current_user: Mapping[str, Any]
) -> list[UserRecord]:
    """Project listed users followed by the current user."""
    records = [UserRecord.from_api(user) for user in users]
    records.append(UserRecord.from_api(current_user))
    return records


def write_users(records: list[UserRecord], output_path: Path) -> None:
    """Write records as a pretty-printed JSON array.

    The document is written to a temporary file next to ``output_path`` and
    moved over it, so the target is either fully replaced or left untouched.
    An existing target keeps its permissions; a new one gets the umask
    default, as with a plain ``open()``.
    """
    output_path = Path(output_path)
    text = json.dumps([r.to_json() for r in records], indent=2, ensure_ascii=False)

    fd, tmp_name = tempfile.mkstemp(
        dir=output_path.parent, prefix=f".{output_path.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        os.chmod(tmp_name, _output_mode(output_path))
        os.replace(tmp_name, output_path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    logger.info(f"Wrote {len(records)} users to {output_path}")


def _output_mode(output_path: Path) -> int:
    """Return the permission bits the written file should end up with."""
    try:
        return stat.S_IMODE(output_path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def export_users(
    session: SunvoySession,
    output_path: Path,
    credential: Credential = DEFAULT_CREDENTIAL,
    now: int | None = None,
) -> list[UserRecord]:
    """Authenticate, fetch both user sources and write the merged file.

    Raises:
        SunvoyError: On authentication, fetch or response format failures
        RequestException: On transport failures
        OSError: If the output file cannot be written
    """
    session.authenticate(credential)
    users = fetch_users(session)
    current_user = fetch_signed_current_user(session, now=now)
    records = assemble_records(users, current_user)
    write_users(records, output_path)
    return records


def run_export(
    session: SunvoySession,
    output_path: Path = Path(DEFAULT_OUTPUT_FILE),
    credential: Credential = DEFAULT_CREDENTIAL,
    now: int | None = None,
) -> ExportResult:
    """Run an export and report failure in the result instead of raising."""
    output_path = Path(output_path)
    try:
        records = export_users(session, output_path, credential, now)
    except SunvoyError as e:
        logger.error(f"Export failed: {e}")
        return ExportResult(output_path, error=e)
    except RequestException as e:
        logger.error(f"Request to {getattr(e.request, 'url', '?')} failed: {e}")
        return ExportResult(output_path, error=e)
    except OSError as e:
        logger.error(f"Could not write {output_path}: {e}")
        return ExportResult(output_path, error=e)
    return ExportResult(output_path, records=records)
