"""End-to-end tests against the live Sunvoy challenge site.

These tests log in with the demo credentials and export real users. They
are only run with the --e2e option.
"""

import json

import pytest

from sunvoy_tools import SunvoySession, run_export


@pytest.fixture(scope="module")
def exported_users(tmp_path_factory) -> list:
    """Run a real export and return the parsed users file."""
    output = tmp_path_factory.mktemp("export") / "users.json"
    with SunvoySession() as session:
        result = run_export(session, output)
    assert result.ok, f"Export failed: {result.error}"
    return json.loads(output.read_text())


@pytest.mark.e2e
def test_export_contains_current_user_last(exported_users):
    assert len(exported_users) >= 2
    assert exported_users[-1]["email"] == "demo@example.org"


@pytest.mark.e2e
def test_export_records_have_projected_fields(exported_users):
    for user in exported_users:
        assert list(user) == ["id", "firstName", "lastName", "email"]


@pytest.mark.e2e
def test_session_is_reused_after_login():
    with SunvoySession() as session:
        assert session.authenticate() is True
        assert session.authenticate() is False
