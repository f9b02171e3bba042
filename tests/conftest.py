import json

import pytest


SUCCESS_BODY = {
    "action": "created",
    "success": True,
    "item": {
        "id": "a4937110-e53e-11e9-934f-47a8e38a522c",
        "active": True,
        "policy_id": "default",
        "type": "PERMANENT",
        "enrolled_at": "2019-10-02T18:01:22.337Z",
        "user_provided_metadata": {},
        "local_metadata": {},
        "actions": [],
        "access_token": "ACCESS_TOKEN",
    },
}


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests without network access")


@pytest.fixture
def success_body() -> dict:
    return json.loads(json.dumps(SUCCESS_BODY))


@pytest.fixture
def fleet_env(monkeypatch, tmp_path):
    """
    Isolate settings resolution from the host environment.
    """
    for name in (
        "FLEET_URL",
        "FLEET_ENROLLMENT_TOKEN",
        "FLEET_REQUEST_TIMEOUT",
        "FLEET_TLS_MODE",
        "FLEET_CA_BUNDLE",
    ):
        monkeypatch.delenv(name, raising=False)

    return tmp_path / "config.ini"
