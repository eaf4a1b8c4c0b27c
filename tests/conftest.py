from __future__ import annotations

import pytest
import requests

from odoo_mcp.core_infrastructure.http_client import HttpClient, HttpClientConfig
from tests.helpers.fake_odoo import FakeOdooServer
from tests.helpers.fakes import SAMPLE_RECORDS, FakeCommon, FakeObject, ProxyFactory
from tests.helpers.mcp_runtime import build_test_env


@pytest.fixture(autouse=True)
def _isolated_telemetry(tmp_path, monkeypatch):
    """Keep telemetry of every test inside its own temp folder."""
    monkeypatch.setenv("ODOO_MCP_TELEMETRY_DIR", str(tmp_path / "telemetry"))
    monkeypatch.delenv("ODOO_MCP_DISABLE_TELEMETRY", raising=False)


@pytest.fixture
def fake_common():
    return FakeCommon(uid=2)


@pytest.fixture
def fake_object():
    return FakeObject(records=SAMPLE_RECORDS)


@pytest.fixture
def proxy_factory(fake_common, fake_object):
    return ProxyFactory(fake_common, fake_object)


@pytest.fixture
def fake_odoo():
    server = FakeOdooServer(SAMPLE_RECORDS).start()
    try:
        yield server
    finally:
        server.stop()


@pytest.fixture
def odoo_env(tmp_path, fake_odoo):
    """Subprocess environment pointing the server at the fake Odoo."""
    return build_test_env(
        tmp_path,
        extra={
            "ODOO_URL": fake_odoo.url,
            "ODOO_DB": fake_odoo.db,
            "ODOO_USER": fake_odoo.login,
            "ODOO_PASSWORD": fake_odoo.password,
        },
    )


@pytest.fixture
def local_http():
    """HTTP client for the loopback fake Odoo; ignores proxy settings from the environment."""
    session = requests.Session()
    session.trust_env = False
    return HttpClient(config=HttpClientConfig(), session=session)
