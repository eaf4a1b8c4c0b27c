from __future__ import annotations

import logging
import os

import pytest

from odoo_common.errors import ConfigError
from odoo_config import settings as st


ODOO_ENV = {
    "ODOO_URL": "https://erp.example.com",
    "ODOO_DB": "prod",
    "ODOO_USER": "admin",
    "ODOO_PASSWORD": "s3cret",
}


def _set_env(monkeypatch, values: dict[str, str | None]) -> None:
    for k, v in values.items():
        if v is None:
            monkeypatch.delenv(k, raising=False)
        else:
            monkeypatch.setenv(k, v)


def test_load_odoo_settings_reads_all_four_variables(monkeypatch):
    _set_env(monkeypatch, ODOO_ENV)

    s = st.load_odoo_settings()

    assert (s.url, s.db, s.username, s.password) == ("https://erp.example.com", "prod", "admin", "s3cret")
    assert "s3cret" not in repr(s)


def test_missing_variables_are_all_named(monkeypatch):
    _set_env(monkeypatch, {**ODOO_ENV, "ODOO_DB": None, "ODOO_PASSWORD": "   "})

    with pytest.raises(ConfigError) as info:
        st.load_odoo_settings()

    assert "ODOO_DB" in str(info.value)
    assert "ODOO_PASSWORD" in str(info.value)
    assert "ODOO_URL" not in str(info.value)


def test_load_env_once_reads_explicit_file_without_overriding(tmp_path, monkeypatch):
    env_file = tmp_path / "odoo.env"
    env_file.write_text("ODOO_DB=from_file\nODOO_USER=file_user\n", encoding="utf-8")
    monkeypatch.setenv("ODOO_MCP_ENV_FILE", str(env_file))
    monkeypatch.setenv("ODOO_USER", "already_set")
    monkeypatch.delenv("ODOO_DB", raising=False)
    st.load_env_once.cache_clear()

    try:
        assert st.load_env_once() == env_file.resolve()
        assert os.environ["ODOO_DB"] == "from_file"
        assert os.environ["ODOO_USER"] == "already_set"
    finally:
        st.load_env_once.cache_clear()
        monkeypatch.delenv("ODOO_DB", raising=False)


def test_telemetry_dir_override(tmp_path, monkeypatch):
    monkeypatch.setenv("ODOO_MCP_TELEMETRY_DIR", str(tmp_path / "t"))
    assert st.telemetry_dir() == (tmp_path / "t").resolve()


@pytest.mark.parametrize("value, disabled", [("1", True), ("yes", True), ("0", False), ("", False)])
def test_telemetry_disabled_flag(monkeypatch, value, disabled):
    monkeypatch.setenv("ODOO_MCP_DISABLE_TELEMETRY", value)
    assert st.telemetry_disabled() is disabled


def test_configure_logging_is_idempotent(monkeypatch):
    root = logging.getLogger()
    handler = logging.NullHandler()
    monkeypatch.setattr(root, "handlers", [handler])

    st.configure_logging()

    assert root.handlers == [handler]
