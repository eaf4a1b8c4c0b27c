from __future__ import annotations

import datetime as _dt
import json
import logging
from typing import Any

from odoo_common.context import ensure_corr_id
from odoo_common.errors import REDACT_TOKEN
from odoo_config.settings import telemetry_dir, telemetry_disabled


logger = logging.getLogger(__name__)

TELEMETRY_FILE = "mcp-telemetry.jsonl"

_SECRET_KEYS = {"password", "passwd", "authorization", "access_token", "token", "api_key", "apikey"}

# Odoo record fields that identify a person
_PII_KEYS = {"email", "login", "phone", "username"}


def _redact(obj: Any, keys: set[str]) -> Any:
    if isinstance(obj, dict):
        out = {}
        for k, v in obj.items():
            if isinstance(k, str) and k.strip().lower() in keys:
                out[k] = REDACT_TOKEN
            else:
                out[k] = _redact(v, keys)
        return out
    if isinstance(obj, list):
        return [_redact(x, keys) for x in obj]
    return obj


def redact(obj: Any) -> Any:
    """Strip secrets first, then common PII keys."""
    return _redact(_redact(obj, _SECRET_KEYS), _PII_KEYS)


def log_event(
    kind: str,
    name: str,
    args: dict | None = None,
    ok: bool = True,
    ms: int = 0,
    *,
    client_id: str | None = None,
    corr_id: str | None = None,
    telemetry_file: str = TELEMETRY_FILE,
) -> None:
    """
    Append one JSONL telemetry record for a tool call.

    Telemetry must never break a tool call, so write failures are only logged.
    """
    if telemetry_disabled():
        return

    rec = {
        "ts": _dt.datetime.now(_dt.timezone.utc).isoformat().replace("+00:00", "Z"),
        "kind": kind,
        "name": name,
        "client_id": client_id,
        "corr_id": corr_id or ensure_corr_id(),
        "args": {} if args is None else dict(args),
        "ok": bool(ok),
        "ms": int(ms),
    }

    try:
        out_dir = telemetry_dir()
        out_dir.mkdir(parents=True, exist_ok=True)
        with (out_dir / telemetry_file).open("a", encoding="utf-8") as f:
            f.write(json.dumps(redact(rec), ensure_ascii=False, default=str) + "\n")
    except OSError as e:
        logger.warning("Could not write telemetry for %s %s: %s", kind, name, e)
