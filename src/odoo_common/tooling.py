from __future__ import annotations

import functools
import inspect
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable

from odoo_common.context import bind_corr_id, ensure_corr_id, new_corr_id
from odoo_common.errors import REDACT_TOKEN, typed_error
from odoo_common.telemetry import log_event


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Shared helpers for MCP tool handlers
# ---------------------------------------------------------------------------


_REDACTION_KEYS = {"password", "token", "access_token", "api_key", "apikey", "authorization"}


def sanitize_args_for_log(args: dict | None) -> dict:
    """Remove obvious secrets from args (telemetry layer also redacts)."""
    out: dict[str, Any] = {}
    for k, v in (args or {}).items():
        out[str(k)] = REDACT_TOKEN if str(k).lower() in _REDACTION_KEYS else v
    return out


def _bound_args(fn: Callable[..., Any], args: tuple[Any, ...], kwargs: dict[str, Any]) -> dict[str, Any]:
    """Bind positional/keyword args to parameter names for logging; **kwargs are flattened."""
    try:
        bound = inspect.signature(fn).bind_partial(*args, **kwargs)
    except TypeError:
        d: dict[str, Any] = dict(kwargs)
        if args:
            d["_args"] = list(args)
        return d
    out: dict[str, Any] = {}
    for name, value in bound.arguments.items():
        if bound.signature.parameters[name].kind is inspect.Parameter.VAR_KEYWORD:
            out.update(value)
        else:
            out[name] = value
    return out


def _reply_error(payload: Any) -> dict | None:
    if isinstance(payload, dict):
        return payload if "error" in payload else None
    return getattr(payload, "error", None)


@dataclass(frozen=True)
class InstrumentConfig:
    kind: str
    name: str
    client_id: str
    telemetry_file: str = "mcp-telemetry.jsonl"

    # correlation id behavior
    new_corr_id_per_call: bool = True

    # builds the reply returned when the wrapped tool raises; re-raise when unset
    on_exception: Callable[[Exception], Any] | None = None


def instrument_sync_tool(cfg: InstrumentConfig):
    """
    Decorator for synchronous tool handlers.

    Every call gets a correlation id, is timed and produces one telemetry event.
    The wrapped function returns either a dict (error when it carries an "error"
    key) or an object exposing an ``error`` attribute.
    """

    def decorator(fn: Callable[..., Any]):
        fn_sig = inspect.signature(fn)

        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any):
            corr_id = new_corr_id() if cfg.new_corr_id_per_call else ensure_corr_id()
            bind_corr_id(corr_id)

            t0 = time.perf_counter()
            args_for_log: dict[str, Any] = {"args": sanitize_args_for_log(_bound_args(fn, args, kwargs))}

            try:
                payload = fn(*args, **kwargs)
            except Exception as e:
                if cfg.on_exception is None:
                    ms = int((time.perf_counter() - t0) * 1000)
                    args_for_log["error"] = typed_error("internal", str(e))["error"]
                    log_event(cfg.kind, cfg.name, args_for_log, ok=False, ms=ms,
                              client_id=cfg.client_id, corr_id=corr_id, telemetry_file=cfg.telemetry_file)
                    raise
                logger.exception("Tool %s failed", cfg.name)
                payload = cfg.on_exception(e)

            ms = int((time.perf_counter() - t0) * 1000)
            err = _reply_error(payload)
            if err:
                args_for_log["error"] = err.get("error", err)

            log_event(
                cfg.kind,
                cfg.name,
                args_for_log,
                ok=not err,
                ms=ms,
                client_id=cfg.client_id,
                corr_id=corr_id,
                telemetry_file=cfg.telemetry_file,
            )
            return payload

        wrapper.__signature__ = fn_sig  # type: ignore[attr-defined]
        return wrapper

    return decorator
