"""Per-call correlation id, carried in a context variable so telemetry lines of one tool call share it."""
from __future__ import annotations

import uuid
from contextvars import ContextVar

_corr_id_ctx: ContextVar[str | None] = ContextVar("odoo_mcp_corr_id", default=None)


def new_corr_id() -> str:
    return uuid.uuid4().hex


def current_corr_id() -> str | None:
    return _corr_id_ctx.get()


def ensure_corr_id() -> str:
    """Return the active correlation id, creating one when none is set."""
    cid = _corr_id_ctx.get()
    if not cid:
        cid = new_corr_id()
        _corr_id_ctx.set(cid)
    return cid


def bind_corr_id(cid: str | None) -> None:
    if cid:
        _corr_id_ctx.set(cid)
