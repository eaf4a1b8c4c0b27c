"""Text rendering for tool results: one markdown-ish block per call."""

from __future__ import annotations

from typing import Any, Callable, Iterable, List, Optional

from odoo_mcp.domain.models import Record

NO_CONNECTION = "❌ No connection to Odoo"

EMPTY_CUSTOMERS = (
    "❌ **No customers registered**\n\n"
    "You can add customers from Sales → Customers in Odoo."
)
EMPTY_PRODUCTS = (
    "❌ **No products registered**\n\n"
    "You can add products from Sales → Products in Odoo."
)
EMPTY_SALE_ORDERS = (
    "❌ **No sale orders**\n\n"
    "Orders will appear once they are created from Sales → Orders."
)
EMPTY_USERS = "❌ **No users registered**"

STATUS_INACTIVE = "❌ Inactive"
STATUS_NEVER_LOGGED_IN = "🆕 Never logged in"

# res.users fields that may carry the last activity timestamp, in lookup order
LAST_ACTIVITY_FIELDS = ("last_activity_time", "login_date")

RecordFormatter = Callable[[Record], List[str]]


def tool_not_found(name: str) -> str:
    return f"❌ Tool '{name}' not found"


def error_text(message: str) -> str:
    return f"❌ Error: {message}"


def relation_label(value: Any) -> Optional[str]:
    """Label of a many2one value ``[id, label]``; None unless the pair is complete."""
    if isinstance(value, (list, tuple)) and len(value) > 1:
        return str(value[1])
    return None


def format_customer(c: Record) -> List[str]:
    lines = [f"📋 **{c.get('name')}**"]
    if c.get("email"):
        lines.append(f"   📧 {c['email']}")
    if c.get("phone"):
        lines.append(f"   📞 {c['phone']}")
    if c.get("city"):
        lines.append(f"   🏙️ {c['city']}")
    return lines


def format_product(p: Record) -> List[str]:
    lines = [f"🏷️ **{p.get('name')}**", f"   💰 ${p.get('list_price')}"]
    category = relation_label(p.get("categ_id"))
    if category:
        lines.append(f"   📂 {category}")
    return lines


def format_sale_order(o: Record) -> List[str]:
    lines = [f"📄 **{o.get('name')}**"]
    partner = relation_label(o.get("partner_id"))
    if partner:
        lines.append(f"   👤 {partner}")
    if o.get("date_order"):
        lines.append(f"   📅 {o['date_order']}")
    lines.append(f"   💵 ${o.get('amount_total')}")
    if o.get("state"):
        lines.append(f"   📊 {o['state']}")
    return lines


def user_status(u: Record) -> str:
    if "active" in u and not u["active"]:
        return STATUS_INACTIVE
    for key in LAST_ACTIVITY_FIELDS:
        if u.get(key):
            return f"🕒 Last seen: {u[key]}"
    return STATUS_NEVER_LOGGED_IN


def format_user(u: Record) -> List[str]:
    lines = [f"👤 **{u.get('name')}**"]
    if u.get("login"):
        lines.append(f"   🔑 {u['login']}")
    if u.get("email") and u.get("email") != u.get("login"):
        lines.append(f"   📧 Email: {u['email']}")
    lines.append(f"   {user_status(u)}")
    return lines


def render_records(
    records: Iterable[Record],
    *,
    header: str,
    empty_message: str,
    formatter: RecordFormatter,
) -> str:
    """
    Header with the record count, then one block per record.

    ``header`` is a format string with a ``{count}`` placeholder. An empty
    result renders ``empty_message`` instead of a zero-count header.
    """
    rows = list(records or [])
    if not rows:
        return empty_message

    out = [header.format(count=len(rows)), ""]
    for rec in rows:
        out.extend(formatter(rec))
        out.append("")
    return "\n".join(out) + "\n"
