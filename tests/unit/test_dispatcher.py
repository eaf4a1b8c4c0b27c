from __future__ import annotations

import pytest

from odoo_mcp import formatting as fmt
from odoo_mcp.connectors.odoo_connector import OdooConnector
from odoo_mcp.dispatcher import ToolDispatcher, resolve_limit
from odoo_mcp.domain.models import ReadFailed
from tests.helpers.fakes import SAMPLE_RECORDS, FakeConnector


EXPECTED_DEFAULTS = {
    "get_customers": 50,
    "get_products": 50,
    "get_sale_orders": 20,
    "get_users": 50,
}


def test_list_tools_exposes_exactly_four_tools_with_defaults():
    tools = ToolDispatcher().list_tools()

    assert {t.name: t.input_schema()["properties"]["limit"]["default"] for t in tools} == EXPECTED_DEFAULTS
    for t in tools:
        schema = t.input_schema()
        assert schema["type"] == "object"
        assert list(schema["properties"]) == ["limit"]
        assert schema["properties"]["limit"]["type"] == "number"
        assert "required" not in schema
        assert t.description


@pytest.mark.parametrize("name", sorted(EXPECTED_DEFAULTS))
def test_without_connector_every_tool_reports_no_connection(name):
    reply = ToolDispatcher(None).call_tool(name, {})

    assert reply.text == fmt.NO_CONNECTION
    assert not reply.ok
    assert reply.error["error"]["code"] == "not_connected"


@pytest.mark.parametrize("name", sorted(EXPECTED_DEFAULTS))
def test_before_authentication_every_tool_reports_no_connection(name, proxy_factory):
    connector = OdooConnector("http://localhost:8069", "db", "admin", "pw", proxy_factory=proxy_factory)

    reply = ToolDispatcher(connector).call_tool(name, {"limit": 3})

    assert reply.text == fmt.NO_CONNECTION
    assert proxy_factory.obj.calls == []


@pytest.mark.parametrize("connector", [None, FakeConnector()])
def test_unknown_tool_is_reported_by_name(connector):
    reply = ToolDispatcher(connector).call_tool("delete_everything", {"limit": 1})

    assert reply.text == fmt.tool_not_found("delete_everything")
    assert "delete_everything" in reply.text
    assert reply.error["error"]["code"] == "tool_not_found"


@pytest.mark.parametrize(
    "name, model, domain, fields",
    [
        ("get_customers", "res.partner", [("customer_rank", ">", 0)], ["name", "email", "phone", "city"]),
        ("get_products", "product.product", [("sale_ok", "=", True)], ["name", "list_price", "categ_id"]),
        ("get_sale_orders", "sale.order", [], ["name", "partner_id", "date_order", "amount_total", "state"]),
        ("get_users", "res.users", [], ["name", "login", "email", "active"]),
    ],
)
def test_tools_read_their_query_with_default_limit(name, model, domain, fields):
    connector = FakeConnector(SAMPLE_RECORDS)

    reply = ToolDispatcher(connector).call_tool(name)

    assert reply.ok
    assert connector.reads == [(model, domain, fields, EXPECTED_DEFAULTS[name])]


def test_limit_argument_overrides_default():
    connector = FakeConnector(SAMPLE_RECORDS)

    ToolDispatcher(connector).call_tool("get_sale_orders", {"limit": 5})

    assert connector.reads[0][3] == 5


@pytest.mark.parametrize("raw", [None, 0, "", "many", -3])
def test_missing_or_unusable_limit_falls_back_to_default(raw):
    assert resolve_limit({"limit": raw}, 20) == 20


def test_numeric_limits_are_coerced():
    assert resolve_limit({"limit": 7.0}, 50) == 7
    assert resolve_limit({"limit": "12"}, 50) == 12
    assert resolve_limit(None, 50) == 50


def test_populated_result_renders_header_with_count():
    reply = ToolDispatcher(FakeConnector(SAMPLE_RECORDS)).call_tool("get_customers", {"limit": 10})

    assert reply.text.splitlines()[0] == "👥 **2 customers found:**"
    assert reply.content()[0].type == "text"
    assert reply.content()[0].text == reply.text
    assert len(reply.content()) == 1


@pytest.mark.parametrize(
    "name, message",
    [
        ("get_customers", fmt.EMPTY_CUSTOMERS),
        ("get_products", fmt.EMPTY_PRODUCTS),
        ("get_sale_orders", fmt.EMPTY_SALE_ORDERS),
        ("get_users", fmt.EMPTY_USERS),
    ],
)
def test_empty_results_end_to_end(name, message):
    reply = ToolDispatcher(FakeConnector({})).call_tool(name)

    assert reply.ok
    assert reply.text == message


def test_transport_failure_is_rendered_not_raised():
    failure = ReadFailed(code="transport", message="Access Denied")

    reply = ToolDispatcher(FakeConnector(failure=failure)).call_tool("get_users")

    assert reply.text == fmt.error_text("Access Denied")
    assert reply.error["error"] == {"code": "transport", "message": "Access Denied"}


def test_unexpected_exception_is_rendered_not_raised():
    class Exploding:
        def read(self, *a, **k):
            raise RuntimeError("kaboom")

    reply = ToolDispatcher(Exploding()).call_tool("get_products")

    assert reply.text == fmt.error_text("kaboom")
    assert reply.error["error"]["code"] == "internal"


def test_catalog_domains_are_field_operator_value_triples():
    for tool in ToolDispatcher().list_tools():
        for condition in tool.query.domain:
            field, operator, _ = condition
            assert isinstance(field, str) and isinstance(operator, str)
