from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Tuple

from odoo_common.errors import UnknownToolError
from odoo_mcp import formatting as fmt
from odoo_mcp.domain.models import QuerySpec


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    limit_description: str
    query: QuerySpec
    header: str
    empty_message: str
    formatter: fmt.RecordFormatter

    @property
    def default_limit(self) -> int:
        return self.query.default_limit

    def input_schema(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "limit": {
                    "type": "number",
                    "description": self.limit_description,
                    "default": self.query.default_limit,
                },
            },
        }

    def render(self, records) -> str:
        return fmt.render_records(
            records,
            header=self.header,
            empty_message=self.empty_message,
            formatter=self.formatter,
        )


TOOL_CATALOG: Tuple[ToolSpec, ...] = (
    ToolSpec(
        name="get_customers",
        description="Get the list of customers from Odoo",
        limit_description="Maximum number of customers to return",
        query=QuerySpec(
            model="res.partner",
            domain=(("customer_rank", ">", 0),),
            fields=("name", "email", "phone", "city"),
            default_limit=50,
        ),
        header="👥 **{count} customers found:**",
        empty_message=fmt.EMPTY_CUSTOMERS,
        formatter=fmt.format_customer,
    ),
    ToolSpec(
        name="get_products",
        description="Get the list of saleable products from Odoo",
        limit_description="Maximum number of products to return",
        query=QuerySpec(
            model="product.product",
            domain=(("sale_ok", "=", True),),
            fields=("name", "list_price", "categ_id"),
            default_limit=50,
        ),
        header="📦 **{count} products found:**",
        empty_message=fmt.EMPTY_PRODUCTS,
        formatter=fmt.format_product,
    ),
    ToolSpec(
        name="get_sale_orders",
        description="Get sale orders from Odoo",
        limit_description="Maximum number of orders to return",
        query=QuerySpec(
            model="sale.order",
            domain=(),
            fields=("name", "partner_id", "date_order", "amount_total", "state"),
            default_limit=20,
        ),
        header="🛒 **{count} orders found:**",
        empty_message=fmt.EMPTY_SALE_ORDERS,
        formatter=fmt.format_sale_order,
    ),
    ToolSpec(
        name="get_users",
        description="Get the list of users from Odoo",
        limit_description="Maximum number of users to return",
        query=QuerySpec(
            model="res.users",
            domain=(),
            fields=("name", "login", "email", "active"),
            default_limit=50,
        ),
        header="👨‍💻 **{count} users found:**",
        empty_message=fmt.EMPTY_USERS,
        formatter=fmt.format_user,
    ),
)

_BY_NAME: Dict[str, ToolSpec] = {t.name: t for t in TOOL_CATALOG}


def get_tool(name: str) -> ToolSpec:
    try:
        return _BY_NAME[name]
    except KeyError:
        raise UnknownToolError(name) from None
