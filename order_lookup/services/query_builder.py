"""Turn user-supplied order/email into a Shopify search filter."""

from dataclasses import dataclass

ORDER_MARKER = "#"


def escape_literal(value: str) -> str:
    """Escape backslashes, then single quotes, so a value cannot leave a quoted search literal."""
    return value.replace("\\", "\\\\").replace("'", "\\'")


def normalize_order_name(order: str) -> str:
    """Trim and drop one leading '#', so '#1001' and '1001' look up the same order."""
    order = order.strip()
    if order.startswith(ORDER_MARKER):
        order = order[len(ORDER_MARKER):]
    return order


def normalize_email(email: str) -> str:
    return email.strip().lower()


@dataclass(frozen=True)
class LookupQuery:
    """Sanitized lookup values; both fields are already escaped."""

    order_name: str
    email: str

    @property
    def filter_expression(self) -> str:
        return f"email:'{self.email}' AND name:'{self.order_name}'"


def build_lookup_query(order: str, email: str) -> LookupQuery:
    """Normalize and escape raw request values.

    ``("#1001", "a'b@example.com")`` becomes the filter
    ``email:'a\\'b@example.com' AND name:'1001'``.
    """
    return LookupQuery(
        order_name=escape_literal(normalize_order_name(order)),
        email=escape_literal(normalize_email(email)),
    )
