"""
Orders API schemas (request models) and validation error formatting.
"""

from __future__ import annotations

from typing import Annotated, Any, Sequence

from pydantic import AfterValidator, BaseModel, BeforeValidator, Field, StringConstraints

# Markup and quoting characters, plus slash, backslash and backtick.
_HTML_ESCAPES = str.maketrans(
    {
        "&": "&amp;",
        "<": "&lt;",
        ">": "&gt;",
        '"': "&quot;",
        "'": "&#x27;",
        "/": "&#x2F;",
        "\\": "&#x5C;",
        "`": "&#96;",
    }
)


def escape_html(value: str) -> str:
    return value.translate(_HTML_ESCAPES)


def _reject_bool(value: Any) -> Any:
    # pydantic would otherwise coerce true/false to 1/0.
    if isinstance(value, bool):
        raise ValueError("Input should be a valid integer")
    return value


# Trimmed, non-empty, then HTML-escaped (escaping runs after the length check).
OrderName = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=1),
    AfterValidator(escape_html),
]

Quantity = Annotated[int, BeforeValidator(_reject_bool), Field(ge=1)]


class OrderCreate(BaseModel):
    name: OrderName
    quantity: Quantity


class OrderReplace(OrderCreate):
    """
    PUT body: same rules as create, both fields required.
    """


class OrderPatch(BaseModel):
    name: OrderName | None = None
    quantity: Quantity | None = None

    def changes(self) -> dict[str, Any]:
        # Explicit nulls count as "not supplied".
        return {k: v for k, v in self.model_dump().items() if v is not None}


def _field_name(loc: Sequence[Any]) -> str:
    parts = [str(p) for p in loc[1:] if not isinstance(p, int)]
    if parts:
        return parts[-1]
    return str(loc[0]) if loc else "request"


def format_validation_errors(errors: Sequence[dict[str, Any]]) -> list[dict[str, str]]:
    """
    Flatten pydantic/FastAPI errors into `{field, message, location}` records.
    """
    formatted: list[dict[str, str]] = []
    for err in errors:
        loc = tuple(err.get("loc") or ())
        formatted.append(
            {
                "field": _field_name(loc),
                "message": str(err.get("msg") or "Invalid value"),
                "location": str(loc[0]) if loc else "body",
            }
        )
    return formatted
