"""Parsing of order lines such as ``regina XXL x2; fantasia M x3``."""

from __future__ import annotations

import itertools
import re
import threading

from plazza.exceptions import ParserError
from plazza.pizza import pizza_size_from_string, pizza_type_from_string
from plazza.serialization import PizzaOrder

ORDER_PATTERN = re.compile(
    r"([a-zA-Z]+)\s+(S|M|L|XL|XXL)\s+x(\d+)", re.IGNORECASE | re.ASCII
)

_order_ids = itertools.count(1)
_order_ids_lock = threading.Lock()


def _next_order_id() -> int:
    with _order_ids_lock:
        return next(_order_ids)


def _parse_part(part: str) -> list[PizzaOrder]:
    match = ORDER_PATTERN.fullmatch(part)
    if match is None:
        raise ParserError(
            f"Invalid order format: '{part}'. "
            "Expected format: <PizzaType> <Size> x<Quantity>"
        )
    type_text, size_text, quantity_text = match.groups()
    try:
        quantity = int(quantity_text)
        pizza_type = pizza_type_from_string(type_text)
        size = pizza_size_from_string(size_text)
    except Exception as exc:
        raise ParserError(f"Failed to parse order part '{part}': {exc}") from exc
    return [
        PizzaOrder(pizza_type, size, 1, _next_order_id()) for _ in range(quantity)
    ]


def parse_order(text: str) -> list[PizzaOrder]:
    """Split ``text`` on ``;`` and return one order per pizza, each with a fresh id.

    Raises :class:`ParserError` when a part is malformed or no pizza is ordered.
    """
    orders: list[PizzaOrder] = []
    for raw_part in text.split(";"):
        part = raw_part.strip(" \t")
        if part:
            orders.extend(_parse_part(part))
    if not orders:
        raise ParserError(f"No valid pizza orders found in input: '{text}'")
    return orders


def is_valid_order(text: str) -> bool:
    """True when :func:`parse_order` accepts ``text``."""
    try:
        parse_order(text)
    except Exception:
        return False
    return True