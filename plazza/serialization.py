"""Payload records exchanged between the reception and the kitchens."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import TypeVar

from plazza.opaque import OpaqueObject
from plazza.packet import PizzaPacket
from plazza.pizza import Ingredient, PizzaSize, PizzaType

_E = TypeVar("_E", bound=Enum)


def _coerce(enum_cls: type[_E], raw: int) -> _E | int:
    try:
        return enum_cls(raw)
    except ValueError:
        return raw


def _raw(value: Enum | int) -> int:
    return value.value if isinstance(value, Enum) else int(value)


@dataclass
class PizzaOrder:
    """A single pizza ordered at the reception."""

    type: PizzaType | int
    size: PizzaSize | int
    quantity: int = 1
    order_id: int = 0

    def pack(self) -> OpaqueObject:
        """Encode as type, size, quantity and order id (unsigned 32-bit each)."""
        obj = OpaqueObject()
        obj.pack_u32(_raw(self.type))
        obj.pack_u32(_raw(self.size))
        obj.pack_u32(self.quantity)
        obj.pack_u32(self.order_id)
        return obj

    @classmethod
    def unpack(cls, obj: OpaqueObject) -> PizzaOrder:
        """Decode an order from the start of ``obj``."""
        reader = OpaqueObject(obj.data)
        type_value = reader.unpack_u32()
        size_value = reader.unpack_u32()
        quantity = reader.unpack_u32()
        order_id = reader.unpack_u32()
        return cls(
            _coerce(PizzaType, type_value),
            _coerce(PizzaSize, size_value),
            quantity,
            order_id,
        )


@dataclass
class KitchenStatus:
    """A kitchen's load and its remaining stock."""

    kitchen_id: int = 0
    busy_cooks: int = 0
    total_cooks: int = 0
    pending_pizzas: int = 0
    stock: list[tuple[Ingredient | int, int]] = field(default_factory=list)

    def pack(self) -> OpaqueObject:
        """Encode the counters followed by a counted list of (ingredient, amount)."""
        obj = OpaqueObject()
        obj.pack_u32(self.kitchen_id)
        obj.pack_u32(self.busy_cooks)
        obj.pack_u32(self.total_cooks)
        obj.pack_u32(self.pending_pizzas)
        obj.pack_u32(len(self.stock))
        for ingredient, count in self.stock:
            obj.pack_u32(_raw(ingredient))
            obj.pack_u32(count)
        return obj

    @classmethod
    def unpack(cls, obj: OpaqueObject) -> KitchenStatus:
        """Decode a status from the start of ``obj``."""
        reader = OpaqueObject(obj.data)
        kitchen_id = reader.unpack_u32()
        busy_cooks = reader.unpack_u32()
        total_cooks = reader.unpack_u32()
        pending_pizzas = reader.unpack_u32()
        entries = reader.unpack_u32()
        stock = []
        for _ in range(entries):
            ingredient = _coerce(Ingredient, reader.unpack_u32())
            stock.append((ingredient, reader.unpack_u32()))
        return cls(kitchen_id, busy_cooks, total_cooks, pending_pizzas, stock)


@dataclass
class PizzaCompletion:
    """A pizza that a kitchen finished, with its monotonic completion time."""

    pizza: PizzaPacket = field(default_factory=PizzaPacket)
    completion_time_ns: int = field(default_factory=time.monotonic_ns)

    def pack(self) -> OpaqueObject:
        """Encode the packed pizza as a byte string, then the time as 64 bits."""
        obj = OpaqueObject()
        obj.pack_bytes(self.pizza.pack().data)
        obj.pack_u64(self.completion_time_ns)
        return obj

    @classmethod
    def unpack(cls, obj: OpaqueObject) -> PizzaCompletion:
        """Decode a completion from the start of ``obj``."""
        reader = OpaqueObject(obj.data)
        pizza = PizzaPacket.unpack(OpaqueObject(reader.unpack_bytes()))
        return cls(pizza, reader.unpack_u64())