"""Compact binary form of a pizza travelling between processes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TypeVar

from plazza.opaque import OpaqueObject
from plazza.pizza import Pizza, PizzaSize, PizzaType

_E = TypeVar("_E", bound=Enum)


def _coerce(enum_cls: type[_E], raw: int) -> _E | int:
    """Return the enum member for ``raw``, or ``raw`` itself when it names none."""
    try:
        return enum_cls(raw)
    except ValueError:
        return raw


def _raw(value: Enum | int) -> int:
    return value.value if isinstance(value, Enum) else int(value)


@dataclass
class PizzaPacket:
    """A pizza's type and size plus the order and kitchen it belongs to."""

    type: PizzaType | int = PizzaType.Margarita
    size: PizzaSize | int = PizzaSize.S
    order_id: int = 0
    kitchen_id: int = 0

    @classmethod
    def from_pizza(cls, pizza: Pizza) -> PizzaPacket:
        """Build a packet carrying the type and size of ``pizza``."""
        return cls(pizza.type, pizza.size)

    def to_pizza(self) -> Pizza:
        """Return a plain pizza of the packet's type and size."""
        return Pizza(self.type, self.size)

    def pack(self) -> OpaqueObject:
        """Encode as four unsigned 32-bit fields: type, size, order id, kitchen id."""
        obj = OpaqueObject()
        obj.pack_u32(_raw(self.type))
        obj.pack_u32(_raw(self.size))
        obj.pack_u32(self.order_id)
        obj.pack_u32(self.kitchen_id)
        return obj

    @classmethod
    def unpack(cls, obj: OpaqueObject) -> PizzaPacket:
        """Decode a packet from the start of ``obj`` without moving its read position."""
        reader = OpaqueObject(obj.data)
        type_value = reader.unpack_u32()
        size_value = reader.unpack_u32()
        order_id = reader.unpack_u32()
        kitchen_id = reader.unpack_u32()
        return cls(
            _coerce(PizzaType, type_value),
            _coerce(PizzaSize, size_value),
            order_id,
            kitchen_id,
        )

    def is_valid(self) -> bool:
        """True when both the type and the size are known values."""
        return isinstance(self.type, PizzaType) and isinstance(self.size, PizzaSize)