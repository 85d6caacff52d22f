import struct

import pytest

from plazza.exceptions import OpaqueObjectError
from plazza.opaque import OpaqueObject
from plazza.packet import PizzaPacket
from plazza.pizza import Ingredient, PizzaSize, PizzaType
from plazza.serialization import KitchenStatus, PizzaCompletion, PizzaOrder


def test_order_wire_layout():
    order = PizzaOrder(PizzaType.Americana, PizzaSize.M, 1, 17)
    expected = struct.pack(
        "<4I", PizzaType.Americana.value, PizzaSize.M.value, 1, 17
    )
    assert order.pack().data == expected


def test_order_round_trip():
    order = PizzaOrder(PizzaType.Fantasia, PizzaSize.XXL, 1, 42)
    assert PizzaOrder.unpack(order.pack()) == order


def test_order_round_trip_through_hex():
    order = PizzaOrder(PizzaType.Regina, PizzaSize.S, 1, 8)
    obj = OpaqueObject.from_hex(order.pack().to_hex())
    assert PizzaOrder.unpack(obj) == order


def test_order_unpack_does_not_consume_source():
    order = PizzaOrder(PizzaType.Margarita, PizzaSize.L, 1, 3)
    obj = order.pack()
    PizzaOrder.unpack(obj)
    assert obj.unpack_u32() == PizzaType.Margarita.value


def test_order_truncated_raises():
    with pytest.raises(OpaqueObjectError):
        PizzaOrder.unpack(OpaqueObject().pack_u32(1))


def test_status_round_trip_with_stock():
    status = KitchenStatus(
        kitchen_id=2,
        busy_cooks=1,
        total_cooks=3,
        pending_pizzas=4,
        stock=[(Ingredient.Dough, 5), (Ingredient.ChiefLove, 0), (Ingredient.Ham, 2)],
    )
    assert KitchenStatus.unpack(status.pack()) == status


def test_status_round_trip_empty_stock():
    status = KitchenStatus(kitchen_id=9, total_cooks=2)
    back = KitchenStatus.unpack(status.pack())
    assert back == status
    assert back.stock == []


def test_status_stock_order_is_kept():
    stock = [(ingredient, ingredient.value) for ingredient in reversed(Ingredient)]
    status = KitchenStatus(stock=stock)
    assert KitchenStatus.unpack(status.pack()).stock == stock


def test_status_size_grows_with_stock():
    empty = KitchenStatus().pack()
    one = KitchenStatus(stock=[(Ingredient.Tomato, 1)]).pack()
    assert len(one) - len(empty) == 8


def test_status_truncated_stock_raises():
    obj = KitchenStatus(stock=[(Ingredient.Tomato, 1)]).pack()
    cut = OpaqueObject(obj.data[:-2])
    with pytest.raises(OpaqueObjectError):
        KitchenStatus.unpack(cut)


def test_completion_round_trip():
    completion = PizzaCompletion(
        PizzaPacket(PizzaType.Regina, PizzaSize.XL, 11, 5), 123456789012
    )
    assert PizzaCompletion.unpack(completion.pack()) == completion


def test_completion_layout_embeds_packet():
    packet = PizzaPacket(PizzaType.Margarita, PizzaSize.S, 1, 2)
    completion = PizzaCompletion(packet, 77)
    obj = completion.pack()
    assert obj.unpack_bytes() == packet.pack().data
    assert obj.unpack_u64() == 77
    assert len(obj) == 4 + len(packet.pack()) + 8


def test_completion_default_time_is_monotonic():
    first = PizzaCompletion()
    second = PizzaCompletion()
    assert second.completion_time_ns >= first.completion_time_ns


def test_completion_truncated_raises():
    obj = PizzaCompletion(PizzaPacket(), 5).pack()
    with pytest.raises(OpaqueObjectError):
        PizzaCompletion.unpack(OpaqueObject(obj.data[:-1]))