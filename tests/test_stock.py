import time

import pytest

from plazza.exceptions import ThreadError
from plazza.pizza import Ingredient, PizzaSize, PizzaType, create_pizza
from plazza.stock import Stock


def _wait_until(predicate, timeout=5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


def test_initial_stock_has_five_of_each():
    stock = Stock(1.0)
    assert stock.snapshot() == {ingredient: 5 for ingredient in Ingredient}
    assert list(stock.snapshot()) == list(Ingredient)


def test_consume_removes_one_of_each_ingredient():
    stock = Stock(1.0)
    recipe = create_pizza(PizzaType.Regina, PizzaSize.M).ingredients
    before = stock.snapshot()
    assert stock.consume_ingredients(recipe, lambda: True) is True
    after = stock.snapshot()
    for ingredient in Ingredient:
        expected = before[ingredient] - (1 if ingredient in recipe else 0)
        assert after[ingredient] == expected


def test_failed_reservation_restores_stock():
    stock = Stock(1.0)
    recipe = create_pizza(PizzaType.Fantasia, PizzaSize.L).ingredients
    before = stock.snapshot()
    assert stock.consume_ingredients(recipe, lambda: False) is False
    assert stock.snapshot() == before


def test_missing_ingredient_refuses_without_reserving():
    stock = Stock(1.0)
    recipe = create_pizza(PizzaType.Margarita, PizzaSize.S).ingredients
    calls = []

    def reserve():
        calls.append(1)
        return True

    results = [stock.consume_ingredients(recipe, reserve) for _ in range(6)]
    assert results == [True] * 5 + [False]
    assert len(calls) == 5
    assert stock.snapshot()[Ingredient.Dough] == 0


def test_reservation_defaults_to_success():
    stock = Stock(1.0)
    assert stock.consume_ingredients([Ingredient.Ham])
    assert stock.snapshot()[Ingredient.Ham] == 4


def test_restock_increases_every_ingredient():
    stock = Stock(0.01)
    stock.start_restock()
    try:
        _wait_until(lambda: all(v > 5 for v in stock.snapshot().values()))
        after = stock.snapshot()
        assert set(after) == set(Ingredient)
        assert min(after.values()) > 5
    finally:
        stock.stop_restock()


def test_stop_restock_freezes_stock():
    stock = Stock(0.01)
    stock.start_restock()
    time.sleep(0.05)
    stock.stop_restock()
    first = stock.snapshot()
    time.sleep(0.05)
    assert stock.snapshot() == first


def test_starting_twice_raises():
    stock = Stock(10.0)
    stock.start_restock()
    try:
        with pytest.raises(ThreadError):
            stock.start_restock()
    finally:
        stock.stop_restock()