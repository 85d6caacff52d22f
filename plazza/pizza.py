"""Pizza kinds, sizes, ingredients and recipes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from plazza.exceptions import ArgumentError


class PizzaType(Enum):
    Regina = 1
    Margarita = 2
    Americana = 4
    Fantasia = 8

    def __str__(self) -> str:
        return self.name.lower()


class PizzaSize(Enum):
    S = 1
    M = 2
    L = 4
    XL = 8
    XXL = 16

    def __str__(self) -> str:
        return self.name


class Ingredient(Enum):
    Dough = 0
    Tomato = 1
    Gruyere = 2
    Ham = 3
    Mushrooms = 4
    Steak = 5
    Eggplant = 6
    GoatCheese = 7
    ChiefLove = 8

    def __str__(self) -> str:
        return _INGREDIENT_NAMES[self]


_INGREDIENT_NAMES = {
    Ingredient.Dough: "dough",
    Ingredient.Tomato: "tomato",
    Ingredient.Gruyere: "gruyere",
    Ingredient.Ham: "ham",
    Ingredient.Mushrooms: "mushrooms",
    Ingredient.Steak: "steak",
    Ingredient.Eggplant: "eggplant",
    Ingredient.GoatCheese: "goat cheese",
    Ingredient.ChiefLove: "chief love",
}


@dataclass(frozen=True)
class Pizza:
    """A pizza of a given type and size; recipes come from :func:`create_pizza`."""

    type: PizzaType
    size: PizzaSize
    ingredients: tuple[Ingredient, ...] = ()
    base_cooking_time: int = 0

    @property
    def name(self) -> str:
        return str(self.type)

    @property
    def size_name(self) -> str:
        return str(self.size)

    def cooking_time(self, multiplier: float) -> float:
        """Cooking time in seconds scaled by ``multiplier``."""
        return self.base_cooking_time * multiplier


_RECIPES: dict[PizzaType, tuple[tuple[Ingredient, ...], int]] = {
    PizzaType.Margarita: (
        (Ingredient.Dough, Ingredient.Tomato, Ingredient.Gruyere),
        1,
    ),
    PizzaType.Regina: (
        (Ingredient.Dough, Ingredient.Tomato, Ingredient.Gruyere, Ingredient.Ham, Ingredient.Mushrooms),
        2,
    ),
    PizzaType.Americana: (
        (Ingredient.Dough, Ingredient.Tomato, Ingredient.Gruyere, Ingredient.Steak),
        2,
    ),
    PizzaType.Fantasia: (
        (Ingredient.Dough, Ingredient.Tomato, Ingredient.Eggplant, Ingredient.GoatCheese, Ingredient.ChiefLove),
        4,
    ),
}


def create_pizza(pizza_type: PizzaType | int, size: PizzaSize | int) -> Pizza:
    """Build a pizza with the recipe of its type."""
    try:
        pizza_type = PizzaType(pizza_type)
    except ValueError as exc:
        raise ArgumentError("create_pizza: Unknown pizza type") from exc
    try:
        size = PizzaSize(size)
    except ValueError as exc:
        raise ArgumentError("create_pizza: Unknown pizza size") from exc
    ingredients, cooking_time = _RECIPES[pizza_type]
    return Pizza(pizza_type, size, ingredients, cooking_time)


def pizza_type_from_string(text: str) -> PizzaType:
    """Parse a pizza type name, ignoring case."""
    normalized = text.lower()
    for pizza_type in PizzaType:
        if str(pizza_type) == normalized:
            return pizza_type
    raise ArgumentError(f"pizza_type_from_string: Invalid pizza type: {text}")


def pizza_size_from_string(text: str) -> PizzaSize:
    """Parse a pizza size name, ignoring case."""
    normalized = text.upper()
    for size in PizzaSize:
        if str(size) == normalized:
            return size
    raise ArgumentError(f"pizza_size_from_string: Invalid pizza size: {text}")