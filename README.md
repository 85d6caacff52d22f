# plazza

A pizzeria simulation. A reception reads pizza orders from standard input
and hands them out to kitchens. Each kitchen has a fixed number of cooks,
and each cook is a thread that bakes one pizza at a time. The cooks in a
kitchen draw on a shared ingredient stock, which regenerates over time. The
reception opens a new kitchen when every existing one is full. A kitchen
that has had no activity for five seconds closes by itself.

The reception and the kitchens talk through named message queues. These
are FIFOs in a `plazza-mq` directory under the system's temporary
directory, so the package needs a POSIX system.

## Installation

```
pip install .
```

To run the test suite:

```
pip install .[test]
pytest
```

## Running

```
plazza <time_multiplier> <cooks_per_kitchen> <stock_regen_time_ms>
```

- `time_multiplier`: scales every cooking time. It must be positive; for
  example, `0.5` cooks twice as fast.
- `cooks_per_kitchen`: the number of cooks in each kitchen. It must be at
  least 1.
- `stock_regen_time_ms`: the interval, in milliseconds, after which every
  ingredient in a kitchen's stock goes up by one. It must not be negative.

With the wrong number of arguments, the command prints a usage line and
exits with status 84. It also exits with status 84 when an argument is
invalid. Log lines are written to the terminal, with errors going to
stderr, and are also appended without colours to `logs/plazza.log`.

## Ordering

Enter orders one per line. Several orders can go on one line, separated by
`;`:

```
regina XXL x2; fantasia M x3; margarita S x1
```

Each order has the form `<type> <size> x<quantity>`, and case is ignored.
An order for a quantity of n becomes n single-pizza orders, and every one
of them gets its own increasing order id.

| Pizza     | Ingredients                                       | Base time |
|-----------|---------------------------------------------------|-----------|
| margarita | dough, tomato, gruyere                            | 1 s       |
| regina    | dough, tomato, gruyere, ham, mushrooms            | 2 s       |
| americana | dough, tomato, gruyere, steak                     | 2 s       |
| fantasia  | dough, tomato, eggplant, goat cheese, chief love  | 4 s       |

The sizes are `S`, `M`, `L`, `XL` and `XXL`. Every kitchen starts with 5 of
each ingredient. A kitchen takes at most twice as many pizzas as it has
cooks, and each pizza goes to the least loaded kitchen.

Other commands:

- `status`: prints a table with each kitchen's busy and total cooks, its
  pending pizzas, whether it is active, and its stock. It then asks every
  kitchen for fresh figures.
- `exit` or `quit`: sends a shutdown message to every kitchen, waits for
  them, and leaves. End of input does the same.

## Using it as a library

```python
from plazza.order_parser import parse_order, is_valid_order

orders = parse_order("regina XL x2; margarita S x1")
for order in orders:
    print(order.type, order.size, order.order_id)

assert not is_valid_order("calzone M x1")
```

Some parts can also be used on their own:

- `plazza.opaque.OpaqueObject` is a little-endian binary buffer. It has
  `pack_u32`, `pack_u64` and `pack_bytes`, each with a matching `unpack_*`,
  and it converts to and from hex with `to_hex` and `from_hex`.
- `plazza.message.Message` frames a message as
  `type|sender|timestamp|length|payload`, using `serialize` and
  `deserialize`.
- `plazza.pizza.create_pizza` builds a `Pizza` with its recipe.
  `Pizza.cooking_time(multiplier)` gives the scaled time in seconds.

Errors are raised as subclasses of `plazza.exceptions.PlazzaError`, such as
`ParserError`, `ArgumentError` and `MessageError`.

## Limitations

Kitchens are not separate operating-system processes. Each one runs in a
background thread of the reception's own process, managed by
`plazza.process.Process`. The messages still pass through the named queues,
but all the kitchens end when the reception ends. Orders and statistics
live only in memory and are not kept between runs.