"""Pizzeria simulation: a reception, kitchens with cook threads and a regenerating stock, linked by named message queues."""

__version__ = "0.1.0"