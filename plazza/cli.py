"""Command line entry point: ``plazza <time_multiplier> <cooks_per_kitchen> <stock_regen_time_ms>``."""

from __future__ import annotations

import sys

from plazza.exceptions import ArgumentError
from plazza.logger import LogLevel, get_logger
from plazza.reception import Reception

EXIT_FAILURE = 84
USAGE = "Usage: plazza <time_multiplier> <cooks_per_kitchen> <stock_regen_time_ms>"


def main(argv: list[str] | None = None) -> int:
    """Run the reception on standard input; return the process exit status."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 3:
        print(USAGE, file=sys.stderr)
        return EXIT_FAILURE

    logger = get_logger()
    logger.set_level(LogLevel.INFO)
    logger.set_log_to_file(True, "logs/plazza.log")

    try:
        time_multiplier = float(args[0])
        cooks_per_kitchen = int(args[1])
        restock_ms = int(args[2])

        if time_multiplier <= 0:
            raise ArgumentError("Time multiplier must be a positive number")
        if cooks_per_kitchen <= 0:
            raise ArgumentError("Number of cooks must be a positive number")
        if restock_ms < 0:
            raise ArgumentError("Stock regeneration time must not be negative")

        reception = Reception(time_multiplier, cooks_per_kitchen, restock_ms / 1000)
        reception.run()
    except Exception as exc:
        logger.error(f"Error: {exc}")
        return EXIT_FAILURE
    return 0


if __name__ == "__main__":
    raise SystemExit(main())