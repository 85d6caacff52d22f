"""Exception hierarchy shared by every part of the pizzeria."""


class PlazzaError(Exception):
    """Base class of all errors raised by the package."""

    prefix = ""

    def __init__(self, message: str = "") -> None:
        self.message = f"{self.prefix}{message}"
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class ArgumentError(PlazzaError):
    """An argument (command line, pizza name, size...) is invalid."""

    prefix = "Argument exception: '"


class IPCError(PlazzaError):
    """Inter-process communication was misused or failed."""

    prefix = "IPC exception: '"


class MessageError(PlazzaError):
    """A message or message queue operation failed."""

    prefix = "Message exception: '"


class OpaqueObjectError(PlazzaError):
    """Binary packing or unpacking failed."""

    prefix = "Opaque Object exception: '"


class ParserError(PlazzaError):
    """An order line could not be parsed."""

    prefix = "Parser exception: '"


class ProcessError(PlazzaError):
    """A child process could not be managed."""

    prefix = "Process exception: '"


class ThreadError(PlazzaError):
    """A worker thread was misused."""

    prefix = "Thread exception: '"