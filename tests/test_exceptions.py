import pytest

from plazza.exceptions import (
    ArgumentError,
    IPCError,
    MessageError,
    OpaqueObjectError,
    ParserError,
    PlazzaError,
    ProcessError,
    ThreadError,
)


def test_base_error_keeps_message_verbatim():
    err = PlazzaError("boom")
    assert str(err) == "boom"
    assert err.message == "boom"


@pytest.mark.parametrize(
    "cls, prefix",
    [
        (ArgumentError, "Argument exception: '"),
        (IPCError, "IPC exception: '"),
        (MessageError, "Message exception: '"),
        (OpaqueObjectError, "Opaque Object exception: '"),
        (ParserError, "Parser exception: '"),
        (ProcessError, "Process exception: '"),
        (ThreadError, "Thread exception: '"),
    ],
)
def test_subclass_prefixes_message(cls, prefix):
    err = cls("details")
    assert str(err) == prefix + "details"
    assert err.message == prefix + "details"


@pytest.mark.parametrize(
    "cls",
    [ArgumentError, IPCError, MessageError, OpaqueObjectError, ParserError, ProcessError, ThreadError],
)
def test_subclasses_are_caught_as_base(cls):
    err = cls("oops")
    with pytest.raises(PlazzaError) as info:
        raise err
    assert info.value is err
    assert err.message.endswith("oops")