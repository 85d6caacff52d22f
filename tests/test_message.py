import pytest

from plazza.exceptions import MessageError
from plazza.message import Message, MessageType


def test_serialize_format():
    message = Message(MessageType.PIZZA_ORDER, 0, 42, "hello")
    assert message.serialize() == "1|0|42|5|hello"


def test_serialize_empty_payload():
    message = Message(MessageType.HEARTBEAT, 3, 10)
    assert message.serialize() == "6|3|10|0|"


@pytest.mark.parametrize("message_type", list(MessageType))
def test_round_trip_every_type(message_type):
    message = Message(message_type, 7, 1700000000, "0a0b0c")
    assert Message.deserialize(message.serialize()) == message


def test_payload_with_separator_round_trips():
    message = Message(MessageType.STATUS_RESPONSE, 2, 5, "a|b||c")
    assert Message.deserialize(message.serialize()) == message


def test_deserialize_without_trailing_separator():
    message = Message.deserialize("5|0|9|0")
    assert message.type is MessageType.SHUTDOWN
    assert message.payload == ""


def test_extra_bytes_after_payload_are_ignored():
    message = Message.deserialize("2|1|1|3|abcdef")
    assert message.payload == "abc"


@pytest.mark.parametrize("data", ["", "1", "1|2", "1|2|3"])
def test_missing_fields_raise(data):
    with pytest.raises(MessageError):
        Message.deserialize(data)


@pytest.mark.parametrize("data", ["x|0|0|0|", "1|y|0|0|", "1|0||0|", "1|0|0|z|"])
def test_non_numeric_fields_raise(data):
    with pytest.raises(MessageError):
        Message.deserialize(data)


def test_unknown_type_raises():
    with pytest.raises(MessageError):
        Message.deserialize("9|0|0|0|")


def test_truncated_payload_raises():
    with pytest.raises(MessageError):
        Message.deserialize("1|0|0|10|abc")