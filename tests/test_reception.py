import io
import time

import pytest

from plazza.ipc import kitchen_inbox_name
from plazza.kitchen_manager import KitchenManager
from plazza.message import Message, MessageType
from plazza.message_queue import MessageQueue
from plazza.reception import Reception


def _recording_runner(directory, log_dir):
    def runner(kitchen_id):
        deadline = time.monotonic() + 10
        with MessageQueue(kitchen_inbox_name(kitchen_id), False, directory=directory) as inbox:
            while time.monotonic() < deadline:
                data = inbox.timed_receive(0.05)
                if data is None:
                    continue
                message = Message.deserialize(data)
                with open(log_dir / f"kitchen_{kitchen_id}.log", "a", encoding="utf-8") as log:
                    log.write(f"{message.type.name}\n")
                if message.type is MessageType.SHUTDOWN:
                    return

    return runner


@pytest.fixture
def manager(tmp_path):
    queue_dir = tmp_path / "mq"
    queue_dir.mkdir()
    mgr = KitchenManager(
        2,
        1.0,
        1.0,
        directory=queue_dir,
        output=io.StringIO(),
        kitchen_runner=_recording_runner(queue_dir, tmp_path),
    )
    yield mgr
    mgr.cleanup()


def test_exit_stops_before_later_orders(manager, tmp_path):
    reception = Reception(1.0, 2, 1.0, manager=manager)
    reception.run(io.StringIO("exit\nmargarita S x1\n"))
    assert reception.running is False
    assert not (tmp_path / "kitchen_1.log").exists()


def test_orders_reach_a_kitchen(manager, tmp_path, capsys):
    reception = Reception(1.0, 2, 1.0, manager=manager)
    reception.run(io.StringIO("margarita S x2\n\n  quit \n"))
    assert reception.running is False
    kinds = (tmp_path / "kitchen_1.log").read_text().splitlines()
    assert kinds == ["PIZZA_ORDER", "PIZZA_ORDER", "SHUTDOWN"]
    assert "Order placed: 2 pizzas" in capsys.readouterr().out


def test_status_command_prints_table(manager):
    reception = Reception(1.0, 2, 1.0, manager=manager)
    reception.process_command("\tstatus ")
    text = manager._output.getvalue()
    assert "=== Kitchen Status ===" in text
    assert "No kitchens running" in text
    assert reception.running is True


def test_invalid_order_is_reported(manager, capsys):
    reception = Reception(1.0, 2, 1.0, manager=manager)
    reception.process_command("pizza please")
    assert "Invalid order format" in capsys.readouterr().err
    assert reception.running is True
    assert manager.kitchens == {}


def test_end_of_input_cleans_up(manager, tmp_path):
    reception = Reception(1.0, 2, 1.0, manager=manager)
    reception.run(io.StringIO("regina M x1\n"))
    assert reception.running is True
    assert manager.kitchens == {}
    assert (tmp_path / "kitchen_1.log").read_text().splitlines()[-1] == "SHUTDOWN"