import io

import pytest

from plazza.cli import main


@pytest.mark.parametrize("argv", [[], ["1"], ["1", "2"], ["1", "2", "3", "4"]])
def test_wrong_argument_count(argv, capsys):
    assert main(argv) == 84
    assert "Usage:" in capsys.readouterr().err


def test_non_positive_multiplier(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    assert main(["0", "2", "1000"]) == 84
    assert "Time multiplier must be a positive number" in capsys.readouterr().err
    logged = (tmp_path / "logs" / "plazza.log").read_text()
    assert "Time multiplier must be a positive number" in logged
    assert "\033[" not in logged


def test_zero_cooks(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    assert main(["1", "0", "1000"]) == 84
    assert "Number of cooks must be a positive number" in capsys.readouterr().err


def test_not_a_number(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    assert main(["fast", "2", "1000"]) == 84
    assert "Error:" in capsys.readouterr().err


def test_exit_command_ends_successfully(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("sys.stdin", io.StringIO("exit\n"))
    assert main(["1", "2", "1000"]) == 0
    assert (tmp_path / "logs" / "plazza.log").is_file()