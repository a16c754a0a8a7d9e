import io
import os

from rvsync.utils import TICK_CHARS, Spinner, create_spinner, get_max_workers


def test_max_workers_from_env(monkeypatch):
    monkeypatch.setenv("TEST_WORKERS", "4")
    assert get_max_workers("TEST_WORKERS") == 4


def test_max_workers_invalid_falls_back(monkeypatch):
    monkeypatch.setenv("TEST_WORKERS", "-2")
    assert get_max_workers("TEST_WORKERS") == (os.cpu_count() or 1)


def test_max_workers_missing_falls_back(monkeypatch):
    monkeypatch.delenv("TEST_WORKERS", raising=False)
    assert get_max_workers("TEST_WORKERS") >= 1


def test_visible_spinner_draws_and_clears():
    buf = io.StringIO()
    spinner = Spinner("Fetching DESCRIPTION", stream=buf).start()
    assert spinner.running
    spinner.finish_and_clear()
    out = buf.getvalue()
    assert f"{TICK_CHARS[0]} Fetching DESCRIPTION" in out
    assert out.endswith("\r\x1b[2K")
    assert not spinner.running


def test_hidden_spinner_writes_nothing():
    buf = io.StringIO()
    spinner = Spinner("quiet", visible=False, stream=buf).start()
    assert not spinner.running
    spinner.finish_and_clear()
    assert buf.getvalue() == ""


def test_spinner_context_manager():
    buf = io.StringIO()
    with Spinner("working", stream=buf) as spinner:
        assert spinner.running
    assert not spinner.running
    assert "working" in buf.getvalue()


def test_create_spinner_hidden():
    spinner = create_spinner(False, "message")
    assert spinner.visible is False
    assert not spinner.running


def test_create_spinner_visible(capsys):
    spinner = create_spinner(True, "loading")
    assert spinner.running
    spinner.finish_and_clear()
    assert "loading" in capsys.readouterr().err