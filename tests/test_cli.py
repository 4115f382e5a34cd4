"""Tests for the command line entry point."""

import json
import sys

import pytest

from peppermint.__main__ import build_payload, build_renderer, main
from peppermint.config import Config
from peppermint.renderers import LogRenderer, TwilioRenderer


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text(
        f'[inbox]\npath = "{(tmp_path / "inbox").as_posix()}"\n'
        f'[coordination]\nchannel_dir = "{(tmp_path / "channel").as_posix()}"\n',
        encoding="utf-8",
    )
    return path


def run(monkeypatch, *args):
    monkeypatch.setattr(sys, "argv", ["peppermint", *args])
    return main()


def test_show_config(monkeypatch, capsys):
    assert run(monkeypatch, "--show-config") == 0
    assert "[delivery]" in capsys.readouterr().out


def test_send_drops_payload_in_inbox(monkeypatch, config_file, tmp_path):
    code = run(
        monkeypatch, "--config", str(config_file), "--send", "chat", "--from", "Alice", "--text", "hi"
    )

    assert code == 0
    (path,) = (tmp_path / "inbox").glob("*.json")
    assert json.loads(path.read_text(encoding="utf-8"))["data"]["title"] == "Alice sent a message"


def test_simulate_renders_once(monkeypatch, config_file, capsys):
    assert run(monkeypatch, "--config", str(config_file), "--simulate") == 0
    out = capsys.readouterr().out
    assert "Shown: 1 notification(s)" in out
    assert "active-tab: " in out
    assert "Clicked, opened /fcm-test" in out


def test_invalid_config_exits_with_error(monkeypatch, tmp_path):
    path = tmp_path / "config.toml"
    path.write_text('[coordination]\nstrategy = "nope"\n', encoding="utf-8")
    assert run(monkeypatch, "--config", str(path), "--simulate") == 2


def test_sms_test_requires_sms_section(monkeypatch, config_file):
    assert run(monkeypatch, "--config", str(config_file), "--sms-test") == 1


def test_build_renderer():
    config = Config()
    assert isinstance(build_renderer(config), LogRenderer)
    config.sms.enabled = True
    assert isinstance(build_renderer(config), TwilioRenderer)
    assert isinstance(build_renderer(config, dry_run=True), LogRenderer)


def test_build_payload_kinds():
    assert build_payload("photo", "Bob", "")["data"]["title"] == "New photo from Bob!"
    assert build_payload("test", "", "ping")["data"]["body"] == "ping"
