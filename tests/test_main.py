# -*- coding: utf-8 -*-

import logging

import pytest

from rtsp_test_server import __main__ as main_module
from rtsp_test_server.config import CONFIG_FILE_NAME


class DummyGovernor:
    instances = []

    def __init__(self, loop_handle):
        self.loop_handle = loop_handle
        self.installed = False
        self.uninstalled = False
        DummyGovernor.instances.append(self)

    def install(self):
        self.installed = True

    def uninstall(self):
        self.uninstalled = True


class DummyServer:
    instances = []
    exit_code = 0

    def __init__(self, config, loop_handle=None):
        self.config = config
        self.loop_handle = loop_handle
        self.governor_installed = DummyGovernor.instances[-1].installed
        DummyServer.instances.append(self)

    def run(self):
        self.governor_uninstalled_early = DummyGovernor.instances[-1].uninstalled
        return self.exit_code


@pytest.fixture()
def patched(monkeypatch, tmp_path):
    DummyGovernor.instances = []
    DummyServer.instances = []
    monkeypatch.setattr(main_module, "setup_logging", lambda: None)
    monkeypatch.setattr(main_module, "SignalGovernor", DummyGovernor)
    monkeypatch.setattr(main_module, "RtspTestServer", DummyServer)
    monkeypatch.setattr(main_module, "config_dirs", lambda: [str(tmp_path)])
    return tmp_path


def test_main_wires_config_signals_and_server(patched, caplog):
    (patched / CONFIG_FILE_NAME).write_text("port = 8080;\n", encoding="utf-8")

    with caplog.at_level(logging.INFO):
        assert main_module.main() == 0

    server = DummyServer.instances[0]
    governor = DummyGovernor.instances[0]
    assert server.config.port == 8080
    assert server.loop_handle is governor.loop_handle
    assert server.governor_installed is True
    assert server.governor_uninstalled_early is False
    assert governor.uninstalled is True
    assert "RTSP Test Server starting" in caplog.text


def test_main_returns_server_exit_code(patched, monkeypatch):
    monkeypatch.setattr(DummyServer, "exit_code", 1)
    assert main_module.main() == 1


def test_main_without_config_dirs(patched, monkeypatch, caplog):
    def no_gi():
        raise ImportError("No module named 'gi'")

    monkeypatch.setattr(main_module, "config_dirs", no_gi)
    with caplog.at_level(logging.ERROR):
        assert main_module.main() == 0
    assert DummyServer.instances[0].config.port == 9554
    assert "Cannot determine config directories" in caplog.text


def test_main_uninstalls_governor_when_run_fails(patched, monkeypatch):
    def crash(self):
        raise RuntimeError("engine exploded")

    monkeypatch.setattr(DummyServer, "run", crash)
    with pytest.raises(RuntimeError):
        main_module.main()
    assert DummyGovernor.instances[0].uninstalled is True
