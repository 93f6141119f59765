from __future__ import annotations

import subprocess

import pytest

from dwall import network
from dwall.network import NetworkMonitor, strip_ssid_quotes


class FakeRun:
    def __init__(self, stdout: str = "", error: Exception | None = None) -> None:
        self.stdout = stdout
        self.error = error
        self.calls: list[list[str]] = []

    def __call__(self, cmd, **kwargs):
        self.calls.append(cmd)
        if self.error is not None:
            raise self.error
        return subprocess.CompletedProcess(cmd, 0, stdout=self.stdout, stderr="")


def test_strip_ssid_quotes() -> None:
    assert strip_ssid_quotes('"HomeWifi"\n') == "HomeWifi"
    assert strip_ssid_quotes("Cafe") == "Cafe"


def test_strip_ssid_keeps_spaces_in_name() -> None:
    assert strip_ssid_quotes(" Cafe \n") == " Cafe "


def test_unknown_backend_rejected() -> None:
    with pytest.raises(ValueError):
        NetworkMonitor(backend="wpa_cli")


def test_nmcli_active_network(monkeypatch: pytest.MonkeyPatch) -> None:
    fake = FakeRun("no:Neighbour\nyes:HomeWifi\nno:Other\n")
    monkeypatch.setattr(network.subprocess, "run", fake)

    assert NetworkMonitor("nmcli", "wlan0").get_current_ssid() == "HomeWifi"
    assert fake.calls[0][-4:] == ["ifname", "wlan0", "--rescan", "no"]


def test_nmcli_unescapes_colons(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(network.subprocess, "run", FakeRun("yes:Lab\\:5G\n"))
    assert NetworkMonitor().get_current_ssid() == "Lab:5G"


def test_nmcli_not_connected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(network.subprocess, "run", FakeRun("no:Neighbour\n"))
    assert NetworkMonitor().get_current_ssid() is None


def test_iwgetid(monkeypatch: pytest.MonkeyPatch) -> None:
    fake = FakeRun('"HomeWifi"\n')
    monkeypatch.setattr(network.subprocess, "run", fake)

    assert NetworkMonitor("iwgetid").get_current_ssid() == "HomeWifi"
    assert fake.calls[0] == ["iwgetid", "--raw"]


def test_command_failure_means_not_connected(monkeypatch: pytest.MonkeyPatch) -> None:
    error = subprocess.CalledProcessError(255, ["iwgetid"], output="", stderr="")
    monkeypatch.setattr(network.subprocess, "run", FakeRun(error=error))
    assert NetworkMonitor("iwgetid").get_current_ssid() is None


def test_missing_tool_means_not_connected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(network.subprocess, "run", FakeRun(error=FileNotFoundError("nmcli")))
    assert NetworkMonitor().get_current_ssid() is None


@pytest.mark.parametrize("interface", ["", "wlan0"])
def test_nmcli_lookup_never_rescans(monkeypatch: pytest.MonkeyPatch, interface: str) -> None:
    fake = FakeRun("yes:HomeWifi\n")
    monkeypatch.setattr(network.subprocess, "run", fake)

    NetworkMonitor("nmcli", interface).get_current_ssid()

    cmd = fake.calls[0]
    assert cmd[cmd.index("--rescan") + 1] == "no"


def test_iwgetid_keeps_leading_space(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(network.subprocess, "run", FakeRun(" Cafe\n"))
    assert NetworkMonitor("iwgetid").get_current_ssid() == " Cafe"
