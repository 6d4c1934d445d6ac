import ipaddress
import json

import pytest

from syswatch import cli
from syswatch.core.interfaces import InterfaceCollectionError
from syswatch.core.models import ComponentState, NetDiagnosis, WifiReading
from syswatch.core.snapshot import DiskSample, ProcessSample, SystemSnapshot


def _diag():
    return NetDiagnosis.assemble(
        interface_up=ComponentState.UP,
        wifi=WifiReading(ComponentState.UNKNOWN),
        gateway_reachable=ComponentState.UP,
        lan_hosts_reachable=2,
        confidence=0.8,
    )


class FakeDiagnoser:
    calls = []
    error = None

    def __init__(self, settings):
        self.settings = settings

    async def diagnose(self, gateway=None, subnet=None):
        FakeDiagnoser.calls.append((gateway, subnet))
        if FakeDiagnoser.error is not None:
            raise FakeDiagnoser.error
        return _diag()


@pytest.fixture
def fake_diagnoser(monkeypatch):
    FakeDiagnoser.calls = []
    FakeDiagnoser.error = None
    monkeypatch.setattr(cli, "NetworkDiagnoser", FakeDiagnoser)
    return FakeDiagnoser


@pytest.fixture
def settings_args(tmp_path):
    return ["--settings", str(tmp_path / "settings.json")]


@pytest.fixture
def fake_snapshot(monkeypatch):
    snapshot = SystemSnapshot(
        cpu_percent=12.5,
        memory_used_mb=2048,
        memory_total_mb=8192,
        disk=DiskSample("/", 100, 250),
        top_processes=[ProcessSample("python", 9.5, 120)],
    )
    monkeypatch.setattr(cli, "take_snapshot", lambda: snapshot)
    return snapshot


def test_net_prints_report(fake_diagnoser, settings_args, capsys):
    code = cli.main(["--net", "--gateway", "192.168.1.1", "--subnet", "192.168.1.0/24"] + settings_args)

    out = capsys.readouterr().out
    assert code == 0
    assert out.startswith("=== Network Diagnosis Report ===")
    assert "LAN Hosts Reachable: 2" in out
    assert fake_diagnoser.calls == [(ipaddress.IPv4Address("192.168.1.1"), "192.168.1.0/24")]


def test_net_json(fake_diagnoser, settings_args, capsys):
    assert cli.main(["-n", "--json"] + settings_args) == 0
    assert json.loads(capsys.readouterr().out)["gateway_reachable"] == "Up"


def test_fatal_interface_error_exits_1(fake_diagnoser, settings_args, capsys):
    fake_diagnoser.error = InterfaceCollectionError("denied")
    assert cli.main(["--net"] + settings_args) == 1
    assert capsys.readouterr().out == ""


def test_bad_gateway_is_a_usage_error(fake_diagnoser, settings_args, capsys):
    with pytest.raises(SystemExit) as info:
        cli.main(["--net", "--gateway", "nope"] + settings_args)

    assert info.value.code == 2
    assert "not an IPv4 address" in capsys.readouterr().err
    assert fake_diagnoser.calls == []


def test_value_error_from_diagnosis_propagates(fake_diagnoser, settings_args):
    fake_diagnoser.error = ValueError("broken renderer")
    with pytest.raises(ValueError, match="broken renderer"):
        cli.main(["--net", "--gateway", "192.168.1.1"] + settings_args)


@pytest.mark.parametrize("extra", [["--gateway", "192.168.1.1"], ["--subnet", "192.168.1.0/24"]])
@pytest.mark.parametrize("mode", [[], ["--win"]])
def test_network_options_need_a_network_mode(fake_diagnoser, settings_args, capsys, mode, extra):
    with pytest.raises(SystemExit) as info:
        cli.main(mode + extra + settings_args)

    assert info.value.code == 2
    assert "require --net or --long" in capsys.readouterr().err
    assert fake_diagnoser.calls == []


def test_modes_are_exclusive(settings_args):
    with pytest.raises(SystemExit) as info:
        cli.main(["--net", "--win"] + settings_args)
    assert info.value.code == 2


def test_default_summary(fake_snapshot, settings_args, monkeypatch, capsys):
    async def offline(host, port, timeout):
        return False

    monkeypatch.setattr(cli, "probe_tcp", offline)
    assert cli.main(settings_args) == 0

    out = capsys.readouterr().out
    assert "CPU Usage: 12.5%" in out
    assert "Memory Usage: 2048/8192 MB (25.0%)" in out
    assert "Disk: 100 GB free / 250 GB total" in out
    assert "Network: Offline" in out
    assert "python" in out


def test_long_runs_snapshot_then_network(fake_snapshot, fake_diagnoser, settings_args, capsys):
    assert cli.main(["--long"] + settings_args) == 0

    out = capsys.readouterr().out
    assert out.index("CPU Usage") < out.index("=== Network Diagnosis Report ===")


def test_win_off_windows(monkeypatch, settings_args, capsys):
    def unavailable():
        raise OSError("Windows registry is only available on Windows")

    monkeypatch.setattr(cli, "read_registry", unavailable)
    assert cli.main(["--win"] + settings_args) == 0
    assert "only available on Windows" in capsys.readouterr().out
