"""
Tests for CLI exit codes and argument handling.
"""
import json

import pytest
from raidgrow import cli
from raidgrow.types import RunResult
from conftest import make_reader


@pytest.fixture
def no_config(tmp_path):
    p = tmp_path / "raidgrow.toml"
    p.write_text("[runtime]\nlog_level = \"INFO\"\n")
    return ["--config", str(p)]


def test_missing_mode_is_config_error(no_config):
    assert cli.main(no_config + ["--vg", "vg0", "--partitions", "sdb1"]) == cli.EXIT_CONFIG


def test_extend_without_raid_is_config_error(no_config):
    assert cli.main(no_config + ["--extend", "--vg", "vg0", "-p", "sdd1"]) == cli.EXIT_CONFIG


def test_missing_config_file(tmp_path):
    rc = cli.main(["--config", str(tmp_path / "nope.toml"), "--create", "--vg", "vg0", "-p", "sdb1"])
    assert rc == cli.EXIT_CONFIG


def test_conflicting_modes_exit_with_usage(no_config):
    with pytest.raises(SystemExit) as e:
        cli.main(no_config + ["--create", "--extend"])
    assert e.value.code == 2


def test_dry_run_extend(no_config, monkeypatch, capsys):
    monkeypatch.setattr(cli, "TopologyReader", make_reader)
    rc = cli.main(no_config + ["--extend", "--dry-run", "--vg", "vg0", "--raid", "md0", "-p", "sdd1"])
    out = capsys.readouterr().out
    assert rc == cli.EXIT_OK
    assert "[dry-run] mdadm --stop /dev/md0" in out
    assert "/dev/sdb1 /dev/sdc1 /dev/sdd1" in out


def test_dry_run_unknown_array_is_runtime_error(no_config, monkeypatch):
    monkeypatch.setattr(cli, "TopologyReader", make_reader)
    rc = cli.main(no_config + ["--remove", "--dry-run", "--vg", "vg0", "--raid", "md9"])
    assert rc == cli.EXIT_RUNTIME


def test_show(no_config, monkeypatch, capsys):
    monkeypatch.setattr(cli, "TopologyReader", make_reader)
    assert cli.main(no_config + ["--show", "--raid", "md10"]) == cli.EXIT_OK
    out = capsys.readouterr().out
    assert "raid10" in out
    assert "sdh1,sdg1" in out


def test_real_run_requires_root(no_config, monkeypatch):
    monkeypatch.setattr(cli.os, "geteuid", lambda: 1000)
    rc = cli.main(no_config + ["--create", "--vg", "vg0", "-p", "sdb1,sdc1"])
    assert rc == cli.EXIT_CONFIG


def test_show_unknown_array_lists_active_ones(no_config, monkeypatch, capsys):
    monkeypatch.setattr(cli, "TopologyReader", make_reader)
    assert cli.main(no_config + ["--show", "--raid", "md7"]) == cli.EXIT_RUNTIME
    assert "md1, md0, md10" in capsys.readouterr().err


def test_report_step_failure_is_runtime_error(capsys):
    result = RunResult(
        mode="extend",
        device="/dev/md0",
        status="step_failed",
        error="command failed (rc=1): mdadm --stop /dev/md0",
    )
    assert cli.report(result) == cli.EXIT_RUNTIME
    err = capsys.readouterr().err
    assert "mdadm --stop /dev/md0" in err
    assert "Steps before the failing one were applied" in err


def test_report_ok(capsys):
    assert cli.report(RunResult(mode="create", device="/dev/md0")) == cli.EXIT_OK
    assert "[ok] create finished for /dev/md0." in capsys.readouterr().out


def test_write_summary_oserror_is_only_a_warning(sample_settings, monkeypatch, capsys):
    def readonly(path, obj):
        raise OSError("Read-only file system")

    monkeypatch.setattr(cli, "write_json", readonly)
    cli.write_summary(RunResult(mode="remove", device="/dev/md0"), sample_settings)
    err = capsys.readouterr().err
    assert "[warn] Could not write run summary" in err
    assert "Read-only file system" in err


def test_write_summary_writes_json(sample_settings, tmp_path):
    sample_settings.run_summary_dir = tmp_path / "logs"
    cli.write_summary(RunResult(mode="remove", device="/dev/md0"), sample_settings)
    written = list((tmp_path / "logs").glob("run-*.json"))
    assert len(written) == 1
    assert json.loads(written[0].read_text())["status"] == "ok"


def test_config_error_uses_error_and_hint_lines(no_config, monkeypatch, capsys):
    monkeypatch.setattr(cli.os, "geteuid", lambda: 1000)
    assert cli.main(no_config + ["--extend", "--vg", "vg0", "-p", "sdd1"]) == cli.EXIT_CONFIG
    assert "❌ Error: RAID device must be specified for --extend" in capsys.readouterr().err

    assert cli.main(no_config + ["--create", "--vg", "vg0", "-p", "sdb1"]) == cli.EXIT_CONFIG
    err = capsys.readouterr().err
    assert "❌ Error: raidgrow needs root privileges" in err
    assert "💡 Hint: Try: sudo" in err
