from __future__ import annotations

from actirec.core.models import SubjectInfo
from actirec.device.serial_port import DeviceNotFoundError
from actirec.ui import application

from conftest import FakeSerial, RecordingRenderer


def _fast_config(tmp_path):
    path = tmp_path / "recorder.yaml"
    path.write_text(
        "recorder:\n"
        "  warmup_lines: 1\n"
        "  countdown_tick_seconds: 0\n"
        "  activity_seconds: 0\n",
        encoding="utf-8",
    )
    return path


def _patch_collaborators(monkeypatch, port):
    monkeypatch.setattr(application, "open_serial", lambda device, baud: port)
    monkeypatch.setattr(application, "prompt_subject", lambda: SubjectInfo("f", "l", 180))
    monkeypatch.setattr(application, "TitleCardRenderer", _QuietRenderer)


class _QuietRenderer(RecordingRenderer):
    def close(self) -> None:
        pass


def test_main_records_a_session(tmp_path, monkeypatch, capsys) -> None:
    base = tmp_path / "recordings"
    base.mkdir()
    _patch_collaborators(monkeypatch, FakeSerial([b"warm\n", b"1;2;3\n", b"4;5;6\n"]))

    code = application.main(["--dir", str(base), "--config", str(_fast_config(tmp_path))])

    assert code == 0
    session_dir = base / "1"
    assert f"New record: {session_dir}" in capsys.readouterr().out
    assert (session_dir / "chars.txt").read_text(encoding="utf-8") == "sex=f\nhand=l\nheight=180\n"
    rows = (session_dir / "readings.csv").read_text(encoding="utf-8").splitlines()
    assert [row.split(";", 1)[1] for row in rows] == ["1;2;3", "4;5;6"]


def test_missing_device_is_fatal(tmp_path, monkeypatch, capsys) -> None:
    def _missing(device, baud):
        raise DeviceNotFoundError(device)

    monkeypatch.setattr(application, "open_serial", _missing)
    monkeypatch.setattr(application, "TitleCardRenderer", _QuietRenderer)

    code = application.main(["--dir", str(tmp_path), "--dev", "/dev/ttyNOPE"])

    assert code == 1
    assert "Device not found: /dev/ttyNOPE" in capsys.readouterr().err
    assert list(tmp_path.iterdir()) == []


def test_invalid_base_dir_is_fatal_before_prompting(tmp_path, monkeypatch, capsys) -> None:
    _patch_collaborators(monkeypatch, FakeSerial([]))

    def _no_prompt():
        raise AssertionError("subject must not be prompted")

    monkeypatch.setattr(application, "prompt_subject", _no_prompt)

    code = application.main(["--dir", str(tmp_path / "missing")])

    assert code == 1
    assert "does not exist" in capsys.readouterr().err


def test_invalid_config_is_fatal(tmp_path, capsys) -> None:
    path = tmp_path / "recorder.yaml"
    path.write_text("policy: chaotic\n", encoding="utf-8")

    assert application.main(["--config", str(path)]) == 1
    assert "Unknown timeline policy" in capsys.readouterr().err


def test_cli_overrides_config_file(tmp_path) -> None:
    args = application._build_arg_parser().parse_args(
        [
            "--config",
            str(_fast_config(tmp_path)),
            "--dev",
            "/dev/ttyACM0",
            "--policy",
            "interactive",
            "--seed",
            "4",
            "--log-level",
            "info",
        ]
    )

    config = application.build_config(args)

    assert config.device == "/dev/ttyACM0"
    assert config.policy == "interactive"
    assert config.seed == 4
    assert config.log_level == "INFO"
    assert config.warmup_lines == 1


def _write_session(session_dir) -> None:
    session_dir.mkdir()
    (session_dir / "chars.txt").write_text("sex=m\nhand=r\nheight=none\n", encoding="utf-8")
    (session_dir / "readings.csv").write_text(
        "".join(f"{ts};{ts};0;0\n" for ts in (100, 200, 300, 400, 500, 600, 700)),
        encoding="utf-8",
    )
    (session_dir / "labels.csv").write_text(
        "50;o\n150;t\n450;o\n520;s\n690;o\n", encoding="utf-8"
    )


def test_windows_main_reports_per_window_counts(tmp_path, capsys) -> None:
    session_dir = tmp_path / "1"
    _write_session(session_dir)

    assert application.windows_main([str(session_dir)]) == 0

    out = capsys.readouterr().out.splitlines()
    assert out[0] == f"Session {session_dir}: sex=m hand=r height=unknown"
    assert out[1] == "7 readings, 2 activity windows"
    assert out[2] == "  t 150-450 (300 ms): 3 readings"
    assert out[3] == "  s 520-690 (170 ms): 1 readings"
    assert out[4] == "Readings per activity: n=0, t=3, s=1, f=0, o=3"


def test_windows_main_missing_session_is_an_error(tmp_path, capsys) -> None:
    assert application.windows_main([str(tmp_path / "9")]) == 1
    assert "error:" in capsys.readouterr().err
