import pytest

pytest.importorskip("ns")

import main
from Config import Config

pytestmark = pytest.mark.ns3


def test_sweep_runs_small_then_large_payload(monkeypatch, tmp_path):
    calls = []

    def fake_experiment(*args, output_root=None):
        calls.append((args, output_root))

    monkeypatch.setattr(main, "experiment", fake_experiment)
    assert main.run_sweep(output_root=tmp_path) == 0
    assert calls == [
        ((False, 6, 203, 1.0, 0.14, 200), tmp_path),
        ((False, 6, 203, 1.0, 0.14, 1500), tmp_path),
    ]
    assert Config.PAYLOAD_LENGTHS == (200, 1500)


def test_failed_run_does_not_abort_the_sweep(monkeypatch, tmp_path, capsys):
    attempted = []

    def flaky_experiment(*args, output_root=None):
        attempted.append(args[-1])
        if args[-1] == 200:
            raise OSError("disk full")

    monkeypatch.setattr(main, "experiment", flaky_experiment)
    assert main.run_sweep(output_root=tmp_path) == 1
    assert attempted == [200, 1500]
    assert "payload 200 failed" in capsys.readouterr().out


def test_main_exit_status(monkeypatch):
    monkeypatch.setattr(main, "run_sweep", lambda: 0)
    assert main.main() == 0
    monkeypatch.setattr(main, "run_sweep", lambda: 2)
    assert main.main() == 1
