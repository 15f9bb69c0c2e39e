import json
import sys

import pandas as pd

import main


def test_demo_writes_step_outputs(tmp_path, monkeypatch):
    monkeypatch.setattr(sys, "argv", ["main.py", "--demo", "step_pid", "--out", str(tmp_path)])
    main.main()
    df = pd.read_csv(tmp_path / "step_pid.csv")
    assert (tmp_path / "step_pid.png").exists()
    assert len(df) == 600
    assert df["voltage"].abs().max() > 0.0


def test_demo_off_mode_mapping(tmp_path, monkeypatch):
    monkeypatch.setattr(sys, "argv", ["main.py", "--demo", "step_off", "--out", str(tmp_path)])
    main.main()
    df = pd.read_csv(tmp_path / "step_off.csv")
    assert (df["voltage"] == 0.0).all()


def test_batch_option(tmp_path, monkeypatch, capsys):
    catalog = {
        "nominal": {"t_end": 1.0, "modes": ["ff"]},
        "scenarios": [{"id": "A", "setpoint": {"final": 30}}],
    }
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps(catalog), encoding="utf-8")
    out = tmp_path / "out"
    monkeypatch.setattr(sys, "argv", ["main.py", "--batch", str(path), "--out", str(out)])
    main.main()
    assert (out / "csv" / "A_ff.csv").exists()
    assert "Batch scenarios finished" in capsys.readouterr().out


def test_nothing_to_do(monkeypatch, capsys):
    monkeypatch.setattr(sys, "argv", ["main.py"])
    main.main()
    assert "Nothing to do" in capsys.readouterr().out
