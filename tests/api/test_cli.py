"""`python -m mojibench` 入口（main）のテスト。"""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest
from PIL import Image

import mojibench.__main__ as cli
from mojibench.api import BenchmarkResult
from mojibench.core.calibration import CalibrationResult, Probe
from mojibench.core.reflow import GridLayout
from mojibench.runtime_config import set_config_path


@pytest.fixture(autouse=True)
def _isolate(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    set_config_path(None)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    yield
    set_config_path(None)


def _fake_run(seen: list):
    def run_benchmark(config):
        seen.append(config)
        return BenchmarkResult(
            image=Image.new("RGBA", config.output_size, (255, 255, 255, 255)),
            letter_count=7,
            duration_s=0.01,
            calibration=CalibrationResult(count=7, probes=(Probe(phase="exponential", count=1, duration=0.001),)),
            layout=GridLayout(columns=7, rows=1, cell_width=3, cell_height=2),
            stamp_size=(3, 2),
        )

    return run_benchmark


def test_main_prints_score_and_writes_png(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    seen: list = []
    monkeypatch.setattr(cli, "run_benchmark", _fake_run(seen))
    cfg = tmp_path / "bench.yaml"
    cfg.write_text("output:\n  size: [80, 60]\n", encoding="utf-8")
    out = tmp_path / "results" / "score.png"

    code = cli.main(["--config", str(cfg), "--output", str(out), "--threshold", "0.5", "--text", "hi"])

    assert code == 0
    stdout = capsys.readouterr().out
    assert stdout.splitlines()[0] == "Using threshold: 0.50 seconds"
    assert "Benchmark result: letter_count = 7 | score = 7" in stdout
    assert str(out) in stdout
    assert out.is_file()
    with Image.open(out) as img:
        assert img.size == (80, 60)
        # 注釈パネルでスコアが書き込まれている。
        assert int(np.asarray(img.convert("RGB")).min()) < 255
    assert seen[0].threshold_secs == 0.5
    assert seen[0].stamp_text == "hi"


def test_main_no_annotate_keeps_plain_image(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli, "run_benchmark", _fake_run([]))
    out = tmp_path / "plain.png"

    assert cli.main(["--output", str(out), "--no-annotate"]) == 0

    with Image.open(out) as img:
        assert img.size == (1920, 1080)
        assert np.all(np.asarray(img.convert("RGB")) == 255)


def test_main_reports_config_errors(tmp_path: Path, capsys) -> None:
    assert cli.main(["--config", str(tmp_path / "missing.yaml")]) == 2
    assert "missing.yaml" in capsys.readouterr().out

    assert cli.main(["--threshold", "0"]) == 2
    assert cli.main(["--workers", "0"]) == 2
