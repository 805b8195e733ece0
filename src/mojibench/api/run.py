"""
どこで: `src/mojibench/api/run.py`。公開 API のベンチマーク実行本体。
何を: スタンプ生成 → パイプライン構築 → ウォームアップ → キャリブレーション → 最終描画 → リフローを順に実行する。
なぜ: CLI とテストが同じ経路でベンチマークを回せるように、ファイル I/O を含まない入口を 1 つにまとめるため。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from PIL import Image

from mojibench.core.calibration import CalibrationResult, calibrate_with_trace
from mojibench.core.pipeline import default_pipeline, warm_up
from mojibench.core.reflow import GridLayout, choose_grid_layout, reflow
from mojibench.core.render import render_strip
from mojibench.runtime_config import RuntimeConfig, runtime_config
from mojibench.text.stamp import generate_stamp

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BenchmarkResult:
    """1 回のベンチマーク実行結果。

    Attributes
    ----------
    image : PIL.Image.Image
        出力解像度へリフローした RGBA 画像（注釈なし）。
    letter_count : int
        スコア。閾値内に描画できた最大セル数。
    duration_s : float
        スコアの N で行った最終描画の所要時間 [s]。
    calibration : CalibrationResult
        探索の履歴。
    layout : GridLayout
        リフローに使ったグリッド形状。
    stamp_size : tuple[int, int]
        スタンプ寸法 (width, height)。
    """

    image: Image.Image
    letter_count: int
    duration_s: float
    calibration: CalibrationResult
    layout: GridLayout
    stamp_size: tuple[int, int]


def run_benchmark(config: RuntimeConfig | None = None) -> BenchmarkResult:
    """設定に従ってベンチマークを 1 回実行する。

    Parameters
    ----------
    config : RuntimeConfig or None, optional
        None の場合は `runtime_config()` の結果を使う。
    """
    cfg = runtime_config() if config is None else config

    stamp = generate_stamp(cfg.stamp_text, cfg.stamp_margin, cfg.font_size, font=cfg.font)
    logger.info("スタンプ %r: %dx%d", cfg.stamp_text, stamp.width, stamp.height)

    pipeline = default_pipeline(cfg.effects)
    warm_up(pipeline)

    calibration = calibrate_with_trace(
        stamp,
        pipeline,
        cfg.threshold_secs,
        workers=cfg.workers,
        max_iterations=cfg.max_iterations,
    )
    count = calibration.count

    duration_s, strip = render_strip(count, stamp, pipeline, workers=cfg.workers)
    target_w, target_h = cfg.output_size
    layout = choose_grid_layout(count, stamp.width, stamp.height, target_w, target_h)
    image = reflow(strip, stamp.width, stamp.height, count, target_w, target_h)
    logger.info(
        "リフロー: %d セル -> %dx%d グリッド -> %dx%d px",
        count,
        layout.columns,
        layout.rows,
        target_w,
        target_h,
    )

    return BenchmarkResult(
        image=image,
        letter_count=count,
        duration_s=duration_s,
        calibration=calibration,
        layout=layout,
        stamp_size=(stamp.width, stamp.height),
    )


__all__ = ["BenchmarkResult", "run_benchmark"]
