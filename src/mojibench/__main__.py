"""
どこで: `src/mojibench/__main__.py`。`python -m mojibench` / `mojibench` コマンドの入口。
何を: 設定を読み込んでベンチマークを実行し、注釈付き PNG を保存してスコアを表示する。
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from mojibench.api import run_benchmark
from mojibench.export.annotate import annotate_image
from mojibench.export.image import save_png
from mojibench.runtime_config import runtime_config, set_config_path
from mojibench.telemetry import capture_system_snapshot


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="mojibench",
        description="閾値時間内に描画できる文字スタンプ数を測る CPU ベンチマーク",
    )
    p.add_argument("--config", default=None, help="config.yaml のパス（探索より優先）")
    p.add_argument("--threshold", type=float, default=None, help="1 回の描画の許容秒数")
    p.add_argument("--output", default=None, help="出力 PNG のパス")
    p.add_argument("--text", default=None, help="スタンプに描く文字列")
    p.add_argument("--workers", type=int, default=None, help="描画スレッド数（省略時は CPU コア数）")
    p.add_argument("--no-annotate", action="store_true", help="スコア/ホスト情報の書き込みを省く")
    p.add_argument("-v", "--verbose", action="store_true", help="DEBUG ログを出す")
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        set_config_path(args.config)
        cfg = runtime_config().with_overrides(
            threshold_secs=args.threshold,
            output_path=None if args.output is None else Path(args.output),
            stamp_text=args.text,
            workers=args.workers,
        )
        if args.no_annotate:
            cfg = cfg.with_overrides(annotate=False)
        if not cfg.threshold_secs > 0:
            raise ValueError(f"--threshold は正の値である必要があります: got={cfg.threshold_secs}")
        if cfg.workers is not None and cfg.workers < 1:
            raise ValueError(f"--workers は 1 以上である必要があります: got={cfg.workers}")
    except (RuntimeError, ValueError, FileNotFoundError) as exc:
        print(f"mojibench: 設定エラー: {exc}")  # noqa: T201
        return 2

    print(f"Using threshold: {cfg.threshold_secs:.2f} seconds")  # noqa: T201
    result = run_benchmark(cfg)

    image = result.image
    if cfg.annotate:
        snapshot = capture_system_snapshot()
        image = annotate_image(
            image,
            result.letter_count,
            result.duration_s,
            snapshot,
            font=cfg.font,
        )
    out = save_png(image, cfg.output_path)

    n = result.letter_count
    print(f"Benchmark result: letter_count = {n} | score = {n}")  # noqa: T201
    print(f"Saved: {out}")  # noqa: T201
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
