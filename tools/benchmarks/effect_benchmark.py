"""
どこで: `tools/benchmarks/effect_benchmark.py`。
何を: 6 effect と通しのパイプラインを合成スタンプごとに計測し、`<out>/runs/<run_id>.json` に書く。
なぜ: キャリブレーションの N を左右するのがどの effect・どの形のスタンプかを切り分けるため。

使い方:
    python tools/benchmarks/effect_benchmark.py --only glow,extrusion --cases glyphs_wide
"""

from __future__ import annotations

import argparse
import gc
import json
import platform
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Callable


def _bootstrap_import_paths() -> None:
    # スクリプト直接実行でも `mojibench` と `tools` を import できるようにする。
    root = Path(__file__).resolve().parents[2]
    for p in (root, root / "src"):
        if str(p) not in sys.path:
            sys.path.insert(0, str(p))


_bootstrap_import_paths()

import numpy as np  # noqa: E402

from mojibench.core.context import DrawContext  # noqa: E402
from mojibench.core.effect_registry import effect_registry  # noqa: E402
from mojibench.core.pipeline import DEFAULT_EFFECT_ORDER, default_pipeline  # noqa: E402
from mojibench.core.raster import Stamp, blank_canvas  # noqa: E402
from tools.benchmarks.cases import BenchmarkCase, build_default_cases, describe_stamp  # noqa: E402

BENCH_CELL_INDEX = 7
PIPELINE_ENTRY = "pipeline"


def _split_csv(text: str) -> set[str]:
    return {s.strip() for s in str(text).split(",") if s.strip()}


def select_cases(cases: list[BenchmarkCase], only: str) -> list[BenchmarkCase]:
    """--cases 指定（カンマ区切り）でケースを絞り込む。空なら全件。"""
    wanted = _split_csv(only)
    if not wanted:
        return list(cases)
    return [c for c in cases if c.case_id in wanted]


def select_effects(names: list[str], *, only: str = "", skip: str = "") -> list[str]:
    """--only / --skip 指定で effect 名を絞り込む（順序は保つ）。"""
    wanted = _split_csv(only)
    unwanted = _split_csv(skip)
    return [e for e in names if (not wanted or e in wanted) and e not in unwanted]


def _fresh_context(stamp: Stamp) -> DrawContext:
    return DrawContext(
        canvas=blank_canvas(stamp.width, stamp.height),
        base_x=0,
        base_y=0,
        text_stamp=stamp.pixels,
        cell_index=BENCH_CELL_INDEX,
        stamp_w=stamp.width,
        stamp_h=stamp.height,
    )


def _timings_ms(run: Callable[[DrawContext], None], stamp: Stamp, repeats: int) -> np.ndarray:
    out = np.empty(repeats, dtype=np.float64)
    for k in range(repeats):
        ctx = _fresh_context(stamp)
        t0 = time.perf_counter()
        run(ctx)
        out[k] = (time.perf_counter() - t0) * 1000.0
    return out


def bench_one(
    *,
    func,
    stamp: Stamp,
    args_tuple: tuple[tuple[str, Any], ...],
    warmup: int,
    repeats: int,
    disable_gc: bool,
) -> dict[str, Any]:
    """1 effect × 1 ケースを計測して結果辞書を返す。

    キャンバス確保は計測に含めない。effect が例外を出したら status="error" を返し、
    他のケースの計測は続けられるようにする。
    """

    def run(ctx: DrawContext) -> None:
        func(ctx, args_tuple)

    gc_was_enabled = gc.isenabled()
    try:
        for _ in range(max(0, int(warmup))):
            run(_fresh_context(stamp))
        if disable_gc:
            gc.disable()
        ms = _timings_ms(run, stamp, max(1, int(repeats)))
    except Exception as exc:  # noqa: BLE001
        return {"status": "error", "error": f"{type(exc).__name__}: {exc}"}
    finally:
        if gc_was_enabled:
            gc.enable()

    return {
        "status": "ok",
        "mean_ms": float(ms.mean()),
        "median_ms": float(np.median(ms)),
        "stdev_ms": float(ms.std(ddof=1)) if ms.size > 1 else 0.0,
        "min_ms": float(ms.min()),
        "max_ms": float(ms.max()),
        "n": int(ms.size),
    }


def _pipeline_func():
    pipeline = default_pipeline()

    def apply(ctx: DrawContext, _args) -> None:
        pipeline.apply(ctx)

    return apply


def _run_entries(
    names: list[str], cases: list[BenchmarkCase], args: argparse.Namespace
) -> list[dict[str, Any]]:
    entries: list[dict[str, Any]] = []
    for name in names:
        if name == PIPELINE_ENTRY:
            func, params = _pipeline_func(), {}
        else:
            func, params = effect_registry.get(name), dict(effect_registry.get_defaults(name))
        args_tuple = tuple(sorted(params.items()))
        results = {
            case.case_id: bench_one(
                func=func,
                stamp=case.stamp,
                args_tuple=args_tuple,
                warmup=args.warmup,
                repeats=args.repeats,
                disable_gc=args.disable_gc,
            )
            for case in cases
        }
        entries.append({"name": name, "params": params, "results": results})
    return entries


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="effect_benchmark", description="mojibench effect の単体計測")
    p.add_argument("--out", default="data/output/benchmarks", help="<out>/runs/<run_id>.json に書く")
    p.add_argument("--run-id", default="", help="出力ファイル名（省略時は現在時刻）")
    p.add_argument("--repeats", type=int, default=10)
    p.add_argument("--warmup", type=int, default=2, help="JIT を計測から外すための空回し回数")
    p.add_argument("--seed", type=int, default=0)
    p.add_argument("--only", default="", help="対象 effect（カンマ区切り、'pipeline' で通し計測）")
    p.add_argument("--skip", default="", help="除外 effect（カンマ区切り）")
    p.add_argument("--cases", default="", help="対象ケース id（カンマ区切り）")
    p.add_argument("--disable-gc", action="store_true", help="本計測中は GC を止める")
    return p


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    cases = select_cases(build_default_cases(seed=args.seed), args.cases)
    names = select_effects([*DEFAULT_EFFECT_ORDER, PIPELINE_ENTRY], only=args.only, skip=args.skip)
    if not cases or not names:
        print("計測対象が 0 件です。--cases / --only / --skip を確認してください。")  # noqa: T201
        return 2

    run_id = args.run_id or datetime.now().strftime("%Y%m%d_%H%M%S")
    payload = {
        "meta": {
            "run_id": run_id,
            "created_at": datetime.now().isoformat(timespec="seconds"),
            "python": platform.python_version(),
            "platform": platform.platform(),
            "repeats": args.repeats,
            "warmup": args.warmup,
            "seed": args.seed,
            "cell_index": BENCH_CELL_INDEX,
        },
        "cases": [
            {"id": c.case_id, "label": c.label, "description": c.description, **describe_stamp(c.stamp)}
            for c in cases
        ],
        "effects": _run_entries(names, cases, args),
    }

    out_path = Path(args.out).expanduser() / "runs" / f"{run_id}.json"
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
    print(f"[mojibench-bench] wrote: {out_path}")  # noqa: T201
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
