"""
どこで: `src/mojibench/core/calibration.py`。
何を: 描画時間が閾値に収まる最大セル数 N を、指数探索 + 二分探索で求める。
なぜ: 描画 1 回が高価で計測にノイズがあるため、少ない描画回数でおおよその桁を押さえてから境界を詰める。
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Literal

from mojibench.core.pipeline import EffectPipeline
from mojibench.core.raster import Stamp
from mojibench.core.render import render_strip

logger = logging.getLogger(__name__)

SAFETY_FACTOR = 1.1
MAX_GROWTH_FACTOR = 1024.0
MAX_ITERATIONS = 100

Phase = Literal["exponential", "binary"]


@dataclass(frozen=True, slots=True)
class Probe:
    """1 回の計測記録。"""

    phase: Phase
    count: int
    duration: float


@dataclass(frozen=True, slots=True)
class CalibrationResult:
    """キャリブレーションの結果。

    Attributes
    ----------
    count : int
        閾値内に収まった最大の N（1 以上）。
    probes : tuple[Probe, ...]
        実施した計測の履歴（実施順）。
    exhausted : bool
        いずれかのフェーズが反復上限に達した場合 True。count はその時点の最良値。
    """

    count: int
    probes: tuple[Probe, ...]
    exhausted: bool = False


def next_count(current: int, duration: float, threshold: float) -> int:
    """指数探索で次に試す N を返す。

    factor = max(1.1, threshold / duration) を掛けて切り上げ、必ず current より大きくする。
    duration が 0 以下（比が無限大）のときだけ MAX_GROWTH_FACTOR 倍にする。
    """
    if duration > 0:
        factor = max(SAFETY_FACTOR, float(threshold) / float(duration))
    else:
        factor = MAX_GROWTH_FACTOR
    return max(int(math.ceil(int(current) * factor)), int(current) + 1)


def search_max_count(
    measure: Callable[[int], float],
    threshold: float,
    *,
    max_iterations: int = MAX_ITERATIONS,
) -> CalibrationResult:
    """measure(n) <= threshold を満たす最大の n を探索する。

    Parameters
    ----------
    measure : Callable[[int], float]
        n を受け取り計測時間を返す関数。n について（おおよそ）単調増加を仮定する。
    threshold : float
        許容する計測時間。measure と同じ単位。
    max_iterations : int, optional
        各フェーズの反復上限。

    Returns
    -------
    CalibrationResult
        count は境界の下側。計測ノイズにより ±1 程度ぶれうる。

    Notes
    -----
    - フェーズ A（指数探索）: n=1 から成長させ、初めて閾値を超えた n を upper、その直前を lower とする。
    - フェーズ B（二分探索）: upper - lower > 1 の間、中点を計測して区間を詰める。
    - 最初の計測から閾値を超えた場合は 1 を返す。
    - フェーズ A が上限に達した場合は、閾値内で計測できた最後の n を返す。
    """
    thr = float(threshold)
    if not math.isfinite(thr) or thr <= 0:
        raise ValueError(f"threshold は正の有限値である必要がある: got={threshold!r}")
    cap = int(max_iterations)
    if cap < 1:
        raise ValueError(f"max_iterations は 1 以上である必要がある: got={max_iterations!r}")

    probes: list[Probe] = []

    # --- フェーズ A: 指数探索 ---
    n = 1
    lower = 1
    upper: int | None = None
    for _ in range(cap):
        duration = measure(n)
        probes.append(Probe(phase="exponential", count=n, duration=duration))
        if duration > threshold:
            upper = n
            break
        lower = n
        n = next_count(n, duration, threshold)

    if upper is None:
        return CalibrationResult(count=lower, probes=tuple(probes), exhausted=True)
    if upper <= lower:
        # 最初の計測で閾値超過。
        return CalibrationResult(count=1, probes=tuple(probes))

    # --- フェーズ B: 二分探索 ---
    for _ in range(cap):
        if upper - lower <= 1:
            break
        mid = (lower + upper) // 2
        duration = measure(mid)
        probes.append(Probe(phase="binary", count=mid, duration=duration))
        if duration <= threshold:
            lower = mid
        else:
            upper = mid

    return CalibrationResult(
        count=lower,
        probes=tuple(probes),
        exhausted=upper - lower > 1,
    )


def calibrate_with_trace(
    stamp: Stamp,
    pipeline: EffectPipeline,
    threshold_s: float,
    *,
    workers: int | None = None,
    max_iterations: int = MAX_ITERATIONS,
) -> CalibrationResult:
    """実際の並列描画を計測関数としてキャリブレーションし、履歴ごと返す。"""

    def measure(n: int) -> float:
        duration, _strip = render_strip(n, stamp, pipeline, workers=workers)
        logger.info(
            "Benchmark step: letters = %d, canvas = %dx%d, duration = %.4fs",
            n,
            n * stamp.width,
            stamp.height,
            duration,
        )
        return duration

    result = search_max_count(measure, threshold_s, max_iterations=max_iterations)
    if result.exhausted:
        logger.warning(
            "探索が反復上限 (%d) に達しました。最良値 %d を採用します", max_iterations, result.count
        )
    return result


def calibrate(
    stamp: Stamp,
    pipeline: EffectPipeline,
    threshold_s: float,
    *,
    workers: int | None = None,
    max_iterations: int = MAX_ITERATIONS,
) -> int:
    """threshold_s 秒以内に描画できる最大セル数 N を返す。"""
    return calibrate_with_trace(
        stamp,
        pipeline,
        threshold_s,
        workers=workers,
        max_iterations=max_iterations,
    ).count


__all__ = [
    "CalibrationResult",
    "MAX_ITERATIONS",
    "Probe",
    "calibrate",
    "calibrate_with_trace",
    "next_count",
    "search_max_count",
]
