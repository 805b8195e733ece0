"""
どこで: `src/mojibench/core/render.py`。
何を: セル単位の描画と、N セルをスレッドプールで並列描画して横一列へ合成する処理を提供する。
なぜ: キャリブレーションが最適化する「1 回の描画にかかる壁時計時間」の単位をここで定義するため。
"""

from __future__ import annotations

import os
import time
from concurrent.futures import ThreadPoolExecutor

import numpy as np

from mojibench.core.context import DrawContext
from mojibench.core.pipeline import EffectPipeline
from mojibench.core.raster import Stamp, Strip, blank_canvas


def resolve_workers(workers: int | None) -> int:
    """ワーカー数指定を正の整数へ解決する（None は CPU 論理コア数）。"""
    if workers is None:
        return max(1, int(os.cpu_count() or 1))
    n = int(workers)
    if n < 1:
        raise ValueError(f"workers は 1 以上である必要がある: got={workers!r}")
    return n


def render_cell(cell_index: int, stamp: Stamp, pipeline: EffectPipeline) -> np.ndarray:
    """白いキャンバスに 1 セル分の effect を描画して返す。

    Returns
    -------
    np.ndarray
        uint8 型 shape (stamp.height, stamp.width, 4)。writeable=False。
    """
    canvas = blank_canvas(stamp.width, stamp.height)
    ctx = DrawContext(
        canvas=canvas,
        base_x=0,
        base_y=0,
        text_stamp=stamp.pixels,
        cell_index=int(cell_index),
        stamp_w=stamp.width,
        stamp_h=stamp.height,
    )
    pipeline.apply(ctx)
    canvas.setflags(write=False)
    return canvas


def render_strip(
    count: int,
    stamp: Stamp,
    pipeline: EffectPipeline,
    *,
    workers: int | None = None,
) -> tuple[float, Strip]:
    """N セルを並列描画し、x = index * stamp.width に並べたストリップを返す。

    Parameters
    ----------
    count : int
        セル数 N（0 以上）。
    stamp : Stamp
        全セルで共有する読み取り専用スタンプ。
    pipeline : EffectPipeline
        各セルへ適用する effect 列。
    workers : int or None, optional
        スレッド数。None なら CPU 論理コア数。

    Returns
    -------
    tuple[float, Strip]
        (経過秒, ストリップ)。経過秒はプール生成・描画・合成を含む呼び出し全体の壁時計時間。

    Notes
    -----
    effect カーネルは GIL を解放するため、スレッドでもコア数分並列に走る。
    `executor.map` は完了順ではなく index 順に結果を返すので、合成結果はスケジューリングに依存しない。
    """
    n = int(count)
    if n < 0:
        raise ValueError(f"count は 0 以上である必要がある: got={count!r}")
    n_workers = resolve_workers(workers)

    t0 = time.perf_counter()
    w = stamp.width
    h = stamp.height
    cells: list[np.ndarray] = []
    if n > 0:
        with ThreadPoolExecutor(max_workers=n_workers, thread_name_prefix="mojibench-cell") as pool:
            cells = list(pool.map(lambda i: render_cell(i, stamp, pipeline), range(n)))

    pixels = blank_canvas(n * w, h)
    for i, cell in enumerate(cells):
        x0 = i * w
        pixels[:, x0 : x0 + w] = cell
    strip = Strip(pixels=pixels, cell_width=w, count=n)
    return time.perf_counter() - t0, strip


__all__ = ["render_cell", "render_strip", "resolve_workers"]
