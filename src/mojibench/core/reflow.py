# どこで: `src/mojibench/core/reflow.py`。
# 何を: 横一列のセルを目標アスペクト比に近い 2D グリッドへ詰め直し、出力解像度へリサンプルする。

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from PIL import Image

from mojibench.core.raster import WHITE_RGBA, Strip, blank_canvas


@dataclass(frozen=True, slots=True)
class GridLayout:
    """セルを行優先で並べるグリッド形状。

    Notes
    -----
    columns * rows >= セル数。末尾の余りスロットは背景色（白）のまま残る。
    """

    columns: int
    rows: int
    cell_width: int
    cell_height: int

    @property
    def grid_width(self) -> int:
        return int(self.columns * self.cell_width)

    @property
    def grid_height(self) -> int:
        return int(self.rows * self.cell_height)

    @property
    def capacity(self) -> int:
        return int(self.columns * self.rows)

    def slot_origin(self, index: int) -> tuple[int, int]:
        """index 番目のセルを置く左上座標 (x, y) を返す。"""
        i = int(index)
        return (i % self.columns) * self.cell_width, (i // self.columns) * self.cell_height


def _ceil_div(a: int, b: int) -> int:
    return -(-int(a) // int(b))


def choose_grid_layout(
    count: int,
    cell_w: int,
    cell_h: int,
    target_w: int,
    target_h: int,
) -> GridLayout:
    """|grid_aspect - target_w/target_h| を最小化する列数を選ぶ。

    Parameters
    ----------
    count : int
        セル数 N。
    cell_w, cell_h : int
        セル寸法。
    target_w, target_h : int
        目標解像度（比のみ使う）。

    Returns
    -------
    GridLayout
        columns ∈ [1, N]、rows = ceil(N / columns)。

    Notes
    -----
    columns を 1 から昇順に走査し、差が厳密に小さくなったときだけ更新する（同値なら小さい列数が勝つ）。
    N = 0 やセル寸法 0 のときは columns=1 を返す。
    """
    n = int(count)
    w = int(cell_w)
    h = int(cell_h)
    if n < 0 or w < 0 or h < 0:
        raise ValueError(f"count/cell 寸法は非負である必要がある: got={(count, cell_w, cell_h)}")
    tw = int(target_w)
    th = int(target_h)
    if tw <= 0 or th <= 0:
        raise ValueError(f"target は正の (width, height) である必要がある: got={(target_w, target_h)}")

    if n == 0 or w == 0 or h == 0:
        return GridLayout(columns=1, rows=n, cell_width=w, cell_height=h)

    target_aspect = float(tw) / float(th)
    best_columns = 1
    best_diff = float("inf")
    for columns in range(1, n + 1):
        rows = _ceil_div(n, columns)
        aspect = float(columns * w) / float(rows * h)
        diff = abs(aspect - target_aspect)
        if diff < best_diff:
            best_diff = diff
            best_columns = columns

    return GridLayout(
        columns=best_columns,
        rows=_ceil_div(n, best_columns),
        cell_width=w,
        cell_height=h,
    )


def assemble_grid(strip: Strip, layout: GridLayout, count: int) -> np.ndarray:
    """ストリップの各セルを行優先でグリッドへ配置した配列を返す。"""
    grid = blank_canvas(layout.grid_width, layout.grid_height)
    w = layout.cell_width
    h = layout.cell_height
    for i in range(int(count)):
        src_x = i * w
        x, y = layout.slot_origin(i)
        grid[y : y + h, x : x + w] = strip.pixels[:h, src_x : src_x + w]
    return grid


def reflow(
    strip: Strip,
    cell_w: int,
    cell_h: int,
    count: int,
    target_w: int,
    target_h: int,
) -> Image.Image:
    """ストリップを目標アスペクト比のグリッドへ詰め直し、target_w × target_h へリサンプルする。

    Parameters
    ----------
    strip : Strip
        横一列のセル画像。
    cell_w, cell_h : int
        セル寸法（= スタンプ寸法）。
    count : int
        配置するセル数 N（strip.count 以下）。
    target_w, target_h : int
        出力解像度。

    Returns
    -------
    PIL.Image.Image
        RGBA 画像。Lanczos でリサンプルし、縦横比の不一致は非一様スケールで吸収する。
        N = 0 またはセル寸法 0 の場合は白一色。
    """
    n = int(count)
    layout = choose_grid_layout(n, cell_w, cell_h, target_w, target_h)
    if n > strip.count:
        raise ValueError(f"count が strip のセル数を超えています: {n} > {strip.count}")

    size = (int(target_w), int(target_h))
    if layout.capacity == 0 or layout.grid_width == 0 or layout.grid_height == 0:
        return Image.new("RGBA", size, WHITE_RGBA)

    grid = assemble_grid(strip, layout, n)
    image = Image.fromarray(grid)
    return image.resize(size, Image.Resampling.LANCZOS)


__all__ = ["GridLayout", "assemble_grid", "choose_grid_layout", "reflow"]
