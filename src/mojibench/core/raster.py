# src/mojibench/core/raster.py
# スタンプ・ストリップなど RGBA ラスタの不変モデルと検証ロジック。

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

WHITE_RGBA = (255, 255, 255, 255)


def _as_rgba_array(pixels: np.ndarray, *, name: str, copy: bool) -> np.ndarray:
    arr = np.asarray(pixels)
    if arr.ndim != 3 or arr.shape[2] != 4:
        raise ValueError(f"{name} は shape (H,W,4) の RGBA 配列である必要がある: got={arr.shape}")
    if arr.dtype != np.uint8:
        raise ValueError(f"{name} は uint8 配列である必要がある: got={arr.dtype}")
    if copy:
        # 呼び出し側の配列とメモリを共有しない。
        arr = np.array(arr, dtype=np.uint8, order="C", copy=True)
    else:
        arr = np.ascontiguousarray(arr)
    arr.setflags(write=False)
    return arr


def blank_canvas(width: int, height: int) -> np.ndarray:
    """白で塗りつぶした書き込み可能な RGBA キャンバスを返す。"""
    w = int(width)
    h = int(height)
    if w < 0 or h < 0:
        raise ValueError(f"キャンバス寸法は非負である必要がある: got={(w, h)}")
    canvas = np.empty((h, w, 4), dtype=np.uint8)
    canvas[...] = WHITE_RGBA
    return canvas


@dataclass(frozen=True, slots=True)
class Stamp:
    """テキスト 1 個分をラスタライズした不変 RGBA 画像。

    Parameters
    ----------
    pixels : np.ndarray
        uint8 型 shape (H, W, 4) の RGBA 配列。

    Notes
    -----
    配列はコピーされ writeable=False で保持される。
    1 回のキャリブレーション中は全セル・全ワーカーから読み取り専用で共有される。
    """

    pixels: np.ndarray

    def __post_init__(self) -> None:
        object.__setattr__(self, "pixels", _as_rgba_array(self.pixels, name="pixels", copy=True))

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])


@dataclass(frozen=True, slots=True)
class Strip:
    """N 個のセルを x = index * cell_width に横一列で並べた不変 RGBA 画像。

    Parameters
    ----------
    pixels : np.ndarray
        uint8 型 shape (H, count * cell_width, 4) の RGBA 配列。
    cell_width : int
        1 セルの幅（= スタンプ幅）。
    count : int
        セル数 N。
    """

    pixels: np.ndarray
    cell_width: int
    count: int

    def __post_init__(self) -> None:
        pixels = _as_rgba_array(self.pixels, name="pixels", copy=False)
        cell_width = int(self.cell_width)
        count = int(self.count)
        if cell_width < 0 or count < 0:
            raise ValueError("cell_width と count は非負である必要がある")
        if pixels.shape[1] != cell_width * count:
            raise ValueError(
                "pixels の幅は count * cell_width と一致する必要がある"
                f": width={pixels.shape[1]}, count={count}, cell_width={cell_width}"
            )
        object.__setattr__(self, "pixels", pixels)
        object.__setattr__(self, "cell_width", cell_width)
        object.__setattr__(self, "count", count)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    def cell(self, index: int) -> np.ndarray:
        """index 番目のセル領域（読み取り専用ビュー）を返す。"""
        i = int(index)
        if i < 0 or i >= self.count:
            raise IndexError(f"cell index が範囲外です: {i} (count={self.count})")
        x0 = i * self.cell_width
        return self.pixels[:, x0 : x0 + self.cell_width]


__all__ = ["Stamp", "Strip", "WHITE_RGBA", "blank_canvas"]
