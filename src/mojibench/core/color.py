# どこで: `src/mojibench/core/color.py`。
# 何を: 画素演算で共有する丸めと HSV→RGB 変換（numba njit）を提供する。

from __future__ import annotations

import math

from numba import njit  # type: ignore[import-untyped]


@njit(cache=True, nogil=True)
def round_half_away(x: float) -> int:
    """x を最も近い整数へ丸める（0.5 は 0 から遠い側へ）。"""
    if x >= 0.0:
        return int(math.floor(x + 0.5))
    return -int(math.floor(-x + 0.5))


@njit(cache=True, nogil=True)
def hsv_to_rgb(h: float, s: float, v: float) -> tuple[int, int, int]:
    """HSV（各 0..1）を 8bit RGB へ変換する。

    Parameters
    ----------
    h : float
        色相。1.0 を超える/負の値はセクタ番号の mod 6 で巡回する。
    s : float
        彩度。
    v : float
        明度。

    Returns
    -------
    tuple[int, int, int]
        0..255 の (r, g, b)。各成分は四捨五入する。

    Notes
    -----
    6 セクタ方式: sector = floor(h*6) mod 6、f = h*6 - floor(h*6)。
    """
    i = math.floor(h * 6.0)
    f = h * 6.0 - i
    p = v * (1.0 - s)
    q = v * (1.0 - f * s)
    t = v * (1.0 - (1.0 - f) * s)
    sector = int(i) % 6
    if sector == 0:
        r, g, b = v, t, p
    elif sector == 1:
        r, g, b = q, v, p
    elif sector == 2:
        r, g, b = p, v, t
    elif sector == 3:
        r, g, b = p, q, v
    elif sector == 4:
        r, g, b = t, p, v
    else:
        r, g, b = v, p, q
    return (
        round_half_away(r * 255.0),
        round_half_away(g * 255.0),
        round_half_away(b * 255.0),
    )


__all__ = ["hsv_to_rgb", "round_half_away"]
