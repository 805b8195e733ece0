"""スタンプを周囲へずらしながら白寄せして重ね、輝きのにじみを作る effect。"""

from __future__ import annotations

import math

import numpy as np
from numba import njit  # type: ignore[import-untyped]

from mojibench.core.context import DrawContext
from mojibench.core.effect_registry import effect


@njit(cache=True, nogil=True)
def _glow_njit(
    canvas: np.ndarray,
    base_x: int,
    base_y: int,
    stamp: np.ndarray,
    radius: int,
    intensity: float,
) -> None:
    canvas_h = canvas.shape[0]
    canvas_w = canvas.shape[1]
    stamp_h = stamp.shape[0]
    stamp_w = stamp.shape[1]
    r_f = float(radius)
    for dx in range(-radius, radius + 1):
        for dy in range(-radius, radius + 1):
            dist = math.sqrt(float(dx * dx + dy * dy))
            alpha = max(0.0, (r_f - dist) / r_f) * intensity
            keep = 1.0 - alpha
            add = 255.0 * alpha
            for py in range(stamp_h):
                y = base_y + dy + py
                if y < 0 or y >= canvas_h:
                    continue
                for px in range(stamp_w):
                    x = base_x + dx + px
                    if x < 0 or x >= canvas_w:
                        continue
                    for c in range(3):
                        v = float(stamp[py, px, c]) * keep + add
                        canvas[y, x, c] = int(min(v, 255.0))
                    canvas[y, x, 3] = stamp[py, px, 3]


@effect
def glow(ctx: DrawContext, *, radius: int = 3, intensity: float = 0.3) -> None:
    """スタンプ画素を (dx, dy) ∈ [-radius, radius]² だけずらして白へ寄せて書く。

    Parameters
    ----------
    ctx : DrawContext
        書き込み先コンテキスト。
    radius : int, default 3
        にじみ半径 [px]。0 以下は no-op。
    intensity : float, default 0.3
        中心での白寄せ率。距離に比例して 0 へ減衰する。

    Notes
    -----
    alpha = max(0, (R - dist) / R) * intensity。
    書き込み色は ``src * (1 - alpha) + 255 * alpha`` の切り捨てで、アルファは元画素を保つ。
    """
    r = int(radius)
    if r <= 0:
        return
    _glow_njit(
        ctx.canvas,
        int(ctx.base_x),
        int(ctx.base_y),
        ctx.text_stamp,
        r,
        float(intensity),
    )


__all__ = ["glow"]
