"""約 1/7 の画素を揺らし、HSV 虹色と半々に混ぜる effect。"""

from __future__ import annotations

import math

import numpy as np
from numba import njit  # type: ignore[import-untyped]

from mojibench.core.color import hsv_to_rgb, round_half_away
from mojibench.core.context import DrawContext
from mojibench.core.effect_registry import effect

COLORFUL_MODULUS = 7
WOBBLE_AMPLITUDE = 5.0
WOBBLE_FREQUENCY = 0.27
HUE_STEP = 0.05
SATURATION = 0.9


@njit(cache=True, nogil=True)
def _colorful_njit(
    canvas: np.ndarray,
    base_x: int,
    base_y: int,
    stamp: np.ndarray,
    cell_index: int,
    stamp_w: int,
    stamp_h: int,
) -> None:
    canvas_h = canvas.shape[0]
    canvas_w = canvas.shape[1]
    for py in range(stamp.shape[0]):
        for px in range(stamp.shape[1]):
            if (px + py + cell_index) % COLORFUL_MODULUS != 0:
                continue
            off_x = round_half_away(
                WOBBLE_AMPLITUDE * math.sin(float(px + cell_index) * WOBBLE_FREQUENCY)
            )
            off_y = round_half_away(
                WOBBLE_AMPLITUDE * math.cos(float(py + cell_index) * WOBBLE_FREQUENCY)
            )
            x = base_x + px + off_x
            y = base_y + py + off_y
            if x < 0 or y < 0 or x >= canvas_w or y >= canvas_h:
                continue
            hue = (
                float(cell_index) * HUE_STEP + float(px) / float(stamp_w) + float(py) / float(stamp_h)
            ) % 1.0
            r2, g2, b2 = hsv_to_rgb(hue, SATURATION, 1.0)
            canvas[y, x, 0] = (int(stamp[py, px, 0]) + r2) // 2
            canvas[y, x, 1] = (int(stamp[py, px, 1]) + g2) // 2
            canvas[y, x, 2] = (int(stamp[py, px, 2]) + b2) // 2
            canvas[y, x, 3] = stamp[py, px, 3]


@effect
def colorful(ctx: DrawContext) -> None:
    """(px+py+i) mod 7 == 0 の画素を揺らして虹色と平均する。

    Notes
    -----
    オフセットは ``(round(5 sin((px+i)·0.27)), round(5 cos((py+i)·0.27)))``、
    色相は ``(i·0.05 + px/stamp_w + py/stamp_h) mod 1`` で HSV(hue, 0.9, 1.0)。
    """
    w = int(ctx.stamp_w)
    h = int(ctx.stamp_h)
    if w <= 0 or h <= 0:
        return
    _colorful_njit(
        ctx.canvas,
        int(ctx.base_x),
        int(ctx.base_y),
        ctx.text_stamp,
        int(ctx.cell_index),
        w,
        h,
    )


__all__ = ["colorful"]
