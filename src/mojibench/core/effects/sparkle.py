"""明るい画素の一部を純白に置き換えてきらめきを散らす effect。"""

from __future__ import annotations

import numpy as np
from numba import njit  # type: ignore[import-untyped]

from mojibench.core.context import DrawContext
from mojibench.core.effect_registry import effect

LUMINANCE_THRESHOLD = 200
SPARKLE_MODULUS = 97


@njit(cache=True, nogil=True)
def _sparkle_njit(
    canvas: np.ndarray,
    base_x: int,
    base_y: int,
    stamp: np.ndarray,
    cell_index: int,
) -> None:
    canvas_h = canvas.shape[0]
    canvas_w = canvas.shape[1]
    for py in range(stamp.shape[0]):
        y = base_y + py
        if y < 0 or y >= canvas_h:
            continue
        for px in range(stamp.shape[1]):
            if (px + py + cell_index) % SPARKLE_MODULUS != 0:
                continue
            x = base_x + px
            if x < 0 or x >= canvas_w:
                continue
            lum = (int(stamp[py, px, 0]) + int(stamp[py, px, 1]) + int(stamp[py, px, 2])) // 3
            if lum <= LUMINANCE_THRESHOLD:
                continue
            canvas[y, x, 0] = 255
            canvas[y, x, 1] = 255
            canvas[y, x, 2] = 255
            canvas[y, x, 3] = stamp[py, px, 3]


@effect
def sparkle(ctx: DrawContext) -> None:
    """輝度 (R+G+B)//3 > 200 かつ (px+py+i) mod 97 == 0 の画素を白にする。"""
    _sparkle_njit(
        ctx.canvas,
        int(ctx.base_x),
        int(ctx.base_y),
        ctx.text_stamp,
        int(ctx.cell_index),
    )


__all__ = ["sparkle"]
