"""まばらな画素を 3px 右へずらし、青みを帯びさせる effect。"""

from __future__ import annotations

import numpy as np
from numba import njit  # type: ignore[import-untyped]

from mojibench.core.context import DrawContext
from mojibench.core.effect_registry import effect

SURREAL_MODULUS = 101
SHIFT_X = 3
TINT = 10


@njit(cache=True, nogil=True)
def _surreal_njit(
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
            if (px + py + cell_index) % SURREAL_MODULUS != 0:
                continue
            x = base_x + px + SHIFT_X
            if x < 0 or x >= canvas_w:
                continue
            canvas[y, x, 0] = max(int(stamp[py, px, 0]) - TINT, 0)
            canvas[y, x, 1] = max(int(stamp[py, px, 1]) - TINT, 0)
            canvas[y, x, 2] = min(int(stamp[py, px, 2]) + TINT, 255)
            canvas[y, x, 3] = stamp[py, px, 3]


@effect
def surreal(ctx: DrawContext) -> None:
    _surreal_njit(
        ctx.canvas,
        int(ctx.base_x),
        int(ctx.base_y),
        ctx.text_stamp,
        int(ctx.cell_index),
    )


__all__ = ["surreal"]
