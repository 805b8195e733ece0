"""スタンプをセル番号に応じた角度で回転し、縦方向を潰して赤みを足す effect。"""

from __future__ import annotations

import math

import numpy as np
from numba import njit  # type: ignore[import-untyped]

from mojibench.core.color import round_half_away
from mojibench.core.context import DrawContext
from mojibench.core.effect_registry import effect

Y_SQUASH = 0.7
RED_BOOST = 30


def rotation_angle(cell_index: int) -> float:
    """セル番号から回転角 [rad] を返す。"""
    return 0.3 * math.sin(float(cell_index) * 0.7)


@njit(cache=True, nogil=True)
def _rotation_njit(
    canvas: np.ndarray,
    base_x: int,
    base_y: int,
    stamp: np.ndarray,
    angle: float,
) -> None:
    canvas_h = canvas.shape[0]
    canvas_w = canvas.shape[1]
    stamp_h = stamp.shape[0]
    stamp_w = stamp.shape[1]
    cx = float(stamp_w) / 2.0
    cy = float(stamp_h) / 2.0
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    for py in range(stamp_h):
        for px in range(stamp_w):
            dx = float(px) - cx
            dy = float(py) - cy
            rdx = dx * cos_a - dy * sin_a
            rdy = dx * sin_a + dy * cos_a
            x = base_x + round_half_away(cx + rdx)
            y = base_y + round_half_away(cy + rdy * Y_SQUASH)
            if x < 0 or y < 0 or x >= canvas_w or y >= canvas_h:
                continue
            canvas[y, x, 0] = min(int(stamp[py, px, 0]) + RED_BOOST, 255)
            canvas[y, x, 1] = stamp[py, px, 1]
            canvas[y, x, 2] = stamp[py, px, 2]
            canvas[y, x, 3] = stamp[py, px, 3]


@effect
def rotation(ctx: DrawContext) -> None:
    """スタンプ中心まわりに ``0.3 sin(i·0.7)`` [rad] 回転して前面に描く。

    回転後の y 変位は 0.7 倍に圧縮し、赤チャンネルへ +30（255 で飽和）する。
    """
    _rotation_njit(
        ctx.canvas,
        int(ctx.base_x),
        int(ctx.base_y),
        ctx.text_stamp,
        rotation_angle(int(ctx.cell_index)),
    )


__all__ = ["rotation", "rotation_angle"]
