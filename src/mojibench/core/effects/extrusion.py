"""スタンプを右下へ段階的にずらし、奥ほど暗くして押し出し（立体）風にする effect。"""

from __future__ import annotations

import math

import numpy as np
from numba import njit  # type: ignore[import-untyped]

from mojibench.core.color import round_half_away
from mojibench.core.context import DrawContext
from mojibench.core.effect_registry import effect

EXTRUDE_STEPS = 8
STEP_DX = 5
STEP_DY = 2
DISTORTION_AMPLITUDE = 5.0
DISTORTION_FREQUENCY = 0.17


@njit(cache=True, nogil=True)
def _extrusion_njit(
    canvas: np.ndarray,
    base_x: int,
    base_y: int,
    stamp: np.ndarray,
    cell_index: int,
) -> None:
    canvas_h = canvas.shape[0]
    canvas_w = canvas.shape[1]
    stamp_h = stamp.shape[0]
    stamp_w = stamp.shape[1]
    for e in range(EXTRUDE_STEPS):
        off_x = base_x + e * STEP_DX
        off_y = base_y + e * STEP_DY
        dark = 1.0 - float(e) / float(EXTRUDE_STEPS + 1)
        for py in range(stamp_h):
            dist_y = round_half_away(
                DISTORTION_AMPLITUDE * math.cos(float(py + cell_index) * DISTORTION_FREQUENCY)
            )
            y = off_y + py + dist_y
            if y < 0 or y >= canvas_h:
                continue
            for px in range(stamp_w):
                dist_x = round_half_away(
                    DISTORTION_AMPLITUDE * math.sin(float(px + cell_index) * DISTORTION_FREQUENCY)
                )
                x = off_x + px + dist_x
                if x < 0 or x >= canvas_w:
                    continue
                for c in range(3):
                    v = float(stamp[py, px, c]) * dark
                    canvas[y, x, c] = int(min(v, 255.0))
                canvas[y, x, 3] = stamp[py, px, 3]


@effect
def extrusion(ctx: DrawContext) -> None:
    """8 段の押し出しを描く。

    段 e (0..7) のオフセットは (5e, 2e) に、画素ごとの正弦歪み
    ``(5 sin((px+i)·0.17), 5 cos((py+i)·0.17))`` を加えたもの。
    RGB は ``1 - e/9`` 倍に暗くする。
    """
    _extrusion_njit(
        ctx.canvas,
        int(ctx.base_x),
        int(ctx.base_y),
        ctx.text_stamp,
        int(ctx.cell_index),
    )


__all__ = ["extrusion"]
