"""surreal effect のずらし・青みに関するテスト。"""

from __future__ import annotations

import numpy as np

from mojibench.core.context import DrawContext
from mojibench.core.effects.surreal import SHIFT_X, surreal


def _run(stamp: np.ndarray, canvas: np.ndarray, *, cell_index: int = 0) -> np.ndarray:
    surreal(
        DrawContext(
            canvas=canvas,
            base_x=0,
            base_y=0,
            text_stamp=stamp,
            cell_index=cell_index,
            stamp_w=int(stamp.shape[1]),
            stamp_h=int(stamp.shape[0]),
        )
    )
    return canvas


def test_surreal_shifts_right_and_tints_blue_with_saturation() -> None:
    stamp = np.empty((4, 10, 4), dtype=np.uint8)
    stamp[...] = (5, 100, 250, 255)

    out = _run(stamp, np.zeros_like(stamp))

    written = np.argwhere(out[:, :, 3] != 0).tolist()
    assert written == [[0, SHIFT_X]]
    assert out[0, SHIFT_X].tolist() == [0, 90, 255, 255]


def test_surreal_selects_pixels_by_cell_index() -> None:
    stamp = np.empty((4, 10, 4), dtype=np.uint8)
    stamp[...] = (50, 50, 50, 255)

    out = _run(stamp, np.zeros_like(stamp), cell_index=100)

    # (px + py + 100) % 101 == 0 -> px + py == 1
    written = sorted(map(tuple, np.argwhere(out[:, :, 3] != 0).tolist()))
    assert written == [(0, 1 + SHIFT_X), (1, SHIFT_X)]
    assert out[1, SHIFT_X].tolist() == [40, 40, 60, 255]


def test_surreal_skips_destination_past_right_edge() -> None:
    stamp = np.empty((1, 3, 4), dtype=np.uint8)
    stamp[...] = (50, 50, 50, 255)

    out = _run(stamp, np.zeros_like(stamp))

    assert not np.any(out)
