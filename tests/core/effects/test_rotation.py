"""rotation effect の回転・縦圧縮・赤ブーストに関するテスト。"""

from __future__ import annotations

import math

import numpy as np

from mojibench.core.context import DrawContext
from mojibench.core.effects.rotation import rotation, rotation_angle
from mojibench.core.raster import blank_canvas


def _ctx(stamp: np.ndarray, *, canvas: np.ndarray, cell_index: int = 0) -> DrawContext:
    return DrawContext(
        canvas=canvas,
        base_x=0,
        base_y=0,
        text_stamp=stamp,
        cell_index=cell_index,
        stamp_w=int(stamp.shape[1]),
        stamp_h=int(stamp.shape[0]),
    )


def test_rotation_angle_follows_cell_index() -> None:
    assert rotation_angle(0) == 0.0
    assert math.isclose(rotation_angle(1), 0.3 * math.sin(0.7))
    assert all(abs(rotation_angle(i)) <= 0.3 for i in range(50))


def test_rotation_zero_angle_squashes_rows_and_boosts_red() -> None:
    stamp = np.zeros((4, 4, 4), dtype=np.uint8)
    for py in range(4):
        stamp[py, :] = (240, 10 * py, 100 + py, 255)
    canvas = blank_canvas(4, 4)

    rotation(_ctx(stamp, canvas=canvas, cell_index=0))

    # cy=2: 行 0,1 -> 1 (後勝ちで行 1)、行 2 -> 2、行 3 -> 3。行 0 は未書き込み。
    assert canvas[0].tolist() == [[255, 255, 255, 255]] * 4
    assert canvas[1].tolist() == [[255, 10, 101, 255]] * 4
    assert canvas[2].tolist() == [[255, 20, 102, 255]] * 4
    assert canvas[3].tolist() == [[255, 30, 103, 255]] * 4


def test_rotation_red_boost_adds_thirty_below_saturation() -> None:
    stamp = np.array([[(100, 0, 0, 255)]], dtype=np.uint8)
    canvas = blank_canvas(1, 1)

    rotation(_ctx(stamp, canvas=canvas))

    # 1x1: cx=cy=0.5、(0,0) は自分自身へ写る。
    assert canvas[0, 0].tolist() == [130, 0, 0, 255]


def test_rotation_nonzero_angle_moves_corner_pixels() -> None:
    stamp = np.zeros((9, 21, 4), dtype=np.uint8)
    stamp[...] = (0, 0, 0, 255)
    canvas = blank_canvas(21, 9)

    rotation(_ctx(stamp, canvas=canvas, cell_index=2))

    # 回転で一部のスタンプ画素はキャンバス外へ出るため、白のまま残る画素がある。
    assert canvas.shape == (9, 21, 4)
    assert np.any(np.all(canvas == 255, axis=2))
    assert np.any(canvas[:, :, 0] == 30)
