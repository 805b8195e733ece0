"""全 effect が任意のスタンプ寸法・セル番号で範囲外書き込みをしないことのテスト。"""

from __future__ import annotations

import numpy as np
import pytest

from mojibench.core.context import DrawContext
from mojibench.core.pipeline import DEFAULT_EFFECT_ORDER, default_pipeline
from mojibench.core.effect_registry import effect_registry
from mojibench.core.raster import WHITE_RGBA, blank_canvas

PAD = 16
SENTINEL = 77


def _padded_canvas(w: int, h: int) -> tuple[np.ndarray, np.ndarray]:
    # numba は境界検査をしないので、はみ出した書き込みは周囲の番兵領域に残る。
    buf = np.full((h + 2 * PAD, w + 2 * PAD, 4), SENTINEL, dtype=np.uint8)
    canvas = buf[PAD : PAD + h, PAD : PAD + w]
    canvas[...] = WHITE_RGBA
    return buf, canvas


def _border_untouched(buf: np.ndarray, w: int, h: int) -> bool:
    mask = np.ones(buf.shape[:2], dtype=bool)
    mask[PAD : PAD + h, PAD : PAD + w] = False
    return bool(np.all(buf[mask] == SENTINEL))


@pytest.mark.parametrize("size", [(1, 1), (2, 3), (7, 1), (1, 13), (13, 101), (31, 17), (97, 5)])
@pytest.mark.parametrize("name", DEFAULT_EFFECT_ORDER)
def test_effect_stays_inside_canvas(name: str, size: tuple[int, int]) -> None:
    w, h = size
    rng = np.random.default_rng(w * 1000 + h)
    stamp = rng.integers(0, 256, size=(h, w, 4), dtype=np.uint8)
    stamp.setflags(write=False)
    func = effect_registry.get(name)

    for cell_index in (0, 1, 6, 96, 100, 101, 1234):
        buf, canvas = _padded_canvas(w, h)
        func(
            DrawContext(
                canvas=canvas,
                base_x=0,
                base_y=0,
                text_stamp=stamp,
                cell_index=cell_index,
                stamp_w=w,
                stamp_h=h,
            ),
            (),
        )
        assert _border_untouched(buf, w, h), (name, size, cell_index)


def test_full_pipeline_stays_inside_canvas() -> None:
    rng = np.random.default_rng(7)
    stamp = rng.integers(0, 256, size=(9, 14, 4), dtype=np.uint8)
    pipeline = default_pipeline()

    for cell_index in range(0, 240, 17):
        buf, canvas = _padded_canvas(14, 9)
        pipeline.apply(
            DrawContext(
                canvas=canvas,
                base_x=0,
                base_y=0,
                text_stamp=stamp,
                cell_index=cell_index,
                stamp_w=14,
                stamp_h=9,
            )
        )
        assert _border_untouched(buf, 14, 9), cell_index


def test_padded_canvas_detects_stray_writes() -> None:
    buf, canvas = _padded_canvas(4, 3)
    assert _border_untouched(buf, 4, 3)
    buf[PAD - 1, PAD] = 0
    assert not _border_untouched(buf, 4, 3)


def test_pipeline_is_deterministic_per_cell_index() -> None:
    rng = np.random.default_rng(0)
    stamp = rng.integers(0, 256, size=(11, 23, 4), dtype=np.uint8)
    pipeline = default_pipeline()

    def _render(i: int) -> np.ndarray:
        canvas = blank_canvas(23, 11)
        pipeline.apply(
            DrawContext(
                canvas=canvas,
                base_x=0,
                base_y=0,
                text_stamp=stamp,
                cell_index=i,
                stamp_w=23,
                stamp_h=11,
            )
        )
        return canvas

    for i in (0, 3, 42):
        assert np.array_equal(_render(i), _render(i))
    assert not np.array_equal(_render(0), _render(3))
