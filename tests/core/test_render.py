"""core.render の並列ストリップ描画のテスト。"""

from __future__ import annotations

import numpy as np
import pytest

from mojibench.core.pipeline import default_pipeline
from mojibench.core.raster import Stamp
from mojibench.core.render import render_cell, render_strip, resolve_workers
from mojibench.text.stamp import rainbow_fill


@pytest.fixture(scope="module")
def stamp() -> Stamp:
    mask = np.zeros((9, 13), dtype=np.uint8)
    mask[2:7, 1:12:2] = 255
    return Stamp(pixels=rainbow_fill(mask))


@pytest.fixture(scope="module")
def pipeline():
    return default_pipeline()


@pytest.mark.parametrize("count", [0, 1, 5, 17])
def test_strip_dimensions(stamp: Stamp, pipeline, count: int) -> None:
    duration, strip = render_strip(count, stamp, pipeline, workers=2)

    assert duration >= 0.0
    assert strip.count == count
    assert strip.width == count * stamp.width
    assert strip.height == stamp.height
    assert not strip.pixels.flags.writeable


def test_strip_cells_match_isolated_renders(stamp: Stamp, pipeline) -> None:
    _duration, strip = render_strip(6, stamp, pipeline, workers=3)

    for i in range(6):
        assert np.array_equal(strip.cell(i), render_cell(i, stamp, pipeline))


def test_strip_is_independent_of_worker_count(stamp: Stamp, pipeline) -> None:
    _d1, serial = render_strip(9, stamp, pipeline, workers=1)
    _d2, parallel = render_strip(9, stamp, pipeline, workers=4)

    assert np.array_equal(serial.pixels, parallel.pixels)


def test_render_does_not_mutate_stamp(stamp: Stamp, pipeline) -> None:
    before = stamp.pixels.copy()
    render_strip(3, stamp, pipeline, workers=2)
    assert np.array_equal(stamp.pixels, before)


def test_negative_count_raises(stamp: Stamp, pipeline) -> None:
    with pytest.raises(ValueError):
        render_strip(-1, stamp, pipeline)


def test_resolve_workers() -> None:
    assert resolve_workers(None) >= 1
    assert resolve_workers(3) == 3
    with pytest.raises(ValueError):
        resolve_workers(0)
