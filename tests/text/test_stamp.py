"""text.stamp のスタンプ生成（Pillow ラスタライズ + 虹色塗り）のテスト。"""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest

from mojibench.core.color import hsv_to_rgb
from mojibench.text.stamp import generate_stamp, rainbow_fill


def test_rainbow_fill_blends_by_coverage() -> None:
    mask = np.array([[255, 0, 128, 255]], dtype=np.uint8)

    pixels = rainbow_fill(mask)

    assert pixels.shape == (1, 4, 4)
    assert np.all(pixels[:, :, 3] == 255)
    assert pixels[0, 0, :3].tolist() == [255, 0, 0]
    assert pixels[0, 1, :3].tolist() == [255, 255, 255]
    r, g, b = hsv_to_rgb(2 / 4, 1.0, 1.0)
    v = 128 / 255
    expected = [int(np.floor(c * v + 255 * (1 - v) + 0.5)) for c in (r, g, b)]
    assert pixels[0, 2, :3].tolist() == expected
    assert pixels[0, 3, :3].tolist() == list(hsv_to_rgb(3 / 4, 1.0, 1.0))


def test_generate_stamp_default_font_has_margin_and_ink() -> None:
    stamp = generate_stamp("nexryai", 3, 24)

    assert stamp.width > 6
    assert stamp.height > 6
    assert np.all(stamp.pixels[:, :, 3] == 255)
    assert np.all(stamp.pixels[:3] == 255)
    assert np.all(stamp.pixels[:, :3] == 255)
    assert np.any(stamp.pixels[:, :, :3] != 255)


def test_generate_stamp_grows_with_font_size() -> None:
    small = generate_stamp("A", 0, 16)
    large = generate_stamp("A", 0, 64)
    assert large.height > small.height


def test_empty_text_gives_margin_only_white_stamp() -> None:
    stamp = generate_stamp("", 2, 24)
    assert (stamp.width, stamp.height) == (4, 4)
    assert np.all(stamp.pixels == 255)


def test_invalid_arguments_raise(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        generate_stamp("a", -1, 24)
    with pytest.raises(ValueError):
        generate_stamp("a", 1, 0)
    with pytest.raises(FileNotFoundError):
        generate_stamp("a", 1, 24, font=tmp_path / "missing.ttf")
