# どこで: `src/mojibench/text/stamp.py`。
# 何を: 文字列を虹色グラデーションの RGBA スタンプへラスタライズする。
# なぜ: 全セルが共有する描画素材を、フォントファイルの有無に関わらず Pillow だけで用意するため。

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from mojibench.core.color import hsv_to_rgb
from mojibench.core.raster import WHITE_RGBA, Stamp

logger = logging.getLogger(__name__)

FontLike = ImageFont.FreeTypeFont | ImageFont.ImageFont


def load_font(font: str | Path | None, font_size: float) -> FontLike:
    """フォントパス（None なら Pillow 同梱の既定フォント）を font_size でロードする。"""

    size = float(font_size)
    if not size > 0:
        raise ValueError(f"font_size は正の値である必要がある: got={font_size!r}")

    if font is None:
        loaded = ImageFont.load_default(size=size)
        if not isinstance(loaded, ImageFont.FreeTypeFont):
            logger.warning("FreeType が使えないため固定サイズのビットマップフォントで代用します")
        return loaded

    path = Path(str(font)).expanduser()
    if not path.is_file():
        raise FileNotFoundError(f"フォントファイルが見つかりません: {path}")
    return ImageFont.truetype(str(path), size=size)


def _column_rainbow(width: int) -> np.ndarray:
    """列 x ごとの HSV(x / width, 1, 1) を (width, 3) float64 で返す。"""
    out = np.empty((width, 3), dtype=np.float64)
    for x in range(width):
        out[x] = hsv_to_rgb(float(x) / float(width), 1.0, 1.0)
    return out


def rainbow_fill(coverage: np.ndarray) -> np.ndarray:
    """グリフ被覆率マスクから虹色スタンプの画素配列を作る。

    Parameters
    ----------
    coverage : np.ndarray
        uint8 型 shape (H, W) の被覆率（0..255）。

    Returns
    -------
    np.ndarray
        uint8 型 shape (H, W, 4)。各画素は ``c * v + 255 * (1 - v)`` の四捨五入、アルファは 255。
    """
    mask = np.asarray(coverage, dtype=np.uint8)
    h, w = mask.shape
    pixels = np.empty((h, w, 4), dtype=np.uint8)
    pixels[...] = WHITE_RGBA
    if h == 0 or w == 0:
        return pixels

    v = mask.astype(np.float64)[:, :, None] / 255.0
    rainbow = _column_rainbow(w)[None, :, :]
    blended = rainbow * v + 255.0 * (1.0 - v)
    # 値は非負なので floor(x + 0.5) は四捨五入（0.5 は切り上げ）と一致する。
    pixels[:, :, :3] = np.clip(np.floor(blended + 0.5), 0.0, 255.0).astype(np.uint8)
    return pixels


def generate_stamp(
    text: str,
    margin: int,
    font_size: float,
    *,
    font: str | Path | None = None,
) -> Stamp:
    """text を描画し、タイトなグリフ外接矩形 + margin のスタンプを返す。

    Parameters
    ----------
    text : str
        描画する文字列。空文字列なら 2*margin 四方の白いスタンプになる。
    margin : int
        外接矩形の四辺に足す余白 [px]。
    font_size : float
        フォントサイズ [px]。
    font : str or Path or None, optional
        TrueType/OpenType フォントのパス。None なら Pillow 同梱フォント。

    Returns
    -------
    Stamp
        背景は不透明な白。
    """
    m = int(margin)
    if m < 0:
        raise ValueError(f"margin は 0 以上である必要がある: got={margin!r}")
    face = load_font(font, font_size)

    s = str(text)
    left, top, right, bottom = face.getbbox(s) if s else (0, 0, 0, 0)
    text_w = max(0, int(right) - int(left))
    text_h = max(0, int(bottom) - int(top))
    stamp_w = text_w + 2 * m
    stamp_h = text_h + 2 * m

    mask = Image.new("L", (stamp_w, stamp_h), 0)
    if s and text_w > 0 and text_h > 0:
        ImageDraw.Draw(mask).text((m - int(left), m - int(top)), s, fill=255, font=face)

    return Stamp(pixels=rainbow_fill(np.asarray(mask, dtype=np.uint8)))


__all__ = ["generate_stamp", "load_font", "rainbow_fill"]
