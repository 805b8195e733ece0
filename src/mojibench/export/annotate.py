"""
どこで: `src/mojibench/export/annotate.py`。
何を: 結果画像に半透明パネルを重ね、スコアとホスト情報を書き込む。
なぜ: 出力 PNG 単体で「どのマシンで何点だったか」が読めるようにするため。
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from PIL import Image, ImageDraw

from mojibench.telemetry import SystemSnapshot
from mojibench.text.stamp import FontLike, load_font

PANEL_RGBA = (255, 255, 255, 128)
TEXT_RGBA = (0, 0, 0, 230)
PANEL_INSET_DIVISOR = 10
COUNT_SIZE_RATIO = 0.2
SPEC_SIZE_RATIO = 0.05
INNER_MARGIN_RATIO = 0.05
LINE_GAP_PX = 24
ELLIPSIS = "..."


@dataclass(frozen=True, slots=True)
class PanelGeometry:
    """画像内の注釈パネル配置（ピクセル）。"""

    x: int
    y: int
    width: int
    height: int

    @classmethod
    def for_image(cls, width: int, height: int) -> "PanelGeometry":
        """各辺を寸法の 10% ずつ内側へ寄せたパネルを返す。"""
        mx = int(width) // PANEL_INSET_DIVISOR
        my = int(height) // PANEL_INSET_DIVISOR
        return cls(x=mx, y=my, width=int(width) - 2 * mx, height=int(height) - 2 * my)


def spec_lines(snapshot: SystemSnapshot, duration_s: float) -> list[str]:
    """パネル下段に並べる行（ホスト情報 + 描画時間）を返す。"""
    return [*snapshot.lines(), f"Render time: {float(duration_s):.3f} s"]


def _text_width(face: FontLike, text: str) -> int:
    left, _top, right, _bottom = face.getbbox(text)
    return int(right) - int(left)


def fit_lines(lines: Sequence[str], max_lines: int) -> list[str]:
    """max_lines に収まらない行を切り捨て、末尾に省略記号を付ける。"""
    n = max(0, int(max_lines))
    if len(lines) <= n:
        return list(lines)
    return [*lines[:n], ELLIPSIS]


def annotate_image(
    image: Image.Image,
    count: int,
    duration_s: float,
    snapshot: SystemSnapshot,
    *,
    font: str | Path | None = None,
) -> Image.Image:
    """スコアとホスト情報を書き込んだ新しい RGBA 画像を返す。

    Parameters
    ----------
    image : PIL.Image.Image
        リフロー済みの結果画像。変更されない。
    count : int
        スコア（セル数 N）。パネル上部中央に大きく描く。
    duration_s : float
        最終描画の所要時間 [s]。
    snapshot : SystemSnapshot
        ホスト情報。
    font : str or Path or None, optional
        注釈に使うフォント。None なら Pillow 同梱フォント。

    Notes
    -----
    スコアの文字サイズはパネル高さの 20%、情報行は 5%、行送りは文字サイズ + 24px。
    パネルに入りきらない行は ``...`` で打ち切る。
    """
    base = image.convert("RGBA")
    panel = PanelGeometry.for_image(base.width, base.height)
    if panel.width <= 0 or panel.height <= 0:
        return base

    layer = Image.new("RGBA", base.size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(layer)
    draw.rectangle(
        (panel.x, panel.y, panel.x + panel.width - 1, panel.y + panel.height - 1),
        fill=PANEL_RGBA,
    )

    count_size = max(1.0, panel.height * COUNT_SIZE_RATIO)
    spec_size = max(1.0, panel.height * SPEC_SIZE_RATIO)
    count_face = load_font(font, count_size)
    spec_face = load_font(font, spec_size)

    count_text = str(int(count))
    count_top = int(panel.width * INNER_MARGIN_RATIO)
    count_x = panel.x + max(0, panel.width - _text_width(count_face, count_text)) // 2
    count_y = panel.y + count_top
    draw.text((count_x, count_y), count_text, fill=TEXT_RGBA, font=count_face)

    lines = spec_lines(snapshot, duration_s)
    inner_margin = int(panel.width * INNER_MARGIN_RATIO)
    line_spacing = int(spec_size) + LINE_GAP_PX
    max_lines = int(math.floor(panel.height / line_spacing))

    remaining = max(0, panel.height - count_top - int(count_size) - inner_margin)
    padding = max(0, remaining - len(lines) * int(spec_size)) // 2
    start_y = panel.y + count_top + int(count_size) + inner_margin + padding
    for i, line in enumerate(fit_lines(lines, max_lines)):
        draw.text(
            (panel.x + inner_margin, start_y + i * line_spacing),
            line,
            fill=TEXT_RGBA,
            font=spec_face,
        )

    return Image.alpha_composite(base, layer)


__all__ = ["PanelGeometry", "annotate_image", "fit_lines", "spec_lines"]
