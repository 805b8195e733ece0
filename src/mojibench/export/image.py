# どこで: `src/mojibench/export/image.py`。
# 何を: 結果画像を PNG として保存する。

from __future__ import annotations

import logging
from pathlib import Path

from PIL import Image

logger = logging.getLogger(__name__)


def save_png(image: Image.Image, path: str | Path) -> Path:
    """image を PNG で保存し、保存先パスを返す。

    Notes
    -----
    親ディレクトリが無ければ作成する。拡張子が ``.png`` 以外でも PNG 形式で書き出す。
    """
    out = Path(path).expanduser()
    out.parent.mkdir(parents=True, exist_ok=True)
    image.save(out, format="PNG")
    logger.info("PNG を保存しました: %s (%dx%d)", out, image.width, image.height)
    return out


__all__ = ["save_png"]
